"""models: 테이블 조회 및 저장 프로시저 호출 패키지.

서비스 계층은 모듈 단위로 import 합니다 (예: ``from models import user_models``).
목록 조회 함수는 모두 settings.LIST_FETCH_LIMIT로 제한되며 최신순으로 정렬됩니다.
"""

from . import (
    admin_models,
    change_log_models,
    corporate_document_models,
    damage_report_models,
    dashboard_models,
    listing_models,
    message_models,
    notification_models,
    report_models,
    review_models,
    share_request_models,
    user_models,
    verification_models,
)

__all__ = [
    "admin_models",
    "change_log_models",
    "corporate_document_models",
    "damage_report_models",
    "dashboard_models",
    "listing_models",
    "message_models",
    "notification_models",
    "report_models",
    "review_models",
    "share_request_models",
    "user_models",
    "verification_models",
]
