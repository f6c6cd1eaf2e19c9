"""view_registry: 실시간 경로에서 사용할 목록 화면 정의 모음."""

from services.admin_service import ADMINS_VIEW
from services.damage_report_service import DAMAGE_REPORTS_VIEW
from services.document_service import DOCUMENTS_VIEW
from services.listing_service import LISTINGS_VIEW, PURCHASE_REQUESTS_VIEW, QUOTA_USERS_VIEW
from services.message_service import MESSAGES_VIEW
from services.report_service import REPORTS_VIEW
from services.review_service import REVIEWS_VIEW
from services.share_request_service import SHARE_REQUESTS_VIEW
from services.user_service import BLOCKED_USERS_VIEW, CORPORATE_VIEW, USERS_VIEW
from services.verification_service import (
    EMAIL_VERIFICATIONS_VIEW,
    PHONE_VERIFICATIONS_VIEW,
    TWO_FACTOR_VIEW,
)
from services.views import ViewDefinition

VIEWS: dict[str, ViewDefinition] = {
    view.name: view
    for view in (
        REPORTS_VIEW,
        USERS_VIEW,
        BLOCKED_USERS_VIEW,
        CORPORATE_VIEW,
        DOCUMENTS_VIEW,
        LISTINGS_VIEW,
        QUOTA_USERS_VIEW,
        PURCHASE_REQUESTS_VIEW,
        REVIEWS_VIEW,
        PHONE_VERIFICATIONS_VIEW,
        EMAIL_VERIFICATIONS_VIEW,
        TWO_FACTOR_VIEW,
        MESSAGES_VIEW,
        SHARE_REQUESTS_VIEW,
        DAMAGE_REPORTS_VIEW,
        ADMINS_VIEW,
    )
}
