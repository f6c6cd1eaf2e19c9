"""routers: FastAPI 라우터 패키지.

관리자 인증, 대시보드, 신고, 사용자, 매물, 콘텐츠 검수, 인증 관리,
관리자 계정, 알림, 실시간 화면 API 엔드포인트를 정의합니다.
"""

from .auth_router import auth_router
from .dashboard_router import dashboard_router
from .report_router import report_router
from .user_router import user_router
from .listing_router import listing_router
from .moderation_router import moderation_router
from .verification_router import verification_router
from .admin_router import admin_router
from .live_router import live_router
from . import notification_router

__all__ = [
    "auth_router",
    "dashboard_router",
    "report_router",
    "user_router",
    "listing_router",
    "moderation_router",
    "verification_router",
    "admin_router",
    "live_router",
    "notification_router",
]
