"""controllers: 요청 처리 및 응답 envelope 생성 패키지."""

from . import admin_controller
from . import auth_controller
from . import dashboard_controller
from . import listing_controller
from . import live_controller
from . import moderation_controller
from . import notification_controller
from . import report_controller
from . import user_controller
from . import verification_controller
from . import view_controller

__all__ = [
    "admin_controller",
    "auth_controller",
    "dashboard_controller",
    "listing_controller",
    "live_controller",
    "moderation_controller",
    "notification_controller",
    "report_controller",
    "user_controller",
    "verification_controller",
    "view_controller",
]
