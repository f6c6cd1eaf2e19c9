"""notification_controller: 사용자 알림 발송 컨트롤러."""

from fastapi import Request

from dependencies.auth import AdminContext
from dependencies.request_context import get_request_timestamp
from models import notification_models
from schemas.common import create_response
from schemas.moderation_schemas import NotificationRequest
from services.dispatcher import dispatch
from services.notification_service import NotificationService, UserNotFound
from utils.exceptions import bad_request_error, not_found_error
from utils.formatters import format_row


async def send_notification(
    payload: NotificationRequest, admin: AdminContext, request: Request
) -> dict:
    """사용자에게 알림 메일을 보냅니다.

    Raises:
        HTTPException: 400 필수 항목 누락, 404 사용자 없음, 502 발송 실패.
    """
    timestamp = get_request_timestamp(request)
    if not payload.user_id or not payload.subject or not payload.message:
        raise bad_request_error(
            "notification_fields_required", timestamp, "받는 사람, 제목, 내용을 모두 입력해주세요."
        )

    try:
        _, notifications = await dispatch(
            "notification",
            payload.user_id,
            "notification_send",
            lambda: NotificationService.send_user_notification(
                payload.user_id, payload.subject, payload.message, admin_id=admin.admin_id
            ),
            timestamp=timestamp,
            success_message="알림이 발송되었습니다.",
            failure_message="알림을 발송하지 못했습니다.",
            passthrough=(UserNotFound,),
        )
    except UserNotFound:
        raise not_found_error("user", timestamp)

    return create_response(
        "NOTIFICATION_SENT",
        "알림이 발송되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )


async def get_notification_logs(user_id: str, request: Request) -> dict:
    """사용자의 알림 발송 이력을 조회합니다."""
    timestamp = get_request_timestamp(request)
    logs = await notification_models.get_user_notification_logs(user_id)
    return create_response(
        "NOTIFICATION_LOGS_LOADED",
        "알림 발송 이력을 조회했습니다.",
        data={"logs": [format_row(log) for log in logs]},
        timestamp=timestamp,
        notifications=[],
    )
