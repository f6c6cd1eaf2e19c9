"""notification_router: 사용자 알림 발송 API 라우터."""

from fastapi import APIRouter, Depends, Request, status

from controllers import notification_controller
from dependencies.auth import AdminContext, require_admin
from schemas.moderation_schemas import NotificationRequest

router = APIRouter(prefix="/v1/admin/notifications", tags=["notifications"])


@router.post("", status_code=status.HTTP_200_OK)
async def send_notification(
    payload: NotificationRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
):
    return await notification_controller.send_notification(payload, admin, request)


@router.get("/{user_id}/logs")
async def get_notification_logs(
    user_id: str,
    request: Request,
    admin: AdminContext = Depends(require_admin),
):
    return await notification_controller.get_notification_logs(user_id, request)
