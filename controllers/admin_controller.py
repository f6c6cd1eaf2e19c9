"""admin_controller: 관리자 계정 관리 컨트롤러 모듈."""

from fastapi import Request

from controllers.view_controller import list_view
from dependencies.auth import AdminContext
from dependencies.request_context import get_request_timestamp
from schemas.auth_schemas import ChangePasswordRequest, CreateAdminRequest
from schemas.common import create_response
from services.admin_service import ADMINS_VIEW, AdminService


async def get_admins(request: Request, search: str | None) -> dict:
    return await list_view(ADMINS_VIEW, request, search=search)


async def create_admin(
    payload: CreateAdminRequest, admin: AdminContext, request: Request
) -> dict:
    """관리자를 생성합니다."""
    timestamp = get_request_timestamp(request)
    created, notifications = await AdminService.create_admin(
        payload.username,
        payload.email,
        payload.full_name,
        payload.password,
        admin.admin_id,
        timestamp,
    )
    return create_response(
        "ADMIN_CREATED",
        "관리자가 생성되었습니다.",
        data={"admin": created},
        timestamp=timestamp,
        notifications=notifications,
    )


async def delete_admin(admin_id: str, admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await AdminService.delete_admin(admin_id, admin.admin_id, timestamp)
    return create_response(
        "ADMIN_DELETED",
        "관리자가 삭제되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )


async def change_password(
    payload: ChangePasswordRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await AdminService.change_password(
        admin.admin_id, payload.current_password, payload.new_password, timestamp
    )
    return create_response(
        "PASSWORD_CHANGED",
        "비밀번호가 변경되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )
