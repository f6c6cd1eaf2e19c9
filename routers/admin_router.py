"""admin_router: 관리자 계정 관리 라우터 모듈."""

from fastapi import APIRouter, Depends, Query, Request, status

from controllers import admin_controller
from dependencies.auth import AdminContext, require_admin
from schemas.auth_schemas import ChangePasswordRequest, CreateAdminRequest

admin_router = APIRouter(prefix="/v1/admin/admins", tags=["admins"])


@admin_router.get("", status_code=status.HTTP_200_OK)
async def get_admins(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """관리자 목록을 조회합니다."""
    return await admin_controller.get_admins(request, search)


@admin_router.post("", status_code=status.HTTP_201_CREATED)
async def create_admin(
    payload: CreateAdminRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    return await admin_controller.create_admin(payload, admin, request)


@admin_router.put("/me/password", status_code=status.HTTP_200_OK)
async def change_password(
    payload: ChangePasswordRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """본인 비밀번호를 변경합니다."""
    return await admin_controller.change_password(payload, admin, request)


@admin_router.delete("/{admin_id}", status_code=status.HTTP_200_OK)
async def delete_admin(
    admin_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    """관리자를 삭제합니다 (본인 삭제 불가)."""
    return await admin_controller.delete_admin(admin_id, admin, request)
