"""verification_router: 인증 관리 라우터 모듈."""

from fastapi import APIRouter, Depends, Query, Request, status

from controllers import verification_controller
from dependencies.auth import AdminContext, require_admin
from schemas.auth_schemas import TwoFactorToggleRequest

verification_router = APIRouter(prefix="/v1/admin/verifications", tags=["verifications"])


@verification_router.get("/phone", status_code=status.HTTP_200_OK)
async def get_phone_verifications(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """전화번호 인증 코드 발송 현황을 조회합니다."""
    return await verification_controller.get_phone_verifications(request, search)


@verification_router.post("/phone/{user_id}/resend", status_code=status.HTTP_200_OK)
async def resend_phone_code(
    user_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await verification_controller.resend_phone_code(user_id, admin, request)


@verification_router.post("/phone/{user_id}/verify", status_code=status.HTTP_200_OK)
async def verify_phone(
    user_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    """전화번호를 수동으로 인증 처리합니다."""
    return await verification_controller.verify_phone(user_id, request)


@verification_router.get("/email", status_code=status.HTTP_200_OK)
async def get_email_verifications(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """이메일 인증 대기 목록을 조회합니다."""
    return await verification_controller.get_email_verifications(request, search)


@verification_router.post(
    "/email/{verification_id}/resend", status_code=status.HTTP_200_OK
)
async def resend_email_verification(
    verification_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await verification_controller.resend_email_verification(verification_id, request)


@verification_router.get("/two-factor", status_code=status.HTTP_200_OK)
async def get_two_factor(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """관리자별 2단계 인증 현황을 조회합니다."""
    return await verification_controller.get_two_factor(request, search)


@verification_router.patch("/two-factor/{admin_id}", status_code=status.HTTP_200_OK)
async def toggle_two_factor(
    admin_id: str,
    payload: TwoFactorToggleRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    return await verification_controller.toggle_two_factor(admin_id, payload, request)


@verification_router.post(
    "/two-factor/{admin_id}/resend", status_code=status.HTTP_200_OK
)
async def resend_admin_code(
    admin_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    """관리자 2단계 인증 코드를 다시 보냅니다."""
    return await verification_controller.resend_admin_code(admin_id, request)
