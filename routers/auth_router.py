"""auth_router: 관리자 인증 라우터 모듈.

로그인, 2단계 인증 코드 확인, 현재 관리자 조회 엔드포인트를 제공합니다.
"""

from fastapi import APIRouter, Depends, Request, status

from controllers import auth_controller
from dependencies.auth import AdminContext, require_admin
from schemas.auth_schemas import AdminLoginRequest, VerifyCodeRequest

auth_router = APIRouter(prefix="/v1/admin/auth", tags=["auth"])


@auth_router.post("/session", status_code=status.HTTP_200_OK)
async def login(credentials: AdminLoginRequest, request: Request) -> dict:
    """아이디와 비밀번호로 로그인합니다.

    Returns:
        access_token과 관리자 정보, 또는 2단계 인증이 필요하다는 응답.
    """
    return await auth_controller.login(credentials, request)


@auth_router.post("/verify", status_code=status.HTTP_200_OK)
async def verify_code(payload: VerifyCodeRequest, request: Request) -> dict:
    """2단계 인증 코드를 확인합니다."""
    return await auth_controller.verify_code(payload, request)


@auth_router.get("/me", status_code=status.HTTP_200_OK)
async def get_me(
    request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    """현재 로그인 중인 관리자 정보를 조회합니다."""
    return await auth_controller.get_me(admin, request)
