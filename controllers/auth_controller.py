"""auth_controller: 관리자 인증 컨트롤러 모듈.

아이디/비밀번호 로그인, 2단계 인증 코드 확인, 현재 관리자 조회 기능을 제공합니다.
"""

import asyncio
import logging

from fastapi import HTTPException, Request, status

from dependencies.auth import AdminContext
from dependencies.request_context import get_request_timestamp
from models import admin_models
from schemas.auth_schemas import AdminLoginRequest, VerifyCodeRequest
from schemas.common import create_response, serialize_admin
from services.two_factor_service import CODE_OK, TwoFactorService
from utils.exceptions import not_found_error, remote_call_error
from utils.jwt_utils import create_access_token
from utils.password import verify_password

logger = logging.getLogger(__name__)

# 타이밍 공격 방지: 존재하지 않는 관리자에 대해서도 bcrypt 비교를 수행하여 응답 시간 차이로
# 계정 존재 여부가 노출되지 않도록 함
_TIMING_ATTACK_DUMMY_HASH = (
    "$2b$12$EixZaYVK1fsbw1ZfbX3OXePaWxwKc.60VF.wdz.xGto8.H82o.f2y"
)

_AUTH_ERROR_MESSAGES = {
    "invalid_credentials": "아이디 또는 비밀번호가 올바르지 않습니다.",
    "account_disabled": "비활성화된 관리자 계정입니다.",
    "invalid_code": "인증 코드가 올바르지 않습니다.",
    "code_expired": "인증 코드가 만료되었습니다. 다시 로그인해주세요.",
    "too_many_attempts": "인증 시도 횟수를 초과했습니다. 다시 로그인해주세요.",
}


def _auth_error(error_code: str, timestamp: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": error_code,
            "timestamp": timestamp,
            "message": _AUTH_ERROR_MESSAGES[error_code],
        },
    )


async def _issue_token(admin: admin_models.AdminCredential, timestamp: str) -> dict:
    await admin_models.update_last_login(admin.id)
    return create_response(
        "LOGIN_SUCCESS",
        "로그인에 성공했습니다.",
        data={
            "access_token": create_access_token(admin.id),
            "admin": serialize_admin(admin),
        },
        timestamp=timestamp,
    )


async def login(credentials: AdminLoginRequest, request: Request) -> dict:
    """아이디와 비밀번호로 로그인합니다.

    2단계 인증이 켜져 있으면 인증 코드를 이메일로 보내고 verification_needed를 반환합니다.

    Raises:
        HTTPException: 401 자격 증명 오류/비활성 계정, 502 코드 발송 실패.
    """
    timestamp = get_request_timestamp(request)

    admin = await admin_models.get_admin_by_username(credentials.username)
    password_valid = await asyncio.to_thread(
        verify_password,
        credentials.password,
        admin.password_hash if admin else _TIMING_ATTACK_DUMMY_HASH,
    )

    if not admin or not password_valid:
        raise _auth_error("invalid_credentials", timestamp)
    if not admin.is_active:
        raise _auth_error("account_disabled", timestamp)

    if not admin.two_factor_enabled:
        return await _issue_token(admin, timestamp)

    try:
        await TwoFactorService.send_code(admin)
    except Exception:
        logger.exception(f"2단계 인증 코드 발송 실패: {admin.id}")
        raise remote_call_error(
            "two_factor_send", timestamp, "인증 코드를 발송하지 못했습니다."
        )

    return create_response(
        "VERIFICATION_NEEDED",
        "이메일로 발송된 인증 코드를 입력해주세요.",
        data={
            "verification_needed": True,
            "admin_id": admin.id,
            "email": admin.email,
        },
        timestamp=timestamp,
    )


async def verify_code(payload: VerifyCodeRequest, request: Request) -> dict:
    """2단계 인증 코드를 확인하고 Access Token을 발급합니다.

    Raises:
        HTTPException: 401 코드 오류/만료/시도 초과/비활성 계정.
    """
    timestamp = get_request_timestamp(request)

    admin = await admin_models.get_admin_by_id(payload.admin_id)
    if not admin:
        raise _auth_error("invalid_code", timestamp)
    if not admin.is_active:
        raise _auth_error("account_disabled", timestamp)

    result = await TwoFactorService.verify_code(admin.id, payload.code)
    if result != CODE_OK:
        raise _auth_error(result, timestamp)

    return await _issue_token(admin, timestamp)


async def get_me(admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)

    current = await admin_models.get_admin_by_id(admin.admin_id)
    if not current:
        raise not_found_error("admin", timestamp)

    return create_response(
        "AUTH_SUCCESS",
        "현재 로그인 중인 관리자입니다.",
        data={"admin": serialize_admin(current)},
        timestamp=timestamp,
    )
