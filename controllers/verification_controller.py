"""verification_controller: 전화번호/이메일 인증 및 관리자 2단계 인증 관리 컨트롤러 모듈."""

from fastapi import Request

from controllers.view_controller import list_view
from dependencies.request_context import get_request_timestamp
from schemas.auth_schemas import TwoFactorToggleRequest
from schemas.common import create_response
from services.verification_service import (
    EMAIL_VERIFICATIONS_VIEW,
    PHONE_VERIFICATIONS_VIEW,
    TWO_FACTOR_VIEW,
    VerificationService,
)
from dependencies.auth import AdminContext


async def get_phone_verifications(request: Request, search: str | None) -> dict:
    return await list_view(PHONE_VERIFICATIONS_VIEW, request, search=search)


async def get_email_verifications(request: Request, search: str | None) -> dict:
    return await list_view(EMAIL_VERIFICATIONS_VIEW, request, search=search)


async def get_two_factor(request: Request, search: str | None) -> dict:
    return await list_view(TWO_FACTOR_VIEW, request, search=search)


async def resend_phone_code(user_id: str, admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await VerificationService.resend_phone_code(
        user_id, admin.admin_id, timestamp
    )
    return create_response(
        "PHONE_CODE_SENT",
        "인증 코드가 다시 발송되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )


async def verify_phone(user_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await VerificationService.verify_phone_manually(user_id, timestamp)
    return create_response(
        "PHONE_VERIFIED",
        "전화번호가 인증 처리되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )


async def resend_email_verification(verification_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await VerificationService.resend_email_verification(
        verification_id, timestamp
    )
    return create_response(
        "VERIFICATION_EMAIL_SENT",
        "인증 메일이 다시 발송되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )


async def toggle_two_factor(
    admin_id: str, payload: TwoFactorToggleRequest, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await VerificationService.toggle_two_factor(
        admin_id, payload.enabled, timestamp
    )
    return create_response(
        "TWO_FACTOR_UPDATED",
        "2단계 인증 설정이 변경되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )


async def resend_admin_code(admin_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await VerificationService.resend_admin_code(admin_id, timestamp)
    return create_response(
        "ADMIN_CODE_SENT",
        "인증 코드가 다시 발송되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )
