"""verification_service: 전화번호/이메일 인증 및 관리자 2단계 인증 관리 서비스."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from core.config import settings
from models import admin_models, user_models, verification_models
from realtime.live_view import TableWatch
from services.dispatcher import dispatch
from services.notification_service import NotificationService, render_notification
from services.two_factor_service import TwoFactorService
from services.views import ViewDefinition, is_truncated
from utils.email import send_email
from utils.exceptions import bad_request_error, not_found_error
from utils.formatters import format_row, nest_prefixed
from utils.verification_code import generate_verification_code, hash_verification_code

logger = logging.getLogger(__name__)

PHONE_CODE_TTL_MINUTES = 10


def _serialize(row: dict[str, Any], prefix: str) -> dict[str, Any]:
    return format_row(nest_prefixed(row, prefix))


class VerificationService:
    """인증 관리 서비스."""

    # ============ 목록 ============

    @staticmethod
    async def list_phone_verifications() -> tuple[list[dict], bool]:
        rows = await verification_models.get_phone_verifications()
        items = []
        for row in rows:
            data = _serialize(row, "user")
            data["phone_verified"] = bool(data.get("phone_verified"))
            items.append(data)
        return items, is_truncated(rows)

    @staticmethod
    async def list_email_verifications() -> tuple[list[dict], bool]:
        rows = await verification_models.get_email_verifications()
        return [_serialize(r, "user") for r in rows], is_truncated(rows)

    @staticmethod
    async def list_two_factor() -> tuple[list[dict], bool]:
        """관리자 2단계 인증 현황 (관리자별 설정과 최근 발송 코드)."""
        admins = await admin_models.get_admins()
        codes = await verification_models.get_admin_verification_codes()
        latest: dict[str, dict] = {}
        for code in codes:
            latest.setdefault(code["admin_id"], code)

        items = []
        for admin in admins:
            data = format_row(admin)
            data["is_active"] = bool(data.get("is_active"))
            data["two_factor_enabled"] = bool(data.get("two_factor_enabled"))
            code = latest.get(admin["admin_id"])
            data["latest_code"] = (
                format_row(
                    {
                        "attempts": code["attempts"],
                        "expires_at": code["expires_at"],
                        "created_at": code["created_at"],
                    }
                )
                if code
                else None
            )
            items.append(data)
        return items, is_truncated(admins)

    # ============ 전화번호 ============

    @staticmethod
    async def resend_phone_code(user_id: str, admin_id: str, timestamp: str) -> list[dict]:
        """새 전화번호 인증 코드를 만들어 사용자에게 알림으로 보냅니다.

        Raises:
            HTTPException: 400 전화번호 없음, 404 사용자 없음, 409 처리 중, 502 발송 실패.
        """
        contact = await user_models.get_user_contact(user_id)
        if not contact:
            raise not_found_error("user", timestamp)
        if not contact.phone:
            raise bad_request_error(
                "phone_required", timestamp, "전화번호가 등록되지 않은 사용자입니다."
            )

        async def _resend() -> None:
            code = generate_verification_code()
            expires_at = datetime.now(timezone.utc) + timedelta(minutes=PHONE_CODE_TTL_MINUTES)
            await verification_models.replace_phone_code(
                user_id, contact.phone, hash_verification_code(code), expires_at.replace(tzinfo=None)
            )
            await NotificationService.send_user_notification(
                user_id,
                "전화번호 인증 코드",
                f"전화번호 인증 코드는 {code} 입니다. {PHONE_CODE_TTL_MINUTES}분 안에 입력해주세요.",
                admin_id=admin_id,
            )

        _, notifications = await dispatch(
            "phone_verification",
            user_id,
            "phone_code_resend",
            _resend,
            timestamp=timestamp,
            success_message="인증 코드가 다시 발송되었습니다.",
            failure_message="인증 코드를 발송하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def verify_phone_manually(user_id: str, timestamp: str) -> list[dict]:
        updated, notifications = await dispatch(
            "phone_verification",
            user_id,
            "phone_verify",
            lambda: user_models.mark_phone_verified(user_id),
            timestamp=timestamp,
            success_message="전화번호가 인증 처리되었습니다.",
            failure_message="전화번호를 인증 처리하지 못했습니다.",
        )
        if not updated:
            raise not_found_error("user", timestamp)
        return notifications

    # ============ 이메일 ============

    @staticmethod
    async def resend_email_verification(verification_id: str, timestamp: str) -> list[dict]:
        """대기 중인 이메일 인증 링크를 다시 보냅니다."""
        verification = await verification_models.get_email_verification(verification_id)
        if not verification:
            raise not_found_error("email_verification", timestamp)

        contact = await user_models.get_user_contact(verification["user_id"])
        link = f"{settings.FRONTEND_URL}/verify-email?token={verification['token']}"
        mail = render_notification(
            contact.full_name if contact else None,
            "이메일 인증 안내",
            f"아래 링크를 눌러 이메일 인증을 완료해주세요.\n{link}",
        )

        _, notifications = await dispatch(
            "email_verification",
            verification_id,
            "email_verification_resend",
            lambda: send_email(verification["email"], mail.subject, mail.text, html=mail.html),
            timestamp=timestamp,
            success_message="인증 메일이 다시 발송되었습니다.",
            failure_message="인증 메일을 발송하지 못했습니다.",
        )
        return notifications

    # ============ 관리자 2단계 인증 ============

    @staticmethod
    async def toggle_two_factor(admin_id: str, enabled: bool, timestamp: str) -> list[dict]:
        updated, notifications = await dispatch(
            "admin",
            admin_id,
            "two_factor_toggle",
            lambda: admin_models.set_two_factor(admin_id, enabled),
            timestamp=timestamp,
            success_message=(
                "2단계 인증이 활성화되었습니다." if enabled else "2단계 인증이 비활성화되었습니다."
            ),
            failure_message="2단계 인증 설정을 변경하지 못했습니다.",
        )
        if not updated:
            raise not_found_error("admin", timestamp)
        return notifications

    @staticmethod
    async def resend_admin_code(admin_id: str, timestamp: str) -> list[dict]:
        admin = await admin_models.get_admin_by_id(admin_id)
        if not admin:
            raise not_found_error("admin", timestamp)

        _, notifications = await dispatch(
            "admin",
            admin_id,
            "admin_code_resend",
            lambda: TwoFactorService.send_code(admin),
            timestamp=timestamp,
            success_message="인증 코드가 다시 발송되었습니다.",
            failure_message="인증 코드를 발송하지 못했습니다.",
        )
        return notifications


PHONE_VERIFICATIONS_VIEW = ViewDefinition(
    name="phone_verifications",
    loader=VerificationService.list_phone_verifications,
    search_fields=("phone", "user.full_name", "user.email"),
    watches=(TableWatch("verification_codes"),),
    error_message="전화번호 인증 목록을 불러오지 못했습니다.",
)

EMAIL_VERIFICATIONS_VIEW = ViewDefinition(
    name="email_verifications",
    loader=VerificationService.list_email_verifications,
    search_fields=("email", "user.full_name"),
    watches=(TableWatch("email_verifications"),),
    error_message="이메일 인증 목록을 불러오지 못했습니다.",
)

TWO_FACTOR_VIEW = ViewDefinition(
    name="two_factor",
    loader=VerificationService.list_two_factor,
    search_fields=("username", "email", "full_name"),
    watches=(TableWatch("admin_credentials"), TableWatch("admin_verification_codes")),
    error_message="2단계 인증 현황을 불러오지 못했습니다.",
)
