"""two_factor_service: 관리자 2단계 인증 코드 발송 및 검증 서비스."""

import logging
from datetime import datetime, timedelta, timezone

from core.config import settings
from models import admin_models
from models.admin_models import AdminCredential
from services.notification_service import render_notification
from utils.email import send_email
from utils.verification_code import (
    generate_verification_code,
    hash_verification_code,
    verify_code_hash,
)

logger = logging.getLogger(__name__)

CODE_OK = "ok"
CODE_INVALID = "invalid_code"
CODE_EXPIRED = "code_expired"
CODE_TOO_MANY_ATTEMPTS = "too_many_attempts"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # DB DATETIME은 naive UTC로 저장됨
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TwoFactorService:
    """관리자 2단계 인증 서비스."""

    @staticmethod
    async def send_code(admin: AdminCredential) -> None:
        """새 인증 코드를 저장하고 관리자 이메일로 보냅니다.

        기존 코드는 무효화됩니다.

        Raises:
            RuntimeError: 이메일이 없거나 발송에 실패한 경우.
        """
        if not admin.email:
            raise RuntimeError(f"관리자 이메일이 없습니다: {admin.id}")

        code = generate_verification_code()
        expires_at = _now_utc() + timedelta(minutes=settings.TWO_FACTOR_CODE_TTL_MINUTES)
        await admin_models.replace_verification_code(
            admin.id, hash_verification_code(code), expires_at.replace(tzinfo=None)
        )

        mail = render_notification(
            admin.full_name or admin.username,
            "관리자 로그인 인증 코드",
            f"인증 코드는 {code} 입니다. "
            f"{settings.TWO_FACTOR_CODE_TTL_MINUTES}분 안에 입력해주세요.",
        )
        await send_email(admin.email, mail.subject, mail.text, html=mail.html)
        logger.info(f"2단계 인증 코드 발송: {admin.id}")

    @staticmethod
    async def verify_code(admin_id: str, code: str) -> str:
        """입력 코드를 검증하고 결과 코드를 반환합니다.

        실패할 때마다 시도 횟수가 증가하고, 성공하면 코드를 삭제합니다.

        Returns:
            CODE_OK 또는 에러 코드 (invalid_code, code_expired, too_many_attempts).
        """
        stored = await admin_models.get_verification_code(admin_id)
        if not stored:
            return CODE_INVALID
        if stored.attempts >= settings.TWO_FACTOR_MAX_ATTEMPTS:
            return CODE_TOO_MANY_ATTEMPTS
        if _as_utc(stored.expires_at) < _now_utc():
            return CODE_EXPIRED
        if not verify_code_hash(code, stored.code_hash):
            await admin_models.increment_code_attempts(stored.id)
            return CODE_INVALID

        await admin_models.delete_verification_codes(admin_id)
        return CODE_OK
