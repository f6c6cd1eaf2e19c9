"""verification_models: 전화번호/이메일 인증 대기 및 관리자 2단계 인증 코드 조회 모듈."""

from datetime import datetime

from core.config import settings
from database.connection import fetch_dicts, transactional


async def get_phone_verifications() -> list[dict]:
    """발송된 전화번호 인증 코드 목록을 사용자 정보와 함께 조회합니다.

    코드 값 자체는 조회하지 않습니다.
    """
    return await fetch_dicts(
        """
        SELECT v.id, v.user_id, v.phone, v.attempts, v.expires_at, v.created_at,
               u.full_name AS user_full_name, u.email AS user_email,
               u.phone_verified
        FROM verification_codes v
        LEFT JOIN users u ON v.user_id = u.id
        ORDER BY v.created_at DESC
        LIMIT %s
        """,
        (settings.LIST_FETCH_LIMIT,),
    )


async def get_email_verifications() -> list[dict]:
    """이메일 인증 대기 목록을 조회합니다."""
    return await fetch_dicts(
        """
        SELECT e.id, e.user_id, e.email, e.expires_at, e.created_at,
               u.full_name AS user_full_name
        FROM email_verifications e
        LEFT JOIN users u ON e.user_id = u.id
        ORDER BY e.created_at DESC
        LIMIT %s
        """,
        (settings.LIST_FETCH_LIMIT,),
    )


async def get_email_verification(verification_id: str) -> dict | None:
    rows = await fetch_dicts(
        """
        SELECT e.id, e.user_id, e.email, e.token, e.expires_at
        FROM email_verifications e
        WHERE e.id = %s
        """,
        (verification_id,),
    )
    return rows[0] if rows else None


async def get_admin_verification_codes() -> list[dict]:
    """관리자 2단계 인증 코드 발송 이력을 관리자 정보와 함께 조회합니다."""
    return await fetch_dicts(
        """
        SELECT c.id, c.admin_id, c.attempts, c.expires_at, c.created_at,
               a.username AS admin_username, a.email AS admin_email,
               a.full_name AS admin_full_name
        FROM admin_verification_codes c
        LEFT JOIN admin_credentials a ON c.admin_id = a.id
        ORDER BY c.created_at DESC
        LIMIT %s
        """,
        (settings.LIST_FETCH_LIMIT,),
    )


async def replace_phone_code(
    user_id: str, phone: str, code_hash: str, expires_at: datetime
) -> None:
    """사용자의 기존 전화번호 인증 코드를 새 코드로 교체합니다."""
    async with transactional() as cur:
        await cur.execute("DELETE FROM verification_codes WHERE user_id = %s", (user_id,))
        await cur.execute(
            """
            INSERT INTO verification_codes (user_id, phone, code_hash, attempts, expires_at)
            VALUES (%s, %s, %s, 0, %s)
            """,
            (user_id, phone, code_hash, expires_at),
        )
