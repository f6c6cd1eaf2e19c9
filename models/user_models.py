"""user_models: 사용자 관련 데이터 모델 및 함수 모듈.

마켓플레이스 사용자(개인/법인) 조회와 관리자 조치(차단, 해제, 삭제,
법인 승인/거절, 추가 매물 등록권 조정)를 제공합니다.
상태 변경은 감사 기록을 남기는 저장 프로시저로 수행합니다.
"""

from dataclasses import dataclass
from typing import Any

from core.config import settings
from database.connection import (
    call_procedure,
    fetch_dicts,
    get_connection,
    transactional,
)


@dataclass(frozen=True)
class UserContact:
    """알림 발송에 필요한 사용자 연락처.

    Attributes:
        id: 사용자 고유 식별자.
        email: 이메일 주소.
        full_name: 이름.
        phone: 전화번호.
    """

    id: str
    email: str | None
    full_name: str | None
    phone: str | None = None


USER_LIST_FIELDS = (
    "u.id, u.email, u.full_name, u.phone, u.role, u.is_corporate, u.company_name, "
    "u.tax_number, u.approval_status, u.is_blocked, u.blocked_at, u.block_reason, "
    "u.blocked_until, u.phone_verified, u.email_verified, u.listing_limit, "
    "u.paid_listing_limit, u.created_at"
)


async def get_users(is_corporate: bool | None = None) -> list[dict]:
    """사용자 목록을 최신 가입순으로 조회합니다.

    Args:
        is_corporate: True면 법인, False면 개인만 조회 (None이면 전체).
    """
    query = f"SELECT {USER_LIST_FIELDS} FROM users u"
    params: list[Any] = []
    if is_corporate is not None:
        query += " WHERE u.is_corporate = %s"
        params.append(1 if is_corporate else 0)
    query += " ORDER BY u.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)
    return await fetch_dicts(query, params)


async def get_blocked_users() -> list[dict]:
    """차단된 사용자를 최근 차단순으로 조회합니다."""
    return await fetch_dicts(
        f"""
        SELECT {USER_LIST_FIELDS} FROM users u
        WHERE u.is_blocked = 1
        ORDER BY u.blocked_at DESC
        LIMIT %s
        """,
        (settings.LIST_FETCH_LIMIT,),
    )


async def get_corporate_users(approval_status: str | None = None) -> list[dict]:
    """법인 사용자를 승인 상태별로 조회합니다."""
    query = f"SELECT {USER_LIST_FIELDS} FROM users u WHERE u.is_corporate = 1"
    params: list[Any] = []
    if approval_status:
        query += " AND u.approval_status = %s"
        params.append(approval_status)
    query += " ORDER BY u.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)
    return await fetch_dicts(query, params)


async def get_users_with_listing_counts() -> list[dict]:
    """매물 등록권 현황과 현재 매물 수를 함께 조회합니다."""
    return await fetch_dicts(
        """
        SELECT u.id, u.email, u.full_name, u.listing_limit, u.paid_listing_limit,
               u.created_at,
               (SELECT COUNT(*) FROM car_listings l WHERE l.user_id = u.id) AS current_listings
        FROM users u
        ORDER BY u.created_at DESC
        LIMIT %s
        """,
        (settings.LIST_FETCH_LIMIT,),
    )


async def get_user_row(user_id: str) -> dict | None:
    """사용자 한 명을 목록과 같은 형태로 조회합니다."""
    rows = await fetch_dicts(
        f"SELECT {USER_LIST_FIELDS} FROM users u WHERE u.id = %s", (user_id,)
    )
    return rows[0] if rows else None


async def get_user_contact(user_id: str) -> UserContact | None:
    """알림 발송용 연락처를 조회합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT id, email, full_name, phone FROM users WHERE id = %s",
                (user_id,),
            )
            row = await cur.fetchone()
            if not row:
                return None
            return UserContact(id=row[0], email=row[1], full_name=row[2], phone=row[3])


# ============ 차단 / 해제 ============


async def block_user(user_id: str, admin_id: str, reason: str) -> None:
    """사용자를 차단합니다 (block_user 프로시저).

    차단 기간(BLOCK_DURATION_DAYS)은 프로시저가 적용합니다.
    이미 차단된 사용자에 대한 재호출 처리도 프로시저에 맡깁니다.
    """
    await call_procedure(
        "block_user",
        {"p_user_id": user_id, "p_admin_id": admin_id, "p_reason": reason},
    )


async def unblock_user(user_id: str, admin_id: str) -> None:
    """사용자 차단을 해제합니다 (unblock_user 프로시저)."""
    await call_procedure(
        "unblock_user",
        {"p_user_id": user_id, "p_admin_id": admin_id},
    )


async def add_block_history(user_id: str, admin_id: str, reason: str) -> None:
    """user_blocks 테이블에 차단/해제 이력을 남깁니다."""
    async with transactional() as cur:
        await cur.execute(
            "INSERT INTO user_blocks (user_id, admin_id, reason) VALUES (%s, %s, %s)",
            (user_id, admin_id, reason),
        )


async def get_block_history(user_id: str) -> list[dict]:
    return await fetch_dicts(
        """
        SELECT b.id, b.user_id, b.admin_id, b.reason, b.created_at,
               a.username AS admin_username
        FROM user_blocks b
        LEFT JOIN admin_credentials a ON b.admin_id = a.id
        WHERE b.user_id = %s
        ORDER BY b.created_at DESC
        """,
        (user_id,),
    )


async def delete_user_data(user_id: str) -> None:
    """사용자와 관련 데이터를 삭제합니다 (delete_user_data 프로시저)."""
    await call_procedure("delete_user_data", {"p_user_id": user_id})


# ============ 법인 승인 ============


async def approve_corporate_user(user_id: str, admin_id: str) -> None:
    await call_procedure(
        "admin_approve_corporate_user",
        {"p_user_id": user_id, "p_admin_id": admin_id},
    )


async def reject_corporate_user(user_id: str, admin_id: str, reason: str) -> None:
    await call_procedure(
        "admin_reject_corporate_user",
        {"p_user_id": user_id, "p_admin_id": admin_id, "p_reason": reason},
    )


# ============ 매물 등록권 ============


async def add_listing_slots(user_id: str, amount: int, payment_id: str) -> dict:
    """추가 매물 등록권을 지급합니다 (purchase_listing_slot 프로시저)."""
    rows = await call_procedure(
        "purchase_listing_slot",
        {"p_user_id": user_id, "p_amount": amount, "p_payment_id": payment_id},
    )
    return rows[0] if rows else {}


async def get_paid_listing_limit(user_id: str) -> int | None:
    """사용자의 추가 매물 등록권 수를 조회합니다 (사용자가 없으면 None)."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT paid_listing_limit FROM users WHERE id = %s", (user_id,)
            )
            row = await cur.fetchone()
            return int(row[0] or 0) if row else None


async def remove_listing_slots(user_id: str, amount: int) -> bool:
    """추가 매물 등록권을 회수합니다 (0 미만으로 내려가지 않음).

    Returns:
        보유량이 충분해서 차감되었으면 True.
    """
    async with transactional() as cur:
        await cur.execute(
            """
            UPDATE users
            SET paid_listing_limit = paid_listing_limit - %s
            WHERE id = %s AND paid_listing_limit >= %s
            """,
            (amount, user_id, amount),
        )
        return cur.rowcount > 0


# ============ 전화번호 인증 ============


async def mark_phone_verified(user_id: str) -> bool:
    """전화번호를 수동으로 인증 처리하고 남은 인증 코드를 지웁니다."""
    async with transactional() as cur:
        await cur.execute(
            "UPDATE users SET phone_verified = 1 WHERE id = %s", (user_id,)
        )
        updated = cur.rowcount > 0
        await cur.execute(
            "DELETE FROM verification_codes WHERE user_id = %s", (user_id,)
        )
        return updated
