"""share_request_models: 소셜 미디어 공유 요청 데이터 모델 모듈."""

from dataclasses import dataclass
from typing import Any

from core.config import settings
from database.connection import fetch_dicts, get_connection, transactional


@dataclass(frozen=True)
class ShareRequest:
    """소셜 공유 요청 데이터 클래스."""

    id: str
    user_id: str
    listing_id: str
    platform: str
    status: str


async def get_share_requests(status: str | None = None) -> list[dict]:
    query = """
        SELECT r.id, r.user_id, r.listing_id, r.platform, r.status, r.admin_notes,
               r.processed_at, r.processed_by, r.created_at,
               u.full_name AS user_full_name, u.email AS user_email,
               l.brand AS listing_brand, l.model AS listing_model, l.year AS listing_year
        FROM social_share_requests r
        LEFT JOIN users u ON r.user_id = u.id
        LEFT JOIN car_listings l ON r.listing_id = l.id
    """
    params: list[Any] = []
    if status:
        query += " WHERE r.status = %s"
        params.append(status)
    query += " ORDER BY r.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)
    return await fetch_dicts(query, params)


async def get_share_request(request_id: str) -> ShareRequest | None:
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, user_id, listing_id, platform, status
                FROM social_share_requests WHERE id = %s
                """,
                (request_id,),
            )
            row = await cur.fetchone()
            if not row:
                return None
            return ShareRequest(
                id=row[0], user_id=row[1], listing_id=row[2], platform=row[3], status=row[4]
            )


async def process_share_request(
    request_id: str, status: str, admin_id: str, notes: str | None
) -> bool:
    """공유 요청을 처리 상태로 변경합니다."""
    async with transactional() as cur:
        await cur.execute(
            """
            UPDATE social_share_requests
            SET status = %s, admin_notes = %s, processed_at = NOW(), processed_by = %s
            WHERE id = %s
            """,
            (status, notes, admin_id, request_id),
        )
        return cur.rowcount > 0


async def record_share(user_id: str, listing_id: str, platform: str) -> None:
    """완료된 공유를 social_shares에 기록합니다."""
    async with transactional() as cur:
        await cur.execute(
            """
            INSERT INTO social_shares (user_id, listing_id, platform, success)
            VALUES (%s, %s, %s, 1)
            """,
            (user_id, listing_id, platform),
        )
