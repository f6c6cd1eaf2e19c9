"""listing_models: 차량 매물 및 매물 등록권 구매 요청 데이터 모델 모듈."""

from dataclasses import dataclass
from typing import Any

from core.config import settings
from database.connection import call_procedure, fetch_dicts, get_connection, transactional


@dataclass(frozen=True)
class ListingSummary:
    """알림 문구 작성에 필요한 매물 요약."""

    id: str
    user_id: str
    brand: str | None
    model: str | None
    is_featured: bool = False


async def get_listings(status: str | None = None) -> list[dict]:
    """매물 목록을 소유자 정보, 대표 이미지와 함께 조회합니다."""
    query = """
        SELECT l.id, l.user_id, l.brand, l.model, l.year, l.mileage, l.price,
               l.currency, l.location, l.status, l.is_featured, l.moderation_reason,
               l.created_at, l.updated_at,
               u.full_name AS owner_full_name, u.email AS owner_email,
               (SELECT i.url FROM car_images i WHERE i.listing_id = l.id
                ORDER BY i.created_at LIMIT 1) AS cover_image_url
        FROM car_listings l
        LEFT JOIN users u ON l.user_id = u.id
    """
    params: list[Any] = []
    if status:
        query += " WHERE l.status = %s"
        params.append(status)
    query += " ORDER BY l.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)
    return await fetch_dicts(query, params)


async def get_listing_summary(listing_id: str) -> ListingSummary | None:
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT id, user_id, brand, model, is_featured FROM car_listings WHERE id = %s",
                (listing_id,),
            )
            row = await cur.fetchone()
            if not row:
                return None
            return ListingSummary(
                id=row[0],
                user_id=row[1],
                brand=row[2],
                model=row[3],
                is_featured=bool(row[4]),
            )


async def update_listing_status(
    listing_id: str, status: str, admin_id: str, reason: str
) -> None:
    """매물 상태를 변경합니다 (admin_update_listing_status 프로시저)."""
    await call_procedure(
        "admin_update_listing_status",
        {
            "p_listing_id": listing_id,
            "p_status": status,
            "p_admin_id": admin_id,
            "p_reason": reason,
        },
    )


async def delete_listing(listing_id: str, admin_id: str) -> None:
    """매물을 삭제합니다 (admin_delete_listing 프로시저)."""
    await call_procedure(
        "admin_delete_listing",
        {"p_listing_id": listing_id, "p_admin_id": admin_id},
    )


async def set_featured(listing_id: str, featured: bool) -> bool:
    """매물의 추천(상단 노출) 여부를 변경합니다."""
    async with transactional() as cur:
        await cur.execute(
            "UPDATE car_listings SET is_featured = %s WHERE id = %s",
            (1 if featured else 0, listing_id),
        )
        return cur.rowcount > 0


# ============ 매물 등록권 구매 요청 ============


async def get_purchase_requests(status: str | None = None) -> list[dict]:
    query = """
        SELECT r.id, r.user_id, r.amount, r.price, r.status, r.admin_notes,
               r.created_at, r.updated_at,
               u.full_name AS user_full_name, u.email AS user_email
        FROM listing_purchase_requests r
        LEFT JOIN users u ON r.user_id = u.id
    """
    params: list[Any] = []
    if status:
        query += " WHERE r.status = %s"
        params.append(status)
    query += " ORDER BY r.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)
    return await fetch_dicts(query, params)


async def approve_purchase_request(request_id: str, admin_id: str, notes: str) -> None:
    await call_procedure(
        "approve_purchase_request_admin",
        {"p_request_id": request_id, "p_admin_id": admin_id, "p_admin_notes": notes},
    )


async def reject_purchase_request(request_id: str, admin_id: str, notes: str) -> None:
    await call_procedure(
        "reject_purchase_request_admin",
        {"p_request_id": request_id, "p_admin_id": admin_id, "p_admin_notes": notes},
    )
