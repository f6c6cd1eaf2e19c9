"""review_models: 매물 리뷰 조회 및 승인/삭제 모듈."""

from typing import Any

from core.config import settings
from database.connection import call_procedure, fetch_dicts


async def get_reviews(is_approved: bool | None = None) -> list[dict]:
    """리뷰 목록을 작성자, 매물 정보와 함께 조회합니다.

    Args:
        is_approved: True면 승인된 리뷰, False면 대기 중인 리뷰 (None이면 전체).
    """
    query = """
        SELECT r.id, r.listing_id, r.user_id, r.rating, r.title, r.content,
               r.is_verified_purchase, r.is_approved, r.created_at, r.updated_at,
               u.full_name AS user_full_name, u.email AS user_email,
               l.brand AS listing_brand, l.model AS listing_model, l.year AS listing_year
        FROM reviews r
        LEFT JOIN users u ON r.user_id = u.id
        LEFT JOIN car_listings l ON r.listing_id = l.id
    """
    params: list[Any] = []
    if is_approved is not None:
        query += " WHERE r.is_approved = %s"
        params.append(1 if is_approved else 0)
    query += " ORDER BY r.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)
    return await fetch_dicts(query, params)


async def update_review_status(review_id: str, admin_id: str, is_approved: bool) -> None:
    """리뷰 승인 여부를 변경합니다 (admin_update_review_status 프로시저)."""
    await call_procedure(
        "admin_update_review_status",
        {"p_review_id": review_id, "p_admin_id": admin_id, "p_is_approved": is_approved},
    )


async def delete_review(review_id: str, admin_id: str) -> None:
    await call_procedure(
        "admin_delete_review",
        {"p_review_id": review_id, "p_admin_id": admin_id},
    )
