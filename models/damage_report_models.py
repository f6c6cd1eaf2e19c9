"""damage_report_models: 차량 손상 신고 데이터 모델 모듈."""

from typing import Any

from core.config import settings
from database.connection import fetch_dicts, transactional


async def get_damage_reports(status: str | None = None) -> list[dict]:
    """손상 신고 목록을 신고자, 매물 정보, 첨부 이미지 수와 함께 조회합니다."""
    query = """
        SELECT d.id, d.user_id, d.listing_id, d.description, d.location,
               d.damage_date, d.status, d.admin_notes, d.reviewed_by, d.reviewed_at,
               d.created_at,
               u.full_name AS user_full_name, u.email AS user_email,
               l.brand AS listing_brand, l.model AS listing_model, l.year AS listing_year,
               (SELECT COUNT(*) FROM damage_images i WHERE i.report_id = d.id) AS image_count
        FROM damage_reports d
        LEFT JOIN users u ON d.user_id = u.id
        LEFT JOIN car_listings l ON d.listing_id = l.id
    """
    params: list[Any] = []
    if status:
        query += " WHERE d.status = %s"
        params.append(status)
    query += " ORDER BY d.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)
    return await fetch_dicts(query, params)


async def get_damage_images(report_id: str) -> list[dict]:
    return await fetch_dicts(
        "SELECT id, url, created_at FROM damage_images WHERE report_id = %s ORDER BY created_at",
        (report_id,),
    )


async def review_damage_report(
    report_id: str, status: str, admin_id: str, notes: str | None = None
) -> bool:
    """손상 신고를 승인/거절합니다.

    Returns:
        대상 신고가 존재하면 True.
    """
    async with transactional() as cur:
        await cur.execute(
            """
            UPDATE damage_reports
            SET status = %s, admin_notes = COALESCE(%s, admin_notes),
                reviewed_by = %s, reviewed_at = NOW()
            WHERE id = %s
            """,
            (status, notes, admin_id, report_id),
        )
        return cur.rowcount > 0
