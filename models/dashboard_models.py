"""dashboard_models: 대시보드 배지/통계용 집계 쿼리 모듈.

각 배지는 독립된 COUNT 쿼리이며, 하나가 실패해도 다른 배지에 영향을 주지 않도록
서비스 계층에서 개별 호출합니다.
"""

from database.connection import fetch_count

# 배지 이름 → COUNT 쿼리
BADGE_QUERIES: dict[str, str] = {
    "pending_purchase_requests": (
        "SELECT COUNT(*) FROM listing_purchase_requests WHERE status = 'pending'"
    ),
    "pending_email_verifications": "SELECT COUNT(*) FROM email_verifications",
    "pending_phone_verifications": "SELECT COUNT(*) FROM verification_codes",
    "pending_reviews": "SELECT COUNT(*) FROM reviews WHERE is_approved = 0",
    "pending_reports": (
        "SELECT (SELECT COUNT(*) FROM listing_reports WHERE status = 'pending')"
        " + (SELECT COUNT(*) FROM message_reports WHERE status = 'pending')"
        " + (SELECT COUNT(*) FROM admin_reports WHERE status = 'pending')"
    ),
    "blocked_users": "SELECT COUNT(*) FROM users WHERE is_blocked = 1",
    "pending_documents": (
        "SELECT COUNT(*) FROM corporate_documents WHERE status = 'pending'"
    ),
    "pending_corporate_approvals": (
        "SELECT COUNT(*) FROM users WHERE is_corporate = 1 AND approval_status = 'pending'"
    ),
    "pending_damage_reports": (
        "SELECT COUNT(*) FROM damage_reports WHERE status = 'pending'"
    ),
}

STAT_QUERIES: dict[str, str] = {
    "total_users": "SELECT COUNT(*) FROM users",
    "corporate_users": "SELECT COUNT(*) FROM users WHERE is_corporate = 1",
    "total_listings": "SELECT COUNT(*) FROM car_listings",
    "active_listings": "SELECT COUNT(*) FROM car_listings WHERE status = 'approved'",
    "total_messages": "SELECT COUNT(*) FROM messages",
    "total_reviews": "SELECT COUNT(*) FROM reviews",
}


async def count_badge(name: str) -> int:
    """배지 하나의 값을 조회합니다.

    Raises:
        KeyError: 알 수 없는 배지 이름.
    """
    return await fetch_count(BADGE_QUERIES[name])


async def count_stat(name: str) -> int:
    return await fetch_count(STAT_QUERIES[name])
