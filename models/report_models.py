"""report_models: 신고 관련 데이터 모델 및 함수 모듈.

세 가지 신고 종류를 다룹니다.
    listing: 사용자가 매물을 신고 (listing_reports)
    message: 사용자가 메시지를 신고 (message_reports)
    admin_listing: 관리자가 매물을 신고 (admin_reports)
"""

from typing import Any

from core.config import settings
from database.connection import call_procedure, fetch_dicts
from schemas.common import build_person_dict

KIND_LISTING = "listing"
KIND_MESSAGE = "message"
KIND_ADMIN_LISTING = "admin_listing"

REPORT_KINDS = (KIND_LISTING, KIND_MESSAGE, KIND_ADMIN_LISTING)

PROCESS_PROCEDURES = {
    KIND_LISTING: "process_listing_report",
    KIND_MESSAGE: "process_message_report",
    KIND_ADMIN_LISTING: "process_admin_report",
}

_LISTING_REPORT_QUERY = """
    SELECT r.id, r.listing_id, r.reporter_id, r.reason, r.details, r.status,
           r.resolution_notes, r.resolved_by, r.resolved_at, r.created_at,
           u.full_name AS reporter_full_name, u.email AS reporter_email,
           l.brand AS listing_brand, l.model AS listing_model,
           l.year AS listing_year, l.user_id AS listing_user_id
    FROM listing_reports r
    LEFT JOIN users u ON r.reporter_id = u.id
    LEFT JOIN car_listings l ON r.listing_id = l.id
"""

_MESSAGE_REPORT_QUERY = """
    SELECT r.id, r.message_id, r.reporter_id, r.reason, r.details, r.status,
           r.resolution_notes, r.resolved_by, r.resolved_at, r.created_at,
           u.full_name AS reporter_full_name, u.email AS reporter_email,
           m.content AS message_content, m.sender_id AS message_sender_id,
           m.receiver_id AS message_receiver_id, m.listing_id AS message_listing_id,
           s.full_name AS sender_full_name, s.email AS sender_email,
           rc.full_name AS receiver_full_name, rc.email AS receiver_email
    FROM message_reports r
    LEFT JOIN users u ON r.reporter_id = u.id
    LEFT JOIN messages m ON r.message_id = m.id
    LEFT JOIN users s ON m.sender_id = s.id
    LEFT JOIN users rc ON m.receiver_id = rc.id
"""

# 관리자 신고는 신고자 정보를 admin_credentials에서 가져옵니다.
_ADMIN_REPORT_QUERY = """
    SELECT r.id, r.listing_id, r.admin_id AS reporter_id, r.reason, r.details, r.status,
           r.resolution_notes, r.resolved_by, r.resolved_at, r.created_at,
           a.username AS reporter_full_name, a.email AS reporter_email,
           l.brand AS listing_brand, l.model AS listing_model,
           l.year AS listing_year, l.user_id AS listing_user_id
    FROM admin_reports r
    LEFT JOIN admin_credentials a ON r.admin_id = a.id
    LEFT JOIN car_listings l ON r.listing_id = l.id
"""

_KIND_QUERIES = {
    KIND_LISTING: _LISTING_REPORT_QUERY,
    KIND_MESSAGE: _MESSAGE_REPORT_QUERY,
    KIND_ADMIN_LISTING: _ADMIN_REPORT_QUERY,
}


def _shape_report(kind: str, row: dict[str, Any]) -> dict[str, Any]:
    """JOIN 결과 행을 중첩 구조의 신고 딕셔너리로 변환합니다."""
    report = {
        "id": row["id"],
        "kind": kind,
        "reporter_id": row.get("reporter_id"),
        "reason": row.get("reason"),
        "details": row.get("details"),
        "status": row.get("status"),
        "resolution_notes": row.get("resolution_notes"),
        "resolved_by": row.get("resolved_by"),
        "resolved_at": row.get("resolved_at"),
        "created_at": row.get("created_at"),
        "reporter": build_person_dict(
            row.get("reporter_full_name"), row.get("reporter_email")
        ),
        "listing_id": None,
        "listing": None,
        "message_id": None,
        "message": None,
        "message_sender": None,
        "message_receiver": None,
    }

    if kind == KIND_MESSAGE:
        report["message_id"] = row.get("message_id")
        if row.get("message_sender_id") is not None:
            report["message"] = {
                "content": row.get("message_content"),
                "sender_id": row.get("message_sender_id"),
                "receiver_id": row.get("message_receiver_id"),
                "listing_id": row.get("message_listing_id"),
            }
        report["message_sender"] = build_person_dict(
            row.get("sender_full_name"), row.get("sender_email")
        )
        report["message_receiver"] = build_person_dict(
            row.get("receiver_full_name"), row.get("receiver_email")
        )
    else:
        report["listing_id"] = row.get("listing_id")
        if row.get("listing_user_id") is not None:
            report["listing"] = {
                "brand": row.get("listing_brand"),
                "model": row.get("listing_model"),
                "year": row.get("listing_year"),
                "user_id": row.get("listing_user_id"),
            }

    return report


async def get_reports_by_kind(kind: str, status: str | None = None) -> list[dict]:
    """한 종류의 신고 목록을 최신순으로 조회합니다.

    Args:
        kind: 신고 종류 (listing, message, admin_listing).
        status: 상태 필터 (None이면 전체).

    Returns:
        신고 딕셔너리 목록 (최대 LIST_FETCH_LIMIT건).
    """
    query = _KIND_QUERIES[kind]
    params: list[Any] = []
    if status:
        query += " WHERE r.status = %s"
        params.append(status)
    query += " ORDER BY r.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)

    rows = await fetch_dicts(query, params)
    return [_shape_report(kind, row) for row in rows]


async def get_report(kind: str, report_id: str) -> dict | None:
    """신고 하나를 조회합니다."""
    rows = await fetch_dicts(_KIND_QUERIES[kind] + " WHERE r.id = %s", (report_id,))
    return _shape_report(kind, rows[0]) if rows else None


async def process_report(
    kind: str, report_id: str, admin_id: str, status: str, notes: str | None
) -> None:
    """종류별 처리 프로시저로 신고 상태를 변경합니다.

    Raises:
        ProcedureError: 프로시저 호출이 실패한 경우.
    """
    await call_procedure(
        PROCESS_PROCEDURES[kind],
        {
            "p_report_id": report_id,
            "p_admin_id": admin_id,
            "p_status": status,
            "p_notes": notes,
        },
    )


async def create_admin_report(
    listing_id: str, admin_id: str, reason: str, details: str | None
) -> dict:
    """관리자 명의로 매물을 신고합니다 (create_admin_report 프로시저)."""
    rows = await call_procedure(
        "create_admin_report",
        {
            "p_listing_id": listing_id,
            "p_admin_id": admin_id,
            "p_reason": reason,
            "p_details": details,
        },
    )
    return rows[0] if rows else {}
