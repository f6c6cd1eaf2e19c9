"""damage_report_service: 차량 손상 신고 검토 서비스."""

from typing import Any

from models import damage_report_models
from realtime.live_view import TableWatch
from services.dispatcher import dispatch
from services.views import ViewDefinition, is_truncated
from utils.exceptions import bad_request_error, not_found_error
from utils.formatters import format_row, nest_prefixed

DAMAGE_STATUS_LABELS = {
    "pending": "검토 대기",
    "approved": "승인됨",
    "rejected": "거절됨",
}


def serialize_damage_report(row: dict[str, Any]) -> dict[str, Any]:
    data = format_row(nest_prefixed(nest_prefixed(row, "user"), "listing"))
    data["image_count"] = int(data.get("image_count") or 0)
    data["status_label"] = DAMAGE_STATUS_LABELS.get(data.get("status"), data.get("status"))
    return data


class DamageReportService:
    """손상 신고 서비스."""

    @staticmethod
    async def list_damage_reports(status: str | None = "pending") -> tuple[list[dict], bool]:
        status_filter = None if status in (None, "", "all") else status
        rows = await damage_report_models.get_damage_reports(status_filter)
        return [serialize_damage_report(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def get_images(report_id: str) -> list[dict]:
        rows = await damage_report_models.get_damage_images(report_id)
        return [format_row(r) for r in rows]

    @staticmethod
    async def review(
        report_id: str,
        admin_id: str,
        status: str,
        notes: str | None,
        timestamp: str,
    ) -> list[dict]:
        """손상 신고를 승인/거절합니다 (거절 시 메모 필수).

        Raises:
            HTTPException: 400 메모 누락, 404 신고 없음, 409 처리 중, 502 호출 실패.
        """
        approved = status == "approved"
        if not approved and not notes:
            raise bad_request_error(
                "resolution_notes_required", timestamp, "거절 사유를 입력해주세요."
            )

        updated, notifications = await dispatch(
            "damage_report",
            report_id,
            "damage_report_approve" if approved else "damage_report_reject",
            lambda: damage_report_models.review_damage_report(
                report_id, status, admin_id, notes
            ),
            timestamp=timestamp,
            success_message=(
                "손상 신고가 승인되었습니다." if approved else "손상 신고가 거절되었습니다."
            ),
            failure_message="손상 신고를 처리하지 못했습니다.",
        )
        if not updated:
            raise not_found_error("damage_report", timestamp)
        return notifications


DAMAGE_REPORTS_VIEW = ViewDefinition(
    name="damage_reports",
    loader=DamageReportService.list_damage_reports,
    search_fields=(
        "description",
        "location",
        "user.full_name",
        "user.email",
        "listing.brand",
        "listing.model",
    ),
    watches=(TableWatch("damage_reports"),),
    error_message="손상 신고 목록을 불러오지 못했습니다.",
    filters={"status": "pending"},
)
