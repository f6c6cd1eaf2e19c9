"""share_request_service: 소셜 미디어 공유 요청 처리 서비스."""

import logging
from typing import Any

from models import share_request_models
from realtime.live_view import TableWatch
from services.dispatcher import dispatch
from services.views import ViewDefinition, is_truncated
from utils.exceptions import bad_request_error, not_found_error
from utils.formatters import format_row, nest_prefixed

logger = logging.getLogger(__name__)

SHARE_STATUS_LABELS = {
    "pending": "대기 중",
    "completed": "완료",
    "rejected": "거절됨",
}


def serialize_share_request(row: dict[str, Any]) -> dict[str, Any]:
    data = format_row(nest_prefixed(nest_prefixed(row, "user"), "listing"))
    data["status_label"] = SHARE_STATUS_LABELS.get(data.get("status"), data.get("status"))
    return data


class ShareRequestService:
    """공유 요청 서비스."""

    @staticmethod
    async def list_share_requests(status: str | None = "pending") -> tuple[list[dict], bool]:
        status_filter = None if status in (None, "", "all") else status
        rows = await share_request_models.get_share_requests(status_filter)
        return [serialize_share_request(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def _process(
        request_id: str, status: str, admin_id: str, notes: str | None, timestamp: str
    ) -> tuple[share_request_models.ShareRequest, list[dict]]:
        request = await share_request_models.get_share_request(request_id)
        if not request:
            raise not_found_error("share_request", timestamp)

        completed = status == "completed"
        updated, notifications = await dispatch(
            "share_request",
            request_id,
            "share_complete" if completed else "share_reject",
            lambda: share_request_models.process_share_request(
                request_id, status, admin_id, notes
            ),
            timestamp=timestamp,
            success_message=(
                "공유 요청이 완료 처리되었습니다." if completed else "공유 요청이 거절되었습니다."
            ),
            failure_message="공유 요청을 처리하지 못했습니다.",
        )
        if not updated:
            raise not_found_error("share_request", timestamp)
        return request, notifications

    @staticmethod
    async def complete_request(
        request_id: str, admin_id: str, notes: str | None, timestamp: str
    ) -> list[dict]:
        """공유 요청을 완료 처리하고 공유 기록을 남깁니다 (기록 실패는 로그만)."""
        request, notifications = await ShareRequestService._process(
            request_id, "completed", admin_id, notes, timestamp
        )
        try:
            await share_request_models.record_share(
                request.user_id, request.listing_id, request.platform
            )
        except Exception:
            logger.exception(f"공유 기록 실패: {request_id}")
        return notifications

    @staticmethod
    async def reject_request(
        request_id: str, admin_id: str, notes: str | None, timestamp: str
    ) -> list[dict]:
        if not notes:
            raise bad_request_error(
                "rejection_reason_required", timestamp, "거절 사유를 입력해주세요."
            )
        _, notifications = await ShareRequestService._process(
            request_id, "rejected", admin_id, notes, timestamp
        )
        return notifications


SHARE_REQUESTS_VIEW = ViewDefinition(
    name="share_requests",
    loader=ShareRequestService.list_share_requests,
    search_fields=(
        "platform",
        "user.full_name",
        "user.email",
        "listing.brand",
        "listing.model",
    ),
    watches=(TableWatch("social_share_requests"),),
    error_message="공유 요청 목록을 불러오지 못했습니다.",
    filters={"status": "pending"},
)
