"""review_service: 매물 리뷰 승인/거절/삭제 서비스."""

import logging
from typing import Any

from models import review_models
from realtime.live_view import TableWatch
from services.dispatcher import dispatch
from services.views import ViewDefinition, is_truncated
from utils.exceptions import bad_request_error
from utils.formatters import format_row, nest_prefixed

logger = logging.getLogger(__name__)

# 목록 필터 → is_approved 값
REVIEW_STATUS_FILTERS: dict[str, bool | None] = {
    "pending": False,
    "approved": True,
    "all": None,
}


def serialize_review(row: dict[str, Any]) -> dict[str, Any]:
    data = format_row(nest_prefixed(nest_prefixed(row, "user"), "listing"))
    data["is_approved"] = bool(data.get("is_approved"))
    data["is_verified_purchase"] = bool(data.get("is_verified_purchase"))
    data["actions"] = ["delete"] if data["is_approved"] else ["approve", "reject", "delete"]
    return data


class ReviewService:
    """리뷰 관리 서비스."""

    @staticmethod
    async def list_reviews(status: str | None = "pending") -> tuple[list[dict], bool]:
        """리뷰 목록을 조회합니다.

        Raises:
            ValueError: 알 수 없는 상태 필터.
        """
        key = status or "all"
        if key not in REVIEW_STATUS_FILTERS:
            raise ValueError(f"알 수 없는 리뷰 상태입니다: {status}")
        rows = await review_models.get_reviews(REVIEW_STATUS_FILTERS[key])
        return [serialize_review(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def approve_review(review_id: str, admin_id: str, timestamp: str) -> list[dict]:
        _, notifications = await dispatch(
            "review",
            review_id,
            "review_approve",
            lambda: review_models.update_review_status(review_id, admin_id, True),
            timestamp=timestamp,
            success_message="리뷰가 승인되었습니다.",
            failure_message="리뷰를 승인하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def reject_review(
        review_id: str, admin_id: str, reason: str | None, timestamp: str
    ) -> list[dict]:
        """리뷰를 거절합니다. 사유가 없으면 호출 없이 400을 반환합니다."""
        if not reason:
            raise bad_request_error(
                "rejection_reason_required", timestamp, "거절 사유를 입력해주세요."
            )
        # 프로시저에 사유 인자가 없으므로 로그로만 남김
        logger.info(f"리뷰 거절: {review_id} (관리자 {admin_id}, 사유: {reason})")
        _, notifications = await dispatch(
            "review",
            review_id,
            "review_reject",
            lambda: review_models.update_review_status(review_id, admin_id, False),
            timestamp=timestamp,
            success_message="리뷰가 거절되었습니다.",
            failure_message="리뷰를 거절하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def delete_review(review_id: str, admin_id: str, timestamp: str) -> list[dict]:
        _, notifications = await dispatch(
            "review",
            review_id,
            "review_delete",
            lambda: review_models.delete_review(review_id, admin_id),
            timestamp=timestamp,
            success_message="리뷰가 삭제되었습니다.",
            failure_message="리뷰를 삭제하지 못했습니다.",
        )
        return notifications


REVIEWS_VIEW = ViewDefinition(
    name="reviews",
    loader=ReviewService.list_reviews,
    search_fields=(
        "title",
        "content",
        "user.full_name",
        "user.email",
        "listing.brand",
        "listing.model",
    ),
    watches=(TableWatch("reviews"),),
    error_message="리뷰 목록을 불러오지 못했습니다.",
    filters={"status": "pending"},
)
