"""listing_service: 매물 관리 및 매물 등록권(쿼터) 관리 비즈니스 로직을 처리하는 서비스."""

import logging
from typing import Any

from models import listing_models, report_models, user_models
from realtime.live_view import TableWatch
from schemas.common import notification
from services.dispatcher import dispatch
from services.notification_service import NotificationService
from services.views import ViewDefinition, is_truncated
from utils.exceptions import bad_request_error, not_found_error
from utils.formatters import format_row, nest_prefixed

logger = logging.getLogger(__name__)

LISTING_STATUS_LABELS = {
    "pending": "검토 대기",
    "approved": "승인됨",
    "rejected": "거절됨",
}

# 사유를 입력하지 않았을 때 사용하는 상태별 기본 사유
DEFAULT_STATUS_REASONS = {
    "approved": "관리자가 승인했습니다",
    "rejected": "관리자가 거절했습니다",
    "pending": "관리자가 검토 대기로 변경했습니다",
}

DEFAULT_ADMIN_REPORT_DETAILS = "관리자가 신고했습니다"
DEFAULT_PURCHASE_APPROVE_NOTES = "관리자가 승인했습니다"

OWNER_STATUS_MESSAGES = {
    "approved": "등록하신 매물({listing})이 승인되었습니다.",
    "rejected": "등록하신 매물({listing})이 거절되었습니다. 사유: {reason}",
    "pending": "등록하신 매물({listing})이 검토 대기 상태로 변경되었습니다.",
}


def serialize_listing(row: dict[str, Any]) -> dict[str, Any]:
    data = format_row(nest_prefixed(row, "owner"))
    if data.get("price") is not None:
        data["price"] = float(data["price"])
    data["is_featured"] = bool(data.get("is_featured"))
    data["status_label"] = LISTING_STATUS_LABELS.get(data.get("status"), data.get("status"))
    return data


def _listing_title(summary: listing_models.ListingSummary) -> str:
    return " ".join(part for part in (summary.brand, summary.model) if part) or summary.id


class ListingService:
    """매물 관리 서비스."""

    @staticmethod
    async def list_listings(status: str | None = "all") -> tuple[list[dict], bool]:
        status_filter = None if status in (None, "", "all") else status
        rows = await listing_models.get_listings(status_filter)
        return [serialize_listing(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def _get_summary(listing_id: str, timestamp: str) -> listing_models.ListingSummary:
        summary = await listing_models.get_listing_summary(listing_id)
        if not summary:
            raise not_found_error("listing", timestamp)
        return summary

    @staticmethod
    async def update_status(
        listing_id: str,
        admin_id: str,
        status: str,
        reason: str | None,
        timestamp: str,
    ) -> list[dict]:
        """매물 상태를 변경하고 소유자에게 알립니다 (알림 실패는 에러 알림만)."""
        summary = await ListingService._get_summary(listing_id, timestamp)
        reason = reason or DEFAULT_STATUS_REASONS[status]

        _, notifications = await dispatch(
            "listing",
            listing_id,
            "listing_status",
            lambda: listing_models.update_listing_status(listing_id, status, admin_id, reason),
            timestamp=timestamp,
            success_message=f"매물 상태가 '{LISTING_STATUS_LABELS[status]}'(으)로 변경되었습니다.",
            failure_message="매물 상태를 변경하지 못했습니다.",
        )

        message = OWNER_STATUS_MESSAGES[status].format(
            listing=_listing_title(summary), reason=reason
        )
        if not await NotificationService.try_notify(
            summary.user_id, "매물 상태 변경 안내", message, admin_id=admin_id
        ):
            notifications.append(notification("error", "소유자에게 알림을 보내지 못했습니다."))
        return notifications

    @staticmethod
    async def delete_listing(listing_id: str, admin_id: str, timestamp: str) -> list[dict]:
        _, notifications = await dispatch(
            "listing",
            listing_id,
            "listing_delete",
            lambda: listing_models.delete_listing(listing_id, admin_id),
            timestamp=timestamp,
            success_message="매물이 삭제되었습니다.",
            failure_message="매물을 삭제하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def set_featured(listing_id: str, featured: bool, timestamp: str) -> list[dict]:
        updated, notifications = await dispatch(
            "listing",
            listing_id,
            "listing_featured",
            lambda: listing_models.set_featured(listing_id, featured),
            timestamp=timestamp,
            success_message=(
                "매물이 추천 매물로 지정되었습니다." if featured else "추천 매물 지정이 해제되었습니다."
            ),
            failure_message="추천 매물 설정을 변경하지 못했습니다.",
        )
        if not updated:
            raise not_found_error("listing", timestamp)
        return notifications

    @staticmethod
    async def report_listing(
        listing_id: str,
        admin_id: str,
        reason: str | None,
        details: str | None,
        timestamp: str,
    ) -> tuple[dict, list[dict]]:
        """관리자 이름으로 매물을 신고하고 소유자에게 알립니다.

        Raises:
            HTTPException: 400 사유 누락, 404 매물 없음, 409 처리 중, 502 호출 실패.
        """
        if not reason:
            raise bad_request_error(
                "report_reason_required", timestamp, "신고 사유를 입력해주세요."
            )
        summary = await ListingService._get_summary(listing_id, timestamp)
        details = details or DEFAULT_ADMIN_REPORT_DETAILS

        created, notifications = await dispatch(
            "listing",
            listing_id,
            "admin_report",
            lambda: report_models.create_admin_report(listing_id, admin_id, reason, details),
            timestamp=timestamp,
            success_message="매물이 신고되었습니다.",
            failure_message="매물을 신고하지 못했습니다.",
        )

        sent = await NotificationService.try_notify(
            summary.user_id,
            "매물 신고 안내",
            f"등록하신 매물({_listing_title(summary)})이 관리자에 의해 신고되었습니다. 사유: {reason}",
            admin_id=admin_id,
        )
        if not sent:
            notifications.append(notification("error", "소유자에게 알림을 보내지 못했습니다."))
        return format_row(created), notifications

    @staticmethod
    async def notify_owner(
        listing_id: str,
        admin_id: str,
        subject: str | None,
        message: str | None,
        timestamp: str,
    ) -> list[dict]:
        """매물 소유자에게 관리자 메시지를 메일로 보냅니다."""
        if not subject or not message:
            raise bad_request_error(
                "notification_fields_required", timestamp, "제목과 내용을 입력해주세요."
            )
        summary = await ListingService._get_summary(listing_id, timestamp)
        _, notifications = await dispatch(
            "listing",
            listing_id,
            "notify_owner",
            lambda: NotificationService.send_user_notification(
                summary.user_id, subject, message, admin_id=admin_id
            ),
            timestamp=timestamp,
            success_message="소유자에게 알림을 보냈습니다.",
            failure_message="소유자에게 알림을 보내지 못했습니다.",
        )
        return notifications


class ListingQuotaService:
    """매물 등록권(쿼터) 관리 서비스."""

    @staticmethod
    async def list_quota_users() -> tuple[list[dict], bool]:
        rows = await user_models.get_users_with_listing_counts()
        items = []
        for row in rows:
            data = format_row(row)
            limit = int(data.get("listing_limit") or 0) + int(data.get("paid_listing_limit") or 0)
            data["total_limit"] = limit
            data["remaining"] = max(limit - int(data.get("current_listings") or 0), 0)
            items.append(data)
        return items, is_truncated(rows)

    @staticmethod
    async def list_purchase_requests(status: str | None = "pending") -> tuple[list[dict], bool]:
        status_filter = None if status in (None, "", "all") else status
        rows = await listing_models.get_purchase_requests(status_filter)
        items = []
        for row in rows:
            data = format_row(nest_prefixed(row, "user"))
            if data.get("price") is not None:
                data["price"] = float(data["price"])
            items.append(data)
        return items, is_truncated(rows)

    @staticmethod
    def _require_positive(amount: int | None, timestamp: str) -> int:
        if amount is None or amount <= 0:
            raise bad_request_error(
                "invalid_amount", timestamp, "수량은 1 이상이어야 합니다."
            )
        return amount

    @staticmethod
    async def add_slots(
        user_id: str,
        admin_id: str,
        amount: int | None,
        payment_id: str | None,
        timestamp: str,
    ) -> list[dict]:
        """추가 매물 등록권을 지급합니다.

        결제 ID가 없으면 admin_<관리자 ID>_<타임스탬프>를 사용합니다.
        """
        amount = ListingQuotaService._require_positive(amount, timestamp)
        payment_id = payment_id or f"admin_{admin_id}_{timestamp}"

        _, notifications = await dispatch(
            "listing_quota",
            user_id,
            "add_listing_slots",
            lambda: user_models.add_listing_slots(user_id, amount, payment_id),
            timestamp=timestamp,
            success_message=f"매물 등록권 {amount}개가 추가되었습니다.",
            failure_message="매물 등록권을 추가하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def remove_slots(
        user_id: str, amount: int | None, timestamp: str
    ) -> list[dict]:
        """추가 매물 등록권을 회수합니다 (보유량 이하만 가능).

        Raises:
            HTTPException: 400 수량 오류/보유량 부족, 404 사용자 없음, 502 호출 실패.
        """
        amount = ListingQuotaService._require_positive(amount, timestamp)
        current = await user_models.get_paid_listing_limit(user_id)
        if current is None:
            raise not_found_error("user", timestamp)
        if amount > current:
            raise bad_request_error(
                "insufficient_slots",
                timestamp,
                f"회수할 수량이 보유한 추가 등록권({current}개)보다 많습니다.",
            )

        removed, notifications = await dispatch(
            "listing_quota",
            user_id,
            "remove_listing_slots",
            lambda: user_models.remove_listing_slots(user_id, amount),
            timestamp=timestamp,
            success_message=f"매물 등록권 {amount}개가 회수되었습니다.",
            failure_message="매물 등록권을 회수하지 못했습니다.",
        )
        if not removed:
            # 조회와 차감 사이에 보유량이 줄어든 경우
            raise bad_request_error(
                "insufficient_slots", timestamp, "보유한 추가 등록권이 부족합니다."
            )
        return notifications

    @staticmethod
    async def approve_request(
        request_id: str, admin_id: str, notes: str | None, timestamp: str
    ) -> list[dict]:
        notes = notes or DEFAULT_PURCHASE_APPROVE_NOTES
        _, notifications = await dispatch(
            "purchase_request",
            request_id,
            "purchase_request_approve",
            lambda: listing_models.approve_purchase_request(request_id, admin_id, notes),
            timestamp=timestamp,
            success_message="구매 요청이 승인되었습니다.",
            failure_message="구매 요청을 승인하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def reject_request(
        request_id: str, admin_id: str, reason: str | None, timestamp: str
    ) -> list[dict]:
        if not reason:
            raise bad_request_error(
                "rejection_reason_required", timestamp, "거절 사유를 입력해주세요."
            )
        _, notifications = await dispatch(
            "purchase_request",
            request_id,
            "purchase_request_reject",
            lambda: listing_models.reject_purchase_request(request_id, admin_id, reason),
            timestamp=timestamp,
            success_message="구매 요청이 거절되었습니다.",
            failure_message="구매 요청을 거절하지 못했습니다.",
        )
        return notifications


LISTINGS_VIEW = ViewDefinition(
    name="listings",
    loader=ListingService.list_listings,
    search_fields=("brand", "model", "owner.full_name"),
    watches=(TableWatch("car_listings"),),
    error_message="매물 목록을 불러오지 못했습니다.",
    filters={"status": "all"},
)

QUOTA_USERS_VIEW = ViewDefinition(
    name="quota_users",
    loader=ListingQuotaService.list_quota_users,
    search_fields=("full_name", "email"),
    watches=(TableWatch("users"), TableWatch("car_listings")),
    error_message="매물 등록권 현황을 불러오지 못했습니다.",
)

PURCHASE_REQUESTS_VIEW = ViewDefinition(
    name="purchase_requests",
    loader=ListingQuotaService.list_purchase_requests,
    search_fields=("user.full_name", "user.email"),
    watches=(TableWatch("listing_purchase_requests"),),
    error_message="구매 요청 목록을 불러오지 못했습니다.",
    filters={"status": "pending"},
)
