"""listing_controller: 매물 관리 및 매물 등록권 관리 컨트롤러 모듈."""

from fastapi import Request

from controllers.view_controller import list_view
from dependencies.auth import AdminContext
from dependencies.request_context import get_request_timestamp
from schemas.common import create_response
from schemas.moderation_schemas import (
    FeaturedRequest,
    ListingStatusRequest,
    NotesRequest,
    OwnerNotificationRequest,
    ReasonRequest,
    SlotAmountRequest,
)
from schemas.report_schemas import AdminReportRequest
from services.listing_service import (
    LISTINGS_VIEW,
    PURCHASE_REQUESTS_VIEW,
    QUOTA_USERS_VIEW,
    ListingQuotaService,
    ListingService,
)


def _action_response(code: str, message: str, timestamp: str, notifications: list) -> dict:
    return create_response(code, message, timestamp=timestamp, notifications=notifications)


# ============ 매물 ============


async def get_listings(request: Request, listing_status: str, search: str | None) -> dict:
    return await list_view(LISTINGS_VIEW, request, search=search, status=listing_status)


async def update_status(
    listing_id: str, payload: ListingStatusRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ListingService.update_status(
        listing_id, admin.admin_id, payload.status, payload.reason, timestamp
    )
    return _action_response(
        "LISTING_STATUS_UPDATED", "매물 상태가 변경되었습니다.", timestamp, notifications
    )


async def delete_listing(listing_id: str, admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ListingService.delete_listing(listing_id, admin.admin_id, timestamp)
    return _action_response("LISTING_DELETED", "매물이 삭제되었습니다.", timestamp, notifications)


async def set_featured(listing_id: str, payload: FeaturedRequest, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ListingService.set_featured(listing_id, payload.featured, timestamp)
    return _action_response(
        "LISTING_FEATURED_UPDATED", "추천 매물 설정이 변경되었습니다.", timestamp, notifications
    )


async def report_listing(
    listing_id: str, payload: AdminReportRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    report, notifications = await ListingService.report_listing(
        listing_id, admin.admin_id, payload.reason, payload.details, timestamp
    )
    return create_response(
        "LISTING_REPORTED",
        "매물이 신고되었습니다.",
        data={"report": report},
        timestamp=timestamp,
        notifications=notifications,
    )


async def notify_owner(
    listing_id: str,
    payload: OwnerNotificationRequest,
    admin: AdminContext,
    request: Request,
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ListingService.notify_owner(
        listing_id, admin.admin_id, payload.subject, payload.message, timestamp
    )
    return _action_response(
        "OWNER_NOTIFIED", "소유자에게 알림을 보냈습니다.", timestamp, notifications
    )


# ============ 매물 등록권 ============


async def get_quota_users(request: Request, search: str | None) -> dict:
    return await list_view(QUOTA_USERS_VIEW, request, search=search)


async def get_purchase_requests(
    request: Request, request_status: str, search: str | None
) -> dict:
    return await list_view(
        PURCHASE_REQUESTS_VIEW, request, search=search, status=request_status
    )


async def add_slots(
    user_id: str, payload: SlotAmountRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ListingQuotaService.add_slots(
        user_id, admin.admin_id, payload.amount, payload.payment_id, timestamp
    )
    return _action_response(
        "LISTING_SLOTS_ADDED", "매물 등록권이 추가되었습니다.", timestamp, notifications
    )


async def remove_slots(user_id: str, payload: SlotAmountRequest, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ListingQuotaService.remove_slots(user_id, payload.amount, timestamp)
    return _action_response(
        "LISTING_SLOTS_REMOVED", "매물 등록권이 회수되었습니다.", timestamp, notifications
    )


async def approve_purchase_request(
    request_id: str, payload: NotesRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ListingQuotaService.approve_request(
        request_id, admin.admin_id, payload.notes, timestamp
    )
    return _action_response(
        "PURCHASE_REQUEST_APPROVED", "구매 요청이 승인되었습니다.", timestamp, notifications
    )


async def reject_purchase_request(
    request_id: str, payload: ReasonRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ListingQuotaService.reject_request(
        request_id, admin.admin_id, payload.reason, timestamp
    )
    return _action_response(
        "PURCHASE_REQUEST_REJECTED", "구매 요청이 거절되었습니다.", timestamp, notifications
    )
