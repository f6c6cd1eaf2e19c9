"""listing_router: 매물 관리 및 매물 등록권 관리 라우터 모듈."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from controllers import listing_controller
from dependencies.auth import AdminContext, require_admin
from schemas.moderation_schemas import (
    FeaturedRequest,
    ListingStatusRequest,
    NotesRequest,
    OwnerNotificationRequest,
    ReasonRequest,
    SlotAmountRequest,
)
from schemas.report_schemas import AdminReportRequest

listing_router = APIRouter(prefix="/v1/admin", tags=["listings"])

StatusFilter = Literal["all", "pending", "approved", "rejected"]


# ============ 매물 ============


@listing_router.get("/listings", status_code=status.HTTP_200_OK)
async def get_listings(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    listing_status: StatusFilter = Query("all", alias="status"),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """매물 목록을 조회합니다."""
    return await listing_controller.get_listings(request, listing_status, search)


@listing_router.patch("/listings/{listing_id}/status", status_code=status.HTTP_200_OK)
async def update_listing_status(
    listing_id: str,
    payload: ListingStatusRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """매물 상태를 변경합니다 (사유 미입력 시 기본 사유)."""
    return await listing_controller.update_status(listing_id, payload, admin, request)


@listing_router.delete("/listings/{listing_id}", status_code=status.HTTP_200_OK)
async def delete_listing(
    listing_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await listing_controller.delete_listing(listing_id, admin, request)


@listing_router.patch("/listings/{listing_id}/featured", status_code=status.HTTP_200_OK)
async def set_featured(
    listing_id: str,
    payload: FeaturedRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """추천 매물 지정 여부를 변경합니다."""
    return await listing_controller.set_featured(listing_id, payload, request)


@listing_router.post("/listings/{listing_id}/report", status_code=status.HTTP_201_CREATED)
async def report_listing(
    listing_id: str,
    payload: AdminReportRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """관리자 이름으로 매물을 신고합니다 (사유 필수)."""
    return await listing_controller.report_listing(listing_id, payload, admin, request)


@listing_router.post("/listings/{listing_id}/notify", status_code=status.HTTP_200_OK)
async def notify_owner(
    listing_id: str,
    payload: OwnerNotificationRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """매물 소유자에게 알림 메일을 보냅니다."""
    return await listing_controller.notify_owner(listing_id, payload, admin, request)


# ============ 매물 등록권 ============


@listing_router.get("/listing-quota/users", status_code=status.HTTP_200_OK)
async def get_quota_users(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """사용자별 매물 등록권 현황을 조회합니다."""
    return await listing_controller.get_quota_users(request, search)


@listing_router.get("/listing-quota/requests", status_code=status.HTTP_200_OK)
async def get_purchase_requests(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    request_status: StatusFilter = Query("pending", alias="status"),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """매물 등록권 구매 요청 목록을 조회합니다."""
    return await listing_controller.get_purchase_requests(request, request_status, search)


@listing_router.post(
    "/listing-quota/users/{user_id}/add", status_code=status.HTTP_200_OK
)
async def add_slots(
    user_id: str,
    payload: SlotAmountRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    return await listing_controller.add_slots(user_id, payload, admin, request)


@listing_router.post(
    "/listing-quota/users/{user_id}/remove", status_code=status.HTTP_200_OK
)
async def remove_slots(
    user_id: str,
    payload: SlotAmountRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    return await listing_controller.remove_slots(user_id, payload, request)


@listing_router.post(
    "/listing-quota/requests/{request_id}/approve", status_code=status.HTTP_200_OK
)
async def approve_purchase_request(
    request_id: str,
    payload: NotesRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    return await listing_controller.approve_purchase_request(
        request_id, payload, admin, request
    )


@listing_router.post(
    "/listing-quota/requests/{request_id}/reject", status_code=status.HTTP_200_OK
)
async def reject_purchase_request(
    request_id: str,
    payload: ReasonRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """구매 요청을 거절합니다 (사유 필수)."""
    return await listing_controller.reject_purchase_request(
        request_id, payload, admin, request
    )
