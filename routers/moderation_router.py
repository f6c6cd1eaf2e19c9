"""moderation_router: 리뷰, 메시지, 공유 요청, 손상 신고 관리 라우터 모듈."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from controllers import moderation_controller
from dependencies.auth import AdminContext, require_admin
from schemas.moderation_schemas import (
    DamageReviewRequest,
    ReasonRequest,
    ShareProcessRequest,
)

moderation_router = APIRouter(prefix="/v1/admin", tags=["moderation"])


# ============ 리뷰 ============


@moderation_router.get("/reviews", status_code=status.HTTP_200_OK)
async def get_reviews(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    review_status: Literal["all", "pending", "approved"] = Query("pending", alias="status"),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """리뷰 목록을 조회합니다."""
    return await moderation_controller.get_reviews(request, review_status, search)


@moderation_router.post("/reviews/{review_id}/approve", status_code=status.HTTP_200_OK)
async def approve_review(
    review_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await moderation_controller.approve_review(review_id, admin, request)


@moderation_router.post("/reviews/{review_id}/reject", status_code=status.HTTP_200_OK)
async def reject_review(
    review_id: str,
    payload: ReasonRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """리뷰를 거절합니다 (사유 필수)."""
    return await moderation_controller.reject_review(review_id, payload, admin, request)


@moderation_router.delete("/reviews/{review_id}", status_code=status.HTTP_200_OK)
async def delete_review(
    review_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await moderation_controller.delete_review(review_id, admin, request)


# ============ 메시지 ============


@moderation_router.get("/messages", status_code=status.HTTP_200_OK)
async def get_messages(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """최근 메시지 목록을 조회합니다."""
    return await moderation_controller.get_messages(request, search)


@moderation_router.post(
    "/messages/{message_id}/block-sender", status_code=status.HTTP_200_OK
)
async def block_sender(
    message_id: str,
    payload: ReasonRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """메시지 발신자를 차단합니다 (사유 필수)."""
    return await moderation_controller.block_sender(message_id, payload, admin, request)


@moderation_router.delete("/messages/{message_id}", status_code=status.HTTP_200_OK)
async def delete_message(
    message_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await moderation_controller.delete_message(message_id, admin, request)


# ============ 공유 요청 ============


@moderation_router.get("/share-requests", status_code=status.HTTP_200_OK)
async def get_share_requests(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    share_status: Literal["all", "pending", "completed", "rejected"] = Query(
        "pending", alias="status"
    ),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """소셜 공유 요청 목록을 조회합니다."""
    return await moderation_controller.get_share_requests(request, share_status, search)


@moderation_router.post(
    "/share-requests/{request_id}/process", status_code=status.HTTP_200_OK
)
async def process_share_request(
    request_id: str,
    payload: ShareProcessRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """공유 요청을 완료/거절 처리합니다 (거절 시 메모 필수)."""
    return await moderation_controller.process_share_request(
        request_id, payload, admin, request
    )


# ============ 손상 신고 ============


@moderation_router.get("/damage-reports", status_code=status.HTTP_200_OK)
async def get_damage_reports(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    report_status: Literal["all", "pending", "approved", "rejected"] = Query(
        "pending", alias="status"
    ),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """차량 손상 신고 목록을 조회합니다."""
    return await moderation_controller.get_damage_reports(request, report_status, search)


@moderation_router.get(
    "/damage-reports/{report_id}/images", status_code=status.HTTP_200_OK
)
async def get_damage_images(
    report_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await moderation_controller.get_damage_images(report_id, request)


@moderation_router.post(
    "/damage-reports/{report_id}/review", status_code=status.HTTP_200_OK
)
async def review_damage_report(
    report_id: str,
    payload: DamageReviewRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """손상 신고를 승인/거절합니다 (거절 시 메모 필수)."""
    return await moderation_controller.review_damage_report(
        report_id, payload, admin, request
    )
