"""moderation_controller: 리뷰, 메시지, 공유 요청, 손상 신고 관리 컨트롤러 모듈."""

from fastapi import Request

from controllers.view_controller import list_view
from dependencies.auth import AdminContext
from dependencies.request_context import get_request_timestamp
from schemas.common import create_response
from schemas.moderation_schemas import (
    DamageReviewRequest,
    ReasonRequest,
    ShareProcessRequest,
)
from services.damage_report_service import DAMAGE_REPORTS_VIEW, DamageReportService
from services.message_service import MESSAGES_VIEW, MessageService
from services.review_service import REVIEWS_VIEW, ReviewService
from services.share_request_service import SHARE_REQUESTS_VIEW, ShareRequestService


def _action_response(code: str, message: str, timestamp: str, notifications: list) -> dict:
    return create_response(code, message, timestamp=timestamp, notifications=notifications)


# ============ 리뷰 ============


async def get_reviews(request: Request, review_status: str, search: str | None) -> dict:
    return await list_view(REVIEWS_VIEW, request, search=search, status=review_status)


async def approve_review(review_id: str, admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ReviewService.approve_review(review_id, admin.admin_id, timestamp)
    return _action_response("REVIEW_APPROVED", "리뷰가 승인되었습니다.", timestamp, notifications)


async def reject_review(
    review_id: str, payload: ReasonRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ReviewService.reject_review(
        review_id, admin.admin_id, payload.reason, timestamp
    )
    return _action_response("REVIEW_REJECTED", "리뷰가 거절되었습니다.", timestamp, notifications)


async def delete_review(review_id: str, admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await ReviewService.delete_review(review_id, admin.admin_id, timestamp)
    return _action_response("REVIEW_DELETED", "리뷰가 삭제되었습니다.", timestamp, notifications)


# ============ 메시지 ============


async def get_messages(request: Request, search: str | None) -> dict:
    return await list_view(MESSAGES_VIEW, request, search=search)


async def block_sender(
    message_id: str, payload: ReasonRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await MessageService.block_sender(
        message_id, admin.admin_id, payload.reason, timestamp
    )
    return _action_response("SENDER_BLOCKED", "발신자가 차단되었습니다.", timestamp, notifications)


async def delete_message(message_id: str, admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await MessageService.delete_message(message_id, admin.admin_id, timestamp)
    return _action_response("MESSAGE_DELETED", "메시지가 삭제되었습니다.", timestamp, notifications)


# ============ 공유 요청 ============


async def get_share_requests(request: Request, share_status: str, search: str | None) -> dict:
    return await list_view(SHARE_REQUESTS_VIEW, request, search=search, status=share_status)


async def process_share_request(
    request_id: str, payload: ShareProcessRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    if payload.status == "completed":
        notifications = await ShareRequestService.complete_request(
            request_id, admin.admin_id, payload.notes, timestamp
        )
        return _action_response(
            "SHARE_REQUEST_COMPLETED", "공유 요청이 완료 처리되었습니다.", timestamp, notifications
        )

    notifications = await ShareRequestService.reject_request(
        request_id, admin.admin_id, payload.notes, timestamp
    )
    return _action_response(
        "SHARE_REQUEST_REJECTED", "공유 요청이 거절되었습니다.", timestamp, notifications
    )


# ============ 손상 신고 ============


async def get_damage_reports(request: Request, report_status: str, search: str | None) -> dict:
    return await list_view(DAMAGE_REPORTS_VIEW, request, search=search, status=report_status)


async def get_damage_images(report_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    images = await DamageReportService.get_images(report_id)
    return create_response(
        "DAMAGE_IMAGES_RETRIEVED",
        "첨부 이미지 조회에 성공했습니다.",
        data={"images": images},
        timestamp=timestamp,
        notifications=[],
    )


async def review_damage_report(
    report_id: str, payload: DamageReviewRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await DamageReportService.review(
        report_id, admin.admin_id, payload.status, payload.notes, timestamp
    )
    return _action_response(
        "DAMAGE_REPORT_REVIEWED", "손상 신고가 처리되었습니다.", timestamp, notifications
    )
