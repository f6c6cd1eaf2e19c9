"""user_controller: 사용자 관리(차단, 삭제, 법인 승인, 법인 서류) 컨트롤러 모듈."""

from fastapi import Request, UploadFile

from controllers.view_controller import list_view
from dependencies.auth import AdminContext
from dependencies.request_context import get_request_timestamp
from schemas.common import create_response
from schemas.moderation_schemas import DocumentReviewRequest, ReasonRequest
from services.document_service import DOCUMENTS_VIEW, DocumentService
from services.user_service import BLOCKED_USERS_VIEW, CORPORATE_VIEW, USERS_VIEW, UserService


# ============ 목록 ============


async def get_users(request: Request, corporate: str, search: str | None) -> dict:
    return await list_view(USERS_VIEW, request, search=search, corporate=corporate)


async def get_blocked_users(request: Request, search: str | None) -> dict:
    return await list_view(BLOCKED_USERS_VIEW, request, search=search)


async def get_corporate_users(
    request: Request, approval_status: str, search: str | None
) -> dict:
    return await list_view(CORPORATE_VIEW, request, search=search, status=approval_status)


async def get_block_history(user_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    history = await UserService.get_block_history(user_id)
    return create_response(
        "BLOCK_HISTORY_RETRIEVED",
        "차단 이력 조회에 성공했습니다.",
        data={"history": history},
        timestamp=timestamp,
        notifications=[],
    )


# ============ 차단 / 해제 / 삭제 ============


async def block_user(
    user_id: str, payload: ReasonRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    user, notifications = await UserService.block_user(
        user_id, admin.admin_id, payload.reason, timestamp
    )
    return create_response(
        "USER_BLOCKED",
        "사용자가 차단되었습니다.",
        data={"user": user},
        timestamp=timestamp,
        notifications=notifications,
    )


async def unblock_user(user_id: str, admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    user, notifications = await UserService.unblock_user(user_id, admin.admin_id, timestamp)
    return create_response(
        "USER_UNBLOCKED",
        "사용자 차단이 해제되었습니다.",
        data={"user": user},
        timestamp=timestamp,
        notifications=notifications,
    )


async def delete_user(user_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await UserService.delete_user(user_id, timestamp)
    return create_response(
        "USER_DELETED",
        "사용자가 삭제되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )


# ============ 법인 승인 ============


async def approve_corporate(user_id: str, admin: AdminContext, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    user, notifications = await UserService.approve_corporate(
        user_id, admin.admin_id, timestamp
    )
    return create_response(
        "CORPORATE_APPROVED",
        "법인 사용자가 승인되었습니다.",
        data={"user": user},
        timestamp=timestamp,
        notifications=notifications,
    )


async def reject_corporate(
    user_id: str, payload: ReasonRequest, admin: AdminContext, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    user, notifications = await UserService.reject_corporate(
        user_id, admin.admin_id, payload.reason, timestamp
    )
    return create_response(
        "CORPORATE_REJECTED",
        "법인 사용자가 거절되었습니다.",
        data={"user": user},
        timestamp=timestamp,
        notifications=notifications,
    )


# ============ 법인 서류 ============


async def get_documents(request: Request, document_status: str, search: str | None) -> dict:
    return await list_view(DOCUMENTS_VIEW, request, search=search, status=document_status)


async def get_user_documents(user_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    documents = await DocumentService.get_user_documents(user_id)
    return create_response(
        "DOCUMENTS_RETRIEVED",
        "서류 조회에 성공했습니다.",
        data={"documents": documents},
        timestamp=timestamp,
        notifications=[],
    )


async def review_document(
    document_id: str,
    payload: DocumentReviewRequest,
    admin: AdminContext,
    request: Request,
) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await DocumentService.review_document(
        document_id, admin.admin_id, payload.status, payload.rejection_reason, timestamp
    )
    return create_response(
        "DOCUMENT_REVIEWED",
        "서류 검토가 완료되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )


async def upload_document(
    user_id: str, document_type: str | None, file: UploadFile, request: Request
) -> dict:
    timestamp = get_request_timestamp(request)
    uploaded, notifications = await DocumentService.upload_document(
        user_id, document_type, file, timestamp
    )
    return create_response(
        "DOCUMENT_UPLOADED",
        "서류가 업로드되었습니다.",
        data={"file": uploaded},
        timestamp=timestamp,
        notifications=notifications,
    )


async def delete_document(document_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    notifications = await DocumentService.delete_document(document_id, timestamp)
    return create_response(
        "DOCUMENT_DELETED",
        "서류가 삭제되었습니다.",
        timestamp=timestamp,
        notifications=notifications,
    )
