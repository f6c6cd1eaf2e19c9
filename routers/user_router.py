"""user_router: 사용자 관리 라우터 모듈.

사용자 목록, 차단/해제, 삭제, 법인 승인, 법인 서류 엔드포인트를 제공합니다.
"""

from typing import Literal

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from controllers import user_controller
from dependencies.auth import AdminContext, require_admin
from schemas.moderation_schemas import DocumentReviewRequest, ReasonRequest

user_router = APIRouter(prefix="/v1/admin", tags=["users"])
"""사용자 관리 라우터 인스턴스."""

ApprovalStatus = Literal["all", "pending", "approved", "rejected"]


# ============ 사용자 ============


@user_router.get("/users", status_code=status.HTTP_200_OK)
async def get_users(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    corporate: Literal["all", "true", "false"] = Query("false"),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """사용자 목록을 조회합니다 (개인/법인 필터)."""
    return await user_controller.get_users(request, corporate, search)


@user_router.get("/users/blocked", status_code=status.HTTP_200_OK)
async def get_blocked_users(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """차단된 사용자 목록을 조회합니다."""
    return await user_controller.get_blocked_users(request, search)


@user_router.get("/users/{user_id}/block-history", status_code=status.HTTP_200_OK)
async def get_block_history(
    user_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await user_controller.get_block_history(user_id, request)


@user_router.post("/users/{user_id}/block", status_code=status.HTTP_200_OK)
async def block_user(
    user_id: str,
    payload: ReasonRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """사용자를 차단합니다 (사유 필수)."""
    return await user_controller.block_user(user_id, payload, admin, request)


@user_router.post("/users/{user_id}/unblock", status_code=status.HTTP_200_OK)
async def unblock_user(
    user_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    """사용자 차단을 해제합니다."""
    return await user_controller.unblock_user(user_id, admin, request)


@user_router.delete("/users/{user_id}", status_code=status.HTTP_200_OK)
async def delete_user(
    user_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    """사용자와 관련 데이터를 삭제합니다."""
    return await user_controller.delete_user(user_id, request)


# ============ 법인 승인 ============


@user_router.get("/corporate", status_code=status.HTTP_200_OK)
async def get_corporate_users(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    approval_status: ApprovalStatus = Query("pending", alias="status"),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """법인 사용자 목록을 조회합니다 (승인 상태 필터)."""
    return await user_controller.get_corporate_users(request, approval_status, search)


@user_router.post("/corporate/{user_id}/approve", status_code=status.HTTP_200_OK)
async def approve_corporate(
    user_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await user_controller.approve_corporate(user_id, admin, request)


@user_router.post("/corporate/{user_id}/reject", status_code=status.HTTP_200_OK)
async def reject_corporate(
    user_id: str,
    payload: ReasonRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """법인 사용자를 거절합니다 (사유 필수)."""
    return await user_controller.reject_corporate(user_id, payload, admin, request)


# ============ 법인 서류 ============


@user_router.get("/corporate/documents", status_code=status.HTTP_200_OK)
async def get_documents(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    document_status: ApprovalStatus = Query("pending", alias="status"),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """법인 서류 목록을 조회합니다."""
    return await user_controller.get_documents(request, document_status, search)


@user_router.get("/corporate/{user_id}/documents", status_code=status.HTTP_200_OK)
async def get_user_documents(
    user_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await user_controller.get_user_documents(user_id, request)


@user_router.post(
    "/corporate/{user_id}/documents", status_code=status.HTTP_201_CREATED
)
async def upload_document(
    user_id: str,
    request: Request,
    admin: AdminContext = Depends(require_admin),
    document_type: str | None = Form(None, description="서류 종류"),
    file: UploadFile = File(..., description="서류 파일 (JPEG, PNG, PDF / 10MB)"),
) -> dict:
    """사용자를 대신해 법인 서류를 업로드합니다."""
    return await user_controller.upload_document(user_id, document_type, file, request)


@user_router.post(
    "/corporate/documents/{document_id}/review", status_code=status.HTTP_200_OK
)
async def review_document(
    document_id: str,
    payload: DocumentReviewRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """법인 서류를 승인/거절합니다 (거절 시 사유 필수)."""
    return await user_controller.review_document(document_id, payload, admin, request)


@user_router.delete(
    "/corporate/documents/{document_id}", status_code=status.HTTP_200_OK
)
async def delete_document(
    document_id: str, request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    """법인 서류 레코드를 삭제합니다 (파일은 유지)."""
    return await user_controller.delete_document(document_id, request)
