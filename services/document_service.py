"""document_service: 법인 인증 서류 조회, 검토, 대리 업로드 서비스."""

import logging
from typing import Any

from fastapi import UploadFile

from models import corporate_document_models, user_models
from realtime.live_view import TableWatch
from schemas.common import notification
from services.dispatcher import dispatch
from services.views import ViewDefinition, is_truncated
from utils.exceptions import bad_request_error, not_found_error
from utils.formatters import format_row, nest_prefixed
from utils.upload import (
    CORPORATE_DOCUMENT_MAX_MB,
    CORPORATE_DOCUMENTS_FOLDER,
    DOCUMENT_MIME_TYPES,
    delete_files,
    signed_url,
    upload_file,
)

logger = logging.getLogger(__name__)

DOCUMENT_STATUS_LABELS = {
    "pending": "검토 대기",
    "approved": "승인됨",
    "rejected": "거절됨",
}


def serialize_document(row: dict[str, Any]) -> dict[str, Any]:
    data = format_row(nest_prefixed(row, "user"))
    data["status_label"] = DOCUMENT_STATUS_LABELS.get(data.get("status"), data.get("status"))
    return data


class DocumentService:
    """법인 서류 서비스."""

    @staticmethod
    async def list_documents(status: str | None = "pending") -> tuple[list[dict], bool]:
        status_filter = None if status in (None, "", "all") else status
        rows = await corporate_document_models.get_documents(status_filter)
        return [serialize_document(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def get_user_documents(user_id: str) -> list[dict]:
        """사용자의 서류를 조회합니다. 서류는 비공개이므로 만료 URL을 함께 반환합니다."""
        rows = await corporate_document_models.get_user_documents(user_id)
        documents = []
        for row in rows:
            data = serialize_document(row)
            if data.get("file_path"):
                data["signed_url"] = await signed_url(data["file_path"])
            documents.append(data)
        return documents

    @staticmethod
    async def review_document(
        document_id: str,
        admin_id: str,
        status: str,
        rejection_reason: str | None,
        timestamp: str,
    ) -> list[dict]:
        """서류를 승인하거나 거절합니다 (거절 시 사유 필수).

        Raises:
            HTTPException: 400 사유 누락, 409 처리 중, 502 호출 실패.
        """
        if status == "rejected" and not rejection_reason:
            raise bad_request_error(
                "rejection_reason_required", timestamp, "거절 사유를 입력해주세요."
            )

        approved = status == "approved"
        _, notifications = await dispatch(
            "document",
            document_id,
            "document_review",
            lambda: corporate_document_models.review_document(
                document_id, admin_id, status, None if approved else rejection_reason
            ),
            timestamp=timestamp,
            success_message="서류가 승인되었습니다." if approved else "서류가 거절되었습니다.",
            failure_message="서류 검토 결과를 저장하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def upload_document(
        user_id: str,
        document_type: str | None,
        file: UploadFile,
        timestamp: str,
    ) -> tuple[dict, list[dict]]:
        """사용자를 대신해 서류를 업로드하고 대기 상태로 등록합니다.

        Raises:
            HTTPException: 400 형식/크기 오류, 404 사용자 없음, 502 업로드/등록 실패.
        """
        if not document_type:
            raise bad_request_error(
                "document_type_required", timestamp, "서류 종류를 선택해주세요."
            )
        if not await user_models.get_user_contact(user_id):
            raise not_found_error("user", timestamp)

        uploaded = await upload_file(
            file,
            CORPORATE_DOCUMENTS_FOLDER,
            user_id,
            CORPORATE_DOCUMENT_MAX_MB,
            DOCUMENT_MIME_TYPES,
        )
        _, notifications = await dispatch(
            "user_documents",
            user_id,
            "document_upload",
            lambda: corporate_document_models.add_document(
                user_id,
                document_type,
                uploaded["file_name"],
                uploaded["path"],
                uploaded["url"],
                uploaded["file_size"],
                uploaded["mime_type"],
            ),
            timestamp=timestamp,
            success_message="서류가 업로드되었습니다.",
            failure_message="서류를 등록하지 못했습니다.",
        )
        return uploaded, notifications

    @staticmethod
    async def delete_document(document_id: str, timestamp: str) -> list[dict]:
        """서류 레코드와 스토리지 파일을 삭제합니다.

        파일 삭제 실패는 오류 알림으로만 보고합니다.

        Raises:
            HTTPException: 404 서류 없음, 409 처리 중, 502 호출 실패.
        """
        document = await corporate_document_models.get_document(document_id)
        if not document:
            raise not_found_error("document", timestamp)

        deleted, notifications = await dispatch(
            "document",
            document_id,
            "document_delete",
            lambda: corporate_document_models.delete_document(document_id),
            timestamp=timestamp,
            success_message="서류가 삭제되었습니다.",
            failure_message="서류를 삭제하지 못했습니다.",
        )
        if not deleted:
            raise not_found_error("document", timestamp)

        try:
            await delete_files([document.file_path])
        except Exception:
            logger.exception(f"서류 파일 삭제 실패: {document.file_path}")
            notifications.append(notification("error", "서류 파일을 삭제하지 못했습니다."))
        return notifications


DOCUMENTS_VIEW = ViewDefinition(
    name="documents",
    loader=DocumentService.list_documents,
    search_fields=("file_name", "document_type", "user.full_name", "user.email", "user.company_name"),
    watches=(TableWatch("corporate_documents"),),
    error_message="서류 목록을 불러오지 못했습니다.",
    filters={"status": "pending"},
)
