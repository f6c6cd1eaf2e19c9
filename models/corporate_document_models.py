"""corporate_document_models: 법인 인증 서류 데이터 모델 모듈."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from core.config import settings
from database.connection import call_procedure, fetch_dicts, get_connection, transactional


@dataclass(frozen=True)
class CorporateDocument:
    """법인 인증 서류 데이터 클래스.

    Attributes:
        file_path: 스토리지 내 객체 경로 (corporate-documents/<user_id>/...).
    """

    id: str
    user_id: str
    document_type: str
    file_name: str
    file_path: str
    file_url: str
    status: str
    created_at: datetime | None = None


async def get_documents(status: str | None = None) -> list[dict]:
    """서류 목록을 제출자 정보와 함께 조회합니다."""
    query = """
        SELECT d.id, d.user_id, d.document_type, d.file_name, d.file_path, d.file_url,
               d.file_size, d.mime_type, d.status, d.rejection_reason,
               d.reviewed_by, d.reviewed_at, d.created_at,
               u.full_name AS user_full_name, u.email AS user_email,
               u.company_name AS user_company_name
        FROM corporate_documents d
        LEFT JOIN users u ON d.user_id = u.id
    """
    params: list[Any] = []
    if status:
        query += " WHERE d.status = %s"
        params.append(status)
    query += " ORDER BY d.created_at DESC LIMIT %s"
    params.append(settings.LIST_FETCH_LIMIT)
    return await fetch_dicts(query, params)


async def get_user_documents(user_id: str) -> list[dict]:
    return await fetch_dicts(
        """
        SELECT id, user_id, document_type, file_name, file_path, file_url,
               file_size, mime_type, status, rejection_reason, created_at
        FROM corporate_documents
        WHERE user_id = %s
        ORDER BY created_at DESC
        """,
        (user_id,),
    )


async def get_document(document_id: str) -> CorporateDocument | None:
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, user_id, document_type, file_name, file_path, file_url,
                       status, created_at
                FROM corporate_documents WHERE id = %s
                """,
                (document_id,),
            )
            row = await cur.fetchone()
            if not row:
                return None
            return CorporateDocument(
                id=row[0],
                user_id=row[1],
                document_type=row[2],
                file_name=row[3],
                file_path=row[4],
                file_url=row[5],
                status=row[6],
                created_at=row[7],
            )


async def add_document(
    user_id: str,
    document_type: str,
    file_name: str,
    file_path: str,
    file_url: str,
    file_size: int,
    mime_type: str,
) -> None:
    """업로드된 서류를 대기(pending) 상태로 등록합니다."""
    async with transactional() as cur:
        await cur.execute(
            """
            INSERT INTO corporate_documents
                (user_id, document_type, file_name, file_path, file_url,
                 file_size, mime_type, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s, 'pending')
            """,
            (user_id, document_type, file_name, file_path, file_url, file_size, mime_type),
        )


async def delete_document(document_id: str) -> bool:
    """서류 레코드를 삭제합니다."""
    async with transactional() as cur:
        await cur.execute("DELETE FROM corporate_documents WHERE id = %s", (document_id,))
        return cur.rowcount > 0


async def review_document(
    document_id: str, admin_id: str, status: str, rejection_reason: str | None
) -> None:
    """서류를 승인/거절합니다 (admin_review_document 프로시저)."""
    await call_procedure(
        "admin_review_document",
        {
            "p_document_id": document_id,
            "p_admin_id": admin_id,
            "p_status": status,
            "p_rejection_reason": rejection_reason,
        },
    )
