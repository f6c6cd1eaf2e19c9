"""message_models: 사용자 간 메시지 조회 및 관리자 삭제 모듈."""

from core.config import settings
from database.connection import call_procedure, fetch_dicts


async def get_messages() -> list[dict]:
    """최근 메시지를 발신자/수신자 정보와 함께 조회합니다."""
    return await fetch_dicts(
        """
        SELECT m.id, m.sender_id, m.receiver_id, m.listing_id, m.content,
               m.`read`, m.created_at,
               s.full_name AS sender_full_name, s.email AS sender_email,
               r.full_name AS receiver_full_name, r.email AS receiver_email
        FROM messages m
        LEFT JOIN users s ON m.sender_id = s.id
        LEFT JOIN users r ON m.receiver_id = r.id
        ORDER BY m.created_at DESC
        LIMIT %s
        """,
        (settings.LIST_FETCH_LIMIT,),
    )


async def get_message_sender(message_id: str) -> str | None:
    """메시지 발신자 ID를 조회합니다."""
    rows = await fetch_dicts(
        "SELECT sender_id FROM messages WHERE id = %s", (message_id,)
    )
    return rows[0]["sender_id"] if rows else None


async def delete_message(message_id: str, admin_id: str) -> None:
    """메시지를 삭제합니다 (admin_delete_message 프로시저)."""
    await call_procedure(
        "admin_delete_message",
        {"p_message_id": message_id, "p_admin_id": admin_id},
    )
