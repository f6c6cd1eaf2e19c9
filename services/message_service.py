"""message_service: 사용자 간 메시지(채팅) 모니터링 서비스."""

from typing import Any

from models import message_models, user_models
from realtime.live_view import TableWatch
from services.dispatcher import dispatch
from services.views import ViewDefinition, is_truncated
from utils.exceptions import bad_request_error, not_found_error
from utils.formatters import format_row, nest_prefixed


def serialize_message(row: dict[str, Any]) -> dict[str, Any]:
    data = format_row(nest_prefixed(nest_prefixed(row, "sender"), "receiver"))
    data["read"] = bool(data.get("read"))
    return data


class MessageService:
    """메시지 관리 서비스."""

    @staticmethod
    async def list_messages() -> tuple[list[dict], bool]:
        rows = await message_models.get_messages()
        return [serialize_message(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def block_sender(
        message_id: str, admin_id: str, reason: str | None, timestamp: str
    ) -> list[dict]:
        """메시지 발신자를 차단합니다.

        Raises:
            HTTPException: 400 사유 누락, 404 메시지 없음, 409 처리 중, 502 호출 실패.
        """
        if not reason:
            raise bad_request_error(
                "block_reason_required", timestamp, "차단 사유를 입력해주세요."
            )
        sender_id = await message_models.get_message_sender(message_id)
        if not sender_id:
            raise not_found_error("message", timestamp)

        _, notifications = await dispatch(
            "user",
            sender_id,
            "block_user",
            lambda: user_models.block_user(sender_id, admin_id, reason),
            timestamp=timestamp,
            success_message="발신자가 차단되었습니다.",
            failure_message="발신자를 차단하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def delete_message(message_id: str, admin_id: str, timestamp: str) -> list[dict]:
        _, notifications = await dispatch(
            "message",
            message_id,
            "message_delete",
            lambda: message_models.delete_message(message_id, admin_id),
            timestamp=timestamp,
            success_message="메시지가 삭제되었습니다.",
            failure_message="메시지를 삭제하지 못했습니다.",
        )
        return notifications


MESSAGES_VIEW = ViewDefinition(
    name="messages",
    loader=MessageService.list_messages,
    search_fields=(
        "content",
        "sender.full_name",
        "sender.email",
        "receiver.full_name",
        "receiver.email",
    ),
    watches=(TableWatch("messages"),),
    error_message="메시지 목록을 불러오지 못했습니다.",
)
