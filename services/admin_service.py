"""admin_service: 관리자 계정 관리 서비스."""

import asyncio
import logging

from fastapi import HTTPException, status

from models import admin_models
from realtime.live_view import TableWatch
from services.dispatcher import dispatch
from services.views import ViewDefinition, is_truncated
from utils.exceptions import bad_request_error, not_found_error
from utils.formatters import format_row
from utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)


class AdminService:
    """관리자 계정 서비스."""

    @staticmethod
    async def list_admins() -> tuple[list[dict], bool]:
        rows = await admin_models.get_admins()
        items = []
        for row in rows:
            data = format_row(row)
            data["is_active"] = bool(data.get("is_active"))
            data["two_factor_enabled"] = bool(data.get("two_factor_enabled"))
            items.append(data)
        return items, is_truncated(rows)

    @staticmethod
    async def create_admin(
        username: str,
        email: str,
        full_name: str,
        password: str,
        creator_id: str,
        timestamp: str,
    ) -> tuple[dict, list[dict]]:
        """관리자를 생성합니다. 비밀번호는 호출 전에 bcrypt로 해싱합니다."""
        password_hash = await asyncio.to_thread(hash_password, password)
        created, notifications = await dispatch(
            "admin",
            username,
            "admin_create",
            lambda: admin_models.create_admin(
                username, email, full_name, password_hash, creator_id
            ),
            timestamp=timestamp,
            success_message="관리자가 생성되었습니다.",
            failure_message="관리자를 생성하지 못했습니다.",
        )
        return format_row(created), notifications

    @staticmethod
    async def delete_admin(admin_id: str, deleter_id: str, timestamp: str) -> list[dict]:
        """관리자를 삭제합니다 (본인은 삭제 불가).

        Raises:
            HTTPException: 400 본인 삭제, 409 처리 중, 502 호출 실패.
        """
        if admin_id == deleter_id:
            raise bad_request_error(
                "cannot_delete_self", timestamp, "본인 계정은 삭제할 수 없습니다."
            )
        _, notifications = await dispatch(
            "admin",
            admin_id,
            "admin_delete",
            lambda: admin_models.delete_admin(admin_id, deleter_id),
            timestamp=timestamp,
            success_message="관리자가 삭제되었습니다.",
            failure_message="관리자를 삭제하지 못했습니다.",
        )
        return notifications

    @staticmethod
    async def change_password(
        admin_id: str, current_password: str, new_password: str, timestamp: str
    ) -> list[dict]:
        """본인 비밀번호를 변경합니다.

        Raises:
            HTTPException: 400 새 비밀번호가 기존과 같음, 401 현재 비밀번호 불일치,
                404 관리자 없음, 502 호출 실패.
        """
        admin = await admin_models.get_admin_by_id(admin_id)
        if not admin:
            raise not_found_error("admin", timestamp)

        if not await asyncio.to_thread(verify_password, current_password, admin.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={
                    "error": "invalid_password",
                    "timestamp": timestamp,
                    "message": "현재 비밀번호가 올바르지 않습니다.",
                },
            )
        if current_password == new_password:
            raise bad_request_error(
                "same_password", timestamp, "새 비밀번호는 현재 비밀번호와 달라야 합니다."
            )

        password_hash = await asyncio.to_thread(hash_password, new_password)
        _, notifications = await dispatch(
            "admin",
            admin_id,
            "password_change",
            lambda: admin_models.update_password(admin_id, password_hash),
            timestamp=timestamp,
            success_message="비밀번호가 변경되었습니다.",
            failure_message="비밀번호를 변경하지 못했습니다.",
        )
        return notifications


ADMINS_VIEW = ViewDefinition(
    name="admins",
    loader=AdminService.list_admins,
    search_fields=("username", "email", "full_name"),
    watches=(TableWatch("admin_credentials"),),
    error_message="관리자 목록을 불러오지 못했습니다.",
)
