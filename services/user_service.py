"""user_service: 사용자 관리(차단, 해제, 삭제, 법인 승인) 비즈니스 로직을 처리하는 서비스."""

import logging
from typing import Any

from core.config import settings
from models import user_models
from realtime.live_view import TableWatch
from schemas.common import notification
from services.dispatcher import dispatch
from services.notification_service import NotificationService
from services.views import ViewDefinition, is_truncated
from utils.exceptions import bad_request_error
from utils.formatters import format_row
from utils.upload import CORPORATE_DOCUMENTS_FOLDER, PROFILE_IMAGES_FOLDER, delete_folder

logger = logging.getLogger(__name__)

UNBLOCK_HISTORY_REASON = "차단 해제"

APPROVAL_LABELS = {
    "pending": "승인 대기",
    "approved": "승인됨",
    "rejected": "거절됨",
}


def serialize_user(row: dict[str, Any]) -> dict[str, Any]:
    data = format_row(row)
    for flag in ("is_corporate", "is_blocked", "phone_verified", "email_verified"):
        if flag in data and data[flag] is not None:
            data[flag] = bool(data[flag])
    if data.get("approval_status"):
        data["approval_label"] = APPROVAL_LABELS.get(
            data["approval_status"], data["approval_status"]
        )
    return data


def _bool_filter(value: str | None) -> bool | None:
    if value in (None, "", "all"):
        return None
    return value == "true"


class UserService:
    """사용자 관리 서비스."""

    # ============ 목록 ============

    @staticmethod
    async def list_users(corporate: str | None = "false") -> tuple[list[dict], bool]:
        rows = await user_models.get_users(_bool_filter(corporate))
        return [serialize_user(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def list_blocked_users() -> tuple[list[dict], bool]:
        rows = await user_models.get_blocked_users()
        return [serialize_user(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def list_corporate_users(status: str | None = "pending") -> tuple[list[dict], bool]:
        approval_status = None if status in (None, "", "all") else status
        rows = await user_models.get_corporate_users(approval_status)
        return [serialize_user(r) for r in rows], is_truncated(rows)

    @staticmethod
    async def get_block_history(user_id: str) -> list[dict]:
        rows = await user_models.get_block_history(user_id)
        return [format_row(r) for r in rows]

    @staticmethod
    async def _refetch_user(user_id: str) -> dict | None:
        try:
            row = await user_models.get_user_row(user_id)
        except Exception:
            logger.exception(f"작업 후 사용자 재조회 실패: {user_id}")
            return None
        return serialize_user(row) if row else None

    @staticmethod
    async def _record_history(user_id: str, admin_id: str, reason: str) -> None:
        # 이력 기록은 부가 작업이며 실패해도 차단/해제 결과는 유지
        try:
            await user_models.add_block_history(user_id, admin_id, reason)
        except Exception:
            logger.exception(f"차단 이력 기록 실패: {user_id}")

    # ============ 차단 / 해제 ============

    @staticmethod
    async def block_user(
        user_id: str, admin_id: str, reason: str | None, timestamp: str
    ) -> tuple[dict | None, list[dict]]:
        """사용자를 차단합니다.

        이미 차단된 사용자 처리는 프로시저에 맡기며 클라이언트 측 분기는 없습니다.

        Raises:
            HTTPException: 400 사유 누락, 409 처리 중, 502 호출 실패.
        """
        if not reason:
            raise bad_request_error(
                "block_reason_required", timestamp, "차단 사유를 입력해주세요."
            )

        _, notifications = await dispatch(
            "user",
            user_id,
            "block_user",
            lambda: user_models.block_user(user_id, admin_id, reason),
            timestamp=timestamp,
            success_message=f"사용자가 차단되었습니다 ({settings.BLOCK_DURATION_DAYS}일).",
            failure_message="사용자를 차단하지 못했습니다.",
        )
        await UserService._record_history(user_id, admin_id, reason)
        return await UserService._refetch_user(user_id), notifications

    @staticmethod
    async def unblock_user(
        user_id: str, admin_id: str, timestamp: str
    ) -> tuple[dict | None, list[dict]]:
        """사용자 차단을 해제합니다 (차단되지 않은 사용자도 같은 호출)."""
        _, notifications = await dispatch(
            "user",
            user_id,
            "unblock_user",
            lambda: user_models.unblock_user(user_id, admin_id),
            timestamp=timestamp,
            success_message="사용자 차단이 해제되었습니다.",
            failure_message="사용자 차단을 해제하지 못했습니다.",
        )
        await UserService._record_history(user_id, admin_id, UNBLOCK_HISTORY_REASON)
        return await UserService._refetch_user(user_id), notifications

    @staticmethod
    async def delete_user(user_id: str, timestamp: str) -> list[dict]:
        _, notifications = await dispatch(
            "user",
            user_id,
            "delete_user",
            lambda: user_models.delete_user_data(user_id),
            timestamp=timestamp,
            success_message="사용자와 관련 데이터가 삭제되었습니다.",
            failure_message="사용자를 삭제하지 못했습니다.",
        )
        # 업로드된 서류/프로필 파일 정리 (실패해도 삭제 결과는 유지)
        for folder in (CORPORATE_DOCUMENTS_FOLDER, PROFILE_IMAGES_FOLDER):
            try:
                await delete_folder(f"{folder}/{user_id}/")
            except Exception:
                logger.exception(f"사용자 파일 정리 실패: {folder}/{user_id}")
                notifications.append(
                    notification("error", "사용자 파일 일부를 삭제하지 못했습니다.")
                )
                break
        return notifications

    # ============ 법인 승인 ============

    @staticmethod
    async def approve_corporate(
        user_id: str, admin_id: str, timestamp: str
    ) -> tuple[dict | None, list[dict]]:
        """법인 사용자를 승인하고 결과를 메일로 알립니다 (메일 실패는 알림만)."""
        _, notifications = await dispatch(
            "user",
            user_id,
            "corporate_approve",
            lambda: user_models.approve_corporate_user(user_id, admin_id),
            timestamp=timestamp,
            success_message="법인 사용자가 승인되었습니다.",
            failure_message="법인 사용자를 승인하지 못했습니다.",
        )
        sent = await NotificationService.try_notify(
            user_id,
            "법인 회원 승인 안내",
            "법인 회원 신청이 승인되었습니다. 이제 법인 회원 기능을 이용하실 수 있습니다.",
            admin_id=admin_id,
        )
        if not sent:
            notifications.append(notification("error", "승인 안내 메일을 보내지 못했습니다."))
        return await UserService._refetch_user(user_id), notifications

    @staticmethod
    async def reject_corporate(
        user_id: str, admin_id: str, reason: str | None, timestamp: str
    ) -> tuple[dict | None, list[dict]]:
        if not reason:
            raise bad_request_error(
                "rejection_reason_required", timestamp, "거절 사유를 입력해주세요."
            )

        _, notifications = await dispatch(
            "user",
            user_id,
            "corporate_reject",
            lambda: user_models.reject_corporate_user(user_id, admin_id, reason),
            timestamp=timestamp,
            success_message="법인 사용자가 거절되었습니다.",
            failure_message="법인 사용자를 거절하지 못했습니다.",
        )
        sent = await NotificationService.try_notify(
            user_id,
            "법인 회원 신청 결과 안내",
            f"법인 회원 신청이 거절되었습니다. 사유: {reason}",
            admin_id=admin_id,
        )
        if not sent:
            notifications.append(notification("error", "거절 안내 메일을 보내지 못했습니다."))
        return await UserService._refetch_user(user_id), notifications


USERS_VIEW = ViewDefinition(
    name="users",
    loader=UserService.list_users,
    search_fields=("full_name", "email", "role"),
    watches=(TableWatch("users"),),
    error_message="사용자 목록을 불러오지 못했습니다.",
    filters={"corporate": "false"},
)

BLOCKED_USERS_VIEW = ViewDefinition(
    name="blocked_users",
    loader=UserService.list_blocked_users,
    search_fields=("full_name", "email", "company_name", "block_reason"),
    # 해제 이벤트(is_blocked=false)도 받아야 하므로 필터 없이 구독
    watches=(TableWatch("users"),),
    error_message="차단된 사용자 목록을 불러오지 못했습니다.",
)

CORPORATE_VIEW = ViewDefinition(
    name="corporate",
    loader=UserService.list_corporate_users,
    search_fields=("full_name", "email", "company_name", "tax_number"),
    watches=(TableWatch("users", "is_corporate=eq.true"),),
    error_message="법인 사용자 목록을 불러오지 못했습니다.",
    filters={"status": "pending"},
)
