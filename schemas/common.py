"""common: 공통 응답 유틸리티 모듈.

API 응답 생성 및 공통 데이터 변환 함수를 정의합니다.
"""

from datetime import datetime
from typing import Any, Literal

NotificationLevel = Literal["success", "error", "info"]


def notification(level: NotificationLevel, message: str) -> dict[str, str]:
    """관리자 UI에 잠시 표시될 알림(토스트) 항목을 생성합니다."""
    return {"level": level, "message": message}


def create_response(
    code: str,
    message: str,
    data: dict[str, Any] | None = None,
    timestamp: str | None = None,
    notifications: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    """표준 API 응답 딕셔너리를 생성합니다.

    Args:
        code: 응답 코드 (예: "SUCCESS", "REPORT_APPROVED").
        message: 사용자에게 표시할 메시지.
        data: 응답 데이터 (기본값: 빈 딕셔너리).
        timestamp: 타임스탬프 (기본값: 현재 시간).
        notifications: 순서대로 표시할 알림 목록 (기본값: message 하나의 성공 알림).

    Returns:
        표준 형식의 응답 딕셔너리.
    """
    return {
        "code": code,
        "message": message,
        "data": data if data is not None else {},
        "errors": [],
        "notifications": (
            notifications
            if notifications is not None
            else [notification("success", message)]
        ),
        "timestamp": timestamp or datetime.now().strftime("%Y-%m-%dT%H:%M:%SZ"),
    }


def build_person_dict(full_name: str | None, email: str | None) -> dict[str, Any] | None:
    """JOIN된 사용자 표시 정보를 딕셔너리로 만듭니다.

    조인 대상이 없으면 None을 반환합니다.
    """
    if full_name is None and email is None:
        return None
    return {"full_name": full_name, "email": email}


def serialize_admin(admin) -> dict[str, Any]:
    """AdminCredential 객체를 API 응답용 딕셔너리로 변환합니다.

    Args:
        admin: AdminCredential 데이터 객체.

    Returns:
        관리자 정보 딕셔너리 (비밀번호 해시 제외).
    """
    return {
        "admin_id": admin.id,
        "username": admin.username,
        "email": admin.email,
        "full_name": admin.full_name,
        "two_factor_enabled": admin.two_factor_enabled,
    }
