"""formatters: 데이터 포맷팅을 위한 유틸리티 모듈."""

from datetime import date, datetime
from typing import Any


def format_datetime(dt: datetime | str | None) -> str | None:
    """datetime 객체를 ISO 8601 포맷 문자열로 변환합니다.

    Args:
        dt: 변환할 datetime 객체 또는 문자열.

    Returns:
        ISO 8601 포맷 문자열 (예: "2024-01-01T12:00:00Z").
        입력이 None이면 None 반환.
        입력이 이미 문자열이면 그대로 반환.
    """
    if not dt:
        return None
    if isinstance(dt, str):
        return dt
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_row(row: dict[str, Any]) -> dict[str, Any]:
    """행의 datetime/date 값을 문자열로 바꾼 사본을 반환합니다 (중첩 딕셔너리 포함)."""
    formatted: dict[str, Any] = {}
    for key, value in row.items():
        if isinstance(value, datetime):
            formatted[key] = format_datetime(value)
        elif isinstance(value, date):
            formatted[key] = value.isoformat()
        elif isinstance(value, dict):
            formatted[key] = format_row(value)
        else:
            formatted[key] = value
    return formatted


def nest_prefixed(row: dict[str, Any], prefix: str, target: str | None = None) -> dict[str, Any]:
    """JOIN 별칭 컬럼(prefix_*)을 하나의 중첩 딕셔너리로 묶습니다.

    예: {"user_full_name": "A", "user_email": "a@x"} → {"user": {"full_name": "A", "email": "a@x"}}
    모든 값이 None이면(조인 대상 없음) 중첩 값도 None이 됩니다.
    """
    head = f"{prefix}_"
    nested = {
        key[len(head):]: row[key] for key in list(row) if key.startswith(head)
    }
    result = {key: value for key, value in row.items() if not key.startswith(head)}
    result[target or prefix] = (
        nested if any(value is not None for value in nested.values()) else None
    )
    return result
