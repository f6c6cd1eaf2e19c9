"""filters: 목록 화면의 검색어 필터와 결과 요약 유틸리티."""

from typing import Any, Iterable

EMPTY_NO_DATA = "no_data"
EMPTY_NO_MATCH = "no_match"


def _lookup(item: dict[str, Any], path: str) -> Any:
    """점 표기 경로("listing.brand")로 중첩 딕셔너리 값을 찾습니다."""
    value: Any = item
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def matches_search(item: dict[str, Any], fields: Iterable[str], search: str | None) -> bool:
    """검색어가 필드 중 하나에 대소문자 구분 없이 포함되는지 확인합니다.

    빈 검색어는 모든 항목과 일치하고, None 필드는 어떤 검색어와도 일치하지 않습니다.
    """
    if not search:
        return True
    needle = search.strip().lower()
    if not needle:
        return True
    for path in fields:
        value = _lookup(item, path)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def filter_items(
    items: list[dict[str, Any]], fields: Iterable[str], search: str | None
) -> list[dict[str, Any]]:
    fields = tuple(fields)
    return [item for item in items if matches_search(item, fields, search)]


def build_list_payload(
    items: list[dict[str, Any]],
    matched: list[dict[str, Any]],
    truncated: bool = False,
) -> dict[str, Any]:
    """목록 응답 데이터를 생성합니다.

    empty_reason은 데이터가 아예 없는 경우(no_data)와
    필터에 맞는 항목이 없는 경우(no_match)를 구분합니다.
    """
    if not items:
        empty_reason = EMPTY_NO_DATA
    elif not matched:
        empty_reason = EMPTY_NO_MATCH
    else:
        empty_reason = None

    return {
        "items": matched,
        "total_count": len(items),
        "matched_count": len(matched),
        "truncated": truncated,
        "empty_reason": empty_reason,
    }
