"""views: 목록 화면 정의와 공통 조회 흐름.

각 화면은 조회 함수, 검색 대상 필드, 실시간 갱신을 위해 구독할 테이블을 가집니다.
HTTP 목록 엔드포인트와 WebSocket 실시간 화면이 같은 정의를 사용합니다.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from core.config import settings
from realtime.live_view import TableWatch
from utils.exceptions import view_unavailable_error
from utils.filters import build_list_payload, filter_items

logger = logging.getLogger(__name__)

# 조회 함수는 (항목 목록, 잘림 여부)를 반환
Loader = Callable[..., Awaitable[tuple[list[dict[str, Any]], bool]]]


@dataclass(frozen=True)
class ViewDefinition:
    """목록 화면 정의.

    Attributes:
        name: 화면 이름 (에러 코드 "<name>_fetch_failed"와 실시간 경로에 사용).
        loader: 필터 키워드 인자를 받는 조회 함수.
        search_fields: 검색어를 비교할 필드 (점 표기로 중첩 필드 지정).
        watches: 변경 시 다시 조회할 테이블 목록.
        error_message: 조회 실패 시 화면에 표시할 메시지.
        filters: 허용되는 필터 이름과 기본값.
    """

    name: str
    loader: Loader
    search_fields: tuple[str, ...]
    watches: tuple[TableWatch, ...]
    error_message: str
    filters: dict[str, str | None] = field(default_factory=dict)


def is_truncated(rows: list) -> bool:
    """조회 상한에 도달했는지 확인합니다."""
    return len(rows) >= settings.LIST_FETCH_LIMIT


async def load_view(
    view: ViewDefinition,
    timestamp: str,
    search: str | None = None,
    **filters: Any,
) -> dict[str, Any]:
    """화면 데이터를 조회하고 검색어로 거른 목록 응답 데이터를 만듭니다.

    Raises:
        HTTPException: 503 조회 실패 (부분 결과 없음).
    """
    params = {**view.filters, **{k: v for k, v in filters.items() if k in view.filters}}
    try:
        items, truncated = await view.loader(**params)
    except Exception:
        logger.exception(f"목록 조회 실패: {view.name}")
        raise view_unavailable_error(view.name, timestamp, view.error_message)

    matched = filter_items(items, view.search_fields, search)
    return build_list_payload(items, matched, truncated)
