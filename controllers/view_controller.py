"""view_controller: 목록 화면 공통 컨트롤러 모듈."""

from fastapi import Request

from dependencies.request_context import get_request_timestamp
from schemas.common import create_response
from services.views import ViewDefinition, load_view


async def list_view(
    view: ViewDefinition,
    request: Request,
    search: str | None = None,
    **filters: str | None,
) -> dict:
    """화면 목록을 조회하고 표준 응답으로 감쌉니다.

    Raises:
        HTTPException: 503 조회 실패.
    """
    timestamp = get_request_timestamp(request)
    data = await load_view(view, timestamp, search=search, **filters)
    return create_response(
        f"{view.name.upper()}_RETRIEVED",
        "목록 조회에 성공했습니다.",
        data=data,
        timestamp=timestamp,
        notifications=[],
    )
