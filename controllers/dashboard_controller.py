"""dashboard_controller: 대시보드 배지/통계 컨트롤러 모듈."""

from fastapi import Request

from dependencies.request_context import get_request_timestamp
from schemas.common import create_response
from services.dashboard_service import DashboardService


async def get_badges(request: Request) -> dict:
    """대기 중 항목 수(배지)를 조회합니다. 실패한 배지는 null입니다."""
    timestamp = get_request_timestamp(request)
    badges = await DashboardService.get_badges()
    return create_response(
        "BADGES_RETRIEVED",
        "배지 조회에 성공했습니다.",
        data={"badges": badges},
        timestamp=timestamp,
        notifications=[],
    )


async def get_stats(request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    stats = await DashboardService.get_stats()
    return create_response(
        "STATS_RETRIEVED",
        "통계 조회에 성공했습니다.",
        data={"stats": stats},
        timestamp=timestamp,
        notifications=[],
    )
