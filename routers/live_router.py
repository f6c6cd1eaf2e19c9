"""live_router: 실시간 화면 WebSocket 라우터 모듈.

인증은 token 쿼리 파라미터로 전달된 Access Token을 사용합니다.
"""

from fastapi import APIRouter, WebSocket

from controllers import live_controller

live_router = APIRouter(prefix="/v1/admin/live", tags=["live"])


@live_router.websocket("/badges")
async def live_badges(websocket: WebSocket) -> None:
    await live_controller.live_badges(websocket)


@live_router.websocket("/{view_name}")
async def live_view(websocket: WebSocket, view_name: str) -> None:
    """목록 화면 스냅샷을 보내고 변경 시마다 다시 보냅니다."""
    await live_controller.live_view(websocket, view_name)
