"""live_controller: WebSocket 실시간 화면 컨트롤러 모듈.

연결 = 화면 마운트, 연결 해제 = 언마운트입니다.
클라이언트는 {"search": ..., "filters": {...}} 메시지로 조건을 바꿀 수 있습니다.
"""

import json
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder

from dependencies.auth import authenticate_websocket
from realtime.bridge import realtime_bridge
from realtime.live_view import LiveView
from services.dashboard_service import BadgeStream
from services.view_registry import VIEWS
from services.views import ViewDefinition, load_view

logger = logging.getLogger(__name__)


class _ViewState:
    """연결별 검색어/필터 상태."""

    def __init__(self, view: ViewDefinition, params: dict[str, str]):
        self.view = view
        self.search = params.get("search")
        self.filters = {k: params[k] for k in view.filters if k in params}

    def update(self, message: dict[str, Any]) -> None:
        if "search" in message:
            self.search = message.get("search")
        filters = message.get("filters")
        if isinstance(filters, dict):
            for key in self.view.filters:
                if key in filters:
                    self.filters[key] = filters[key]

    async def fetch(self) -> dict[str, Any]:
        return await load_view(self.view, "", search=self.search, **self.filters)


async def _send_json(websocket: WebSocket, frame: dict[str, Any]) -> None:
    await websocket.send_json(jsonable_encoder(frame))


async def live_view(websocket: WebSocket, view_name: str) -> None:
    """목록 화면을 실시간으로 전송합니다."""
    admin = await authenticate_websocket(websocket)
    if not admin:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    view = VIEWS.get(view_name)
    if not view:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    state = _ViewState(view, dict(websocket.query_params))
    session = LiveView(
        name=view.name,
        fetch=state.fetch,
        send=lambda frame: _send_json(websocket, frame),
        watches=list(view.watches),
        bridge=realtime_bridge,
        error_message=view.error_message,
    )
    logger.info(f"실시간 화면 연결: {view.name} (관리자 {admin.username})")

    try:
        await session.mount()
        while not session.closed:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                logger.info(f"실시간 화면: JSON이 아닌 메시지 무시 ({view.name})")
                continue
            if isinstance(message, dict):
                state.update(message)
                await session.refresh()
    except WebSocketDisconnect:
        pass
    finally:
        await session.unmount()
        logger.info(f"실시간 화면 해제: {view.name}")


async def live_badges(websocket: WebSocket) -> None:
    """대시보드 배지를 배지별 구독으로 실시간 전송합니다."""
    admin = await authenticate_websocket(websocket)
    if not admin:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    stream = BadgeStream(lambda frame: _send_json(websocket, frame), realtime_bridge)
    try:
        await stream.open()
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        stream.close()
