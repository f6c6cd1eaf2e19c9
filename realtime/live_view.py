"""live_view: WebSocket으로 열린 화면을 변경 이벤트에 맞춰 갱신하는 세션.

연결(마운트) 시 스냅샷을 보내고, 구독한 테이블에 변경이 생길 때마다
전체 데이터를 다시 조회해 보냅니다. 연결 해제(언마운트) 시 구독을 닫고
진행 중인 조회를 취소하며, 해제 이후 도착한 결과는 버립니다.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from realtime.bridge import ChangeEvent, RealtimeBridge, Subscription

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]
Sender = Callable[[dict[str, Any]], Awaitable[None]]


@dataclass(frozen=True)
class TableWatch:
    """화면이 의존하는 테이블과 선택적 행 필터."""

    table: str
    filter: str | None = None


class LiveView:
    """단일 화면의 실시간 갱신 세션."""

    def __init__(
        self,
        name: str,
        fetch: Fetcher,
        send: Sender,
        watches: list[TableWatch],
        bridge: RealtimeBridge,
        error_message: str = "데이터를 불러오지 못했습니다.",
    ):
        self.name = name
        self._fetch = fetch
        self._send = send
        self._watches = watches
        self._bridge = bridge
        self._error_message = error_message
        self._subscriptions: list[Subscription] = []
        self._tasks: set[asyncio.Task] = set()
        # 조회와 전송은 세션당 한 번에 하나씩
        self._refresh_lock = asyncio.Lock()
        self._closed = False
        self.refresh_count = 0

    @property
    def closed(self) -> bool:
        return self._closed

    async def mount(self) -> None:
        """구독을 열고 첫 스냅샷을 보냅니다."""
        for watch in self._watches:
            self._subscriptions.append(
                self._bridge.subscribe(watch.table, self._on_change, watch.filter)
            )
        await self.refresh()

    async def _on_change(self, event: ChangeEvent) -> None:
        if self._closed:
            return
        task = asyncio.create_task(self.refresh(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def refresh(self, event: ChangeEvent | None = None) -> None:
        """데이터를 다시 조회하여 보냅니다.

        조회 실패는 화면 전체를 대체하는 error 프레임으로 보냅니다.
        이벤트가 연달아 오면 갱신은 도착 순서대로 직렬화됩니다.
        """
        if self._closed:
            return
        async with self._refresh_lock:
            await self._refresh_locked(event)

    async def _refresh_locked(self, event: ChangeEvent | None) -> None:
        if self._closed:
            return
        self.refresh_count += 1
        try:
            data = await self._fetch()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"실시간 화면 조회 실패: {self.name}")
            if not self._closed:
                await self._safe_send(
                    {"type": "error", "view": self.name, "message": self._error_message}
                )
            return

        # 언마운트 이후 도착한 결과는 버림
        if self._closed:
            return

        frame: dict[str, Any] = {"type": "snapshot", "view": self.name, "data": data}
        if event is not None:
            frame["trigger"] = {"table": event.table, "event": event.event_type}
        await self._safe_send(frame)

    async def _safe_send(self, frame: dict[str, Any]) -> None:
        try:
            await self._send(frame)
        except Exception:
            # 전송 실패는 연결이 끊긴 것으로 보고 세션을 정리
            logger.info(f"실시간 화면 전송 실패, 세션 종료: {self.name}")
            await self.unmount()

    async def unmount(self) -> None:
        """구독을 닫고 진행 중인 조회를 취소합니다."""
        if self._closed:
            return
        self._closed = True
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()

        current = asyncio.current_task()
        pending = [t for t in self._tasks if t is not current and not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()

    async def wait_idle(self) -> None:
        """진행 중인 갱신이 모두 끝날 때까지 기다립니다."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
