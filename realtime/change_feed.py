"""change_feed: change_log 테이블을 읽어 변경 이벤트를 발행하는 백그라운드 작업."""

import asyncio
import logging

from models import change_log_models
from realtime.bridge import ChangeEvent, RealtimeBridge

logger = logging.getLogger(__name__)


class ChangeFeed:
    """change_log를 주기적으로 읽어 RealtimeBridge로 전달합니다.

    시작 시점의 마지막 ID부터 읽으므로 과거 변경은 재생하지 않습니다.
    """

    def __init__(
        self,
        bridge: RealtimeBridge,
        interval_seconds: float = 2.0,
        batch_size: int = 200,
    ):
        self._bridge = bridge
        self._interval = interval_seconds
        self._batch_size = batch_size
        self._last_id = 0
        self._task: asyncio.Task | None = None

    @property
    def last_id(self) -> int:
        return self._last_id

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        self._last_id = await change_log_models.get_latest_change_id()
        self._task = asyncio.create_task(self._run())
        logger.info(f"변경 피드 시작 (last_id={self._last_id})")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("변경 피드 종료")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                # 배치가 가득 차면 밀린 로그를 바로 이어서 읽음
                while await self.poll_once() >= self._batch_size:
                    pass
            except Exception:
                logger.exception("변경 로그 조회 중 오류 발생")

    async def poll_once(self) -> int:
        """새 변경 로그를 한 번 읽어 발행합니다.

        Returns:
            읽은 로그 수.
        """
        entries = await change_log_models.get_changes_after(
            self._last_id, self._batch_size
        )
        for entry in entries:
            row = dict(entry.payload)
            if entry.row_id is not None:
                row.setdefault("id", entry.row_id)
            await self._bridge.publish(
                ChangeEvent(
                    table=entry.table_name,
                    event_type=entry.event_type.upper(),
                    row=row,
                )
            )
            self._last_id = entry.id
        return len(entries)
