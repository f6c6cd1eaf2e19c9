"""bridge: 테이블 변경 이벤트 구독/발행 허브.

화면(목록, 배지)은 자신이 의존하는 테이블을 구독하고, 변경 이벤트를 받으면
데이터를 통째로 다시 조회합니다 (증분 패치 없음).
구독자마다 독립적으로 전달하며 중복 제거나 공유 캐시는 없습니다.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal

logger = logging.getLogger(__name__)

EventType = Literal["INSERT", "UPDATE", "DELETE"]
VALID_EVENT_TYPES = {"INSERT", "UPDATE", "DELETE"}

ChangeCallback = Callable[["ChangeEvent"], Awaitable[None]]


@dataclass(frozen=True)
class ChangeEvent:
    """테이블 변경 이벤트.

    Attributes:
        table: 변경된 테이블 이름.
        event_type: INSERT, UPDATE, DELETE 중 하나.
        row: 변경된 행의 컬럼 일부 (트리거가 기록한 값).
    """

    table: str
    event_type: str
    row: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RowFilter:
    """`column=eq.value` 형식의 구독 필터."""

    column: str
    value: str

    def matches(self, row: dict[str, Any]) -> bool:
        # 삭제 이벤트처럼 컬럼 값이 없는 경우에는 다시 조회하도록 통과시킴
        if self.column not in row:
            return True
        return _normalize(row[self.column]) == self.value


def _normalize(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int) and value in (0, 1):
        # MySQL TINYINT(1) 불리언 컬럼
        return "true" if value else "false"
    return str(value).lower()


def parse_filter(expression: str | None) -> RowFilter | None:
    """구독 필터 문자열을 파싱합니다.

    Args:
        expression: "is_blocked=eq.true" 형식의 문자열 (None이면 필터 없음).

    Returns:
        RowFilter 객체 또는 None.

    Raises:
        ValueError: 지원하지 않는 형식인 경우.
    """
    if not expression:
        return None
    column, sep, condition = expression.partition("=")
    operator, dot, value = condition.partition(".")
    if not sep or not dot or not column or operator != "eq":
        raise ValueError(f"지원하지 않는 구독 필터입니다: {expression}")
    return RowFilter(column=column.strip(), value=value.strip().lower())


class Subscription:
    """단일 테이블 구독 핸들."""

    def __init__(
        self,
        bridge: "RealtimeBridge",
        subscription_id: int,
        table: str,
        callback: ChangeCallback,
        row_filter: RowFilter | None,
    ):
        self._bridge = bridge
        self.id = subscription_id
        self.table = table
        self.callback = callback
        self.row_filter = row_filter

    @property
    def active(self) -> bool:
        return self._bridge.is_subscribed(self)

    def accepts(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        if self.row_filter is None:
            return True
        return self.row_filter.matches(event.row)

    def unsubscribe(self) -> None:
        self._bridge.unsubscribe(self)


class RealtimeBridge:
    """프로세스 내 변경 이벤트 허브."""

    def __init__(self):
        self._subscriptions: dict[int, Subscription] = {}
        self._ids = itertools.count(1)

    def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        filter: str | None = None,
    ) -> Subscription:
        """테이블 변경 이벤트를 구독합니다.

        Args:
            table: 구독할 테이블 이름.
            callback: 이벤트마다 호출될 비동기 함수.
            filter: 선택적 행 필터 ("is_blocked=eq.true").

        Returns:
            구독 해제에 사용할 Subscription.
        """
        subscription = Subscription(
            self, next(self._ids), table, callback, parse_filter(filter)
        )
        self._subscriptions[subscription.id] = subscription
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """구독을 해제합니다. 이미 해제된 구독이면 아무 일도 하지 않습니다."""
        self._subscriptions.pop(subscription.id, None)

    def is_subscribed(self, subscription: Subscription) -> bool:
        return subscription.id in self._subscriptions

    def subscriber_count(self, table: str | None = None) -> int:
        if table is None:
            return len(self._subscriptions)
        return sum(1 for s in self._subscriptions.values() if s.table == table)

    async def publish(self, event: ChangeEvent) -> int:
        """이벤트를 조건에 맞는 모든 구독자에게 전달합니다.

        한 구독자의 실패는 다른 구독자에게 영향을 주지 않습니다.

        Returns:
            이벤트를 전달받은 구독자 수.
        """
        if event.event_type not in VALID_EVENT_TYPES:
            logger.warning(f"알 수 없는 변경 이벤트 타입: {event.event_type}")
            return 0

        targets = [s for s in list(self._subscriptions.values()) if s.accepts(event)]
        if not targets:
            return 0

        await asyncio.gather(*(self._deliver(s, event) for s in targets))
        return len(targets)

    async def _deliver(self, subscription: Subscription, event: ChangeEvent) -> None:
        try:
            await subscription.callback(event)
        except Exception:
            logger.exception(
                f"변경 이벤트 전달 실패: table={event.table} "
                f"subscription={subscription.id}"
            )


class RefreshSubscription:
    """모든 이벤트 타입을 하나의 재조회 함수로 연결하는 구독.

    INSERT, UPDATE, DELETE 모두 refetch를 정확히 한 번 호출합니다.
    """

    def __init__(
        self,
        bridge: RealtimeBridge,
        table: str,
        refetch: Callable[[], Awaitable[Any]],
        filter: str | None = None,
    ):
        self._refetch = refetch
        self._subscription = bridge.subscribe(table, self._handle, filter)

    async def _handle(self, event: ChangeEvent) -> None:
        await self._refetch()

    @property
    def active(self) -> bool:
        return self._subscription.active

    def close(self) -> None:
        self._subscription.unsubscribe()


# 전역 허브 인스턴스
realtime_bridge = RealtimeBridge()
