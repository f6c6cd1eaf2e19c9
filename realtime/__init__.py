"""realtime: 변경 이벤트 기반 화면 갱신 패키지.

Modules:
    bridge: 테이블 변경 이벤트 구독/발행 허브
    change_feed: change_log 테이블을 읽는 백그라운드 작업
    live_view: WebSocket 화면 세션
"""

from .bridge import (
    ChangeEvent,
    RealtimeBridge,
    RefreshSubscription,
    Subscription,
    parse_filter,
    realtime_bridge,
)
from .change_feed import ChangeFeed
from .live_view import LiveView, TableWatch

__all__ = [
    "ChangeEvent",
    "RealtimeBridge",
    "RefreshSubscription",
    "Subscription",
    "parse_filter",
    "realtime_bridge",
    "ChangeFeed",
    "LiveView",
    "TableWatch",
]
