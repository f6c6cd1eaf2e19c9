"""dashboard_service: 대시보드 배지와 통계 서비스.

배지마다 독립된 COUNT 쿼리와 독립된 변경 구독을 가집니다.
하나의 배지가 실패해도 다른 배지는 정상적으로 표시됩니다.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from models import dashboard_models
from realtime.bridge import RealtimeBridge, RefreshSubscription
from realtime.live_view import TableWatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeDefinition:
    """배지 이름과 갱신 트리거가 되는 테이블 구독."""

    name: str
    label: str
    watches: tuple[TableWatch, ...]


BADGES: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        "pending_purchase_requests",
        "매물 등록권 구매 요청",
        (TableWatch("listing_purchase_requests"),),
    ),
    BadgeDefinition(
        "pending_email_verifications",
        "이메일 인증",
        (TableWatch("email_verifications"),),
    ),
    BadgeDefinition(
        "pending_phone_verifications",
        "전화번호 인증",
        (TableWatch("verification_codes"),),
    ),
    BadgeDefinition("pending_reviews", "리뷰 승인", (TableWatch("reviews"),)),
    BadgeDefinition(
        "pending_reports",
        "신고",
        (
            TableWatch("listing_reports"),
            TableWatch("message_reports"),
            TableWatch("admin_reports"),
        ),
    ),
    # 해제 이벤트(is_blocked=false)도 다시 세어야 하므로 필터 없이 구독
    BadgeDefinition("blocked_users", "차단된 사용자", (TableWatch("users"),)),
    BadgeDefinition(
        "pending_documents", "법인 서류", (TableWatch("corporate_documents"),)
    ),
    BadgeDefinition(
        "pending_corporate_approvals",
        "법인 승인",
        (TableWatch("users", "is_corporate=eq.true"),),
    ),
    BadgeDefinition(
        "pending_damage_reports", "손상 신고", (TableWatch("damage_reports"),)
    ),
)

BADGE_NAMES = tuple(badge.name for badge in BADGES)


class DashboardService:
    """대시보드 서비스."""

    @staticmethod
    async def count_badge(name: str) -> int | None:
        """배지 하나를 조회합니다. 실패하면 로그를 남기고 None을 반환합니다."""
        try:
            return await dashboard_models.count_badge(name)
        except Exception:
            logger.exception(f"배지 조회 실패: {name}")
            return None

    @staticmethod
    async def get_badges() -> dict[str, int | None]:
        counts = await asyncio.gather(
            *(DashboardService.count_badge(name) for name in BADGE_NAMES)
        )
        return dict(zip(BADGE_NAMES, counts))

    @staticmethod
    async def get_stats() -> dict[str, int | None]:
        names = tuple(dashboard_models.STAT_QUERIES)

        async def _count(name: str) -> int | None:
            try:
                return await dashboard_models.count_stat(name)
            except Exception:
                logger.exception(f"통계 조회 실패: {name}")
                return None

        counts = await asyncio.gather(*(_count(name) for name in names))
        return dict(zip(names, counts))


class BadgeStream:
    """배지별 구독으로 카운트를 실시간 전송하는 세션."""

    def __init__(
        self,
        send: Callable[[dict[str, Any]], Awaitable[None]],
        bridge: RealtimeBridge,
        badges: tuple[BadgeDefinition, ...] = BADGES,
    ):
        self._send = send
        self._bridge = bridge
        self._badges = badges
        self._subscriptions: list[RefreshSubscription] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self) -> None:
        """전체 배지 스냅샷을 보내고 배지별 구독을 엽니다."""
        counts = await asyncio.gather(
            *(DashboardService.count_badge(badge.name) for badge in self._badges)
        )
        await self._send(
            {
                "type": "snapshot",
                "view": "badges",
                "data": {badge.name: count for badge, count in zip(self._badges, counts)},
            }
        )
        for badge in self._badges:
            for watch in badge.watches:
                self._subscriptions.append(
                    RefreshSubscription(
                        self._bridge,
                        watch.table,
                        self._refresher(badge.name),
                        watch.filter,
                    )
                )

    def _refresher(self, name: str) -> Callable[[], Awaitable[None]]:
        async def refresh() -> None:
            if self._closed:
                return
            count = await DashboardService.count_badge(name)
            if self._closed:
                return
            await self._send({"type": "badge", "name": name, "count": count})

        return refresh

    def close(self) -> None:
        self._closed = True
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions.clear()
