"""test_dashboard: 대시보드 배지, 배지 스트림, 실시간 WebSocket 테스트."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from main import app
from realtime import ChangeEvent, RealtimeBridge, TableWatch
from services.dashboard_service import (
    BADGE_NAMES,
    BadgeDefinition,
    BadgeStream,
    DashboardService,
)
from utils.jwt_utils import create_access_token


class Recorder:
    def __init__(self):
        self.frames: list[dict] = []

    async def __call__(self, frame: dict) -> None:
        self.frames.append(frame)


async def count_or_fail(name: str) -> int:
    if name == "pending_reviews":
        raise RuntimeError("timeout")
    return 3


# ==========================================
# 배지
# ==========================================


@pytest.mark.asyncio
async def test_failing_badge_is_none_others_unaffected():
    with patch("models.dashboard_models.count_badge", side_effect=count_or_fail):
        badges = await DashboardService.get_badges()

    assert set(badges) == set(BADGE_NAMES)
    assert badges["pending_reviews"] is None
    assert badges["pending_reports"] == 3


@pytest.mark.asyncio
async def test_badges_api(admin_client):
    with patch("models.dashboard_models.count_badge", side_effect=count_or_fail):
        res = await admin_client.get("/v1/admin/dashboard/badges")

    assert res.status_code == 200
    body = res.json()
    assert body["code"] == "BADGES_RETRIEVED"
    assert body["data"]["badges"]["pending_reviews"] is None
    assert body["notifications"] == []


@pytest.mark.asyncio
async def test_stats_api(admin_client):
    with patch("models.dashboard_models.count_stat", new_callable=AsyncMock, return_value=7):
        res = await admin_client.get("/v1/admin/dashboard/stats")

    assert res.status_code == 200
    assert set(res.json()["data"]["stats"].values()) == {7}


# ==========================================
# 배지 스트림
# ==========================================


BADGES = (
    BadgeDefinition("pending_reviews", "리뷰 승인", (TableWatch("reviews"),)),
    BadgeDefinition(
        "pending_reports",
        "신고",
        (TableWatch("listing_reports"), TableWatch("message_reports")),
    ),
)


@pytest.mark.asyncio
async def test_stream_sends_snapshot_then_single_badge_updates():
    bridge = RealtimeBridge()
    send = Recorder()
    stream = BadgeStream(send, bridge, BADGES)

    with patch("models.dashboard_models.count_badge", new_callable=AsyncMock,
               return_value=1) as count:
        await stream.open()
        count.reset_mock()
        await bridge.publish(ChangeEvent("message_reports", "INSERT", {"id": "m1"}))

    count.assert_awaited_once_with("pending_reports")
    assert send.frames[0] == {
        "type": "snapshot",
        "view": "badges",
        "data": {"pending_reviews": 1, "pending_reports": 1},
    }
    assert send.frames[1] == {"type": "badge", "name": "pending_reports", "count": 1}
    stream.close()


@pytest.mark.asyncio
async def test_stream_close_stops_updates():
    bridge = RealtimeBridge()
    send = Recorder()
    stream = BadgeStream(send, bridge, BADGES)

    with patch("models.dashboard_models.count_badge", new_callable=AsyncMock, return_value=0):
        await stream.open()
        assert bridge.subscriber_count() == 3
        stream.close()
        await bridge.publish(ChangeEvent("reviews", "UPDATE"))

    assert stream.closed
    assert bridge.subscriber_count() == 0
    assert len(send.frames) == 1


@pytest.mark.asyncio
async def test_unblock_recounts_blocked_users_badge():
    bridge = RealtimeBridge()
    send = Recorder()
    stream = BadgeStream(send, bridge)

    with patch("models.dashboard_models.count_badge", new_callable=AsyncMock,
               return_value=0) as count:
        await stream.open()
        count.reset_mock()
        await bridge.publish(ChangeEvent("users", "UPDATE", {"id": "u1", "is_blocked": 0}))

    recounted = {call.args[0] for call in count.await_args_list}
    assert "blocked_users" in recounted
    assert {"type": "badge", "name": "blocked_users", "count": 0} in send.frames
    stream.close()


# ==========================================
# WebSocket
# ==========================================


def test_live_view_without_token_is_closed():
    client = TestClient(app)
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/v1/admin/live/users"):
            pass

    assert exc_info.value.code == 1008


def test_live_unknown_view_is_closed(admin_credential):
    client = TestClient(app)
    token = create_access_token(admin_credential.id)
    with (
        patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
              return_value=admin_credential),
        pytest.raises(WebSocketDisconnect) as exc_info,
    ):
        with client.websocket_connect(f"/v1/admin/live/comments?token={token}"):
            pass

    assert exc_info.value.code == 1008


def test_live_view_sends_snapshot_and_applies_search(admin_credential):
    rows = [
        {"id": "u1", "full_name": "김철수", "email": "kim@example.com", "is_corporate": 0},
        {"id": "u2", "full_name": "이영희", "email": "lee@example.com", "is_corporate": 0},
    ]
    client = TestClient(app)
    token = create_access_token(admin_credential.id)
    with (
        patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
              return_value=admin_credential),
        patch("models.user_models.get_users", new_callable=AsyncMock, return_value=rows),
    ):
        with client.websocket_connect(f"/v1/admin/live/users?token={token}") as ws:
            snapshot = ws.receive_json()
            ws.send_json({"search": "영희"})
            filtered = ws.receive_json()

    assert snapshot["type"] == "snapshot"
    assert snapshot["view"] == "users"
    assert snapshot["data"]["total_count"] == 2
    assert [u["id"] for u in filtered["data"]["items"]] == ["u2"]


def test_live_view_ignores_non_json_message(admin_credential):
    rows = [
        {"id": "u1", "full_name": "김철수", "email": "kim@example.com", "is_corporate": 0},
        {"id": "u2", "full_name": "이영희", "email": "lee@example.com", "is_corporate": 0},
    ]
    client = TestClient(app)
    token = create_access_token(admin_credential.id)
    with (
        patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
              return_value=admin_credential),
        patch("models.user_models.get_users", new_callable=AsyncMock, return_value=rows),
    ):
        with client.websocket_connect(f"/v1/admin/live/users?token={token}") as ws:
            ws.receive_json()
            ws.send_text("not json")
            ws.send_json({"search": "철수"})
            filtered = ws.receive_json()

    assert filtered["type"] == "snapshot"
    assert [u["id"] for u in filtered["data"]["items"]] == ["u1"]
