"""test_notifications: 사용자 알림 발송 서비스 및 API 테스트.

이메일 발송과 모델 계층을 모두 모킹하여 DB/SMTP 없이 실행합니다.
"""

from unittest.mock import AsyncMock, patch

import pytest

from models.user_models import UserContact
from services.notification_service import (
    NotificationService,
    UserNotFound,
    render_notification,
)

CONTACT = UserContact(id="u1", email="user@example.com", full_name="김철수")


@pytest.fixture
def mail():
    """연락처 조회, 메일 발송, 이력 기록을 대체합니다."""
    with (
        patch("models.user_models.get_user_contact", new_callable=AsyncMock,
              return_value=CONTACT) as contact,
        patch("services.notification_service.send_email", new_callable=AsyncMock) as send,
        patch("models.notification_models.log_notification", new_callable=AsyncMock) as log,
    ):
        yield {"contact": contact, "send": send, "log": log}


# ==========================================
# 템플릿
# ==========================================


def test_render_includes_greeting_and_escapes_html():
    rendered = render_notification("김철수", "안내", "<b>매물</b>이 승인되었습니다.")

    assert rendered.text.startswith("김철수님, 안녕하세요.")
    assert "<b>매물</b>" in rendered.text
    assert "&lt;b&gt;매물&lt;/b&gt;" in rendered.html


def test_render_without_name_uses_default():
    assert render_notification(None, "안내", "내용").text.startswith("회원님")


# ==========================================
# 서비스
# ==========================================


@pytest.mark.asyncio
async def test_send_logs_success(mail):
    await NotificationService.send_user_notification("u1", "안내", "내용", admin_id="a1")

    assert mail["send"].await_args.args[0] == "user@example.com"
    mail["log"].assert_awaited_once_with("u1", "안내", "sent", admin_id="a1", error=None)


@pytest.mark.asyncio
async def test_send_failure_logs_and_raises(mail):
    mail["send"].side_effect = RuntimeError("이메일 발송 실패: timeout")

    with pytest.raises(RuntimeError):
        await NotificationService.send_user_notification("u1", "안내", "내용")

    assert mail["log"].await_args.args[2] == "failed"


@pytest.mark.asyncio
@pytest.mark.parametrize("contact", [None, UserContact(id="u1", email=None, full_name="x")])
async def test_missing_user_or_email_raises(mail, contact):
    mail["contact"].return_value = contact

    with pytest.raises(UserNotFound):
        await NotificationService.send_user_notification("u1", "안내", "내용")

    mail["send"].assert_not_called()


@pytest.mark.asyncio
async def test_log_failure_does_not_change_result(mail):
    mail["log"].side_effect = RuntimeError("insert failed")

    await NotificationService.send_user_notification("u1", "안내", "내용")

    mail["send"].assert_awaited_once()


@pytest.mark.asyncio
async def test_try_notify_reports_failure(mail):
    mail["send"].side_effect = RuntimeError("smtp down")

    assert await NotificationService.try_notify("u1", "안내", "내용") is False


# ==========================================
# API
# ==========================================


@pytest.mark.asyncio
async def test_send_api_success(admin_client, mail):
    res = await admin_client.post(
        "/v1/admin/notifications",
        json={"user_id": "u1", "subject": "안내", "message": "매물이 승인되었습니다."},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["code"] == "NOTIFICATION_SENT"
    assert body["notifications"] == [{"level": "success", "message": "알림이 발송되었습니다."}]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"user_id": "u1", "subject": "안내"},
        {"user_id": "u1", "subject": "  ", "message": "내용"},
        {"subject": "안내", "message": "내용"},
    ],
)
async def test_send_api_missing_fields_is_400(admin_client, mail, payload):
    res = await admin_client.post("/v1/admin/notifications", json=payload)

    assert res.status_code == 400
    assert res.json()["detail"]["error"] == "notification_fields_required"
    mail["contact"].assert_not_called()


@pytest.mark.asyncio
async def test_send_api_unknown_user_is_404(admin_client, mail):
    mail["contact"].return_value = None

    res = await admin_client.post(
        "/v1/admin/notifications",
        json={"user_id": "nobody", "subject": "안내", "message": "내용"},
    )

    assert res.status_code == 404
    assert res.json()["detail"]["error"] == "user_not_found"


@pytest.mark.asyncio
async def test_send_api_mail_failure_is_502(admin_client, mail):
    mail["send"].side_effect = RuntimeError("smtp down")

    res = await admin_client.post(
        "/v1/admin/notifications",
        json={"user_id": "u1", "subject": "안내", "message": "내용"},
    )

    assert res.status_code == 502
    assert res.json()["detail"]["error"] == "notification_send_failed"
    assert "smtp" not in res.json()["detail"]["message"]


@pytest.mark.asyncio
async def test_logs_api(admin_client):
    logs = [{"id": 1, "user_id": "u1", "subject": "안내", "status": "sent", "error": None}]
    with patch("models.notification_models.get_user_notification_logs",
               new_callable=AsyncMock, return_value=logs):
        res = await admin_client.get("/v1/admin/notifications/u1/logs")

    assert res.status_code == 200
    assert res.json()["data"]["logs"][0]["status"] == "sent"
