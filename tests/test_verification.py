"""test_verification: 전화번호/이메일 인증, 관리자 2단계 인증 관리 테스트."""

from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from models.user_models import UserContact
from services.verification_service import VerificationService
from utils.verification_code import hash_verification_code

TS = "2026-01-01T00:00:00Z"
ADMIN_ID = "a0000000-0000-0000-0000-000000000001"


@pytest.mark.asyncio
async def test_resend_phone_code_stores_hash_and_notifies():
    contact = UserContact(id="u1", email="u1@example.com", full_name="김철수", phone="01012345678")
    with (
        patch("models.user_models.get_user_contact", new_callable=AsyncMock,
              return_value=contact),
        patch("models.verification_models.replace_phone_code", new_callable=AsyncMock) as save,
        patch("services.notification_service.NotificationService.send_user_notification",
              new_callable=AsyncMock) as send,
    ):
        notifications = await VerificationService.resend_phone_code("u1", ADMIN_ID, TS)

    user_id, phone, code_hash, expires_at = save.await_args.args
    assert (user_id, phone) == ("u1", "01012345678")
    message = send.await_args.args[2]
    code = message.split("인증 코드는 ")[1][:6]
    assert code_hash == hash_verification_code(code)
    assert expires_at.tzinfo is None
    assert notifications[0]["level"] == "success"


@pytest.mark.asyncio
async def test_resend_phone_code_without_phone_is_400():
    contact = UserContact(id="u1", email="u1@example.com", full_name="김철수", phone=None)
    with (
        patch("models.user_models.get_user_contact", new_callable=AsyncMock,
              return_value=contact),
        patch("models.verification_models.replace_phone_code", new_callable=AsyncMock) as save,
    ):
        with pytest.raises(HTTPException) as exc_info:
            await VerificationService.resend_phone_code("u1", ADMIN_ID, TS)

    assert exc_info.value.detail["error"] == "phone_required"
    save.assert_not_called()


@pytest.mark.asyncio
async def test_resend_phone_code_send_failure_is_502():
    contact = UserContact(id="u1", email="u1@example.com", full_name="김철수", phone="01012345678")
    with (
        patch("models.user_models.get_user_contact", new_callable=AsyncMock,
              return_value=contact),
        patch("models.verification_models.replace_phone_code", new_callable=AsyncMock),
        patch("services.notification_service.NotificationService.send_user_notification",
              new_callable=AsyncMock, side_effect=RuntimeError("smtp down")),
    ):
        with pytest.raises(HTTPException) as exc_info:
            await VerificationService.resend_phone_code("u1", ADMIN_ID, TS)

    assert exc_info.value.status_code == 502
    assert exc_info.value.detail["error"] == "phone_code_resend_failed"


@pytest.mark.asyncio
async def test_manual_phone_verify_unknown_user_is_404():
    with patch("models.user_models.mark_phone_verified", new_callable=AsyncMock,
               return_value=False):
        with pytest.raises(HTTPException) as exc_info:
            await VerificationService.verify_phone_manually("nobody", TS)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_resend_email_verification_sends_link():
    verification = {"id": "e1", "user_id": "u1", "email": "u1@example.com", "token": "tok123"}
    with (
        patch("models.verification_models.get_email_verification", new_callable=AsyncMock,
              return_value=verification),
        patch("models.user_models.get_user_contact", new_callable=AsyncMock,
              return_value=UserContact(id="u1", email="u1@example.com", full_name="김철수")),
        patch("services.verification_service.send_email", new_callable=AsyncMock) as send,
    ):
        await VerificationService.resend_email_verification("e1", TS)

    to, subject, text = send.await_args.args
    assert to == "u1@example.com"
    assert "verify-email?token=tok123" in text


@pytest.mark.asyncio
async def test_two_factor_list_attaches_latest_code():
    admins = [
        {"admin_id": "a1", "username": "root", "is_active": 1, "two_factor_enabled": 1},
        {"admin_id": "a2", "username": "ops", "is_active": 1, "two_factor_enabled": 0},
    ]
    codes = [
        {"admin_id": "a1", "attempts": 1, "expires_at": datetime(2026, 1, 1, 12, 10),
         "created_at": datetime(2026, 1, 1, 12, 0)},
        {"admin_id": "a1", "attempts": 0, "expires_at": datetime(2025, 12, 1, 12, 10),
         "created_at": datetime(2025, 12, 1, 12, 0)},
    ]
    with (
        patch("models.admin_models.get_admins", new_callable=AsyncMock, return_value=admins),
        patch("models.verification_models.get_admin_verification_codes",
              new_callable=AsyncMock, return_value=codes),
    ):
        items, _ = await VerificationService.list_two_factor()

    assert items[0]["latest_code"]["created_at"] == "2026-01-01T12:00:00Z"
    assert items[0]["two_factor_enabled"] is True
    assert items[1]["latest_code"] is None


@pytest.mark.asyncio
async def test_toggle_two_factor_api(admin_client):
    with patch("models.admin_models.set_two_factor", new_callable=AsyncMock,
               return_value=True) as toggle:
        res = await admin_client.patch(
            "/v1/admin/verifications/two-factor/a2", json={"enabled": True}
        )

    assert res.status_code == 200
    toggle.assert_awaited_once_with("a2", True)


@pytest.mark.asyncio
async def test_phone_list_api_fetch_failure_is_503(admin_client):
    with patch("models.verification_models.get_phone_verifications", new_callable=AsyncMock,
               side_effect=RuntimeError("db down")):
        res = await admin_client.get("/v1/admin/verifications/phone")

    assert res.status_code == 503
    assert res.json()["detail"]["error"] == "phone_verifications_fetch_failed"
