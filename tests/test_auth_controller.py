"""test_auth_controller: 관리자 로그인, 2단계 인증, 토큰 검증 테스트."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from models.admin_models import AdminVerificationCode
from services.two_factor_service import (
    CODE_EXPIRED,
    CODE_INVALID,
    CODE_OK,
    CODE_TOO_MANY_ATTEMPTS,
    TwoFactorService,
)
from utils.jwt_utils import create_access_token, decode_access_token
from utils.verification_code import hash_verification_code

ADMIN_PASSWORD = "Password123!"


def stored_code(code: str = "123456", attempts: int = 0, minutes: int = 10) -> AdminVerificationCode:
    return AdminVerificationCode(
        id=1,
        admin_id="a0000000-0000-0000-0000-000000000001",
        code_hash=hash_verification_code(code),
        attempts=attempts,
        expires_at=datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(minutes=minutes),
    )


# ==========================================
# 로그인
# ==========================================


@pytest.mark.asyncio
async def test_login_success_returns_token(client, admin_credential):
    with (
        patch("models.admin_models.get_admin_by_username", new_callable=AsyncMock,
              return_value=admin_credential),
        patch("models.admin_models.update_last_login", new_callable=AsyncMock) as last_login,
    ):
        res = await client.post(
            "/v1/admin/auth/session",
            json={"username": "root", "password": ADMIN_PASSWORD},
        )

    assert res.status_code == 200
    data = res.json()["data"]
    assert decode_access_token(data["access_token"])["sub"] == admin_credential.id
    assert data["admin"]["username"] == "root"
    assert "password_hash" not in data["admin"]
    last_login.assert_awaited_once_with(admin_credential.id)


@pytest.mark.asyncio
async def test_login_wrong_password(client, admin_credential):
    with patch("models.admin_models.get_admin_by_username", new_callable=AsyncMock,
               return_value=admin_credential):
        res = await client.post(
            "/v1/admin/auth/session",
            json={"username": "root", "password": "WrongPassword1!"},
        )

    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "invalid_credentials"


@pytest.mark.asyncio
async def test_login_unknown_user_same_error(client):
    with patch("models.admin_models.get_admin_by_username", new_callable=AsyncMock,
               return_value=None):
        res = await client.post(
            "/v1/admin/auth/session",
            json={"username": "nobody", "password": ADMIN_PASSWORD},
        )

    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "invalid_credentials"


@pytest.mark.asyncio
async def test_login_disabled_account(client, admin_credential):
    disabled = replace(admin_credential, is_active=False)
    with patch("models.admin_models.get_admin_by_username", new_callable=AsyncMock,
               return_value=disabled):
        res = await client.post(
            "/v1/admin/auth/session",
            json={"username": "root", "password": ADMIN_PASSWORD},
        )

    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "account_disabled"


@pytest.mark.asyncio
async def test_login_with_two_factor_sends_code(client, admin_credential):
    two_factor = replace(admin_credential, two_factor_enabled=True)
    with (
        patch("models.admin_models.get_admin_by_username", new_callable=AsyncMock,
              return_value=two_factor),
        patch("models.admin_models.replace_verification_code", new_callable=AsyncMock) as save,
        patch("services.two_factor_service.send_email", new_callable=AsyncMock) as send,
    ):
        res = await client.post(
            "/v1/admin/auth/session",
            json={"username": "root", "password": ADMIN_PASSWORD},
        )

    assert res.status_code == 200
    body = res.json()
    assert body["code"] == "VERIFICATION_NEEDED"
    assert body["data"]["verification_needed"] is True
    assert "access_token" not in body["data"]
    save.assert_awaited_once()
    assert send.await_args.args[0] == "root@autinoa.com"


@pytest.mark.asyncio
async def test_login_two_factor_send_failure_is_502(client, admin_credential):
    two_factor = replace(admin_credential, two_factor_enabled=True)
    with (
        patch("models.admin_models.get_admin_by_username", new_callable=AsyncMock,
              return_value=two_factor),
        patch("models.admin_models.replace_verification_code", new_callable=AsyncMock),
        patch("services.two_factor_service.send_email", new_callable=AsyncMock,
              side_effect=OSError("smtp down")),
    ):
        res = await client.post(
            "/v1/admin/auth/session",
            json={"username": "root", "password": ADMIN_PASSWORD},
        )

    assert res.status_code == 502
    assert res.json()["detail"]["error"] == "two_factor_send_failed"


# ==========================================
# 2단계 인증 코드 검증
# ==========================================


@pytest.mark.asyncio
async def test_verify_code_ok_deletes_codes():
    with (
        patch("models.admin_models.get_verification_code", new_callable=AsyncMock,
              return_value=stored_code()),
        patch("models.admin_models.delete_verification_codes", new_callable=AsyncMock) as delete,
    ):
        assert await TwoFactorService.verify_code("a1", "123456") == CODE_OK

    delete.assert_awaited_once_with("a1")


@pytest.mark.asyncio
async def test_verify_code_mismatch_increments_attempts():
    with (
        patch("models.admin_models.get_verification_code", new_callable=AsyncMock,
              return_value=stored_code()),
        patch("models.admin_models.increment_code_attempts", new_callable=AsyncMock) as inc,
    ):
        assert await TwoFactorService.verify_code("a1", "000000") == CODE_INVALID

    inc.assert_awaited_once_with(1)


@pytest.mark.asyncio
async def test_verify_code_expired():
    with patch("models.admin_models.get_verification_code", new_callable=AsyncMock,
               return_value=stored_code(minutes=-1)):
        assert await TwoFactorService.verify_code("a1", "123456") == CODE_EXPIRED


@pytest.mark.asyncio
async def test_verify_code_too_many_attempts():
    """시도 횟수를 넘기면 올바른 코드도 거절됩니다."""
    with patch("models.admin_models.get_verification_code", new_callable=AsyncMock,
               return_value=stored_code(attempts=5)):
        assert await TwoFactorService.verify_code("a1", "123456") == CODE_TOO_MANY_ATTEMPTS


@pytest.mark.asyncio
async def test_verify_code_missing():
    with patch("models.admin_models.get_verification_code", new_callable=AsyncMock,
               return_value=None):
        assert await TwoFactorService.verify_code("a1", "123456") == CODE_INVALID


@pytest.mark.asyncio
async def test_verify_api_issues_token(client, admin_credential):
    with (
        patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
              return_value=admin_credential),
        patch("models.admin_models.get_verification_code", new_callable=AsyncMock,
              return_value=stored_code()),
        patch("models.admin_models.delete_verification_codes", new_callable=AsyncMock),
        patch("models.admin_models.update_last_login", new_callable=AsyncMock),
    ):
        res = await client.post(
            "/v1/admin/auth/verify",
            json={"admin_id": admin_credential.id, "code": "123456"},
        )

    assert res.status_code == 200
    assert res.json()["data"]["access_token"]


@pytest.mark.asyncio
async def test_verify_api_expired_code(client, admin_credential):
    with (
        patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
              return_value=admin_credential),
        patch("models.admin_models.get_verification_code", new_callable=AsyncMock,
              return_value=stored_code(minutes=-5)),
    ):
        res = await client.post(
            "/v1/admin/auth/verify",
            json={"admin_id": admin_credential.id, "code": "123456"},
        )

    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "code_expired"


@pytest.mark.asyncio
async def test_verify_api_rejects_malformed_code(client):
    res = await client.post("/v1/admin/auth/verify", json={"admin_id": "a1", "code": "12ab56"})
    assert res.status_code == 422


# ==========================================
# 토큰 검증 (require_admin)
# ==========================================


@pytest.mark.asyncio
async def test_me_with_valid_token(client, admin_credential):
    token = create_access_token(admin_credential.id)
    with patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
               return_value=admin_credential):
        res = await client.get(
            "/v1/admin/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

    assert res.status_code == 200
    assert res.json()["data"]["admin"]["admin_id"] == admin_credential.id


@pytest.mark.asyncio
async def test_me_with_invalid_token(client):
    res = await client.get("/v1/admin/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "token_invalid"


@pytest.mark.asyncio
async def test_me_with_disabled_admin(client, admin_credential):
    token = create_access_token(admin_credential.id)
    with patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
               return_value=replace(admin_credential, is_active=False)):
        res = await client.get(
            "/v1/admin/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "account_disabled"
