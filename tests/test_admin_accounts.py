"""test_admin_accounts: 관리자 계정 생성/삭제/비밀번호 변경 테스트."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from services.admin_service import AdminService
from utils.password import verify_password

TS = "2026-01-01T00:00:00Z"
ADMIN_PASSWORD = "Password123!"


@pytest.mark.asyncio
async def test_create_admin_hashes_password_before_call():
    with patch("models.admin_models.create_admin", new_callable=AsyncMock,
               return_value={"admin_id": "a2", "username": "ops"}) as create:
        created, notifications = await AdminService.create_admin(
            "ops", "ops@autinoa.com", "운영자", "NewPassword1!", "a1", TS
        )

    args = create.await_args.args
    assert args[:3] == ("ops", "ops@autinoa.com", "운영자")
    assert args[3] != "NewPassword1!"
    assert verify_password("NewPassword1!", args[3])
    assert args[4] == "a1"
    assert created["username"] == "ops"
    assert notifications[0]["level"] == "success"


@pytest.mark.asyncio
async def test_cannot_delete_self():
    with patch("models.admin_models.delete_admin", new_callable=AsyncMock) as delete:
        with pytest.raises(HTTPException) as exc_info:
            await AdminService.delete_admin("a1", "a1", TS)

    assert exc_info.value.detail["error"] == "cannot_delete_self"
    delete.assert_not_called()


@pytest.mark.asyncio
async def test_change_password_wrong_current(admin_credential):
    with (
        patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
              return_value=admin_credential),
        patch("models.admin_models.update_password", new_callable=AsyncMock) as update,
    ):
        with pytest.raises(HTTPException) as exc_info:
            await AdminService.change_password(
                admin_credential.id, "WrongPassword1!", "NewPassword1!", TS
            )

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail["error"] == "invalid_password"
    update.assert_not_called()


@pytest.mark.asyncio
async def test_change_password_same_as_current(admin_credential):
    with patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
               return_value=admin_credential):
        with pytest.raises(HTTPException) as exc_info:
            await AdminService.change_password(
                admin_credential.id, ADMIN_PASSWORD, ADMIN_PASSWORD, TS
            )

    assert exc_info.value.detail["error"] == "same_password"


@pytest.mark.asyncio
async def test_change_password_success(admin_credential):
    with (
        patch("models.admin_models.get_admin_by_id", new_callable=AsyncMock,
              return_value=admin_credential),
        patch("models.admin_models.update_password", new_callable=AsyncMock) as update,
    ):
        notifications = await AdminService.change_password(
            admin_credential.id, ADMIN_PASSWORD, "NewPassword1!", TS
        )

    admin_id, new_hash = update.await_args.args
    assert admin_id == admin_credential.id
    assert verify_password("NewPassword1!", new_hash)
    assert notifications == [{"level": "success", "message": "비밀번호가 변경되었습니다."}]


# ==========================================
# API
# ==========================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"username": "a", "email": "ops@autinoa.com", "full_name": "운영자", "password": "NewPassword1!"},
        {"username": "ops", "email": "not-an-email", "full_name": "운영자", "password": "NewPassword1!"},
        {"username": "ops", "email": "ops@autinoa.com", "full_name": "운영자", "password": "weak"},
    ],
)
async def test_create_admin_api_validation(admin_client, payload):
    res = await admin_client.post("/v1/admin/admins", json=payload)
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_create_admin_api_duplicate_is_502(admin_client):
    with patch("models.admin_models.create_admin", new_callable=AsyncMock,
               side_effect=RuntimeError("Duplicate entry 'ops' for key 'username'")):
        res = await admin_client.post(
            "/v1/admin/admins",
            json={
                "username": "ops",
                "email": "ops@autinoa.com",
                "full_name": "운영자",
                "password": "NewPassword1!",
            },
        )

    assert res.status_code == 502
    assert res.json()["detail"]["error"] == "admin_create_failed"
    assert "Duplicate" not in res.json()["detail"]["message"]


@pytest.mark.asyncio
async def test_admins_list_api(admin_client):
    rows = [
        {"admin_id": "a1", "username": "root", "email": "root@autinoa.com",
         "full_name": "최고 관리자", "is_active": 1, "two_factor_enabled": 0},
    ]
    with patch("models.admin_models.get_admins", new_callable=AsyncMock, return_value=rows):
        res = await admin_client.get("/v1/admin/admins", params={"search": "ROOT"})

    data = res.json()["data"]
    assert data["items"][0]["is_active"] is True
    assert data["items"][0]["two_factor_enabled"] is False
