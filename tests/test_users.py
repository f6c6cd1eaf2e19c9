"""test_users: 사용자 차단/해제/삭제, 법인 서류 테스트."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from models.corporate_document_models import CorporateDocument
from services.document_service import DocumentService
from services.user_service import UserService, serialize_user

TS = "2026-01-01T00:00:00Z"
ADMIN_ID = "a0000000-0000-0000-0000-000000000001"


def user_row(**overrides) -> dict:
    row = {
        "id": "u1",
        "email": "user@example.com",
        "full_name": "김철수",
        "is_corporate": 1,
        "is_blocked": 0,
        "approval_status": "pending",
        "phone_verified": 0,
        "email_verified": 1,
    }
    row.update(overrides)
    return row


@pytest.fixture
def user_models():
    with (
        patch("models.user_models.block_user", new_callable=AsyncMock) as block,
        patch("models.user_models.unblock_user", new_callable=AsyncMock) as unblock,
        patch("models.user_models.add_block_history", new_callable=AsyncMock) as history,
        patch("models.user_models.get_user_row", new_callable=AsyncMock,
              return_value=user_row()) as get_row,
        patch("models.user_models.delete_user_data", new_callable=AsyncMock) as delete,
    ):
        yield {
            "block": block,
            "unblock": unblock,
            "history": history,
            "get_row": get_row,
            "delete": delete,
        }


def test_serialize_user_converts_flags():
    data = serialize_user(user_row())
    assert data["is_corporate"] is True
    assert data["is_blocked"] is False
    assert data["approval_label"] == "승인 대기"


# ==========================================
# 차단 / 해제
# ==========================================


@pytest.mark.asyncio
@pytest.mark.parametrize("is_blocked", [0, 1])
async def test_block_is_same_call_regardless_of_state(user_models, is_blocked):
    """이미 차단된 사용자도 같은 프로시저 호출 한 번으로 처리합니다."""
    user_models["get_row"].return_value = user_row(is_blocked=is_blocked)

    user, notifications = await UserService.block_user("u1", ADMIN_ID, "스팸", TS)

    user_models["block"].assert_awaited_once_with("u1", ADMIN_ID, "스팸")
    user_models["history"].assert_awaited_once_with("u1", ADMIN_ID, "스팸")
    assert notifications[0]["level"] == "success"
    assert user["id"] == "u1"


@pytest.mark.asyncio
async def test_block_without_reason_makes_no_call(user_models):
    with pytest.raises(HTTPException) as exc_info:
        await UserService.block_user("u1", ADMIN_ID, None, TS)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail["error"] == "block_reason_required"
    user_models["block"].assert_not_called()


@pytest.mark.asyncio
async def test_unblock_failure_is_502_and_skips_history(user_models):
    user_models["unblock"].side_effect = RuntimeError("procedure error")

    with pytest.raises(HTTPException) as exc_info:
        await UserService.unblock_user("u1", ADMIN_ID, TS)

    assert exc_info.value.status_code == 502
    assert exc_info.value.detail["error"] == "unblock_user_failed"
    user_models["history"].assert_not_called()


@pytest.mark.asyncio
async def test_history_failure_keeps_block_result(user_models):
    user_models["history"].side_effect = RuntimeError("insert failed")

    user, notifications = await UserService.block_user("u1", ADMIN_ID, "욕설", TS)

    assert [n["level"] for n in notifications] == ["success"]
    assert user is not None


# ==========================================
# 삭제
# ==========================================


@pytest.mark.asyncio
async def test_delete_user_cleans_uploaded_folders(user_models):
    with patch("services.user_service.delete_folder", new_callable=AsyncMock,
               return_value=2) as delete_folder:
        notifications = await UserService.delete_user("u1", TS)

    user_models["delete"].assert_awaited_once_with("u1")
    prefixes = [c.args[0] for c in delete_folder.await_args_list]
    assert prefixes == ["corporate-documents/u1/", "profile-images/u1/"]
    assert [n["level"] for n in notifications] == ["success"]


@pytest.mark.asyncio
async def test_delete_user_file_cleanup_failure_is_reported(user_models):
    with patch("services.user_service.delete_folder", new_callable=AsyncMock,
               side_effect=RuntimeError("s3 down")):
        notifications = await UserService.delete_user("u1", TS)

    assert [n["level"] for n in notifications] == ["success", "error"]


@pytest.mark.asyncio
async def test_delete_user_failure_leaves_files(user_models):
    user_models["delete"].side_effect = RuntimeError("fk constraint")

    with (
        patch("services.user_service.delete_folder", new_callable=AsyncMock) as delete_folder,
        pytest.raises(HTTPException) as exc_info,
    ):
        await UserService.delete_user("u1", TS)

    assert exc_info.value.status_code == 502
    delete_folder.assert_not_called()


# ==========================================
# 법인 승인
# ==========================================


@pytest.mark.asyncio
async def test_approve_corporate_mail_failure_is_error_notification(user_models):
    with (
        patch("models.user_models.approve_corporate_user", new_callable=AsyncMock) as approve,
        patch("services.notification_service.NotificationService.try_notify",
              new_callable=AsyncMock, return_value=False),
    ):
        _, notifications = await UserService.approve_corporate("u1", ADMIN_ID, TS)

    approve.assert_awaited_once_with("u1", ADMIN_ID)
    assert [n["level"] for n in notifications] == ["success", "error"]


@pytest.mark.asyncio
async def test_reject_corporate_requires_reason(user_models):
    with patch("models.user_models.reject_corporate_user", new_callable=AsyncMock) as reject:
        with pytest.raises(HTTPException) as exc_info:
            await UserService.reject_corporate("u1", ADMIN_ID, "", TS)

    assert exc_info.value.detail["error"] == "rejection_reason_required"
    reject.assert_not_called()


# ==========================================
# 법인 서류
# ==========================================


def document(**overrides) -> CorporateDocument:
    values = {
        "id": "d1",
        "user_id": "u1",
        "document_type": "business_registration",
        "file_name": "registration.pdf",
        "file_path": "corporate-documents/u1/abc.pdf",
        "file_url": "/uploads/corporate-documents/u1/abc.pdf",
        "status": "pending",
    }
    values.update(overrides)
    return CorporateDocument(**values)


@pytest.mark.asyncio
async def test_user_documents_include_signed_url():
    rows = [{"id": "d1", "file_path": "corporate-documents/u1/abc.pdf", "status": "pending"}]
    with (
        patch("models.corporate_document_models.get_user_documents", new_callable=AsyncMock,
              return_value=rows),
        patch("services.document_service.signed_url", new_callable=AsyncMock,
              return_value="https://signed.example/abc.pdf") as sign,
    ):
        documents = await DocumentService.get_user_documents("u1")

    sign.assert_awaited_once_with("corporate-documents/u1/abc.pdf")
    assert documents[0]["signed_url"] == "https://signed.example/abc.pdf"
    assert documents[0]["status_label"] == "검토 대기"


@pytest.mark.asyncio
async def test_delete_document_removes_record_then_file():
    with (
        patch("models.corporate_document_models.get_document", new_callable=AsyncMock,
              return_value=document()),
        patch("models.corporate_document_models.delete_document", new_callable=AsyncMock,
              return_value=True) as delete_row,
        patch("services.document_service.delete_files", new_callable=AsyncMock,
              return_value=1) as delete_files,
    ):
        notifications = await DocumentService.delete_document("d1", TS)

    delete_row.assert_awaited_once_with("d1")
    delete_files.assert_awaited_once_with(["corporate-documents/u1/abc.pdf"])
    assert [n["level"] for n in notifications] == ["success"]


@pytest.mark.asyncio
async def test_delete_missing_document_is_404():
    with (
        patch("models.corporate_document_models.get_document", new_callable=AsyncMock,
              return_value=None),
        patch("models.corporate_document_models.delete_document",
              new_callable=AsyncMock) as delete_row,
        pytest.raises(HTTPException) as exc_info,
    ):
        await DocumentService.delete_document("d1", TS)

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail["error"] == "document_not_found"
    delete_row.assert_not_called()


@pytest.mark.asyncio
async def test_delete_document_file_failure_is_error_notification():
    with (
        patch("models.corporate_document_models.get_document", new_callable=AsyncMock,
              return_value=document()),
        patch("models.corporate_document_models.delete_document", new_callable=AsyncMock,
              return_value=True),
        patch("services.document_service.delete_files", new_callable=AsyncMock,
              side_effect=RuntimeError("s3 down")),
    ):
        notifications = await DocumentService.delete_document("d1", TS)

    assert [n["level"] for n in notifications] == ["success", "error"]


@pytest.mark.asyncio
async def test_reject_document_requires_reason():
    with patch("models.corporate_document_models.review_document",
               new_callable=AsyncMock) as review:
        with pytest.raises(HTTPException) as exc_info:
            await DocumentService.review_document("d1", ADMIN_ID, "rejected", None, TS)

    assert exc_info.value.status_code == 400
    review.assert_not_called()


# ==========================================
# API
# ==========================================


@pytest.mark.asyncio
async def test_block_api_blank_reason_is_400(admin_client, user_models):
    res = await admin_client.post("/v1/admin/users/u1/block", json={"reason": "   "})

    assert res.status_code == 400
    user_models["block"].assert_not_called()


@pytest.mark.asyncio
async def test_block_api_returns_refetched_user(admin_client, user_models):
    user_models["get_row"].return_value = user_row(is_blocked=1)

    res = await admin_client.post("/v1/admin/users/u1/block", json={"reason": "사기 의심"})

    assert res.status_code == 200
    body = res.json()
    assert body["code"] == "USER_BLOCKED"
    assert body["data"]["user"]["is_blocked"] is True


@pytest.mark.asyncio
async def test_users_api_filters_corporate(admin_client, fake):
    rows = [
        user_row(full_name=fake.name(), email=f"first-{fake.user_name()}@example.com"),
        user_row(id="u2", full_name=fake.name(), email=f"second-{fake.user_name()}@example.com"),
    ]
    with patch("models.user_models.get_users", new_callable=AsyncMock,
               return_value=rows) as get_users:
        res = await admin_client.get(
            "/v1/admin/users", params={"corporate": "true", "search": "SECOND-"}
        )

    get_users.assert_awaited_once_with(True)
    data = res.json()["data"]
    assert data["total_count"] == 2
    assert [u["id"] for u in data["items"]] == ["u2"]


@pytest.mark.asyncio
async def test_users_api_requires_admin(client):
    res = await client.post("/v1/admin/users/u1/unblock")
    assert res.status_code == 401
