"""test_listings: 매물 관리와 매물 등록권(쿼터) 테스트."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from models.listing_models import ListingSummary
from services.listing_service import ListingQuotaService, ListingService, serialize_listing

TS = "2026-01-01T00:00:00Z"
ADMIN_ID = "a0000000-0000-0000-0000-000000000001"
SUMMARY = ListingSummary(id="l1", user_id="owner-1", brand="Hyundai", model="Sonata")


@pytest.fixture
def listing_models():
    with (
        patch("models.listing_models.get_listing_summary", new_callable=AsyncMock,
              return_value=SUMMARY) as summary,
        patch("models.listing_models.update_listing_status",
              new_callable=AsyncMock) as update_status,
        patch("services.notification_service.NotificationService.try_notify",
              new_callable=AsyncMock, return_value=True) as notify,
    ):
        yield {"summary": summary, "update_status": update_status, "notify": notify}


def test_serialize_listing_nests_owner_and_converts_price():
    row = {
        "id": "l1",
        "brand": "Kia",
        "price": "25000000.00",
        "is_featured": 1,
        "status": "approved",
        "owner_full_name": "김철수",
        "owner_email": "kim@example.com",
    }

    data = serialize_listing(row)

    assert data["price"] == 25000000.0
    assert data["is_featured"] is True
    assert data["owner"] == {"full_name": "김철수", "email": "kim@example.com"}
    assert data["status_label"] == "승인됨"


# ==========================================
# 상태 변경
# ==========================================


@pytest.mark.asyncio
async def test_status_without_reason_uses_default(listing_models):
    notifications = await ListingService.update_status("l1", ADMIN_ID, "rejected", None, TS)

    listing_models["update_status"].assert_awaited_once_with(
        "l1", "rejected", ADMIN_ID, "관리자가 거절했습니다"
    )
    message = listing_models["notify"].await_args.args[2]
    assert "Hyundai Sonata" in message
    assert [n["level"] for n in notifications] == ["success"]


@pytest.mark.asyncio
async def test_status_owner_notify_failure_is_error_notification(listing_models):
    listing_models["notify"].return_value = False

    notifications = await ListingService.update_status("l1", ADMIN_ID, "approved", "확인", TS)

    assert [n["level"] for n in notifications] == ["success", "error"]


@pytest.mark.asyncio
async def test_status_unknown_listing_is_404(listing_models):
    listing_models["summary"].return_value = None

    with pytest.raises(HTTPException) as exc_info:
        await ListingService.update_status("l1", ADMIN_ID, "approved", None, TS)

    assert exc_info.value.status_code == 404
    listing_models["update_status"].assert_not_called()


@pytest.mark.asyncio
async def test_featured_missing_listing_is_404():
    with patch("models.listing_models.set_featured", new_callable=AsyncMock, return_value=False):
        with pytest.raises(HTTPException) as exc_info:
            await ListingService.set_featured("l1", True, TS)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_admin_report_requires_reason(listing_models):
    with patch("models.report_models.create_admin_report", new_callable=AsyncMock) as create:
        with pytest.raises(HTTPException) as exc_info:
            await ListingService.report_listing("l1", ADMIN_ID, None, None, TS)

    assert exc_info.value.detail["error"] == "report_reason_required"
    create.assert_not_called()


@pytest.mark.asyncio
async def test_admin_report_default_details(listing_models):
    with patch("models.report_models.create_admin_report", new_callable=AsyncMock,
               return_value={"id": "ar1"}) as create:
        created, _ = await ListingService.report_listing("l1", ADMIN_ID, "허위 매물", None, TS)

    create.assert_awaited_once_with("l1", ADMIN_ID, "허위 매물", "관리자가 신고했습니다")
    assert created == {"id": "ar1"}


# ==========================================
# 매물 등록권
# ==========================================


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [None, 0, -3])
async def test_add_slots_rejects_non_positive(amount):
    with patch("models.user_models.add_listing_slots", new_callable=AsyncMock) as add:
        with pytest.raises(HTTPException) as exc_info:
            await ListingQuotaService.add_slots("u1", ADMIN_ID, amount, None, TS)

    assert exc_info.value.detail["error"] == "invalid_amount"
    add.assert_not_called()


@pytest.mark.asyncio
async def test_add_slots_generates_payment_id():
    with patch("models.user_models.add_listing_slots", new_callable=AsyncMock) as add:
        await ListingQuotaService.add_slots("u1", ADMIN_ID, 2, None, TS)

    add.assert_awaited_once_with("u1", 2, f"admin_{ADMIN_ID}_{TS}")


@pytest.mark.asyncio
async def test_remove_more_than_owned_is_400_without_call():
    with (
        patch("models.user_models.get_paid_listing_limit", new_callable=AsyncMock,
              return_value=1),
        patch("models.user_models.remove_listing_slots", new_callable=AsyncMock) as remove,
    ):
        with pytest.raises(HTTPException) as exc_info:
            await ListingQuotaService.remove_slots("u1", 2, TS)

    assert exc_info.value.detail["error"] == "insufficient_slots"
    remove.assert_not_called()


@pytest.mark.asyncio
async def test_remove_slots_lost_race_is_400():
    with (
        patch("models.user_models.get_paid_listing_limit", new_callable=AsyncMock,
              return_value=5),
        patch("models.user_models.remove_listing_slots", new_callable=AsyncMock,
              return_value=False),
    ):
        with pytest.raises(HTTPException) as exc_info:
            await ListingQuotaService.remove_slots("u1", 2, TS)

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_quota_users_compute_remaining():
    rows = [
        {"id": "u1", "listing_limit": 3, "paid_listing_limit": 2, "current_listings": 4},
        {"id": "u2", "listing_limit": 1, "paid_listing_limit": None, "current_listings": 3},
    ]
    with patch("models.user_models.get_users_with_listing_counts", new_callable=AsyncMock,
               return_value=rows):
        items, truncated = await ListingQuotaService.list_quota_users()

    assert [(i["total_limit"], i["remaining"]) for i in items] == [(5, 1), (1, 0)]
    assert truncated is False


# ==========================================
# API
# ==========================================


@pytest.mark.asyncio
async def test_status_api_invalid_status_is_422(admin_client):
    res = await admin_client.patch("/v1/admin/listings/l1/status", json={"status": "sold"})
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_notify_owner_api_sends_to_owner(admin_client, listing_models):
    with patch("services.notification_service.NotificationService.send_user_notification",
               new_callable=AsyncMock) as send:
        res = await admin_client.post(
            "/v1/admin/listings/l1/notify",
            json={"subject": "사진 보완 요청", "message": "사진을 추가해주세요."},
        )

    assert res.status_code == 200
    assert send.await_args.args[0] == "owner-1"


@pytest.mark.asyncio
async def test_reject_purchase_request_api_requires_reason(admin_client):
    with patch("models.listing_models.reject_purchase_request",
               new_callable=AsyncMock) as reject:
        res = await admin_client.post("/v1/admin/listing-quota/requests/p1/reject", json={})

    assert res.status_code == 400
    reject.assert_not_called()
