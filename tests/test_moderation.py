"""test_moderation: 리뷰, 메시지, 공유 요청, 손상 신고 처리 테스트."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from models.share_request_models import ShareRequest
from services.damage_report_service import DamageReportService
from services.message_service import MessageService
from services.review_service import ReviewService, serialize_review
from services.share_request_service import ShareRequestService

TS = "2026-01-01T00:00:00Z"
ADMIN_ID = "a0000000-0000-0000-0000-000000000001"
SHARE = ShareRequest(id="s1", user_id="u1", listing_id="l1", platform="instagram",
                     status="pending")


# ==========================================
# 리뷰
# ==========================================


def test_review_actions_depend_on_approval():
    pending = serialize_review({"id": "r1", "is_approved": 0, "user_full_name": "김철수"})
    approved = serialize_review({"id": "r2", "is_approved": 1})

    assert pending["actions"] == ["approve", "reject", "delete"]
    assert pending["user"] == {"full_name": "김철수"}
    assert approved["actions"] == ["delete"]
    assert approved["listing"] is None


@pytest.mark.asyncio
async def test_review_status_filter_maps_to_flag():
    with patch("models.review_models.get_reviews", new_callable=AsyncMock,
               return_value=[]) as get_reviews:
        await ReviewService.list_reviews("approved")
        await ReviewService.list_reviews("all")

    assert [c.args[0] for c in get_reviews.await_args_list] == [True, None]


@pytest.mark.asyncio
async def test_review_unknown_status_raises():
    with pytest.raises(ValueError):
        await ReviewService.list_reviews("rejected")


@pytest.mark.asyncio
async def test_reject_review_without_reason_makes_no_call():
    with patch("models.review_models.update_review_status", new_callable=AsyncMock) as update:
        with pytest.raises(HTTPException) as exc_info:
            await ReviewService.reject_review("r1", ADMIN_ID, None, TS)

    assert exc_info.value.status_code == 400
    update.assert_not_called()


@pytest.mark.asyncio
async def test_reject_review_calls_status_update():
    with patch("models.review_models.update_review_status", new_callable=AsyncMock) as update:
        notifications = await ReviewService.reject_review("r1", ADMIN_ID, "광고성 리뷰", TS)

    update.assert_awaited_once_with("r1", ADMIN_ID, False)
    assert notifications == [{"level": "success", "message": "리뷰가 거절되었습니다."}]


# ==========================================
# 메시지
# ==========================================


@pytest.mark.asyncio
async def test_block_sender_blocks_message_sender():
    with (
        patch("models.message_models.get_message_sender", new_callable=AsyncMock,
              return_value="sender-1"),
        patch("models.user_models.block_user", new_callable=AsyncMock) as block,
    ):
        await MessageService.block_sender("m1", ADMIN_ID, "스팸", TS)

    block.assert_awaited_once_with("sender-1", ADMIN_ID, "스팸")


@pytest.mark.asyncio
async def test_block_sender_unknown_message_is_404():
    with (
        patch("models.message_models.get_message_sender", new_callable=AsyncMock,
              return_value=None),
        patch("models.user_models.block_user", new_callable=AsyncMock) as block,
    ):
        with pytest.raises(HTTPException) as exc_info:
            await MessageService.block_sender("m1", ADMIN_ID, "스팸", TS)

    assert exc_info.value.status_code == 404
    block.assert_not_called()


@pytest.mark.asyncio
async def test_delete_message_failure_is_502():
    with patch("models.message_models.delete_message", new_callable=AsyncMock,
               side_effect=RuntimeError("procedure failed")):
        with pytest.raises(HTTPException) as exc_info:
            await MessageService.delete_message("m1", ADMIN_ID, TS)

    assert exc_info.value.detail["error"] == "message_delete_failed"


# ==========================================
# 공유 요청
# ==========================================


@pytest.mark.asyncio
async def test_complete_share_records_share():
    with (
        patch("models.share_request_models.get_share_request", new_callable=AsyncMock,
              return_value=SHARE),
        patch("models.share_request_models.process_share_request", new_callable=AsyncMock,
              return_value=True) as process,
        patch("models.share_request_models.record_share", new_callable=AsyncMock) as record,
    ):
        await ShareRequestService.complete_request("s1", ADMIN_ID, None, TS)

    process.assert_awaited_once_with("s1", "completed", ADMIN_ID, None)
    record.assert_awaited_once_with("u1", "l1", "instagram")


@pytest.mark.asyncio
async def test_share_record_failure_keeps_completion():
    with (
        patch("models.share_request_models.get_share_request", new_callable=AsyncMock,
              return_value=SHARE),
        patch("models.share_request_models.process_share_request", new_callable=AsyncMock,
              return_value=True),
        patch("models.share_request_models.record_share", new_callable=AsyncMock,
              side_effect=RuntimeError("duplicate")),
    ):
        notifications = await ShareRequestService.complete_request("s1", ADMIN_ID, None, TS)

    assert [n["level"] for n in notifications] == ["success"]


@pytest.mark.asyncio
async def test_reject_share_requires_notes():
    with patch("models.share_request_models.get_share_request",
               new_callable=AsyncMock) as get_request:
        with pytest.raises(HTTPException) as exc_info:
            await ShareRequestService.reject_request("s1", ADMIN_ID, None, TS)

    assert exc_info.value.detail["error"] == "rejection_reason_required"
    get_request.assert_not_called()


# ==========================================
# 손상 신고
# ==========================================


@pytest.mark.asyncio
async def test_damage_reject_requires_notes():
    with patch("models.damage_report_models.review_damage_report",
               new_callable=AsyncMock) as review:
        with pytest.raises(HTTPException) as exc_info:
            await DamageReportService.review("d1", ADMIN_ID, "rejected", None, TS)

    assert exc_info.value.detail["error"] == "resolution_notes_required"
    review.assert_not_called()


@pytest.mark.asyncio
async def test_damage_approve_missing_report_is_404():
    with patch("models.damage_report_models.review_damage_report", new_callable=AsyncMock,
               return_value=False):
        with pytest.raises(HTTPException) as exc_info:
            await DamageReportService.review("d1", ADMIN_ID, "approved", None, TS)

    assert exc_info.value.status_code == 404


# ==========================================
# API
# ==========================================


@pytest.mark.asyncio
async def test_reviews_api_lists_with_search(admin_client):
    rows = [
        {"id": "r1", "title": "좋아요", "content": "상태 좋음", "is_approved": 0,
         "listing_brand": "Kia", "listing_model": "K5"},
        {"id": "r2", "title": "별로", "content": "연락 안됨", "is_approved": 0,
         "listing_brand": "Hyundai", "listing_model": "Avante"},
    ]
    with patch("models.review_models.get_reviews", new_callable=AsyncMock, return_value=rows):
        res = await admin_client.get("/v1/admin/reviews", params={"search": "k5"})

    data = res.json()["data"]
    assert [r["id"] for r in data["items"]] == ["r1"]
    assert data["matched_count"] == 1


@pytest.mark.asyncio
async def test_messages_api_empty_is_no_data(admin_client):
    with patch("models.message_models.get_messages", new_callable=AsyncMock, return_value=[]):
        res = await admin_client.get("/v1/admin/messages")

    assert res.json()["data"]["empty_reason"] == "no_data"


@pytest.mark.asyncio
async def test_share_process_api_invalid_status_is_422(admin_client):
    res = await admin_client.post(
        "/v1/admin/share-requests/s1/process", json={"status": "approved"}
    )
    assert res.status_code == 422
