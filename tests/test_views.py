"""test_views: 목록 필터, 화면 조회 흐름, 작업 실행기 테스트."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException

from realtime import TableWatch
from services.dispatcher import dispatch
from services.view_registry import VIEWS
from services.views import ViewDefinition, load_view
from utils.filters import build_list_payload, filter_items, matches_search
from utils.formatters import nest_prefixed
from utils.processing import AlreadyProcessing, ProcessingRegistry, processing_registry

TS = "2026-01-01T00:00:00Z"

USERS = [
    {"id": "u1", "full_name": "김철수", "email": "chulsoo@example.com", "company": None},
    {"id": "u2", "full_name": "Lee Younghee", "email": "lee@autinoa.com", "company": "Autinoa Motors"},
]


# ==========================================
# 검색어 필터
# ==========================================


class TestFilters:
    def test_case_insensitive_substring(self):
        assert [u["id"] for u in filter_items(USERS, ("full_name", "email"), "LEE")] == ["u2"]

    def test_empty_search_matches_all(self):
        assert filter_items(USERS, ("full_name",), "") == USERS
        assert filter_items(USERS, ("full_name",), "   ") == USERS
        assert filter_items(USERS, ("full_name",), None) == USERS

    def test_none_field_never_matches(self):
        assert not matches_search(USERS[0], ("company",), "none")

    def test_nested_path(self):
        item = {"listing": {"brand": "Kia"}, "reporter": None}
        assert matches_search(item, ("listing.brand",), "ki")
        assert not matches_search(item, ("reporter.full_name",), "ki")

    def test_filter_is_idempotent(self):
        once = filter_items(USERS, ("email",), "example")
        assert filter_items(once, ("email",), "example") == once

    def test_payload_distinguishes_empty_reasons(self):
        assert build_list_payload([], [])["empty_reason"] == "no_data"
        assert build_list_payload(USERS, [])["empty_reason"] == "no_match"
        payload = build_list_payload(USERS, USERS[:1], truncated=True)
        assert payload["empty_reason"] is None
        assert payload["total_count"] == 2
        assert payload["matched_count"] == 1
        assert payload["truncated"] is True


def test_nest_prefixed_collapses_join_columns():
    row = {"id": "d1", "user_full_name": "김철수", "user_email": None}
    assert nest_prefixed(row, "user") == {
        "id": "d1",
        "user": {"full_name": "김철수", "email": None},
    }

    empty = nest_prefixed({"id": "d2", "user_full_name": None, "user_email": None}, "user")
    assert empty["user"] is None


# ==========================================
# 화면 조회
# ==========================================


def make_view(loader) -> ViewDefinition:
    return ViewDefinition(
        name="users",
        loader=loader,
        search_fields=("full_name", "email"),
        watches=(TableWatch("users"),),
        error_message="사용자 목록을 불러오지 못했습니다.",
        filters={"corporate": "false"},
    )


@pytest.mark.asyncio
async def test_load_view_applies_default_filters_and_search():
    loader = AsyncMock(return_value=(USERS, False))

    payload = await load_view(make_view(loader), TS, search="autinoa", unknown="x")

    loader.assert_awaited_once_with(corporate="false")
    assert [u["id"] for u in payload["items"]] == ["u2"]
    assert payload["total_count"] == 2


@pytest.mark.asyncio
async def test_load_view_failure_is_503_without_partial_data():
    loader = AsyncMock(side_effect=RuntimeError("timeout"))

    with pytest.raises(HTTPException) as exc_info:
        await load_view(make_view(loader), TS, corporate="true")

    assert exc_info.value.status_code == 503
    assert exc_info.value.detail["error"] == "users_fetch_failed"
    assert exc_info.value.detail["message"] == "사용자 목록을 불러오지 못했습니다."


def test_registry_names_match_definitions():
    assert all(name == view.name for name, view in VIEWS.items())
    assert {"reports", "users", "listings", "reviews", "messages", "documents"} <= set(VIEWS)
    assert all(view.watches for view in VIEWS.values())


# ==========================================
# 처리 중 표시 / 작업 실행기
# ==========================================


class TestProcessingRegistry:
    @pytest.mark.asyncio
    async def test_hold_rejects_duplicate_and_releases(self):
        registry = ProcessingRegistry()

        async with registry.hold("user", "u1") as key:
            assert registry.is_processing(key)
            with pytest.raises(AlreadyProcessing):
                async with registry.hold("user", "u1"):
                    pass
            async with registry.hold("user", "u2"):
                pass

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_released_after_exception(self):
        registry = ProcessingRegistry()

        with pytest.raises(RuntimeError):
            async with registry.hold("listing", "l1"):
                raise RuntimeError("boom")

        assert not registry.is_processing("listing:l1")


class TestDispatch:
    @pytest.mark.asyncio
    async def test_success_returns_result_and_notification(self):
        call = AsyncMock(return_value={"id": "u1"})

        result, notifications = await dispatch(
            "user", "u1", "block_user", call,
            timestamp=TS, success_message="차단되었습니다.", failure_message="실패",
        )

        assert result == {"id": "u1"}
        assert notifications == [{"level": "success", "message": "차단되었습니다."}]
        call.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_remote_failure_is_502_with_generic_message(self):
        call = AsyncMock(side_effect=RuntimeError("SQLSTATE 45000: secret detail"))

        with pytest.raises(HTTPException) as exc_info:
            await dispatch(
                "user", "u1", "unblock_user", call,
                timestamp=TS, success_message="ok", failure_message="해제하지 못했습니다.",
            )

        assert exc_info.value.status_code == 502
        assert exc_info.value.detail["error"] == "unblock_user_failed"
        assert "secret" not in exc_info.value.detail["message"]
        assert len(processing_registry) == 0

    @pytest.mark.asyncio
    async def test_passthrough_exception_is_not_wrapped(self):
        class Missing(Exception):
            pass

        with pytest.raises(Missing):
            await dispatch(
                "user", "u1", "notify", AsyncMock(side_effect=Missing()),
                timestamp=TS, success_message="ok", failure_message="fail",
                passthrough=(Missing,),
            )

    @pytest.mark.asyncio
    async def test_duplicate_submission_makes_no_second_call(self):
        release = asyncio.Event()

        async def wait_release():
            await release.wait()

        first_call = AsyncMock(side_effect=wait_release)
        second_call = AsyncMock()

        first = asyncio.create_task(
            dispatch("review", "r1", "review_approve", first_call,
                     timestamp=TS, success_message="ok", failure_message="fail")
        )
        await asyncio.sleep(0)

        with pytest.raises(HTTPException) as exc_info:
            await dispatch("review", "r1", "review_approve", second_call,
                           timestamp=TS, success_message="ok", failure_message="fail")

        assert exc_info.value.status_code == 409
        second_call.assert_not_called()
        release.set()
        await first
