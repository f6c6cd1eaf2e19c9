"""report_service: 신고 조회 및 처리(승인/거절) 비즈니스 로직을 처리하는 서비스.

신고는 pending에서 approved 또는 rejected로 한 번만 전이합니다.
승인 시 부가 작업(소유자 차단, 대상 삭제)은 주 처리 이후에 순서대로 시도하며,
부가 작업 실패는 알림으로만 보고하고 주 처리를 되돌리지 않습니다.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from models import listing_models, message_models, report_models, user_models
from models.report_models import KIND_ADMIN_LISTING, KIND_LISTING, KIND_MESSAGE, REPORT_KINDS
from realtime.live_view import TableWatch
from schemas.common import notification
from services.views import ViewDefinition, is_truncated
from utils.exceptions import (
    already_processing_error,
    bad_request_error,
    conflict_error,
    not_found_error,
    remote_call_error,
)
from utils.formatters import format_row
from utils.processing import AlreadyProcessing, processing_registry

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

STATUS_LABELS = {
    STATUS_PENDING: "대기 중",
    STATUS_APPROVED: "승인됨",
    STATUS_REJECTED: "거절됨",
}

KIND_LABELS = {
    KIND_LISTING: "매물 신고",
    KIND_MESSAGE: "메시지 신고",
    KIND_ADMIN_LISTING: "관리자 매물 신고",
}

# 목록 종류 필터 → 조회할 신고 종류
KIND_FILTERS = {
    "all": REPORT_KINDS,
    "listing": (KIND_LISTING, KIND_ADMIN_LISTING),
    "message": (KIND_MESSAGE,),
}

REPORT_SEARCH_FIELDS = (
    "reason",
    "details",
    "reporter.full_name",
    "reporter.email",
    "listing.brand",
    "listing.model",
    "message.content",
    "message_sender.full_name",
    "message_receiver.full_name",
)


@dataclass(frozen=True)
class ActionOutcome:
    """원격 호출 하나의 결과.

    Attributes:
        action: 작업 이름 (예: "report_approve", "block_user").
        ok: 성공 여부.
        message: 관리자에게 보여줄 알림 메시지.
    """

    action: str
    ok: bool
    message: str


@dataclass
class ResolutionResult:
    """신고 처리 결과 (주 처리 + 부가 작업)."""

    primary: ActionOutcome
    side_effects: list[ActionOutcome] = field(default_factory=list)
    report: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.primary.ok

    def notifications(self) -> list[dict[str, str]]:
        """실행 순서대로 알림 목록을 만듭니다."""
        outcomes = [self.primary, *self.side_effects]
        return [
            notification("success" if o.ok else "error", o.message) for o in outcomes
        ]


def serialize_report(report: dict[str, Any]) -> dict[str, Any]:
    """신고 딕셔너리에 상태 표시와 가능한 작업을 붙입니다.

    처리 작업(approve, reject)은 pending 상태에서만 제공됩니다.
    """
    status = report.get("status")
    data = format_row(report)
    data["status_label"] = STATUS_LABELS.get(status, status)
    data["kind_label"] = KIND_LABELS.get(report.get("kind"), report.get("kind"))
    data["actions"] = ["approve", "reject"] if status == STATUS_PENDING else []
    return data


def _owner_id(report: dict[str, Any]) -> str | None:
    """차단 대상: 매물 신고는 매물 등록자, 메시지 신고는 발신자."""
    if report["kind"] == KIND_MESSAGE:
        return (report.get("message") or {}).get("sender_id")
    return (report.get("listing") or {}).get("user_id")


def _sort_key(report: dict[str, Any]) -> datetime:
    return report.get("created_at") or datetime.min


class ReportService:
    """신고 관리 서비스."""

    @staticmethod
    async def list_reports(
        kind: str | None = "all", status: str | None = STATUS_PENDING
    ) -> tuple[list[dict], bool]:
        """종류 필터에 해당하는 신고를 합쳐 최신순으로 반환합니다.

        Raises:
            ValueError: 알 수 없는 종류 필터.
        """
        kinds = KIND_FILTERS.get(kind or "all")
        if kinds is None:
            raise ValueError(f"알 수 없는 신고 종류입니다: {kind}")
        status_filter = None if status in (None, "", "all") else status

        results = await asyncio.gather(
            *(report_models.get_reports_by_kind(k, status_filter) for k in kinds)
        )
        truncated = any(is_truncated(rows) for rows in results)
        merged = [report for rows in results for report in rows]
        merged.sort(key=_sort_key, reverse=True)
        return [serialize_report(r) for r in merged], truncated

    @staticmethod
    async def get_report(kind: str, report_id: str, timestamp: str) -> dict:
        report = await report_models.get_report(kind, report_id)
        if not report:
            raise not_found_error("report", timestamp)
        return serialize_report(report)

    @staticmethod
    async def _load_pending(kind: str, report_id: str, action: str, timestamp: str) -> dict:
        try:
            report = await report_models.get_report(kind, report_id)
        except Exception:
            logger.exception(f"신고 조회 실패: {kind}:{report_id}")
            raise remote_call_error(action, timestamp, "신고 정보를 불러오지 못했습니다.")
        if not report:
            raise not_found_error("report", timestamp)
        if report["status"] != STATUS_PENDING:
            raise conflict_error("already_processed", timestamp, "이미 처리된 신고입니다.")
        return report

    @staticmethod
    async def _refetch(kind: str, report_id: str) -> dict | None:
        try:
            report = await report_models.get_report(kind, report_id)
        except Exception:
            logger.exception(f"처리 후 신고 재조회 실패: {kind}:{report_id}")
            return None
        return serialize_report(report) if report else None

    @staticmethod
    async def approve_report(
        kind: str,
        report_id: str,
        admin_id: str,
        notes: str | None,
        delete_target: bool,
        block_owner: bool,
        timestamp: str,
    ) -> ResolutionResult:
        """신고를 승인하고 요청된 부가 작업을 실행합니다.

        Raises:
            HTTPException: 404 신고 없음, 409 처리 중/이미 처리됨,
                502 주 처리 실패 (부가 작업은 시도하지 않음).
        """
        try:
            async with processing_registry.hold("report", f"{kind}:{report_id}"):
                report = await ReportService._load_pending(
                    kind, report_id, "report_approve", timestamp
                )

                try:
                    await report_models.process_report(
                        kind, report_id, admin_id, STATUS_APPROVED, notes
                    )
                except Exception:
                    logger.exception(f"신고 승인 실패: {kind}:{report_id}")
                    raise remote_call_error(
                        "report_approve", timestamp, "신고를 승인하지 못했습니다."
                    )

                result = ResolutionResult(
                    primary=ActionOutcome("report_approve", True, "신고가 승인되었습니다.")
                )

                if block_owner:
                    result.side_effects.append(
                        await ReportService._block_owner(report, admin_id, notes)
                    )
                if delete_target:
                    result.side_effects.append(
                        await ReportService._delete_target(report, admin_id)
                    )

                result.report = await ReportService._refetch(kind, report_id)
                return result
        except AlreadyProcessing:
            raise already_processing_error("report", timestamp)

    @staticmethod
    async def _block_owner(
        report: dict[str, Any], admin_id: str, notes: str | None
    ) -> ActionOutcome:
        owner_id = _owner_id(report)
        if not owner_id:
            return ActionOutcome("block_user", False, "차단할 사용자를 찾을 수 없습니다.")

        reason = f"{KIND_LABELS[report['kind']]} 승인: {notes or report.get('reason') or ''}"
        try:
            await user_models.block_user(owner_id, admin_id, reason)
        except Exception:
            logger.exception(f"신고 승인 후 사용자 차단 실패: {owner_id}")
            return ActionOutcome("block_user", False, "사용자를 차단하지 못했습니다.")
        return ActionOutcome("block_user", True, "사용자가 차단되었습니다.")

    @staticmethod
    async def _delete_target(report: dict[str, Any], admin_id: str) -> ActionOutcome:
        if report["kind"] == KIND_MESSAGE:
            message_id = report.get("message_id")
            if not message_id:
                return ActionOutcome("delete_message", False, "삭제할 메시지가 없습니다.")
            try:
                await message_models.delete_message(message_id, admin_id)
            except Exception:
                logger.exception(f"신고 승인 후 메시지 삭제 실패: {message_id}")
                return ActionOutcome("delete_message", False, "메시지를 삭제하지 못했습니다.")
            return ActionOutcome("delete_message", True, "메시지가 삭제되었습니다.")

        listing_id = report.get("listing_id")
        if not listing_id:
            return ActionOutcome("delete_listing", False, "삭제할 매물이 없습니다.")
        try:
            await listing_models.delete_listing(listing_id, admin_id)
        except Exception:
            logger.exception(f"신고 승인 후 매물 삭제 실패: {listing_id}")
            return ActionOutcome("delete_listing", False, "매물을 삭제하지 못했습니다.")
        return ActionOutcome("delete_listing", True, "매물이 삭제되었습니다.")

    @staticmethod
    async def reject_report(
        kind: str,
        report_id: str,
        admin_id: str,
        notes: str | None,
        timestamp: str,
    ) -> ResolutionResult:
        """신고를 거절합니다. 처리 메모가 없으면 호출 없이 400을 반환합니다.

        Raises:
            HTTPException: 400 메모 누락, 404 신고 없음, 409 처리 중/이미 처리됨,
                502 처리 실패.
        """
        if not notes or not notes.strip():
            raise bad_request_error(
                "resolution_notes_required", timestamp, "거절 사유를 입력해주세요."
            )

        try:
            async with processing_registry.hold("report", f"{kind}:{report_id}"):
                await ReportService._load_pending(kind, report_id, "report_reject", timestamp)
                try:
                    await report_models.process_report(
                        kind, report_id, admin_id, STATUS_REJECTED, notes.strip()
                    )
                except Exception:
                    logger.exception(f"신고 거절 실패: {kind}:{report_id}")
                    raise remote_call_error(
                        "report_reject", timestamp, "신고를 거절하지 못했습니다."
                    )

                return ResolutionResult(
                    primary=ActionOutcome("report_reject", True, "신고가 거절되었습니다."),
                    report=await ReportService._refetch(kind, report_id),
                )
        except AlreadyProcessing:
            raise already_processing_error("report", timestamp)


REPORTS_VIEW = ViewDefinition(
    name="reports",
    loader=ReportService.list_reports,
    search_fields=REPORT_SEARCH_FIELDS,
    watches=(
        TableWatch("listing_reports"),
        TableWatch("message_reports"),
        TableWatch("admin_reports"),
    ),
    error_message="신고 목록을 불러오지 못했습니다.",
    filters={"kind": "all", "status": STATUS_PENDING},
)
