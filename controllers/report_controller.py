"""report_controller: 신고 관리 컨트롤러 모듈."""

from fastapi import Request

from controllers.view_controller import list_view
from dependencies.auth import AdminContext
from dependencies.request_context import get_request_timestamp
from schemas.common import create_response
from schemas.report_schemas import ApproveReportRequest, RejectReportRequest
from services.report_service import REPORTS_VIEW, ReportService


async def get_reports(
    request: Request, kind: str, report_status: str, search: str | None
) -> dict:
    """신고 목록을 조회합니다 (종류/상태 필터, 검색어)."""
    return await list_view(
        REPORTS_VIEW, request, search=search, kind=kind, status=report_status
    )


async def get_report(kind: str, report_id: str, request: Request) -> dict:
    timestamp = get_request_timestamp(request)
    report = await ReportService.get_report(kind, report_id, timestamp)
    return create_response(
        "REPORT_RETRIEVED",
        "신고 조회에 성공했습니다.",
        data={"report": report},
        timestamp=timestamp,
        notifications=[],
    )


async def approve_report(
    kind: str,
    report_id: str,
    payload: ApproveReportRequest,
    admin: AdminContext,
    request: Request,
) -> dict:
    """신고를 승인합니다. 부가 작업 결과는 notifications에 순서대로 담깁니다."""
    timestamp = get_request_timestamp(request)
    result = await ReportService.approve_report(
        kind,
        report_id,
        admin.admin_id,
        payload.notes,
        payload.delete_target,
        payload.block_owner,
        timestamp,
    )
    return create_response(
        "REPORT_APPROVED",
        "신고가 승인되었습니다.",
        data={
            "report": result.report,
            "side_effects": [
                {"action": o.action, "ok": o.ok} for o in result.side_effects
            ],
        },
        timestamp=timestamp,
        notifications=result.notifications(),
    )


async def reject_report(
    kind: str,
    report_id: str,
    payload: RejectReportRequest,
    admin: AdminContext,
    request: Request,
) -> dict:
    timestamp = get_request_timestamp(request)
    result = await ReportService.reject_report(
        kind, report_id, admin.admin_id, payload.notes, timestamp
    )
    return create_response(
        "REPORT_REJECTED",
        "신고가 거절되었습니다.",
        data={"report": result.report},
        timestamp=timestamp,
        notifications=result.notifications(),
    )
