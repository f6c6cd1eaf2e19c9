"""report_router: 신고 관리 라우터 모듈."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from controllers import report_controller
from dependencies.auth import AdminContext, require_admin
from schemas.report_schemas import ApproveReportRequest, RejectReportRequest

report_router = APIRouter(prefix="/v1/admin/reports", tags=["reports"])

ReportKind = Literal["listing", "message", "admin_listing"]


@report_router.get("", status_code=status.HTTP_200_OK)
async def get_reports(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    kind: Literal["all", "listing", "message"] = Query("all"),
    report_status: Literal["all", "pending", "approved", "rejected"] = Query(
        "pending", alias="status"
    ),
    search: str | None = Query(None, max_length=100),
) -> dict:
    """신고 목록을 조회합니다 (매물/메시지/관리자 신고 통합)."""
    return await report_controller.get_reports(request, kind, report_status, search)


@report_router.get("/{kind}/{report_id}", status_code=status.HTTP_200_OK)
async def get_report(
    kind: ReportKind,
    report_id: str,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """신고 상세를 조회합니다."""
    return await report_controller.get_report(kind, report_id, request)


@report_router.post("/{kind}/{report_id}/approve", status_code=status.HTTP_200_OK)
async def approve_report(
    kind: ReportKind,
    report_id: str,
    payload: ApproveReportRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """신고를 승인합니다 (선택: 대상 삭제, 소유자 차단)."""
    return await report_controller.approve_report(kind, report_id, payload, admin, request)


@report_router.post("/{kind}/{report_id}/reject", status_code=status.HTTP_200_OK)
async def reject_report(
    kind: ReportKind,
    report_id: str,
    payload: RejectReportRequest,
    request: Request,
    admin: AdminContext = Depends(require_admin),
) -> dict:
    """신고를 거절합니다 (사유 필수)."""
    return await report_controller.reject_report(kind, report_id, payload, admin, request)
