"""dashboard_router: 대시보드 라우터 모듈."""

from fastapi import APIRouter, Depends, Request, status

from controllers import dashboard_controller
from dependencies.auth import AdminContext, require_admin

dashboard_router = APIRouter(prefix="/v1/admin/dashboard", tags=["dashboard"])


@dashboard_router.get("/badges", status_code=status.HTTP_200_OK)
async def get_badges(
    request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    """메뉴 배지(대기 중 항목 수)를 조회합니다."""
    return await dashboard_controller.get_badges(request)


@dashboard_router.get("/stats", status_code=status.HTTP_200_OK)
async def get_stats(
    request: Request, admin: AdminContext = Depends(require_admin)
) -> dict:
    return await dashboard_controller.get_stats(request)
