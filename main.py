"""main: 관리자 백오피스 API의 메인 진입점.

애플리케이션 설정, 미들웨어 구성, 라우터 등록, 전역 예외 핸들러를 설정합니다.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from routers.auth_router import auth_router
from routers.dashboard_router import dashboard_router
from routers.report_router import report_router
from routers.user_router import user_router
from routers.listing_router import listing_router
from routers.moderation_router import moderation_router
from routers.verification_router import verification_router
from routers.admin_router import admin_router
from routers.live_router import live_router
from routers import notification_router
from middleware import TimingMiddleware, LoggingMiddleware, RateLimitMiddleware
from middleware.exception_handler import (
    global_exception_handler,
    procedure_error_handler,
    request_validation_exception_handler,
)
from core.config import settings
from database.connection import ProcedureError, init_db, close_db
from realtime import ChangeFeed, realtime_bridge
from fastapi.staticfiles import StaticFiles
from fastapi.exceptions import RequestValidationError
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from mangum import Mangum


_CLEANUP_INTERVAL_HOURS = 1

logger = logging.getLogger("api")


async def _periodic_cleanup() -> None:
    """만료된 2단계 인증 코드와 오래된 변경 로그를 주기적으로 정리하는 백그라운드 작업."""
    from models.admin_models import cleanup_expired_verification_codes
    from models.change_log_models import cleanup_old_changes

    while True:
        await asyncio.sleep(_CLEANUP_INTERVAL_HOURS * 3600)
        try:
            deleted = await cleanup_expired_verification_codes()
            if deleted:
                logger.info(f"만료된 인증 코드 {deleted}건 정리")
            pruned = await cleanup_old_changes()
            if pruned:
                logger.info(f"오래된 변경 로그 {pruned}건 정리")
        except Exception:
            logger.exception("주기 정리 작업 중 오류 발생")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리.

    시작 시 연결 풀을 열고 변경 피드와 주기 정리 작업을 시작하며,
    종료 시 역순으로 정리합니다.
    """
    await init_db()
    change_feed = ChangeFeed(
        realtime_bridge, interval_seconds=settings.REALTIME_POLL_INTERVAL_SECONDS
    )
    if settings.REALTIME_ENABLED:
        await change_feed.start()
    cleanup_task = asyncio.create_task(_periodic_cleanup())
    yield
    cleanup_task.cancel()
    await change_feed.stop()
    await close_db()


app = FastAPI(
    title="Autinoa Admin API",
    description="중고차 마켓플레이스 관리자 백오피스 API 서버",
    version="1.0.0",
    lifespan=lifespan,
)

# 각 요청에 타임스탬프를 주입하여 request.state에서 접근 가능하게 함
app.add_middleware(TimingMiddleware)

app.add_middleware(LoggingMiddleware)

# 관리자 로그인 브루트포스 방지를 위한 IP 기반 요청 속도 제한
app.add_middleware(RateLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# trusted_hosts="*"는 IP 스푸핑 위험이 있으므로 명시적 IP만 허용
_proxy_trusted_hosts = list(settings.TRUSTED_PROXIES) if settings.TRUSTED_PROXIES else ["127.0.0.1", "::1"]
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=_proxy_trusted_hosts)

app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(report_router)
app.include_router(user_router)
app.include_router(listing_router)
app.include_router(moderation_router)
app.include_router(verification_router)
app.include_router(admin_router)
app.include_router(notification_router.router)
app.include_router(live_router)

# 로컬 저장소 업로드 파일 서빙 (Lambda에서는 /var/task가 읽기 전용)
if settings.STORAGE_TYPE == "local":
    if os.environ.get("AWS_LAMBDA_EXEC") != "true":
        os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    if os.path.isdir(settings.UPLOAD_DIR):
        app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/health", status_code=200)
async def health_check():
    """서버 상태 및 DB 연결 확인."""
    from database.connection import test_connection

    if await test_connection():
        return {"status": "ok", "database": "connected"}
    return {"status": "error", "database": "disconnected"}


app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(ProcedureError, procedure_error_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)  # type: ignore[arg-type]

# AWS 핸들러 설정
handler = Mangum(app)
