# logging: 요청/응답 로깅 미들웨어
# 관리자 API 요청의 메소드, 경로, 클라이언트 IP, 상태 코드, 처리 시간을 남긴다.

import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from middleware.rate_limiter import get_client_ip

logger = logging.getLogger("api")
logger.setLevel(logging.INFO)

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)

# 로드밸런서 헬스 체크는 로그에서 제외
_QUIET_PATHS = {"/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    요청/응답 로깅 미들웨어
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in _QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = get_client_ip(request)
        logger.info(f"-> {request.method} {path} ({client_ip})")

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"<- {request.method} {path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )
        return response
