# timing: 요청 타이밍 미들웨어
# 요청마다 UTC 타임스탬프를 한 번만 찍어 응답 envelope와 에러 detail이 같은 값을 쓰게 한다.

from datetime import datetime, timezone
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class TimingMiddleware(BaseHTTPMiddleware):
    """
    요청 타이밍 미들웨어

    request.state.request_time에 요청 수신 시각을 저장하고,
    처리 시간을 X-Process-Time 헤더로 돌려줍니다.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.request_time = datetime.now(timezone.utc)

        response = await call_next(request)

        elapsed = datetime.now(timezone.utc) - request.state.request_time
        response.headers["X-Process-Time"] = f"{elapsed.total_seconds():.3f}"
        return response
