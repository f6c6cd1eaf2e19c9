"""rate_limiter: 관리자 API 요청 속도 제한 미들웨어.

클라이언트 IP와 경로 조합마다 독립된 슬라이딩 윈도우로 요청 수를 셉니다.
한 경로에서 쌓인 요청이 다른 경로(예: 로그인)의 한도를 소모하지 않습니다.

- 추적 키 수 상한과 배치 제거로 메모리 보호
- X-Forwarded-For 검증으로 IP 위조 방어
- "unknown" IP에 대한 엄격한 제한
"""

import asyncio
import ipaddress
import logging
import os
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import settings

logger = logging.getLogger(__name__)

RateLimitKey = Tuple[str, str]

_UNKNOWN_IPS = ("unknown", "0.0.0.0", "")
_UNKNOWN_IP_MAX_REQUESTS = 10


def is_valid_ip(ip_str: str) -> bool:
    """IP 주소 형식을 검증합니다.

    IPv4와 IPv6 모두 지원합니다.

    Args:
        ip_str: 검증할 IP 주소 문자열.

    Returns:
        유효한 IP 주소이면 True, 아니면 False.
    """
    try:
        ipaddress.ip_address(ip_str)
        return True
    except ValueError:
        return False


class RateLimiter:
    """(IP, 경로)별 메모리 기반 Rate Limiter.

    단일 프로세스 안에서만 유효하며, 추적 키 수가 상한에 닿으면
    마지막 요청이 가장 오래된 키부터 일괄 제거합니다.
    """

    def __init__(self, max_tracked_keys: int | None = None):
        """RateLimiter 초기화.

        Args:
            max_tracked_keys: 최대 추적 (IP, 경로) 수 (기본: settings.RATE_LIMIT_MAX_KEYS).
        """
        self._requests: Dict[RateLimitKey, list] = defaultdict(list)
        self._lock = asyncio.Lock()
        self.max_tracked_keys = (
            max_tracked_keys if max_tracked_keys is not None else settings.RATE_LIMIT_MAX_KEYS
        )

    def tracked_keys(self) -> list[RateLimitKey]:
        return list(self._requests)

    def _evict_oldest(self) -> None:
        eviction_count = max(1, self.max_tracked_keys // 10)
        by_last_request = sorted(
            self._requests.items(),
            key=lambda item: max(item[1]) if item[1] else datetime.min,
        )
        for key, _ in by_last_request[:eviction_count]:
            del self._requests[key]
        logger.warning(
            f"Rate Limiter 배치 제거: {eviction_count}개 키 제거 "
            f"(남은 키: {len(self._requests)}개)"
        )

    async def is_rate_limited(
        self, ip: str, path: str, max_requests: int, window_seconds: int
    ) -> Tuple[bool, int]:
        """이 (IP, 경로)의 요청이 속도 제한에 걸리는지 확인하고 기록합니다.

        Args:
            ip: 클라이언트 IP 주소.
            path: 요청 경로.
            max_requests: 윈도우 내 최대 요청 수.
            window_seconds: 시간 윈도우 (초).

        Returns:
            (제한 여부, 남은 요청 수) 튜플.
        """
        key = (ip, path)
        async with self._lock:
            if key not in self._requests and len(self._requests) >= self.max_tracked_keys:
                self._evict_oldest()

            now = datetime.now()
            window_start = now - timedelta(seconds=window_seconds)
            recent = [t for t in self._requests[key] if t > window_start]
            self._requests[key] = recent

            if ip in _UNKNOWN_IPS:
                max_requests = min(max_requests, _UNKNOWN_IP_MAX_REQUESTS)
                logger.warning(
                    f"Unknown IP 감지: {ip!r}, 엄격한 제한 적용 (최대 {max_requests}회)"
                )

            if len(recent) >= max_requests:
                return True, 0

            recent.append(now)
            return False, max_requests - len(recent)


# 전역 Rate Limiter 인스턴스
_rate_limiter = RateLimiter()


# 엔드포인트별 Rate Limit 설정
RATE_LIMIT_CONFIG = {
    # 관리자 로그인/2단계 인증 - 엄격한 제한 (브루트포스 방지)
    "/v1/admin/auth/session": {"max_requests": 5, "window_seconds": 60},
    "/v1/admin/auth/verify": {"max_requests": 5, "window_seconds": 60},
    # 비밀번호 변경, 관리자 생성
    "/v1/admin/admins/me/password": {"max_requests": 3, "window_seconds": 60},
    "/v1/admin/admins": {"max_requests": 10, "window_seconds": 60},
    # 사용자 알림 발송 - 스팸 방지
    "/v1/admin/notifications": {"max_requests": 30, "window_seconds": 60},
}

# 기본 Rate Limit (설정되지 않은 엔드포인트)
DEFAULT_RATE_LIMIT = {"max_requests": 100, "window_seconds": 60}


def get_client_ip(request: Request) -> str:
    """클라이언트 IP를 신뢰할 수 있는 방식으로 추출합니다.

    프록시 체인을 고려하여 실제 클라이언트 IP를 추출합니다.
    X-Forwarded-For 위조 공격을 방어하기 위해 신뢰할 수 있는 프록시를 검증합니다.

    처리 순서:
    1. X-Forwarded-For 헤더 확인 (신뢰된 프록시 검증)
    2. X-Real-IP 헤더 확인 (일부 프록시가 사용)
    3. 직접 연결된 클라이언트 IP

    Args:
        request: FastAPI Request 객체.

    Returns:
        클라이언트 IP 주소. 추출 실패 시 "unknown".
    """
    trusted_proxies = settings.TRUSTED_PROXIES

    # X-Forwarded-For 헤더 확인
    x_forwarded_for = request.headers.get("X-Forwarded-For")
    if x_forwarded_for:
        # X-Forwarded-For: client, proxy1, proxy2 형식
        # IP 검증: 빈 문자열과 유효하지 않은 IP 제거
        ips = [ip.strip() for ip in x_forwarded_for.split(",") if ip.strip()]
        ips = [ip for ip in ips if is_valid_ip(ip)]

        # 유효한 IP가 없는 경우
        if not ips:
            logger.warning(
                f"X-Forwarded-For 헤더에 유효한 IP 없음: {x_forwarded_for}"
            )
            # Fallback: 직접 연결 IP 확인
            if request.client and request.client.host:
                return request.client.host
            return "unknown"

        # 신뢰할 수 있는 프록시가 설정된 경우, 역순으로 검증
        # (가장 오른쪽부터 신뢰된 프록시 제거)
        if trusted_proxies:
            for ip in reversed(ips):
                if ip not in trusted_proxies:
                    logger.debug(f"실제 클라이언트 IP 추출: {ip} (프록시 검증 완료)")
                    return ip
            # 모든 IP가 신뢰된 프록시인 경우 첫 번째 IP 반환
            logger.warning(
                f"모든 IP가 신뢰된 프록시: {ips}, 첫 번째 IP 반환"
            )
            return ips[0]

        # 신뢰된 프록시 미설정 시 첫 번째 IP 반환 (기본 동작)
        return ips[0]

    # X-Real-IP 헤더 확인 (Nginx 등 일부 프록시가 사용)
    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    # 직접 연결된 클라이언트 IP
    if request.client and request.client.host:
        return request.client.host

    # IP 추출 실패
    logger.warning("클라이언트 IP 추출 실패, 'unknown' 반환")
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate Limiting 미들웨어.

    POST, PUT, PATCH, DELETE 요청을 (클라이언트 IP, 경로)별로 제한합니다.
    """

    async def dispatch(self, request: Request, call_next):
        # 테스트 환경에서는 Rate Limit 적용 안 함
        if os.environ.get("TESTING") == "true":
            return await call_next(request)

        # GET, OPTIONS 요청은 Rate Limit 적용 안 함
        # OPTIONS: CORS preflight 요청은 브라우저가 자동 생성하므로 제한 불필요
        if request.method in ("GET", "OPTIONS"):
            return await call_next(request)

        # 업로드 파일 서빙은 제외
        if request.url.path.startswith("/uploads"):
            return await call_next(request)

        # Health check 제외
        if request.url.path == "/health":
            return await call_next(request)

        client_ip = get_client_ip(request)
        path = request.url.path

        # 엔드포인트별 설정 확인
        config = RATE_LIMIT_CONFIG.get(path, DEFAULT_RATE_LIMIT)

        is_limited, remaining = await _rate_limiter.is_rate_limited(
            ip=client_ip,
            path=path,
            max_requests=config["max_requests"],
            window_seconds=config["window_seconds"],
        )

        if is_limited:
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": "too_many_requests",
                    "message": "요청이 너무 많습니다. 잠시 후 다시 시도해주세요.",
                    "retry_after_seconds": config["window_seconds"],
                },
                headers={
                    "Retry-After": str(config["window_seconds"]),
                    "X-RateLimit-Limit": str(config["max_requests"]),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)

        # Rate Limit 헤더 추가
        response.headers["X-RateLimit-Limit"] = str(config["max_requests"])
        response.headers["X-RateLimit-Remaining"] = str(remaining)

        return response
