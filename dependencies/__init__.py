"""dependencies: FastAPI 의존성 주입 패키지.

관리자 인증 및 요청 컨텍스트 관련 의존성 함수를 제공합니다.
"""

from .auth import AdminContext, authenticate_websocket, require_admin
from .request_context import get_request_timestamp

__all__ = [
    "AdminContext",
    "authenticate_websocket",
    "require_admin",
    "get_request_timestamp",
]
