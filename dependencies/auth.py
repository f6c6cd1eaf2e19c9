"""auth: FastAPI 의존성 주입을 위한 관리자 인증 모듈.

Bearer Access Token을 검증하고 관리자 자격 증명(AdminContext)을 만듭니다.
모든 관리 작업은 이 자격 증명을 인자로 받습니다.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, WebSocket
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dependencies.request_context import get_request_timestamp
from models import admin_models
from utils.exceptions import unauthorized_error
from utils.jwt_utils import decode_access_token

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AdminContext:
    """요청을 수행하는 관리자의 명시적 자격 증명."""

    admin_id: str
    username: str


async def resolve_admin(token: str | None, timestamp: str) -> AdminContext:
    """토큰으로 활성 관리자를 확인합니다.

    Raises:
        HTTPException: 토큰이 없거나 유효하지 않거나, 관리자가 없거나 비활성이면 401.
    """
    if not token:
        raise unauthorized_error(timestamp)

    payload = decode_access_token(token)
    admin = await admin_models.get_admin_by_id(payload["sub"])
    if not admin:
        raise unauthorized_error(timestamp)
    if not admin.is_active:
        raise unauthorized_error(timestamp, "account_disabled")

    return AdminContext(admin_id=admin.id, username=admin.username)


async def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> AdminContext:
    """Authorization 헤더에서 현재 관리자를 추출하고 검증합니다.

    Raises:
        HTTPException: 인증 실패 시 401.
    """
    token = credentials.credentials if credentials else None
    return await resolve_admin(token, get_request_timestamp(request))


async def authenticate_websocket(websocket: WebSocket) -> AdminContext | None:
    """WebSocket 연결의 token 쿼리 파라미터로 관리자를 확인합니다.

    인증 실패 시 None을 반환합니다 (연결 종료는 호출자가 처리).
    """
    token = websocket.query_params.get("token")
    try:
        return await resolve_admin(token, "")
    except HTTPException:
        return None
