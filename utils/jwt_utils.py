"""jwt_utils: 관리자 Access Token 생성 및 검증 유틸리티 모듈.

HS256 JWT의 sub 클레임에 관리자 ID(UUID 문자열)만 담습니다.
"""

from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, status

from core.config import settings

_JWT_ALGORITHM = "HS256"
_TOKEN_TYPE = "admin_access"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _token_error(error_code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": error_code,
            "timestamp": _now_utc().strftime("%Y-%m-%dT%H:%M:%SZ"),
            "message": "관리자 세션이 없거나 만료되었습니다. 다시 로그인해주세요.",
        },
    )


def create_access_token(admin_id: str) -> str:
    """관리자 Access Token을 생성합니다 (설정된 만료 시간 적용).

    PII(이메일, 이름 등)는 포함하지 않습니다.
    """
    now = _now_utc()
    payload = {
        "sub": str(admin_id),
        "iat": int(now.timestamp()),
        "exp": int(
            (now + timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES)).timestamp()
        ),
        "type": _TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=_JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Access Token을 디코딩하고 클레임을 반환합니다.

    Raises:
        HTTPException 401: 토큰이 만료되었거나 유효하지 않은 경우.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[_JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise _token_error("token_expired")
    except jwt.PyJWTError:
        raise _token_error("token_invalid")

    if payload.get("type") != _TOKEN_TYPE:
        raise _token_error("token_invalid")

    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise _token_error("token_invalid")

    return payload
