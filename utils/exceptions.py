"""exceptions: API 에러 응답 생성 헬퍼 모듈.

자주 사용되는 HTTP 에러 응답을 표준화된 형식으로 생성합니다.
"""

from fastapi import HTTPException, status


def not_found_error(resource: str, timestamp: str) -> HTTPException:
    """리소스를 찾을 수 없을 때 404 에러를 생성합니다.

    Args:
        resource: 리소스 이름 (예: 'user', 'post', 'comment').
        timestamp: 요청 타임스탬프.

    Returns:
        HTTPException: 404 Not Found 예외.
    """
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": f"{resource}_not_found",
            "timestamp": timestamp,
        },
    )


def bad_request_error(
    error_code: str, timestamp: str, message: str | None = None
) -> HTTPException:
    """잘못된 요청에 대한 400 에러를 생성합니다.

    Args:
        error_code: 에러 코드 (예: 'invalid_input', 'no_changes_provided').
        timestamp: 요청 타임스탬프.
        message: 사용자에게 표시할 메시지 (선택).

    Returns:
        HTTPException: 400 Bad Request 예외.
    """
    detail = {
        "error": error_code,
        "timestamp": timestamp,
    }
    if message:
        detail["message"] = message
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def conflict_error(
    error_code: str, timestamp: str, message: str | None = None
) -> HTTPException:
    """현재 상태와 맞지 않는 요청에 대한 409 에러를 생성합니다.

    Args:
        error_code: 에러 코드 (예: 'already_processed').
        timestamp: 요청 타임스탬프.
        message: 사용자에게 표시할 메시지 (선택).

    Returns:
        HTTPException: 409 Conflict 예외.
    """
    detail = {
        "error": error_code,
        "timestamp": timestamp,
    }
    if message:
        detail["message"] = message
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )


def unauthorized_error(timestamp: str, error_code: str = "unauthorized") -> HTTPException:
    """관리자 인증이 없거나 유효하지 않을 때 401 에러를 생성합니다.

    Args:
        timestamp: 요청 타임스탬프.
        error_code: 에러 코드 (예: 'unauthorized', 'token_expired').

    Returns:
        HTTPException: 401 Unauthorized 예외.
    """
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": error_code,
            "timestamp": timestamp,
            "message": "관리자 세션이 없거나 만료되었습니다. 다시 로그인해주세요.",
        },
    )


def already_processing_error(resource: str, timestamp: str) -> HTTPException:
    """같은 엔티티에 대한 작업이 진행 중일 때 409 에러를 생성합니다.

    Args:
        resource: 리소스 이름 (예: 'report', 'user').
        timestamp: 요청 타임스탬프.

    Returns:
        HTTPException: 409 Conflict 예외.
    """
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error": "already_processing",
            "resource": resource,
            "timestamp": timestamp,
            "message": "이미 처리 중인 요청입니다. 잠시 후 다시 시도해주세요.",
        },
    )


def remote_call_error(
    action: str, timestamp: str, message: str, notifications: list | None = None
) -> HTTPException:
    """원격 호출(쿼리/프로시저)이 실패했을 때 502 에러를 생성합니다.

    구체적인 원인은 로그에만 남기고 사용자에게는 일반 메시지만 전달합니다.

    Args:
        action: 실패한 작업 (예: 'report_approve').
        timestamp: 요청 타임스탬프.
        message: 사용자에게 표시할 메시지.
        notifications: 함께 표시할 알림 목록 (선택).

    Returns:
        HTTPException: 502 Bad Gateway 예외.
    """
    detail = {
        "error": f"{action}_failed",
        "timestamp": timestamp,
        "message": message,
    }
    if notifications:
        detail["notifications"] = notifications
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=detail,
    )


def view_unavailable_error(view: str, timestamp: str, message: str) -> HTTPException:
    """목록 화면의 초기 조회가 실패했을 때 503 에러를 생성합니다.

    부분 결과 없이 화면 전체를 오류 상태로 대체합니다.

    Args:
        view: 화면 이름 (예: 'reports', 'users').
        timestamp: 요청 타임스탬프.
        message: 사용자에게 표시할 메시지.

    Returns:
        HTTPException: 503 Service Unavailable 예외.
    """
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={
            "error": f"{view}_fetch_failed",
            "timestamp": timestamp,
            "message": message,
        },
    )
