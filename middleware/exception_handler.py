"""exception_handler: 전역 예외 처리 핸들러 모듈.

컨트롤러에서 변환되지 않은 예외를 일관된 형식의 응답으로 바꿉니다.
"""

import uuid
import logging
import traceback
from logging.handlers import RotatingFileHandler
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from database.connection import ProcedureError
from dependencies.request_context import get_request_timestamp


logger = logging.getLogger("api")

error_logger = logging.getLogger("api.error")
error_logger.setLevel(logging.ERROR)

# 10MB 단위로 로테이션, 최대 5개 백업 파일
if not error_logger.handlers:
    error_file_handler = RotatingFileHandler(
        "server_error.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    error_file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    )
    error_logger.addHandler(error_file_handler)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """전역 예외 처리 핸들러.

    추적 ID를 붙여 파일 로그에 남기고 500 응답을 반환합니다.
    DEBUG=False에서는 예외 메시지를 응답에 포함하지 않습니다.
    """
    from core.config import settings

    tracking_id = str(uuid.uuid4())
    timestamp = get_request_timestamp(request)

    logger.error(f"[{tracking_id}] Unhandled exception: {exc}")
    error_logger.error(
        f"[{tracking_id}] {request.method} {request.url.path} "
        f"Unhandled exception: {exc}\n{traceback.format_exc()}"
    )

    content = {
        "trackingID": tracking_id,
        "error": "Internal Server Error",
        "timestamp": timestamp,
    }
    if settings.DEBUG:
        content["detail"] = str(exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )


async def procedure_error_handler(request: Request, exc: ProcedureError) -> JSONResponse:
    """컨트롤러를 빠져나온 프로시저 오류를 502로 변환합니다.

    데이터베이스 메시지는 로그에만 남기고 응답에는 프로시저 이름만 포함합니다.
    """
    timestamp = get_request_timestamp(request)
    logger.error(f"프로시저 호출 실패 ({exc.procedure}): {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "detail": {
                "error": "remote_call_failed",
                "message": "데이터베이스 작업이 실패했습니다.",
                "procedure": exc.procedure,
                "timestamp": timestamp,
            }
        },
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """요청 데이터 유효성 검사 예외 처리 핸들러.

    업로드 파일 본문 같은 바이너리 입력은 길이만 남긴 플레이스홀더로 바꿉니다.
    """
    timestamp = get_request_timestamp(request)

    sanitized_errors = []
    for error in exc.errors():
        error_copy = dict(error)

        input_val = error_copy.get("input")
        if isinstance(input_val, bytes):
            error_copy["input"] = f"<binary data: {len(input_val)} bytes>"

        if isinstance(error_copy.get("ctx"), dict):
            error_copy["ctx"] = {
                k: f"<binary data: {len(v)} bytes>" if isinstance(v, bytes) else v
                for k, v in error_copy["ctx"].items()
            }

        sanitized_errors.append(error_copy)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={"detail": jsonable_encoder(sanitized_errors), "timestamp": timestamp},
    )
