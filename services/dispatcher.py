"""dispatcher: 단일 원격 호출 관리 작업 실행기.

모든 관리 작업은 같은 순서를 따릅니다.
    1. 엔티티를 처리 중으로 표시 (이미 처리 중이면 호출 없이 409)
    2. 원격 호출 한 번 (실패 시 로그를 남기고 502)
    3. 처리 중 표시 해제 (성공/실패 무관)
"""

import logging
from typing import Awaitable, Callable, TypeVar

from fastapi import HTTPException

from schemas.common import notification
from utils.exceptions import already_processing_error, remote_call_error
from utils.processing import AlreadyProcessing, processing_registry

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def dispatch(
    entity: str,
    entity_id: object,
    action: str,
    call: Callable[[], Awaitable[T]],
    *,
    timestamp: str,
    success_message: str,
    failure_message: str,
    passthrough: tuple[type[Exception], ...] = (),
) -> tuple[T, list[dict[str, str]]]:
    """처리 중 표시 아래에서 원격 호출을 실행합니다.

    Args:
        entity: 엔티티 종류 (예: "user", "listing").
        entity_id: 엔티티 ID.
        action: 작업 이름 (에러 코드 "<action>_failed"에 사용).
        call: 원격 호출 코루틴 팩토리.
        timestamp: 요청 타임스탬프.
        success_message: 성공 알림 메시지.
        failure_message: 실패 시 사용자에게 보여줄 일반 메시지.
        passthrough: 변환하지 않고 그대로 전달할 예외 타입.

    Returns:
        (호출 결과, 알림 목록) 튜플.

    Raises:
        HTTPException: 409 이미 처리 중, 502 원격 호출 실패.
    """
    try:
        async with processing_registry.hold(entity, entity_id):
            try:
                result = await call()
            except (HTTPException, *passthrough):
                raise
            except Exception:
                logger.exception(f"{action} 실패: {entity}:{entity_id}")
                raise remote_call_error(action, timestamp, failure_message)
    except AlreadyProcessing:
        logger.info(f"{action} 중복 요청 거절: {entity}:{entity_id}")
        raise already_processing_error(entity, timestamp)

    return result, [notification("success", success_message)]
