"""processing: 엔티티별 처리 중 표시(중복 제출 방지) 유틸리티.

같은 엔티티에 대한 두 번째 요청은 첫 요청이 끝날 때까지 원격 호출 없이 거절됩니다.
프로세스 메모리에만 존재하므로 다른 인스턴스/관리자 간 상호 배제는 제공하지 않습니다.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator


class AlreadyProcessing(Exception):
    """이미 처리 중인 엔티티에 대한 요청."""

    def __init__(self, key: str):
        super().__init__(f"이미 처리 중입니다: {key}")
        self.key = key


class ProcessingRegistry:
    """처리 중인 엔티티 키 집합.

    단일 이벤트 루프에서 확인과 등록 사이에 await가 없으므로 별도 락이 필요 없습니다.
    """

    def __init__(self):
        self._keys: set[str] = set()

    @staticmethod
    def make_key(entity: str, entity_id: object) -> str:
        return f"{entity}:{entity_id}"

    def is_processing(self, key: str) -> bool:
        return key in self._keys

    def acquire(self, key: str) -> None:
        if key in self._keys:
            raise AlreadyProcessing(key)
        self._keys.add(key)

    def release(self, key: str) -> None:
        self._keys.discard(key)

    @asynccontextmanager
    async def hold(self, entity: str, entity_id: object) -> AsyncIterator[str]:
        """범위 안에서 엔티티를 처리 중으로 표시합니다.

        Raises:
            AlreadyProcessing: 같은 키가 이미 처리 중인 경우.
        """
        key = self.make_key(entity, entity_id)
        self.acquire(key)
        try:
            yield key
        finally:
            self.release(key)

    def __len__(self) -> int:
        return len(self._keys)


# 전역 처리 중 표시 레지스트리
processing_registry = ProcessingRegistry()
