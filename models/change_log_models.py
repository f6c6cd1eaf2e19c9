"""change_log_models: 테이블 변경 로그 조회 모듈.

각 관리 대상 테이블의 AFTER INSERT/UPDATE/DELETE 트리거가
change_log (id, table_name, event_type, row_id, payload, created_at)에 행을 남깁니다.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from database.connection import get_connection


@dataclass(frozen=True)
class ChangeLogEntry:
    """변경 로그 데이터 클래스."""

    id: int
    table_name: str
    event_type: str
    row_id: str | None
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


def _parse_payload(raw: Any) -> dict[str, Any]:
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


async def get_latest_change_id() -> int:
    """가장 최근 변경 로그 ID를 반환합니다 (없으면 0)."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT COALESCE(MAX(id), 0) FROM change_log")
            row = await cur.fetchone()
            return int(row[0]) if row else 0


async def get_changes_after(last_id: int, limit: int = 200) -> list[ChangeLogEntry]:
    """last_id 이후의 변경 로그를 오래된 순으로 조회합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, table_name, event_type, row_id, payload, created_at
                FROM change_log
                WHERE id > %s
                ORDER BY id ASC
                LIMIT %s
                """,
                (last_id, limit),
            )
            rows = await cur.fetchall()

    return [
        ChangeLogEntry(
            id=row[0],
            table_name=row[1],
            event_type=row[2],
            row_id=row[3],
            payload=_parse_payload(row[4]),
            created_at=row[5],
        )
        for row in rows
    ]


async def cleanup_old_changes(retention_hours: int = 24) -> int:
    """보존 기간이 지난 변경 로그를 삭제합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "DELETE FROM change_log WHERE created_at < NOW() - INTERVAL %s HOUR",
                (retention_hours,),
            )
            return cur.rowcount
