"""database.connection: MySQL 데이터베이스 연결 관리 모듈.

aiomysql을 사용하여 비동기 MySQL 연결 풀을 관리하고,
저장 프로시저(원격 프로시저) 호출 헬퍼를 제공합니다.
"""

import re
from typing import Any, AsyncGenerator
from contextlib import asynccontextmanager

import aiomysql
from pymysql.err import MySQLError

from core.config import settings


# 전역 연결 풀
_pool: aiomysql.Pool | None = None

# SQL Injection 방지: 프로시저 이름은 식별자 형식만 허용
_PROCEDURE_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")


class ProcedureError(Exception):
    """저장 프로시저 호출 실패.

    드라이버 예외(네트워크, SQL, SIGNAL SQLSTATE '45000')를 하나의 타입으로 감쌉니다.

    Attributes:
        procedure: 호출한 프로시저 이름.
        message: 드라이버 또는 프로시저가 전달한 메시지 (로그 전용).
    """

    def __init__(self, procedure: str, message: str):
        super().__init__(f"{procedure}: {message}")
        self.procedure = procedure
        self.message = message


async def init_db() -> None:
    """데이터베이스 연결 풀을 초기화합니다.

    애플리케이션 시작 시 호출되어야 합니다.
    """
    global _pool
    try:
        _pool = await aiomysql.create_pool(
            host=settings.DB_HOST,
            port=settings.DB_PORT,
            user=settings.DB_USER,
            password=settings.DB_PASSWORD,
            db=settings.DB_NAME,
            charset="utf8mb4",
            autocommit=True,
            minsize=1,
            maxsize=10,
            connect_timeout=5,  # 5초 연결 타임아웃
        )
        print(
            f"MySQL 연결 풀 초기화 완료: {settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
        )
    except Exception as e:
        print(f"MySQL 연결 풀 초기화 실패: {e}")
        raise


async def close_db() -> None:
    """데이터베이스 연결 풀을 종료합니다.

    애플리케이션 종료 시 호출되어야 합니다.
    """
    global _pool
    if _pool:
        _pool.close()
        await _pool.wait_closed()
        _pool = None
        print("MySQL 연결 풀 종료")


def get_pool() -> aiomysql.Pool:
    """현재 연결 풀을 반환합니다.

    Returns:
        연결 풀 객체.

    Raises:
        RuntimeError: 연결 풀이 초기화되지 않은 경우.
    """
    if _pool is None:
        raise RuntimeError("데이터베이스 연결 풀이 초기화되지 않았습니다.")
    return _pool


@asynccontextmanager
async def get_connection() -> AsyncGenerator[aiomysql.Connection, None]:
    """데이터베이스 연결을 컨텍스트 매니저로 제공합니다.

    사용 예시:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT * FROM users")
                result = await cur.fetchall()

    Yields:
        MySQL 연결 객체.
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def transactional() -> AsyncGenerator[aiomysql.Cursor, None]:
    """트랜잭션을 관리하는 컨텍스트 매니저.

    범위 내에서 예외 발생 시 롤백, 정상 종료 시 커밋합니다.
    주의: 이 컨텍스트 매니저는 커서를 반환합니다.

    Yields:
        MySQL 커서 객체.
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        try:
            await conn.begin()
            async with conn.cursor() as cur:
                yield cur
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise


async def fetch_dicts(query: str, params: tuple | list = ()) -> list[dict[str, Any]]:
    """SELECT 결과를 컬럼명 키의 딕셔너리 목록으로 반환합니다.

    JOIN 별칭(예: reporter_full_name)을 그대로 키로 사용합니다.
    """
    async with get_connection() as conn:
        async with conn.cursor(aiomysql.DictCursor) as cur:
            await cur.execute(query, params)
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


async def fetch_count(query: str, params: tuple | list = ()) -> int:
    """COUNT(*) 쿼리 결과를 정수로 반환합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(query, params)
            row = await cur.fetchone()
            return int(row[0]) if row else 0


async def call_procedure(name: str, params: dict[str, Any]) -> list[dict[str, Any]]:
    """저장 프로시저를 이름과 파라미터로 호출합니다.

    MySQL 프로시저는 위치 기반 인자만 받으므로 params의 삽입 순서가
    프로시저 선언 순서와 같아야 합니다 (p_report_id, p_admin_id, ...).

    Args:
        name: 프로시저 이름 (예: "process_listing_report").
        params: 파라미터 이름 → 값 (선언 순서대로).

    Returns:
        프로시저가 반환한 첫 번째 결과 집합 (없으면 빈 리스트).

    Raises:
        ProcedureError: 프로시저 호출이 실패했거나 success=false를 반환한 경우.
        ValueError: 프로시저 이름 형식이 잘못된 경우.
    """
    if not _PROCEDURE_NAME_PATTERN.match(name):
        raise ValueError(f"유효하지 않은 프로시저 이름입니다: {name}")

    placeholders = ", ".join(["%s"] * len(params))
    try:
        async with get_connection() as conn:
            async with conn.cursor(aiomysql.DictCursor) as cur:
                await cur.execute(f"CALL {name}({placeholders})", tuple(params.values()))
                rows = await cur.fetchall()
                # CALL은 상태 결과 집합을 추가로 반환하므로 남은 결과를 소비
                while await cur.nextset():
                    pass
                results = [dict(row) for row in rows or []]
    except MySQLError as e:
        message = e.args[1] if len(e.args) > 1 else str(e)
        raise ProcedureError(name, str(message)) from e

    # 일부 프로시저는 예외 대신 success/error 컬럼으로 실패를 알림
    if results and "success" in results[0] and not results[0]["success"]:
        raise ProcedureError(name, str(results[0].get("error") or "success=false"))
    return results


async def test_connection() -> bool:
    """데이터베이스 연결을 테스트합니다.

    Returns:
        연결 성공 여부.
    """
    try:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT 1")
                result = await cur.fetchone()
                print(f"데이터베이스 연결 테스트 성공: {result}")
                return True
    except Exception as e:
        print(f"데이터베이스 연결 테스트 실패: {e}")
        return False
