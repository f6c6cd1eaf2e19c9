"""admin_models: 관리자 계정 및 2단계 인증 코드 관련 데이터 모델 모듈.

admin_credentials, admin_verification_codes 테이블을 관리합니다.
관리자 생성/삭제는 감사 기록을 남기는 저장 프로시저로만 수행합니다.
"""

from dataclasses import dataclass
from datetime import datetime

from core.config import settings
from database.connection import call_procedure, fetch_dicts, get_connection, transactional


@dataclass(frozen=True)
class AdminCredential:
    """관리자 계정 데이터 클래스.

    Attributes:
        id: 관리자 고유 식별자 (UUID 문자열).
        username: 로그인 아이디.
        email: 이메일 주소 (2단계 인증 코드 수신).
        full_name: 이름.
        password_hash: bcrypt 해시.
        is_active: 활성 여부.
        two_factor_enabled: 2단계 인증 사용 여부.
    """

    id: str
    username: str
    email: str | None
    full_name: str | None
    password_hash: str
    is_active: bool = True
    two_factor_enabled: bool = False
    last_login: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class AdminVerificationCode:
    """2단계 인증 코드 데이터 클래스."""

    id: int
    admin_id: str
    code_hash: str
    attempts: int
    expires_at: datetime


ADMIN_SELECT_FIELDS = (
    "id, username, email, full_name, password_hash, is_active, "
    "two_factor_enabled, last_login, created_at"
)


def _row_to_admin(row: tuple) -> AdminCredential:
    return AdminCredential(
        id=row[0],
        username=row[1],
        email=row[2],
        full_name=row[3],
        password_hash=row[4],
        is_active=bool(row[5]),
        two_factor_enabled=bool(row[6]),
        last_login=row[7],
        created_at=row[8],
    )


async def get_admin_by_id(admin_id: str) -> AdminCredential | None:
    """ID로 관리자를 조회합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {ADMIN_SELECT_FIELDS} FROM admin_credentials WHERE id = %s",
                (admin_id,),
            )
            row = await cur.fetchone()
            return _row_to_admin(row) if row else None


async def get_admin_by_username(username: str) -> AdminCredential | None:
    """로그인 아이디로 관리자를 조회합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {ADMIN_SELECT_FIELDS} FROM admin_credentials WHERE username = %s",
                (username,),
            )
            row = await cur.fetchone()
            return _row_to_admin(row) if row else None


async def update_last_login(admin_id: str) -> None:
    async with transactional() as cur:
        await cur.execute(
            "UPDATE admin_credentials SET last_login = NOW() WHERE id = %s",
            (admin_id,),
        )


async def get_admins() -> list[dict]:
    """관리자 목록을 조회합니다 (비밀번호 해시 제외)."""
    return await fetch_dicts(
        """
        SELECT a.id AS admin_id, a.username, a.email, a.full_name, a.is_active,
               a.two_factor_enabled, a.last_login, a.created_at,
               (SELECT MAX(c.created_at) FROM admin_verification_codes c
                WHERE c.admin_id = a.id) AS last_code_sent_at
        FROM admin_credentials a
        ORDER BY a.created_at DESC
        LIMIT %s
        """,
        (settings.LIST_FETCH_LIMIT,),
    )


async def set_two_factor(admin_id: str, enabled: bool) -> bool:
    """관리자의 2단계 인증 사용 여부를 변경합니다.

    Returns:
        대상 관리자가 존재하면 True.
    """
    async with transactional() as cur:
        await cur.execute(
            "UPDATE admin_credentials SET two_factor_enabled = %s WHERE id = %s",
            (1 if enabled else 0, admin_id),
        )
        return cur.rowcount > 0


async def update_password(admin_id: str, password_hash: str) -> None:
    async with transactional() as cur:
        await cur.execute(
            "UPDATE admin_credentials SET password_hash = %s WHERE id = %s",
            (password_hash, admin_id),
        )


async def create_admin(
    username: str,
    email: str,
    full_name: str,
    password_hash: str,
    creator_id: str,
) -> dict:
    """관리자를 생성합니다 (create_admin 프로시저)."""
    rows = await call_procedure(
        "create_admin",
        {
            "p_username": username,
            "p_email": email,
            "p_full_name": full_name,
            "p_password_hash": password_hash,
            "p_creator_id": creator_id,
        },
    )
    return rows[0] if rows else {}


async def delete_admin(admin_id: str, deleter_id: str) -> None:
    """관리자를 삭제합니다 (delete_admin 프로시저)."""
    await call_procedure(
        "delete_admin",
        {"p_admin_id": admin_id, "p_deleter_id": deleter_id},
    )


# ============ 2단계 인증 코드 ============


async def replace_verification_code(
    admin_id: str, code_hash: str, expires_at: datetime
) -> None:
    """기존 코드를 지우고 새 인증 코드를 저장합니다."""
    async with transactional() as cur:
        await cur.execute(
            "DELETE FROM admin_verification_codes WHERE admin_id = %s",
            (admin_id,),
        )
        await cur.execute(
            """
            INSERT INTO admin_verification_codes (admin_id, code_hash, attempts, expires_at)
            VALUES (%s, %s, 0, %s)
            """,
            (admin_id, code_hash, expires_at),
        )


async def get_verification_code(admin_id: str) -> AdminVerificationCode | None:
    """관리자의 최신 인증 코드를 조회합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, admin_id, code_hash, attempts, expires_at
                FROM admin_verification_codes
                WHERE admin_id = %s
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (admin_id,),
            )
            row = await cur.fetchone()
            if not row:
                return None
            return AdminVerificationCode(
                id=row[0],
                admin_id=row[1],
                code_hash=row[2],
                attempts=row[3],
                expires_at=row[4],
            )


async def increment_code_attempts(code_id: int) -> None:
    async with transactional() as cur:
        await cur.execute(
            "UPDATE admin_verification_codes SET attempts = attempts + 1 WHERE id = %s",
            (code_id,),
        )


async def delete_verification_codes(admin_id: str) -> None:
    async with transactional() as cur:
        await cur.execute(
            "DELETE FROM admin_verification_codes WHERE admin_id = %s",
            (admin_id,),
        )


async def cleanup_expired_verification_codes() -> int:
    """만료된 관리자 인증 코드를 삭제합니다.

    Returns:
        삭제된 행 수.
    """
    async with transactional() as cur:
        await cur.execute(
            "DELETE FROM admin_verification_codes WHERE expires_at < NOW()"
        )
        return cur.rowcount
