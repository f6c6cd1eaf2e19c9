"""notification_models: 사용자 알림 발송 이력 모델."""

from typing import Literal

from database.connection import fetch_dicts, transactional

NotificationStatus = Literal["sent", "failed"]


async def log_notification(
    user_id: str,
    subject: str,
    status: NotificationStatus,
    admin_id: str | None = None,
    error: str | None = None,
) -> None:
    """notification_logs 테이블에 발송 결과를 기록합니다."""
    async with transactional() as cur:
        await cur.execute(
            """
            INSERT INTO notification_logs (user_id, admin_id, subject, status, error)
            VALUES (%s, %s, %s, %s, %s)
            """,
            (user_id, admin_id, subject, status, error),
        )


async def get_user_notification_logs(user_id: str, limit: int = 50) -> list[dict]:
    return await fetch_dicts(
        """
        SELECT id, user_id, admin_id, subject, status, error, created_at
        FROM notification_logs
        WHERE user_id = %s
        ORDER BY created_at DESC
        LIMIT %s
        """,
        (user_id, limit),
    )
