"""notification_service: 사용자 이메일 알림 발송 서비스.

사용자 연락처 조회 → 템플릿 렌더링 → 이메일 발송 → notification_logs 기록.
실패는 재시도하지 않습니다.
"""

import html
import logging
from dataclasses import dataclass

from core.config import settings
from models import notification_models, user_models
from utils.email import send_email

logger = logging.getLogger(__name__)


class UserNotFound(Exception):
    """알림 대상 사용자가 없음."""


@dataclass(frozen=True)
class RenderedMail:
    subject: str
    text: str
    html: str


def render_notification(full_name: str | None, subject: str, message: str) -> RenderedMail:
    """인사말, 본문, 서명이 포함된 알림 메일을 만듭니다."""
    name = full_name or "회원"
    text = (
        f"{name}님, 안녕하세요.\n\n"
        f"{message}\n\n"
        f"감사합니다.\n{settings.EMAIL_SENDER_NAME} 팀"
    )
    body_html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background-color: #3b82f6; padding: 20px; text-align: center; color: white;">
    <h1>{html.escape(subject)}</h1>
  </div>
  <div style="padding: 20px; border: 1px solid #e5e7eb; border-top: none;">
    <p>{html.escape(name)}님, 안녕하세요.</p>
    <p>{html.escape(message)}</p>
    <p>감사합니다.<br>{html.escape(settings.EMAIL_SENDER_NAME)} 팀</p>
  </div>
</div>
"""
    return RenderedMail(subject=subject, text=text, html=body_html)


class NotificationService:
    """사용자 알림 서비스."""

    @staticmethod
    async def send_user_notification(
        user_id: str, subject: str, message: str, admin_id: str | None = None
    ) -> None:
        """사용자에게 알림 메일을 보내고 발송 결과를 기록합니다.

        Raises:
            UserNotFound: 사용자가 없거나 이메일이 없는 경우.
            RuntimeError: 이메일 발송 실패 시.
        """
        contact = await user_models.get_user_contact(user_id)
        if not contact or not contact.email:
            raise UserNotFound(user_id)

        mail = render_notification(contact.full_name, subject, message)
        try:
            await send_email(contact.email, mail.subject, mail.text, html=mail.html)
        except RuntimeError as e:
            await NotificationService._log(user_id, subject, "failed", admin_id, str(e))
            raise

        await NotificationService._log(user_id, subject, "sent", admin_id)

    @staticmethod
    async def _log(
        user_id: str,
        subject: str,
        status: str,
        admin_id: str | None,
        error: str | None = None,
    ) -> None:
        # 발송 이력 기록 실패가 발송 결과를 바꾸지 않음
        try:
            await notification_models.log_notification(
                user_id, subject, status, admin_id=admin_id, error=error
            )
        except Exception:
            logger.exception(f"알림 이력 기록 실패: {user_id}")

    @staticmethod
    async def try_notify(
        user_id: str, subject: str, message: str, admin_id: str | None = None
    ) -> bool:
        """부가 작업용 알림 발송. 실패를 로그로만 남기고 성공 여부를 반환합니다."""
        try:
            await NotificationService.send_user_notification(
                user_id, subject, message, admin_id=admin_id
            )
        except Exception:
            logger.exception(f"사용자 알림 발송 실패: {user_id}")
            return False
        return True
