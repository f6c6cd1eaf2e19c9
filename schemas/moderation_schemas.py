"""moderation_schemas: 사용자/매물/리뷰 등 관리 작업 요청 Pydantic 모델 모듈.

사유가 필수인 작업도 필드는 선택으로 두고, 비어 있으면 서비스 계층에서
원격 호출 없이 400을 반환합니다.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


def _strip_optional(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v if v else None


class ReasonRequest(BaseModel):
    """사유 하나만 받는 요청 모델 (차단, 거절 등)."""

    reason: str | None = Field(None, max_length=500)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class NotesRequest(BaseModel):
    notes: str | None = Field(None, max_length=1000)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class ListingStatusRequest(BaseModel):
    status: Literal["pending", "approved", "rejected"]
    reason: str | None = Field(None, max_length=500)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class FeaturedRequest(BaseModel):
    featured: bool


class SlotAmountRequest(BaseModel):
    """매물 등록권 지급/회수 요청 모델.

    Attributes:
        amount: 지급/회수할 개수 (1 이상, 서비스 계층에서 검증).
        payment_id: 결제 추적 ID (지급 시 선택, 없으면 자동 생성).
    """

    amount: int
    payment_id: str | None = Field(None, max_length=100)


class DocumentReviewRequest(BaseModel):
    status: Literal["approved", "rejected"]
    rejection_reason: str | None = Field(None, max_length=500)

    @field_validator("rejection_reason")
    @classmethod
    def validate_reason(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class ShareProcessRequest(BaseModel):
    status: Literal["completed", "rejected"]
    notes: str | None = Field(None, max_length=1000)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class NotificationRequest(BaseModel):
    """사용자 알림 발송 요청 모델 (세 필드 모두 필수, 서비스에서 400 검증)."""

    user_id: str | None = None
    subject: str | None = Field(None, max_length=200)
    message: str | None = Field(None, max_length=5000)

    @field_validator("user_id", "subject", "message")
    @classmethod
    def validate_text(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class OwnerNotificationRequest(BaseModel):
    """매물 소유자 알림 요청 모델 (제목, 내용 필수)."""

    subject: str | None = Field(None, max_length=200)
    message: str | None = Field(None, max_length=5000)

    @field_validator("subject", "message")
    @classmethod
    def validate_text(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class DamageReviewRequest(BaseModel):
    status: Literal["approved", "rejected"]
    notes: str | None = Field(None, max_length=1000)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return _strip_optional(v)
