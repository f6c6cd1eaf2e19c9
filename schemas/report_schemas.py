"""report_schemas: 신고 처리 관련 Pydantic 모델 모듈.

필수 사유/메모의 공백 여부는 원격 호출 전에 서비스 계층에서 400으로 검증하므로,
여기서는 앞뒤 공백만 정리합니다.
"""

from pydantic import BaseModel, Field, field_validator


def _strip_optional(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v if v else None


class ApproveReportRequest(BaseModel):
    """신고 승인 요청 모델.

    Attributes:
        notes: 처리 메모 (선택).
        delete_target: 신고 대상(매물/메시지) 삭제 여부.
        block_owner: 대상 소유자(매물 등록자/메시지 발신자) 차단 여부.
    """

    notes: str | None = Field(None, max_length=1000)
    delete_target: bool = False
    block_owner: bool = False

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class RejectReportRequest(BaseModel):
    """신고 거절 요청 모델 (notes 필수)."""

    notes: str | None = Field(None, max_length=1000)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class AdminReportRequest(BaseModel):
    """관리자 명의 매물 신고 요청 모델 (reason 필수)."""

    reason: str | None = Field(None, max_length=500)
    details: str | None = Field(None, max_length=1000)

    @field_validator("reason", "details")
    @classmethod
    def validate_text(cls, v: str | None) -> str | None:
        return _strip_optional(v)
