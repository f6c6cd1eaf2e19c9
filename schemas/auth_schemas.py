# auth_schemas: 관리자 인증 관련 Pydantic 모델

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

_PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,64}$"
)
_PASSWORD_ERROR = (
    "비밀번호는 대문자, 소문자, 숫자, 특수문자(@, $, !, %, *, ?, &)를 "
    "포함하여 8자 이상이어야 합니다."
)
_USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.]{3,32}$")


def _validate_password(v: str) -> str:
    if not _PASSWORD_PATTERN.match(v):
        raise ValueError(_PASSWORD_ERROR)
    return v


# 관리자 로그인 요청
class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


# 2단계 인증 코드 확인 요청
class VerifyCodeRequest(BaseModel):
    admin_id: str = Field(..., min_length=1, max_length=64)
    code: str = Field(..., min_length=6, max_length=6, pattern=r"^\d{6}$")


# 본인 비밀번호 변경 요청
class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return _validate_password(v)


class CreateAdminRequest(BaseModel):
    """관리자 생성 요청 모델.

    Attributes:
        username: 로그인 아이디 (3~32자, 영문/숫자/언더바/점).
        email: 이메일 주소 (2단계 인증 코드 수신).
        full_name: 이름.
        password: 초기 비밀번호.
    """

    username: str
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=100)
    password: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not _USERNAME_PATTERN.match(v):
            raise ValueError("아이디는 3자 이상 32자 이하의 영문, 숫자, 언더바, 점으로 구성하여야 합니다.")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _validate_password(v)


class TwoFactorToggleRequest(BaseModel):
    enabled: bool
