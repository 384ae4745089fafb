"""user_schemas: 사용자 관련 Pydantic 모델 모듈.

회원가입 요청 스키마를 정의합니다.
"""

import re
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

_PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,20}$"
)
_PASSWORD_ERROR = (
    "비밀번호는 대문자, 소문자, 숫자, 특수문자(@, $, !, %, *, ?, &)를 "
    "포함하여 8자 이상 20자 이하여야 합니다."
)

_USERNAME_PATTERN = re.compile(r"^[a-z0-9_.]{6,30}$")
_USERNAME_ERROR = "아이디는 6자 이상 30자 이하의 영문 소문자, 숫자, 밑줄(_), 마침표(.)로 구성하여야 합니다."


class CreateUserRequest(BaseModel):
    """사용자 등록 요청 모델.

    Attributes:
        email: 이메일 주소.
        username: 아이디 (6~30자).
        password: 비밀번호 (8~20자, 대/소문자/숫자/특수문자 포함).
        nickname: 닉네임 (선택, 2자 이상).
        bio: 자기소개 (선택).
        gender: 성별 (기본값 NO_ANSWER).
    """

    email: EmailStr
    username: str = Field(..., min_length=6, max_length=30)
    password: str = Field(..., min_length=8, max_length=20)
    nickname: str | None = Field(None, min_length=2, max_length=30)
    bio: str | None = Field(None, max_length=150)
    gender: Literal["MALE", "FEMALE", "NO_ANSWER"] = "NO_ANSWER"

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """아이디 형식을 검증합니다."""
        v = v.strip().lower()
        if not _USERNAME_PATTERN.match(v):
            raise ValueError(_USERNAME_ERROR)
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not _PASSWORD_PATTERN.match(v):
            raise ValueError(_PASSWORD_ERROR)
        return v

    @field_validator("nickname")
    @classmethod
    def validate_nickname(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if len(v) < 2:
            raise ValueError("닉네임은 최소 2자 이상이어야 합니다.")
        return v
