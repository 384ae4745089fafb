# auth_schemas: 인증 관련 Pydantic 모델

from pydantic import BaseModel, EmailStr


# 로그인 요청
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# 로그인 응답 데이터
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
