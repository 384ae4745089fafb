"""jwt_utils: JWT 생성 및 검증 유틸리티 모듈.

Access Token (HS256 JWT) 발급 및 검증.
"""

from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, status

from core.config import settings

_JWT_ALGORITHM = "HS256"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _unauthorized(error_code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": error_code,
            "timestamp": _now_utc().strftime("%Y-%m-%dT%H:%M:%SZ"),
        },
    )


def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    """Access Token을 생성합니다.

    JWT는 암호화되지 않으므로 식별에 필요한 최소 정보(sub)만 담습니다.

    Args:
        user_id: 토큰 주체 사용자 ID.
        expires_minutes: 만료 시간(분). 생략하면 설정값을 사용합니다.

    Returns:
        서명된 JWT 문자열.
    """
    now = _now_utc()
    minutes = expires_minutes if expires_minutes is not None else settings.JWT_ACCESS_EXPIRE_MINUTES
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
        "type": "access",
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=_JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Access Token을 검증하고 사용자 ID를 반환합니다.

    Raises:
        HTTPException 401: 토큰이 만료되었거나(token_expired) 유효하지 않은 경우(token_invalid).
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[_JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise _unauthorized("token_expired")
    except jwt.PyJWTError:
        raise _unauthorized("token_invalid")

    if payload.get("type") != "access":
        raise _unauthorized("token_invalid")

    # sub 클레임 존재 및 정수 변환 가능 여부 검증
    try:
        return int(payload["sub"])
    except (KeyError, ValueError, TypeError):
        raise _unauthorized("token_invalid")
