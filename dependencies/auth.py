"""auth: FastAPI 의존성 주입을 위한 인증 모듈.

Authorization: Bearer <access_token> 헤더로 사용자를 인증합니다.
토큰에서 얻은 사용자 ID는 이후 계층에서 그대로 신뢰합니다.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from database.connection import get_connection
from dependencies.request_context import get_request_timestamp
from models import user_models
from models.user_models import User
from utils.exceptions import unauthorized_error
from utils.jwt_utils import decode_access_token

_bearer = HTTPBearer(auto_error=False)


async def _load_user(user_id: int) -> User | None:
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            return await user_models.get_user_by_id(cur, user_id)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User:
    """Bearer 토큰에서 현재 사용자를 추출하고 검증합니다.

    Returns:
        인증된 사용자 객체 (following_ids 포함).

    Raises:
        HTTPException: 토큰이 없거나 유효하지 않거나, 사용자가 탈퇴한 경우 401.
    """
    timestamp = get_request_timestamp(request)
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise unauthorized_error("unauthorized", timestamp)

    user_id = decode_access_token(credentials.credentials)
    user = await _load_user(user_id)
    if user is None or not user.is_active:
        raise unauthorized_error("unauthorized", timestamp)
    return user


async def get_optional_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User | None:
    """선택적으로 현재 사용자를 추출합니다.

    토큰이 없으면 None을 반환합니다. 토큰이 있지만 유효하지 않으면 401입니다.
    """
    if credentials is None:
        return None
    return await get_current_user(request, credentials)
