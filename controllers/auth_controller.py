"""auth_controller: 인증 관련 컨트롤러 모듈.

JWT 기반 로그인과 현재 사용자 조회 기능을 제공합니다.
"""

import logging

from fastapi import Request

from core.config import settings
from dependencies.request_context import get_request_timestamp
from models.user_models import User
from schemas.auth_schemas import LoginRequest, TokenResponse
from schemas.common import create_response, serialize_user
from services.user_service import UserService
from utils.exceptions import unauthorized_error
from utils.jwt_utils import create_access_token

logger = logging.getLogger(__name__)


async def login(credentials: LoginRequest, request: Request) -> dict:
    """이메일과 비밀번호를 사용하여 로그인합니다.

    존재하지 않는 이메일과 틀린 비밀번호를 구분하지 않고 같은 401을 반환합니다.

    Args:
        credentials: 로그인 자격 증명 (이메일, 비밀번호).
        request: FastAPI Request 객체.

    Returns:
        access_token과 사용자 정보가 포함된 응답 딕셔너리.

    Raises:
        HTTPException: 인증 실패 시 401 Unauthorized.
    """
    timestamp = get_request_timestamp(request)

    user = await UserService.authenticate(credentials.email, credentials.password)
    if user is None:
        raise unauthorized_error("invalid_credentials", timestamp)

    token = TokenResponse(
        access_token=create_access_token(user.id),
        expires_in=settings.JWT_ACCESS_EXPIRE_MINUTES * 60,
    )
    logger.info("로그인 성공: user_id=%s", user.id)

    return create_response(
        "LOGIN_SUCCESS",
        "로그인에 성공했습니다.",
        data={**token.model_dump(), "user": serialize_user(user)},
        timestamp=timestamp,
    )


async def get_me(current_user: User, request: Request) -> dict:
    """현재 로그인한 사용자 정보를 반환합니다."""
    timestamp = get_request_timestamp(request)
    return create_response(
        "AUTH_CHECK",
        "현재 로그인 중입니다.",
        data={"user": serialize_user(current_user)},
        timestamp=timestamp,
    )
