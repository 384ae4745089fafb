"""user_controller: 사용자 관련 컨트롤러 모듈.

회원가입, 프로필 조회, 팔로우, 차단 기능을 제공합니다.
"""

from fastapi import Request

from dependencies.request_context import get_request_timestamp
from models.user_models import User
from schemas.common import create_response, serialize_user
from schemas.user_schemas import CreateUserRequest
from services.user_service import UserService


async def signup(user_data: CreateUserRequest, request: Request) -> dict:
    """새 사용자를 등록합니다.

    Args:
        user_data: 사용자 등록 정보.
        request: FastAPI Request 객체.

    Returns:
        생성된 사용자 정보가 포함된 응답 딕셔너리.

    Raises:
        ConflictError: 이메일이나 아이디가 이미 사용 중이면 409.
    """
    timestamp = get_request_timestamp(request)
    user = await UserService.signup(user_data)
    return create_response(
        "SIGNUP_SUCCESS",
        "회원가입이 완료되었습니다.",
        data={"user": serialize_user(user)},
        timestamp=timestamp,
    )


async def get_user(user_id: int, request: Request) -> dict:
    """사용자 프로필을 조회합니다."""
    timestamp = get_request_timestamp(request)
    user = await UserService.get_profile(user_id)
    return create_response(
        "USER_RETRIEVED",
        "사용자 조회에 성공했습니다.",
        data={"user": serialize_user(user)},
        timestamp=timestamp,
    )


async def follow_user(user_id: int, current_user: User, request: Request) -> dict:
    """사용자를 팔로우합니다."""
    timestamp = get_request_timestamp(request)
    await UserService.follow(current_user.id, user_id)
    return create_response("FOLLOW_SUCCESS", "팔로우했습니다.", timestamp=timestamp)


async def unfollow_user(user_id: int, current_user: User, request: Request) -> dict:
    """사용자 팔로우를 취소합니다."""
    timestamp = get_request_timestamp(request)
    await UserService.unfollow(current_user.id, user_id)
    return create_response("UNFOLLOW_SUCCESS", "팔로우를 취소했습니다.", timestamp=timestamp)


async def block_user(user_id: int, current_user: User, request: Request) -> dict:
    """사용자를 차단합니다."""
    timestamp = get_request_timestamp(request)
    await UserService.block(current_user.id, user_id)
    return create_response("BLOCK_SUCCESS", "사용자를 차단했습니다.", timestamp=timestamp)


async def unblock_user(user_id: int, current_user: User, request: Request) -> dict:
    """사용자 차단을 해제합니다."""
    timestamp = get_request_timestamp(request)
    await UserService.unblock(current_user.id, user_id)
    return create_response("UNBLOCK_SUCCESS", "차단을 해제했습니다.", timestamp=timestamp)
