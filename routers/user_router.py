"""user_router: 사용자 관련 라우터 모듈.

회원가입, 프로필 조회, 사용자 피드, 팔로우, 차단 엔드포인트를 제공합니다.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from controllers import feed_controller, user_controller
from core.config import settings
from dependencies.auth import get_current_user, get_optional_user
from models.user_models import User
from schemas.user_schemas import CreateUserRequest


user_router = APIRouter(prefix="/v1/users", tags=["users"])
"""사용자 관련 라우터 인스턴스."""


@user_router.post("/", status_code=status.HTTP_201_CREATED)
async def signup(user_data: CreateUserRequest, request: Request) -> dict:
    """새 사용자를 등록합니다.

    Args:
        user_data: 이메일, 아이디, 비밀번호, 닉네임 등 가입 정보.
        request: FastAPI Request 객체.

    Returns:
        생성된 사용자 정보가 포함된 응답.
    """
    return await user_controller.signup(user_data, request)


@user_router.get("/{user_id}", status_code=status.HTTP_200_OK)
async def get_user(user_id: int, request: Request) -> dict:
    """사용자 프로필을 조회합니다."""
    return await user_controller.get_user(user_id, request)


@user_router.get("/{user_id}/feeds", status_code=status.HTTP_200_OK)
async def get_user_feeds(
    user_id: int,
    request: Request,
    feed_status: Literal["ACTIVE", "INACTIVE", "DELETED"] = Query(
        "ACTIVE", alias="status", description="조회할 피드 상태"
    ),
    page: int = Query(1, ge=1, description="페이지 번호 (1부터 시작)"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    current_user: User | None = Depends(get_optional_user),
) -> dict:
    """특정 사용자의 피드를 상태별로 조회합니다.

    ACTIVE가 아닌 상태는 본인만 조회할 수 있습니다.
    """
    return await feed_controller.get_user_feeds(
        user_id, feed_status, page, limit, request, current_user
    )


@user_router.post("/{user_id}/follow", status_code=status.HTTP_201_CREATED)
async def follow_user(
    user_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """사용자를 팔로우합니다."""
    return await user_controller.follow_user(user_id, current_user, request)


@user_router.delete("/{user_id}/follow", status_code=status.HTTP_200_OK)
async def unfollow_user(
    user_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """사용자 팔로우를 취소합니다."""
    return await user_controller.unfollow_user(user_id, current_user, request)


@user_router.post("/{user_id}/block", status_code=status.HTTP_201_CREATED)
async def block_user(
    user_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """사용자를 차단합니다."""
    return await user_controller.block_user(user_id, current_user, request)


@user_router.delete("/{user_id}/block", status_code=status.HTTP_200_OK)
async def unblock_user(
    user_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """사용자 차단을 해제합니다."""
    return await user_controller.unblock_user(user_id, current_user, request)
