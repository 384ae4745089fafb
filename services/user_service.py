"""user_service: 사용자, 팔로우, 차단 관련 비즈니스 로직을 처리하는 서비스."""

import logging

from database.connection import get_connection, transactional
from models import user_models
from models.user_models import User
from schemas.user_schemas import CreateUserRequest
from utils.exceptions import BadRequestError, ConflictError, NotFoundError
from utils.password import hash_password_async, verify_password_async

logger = logging.getLogger(__name__)


async def _ensure_target_user(cur, user_id: int, target_id: int) -> None:
    """자기 자신이 아니고 존재하는 사용자인지 확인합니다."""
    if user_id == target_id:
        raise BadRequestError("cannot_target_self", "자기 자신에게는 요청할 수 없습니다.")
    if not await user_models.get_user_by_id(cur, target_id):
        raise NotFoundError("user")


class UserService:
    """사용자 관리 서비스."""

    @staticmethod
    async def signup(data: CreateUserRequest) -> User:
        """회원가입.

        이메일과 아이디 중복을 먼저 확인하고, 동시 가입으로 인한 충돌은
        add_user가 UNIQUE 제약 위반을 ConflictError로 변환합니다.
        """
        hashed_password = await hash_password_async(data.password)

        async with transactional() as cur:
            if await user_models.get_user_by_email(cur, data.email):
                raise ConflictError("email_already_exists", "이미 사용 중인 이메일입니다.")
            if await user_models.get_user_by_username(cur, data.username):
                raise ConflictError("username_already_exists", "이미 사용 중인 아이디입니다.")

            user = await user_models.add_user(
                cur,
                email=data.email,
                username=data.username,
                password_hash=hashed_password,
                nickname=data.nickname,
                gender=data.gender,
                bio=data.bio,
            )

        logger.info("회원가입 완료: user_id=%s", user.id)
        return user

    @staticmethod
    async def authenticate(email: str, password: str) -> User | None:
        """이메일과 비밀번호로 사용자를 확인합니다. 실패하면 None을 반환합니다."""
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                user = await user_models.get_user_by_email(cur, email)

        stored_hash = user.password if user else None
        if not await verify_password_async(password, stored_hash):
            return None
        if user is None or not user.is_active:
            return None
        return user

    @staticmethod
    async def get_profile(user_id: int) -> User:
        """사용자 프로필 조회."""
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                user = await user_models.get_user_by_id(cur, user_id)
        if user is None:
            raise NotFoundError("user")
        return user

    @staticmethod
    async def follow(user_id: int, target_id: int) -> None:
        """팔로우.

        Raises:
            BadRequestError: 자기 자신을 팔로우하려는 경우.
            NotFoundError: 대상 사용자가 없는 경우.
            ConflictError: 이미 팔로우 중인 경우.
        """
        async with transactional() as cur:
            await _ensure_target_user(cur, user_id, target_id)
            await user_models.follow_user(cur, user_id, target_id)

    @staticmethod
    async def unfollow(user_id: int, target_id: int) -> None:
        """언팔로우."""
        async with transactional() as cur:
            if not await user_models.unfollow_user(cur, user_id, target_id):
                raise NotFoundError("follow")

    @staticmethod
    async def block(user_id: int, target_id: int) -> None:
        """사용자 차단. 차단한 사용자의 피드는 전체 피드 목록에서 제외됩니다."""
        async with transactional() as cur:
            await _ensure_target_user(cur, user_id, target_id)
            await user_models.block_user(cur, user_id, target_id)

    @staticmethod
    async def unblock(user_id: int, target_id: int) -> None:
        """차단 해제."""
        async with transactional() as cur:
            if not await user_models.unblock_user(cur, user_id, target_id):
                raise NotFoundError("block")
