"""user_models: 사용자, 팔로우, 차단 관련 데이터 모델 및 함수 모듈.

모든 함수는 호출자가 획득한 커서를 첫 번째 인자로 받습니다.
트랜잭션 경계는 서비스 계층의 transactional() 블록이 결정합니다.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Literal

import aiomysql
from pymysql.err import IntegrityError

from utils.exceptions import ConflictError, NotFoundError


UserStatus = Literal["ACTIVE", "INACTIVE", "DELETED"]
Gender = Literal["MALE", "FEMALE", "NO_ANSWER"]

DEFAULT_PROFILE_IMAGE = "/assets/profiles/default_profile.jpg"


@dataclass(frozen=True)
class User:
    """사용자 데이터 클래스.

    Attributes:
        id: 사용자 고유 식별자.
        email: 이메일 주소.
        username: 로그인 아이디 (고유).
        nickname: 닉네임.
        password: bcrypt 해시된 비밀번호.
        status: 계정 상태.
        gender: 성별.
        feed_count: 활성(ACTIVE) 피드 수 (비정규화 카운터).
        profile_image: 프로필 이미지 URL.
        bio: 자기소개.
        del_yn: 탈퇴 여부 플래그.
        following_ids: 이 사용자가 팔로우하는 사용자 ID 목록 (조회 시 계산).
    """

    id: int
    email: str
    username: str
    nickname: str | None
    password: str
    status: str = "ACTIVE"
    gender: str = "NO_ANSWER"
    feed_count: int = 0
    profile_image: str | None = None
    bio: str | None = None
    del_yn: str = "N"
    created_at: datetime | None = None
    updated_at: datetime | None = None
    following_ids: tuple[int, ...] = ()

    @property
    def is_active(self) -> bool:
        """사용자가 활성화 상태인지 확인합니다."""
        return self.del_yn == "N" and self.status != "DELETED"

    @property
    def profile_image_url(self) -> str:
        """프로필 이미지 URL을 반환합니다 (없으면 기본 이미지)."""
        return self.profile_image or DEFAULT_PROFILE_IMAGE


USER_SELECT_FIELDS = (
    "id, email, username, nickname, password, status, gender, feed_count, "
    "profile_image, bio, del_yn, created_at, updated_at"
)


def _row_to_user(row: tuple) -> User:
    """데이터베이스 행을 User 객체로 변환합니다."""
    return User(
        id=row[0],
        email=row[1],
        username=row[2],
        nickname=row[3],
        password=row[4],
        status=row[5],
        gender=row[6],
        feed_count=row[7],
        profile_image=row[8],
        bio=row[9],
        del_yn=row[10],
        created_at=row[11],
        updated_at=row[12],
    )


async def _get_user_where(
    cur: aiomysql.Cursor, column: str, value
) -> User | None:
    await cur.execute(
        f"""
        SELECT {USER_SELECT_FIELDS}
        FROM user
        WHERE {column} = %s AND del_yn = 'N'
        """,
        (value,),
    )
    row = await cur.fetchone()
    return _row_to_user(row) if row else None


async def get_user_by_id(cur: aiomysql.Cursor, user_id: int) -> User | None:
    """ID로 사용자를 조회합니다.

    팔로잉 ID 목록도 함께 채워서 반환합니다.

    Args:
        cur: DB 커서.
        user_id: 조회할 사용자의 ID.

    Returns:
        사용자 객체, 없거나 탈퇴한 경우 None.
    """
    user = await _get_user_where(cur, "id", user_id)
    if user is None:
        return None
    following_ids = await get_following_ids(cur, user_id)
    return replace(user, following_ids=tuple(following_ids))


async def get_user_by_email(cur: aiomysql.Cursor, email: str) -> User | None:
    """이메일로 사용자를 조회합니다."""
    return await _get_user_where(cur, "email", email)


async def get_user_by_username(cur: aiomysql.Cursor, username: str) -> User | None:
    """아이디(username)로 사용자를 조회합니다."""
    return await _get_user_where(cur, "username", username)


async def add_user(
    cur: aiomysql.Cursor,
    email: str,
    username: str,
    password_hash: str,
    nickname: str | None = None,
    status: str = "ACTIVE",
    gender: str = "NO_ANSWER",
    bio: str | None = None,
    profile_image: str | None = None,
) -> User:
    """새 사용자를 추가합니다.

    Args:
        cur: 트랜잭션 커서.
        email: 이메일.
        username: 아이디.
        password_hash: 해시된 비밀번호.
        nickname: 닉네임.
        status: 계정 상태.
        gender: 성별.
        bio: 자기소개.
        profile_image: 프로필 이미지 URL.

    Returns:
        생성된 사용자 객체.

    Raises:
        ConflictError: 이메일 또는 아이디가 이미 사용 중인 경우.
    """
    try:
        await cur.execute(
            """
            INSERT INTO user (email, username, password, nickname, status, gender, bio, profile_image)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """,
            (email, username, password_hash, nickname, status, gender, bio, profile_image),
        )
    except IntegrityError as exc:
        raise ConflictError("user_already_exists", "이미 사용 중인 이메일 또는 아이디입니다.") from exc

    user_id = cur.lastrowid
    await cur.execute(
        f"SELECT {USER_SELECT_FIELDS} FROM user WHERE id = %s",
        (user_id,),
    )
    row = await cur.fetchone()
    return _row_to_user(row)


async def adjust_feed_count(cur: aiomysql.Cursor, user_id: int, delta: int) -> None:
    """사용자의 feed_count를 delta만큼 증감합니다. 0 미만으로 내려가지 않습니다.

    Raises:
        NotFoundError: 사용자가 존재하지 않는 경우.
    """
    await cur.execute(
        """
        UPDATE user
        SET feed_count = GREATEST(CAST(feed_count AS SIGNED) + %s, 0)
        WHERE id = %s
        """,
        (delta, user_id),
    )
    if cur.rowcount == 0:
        # 값이 그대로인 경우(0에서 감소)에도 rowcount가 0일 수 있으므로 존재 여부를 재확인
        await cur.execute("SELECT 1 FROM user WHERE id = %s", (user_id,))
        if await cur.fetchone() is None:
            raise NotFoundError("user")


# ============ 팔로우 ============


async def get_following_ids(cur: aiomysql.Cursor, user_id: int) -> list[int]:
    """사용자가 팔로우하는 사용자 ID 목록을 반환합니다."""
    await cur.execute(
        """
        SELECT following_id FROM mapper_user_follow
        WHERE follower_id = %s
        ORDER BY id
        """,
        (user_id,),
    )
    return [row[0] for row in await cur.fetchall()]


async def follow_user(cur: aiomysql.Cursor, follower_id: int, following_id: int) -> None:
    """팔로우 관계를 추가합니다.

    Raises:
        ConflictError: 이미 팔로우 중인 경우.
    """
    await cur.execute(
        """
        SELECT 1 FROM mapper_user_follow
        WHERE follower_id = %s AND following_id = %s
        """,
        (follower_id, following_id),
    )
    if await cur.fetchone():
        raise ConflictError("already_following", "이미 팔로우 중인 사용자입니다.")

    try:
        await cur.execute(
            """
            INSERT INTO mapper_user_follow (follower_id, following_id)
            VALUES (%s, %s)
            """,
            (follower_id, following_id),
        )
    except IntegrityError as exc:
        raise ConflictError("already_following", "이미 팔로우 중인 사용자입니다.") from exc


async def unfollow_user(cur: aiomysql.Cursor, follower_id: int, following_id: int) -> bool:
    """팔로우 관계를 삭제합니다.

    Returns:
        삭제 성공 여부.
    """
    await cur.execute(
        """
        DELETE FROM mapper_user_follow
        WHERE follower_id = %s AND following_id = %s
        """,
        (follower_id, following_id),
    )
    return cur.rowcount > 0


# ============ 차단 ============


async def get_blocked_user_ids(cur: aiomysql.Cursor, user_id: int) -> list[int]:
    """사용자가 차단한 사용자 ID 목록을 반환합니다."""
    await cur.execute(
        "SELECT block_user_id FROM user_block WHERE user_id = %s ORDER BY id",
        (user_id,),
    )
    return [row[0] for row in await cur.fetchall()]


async def block_user(cur: aiomysql.Cursor, user_id: int, block_user_id: int) -> None:
    """사용자를 차단합니다.

    Raises:
        ConflictError: 이미 차단한 경우.
    """
    try:
        await cur.execute(
            "INSERT INTO user_block (user_id, block_user_id) VALUES (%s, %s)",
            (user_id, block_user_id),
        )
    except IntegrityError as exc:
        raise ConflictError("already_blocked", "이미 차단한 사용자입니다.") from exc


async def unblock_user(cur: aiomysql.Cursor, user_id: int, block_user_id: int) -> bool:
    """차단을 해제합니다."""
    await cur.execute(
        "DELETE FROM user_block WHERE user_id = %s AND block_user_id = %s",
        (user_id, block_user_id),
    )
    return cur.rowcount > 0
