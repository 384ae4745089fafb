"""feed_models: 피드 리포지토리 모듈.

피드 목록/상세 조회, 피드·이미지·좋아요·북마크 쓰기 쿼리, 비정규화 카운터 갱신을 제공합니다.

주요 설계:
- 모든 함수는 호출자가 전달한 커서를 사용합니다 (트랜잭션 범위는 서비스가 결정).
- 태그 필터는 쿼리 단계(EXISTS)에서 적용하여 페이지네이션이 DB에서 수행됩니다.
- 이미지/태그/좋아요/북마크 정보는 페이지의 피드 ID 집합 단위로 일괄 조회합니다 (N+1 방지).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

import aiomysql
from pymysql.err import IntegrityError

from models.tag_models import Tag, get_tags_by_feed_ids
from schemas.common import build_author_dict
from utils.exceptions import ConflictError


FeedStatus = Literal["ACTIVE", "INACTIVE", "DELETED"]
YN = Literal["Y", "N"]

FEED_STATUS_ACTIVE = "ACTIVE"
FEED_STATUS_DELETED = "DELETED"


@dataclass
class FeedImage:
    """피드 이미지 데이터 클래스.

    Attributes:
        id: 이미지 고유 식별자.
        feed_id: 피드 ID.
        image: 이미지 URL.
        sort_order: 노출 순서.
    """

    id: int
    feed_id: int
    image: str
    sort_order: int


@dataclass
class Feed:
    """피드 데이터 클래스.

    feed_images, tags, liked_yn, bookmarked_yn, author는 저장 컬럼이 아니라
    조회 시점에 hydrate_feeds()가 채우는 값입니다.

    Attributes:
        id: 피드 고유 식별자.
        user_id: 작성자 ID.
        description: 본문.
        like_count: 좋아요 수 (비정규화 카운터).
        comment_count: 활성 댓글 수 (비정규화 카운터).
        show_like_count_yn: 좋아요 수 노출 여부.
        display_yn: 노출 여부.
        status: 피드 상태.
        created_at: 생성 시간.
        updated_at: 수정 시간.
    """

    id: int
    user_id: int
    description: str | None
    like_count: int
    comment_count: int
    show_like_count_yn: str
    display_yn: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: dict | None = None
    feed_images: list[FeedImage] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    liked_yn: bool | None = None
    bookmarked_yn: bool | None = None

    @property
    def is_active(self) -> bool:
        """피드가 활성 상태인지 확인합니다."""
        return self.status == FEED_STATUS_ACTIVE


FEED_COLUMNS = (
    "f.id, f.user_id, f.description, f.like_count, f.comment_count, "
    "f.show_like_count_yn, f.display_yn, f.status, f.created_at, f.updated_at"
)
AUTHOR_COLUMNS = "u.id, u.username, u.nickname, u.profile_image"

_ORDER_BY_LATEST = "f.created_at DESC, f.id DESC"


def _row_to_feed(row: tuple) -> Feed:
    """데이터베이스 행을 Feed 객체로 변환합니다.

    행에 작성자 컬럼(AUTHOR_COLUMNS)이 이어지면 author도 채웁니다.
    """
    feed = Feed(
        id=row[0],
        user_id=row[1],
        description=row[2],
        like_count=row[3],
        comment_count=row[4],
        show_like_count_yn=row[5],
        display_yn=row[6],
        status=row[7],
        created_at=row[8],
        updated_at=row[9],
    )
    if len(row) > 10:
        feed.author = build_author_dict(row[10], row[11], row[12], row[13])
    return feed


def _in_clause(values: list[int]) -> str:
    return ", ".join(["%s"] * len(values))


async def _fetch_page(
    cur: aiomysql.Cursor,
    where: str,
    params: list,
    offset: int,
    limit: int,
    join: str = "",
) -> tuple[list[Feed], int]:
    """공통 조건으로 총 개수와 현재 페이지 피드를 조회합니다."""
    from_clause = f"""
        FROM feed f
        INNER JOIN user u ON u.id = f.user_id
        {join}
        WHERE {where}
    """

    await cur.execute(f"SELECT COUNT(*) {from_clause}", params)
    row = await cur.fetchone()
    total_count = row[0] if row else 0

    if total_count == 0 or offset >= total_count:
        return [], total_count

    await cur.execute(
        f"""
        SELECT {FEED_COLUMNS}, {AUTHOR_COLUMNS}
        {from_clause}
        ORDER BY {_ORDER_BY_LATEST}
        LIMIT %s OFFSET %s
        """,
        (*params, limit, offset),
    )
    rows = await cur.fetchall()
    return [_row_to_feed(r) for r in rows], total_count


# ============ 조회 ============


async def get_feed_by_id(
    cur: aiomysql.Cursor, feed_id: int, for_update: bool = False
) -> Feed | None:
    """ID로 피드를 조회합니다 (상태와 무관).

    for_update=True이면 트랜잭션 안에서 피드 행만 잠그고(SELECT ... FOR UPDATE)
    작성자 정보 없이 반환합니다. 카운터나 상태를 갱신하기 전에 사용합니다.

    Args:
        cur: DB 커서.
        feed_id: 피드 ID.
        for_update: 행 잠금 여부.

    Returns:
        피드 객체, 없으면 None.
    """
    if for_update:
        await cur.execute(
            f"SELECT {FEED_COLUMNS} FROM feed f WHERE f.id = %s FOR UPDATE",
            (feed_id,),
        )
    else:
        await cur.execute(
            f"""
            SELECT {FEED_COLUMNS}, {AUTHOR_COLUMNS}
            FROM feed f
            INNER JOIN user u ON u.id = f.user_id
            WHERE f.id = %s
            """,
            (feed_id,),
        )
    row = await cur.fetchone()
    return _row_to_feed(row) if row else None


async def find_all(
    cur: aiomysql.Cursor,
    offset: int,
    limit: int,
    exclude_user_ids: list[int] | None = None,
    tag_name: str | None = None,
) -> tuple[list[Feed], int]:
    """전체 피드 목록을 조회합니다.

    탈퇴하지 않은 작성자의 노출(display_yn='Y')되고 활성 상태인 피드를 최신순으로 반환합니다.

    Args:
        cur: DB 커서.
        offset: 시작 위치.
        limit: 조회할 개수.
        exclude_user_ids: 제외할 작성자 ID 목록 (예: 차단한 사용자).
        tag_name: 이 태그가 연결된 피드만 조회.

    Returns:
        (피드 목록, 필터 조건에 맞는 전체 개수).
    """
    where = "u.del_yn = 'N' AND f.display_yn = 'Y' AND f.status = %s"
    params: list = [FEED_STATUS_ACTIVE]

    if exclude_user_ids:
        where += f" AND f.user_id NOT IN ({_in_clause(exclude_user_ids)})"
        params.extend(exclude_user_ids)

    if tag_name:
        where += """
            AND EXISTS (
                SELECT 1
                FROM mapper_feed_tag m
                INNER JOIN tag t ON t.id = m.tag_id
                WHERE m.feed_id = f.id AND t.tag_name = %s
            )
        """
        params.append(tag_name)

    return await _fetch_page(cur, where, params, offset, limit)


async def find_all_by_following(
    cur: aiomysql.Cursor,
    user_id: int,
    following_ids: list[int] | tuple[int, ...],
    offset: int,
    limit: int,
) -> tuple[list[Feed], int]:
    """내가 작성한 피드와 내가 팔로우한 사용자의 피드를 조회합니다.

    탈퇴한 작성자의 피드는 제외합니다.
    """
    author_ids = list(dict.fromkeys([*following_ids, user_id]))
    where = (
        f"f.user_id IN ({_in_clause(author_ids)}) "
        "AND u.del_yn = 'N' AND f.display_yn = 'Y' AND f.status = %s"
    )
    params: list = [*author_ids, FEED_STATUS_ACTIVE]
    return await _fetch_page(cur, where, params, offset, limit)


async def find_all_by_user(
    cur: aiomysql.Cursor,
    user_id: int,
    status: str,
    offset: int,
    limit: int,
) -> tuple[list[Feed], int]:
    """특정 작성자의 피드를 지정한 상태로 조회합니다."""
    where = "f.display_yn = 'Y' AND f.status = %s AND f.user_id = %s"
    return await _fetch_page(cur, where, [status, user_id], offset, limit)


async def find_all_by_bookmark(
    cur: aiomysql.Cursor,
    user_id: int,
    offset: int,
    limit: int,
) -> tuple[list[Feed], int]:
    """사용자가 북마크한 피드를 조회합니다."""
    where = "b.user_id = %s AND f.display_yn = 'Y' AND f.status = %s"
    return await _fetch_page(
        cur,
        where,
        [user_id, FEED_STATUS_ACTIVE],
        offset,
        limit,
        join="INNER JOIN feed_bookmark b ON b.feed_id = f.id",
    )


async def get_images_by_feed_ids(
    cur: aiomysql.Cursor, feed_ids: list[int]
) -> dict[int, list[FeedImage]]:
    """여러 피드의 이미지를 sort_order 순으로 한 번에 조회합니다."""
    result: dict[int, list[FeedImage]] = {feed_id: [] for feed_id in feed_ids}
    if not feed_ids:
        return result

    await cur.execute(
        f"""
        SELECT id, feed_id, image, sort_order
        FROM feed_image
        WHERE feed_id IN ({_in_clause(feed_ids)})
        ORDER BY feed_id, sort_order, id
        """,
        tuple(feed_ids),
    )
    for row in await cur.fetchall():
        image = FeedImage(id=row[0], feed_id=row[1], image=row[2], sort_order=row[3])
        result.setdefault(image.feed_id, []).append(image)
    return result


async def _get_marked_feed_ids(
    cur: aiomysql.Cursor, table: str, user_id: int, feed_ids: list[int]
) -> set[int]:
    await cur.execute(
        f"""
        SELECT feed_id FROM {table}
        WHERE user_id = %s AND feed_id IN ({_in_clause(feed_ids)})
        """,
        (user_id, *feed_ids),
    )
    return {row[0] for row in await cur.fetchall()}


async def hydrate_feeds(
    cur: aiomysql.Cursor,
    feeds: list[Feed],
    viewer_id: int | None = None,
) -> list[Feed]:
    """피드 목록에 이미지, 태그, 좋아요/북마크 여부를 채웁니다.

    페이지 단위로 피드 ID를 모아 관계 테이블별로 한 번씩만 조회합니다.
    viewer_id가 없으면 liked_yn/bookmarked_yn은 None으로 남습니다.

    Args:
        cur: DB 커서.
        feeds: 채울 피드 목록 (제자리에서 수정됨).
        viewer_id: 요청한 사용자 ID.

    Returns:
        같은 피드 목록.
    """
    if not feeds:
        return feeds

    feed_ids = [feed.id for feed in feeds]
    images = await get_images_by_feed_ids(cur, feed_ids)
    tags = await get_tags_by_feed_ids(cur, feed_ids)

    liked: set[int] = set()
    bookmarked: set[int] = set()
    if viewer_id:
        liked = await _get_marked_feed_ids(cur, "feed_like", viewer_id, feed_ids)
        bookmarked = await _get_marked_feed_ids(cur, "feed_bookmark", viewer_id, feed_ids)

    for feed in feeds:
        feed.feed_images = images.get(feed.id, [])
        feed.tags = tags.get(feed.id, [])
        if viewer_id:
            feed.liked_yn = feed.id in liked
            feed.bookmarked_yn = feed.id in bookmarked

    return feeds


# ============ 쓰기 ============


async def insert_feed(
    cur: aiomysql.Cursor,
    user_id: int,
    description: str | None,
    display_yn: str = "Y",
    show_like_count_yn: str = "Y",
) -> int:
    """피드 행을 추가합니다.

    Returns:
        생성된 피드 ID.
    """
    await cur.execute(
        """
        INSERT INTO feed (user_id, description, display_yn, show_like_count_yn, status)
        VALUES (%s, %s, %s, %s, %s)
        """,
        (user_id, description, display_yn, show_like_count_yn, FEED_STATUS_ACTIVE),
    )
    return cur.lastrowid


async def insert_feed_images(
    cur: aiomysql.Cursor, feed_id: int, images: list[tuple[str, int]]
) -> None:
    """피드 이미지들을 추가합니다.

    Args:
        cur: 트랜잭션 커서.
        feed_id: 피드 ID.
        images: (이미지 URL, sort_order) 목록. 전달된 순서값을 그대로 저장합니다.
    """
    if not images:
        return
    await cur.executemany(
        "INSERT INTO feed_image (feed_id, image, sort_order) VALUES (%s, %s, %s)",
        [(feed_id, image, sort_order) for image, sort_order in images],
    )


async def update_feed_description(
    cur: aiomysql.Cursor, feed_id: int, description: str | None
) -> None:
    """피드 본문과 수정 시간을 갱신합니다."""
    await cur.execute(
        """
        UPDATE feed
        SET description = %s, updated_at = CURRENT_TIMESTAMP(6)
        WHERE id = %s
        """,
        (description, feed_id),
    )


async def set_feed_status(cur: aiomysql.Cursor, feed_id: int, status: str) -> None:
    """피드 상태를 변경합니다."""
    await cur.execute(
        "UPDATE feed SET status = %s WHERE id = %s",
        (status, feed_id),
    )


async def set_show_like_count(cur: aiomysql.Cursor, feed_id: int, show_like_count_yn: str) -> None:
    """좋아요 수 노출 여부를 변경합니다."""
    await cur.execute(
        "UPDATE feed SET show_like_count_yn = %s WHERE id = %s",
        (show_like_count_yn, feed_id),
    )


async def adjust_like_count(cur: aiomysql.Cursor, feed_id: int, delta: int) -> None:
    """피드 좋아요 수를 delta만큼 증감합니다. 0 미만으로 내려가지 않습니다."""
    await cur.execute(
        "UPDATE feed SET like_count = GREATEST(like_count + %s, 0) WHERE id = %s",
        (delta, feed_id),
    )


async def adjust_comment_count(cur: aiomysql.Cursor, feed_id: int, delta: int) -> None:
    """피드 댓글 수를 delta만큼 증감합니다. 0 미만으로 내려가지 않습니다."""
    await cur.execute(
        "UPDATE feed SET comment_count = GREATEST(comment_count + %s, 0) WHERE id = %s",
        (delta, feed_id),
    )


async def delete_feed_image(cur: aiomysql.Cursor, feed_id: int, sort_order: int) -> bool:
    """지정한 순서의 피드 이미지를 삭제합니다.

    Returns:
        삭제 성공 여부.
    """
    await cur.execute(
        "DELETE FROM feed_image WHERE feed_id = %s AND sort_order = %s",
        (feed_id, sort_order),
    )
    return cur.rowcount > 0


async def hard_delete_feed(cur: aiomysql.Cursor, feed_id: int) -> bool:
    """피드와 피드를 참조하는 모든 행을 영구 삭제합니다.

    외래 키를 위반하지 않도록 종속 행(답글, 댓글, 이미지, 좋아요, 북마크, 태그 매퍼)을
    먼저 삭제한 뒤 피드 행을 삭제합니다.

    Returns:
        피드 행이 삭제되었는지 여부.
    """
    await cur.execute(
        """
        DELETE r FROM comment_reply r
        INNER JOIN comment c ON c.id = r.comment_id
        WHERE c.feed_id = %s
        """,
        (feed_id,),
    )
    for table in ("comment", "feed_image", "feed_like", "feed_bookmark", "mapper_feed_tag"):
        await cur.execute(f"DELETE FROM {table} WHERE feed_id = %s", (feed_id,))

    await cur.execute("DELETE FROM feed WHERE id = %s", (feed_id,))
    return cur.rowcount > 0


# ============ 좋아요 / 북마크 ============


async def _exists(cur: aiomysql.Cursor, table: str, user_id: int, feed_id: int) -> bool:
    await cur.execute(
        f"SELECT 1 FROM {table} WHERE user_id = %s AND feed_id = %s",
        (user_id, feed_id),
    )
    return await cur.fetchone() is not None


async def _insert_mark(
    cur: aiomysql.Cursor, table: str, user_id: int, feed_id: int, conflict_code: str
) -> None:
    if await _exists(cur, table, user_id, feed_id):
        raise ConflictError(conflict_code)
    try:
        await cur.execute(
            f"INSERT INTO {table} (user_id, feed_id) VALUES (%s, %s)",
            (user_id, feed_id),
        )
    except IntegrityError as exc:
        # 존재 확인과 INSERT 사이에 다른 요청이 먼저 삽입한 경우
        raise ConflictError(conflict_code) from exc


async def _delete_mark(cur: aiomysql.Cursor, table: str, user_id: int, feed_id: int) -> bool:
    await cur.execute(
        f"DELETE FROM {table} WHERE user_id = %s AND feed_id = %s",
        (user_id, feed_id),
    )
    return cur.rowcount > 0


async def has_liked(cur: aiomysql.Cursor, user_id: int, feed_id: int) -> bool:
    """사용자가 피드에 좋아요했는지 확인합니다."""
    return await _exists(cur, "feed_like", user_id, feed_id)


async def insert_like(cur: aiomysql.Cursor, user_id: int, feed_id: int) -> None:
    """좋아요 행을 추가합니다.

    Raises:
        ConflictError: 이미 좋아요한 경우 (already_liked).
    """
    await _insert_mark(cur, "feed_like", user_id, feed_id, "already_liked")


async def delete_like(cur: aiomysql.Cursor, user_id: int, feed_id: int) -> bool:
    """좋아요 행을 삭제합니다."""
    return await _delete_mark(cur, "feed_like", user_id, feed_id)


async def has_bookmarked(cur: aiomysql.Cursor, user_id: int, feed_id: int) -> bool:
    """사용자가 피드를 북마크했는지 확인합니다."""
    return await _exists(cur, "feed_bookmark", user_id, feed_id)


async def insert_bookmark(cur: aiomysql.Cursor, user_id: int, feed_id: int) -> None:
    """북마크 행을 추가합니다.

    Raises:
        ConflictError: 이미 북마크한 경우 (already_bookmarked).
    """
    await _insert_mark(cur, "feed_bookmark", user_id, feed_id, "already_bookmarked")


async def delete_bookmark(cur: aiomysql.Cursor, user_id: int, feed_id: int) -> bool:
    """북마크 행을 삭제합니다."""
    return await _delete_mark(cur, "feed_bookmark", user_id, feed_id)
