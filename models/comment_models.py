"""comment_models: 댓글 및 답글 관련 데이터 모델 및 함수 모듈.

피드의 comment_count는 활성(ACTIVE) 댓글 수와 같게 유지되며,
댓글 생성/삭제와 같은 트랜잭션에서 서비스 계층이 카운터를 조정합니다.
"""

from dataclasses import dataclass
from datetime import datetime

import aiomysql

from schemas.common import build_author_dict
from utils.formatters import format_datetime


COMMENT_STATUS_ACTIVE = "ACTIVE"
COMMENT_STATUS_DELETED = "DELETED"


@dataclass
class Comment:
    """댓글 데이터 클래스.

    Attributes:
        id: 댓글 고유 식별자.
        feed_id: 피드 ID.
        user_id: 작성자 ID.
        content: 내용.
        status: 상태 (ACTIVE / DELETED).
        created_at: 생성 시간.
        updated_at: 수정 시간.
    """

    id: int
    feed_id: int
    user_id: int
    content: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        """댓글이 삭제되었는지 확인합니다."""
        return self.status == COMMENT_STATUS_DELETED


@dataclass
class CommentReply:
    """답글 데이터 클래스.

    Attributes:
        id: 답글 고유 식별자.
        comment_id: 부모 댓글 ID.
        user_id: 작성자 ID.
        content: 내용.
        status: 상태 (ACTIVE / DELETED).
    """

    id: int
    comment_id: int
    user_id: int
    content: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


def _row_to_comment(row: tuple) -> Comment:
    return Comment(
        id=row[0],
        feed_id=row[1],
        user_id=row[2],
        content=row[3],
        status=row[4],
        created_at=row[5],
        updated_at=row[6],
    )


def _row_to_reply(row: tuple) -> CommentReply:
    return CommentReply(
        id=row[0],
        comment_id=row[1],
        user_id=row[2],
        content=row[3],
        status=row[4],
        created_at=row[5],
        updated_at=row[6],
    )


async def create_comment(
    cur: aiomysql.Cursor, feed_id: int, user_id: int, content: str
) -> Comment:
    """새 댓글을 추가합니다.

    Args:
        cur: 트랜잭션 커서.
        feed_id: 피드 ID.
        user_id: 작성자 ID.
        content: 내용.

    Returns:
        생성된 댓글 객체.
    """
    await cur.execute(
        "INSERT INTO comment (feed_id, user_id, content, status) VALUES (%s, %s, %s, %s)",
        (feed_id, user_id, content, COMMENT_STATUS_ACTIVE),
    )
    comment_id = cur.lastrowid

    # 같은 트랜잭션 내에서 조회
    comment = await get_comment_by_id(cur, comment_id)
    if comment is None:
        raise RuntimeError(
            f"댓글 삽입 직후 조회 실패: comment_id={comment_id}, feed_id={feed_id}"
        )
    return comment


async def get_comment_by_id(cur: aiomysql.Cursor, comment_id: int) -> Comment | None:
    """ID로 활성 댓글을 조회합니다.

    Returns:
        댓글 객체, 없거나 삭제된 경우 None.
    """
    await cur.execute(
        """
        SELECT id, feed_id, user_id, content, status, created_at, updated_at
        FROM comment
        WHERE id = %s AND status = %s
        """,
        (comment_id, COMMENT_STATUS_ACTIVE),
    )
    row = await cur.fetchone()
    return _row_to_comment(row) if row else None


async def delete_comment(cur: aiomysql.Cursor, comment_id: int) -> bool:
    """댓글을 소프트 삭제합니다 (status = DELETED).

    Returns:
        활성 댓글이 삭제 상태로 바뀌었는지 여부.
    """
    await cur.execute(
        "UPDATE comment SET status = %s WHERE id = %s AND status = %s",
        (COMMENT_STATUS_DELETED, comment_id, COMMENT_STATUS_ACTIVE),
    )
    return cur.rowcount > 0


async def create_reply(
    cur: aiomysql.Cursor, comment_id: int, user_id: int, content: str
) -> CommentReply:
    """댓글에 답글을 추가합니다."""
    await cur.execute(
        "INSERT INTO comment_reply (comment_id, user_id, content, status) VALUES (%s, %s, %s, %s)",
        (comment_id, user_id, content, COMMENT_STATUS_ACTIVE),
    )
    reply = await get_reply_by_id(cur, cur.lastrowid)
    if reply is None:
        raise RuntimeError(f"답글 삽입 직후 조회 실패: comment_id={comment_id}")
    return reply


async def get_reply_by_id(cur: aiomysql.Cursor, reply_id: int) -> CommentReply | None:
    """ID로 활성 답글을 조회합니다."""
    await cur.execute(
        """
        SELECT id, comment_id, user_id, content, status, created_at, updated_at
        FROM comment_reply
        WHERE id = %s AND status = %s
        """,
        (reply_id, COMMENT_STATUS_ACTIVE),
    )
    row = await cur.fetchone()
    return _row_to_reply(row) if row else None


async def delete_reply(cur: aiomysql.Cursor, reply_id: int) -> bool:
    """답글을 소프트 삭제합니다."""
    await cur.execute(
        "UPDATE comment_reply SET status = %s WHERE id = %s AND status = %s",
        (COMMENT_STATUS_DELETED, reply_id, COMMENT_STATUS_ACTIVE),
    )
    return cur.rowcount > 0


async def get_comments_by_feed(
    cur: aiomysql.Cursor, feed_id: int, offset: int, limit: int
) -> tuple[list[dict], int]:
    """피드의 활성 댓글을 작성순으로 조회하고, 답글을 함께 채웁니다.

    답글은 현재 페이지의 댓글 ID 집합으로 한 번에 조회합니다.

    Args:
        cur: DB 커서.
        feed_id: 피드 ID.
        offset: 시작 위치.
        limit: 조회할 개수.

    Returns:
        (댓글 딕셔너리 목록, 전체 활성 댓글 수).
    """
    await cur.execute(
        "SELECT COUNT(*) FROM comment WHERE feed_id = %s AND status = %s",
        (feed_id, COMMENT_STATUS_ACTIVE),
    )
    row = await cur.fetchone()
    total_count = row[0] if row else 0
    if total_count == 0:
        return [], 0

    await cur.execute(
        """
        SELECT c.id, c.content, c.created_at,
               u.id, u.username, u.nickname, u.profile_image
        FROM comment c
        INNER JOIN user u ON u.id = c.user_id
        WHERE c.feed_id = %s AND c.status = %s
        ORDER BY c.created_at ASC, c.id ASC
        LIMIT %s OFFSET %s
        """,
        (feed_id, COMMENT_STATUS_ACTIVE, limit, offset),
    )
    rows = await cur.fetchall()

    comments: dict[int, dict] = {}
    for row in rows:
        comments[row[0]] = {
            "comment_id": row[0],
            "content": row[1],
            "created_at": format_datetime(row[2]),
            "author": build_author_dict(row[3], row[4], row[5], row[6]),
            "replies": [],
        }

    if comments:
        placeholders = ", ".join(["%s"] * len(comments))
        await cur.execute(
            f"""
            SELECT r.id, r.comment_id, r.content, r.created_at,
                   u.id, u.username, u.nickname, u.profile_image
            FROM comment_reply r
            INNER JOIN user u ON u.id = r.user_id
            WHERE r.comment_id IN ({placeholders}) AND r.status = %s
            ORDER BY r.created_at ASC, r.id ASC
            """,
            (*comments.keys(), COMMENT_STATUS_ACTIVE),
        )
        for reply in await cur.fetchall():
            comments[reply[1]]["replies"].append(
                {
                    "reply_id": reply[0],
                    "content": reply[2],
                    "created_at": format_datetime(reply[3]),
                    "author": build_author_dict(reply[4], reply[5], reply[6], reply[7]),
                }
            )

    return list(comments.values()), total_count
