"""comment_service: 댓글 및 답글 관련 비즈니스 로직을 처리하는 서비스.

댓글 생성/삭제는 피드 행을 잠근 뒤 같은 트랜잭션에서 comment_count를 조정합니다.
"""

from typing import Dict, List, Tuple

from database.connection import get_connection, transactional
from models import comment_models, feed_models
from models.comment_models import Comment, CommentReply
from utils.exceptions import ForbiddenError, NotFoundError
from utils.pagination import get_offset


async def _get_commentable_feed(cur, feed_id: int, for_update: bool = False):
    feed = await feed_models.get_feed_by_id(cur, feed_id, for_update=for_update)
    if feed is None or not feed.is_active:
        raise NotFoundError("feed")
    return feed


class CommentService:
    """댓글 관리 서비스."""

    @staticmethod
    async def list_comments(
        feed_id: int, page: int, limit: int
    ) -> Tuple[List[Dict], int]:
        """피드 댓글 목록 조회 (답글 포함)."""
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await _get_commentable_feed(cur, feed_id)
                return await comment_models.get_comments_by_feed(
                    cur, feed_id, get_offset(page, limit), limit
                )

    @staticmethod
    async def create_comment(feed_id: int, user_id: int, content: str) -> Comment:
        """댓글 작성."""
        async with transactional() as cur:
            await _get_commentable_feed(cur, feed_id, for_update=True)
            comment = await comment_models.create_comment(cur, feed_id, user_id, content)
            await feed_models.adjust_comment_count(cur, feed_id, 1)
        return comment

    @staticmethod
    async def delete_comment(feed_id: int, comment_id: int, user_id: int) -> None:
        """댓글 삭제 (소프트 삭제).

        Raises:
            NotFoundError: 댓글이 없거나 다른 피드의 댓글인 경우.
            ForbiddenError: 댓글 작성자가 아닌 경우.
        """
        async with transactional() as cur:
            await feed_models.get_feed_by_id(cur, feed_id, for_update=True)
            comment = await comment_models.get_comment_by_id(cur, comment_id)
            if comment is None or comment.feed_id != feed_id:
                raise NotFoundError("comment")
            if comment.user_id != user_id:
                raise ForbiddenError("delete", "댓글 작성자만 삭제할 수 있습니다.")

            if await comment_models.delete_comment(cur, comment_id):
                await feed_models.adjust_comment_count(cur, feed_id, -1)

    @staticmethod
    async def create_reply(
        feed_id: int, comment_id: int, user_id: int, content: str
    ) -> CommentReply:
        """답글 작성. 답글은 comment_count에 포함되지 않습니다."""
        async with transactional() as cur:
            await _get_commentable_feed(cur, feed_id)
            comment = await comment_models.get_comment_by_id(cur, comment_id)
            if comment is None or comment.feed_id != feed_id:
                raise NotFoundError("comment")
            return await comment_models.create_reply(cur, comment_id, user_id, content)

    @staticmethod
    async def delete_reply(
        feed_id: int, comment_id: int, reply_id: int, user_id: int
    ) -> None:
        """답글 삭제 (소프트 삭제)."""
        async with transactional() as cur:
            comment = await comment_models.get_comment_by_id(cur, comment_id)
            if comment is None or comment.feed_id != feed_id:
                raise NotFoundError("comment")
            reply = await comment_models.get_reply_by_id(cur, reply_id)
            if reply is None or reply.comment_id != comment_id:
                raise NotFoundError("reply")
            if reply.user_id != user_id:
                raise ForbiddenError("delete", "답글 작성자만 삭제할 수 있습니다.")
            await comment_models.delete_reply(cur, reply_id)
