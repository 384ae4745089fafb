"""comment_controller: 댓글 및 답글 관련 컨트롤러 모듈."""

from fastapi import Request

from dependencies.request_context import get_request_timestamp
from models.user_models import User
from schemas.comment_schemas import CreateCommentRequest, CreateReplyRequest
from schemas.common import create_response
from services.comment_service import CommentService
from utils.formatters import format_datetime
from utils.pagination import build_paginated_response


async def get_comments(
    feed_id: int, page: int, limit: int, request: Request
) -> dict:
    """피드의 댓글 목록을 조회합니다 (답글 포함)."""
    timestamp = get_request_timestamp(request)
    comments, total_count = await CommentService.list_comments(feed_id, page, limit)
    return create_response(
        "COMMENTS_RETRIEVED",
        "댓글 목록 조회에 성공했습니다.",
        data=build_paginated_response(comments, total_count, page, limit),
        timestamp=timestamp,
    )


async def create_comment(
    feed_id: int,
    comment_data: CreateCommentRequest,
    current_user: User,
    request: Request,
) -> dict:
    """피드에 댓글을 작성합니다.

    Raises:
        NotFoundError: 피드가 없거나 활성 상태가 아니면 404.
    """
    timestamp = get_request_timestamp(request)
    comment = await CommentService.create_comment(
        feed_id, current_user.id, comment_data.content
    )
    return create_response(
        "COMMENT_CREATED",
        "댓글이 작성되었습니다.",
        data={
            "comment_id": comment.id,
            "content": comment.content,
            "created_at": format_datetime(comment.created_at),
        },
        timestamp=timestamp,
    )


async def delete_comment(
    feed_id: int, comment_id: int, current_user: User, request: Request
) -> dict:
    """댓글을 삭제합니다."""
    timestamp = get_request_timestamp(request)
    await CommentService.delete_comment(feed_id, comment_id, current_user.id)
    return create_response(
        "COMMENT_DELETED", "댓글이 삭제되었습니다.", timestamp=timestamp
    )


async def create_reply(
    feed_id: int,
    comment_id: int,
    reply_data: CreateReplyRequest,
    current_user: User,
    request: Request,
) -> dict:
    """댓글에 답글을 작성합니다."""
    timestamp = get_request_timestamp(request)
    reply = await CommentService.create_reply(
        feed_id, comment_id, current_user.id, reply_data.content
    )
    return create_response(
        "REPLY_CREATED",
        "답글이 작성되었습니다.",
        data={
            "reply_id": reply.id,
            "comment_id": reply.comment_id,
            "content": reply.content,
            "created_at": format_datetime(reply.created_at),
        },
        timestamp=timestamp,
    )


async def delete_reply(
    feed_id: int,
    comment_id: int,
    reply_id: int,
    current_user: User,
    request: Request,
) -> dict:
    """답글을 삭제합니다."""
    timestamp = get_request_timestamp(request)
    await CommentService.delete_reply(feed_id, comment_id, reply_id, current_user.id)
    return create_response(
        "REPLY_DELETED", "답글이 삭제되었습니다.", timestamp=timestamp
    )
