"""feed_router: 피드, 댓글, 좋아요, 북마크 관련 라우터 모듈.

피드 CRUD, 상태 변경, 이미지 삭제, 좋아요/북마크, 댓글/답글 엔드포인트를 제공합니다.
"""

from fastapi import APIRouter, Depends, Query, Request, status

from controllers import comment_controller, feed_controller
from core.config import settings
from dependencies.auth import get_current_user, get_optional_user
from models.user_models import User
from schemas.comment_schemas import CreateCommentRequest, CreateReplyRequest
from schemas.feed_schemas import (
    FeedCreateRequest,
    FeedShowLikeCountRequest,
    FeedUpdateRequest,
    FeedUpdateStatusRequest,
)


feed_router = APIRouter(prefix="/v1/feeds", tags=["feeds"])
"""피드 관련 라우터 인스턴스."""


def _page_query():
    return Query(1, ge=1, description="페이지 번호 (1부터 시작)")


def _limit_query():
    return Query(
        settings.DEFAULT_PAGE_LIMIT,
        ge=1,
        le=settings.MAX_PAGE_LIMIT,
        description="페이지당 피드 수",
    )


# ============ 피드 목록 ============


@feed_router.get("/", status_code=status.HTTP_200_OK)
async def get_feeds(
    request: Request,
    page: int = _page_query(),
    limit: int = _limit_query(),
    tag_name: str | None = Query(None, max_length=100, description="태그 필터"),
    current_user: User | None = Depends(get_optional_user),
) -> dict:
    """전체 피드 목록을 조회합니다.

    최신순으로 정렬하며, tag_name이 주어지면 그 태그가 달린 피드만 반환합니다.
    로그인한 경우 차단한 사용자의 피드는 제외됩니다.
    """
    if tag_name is not None:
        tag_name = tag_name.strip().lstrip("#").strip() or None
    return await feed_controller.get_feeds(page, limit, tag_name, request, current_user)


@feed_router.get("/following", status_code=status.HTTP_200_OK)
async def get_following_feeds(
    request: Request,
    page: int = _page_query(),
    limit: int = _limit_query(),
    current_user: User = Depends(get_current_user),
) -> dict:
    """내 피드와 팔로우한 사용자의 피드를 조회합니다."""
    return await feed_controller.get_following_feeds(page, limit, current_user, request)


@feed_router.get("/bookmarks", status_code=status.HTTP_200_OK)
async def get_bookmarked_feeds(
    request: Request,
    page: int = _page_query(),
    limit: int = _limit_query(),
    current_user: User = Depends(get_current_user),
) -> dict:
    """북마크한 피드를 조회합니다."""
    return await feed_controller.get_bookmarked_feeds(page, limit, current_user, request)


# ============ 피드 라우터 ============


@feed_router.get("/{feed_id}", status_code=status.HTTP_200_OK)
async def get_feed(
    feed_id: int,
    request: Request,
    current_user: User | None = Depends(get_optional_user),
) -> dict:
    """피드 상세 정보를 조회합니다."""
    return await feed_controller.get_feed(feed_id, request, current_user)


@feed_router.post("/", status_code=status.HTTP_201_CREATED)
async def create_feed(
    feed_data: FeedCreateRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """새 피드를 작성합니다.

    Args:
        feed_data: 본문, 이미지 목록, 태그 목록, 노출 설정.
        request: FastAPI Request 객체.
        current_user: 현재 인증된 사용자.

    Returns:
        생성된 피드가 포함된 응답.
    """
    return await feed_controller.create_feed(feed_data, current_user, request)


@feed_router.patch("/{feed_id}", status_code=status.HTTP_200_OK)
async def update_feed(
    feed_id: int,
    feed_data: FeedUpdateRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드 본문과 태그를 수정합니다."""
    return await feed_controller.update_feed(feed_id, feed_data, current_user, request)


@feed_router.patch("/{feed_id}/status", status_code=status.HTTP_200_OK)
async def update_feed_status(
    feed_id: int,
    status_data: FeedUpdateStatusRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드 상태(ACTIVE / INACTIVE / DELETED)를 변경합니다."""
    return await feed_controller.update_feed_status(
        feed_id, status_data, current_user, request
    )


@feed_router.patch("/{feed_id}/show-like-count", status_code=status.HTTP_200_OK)
async def update_show_like_count(
    feed_id: int,
    like_count_data: FeedShowLikeCountRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """좋아요 수 노출 여부를 변경합니다."""
    return await feed_controller.update_show_like_count(
        feed_id, like_count_data, current_user, request
    )


@feed_router.delete("/{feed_id}", status_code=status.HTTP_200_OK)
async def delete_feed(
    feed_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드를 삭제합니다 (소프트 삭제)."""
    return await feed_controller.delete_feed(feed_id, current_user, request)


@feed_router.delete("/{feed_id}/hard", status_code=status.HTTP_200_OK)
async def hard_delete_feed(
    feed_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드와 이미지, 좋아요, 북마크, 태그, 댓글을 영구 삭제합니다."""
    return await feed_controller.hard_delete_feed(feed_id, current_user, request)


@feed_router.delete("/{feed_id}/images/{sort_order}", status_code=status.HTTP_200_OK)
async def delete_feed_image(
    feed_id: int,
    sort_order: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """지정한 순서의 피드 이미지를 삭제합니다."""
    return await feed_controller.delete_feed_image(
        feed_id, sort_order, current_user, request
    )


# ============ 좋아요 / 북마크 라우터 ============


@feed_router.post("/{feed_id}/likes", status_code=status.HTTP_201_CREATED)
async def like_feed(
    feed_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드에 좋아요를 추가합니다."""
    return await feed_controller.like_feed(feed_id, current_user, request)


@feed_router.delete("/{feed_id}/likes", status_code=status.HTTP_200_OK)
async def unlike_feed(
    feed_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드 좋아요를 취소합니다."""
    return await feed_controller.unlike_feed(feed_id, current_user, request)


@feed_router.post("/{feed_id}/bookmarks", status_code=status.HTTP_201_CREATED)
async def bookmark_feed(
    feed_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드를 북마크합니다."""
    return await feed_controller.bookmark_feed(feed_id, current_user, request)


@feed_router.delete("/{feed_id}/bookmarks", status_code=status.HTTP_200_OK)
async def unbookmark_feed(
    feed_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드 북마크를 취소합니다."""
    return await feed_controller.unbookmark_feed(feed_id, current_user, request)


# ============ 댓글 라우터 ============


@feed_router.get("/{feed_id}/comments", status_code=status.HTTP_200_OK)
async def get_comments(
    feed_id: int,
    request: Request,
    page: int = _page_query(),
    limit: int = _limit_query(),
) -> dict:
    """피드의 댓글 목록을 조회합니다."""
    return await comment_controller.get_comments(feed_id, page, limit, request)


@feed_router.post("/{feed_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    feed_id: int,
    comment_data: CreateCommentRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """피드에 댓글을 작성합니다."""
    return await comment_controller.create_comment(
        feed_id, comment_data, current_user, request
    )


@feed_router.delete("/{feed_id}/comments/{comment_id}", status_code=status.HTTP_200_OK)
async def delete_comment(
    feed_id: int,
    comment_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """댓글을 삭제합니다."""
    return await comment_controller.delete_comment(
        feed_id, comment_id, current_user, request
    )


@feed_router.post(
    "/{feed_id}/comments/{comment_id}/replies", status_code=status.HTTP_201_CREATED
)
async def create_reply(
    feed_id: int,
    comment_id: int,
    reply_data: CreateReplyRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """댓글에 답글을 작성합니다."""
    return await comment_controller.create_reply(
        feed_id, comment_id, reply_data, current_user, request
    )


@feed_router.delete(
    "/{feed_id}/comments/{comment_id}/replies/{reply_id}",
    status_code=status.HTTP_200_OK,
)
async def delete_reply(
    feed_id: int,
    comment_id: int,
    reply_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """답글을 삭제합니다."""
    return await comment_controller.delete_reply(
        feed_id, comment_id, reply_id, current_user, request
    )
