"""feed_controller: 피드 관련 컨트롤러 모듈.

피드 목록/상세 조회, 작성, 수정, 상태 변경, 삭제, 좋아요, 북마크 기능을 제공합니다.
도메인 예외는 전역 핸들러가 표준 에러 응답으로 변환합니다.
"""

from fastapi import Request

from dependencies.request_context import get_request_timestamp
from models.feed_models import Feed
from models.user_models import User
from schemas.common import create_response, serialize_feed
from schemas.feed_schemas import (
    FeedCreateRequest,
    FeedShowLikeCountRequest,
    FeedUpdateRequest,
    FeedUpdateStatusRequest,
)
from services.feed_service import FeedService
from utils.pagination import build_paginated_response


def _feed_page(feeds: list[Feed], total_count: int, page: int, limit: int) -> dict:
    return build_paginated_response(
        [serialize_feed(feed) for feed in feeds], total_count, page, limit
    )


# ============ 목록 / 상세 ============


async def get_feeds(
    page: int,
    limit: int,
    tag_name: str | None,
    request: Request,
    current_user: User | None = None,
) -> dict:
    """전체 피드 목록을 조회합니다.

    Args:
        page: 페이지 번호 (1부터 시작).
        limit: 페이지 크기.
        tag_name: 태그 필터 (선택).
        request: FastAPI Request 객체.
        current_user: 로그인 사용자 (선택). 있으면 차단한 사용자의 피드를 제외하고
            좋아요/북마크 여부를 포함합니다.

    Returns:
        피드 목록과 페이지네이션 정보가 포함된 응답 딕셔너리.
    """
    timestamp = get_request_timestamp(request)
    feeds, total_count = await FeedService.list_feeds(
        current_user.id if current_user else None, page, limit, tag_name
    )
    return create_response(
        "FEEDS_RETRIEVED",
        "피드 목록 조회에 성공했습니다.",
        data=_feed_page(feeds, total_count, page, limit),
        timestamp=timestamp,
    )


async def get_following_feeds(
    page: int, limit: int, current_user: User, request: Request
) -> dict:
    """내 피드와 팔로우한 사용자의 피드 목록을 조회합니다."""
    timestamp = get_request_timestamp(request)
    feeds, total_count = await FeedService.list_following_feeds(current_user.id, page, limit)
    return create_response(
        "FEEDS_RETRIEVED",
        "팔로잉 피드 조회에 성공했습니다.",
        data=_feed_page(feeds, total_count, page, limit),
        timestamp=timestamp,
    )


async def get_bookmarked_feeds(
    page: int, limit: int, current_user: User, request: Request
) -> dict:
    """북마크한 피드 목록을 조회합니다."""
    timestamp = get_request_timestamp(request)
    feeds, total_count = await FeedService.list_bookmarked_feeds(current_user.id, page, limit)
    return create_response(
        "FEEDS_RETRIEVED",
        "북마크한 피드 조회에 성공했습니다.",
        data=_feed_page(feeds, total_count, page, limit),
        timestamp=timestamp,
    )


async def get_user_feeds(
    user_id: int,
    status: str,
    page: int,
    limit: int,
    request: Request,
    current_user: User | None = None,
) -> dict:
    """특정 사용자의 피드 목록을 조회합니다."""
    timestamp = get_request_timestamp(request)
    feeds, total_count = await FeedService.list_user_feeds(
        user_id, status, page, limit, current_user.id if current_user else None
    )
    return create_response(
        "FEEDS_RETRIEVED",
        "사용자 피드 조회에 성공했습니다.",
        data=_feed_page(feeds, total_count, page, limit),
        timestamp=timestamp,
    )


async def get_feed(
    feed_id: int, request: Request, current_user: User | None = None
) -> dict:
    """피드 상세 정보를 조회합니다."""
    timestamp = get_request_timestamp(request)
    feed = await FeedService.get_feed(feed_id, current_user.id if current_user else None)
    return create_response(
        "FEED_RETRIEVED",
        "피드 조회에 성공했습니다.",
        data={"feed": serialize_feed(feed)},
        timestamp=timestamp,
    )


# ============ 작성 / 수정 ============


async def create_feed(
    feed_data: FeedCreateRequest, current_user: User, request: Request
) -> dict:
    """새 피드를 작성합니다.

    Returns:
        생성된 피드가 포함된 응답 딕셔너리.
    """
    timestamp = get_request_timestamp(request)
    feed = await FeedService.create_feed(current_user.id, feed_data)
    return create_response(
        "FEED_CREATED",
        "피드가 작성되었습니다.",
        data={"feed": serialize_feed(feed)},
        timestamp=timestamp,
    )


async def update_feed(
    feed_id: int,
    feed_data: FeedUpdateRequest,
    current_user: User,
    request: Request,
) -> dict:
    """피드 본문과 태그를 수정합니다."""
    timestamp = get_request_timestamp(request)
    feed = await FeedService.update_feed(feed_id, current_user.id, feed_data)
    return create_response(
        "FEED_UPDATED",
        "피드가 수정되었습니다.",
        data={"feed": serialize_feed(feed)},
        timestamp=timestamp,
    )


async def update_feed_status(
    feed_id: int,
    status_data: FeedUpdateStatusRequest,
    current_user: User,
    request: Request,
) -> dict:
    """피드 상태를 변경합니다."""
    timestamp = get_request_timestamp(request)
    feed = await FeedService.update_feed_status(feed_id, current_user.id, status_data.status)
    return create_response(
        "FEED_STATUS_UPDATED",
        "피드 상태가 변경되었습니다.",
        data={"feed_id": feed.id, "status": feed.status},
        timestamp=timestamp,
    )


async def update_show_like_count(
    feed_id: int,
    like_count_data: FeedShowLikeCountRequest,
    current_user: User,
    request: Request,
) -> dict:
    """좋아요 수 노출 여부를 변경합니다."""
    timestamp = get_request_timestamp(request)
    feed = await FeedService.update_show_like_count(
        feed_id, current_user.id, like_count_data.show_like_count_yn
    )
    return create_response(
        "FEED_UPDATED",
        "좋아요 수 노출 설정이 변경되었습니다.",
        data={"feed_id": feed.id, "show_like_count_yn": feed.show_like_count_yn},
        timestamp=timestamp,
    )


# ============ 삭제 ============


async def delete_feed(feed_id: int, current_user: User, request: Request) -> dict:
    """피드를 삭제합니다 (소프트 삭제)."""
    timestamp = get_request_timestamp(request)
    await FeedService.delete_feed(feed_id, current_user.id)
    return create_response(
        "FEED_DELETED", "피드가 삭제되었습니다.", timestamp=timestamp
    )


async def hard_delete_feed(feed_id: int, current_user: User, request: Request) -> dict:
    """피드와 관련 데이터를 영구 삭제합니다."""
    timestamp = get_request_timestamp(request)
    await FeedService.hard_delete_feed(feed_id, current_user.id)
    return create_response(
        "FEED_DELETED", "피드가 영구 삭제되었습니다.", timestamp=timestamp
    )


async def delete_feed_image(
    feed_id: int, sort_order: int, current_user: User, request: Request
) -> dict:
    """피드 이미지 하나를 삭제합니다."""
    timestamp = get_request_timestamp(request)
    await FeedService.delete_feed_image(feed_id, current_user.id, sort_order)
    return create_response(
        "FEED_IMAGE_DELETED", "피드 이미지가 삭제되었습니다.", timestamp=timestamp
    )


# ============ 좋아요 / 북마크 ============


async def like_feed(feed_id: int, current_user: User, request: Request) -> dict:
    """피드에 좋아요를 추가합니다.

    Raises:
        NotFoundError: 피드가 없으면 404.
        ConflictError: 이미 좋아요했으면 409.
    """
    timestamp = get_request_timestamp(request)
    like_count = await FeedService.like_feed(feed_id, current_user.id)
    return create_response(
        "LIKE_ADDED",
        "좋아요가 추가되었습니다.",
        data={"like_count": like_count},
        timestamp=timestamp,
    )


async def unlike_feed(feed_id: int, current_user: User, request: Request) -> dict:
    """피드 좋아요를 취소합니다."""
    timestamp = get_request_timestamp(request)
    like_count = await FeedService.unlike_feed(feed_id, current_user.id)
    return create_response(
        "LIKE_REMOVED",
        "좋아요가 취소되었습니다.",
        data={"like_count": like_count},
        timestamp=timestamp,
    )


async def bookmark_feed(feed_id: int, current_user: User, request: Request) -> dict:
    """피드를 북마크합니다."""
    timestamp = get_request_timestamp(request)
    await FeedService.bookmark_feed(feed_id, current_user.id)
    return create_response(
        "BOOKMARK_ADDED", "북마크에 추가되었습니다.", timestamp=timestamp
    )


async def unbookmark_feed(feed_id: int, current_user: User, request: Request) -> dict:
    """피드 북마크를 취소합니다."""
    timestamp = get_request_timestamp(request)
    await FeedService.unbookmark_feed(feed_id, current_user.id)
    return create_response(
        "BOOKMARK_REMOVED", "북마크가 취소되었습니다.", timestamp=timestamp
    )
