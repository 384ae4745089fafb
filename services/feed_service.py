"""feed_service: 피드 관련 비즈니스 로직을 처리하는 서비스.

쓰기 작업은 하나의 transactional() 블록 안에서 실행되며, 블록이 제공하는 커서를
모든 리포지토리 함수에 전달합니다. 카운터를 바꾸는 작업은 먼저 피드 행을 잠급니다.
"""

import logging
from typing import List, Optional, Tuple

from database.connection import get_connection, transactional
from models import feed_models, tag_models, user_models
from models.feed_models import Feed, FEED_STATUS_ACTIVE, FEED_STATUS_DELETED
from schemas.feed_schemas import FeedCreateRequest, FeedUpdateRequest
from utils.exceptions import ForbiddenError, NotFoundError
from utils.pagination import get_offset

logger = logging.getLogger(__name__)


async def _get_owned_feed(cur, feed_id: int, user_id: int, action: str) -> Feed:
    """피드 행을 잠그고 존재 여부와 소유자를 확인합니다.

    Raises:
        NotFoundError: 피드가 없거나 삭제된 경우.
        ForbiddenError: 요청자가 작성자가 아닌 경우.
    """
    feed = await feed_models.get_feed_by_id(cur, feed_id, for_update=True)
    if feed is None or feed.status == FEED_STATUS_DELETED:
        raise NotFoundError("feed")
    if feed.user_id != user_id:
        raise ForbiddenError(action, "피드 작성자만 변경할 수 있습니다.")
    return feed


async def _get_active_feed_for_update(cur, feed_id: int) -> Feed:
    feed = await feed_models.get_feed_by_id(cur, feed_id, for_update=True)
    if feed is None or not feed.is_active:
        raise NotFoundError("feed")
    return feed


class FeedService:
    """피드 관리 서비스."""

    # ============ 조회 ============

    @staticmethod
    async def list_feeds(
        viewer_id: Optional[int],
        page: int,
        limit: int,
        tag_name: Optional[str] = None,
    ) -> Tuple[List[Feed], int]:
        """전체 피드 목록 조회.

        로그인 사용자가 차단한 사용자의 피드는 제외합니다.
        """
        offset = get_offset(page, limit)
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                blocked_ids = (
                    await user_models.get_blocked_user_ids(cur, viewer_id)
                    if viewer_id
                    else []
                )
                feeds, total_count = await feed_models.find_all(
                    cur, offset, limit, exclude_user_ids=blocked_ids, tag_name=tag_name
                )
                await feed_models.hydrate_feeds(cur, feeds, viewer_id)
        return feeds, total_count

    @staticmethod
    async def list_following_feeds(
        viewer_id: int, page: int, limit: int
    ) -> Tuple[List[Feed], int]:
        """내 피드와 팔로우한 사용자의 피드 목록 조회."""
        offset = get_offset(page, limit)
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                following_ids = await user_models.get_following_ids(cur, viewer_id)
                feeds, total_count = await feed_models.find_all_by_following(
                    cur, viewer_id, following_ids, offset, limit
                )
                await feed_models.hydrate_feeds(cur, feeds, viewer_id)
        return feeds, total_count

    @staticmethod
    async def list_user_feeds(
        user_id: int,
        status: str,
        page: int,
        limit: int,
        viewer_id: Optional[int] = None,
    ) -> Tuple[List[Feed], int]:
        """특정 사용자의 피드 목록 조회.

        활성 상태가 아닌 피드는 작성자 본인만 조회할 수 있습니다.
        """
        if status != FEED_STATUS_ACTIVE and viewer_id != user_id:
            raise ForbiddenError("view", "비공개 피드는 작성자만 조회할 수 있습니다.")

        offset = get_offset(page, limit)
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                if not await user_models.get_user_by_id(cur, user_id):
                    raise NotFoundError("user")
                feeds, total_count = await feed_models.find_all_by_user(
                    cur, user_id, status, offset, limit
                )
                await feed_models.hydrate_feeds(cur, feeds, viewer_id)
        return feeds, total_count

    @staticmethod
    async def list_bookmarked_feeds(
        viewer_id: int, page: int, limit: int
    ) -> Tuple[List[Feed], int]:
        """북마크한 피드 목록 조회."""
        offset = get_offset(page, limit)
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                feeds, total_count = await feed_models.find_all_by_bookmark(
                    cur, viewer_id, offset, limit
                )
                await feed_models.hydrate_feeds(cur, feeds, viewer_id)
        return feeds, total_count

    @staticmethod
    async def get_feed(feed_id: int, viewer_id: Optional[int] = None) -> Feed:
        """피드 상세 조회.

        삭제된 피드는 찾을 수 없는 것으로 취급하며, 비활성이거나 숨긴 피드는
        작성자 본인에게만 보입니다.
        """
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                feed = await feed_models.get_feed_by_id(cur, feed_id)
                if feed is None or feed.status == FEED_STATUS_DELETED:
                    raise NotFoundError("feed")
                is_owner = viewer_id is not None and feed.user_id == viewer_id
                if not is_owner and (not feed.is_active or feed.display_yn != "Y"):
                    raise NotFoundError("feed")
                await feed_models.hydrate_feeds(cur, [feed], viewer_id)
        return feed

    # ============ 생성 / 수정 ============

    @staticmethod
    async def create_feed(user_id: int, data: FeedCreateRequest) -> Feed:
        """피드 생성.

        피드 행, 이미지, 작성자 feed_count 증가, 태그와 매퍼를 한 트랜잭션에서 기록합니다.
        중간에 실패하면 아무 것도 남지 않습니다.
        """
        async with transactional() as cur:
            feed_id = await feed_models.insert_feed(
                cur,
                user_id,
                data.description,
                display_yn=data.display_yn,
                show_like_count_yn=data.show_like_count_yn,
            )
            await feed_models.insert_feed_images(
                cur, feed_id, [(img.image, img.sort_order) for img in data.feed_images]
            )
            await user_models.adjust_feed_count(cur, user_id, 1)

            for tag_name in tag_models.normalize_tag_names(data.tag_names):
                tag = await tag_models.find_or_create_tag(cur, tag_name)
                await tag_models.add_feed_tag(cur, feed_id, tag.id)

        logger.info("피드 생성: feed_id=%s, user_id=%s", feed_id, user_id)
        return await FeedService.get_feed(feed_id, user_id)

    @staticmethod
    async def update_feed(feed_id: int, user_id: int, data: FeedUpdateRequest) -> Feed:
        """피드 본문과 태그 수정.

        tag_names가 주어지면 수정 후 피드의 태그 매퍼가 정확히 그 집합과 같아집니다.
        현재 태그는 변경을 적용하기 전에 한 번만 읽습니다.
        """
        async with transactional() as cur:
            feed = await _get_owned_feed(cur, feed_id, user_id, "edit")

            if data.tag_names is not None:
                if not data.tag_names:
                    await tag_models.clear_feed_tags(cur, feed_id)
                else:
                    current_ids = await tag_models.get_tag_ids_by_feed(cur, feed_id)
                    # 대소문자만 다른 이름은 콜레이션상 같은 태그 행으로 귀결된다
                    desired_ids = [
                        (await tag_models.find_or_create_tag(cur, tag_name)).id
                        for tag_name in tag_models.normalize_tag_names(data.tag_names)
                    ]
                    to_add, to_remove = tag_models.plan_tag_sync(current_ids, desired_ids)
                    for tag_id in to_add:
                        await tag_models.add_feed_tag(cur, feed_id, tag_id)
                    await tag_models.remove_feed_tags(cur, feed_id, to_remove)

            description = (
                data.description
                if "description" in data.model_fields_set
                else feed.description
            )
            await feed_models.update_feed_description(cur, feed_id, description)

        return await FeedService.get_feed(feed_id, user_id)

    @staticmethod
    async def update_feed_status(feed_id: int, user_id: int, status: str) -> Feed:
        """피드 상태 변경.

        작성자의 feed_count는 활성 여부가 실제로 바뀔 때만 조정되므로,
        같은 상태로 반복 요청해도 카운터가 중복 증감하지 않습니다.
        """
        async with transactional() as cur:
            feed = await feed_models.get_feed_by_id(cur, feed_id, for_update=True)
            if feed is None:
                raise NotFoundError("feed")
            if feed.user_id != user_id:
                raise ForbiddenError("edit", "피드 작성자만 변경할 수 있습니다.")

            if feed.status != status:
                await feed_models.set_feed_status(cur, feed_id, status)
                was_active = feed.is_active
                now_active = status == FEED_STATUS_ACTIVE
                if was_active != now_active:
                    await user_models.adjust_feed_count(
                        cur, feed.user_id, 1 if now_active else -1
                    )
                feed.status = status
        return feed

    @staticmethod
    async def update_show_like_count(
        feed_id: int, user_id: int, show_like_count_yn: str
    ) -> Feed:
        """좋아요 수 노출 여부 변경. 카운터에는 영향이 없습니다."""
        async with transactional() as cur:
            feed = await _get_owned_feed(cur, feed_id, user_id, "edit")
            await feed_models.set_show_like_count(cur, feed_id, show_like_count_yn)
            feed.show_like_count_yn = show_like_count_yn
        return feed

    # ============ 삭제 ============

    @staticmethod
    async def delete_feed(feed_id: int, user_id: int) -> None:
        """피드 소프트 삭제 (status = DELETED).

        이미 삭제된 피드는 NotFoundError가 발생합니다.
        """
        async with transactional() as cur:
            feed = await _get_owned_feed(cur, feed_id, user_id, "delete")
            await feed_models.set_feed_status(cur, feed_id, FEED_STATUS_DELETED)
            if feed.is_active:
                await user_models.adjust_feed_count(cur, feed.user_id, -1)

    @staticmethod
    async def hard_delete_feed(feed_id: int, user_id: int) -> None:
        """피드와 종속 행을 영구 삭제합니다.

        소프트 삭제된 피드도 영구 삭제할 수 있습니다.
        """
        async with transactional() as cur:
            feed = await feed_models.get_feed_by_id(cur, feed_id, for_update=True)
            if feed is None:
                raise NotFoundError("feed")
            if feed.user_id != user_id:
                raise ForbiddenError("delete", "피드 작성자만 삭제할 수 있습니다.")

            await feed_models.hard_delete_feed(cur, feed_id)
            if feed.is_active:
                await user_models.adjust_feed_count(cur, feed.user_id, -1)

        logger.info("피드 영구 삭제: feed_id=%s, user_id=%s", feed_id, user_id)

    @staticmethod
    async def delete_feed_image(feed_id: int, user_id: int, sort_order: int) -> None:
        """지정한 순서의 피드 이미지 삭제."""
        async with transactional() as cur:
            await _get_owned_feed(cur, feed_id, user_id, "edit")
            if not await feed_models.delete_feed_image(cur, feed_id, sort_order):
                raise NotFoundError("feed_image")

    # ============ 좋아요 / 북마크 ============

    @staticmethod
    async def like_feed(feed_id: int, user_id: int) -> int:
        """좋아요 추가 후 갱신된 좋아요 수를 반환합니다.

        Raises:
            NotFoundError: 피드가 없거나 활성 상태가 아닌 경우.
            ConflictError: 이미 좋아요한 경우.
        """
        async with transactional() as cur:
            feed = await _get_active_feed_for_update(cur, feed_id)
            await feed_models.insert_like(cur, user_id, feed_id)
            await feed_models.adjust_like_count(cur, feed_id, 1)
        return feed.like_count + 1

    @staticmethod
    async def unlike_feed(feed_id: int, user_id: int) -> int:
        """좋아요 취소 후 갱신된 좋아요 수를 반환합니다.

        Raises:
            NotFoundError: 피드 또는 좋아요가 없는 경우.
        """
        async with transactional() as cur:
            feed = await feed_models.get_feed_by_id(cur, feed_id, for_update=True)
            if feed is None:
                raise NotFoundError("feed")
            if not await feed_models.delete_like(cur, user_id, feed_id):
                raise NotFoundError("like")
            await feed_models.adjust_like_count(cur, feed_id, -1)
        return max(feed.like_count - 1, 0)

    @staticmethod
    async def bookmark_feed(feed_id: int, user_id: int) -> None:
        """북마크 추가. 북마크 수는 집계하지 않습니다.

        Raises:
            NotFoundError: 피드가 없거나 활성 상태가 아닌 경우.
            ConflictError: 이미 북마크한 경우.
        """
        async with transactional() as cur:
            await _get_active_feed_for_update(cur, feed_id)
            await feed_models.insert_bookmark(cur, user_id, feed_id)

    @staticmethod
    async def unbookmark_feed(feed_id: int, user_id: int) -> None:
        """북마크 취소."""
        async with transactional() as cur:
            if not await feed_models.delete_bookmark(cur, user_id, feed_id):
                raise NotFoundError("bookmark")
