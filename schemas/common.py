"""common: 공통 응답 유틸리티 모듈.

API 응답 생성 및 공통 데이터 변환 함수를 정의합니다.
"""

from datetime import datetime
from typing import Any

from utils.formatters import format_datetime, yn


DEFAULT_PROFILE_IMAGE = "/assets/profiles/default_profile.jpg"


def create_response(
    code: str,
    message: str,
    data: dict[str, Any] | None = None,
    timestamp: str | None = None,
) -> dict[str, Any]:
    """표준 API 응답 딕셔너리를 생성합니다.

    Args:
        code: 응답 코드 (예: "SUCCESS", "FEED_CREATED").
        message: 사용자에게 표시할 메시지.
        data: 응답 데이터 (기본값: 빈 딕셔너리).
        timestamp: 타임스탬프 (기본값: 현재 시간).

    Returns:
        표준 형식의 응답 딕셔너리.
    """
    return {
        "code": code,
        "message": message,
        "data": data if data is not None else {},
        "errors": [],
        "timestamp": timestamp or datetime.now().strftime("%Y-%m-%dT%H:%M:%SZ"),
    }


def build_author_dict(user_id, username, nickname, profile_image) -> dict[str, Any]:
    """작성자 정보 딕셔너리를 생성합니다.

    닉네임이 없으면 아이디로, 프로필 이미지가 없으면 기본 이미지로 대체합니다.

    Args:
        user_id: 사용자 ID.
        username: 아이디.
        nickname: 닉네임.
        profile_image: 프로필 이미지 URL.

    Returns:
        작성자 정보 딕셔너리.
    """
    return {
        "user_id": user_id,
        "username": username,
        "nickname": nickname or username,
        "profile_image": profile_image or DEFAULT_PROFILE_IMAGE,
    }


def serialize_user(user) -> dict[str, Any]:
    """User 객체를 API 응답용 딕셔너리로 변환합니다.

    비밀번호 해시는 포함하지 않습니다.

    Args:
        user: User 데이터 객체.

    Returns:
        사용자 정보 딕셔너리.
    """
    return {
        "user_id": user.id,
        "email": user.email,
        "username": user.username,
        "nickname": user.nickname,
        "profile_image": user.profile_image_url,
        "bio": user.bio,
        "gender": user.gender,
        "status": user.status,
        "feed_count": user.feed_count,
        "following_count": len(user.following_ids),
        "created_at": format_datetime(user.created_at),
    }


def serialize_feed(feed) -> dict[str, Any]:
    """Feed 객체를 API 응답용 딕셔너리로 변환합니다.

    show_like_count_yn이 'N'이면 작성자가 아닌 사람에게 좋아요 수를 숨길 수 있도록
    like_count는 그대로 두고 플래그만 함께 내려줍니다.
    liked_yn / bookmarked_yn은 조회한 사용자가 있을 때만 포함됩니다.
    """
    data = {
        "feed_id": feed.id,
        "user_id": feed.user_id,
        "description": feed.description,
        "like_count": feed.like_count,
        "comment_count": feed.comment_count,
        "show_like_count_yn": feed.show_like_count_yn,
        "display_yn": feed.display_yn,
        "status": feed.status,
        "author": feed.author,
        "feed_images": [
            {"image_id": img.id, "image": img.image, "sort_order": img.sort_order}
            for img in feed.feed_images
        ],
        "tags": [{"tag_id": tag.id, "tag_name": tag.tag_name} for tag in feed.tags],
        "created_at": format_datetime(feed.created_at),
        "updated_at": format_datetime(feed.updated_at),
    }
    if feed.liked_yn is not None:
        data["liked_yn"] = yn(feed.liked_yn)
    if feed.bookmarked_yn is not None:
        data["bookmarked_yn"] = yn(feed.bookmarked_yn)
    return data
