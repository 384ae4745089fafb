"""models: 데이터 클래스 및 데이터 관리 함수 패키지.

사용자, 피드, 태그, 댓글 관련 데이터 모델과 MySQL 쿼리 함수를 제공합니다.
모든 함수는 호출자가 전달한 커서를 첫 번째 인자로 받습니다.
"""

from .user_models import (
    User,
    get_user_by_id,
    get_user_by_email,
    get_user_by_username,
    add_user,
)

from .feed_models import (
    Feed,
    FeedImage,
    get_feed_by_id,
    find_all,
    find_all_by_following,
    find_all_by_user,
    find_all_by_bookmark,
    hydrate_feeds,
)

from .tag_models import (
    Tag,
    normalize_tag_names,
    plan_tag_sync,
)

from .comment_models import (
    Comment,
    CommentReply,
    get_comments_by_feed,
)

__all__ = [
    # 사용자 모델
    "User",
    "get_user_by_id",
    "get_user_by_email",
    "get_user_by_username",
    "add_user",
    # 피드 모델
    "Feed",
    "FeedImage",
    "get_feed_by_id",
    "find_all",
    "find_all_by_following",
    "find_all_by_user",
    "find_all_by_bookmark",
    "hydrate_feeds",
    # 태그 모델
    "Tag",
    "normalize_tag_names",
    "plan_tag_sync",
    # 댓글 모델
    "Comment",
    "CommentReply",
    "get_comments_by_feed",
]
