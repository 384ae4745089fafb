"""controllers: 요청 핸들러 패키지.

인증, 사용자, 피드, 댓글 관련 컨트롤러 모듈을 제공합니다.
"""

from . import auth_controller
from . import user_controller
from . import feed_controller
from . import comment_controller

__all__ = [
    "auth_controller",
    "user_controller",
    "feed_controller",
    "comment_controller",
]
