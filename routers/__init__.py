"""routers: FastAPI 라우터 패키지.

인증, 사용자, 피드 관련 API 엔드포인트를 정의하는 라우터 모듈을 제공합니다.
"""

from .auth_router import auth_router
from .user_router import user_router
from .feed_router import feed_router

__all__ = [
    "auth_router",
    "user_router",
    "feed_router",
]
