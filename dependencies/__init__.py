"""dependencies: FastAPI 의존성 주입 패키지.

인증 및 요청 컨텍스트 관련 의존성 함수를 제공합니다.
"""

from .auth import get_current_user, get_optional_user
from .request_context import get_request_timestamp, get_request_time

__all__ = [
    "get_current_user",
    "get_optional_user",
    "get_request_timestamp",
    "get_request_time",
]
