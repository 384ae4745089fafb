# timeout: 요청 처리 시간 제한 미들웨어
# 처리 시간이 설정값을 넘으면 요청을 취소하고 504를 반환한다.

import asyncio
import logging

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from core.config import settings
from dependencies.request_context import get_request_timestamp

logger = logging.getLogger("api")


class TimeoutMiddleware(BaseHTTPMiddleware):
    """
    요청 타임아웃 미들웨어

    다운스트림 처리를 asyncio.wait_for로 감싸서, 제한 시간을 넘기면 처리 중인 작업을
    취소하고 504 Gateway Timeout을 반환한다. 진행 중이던 트랜잭션은
    transactional()의 예외 경로에서 롤백된다.
    """

    def __init__(self, app, timeout_seconds: float | None = None):
        super().__init__(app)
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.REQUEST_TIMEOUT_SECONDS
        )

    async def dispatch(self, request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                "요청 타임아웃: %s %s (%.1fs 초과)",
                request.method,
                request.url.path,
                self.timeout_seconds,
            )
            return JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content={
                    "detail": {
                        "error": "request_timeout",
                        "timestamp": get_request_timestamp(request),
                    }
                },
            )
