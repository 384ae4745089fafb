# logging: 요청/응답 로깅 미들웨어
# 모든 HTTP 요청과 응답에 로그를 남긴다.

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# 로거 설정
logger = logging.getLogger("api")
logger.setLevel(logging.INFO)

# 콘솔 핸들러 추가 (없는 경우)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    요청/응답 로깅 미들웨어

    요청 메소드, 경로(쿼리 포함), 상태 코드, 처리 시간(ms)을 로그로 남긴다.
    5xx 응답은 WARNING 레벨로 기록한다.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"

        logger.info("-> %s %s", request.method, path)

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "<- %s %s - Status: %s - Time: %.1fms",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
        )
        return response
