# timing: 요청 타이밍 미들웨어
# 각 요청에 타임스탬프와 요청 ID를 주입하여 일관된 컨텍스트 정보를 제공합니다.

import uuid
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class TimingMiddleware(BaseHTTPMiddleware):
    """
    요청 타이밍 미들웨어

    요청이 들어올 때 UTC 타임스탬프와 요청 ID를 request.state에 저장합니다.
    컨트롤러와 에러 응답이 같은 타임스탬프를 사용하며, 요청 ID는 X-Request-ID
    응답 헤더로 돌려줍니다. 클라이언트가 X-Request-ID를 보내면 그 값을 그대로 씁니다.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.request_time = datetime.now(timezone.utc)
        request.state.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response
