# request_context: 요청 컨텍스트 의존성
# TimingMiddleware에서 설정한 요청 정보에 대한 접근을 제공합니다.

from datetime import datetime, timezone

from fastapi import Request

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def get_request_time(request: Request) -> datetime:
    """요청 시각을 datetime으로 반환합니다. 미들웨어가 없으면 현재 UTC 시각입니다."""
    request_time = getattr(request.state, "request_time", None)
    return request_time or datetime.now(timezone.utc)


def get_request_timestamp(request: Request) -> str:
    """
    요청 타임스탬프를 ISO 8601 문자열로 반환

    응답 본문과 에러 detail의 timestamp 필드에 사용됩니다.
    """
    return get_request_time(request).strftime(_TIMESTAMP_FORMAT)


def get_request_id(request: Request) -> str | None:
    """TimingMiddleware가 부여한 요청 ID를 반환합니다."""
    return getattr(request.state, "request_id", None)
