"""exception_handler: 전역 예외 처리 핸들러 모듈.

도메인 예외와 처리되지 않은 예외를 일관된 형식의 응답으로 변환합니다.
"""

import uuid
import logging
from logging.handlers import RotatingFileHandler

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from core.config import settings
from dependencies.request_context import get_request_id, get_request_timestamp
from utils.exceptions import DomainError


logger = logging.getLogger("api")

# 에러 전용 파일 로거 설정
error_logger = logging.getLogger("api.error")
error_logger.setLevel(logging.ERROR)

# RotatingFileHandler: 10MB 단위로 로테이션, 최대 5개 백업 파일
if not error_logger.handlers:
    error_file_handler = RotatingFileHandler(
        settings.ERROR_LOG_FILE,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
        delay=True,
    )
    error_file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    )
    error_logger.addHandler(error_file_handler)


async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """도메인 예외 처리 핸들러.

    서비스/모델 계층의 DomainError를 HTTPException과 같은 detail 형식으로 변환합니다.

    Args:
        request: FastAPI Request 객체.
        exc: 발생한 도메인 예외.

    Returns:
        예외의 status_code와 {"detail": {"error", "message"?, "timestamp"}} 본문.
    """
    detail = {
        "error": exc.error,
        "timestamp": get_request_timestamp(request),
    }
    if exc.message:
        detail["message"] = exc.message

    if exc.status_code >= 500:
        logger.error(
            "[%s] %s %s - %s",
            get_request_id(request),
            request.method,
            request.url.path,
            exc.error,
            exc_info=exc,
        )

    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """전역 예외 처리 핸들러.

    모든 예외를 잡아서 일관된 형식의 500 에러 응답을 반환합니다.
    프로덕션 환경(DEBUG=False)에서는 상세 에러 정보를 숨깁니다.

    Args:
        request: FastAPI Request 객체.
        exc: 발생한 예외.

    Returns:
        500 에러 JSON 응답.
    """
    tracking_id = get_request_id(request) or str(uuid.uuid4())
    timestamp = get_request_timestamp(request)

    # 로깅 (항상 수행)
    logger.error("[%s] Unhandled exception: %s", tracking_id, exc)

    # 파일 로깅 (RotatingFileHandler 사용)
    error_logger.error(
        "[%s] %s %s - Unhandled exception: %s",
        tracking_id,
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )

    content = {
        "trackingID": tracking_id,
        "error": "Internal Server Error",
        "timestamp": timestamp,
    }

    # DEBUG 모드에서만 상세 정보 포함
    if settings.DEBUG:
        content["detail"] = str(exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )


def _sanitize_binary(value):
    if isinstance(value, bytes):
        return f"<binary data: {len(value)} bytes>"
    return value


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """요청 데이터 유효성 검사 예외 처리 핸들러.

    오류 정보에 바이너리 데이터가 포함된 경우 디코딩 오류를 방지하기 위해
    해당 데이터를 문자열 플레이스홀더로 대체합니다.

    Returns:
        422 Unprocessable Entity 에러 JSON 응답.
    """
    sanitized_errors = []
    for error in exc.errors():
        error_copy = dict(error)
        if "input" in error_copy:
            error_copy["input"] = _sanitize_binary(error_copy["input"])
        if isinstance(error_copy.get("ctx"), dict):
            error_copy["ctx"] = {
                k: _sanitize_binary(v) for k, v in error_copy["ctx"].items()
            }
        sanitized_errors.append(error_copy)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={
            "detail": jsonable_encoder(sanitized_errors),
            "timestamp": get_request_timestamp(request),
        },
    )
