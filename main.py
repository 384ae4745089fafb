"""main: FastAPI 애플리케이션의 메인 진입점.

애플리케이션 설정, 미들웨어 구성, 라우터 등록, 전역 예외 핸들러를 설정합니다.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from core.config import settings
from database.connection import close_db, init_db, test_connection
from middleware import LoggingMiddleware, TimeoutMiddleware, TimingMiddleware
from middleware.exception_handler import (
    domain_exception_handler,
    global_exception_handler,
    request_validation_exception_handler,
)
from routers import auth_router, feed_router, user_router
from utils.exceptions import DomainError


logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리.

    시작 시 데이터베이스 연결 풀을 초기화하고, 종료 시 연결 풀을 정리합니다.
    """
    await init_db()
    yield
    await close_db()


app = FastAPI(
    title="Feed Community API",
    description="피드 기반 소셜 커뮤니티 백엔드 API 서버",
    version="1.0.0",
    lifespan=lifespan,
)

# 요청마다 처리 시간 상한을 둔다. 가장 안쪽에 두어 타임아웃 응답에도 요청 ID/로그가 붙도록 함
app.add_middleware(TimeoutMiddleware)

# 각 요청에 타임스탬프와 요청 ID를 주입하여 request.state에서 접근 가능하게 함
app.add_middleware(TimingMiddleware)

app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

# trusted_hosts="*"는 IP 스푸핑 위험이 있으므로 명시적 IP만 허용
_proxy_trusted_hosts = list(settings.TRUSTED_PROXIES) if settings.TRUSTED_PROXIES else ["127.0.0.1", "::1"]
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=_proxy_trusted_hosts)

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(feed_router)


@app.get("/health", status_code=200)
async def health_check():
    """서버 상태 및 DB 연결 확인."""
    if await test_connection():
        return {"status": "ok", "database": "connected"}
    return {"status": "error", "database": "disconnected"}


app.add_exception_handler(DomainError, domain_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)  # type: ignore[arg-type]

# AWS 핸들러 설정
handler = Mangum(app)
