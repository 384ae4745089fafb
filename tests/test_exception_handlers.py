"""도메인 예외 매핑, 전역 예외 핸들러, 타임아웃 미들웨어 테스트.

DB 없이 최소 FastAPI 앱을 구성하여 응답 형식만 검증합니다.
"""

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from middleware import TimeoutMiddleware, TimingMiddleware
from middleware.exception_handler import (
    domain_exception_handler,
    global_exception_handler,
    request_validation_exception_handler,
)
from utils.exceptions import (
    BadRequestError,
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    TransactionError,
)


class _Body(BaseModel):
    count: int


def _build_app(timeout_seconds: float = 5.0) -> FastAPI:
    app = FastAPI()
    app.add_middleware(TimeoutMiddleware, timeout_seconds=timeout_seconds)
    app.add_middleware(TimingMiddleware)
    app.add_exception_handler(DomainError, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundError("feed")

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("already_liked", "이미 좋아요를 눌렀습니다.")

    @app.get("/forbidden")
    async def forbidden():
        raise ForbiddenError("edit")

    @app.get("/bad-request")
    async def bad_request():
        raise BadRequestError("cannot_target_self")

    @app.get("/transaction")
    async def transaction():
        raise TransactionError()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(2)
        return {"ok": True}

    @app.post("/validate")
    async def validate(body: _Body):
        return body

    return app


@pytest.fixture
def app():
    return _build_app()


async def _get(app: FastAPI, path: str, **kwargs):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.get(path, **kwargs)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, status_code, error",
    [
        ("/not-found", 404, "feed_not_found"),
        ("/conflict", 409, "already_liked"),
        ("/forbidden", 403, "not_authorized_to_edit"),
        ("/bad-request", 400, "cannot_target_self"),
        ("/transaction", 500, "transaction_failed"),
    ],
)
async def test_domain_errors_are_mapped(app, path, status_code, error):
    res = await _get(app, path)
    assert res.status_code == status_code
    detail = res.json()["detail"]
    assert detail["error"] == error
    assert detail["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_domain_error_message_is_included(app):
    res = await _get(app, "/conflict")
    assert res.json()["detail"]["message"] == "이미 좋아요를 눌렀습니다."


@pytest.mark.asyncio
async def test_unhandled_exception_returns_tracking_id(app):
    res = await _get(app, "/boom", headers={"X-Request-ID": "req-123"})
    assert res.status_code == 500
    body = res.json()
    assert body["error"] == "Internal Server Error"
    assert body["trackingID"] == "req-123"


@pytest.mark.asyncio
async def test_validation_error_returns_422(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        res = await ac.post("/validate", json={"count": "many"})
    assert res.status_code == 422
    assert res.json()["detail"][0]["loc"] == ["body", "count"]


@pytest.mark.asyncio
async def test_request_id_header_is_echoed(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        res = await ac.post("/validate", json={"count": 1})
    assert res.status_code == 200
    assert res.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_slow_request_times_out_with_504():
    app = _build_app(timeout_seconds=0.1)
    res = await _get(app, "/slow")
    assert res.status_code == 504
    assert res.json()["detail"]["error"] == "request_timeout"
