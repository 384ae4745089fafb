import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Settings는 임포트 시점에 환경 변수를 읽으므로, 앱 임포트 전에 테스트 기본값을 설정
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef0123456789abcdef")
os.environ.setdefault("DB_HOST", "127.0.0.1")
os.environ.setdefault("DB_PORT", "3306")
os.environ.setdefault("DB_USER", "root")
os.environ.setdefault("DB_PASSWORD", "")
os.environ.setdefault("DB_NAME", "feed_community_test")
os.environ.setdefault("ERROR_LOG_FILE", os.path.join(os.path.dirname(__file__), "test_error.log"))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from faker import Faker

from main import app
from database.connection import apply_schema, close_db, get_connection, init_db


# 외래 키 의존 순서와 무관하게 비우기 위해 FOREIGN_KEY_CHECKS를 끄고 TRUNCATE
_TABLES = (
    "comment_reply",
    "comment",
    "mapper_feed_tag",
    "tag",
    "feed_bookmark",
    "feed_like",
    "feed_image",
    "feed",
    "user_block",
    "mapper_user_follow",
    "user",
)


async def clear_all_data() -> None:
    """테스트용 헬퍼: 모든 데이터를 삭제합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SET FOREIGN_KEY_CHECKS = 0")
            for table in _TABLES:
                await cur.execute(f"TRUNCATE TABLE {table}")
            await cur.execute("SET FOREIGN_KEY_CHECKS = 1")


@pytest_asyncio.fixture(scope="function")
async def db():
    """각 테스트 함수 실행 전 스키마 적용, 데이터 초기화 및 DB 연결 관리.

    MySQL에 연결할 수 없으면 통합 테스트를 건너뜁니다.
    """
    try:
        await init_db()
    except Exception as exc:
        pytest.skip(f"MySQL에 연결할 수 없습니다: {exc}")
    try:
        await apply_schema()
        await clear_all_data()
        yield
    finally:
        await close_db()


@pytest_asyncio.fixture
async def client(db):
    """API 테스트를 위한 Async Client"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def fake():
    return Faker("ko_KR")


def make_user_payload(fake: Faker) -> dict:
    """회원가입용 페이로드 생성 (아이디는 영문 소문자+숫자 6자 이상)."""
    return {
        "email": fake.unique.email(),
        "username": fake.unique.lexify(text="user??????").lower(),
        "password": "Password123!",
        "nickname": fake.name(),
    }


@pytest.fixture
def user_payload(fake):
    return make_user_payload(fake)


async def signup_and_login(client: AsyncClient, payload: dict) -> tuple[AsyncClient, dict]:
    """회원가입 후 로그인하여 Bearer 토큰이 설정된 새 클라이언트를 반환합니다.

    반환된 클라이언트는 호출자가 닫아야 합니다.
    """
    signup_res = await client.post("/v1/users/", json=payload)
    assert signup_res.status_code == 201, signup_res.text

    login_res = await client.post(
        "/v1/auth/login",
        json={"email": payload["email"], "password": payload["password"]},
    )
    assert login_res.status_code == 200, login_res.text

    login_data = login_res.json()["data"]
    auth_client = AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {login_data['access_token']}"},
    )
    return auth_client, login_data["user"]


@pytest_asyncio.fixture
async def authorized_user(client, user_payload):
    """회원가입 및 로그인이 완료된 클라이언트와 유저 정보 반환."""
    auth_client, user_info = await signup_and_login(client, user_payload)
    async with auth_client as ac:
        yield ac, user_info, user_payload


@pytest_asyncio.fixture
async def other_user(client, fake):
    """두 번째 사용자 (팔로우/차단/권한 테스트용)."""
    auth_client, user_info = await signup_and_login(client, make_user_payload(fake))
    async with auth_client as ac:
        yield ac, user_info


@pytest_asyncio.fixture
async def user_factory(client, fake):
    """추가 사용자가 필요한 테스트용. 생성한 클라이언트는 테스트 종료 시 닫습니다."""
    created: list[AsyncClient] = []

    async def _create() -> tuple[AsyncClient, dict]:
        auth_client, user_info = await signup_and_login(client, make_user_payload(fake))
        created.append(auth_client)
        return auth_client, user_info

    yield _create

    for auth_client in created:
        await auth_client.aclose()
