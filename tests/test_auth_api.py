"""회원가입, 로그인, 현재 사용자 조회 통합 테스트."""

import pytest


@pytest.mark.asyncio
async def test_signup_and_login(client, user_payload):
    res = await client.post("/v1/users/", json=user_payload)
    assert res.status_code == 201, res.text
    user = res.json()["data"]["user"]
    assert user["email"] == user_payload["email"]
    assert user["feed_count"] == 0
    assert "password" not in user

    res = await client.post(
        "/v1/auth/login",
        json={"email": user_payload["email"], "password": user_payload["password"]},
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["user_id"] == user["user_id"]


@pytest.mark.asyncio
async def test_duplicate_signup_conflicts(client, user_payload):
    assert (await client.post("/v1/users/", json=user_payload)).status_code == 201

    res = await client.post("/v1/users/", json=user_payload)
    assert res.status_code == 409
    assert res.json()["detail"]["error"] == "email_already_exists"

    res = await client.post(
        "/v1/users/", json={**user_payload, "email": "another@naver.com"}
    )
    assert res.status_code == 409
    assert res.json()["detail"]["error"] == "username_already_exists"


@pytest.mark.asyncio
async def test_login_with_wrong_password(client, user_payload):
    await client.post("/v1/users/", json=user_payload)
    res = await client.post(
        "/v1/auth/login",
        json={"email": user_payload["email"], "password": "WrongPass123!"},
    )
    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "invalid_credentials"


@pytest.mark.asyncio
async def test_login_with_unknown_email(client):
    res = await client.post(
        "/v1/auth/login", json={"email": "nobody@naver.com", "password": "Password123!"}
    )
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_me(authorized_user):
    ac, user, _ = authorized_user
    res = await ac.get("/v1/auth/me")
    assert res.status_code == 200
    assert res.json()["data"]["user"]["user_id"] == user["user_id"]


@pytest.mark.asyncio
async def test_me_without_token(client):
    res = await client.get("/v1/auth/me")
    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "unauthorized"


@pytest.mark.asyncio
async def test_me_with_invalid_token(client):
    res = await client.get("/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "token_invalid"


@pytest.mark.asyncio
async def test_health(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json()["database"] == "connected"
