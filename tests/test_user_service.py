"""UserService 단위 테스트 (DB 모킹)."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from services.user_service import UserService
from utils.exceptions import BadRequestError, NotFoundError


@pytest.fixture
def cur():
    cursor = MagicMock()

    @asynccontextmanager
    async def fake_transactional():
        yield cursor

    with patch("services.user_service.transactional", fake_transactional):
        yield cursor


@pytest.mark.asyncio
async def test_cannot_follow_self(cur):
    with patch("models.user_models.follow_user", new=AsyncMock()) as follow_user:
        with pytest.raises(BadRequestError) as exc_info:
            await UserService.follow(1, 1)
    assert exc_info.value.error == "cannot_target_self"
    follow_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_cannot_block_self(cur):
    with pytest.raises(BadRequestError):
        await UserService.block(3, 3)


@pytest.mark.asyncio
async def test_follow_missing_user_is_not_found(cur):
    with patch(
        "models.user_models.get_user_by_id", new=AsyncMock(return_value=None)
    ), patch("models.user_models.follow_user", new=AsyncMock()) as follow_user:
        with pytest.raises(NotFoundError) as exc_info:
            await UserService.follow(1, 99)
    assert exc_info.value.error == "user_not_found"
    follow_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_follow_existing_user(cur):
    with patch(
        "models.user_models.get_user_by_id", new=AsyncMock(return_value=MagicMock())
    ), patch("models.user_models.follow_user", new=AsyncMock()) as follow_user:
        await UserService.follow(1, 2)
    follow_user.assert_awaited_once_with(cur, 1, 2)


@pytest.mark.asyncio
async def test_unfollow_without_follow_is_not_found(cur):
    with patch("models.user_models.unfollow_user", new=AsyncMock(return_value=False)):
        with pytest.raises(NotFoundError) as exc_info:
            await UserService.unfollow(1, 2)
    assert exc_info.value.error == "follow_not_found"


@pytest.mark.asyncio
async def test_unblock_without_block_is_not_found(cur):
    with patch("models.user_models.unblock_user", new=AsyncMock(return_value=False)):
        with pytest.raises(NotFoundError) as exc_info:
            await UserService.unblock(1, 2)
    assert exc_info.value.error == "block_not_found"
