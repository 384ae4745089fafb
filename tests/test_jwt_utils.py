"""JWT 유틸리티 단위 테스트."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from core.config import settings
from utils.jwt_utils import create_access_token, decode_access_token


def test_access_token_round_trip():
    token = create_access_token(42)
    assert decode_access_token(token) == 42


def test_expired_token_is_rejected():
    token = create_access_token(42, expires_minutes=-1)
    with pytest.raises(HTTPException) as exc_info:
        decode_access_token(token)
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail["error"] == "token_expired"


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode(
        {"sub": "1", "type": "access", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "other-secret-key-other-secret-key-0000",
        algorithm="HS256",
    )
    with pytest.raises(HTTPException) as exc_info:
        decode_access_token(token)
    assert exc_info.value.detail["error"] == "token_invalid"


@pytest.mark.parametrize(
    "payload",
    [
        {"sub": "1", "type": "refresh"},
        {"type": "access"},
        {"sub": "abc", "type": "access"},
    ],
)
def test_malformed_claims_are_rejected(payload):
    payload = {**payload, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    with pytest.raises(HTTPException) as exc_info:
        decode_access_token(token)
    assert exc_info.value.detail["error"] == "token_invalid"
