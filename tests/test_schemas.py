"""요청 스키마 검증 단위 테스트."""

import pytest
from pydantic import ValidationError

from schemas.feed_schemas import (
    FeedCreateRequest,
    FeedShowLikeCountRequest,
    FeedUpdateRequest,
    FeedUpdateStatusRequest,
)
from schemas.user_schemas import CreateUserRequest


def test_feed_create_defaults():
    req = FeedCreateRequest()
    assert req.feed_images == []
    assert req.tag_names == []
    assert req.display_yn == "Y"
    assert req.show_like_count_yn == "Y"


def test_feed_create_normalizes_tags_and_keeps_image_order():
    req = FeedCreateRequest(
        description="오늘의 기록",
        feed_images=[
            {"image": "https://cdn.test/b.png", "sort_order": 2},
            {"image": "https://cdn.test/a.jpg", "sort_order": 1},
        ],
        tag_names=["#일상", "일상", " 카페 ", ""],
    )
    assert req.tag_names == ["일상", "카페"]
    assert [img.sort_order for img in req.feed_images] == [2, 1]


def test_feed_create_rejects_unknown_image_extension():
    with pytest.raises(ValidationError):
        FeedCreateRequest(feed_images=[{"image": "https://cdn.test/a.exe", "sort_order": 0}])


def test_feed_create_rejects_negative_sort_order():
    with pytest.raises(ValidationError):
        FeedCreateRequest(feed_images=[{"image": "a.jpg", "sort_order": -1}])


def test_feed_create_rejects_invalid_yn():
    with pytest.raises(ValidationError):
        FeedCreateRequest(display_yn="X")


def test_feed_update_distinguishes_omitted_and_empty_tags():
    assert FeedUpdateRequest(description="x").tag_names is None
    assert FeedUpdateRequest(tag_names=[]).tag_names == []
    assert "description" not in FeedUpdateRequest(tag_names=["a"]).model_fields_set


def test_status_and_like_count_requests():
    assert FeedUpdateStatusRequest(status="INACTIVE").status == "INACTIVE"
    with pytest.raises(ValidationError):
        FeedUpdateStatusRequest(status="ARCHIVED")
    assert FeedShowLikeCountRequest(show_like_count_yn="N").show_like_count_yn == "N"


def _user_payload(**overrides):
    payload = {
        "email": "tester@naver.com",
        "username": "tester01",
        "password": "Password123!",
    }
    payload.update(overrides)
    return payload


def test_create_user_defaults():
    req = CreateUserRequest(**_user_payload())
    assert req.gender == "NO_ANSWER"
    assert req.nickname is None


def test_create_user_lowercases_username():
    assert CreateUserRequest(**_user_payload(username="Tester01")).username == "tester01"


@pytest.mark.parametrize(
    "overrides",
    [
        {"username": "short"},
        {"password": "password"},
        {"nickname": "a"},
        {"email": "not-an-email"},
        {"gender": "UNKNOWN"},
    ],
)
def test_create_user_rejects_invalid_fields(overrides):
    with pytest.raises(ValidationError):
        CreateUserRequest(**_user_payload(**overrides))
