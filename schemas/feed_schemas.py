"""feed_schemas: 피드 관련 Pydantic 모델 모듈.

피드 생성, 수정, 상태 변경, 좋아요 수 노출 여부 변경 요청 스키마를 정의합니다.
태그 이름은 이 계층에서 정규화되며, 서비스 계층은 다시 검증하지 않습니다.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from models.tag_models import normalize_tag_names


_ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
MAX_FEED_IMAGES = 10
MAX_TAGS = 30


def _validate_tag_names(v: list[str] | None) -> list[str] | None:
    """태그 이름 목록을 정규화하고 개수를 검증합니다.

    Raises:
        ValueError: 태그 이름이 너무 길거나 개수가 초과된 경우.
    """
    if v is None:
        return None
    names = normalize_tag_names(v)
    if any(len(name) > 100 for name in names):
        raise ValueError("태그는 100자 이하여야 합니다.")
    if len(names) > MAX_TAGS:
        raise ValueError(f"태그는 최대 {MAX_TAGS}개까지 등록할 수 있습니다.")
    return names


class FeedImageRequest(BaseModel):
    """피드 이미지 요청 모델.

    Attributes:
        image: 이미지 URL.
        sort_order: 노출 순서 (0 이상).
    """

    image: str = Field(..., min_length=1, max_length=500)
    sort_order: int = Field(0, ge=0)

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: str) -> str:
        """이미지 URL 형식을 검증합니다.

        Raises:
            ValueError: 허용되지 않은 이미지 형식인 경우.
        """
        v = v.strip()
        if not any(v.lower().endswith(ext) for ext in _ALLOWED_IMAGE_EXTENSIONS):
            raise ValueError(
                "이미지는 .jpg, .jpeg, .png, .gif, .webp 형식만 허용됩니다."
            )
        return v


class FeedCreateRequest(BaseModel):
    """피드 생성 요청 모델.

    Attributes:
        description: 본문 (선택, 최대 2200자).
        feed_images: 이미지 목록 (최대 10개).
        tag_names: 태그 이름 목록.
        display_yn: 노출 여부.
        show_like_count_yn: 좋아요 수 노출 여부.
    """

    description: str | None = Field(None, max_length=2200)
    feed_images: list[FeedImageRequest] = Field(default_factory=list, max_length=MAX_FEED_IMAGES)
    tag_names: list[str] = Field(default_factory=list)
    display_yn: Literal["Y", "N"] = "Y"
    show_like_count_yn: Literal["Y", "N"] = "Y"

    @field_validator("tag_names")
    @classmethod
    def validate_tag_names(cls, v: list[str]) -> list[str]:
        return _validate_tag_names(v) or []


class FeedUpdateRequest(BaseModel):
    """피드 수정 요청 모델.

    tag_names를 생략하면 태그는 그대로 두고, 빈 목록을 보내면 모든 태그를 제거합니다.

    Attributes:
        description: 새 본문.
        tag_names: 피드에 남길 태그 이름 목록 전체.
    """

    description: str | None = Field(None, max_length=2200)
    tag_names: list[str] | None = None

    @field_validator("tag_names")
    @classmethod
    def validate_tag_names(cls, v: list[str] | None) -> list[str] | None:
        return _validate_tag_names(v)


class FeedUpdateStatusRequest(BaseModel):
    """피드 상태 변경 요청 모델."""

    status: Literal["ACTIVE", "INACTIVE", "DELETED"]


class FeedShowLikeCountRequest(BaseModel):
    """좋아요 수 노출 여부 변경 요청 모델."""

    show_like_count_yn: Literal["Y", "N"]
