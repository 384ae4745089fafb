"""pagination: 페이지 번호 기반 페이지네이션 헬퍼 모듈.

page는 1부터 시작하며, offset = (page - 1) * limit 으로 계산합니다.
"""

import math
from typing import Any


def get_offset(page: int, limit: int) -> int:
    """페이지 번호와 페이지 크기로 offset을 계산합니다.

    Args:
        page: 페이지 번호 (1부터 시작, 1 미만은 1로 취급).
        limit: 페이지당 항목 수.

    Returns:
        조회 시작 위치.
    """
    return (max(page, 1) - 1) * limit


def build_paginated_response(
    items: list[Any],
    total_count: int,
    page: int,
    limit: int,
) -> dict[str, Any]:
    """페이지네이션 응답 봉투를 생성합니다.

    Args:
        items: 현재 페이지 항목.
        total_count: 필터 조건에 맞는 전체 항목 수.
        page: 현재 페이지 번호.
        limit: 페이지당 항목 수.

    Returns:
        items, total_count, page, limit, total_pages, has_more 키를 가진 딕셔너리.
    """
    total_pages = math.ceil(total_count / limit) if limit > 0 else 0
    return {
        "items": items,
        "total_count": total_count,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_more": get_offset(page, limit) + len(items) < total_count,
    }
