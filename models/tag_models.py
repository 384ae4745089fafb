"""tag_models: 태그 및 피드-태그 매퍼 관련 함수 모듈.

태그는 처음 사용될 때 생성되며, 더 이상 참조되지 않아도 삭제하지 않습니다.
"""

from dataclasses import dataclass
from typing import Iterable

import aiomysql
from pymysql.err import IntegrityError


@dataclass
class Tag:
    """태그 데이터 클래스.

    Attributes:
        id: 태그 고유 식별자.
        tag_name: 태그 이름 (고유).
    """

    id: int
    tag_name: str


def normalize_tag_names(tag_names: Iterable[str] | None) -> list[str]:
    """태그 이름 목록을 정규화합니다.

    앞뒤 공백과 '#' 접두어를 제거하고, 빈 값과 중복을 입력 순서를 유지하며 제거합니다.
    """
    if not tag_names:
        return []
    normalized: list[str] = []
    seen: set[str] = set()
    for raw in tag_names:
        if not isinstance(raw, str):
            continue
        name = raw.strip().lstrip("#").strip()
        if not name or name in seen:
            continue
        seen.add(name)
        normalized.append(name)
    return normalized


def plan_tag_sync(
    current: Iterable[int], desired: Iterable[int]
) -> tuple[list[int], list[int]]:
    """현재 태그 ID 집합을 원하는 태그 ID 집합으로 맞추기 위한 추가/삭제 목록을 계산합니다.

    이름이 아니라 ID로 비교합니다. tag_name 컬럼은 대소문자/악센트를 구분하지 않는
    콜레이션이라 'Python'과 'python'이 같은 행으로 조회되므로, 이름끼리 비교하면
    유지해야 할 매퍼를 삭제 대상으로 잘못 분류할 수 있습니다.
    현재 집합은 조정 작업이 시작되기 전에 한 번만 읽은 값이어야 합니다.
    반환값을 적용하면 (current - to_remove) | to_add == set(desired)가 됩니다.

    Args:
        current: 피드에 현재 연결된 태그 ID들.
        desired: find_or_create_tag로 얻은 요청 태그 ID들 (중복 허용).

    Returns:
        (추가할 태그 ID 목록, 삭제할 태그 ID 목록). 추가 목록은 요청 순서를 유지합니다.
    """
    current_set = set(current)
    desired_list = list(dict.fromkeys(desired))
    desired_set = set(desired_list)
    to_add = [tag_id for tag_id in desired_list if tag_id not in current_set]
    to_remove = sorted(current_set - desired_set)
    return to_add, to_remove


async def find_or_create_tag(cur: aiomysql.Cursor, tag_name: str) -> Tag:
    """태그를 조회하고, 없으면 생성합니다.

    이미 존재하는 태그 이름이면 기존 ID를 재사용합니다.

    Args:
        cur: 트랜잭션 커서.
        tag_name: 태그 이름.

    Returns:
        태그 객체.
    """
    await cur.execute("SELECT id, tag_name FROM tag WHERE tag_name = %s", (tag_name,))
    row = await cur.fetchone()
    if row:
        return Tag(id=row[0], tag_name=row[1])

    try:
        await cur.execute("INSERT INTO tag (tag_name) VALUES (%s)", (tag_name,))
    except IntegrityError:
        # 동시에 다른 트랜잭션이 같은 이름으로 생성한 경우, 잠금 읽기로 최신 커밋을 본다
        await cur.execute(
            "SELECT id, tag_name FROM tag WHERE tag_name = %s LOCK IN SHARE MODE",
            (tag_name,),
        )
        row = await cur.fetchone()
        return Tag(id=row[0], tag_name=row[1])
    return Tag(id=cur.lastrowid, tag_name=tag_name)


async def get_tag_ids_by_feed(cur: aiomysql.Cursor, feed_id: int) -> set[int]:
    """피드에 연결된 태그 ID 집합을 반환합니다."""
    await cur.execute("SELECT tag_id FROM mapper_feed_tag WHERE feed_id = %s", (feed_id,))
    return {row[0] for row in await cur.fetchall()}


async def get_tags_by_feed_ids(
    cur: aiomysql.Cursor, feed_ids: list[int]
) -> dict[int, list[Tag]]:
    """여러 피드의 태그를 한 번의 쿼리로 조회합니다.

    Returns:
        피드 ID별 태그 목록. 태그가 없는 피드도 빈 목록으로 포함됩니다.
    """
    result: dict[int, list[Tag]] = {feed_id: [] for feed_id in feed_ids}
    if not feed_ids:
        return result

    placeholders = ", ".join(["%s"] * len(feed_ids))
    await cur.execute(
        f"""
        SELECT m.feed_id, t.id, t.tag_name
        FROM mapper_feed_tag m
        INNER JOIN tag t ON t.id = m.tag_id
        WHERE m.feed_id IN ({placeholders})
        ORDER BY m.feed_id, m.id
        """,
        tuple(feed_ids),
    )
    for feed_id, tag_id, tag_name in await cur.fetchall():
        result.setdefault(feed_id, []).append(Tag(id=tag_id, tag_name=tag_name))
    return result


async def add_feed_tag(cur: aiomysql.Cursor, feed_id: int, tag_id: int) -> bool:
    """피드-태그 매퍼를 추가합니다. 이미 있으면 아무 것도 하지 않습니다.

    Returns:
        새로 추가되었는지 여부.
    """
    await cur.execute(
        "SELECT 1 FROM mapper_feed_tag WHERE feed_id = %s AND tag_id = %s",
        (feed_id, tag_id),
    )
    if await cur.fetchone():
        return False

    await cur.execute(
        "INSERT INTO mapper_feed_tag (feed_id, tag_id) VALUES (%s, %s)",
        (feed_id, tag_id),
    )
    return True


async def remove_feed_tags(
    cur: aiomysql.Cursor, feed_id: int, tag_ids: list[int]
) -> int:
    """지정한 ID의 태그 매퍼를 피드에서 제거합니다. 태그 행 자체는 유지됩니다.

    Returns:
        삭제된 매퍼 행 수.
    """
    if not tag_ids:
        return 0
    placeholders = ", ".join(["%s"] * len(tag_ids))
    await cur.execute(
        f"DELETE FROM mapper_feed_tag WHERE feed_id = %s AND tag_id IN ({placeholders})",
        (feed_id, *tag_ids),
    )
    return cur.rowcount


async def clear_feed_tags(cur: aiomysql.Cursor, feed_id: int) -> int:
    """피드의 모든 태그 매퍼를 삭제합니다."""
    await cur.execute("DELETE FROM mapper_feed_tag WHERE feed_id = %s", (feed_id,))
    return cur.rowcount
