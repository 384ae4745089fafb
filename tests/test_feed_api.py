"""피드 API 통합 테스트.

피드 생성/조회/수정/삭제와 태그 조정, 좋아요, 카운터 일관성을 실제 DB로 검증합니다.
"""

import pytest

from database.connection import get_connection


async def _create_feed(ac, **overrides) -> dict:
    payload = {
        "description": "오늘의 피드",
        "feed_images": [],
        "tag_names": [],
    }
    payload.update(overrides)
    res = await ac.post("/v1/feeds/", json=payload)
    assert res.status_code == 201, res.text
    return res.json()["data"]["feed"]


async def _feed_count(client, user_id: int) -> int:
    res = await client.get(f"/v1/users/{user_id}")
    assert res.status_code == 200
    return res.json()["data"]["user"]["feed_count"]


async def _tag_ids(feed_id: int) -> dict[str, int]:
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT t.tag_name, t.id FROM mapper_feed_tag m
                JOIN tag t ON t.id = m.tag_id
                WHERE m.feed_id = %s
                """,
                (feed_id,),
            )
            return {name: tag_id for name, tag_id in await cur.fetchall()}


async def _count_rows(table: str, feed_id: int) -> int:
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(f"SELECT COUNT(*) FROM {table} WHERE feed_id = %s", (feed_id,))
            row = await cur.fetchone()
            return row[0]


# ============ 생성 / 조회 ============


@pytest.mark.asyncio
async def test_create_feed_with_images_and_tags(client, authorized_user):
    ac, user, _ = authorized_user

    feed = await _create_feed(
        ac,
        feed_images=[
            {"image": "https://cdn.test/2.png", "sort_order": 1},
            {"image": "https://cdn.test/1.jpg", "sort_order": 0},
        ],
        tag_names=["#여행", "맛집", "여행"],
    )

    assert feed["user_id"] == user["user_id"]
    assert feed["status"] == "ACTIVE"
    assert feed["like_count"] == 0
    assert [img["sort_order"] for img in feed["feed_images"]] == [0, 1]
    assert sorted(tag["tag_name"] for tag in feed["tags"]) == ["맛집", "여행"]
    assert feed["liked_yn"] == "N"
    assert feed["bookmarked_yn"] == "N"
    assert feed["author"]["username"] == user["username"]

    assert await _feed_count(client, user["user_id"]) == 1


@pytest.mark.asyncio
async def test_existing_tag_is_reused(authorized_user):
    ac, _, _ = authorized_user

    first = await _create_feed(ac, tag_names=["일상"])
    second = await _create_feed(ac, tag_names=["일상"])

    assert first["tags"][0]["tag_id"] == second["tags"][0]["tag_id"]

    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT COUNT(*) FROM tag WHERE tag_name = %s", ("일상",))
            assert (await cur.fetchone())[0] == 1


@pytest.mark.asyncio
async def test_get_missing_feed_returns_404(client):
    res = await client.get("/v1/feeds/999999")
    assert res.status_code == 404
    assert res.json()["detail"]["error"] == "feed_not_found"


@pytest.mark.asyncio
async def test_create_feed_requires_login(client):
    res = await client.post("/v1/feeds/", json={"description": "x"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_pagination_over_25_feeds(client, authorized_user):
    ac, _, _ = authorized_user
    for i in range(25):
        await _create_feed(ac, description=f"피드 {i}")

    first = (await client.get("/v1/feeds/", params={"page": 1, "limit": 10})).json()["data"]
    assert len(first["items"]) == 10
    assert first["total_count"] == 25
    assert first["has_more"] is True
    # 최신순
    assert first["items"][0]["description"] == "피드 24"

    last = (await client.get("/v1/feeds/", params={"page": 3, "limit": 10})).json()["data"]
    assert len(last["items"]) == 5
    assert last["has_more"] is False
    assert last["items"][-1]["description"] == "피드 0"


@pytest.mark.asyncio
async def test_tag_filter_is_applied_before_pagination(client, authorized_user):
    ac, _, _ = authorized_user
    for i in range(6):
        await _create_feed(ac, description=f"태그 {i}", tag_names=["고양이"] if i % 2 else [])

    res = await client.get("/v1/feeds/", params={"tag_name": "#고양이", "limit": 2})
    data = res.json()["data"]
    assert data["total_count"] == 3
    assert len(data["items"]) == 2
    assert all(
        any(tag["tag_name"] == "고양이" for tag in item["tags"]) for item in data["items"]
    )


# ============ 수정 / 태그 조정 ============


@pytest.mark.asyncio
async def test_update_reconciles_tag_set(authorized_user):
    ac, _, _ = authorized_user
    feed = await _create_feed(ac, tag_names=["A", "B", "C"])
    before = await _tag_ids(feed["feed_id"])

    res = await ac.patch(f"/v1/feeds/{feed['feed_id']}", json={"tag_names": ["B", "C", "D"]})
    assert res.status_code == 200, res.text
    assert sorted(t["tag_name"] for t in res.json()["data"]["feed"]["tags"]) == ["B", "C", "D"]

    after = await _tag_ids(feed["feed_id"])
    assert set(after) == {"B", "C", "D"}
    assert after["B"] == before["B"]
    assert after["C"] == before["C"]

    # 참조가 끊긴 태그 행은 남아 있다
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT COUNT(*) FROM tag WHERE tag_name = 'A'")
            assert (await cur.fetchone())[0] == 1


@pytest.mark.asyncio
async def test_update_with_case_only_rename_keeps_tag(authorized_user):
    ac, _, _ = authorized_user
    feed = await _create_feed(ac, tag_names=["Python"])
    before = await _tag_ids(feed["feed_id"])
    assert list(before) == ["Python"]

    res = await ac.patch(f"/v1/feeds/{feed['feed_id']}", json={"tag_names": ["python"]})
    assert res.status_code == 200, res.text
    assert len(res.json()["data"]["feed"]["tags"]) == 1

    # 콜레이션상 같은 태그이므로 기존 매퍼와 태그 행을 그대로 쓴다
    after = await _tag_ids(feed["feed_id"])
    assert after == before


@pytest.mark.asyncio
async def test_update_with_case_variants_in_one_request(authorized_user):
    ac, _, _ = authorized_user
    feed = await _create_feed(ac, tag_names=["Go"])

    res = await ac.patch(
        f"/v1/feeds/{feed['feed_id']}", json={"tag_names": ["go", "GO", "Rust"]}
    )
    assert res.status_code == 200, res.text

    after = await _tag_ids(feed["feed_id"])
    assert len(after) == 2
    assert {name.lower() for name in after} == {"go", "rust"}


@pytest.mark.asyncio
async def test_update_with_empty_tags_clears_and_omitted_tags_keep(authorized_user):
    ac, _, _ = authorized_user
    feed = await _create_feed(ac, description="원본", tag_names=["A"])
    feed_id = feed["feed_id"]

    res = await ac.patch(f"/v1/feeds/{feed_id}", json={"description": "수정본"})
    updated = res.json()["data"]["feed"]
    assert updated["description"] == "수정본"
    assert [t["tag_name"] for t in updated["tags"]] == ["A"]

    res = await ac.patch(f"/v1/feeds/{feed_id}", json={"tag_names": []})
    cleared = res.json()["data"]["feed"]
    assert cleared["tags"] == []
    assert cleared["description"] == "수정본"


@pytest.mark.asyncio
async def test_non_owner_cannot_update(authorized_user, other_user):
    ac, _, _ = authorized_user
    other_ac, _ = other_user
    feed = await _create_feed(ac)

    res = await other_ac.patch(f"/v1/feeds/{feed['feed_id']}", json={"description": "x"})
    assert res.status_code == 403
    assert res.json()["detail"]["error"] == "not_authorized_to_edit"


# ============ 상태 변경 / feed_count ============


@pytest.mark.asyncio
async def test_status_toggle_keeps_feed_count_consistent(client, authorized_user):
    ac, user, _ = authorized_user
    feed = await _create_feed(ac)
    url = f"/v1/feeds/{feed['feed_id']}/status"

    for status, expected in [
        ("INACTIVE", 0),
        ("INACTIVE", 0),
        ("ACTIVE", 1),
        ("ACTIVE", 1),
        ("DELETED", 0),
        ("ACTIVE", 1),
    ]:
        res = await ac.patch(url, json={"status": status})
        assert res.status_code == 200, res.text
        assert res.json()["data"]["status"] == status
        assert await _feed_count(client, user["user_id"]) == expected


@pytest.mark.asyncio
async def test_inactive_feed_visible_only_to_owner(client, authorized_user, other_user):
    ac, user, _ = authorized_user
    other_ac, _ = other_user
    feed = await _create_feed(ac)
    await ac.patch(f"/v1/feeds/{feed['feed_id']}/status", json={"status": "INACTIVE"})

    assert (await ac.get(f"/v1/feeds/{feed['feed_id']}")).status_code == 200
    assert (await other_ac.get(f"/v1/feeds/{feed['feed_id']}")).status_code == 404

    own = await ac.get(f"/v1/users/{user['user_id']}/feeds", params={"status": "INACTIVE"})
    assert own.json()["data"]["total_count"] == 1
    res = await other_ac.get(f"/v1/users/{user['user_id']}/feeds", params={"status": "INACTIVE"})
    assert res.status_code == 403

    listing = (await client.get("/v1/feeds/")).json()["data"]
    assert listing["total_count"] == 0


@pytest.mark.asyncio
async def test_show_like_count_toggle(authorized_user):
    ac, _, _ = authorized_user
    feed = await _create_feed(ac)

    res = await ac.patch(
        f"/v1/feeds/{feed['feed_id']}/show-like-count", json={"show_like_count_yn": "N"}
    )
    assert res.status_code == 200
    detail = (await ac.get(f"/v1/feeds/{feed['feed_id']}")).json()["data"]["feed"]
    assert detail["show_like_count_yn"] == "N"


# ============ 삭제 ============


@pytest.mark.asyncio
async def test_soft_delete_twice_returns_404(client, authorized_user):
    ac, user, _ = authorized_user
    feed = await _create_feed(ac)

    assert (await ac.delete(f"/v1/feeds/{feed['feed_id']}")).status_code == 200
    assert await _feed_count(client, user["user_id"]) == 0

    res = await ac.delete(f"/v1/feeds/{feed['feed_id']}")
    assert res.status_code == 404
    assert await _feed_count(client, user["user_id"]) == 0


@pytest.mark.asyncio
async def test_hard_delete_removes_dependents(client, authorized_user, other_user):
    ac, user, _ = authorized_user
    other_ac, _ = other_user
    feed = await _create_feed(
        ac,
        feed_images=[{"image": "a.jpg", "sort_order": 0}],
        tag_names=["삭제"],
    )
    feed_id = feed["feed_id"]
    assert (await other_ac.post(f"/v1/feeds/{feed_id}/likes")).status_code == 201
    assert (await other_ac.post(f"/v1/feeds/{feed_id}/bookmarks")).status_code == 201
    comment = await other_ac.post(f"/v1/feeds/{feed_id}/comments", json={"content": "좋아요"})
    comment_id = comment.json()["data"]["comment_id"]
    await ac.post(
        f"/v1/feeds/{feed_id}/comments/{comment_id}/replies", json={"content": "감사"}
    )

    res = await ac.delete(f"/v1/feeds/{feed_id}/hard")
    assert res.status_code == 200, res.text

    for table in ("feed_image", "feed_like", "feed_bookmark", "mapper_feed_tag", "comment"):
        assert await _count_rows(table, feed_id) == 0
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT COUNT(*) FROM comment_reply")
            assert (await cur.fetchone())[0] == 0
            await cur.execute("SELECT COUNT(*) FROM feed WHERE id = %s", (feed_id,))
            assert (await cur.fetchone())[0] == 0

    assert await _feed_count(client, user["user_id"]) == 0
    assert (await client.get(f"/v1/feeds/{feed_id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_feed_image(authorized_user):
    ac, _, _ = authorized_user
    feed = await _create_feed(
        ac,
        feed_images=[
            {"image": "a.jpg", "sort_order": 0},
            {"image": "b.jpg", "sort_order": 1},
        ],
    )
    feed_id = feed["feed_id"]

    assert (await ac.delete(f"/v1/feeds/{feed_id}/images/0")).status_code == 200
    detail = (await ac.get(f"/v1/feeds/{feed_id}")).json()["data"]["feed"]
    assert [img["image"] for img in detail["feed_images"]] == ["b.jpg"]

    assert (await ac.delete(f"/v1/feeds/{feed_id}/images/0")).status_code == 404


# ============ 좋아요 ============


@pytest.mark.asyncio
async def test_like_unlike_round_trip(authorized_user, other_user):
    ac, _, _ = authorized_user
    other_ac, _ = other_user
    feed = await _create_feed(ac)
    feed_id = feed["feed_id"]

    res = await other_ac.post(f"/v1/feeds/{feed_id}/likes")
    assert res.status_code == 201
    assert res.json()["data"]["like_count"] == 1

    detail = (await other_ac.get(f"/v1/feeds/{feed_id}")).json()["data"]["feed"]
    assert detail["liked_yn"] == "Y"

    res = await other_ac.post(f"/v1/feeds/{feed_id}/likes")
    assert res.status_code == 409
    assert res.json()["detail"]["error"] == "already_liked"

    res = await other_ac.delete(f"/v1/feeds/{feed_id}/likes")
    assert res.status_code == 200
    assert res.json()["data"]["like_count"] == 0

    res = await other_ac.delete(f"/v1/feeds/{feed_id}/likes")
    assert res.status_code == 404

    detail = (await ac.get(f"/v1/feeds/{feed_id}")).json()["data"]["feed"]
    assert detail["like_count"] == 0


@pytest.mark.asyncio
async def test_like_missing_feed_returns_404(authorized_user):
    ac, _, _ = authorized_user
    res = await ac.post("/v1/feeds/999999/likes")
    assert res.status_code == 404
