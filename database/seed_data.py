"""seed_data.py: 개발용 더미 피드 데이터 생성 스크립트.

사용법:
    pip install -e ".[seed]"  # Faker
    python database/seed_data.py

생성되는 데이터:
    - 2,000 users (seeduser00001@seed.kr ~, 비밀번호 Test1234!)
    - 10,000 feeds (이미지 0~3장, 태그 0~3개)
    - 20,000 follows
    - 50,000 likes

비정규화 카운터(feed_count, like_count)는 삽입 후 실제 행 수로 다시 계산합니다.
"""

import asyncio
import random
from datetime import datetime, timedelta
from faker import Faker

# 프로젝트 루트를 PYTHONPATH에 추가
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from database.connection import apply_schema, close_db, init_db, transactional
from utils.password import hash_password

fake = Faker("ko_KR")
Faker.seed(42)  # 재현 가능한 데이터
random.seed(42)

NUM_USERS = 2000
NUM_FEEDS = 10000
NUM_FOLLOWS = 20000
NUM_LIKES = 50000
BATCH_SIZE = 1000

TAG_NAMES = ["일상", "여행", "맛집", "카페", "운동", "사진", "고양이", "강아지", "독서", "영화"]

# 미리 해시된 비밀번호 (Test1234!)
HASHED_PASSWORD = hash_password("Test1234!")


async def clear_existing_data():
    """기존 데이터 삭제 (개발 환경 전용)."""
    print("Clearing existing data...")
    async with transactional() as cur:
        await cur.execute("SET FOREIGN_KEY_CHECKS = 0")
        for table in (
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
        ):
            await cur.execute(f"TRUNCATE TABLE {table}")
        await cur.execute("SET FOREIGN_KEY_CHECKS = 1")
    print("Existing data cleared.")


async def _insert_batch(sql: str, rows: list):
    async with transactional() as cur:
        await cur.executemany(sql, rows)


def _random_past(days: int) -> datetime:
    return datetime.now() - timedelta(days=random.randint(1, days), seconds=random.randint(0, 86399))


async def seed_users():
    """사용자 데이터 생성."""
    print(f"Seeding {NUM_USERS} users...")
    rows = [
        (
            f"seeduser{i:05d}@seed.kr",
            f"seeduser{i:05d}",
            fake.name(),
            HASHED_PASSWORD,
            random.choice(["MALE", "FEMALE", "NO_ANSWER"]),
            _random_past(365),
        )
        for i in range(1, NUM_USERS + 1)
    ]
    for start in range(0, len(rows), BATCH_SIZE):
        await _insert_batch(
            """
            INSERT INTO user (email, username, nickname, password, gender, created_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            """,
            rows[start : start + BATCH_SIZE],
        )
    print(f"✓ {NUM_USERS} users created")


async def seed_follows():
    """팔로우 관계 생성 (자기 자신 제외, 중복 제외)."""
    print(f"Seeding {NUM_FOLLOWS} follows...")
    seen = set()
    while len(seen) < NUM_FOLLOWS:
        follower_id = random.randint(1, NUM_USERS)
        following_id = random.randint(1, NUM_USERS)
        if follower_id != following_id:
            seen.add((follower_id, following_id))

    rows = list(seen)
    for start in range(0, len(rows), BATCH_SIZE):
        await _insert_batch(
            "INSERT IGNORE INTO mapper_user_follow (follower_id, following_id) VALUES (%s, %s)",
            rows[start : start + BATCH_SIZE],
        )
    print(f"✓ {len(rows)} follows created")


async def seed_feeds():
    """피드, 이미지, 태그 매퍼 생성.

    피드 ID는 AUTO_INCREMENT가 1부터 시작한다고 가정합니다 (clear_existing_data 이후).
    """
    print(f"Seeding {NUM_FEEDS} feeds...")

    async with transactional() as cur:
        await cur.executemany("INSERT IGNORE INTO tag (tag_name) VALUES (%s)", [(t,) for t in TAG_NAMES])
        await cur.execute("SELECT id, tag_name FROM tag")
        tag_ids = {name: tag_id for tag_id, name in await cur.fetchall()}

    feeds, images, mappers = [], [], []
    for feed_id in range(1, NUM_FEEDS + 1):
        feeds.append(
            (
                random.randint(1, NUM_USERS),
                fake.paragraph(nb_sentences=random.randint(1, 4)),
                "Y" if random.random() > 0.05 else "N",
                "ACTIVE" if random.random() > 0.1 else "INACTIVE",
                _random_past(180),
            )
        )
        for order in range(random.randint(0, 3)):
            images.append((feed_id, f"https://cdn.seed.kr/feeds/{feed_id}_{order}.jpg", order))
        for tag_name in random.sample(TAG_NAMES, k=random.randint(0, 3)):
            mappers.append((feed_id, tag_ids[tag_name]))

        if len(feeds) >= BATCH_SIZE:
            await _flush_feeds(feeds, images, mappers)
            feeds, images, mappers = [], [], []
            print(f"  {feed_id}/{NUM_FEEDS} feeds created")

    if feeds:
        await _flush_feeds(feeds, images, mappers)

    print(f"✓ {NUM_FEEDS} feeds created")


async def _flush_feeds(feeds: list, images: list, mappers: list):
    """피드 배치와 그 이미지/태그를 한 트랜잭션으로 삽입."""
    async with transactional() as cur:
        await cur.executemany(
            """
            INSERT INTO feed (user_id, description, display_yn, status, created_at)
            VALUES (%s, %s, %s, %s, %s)
            """,
            feeds,
        )
        if images:
            await cur.executemany(
                "INSERT INTO feed_image (feed_id, image, sort_order) VALUES (%s, %s, %s)",
                images,
            )
        if mappers:
            await cur.executemany(
                "INSERT IGNORE INTO mapper_feed_tag (feed_id, tag_id) VALUES (%s, %s)",
                mappers,
            )


async def seed_likes():
    """좋아요 데이터 생성."""
    print(f"Seeding {NUM_LIKES} likes...")
    seen = set()
    attempts = 0
    while len(seen) < NUM_LIKES and attempts < NUM_LIKES * 3:
        seen.add((random.randint(1, NUM_USERS), random.randint(1, NUM_FEEDS)))
        attempts += 1

    rows = list(seen)
    for start in range(0, len(rows), BATCH_SIZE * 5):
        await _insert_batch(
            "INSERT IGNORE INTO feed_like (user_id, feed_id) VALUES (%s, %s)",
            rows[start : start + BATCH_SIZE * 5],
        )
    print(f"✓ {len(rows)} likes created")


async def recompute_counters():
    """feed_count와 like_count를 실제 행 수에 맞춥니다."""
    print("Recomputing counters...")
    async with transactional() as cur:
        await cur.execute(
            """
            UPDATE user u
            SET feed_count = (
                SELECT COUNT(*) FROM feed f
                WHERE f.user_id = u.id AND f.status = 'ACTIVE'
            )
            """
        )
        await cur.execute(
            """
            UPDATE feed f
            SET like_count = (SELECT COUNT(*) FROM feed_like l WHERE l.feed_id = f.id)
            """
        )
    print("✓ Counters recomputed")


async def main():
    """메인 실행 함수."""
    print("=" * 50)
    print("Starting seed data generation...")
    print(f"Target: {NUM_USERS} users, {NUM_FEEDS} feeds,")
    print(f"        {NUM_FOLLOWS} follows, {NUM_LIKES} likes")
    print("=" * 50)

    await init_db()

    try:
        await apply_schema()

        confirm = input("Clear existing data? (yes/no): ")
        if confirm.lower() == "yes":
            await clear_existing_data()

        start = datetime.now()

        await seed_users()
        await seed_follows()
        await seed_feeds()
        await seed_likes()
        await recompute_counters()

        elapsed = datetime.now() - start
        print("=" * 50)
        print(f"✓ Seed complete! Time: {elapsed.total_seconds():.1f}s")
        print("=" * 50)

    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
