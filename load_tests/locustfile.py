"""locustfile.py: 피드 커뮤니티 백엔드 부하 테스트.

사전 준비:
    1. pip install -e ".[load]"
    2. seed_accounts.py로 테스트 계정을 대상 환경에 가입시켜 둡니다.

실행:
    # UI 모드 (localhost:8089)
    locust -f load_tests/locustfile.py --host=http://127.0.0.1:8000

    # Headless 모드
    locust -f load_tests/locustfile.py --host=http://127.0.0.1:8000 \
        --users=100 --spawn-rate=5 --run-time=10m --headless

주의사항:
    - Access Token이 만료되면 401 비율이 늘어납니다. 만료 시간 안에서 실행하세요.
    - 좋아요/북마크 중복 요청의 409는 정상 응답으로 집계합니다.
"""

import itertools
import logging
import random
from collections import defaultdict, deque

import gevent
from locust import HttpUser, between, events, task
from locust.exception import StopUser

from load_tests.config import (
    ACCOUNT_COUNT,
    ACCOUNT_EMAIL_PATTERN,
    ACCOUNT_PASSWORD,
    ACCOUNT_START_INDEX,
    ACTIVE_WAIT,
    COMMENT_CONTENTS,
    FEED_CACHE_PER_KEY,
    FEED_DESCRIPTIONS,
    FEED_IMAGES,
    FEED_LIST_LIMIT,
    FEED_LIST_MAX_PAGE,
    FEED_TAGS,
    LOGIN_RETRY_WAIT,
    READER_WAIT,
    REQUEST_TIMEOUT,
    WRITER_WAIT,
)

logger = logging.getLogger(__name__)

# Locust 사용자는 같은 프로세스의 greenlet이므로 모듈 상태에 잠금이 필요 없다
_account_seq = itertools.count()

# 태그 이름 -> 최근에 본 feed_id. 전체/팔로잉 목록은 None 키에 쌓는다.
_feed_cache: defaultdict[str | None, deque[int]] = defaultdict(
    lambda: deque(maxlen=FEED_CACHE_PER_KEY)
)


def _next_account() -> dict:
    """시딩된 계정을 순서대로 돌려 가며 배정합니다. 사용자 수가 더 많으면 계정을 공유합니다."""
    index = ACCOUNT_START_INDEX + next(_account_seq) % ACCOUNT_COUNT
    return {"email": ACCOUNT_EMAIL_PATTERN.format(index), "password": ACCOUNT_PASSWORD}


def _remember_feeds(tag_name: str | None, feed_ids: list[int]) -> None:
    _feed_cache[tag_name].extend(feed_ids)


def _pick_feed(tag_name: str | None = None) -> int | None:
    """캐시에서 임의의 feed_id를 고릅니다.

    tag_name이 없으면 비어 있지 않은 키 중 하나를 먼저 고르므로,
    태그 목록에서 발견한 피드도 상세 조회와 참여 태스크의 대상이 됩니다.
    """
    if tag_name is None:
        keys = [key for key, ids in _feed_cache.items() if ids]
        if not keys:
            return None
        tag_name = random.choice(keys)
    ids = _feed_cache.get(tag_name)
    return random.choice(ids) if ids else None


def _forget_feed(feed_id: int) -> None:
    """삭제되었거나 비공개가 된 피드를 모든 키에서 제거합니다."""
    for ids in _feed_cache.values():
        try:
            ids.remove(feed_id)
        except ValueError:
            continue


def _cached_feed_count() -> int:
    return len({feed_id for ids in _feed_cache.values() for feed_id in ids})


@events.test_start.add_listener
def on_test_start(environment, **kwargs) -> None:
    logger.info("=== 부하 테스트 시작 === (계정: %d개)", ACCOUNT_COUNT)
    user_count = getattr(environment.parsed_options, "num_users", None)
    if user_count and user_count > ACCOUNT_COUNT:
        logger.warning(
            "사용자 수(%d)가 계정 수(%d)보다 많아 계정을 공유합니다.", user_count, ACCOUNT_COUNT
        )


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs) -> None:
    logger.info(
        "=== 부하 테스트 종료 === (캐시된 피드: %d개, 태그 키: %d개)",
        _cached_feed_count(),
        sum(1 for key in _feed_cache if key is not None),
    )


class FeedUser(HttpUser):
    """피드 사용자 기반 클래스.

    on_start(): 계정을 배정받아 로그인하고 Bearer 토큰 저장
    """

    abstract = True

    def on_start(self) -> None:
        self._account = _next_account()
        self._access_token: str | None = None
        self._liked_feeds: set[int] = set()
        self._do_login()

    def _do_login(self) -> None:
        """로그인. 5xx 응답이면 최대 2회 재시도하고, 그래도 실패하면 사용자를 중단합니다."""
        for attempt in range(3):
            with self.client.post(
                "/v1/auth/login",
                json={
                    "email": self._account["email"],
                    "password": self._account["password"],
                },
                timeout=REQUEST_TIMEOUT,
                catch_response=True,
                name="/v1/auth/login",
            ) as resp:
                if resp.status_code == 200:
                    self._access_token = resp.json().get("data", {}).get("access_token")
                    resp.success()
                    return
                if resp.status_code >= 500 and attempt < 2:
                    resp.failure(f"로그인 재시도 ({attempt + 1}/3)")
                    # time.sleep은 워커 전체를 블록하므로 gevent.sleep 사용
                    gevent.sleep(LOGIN_RETRY_WAIT)
                    continue
                resp.failure(f"로그인 실패: {resp.status_code}")
                logger.error(
                    "로그인 실패: %s (HTTP %s: %s)",
                    self._account["email"],
                    resp.status_code,
                    resp.text[:200],
                )
                raise StopUser()

    def _auth_headers(self) -> dict:
        if self._access_token:
            return {"Authorization": f"Bearer {self._access_token}"}
        return {}

    def _handle_auth_failure(self, resp) -> None:
        self._access_token = None
        resp.failure("인증 만료")

    # ── 공통 태스크 ────

    def _browse_feeds(self, path: str = "/v1/feeds/", name: str = "/v1/feeds/ [list]") -> None:
        """피드 목록을 조회하고 feed_id를 캐시의 None 키에 등록합니다."""
        page = random.randint(1, FEED_LIST_MAX_PAGE)
        with self.client.get(
            path,
            params={"page": page, "limit": FEED_LIST_LIMIT},
            headers=self._auth_headers(),
            timeout=REQUEST_TIMEOUT,
            catch_response=True,
            name=name,
        ) as resp:
            if resp.status_code == 200:
                items = resp.json().get("data", {}).get("items", [])
                _remember_feeds(None, [item["feed_id"] for item in items])
                resp.success()
            elif resp.status_code == 401:
                self._handle_auth_failure(resp)
            else:
                resp.failure(f"목록 조회 실패: {resp.status_code}")

    def _browse_by_tag(self, tag: str | None = None) -> None:
        """태그 필터 목록을 조회하고 결과를 해당 태그 키로 캐시합니다.

        캐시가 이미 찬 태그는 더 깊은 페이지를 조회합니다.
        """
        tag = tag or random.choice(FEED_TAGS)
        known = len(_feed_cache.get(tag, ()))
        page = min(known // FEED_LIST_LIMIT + 1, FEED_LIST_MAX_PAGE)
        with self.client.get(
            "/v1/feeds/",
            params={"tag_name": tag, "page": page, "limit": FEED_LIST_LIMIT},
            headers=self._auth_headers(),
            timeout=REQUEST_TIMEOUT,
            catch_response=True,
            name="/v1/feeds/?tag_name [tag]",
        ) as resp:
            if resp.status_code == 200:
                data = resp.json().get("data", {})
                ids = [item["feed_id"] for item in data.get("items", [])]
                _remember_feeds(tag, ids)
                if page > 1 and not ids and not data.get("has_more"):
                    # 마지막 페이지를 지났으면 처음부터 다시 읽도록 비운다
                    _feed_cache[tag].clear()
                resp.success()
            elif resp.status_code == 401:
                self._handle_auth_failure(resp)
            else:
                resp.failure(f"태그 조회 실패: {resp.status_code}")

    def _view_tagged_feed(self) -> None:
        """임의 태그의 캐시된 피드를 상세 조회합니다. 캐시가 비었으면 태그 목록부터 읽습니다."""
        tag = random.choice(FEED_TAGS)
        feed_id = _pick_feed(tag)
        if feed_id is None:
            self._browse_by_tag(tag)
            return
        self._view_feed_detail(feed_id)

    def _view_feed_detail(self, feed_id: int | None = None) -> None:
        feed_id = feed_id or _pick_feed()
        if feed_id is None:
            self._browse_feeds()
            return

        with self.client.get(
            f"/v1/feeds/{feed_id}",
            headers=self._auth_headers(),
            timeout=REQUEST_TIMEOUT,
            catch_response=True,
            name="/v1/feeds/{id} [detail]",
        ) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 404:
                _forget_feed(feed_id)
                resp.success()
            else:
                resp.failure(f"상세 조회 실패: {resp.status_code}")

    def _create_feed(self) -> None:
        if not self._access_token:
            return

        tag_names = random.sample(FEED_TAGS, k=random.randint(0, 3))
        images = random.sample(FEED_IMAGES, k=random.randint(0, len(FEED_IMAGES)))
        payload = {
            "description": random.choice(FEED_DESCRIPTIONS),
            "feed_images": [
                {"image": image, "sort_order": order} for order, image in enumerate(images)
            ],
            "tag_names": tag_names,
        }
        with self.client.post(
            "/v1/feeds/",
            json=payload,
            headers=self._auth_headers(),
            timeout=REQUEST_TIMEOUT,
            catch_response=True,
            name="/v1/feeds/ [create]",
        ) as resp:
            if resp.status_code == 201:
                feed = resp.json().get("data", {}).get("feed", {})
                if feed.get("feed_id"):
                    for key in [None, *tag_names]:
                        _remember_feeds(key, [feed["feed_id"]])
                resp.success()
            elif resp.status_code == 401:
                self._handle_auth_failure(resp)
            else:
                resp.failure(f"피드 작성 실패: {resp.status_code}")

    def _create_comment(self) -> None:
        if not self._access_token:
            return
        feed_id = _pick_feed()
        if feed_id is None:
            return

        with self.client.post(
            f"/v1/feeds/{feed_id}/comments",
            json={"content": random.choice(COMMENT_CONTENTS)},
            headers=self._auth_headers(),
            timeout=REQUEST_TIMEOUT,
            catch_response=True,
            name="/v1/feeds/{id}/comments [create]",
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 404:
                _forget_feed(feed_id)
                resp.success()
            elif resp.status_code == 401:
                self._handle_auth_failure(resp)
            else:
                resp.failure(f"댓글 작성 실패: {resp.status_code}")

    def _toggle_like(self) -> None:
        """좋아요/취소를 번갈아 실행합니다. 409/404는 로컬 상태만 맞춥니다."""
        if not self._access_token:
            return
        feed_id = _pick_feed()
        if feed_id is None:
            return

        liked = feed_id in self._liked_feeds
        method = self.client.delete if liked else self.client.post
        with method(
            f"/v1/feeds/{feed_id}/likes",
            headers=self._auth_headers(),
            timeout=REQUEST_TIMEOUT,
            catch_response=True,
            name="/v1/feeds/{id}/likes [unlike]" if liked else "/v1/feeds/{id}/likes [like]",
        ) as resp:
            if resp.status_code in (200, 201, 409):
                if liked:
                    self._liked_feeds.discard(feed_id)
                else:
                    self._liked_feeds.add(feed_id)
                resp.success()
            elif resp.status_code == 404:
                self._liked_feeds.discard(feed_id)
                resp.success()
            elif resp.status_code == 401:
                self._handle_auth_failure(resp)
            else:
                resp.failure(f"좋아요 토글 실패: {resp.status_code}")

    def _bookmark(self) -> None:
        if not self._access_token:
            return
        feed_id = _pick_feed()
        if feed_id is None:
            return

        with self.client.post(
            f"/v1/feeds/{feed_id}/bookmarks",
            headers=self._auth_headers(),
            timeout=REQUEST_TIMEOUT,
            catch_response=True,
            name="/v1/feeds/{id}/bookmarks [create]",
        ) as resp:
            if resp.status_code in (201, 404, 409):
                resp.success()
            elif resp.status_code == 401:
                self._handle_auth_failure(resp)
            else:
                resp.failure(f"북마크 실패: {resp.status_code}")


class ReaderUser(FeedUser):
    """읽기 위주 사용자. 전체/태그/팔로잉 피드를 반복 조회합니다."""

    weight = 6
    wait_time = between(*READER_WAIT)

    @task(5)
    def browse_feeds(self) -> None:
        self._browse_feeds()

    @task(2)
    def browse_by_tag(self) -> None:
        self._browse_by_tag()

    @task(2)
    def browse_following(self) -> None:
        self._browse_feeds("/v1/feeds/following", "/v1/feeds/following [list]")

    @task(2)
    def view_tagged_feed(self) -> None:
        self._view_tagged_feed()

    @task(3)
    def view_feed_detail(self) -> None:
        self._view_feed_detail()


class WriterUser(FeedUser):
    """피드를 자주 작성하는 사용자."""

    weight = 2
    wait_time = between(*WRITER_WAIT)

    @task(2)
    def browse_feeds(self) -> None:
        self._browse_feeds()

    @task(3)
    def create_feed(self) -> None:
        self._create_feed()

    @task(1)
    def create_comment(self) -> None:
        self._create_comment()


class ActiveUser(FeedUser):
    """좋아요, 댓글, 북마크 위주의 참여 사용자."""

    weight = 2
    wait_time = between(*ACTIVE_WAIT)

    @task(2)
    def browse_feeds(self) -> None:
        self._browse_feeds()

    @task(1)
    def view_feed_detail(self) -> None:
        self._view_feed_detail()

    @task(3)
    def toggle_like(self) -> None:
        self._toggle_like()

    @task(2)
    def create_comment(self) -> None:
        self._create_comment()

    @task(1)
    def bookmark(self) -> None:
        self._bookmark()
