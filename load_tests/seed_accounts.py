"""seed_accounts.py: 부하 테스트 계정을 회원가입 API로 생성합니다.

사용법:
    python -m load_tests.seed_accounts --host http://127.0.0.1:8000

이미 가입된 계정(409)은 건너뛰므로 여러 번 실행해도 안전합니다.
"""

import argparse
import sys
import time

import requests

from load_tests.config import (
    ACCOUNT_COUNT,
    ACCOUNT_EMAIL_PATTERN,
    ACCOUNT_PASSWORD,
    ACCOUNT_START_INDEX,
    ACCOUNT_USERNAME_PATTERN,
)


def seed_via_api(host: str) -> int:
    """POST /v1/users/로 계정을 생성하고 실패한 계정 수를 반환합니다."""
    base_url = host.rstrip("/")
    session = requests.Session()
    created = skipped = failed = 0
    start_time = time.time()

    print("=== 부하 테스트 계정 시딩 ===")
    print(f"대상: {base_url}, 계정: {ACCOUNT_COUNT}개, 비밀번호: {ACCOUNT_PASSWORD}")

    for i in range(ACCOUNT_START_INDEX, ACCOUNT_START_INDEX + ACCOUNT_COUNT):
        payload = {
            "email": ACCOUNT_EMAIL_PATTERN.format(i),
            "username": ACCOUNT_USERNAME_PATTERN.format(i),
            "password": ACCOUNT_PASSWORD,
            "nickname": f"부하{i:05d}",
        }
        try:
            resp = session.post(f"{base_url}/v1/users/", json=payload, timeout=10)
        except requests.RequestException as exc:
            print(f"  [오류] {payload['email']}: {exc}")
            failed += 1
            continue

        if resp.status_code == 201:
            created += 1
        elif resp.status_code == 409:
            skipped += 1
        else:
            print(f"  [실패] {payload['email']}: HTTP {resp.status_code} {resp.text[:200]}")
            failed += 1

    elapsed = time.time() - start_time
    print(f"완료: 생성 {created}, 건너뜀 {skipped}, 실패 {failed} ({elapsed:.1f}초)")
    return failed


def main() -> None:
    parser = argparse.ArgumentParser(description="부하 테스트 계정 시딩")
    parser.add_argument("--host", required=True, help="API 서버 주소")
    args = parser.parse_args()
    sys.exit(1 if seed_via_api(args.host) else 0)


if __name__ == "__main__":
    main()
