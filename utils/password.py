"""password: 비밀번호 해싱 및 검증 유틸리티 모듈.

bcrypt 연산은 CPU를 오래 점유하므로, 요청 처리 중에는 이벤트 루프를 막지 않도록
asyncio.to_thread로 감싼 비동기 버전을 사용합니다.
"""

import asyncio

import bcrypt


# 존재하지 않는 사용자 로그인 시에도 같은 비용의 검증을 수행하기 위한 해시
_DUMMY_HASH = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt()).decode("utf-8")


def hash_password(password: str) -> str:
    """비밀번호를 bcrypt로 해싱합니다.

    Args:
        password: 평문 비밀번호.

    Returns:
        해싱된 비밀번호 문자열.
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """평문 비밀번호가 해시와 일치하는지 확인합니다.

    hashed_password가 None이면 더미 해시와 비교하여 응답 시간을 맞추고 False를 반환합니다.
    """
    target = hashed_password or _DUMMY_HASH
    try:
        matched = bcrypt.checkpw(plain_password.encode("utf-8"), target.encode("utf-8"))
    except ValueError:
        # 저장된 해시 형식이 bcrypt가 아닌 경우
        return False
    return matched and hashed_password is not None


async def hash_password_async(password: str) -> str:
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str | None) -> bool:
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)
