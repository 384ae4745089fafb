"""database.connection: MySQL 데이터베이스 연결 관리 모듈.

aiomysql을 사용하여 비동기 MySQL 연결 풀을 관리합니다.
모든 리포지토리 함수는 이 모듈이 제공하는 커서를 첫 번째 인자로 전달받습니다.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import aiomysql
from pymysql.err import MySQLError

from core.config import settings
from utils.exceptions import TransactionError


logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

# 전역 연결 풀
_pool: aiomysql.Pool | None = None


async def init_db() -> None:
    """데이터베이스 연결 풀을 초기화합니다.

    애플리케이션 시작 시 호출되어야 합니다.
    """
    global _pool
    try:
        _pool = await aiomysql.create_pool(
            host=settings.DB_HOST,
            port=settings.DB_PORT,
            user=settings.DB_USER,
            password=settings.DB_PASSWORD,
            db=settings.DB_NAME,
            charset="utf8mb4",
            autocommit=True,
            minsize=settings.DB_POOL_MINSIZE,
            maxsize=settings.DB_POOL_MAXSIZE,
            connect_timeout=5,
        )
        logger.info(
            "MySQL 연결 풀 초기화 완료: %s:%s/%s",
            settings.DB_HOST,
            settings.DB_PORT,
            settings.DB_NAME,
        )
    except Exception:
        logger.exception("MySQL 연결 풀 초기화 실패")
        raise


async def close_db() -> None:
    """데이터베이스 연결 풀을 종료합니다.

    애플리케이션 종료 시 호출되어야 합니다.
    """
    global _pool
    if _pool:
        _pool.close()
        await _pool.wait_closed()
        _pool = None
        logger.info("MySQL 연결 풀 종료")


def get_pool() -> aiomysql.Pool:
    """현재 연결 풀을 반환합니다.

    Returns:
        연결 풀 객체.

    Raises:
        RuntimeError: 연결 풀이 초기화되지 않은 경우.
    """
    if _pool is None:
        raise RuntimeError("데이터베이스 연결 풀이 초기화되지 않았습니다.")
    return _pool


@asynccontextmanager
async def get_connection() -> AsyncGenerator[aiomysql.Connection, None]:
    """데이터베이스 연결을 컨텍스트 매니저로 제공합니다.

    사용 예시:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                feeds, total = await feed_models.find_all(cur, 0, 20)

    Yields:
        MySQL 연결 객체 (autocommit).
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def transactional() -> AsyncGenerator[aiomysql.Cursor, None]:
    """트랜잭션을 관리하는 컨텍스트 매니저.

    범위 내에서 예외 발생 시 롤백, 정상 종료 시 커밋합니다.
    하나의 커서를 여러 리포지토리 함수에 전달하여 다단계 쓰기를 원자적으로 처리합니다.

    DB 드라이버 오류는 TransactionError로 감싸서 다시 발생시키고,
    도메인 예외(NotFoundError 등)는 롤백 후 그대로 전파합니다.

    Yields:
        MySQL 커서 객체.

    Raises:
        TransactionError: 트랜잭션 중 DB 오류가 발생한 경우.
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        try:
            await conn.begin()
            async with conn.cursor() as cur:
                yield cur
            await conn.commit()
        except MySQLError as exc:
            await conn.rollback()
            logger.warning("트랜잭션 롤백 (DB 오류): %s", exc)
            raise TransactionError() from exc
        except BaseException:
            await conn.rollback()
            raise


async def apply_schema(schema_path: Path = SCHEMA_PATH) -> None:
    """schema.sql의 CREATE TABLE 문을 순서대로 실행합니다.

    모든 문이 IF NOT EXISTS이므로 여러 번 호출해도 안전합니다.

    Args:
        schema_path: 스키마 파일 경로.
    """
    sql = schema_path.read_text(encoding="utf-8")
    statements = [
        stmt.strip()
        for stmt in sql.split(";")
        if stmt.strip() and not all(
            line.strip().startswith("--") or not line.strip()
            for line in stmt.splitlines()
        )
    ]
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            for stmt in statements:
                await cur.execute(stmt)


async def test_connection() -> bool:
    """데이터베이스 연결을 테스트합니다.

    Returns:
        연결 성공 여부.
    """
    try:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT 1")
                await cur.fetchone()
                return True
    except Exception:
        logger.exception("데이터베이스 연결 테스트 실패")
        return False
