import logging
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _resolve_ssm_secrets() -> None:
    """Lambda 환경에서 SSM Parameter Store의 SecureString 값을 환경 변수로 설정합니다.

    SSM 파라미터 이름은 Lambda 환경변수 DB_PASSWORD_SSM_NAME, SECRET_KEY_SSM_NAME에 지정.
    pydantic-settings가 환경변수에서 값을 읽기 전에 호출해야 합니다.
    """
    if os.getenv("AWS_LAMBDA_EXEC") != "true":
        return

    ssm_mappings = {
        "DB_PASSWORD": os.getenv("DB_PASSWORD_SSM_NAME"),
        "SECRET_KEY": os.getenv("SECRET_KEY_SSM_NAME"),
    }

    params_to_fetch = {k: v for k, v in ssm_mappings.items() if v}
    if not params_to_fetch:
        return

    import boto3  # Lambda 런타임에 기본 포함

    ssm = boto3.client("ssm")

    try:
        response = ssm.get_parameters(
            Names=list(params_to_fetch.values()),
            WithDecryption=True,
        )
    except Exception:
        logger.exception("SSM 배치 파라미터 조회 실패")
        raise

    if response.get("InvalidParameters"):
        raise RuntimeError(
            f"SSM 파라미터 조회 실패: {response['InvalidParameters']}"
        )

    # 모든 파라미터 조회 성공 후 환경변수 일괄 설정
    name_to_env = {v: k for k, v in params_to_fetch.items()}
    for param in response["Parameters"]:
        os.environ[name_to_env[param["Name"]]] = param["Value"]


_resolve_ssm_secrets()


class Settings(BaseSettings):
    """애플리케이션 설정을 관리하는 클래스.

    환경 변수에서 설정을 로드하며, 기본값을 제공합니다.

    Attributes:
        SECRET_KEY: JWT 토큰 서명 키.
        ALLOWED_ORIGINS: CORS 허용 오리진 목록.
        DB_HOST: MySQL 호스트 주소.
        DB_PORT: MySQL 포트 번호.
        DB_USER: MySQL 사용자명.
        DB_PASSWORD: MySQL 비밀번호.
        DB_NAME: MySQL 데이터베이스 이름.
        REQUEST_TIMEOUT_SECONDS: 요청 하나에 허용되는 최대 처리 시간(초).
        DEFAULT_PAGE_LIMIT: 페이지 크기 기본값.
        MAX_PAGE_LIMIT: 페이지 크기 최대값.
    """

    SECRET_KEY: str
    ALLOWED_ORIGINS: list[str] = [
        "http://127.0.0.1:8080",
        "http://localhost:8080",
    ]

    DB_HOST: str
    DB_PORT: int = 3306
    DB_USER: str
    DB_PASSWORD: str
    DB_NAME: str
    DB_POOL_MINSIZE: int = 1
    DB_POOL_MAXSIZE: int = 10

    JWT_ACCESS_EXPIRE_MINUTES: int = 30

    # 프로덕션에서는 False로 설정하여 상세 에러 메시지 노출 방지
    DEBUG: bool = True
    ERROR_LOG_FILE: str = "server_error.log"

    REQUEST_TIMEOUT_SECONDS: float = 10.0

    DEFAULT_PAGE_LIMIT: int = 20
    MAX_PAGE_LIMIT: int = 100

    TRUSTED_PROXIES: set[str] = set()  # 프로덕션에서 nginx 등의 프록시 IP 설정 필요

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()  # type: ignore[call-arg]  # pydantic-settings는 .env에서 환경 변수를 불러옴.
