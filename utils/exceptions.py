"""exceptions: 도메인 예외 및 API 에러 응답 생성 헬퍼 모듈.

모델/서비스 계층은 HTTP를 모르는 도메인 예외를 발생시키고,
전역 핸들러(middleware.exception_handler)가 이를 표준 에러 응답으로 변환합니다.
"""

from fastapi import HTTPException, status


class DomainError(Exception):
    """도메인 계층 예외의 기반 클래스.

    Attributes:
        status_code: 변환될 HTTP 상태 코드.
        error: 응답 detail의 에러 코드.
        message: 사용자에게 표시할 메시지 (선택).
    """

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: str, message: str | None = None) -> None:
        super().__init__(message or error)
        self.error = error
        self.message = message


class NotFoundError(DomainError):
    """존재하지 않는 리소스를 참조한 경우."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, message: str | None = None) -> None:
        super().__init__(f"{resource}_not_found", message)
        self.resource = resource


class ConflictError(DomainError):
    """중복 좋아요/북마크/팔로우 등 유일성 제약을 위반한 경우."""

    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(DomainError):
    """리소스 소유자가 아닌 사용자가 변경을 시도한 경우."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, action: str, message: str | None = None) -> None:
        super().__init__(f"not_authorized_to_{action}", message)


class BadRequestError(DomainError):
    """요청 자체가 의미상 잘못된 경우 (예: 자기 자신 팔로우)."""

    status_code = status.HTTP_400_BAD_REQUEST


class TransactionError(DomainError):
    """트랜잭션 중 DB 오류가 발생해 전체가 롤백된 경우."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__("transaction_failed", message)


def unauthorized_error(error_code: str, timestamp: str) -> HTTPException:
    """인증 실패에 대한 401 에러를 생성합니다.

    Args:
        error_code: 에러 코드 (예: 'unauthorized', 'token_invalid').
        timestamp: 요청 타임스탬프.

    Returns:
        HTTPException: 401 Unauthorized 예외.
    """
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": error_code,
            "timestamp": timestamp,
        },
    )
