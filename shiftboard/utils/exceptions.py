"""HTTP 오류 응답 예외 모듈.

HTTP error exceptions raised by services and dependencies. FastAPI turns
each one into a JSON ``{"detail": ...}`` response with the status below.

    NotFoundError           404  프로필/알림/공지 없음 (profile, notification or announcement missing)
    UnauthorizedError       401  토큰 없음·무효·만료 (missing, invalid or expired token)
    ForbiddenError          403  관리자 전용 (admin-only route)
    StoreUnavailableError   503  저장소 일시 장애 (database unreachable, retry later)
"""

from fastapi import HTTPException, status

# 재시도 권장 간격(초) — Retry-After hint sent with 503 responses
STORE_RETRY_AFTER_SECONDS: int = 5


class NotFoundError(HTTPException):
    """참조가 존재하지 않음 (404).

    The feed fails closed on this: an unknown user gets a 404, never an empty list.
    """

    def __init__(self, detail: str = "리소스를 찾을 수 없습니다 (Resource not found)") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UnauthorizedError(HTTPException):
    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class StoreUnavailableError(HTTPException):
    """데이터베이스 일시 장애 (503).

    Raised for the whole operation when any read or write cannot reach the
    store. Clients keep their current state (an item stays unread) and retry
    after ``Retry-After`` seconds.
    """

    def __init__(self, detail: str = "Data store temporarily unavailable, please retry") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            headers={"Retry-After": str(STORE_RETRY_AFTER_SECONDS)},
        )
