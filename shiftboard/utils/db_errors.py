"""데이터베이스 오류 분류 헬퍼.

Database error helpers.
Classifies IntegrityError into unique / foreign-key violations and maps
transient driver failures to StoreUnavailableError.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError

from shiftboard.utils.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE 코드 — unique_violation / foreign_key_violation
_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def _sqlstate(error: IntegrityError) -> str | None:
    original = getattr(error, "orig", None)
    return getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)


def is_unique_violation(error: IntegrityError) -> bool:
    """IntegrityError가 유니크 제약 위반이면 True (Unique-constraint conflict)."""
    if _sqlstate(error) == _UNIQUE_VIOLATION:
        return True
    message = str(getattr(error, "orig", None) or error).lower()
    return "duplicate key" in message or "unique constraint" in message


def is_foreign_key_violation(error: IntegrityError) -> bool:
    """IntegrityError가 외래 키 위반이면 True (Referenced row is missing)."""
    if _sqlstate(error) == _FOREIGN_KEY_VIOLATION:
        return True
    message = str(getattr(error, "orig", None) or error).lower()
    return "foreign key" in message


def is_transient_store_error(error: BaseException) -> bool:
    """연결 단절/타임아웃 등 재시도 가능한 저장소 오류인지 확인합니다."""
    if isinstance(error, (OperationalError, InterfaceError)):
        return True
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True
    return isinstance(error, (ConnectionError, TimeoutError))


@asynccontextmanager
async def translate_store_errors(operation: str) -> AsyncIterator[None]:
    """저장소 장애를 StoreUnavailableError(503)로 변환합니다.

    Wrap a unit of store work so that transient failures surface as
    StoreUnavailableError instead of a generic 500. Integrity errors and
    HTTP errors pass through untouched.

    Args:
        operation: 로그에 남길 작업 이름 (Operation name for the log record)
    """
    try:
        yield
    except IntegrityError:
        raise
    except Exception as exc:
        if not is_transient_store_error(exc):
            raise
        logger.warning(
            "Store unavailable during %s",
            operation,
            exc_info=exc,
        )
        raise StoreUnavailableError() from exc
