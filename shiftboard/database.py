"""데이터베이스 엔진 및 세션 설정 모듈.

Async SQLAlchemy engine, session factory, declarative base, and the
request-scoped session dependency.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from shiftboard.config import settings


def _connect_args(url: str) -> dict[str, Any]:
    """드라이버별 연결 인자 (Driver-specific connect arguments).

    asyncpg gets a per-statement timeout; a statement that exceeds it raises
    TimeoutError, which the service layer reports as StoreUnavailableError.
    """
    if make_url(url).get_driver_name() == "asyncpg":
        return {"command_timeout": settings.DATABASE_COMMAND_TIMEOUT_SECONDS}
    return {}


# 비동기 엔진 — 지연 연결이므로 import 시점에 DB 접속 없음 (Lazy: no connection at import)
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

# expire_on_commit=False: 커밋 후에도 응답 구성에 객체 속성 사용 (Attributes stay usable after commit)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """모든 ORM 모델의 선언적 베이스 (Declarative base for all ORM models)."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션을 제공합니다.

    Routes commit explicitly; anything left uncommitted when the request
    fails is rolled back before the session closes.

    Yields:
        AsyncSession: 요청 세션 (Request-scoped session)
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
