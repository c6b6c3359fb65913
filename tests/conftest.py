"""테스트 인프라 — 임시 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Per-test SQLite (aiosqlite) database, session, and
httpx client fixtures. Foreign keys are enforced and SAVEPOINTs work, so
cascades and constraint conflicts behave as they do on PostgreSQL.
"""

import os

# 앱 임포트 전에 설정 — settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AXIOM_API_TOKEN", "")
os.environ.setdefault("AXIOM_DATASET", "")
os.environ.setdefault("REDIS_URL", "")

import fnmatch  # noqa: E402
from collections.abc import AsyncGenerator, AsyncIterator, Iterator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from uuid import UUID  # noqa: E402

import jwt  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event, func, select  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shiftboard.config import settings  # noqa: E402
from shiftboard.database import Base, get_db  # noqa: E402
from shiftboard.main import app  # noqa: E402
from shiftboard.models import *  # noqa: F401,F403,E402 — register all models with metadata
from shiftboard.repositories.notification_read_repository import READ_TABLES  # noqa: E402
from shiftboard.services.read_state_cache import read_state_cache  # noqa: E402
from shiftboard.utils.notification_keys import NotificationType  # noqa: E402

# 기준 시각 — 직원 계정 생성 시각 (Employee account creation time used by eligibility tests)
T0: datetime = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


def _enable_sqlite_features(engine: AsyncEngine) -> None:
    """외래 키 강제 + 명시적 BEGIN (SAVEPOINT 지원)."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # aiosqlite 자체 BEGIN 비활성화 — let SQLAlchemy emit BEGIN so SAVEPOINT works
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트마다 새 SQLite 파일 DB를 만들고 스키마를 생성합니다."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    _enable_sqlite_features(eng)

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


class InMemoryRedis:
    """읽음 캐시 테스트용 Redis 대역 (get/setex/delete/scan_iter only)."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, name: str) -> str | None:
        return self.data.get(name)

    async def setex(self, name: str, time: int, value: str) -> bool:
        self.data[name] = value
        self.ttls[name] = time
        return True

    async def delete(self, *names: str) -> int:
        removed = 0
        for name in names:
            if self.data.pop(name, None) is not None:
                self.ttls.pop(name, None)
                removed += 1
        return removed

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key


@pytest.fixture(autouse=True)
def read_state_redis() -> Iterator[InMemoryRedis]:
    """테스트마다 빈 Redis 대역으로 읽음 캐시를 교체합니다."""
    fake = InMemoryRedis()
    original_client, original_ttl = read_state_cache.client, read_state_cache.ttl_seconds
    read_state_cache.client = fake
    read_state_cache.ttl_seconds = 30
    yield fake
    read_state_cache.client = original_client
    read_state_cache.ttl_seconds = original_ttl


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def admin_user(db: AsyncSession):
    """관리자 프로필을 생성합니다 (계정 생성: T0 - 30일)."""
    from shiftboard.models.user import Profile
    user = Profile(
        name="Test Admin",
        email="admin@test.com",
        role="admin",
        created_at=T0 - timedelta(days=30),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def employee(db: AsyncSession):
    """직원 프로필을 생성합니다 (계정 생성: T0)."""
    from shiftboard.models.user import Profile
    user = Profile(
        name="Test Employee",
        email="employee@test.com",
        role="employee",
        created_at=T0,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def routine(db: AsyncSession):
    """시간대와 루틴을 생성합니다 ("Opening" / "Wipe counters")."""
    from shiftboard.models.work import Routine, Shift
    shift = Shift(name="Opening", order_index=0, created_at=T0 - timedelta(days=60))
    db.add(shift)
    await db.flush()
    r = Routine(
        shift_id=shift.id,
        title="Wipe counters",
        description="All front counters before doors open",
        priority=2,
        created_at=T0 - timedelta(days=60),
    )
    db.add(r)
    await db.flush()
    await db.refresh(r)
    return r


async def add_announcement(db: AsyncSession, author, created_at: datetime, title: str = "Notice", **kwargs):
    """지정 시각의 공지사항을 생성합니다."""
    from shiftboard.models.communication import Announcement
    a = Announcement(
        title=title,
        message=kwargs.pop("message", f"{title} body"),
        created_by=author.id,
        created_at=created_at,
        **kwargs,
    )
    db.add(a)
    await db.flush()
    await db.refresh(a)
    return a


async def add_routine_notification(db: AsyncSession, created_at: datetime, routine=None, **kwargs):
    """지정 시각의 루틴 알림을 생성합니다."""
    from shiftboard.models.notification import RoutineNotification
    n = RoutineNotification(
        message=kwargs.pop("message", "Routine changed"),
        routine_id=routine.id if routine is not None else None,
        shift_id=routine.shift_id if routine is not None else None,
        created_at=created_at,
        **kwargs,
    )
    db.add(n)
    await db.flush()
    await db.refresh(n)
    return n


async def count_reads(db: AsyncSession, notification_type: NotificationType, user_id: UUID, notification_id: UUID) -> int:
    """(사용자, 알림) 쌍의 읽음 기록 수 (0 or 1 by the unique constraint)."""
    table = READ_TABLES[notification_type]
    query = select(func.count()).select_from(table.read_model).where(
        table.read_model.user_id == user_id,
        table.parent_fk == notification_id,
    )
    return (await db.execute(query)).scalar() or 0


def make_token(user, expires_in: timedelta = timedelta(minutes=30), token_type: str = "access") -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다 (identity provider와 같은 형태)."""
    payload = {
        "sub": str(user.id),
        "role": user.role,
        "exp": datetime.now(timezone.utc) + expires_in,
        "type": token_type,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def employee_token(employee) -> str:
    return make_token(employee)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
