"""읽음 추적 서비스 테스트.

Read tracker tests — idempotent mark-read, conflict races, concurrent deletes,
mark-all-read, and read-state cache invalidation.
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shiftboard.repositories.notification_read_repository import notification_read_repository
from shiftboard.services.notification_feed_service import notification_feed_service
from shiftboard.services.read_state_cache import read_state_cache
from shiftboard.services.read_tracker_service import read_tracker_service
from shiftboard.utils.exceptions import NotFoundError, StoreUnavailableError
from shiftboard.utils.notification_keys import NotificationType
from tests.conftest import T0, add_announcement, add_routine_notification, count_reads


class TestMarkRead:
    """단건 읽음 처리."""

    async def test_mark_read_twice_keeps_one_row(self, db: AsyncSession, admin_user, employee):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))

        first = await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)
        second = await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)

        assert first.created is True
        assert second.created is False
        assert second.read_at == first.read_at
        count = await count_reads(db, NotificationType.ANNOUNCEMENT, employee.id, a.id)
        assert count == 1

    async def test_mark_routine_notification_read(self, db: AsyncSession, employee, routine):
        n = await add_routine_notification(db, T0 + timedelta(minutes=1), routine)

        receipt = await read_tracker_service.mark_read(db, employee.id, "routine", n.id)

        assert str(receipt.key) == f"routine:{n.id}"
        assert receipt.read_at is not None
        assert await read_tracker_service.is_read(db, employee.id, NotificationType.ROUTINE, n.id)

    async def test_read_at_is_assigned_by_store(self, db: AsyncSession, admin_user, employee):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))

        receipt = await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)
        row = await notification_read_repository.get_read(db, NotificationType.ANNOUNCEMENT, employee.id, a.id)

        assert row is not None
        assert receipt.read_at == row.read_at

    async def test_unknown_notification_is_not_found(self, db: AsyncSession, employee):
        with pytest.raises(NotFoundError):
            await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, uuid.uuid4())

    async def test_wrong_type_is_not_found(self, db: AsyncSession, admin_user, employee):
        """공지 ID를 routine 유형으로 지정하면 존재하지 않는 알림입니다."""
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))

        with pytest.raises(NotFoundError):
            await read_tracker_service.mark_read(db, employee.id, NotificationType.ROUTINE, a.id)

    async def test_unknown_user_is_not_found(self, db: AsyncSession, admin_user):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))

        with pytest.raises(NotFoundError):
            await read_tracker_service.mark_read(db, uuid.uuid4(), NotificationType.ANNOUNCEMENT, a.id)

    async def test_lost_insert_race_is_a_no_op(self, db: AsyncSession, admin_user, employee, monkeypatch):
        """선행 조회가 놓친 기존 기록 — unique 위반을 성공으로 처리."""
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))
        first = await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)

        real_get_read = notification_read_repository.get_read
        calls = {"n": 0}

        async def _stale_then_real(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return await real_get_read(*args, **kwargs)

        monkeypatch.setattr(notification_read_repository, "get_read", _stale_then_real)

        second = await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)

        assert second.created is False
        assert second.read_at == first.read_at
        monkeypatch.undo()
        count = await count_reads(db, NotificationType.ANNOUNCEMENT, employee.id, a.id)
        assert count == 1

    async def test_concurrent_delete_is_a_no_op(self, db: AsyncSession, employee, monkeypatch):
        """존재 확인 직후 알림이 삭제된 경우 — FK 위반을 무시."""
        async def _exists(*args, **kwargs):
            return True

        monkeypatch.setattr(notification_read_repository, "notification_exists", _exists)
        gone = uuid.uuid4()

        receipt = await read_tracker_service.mark_read(db, employee.id, NotificationType.ROUTINE, gone)

        assert receipt.created is False
        assert receipt.read_at is None
        monkeypatch.undo()
        assert await count_reads(db, NotificationType.ROUTINE, employee.id, gone) == 0

    async def test_store_failure_leaves_item_unread(self, db: AsyncSession, admin_user, employee, monkeypatch):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))

        async def _unavailable(*args, **kwargs):
            raise OperationalError("INSERT INTO announcements_read", {}, ConnectionResetError("reset"))

        monkeypatch.setattr(notification_read_repository, "insert_read", _unavailable)

        with pytest.raises(StoreUnavailableError):
            await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)

        monkeypatch.undo()
        feed = await notification_feed_service.list_notifications(db, employee.id)
        assert [item.id for item in feed.unread] == [a.id]


class TestReadStateInvalidation:
    """캐시 무효화 — 사용자는 자신의 읽음 처리를 즉시 봅니다."""

    async def test_commit_invalidates_cached_read_set(self, db: AsyncSession, admin_user, employee, read_state_redis):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))
        await notification_feed_service.list_notifications(db, employee.id)
        assert await read_state_cache.get(employee.id) is not None

        await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)
        await read_tracker_service.commit(db, employee.id)

        assert read_state_redis.data == {}
        feed = await notification_feed_service.list_notifications(db, employee.id)
        assert [item.id for item in feed.read] == [a.id]

    async def test_load_during_uncommitted_write_is_not_left_stale(
        self,
        db: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
        admin_user,
        employee,
    ):
        """커밋 전 다른 요청이 캐시를 채워도 커밋 후에는 읽음으로 보임."""
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))
        await db.commit()

        async with session_factory() as writer:
            await read_tracker_service.mark_read(writer, employee.id, NotificationType.ANNOUNCEMENT, a.id)

            # 동시 요청 — sees the committed state only and caches it
            async with session_factory() as reader:
                feed = await notification_feed_service.list_notifications(reader, employee.id)
                assert [item.id for item in feed.unread] == [a.id]
            assert await read_state_cache.get(employee.id) is not None

            await read_tracker_service.commit(writer, employee.id)

        async with session_factory() as fresh:
            feed = await notification_feed_service.list_notifications(fresh, employee.id)
        assert feed.unread == []
        assert [item.id for item in feed.read] == [a.id]

    async def test_is_read_uses_cached_set(self, db: AsyncSession, admin_user, employee, monkeypatch):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))
        await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)
        assert await read_tracker_service.is_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)

        async def _fail(*args, **kwargs):
            raise AssertionError("read set should come from the cache")

        monkeypatch.setattr(notification_read_repository, "get_read_rows", _fail)

        assert await read_tracker_service.is_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)
        assert not await read_tracker_service.is_read(db, employee.id, NotificationType.ROUTINE, a.id)


class TestMarkAllRead:
    """전체 읽음 처리."""

    async def test_marks_every_eligible_item(self, db: AsyncSession, admin_user, employee, routine):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))
        await add_announcement(db, admin_user, T0 + timedelta(minutes=2))
        await add_routine_notification(db, T0 + timedelta(minutes=3), routine)
        old = await add_announcement(db, admin_user, T0 - timedelta(minutes=1))
        await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)

        marked = await read_tracker_service.mark_all_read(db, employee.id)
        await read_tracker_service.commit(db, employee.id)

        assert marked == 2
        feed = await notification_feed_service.list_notifications(db, employee.id)
        assert feed.unread == []
        assert len(feed.read) == 3
        # 대상이 아닌 공지는 기록하지 않음 — ineligible items are left alone
        assert await count_reads(db, NotificationType.ANNOUNCEMENT, employee.id, old.id) == 0

    async def test_is_idempotent(self, db: AsyncSession, admin_user, employee):
        await add_announcement(db, admin_user, T0 + timedelta(minutes=1))

        assert await read_tracker_service.mark_all_read(db, employee.id) == 1
        assert await read_tracker_service.mark_all_read(db, employee.id) == 0

    async def test_unknown_user_is_not_found(self, db: AsyncSession):
        with pytest.raises(NotFoundError):
            await read_tracker_service.mark_all_read(db, uuid.uuid4())
