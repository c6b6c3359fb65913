"""읽음 추적 서비스 — 사용자별 알림 읽음 기록.

Read Tracker Service — Records that a user has read a notification,
exactly once per (user, type, notification).

mark_read is idempotent: a second call for the same pair finds the
existing row (or loses the insert race to the unique constraint) and
returns the existing receipt instead of failing.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.repositories.notification_read_repository import notification_read_repository
from shiftboard.repositories.profile_repository import profile_repository
from shiftboard.services.notification_feed_service import (
    NotificationFeedService,
    notification_feed_service,
)
from shiftboard.services.read_state_cache import ReadStateCache, read_state_cache
from shiftboard.utils.db_errors import (
    is_foreign_key_violation,
    is_unique_violation,
    translate_store_errors,
)
from shiftboard.utils.exceptions import NotFoundError
from shiftboard.utils.notification_keys import NotificationKey, NotificationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReadReceipt:
    """읽음 처리 결과.

    Attributes:
        key: 복합 식별자 (Composite notification key)
        read_at: 읽은 시각, 동시 삭제로 기록이 없으면 None (Server read time, None when moot)
        created: 이번 호출로 새 기록이 생성되었는지 (Whether this call inserted the row)
    """

    key: NotificationKey
    read_at: datetime | None
    created: bool


class ReadTrackerService:
    """읽음 추적 서비스."""

    def __init__(self, feed_service: NotificationFeedService, cache: ReadStateCache) -> None:
        self.feed_service = feed_service
        self.cache = cache

    async def _insert_once(
        self,
        db: AsyncSession,
        user_id: UUID,
        key: NotificationKey,
    ) -> ReadReceipt:
        existing = await notification_read_repository.get_read(db, key.type, user_id, key.id)
        if existing is not None:
            return ReadReceipt(key, existing.read_at, created=False)

        try:
            row = await notification_read_repository.insert_read(db, key.type, user_id, key.id)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                # 동시 요청이 먼저 기록함 — concurrent request won the insert
                logger.info("Duplicate read ignored for %s by user %s", key, user_id)
                existing = await notification_read_repository.get_read(db, key.type, user_id, key.id)
                read_at = existing.read_at if existing is not None else None
                return ReadReceipt(key, read_at, created=False)
            if is_foreign_key_violation(exc):
                # 알림이 동시에 삭제됨, 읽음 기록은 어차피 CASCADE로 제거됨
                logger.info("Read for deleted notification %s ignored (user %s)", key, user_id)
                return ReadReceipt(key, None, created=False)
            raise
        return ReadReceipt(key, row.read_at, created=True)

    async def mark_read(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: NotificationType,
        notification_id: UUID,
    ) -> ReadReceipt:
        """알림을 읽음 처리합니다 (멱등).

        Record that the user has read a notification. Calling it again for the
        same pair neither creates a second row nor fails.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            notification_type: 알림 유형 (announcement | routine)
            notification_id: 알림 UUID (Notification UUID)

        Returns:
            ReadReceipt: 읽음 처리 결과 (Receipt with server-assigned read_at)

        Raises:
            NotFoundError: 사용자 또는 알림이 없을 때 (Unknown user or notification)
            StoreUnavailableError: 저장소 장애 시 (Store unreachable; item stays unread)
        """
        key = NotificationKey(NotificationType(notification_type), notification_id)
        async with translate_store_errors("mark_read"):
            if await profile_repository.get_by_id(db, user_id) is None:
                raise NotFoundError("사용자를 찾을 수 없습니다 (User not found)")
            if not await notification_read_repository.notification_exists(db, key.type, key.id):
                raise NotFoundError("알림을 찾을 수 없습니다 (Notification not found)")
            return await self._insert_once(db, user_id, key)

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """사용자가 볼 수 있는 모든 안읽은 알림을 읽음 처리합니다.

        Mark every eligible unread notification read.

        Returns:
            int: 새로 생성된 읽음 기록 수 (Number of newly inserted read rows)
        """
        feed = await self.feed_service.list_notifications(db, user_id)
        marked: int = 0
        async with translate_store_errors("mark_all_read"):
            for item in feed.unread:
                receipt = await self._insert_once(db, user_id, item.key)
                if receipt.created:
                    marked += 1
        return marked

    async def commit(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """읽음 기록을 커밋한 뒤 사용자의 읽음 캐시를 삭제합니다.

        Commit the request transaction, then drop the user's cached read set.
        The cache entry must go only after the commit: a load that runs while
        the write is still uncommitted would otherwise re-cache the old set.

        Raises:
            StoreUnavailableError: 커밋 중 저장소 장애 시 (Store unreachable during commit)
        """
        async with translate_store_errors("commit_reads"):
            await db.commit()
        await self.cache.invalidate(user_id)

    async def is_read(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: NotificationType,
        notification_id: UUID,
    ) -> bool:
        """사용자가 알림을 읽었는지 확인합니다 (Membership test on the cached read set)."""
        async with translate_store_errors("is_read"):
            read_set = await self.feed_service.load_read_set(db, user_id)
        return read_set.is_read(NotificationType(notification_type), notification_id)


# 싱글턴 인스턴스 — Singleton instance
read_tracker_service: ReadTrackerService = ReadTrackerService(notification_feed_service, read_state_cache)
