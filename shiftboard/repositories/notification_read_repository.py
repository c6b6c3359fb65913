"""알림 읽음 레포지토리 — 두 읽음 테이블에 대한 단일 접근 경로.

Notification Read Repository — One code path over the two read tables.
announcements_read and routine_notifications_read share the same shape
(parent FK, user_id, read_at, unique pair); a table descriptor per
NotificationType selects the model and FK column.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.models.communication import Announcement, AnnouncementRead
from shiftboard.models.notification import RoutineNotification, RoutineNotificationRead
from shiftboard.utils.notification_keys import NotificationType


@dataclass(frozen=True)
class ReadTable:
    """읽음 테이블 기술자 (Read table descriptor).

    Attributes:
        read_model: 읽음 기록 모델 (Read row model)
        parent_model: 알림 모델 (Notification model the FK points at)
        parent_column: 알림 FK 컬럼 이름 (FK column name on the read model)
    """

    read_model: Any
    parent_model: Any
    parent_column: str

    @property
    def parent_fk(self) -> Any:
        return getattr(self.read_model, self.parent_column)


READ_TABLES: dict[NotificationType, ReadTable] = {
    NotificationType.ANNOUNCEMENT: ReadTable(AnnouncementRead, Announcement, "announcement_id"),
    NotificationType.ROUTINE: ReadTable(RoutineNotificationRead, RoutineNotification, "notification_id"),
}


class NotificationReadRepository:
    """알림 읽음 레포지토리.

    Read-record storage for both notification types.
    """

    def _table(self, notification_type: NotificationType) -> ReadTable:
        return READ_TABLES[NotificationType(notification_type)]

    async def get_read_rows(
        self,
        db: AsyncSession,
        notification_type: NotificationType,
        user_id: UUID,
    ) -> list[tuple[UUID, datetime]]:
        """사용자의 읽음 기록을 (알림 ID, 읽은 시각) 목록으로 조회합니다.

        Fetch (notification_id, read_at) pairs the user holds for one notification type.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            notification_type: 알림 유형 (Notification type)
            user_id: 사용자 UUID (User UUID)

        Returns:
            list[tuple[UUID, datetime]]: 읽음 기록 목록 (Read rows)
        """
        table = self._table(notification_type)
        query: Select = select(table.parent_fk, table.read_model.read_at).where(
            table.read_model.user_id == user_id
        )
        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def get_read(
        self,
        db: AsyncSession,
        notification_type: NotificationType,
        user_id: UUID,
        notification_id: UUID,
    ) -> Any | None:
        """단일 읽음 기록을 조회합니다 (Single read row or None)."""
        table = self._table(notification_type)
        query: Select = select(table.read_model).where(
            table.read_model.user_id == user_id,
            table.parent_fk == notification_id,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def notification_exists(
        self,
        db: AsyncSession,
        notification_type: NotificationType,
        notification_id: UUID,
    ) -> bool:
        """알림이 존재하는지 확인합니다 (Whether the notification row exists)."""
        table = self._table(notification_type)
        query: Select = select(func.count()).select_from(table.parent_model).where(
            table.parent_model.id == notification_id
        )
        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def insert_read(
        self,
        db: AsyncSession,
        notification_type: NotificationType,
        user_id: UUID,
        notification_id: UUID,
    ) -> Any:
        """읽음 기록을 SAVEPOINT 안에서 삽입합니다.

        Insert a read row inside a SAVEPOINT so that a constraint violation
        rolls back only this insert and leaves the request transaction usable.
        read_at is filled by the database default; callers cannot supply it.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            notification_type: 알림 유형 (Notification type)
            user_id: 사용자 UUID (User UUID)
            notification_id: 알림 UUID (Notification UUID)

        Returns:
            읽음 기록 ORM 객체 (Inserted read row, read_at loaded)

        Raises:
            IntegrityError: 중복 또는 참조 무결성 위반 (Duplicate pair or missing parent)
        """
        table = self._table(notification_type)
        row = table.read_model(**{table.parent_column: notification_id, "user_id": user_id})
        async with db.begin_nested():
            db.add(row)
            await db.flush()
        await db.refresh(row)
        return row


# 싱글턴 인스턴스 — Singleton instance
notification_read_repository: NotificationReadRepository = NotificationReadRepository()
