"""알림 식별자 및 읽음 집합 — 피드 집계의 기본 타입.

Notification identity and read-set types shared by the feed aggregator
and the read tracker.

Announcements and routine notifications use independent id sequences, so a
notification is identified by the composite (type, id) pair everywhere:
read-set membership, sorting, and the "key" returned to clients.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable
from uuid import UUID


class NotificationType(str, Enum):
    """알림 출처 유형 (Notification source discriminator)."""

    ANNOUNCEMENT = "announcement"
    ROUTINE = "routine"


@dataclass(frozen=True, slots=True, order=True)
class NotificationKey:
    """복합 식별자 — (유형, ID) 쌍.

    Composite identity of a notification. Two notifications with the same
    raw id but different types never compare equal.
    """

    type: NotificationType
    id: UUID

    def __str__(self) -> str:
        return f"{self.type.value}:{self.id}"


def ensure_aware(dt: datetime) -> datetime:
    """naive datetime을 UTC로 간주합니다 (SQLite는 tzinfo를 저장하지 않음)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class ReadSet:
    """사용자의 읽음 집합 — 메모리 내 O(1) 멤버십 검사.

    Immutable set of composite keys the user has read, plus when each was read.
    Built from the two read tables; once loaded, every "has the user read N"
    question is answered without another round trip.
    """

    user_id: UUID
    read_at: dict[NotificationKey, datetime | None] = field(default_factory=dict)

    @classmethod
    def from_rows(
        cls,
        user_id: UUID,
        announcement_rows: Iterable[tuple[UUID, datetime | None]],
        routine_rows: Iterable[tuple[UUID, datetime | None]],
    ) -> "ReadSet":
        read_at: dict[NotificationKey, datetime | None] = {}
        for notification_id, at in announcement_rows:
            read_at[NotificationKey(NotificationType.ANNOUNCEMENT, notification_id)] = (
                ensure_aware(at) if at is not None else None
            )
        for notification_id, at in routine_rows:
            read_at[NotificationKey(NotificationType.ROUTINE, notification_id)] = (
                ensure_aware(at) if at is not None else None
            )
        return cls(user_id=user_id, read_at=read_at)

    def __contains__(self, key: object) -> bool:
        return key in self.read_at

    def __len__(self) -> int:
        return len(self.read_at)

    def is_read(self, notification_type: NotificationType, notification_id: UUID) -> bool:
        return NotificationKey(notification_type, notification_id) in self.read_at

    def read_time(self, key: NotificationKey) -> datetime | None:
        return self.read_at.get(key)


@dataclass(slots=True)
class NotificationItem:
    """피드 항목 — 공지 또는 루틴 알림을 하나의 형태로 표현.

    Feed entry tagged with its source type. ``routine`` is only set for
    routine notifications whose parent routine still exists.
    """

    key: NotificationKey
    message: str
    created_at: datetime
    created_by: UUID | None = None
    title: str | None = None
    routine_id: UUID | None = None
    shift_id: UUID | None = None
    routine: dict[str, Any] | None = None
    read_at: datetime | None = None

    @property
    def type(self) -> NotificationType:
        return self.key.type

    @property
    def id(self) -> UUID:
        return self.key.id

    def sort_key(self) -> tuple[float, str, str]:
        # 최신순, 동일 시각은 (type, id)로 결정적 정렬
        return (-self.created_at.timestamp(), self.key.type.value, str(self.key.id))


@dataclass(slots=True)
class NotificationFeed:
    """집계 결과 — 읽지 않은 항목과 읽은 항목으로 분할된 피드."""

    user_id: UUID
    unread: list[NotificationItem] = field(default_factory=list)
    read: list[NotificationItem] = field(default_factory=list)

    @property
    def unread_count(self) -> int:
        return len(self.unread)

    @property
    def total(self) -> int:
        return len(self.unread) + len(self.read)
