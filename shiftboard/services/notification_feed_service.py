"""알림 피드 서비스 — 공지사항과 루틴 알림을 하나의 피드로 집계.

Notification Feed Service — Aggregates announcements and routine
notifications into one chronologically ordered feed per user, partitioned
into unread and read.

Eligibility: a notification is visible to a user only if
notification.created_at >= user.created_at (inclusive), so new hires never
see a backlog that predates their account.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.models.communication import Announcement
from shiftboard.models.notification import RoutineNotification
from shiftboard.models.work import Routine
from shiftboard.repositories.announcement_repository import announcement_repository
from shiftboard.repositories.notification_read_repository import notification_read_repository
from shiftboard.repositories.profile_repository import profile_repository
from shiftboard.repositories.routine_notification_repository import routine_notification_repository
from shiftboard.services.read_state_cache import ReadStateCache, read_state_cache
from shiftboard.utils.db_errors import translate_store_errors
from shiftboard.utils.exceptions import NotFoundError
from shiftboard.utils.notification_keys import (
    NotificationFeed,
    NotificationItem,
    NotificationKey,
    NotificationType,
    ReadSet,
    ensure_aware,
)


def _announcement_item(announcement: Announcement) -> NotificationItem:
    return NotificationItem(
        key=NotificationKey(NotificationType.ANNOUNCEMENT, announcement.id),
        title=announcement.title,
        message=announcement.message,
        created_at=ensure_aware(announcement.created_at),
        created_by=announcement.created_by,
    )


def _routine_item(notification: RoutineNotification, routine: Routine | None) -> NotificationItem:
    routine_context: dict | None = None
    if routine is not None:
        routine_context = {
            "id": routine.id,
            "title": routine.title,
            "description": routine.description,
            "priority": routine.priority,
        }
    return NotificationItem(
        key=NotificationKey(NotificationType.ROUTINE, notification.id),
        title=routine.title if routine is not None else None,
        message=notification.message,
        created_at=ensure_aware(notification.created_at),
        created_by=notification.created_by,
        routine_id=notification.routine_id,
        shift_id=notification.shift_id,
        routine=routine_context,
    )


def build_item_response(item: NotificationItem) -> dict:
    """피드 항목을 응답 딕셔너리로 변환합니다 (Feed item → response dict)."""
    routine: dict | None = None
    if item.routine is not None:
        routine = {**item.routine, "id": str(item.routine["id"])}
    return {
        "key": str(item.key),
        "type": item.type.value,
        "id": str(item.id),
        "title": item.title,
        "message": item.message,
        "created_at": item.created_at,
        "created_by": str(item.created_by) if item.created_by is not None else None,
        "routine_id": str(item.routine_id) if item.routine_id is not None else None,
        "shift_id": str(item.shift_id) if item.shift_id is not None else None,
        "routine": routine,
        "read_at": item.read_at,
    }


def merge_and_partition(
    user_id: UUID,
    items: list[NotificationItem],
    read_set: ReadSet,
) -> NotificationFeed:
    """항목을 최신순으로 정렬하고 읽음 집합 기준으로 분할합니다.

    Sort newest first (ties broken by type, then id) and split by composite-key
    membership in the read set. Every item lands in exactly one partition.

    Args:
        user_id: 사용자 UUID (User UUID)
        items: 대상 항목 (Eligible items from both sources)
        read_set: 사용자의 읽음 집합 (User's read set)

    Returns:
        NotificationFeed: 분할된 피드 (Partitioned feed)
    """
    feed = NotificationFeed(user_id=user_id)
    for item in sorted(items, key=NotificationItem.sort_key):
        if item.key in read_set:
            item.read_at = read_set.read_time(item.key)
            feed.read.append(item)
        else:
            feed.unread.append(item)
    return feed


class NotificationFeedService:
    """알림 피드 서비스.

    Notification aggregator shared by every presentation surface
    (banner, tab, admin status view).
    """

    def __init__(self, cache: ReadStateCache) -> None:
        self.cache: ReadStateCache = cache

    async def get_cutoff(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> datetime:
        """사용자의 알림 기준 시각을 조회합니다.

        Resolve the user's eligibility cutoff.

        Raises:
            NotFoundError: 사용자가 없을 때 (Unknown user; the feed fails closed)
        """
        cutoff: datetime | None = await profile_repository.get_created_at(db, user_id)
        if cutoff is None:
            raise NotFoundError("사용자를 찾을 수 없습니다 (User not found)")
        return cutoff

    async def load_read_set(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> ReadSet:
        """사용자의 읽음 집합을 조회합니다 (캐시 우선).

        Load the user's read set from both read tables, through the cache.
        """

        async def _load() -> ReadSet:
            announcement_rows = await notification_read_repository.get_read_rows(
                db, NotificationType.ANNOUNCEMENT, user_id
            )
            routine_rows = await notification_read_repository.get_read_rows(
                db, NotificationType.ROUTINE, user_id
            )
            return ReadSet.from_rows(user_id, announcement_rows, routine_rows)

        return await self.cache.get_or_load(user_id, _load)

    async def get_eligible_items(
        self,
        db: AsyncSession,
        cutoff: datetime,
    ) -> list[NotificationItem]:
        """기준 시각 이후의 공지 및 루틴 알림을 태그된 항목으로 조회합니다.

        Fetch both sources filtered by the cutoff and tag each item with its type.
        Both statements share one AsyncSession and therefore run one after the other.
        """
        announcements = await announcement_repository.get_since(db, cutoff)
        routine_rows = await routine_notification_repository.get_since_with_routine(db, cutoff)

        items: list[NotificationItem] = [_announcement_item(a) for a in announcements]
        items.extend(_routine_item(n, r) for n, r in routine_rows)
        return items

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> NotificationFeed:
        """사용자의 전체 알림 피드를 읽음/안읽음으로 분할하여 반환합니다.

        Build the user's merged feed partitioned into unread and read.
        Any store failure fails the whole aggregation; a partial feed is never returned.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)

        Returns:
            NotificationFeed: 분할된 피드 (Partitioned feed)

        Raises:
            NotFoundError: 사용자가 없을 때 (Unknown user)
            StoreUnavailableError: 저장소 장애 시 (Store unreachable)
        """
        async with translate_store_errors("list_notifications"):
            cutoff: datetime = await self.get_cutoff(db, user_id)
            items: list[NotificationItem] = await self.get_eligible_items(db, cutoff)
            read_set: ReadSet = await self.load_read_set(db, user_id)
        return merge_and_partition(user_id, items, read_set)

    async def get_unread_count(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """읽지 않은 알림 수 (Badge count: eligible minus read among eligible)."""
        feed: NotificationFeed = await self.list_notifications(db, user_id)
        return feed.unread_count

    async def get_status_summary(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> dict:
        """관리자용 사용자 알림 현황을 구성합니다.

        Build the admin per-user status view: counters per source plus every
        eligible item with its read time (None when unread).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 조회 대상 사용자 UUID (Target user UUID)

        Returns:
            dict: 출처별 읽음/전체 수와 항목 목록 (Per-source counters and items)
        """
        feed: NotificationFeed = await self.list_notifications(db, user_id)
        ordered: list[NotificationItem] = sorted(feed.unread + feed.read, key=NotificationItem.sort_key)

        read_keys: set[NotificationKey] = {item.key for item in feed.read}
        sources: dict[str, dict] = {}
        for notification_type in NotificationType:
            of_type = [item for item in ordered if item.type is notification_type]
            sources[notification_type.value] = {
                "read": sum(1 for item in of_type if item.key in read_keys),
                "total": len(of_type),
                "items": [build_item_response(item) for item in of_type],
            }

        return {
            "user_id": str(user_id),
            "read_count": len(feed.read),
            "unread_count": feed.unread_count,
            "announcements": sources[NotificationType.ANNOUNCEMENT.value],
            "routine_notifications": sources[NotificationType.ROUTINE.value],
        }


# 싱글턴 인스턴스 — Singleton instance
notification_feed_service: NotificationFeedService = NotificationFeedService(read_state_cache)
