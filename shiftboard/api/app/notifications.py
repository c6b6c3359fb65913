"""앱 알림 라우터 — 사용자 알림 피드 및 읽음 처리 API.

App Notification Router — The current user's merged notification feed
(announcements + routine notifications) and read tracking.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.api.deps import get_current_user
from shiftboard.database import get_db
from shiftboard.models.user import Profile
from shiftboard.schemas.notification import (
    MarkAllReadResponse,
    NotificationFeedResponse,
    ReadReceiptResponse,
    UnreadCountResponse,
)
from shiftboard.services.notification_feed_service import (
    build_item_response,
    notification_feed_service,
)
from shiftboard.services.read_tracker_service import read_tracker_service
from shiftboard.utils.notification_keys import NotificationFeed, NotificationType

router: APIRouter = APIRouter()


@router.get("", response_model=NotificationFeedResponse)
async def list_my_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> dict:
    """내 알림 피드를 조회합니다 (안읽음/읽음 분할, 최신순).

    List my notifications partitioned into unread and read, newest first.
    Only notifications created at or after my account creation are included.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        dict: 안읽음/읽음 목록과 안읽음 수 (Unread/read lists and unread count)
    """
    feed: NotificationFeed = await notification_feed_service.list_notifications(db, current_user.id)
    return {
        "unread": [build_item_response(item) for item in feed.unread],
        "read": [build_item_response(item) for item in feed.read],
        "unread_count": feed.unread_count,
    }


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> dict:
    """읽지 않은 알림 수를 조회합니다 (Badge count)."""
    count: int = await notification_feed_service.get_unread_count(db, current_user.id)
    return {"unread_count": count}


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> dict:
    """모든 알림을 읽음 처리합니다.

    Mark every eligible unread notification read.
    """
    marked: int = await read_tracker_service.mark_all_read(db, current_user.id)
    await read_tracker_service.commit(db, current_user.id)
    return {"marked": marked}


@router.post("/{notification_type}/{notification_id}/read", response_model=ReadReceiptResponse)
async def mark_read(
    notification_type: NotificationType,
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> dict:
    """알림을 읽음 처리합니다 (멱등 — 반복 호출해도 200).

    Mark a notification read. Repeating the call is a no-op that returns
    the original read time.

    Args:
        notification_type: 알림 유형 — "announcement"|"routine" (Notification type)
        notification_id: 알림 UUID (Notification UUID)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        dict: 읽음 처리 결과 (Read receipt)
    """
    receipt = await read_tracker_service.mark_read(db, current_user.id, notification_type, notification_id)
    await read_tracker_service.commit(db, current_user.id)
    return {
        "key": str(receipt.key),
        "read_at": receipt.read_at,
        "created": receipt.created,
    }
