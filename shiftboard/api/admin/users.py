"""관리자 사용자 알림 현황 라우터.

Admin User Notification Status Router — Per-user read status across both
notification sources, limited to what the user is eligible to see.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.api.deps import require_admin
from shiftboard.database import get_db
from shiftboard.models.user import Profile
from shiftboard.schemas.notification import UserNotificationStatusResponse
from shiftboard.services.notification_feed_service import notification_feed_service

router: APIRouter = APIRouter()


@router.get("/{user_id}/notification-status", response_model=UserNotificationStatusResponse)
async def get_user_notification_status(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
) -> dict:
    """사용자의 알림 읽음 현황을 조회합니다.

    Get one user's notification read status: per-source read/total counters
    and every eligible item with its read time.

    Args:
        user_id: 대상 사용자 UUID (Target user UUID)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated admin)

    Returns:
        dict: 사용자 알림 현황 (User notification status)
    """
    return await notification_feed_service.get_status_summary(db, user_id)
