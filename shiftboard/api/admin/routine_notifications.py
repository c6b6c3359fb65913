"""관리자 루틴 알림 라우터 — 루틴 변경 알림 발행/관리 API.

Admin Routine Notification Router — Publish a notification for a created or
updated routine, list published notifications, delete one.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.api.deps import require_admin
from shiftboard.database import get_db
from shiftboard.models.notification import RoutineNotification
from shiftboard.models.user import Profile
from shiftboard.schemas.common import (
    MessageResponse,
    PaginatedResponse,
    RoutineNotificationPublish,
    RoutineNotificationResponse,
)
from shiftboard.services.read_state_cache import read_state_cache
from shiftboard.services.routine_notification_service import routine_notification_service

router: APIRouter = APIRouter()


def _to_response(notification: RoutineNotification) -> dict:
    return {
        "id": str(notification.id),
        "message": notification.message,
        "routine_id": str(notification.routine_id) if notification.routine_id else None,
        "shift_id": str(notification.shift_id) if notification.shift_id else None,
        "created_by": str(notification.created_by) if notification.created_by else None,
        "created_at": notification.created_at,
    }


@router.get("/routine-notifications", response_model=PaginatedResponse)
async def list_routine_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """루틴 알림 목록을 최신순으로 조회합니다.

    List routine notifications, newest first.
    """
    notifications, total = await routine_notification_service.list_notifications(db, page=page, per_page=per_page)
    return {
        "items": [_to_response(n) for n in notifications],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.post(
    "/routines/{routine_id}/notifications",
    response_model=RoutineNotificationResponse,
    status_code=201,
)
async def publish_routine_notification(
    routine_id: UUID,
    data: RoutineNotificationPublish,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
) -> dict:
    """루틴 변경 알림을 발행합니다.

    Publish a routine-change notification to every user.

    Args:
        routine_id: 루틴 UUID (Routine UUID)
        data: 변경 유형 (Change kind: created | updated)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated admin)

    Returns:
        dict: 생성된 알림 (Created notification)
    """
    notification = await routine_notification_service.publish(
        db,
        routine_id=routine_id,
        change=data.change,
        created_by=current_user.id,
    )
    await db.commit()
    return _to_response(notification)


@router.delete("/routine-notifications/{notification_id}", response_model=MessageResponse)
async def delete_routine_notification(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
) -> dict:
    """루틴 알림을 삭제합니다 (읽음 기록 포함).

    Delete a routine notification together with its read records.
    """
    await routine_notification_service.delete_notification(db, notification_id)
    await db.commit()
    # 커밋 후 캐시 정리 — cascaded read rows leave every cached set stale
    await read_state_cache.clear()
    return {"message": "알림이 삭제되었습니다 (Notification deleted)"}
