"""루틴 알림 서비스 — 루틴 변경 알림 발행.

Routine Notification Service — Publishes routine-change notifications
when an admin creates or edits a routine with "notify" enabled.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.models.notification import RoutineNotification
from shiftboard.repositories.routine_notification_repository import routine_notification_repository
from shiftboard.schemas.notification import RoutineChange
from shiftboard.utils.db_errors import translate_store_errors
from shiftboard.utils.exceptions import NotFoundError

# 변경 유형별 메시지 템플릿 — Message template per change kind
_MESSAGE_TEMPLATES: dict[RoutineChange, str] = {
    RoutineChange.CREATED: 'New routine added to {shift}: "{title}"',
    RoutineChange.UPDATED: 'Routine updated in {shift}: "{title}"',
}


def compose_message(change: RoutineChange, shift_name: str, routine_title: str) -> str:
    """루틴 알림 메시지를 구성합니다 (Compose the notification message)."""
    return _MESSAGE_TEMPLATES[RoutineChange(change)].format(shift=shift_name, title=routine_title)


class RoutineNotificationService:
    """루틴 알림 서비스."""

    async def publish(
        self,
        db: AsyncSession,
        routine_id: UUID,
        change: RoutineChange,
        created_by: UUID | None,
    ) -> RoutineNotification:
        """루틴 변경 알림을 생성합니다.

        Create a routine notification for a created/updated routine.
        The message names the routine's shift and the routine title.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            routine_id: 루틴 UUID (Routine UUID)
            change: 변경 유형 (created | updated)
            created_by: 발행자 UUID (Publishing admin)

        Returns:
            RoutineNotification: 생성된 알림 (Created notification)

        Raises:
            NotFoundError: 루틴이 없을 때 (When routine not found)
        """
        async with translate_store_errors("publish_routine_notification"):
            found = await routine_notification_repository.get_routine_with_shift(db, routine_id)
            if found is None:
                raise NotFoundError("루틴을 찾을 수 없습니다 (Routine not found)")
            routine, shift = found
            shift_name: str = shift.name if shift is not None else ""

            return await routine_notification_repository.create(
                db,
                {
                    "routine_id": routine.id,
                    "shift_id": routine.shift_id,
                    "message": compose_message(change, shift_name, routine.title),
                    "created_by": created_by,
                },
            )

    async def list_notifications(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[RoutineNotification], int]:
        """루틴 알림 목록을 조회합니다 (Admin list, newest first)."""
        async with translate_store_errors("list_routine_notifications"):
            return await routine_notification_repository.get_list(db, page, per_page)

    async def delete_notification(
        self,
        db: AsyncSession,
        notification_id: UUID,
    ) -> bool:
        """루틴 알림을 삭제합니다 (읽음 기록은 CASCADE 삭제).

        Raises:
            NotFoundError: 알림이 없을 때 (When notification not found)
        """
        async with translate_store_errors("delete_routine_notification"):
            deleted: bool = await routine_notification_repository.delete(db, notification_id)
        if not deleted:
            raise NotFoundError("알림을 찾을 수 없습니다 (Notification not found)")
        return deleted


# 싱글턴 인스턴스 — Singleton instance
routine_notification_service: RoutineNotificationService = RoutineNotificationService()
