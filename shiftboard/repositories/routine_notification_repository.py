"""루틴 알림 레포지토리 — 루틴 알림 및 루틴 컨텍스트 조회 담당.

Routine Notification Repository — Routine notification queries with
optional parent routine context.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.models.notification import RoutineNotification
from shiftboard.models.work import Routine, Shift
from shiftboard.repositories.base import BaseRepository


class RoutineNotificationRepository(BaseRepository[RoutineNotification]):
    """루틴 알림 레포지토리.

    Extends:
        BaseRepository[RoutineNotification]
    """

    def __init__(self) -> None:
        super().__init__(RoutineNotification)

    async def get_since_with_routine(
        self,
        db: AsyncSession,
        cutoff: datetime,
    ) -> list[tuple[RoutineNotification, Routine | None]]:
        """기준 시각 이후 루틴 알림을 루틴 정보와 함께 조회합니다.

        Retrieve routine notifications created at or after the cutoff, each
        outer-joined to its routine. A deleted routine yields None.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            cutoff: 사용자 가입 일시 (User's eligibility cutoff)

        Returns:
            list[tuple[RoutineNotification, Routine | None]]: (알림, 루틴) 목록
        """
        query: Select = (
            select(RoutineNotification, Routine)
            .outerjoin(Routine, Routine.id == RoutineNotification.routine_id)
            .where(RoutineNotification.created_at >= cutoff)
            .order_by(RoutineNotification.created_at.desc())
        )
        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def get_list(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[RoutineNotification], int]:
        """전체 루틴 알림을 최신순으로 조회합니다 (Admin list, newest first)."""
        query: Select = select(RoutineNotification).order_by(
            RoutineNotification.created_at.desc(), RoutineNotification.id
        )
        return await self.get_paginated(db, query, page, per_page)

    async def get_routine_with_shift(
        self,
        db: AsyncSession,
        routine_id: UUID,
    ) -> tuple[Routine, Shift | None] | None:
        """루틴과 소속 시간대를 조회합니다 (Routine plus its shift, for message composition)."""
        query: Select = (
            select(Routine, Shift)
            .outerjoin(Shift, Shift.id == Routine.shift_id)
            .where(Routine.id == routine_id)
        )
        row = (await db.execute(query)).first()
        if row is None:
            return None
        return row[0], row[1]


# 싱글턴 인스턴스 — Singleton instance
routine_notification_repository: RoutineNotificationRepository = RoutineNotificationRepository()
