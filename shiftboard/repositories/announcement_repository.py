"""공지사항 레포지토리 — 공지사항 관련 DB 쿼리 담당.

Announcement Repository — Handles all announcement-related database queries.
Extends BaseRepository with eligibility-filtered and admin list queries.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.models.communication import Announcement, AnnouncementRead
from shiftboard.models.user import Profile
from shiftboard.repositories.base import BaseRepository


class AnnouncementRepository(BaseRepository[Announcement]):
    """공지사항 레포지토리.

    Extends:
        BaseRepository[Announcement]
    """

    def __init__(self) -> None:
        super().__init__(Announcement)

    async def get_list(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Announcement], int]:
        """전체 공지사항을 최신순으로 페이지네이션하여 조회합니다.

        Retrieve paginated announcements, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Announcement], int]: (공지 목록, 전체 개수)
                                                 (List of announcements, total count)
        """
        query: Select = select(Announcement).order_by(Announcement.created_at.desc(), Announcement.id)
        return await self.get_paginated(db, query, page, per_page)

    async def get_since(
        self,
        db: AsyncSession,
        cutoff: datetime,
    ) -> Sequence[Announcement]:
        """기준 시각 이후(포함) 생성된 공지사항을 조회합니다.

        Retrieve announcements created at or after the cutoff (inclusive).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            cutoff: 사용자 가입 일시 (User's eligibility cutoff)

        Returns:
            Sequence[Announcement]: 대상 공지 목록 (Eligible announcements, newest first)
        """
        query: Select = (
            select(Announcement)
            .where(Announcement.created_at >= cutoff)
            .order_by(Announcement.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_readers(
        self,
        db: AsyncSession,
        announcement_id: UUID,
    ) -> list[tuple[UUID, str | None, datetime]]:
        """공지사항을 읽은 사용자와 읽은 시각을 조회합니다.

        List (user_id, user_name, read_at) for an announcement, earliest read first.
        """
        query: Select = (
            select(AnnouncementRead.user_id, Profile.name, AnnouncementRead.read_at)
            .outerjoin(Profile, Profile.id == AnnouncementRead.user_id)
            .where(AnnouncementRead.announcement_id == announcement_id)
            .order_by(AnnouncementRead.read_at, AnnouncementRead.user_id)
        )
        result = await db.execute(query)
        return [(row.user_id, row.name, row.read_at) for row in result.all()]


# 싱글턴 인스턴스 — Singleton instance
announcement_repository: AnnouncementRepository = AnnouncementRepository()
