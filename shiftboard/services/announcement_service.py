"""공지사항 서비스 — 공지사항 비즈니스 로직.

Announcement Service — Business logic for announcement management.
Handles admin create/list/delete and read receipts.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.models.communication import Announcement
from shiftboard.repositories.announcement_repository import announcement_repository
from shiftboard.repositories.profile_repository import profile_repository
from shiftboard.schemas.common import AnnouncementCreate
from shiftboard.utils.db_errors import translate_store_errors
from shiftboard.utils.exceptions import NotFoundError


class AnnouncementService:
    """공지사항 서비스.

    Announcement service providing admin CRUD and read receipts.
    """

    async def build_response(
        self,
        db: AsyncSession,
        announcement: Announcement,
    ) -> dict:
        """공지사항 응답 딕셔너리를 구성합니다 (작성자 이름 포함).

        Build announcement response dict with the creator name resolved.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            announcement: 공지사항 ORM 객체 (Announcement ORM object)

        Returns:
            dict: 작성자명이 포함된 응답 딕셔너리 (Response dict with creator name)
        """
        names: dict[UUID, str] = await profile_repository.get_names(db, {announcement.created_by})

        return {
            "id": str(announcement.id),
            "title": announcement.title,
            "message": announcement.message,
            "created_by": str(announcement.created_by),
            "created_by_name": names.get(announcement.created_by, "Unknown"),
            "created_at": announcement.created_at,
        }

    async def list_announcements(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Announcement], int]:
        """공지사항 목록을 최신순으로 조회합니다 (Paginated, newest first)."""
        async with translate_store_errors("list_announcements"):
            return await announcement_repository.get_list(db, page, per_page)

    async def get_detail(
        self,
        db: AsyncSession,
        announcement_id: UUID,
    ) -> Announcement:
        """공지사항 상세를 조회합니다.

        Get announcement detail.

        Raises:
            NotFoundError: 공지가 없을 때 (When announcement not found)
        """
        announcement: Announcement | None = await announcement_repository.get_by_id(db, announcement_id)
        if announcement is None:
            raise NotFoundError("공지사항을 찾을 수 없습니다 (Announcement not found)")
        return announcement

    async def create_announcement(
        self,
        db: AsyncSession,
        data: AnnouncementCreate,
        created_by: UUID,
    ) -> Announcement:
        """새 공지사항을 생성합니다.

        Create a new announcement. It appears in the feed of every user whose
        account existed at (or before) its creation time.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 공지 생성 데이터 (Announcement creation data)
            created_by: 작성자 UUID (Creator's UUID)

        Returns:
            Announcement: 생성된 공지 (Created announcement)
        """
        async with translate_store_errors("create_announcement"):
            return await announcement_repository.create(
                db,
                {
                    "title": data.title,
                    "message": data.message,
                    "created_by": created_by,
                },
            )

    async def delete_announcement(
        self,
        db: AsyncSession,
        announcement_id: UUID,
    ) -> bool:
        """공지사항을 삭제합니다 (읽음 기록은 CASCADE 삭제).

        Delete an announcement; its read rows are removed by ON DELETE CASCADE.

        Raises:
            NotFoundError: 공지가 없을 때 (When announcement not found)
        """
        async with translate_store_errors("delete_announcement"):
            deleted: bool = await announcement_repository.delete(db, announcement_id)
        if not deleted:
            raise NotFoundError("공지사항을 찾을 수 없습니다 (Announcement not found)")
        return deleted

    async def get_read_receipts(
        self,
        db: AsyncSession,
        announcement_id: UUID,
    ) -> list[dict]:
        """공지사항 읽음 현황을 조회합니다.

        List who has read the announcement and when.

        Raises:
            NotFoundError: 공지가 없을 때 (When announcement not found)
        """
        await self.get_detail(db, announcement_id)
        rows = await announcement_repository.get_readers(db, announcement_id)
        return [
            {"user_id": str(user_id), "user_name": name, "read_at": read_at}
            for user_id, name, read_at in rows
        ]


# 싱글턴 인스턴스 — Singleton instance
announcement_service: AnnouncementService = AnnouncementService()
