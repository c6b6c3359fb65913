"""프로필 레포지토리 — 사용자 프로필 조회 담당.

Profile Repository — Read access to user profiles supplied by the identity provider.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.models.user import Profile
from shiftboard.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """프로필 레포지토리.

    Extends:
        BaseRepository[Profile]
    """

    def __init__(self) -> None:
        super().__init__(Profile)

    async def get_created_at(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> datetime | None:
        """사용자의 가입 일시(알림 기준 시각)를 조회합니다.

        Fetch the user's account creation timestamp, the notification eligibility cutoff.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)

        Returns:
            datetime | None: 가입 일시, 사용자가 없으면 None (Cutoff, or None if unknown user)
        """
        result = await db.execute(select(Profile.created_at).where(Profile.id == user_id))
        return result.scalar_one_or_none()

    async def get_names(
        self,
        db: AsyncSession,
        user_ids: set[UUID],
    ) -> dict[UUID, str]:
        """여러 사용자의 이름을 한 번에 조회합니다 (Resolve display names in bulk)."""
        if not user_ids:
            return {}
        result = await db.execute(select(Profile.id, Profile.name).where(Profile.id.in_(user_ids)))
        return {row.id: row.name for row in result.all()}


# 싱글턴 인스턴스 — Singleton instance
profile_repository: ProfileRepository = ProfileRepository()
