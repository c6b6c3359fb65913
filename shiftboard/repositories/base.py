"""공통 레포지토리 베이스 — ID 조회, 페이지 조회, 생성, 삭제.

Shared repository base. Domain repositories subclass it with their model
and add their own queries; this class only covers the operations every
notification source needs.
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """모델 하나에 묶인 레포지토리 (Repository bound to one ORM model)."""

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        return await db.get(self.model, record_id)

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """정렬된 쿼리의 한 페이지와 전체 개수를 반환합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            query: 정렬까지 적용된 SELECT (Ordered SELECT)
            page: 1부터 시작하는 페이지 번호, 1 미만은 1로 취급 (1-based; values below 1 read as 1)
            per_page: 페이지 크기 (Page size)

        Returns:
            tuple[Sequence[ModelType], int]: (페이지 항목, 전체 개수) (Page items, total count)
        """
        page = max(page, 1)
        total: int = (await db.execute(select(func.count()).select_from(query.order_by(None).subquery()))).scalar() or 0
        rows = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
        return rows.scalars().all(), total

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> ModelType:
        """행을 추가하고 flush 후 DB 기본값까지 다시 읽어 반환합니다 (커밋은 라우터)."""
        record: ModelType = self.model(**values)
        db.add(record)
        await db.flush()
        await db.refresh(record)
        return record

    async def delete(self, db: AsyncSession, record_id: UUID) -> bool:
        """행을 삭제합니다. 자식 읽음 기록은 DB의 ON DELETE CASCADE가 제거합니다.

        Returns:
            bool: 삭제했으면 True, 없으면 False (False when the row does not exist)
        """
        record: ModelType | None = await self.get_by_id(db, record_id)
        if record is None:
            return False
        await db.delete(record)
        await db.flush()
        return True
