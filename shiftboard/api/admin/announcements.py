"""관리자 공지사항 라우터 — 공지사항 관리 API.

Admin Announcement Router — Create, list, view, delete announcements
and inspect who has read them. Admin role only.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.api.deps import require_admin
from shiftboard.database import get_db
from shiftboard.models.user import Profile
from shiftboard.schemas.announcement_read import AnnouncementReadResponse
from shiftboard.schemas.common import (
    AnnouncementCreate,
    AnnouncementResponse,
    MessageResponse,
    PaginatedResponse,
)
from shiftboard.services.announcement_service import announcement_service
from shiftboard.services.read_state_cache import read_state_cache

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_announcements(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """공지사항 목록을 최신순으로 조회합니다.

    List announcements, newest first.
    """
    announcements, total = await announcement_service.list_announcements(db, page=page, per_page=per_page)

    items: list[dict] = []
    for a in announcements:
        response: dict = await announcement_service.build_response(db, a)
        items.append(response)

    return {
        "items": items,
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
) -> dict:
    """공지사항 상세를 조회합니다.

    Get announcement detail.
    """
    announcement = await announcement_service.get_detail(db, announcement_id)
    return await announcement_service.build_response(db, announcement)


@router.post("", response_model=AnnouncementResponse, status_code=201)
async def create_announcement(
    data: AnnouncementCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
) -> dict:
    """새 공지사항을 생성합니다.

    Create a new announcement authored by the current admin.
    """
    announcement = await announcement_service.create_announcement(db, data=data, created_by=current_user.id)
    await db.commit()

    return await announcement_service.build_response(db, announcement)


@router.delete("/{announcement_id}", response_model=MessageResponse)
async def delete_announcement(
    announcement_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
) -> dict:
    """공지사항을 삭제합니다 (읽음 기록 포함).

    Delete an announcement together with its read records.
    """
    await announcement_service.delete_announcement(db, announcement_id)
    await db.commit()
    # 커밋 후 캐시 정리 — cascaded read rows leave every cached set stale
    await read_state_cache.clear()

    return {"message": "공지사항이 삭제되었습니다 (Announcement deleted)"}


@router.get("/{announcement_id}/reads", response_model=list[AnnouncementReadResponse])
async def get_announcement_reads(
    announcement_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_admin)],
) -> list[dict]:
    """공지사항 읽음 현황을 조회합니다.

    List who has read the announcement and when.
    """
    return await announcement_service.get_read_receipts(db, announcement_id)
