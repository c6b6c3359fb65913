"""관리자 API 요청/응답 스키마 — 공지사항, 루틴 알림, 페이지네이션.

Admin-side request/response schemas: announcements, routine notification
publishing, and the pagination/message wrappers shared by admin routers.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shiftboard.schemas.notification import RoutineChange


# === 공지사항 (Announcement) 스키마 ===

class AnnouncementCreate(BaseModel):
    """공지사항 생성 요청 스키마.

    Announcement creation request schema.
    Both fields are required and must not be blank.

    Attributes:
        title: 공지 제목 (Announcement title)
        message: 공지 내용 (Announcement body text)
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)  # 공지 제목 (Announcement title)
    message: str = Field(..., min_length=1)  # 공지 내용 (Announcement body)


class AnnouncementResponse(BaseModel):
    """공지사항 응답 — 작성자 이름 포함 (Announcement with its author name resolved)."""

    id: str
    title: str
    message: str
    created_by: str  # 작성자 프로필 UUID (Author profile id)
    created_by_name: str  # 프로필이 없으면 "Unknown" (Unknown when the profile is gone)
    created_at: datetime  # 게시 시각, 피드 대상 판정 기준 (Publish time; drives feed eligibility)


# === 루틴 알림 (Routine Notification) 스키마 ===

class RoutineNotificationPublish(BaseModel):
    """루틴 알림 발행 요청 스키마.

    Routine notification publish request. Sent when an admin saves a routine
    with "send notification" turned on.
    """

    change: RoutineChange = RoutineChange.CREATED  # 변경 유형 — "created"|"updated" (Change kind)


class RoutineNotificationResponse(BaseModel):
    """루틴 알림 응답 스키마 (관리자용).

    Routine notification response schema for admin listings.
    """

    id: str
    message: str  # 구성된 메시지 (Composed message)
    routine_id: str | None  # 루틴 UUID — 루틴 삭제 시 None (Routine, null once deleted)
    shift_id: str | None  # 시간대 UUID (Shift identifier, nullable)
    created_by: str | None  # 발행자 UUID (Publisher, nullable)
    created_at: datetime  # 발행 시각 (Publish time)


# === 목록/메시지 래퍼 (Listing and message wrappers) ===

class PaginatedResponse(BaseModel):
    """목록 한 페이지 (One page of a newest-first admin listing)."""

    items: list[Any]
    total: int  # 전체 개수 — 모든 페이지 합 (Count across all pages)
    page: int  # 1부터 시작 (1-based)
    per_page: int


class MessageResponse(BaseModel):
    """삭제 확인 메시지 (Delete confirmation)."""

    message: str
