"""알림 피드 Pydantic 스키마.

Notification feed request/response schemas.
Every item carries its composite key ("<type>:<id>"); ids of different
types may collide, so clients must key on it rather than on id alone.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel


class RoutineChange(str, Enum):
    """루틴 변경 유형 (Routine change kind)."""

    CREATED = "created"
    UPDATED = "updated"


class RoutineContext(BaseModel):
    """알림에 딸린 루틴 정보 (Routine shown alongside a routine notification)."""

    id: str
    title: str
    description: str | None = None
    priority: int | None = None


class NotificationItemResponse(BaseModel):
    """피드 항목 응답 스키마.

    Attributes:
        key: 복합 식별자 "<type>:<id>" (Composite key)
        type: 알림 유형 — "announcement"|"routine" (Notification type)
        id: 알림 UUID (Notification id, unique only within its type)
        title: 제목 — 공지 제목 또는 루틴 제목 (Announcement or routine title, nullable)
        message: 본문 (Body text)
        created_at: 생성 일시 (Creation timestamp)
        routine: 루틴 정보 — 루틴 삭제 시 None (Routine context, null once deleted)
        read_at: 읽은 시각 — 안읽음이면 None (Read time, null when unread)
    """

    key: str  # 복합 식별자 (Composite key)
    type: str  # 알림 유형 (Notification type)
    id: str  # 알림 UUID 문자열 (Notification UUID as string)
    title: str | None = None  # 제목 (Title, nullable)
    message: str  # 본문 (Body)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)
    created_by: str | None = None  # 작성자 UUID (Author, nullable)
    routine_id: str | None = None  # 루틴 UUID (Routine, routine notifications only)
    shift_id: str | None = None  # 시간대 UUID (Shift, routine notifications only)
    routine: RoutineContext | None = None  # 루틴 정보 (Routine context)
    read_at: datetime | None = None  # 읽은 시각 (Read time)


class NotificationFeedResponse(BaseModel):
    """사용자 알림 피드 응답 스키마 (Unread and read partitions, newest first)."""

    unread: list[NotificationItemResponse]
    read: list[NotificationItemResponse]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class ReadReceiptResponse(BaseModel):
    """읽음 처리 응답 스키마.

    Attributes:
        key: 복합 식별자 (Composite key)
        read_at: 서버가 기록한 읽은 시각 (Server-assigned read time; null when the
            notification was deleted concurrently)
        created: 이번 요청으로 새로 기록되었는지 (Whether this request inserted the row)
    """

    key: str
    read_at: datetime | None
    created: bool


class MarkAllReadResponse(BaseModel):
    marked: int  # 새로 읽음 처리된 수 (Newly marked count)


class SourceStatusResponse(BaseModel):
    read: int  # 읽은 수 (Read count)
    total: int  # 대상 수 (Eligible count)
    items: list[NotificationItemResponse]


class UserNotificationStatusResponse(BaseModel):
    """관리자용 사용자 알림 현황 응답 스키마.

    Admin per-user notification status: overall counters plus per-source breakdown.
    """

    user_id: str
    read_count: int
    unread_count: int
    announcements: SourceStatusResponse
    routine_notifications: SourceStatusResponse

