"""공지사항 관련 SQLAlchemy ORM 모델 정의.

Announcement-related SQLAlchemy ORM model definitions.
Includes announcements (broadcast to every employee) and
per-user read tracking rows.

Tables:
    - announcements: 공지사항 (Organization-wide announcements)
    - announcements_read: 공지 읽음 기록 (One row per user per read announcement)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiftboard.database import Base


class Announcement(Base):
    """공지사항 모델 — 관리자가 작성하는 전체 공지.

    Announcement model — Notice broadcast by an admin to all employees.
    Never edited after creation; deletion cascades to its read rows.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        title: 공지 제목 (Announcement title, max 500 chars)
        message: 공지 내용 (Announcement body text)
        created_by: 작성자 FK (Author profile foreign key)
        created_at: 생성 일시 UTC (Creation timestamp)

    Relationships:
        reads: 읽음 기록 목록 (Read rows, removed with the announcement)
    """

    __tablename__ = "announcements"

    # 공지 고유 식별자 — Announcement unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 공지 제목 — Announcement title
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    # 공지 내용 — Announcement body (full text)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # 작성자 FK — Admin who created the announcement
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id"), nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    # 관계 — Read rows (DB 레벨 CASCADE에 위임, delegated to ON DELETE CASCADE)
    reads = relationship("AnnouncementRead", back_populates="announcement", passive_deletes=True)


class AnnouncementRead(Base):
    """공지 읽음 기록 모델 — 사용자별 공지 읽음 여부.

    Announcement read model — Marks that a user has read an announcement.
    Written at most once per (announcement, user); never updated.
    read_at is assigned by the database at insert time.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        announcement_id: 공지 FK (Read announcement)
        user_id: 사용자 FK (Reader profile)
        read_at: 읽은 일시 (Server-assigned read timestamp)

    Constraints:
        uq_announcement_read_user: 사용자당 공지별 1건 (One read row per user per announcement)
    """

    __tablename__ = "announcements_read"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 공지 FK — CASCADE: 공지 삭제 시 읽음 기록도 삭제
    announcement_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("announcements.id", ondelete="CASCADE"), nullable=False)
    # 사용자 FK — CASCADE: 프로필 삭제 시 읽음 기록도 삭제
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    # 읽은 일시 — DB 서버 시각 (assigned by the store, never by the caller)
    read_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("announcement_id", "user_id", name="uq_announcement_read_user"),
    )

    announcement = relationship("Announcement", back_populates="reads")
