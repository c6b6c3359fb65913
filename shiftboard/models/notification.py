"""루틴 알림 관련 SQLAlchemy ORM 모델 정의.

Routine notification SQLAlchemy ORM model definitions.
A routine notification is an immutable event recorded when an admin
creates or edits a routine with "notify" enabled.

Tables:
    - routine_notifications: 루틴 변경 알림 (Routine change events)
    - routine_notifications_read: 루틴 알림 읽음 기록 (One row per user per read notification)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiftboard.database import Base


class RoutineNotification(Base):
    """루틴 알림 모델 — 루틴 생성/수정 이벤트.

    Routine notification model — Event generated for a routine change.
    The parent routine may be deleted later; routine_id is then set to NULL
    and the notification remains visible without routine context.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        message: 알림 메시지 (Human-readable message)
        routine_id: 루틴 FK (Changed routine, nullable after routine deletion)
        shift_id: 시간대 FK (Shift the routine belongs to)
        created_by: 작성자 FK (Admin who published it, nullable)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "routine_notifications"

    # 알림 고유 식별자 — Notification unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 알림 메시지 — Message shown in the feed
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    # 루틴 FK — SET NULL: 루틴 삭제 후에도 알림 유지 (notification survives routine deletion)
    routine_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("routines.id", ondelete="SET NULL"), nullable=True)
    # 시간대 FK — SET NULL on shift delete
    shift_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("shifts.id", ondelete="SET NULL"), nullable=True)
    # 작성자 FK — NULL이면 시스템 생성 (NULL = system generated)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    # 생성 일시 — Event timestamp (UTC, immutable)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    # 관계 — Relationships
    reads = relationship("RoutineNotificationRead", back_populates="notification", passive_deletes=True)


class RoutineNotificationRead(Base):
    """루틴 알림 읽음 기록 모델.

    Routine notification read model — Same lifecycle as AnnouncementRead.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        notification_id: 루틴 알림 FK (Read notification)
        user_id: 사용자 FK (Reader profile)
        read_at: 읽은 일시 (Server-assigned read timestamp)

    Constraints:
        uq_routine_notification_read_user: 사용자당 알림별 1건
    """

    __tablename__ = "routine_notifications_read"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    notification_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("routine_notifications.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    read_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("notification_id", "user_id", name="uq_routine_notification_read_user"),
    )

    notification = relationship("RoutineNotification", back_populates="reads")
