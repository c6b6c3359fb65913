"""근무 구성 관련 SQLAlchemy ORM 모델 정의.

Work configuration SQLAlchemy ORM model definitions.
Shifts and routines are managed by admin screens outside this service;
here they are read-only context for routine notifications.

Tables:
    - shifts: 근무 시간대 (Work shifts, e.g. morning/evening/closing)
    - routines: 반복 업무 (Recurring routine tasks belonging to a shift)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiftboard.database import Base


class Shift(Base):
    """근무 시간대 모델.

    Shift model — Time-based work period that owns routines.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 시간대 이름 (Shift name)
        order_index: 정렬 순서 (Display order, lower = first)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "shifts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 시간대 이름 — Shift display name
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 정렬 순서 — Display sort order
    order_index: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    routines = relationship("Routine", back_populates="shift", passive_deletes=True)


class Routine(Base):
    """루틴 모델 — 근무 시간대별 반복 업무.

    Routine model — Recurring task checked off by employees during a shift.
    Only title, description and priority are surfaced in notifications.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        shift_id: 소속 시간대 FK (Parent shift)
        title: 루틴 제목 (Routine title)
        description: 루틴 설명 (Description, optional)
        priority: 우선순위 (Priority, higher = more important)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "routines"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 시간대 FK — Parent shift (CASCADE: 시간대 삭제 시 루틴도 삭제)
    shift_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 우선순위 — 0 = normal
    priority: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    shift = relationship("Shift", back_populates="routines")
