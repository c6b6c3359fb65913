"""사용자 프로필 SQLAlchemy ORM 모델 정의.

User profile SQLAlchemy ORM model definition.
Profiles mirror the identities owned by the external identity provider.
The server never creates credentials; it only stores what the feed needs.

Tables:
    - profiles: 사용자 프로필 (User profiles, created_at is the notification cutoff)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shiftboard.database import Base


class Profile(Base):
    """사용자 프로필 모델 — 인증 공급자가 소유하는 사용자 정보.

    Profile model — User identity supplied by the identity provider.
    created_at is immutable and defines the notification eligibility cutoff:
    a user only sees notifications created at or after this instant.

    Attributes:
        id: 고유 식별자 UUID (Identity provider user id)
        name: 표시 이름 (Display name)
        email: 이메일 (Email address)
        role: 역할 (Role: "admin" or "employee")
        created_at: 가입 일시 UTC (Account creation timestamp, eligibility cutoff)
    """

    __tablename__ = "profiles"

    # 사용자 고유 식별자 — Identity provider user id
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 표시 이름 — Display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 이메일 — Email address
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — "admin" | "employee"
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="employee")
    # 가입 일시 — Account creation timestamp (UTC, never updated)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
