"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 프로필 (Profiles)
    work: 근무 시간대 및 루틴 (Shift and Routine)
    communication: 공지사항 및 읽음 기록 (Announcements and their read rows)
    notification: 루틴 알림 및 읽음 기록 (Routine notifications and their read rows)
"""

from shiftboard.models.user import Profile
from shiftboard.models.work import Shift, Routine
from shiftboard.models.communication import Announcement, AnnouncementRead
from shiftboard.models.notification import RoutineNotification, RoutineNotificationRead

__all__ = [
    "Profile",
    "Shift", "Routine",
    "Announcement", "AnnouncementRead",
    "RoutineNotification", "RoutineNotificationRead",
]
