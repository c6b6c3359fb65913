"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - announcements: 공지사항 관리 (Announcement management and read receipts)
    - routine_notifications: 루틴 알림 발행 (Routine notification publishing)
    - users: 사용자 알림 현황 (Per-user notification status)
"""

from fastapi import APIRouter

from shiftboard.api.admin.announcements import router as announcements_router
from shiftboard.api.admin.routine_notifications import router as routine_notifications_router
from shiftboard.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 커뮤니케이션 라우터 등록 — Register communication routers
# ---------------------------------------------------------------------------
admin_router.include_router(announcements_router, prefix="/announcements", tags=["Admin Announcements"])
# 루틴 알림: /routine-notifications, /routines/{id}/notifications (Routine notifications)
admin_router.include_router(routine_notifications_router, tags=["Admin Routine Notifications"])

# ---------------------------------------------------------------------------
# 사용자 라우터 등록 — Register user routers
# ---------------------------------------------------------------------------
admin_router.include_router(users_router, prefix="/users", tags=["Admin Users"])
