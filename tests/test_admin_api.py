"""관리자 API 테스트.

Admin API tests — announcements, read receipts, routine notification
publishing, and per-user notification status.
"""

import uuid
from datetime import timedelta

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from shiftboard.services.notification_feed_service import notification_feed_service
from shiftboard.services.read_tracker_service import read_tracker_service
from shiftboard.utils.notification_keys import NotificationType
from tests.conftest import T0, add_announcement, add_routine_notification, auth_header, count_reads


ANNOUNCE_URL = "/api/v1/admin/announcements"
ROUTINE_NOTIFY_URL = "/api/v1/admin/routine-notifications"


class TestAdminAnnouncements:
    """관리자 공지사항 API."""

    async def test_create_announcement(self, client: AsyncClient, admin_user, admin_token):
        res = await client.post(
            ANNOUNCE_URL,
            json={"title": "Inventory day", "message": "Count stock before close."},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 201
        data = res.json()
        assert data["title"] == "Inventory day"
        assert data["created_by"] == str(admin_user.id)
        assert data["created_by_name"] == "Test Admin"

    async def test_created_announcement_reaches_employee_feed(self, client: AsyncClient, admin_token, employee_token):
        await client.post(
            ANNOUNCE_URL,
            json={"title": "Inventory day", "message": "Count stock before close."},
            headers=auth_header(admin_token),
        )

        feed = (await client.get("/api/v1/app/my/notifications", headers=auth_header(employee_token))).json()

        assert [item["title"] for item in feed["unread"]] == ["Inventory day"]

    async def test_blank_fields_rejected(self, client: AsyncClient, admin_token):
        res = await client.post(ANNOUNCE_URL, json={"title": "   ", "message": "x"}, headers=auth_header(admin_token))
        assert res.status_code == 422

        res = await client.post(ANNOUNCE_URL, json={"title": "Title"}, headers=auth_header(admin_token))
        assert res.status_code == 422

    async def test_list_newest_first(self, client: AsyncClient, db: AsyncSession, admin_user, admin_token):
        older = await add_announcement(db, admin_user, T0 + timedelta(minutes=1), title="older")
        newer = await add_announcement(db, admin_user, T0 + timedelta(minutes=2), title="newer")

        res = await client.get(ANNOUNCE_URL, headers=auth_header(admin_token))

        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 2
        assert [item["id"] for item in data["items"]] == [str(newer.id), str(older.id)]

    async def test_get_and_missing(self, client: AsyncClient, db: AsyncSession, admin_user, admin_token):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))

        res = await client.get(f"{ANNOUNCE_URL}/{a.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["id"] == str(a.id)

        res = await client.get(f"{ANNOUNCE_URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_delete_cascades_reads(self, client: AsyncClient, db: AsyncSession, admin_user, employee, admin_token, read_state_redis):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))
        announcement_id = a.id
        await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, announcement_id)

        await notification_feed_service.load_read_set(db, employee.id)
        assert read_state_redis.data

        res = await client.delete(f"{ANNOUNCE_URL}/{announcement_id}", headers=auth_header(admin_token))
        assert res.status_code == 200

        assert await count_reads(db, NotificationType.ANNOUNCEMENT, employee.id, announcement_id) == 0
        # 커밋 후 모든 캐시 항목 삭제 — cached read sets are dropped after the delete commits
        assert read_state_redis.data == {}

    async def test_delete_missing_404(self, client: AsyncClient, admin_token):
        res = await client.delete(f"{ANNOUNCE_URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_read_receipts(self, client: AsyncClient, db: AsyncSession, admin_user, employee, admin_token):
        a = await add_announcement(db, admin_user, T0 + timedelta(minutes=1))
        await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, a.id)

        res = await client.get(f"{ANNOUNCE_URL}/{a.id}/reads", headers=auth_header(admin_token))

        assert res.status_code == 200
        data = res.json()
        assert len(data) == 1
        assert data[0]["user_id"] == str(employee.id)
        assert data[0]["user_name"] == "Test Employee"
        assert data[0]["read_at"] is not None

    async def test_employee_forbidden(self, client: AsyncClient, employee_token):
        res = await client.get(ANNOUNCE_URL, headers=auth_header(employee_token))
        assert res.status_code == 403


class TestAdminRoutineNotifications:
    """루틴 알림 발행 API."""

    async def test_publish_created(self, client: AsyncClient, admin_user, admin_token, routine):
        res = await client.post(
            f"/api/v1/admin/routines/{routine.id}/notifications",
            json={"change": "created"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 201
        data = res.json()
        assert data["message"] == 'New routine added to Opening: "Wipe counters"'
        assert data["routine_id"] == str(routine.id)
        assert data["shift_id"] == str(routine.shift_id)
        assert data["created_by"] == str(admin_user.id)

    async def test_publish_updated(self, client: AsyncClient, admin_token, routine):
        res = await client.post(
            f"/api/v1/admin/routines/{routine.id}/notifications",
            json={"change": "updated"},
            headers=auth_header(admin_token),
        )
        assert res.json()["message"] == 'Routine updated in Opening: "Wipe counters"'

    async def test_publish_invalid_change(self, client: AsyncClient, admin_token, routine):
        res = await client.post(
            f"/api/v1/admin/routines/{routine.id}/notifications",
            json={"change": "deleted"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 422

    async def test_publish_unknown_routine(self, client: AsyncClient, admin_token):
        res = await client.post(
            f"/api/v1/admin/routines/{uuid.uuid4()}/notifications",
            json={"change": "created"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 404

    async def test_list_and_delete(self, client: AsyncClient, db: AsyncSession, admin_token, routine):
        n = await add_routine_notification(db, T0 + timedelta(minutes=1), routine)

        res = await client.get(ROUTINE_NOTIFY_URL, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert [item["id"] for item in res.json()["items"]] == [str(n.id)]

        res = await client.delete(f"{ROUTINE_NOTIFY_URL}/{n.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

        res = await client.get(ROUTINE_NOTIFY_URL, headers=auth_header(admin_token))
        assert res.json()["total"] == 0


@pytest_asyncio.fixture
async def mixed_feed(db: AsyncSession, admin_user, employee, routine):
    """직원 기준: 대상 공지 2건(1건 읽음), 대상 루틴 알림 1건, 가입 전 공지 1건."""
    read_one = await add_announcement(db, admin_user, T0 + timedelta(minutes=1), title="read")
    await add_announcement(db, admin_user, T0 + timedelta(minutes=2), title="unread")
    await add_routine_notification(db, T0 + timedelta(minutes=3), routine)
    await add_announcement(db, admin_user, T0 - timedelta(days=2), title="backlog")
    await read_tracker_service.mark_read(db, employee.id, NotificationType.ANNOUNCEMENT, read_one.id)
    return read_one


class TestUserNotificationStatus:
    """관리자용 사용자 알림 현황."""

    async def test_status_counts(self, client: AsyncClient, employee, admin_token, mixed_feed):
        res = await client.get(f"/api/v1/admin/users/{employee.id}/notification-status", headers=auth_header(admin_token))

        assert res.status_code == 200
        data = res.json()
        assert data["user_id"] == str(employee.id)
        assert data["read_count"] == 1
        assert data["unread_count"] == 2
        assert data["announcements"]["read"] == 1
        assert data["announcements"]["total"] == 2
        assert data["routine_notifications"]["read"] == 0
        assert data["routine_notifications"]["total"] == 1

        read_items = [item for item in data["announcements"]["items"] if item["read_at"] is not None]
        assert [item["id"] for item in read_items] == [str(mixed_feed.id)]
        assert "backlog" not in {item["title"] for item in data["announcements"]["items"]}

    async def test_unknown_user_404(self, client: AsyncClient, admin_token):
        res = await client.get(f"/api/v1/admin/users/{uuid.uuid4()}/notification-status", headers=auth_header(admin_token))
        assert res.status_code == 404
