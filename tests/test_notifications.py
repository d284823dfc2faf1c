"""Tests for the notification sink and inbox endpoints."""

import pytest

from conftest import auth
from mentormatch.events.notifications import build_notification_body, emit_notification, push_event
from mentormatch.models.enums import NotificationKind


class _BrokenRegistry:
    def publish(self, user_id, event):
        raise RuntimeError("socket gone")


class _FailingSession:
    rolled_back = False

    def add(self, row):
        pass

    async def commit(self):
        raise RuntimeError("database unavailable")

    async def rollback(self):
        self.rolled_back = True


def test_notification_bodies():
    body = build_notification_body(NotificationKind.MENTORSHIP_APPROVED, {"mentor_name": "Dr. Rao"})
    assert body.startswith("Dr. Rao has approved")
    body = build_notification_body(NotificationKind.MILESTONE_REJECTED, {"milestone_title": "Survey"})
    assert body == 'Milestone "Survey" needs revision.'


def test_push_event_is_best_effort():
    assert push_event(None, "usr_1", "project_updated", {}) == 0
    assert push_event(_BrokenRegistry(), "usr_1", "project_updated", {}) == 0


@pytest.mark.asyncio
async def test_emit_without_store_still_pushes(registry):
    handle = registry.open_handle()
    registry.join("usr_1", handle)
    result = await emit_notification(
        NotificationKind.MENTORSHIP_REJECTED,
        "usr_1",
        {"mentor_name": "Dr. Rao", "mentor_id": "usr_m"},
        registry=registry,
    )
    assert result == {"notification_id": None, "deliveries": 1}
    event = handle.get_nowait()
    assert event["type"] == "notification"
    assert event["severity"] == "warning"
    assert event["mentor_id"] == "usr_m"


@pytest.mark.asyncio
async def test_emit_store_failure_is_swallowed(registry):
    session = _FailingSession()
    handle = registry.open_handle()
    registry.join("usr_1", handle)
    result = await emit_notification(
        NotificationKind.NEW_MESSAGE, "usr_1", {"sender_name": "Asha"}, db_session=session, registry=registry
    )
    assert result["notification_id"] is None
    assert result["deliveries"] == 1
    assert session.rolled_back


@pytest.mark.asyncio
async def test_inbox_endpoints(client, make_student, make_mentor, make_project):
    student, mentor = await make_student(), await make_mentor()
    await make_project(student, mentor_id=mentor["user_id"])
    await make_project(student, mentor_id=mentor["user_id"], title="Second")

    notes = (await client.get("/api/v1/notifications", headers=auth(mentor))).json()
    assert len(notes) == 2
    assert all(not n["read"] for n in notes)

    response = await client.post(f"/api/v1/notifications/{notes[0]['notification_id']}/read", headers=auth(mentor))
    assert response.status_code == 200
    assert response.json()["read"] is True

    unread = (await client.get("/api/v1/notifications", params={"unread_only": True}, headers=auth(mentor))).json()
    assert [n["notification_id"] for n in unread] == [notes[1]["notification_id"]]

    response = await client.post("/api/v1/notifications/read-all", headers=auth(mentor))
    assert response.json() == {"updated": 1}


@pytest.mark.asyncio
async def test_cannot_read_someone_elses_notification(client, make_student, make_mentor, make_project):
    student, mentor = await make_student(), await make_mentor()
    await make_project(student, mentor_id=mentor["user_id"])
    note = (await client.get("/api/v1/notifications", headers=auth(mentor))).json()[0]
    response = await client.post(f"/api/v1/notifications/{note['notification_id']}/read", headers=auth(student))
    assert response.status_code == 404
