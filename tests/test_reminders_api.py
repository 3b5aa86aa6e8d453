"""API tests for reminders endpoints."""

from datetime import datetime

from httpx import ASGITransport, AsyncClient

from termwatch.api.dependencies import get_calendar
from termwatch.main import create_application
from termwatch.models import Reminder
from termwatch.models.common import utcnow


class TestCreate:
    async def test_create_applies_defaults(self, async_client: AsyncClient, reminder_payload):
        response = await async_client.post("/api/reminders", json=reminder_payload)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Reminder created successfully"
        reminder = body["reminder"]
        assert reminder["_id"]
        assert reminder["priority"] == "medium"
        assert reminder["type"] == "manual"
        assert reminder["status"] == "active"
        assert reminder["dueDate"] == "2024-06-30T00:00:00"
        assert "documentId" not in reminder

    async def test_missing_category_is_400(self, async_client: AsyncClient, reminder_payload):
        del reminder_payload["category"]
        response = await async_client.post("/api/reminders", json=reminder_payload)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation Error"
        assert any(m.startswith("category") for m in body["messages"])
        assert await Reminder.count() == 0

    async def test_bad_enum_is_400(self, async_client: AsyncClient, reminder_payload):
        reminder_payload["priority"] = "critical"
        response = await async_client.post("/api/reminders", json=reminder_payload)
        assert response.status_code == 400

    async def test_unknown_document_is_400(self, async_client: AsyncClient, reminder_payload):
        reminder_payload["documentId"] = "0" * 24
        response = await async_client.post("/api/reminders", json=reminder_payload)
        assert response.status_code == 400
        assert response.json()["error"] == "Validation Error"

    async def test_create_mirrors_in_background(self, async_client: AsyncClient, calendar, reminder_payload):
        response = await async_client.post("/api/reminders", json=reminder_payload)
        assert response.status_code == 201
        reminder_id = response.json()["reminder"]["_id"]

        assert len(calendar.created) == 1
        assert calendar.created[0].title == "Renew office lease"
        stored = await async_client.get(f"/api/reminders/{reminder_id}")
        assert stored.json()["externalEventRef"] == "gcal-123"

    async def test_unconfigured_calendar_still_creates(self, async_client: AsyncClient, calendar, reminder_payload):
        calendar.configured = False
        response = await async_client.post("/api/reminders", json=reminder_payload)
        assert response.status_code == 201
        assert calendar.created == []
        assert "externalEventRef" not in response.json()["reminder"]

    async def test_calendar_crash_still_creates(self, async_client: AsyncClient, calendar, reminder_payload):
        calendar.raises = RuntimeError("boom")
        response = await async_client.post("/api/reminders", json=reminder_payload)
        assert response.status_code == 201
        assert await Reminder.count() == 1


class TestRead:
    async def test_list_filters(self, async_client: AsyncClient, make_reminder):
        await make_reminder(title="hit", priority="urgent")
        await make_reminder(title="wrong status", priority="urgent", status="dismissed")
        await make_reminder(title="wrong priority", priority="low")

        response = await async_client.get("/api/reminders", params={"priority": "urgent", "status": "active"})
        assert response.status_code == 200
        assert [r["title"] for r in response.json()] == ["hit"]

    async def test_list_empty(self, async_client: AsyncClient):
        response = await async_client.get("/api/reminders")
        assert response.status_code == 200
        assert response.json() == []

    async def test_today_endpoint(self, async_client: AsyncClient, make_reminder):
        await make_reminder(title="today", reminder_date=utcnow())
        await make_reminder(title="long ago", reminder_date=datetime(2020, 1, 1))
        response = await async_client.get("/api/reminders/today")
        assert response.status_code == 200
        assert [r["title"] for r in response.json()] == ["today"]

    async def test_get_populates_document(self, async_client: AsyncClient, make_reminder, stored_document):
        reminder = await make_reminder(document_id=stored_document.id)
        response = await async_client.get(f"/api/reminders/{reminder.id}")
        assert response.status_code == 200
        document = response.json()["documentId"]
        assert document["_id"] == str(stored_document.id)
        assert document["originalName"] == "lease.pdf"

    async def test_get_unknown_is_404(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/reminders/{'0' * 24}")
        assert response.status_code == 404
        assert response.json() == {"error": "Reminder not found"}

    async def test_malformed_id_is_400(self, async_client: AsyncClient):
        response = await async_client.get("/api/reminders/not-an-id")
        assert response.status_code == 400


class TestLifecycle:
    async def test_update(self, async_client: AsyncClient, make_reminder):
        reminder = await make_reminder(title="Old")
        response = await async_client.put(f"/api/reminders/{reminder.id}", json={"title": "New", "priority": "high"})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Reminder updated successfully"
        assert body["reminder"]["title"] == "New"
        assert body["reminder"]["priority"] == "high"

    async def test_update_empty_title_is_400(self, async_client: AsyncClient, make_reminder):
        reminder = await make_reminder()
        response = await async_client.put(f"/api/reminders/{reminder.id}", json={"title": ""})
        assert response.status_code == 400

    async def test_dismiss(self, async_client: AsyncClient, make_reminder):
        reminder = await make_reminder()
        response = await async_client.put(f"/api/reminders/{reminder.id}/dismiss")
        assert response.status_code == 200
        assert response.json()["reminder"]["status"] == "dismissed"

    async def test_snooze(self, async_client: AsyncClient, make_reminder):
        reminder = await make_reminder()
        response = await async_client.put(
            f"/api/reminders/{reminder.id}/snooze", json={"snoozeUntil": "2024-06-05T09:00:00Z"}
        )
        assert response.status_code == 200
        body = response.json()["reminder"]
        assert body["status"] == "snoozed"
        assert body["snoozeUntil"] == "2024-06-05T09:00:00"
        assert body["reminderDate"] == "2024-06-05T09:00:00"

    async def test_snooze_bad_date_is_400(self, async_client: AsyncClient, make_reminder):
        reminder = await make_reminder()
        response = await async_client.put(f"/api/reminders/{reminder.id}/snooze", json={"snoozeUntil": "next week"})
        assert response.status_code == 400
        stored = await Reminder.get(reminder.id)
        assert stored.status == "active"

    async def test_snooze_unknown_is_404(self, async_client: AsyncClient):
        response = await async_client.put(
            f"/api/reminders/{'0' * 24}/snooze", json={"snoozeUntil": "2024-06-05T09:00:00Z"}
        )
        assert response.status_code == 404

    async def test_delete(self, async_client: AsyncClient, calendar, make_reminder):
        reminder = await make_reminder(external_event_ref="gcal-7")
        response = await async_client.delete(f"/api/reminders/{reminder.id}")
        assert response.status_code == 200
        assert response.json() == {"message": "Reminder deleted successfully"}
        assert calendar.deleted == ["gcal-7"]

        again = await async_client.delete(f"/api/reminders/{reminder.id}")
        assert again.status_code == 404


class TestServerErrors:
    async def test_unreadable_stored_record_is_500(self, db, calendar, settings):
        await Reminder.get_motor_collection().insert_one(
            {"title": "broken", "due_date": datetime(2024, 6, 1), "reminder_date": datetime(2024, 5, 1),
             "category": "legal", "priority": "whenever"}
        )
        app = create_application()
        app.dependency_overrides[get_calendar] = lambda: calendar
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/reminders")
        assert response.status_code == 500
        assert response.json()["error"] == "Internal Server Error"
