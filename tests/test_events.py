"""Event date filters, service and API."""

from datetime import date, datetime

import pytest
from httpx import AsyncClient

from termwatch.errors import InvalidUpdateError
from termwatch.models import Event, EventUpdate
from termwatch.services.event_service import EventService, build_event_filter, event_date_range


@pytest.fixture
def make_event(db):
    async def _make(**overrides) -> Event:
        data = {"title": "Event", "date": datetime(2024, 3, 15), "time": "10:00"}
        data.update(overrides)
        event = Event(**data)
        await event.insert()
        return event

    return _make


class TestDateRange:
    def test_exact_day_wins(self):
        assert event_date_range(day=date(2024, 3, 15), month=7, year=2020) == (
            datetime(2024, 3, 15),
            datetime(2024, 3, 16),
        )

    def test_month_of_year(self):
        assert event_date_range(month=3, year=2024) == (datetime(2024, 3, 1), datetime(2024, 4, 1))

    def test_december_rolls_into_next_year(self):
        assert event_date_range(month=12, year=2024) == (datetime(2024, 12, 1), datetime(2025, 1, 1))

    def test_year_only(self):
        assert event_date_range(year=2024) == (datetime(2024, 1, 1), datetime(2025, 1, 1))

    def test_month_without_year_is_ignored(self):
        assert event_date_range(month=3) is None

    def test_nothing(self):
        assert event_date_range() is None

    def test_windows_ignore_timezone_setting(self):
        # Event dates are stored as UTC midnight of their day, so windows are too
        assert event_date_range(day=date(2024, 3, 15)) == (datetime(2024, 3, 15), datetime(2024, 3, 16))

    def test_filter_combines_window_and_equality(self):
        assert build_event_filter(year=2024, type="court", status="scheduled") == {
            "date": {"$gte": datetime(2024, 1, 1), "$lt": datetime(2025, 1, 1)},
            "type": "court",
            "status": "scheduled",
        }


class TestEventService:
    async def test_list_sorted_by_date_then_time(self, calendar, make_event):
        afternoon = await make_event(date=datetime(2024, 3, 15), time="14:00")
        morning = await make_event(date=datetime(2024, 3, 15), time="09:30")
        day_before = await make_event(date=datetime(2024, 3, 14), time="18:00")

        events = await EventService(calendar).list_events()
        assert [e.id for e in events] == [day_before.id, morning.id, afternoon.id]

    async def test_month_window_excludes_next_month(self, calendar, make_event):
        inside = await make_event(date=datetime(2024, 3, 31, 23, 59))
        await make_event(date=datetime(2024, 4, 1))
        await make_event(date=datetime(2024, 2, 29))

        events = await EventService(calendar).list_events(month=3, year=2024)
        assert [e.id for e in events] == [inside.id]

    async def test_update_revalidates_merged_record(self, calendar, make_event):
        event = await make_event()
        # Skip request-schema validation so the merged record check is what fails
        payload = EventUpdate.model_construct(time="25:00")
        with pytest.raises(InvalidUpdateError):
            await EventService(calendar).update_event(event.id, payload)
        assert (await Event.get(event.id)).time == "10:00"

    async def test_update_mirrors_when_linked(self, calendar, make_event):
        event = await make_event(external_event_ref="gcal-5", type="court")
        out = await EventService(calendar, tz_name="UTC").update_event(event.id, EventUpdate(time="15:45"))
        assert out.time == "15:45"
        external_id, entry = calendar.updated[0]
        assert external_id == "gcal-5"
        assert entry.due_date == datetime(2024, 3, 15, 15, 45)

    async def test_delete_removes_calendar_copy(self, calendar, make_event):
        event = await make_event(external_event_ref="gcal-5")
        assert await EventService(calendar).delete_event(event.id) is True
        assert calendar.deleted == ["gcal-5"]
        assert await Event.get(event.id) is None


class TestEventsAPI:
    async def test_create(self, async_client: AsyncClient, calendar):
        response = await async_client.post(
            "/api/events",
            json={"title": "Hearing", "date": "2024-03-15", "time": "09:30", "type": "court"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Event created successfully"
        assert body["event"]["time"] == "09:30"
        assert body["event"]["status"] == "scheduled"
        assert body["event"]["location"] == ""
        assert calendar.created[0].title == "Hearing"

    @pytest.mark.parametrize("bad_time", ["9:30", "24:00", "09:60", "noon"])
    async def test_create_rejects_bad_time(self, async_client: AsyncClient, bad_time):
        response = await async_client.post(
            "/api/events", json={"title": "Hearing", "date": "2024-03-15", "time": bad_time}
        )
        assert response.status_code == 400
        assert await Event.count() == 0

    async def test_list_by_exact_date(self, async_client: AsyncClient, make_event):
        await make_event(title="on the day", date=datetime(2024, 3, 15, 9, 0))
        await make_event(title="next day", date=datetime(2024, 3, 16))
        response = await async_client.get("/api/events", params={"date": "2024-03-15"})
        assert response.status_code == 200
        assert [e["title"] for e in response.json()] == ["on the day"]

    async def test_list_by_type_and_status(self, async_client: AsyncClient, make_event):
        await make_event(title="court", type="court")
        await make_event(title="cancelled court", type="court", status="cancelled")
        await make_event(title="meeting", type="meeting")
        response = await async_client.get("/api/events", params={"type": "court", "status": "scheduled"})
        assert [e["title"] for e in response.json()] == ["court"]

    @pytest.mark.parametrize("params", [{"date": "15/03/2024"}, {"month": 13, "year": 2024}])
    async def test_list_rejects_bad_query(self, async_client: AsyncClient, params):
        response = await async_client.get("/api/events", params=params)
        assert response.status_code == 400

    async def test_update_and_delete(self, async_client: AsyncClient, make_event):
        event = await make_event()
        response = await async_client.put(f"/api/events/{event.id}", json={"location": "Room 4"})
        assert response.status_code == 200
        assert response.json()["event"]["location"] == "Room 4"

        response = await async_client.delete(f"/api/events/{event.id}")
        assert response.json() == {"message": "Event deleted successfully"}
        assert (await async_client.get(f"/api/events/{event.id}")).status_code == 404

    async def test_date_filters_with_non_utc_timezone(self, async_client: AsyncClient, settings):
        settings.timezone = "America/New_York"
        for day in ("2024-03-01", "2024-03-31", "2024-04-01"):
            response = await async_client.post("/api/events", json={"title": day, "date": day, "time": "23:30"})
            assert response.status_code == 201

        by_month = await async_client.get("/api/events", params={"month": 3, "year": 2024})
        assert [e["title"] for e in by_month.json()] == ["2024-03-01", "2024-03-31"]

        by_day = await async_client.get("/api/events", params={"date": "2024-03-01"})
        assert [e["title"] for e in by_day.json()] == ["2024-03-01"]

        by_year = await async_client.get("/api/events", params={"year": 2024})
        assert len(by_year.json()) == 3
