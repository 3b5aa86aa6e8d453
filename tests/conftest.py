"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
import pytest_asyncio
from beanie import init_beanie
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from termwatch.api.dependencies import get_calendar
from termwatch.config import get_settings
from termwatch.main import create_application
from termwatch.models import DOCUMENT_MODELS, Document, Reminder
from termwatch.services.calendar_service import CalendarSyncResult


class FakeCalendar:
    """Records every call; each method's result (or exception) is configurable."""

    def __init__(self, configured: bool = True):
        self.configured = configured
        self.created = []
        self.updated = []
        self.deleted = []
        self.create_result = CalendarSyncResult.success("gcal-123")
        self.update_result = CalendarSyncResult.success("gcal-123")
        self.delete_result = CalendarSyncResult.success("gcal-123")
        self.raises = None

    async def create_event(self, entry):
        self.created.append(entry)
        if self.raises:
            raise self.raises
        return self.create_result

    async def update_event(self, external_id, entry):
        self.updated.append((external_id, entry))
        if self.raises:
            raise self.raises
        return self.update_result

    async def delete_event(self, external_id):
        self.deleted.append(external_id)
        if self.raises:
            raise self.raises
        return self.delete_result


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Fresh settings per test: uploads under tmp_path, UTC, no Google credentials."""
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.delenv("GOOGLE_CLIENT_EMAIL", raising=False)
    monkeypatch.delenv("GOOGLE_PRIVATE_KEY", raising=False)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db(settings):
    """In-memory MongoDB with Beanie initialized on all document models."""
    client = AsyncMongoMockClient()
    await init_beanie(database=client.get_database("termwatch_test"), document_models=DOCUMENT_MODELS)
    yield client


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest_asyncio.fixture
async def async_client(db, calendar) -> AsyncGenerator[AsyncClient, None]:
    """Async client with the calendar client replaced by a fake."""
    app = create_application()
    app.dependency_overrides[get_calendar] = lambda: calendar
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def reminder_payload() -> dict:
    """Sample reminder body as the frontend sends it."""
    return {
        "title": "Renew office lease",
        "description": "Notice period is 60 days",
        "dueDate": "2024-06-30T00:00:00Z",
        "reminderDate": "2024-06-01T00:00:00Z",
        "category": "legal",
    }


@pytest_asyncio.fixture
async def stored_document(db) -> Document:
    doc = Document(
        filename="a1b2c3.pdf",
        original_name="lease.pdf",
        description="Office lease",
        category="contract",
        tags=["lease"],
        size=1024,
        mimetype="application/pdf",
    )
    await doc.insert()
    return doc


@pytest.fixture
def make_reminder(db):
    """Factory inserting a reminder with sensible defaults."""

    async def _make(**overrides) -> Reminder:
        data = {
            "title": "Reminder",
            "due_date": datetime(2024, 6, 30),
            "reminder_date": datetime(2024, 6, 1),
            "category": "legal",
        }
        data.update(overrides)
        reminder = Reminder(**data)
        await reminder.insert()
        return reminder

    return _make
