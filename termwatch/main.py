"""
ASGI entry point for the reminders API.

Builds the FastAPI app: logging, CORS, the JSON error handlers, the routers
and the /uploads static mount. The lifespan owns the Motor client and the
Google Calendar client; new reminders and events are mirrored to the
calendar from BackgroundTasks after the create request has been answered.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from termwatch.api import assistant, documents, events, health, reminders
from termwatch.config import get_settings
from termwatch.database import close_mongo_connection, connect_to_mongo
from termwatch.errors import register_error_handlers
from termwatch.services.calendar_service import GoogleCalendarClient

# Log format and level are set here only; modules just call getLogger
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: database, upload dir and calendar client. Shutdown: close the database."""
    settings = get_settings()
    await connect_to_mongo()
    upload_path = Path(settings.upload_dir)
    upload_path.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory ready: %s", upload_path.resolve())
    app.state.calendar = GoogleCalendarClient.from_settings(settings)
    yield
    await close_mongo_connection()


def create_application() -> FastAPI:
    """Build the app; tests call this directly and override dependencies on the result."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Reminders, documents and calendar events for legal practice, mirrored to Google Calendar.",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url] if settings.frontend_url != "*" else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(reminders.router, prefix="/api/reminders", tags=["reminders"])
    app.include_router(events.router, prefix="/api/events", tags=["events"])
    app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
    app.include_router(assistant.router, prefix="/api/ai", tags=["assistant"])

    # Uploaded files, read-only
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    return app


app = create_application()
