"""
Database connection and Beanie ODM initialization.

Beanie is an async ODM for MongoDB built on Motor and Pydantic.
We initialize it once at startup and close at shutdown; the Motor
client's connection pool is reused across requests.
"""

import logging
from typing import Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from termwatch.config import get_settings
from termwatch.models import DOCUMENT_MODELS

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None


async def connect_to_mongo() -> None:
    """
    Create Motor client and initialize Beanie with document models.
    Called once at application startup.
    """
    global _client
    settings = get_settings()
    _client = AsyncIOMotorClient(settings.mongodb_url)
    database = _client[settings.mongodb_database]

    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    logger.info("MongoDB connection established; Beanie initialized (db=%s).", settings.mongodb_database)


async def close_mongo_connection() -> None:
    """Close the Motor client on application shutdown."""
    global _client
    if _client is None:
        return
    logger.info("Closing MongoDB connection.")
    _client.close()
    _client = None


async def ping_database() -> bool:
    """True when the server answers a ping; used by the health endpoint."""
    if _client is None:
        return False
    try:
        await _client.admin.command("ping")
    except Exception as e:
        logger.warning("MongoDB ping failed: %s", e)
        return False
    return True
