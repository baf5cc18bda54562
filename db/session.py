"""
MongoDB access for user accounts.

One client per process, created on first use and closed by the app
lifespan. Only the ``users`` collection lives here; execution results are
not stored.
"""

import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.server_api import ServerApi

from core.config import settings

logger = logging.getLogger(__name__)

_client: AsyncMongoClient | None = None


def mongo_client_options() -> dict:
    return {
        "server_api": ServerApi(version="1", strict=True, deprecation_errors=True),
        "serverSelectionTimeoutMS": settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        "appname": settings.PROJECT_NAME,
        "tz_aware": True,
    }


async def get_client() -> AsyncMongoClient:
    global _client

    if _client is None:
        client = AsyncMongoClient(settings.DATABASE_URI, **mongo_client_options())
        # fail fast on a bad URI instead of on the first login
        await client.admin.command({"ping": 1})
        logger.info("Connected to MongoDB database %s", settings.DATABASE_NAME)
        _client = client

    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None


async def get_db() -> AsyncDatabase:
    client = await get_client()
    return client.get_database(settings.DATABASE_NAME)


async def ensure_indexes(db: AsyncDatabase) -> None:
    """Emails are stored lowercased, so a plain unique index is enough."""
    await db.users.create_index("email", unique=True, name="users_email_unique")
