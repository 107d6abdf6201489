"""
Motor client lifecycle for MongoDB.

One client per process, created at startup and closed on shutdown.
"""

from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from config.settings import config

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(
            config.mongo_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=config.mongo_timeout_ms,
        )
    return _client


def get_database() -> AsyncIOMotorDatabase:
    return get_client()[config.mongo_db_name]


async def connect_db() -> AsyncIOMotorDatabase:
    """Ping the server and create the indexes the repositories rely on."""
    db = get_database()
    await db.command("ping")
    await db["users"].create_index("email", unique=True)
    await db["profiles"].create_index("user", unique=True)
    await db["posts"].create_index([("date", -1)])
    logger.info("MongoDB connected (%s)", config.mongo_db_name)
    return db


def close_db() -> None:
    global _client
    if _client is not None:
        _client.close()
    _client = None
