from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING

from config import settings
from errors import ConfigurationError

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"
BOOKINGS_COLLECTION = "bookings"


@dataclass
class _ConnectionCache:
    """
    Process-wide connection state.
    - client: the established client, once connected.
    - pending: a shared task while the first connection is in flight.
    """

    client: Optional[AsyncIOMotorClient] = None
    pending: Optional[asyncio.Task] = None


_cache = _ConnectionCache()


def _build_client(uri: str) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        uri,
        maxPoolSize=settings.mongodb_max_pool_size,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
        tz_aware=True,
    )


async def _connect() -> AsyncIOMotorClient:
    uri = settings.mongodb_uri
    if not uri:
        raise ConfigurationError("Missing environment variable: MONGODB_URI")

    client = _build_client(uri)
    try:
        await client.admin.command("ping")
        if settings.auto_index:
            await ensure_indexes(client)
    except Exception:
        logger.exception("MongoDB connection failed")
        client.close()
        raise
    logger.info("MongoDB connected db=%s", database_name())
    return client


async def ensure_connection() -> AsyncIOMotorClient:
    """
    Return the shared client, connecting on first use.

    Concurrent first callers await the same in-flight attempt. A failed
    attempt is dropped so the next call starts a fresh one.
    """
    if _cache.client is not None:
        return _cache.client

    if _cache.pending is None:
        _cache.pending = asyncio.ensure_future(_connect())

    pending = _cache.pending
    try:
        client = await asyncio.shield(pending)
    except Exception:
        if _cache.pending is pending:
            _cache.pending = None
        raise

    _cache.client = client
    return client


def reset_connection() -> None:
    """Forget the cached client (closing it) and any pending attempt."""
    if _cache.client is not None:
        _cache.client.close()
    _cache.client = None
    _cache.pending = None


def database_name() -> str:
    if settings.mongodb_db:
        return settings.mongodb_db
    if settings.mongodb_uri:
        # mongodb://host[,host...]/<db>?options
        path = urlsplit(settings.mongodb_uri).path.lstrip("/")
        if path:
            return path
    return settings.default_db_name


async def ensure_indexes(client: AsyncIOMotorClient) -> None:
    events = client[database_name()][EVENTS_COLLECTION]
    await events.create_index([("slug", ASCENDING)], unique=True, name="slug_unique")


async def get_database() -> AsyncIOMotorDatabase:
    client = await ensure_connection()
    return client[database_name()]


async def get_events_collection() -> AsyncIOMotorCollection:
    """FastAPI dependency: connect (if needed) and hand out the events collection."""
    db = await get_database()
    return db[EVENTS_COLLECTION]
