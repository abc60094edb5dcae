# services/storage.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from db import BOOKINGS_COLLECTION
from errors import DuplicateSlug
from models import Event
from schemas import EventCreate
from services.normalize import validate_and_normalize

logger = logging.getLogger(__name__)


# ---------- Serialization ----------

def to_public(value: Any) -> Any:
    """Make a stored document JSON-friendly (ObjectIds -> str)."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: to_public(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_public(v) for v in value]
    return value


# ---------- Pre-save hook ----------

def before_save(
    record: EventCreate | Dict[str, Any],
    previous: Optional[Dict[str, Any]] = None,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Normalize + validate a record and stamp its timestamps.
    Raises EventValidationError; nothing is written when it does.
    """
    event: Event = validate_and_normalize(record, previous)
    ts = now or datetime.now(timezone.utc)
    doc = event.to_document()
    doc["createdAt"] = (previous or {}).get("createdAt") or ts
    doc["updatedAt"] = ts
    return doc


# ---------- Events ----------

async def create_event(
    collection: AsyncIOMotorCollection, record: EventCreate
) -> Dict[str, Any]:
    doc = before_save(record)
    try:
        result = await collection.insert_one(doc)
    except DuplicateKeyError as exc:
        raise DuplicateSlug(doc["slug"]) from exc
    doc["_id"] = result.inserted_id
    logger.info("event created slug=%s id=%s", doc["slug"], result.inserted_id)
    return to_public(doc)


async def list_events(
    collection: AsyncIOMotorCollection, *, include_bookings: bool = False
) -> List[Dict[str, Any]]:
    if include_bookings:
        cursor = collection.aggregate(
            [
                {
                    "$lookup": {
                        "from": BOOKINGS_COLLECTION,
                        "localField": "_id",
                        "foreignField": "eventId",
                        "as": "bookings",
                    }
                }
            ]
        )
    else:
        cursor = collection.find()
    docs = await cursor.to_list(length=None)
    return [to_public(d) for d in docs]


async def get_event_by_slug(
    collection: AsyncIOMotorCollection, slug: str
) -> Optional[Dict[str, Any]]:
    doc = await collection.find_one({"slug": slug})
    if not doc:
        return None
    return to_public(doc)
