from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorCollection

from db import get_events_collection
from errors import ApiError, FetchFailed, InternalError, NotFound
from schemas import CreateEventResponse, ErrorResponse
from services import storage
from services.payload import read_payload

router = APIRouter(prefix="/api/event", tags=["events"])

logger = logging.getLogger(__name__)

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid form-data"},
    415: {"model": ErrorResponse, "description": "Unsupported Content-Type"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


# ---------- Read ----------


@router.get("")
async def list_events(
    include: Optional[str] = Query(
        None, description="Set to 'bookings' to join related bookings"
    ),
) -> List[Dict[str, Any]]:
    try:
        collection = await get_events_collection()
        return await storage.list_events(
            collection, include_bookings=(include == "bookings")
        )
    except Exception as exc:
        logger.exception("Error fetching events: %s", exc)
        raise FetchFailed("Failed to fetch events")


@router.get("/{slug}", responses={404: {"model": ErrorResponse}})
async def get_event(slug: str) -> Dict[str, Any]:
    try:
        collection = await get_events_collection()
        event = await storage.get_event_by_slug(collection, slug)
    except Exception as exc:
        logger.exception("Error fetching event slug=%s: %s", slug, exc)
        raise FetchFailed("Failed to fetch event")
    if event is None:
        raise NotFound("Event not found")
    return event


# ---------- Create ----------


async def _create(
    request: Request, collection: AsyncIOMotorCollection
) -> CreateEventResponse:
    try:
        payload = await read_payload(request)
        record = payload.to_create_request()
        event = await storage.create_event(collection, record)
    except ApiError:
        raise
    except Exception as exc:
        # validation and duplicate-slug failures land here too (500)
        logger.exception("Error creating event: %s", exc)
        raise InternalError("Internal server error", error=str(exc))
    return CreateEventResponse(event=event)


@router.post("", status_code=201, responses=_ERRORS)
async def create_event(
    request: Request,
    collection: AsyncIOMotorCollection = Depends(get_events_collection),
) -> CreateEventResponse:
    return await _create(request, collection)


@router.post("/{collection_slug}", status_code=201, responses=_ERRORS)
async def create_event_in(
    collection_slug: str,
    request: Request,
    collection: AsyncIOMotorCollection = Depends(get_events_collection),
) -> CreateEventResponse:
    logger.info("create via collection=%s", collection_slug)
    return await _create(request, collection)
