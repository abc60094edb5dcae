import asyncio
import json

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import db
from config import settings
from errors import ConfigurationError
from main import app
from services import storage


def _count(mongo, query=None):
    return asyncio.run(mongo["events"].count_documents(query or {}))


def test_create_event_from_json(api, mongo, event_payload):
    resp = api.post("/api/event", json=event_payload)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Event created successfully"

    event = body["event"]
    assert event["slug"] == "cloud-next-2026"
    assert event["date"] == "2026-04-22"
    assert event["time"] == "09:00"
    assert event["agenda"] == ["Opening keynote", "Developer keynote"]
    assert isinstance(event["_id"], str)
    assert event["createdAt"] and event["updatedAt"]
    assert _count(mongo) == 1


def test_unknown_fields_are_dropped(api, mongo, event_payload):
    resp = api.post("/api/event", json={**event_payload, "isAdmin": True})
    assert resp.status_code == 201
    stored = asyncio.run(mongo["events"].find_one({"slug": "cloud-next-2026"}))
    assert "isAdmin" not in stored


def test_create_event_from_multipart_form(api, mongo, event_payload):
    form = {k: v for k, v in event_payload.items() if k not in ("agenda", "tags")}
    form["agenda"] = ["Talk 1", "  ", "Talk 2"]
    form["tags"] = json.dumps(["python", "web"])
    resp = api.post(
        "/api/event",
        data=form,
        files={"poster": ("poster.txt", b"not really an image", "text/plain")},
    )
    assert resp.status_code == 201, resp.text
    event = resp.json()["event"]
    assert event["agenda"] == ["Talk 1", "Talk 2"]
    assert event["tags"] == ["python", "web"]
    assert "poster" not in event


def test_validation_failure_is_500_and_nothing_stored(api, mongo, event_payload):
    resp = api.post("/api/event", json={**event_payload, "agenda": ["  "]})
    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == "Internal server error"
    assert body["error"] == "Agenda is required and cannot be empty"
    assert _count(mongo) == 0


def test_invalid_time_is_500(api, mongo, event_payload):
    resp = api.post("/api/event", json={**event_payload, "time": "13pm"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Invalid time hour"


def test_duplicate_title_fails_on_second_write(api, mongo, event_payload):
    assert api.post("/api/event", json=event_payload).status_code == 201
    resp = api.post("/api/event", json={**event_payload, "venue": "Somewhere else"})
    assert resp.status_code == 500
    assert _count(mongo) == 1


def test_plain_text_is_415(api, mongo):
    resp = api.post(
        "/api/event",
        content=b'{"title": "looks like json"}',
        headers={"content-type": "text/plain"},
    )
    assert resp.status_code == 415
    body = resp.json()
    assert body["message"] == "Unsupported Content-Type"
    assert body["supported"] == ["application/json", "multipart/form-data"]
    assert _count(mongo) == 0


def test_unparseable_form_is_400(api, mongo):
    resp = api.post(
        "/api/event",
        content=b"garbage",
        headers={"content-type": "multipart/form-data"},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid form-data"


def test_malformed_json_is_500(api, mongo):
    resp = api.post(
        "/api/event",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 500


def test_list_events(api, mongo, event_payload):
    api.post("/api/event", json=event_payload)
    api.post("/api/event", json={**event_payload, "title": "PyCon US 2026"})

    resp = api.get("/api/event")
    assert resp.status_code == 200
    slugs = [e["slug"] for e in resp.json()]
    assert slugs == ["cloud-next-2026", "pycon-us-2026"]


def test_list_events_empty(api, mongo):
    resp = api.get("/api/event")
    assert resp.status_code == 200
    assert resp.json() == []


def test_list_events_with_bookings(api, mongo, event_payload):
    created = api.post("/api/event", json=event_payload).json()["event"]
    asyncio.run(
        mongo["bookings"].insert_one(
            {"eventId": ObjectId(created["_id"]), "email": "ada@example.com"}
        )
    )

    resp = api.get("/api/event", params={"include": "bookings"})
    assert resp.status_code == 200
    [event] = resp.json()
    assert [b["email"] for b in event["bookings"]] == ["ada@example.com"]
    assert event["bookings"][0]["eventId"] == created["_id"]


def test_get_event_by_slug(api, mongo, event_payload):
    api.post("/api/event", json=event_payload)
    resp = api.get("/api/event/cloud-next-2026")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Cloud Next 2026"


def test_get_unknown_slug_is_404(api, mongo, event_payload):
    api.post("/api/event", json=event_payload)
    resp = api.get("/api/event/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Event not found"}


def test_create_via_collection_path(api, mongo, event_payload):
    resp = api.post("/api/event/conferences", json=event_payload)
    assert resp.status_code == 201
    assert resp.json()["event"]["slug"] == "cloud-next-2026"

    resp = api.post("/api/event/conferences", content=b"x", headers={"content-type": "text/csv"})
    assert resp.status_code == 415


def test_service_endpoints(api):
    assert api.get("/").json() == {"ok": True, "service": "devevents-api"}
    assert api.get("/health").json() == {"status": "ok"}


def test_read_handlers_hide_connection_errors(monkeypatch):
    async def unreachable():
        raise ConnectionError("No servers found yet, Topology: host-a:27017")

    monkeypatch.setattr(db, "_connect", unreachable)
    client = TestClient(app)

    resp = client.get("/api/event")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch events"}

    resp = client.get("/api/event/cloud-next-2026")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch event"}
    assert "host-a" not in resp.text


def test_read_handlers_report_query_failures(api, monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("cursor id 42 not found")

    monkeypatch.setattr(storage, "list_events", broken)
    monkeypatch.setattr(storage, "get_event_by_slug", broken)

    resp = api.get("/api/event")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch events"}

    resp = api.get("/api/event/cloud-next-2026")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch event"}


def test_app_refuses_to_start_without_mongodb_uri(monkeypatch):
    monkeypatch.setattr(settings, "mongodb_uri", None)
    with pytest.raises(ConfigurationError, match="MONGODB_URI"):
        with TestClient(app):
            pass
