import asyncio
import os

import pytest

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/devevents_test")
os.environ.setdefault("BASE_URL", "http://api.test")

from fastapi.testclient import TestClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

import db  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_connection_cache():
    db._cache.client = None
    db._cache.pending = None
    yield
    db._cache.client = None
    db._cache.pending = None


@pytest.fixture
def mongo():
    """In-memory MongoDB installed as the already-established connection."""
    client = AsyncMongoMockClient()
    asyncio.run(db.ensure_indexes(client))
    db._cache.client = client
    return client[db.database_name()]


@pytest.fixture
def api(mongo):
    from main import app

    return TestClient(app)


@pytest.fixture
def event_payload():
    return {
        "title": "Cloud Next 2026",
        "description": "Google Cloud's annual conference.",
        "overview": "Three days of keynotes, labs and sessions.",
        "image": "/images/event1.png",
        "venue": "Mandalay Bay Convention Center",
        "location": "Las Vegas, NV, USA",
        "date": "April 22, 2026",
        "time": "9am",
        "mode": "hybrid",
        "audience": "Developers, architects, IT leaders",
        "agenda": ["Opening keynote", "  ", "Developer keynote"],
        "organizer": "Google Cloud",
        "tags": ["cloud", " ai ", "devops"],
    }
