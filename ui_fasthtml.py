from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import requests
from fasthtml.common import *

from config import settings

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# Config
# -------------------------------------------------------------------

API = settings.base_url.rstrip("/")

_session = requests.Session()


def _get_json(path: str, *, timeout: Optional[float] = None) -> Union[Dict[str, Any], List[Any], None]:
    """GET an API path and return the decoded JSON, or None on any failure."""
    url = f"{API}{path}"
    try:
        resp = _session.get(url, timeout=timeout or settings.http_timeout_seconds)
    except requests.RequestException as e:
        logger.warning("GET %s failed: %s", url, e)
        return None
    if not resp.ok:
        logger.info("GET %s -> %s", url, resp.status_code)
        return None
    try:
        return resp.json()
    except ValueError:
        logger.warning("Non-JSON response from %s", url)
        return None


# -------------------------------------------------------------------
# API helpers
# -------------------------------------------------------------------

def fetch_events() -> List[Dict[str, Any]]:
    data = _get_json("/api/event")
    if not isinstance(data, list):
        return []
    # only well-formed event objects get a card
    return [e for e in data if isinstance(e, dict) and "title" in e]


def fetch_event(slug: str) -> Optional[Dict[str, Any]]:
    data = _get_json(f"/api/event/{slug}")
    if isinstance(data, dict) and "title" in data:
        return data
    return None


# -------------------------------------------------------------------
# FastHTML app + layout
# -------------------------------------------------------------------

app, rt = fast_app(pico=True)  # PicoCSS + sensible defaults


def shell(content: Any) -> Any:
    return Div(
        Header(A(Strong("DevEvents"), href="/"), cls="container py-2"),
        Main(content, cls="container"),
        Footer(Small("Hackathons, Meetups, and Conferences"), cls="container mt-4"),
    )


def event_card(e: Dict[str, Any]) -> Any:
    title = e.get("title") or "Untitled Event"
    slug = e.get("slug")
    when = " • ".join(p for p in [e.get("date"), e.get("time")] if p)

    return Article(
        Img(src=e["image"], alt=title, cls="poster") if e.get("image") else None,
        Small(f"📍 {e['location']}") if e.get("location") else None,
        H3(A(title, href=f"/events/{slug}") if slug else title),
        Small(f"🕐 {when}") if when else None,
        cls="card",
    )


def event_detail(e: Dict[str, Any]) -> Any:
    facts = [
        ("Venue", e.get("venue")),
        ("Location", e.get("location")),
        ("Date", e.get("date")),
        ("Time", e.get("time")),
        ("Mode", e.get("mode")),
        ("Audience", e.get("audience")),
        ("Organizer", e.get("organizer")),
    ]
    return Section(
        H1(e.get("title") or "Untitled Event"),
        P(e.get("description")) if e.get("description") else None,
        Img(src=e["image"], alt=e.get("title", "")) if e.get("image") else None,
        H3("Overview"),
        P(e.get("overview") or ""),
        Ul(*[Li(Strong(f"{label}: "), value) for label, value in facts if value]),
        H3("Agenda"),
        Ul(*[Li(item) for item in e.get("agenda") or []]),
        Div(*[Span(f"#{t}", cls="tag") for t in e.get("tags") or []], cls="tags"),
    )


def listing(events: List[Dict[str, Any]]) -> Any:
    return Section(
        H1("The Hub for Every Dev", Br(), "Event You Can't Miss", cls="text-center"),
        P("Hackathons, Meetups, and Conferences, All in One Place", cls="text-center mt-5"),
        A("Explore Events", href="#events", role="button", id="explore-btn"),
        Div(
            H3("Featured Events"),
            Ul(
                *[Li(event_card(e), cls="list-none") for e in events],
                cls="events",
            ),
            id="events",
            cls="mt-20 space-y-7",
        ),
    )


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------

@rt("/")
def index() -> Any:
    return Title("DevEvents"), shell(listing(fetch_events()))


@rt("/events/{slug}")
def event_page(slug: str) -> Any:
    event = fetch_event(slug)
    if event is None:
        body = Section(
            H2("Event not found"),
            P(f"No event matches “{slug}”."),
            A("← Back to events", href="/"),
        )
        return Title("Not found · DevEvents"), shell(body)
    return Title(f"{event['title']} · DevEvents"), shell(event_detail(event))


# -------------------------------------------------------------------
# Entry point
# -------------------------------------------------------------------

if __name__ == "__main__":
    # Run with:  python ui_fasthtml.py
    serve()
