"""
Event normalization and validation, run on every record right before it is
written. All functions are pure; failures raise an EventValidationError
subclass carrying a human readable message.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from dateutil import parser as duparser

from errors import EmptyList, InvalidDate, InvalidTime, InvalidTimeFormat, MissingField
from models import LIST_FIELDS, REQUIRED_STRING_FIELDS, Event

_non_slug_re = re.compile(r"[^a-z0-9]+")
_edge_hyphens_re = re.compile(r"^-+|-+$")
_double_hyphen_re = re.compile(r"--+")

_clock_re = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$", re.ASCII)
_meridiem_re = re.compile(r"^(\d{1,2})\s*(am|pm)$", re.ASCII)

# two distinct fill-in defaults; a year that differs between them was not in the input
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 1, 1)

_STRING_FIELDS = ("slug",) + REQUIRED_STRING_FIELDS


def slugify(title: str) -> str:
    s = (title or "").lower().strip()
    s = _non_slug_re.sub("-", s)
    s = _edge_hyphens_re.sub("", s)
    return _double_hyphen_re.sub("-", s)


def normalize_date(value: str) -> str:
    """
    Parse a free-form date and return it as ``YYYY-MM-DD`` (UTC fields).

    The input must name a year; dateutil would otherwise fill the gaps from
    today's date (``"9am"``, ``"Tuesday"``, ``"3"``).
    """
    trimmed = (value or "").strip()
    try:
        dt = duparser.parse(trimmed, default=_DEFAULT_A)
        other = duparser.parse(trimmed, default=_DEFAULT_B)
    except (ValueError, OverflowError) as exc:
        raise InvalidDate() from exc
    if dt.year != other.year:
        raise InvalidDate()
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"


def normalize_time(value: str) -> str:
    """
    Normalize a time of day to 24h ``HH:MM``.

    Accepts ``H:MM``, ``HH:MM``, ``HH:MM:SS`` (seconds dropped) and
    ``H am``/``HHpm`` style inputs.
    """
    v = (value or "").strip().lower()

    m = _clock_re.match(v)
    if m:
        hour, minute = int(m.group(1)), int(m.group(2))
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise InvalidTime("Invalid time value")
        return f"{hour:02d}:{minute:02d}"

    m = _meridiem_re.match(v)
    if m:
        hour, suffix = int(m.group(1)), m.group(2)
        if not 1 <= hour <= 12:
            raise InvalidTime("Invalid time hour")
        if suffix == "pm" and hour != 12:
            hour += 12
        if suffix == "am" and hour == 12:
            hour = 0
        return f"{hour:02d}:00"

    raise InvalidTimeFormat("Invalid time format")


def clean_list(items: Optional[Iterable[Any]]) -> List[str]:
    """Trim every entry and drop the ones left empty."""
    if not items:
        return []
    out: List[str] = []
    for item in items:
        s = str(item).strip() if item is not None else ""
        if s:
            out.append(s)
    return out


def _as_mapping(record: Any) -> Mapping[str, Any]:
    if record is None:
        return {}
    if hasattr(record, "model_dump"):
        return record.model_dump(by_alias=True)
    return record


def _changed(key: str, data: Mapping[str, Any], previous: Mapping[str, Any]) -> bool:
    return not previous or data.get(key) != previous.get(key)


def validate_and_normalize(record: Any, previous: Any = None) -> Event:
    """
    Turn a candidate record into a normalized Event or raise.

    ``previous`` is the last stored state of the same record, if any. The
    slug is re-derived when it is missing or the title changed, and date/time
    are re-normalized only when they changed. Checks run in a fixed order so
    the reported error is always the first violated constraint.
    """
    raw = _as_mapping(record)
    prev = _as_mapping(previous)

    data = {}
    for key in _STRING_FIELDS:
        value = raw.get(key)
        data[key] = value.strip() if isinstance(value, str) else ""

    if _changed("title", data, prev) or not data["slug"]:
        data["slug"] = slugify(data["title"])

    if data["date"] and _changed("date", data, prev):
        data["date"] = normalize_date(data["date"])
    if data["time"] and _changed("time", data, prev):
        data["time"] = normalize_time(data["time"])

    for key in LIST_FIELDS:
        data[key] = clean_list(raw.get(key))

    for key in REQUIRED_STRING_FIELDS:
        if not data[key]:
            raise MissingField(f'Field "{key}" is required and cannot be empty', field=key)

    if not data["agenda"]:
        raise EmptyList("Agenda is required and cannot be empty", field="agenda")
    if not data["tags"]:
        raise EmptyList("Tags are required and cannot be empty", field="tags")

    return Event(**data)
