from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventCreate(BaseModel):
    """
    Typed create request. Every field is optional here: presence and
    non-emptiness are enforced by the pre-save normalizer so that all
    failures report the same way.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    image: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[str] = None
    audience: Optional[str] = None
    agenda: Optional[List[str]] = None
    organizer: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("agenda", "tags", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> Any:
        # Form posts send either repeated keys or one value; a single value
        # may itself be a JSON-encoded array.
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                try:
                    decoded = json.loads(s)
                except json.JSONDecodeError:
                    return [v]
                if isinstance(decoded, list):
                    return decoded
            return [v]
        return v


class CreateEventResponse(BaseModel):
    message: str = "Event created successfully"
    event: Dict[str, Any]


class ErrorResponse(BaseModel):
    message: Optional[str] = None
    error: Optional[str] = None
    supported: List[str] = Field(default_factory=list)
