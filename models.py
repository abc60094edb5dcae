from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Order in which required string fields are re-checked before a save.
REQUIRED_STRING_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)

LIST_FIELDS = ("agenda", "tags")


class Event(BaseModel):
    """Normalized Event document as stored in the ``events`` collection."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM, 24h
    mode: str  # online / offline / hybrid
    audience: str
    agenda: List[str]
    organizer: str
    tags: List[str]
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
