"""
Error types shared by the event store and the HTTP layer.

Domain errors (validation, duplicate slug, configuration) carry a readable
message only. ApiError subclasses also know their HTTP status and the JSON
body the API returns for them.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


# ---------- Domain ----------

class ConfigurationError(RuntimeError):
    """Required configuration (e.g. MONGODB_URI) is missing."""


class EventValidationError(ValueError):
    """An Event record failed normalization or validation before save."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class MissingField(EventValidationError):
    pass


class EmptyList(EventValidationError):
    pass


class InvalidDate(EventValidationError):
    def __init__(self, message: str = "Invalid date format") -> None:
        super().__init__(message, field="date")


class InvalidTime(EventValidationError):
    def __init__(self, message: str = "Invalid time value") -> None:
        super().__init__(message, field="time")


class InvalidTimeFormat(EventValidationError):
    def __init__(self, message: str = "Invalid time format") -> None:
        super().__init__(message, field="time")


class DuplicateSlug(Exception):
    def __init__(self, slug: str) -> None:
        super().__init__(f'An event with slug "{slug}" already exists')
        self.slug = slug


# ---------- HTTP ----------

class ApiError(Exception):
    status_code: int = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def body(self) -> Dict[str, Any]:
        return {"message": self.message, **self.extra}


class NotFound(ApiError):
    status_code = 404

    def body(self) -> Dict[str, Any]:
        return {"error": self.message}


class MalformedForm(ApiError):
    status_code = 400

    def __init__(self, error: str) -> None:
        super().__init__("Invalid form-data", error=error)


class UnsupportedMediaType(ApiError):
    status_code = 415

    def __init__(self, supported: List[str]) -> None:
        super().__init__("Unsupported Content-Type", supported=list(supported))


class InternalError(ApiError):
    status_code = 500


class FetchFailed(ApiError):
    """500 for the read handlers, which answer with an ``error`` key only."""

    status_code = 500

    def body(self) -> Dict[str, Any]:
        return {"error": self.message}
