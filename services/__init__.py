"""
Service package marker.

Intentionally empty to avoid heavy imports at package import time.
Import the concrete modules directly, e.g.:

    from services.normalize import validate_and_normalize
    from services.storage import create_event, list_events, get_event_by_slug
    from services.payload import read_payload
"""
__all__: list[str] = []
