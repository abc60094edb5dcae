"""
Inbound create payloads.

A create request is either a JSON body or multipart form fields. The
content type decides which one is read; both end up as an EventCreate.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from fastapi import Request

from errors import MalformedForm, UnsupportedMediaType
from models import LIST_FIELDS
from schemas import EventCreate

logger = logging.getLogger(__name__)

JSON_TYPE = "application/json"
FORM_TYPE = "multipart/form-data"
SUPPORTED_TYPES = [JSON_TYPE, FORM_TYPE]


@dataclass
class JsonPayload:
    body: Any

    def to_create_request(self) -> EventCreate:
        return EventCreate.model_validate(self.body)


@dataclass
class FormPayload:
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_create_request(self) -> EventCreate:
        return EventCreate.model_validate(self.fields)


Payload = Union[JsonPayload, FormPayload]


async def read_payload(request: Request) -> Payload:
    content_type = request.headers.get("content-type") or ""

    if JSON_TYPE in content_type:
        return JsonPayload(body=await request.json())

    if FORM_TYPE in content_type:
        try:
            form = await request.form()
        except Exception as exc:
            logger.warning("unparseable form-data: %s", exc)
            raise MalformedForm(str(exc) or exc.__class__.__name__) from exc

        fields: Dict[str, Any] = {}
        for key in form.keys():
            values = form.getlist(key)
            if key in LIST_FIELDS and len(values) > 1:
                fields[key] = values
            else:
                fields[key] = values[-1]
        return FormPayload(fields=fields)

    raise UnsupportedMediaType(SUPPORTED_TYPES)
