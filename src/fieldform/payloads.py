from __future__ import annotations

import math
from typing import Any

from jsonschema import Draft7Validator

from fieldform.config import FORM_STATUSES

_NUMBER_OR_NULL = {"type": ["number", "string", "null"]}

FIELD_PAYLOAD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": ["string", "integer"]},
        "label": {"type": "string", "minLength": 1, "maxLength": 256},
        "type": {"type": "string", "maxLength": 100},
        "required": {"type": "boolean"},
        "placeholder": {"type": ["string", "null"]},
        "helpText": {"type": ["string", "null"]},
        "regexPattern": {"type": ["string", "null"]},
        "validationMessage": {"type": ["string", "null"]},
        "allowMultiple": {"type": ["boolean", "null"]},
        "selectionLimit": {"type": ["integer", "null"], "minimum": 0},
        "minValue": _NUMBER_OR_NULL,
        "maxValue": _NUMBER_OR_NULL,
        "defaultValue": {"type": ["string", "null"]},
        "options": {
            "anyOf": [
                {"type": "string"},
                {"type": "null"},
                {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "label": {"type": "string", "minLength": 1, "maxLength": 256},
                            "isDefault": {"type": "boolean"},
                        },
                        "required": ["label"],
                    },
                },
            ]
        },
        "order": {"type": "integer"},
    },
    "required": ["label", "type"],
}

FORM_PAYLOAD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1, "maxLength": 256},
        "description": {"type": ["string", "null"]},
        "status": {"enum": list(FORM_STATUSES)},
        "fields": {"type": "array", "items": FIELD_PAYLOAD_SCHEMA},
    },
    "required": ["name"],
}

FORM_UPDATE_SCHEMA: dict[str, Any] = {
    **FORM_PAYLOAD_SCHEMA,
    "required": [],
}

SUBMISSION_PAYLOAD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "values": {
            "type": "object",
            "additionalProperties": {
                "anyOf": [
                    {"type": ["string", "boolean", "number", "null"]},
                    {"type": "array", "items": {"type": "string"}},
                ]
            },
        },
        "rating": {"type": ["integer", "null"], "minimum": 1, "maximum": 5},
        "comments": {"type": ["string", "null"], "maxLength": 5000},
    },
    "required": ["values"],
}


def payload_errors(schema: dict[str, Any], payload: Any) -> list[str]:
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.path))
    messages: list[str] = []
    for error in errors:
        location = ".".join(str(part) for part in error.path)
        messages.append(f"{location}: {error.message}" if location else error.message)
    return messages


def _bound(value: Any) -> float | None:
    if value in (None, ""):
        return None
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(value)
    return number


def field_definition_errors(raw_fields: list[dict[str, Any]]) -> list[str]:
    errors: list[str] = []
    seen_ids: set[str] = set()
    for index, raw in enumerate(raw_fields, start=1):
        loc = f"fields.{index}"
        raw_id = raw.get("id")
        if raw_id not in (None, ""):
            field_id = str(raw_id)
            if field_id in seen_ids:
                errors.append(f"{loc}: duplicate field id ({field_id})")
            seen_ids.add(field_id)
        try:
            low = _bound(raw.get("minValue"))
            high = _bound(raw.get("maxValue"))
        except (TypeError, ValueError):
            errors.append(f"{loc}: minValue/maxValue must be finite numbers")
            continue
        if low is not None and high is not None and low > high:
            errors.append(f"{loc}: minValue is greater than maxValue")
    return errors
