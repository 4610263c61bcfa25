from __future__ import annotations

import logging
from dataclasses import dataclass, field as dc_field
from typing import Any, Mapping, Sequence

from fieldform.codec import coerce_client_value, decode_for_field, encode
from fieldform.fields import FieldSchema
from fieldform.renderer import display_value
from fieldform.validation import find_unknown_options, validate_submission
from fieldform.values import FieldValue

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    values: dict[str, FieldValue | None]
    errors: dict[str, str] = dc_field(default_factory=dict)
    wire_values: dict[str, str] = dc_field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def typed_values_from_client(
    fields: Sequence[FieldSchema], raw_values: Mapping[str, Any]
) -> dict[str, FieldValue | None]:
    known = {field.id for field in fields}
    unknown = [key for key in raw_values if str(key) not in known]
    if unknown:
        logger.debug("Ignoring values for unknown fields: %s", ", ".join(map(str, unknown)))
    normalized = {str(key): value for key, value in raw_values.items()}
    return {field.id: coerce_client_value(field, normalized.get(field.id)) for field in fields}


def encode_values(
    fields: Sequence[FieldSchema], values: Mapping[str, FieldValue | None]
) -> dict[str, str]:
    wire: dict[str, str] = {}
    for field in fields:
        value = values.get(field.id)
        if value is not None:
            wire[field.id] = encode(value)
    return wire


def check_submission(
    fields: Sequence[FieldSchema], values: Mapping[str, FieldValue | None]
) -> SubmissionResult:
    errors = validate_submission(fields, values)
    remaining = [field for field in fields if field.id not in errors]
    errors.update(find_unknown_options(remaining, values))
    if errors:
        logger.debug("Submission rejected: %d field error(s)", len(errors))
        return SubmissionResult(values=dict(values), errors=errors)
    return SubmissionResult(values=dict(values), wire_values=encode_values(fields, values))


def review_response(
    fields: Sequence[FieldSchema], wire_values: Mapping[str, str]
) -> dict[str, Any]:
    """Decode a stored response for display and re-validate it against ``fields``."""
    decoded = {
        field.id: decode_for_field(field, wire_values[field.id]) if field.id in wire_values else None
        for field in fields
    }
    return {
        "display": {
            field.id: display_value(field, wire_values.get(field.id))
            for field in fields
            if field.id in wire_values
        },
        "errors": validate_submission(fields, decoded),
    }
