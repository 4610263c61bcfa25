from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Mapping

from fieldform.field_types import FieldType, ValueShape
from fieldform.fields import FieldSchema
from fieldform.values import FieldValue, FlagValue, ListValue, ScalarValue

_LEADING_FLOAT = re.compile(
    r"^\s*([+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?))"
)

BOUNDED_TYPES = {FieldType.NUMBER, FieldType.RANGE}


@dataclass(frozen=True)
class ValidationError:
    field_id: str
    message: str


def empty_value(field: FieldSchema) -> FieldValue:
    shape = field.shape
    if shape is ValueShape.FLAG:
        return FlagValue(False)
    if shape is ValueShape.LIST:
        return ListValue()
    return ScalarValue("")


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def parse_leading_float(text: str) -> float | None:
    """Read the numeric prefix of ``text`` the way a browser's parseFloat does."""
    match = _LEADING_FLOAT.match(text)
    if not match:
        return None
    return float(match.group(1))


def format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_missing(field: FieldSchema, value: FieldValue) -> bool:
    if isinstance(value, FlagValue):
        return not value.checked and field.field_type is FieldType.CHECKBOX
    if isinstance(value, ListValue):
        return len(value.items) == 0
    return value.text.strip() == ""


def validate_field(field: FieldSchema, value: FieldValue | None) -> ValidationError | None:
    if value is None:
        value = empty_value(field)

    if field.required and _is_missing(field, value):
        return ValidationError(field.id, f"{field.label} is required")

    if isinstance(value, ListValue) and field.selection_limit is not None:
        if len(value.items) > field.selection_limit:
            return ValidationError(
                field.id, f"You can select at most {field.selection_limit} option(s)"
            )

    if not isinstance(value, ScalarValue) or not value.text:
        return None

    if field.regex_pattern:
        compiled = compile_pattern(field.regex_pattern)
        if compiled is not None and compiled.search(value.text) is None:
            return ValidationError(
                field.id, field.validation_message or f"Invalid {field.label}"
            )

    if field.field_type in BOUNDED_TYPES:
        number = parse_leading_float(value.text)
        if number is not None:
            if field.min_value is not None and number < field.min_value:
                return ValidationError(
                    field.id,
                    f"{field.label} must be at least {format_number(field.min_value)}",
                )
            if field.max_value is not None and number > field.max_value:
                return ValidationError(
                    field.id,
                    f"{field.label} must be at most {format_number(field.max_value)}",
                )

    return None


def validate_submission(
    fields: Iterable[FieldSchema], values: Mapping[str, FieldValue | None]
) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field in fields:
        error = validate_field(field, values.get(field.id))
        if error is not None:
            errors[error.field_id] = error.message
    return errors


def find_unknown_options(
    fields: Iterable[FieldSchema], values: Mapping[str, FieldValue | None]
) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field in fields:
        if not field.traits.needs_options:
            continue
        value = values.get(field.id)
        if isinstance(value, ListValue):
            chosen = list(value.items)
        elif isinstance(value, ScalarValue) and value.text:
            chosen = [value.text]
        else:
            continue
        labels = set(field.option_labels)
        if any(item not in labels for item in chosen):
            errors[field.id] = f"Invalid option selected for {field.label}"
    return errors
