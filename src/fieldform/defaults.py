from __future__ import annotations

import math
from typing import Iterable

from fieldform.field_types import FieldType, ValueShape
from fieldform.fields import FieldSchema
from fieldform.values import FieldValue, FlagValue, ListValue, ScalarValue

RANGE_DEFAULT_MIN = 0
RANGE_DEFAULT_MAX = 10


def range_bounds(field: FieldSchema) -> tuple[float, float]:
    low = field.min_value if field.min_value is not None else RANGE_DEFAULT_MIN
    high = field.max_value if field.max_value is not None else RANGE_DEFAULT_MAX
    return low, high


def _default_options(field: FieldSchema) -> ListValue:
    return ListValue.of(option.label for option in field.options if option.is_default)


def resolve_default(field: FieldSchema) -> FieldValue | None:
    """Seed value for a field, or None when the field starts out empty.

    The result is only a starting point for a freshly loaded form; callers
    must not re-resolve after the respondent has begun editing.
    """
    field_type = field.field_type
    shape = field.shape

    if field.default_value is not None:
        if field_type is FieldType.CHECKBOX:
            return FlagValue(field.default_value == "true")
        if shape is ValueShape.LIST:
            return _default_options(field)
        return ScalarValue(field.default_value)

    if shape is ValueShape.LIST:
        return _default_options(field)

    if field_type is FieldType.CHECKBOX:
        return FlagValue(False)

    if field_type is FieldType.RANGE:
        low, high = range_bounds(field)
        return ScalarValue(str(math.floor((low + high) / 2)))

    for option in field.options:
        if option.is_default:
            return ScalarValue(option.label)

    return None


def initial_values(fields: Iterable[FieldSchema]) -> dict[str, FieldValue]:
    values: dict[str, FieldValue] = {}
    for field in fields:
        value = resolve_default(field)
        if value is not None:
            values[field.id] = value
    return values
