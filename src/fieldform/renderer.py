from __future__ import annotations

from typing import Any, Iterable, Mapping

from fieldform.codec import CHECKED_FORM_VALUES, decode_for_field, encode
from fieldform.defaults import range_bounds
from fieldform.field_types import FieldType, ValueShape
from fieldform.fields import FieldSchema
from fieldform.validation import empty_value, format_number, parse_leading_float
from fieldform.values import FieldValue, FlagValue, ListValue, ScalarValue


def control_for(field: FieldSchema) -> str:
    traits = field.traits
    if traits.control == "select" and field.shape is ValueShape.LIST:
        return "multi-select"
    return traits.control


def _selected_labels(value: FieldValue) -> set[str]:
    if isinstance(value, ListValue):
        return set(value.items)
    if isinstance(value, ScalarValue) and value.text:
        return {value.text}
    return set()


def render_control(
    field: FieldSchema,
    value: FieldValue | None,
    error: str | None = None,
) -> dict[str, Any]:
    if value is None:
        value = empty_value(field)
    traits = field.traits
    dom_id = f"field-{field.id}"
    selected = _selected_labels(value)

    control: dict[str, Any] = {
        "id": dom_id,
        "name": field.id,
        "label": field.label,
        "control": control_for(field),
        "input_type": traits.input_type or "text",
        "placeholder": field.placeholder or "",
        "help_text": field.help_text or "",
        "required": field.required,
        "value": value.text if isinstance(value, ScalarValue) else "",
        "checked": value.checked if isinstance(value, FlagValue) else False,
        "options": [
            {
                "id": f"{dom_id}-{index}",
                "label": option.label,
                "value": option.label,
                "selected": option.label in selected,
            }
            for index, option in enumerate(field.options)
        ],
        "selection_limit": field.selection_limit if field.shape is ValueShape.LIST else None,
        "min": None,
        "max": None,
        "step": None,
        "error": error or "",
    }

    field_type = field.field_type
    if field_type is FieldType.RANGE:
        low, high = range_bounds(field)
        current = parse_leading_float(control["value"]) if control["value"] else None
        control.update(
            min=format_number(low),
            max=format_number(high),
            step="1",
            value=format_number(current if current is not None else low),
        )
    elif field_type is FieldType.NUMBER:
        if field.min_value is not None:
            control["min"] = format_number(field.min_value)
        if field.max_value is not None:
            control["max"] = format_number(field.max_value)
    return control


def render_controls(
    fields: Iterable[FieldSchema],
    values: Mapping[str, FieldValue],
    errors: Mapping[str, str] | None = None,
) -> list[dict[str, Any]]:
    errors = errors or {}
    return [render_control(field, values.get(field.id), errors.get(field.id)) for field in fields]


def value_from_form(field: FieldSchema, form_data: Any) -> FieldValue | None:
    """Turn raw control output from a submitted HTML form into a typed value."""
    shape = field.shape
    if shape is ValueShape.LIST:
        raw_items = form_data.getlist(field.id)
        return ListValue.of(str(item) for item in raw_items if item not in (None, ""))
    raw = form_data.get(field.id)
    if shape is ValueShape.FLAG:
        return FlagValue(str(raw or "").strip().lower() in CHECKED_FORM_VALUES)
    if raw is None:
        return None
    return ScalarValue(str(raw))


def values_from_form(fields: Iterable[FieldSchema], form_data: Any) -> dict[str, FieldValue | None]:
    return {field.id: value_from_form(field, form_data) for field in fields}


def display_value(field: FieldSchema, wire: str | None) -> str:
    value = decode_for_field(field, wire)
    if isinstance(value, ListValue):
        return ", ".join(value.items)
    return encode(value)
