from __future__ import annotations

from typing import Any

import orjson

from fieldform.field_types import ValueShape
from fieldform.fields import FieldSchema
from fieldform.utils import dumps_json
from fieldform.values import FieldValue, FlagValue, ListValue, ScalarValue

FLAG_TRUE = "Yes"
FLAG_FALSE = "No"
CHECKED_WIRE_VALUES = {"Yes", "yes", "true"}
CHECKED_FORM_VALUES = {"on", "true", "yes", "1"}


def _item_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    return dumps_json(item)


def decode(wire: str) -> FieldValue:
    """Best-effort decode of a stored answer.

    Only JSON arrays are special-cased; anything else, including text that
    happens to parse as a JSON number or object, stays a scalar holding the
    original string.
    """
    try:
        parsed = orjson.loads(wire)
    except orjson.JSONDecodeError:
        return ScalarValue(wire)
    if isinstance(parsed, list):
        return ListValue.of(_item_text(item) for item in parsed)
    return ScalarValue(wire)


def encode(value: FieldValue) -> str:
    if isinstance(value, ListValue):
        return dumps_json(list(value.items))
    if isinstance(value, FlagValue):
        return FLAG_TRUE if value.checked else FLAG_FALSE
    return value.text


def decode_for_field(field: FieldSchema, wire: str | None) -> FieldValue:
    shape = field.shape
    if shape is ValueShape.FLAG:
        return FlagValue(wire in CHECKED_WIRE_VALUES)
    if shape is ValueShape.LIST:
        if not wire:
            return ListValue()
        decoded = decode(wire)
        if isinstance(decoded, ListValue):
            return decoded
        return ListValue((wire,))
    return ScalarValue(wire or "")


def to_typed_payload(value: FieldValue) -> dict[str, Any]:
    if isinstance(value, ListValue):
        return {"kind": ValueShape.LIST.value, "value": list(value.items)}
    if isinstance(value, FlagValue):
        return {"kind": ValueShape.FLAG.value, "value": value.checked}
    return {"kind": ValueShape.SCALAR.value, "value": value.text}


def from_typed_payload(payload: dict[str, Any]) -> FieldValue:
    kind = payload.get("kind")
    raw = payload.get("value")
    if kind == ValueShape.LIST.value:
        return ListValue.of(_item_text(item) for item in raw or [])
    if kind == ValueShape.FLAG.value:
        return FlagValue(bool(raw))
    if kind == ValueShape.SCALAR.value:
        return ScalarValue("" if raw is None else str(raw))
    raise ValueError(f"unknown value kind: {kind!r}")


def coerce_client_value(field: FieldSchema, raw: Any) -> FieldValue | None:
    """Fit a parsed client value onto the shape the field expects.

    ``None`` is passed through so the validator applies its own empty form.
    """
    if raw is None:
        return None
    shape = field.shape
    if shape is ValueShape.FLAG:
        if isinstance(raw, bool):
            return FlagValue(raw)
        if isinstance(raw, list):
            raw = raw[0] if raw else ""
        return FlagValue(str(raw).strip().lower() in CHECKED_FORM_VALUES)
    if shape is ValueShape.LIST:
        if isinstance(raw, list):
            return ListValue.of(_item_text(item) for item in raw if item not in (None, ""))
        if isinstance(raw, str):
            return decode_for_field(field, raw)
        return ListValue((_item_text(raw),))
    if isinstance(raw, list):
        # Several answers to a single-value field stay together as JSON text.
        if len(raw) > 1:
            return ScalarValue(dumps_json(raw))
        raw = raw[0] if raw else ""
    if isinstance(raw, bool):
        return ScalarValue(FLAG_TRUE if raw else FLAG_FALSE)
    return ScalarValue(_item_text(raw))
