from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    NUMBER = "number"
    RANGE = "range"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime-local"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    CHECKBOX_GROUP = "checkbox-group"


class ValueShape(str, Enum):
    SCALAR = "scalar"
    FLAG = "flag"
    LIST = "list"


@dataclass(frozen=True)
class FieldTraits:
    label: str
    shape: ValueShape
    control: str
    input_type: str = ""
    needs_options: bool = False
    supports_multi_select: bool = False
    supports_min_max: bool = False
    supports_default_value: bool = False


FIELD_TRAITS: dict[FieldType, FieldTraits] = {
    FieldType.TEXT: FieldTraits(
        "Text Input", ValueShape.SCALAR, "input", "text", supports_default_value=True
    ),
    FieldType.TEXTAREA: FieldTraits(
        "Text Area", ValueShape.SCALAR, "textarea", supports_default_value=True
    ),
    FieldType.EMAIL: FieldTraits(
        "Email", ValueShape.SCALAR, "input", "email", supports_default_value=True
    ),
    FieldType.NUMBER: FieldTraits(
        "Number",
        ValueShape.SCALAR,
        "input",
        "number",
        supports_min_max=True,
        supports_default_value=True,
    ),
    FieldType.RANGE: FieldTraits(
        "Range Slider",
        ValueShape.SCALAR,
        "range",
        "range",
        supports_min_max=True,
        supports_default_value=True,
    ),
    FieldType.DATE: FieldTraits("Date", ValueShape.SCALAR, "input", "date"),
    FieldType.TIME: FieldTraits("Time", ValueShape.SCALAR, "input", "time"),
    FieldType.DATETIME: FieldTraits(
        "Date & Time", ValueShape.SCALAR, "input", "datetime-local"
    ),
    FieldType.SELECT: FieldTraits(
        "Dropdown",
        ValueShape.SCALAR,
        "select",
        needs_options=True,
        supports_multi_select=True,
    ),
    FieldType.RADIO: FieldTraits(
        "Radio Buttons", ValueShape.SCALAR, "radio", needs_options=True
    ),
    FieldType.CHECKBOX: FieldTraits(
        "Checkbox", ValueShape.FLAG, "checkbox", supports_default_value=True
    ),
    FieldType.CHECKBOX_GROUP: FieldTraits(
        "Checkbox Group",
        ValueShape.LIST,
        "checkbox-group",
        needs_options=True,
        supports_multi_select=True,
    ),
}

TYPE_ALIASES: dict[str, FieldType] = {
    "datetime": FieldType.DATETIME,
}

VALIDATION_TEMPLATES: dict[str, dict[str, str]] = {
    "email": {
        "label": "Email",
        "pattern": r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$",
        "message": "Please enter a valid email address",
    },
    "iraqi_phone": {
        "label": "Iraqi Phone",
        "pattern": r"^(\+964|0)(7[0-9]{9})$",
        "message": "Please enter a valid Iraqi phone number (e.g., 07XXXXXXXXX)",
    },
    "url": {
        "label": "URL",
        "pattern": r"^https?://[^\s/$.?#].[^\s]*$",
        "message": "Please enter a valid URL (e.g., https://example.com)",
    },
    "number": {
        "label": "Numbers Only",
        "pattern": r"^[0-9]+$",
        "message": "Please enter only numbers",
    },
    "alphanumeric": {
        "label": "Alphanumeric",
        "pattern": r"^[a-zA-Z0-9]+$",
        "message": "Please enter only letters and numbers",
    },
    "no_spaces": {
        "label": "No Spaces",
        "pattern": r"^\S+$",
        "message": "Spaces are not allowed",
    },
}


def resolve_field_type(type_tag: str | None) -> FieldType:
    """Map a stored type tag onto the closed set; unknown tags behave as text."""
    tag = str(type_tag or "").strip().lower()
    if tag in TYPE_ALIASES:
        return TYPE_ALIASES[tag]
    try:
        return FieldType(tag)
    except ValueError:
        return FieldType.TEXT


def traits_for(type_tag: str | None) -> FieldTraits:
    return FIELD_TRAITS[resolve_field_type(type_tag)]


def shape_for(type_tag: str | None, allow_multiple: bool = False) -> ValueShape:
    traits = traits_for(type_tag)
    if traits.shape is ValueShape.SCALAR and allow_multiple and traits.supports_multi_select:
        return ValueShape.LIST
    return traits.shape


def field_type_choices() -> list[dict[str, Any]]:
    return [
        {
            "label": traits.label,
            "value": field_type.value,
            "needs_options": traits.needs_options,
            "supports_multi_select": traits.supports_multi_select,
            "supports_min_max": traits.supports_min_max,
            "supports_default_value": traits.supports_default_value,
        }
        for field_type, traits in FIELD_TRAITS.items()
    ]
