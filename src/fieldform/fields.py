from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable

import orjson

from fieldform.field_types import FieldTraits, FieldType, ValueShape, resolve_field_type, shape_for, traits_for
from fieldform.utils import generate_field_key, sanitize_input

logger = logging.getLogger(__name__)

MAX_LABEL_LENGTH = 256
MAX_PLACEHOLDER_LENGTH = 256
MAX_HELP_TEXT_LENGTH = 1000
MAX_PATTERN_LENGTH = 500
MAX_VALIDATION_MESSAGE_LENGTH = 256
MAX_DEFAULT_VALUE_LENGTH = 1000


@dataclass(frozen=True)
class FieldOption:
    label: str
    is_default: bool = False


@dataclass(frozen=True)
class FieldSchema:
    id: str
    label: str
    type: str = FieldType.TEXT.value
    required: bool = False
    placeholder: str | None = None
    help_text: str | None = None
    regex_pattern: str | None = None
    validation_message: str | None = None
    allow_multiple: bool = False
    selection_limit: int | None = None
    min_value: float | None = None
    max_value: float | None = None
    default_value: str | None = None
    options: tuple[FieldOption, ...] = ()
    order: int = 0

    @property
    def field_type(self) -> FieldType:
        return resolve_field_type(self.type)

    @property
    def traits(self) -> FieldTraits:
        return traits_for(self.type)

    @property
    def shape(self) -> ValueShape:
        return shape_for(self.type, self.allow_multiple)

    @property
    def option_labels(self) -> list[str]:
        return [option.label for option in self.options]


def _pick(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _parse_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _parse_limit(value: Any) -> int | None:
    number = _parse_number(value)
    if number is None or number < 0:
        return None
    return int(number)


def parse_options(raw: Any) -> tuple[FieldOption, ...]:
    if raw is None or raw == "":
        return ()
    if isinstance(raw, (str, bytes)):
        try:
            raw = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("Ignoring malformed options data: %.80r", raw)
            return ()
    if not isinstance(raw, list):
        return ()

    options: list[FieldOption] = []
    for item in raw:
        if isinstance(item, str):
            label = item.strip()
            is_default = False
        elif isinstance(item, dict):
            label = str(_pick(item, "label", "optionLabel") or "").strip()
            is_default = bool(_pick(item, "isDefault", "is_default"))
        else:
            continue
        if label:
            options.append(FieldOption(label=label, is_default=is_default))
    return tuple(options)


def field_from_payload(
    raw: dict[str, Any],
    index: int = 0,
    existing_ids: set[str] | None = None,
) -> FieldSchema:
    seen = existing_ids if existing_ids is not None else set()
    raw_id = raw.get("id")
    field_id = str(raw_id).strip() if raw_id not in (None, "") else ""
    if not field_id:
        field_id = generate_field_key(seen)
    seen.add(field_id)

    order = _parse_number(raw.get("order"))

    return FieldSchema(
        id=field_id,
        label=sanitize_input(raw.get("label"), MAX_LABEL_LENGTH) or "Untitled Field",
        type=str(raw.get("type") or FieldType.TEXT.value).strip(),
        required=bool(raw.get("required")),
        placeholder=sanitize_input(raw.get("placeholder"), MAX_PLACEHOLDER_LENGTH),
        help_text=sanitize_input(_pick(raw, "helpText", "help_text"), MAX_HELP_TEXT_LENGTH),
        regex_pattern=sanitize_input(
            _pick(raw, "regexPattern", "regex_pattern"), MAX_PATTERN_LENGTH
        ),
        validation_message=sanitize_input(
            _pick(raw, "validationMessage", "validation_message"),
            MAX_VALIDATION_MESSAGE_LENGTH,
        ),
        allow_multiple=bool(_pick(raw, "allowMultiple", "allow_multiple")),
        selection_limit=_parse_limit(_pick(raw, "selectionLimit", "selection_limit")),
        min_value=_parse_number(_pick(raw, "minValue", "min_value")),
        max_value=_parse_number(_pick(raw, "maxValue", "max_value")),
        default_value=sanitize_input(
            _pick(raw, "defaultValue", "default_value"), MAX_DEFAULT_VALUE_LENGTH
        ),
        options=parse_options(raw.get("options")),
        order=int(order) if order is not None else index,
    )


def fields_from_payload(raw_fields: Iterable[dict[str, Any]] | None) -> tuple[FieldSchema, ...]:
    seen: set[str] = set()
    fields = [
        field_from_payload(raw, index, seen)
        for index, raw in enumerate(raw_fields or [])
        if isinstance(raw, dict)
    ]
    return tuple(sorted(fields, key=lambda field: field.order))


def field_to_payload(field: FieldSchema) -> dict[str, Any]:
    return {
        "id": field.id,
        "label": field.label,
        "type": field.type,
        "required": field.required,
        "placeholder": field.placeholder,
        "helpText": field.help_text,
        "regexPattern": field.regex_pattern,
        "validationMessage": field.validation_message,
        "allowMultiple": field.allow_multiple,
        "selectionLimit": field.selection_limit,
        "minValue": field.min_value,
        "maxValue": field.max_value,
        "defaultValue": field.default_value,
        "options": [
            {"label": option.label, "isDefault": option.is_default}
            for option in field.options
        ],
        "order": field.order,
    }


def fields_to_payload(fields: Iterable[FieldSchema]) -> list[dict[str, Any]]:
    return [field_to_payload(field) for field in fields]
