"""Detect field edits that invalidate responses collected under a form version.

When an edit is breaking, the previous definition is kept as a snapshot so
old responses can still be decoded and re-validated against the schema they
were submitted under.
"""
from __future__ import annotations

from typing import Any, Iterable

from fieldform.field_types import traits_for
from fieldform.fields import FieldSchema, fields_to_payload

COMPATIBLE_TYPE_CHANGES = {
    ("text", "textarea"),
    ("textarea", "text"),
    ("text", "email"),
    ("email", "text"),
    ("text", "url"),
    ("url", "text"),
    ("text", "tel"),
    ("tel", "text"),
    ("number", "range"),
    ("range", "number"),
}


def is_incompatible_type_change(old_type: str, new_type: str) -> bool:
    if old_type == new_type:
        return False
    return (old_type, new_type) not in COMPATIBLE_TYPE_CHANGES


def has_regex_invalidation(old_pattern: str | None, new_pattern: str | None) -> bool:
    # Removing a pattern never invalidates stored data.
    if not new_pattern:
        return False
    return old_pattern != new_pattern


def has_stricter_bounds(old: FieldSchema, new: FieldSchema) -> bool:
    if not traits_for(old.type).supports_min_max:
        return False
    if new.min_value is not None and (old.min_value is None or new.min_value > old.min_value):
        return True
    if new.max_value is not None and (old.max_value is None or new.max_value < old.max_value):
        return True
    return False


def breaking_changes(
    existing: Iterable[FieldSchema], incoming: Iterable[FieldSchema]
) -> list[str]:
    existing_by_id = {field.id: field for field in existing}
    incoming_by_id = {field.id: field for field in incoming}
    reasons: list[str] = []

    for field_id, old in existing_by_id.items():
        new = incoming_by_id.get(field_id)
        if new is None:
            reasons.append(f"{old.label}: field removed")
            continue
        if is_incompatible_type_change(old.type, new.type):
            reasons.append(f"{old.label}: type changed from {old.type} to {new.type}")
        if has_regex_invalidation(old.regex_pattern, new.regex_pattern):
            reasons.append(f"{old.label}: validation pattern changed")
        if not old.required and new.required:
            reasons.append(f"{old.label}: became required")
        if has_stricter_bounds(old, new):
            reasons.append(f"{old.label}: bounds became stricter")
    return reasons


def create_form_snapshot(form: dict[str, Any], fields: Iterable[FieldSchema]) -> dict[str, Any]:
    return {
        "name": form.get("name", ""),
        "description": form.get("description", ""),
        "fields": fields_to_payload(fields),
    }
