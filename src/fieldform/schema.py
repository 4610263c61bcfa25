from __future__ import annotations

import logging
from typing import Any

from fieldform.fields import FieldSchema, fields_from_payload, fields_to_payload
from fieldform.protocols import Storage
from fieldform.utils import now_utc, to_iso
from fieldform.versioning import breaking_changes, create_form_snapshot

logger = logging.getLogger(__name__)


def canonical_fields(raw_fields: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    return fields_to_payload(fields_from_payload(raw_fields))


def form_fields(form: dict[str, Any]) -> tuple[FieldSchema, ...]:
    return fields_from_payload(form.get("fields", []))


def fields_for_version(
    storage: Storage, form: dict[str, Any], version: int
) -> tuple[FieldSchema, ...]:
    if version == form.get("version", 1):
        return form_fields(form)
    snapshot = storage.versions.get_version(form["id"], version)
    if not snapshot:
        logger.warning(
            "No snapshot for form %s version %s; using current fields", form["id"], version
        )
        return form_fields(form)
    return fields_from_payload(snapshot["snapshot"].get("fields", []))


def apply_form_update(
    storage: Storage, form: dict[str, Any], updates: dict[str, Any]
) -> dict[str, Any]:
    """Persist ``updates``; a breaking field change starts a new form version."""
    if "fields" in updates:
        current = form_fields(form)
        incoming = fields_from_payload(updates["fields"])
        updates["fields"] = fields_to_payload(incoming)
        reasons = breaking_changes(current, incoming)
        if reasons:
            version = form.get("version", 1)
            storage.versions.add_version(
                {
                    "form_id": form["id"],
                    "version": version,
                    "snapshot": create_form_snapshot(form, current),
                    "created_at": now_utc(),
                }
            )
            updates["version"] = version + 1
            logger.info(
                "Form %s moved to version %d: %s", form["id"], version + 1, "; ".join(reasons)
            )
    updates["updated_at"] = now_utc()
    return storage.forms.update_form(form["id"], updates)


def sanitize_form_output(form: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": form["id"],
        "public_id": form["public_id"],
        "name": form.get("name", ""),
        "description": form.get("description", ""),
        "status": form.get("status", "draft"),
        "version": form.get("version", 1),
        "fields": form.get("fields", []),
        "created_at": to_iso(form.get("created_at") or now_utc()),
        "updated_at": to_iso(form.get("updated_at") or now_utc()),
    }


def sanitize_version_output(version: dict[str, Any]) -> dict[str, Any]:
    return {
        "form_id": version["form_id"],
        "version": version["version"],
        "snapshot": version.get("snapshot", {}),
        "created_at": to_iso(version.get("created_at") or now_utc()),
    }
