from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from fieldform.field_types import VALIDATION_TEMPLATES, field_type_choices
from fieldform.payloads import (
    FORM_PAYLOAD_SCHEMA,
    FORM_UPDATE_SCHEMA,
    SUBMISSION_PAYLOAD_SCHEMA,
    field_definition_errors,
    payload_errors,
)
from fieldform.schema import (
    apply_form_update,
    canonical_fields,
    fields_for_version,
    form_fields,
    sanitize_form_output,
    sanitize_version_output,
)
from fieldform.submissions import check_submission, review_response, typed_values_from_client
from fieldform.utils import new_short_id, new_ulid, now_utc, sanitize_input, to_iso

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")


def check_form_payload(schema: dict[str, Any], payload: Any) -> None:
    errors = payload_errors(schema, payload)
    if not errors and isinstance(payload.get("fields"), list):
        errors = field_definition_errors(payload["fields"])
    if errors:
        raise HTTPException(status_code=400, detail={"message": "Invalid form payload", "errors": errors})


def get_form_or_404(request: Request, form_id: str) -> dict[str, Any]:
    form = request.app.state.storage.forms.get_form(form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.get("/healthz", tags=["system"])
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/api/field-types", tags=["api/forms"])
async def api_field_types() -> JSONResponse:
    return JSONResponse(
        {"field_types": field_type_choices(), "validation_templates": VALIDATION_TEMPLATES}
    )


@router.get("/api/forms", tags=["api/forms"])
async def api_list_forms(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    forms = storage.forms.list_forms()
    return JSONResponse([sanitize_form_output(form) for form in forms])


@router.post("/api/forms", tags=["api/forms"])
async def api_create_form(request: Request) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json(request)
    check_form_payload(FORM_PAYLOAD_SCHEMA, payload)

    form_id = new_ulid()
    now = now_utc()
    storage.forms.create_form(
        {
            "id": form_id,
            "public_id": new_short_id(),
            "name": sanitize_input(payload["name"], 256) or "Untitled Form",
            "description": sanitize_input(payload.get("description")) or "",
            "status": payload.get("status", "draft"),
            "version": 1,
            "fields": canonical_fields(payload.get("fields")),
            "created_at": now,
            "updated_at": now,
        }
    )
    form = storage.forms.get_form(form_id)
    logger.info("Form created: %s", form_id)
    return JSONResponse(sanitize_form_output(form or {}))


@router.get("/api/forms/{form_id}", tags=["api/forms"])
async def api_get_form(request: Request, form_id: str) -> JSONResponse:
    return JSONResponse(sanitize_form_output(get_form_or_404(request, form_id)))


@router.put("/api/forms/{form_id}", tags=["api/forms"])
async def api_update_form(form_id: str, request: Request) -> JSONResponse:
    storage = request.app.state.storage
    form = get_form_or_404(request, form_id)
    payload = await read_json(request)
    check_form_payload(FORM_UPDATE_SCHEMA, payload)

    updates: dict[str, Any] = {}
    if "name" in payload:
        updates["name"] = sanitize_input(payload["name"], 256) or form["name"]
    if "description" in payload:
        updates["description"] = sanitize_input(payload.get("description")) or ""
    if "status" in payload:
        updates["status"] = payload["status"]
    if "fields" in payload:
        updates["fields"] = payload["fields"]
    updated = apply_form_update(storage, form, updates)
    return JSONResponse(sanitize_form_output(updated))


@router.delete("/api/forms/{form_id}", tags=["api/forms"])
async def api_delete_form(request: Request, form_id: str) -> JSONResponse:
    get_form_or_404(request, form_id)
    request.app.state.storage.forms.delete_form(form_id)
    return JSONResponse({"deleted": form_id})


@router.get("/api/forms/{form_id}/versions", tags=["api/forms"])
async def api_list_versions(request: Request, form_id: str) -> JSONResponse:
    get_form_or_404(request, form_id)
    versions = request.app.state.storage.versions.list_versions(form_id)
    return JSONResponse([sanitize_version_output(item) for item in versions])


@router.get("/api/forms/{form_id}/versions/{version}", tags=["api/forms"])
async def api_get_version(request: Request, form_id: str, version: int) -> JSONResponse:
    form = get_form_or_404(request, form_id)
    if version == form.get("version", 1):
        return JSONResponse(
            {
                "form_id": form_id,
                "version": version,
                "snapshot": {
                    "name": form.get("name", ""),
                    "description": form.get("description", ""),
                    "fields": form.get("fields", []),
                },
                "created_at": to_iso(form["updated_at"]),
            }
        )
    item = request.app.state.storage.versions.get_version(form_id, version)
    if not item:
        raise HTTPException(status_code=404, detail="Form version not found")
    return JSONResponse(sanitize_version_output(item))


@router.post("/api/public/forms/{public_id}/submissions", tags=["api/submissions"])
async def api_submit_form(public_id: str, request: Request) -> JSONResponse:
    storage = request.app.state.storage
    form = storage.forms.get_form_by_public_id(public_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    if form.get("status") != "published":
        raise HTTPException(status_code=400, detail="This form is not accepting responses")
    payload = await read_json(request)
    errors = payload_errors(SUBMISSION_PAYLOAD_SCHEMA, payload)
    if errors:
        raise HTTPException(status_code=400, detail={"message": "Invalid submission payload", "errors": errors})

    fields = form_fields(form)
    values = typed_values_from_client(fields, payload["values"])
    result = check_submission(fields, values)
    if not result.ok:
        raise HTTPException(
            status_code=400, detail={"message": "Validation failed", "errors": result.errors}
        )

    response_id = new_ulid()
    created_at = now_utc()
    storage.responses.create_response(
        {
            "id": response_id,
            "form_id": form["id"],
            "form_version": form.get("version", 1),
            "values": result.wire_values,
            "rating": payload.get("rating"),
            "comments": sanitize_input(payload.get("comments")),
            "created_at": created_at,
        }
    )
    logger.info("Response %s stored for form %s", response_id, form["id"])
    return JSONResponse(
        {
            "response_id": response_id,
            "created_at": to_iso(created_at),
            "form_version": form.get("version", 1),
        }
    )


def response_output(
    storage: Any, form: dict[str, Any], item: dict[str, Any], cache: dict[int, Any]
) -> dict[str, Any]:
    version = item.get("form_version", 1)
    if version not in cache:
        cache[version] = fields_for_version(storage, form, version)
    review = review_response(cache[version], item.get("values", {}))
    return {
        "id": item["id"],
        "form_id": item["form_id"],
        "form_version": version,
        "values": item.get("values", {}),
        "display": review["display"],
        "errors": review["errors"],
        "rating": item.get("rating"),
        "comments": item.get("comments"),
        "created_at": to_iso(item["created_at"]),
    }


@router.get("/api/forms/{form_id}/responses", tags=["api/submissions"])
async def api_list_responses(request: Request, form_id: str) -> JSONResponse:
    storage = request.app.state.storage
    form = get_form_or_404(request, form_id)
    cache: dict[int, Any] = {}
    items = storage.responses.list_responses(form_id)
    return JSONResponse([response_output(storage, form, item, cache) for item in items])


@router.get("/api/forms/{form_id}/responses/{response_id}", tags=["api/submissions"])
async def api_get_response(request: Request, form_id: str, response_id: str) -> JSONResponse:
    storage = request.app.state.storage
    form = get_form_or_404(request, form_id)
    item = storage.responses.get_response(response_id)
    if not item or item["form_id"] != form_id:
        raise HTTPException(status_code=404, detail="Response not found")
    return JSONResponse(response_output(storage, form, item, {}))


@router.delete("/api/forms/{form_id}/responses/{response_id}", tags=["api/submissions"])
async def api_delete_response(request: Request, form_id: str, response_id: str) -> JSONResponse:
    storage = request.app.state.storage
    get_form_or_404(request, form_id)
    item = storage.responses.get_response(response_id)
    if not item or item["form_id"] != form_id:
        raise HTTPException(status_code=404, detail="Response not found")
    storage.responses.delete_response(response_id)
    return JSONResponse({"deleted": response_id})
