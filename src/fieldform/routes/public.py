from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from fieldform.defaults import initial_values
from fieldform.fields import FieldSchema
from fieldform.renderer import render_controls, values_from_form
from fieldform.schema import form_fields
from fieldform.submissions import check_submission
from fieldform.utils import new_ulid, now_utc, sanitize_input
from fieldform.values import FieldValue

logger = logging.getLogger(__name__)

router = APIRouter()

INACTIVE_MESSAGE = "This form is not currently accepting responses"


def parse_rating(value: Any) -> int | None:
    try:
        rating = int(str(value))
    except (TypeError, ValueError):
        return None
    return rating if 1 <= rating <= 5 else None


def render_form_page(
    request: Request,
    form: dict[str, Any],
    fields: tuple[FieldSchema, ...],
    values: dict[str, FieldValue | None],
    field_errors: dict[str, str] | None = None,
    errors: list[str] | None = None,
    extra: dict[str, Any] | None = None,
) -> HTMLResponse:
    templates = request.app.state.templates
    inactive = form.get("status") != "published"
    banner = list(errors or [])
    if inactive and INACTIVE_MESSAGE not in banner:
        banner.insert(0, INACTIVE_MESSAGE)
    context = {
        "form": form,
        "controls": render_controls(
            fields, {k: v for k, v in values.items() if v is not None}, field_errors
        ),
        "errors": banner,
        "inactive": inactive,
        "rating": None,
        "comments": "",
    }
    context.update(extra or {})
    status_code = 400 if field_errors else 200
    return templates.TemplateResponse(request, "form_public.html", context, status_code=status_code)


def get_public_form(request: Request, public_id: str) -> dict[str, Any]:
    form = request.app.state.storage.forms.get_form_by_public_id(public_id)
    if not form or form.get("status") == "archived":
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.get("/f/{public_id}", response_class=HTMLResponse, tags=["public"])
async def public_form(request: Request, public_id: str) -> HTMLResponse:
    form = get_public_form(request, public_id)
    fields = form_fields(form)
    return render_form_page(request, form, fields, dict(initial_values(fields)))


@router.post("/f/{public_id}", response_class=HTMLResponse, tags=["public"])
async def submit_form(request: Request, public_id: str) -> HTMLResponse:
    storage = request.app.state.storage
    templates = request.app.state.templates
    form = get_public_form(request, public_id)
    fields = form_fields(form)
    if form.get("status") != "published":
        return render_form_page(request, form, fields, dict(initial_values(fields)))

    form_data = await request.form()
    values = values_from_form(fields, form_data)
    rating = parse_rating(form_data.get("rating"))
    comments = sanitize_input(form_data.get("comments"))

    result = check_submission(fields, values)
    if not result.ok:
        return render_form_page(
            request,
            form,
            fields,
            values,
            field_errors=result.errors,
            errors=["Please fix the errors in the form"],
            extra={"rating": rating, "comments": comments or ""},
        )

    response_id = new_ulid()
    storage.responses.create_response(
        {
            "id": response_id,
            "form_id": form["id"],
            "form_version": form.get("version", 1),
            "values": result.wire_values,
            "rating": rating,
            "comments": comments,
            "created_at": now_utc(),
        }
    )
    logger.info("Response %s stored for form %s", response_id, form["id"])
    return templates.TemplateResponse(
        request,
        "submission_done.html",
        {"form": form, "response_id": response_id},
    )
