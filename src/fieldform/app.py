from __future__ import annotations

import json
from typing import Any

import markupsafe
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from fieldform.config import BASE_DIR, Settings, ensure_dirs
from fieldform.routes.api import router as api_router
from fieldform.routes.public import router as public_router
from fieldform.storage import init_storage


def _tojson_attr(value: Any) -> markupsafe.Markup:
    """Escape a value as JSON so it can be embedded in an HTML attribute."""
    return markupsafe.Markup(markupsafe.escape(json.dumps(value, ensure_ascii=False)))


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    ensure_dirs(settings)
    storage = init_storage(settings)

    app = FastAPI(
        title="fieldform",
        openapi_tags=[
            {"name": "public", "description": "Public forms (HTML)"},
            {"name": "api/forms", "description": "REST API: forms"},
            {"name": "api/submissions", "description": "REST API: responses"},
            {"name": "system", "description": "System"},
        ],
    )

    app.state.storage = storage
    app.state.settings = settings

    templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
    app.state.templates = templates

    templates.env.filters["tojson_attr"] = _tojson_attr

    app.include_router(public_router)
    app.include_router(api_router)

    return app
