from __future__ import annotations

from typing import Any, Protocol


class FormRepository(Protocol):
    def list_forms(self) -> list[dict[str, Any]]: ...

    def get_form(self, form_id: str) -> dict[str, Any] | None: ...

    def get_form_by_public_id(self, public_id: str) -> dict[str, Any] | None: ...

    def create_form(self, form: dict[str, Any]) -> None: ...

    def update_form(self, form_id: str, updates: dict[str, Any]) -> dict[str, Any]: ...

    def delete_form(self, form_id: str) -> None: ...


class FormVersionRepository(Protocol):
    def add_version(self, version: dict[str, Any]) -> None: ...

    def get_version(self, form_id: str, version: int) -> dict[str, Any] | None: ...

    def list_versions(self, form_id: str) -> list[dict[str, Any]]: ...


class ResponseRepository(Protocol):
    def list_responses(self, form_id: str) -> list[dict[str, Any]]: ...

    def get_response(self, response_id: str) -> dict[str, Any] | None: ...

    def create_response(self, response: dict[str, Any]) -> None: ...

    def delete_response(self, response_id: str) -> None: ...


class Storage(Protocol):
    forms: FormRepository
    versions: FormVersionRepository
    responses: ResponseRepository
