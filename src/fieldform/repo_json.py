from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

from filelock import FileLock
from tinydb import Query, TinyDB

from fieldform.utils import now_utc, parse_dt, to_iso


class JSONRepoBase:
    def __init__(self, path: Path, lock: FileLock) -> None:
        self._path = path
        self._lock = lock

    @contextmanager
    def _db(self) -> Iterator[TinyDB]:
        with self._lock:
            db = TinyDB(self._path)
            try:
                yield db
            finally:
                db.close()


class JSONFormRepo(JSONRepoBase):
    def list_forms(self) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("forms").all()
        forms = [self._from_record(item) for item in items]
        return sorted(forms, key=lambda x: x["updated_at"], reverse=True)

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("forms").get(Query().id == form_id)
        return self._from_record(item) if item else None

    def get_form_by_public_id(self, public_id: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("forms").get(Query().public_id == public_id)
        return self._from_record(item) if item else None

    def create_form(self, form: dict[str, Any]) -> None:
        record = self._to_record(form)
        with self._db() as db:
            db.table("forms").insert(record)

    def update_form(self, form_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        with self._db() as db:
            table = db.table("forms")
            item = table.get(Query().id == form_id)
            if not item:
                raise KeyError(form_id)
            item.update(self._to_record(updates, partial=True))
            table.update(item, Query().id == form_id)
        return self._from_record(item)

    def delete_form(self, form_id: str) -> None:
        with self._db() as db:
            db.table("forms").remove(Query().id == form_id)

    @staticmethod
    def _to_record(form: dict[str, Any], partial: bool = False) -> dict[str, Any]:
        record: dict[str, Any] = {}
        for key, value in form.items():
            if key in {"created_at", "updated_at"}:
                record[key] = to_iso(value) if isinstance(value, datetime) else value
            else:
                record[key] = value
        if not partial:
            record.setdefault("created_at", to_iso(now_utc()))
            record.setdefault("updated_at", to_iso(now_utc()))
        return record

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "public_id": record["public_id"],
            "name": record["name"],
            "description": record.get("description", ""),
            "status": record.get("status", "draft"),
            "version": record.get("version", 1),
            "fields": record.get("fields", []),
            "created_at": parse_dt(record.get("created_at")),
            "updated_at": parse_dt(record.get("updated_at")),
        }


class JSONFormVersionRepo(JSONRepoBase):
    def add_version(self, version: dict[str, Any]) -> None:
        record = {
            "form_id": version["form_id"],
            "version": version["version"],
            "snapshot": version["snapshot"],
            "created_at": to_iso(version["created_at"]),
        }
        with self._db() as db:
            db.table("form_versions").insert(record)

    def get_version(self, form_id: str, version: int) -> dict[str, Any] | None:
        row = Query()
        with self._db() as db:
            item = db.table("form_versions").get(
                (row.form_id == form_id) & (row.version == version)
            )
        return self._from_record(item) if item else None

    def list_versions(self, form_id: str) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("form_versions").search(Query().form_id == form_id)
        versions = [self._from_record(item) for item in items]
        return sorted(versions, key=lambda x: x["version"])

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "form_id": record["form_id"],
            "version": record["version"],
            "snapshot": record.get("snapshot", {}),
            "created_at": parse_dt(record.get("created_at")),
        }


class JSONResponseRepo(JSONRepoBase):
    def list_responses(self, form_id: str) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("responses").search(Query().form_id == form_id)
        responses = [self._from_record(item) for item in items]
        return sorted(responses, key=lambda x: x["created_at"], reverse=True)

    def get_response(self, response_id: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("responses").get(Query().id == response_id)
        return self._from_record(item) if item else None

    def create_response(self, response: dict[str, Any]) -> None:
        record = self._to_record(response)
        with self._db() as db:
            db.table("responses").insert(record)

    def delete_response(self, response_id: str) -> None:
        with self._db() as db:
            db.table("responses").remove(Query().id == response_id)

    @staticmethod
    def _to_record(response: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": response["id"],
            "form_id": response["form_id"],
            "form_version": response["form_version"],
            "values": response["values"],
            "rating": response.get("rating"),
            "comments": response.get("comments"),
            "created_at": to_iso(response["created_at"]),
        }

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "form_id": record["form_id"],
            "form_version": record.get("form_version", 1),
            "values": record.get("values", {}),
            "rating": record.get("rating"),
            "comments": record.get("comments"),
            "created_at": parse_dt(record.get("created_at")),
        }


class JSONStorage:
    def __init__(self, path: Path) -> None:
        self._lock = FileLock(f"{path}.lock")
        self.forms = JSONFormRepo(path, self._lock)
        self.versions = JSONFormVersionRepo(path, self._lock)
        self.responses = JSONResponseRepo(path, self._lock)
