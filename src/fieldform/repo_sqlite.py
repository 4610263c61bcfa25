from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from fieldform.models import Base, FormModel, FormVersionModel, ResponseModel
from fieldform.utils import dumps_json, loads_json


class SQLiteFormRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_forms(self) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = session.query(FormModel).order_by(FormModel.updated_at.desc()).all()
            return [self._to_dict(row) for row in rows]

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            return self._to_dict(row) if row else None

    def get_form_by_public_id(self, public_id: str) -> dict[str, Any] | None:
        with self._Session() as session:
            row = (
                session.query(FormModel)
                .filter(FormModel.public_id == public_id)
                .first()
            )
            return self._to_dict(row) if row else None

    def create_form(self, form: dict[str, Any]) -> None:
        with self._Session() as session:
            row = FormModel(
                id=form["id"],
                public_id=form["public_id"],
                name=form["name"],
                description=form.get("description", ""),
                status=form.get("status", "draft"),
                version=form.get("version", 1),
                fields_json=dumps_json(form.get("fields", [])),
                created_at=form["created_at"],
                updated_at=form["updated_at"],
            )
            session.add(row)
            session.commit()

    def update_form(self, form_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            if not row:
                raise KeyError(form_id)
            for key, value in updates.items():
                if key == "fields":
                    row.fields_json = dumps_json(value)
                else:
                    setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return self._to_dict(row)

    def delete_form(self, form_id: str) -> None:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            if row:
                session.delete(row)
                session.commit()

    @staticmethod
    def _to_dict(row: FormModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "public_id": row.public_id,
            "name": row.name,
            "description": row.description or "",
            "status": row.status,
            "version": row.version or 1,
            "fields": loads_json(row.fields_json) or [],
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }


class SQLiteFormVersionRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def add_version(self, version: dict[str, Any]) -> None:
        with self._Session() as session:
            row = FormVersionModel(
                form_id=version["form_id"],
                version=version["version"],
                snapshot_json=dumps_json(version["snapshot"]),
                created_at=version["created_at"],
            )
            session.add(row)
            session.commit()

    def get_version(self, form_id: str, version: int) -> dict[str, Any] | None:
        with self._Session() as session:
            row = (
                session.query(FormVersionModel)
                .filter(
                    FormVersionModel.form_id == form_id,
                    FormVersionModel.version == version,
                )
                .first()
            )
            return self._to_dict(row) if row else None

    def list_versions(self, form_id: str) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(FormVersionModel)
                .filter(FormVersionModel.form_id == form_id)
                .order_by(FormVersionModel.version.asc())
                .all()
            )
            return [self._to_dict(row) for row in rows]

    @staticmethod
    def _to_dict(row: FormVersionModel) -> dict[str, Any]:
        return {
            "form_id": row.form_id,
            "version": row.version,
            "snapshot": loads_json(row.snapshot_json) or {},
            "created_at": row.created_at,
        }


class SQLiteResponseRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_responses(self, form_id: str) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(ResponseModel)
                .filter(ResponseModel.form_id == form_id)
                .order_by(ResponseModel.created_at.desc())
                .all()
            )
            return [self._to_dict(row) for row in rows]

    def get_response(self, response_id: str) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(ResponseModel, response_id)
            return self._to_dict(row) if row else None

    def create_response(self, response: dict[str, Any]) -> None:
        with self._Session() as session:
            row = ResponseModel(
                id=response["id"],
                form_id=response["form_id"],
                form_version=response["form_version"],
                values_json=dumps_json(response["values"]),
                rating=response.get("rating"),
                comments=response.get("comments"),
                created_at=response["created_at"],
            )
            session.add(row)
            session.commit()

    def delete_response(self, response_id: str) -> None:
        with self._Session() as session:
            row = session.get(ResponseModel, response_id)
            if row:
                session.delete(row)
                session.commit()

    @staticmethod
    def _to_dict(row: ResponseModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "form_id": row.form_id,
            "form_version": row.form_version or 1,
            "values": loads_json(row.values_json) or {},
            "rating": row.rating,
            "comments": row.comments,
            "created_at": row.created_at,
        }


class SQLiteStorage:
    def __init__(self, db_path: Path) -> None:
        self._engine = create_engine(f"sqlite:///{db_path}", future=True)
        self._Session = sessionmaker(self._engine, expire_on_commit=False)
        Base.metadata.create_all(self._engine)
        self.forms = SQLiteFormRepo(self._Session)
        self.versions = SQLiteFormVersionRepo(self._Session)
        self.responses = SQLiteResponseRepo(self._Session)
