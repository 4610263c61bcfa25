from __future__ import annotations

from fieldform.config import Settings
from fieldform.protocols import Storage
from fieldform.repo_json import JSONStorage
from fieldform.repo_sqlite import SQLiteStorage


def init_storage(settings: Settings) -> Storage:
    if settings.storage_backend == "json":
        return JSONStorage(settings.json_path)
    return SQLiteStorage(settings.sqlite_path)
