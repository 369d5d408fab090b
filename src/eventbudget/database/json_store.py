"""Local JSON file project store.

The whole project list lives in one file and is rewritten on every save,
mirroring a device-local store. There is no push channel.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, UTC
from pathlib import Path
from typing import Optional

from eventbudget.database.base import ProjectStore
from eventbudget.database.mappers import project_from_record, project_to_record
from eventbudget.domain.entities import Project
from eventbudget.domain.errors import NotFoundError, project_not_found

logger = logging.getLogger(__name__)

PROJECTS_KEY = "projects"


class JSONFileProjectStore(ProjectStore):
    """Project store backed by a single JSON file."""

    def __init__(self, path: str):
        """Initialize JSON file store.

        Args:
            path: Path of the JSON file; created on first save
        """
        self.path = Path(path)
        self._lock = threading.RLock()

    def connect(self) -> None:
        # Nothing to open; the file is read on demand
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        """Create the parent directory if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def test_connection(self) -> bool:
        """Return True if the file's directory exists and is writable."""
        directory = self.path.parent
        return directory.is_dir() and os.access(directory, os.W_OK)

    def _read_records(self) -> list[dict]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return []
        data = json.loads(content)
        # Older files hold a bare list instead of {"projects": [...]}
        records = data.get(PROJECTS_KEY, []) if isinstance(data, dict) else data
        return [record for record in records if isinstance(record, dict)]

    def _write_records(self, records: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({PROJECTS_KEY: records}, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def list_projects(self) -> list[Project]:
        """List all projects, most recently created first."""
        with self._lock:
            projects = [project_from_record(record) for record in self._read_records()]
        return sorted(projects, key=_created_sort_key, reverse=True)

    def get_project(self, project_id: str) -> Optional[Project]:
        with self._lock:
            for record in self._read_records():
                if record.get("id") == project_id:
                    return project_from_record(record)
        return None

    def upsert_project(self, project: Project) -> Project:
        """Insert or replace a project in the file."""
        with self._lock:
            records = self._read_records()
            now = datetime.now(UTC)
            index = next((i for i, r in enumerate(records) if r.get("id") == project.id), None)
            if index is None:
                created_at = project.created_at or now
            else:
                existing = project_from_record(records[index])
                created_at = existing.created_at or project.created_at or now
            stored = project_from_record(
                {
                    **project_to_record(project),
                    "created_at": created_at.isoformat(),
                    "updated_at": now.isoformat(),
                }
            )
            record = project_to_record(stored)
            if index is None:
                records.insert(0, record)
            else:
                records[index] = record
            self._write_records(records)

        logger.debug("Saved project %s to %s", project.id, self.path)
        return stored

    def delete_project(self, project_id: str) -> None:
        with self._lock:
            records = self._read_records()
            remaining = [r for r in records if r.get("id") != project_id]
            if len(remaining) == len(records):
                raise NotFoundError(project_not_found(project_id))
            self._write_records(remaining)
        logger.debug("Deleted project %s from %s", project_id, self.path)


def _created_sort_key(project: Project) -> float:
    if project.created_at is None:
        return 0.0
    created_at = project.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return created_at.timestamp()
