"""Project workspace: the application layer around the financial model.

The workspace owns the in-memory project list and the project being edited.
Edits replace the current snapshot and arm the autosave debounce; the save
writes the latest snapshot to the store. When the store publishes changes,
they are applied to the in-memory list as they arrive. Whoever writes last
wins; concurrent edits of the same project are not merged.
"""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, UTC
from enum import Enum
from typing import Callable, Optional

from eventbudget.app.autosave import AUTOSAVE_DELAY_SECONDS, Debouncer, TimerFactory
from eventbudget.database.base import ProjectStore, Subscription
from eventbudget.domain import editing
from eventbudget.domain.entities import Project
from eventbudget.domain.errors import NotFoundError, project_not_found
from eventbudget.domain.financials import FinancialSummary, summarize

logger = logging.getLogger(__name__)


class SaveState(str, Enum):
    """Persistence status shown to the user."""

    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    FAILED = "failed"


@dataclass(frozen=True)
class SaveStatus:
    state: SaveState = SaveState.IDLE
    saved_at: Optional[datetime] = None


class ProjectWorkspace:
    """In-memory project list, current project and autosave."""

    def __init__(
        self,
        store: ProjectStore,
        autosave_delay: float = AUTOSAVE_DELAY_SECONDS,
        timer_factory: Optional[TimerFactory] = None,
    ):
        """Initialize workspace.

        Args:
            store: Project store used for loading and saving
            autosave_delay: Quiet period in seconds before an edit is saved
            timer_factory: Optional timer factory for the debounce (tests)
        """
        self.store = store
        self._lock = threading.RLock()
        self._projects: list[Project] = []
        self._current: Optional[Project] = None
        self._status = SaveStatus()
        self._subscription: Optional[Subscription] = None
        self._saving_id: Optional[str] = None
        self._autosave = Debouncer(autosave_delay, self.save_now, timer_factory)

    @property
    def projects(self) -> list[Project]:
        with self._lock:
            return list(self._projects)

    @property
    def current(self) -> Optional[Project]:
        with self._lock:
            return self._current

    @property
    def status(self) -> SaveStatus:
        with self._lock:
            return self._status

    @property
    def save_pending(self) -> bool:
        return self._autosave.pending

    def load(self) -> list[Project]:
        """Replace the in-memory list with the store's projects."""
        projects = self.store.list_projects()
        with self._lock:
            self._projects = list(projects)
        logger.info("Loaded %d project(s)", len(projects))
        return list(projects)

    def get_project(self, project_id: str) -> Optional[Project]:
        with self._lock:
            for project in self._projects:
                if project.id == project_id:
                    return project
        return None

    def open(self, project_id: str) -> Project:
        """Make a listed project the current one.

        Raises:
            NotFoundError: If the project is not in the list
        """
        project = self.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        with self._lock:
            self._current = project
        return project

    def create_project(self, **fields) -> Project:
        """Start a new project with default shape and make it current.

        The project is not in the list until its first save.
        """
        project = editing.new_project(**fields)
        self._set_current(project)
        return project

    def close(self) -> None:
        """Save any pending edit and leave the current project."""
        self.flush()
        with self._lock:
            self._current = None

    def edit(self, fn: Callable[..., Project], *args, **kwargs) -> Project:
        """Apply an editing function to the current snapshot.

        ``fn`` receives the current project followed by ``args`` and
        ``kwargs`` and returns the new snapshot, which becomes current and is
        scheduled for saving.

        Raises:
            NotFoundError: If no project is open
        """
        with self._lock:
            if self._current is None:
                raise NotFoundError("No project is open")
            updated = fn(self._current, *args, **kwargs)
        self._set_current(updated)
        return updated

    def _set_current(self, project: Project) -> None:
        with self._lock:
            self._current = project
        self._autosave.trigger()

    def save_now(self) -> None:
        """Write the current snapshot to the store.

        Store errors are logged and swallowed: the in-memory snapshot stays
        the source of truth and the status becomes ``failed``.
        """
        with self._lock:
            project = self._current
            if project is None:
                return
            self._status = replace(self._status, state=SaveState.SAVING)
            self._saving_id = project.id

        try:
            stored = self.store.upsert_project(project)
        except Exception:
            logger.exception("Saving project %s failed", project.id)
            with self._lock:
                self._status = replace(self._status, state=SaveState.FAILED)
            return
        finally:
            with self._lock:
                self._saving_id = None

        with self._lock:
            self._upsert_listed(stored)
            # Keep the timestamps, unless the user has edited again meanwhile.
            if self._current is project:
                self._current = stored
            self._status = SaveStatus(state=SaveState.SAVED, saved_at=datetime.now(UTC))
        logger.info("Saved project %s", project.id)

    def flush(self) -> None:
        """Save a pending edit immediately."""
        self._autosave.flush()

    def delete_project(self, project_id: str) -> None:
        """Delete a project from the store and the list.

        Confirmation is the caller's job. A pending save for the deleted
        project is dropped.
        """
        with self._lock:
            if self._current is not None and self._current.id == project_id:
                self._autosave.cancel()
                self._current = None
        self.store.delete_project(project_id)
        self.apply_delete(project_id)

    def summary(self) -> FinancialSummary:
        """Financial figures for the current project (zeros when none)."""
        return summarize(self.current)

    def _upsert_listed(self, project: Project) -> None:
        for index, listed in enumerate(self._projects):
            if listed.id == project.id:
                self._projects[index] = project
                return
        self._projects.insert(0, project)

    # Realtime reconciliation

    def apply_insert(self, project: Project) -> None:
        """A project was created elsewhere: prepend it."""
        with self._lock:
            if any(listed.id == project.id for listed in self._projects):
                self._upsert_listed(project)
                return
            self._projects.insert(0, project)

    def apply_update(self, project: Project) -> None:
        """A project was saved elsewhere: replace it, including when it is open.

        The echo of this workspace's own save only refreshes the list;
        ``save_now`` decides whether the open snapshot takes it.
        """
        with self._lock:
            self._projects = [project if p.id == project.id else p for p in self._projects]
            if project.id == self._saving_id:
                return
            if self._current is not None and self._current.id == project.id:
                self._current = project

    def apply_delete(self, project_id: str) -> None:
        """A project was deleted elsewhere: drop it from the list."""
        with self._lock:
            self._projects = [p for p in self._projects if p.id != project_id]

    def attach(self) -> bool:
        """Subscribe to the store's change feed, when it has one.

        Returns:
            True if the workspace now receives realtime changes
        """
        if not self.store.supports_push or self._subscription is not None:
            return self._subscription is not None
        self._subscription = self.store.subscribe(
            self.apply_insert, self.apply_update, self.apply_delete
        )
        return True

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
