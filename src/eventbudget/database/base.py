"""Abstract project store interface."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from eventbudget.domain.entities import Project

logger = logging.getLogger(__name__)

ProjectCallback = Callable[[Project], None]
DeleteCallback = Callable[[str], None]


class Subscription:
    """Handle returned by ``ProjectStore.subscribe``."""

    def __init__(self, feed: "ChangeFeed", token: int):
        self._feed = feed
        self._token = token
        self.active = True

    def unsubscribe(self) -> None:
        """Stop receiving change notifications. Safe to call twice."""
        if self.active:
            self._feed.remove(self._token)
            self.active = False


class ChangeFeed:
    """Fan-out of whole-row change notifications to subscribers.

    Callbacks run synchronously on the thread that committed the change. A
    failing callback is logged and does not stop delivery to the others.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[int, tuple[ProjectCallback, ProjectCallback, DeleteCallback]] = {}
        self._next_token = 0

    def add(
        self,
        on_insert: ProjectCallback,
        on_update: ProjectCallback,
        on_delete: DeleteCallback,
    ) -> Subscription:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = (on_insert, on_update, on_delete)
        return Subscription(self, token)

    def remove(self, token: int) -> None:
        with self._lock:
            self._subscribers.pop(token, None)

    def _callbacks(self) -> list:
        with self._lock:
            return list(self._subscribers.values())

    def publish_insert(self, project: Project) -> None:
        for on_insert, _, _ in self._callbacks():
            self._deliver(on_insert, project)

    def publish_update(self, project: Project) -> None:
        for _, on_update, _ in self._callbacks():
            self._deliver(on_update, project)

    def publish_delete(self, project_id: str) -> None:
        for _, _, on_delete in self._callbacks():
            self._deliver(on_delete, project_id)

    @staticmethod
    def _deliver(callback, payload) -> None:
        try:
            callback(payload)
        except Exception:
            logger.exception("Change subscriber failed")


class ProjectStore(ABC):
    """Abstract persistence interface for projects.

    Stores hold whole project snapshots. Writes are last-write-wins at the
    granularity of one project; there is no merge.
    """

    #: Whether ``subscribe`` delivers realtime change notifications.
    supports_push = False

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release any held resources."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create tables or files the store needs."""
        pass

    @abstractmethod
    def test_connection(self) -> bool:
        """Return True if the store is reachable."""
        pass

    @abstractmethod
    def list_projects(self) -> list[Project]:
        """List all projects, most recently created first."""
        pass

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def upsert_project(self, project: Project) -> Project:
        """Insert or replace a project.

        ``created_at`` is stamped on first insert and ``updated_at`` on every
        write. Returns the stored snapshot including those timestamps.
        """
        pass

    @abstractmethod
    def delete_project(self, project_id: str) -> None:
        """Delete a project.

        Raises:
            NotFoundError: If no project has that ID
        """
        pass

    def subscribe(
        self,
        on_insert: ProjectCallback,
        on_update: ProjectCallback,
        on_delete: DeleteCallback,
    ) -> Subscription:
        """Register callbacks for inserts, updates and deletes.

        Raises:
            NotImplementedError: If the store has no push channel
        """
        raise NotImplementedError(f"{type(self).__name__} does not publish changes")
