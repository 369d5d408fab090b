"""Store factory functions for creating project store instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from eventbudget.database.base import ProjectStore
from eventbudget.database.json_store import JSONFileProjectStore
from eventbudget.database.sqlalchemy_db import SQLAlchemyProjectStore

logger = logging.getLogger(__name__)

DB_PATH_ENV = "EVENTBUDGET_DB_PATH"
JSON_PATH_ENV = "EVENTBUDGET_JSON_PATH"
DATABASE_URL_ENV = "EVENTBUDGET_DATABASE_URL"


def default_data_dir() -> Path:
    """Return ~/.eventbudget, creating it if needed."""
    data_dir = Path.home() / ".eventbudget"
    data_dir.mkdir(exist_ok=True)
    return data_dir


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyProjectStore:
    """Create a SQLite project store.

    Args:
        database_path: Path to SQLite database file. If None, checks
            EVENTBUDGET_DB_PATH environment variable, then defaults to
            ~/.eventbudget/eventbudget.db

    Returns:
        SQLAlchemyProjectStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        database_path = str(default_data_dir() / "eventbudget.db")

    return SQLAlchemyProjectStore(f"sqlite:///{database_path}")


def create_json_store(json_path: Optional[str] = None) -> JSONFileProjectStore:
    """Create a local JSON file project store.

    Args:
        json_path: Path to the JSON file. If None, checks EVENTBUDGET_JSON_PATH
            environment variable, then defaults to ~/.eventbudget/projects.json
    """
    if json_path is None:
        json_path = os.environ.get(JSON_PATH_ENV)

    if json_path is None:
        json_path = str(default_data_dir() / "projects.json")

    return JSONFileProjectStore(json_path)


def open_project_store(
    database_url: Optional[str] = None,
    database_path: Optional[str] = None,
    json_path: Optional[str] = None,
    prefer_local: bool = False,
) -> ProjectStore:
    """Open the database store, falling back to the local JSON store.

    The database is used when it answers a test query. If it cannot be
    reached (or ``prefer_local`` is set) the JSON file store is returned
    instead, so the application keeps working offline.

    Args:
        database_url: SQLAlchemy URL; defaults to EVENTBUDGET_DATABASE_URL,
            then to a SQLite file (see ``create_sqlite_store``)
        database_path: SQLite file path used when no URL is given
        json_path: Path of the local fallback file
        prefer_local: Skip the database entirely

    Returns:
        A connected store with its schema initialized
    """
    if not prefer_local:
        if database_url is None:
            database_url = os.environ.get(DATABASE_URL_ENV)
        try:
            if database_url is not None:
                store: ProjectStore = SQLAlchemyProjectStore(database_url)
            else:
                store = create_sqlite_store(database_path)
            if store.test_connection():
                store.connect()
                store.initialize_schema()
                return store
        except (SQLAlchemyError, ImportError) as e:
            logger.warning("Could not open database store: %s", e)
        logger.warning("Falling back to local project file")

    store = create_json_store(json_path)
    store.connect()
    store.initialize_schema()
    return store
