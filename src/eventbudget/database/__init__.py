"""Persistence layer for eventbudget application."""

from eventbudget.database.base import ProjectStore, Subscription
from eventbudget.database.factories import (
    create_json_store,
    create_sqlite_store,
    open_project_store,
)

__all__ = [
    "ProjectStore",
    "Subscription",
    "create_json_store",
    "create_sqlite_store",
    "open_project_store",
]
