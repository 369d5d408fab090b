"""Shared pytest fixtures for eventbudget tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from eventbudget.app.workspace import ProjectWorkspace
from eventbudget.database.factories import create_json_store, create_sqlite_store
from eventbudget.domain import editing
from eventbudget.domain.entities import PaymentType


class FakeTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    def __init__(self, delay, function):
        self.delay = delay
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class FakeTimers:
    """Timer factory that records every timer it creates."""

    def __init__(self):
        self.created = []

    def __call__(self, delay, function):
        timer = FakeTimer(delay, function)
        self.created.append(timer)
        return timer

    @property
    def last(self):
        return self.created[-1]

    @property
    def active(self):
        return [t for t in self.created if t.started and not t.cancelled]


@pytest.fixture
def temp_db():
    """Create a temporary SQLite project store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    # Cleanup
    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def json_store(tmp_path):
    """Create a JSON file project store in a temporary directory."""
    store = create_json_store(json_path=str(tmp_path / "projects.json"))
    store.connect()
    store.initialize_schema()
    return store


@pytest.fixture
def fake_timers():
    """Timer factory whose timers never fire on their own."""
    return FakeTimers()


@pytest.fixture
def workspace(temp_db, fake_timers):
    """Create a ProjectWorkspace over the temporary database."""
    ws = ProjectWorkspace(temp_db, timer_factory=fake_timers)
    ws.load()
    yield ws
    ws.detach()


@pytest.fixture
def sample_project():
    """A EUR project with items in three categories and some analysis entries."""
    project = editing.new_project(
        name="ECC 2025",
        client="Novartis",
        date=date(2025, 6, 12),
        currency="EUR",
        exchange_rate=Decimal("38.50"),
        service_fee_percent=Decimal("10"),
    )
    project = editing.add_budget_item(project, "registration", "Delegate fee", 2, Decimal("100"))
    project = editing.add_budget_item(project, "accommodation", "Hotel nights", 1, Decimal("200"))
    project = editing.add_budget_item(project, "other", "Printed material", 3, Decimal("50"))
    project = editing.add_payment(project, PaymentType.INCOMING, date(2025, 5, 1), "Deposit", Decimal("400"))
    project = editing.add_payment(project, PaymentType.OUTGOING, date(2025, 5, 3), "Venue", Decimal("100"))
    project = editing.add_advance(project, date(2025, 5, 2), "Hotel deposit", Decimal("50"), "Hilton")
    project = editing.add_expense(project, date(2025, 5, 4), "Courier", Decimal("20"))
    return project


@pytest.fixture
def saved_project(temp_db, sample_project):
    """The sample project stored in the temporary database."""
    return temp_db.upsert_project(sample_project)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
