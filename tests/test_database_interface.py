"""Tests for project stores returning domain models."""

import json
from datetime import datetime
from decimal import Decimal

import pytest

from eventbudget.database.factories import open_project_store
from eventbudget.database.json_store import JSONFileProjectStore
from eventbudget.database.sqlalchemy_db import SQLAlchemyProjectStore
from eventbudget.domain import editing
from eventbudget.domain.entities import Project
from eventbudget.domain.errors import NotFoundError


@pytest.fixture(params=["sqlite", "json"])
def store(request, temp_db, json_store):
    """Run the shared store tests against both implementations."""
    return temp_db if request.param == "sqlite" else json_store


class TestProjectStore:
    """Behaviour every project store shares."""

    def test_empty_store(self, store):
        assert store.list_projects() == []
        assert store.get_project("missing") is None
        assert store.test_connection() is True

    def test_upsert_stamps_timestamps(self, store, sample_project):
        stored = store.upsert_project(sample_project)

        assert isinstance(stored, Project)
        assert stored.id == sample_project.id
        assert isinstance(stored.created_at, datetime)
        assert isinstance(stored.updated_at, datetime)

    def test_get_project_returns_domain_model(self, store, sample_project):
        store.upsert_project(sample_project)
        loaded = store.get_project(sample_project.id)

        assert isinstance(loaded, Project)
        assert loaded.name == "ECC 2025"
        assert loaded.exchange_rate == Decimal("38.50")
        assert loaded.categories.items("registration")[0].total == Decimal("200")
        assert loaded.payments == sample_project.payments
        assert loaded.advances == sample_project.advances
        assert loaded.expenses == sample_project.expenses
        assert loaded.category_vat_rates == sample_project.category_vat_rates

    def test_upsert_replaces_whole_project(self, store, sample_project):
        first = store.upsert_project(sample_project)
        edited = editing.update_project(first, name="Renamed")
        edited = editing.delete_payment(edited, edited.payments[0].id)
        store.upsert_project(edited)

        loaded = store.get_project(sample_project.id)
        assert loaded.name == "Renamed"
        assert len(loaded.payments) == 1
        assert len(store.list_projects()) == 1
        assert loaded.created_at.replace(tzinfo=None) == first.created_at.replace(tzinfo=None)

    def test_rates_round_trip_exactly(self, store, sample_project):
        project = editing.update_project(
            sample_project, exchange_rate="38.123456", service_fee_percent="12.3456"
        )
        store.upsert_project(project)

        loaded = store.get_project(project.id)
        assert loaded.exchange_rate == Decimal("38.123456")
        assert loaded.service_fee_percent == Decimal("12.3456")

    def test_list_newest_first(self, store):
        older = store.upsert_project(editing.new_project(name="Older"))
        newer = store.upsert_project(editing.new_project(name="Newer"))

        assert [p.id for p in store.list_projects()] == [newer.id, older.id]

    def test_delete_project(self, store, sample_project):
        store.upsert_project(sample_project)
        store.delete_project(sample_project.id)
        assert store.get_project(sample_project.id) is None

    def test_delete_unknown_project(self, store):
        with pytest.raises(NotFoundError, match="not found"):
            store.delete_project("missing")


class TestChangeFeed:
    """SQLAlchemy store publishes committed changes."""

    def test_supports_push(self, temp_db, json_store):
        assert temp_db.supports_push is True
        assert json_store.supports_push is False
        with pytest.raises(NotImplementedError):
            json_store.subscribe(print, print, print)

    def test_insert_update_delete_are_published(self, temp_db, sample_project):
        events = []
        subscription = temp_db.subscribe(
            lambda p: events.append(("insert", p.id)),
            lambda p: events.append(("update", p.name)),
            lambda project_id: events.append(("delete", project_id)),
        )

        stored = temp_db.upsert_project(sample_project)
        temp_db.upsert_project(editing.update_project(stored, name="Renamed"))
        temp_db.delete_project(sample_project.id)

        assert events == [
            ("insert", sample_project.id),
            ("update", "Renamed"),
            ("delete", sample_project.id),
        ]

        subscription.unsubscribe()
        temp_db.upsert_project(editing.new_project(name="Unheard"))
        assert len(events) == 3
        subscription.unsubscribe()

    def test_failing_subscriber_does_not_block_others(self, temp_db, sample_project):
        received = []

        def broken(project):
            raise RuntimeError("subscriber bug")

        temp_db.subscribe(broken, broken, broken)
        temp_db.subscribe(received.append, received.append, received.append)

        temp_db.upsert_project(sample_project)
        assert [p.id for p in received] == [sample_project.id]


class TestJSONFileStore:
    """File format details of the local store."""

    def test_file_shape(self, json_store, sample_project):
        json_store.upsert_project(sample_project)

        data = json.loads(json_store.path.read_text(encoding="utf-8"))
        assert list(data) == ["projects"]
        record = data["projects"][0]
        assert record["id"] == sample_project.id
        assert record["categories"]["registration"][0]["unitPrice"] == 100
        assert record["created_at"]

    def test_reads_bare_list(self, tmp_path):
        path = tmp_path / "legacy.json"
        path.write_text(json.dumps([{"id": "old", "name": "Legacy", "serviceFeePercent": 15}]), encoding="utf-8")

        projects = JSONFileProjectStore(str(path)).list_projects()
        assert len(projects) == 1
        assert projects[0].service_fee_percent == Decimal("15")

    def test_missing_file_is_empty(self, tmp_path):
        assert JSONFileProjectStore(str(tmp_path / "nope.json")).list_projects() == []


class TestOpenProjectStore:
    """Store selection and fallback."""

    def test_opens_sqlite(self, tmp_path):
        store = open_project_store(database_path=str(tmp_path / "budget.db"), json_path=str(tmp_path / "p.json"))
        try:
            assert isinstance(store, SQLAlchemyProjectStore)
            assert store.list_projects() == []
        finally:
            store.disconnect()

    def test_prefer_local(self, tmp_path):
        store = open_project_store(
            database_path=str(tmp_path / "budget.db"),
            json_path=str(tmp_path / "p.json"),
            prefer_local=True,
        )
        assert isinstance(store, JSONFileProjectStore)
        assert not (tmp_path / "budget.db").exists()

    def test_falls_back_when_database_unreachable(self, tmp_path):
        unreachable = str(tmp_path / "missing-dir" / "budget.db")
        store = open_project_store(database_path=unreachable, json_path=str(tmp_path / "p.json"))
        assert isinstance(store, JSONFileProjectStore)

    def test_falls_back_on_bad_url(self, tmp_path):
        store = open_project_store(database_url="nosuchdialect://host/db", json_path=str(tmp_path / "p.json"))
        assert isinstance(store, JSONFileProjectStore)
