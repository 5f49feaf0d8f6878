"""Unit tests for graph database factories."""

from pathlib import Path

from graphserver.graph.database import SqlGraphDatabase
from graphserver.graph.factory import (
    STORE_FILE_NAME,
    EphemeralGraphDatabaseFactory,
    PersistentGraphDatabaseFactory,
)


class TestEphemeralFactory:
    def test_each_database_starts_empty(self) -> None:
        factory = EphemeralGraphDatabaseFactory()
        first = factory.create_database("ignored", {})
        first.create_node({"name": "alice"})

        second = factory.create_database("ignored", {})
        try:
            assert second.count_nodes() == 0
            assert first.count_nodes() == 1
        finally:
            first.shutdown()
            second.shutdown()

    def test_does_not_touch_store_dir(self, tmp_path: Path) -> None:
        store = tmp_path / "store"

        db = EphemeralGraphDatabaseFactory().create_database(str(store), {})
        db.shutdown()

        assert not store.exists()

    def test_echo_property(self) -> None:
        db = EphemeralGraphDatabaseFactory().create_database("", {"echo": "TRUE"})
        try:
            assert isinstance(db, SqlGraphDatabase)
            assert db.engine.echo is True
        finally:
            db.shutdown()


class TestPersistentFactory:
    def test_creates_store_file(self, tmp_path: Path) -> None:
        store = tmp_path / "nested" / "graph-db"

        db = PersistentGraphDatabaseFactory().create_database(str(store), {})
        db.shutdown()

        assert (store / STORE_FILE_NAME).is_file()
        assert db.location == str(store)

    def test_data_survives_reopen(self, tmp_path: Path) -> None:
        factory = PersistentGraphDatabaseFactory()
        db = factory.create_database(str(tmp_path), {})
        node = db.create_node({"name": "alice"})
        db.shutdown()

        reopened = factory.create_database(str(tmp_path), {})
        try:
            assert reopened.get_node(node.id).properties == {"name": "alice"}
        finally:
            reopened.shutdown()
