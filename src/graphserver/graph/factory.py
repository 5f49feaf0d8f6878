"""Graph database factories.

Ephemeral is what tests run on: every call yields an empty in-memory
database, no matter what earlier runs left behind. Persistent keeps a
SQLite file under the store directory.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from graphserver.core.interfaces.storage import GraphDatabase, GraphDatabaseFactory
from graphserver.graph.database import SqlGraphDatabase
from graphserver.logging_schema import LogEvent

logger = logging.getLogger(__name__)

STORE_FILE_NAME = "graph.db"

_TRUE_VALUES = frozenset({"true", "yes", "on", "1"})


def _echo(properties: Mapping[str, str]) -> bool:
    return properties.get("echo", "false").strip().lower() in _TRUE_VALUES


class EphemeralGraphDatabaseFactory(GraphDatabaseFactory):
    """Fresh, non-persistent database per call.

    The store directory is ignored; nothing touches the filesystem.
    """

    def create_database(
        self, store_dir: str, properties: Mapping[str, str]
    ) -> GraphDatabase:
        # One shared connection keeps the in-memory database alive across threads
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=_echo(properties),
        )
        logger.info(
            "Created ephemeral graph database",
            extra={"event": LogEvent.DATABASE_CREATED, "persistent": False},
        )
        return SqlGraphDatabase(engine)


class PersistentGraphDatabaseFactory(GraphDatabaseFactory):
    """SQLite file database under the store directory."""

    def create_database(
        self, store_dir: str, properties: Mapping[str, str]
    ) -> GraphDatabase:
        directory = Path(store_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / STORE_FILE_NAME
        engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"check_same_thread": False},
            echo=_echo(properties),
        )
        logger.info(
            "Opened persistent graph database",
            extra={
                "event": LogEvent.DATABASE_CREATED,
                "persistent": True,
                "location": str(path),
            },
        )
        return SqlGraphDatabase(engine, location=str(directory))
