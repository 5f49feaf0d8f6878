"""Fixtures for unit tests."""

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from graphserver.core.interfaces.container import ContainerStatus, ServerContainer
from graphserver.graph.database import SqlGraphDatabase
from graphserver.graph.factory import EphemeralGraphDatabaseFactory
from graphserver.harness.polling import ReadinessPoller
from graphserver.harness.server_config import ServerConfig

PROPERTIES = """\
graphserver.database.location=target/unit-db
graphserver.rest.mount_point=/db/data
"""


@pytest.fixture
def graph() -> Iterator[SqlGraphDatabase]:
    """Fresh in-memory graph database."""
    db = EphemeralGraphDatabaseFactory().create_database("unused", {})
    yield db
    db.shutdown()


@pytest.fixture
def resource_dir(tmp_path: Path) -> Path:
    """Directory holding test-db.properties."""
    (tmp_path / "test-db.properties").write_text(PROPERTIES)
    return tmp_path


@pytest.fixture
def server_config(resource_dir: Path) -> ServerConfig:
    """ServerConfig resolving resources from resource_dir only."""
    return ServerConfig("127.0.0.1", 7473, search_path=[resource_dir])


@pytest.fixture
def sleeps() -> list[float]:
    """Recorded poller sleeps."""
    return []


@pytest.fixture
def poller(sleeps: list[float]) -> ReadinessPoller:
    """Poller with default budget that records instead of sleeping."""
    return ReadinessPoller(interval=0.5, max_attempts=6, sleep=sleeps.append)


@pytest.fixture
def mock_container() -> MagicMock:
    """ServerContainer mock that starts on the first status check."""
    container = MagicMock(spec=ServerContainer)
    container.status.return_value = ContainerStatus.STARTED
    container.base_uri = "http://127.0.0.1:7473/"
    container.database = MagicMock()
    return container


@pytest.fixture
def container_factory(mock_container: MagicMock) -> MagicMock:
    """Container factory returning mock_container."""
    return MagicMock(return_value=mock_container)


@pytest.fixture
def isolated_loggers(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Let setup_logging() rewire throwaway handler lists."""
    root = logging.getLogger()
    level = root.level
    for name in ("", "uvicorn", "uvicorn.error", "uvicorn.access"):
        target = logging.getLogger(name)
        monkeypatch.setattr(target, "handlers", [])
        monkeypatch.setattr(target, "propagate", target.propagate)
        monkeypatch.setattr(target, "disabled", target.disabled)
    yield
    root.setLevel(level)
