"""Integration test fixtures.

Servers bind to 127.0.0.1 on a port picked by the OS, so parallel runs
and developer machines with a graph server on 7473 do not collide.
"""

import socket
from collections.abc import Iterator
from pathlib import Path

import httpcore  # noqa: F401  # loaded before pytester snapshots sys.modules, so httpx's cached exception map stays valid
import pytest

from graphserver.harness.controller import LifecycleController
from graphserver.harness.polling import ReadinessPoller
from graphserver.harness.server_config import ServerConfig

HOST = "127.0.0.1"

PROPERTIES = """\
graphserver.database.location={location}
graphserver.rest.mount_point=/db/data
"""


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def free_port() -> int:
    """A port nothing is listening on right now."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((HOST, 0))
        return sock.getsockname()[1]


@pytest.fixture
def resource_dir(tmp_path: Path) -> Path:
    """Directory holding test-db.properties with a store under tmp_path."""
    (tmp_path / "test-db.properties").write_text(
        PROPERTIES.format(location=(tmp_path / "graph-db").as_posix())
    )
    return tmp_path


@pytest.fixture
def poller() -> ReadinessPoller:
    """Faster polling than the default, with a budget of ~10s."""
    return ReadinessPoller(interval=0.1, max_attempts=100)


@pytest.fixture
def server(
    free_port: int, resource_dir: Path, poller: ReadinessPoller
) -> Iterator[LifecycleController]:
    """Stopped controller for a real server on free_port."""
    controller = LifecycleController(
        ServerConfig(HOST, free_port, search_path=[resource_dir]),
        poller=poller,
    )
    yield controller
    controller.stop()
