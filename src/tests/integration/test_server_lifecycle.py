"""Lifecycle of a real graph server on a local port."""

import socket
from pathlib import Path

import httpx
import pytest

from graphserver.errors import (
    ConfigurationError,
    IllegalStateError,
    NotRunningError,
    StartupError,
)
from graphserver.graph.factory import STORE_FILE_NAME, PersistentGraphDatabaseFactory
from graphserver.harness.controller import LifecycleController, ServerState
from graphserver.harness.polling import ReadinessPoller
from graphserver.harness.server_config import ServerConfig

HOST = "127.0.0.1"


class TestStartStop:
    def test_start_serves_rest_api(self, server: LifecycleController, free_port: int) -> None:
        server.start()

        assert server.state == ServerState.RUNNING
        assert server.base_uri() == f"http://{HOST}:{free_port}/"
        response = httpx.post(f"{server.base_uri()}db/data/node", json={"name": "alice"})
        assert response.status_code == 201
        assert server.graph_database().count_nodes() == 1

    def test_stop_releases_port(self, server: LifecycleController, free_port: int) -> None:
        server.start()
        server.stop()

        assert server.state == ServerState.STOPPED
        with pytest.raises(httpx.ConnectError):
            httpx.get(f"http://{HOST}:{free_port}/health")
        with pytest.raises(NotRunningError):
            server.base_uri()

    def test_restart_gives_empty_graph(self, server: LifecycleController) -> None:
        server.start()
        server.graph_database().create_node({"name": "alice"})
        server.stop()

        server.start()

        assert server.graph_database().count_nodes() == 0
        assert httpx.get(f"{server.base_uri()}health").json()["nodes"] == 0

    def test_second_start_rejected(self, server: LifecycleController) -> None:
        server.start()
        container = server.container

        with pytest.raises(IllegalStateError):
            server.start()

        assert server.container is container
        assert httpx.get(f"{server.base_uri()}health").status_code == 200

    def test_stop_twice(self, server: LifecycleController) -> None:
        server.start()

        server.stop()
        server.stop()

        assert server.state == ServerState.STOPPED

    def test_context_manager(
        self, free_port: int, resource_dir: Path, poller: ReadinessPoller
    ) -> None:
        config = ServerConfig(HOST, free_port, search_path=[resource_dir])

        with LifecycleController(config, poller=poller) as server:
            base_uri = server.base_uri()
            assert httpx.get(f"{base_uri}db/data/").status_code == 200

        with pytest.raises(httpx.ConnectError):
            httpx.get(f"{base_uri}health")


class TestStartupFailures:
    def test_missing_resource(self, server: LifecycleController) -> None:
        server.with_configuration_resource("missing.properties")

        with pytest.raises(ConfigurationError):
            server.start()

        assert server.state == ServerState.STOPPED
        assert server.container is None

    def test_port_in_use(self, server: LifecycleController, free_port: int) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind((HOST, free_port))
            blocker.listen()

            with pytest.raises(StartupError):
                server.start()

            assert server.state == ServerState.FAILED
            server.stop()
            assert server.state == ServerState.STOPPED

    def test_restart_after_port_freed(self, server: LifecycleController, free_port: int) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind((HOST, free_port))
            blocker.listen()
            with pytest.raises(StartupError):
                server.start()
            server.stop()

        server.start()

        assert server.state == ServerState.RUNNING


class TestDatabaseHandle:
    def test_clean_db_between_tests(self, server: LifecycleController) -> None:
        server.start()
        handle = server.database_handle()
        base = f"{handle.base_uri}db/data"
        alice = httpx.post(f"{base}/node", json={"name": "alice"}).json()
        bob = httpx.post(f"{base}/node", json={"name": "bob"}).json()
        httpx.post(
            f"{base}/node/{alice['id']}/relationships",
            json={"to": bob["self"], "type": "KNOWS"},
        )
        httpx.post(
            f"{base}/index/node/people",
            json={"key": "name", "value": "alice", "uri": alice["self"]},
        )

        result = handle.clean_db()

        assert result == {
            "index_entries_deleted": 1,
            "relationships_deleted": 1,
            "nodes_deleted": 2,
        }
        assert httpx.get(f"{base}/relationship/types").json() == []
        assert httpx.get(f"{base}/index/node/people/name/alice").json() == []
        assert server.state == ServerState.RUNNING


class TestPersistentStore:
    def test_store_written_under_location(
        self, free_port: int, resource_dir: Path, poller: ReadinessPoller
    ) -> None:
        config = ServerConfig(
            HOST,
            free_port,
            search_path=[resource_dir],
            storage_factory=PersistentGraphDatabaseFactory(),
        )

        with LifecycleController(config, poller=poller) as server:
            server.graph_database().create_node({"name": "alice"})

        assert (resource_dir / "graph-db" / STORE_FILE_NAME).is_file()
