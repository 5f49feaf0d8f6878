"""Lifecycle controller for the graph test server.

States:
- STOPPED: No container; start() allowed
- STARTING: Container launched, readiness polling in progress
- RUNNING: Container reported started; accessors usable
- FAILED: Startup failed or timed out; only stop() leads back to STOPPED

Transitions:
    STOPPED -> STARTING -> RUNNING
    STARTING -> FAILED
    any -> STOPPED (stop(), unconditionally)

Usage:
    server = LocalTestServer("localhost", 7473)
    server.with_configuration_resource("test-db.properties").start()
    try:
        server.database_handle().graph.create_node({"name": "alice"})
    finally:
        server.stop()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from graphserver.config import get_settings
from graphserver.container.server import GraphServer
from graphserver.core.interfaces.container import ServerContainer
from graphserver.core.interfaces.storage import GraphDatabase
from graphserver.core.models import ConfigurationResource, Endpoint
from graphserver.errors import (
    ConfigurationError,
    IllegalStateError,
    NotRunningError,
    StartupError,
    StartupTimeoutError,
    TeardownWarning,
)
from graphserver.graph.cleaner import GraphDatabaseCleaner
from graphserver.harness.handle import CleanerFactory, DatabaseHandle
from graphserver.harness.polling import ReadinessPoller
from graphserver.harness.server_config import ServerConfig
from graphserver.logging_schema import LogEvent
from graphserver.metrics import (
    SERVER_START_DURATION,
    SERVER_STARTS_TOTAL,
    TEARDOWN_FAILURES_TOTAL,
)

ContainerFactory = Callable[[ServerConfig, ConfigurationResource], ServerContainer]


class ServerState(StrEnum):
    """Lifecycle states."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    FAILED = "failed"


class ServerInstance:
    """State owned by one controller: endpoint, state and container."""

    def __init__(self, endpoint: Endpoint) -> None:
        self.endpoint = endpoint
        self.state = ServerState.STOPPED
        self.container: ServerContainer | None = None

    def reset(self) -> None:
        self.container = None
        self.state = ServerState.STOPPED


class LifecycleController:
    """Starts, polls and stops one graph server.

    Single caller, sequential use: no internal locking. start() and stop()
    block for their full duration, readiness sleeps included.

    Args:
        config: Server construction parameters (default: ServerConfig())
        poller: Readiness poller (default: from GRAPHSERVER_POLL_* settings)
        container_factory: Builds the container from config and resource
            (default: GraphServer.assemble)
        cleaner_factory: Builds the database cleaner used by clean_db()
        logger: Logger for lifecycle messages
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        poller: ReadinessPoller | None = None,
        container_factory: ContainerFactory | None = None,
        cleaner_factory: CleanerFactory = GraphDatabaseCleaner,
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._config = config or ServerConfig()
        self._poller = poller or ReadinessPoller.from_config(
            get_settings().polling, logger=self._logger
        )
        self._container_factory = container_factory or GraphServer.assemble
        self._cleaner_factory = cleaner_factory
        self._instance = ServerInstance(self._config.endpoint)
        self.last_teardown_warning: TeardownWarning | None = None

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def state(self) -> ServerState:
        return self._instance.state

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def endpoint(self) -> Endpoint:
        return self._instance.endpoint

    @property
    def hostname(self) -> str:
        return self._instance.endpoint.hostname

    @property
    def port(self) -> int:
        return self._instance.endpoint.port

    @property
    def container(self) -> ServerContainer | None:
        return self._instance.container

    def base_uri(self) -> str:
        return self._running_container().base_uri

    def graph_database(self) -> GraphDatabase:
        return self._running_container().database

    def database_handle(self) -> DatabaseHandle:
        self._running_container()
        return DatabaseHandle(self, self._cleaner_factory)

    def clean_db(self) -> dict[str, int]:
        return self.database_handle().clean_db()

    # =========================================================================
    # Configuration
    # =========================================================================

    def with_configuration_resource(self, name: str) -> LifecycleController:
        """Set the configuration resource name. Only while stopped."""
        if self._instance.state != ServerState.STOPPED:
            raise IllegalStateError(
                f"Cannot change configuration resource while {self._instance.state}"
            )
        self._config.with_configuration_resource(name)
        return self

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start the server and block until it is ready.

        Raises:
            IllegalStateError: If not STOPPED. Nothing changes.
            ConfigurationError: If the configuration resource is missing.
                State stays STOPPED, no container is built.
            StartupError: If the server reports failure. State becomes FAILED.
            StartupTimeoutError: If the server is not ready within the
                polling budget. State becomes FAILED.
        """
        instance = self._instance
        if instance.state != ServerState.STOPPED:
            raise IllegalStateError(f"Server already {instance.state}")

        started_at = time.monotonic()
        try:
            resource = self._config.resolve()
        except ConfigurationError:
            SERVER_STARTS_TOTAL.labels(result="config_error").inc()
            raise

        instance.container = self._container_factory(self._config, resource)
        instance.state = ServerState.STARTING
        self._logger.info(
            "Starting graph server",
            extra={
                "event": LogEvent.SERVER_STARTING,
                "hostname": self.hostname,
                "port": self.port,
                "resource": str(resource.path),
            },
        )

        try:
            try:
                instance.container.start()
                probes = self._poller.wait(instance.container.status)
            except StartupTimeoutError:
                self._fail("timeout")
                raise
            except StartupError:
                self._fail("failed")
                raise
            except Exception as exc:
                self._fail("failed")
                raise StartupError(f"Graph server startup failed: {exc}") from exc

            instance.state = ServerState.RUNNING
            elapsed = time.monotonic() - started_at
            SERVER_STARTS_TOTAL.labels(result="started").inc()
            SERVER_START_DURATION.observe(elapsed)
            self._logger.info(
                "Graph server started",
                extra={
                    "event": LogEvent.SERVER_STARTED,
                    "base_uri": instance.container.base_uri,
                    "probes": probes,
                    "duration_ms": round(elapsed * 1000, 1),
                },
            )
        finally:
            # State is settled; a Ctrl-C absorbed while polling surfaces now
            self._poller.raise_if_interrupted()

    def stop(self) -> None:
        """Stop the server. Never raises.

        Teardown errors are logged as TeardownWarning; the container is
        released and the state is STOPPED afterwards in every case.
        Stopping without a container is a no-op.
        """
        instance = self._instance
        container = instance.container
        if container is None:
            self._logger.debug(
                "Stop requested with no server",
                extra={"event": LogEvent.STOP_SKIPPED},
            )
            instance.reset()
            return

        try:
            container.stop()
        except Exception as exc:
            warning = TeardownWarning(f"Error stopping server: {exc}")
            self.last_teardown_warning = warning
            TEARDOWN_FAILURES_TOTAL.inc()
            self._logger.warning(
                str(warning),
                exc_info=exc,
                extra={
                    "event": LogEvent.TEARDOWN_FAILED,
                    "warning": type(warning).__name__,
                },
            )
        finally:
            instance.reset()

        self._logger.info(
            "Graph server stopped",
            extra={"event": LogEvent.SERVER_STOPPED, "port": self.port},
        )

    # =========================================================================
    # Context manager
    # =========================================================================

    def __enter__(self) -> LifecycleController:
        try:
            self.start()
        except BaseException:
            self.stop()
            raise
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _running_container(self) -> ServerContainer:
        instance = self._instance
        if instance.state != ServerState.RUNNING or instance.container is None:
            raise NotRunningError(f"Server is {instance.state}, not running")
        return instance.container

    def _fail(self, result: str) -> None:
        self._instance.state = ServerState.FAILED
        SERVER_STARTS_TOTAL.labels(result=result).inc()
        self._logger.error(
            "Graph server startup failed",
            extra={"event": LogEvent.SERVER_START_FAILED, "result": result},
        )


class LocalTestServer(LifecycleController):
    """Lifecycle controller built from a bare hostname and port."""

    def __init__(self, hostname: str = "localhost", port: int = 7473, **kwargs: Any) -> None:
        super().__init__(ServerConfig(hostname, port), **kwargs)
