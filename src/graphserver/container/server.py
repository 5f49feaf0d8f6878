"""Graph server: the underlying container a lifecycle controller drives."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from fastapi import FastAPI

from graphserver.api.app import create_app
from graphserver.config import WebConfig, get_settings
from graphserver.container.health import StartupHealthCheck
from graphserver.container.web import UvicornWebServer
from graphserver.core.interfaces.container import (
    AddressResolver,
    ContainerStatus,
    ServerContainer,
    ServerModule,
)
from graphserver.core.interfaces.storage import GraphDatabase, GraphDatabaseFactory
from graphserver.core.models import ConfigurationResource, Endpoint
from graphserver.errors import NotRunningError, StartupError
from graphserver.logging_schema import LogEvent
from graphserver.properties import (
    DATABASE_LOCATION,
    DEFAULT_DATABASE_LOCATION,
    database_properties,
)

if TYPE_CHECKING:
    from graphserver.harness.server_config import ServerConfig

logger = logging.getLogger(__name__)


class GraphServer(ServerContainer):
    """FastAPI app over a GraphDatabase, served by uvicorn.

    Collaborators are injected; assemble() builds them from a ServerConfig.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        resource: ConfigurationResource,
        storage_factory: GraphDatabaseFactory,
        address_resolver: AddressResolver,
        health_check: StartupHealthCheck,
        modules: Sequence[type[ServerModule]],
        web_server: UvicornWebServer | None = None,
        web_config: WebConfig | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._resource = resource
        self._storage_factory = storage_factory
        self._address_resolver = address_resolver
        self._health_check = health_check
        self._module_types = list(modules)
        self._web_config = web_config or get_settings().web
        self._web_server = web_server or UvicornWebServer(
            address_resolver.hostname(),
            endpoint.port,
            log_level=self._web_config.log_level,
        )
        self._database: GraphDatabase | None = None
        self._app: FastAPI | None = None
        self._modules: list[ServerModule] = []

    @classmethod
    def assemble(cls, config: ServerConfig, resource: ConfigurationResource) -> GraphServer:
        """Build a server from the collaborators a ServerConfig provides."""
        return cls(
            endpoint=config.endpoint,
            resource=resource,
            storage_factory=config.storage_factory(),
            address_resolver=config.address_resolver(),
            health_check=StartupHealthCheck(config.health_check_rules()),
            modules=config.server_modules(),
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Create the database, register modules and launch the web server.

        Returns without waiting for the web server to accept connections.

        Raises:
            StartupError: If a startup health check rule fails.
        """
        properties = self._resource.properties
        if not self._health_check.run(properties):
            raise StartupError(
                f"Startup health check failed: {self._health_check.failure_message}"
            )

        self._database = self._storage_factory.create_database(
            properties.get(DATABASE_LOCATION, DEFAULT_DATABASE_LOCATION),
            database_properties(properties),
        )
        self._app = create_app(self._database)
        for module_type in self._module_types:
            module = module_type()
            module.start(self._app, properties)
            self._modules.append(module)

        self._web_server.start(self._app)

    def status(self) -> ContainerStatus:
        return self._web_server.status()

    def stop(self) -> None:
        """Stop web server, modules and database.

        Every step runs even if an earlier one raised; the first error
        propagates afterwards.
        """
        try:
            self._web_server.stop(self._web_config.shutdown_timeout)
        finally:
            try:
                while self._modules:
                    module = self._modules.pop()
                    module.stop()
                    logger.info(
                        "Server module stopped",
                        extra={
                            "event": LogEvent.MODULE_STOPPED,
                            "server_module": type(module).__name__,
                        },
                    )
            finally:
                if self._database is not None:
                    database, self._database = self._database, None
                    database.shutdown()

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def database(self) -> GraphDatabase:
        if self._database is None:
            raise NotRunningError("Graph database not available")
        return self._database

    @property
    def app(self) -> FastAPI | None:
        return self._app

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def base_uri(self) -> str:
        # Resolved host: the configured one may be a wildcard
        return Endpoint(
            hostname=self._address_resolver.hostname(), port=self._endpoint.port
        ).base_uri
