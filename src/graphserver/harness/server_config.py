"""Server construction parameters and collaborator builders.

ServerConfig is what a LifecycleController starts from. Each collaborator
is an injected strategy object; anything not supplied gets the test
default:

    config = ServerConfig("localhost", 7474).with_configuration_resource("my-db.properties")
    config = ServerConfig(storage_factory=PersistentGraphDatabaseFactory())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from graphserver.config import get_settings
from graphserver.container.address import FixedAddressResolver
from graphserver.container.modules import RestApiModule, ThirdPartyExtensionModule
from graphserver.core.interfaces.container import (
    AddressResolver,
    HealthCheckRule,
    ServerModule,
)
from graphserver.core.interfaces.storage import GraphDatabaseFactory
from graphserver.core.models import ConfigurationResource, Endpoint
from graphserver.errors import ConfigurationError
from graphserver.graph.factory import EphemeralGraphDatabaseFactory
from graphserver.logging_schema import LogEvent
from graphserver.properties import load_properties

logger = logging.getLogger(__name__)

BUNDLED_RESOURCES = Path(__file__).resolve().parent.parent / "resources"

DEFAULT_MODULES: tuple[type[ServerModule], ...] = (RestApiModule, ThirdPartyExtensionModule)


def default_search_path() -> list[Path]:
    """Configured entries, then the working directory, then bundled resources."""
    return [*get_settings().resources.search_path, Path.cwd(), BUNDLED_RESOURCES]


class ServerConfig:
    """Construction-time parameters of a graph test server."""

    def __init__(
        self,
        hostname: str = "localhost",
        port: int = 7473,
        *,
        configuration_resource: str | None = None,
        search_path: Iterable[Path | str] | None = None,
        storage_factory: GraphDatabaseFactory | None = None,
        address_resolver: AddressResolver | None = None,
        modules: Sequence[type[ServerModule]] | None = None,
        health_check_rules: Iterable[HealthCheckRule] | None = None,
    ) -> None:
        self._endpoint = Endpoint(hostname=hostname, port=port)
        self.configuration_resource = (
            configuration_resource or get_settings().resources.name
        )
        self.search_path = (
            [Path(p) for p in search_path] if search_path is not None else default_search_path()
        )
        self._storage_factory = storage_factory
        self._address_resolver = address_resolver
        self._modules = list(modules) if modules is not None else list(DEFAULT_MODULES)
        self._health_check_rules = list(health_check_rules or ())

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    def with_configuration_resource(self, name: str) -> ServerConfig:
        """Record the resource to resolve at start time."""
        self.configuration_resource = name
        return self

    def resolve(self) -> ConfigurationResource:
        """Locate and load the configuration resource.

        Raises:
            ConfigurationError: If no search path entry holds the resource,
                or the resource cannot be read as UTF-8 text.
        """
        name = self.configuration_resource
        candidates = (
            [Path(name)] if Path(name).is_absolute() else [d / name for d in self.search_path]
        )
        for candidate in candidates:
            if candidate.is_file():
                logger.debug(
                    "Configuration resource resolved",
                    extra={"event": LogEvent.CONFIG_RESOLVED, "path": str(candidate)},
                )
                try:
                    properties = load_properties(candidate)
                except (OSError, UnicodeDecodeError) as exc:
                    raise ConfigurationError(
                        f"Could not read configuration resource {candidate}: {exc}"
                    ) from exc
                return ConfigurationResource(name=name, path=candidate, properties=properties)
        raise ConfigurationError(f"Could not resolve configuration resource {name}")

    # =========================================================================
    # Collaborators
    # =========================================================================

    def storage_factory(self) -> GraphDatabaseFactory:
        return self._storage_factory or EphemeralGraphDatabaseFactory()

    def address_resolver(self) -> AddressResolver:
        return self._address_resolver or FixedAddressResolver(self._endpoint.hostname)

    def server_modules(self) -> list[type[ServerModule]]:
        return list(self._modules)

    def health_check_rules(self) -> list[HealthCheckRule]:
        return list(self._health_check_rules)
