"""Server container interfaces.

Narrow collaborator contracts used when assembling a server:
- AddressResolver: hostname the web server binds and advertises
- HealthCheckRule: startup validation predicate
- ServerModule: capability registered with the web application
- ServerContainer: the assembled server the lifecycle controller drives
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import FastAPI

    from graphserver.core.interfaces.storage import GraphDatabase


class ContainerStatus(StrEnum):
    """Web container status as seen by readiness polling."""

    STARTING = "starting"
    STARTED = "started"
    FAILED = "failed"
    STOPPED = "stopped"


class AddressResolver(ABC):
    """Resolves the hostname a server is reachable under."""

    @abstractmethod
    def hostname(self) -> str:
        ...


class HealthCheckRule(ABC):
    """Startup validation predicate run before the database is created."""

    failure_message: str = ""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def execute(self, properties: Mapping[str, str]) -> bool:
        """Return True when the configuration passes this rule."""
        ...


class ServerModule(ABC):
    """Capability registered with the web application on start.

    Module classes are instantiated by the server, one instance per start.
    """

    @abstractmethod
    def start(self, app: FastAPI, properties: Mapping[str, str]) -> None:
        ...

    def stop(self) -> None:
        """Release module resources. Default: nothing to release."""


class ServerContainer(ABC):
    """The underlying server a LifecycleController owns.

    Implementations:
    - GraphServer: uvicorn + FastAPI over a GraphDatabase
    """

    @abstractmethod
    def start(self) -> None:
        """Start without waiting for readiness."""
        ...

    @abstractmethod
    def status(self) -> ContainerStatus:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @property
    @abstractmethod
    def database(self) -> GraphDatabase:
        ...

    @property
    @abstractmethod
    def base_uri(self) -> str:
        ...
