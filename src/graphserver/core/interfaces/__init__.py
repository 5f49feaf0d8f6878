"""Core collaborator interfaces for the graph test server."""

from graphserver.core.interfaces.container import (
    AddressResolver,
    ContainerStatus,
    HealthCheckRule,
    ServerContainer,
    ServerModule,
)
from graphserver.core.interfaces.storage import (
    Direction,
    GraphDatabase,
    GraphDatabaseFactory,
    Node,
    Relationship,
)

__all__ = [
    # Server container
    "AddressResolver",
    "ContainerStatus",
    "HealthCheckRule",
    "ServerContainer",
    "ServerModule",
    # Graph storage
    "Direction",
    "GraphDatabase",
    "GraphDatabaseFactory",
    "Node",
    "Relationship",
]
