"""Graph storage interface.

The harness only talks to the storage engine through these types:
- GraphDatabaseFactory builds a database for a store directory
- GraphDatabase is the live handle tests assert against

Design principles:
- Entities are returned as frozen value objects, never live ORM rows
- Implementations must be safe to call from the web server thread and
  the test thread at the same time
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Value Objects
# =============================================================================


class Direction(StrEnum):
    """Relationship direction relative to a node."""

    ALL = "all"
    IN = "in"
    OUT = "out"


class Node(BaseModel):
    """Graph node snapshot."""

    id: int
    properties: dict[str, Any] = {}

    model_config = {"frozen": True}


class Relationship(BaseModel):
    """Graph relationship snapshot."""

    id: int
    type: str
    start_node_id: int
    end_node_id: int
    properties: dict[str, Any] = {}

    model_config = {"frozen": True}


# =============================================================================
# GraphDatabase Interface
# =============================================================================


class GraphDatabase(ABC):
    """Live graph database handle.

    Implementations:
    - SqlGraphDatabase: SQLModel over SQLite (in-memory or file)
    """

    location: str | None = None

    # =========================================================================
    # Nodes
    # =========================================================================

    @abstractmethod
    def create_node(self, properties: Mapping[str, Any] | None = None) -> Node:
        """Create a node with the given properties."""
        ...

    @abstractmethod
    def get_node(self, node_id: int) -> Node:
        """Get a node.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        ...

    @abstractmethod
    def set_node_properties(self, node_id: int, properties: Mapping[str, Any]) -> Node:
        """Replace all properties of a node."""
        ...

    @abstractmethod
    def delete_node(self, node_id: int) -> None:
        """Delete a node and its index entries.

        Raises:
            NodeNotFoundError: If the node does not exist.
            NodeInUseError: If relationships are still attached.
        """
        ...

    @abstractmethod
    def all_nodes(self) -> list[Node]:
        ...

    @abstractmethod
    def count_nodes(self) -> int:
        ...

    # =========================================================================
    # Relationships
    # =========================================================================

    @abstractmethod
    def create_relationship(
        self,
        start_node_id: int,
        end_node_id: int,
        type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> Relationship:
        """Create a directed relationship between two existing nodes."""
        ...

    @abstractmethod
    def get_relationship(self, relationship_id: int) -> Relationship:
        """Get a relationship.

        Raises:
            RelationshipNotFoundError: If the relationship does not exist.
        """
        ...

    @abstractmethod
    def delete_relationship(self, relationship_id: int) -> None:
        ...

    @abstractmethod
    def relationships(
        self, node_id: int, direction: Direction = Direction.ALL
    ) -> list[Relationship]:
        """Relationships attached to a node, filtered by direction."""
        ...

    @abstractmethod
    def all_relationships(self) -> list[Relationship]:
        ...

    @abstractmethod
    def count_relationships(self) -> int:
        ...

    @abstractmethod
    def relationship_types(self) -> list[str]:
        """Distinct relationship types in use, sorted."""
        ...

    # =========================================================================
    # Node Indexes
    # =========================================================================

    @abstractmethod
    def index_node(self, index_name: str, node_id: int, key: str, value: Any) -> None:
        """Add a node to an index under key/value."""
        ...

    @abstractmethod
    def query_index(self, index_name: str, key: str, value: Any) -> list[Node]:
        """Nodes indexed under key/value."""
        ...

    @abstractmethod
    def index_names(self) -> list[str]:
        ...

    @abstractmethod
    def drop_index(self, index_name: str) -> int:
        """Remove an index. Returns the number of entries removed."""
        ...

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @abstractmethod
    def shutdown(self) -> None:
        """Release the storage. Ephemeral databases lose their data."""
        ...


# =============================================================================
# GraphDatabaseFactory Interface
# =============================================================================


class GraphDatabaseFactory(ABC):
    """Creates the database a server runs on.

    Implementations:
    - EphemeralGraphDatabaseFactory: fresh in-memory database per call
    - PersistentGraphDatabaseFactory: SQLite file under the store directory
    """

    @abstractmethod
    def create_database(
        self, store_dir: str, properties: Mapping[str, str]
    ) -> GraphDatabase:
        """Create a database.

        Args:
            store_dir: Store directory from the configuration resource
            properties: Database properties (graphserver.db.* with the prefix stripped)
        """
        ...
