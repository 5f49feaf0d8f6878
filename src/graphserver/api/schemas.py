"""REST API schemas.

Consolidated request/response models for the graph endpoints.
"""

from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# Service Root
# =============================================================================


class ServiceRootResponse(BaseModel):
    """Entry points of the graph API."""

    node: str
    node_index: str
    relationship_types: str
    version: str


# =============================================================================
# Nodes
# =============================================================================


class NodeResponse(BaseModel):
    """Node representation."""

    id: int
    self: str
    properties: str
    relationships: str
    data: dict[str, Any]


# =============================================================================
# Relationships
# =============================================================================


class CreateRelationshipRequest(BaseModel):
    """Create relationship request.

    `to` is either a node id or a node URI ending in the node id.
    """

    to: int | str
    type: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class RelationshipResponse(BaseModel):
    """Relationship representation."""

    id: int
    self: str
    type: str
    start: str
    end: str
    data: dict[str, Any]


# =============================================================================
# Indexes
# =============================================================================


class IndexNodeRequest(BaseModel):
    """Add node to index request."""

    key: str = Field(min_length=1)
    value: Any
    uri: int | str
