"""Graph REST API endpoints.

Mounted by RestApiModule under graphserver.rest.mount_point (default /db/data).
Handlers are sync: the storage engine blocks, FastAPI runs them in its
thread pool.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from graphserver import __version__
from graphserver.api.dependencies import get_graph
from graphserver.api.schemas import (
    CreateRelationshipRequest,
    IndexNodeRequest,
    NodeResponse,
    RelationshipResponse,
    ServiceRootResponse,
)
from graphserver.core.interfaces.storage import (
    Direction,
    GraphDatabase,
    Node,
    Relationship,
)
from graphserver.errors import InvalidRequestError

router = APIRouter(tags=["graph"])


# =============================================================================
# Representations
# =============================================================================


def node_id_from(reference: int | str) -> int:
    """Node id from an id or a node URI (.../node/42)."""
    if isinstance(reference, int):
        return reference
    tail = reference.rstrip("/").rsplit("/", 1)[-1]
    try:
        return int(tail)
    except ValueError:
        raise InvalidRequestError(f"Not a node reference: {reference}") from None


def _node_response(request: Request, node: Node) -> NodeResponse:
    return NodeResponse(
        id=node.id,
        self=str(request.url_for("get_node", node_id=node.id)),
        properties=str(request.url_for("get_node_properties", node_id=node.id)),
        relationships=str(
            request.url_for("create_relationship", node_id=node.id)
        ),
        data=node.properties,
    )


def _relationship_response(request: Request, rel: Relationship) -> RelationshipResponse:
    return RelationshipResponse(
        id=rel.id,
        self=str(request.url_for("get_relationship", relationship_id=rel.id)),
        type=rel.type,
        start=str(request.url_for("get_node", node_id=rel.start_node_id)),
        end=str(request.url_for("get_node", node_id=rel.end_node_id)),
        data=rel.properties,
    )


# =============================================================================
# Service Root
# =============================================================================


@router.get("/", response_model=ServiceRootResponse)
def service_root(request: Request) -> ServiceRootResponse:
    """Graph API entry points."""
    return ServiceRootResponse(
        node=str(request.url_for("create_node")),
        node_index=str(request.url_for("list_node_indexes")),
        relationship_types=str(request.url_for("list_relationship_types")),
        version=__version__,
    )


# =============================================================================
# Nodes
# =============================================================================


@router.post("/node", status_code=201, response_model=NodeResponse)
def create_node(
    request: Request,
    data: dict[str, Any] | None = Body(default=None),
    graph: GraphDatabase = Depends(get_graph),
) -> NodeResponse:
    """Create node with optional properties."""
    node = graph.create_node(data or {})
    return _node_response(request, node)


@router.get("/node/{node_id}", response_model=NodeResponse)
def get_node(
    node_id: int,
    request: Request,
    graph: GraphDatabase = Depends(get_graph),
) -> NodeResponse:
    """Get node."""
    return _node_response(request, graph.get_node(node_id))


@router.delete("/node/{node_id}", status_code=204)
def delete_node(
    node_id: int,
    graph: GraphDatabase = Depends(get_graph),
) -> None:
    """Delete node without relationships."""
    graph.delete_node(node_id)


@router.get("/node/{node_id}/properties")
def get_node_properties(
    node_id: int,
    graph: GraphDatabase = Depends(get_graph),
) -> dict[str, Any]:
    """Get node properties."""
    return graph.get_node(node_id).properties


@router.put("/node/{node_id}/properties", status_code=204)
def set_node_properties(
    node_id: int,
    data: dict[str, Any] = Body(...),
    graph: GraphDatabase = Depends(get_graph),
) -> None:
    """Replace node properties."""
    graph.set_node_properties(node_id, data)


# =============================================================================
# Relationships
# =============================================================================


@router.post(
    "/node/{node_id}/relationships",
    status_code=201,
    response_model=RelationshipResponse,
)
def create_relationship(
    node_id: int,
    body: CreateRelationshipRequest,
    request: Request,
    graph: GraphDatabase = Depends(get_graph),
) -> RelationshipResponse:
    """Create relationship from this node."""
    rel = graph.create_relationship(
        node_id, node_id_from(body.to), body.type, body.data
    )
    return _relationship_response(request, rel)


@router.get(
    "/node/{node_id}/relationships/{direction}",
    response_model=list[RelationshipResponse],
)
def list_relationships(
    node_id: int,
    direction: Direction,
    request: Request,
    graph: GraphDatabase = Depends(get_graph),
) -> list[RelationshipResponse]:
    """List node relationships (all, in, out)."""
    return [
        _relationship_response(request, rel)
        for rel in graph.relationships(node_id, direction)
    ]


@router.get("/relationship/types", response_model=list[str])
def list_relationship_types(
    graph: GraphDatabase = Depends(get_graph),
) -> list[str]:
    """Relationship types in use."""
    return graph.relationship_types()


@router.get("/relationship/{relationship_id}", response_model=RelationshipResponse)
def get_relationship(
    relationship_id: int,
    request: Request,
    graph: GraphDatabase = Depends(get_graph),
) -> RelationshipResponse:
    """Get relationship."""
    return _relationship_response(request, graph.get_relationship(relationship_id))


@router.delete("/relationship/{relationship_id}", status_code=204)
def delete_relationship(
    relationship_id: int,
    graph: GraphDatabase = Depends(get_graph),
) -> None:
    """Delete relationship."""
    graph.delete_relationship(relationship_id)


# =============================================================================
# Node Indexes
# =============================================================================


@router.get("/index/node", response_model=list[str])
def list_node_indexes(
    graph: GraphDatabase = Depends(get_graph),
) -> list[str]:
    """Names of node indexes with entries."""
    return graph.index_names()


@router.post("/index/node/{index_name}", status_code=201, response_model=NodeResponse)
def add_to_node_index(
    index_name: str,
    body: IndexNodeRequest,
    request: Request,
    graph: GraphDatabase = Depends(get_graph),
) -> NodeResponse:
    """Add node to index under key/value."""
    node_id = node_id_from(body.uri)
    graph.index_node(index_name, node_id, body.key, body.value)
    return _node_response(request, graph.get_node(node_id))


@router.get(
    "/index/node/{index_name}/{key}/{value}",
    response_model=list[NodeResponse],
)
def query_node_index(
    index_name: str,
    key: str,
    value: str,
    request: Request,
    graph: GraphDatabase = Depends(get_graph),
) -> list[NodeResponse]:
    """Exact-match index lookup."""
    return [
        _node_response(request, node)
        for node in graph.query_index(index_name, key, value)
    ]
