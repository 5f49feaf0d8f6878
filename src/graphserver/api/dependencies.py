"""API dependencies for dependency injection."""

from fastapi import Request

from graphserver.core.interfaces.storage import GraphDatabase


def get_graph(request: Request) -> GraphDatabase:
    """Get the graph database of the app serving this request.

    Each server instance stores its own database on app.state; nothing
    is shared between servers.

    Raises:
        RuntimeError: If the app was built without a database.
    """
    graph = getattr(request.app.state, "graph", None)
    if graph is None:
        raise RuntimeError("Graph database not attached to application")
    return graph
