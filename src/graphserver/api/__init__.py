"""Web application and graph REST API."""

from graphserver.api.app import create_app
from graphserver.api.graph import router as graph_router

__all__ = [
    "create_app",
    "graph_router",
]
