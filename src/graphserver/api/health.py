"""Health check endpoint."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from graphserver import __version__

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = __version__
    nodes: int


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", nodes=request.app.state.graph.count_nodes())
