"""FastAPI application factory for a graph server instance."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from graphserver import __version__
from graphserver.api.health import router as health_router
from graphserver.core.interfaces.storage import GraphDatabase
from graphserver.errors import GraphServerError
from graphserver.logging_schema import LogEvent

logger = logging.getLogger(__name__)


def create_app(graph: GraphDatabase) -> FastAPI:
    """Build the web application for one server instance.

    The graph lives on app.state; server modules add their routers to
    the returned app before the web server starts.
    """
    app = FastAPI(
        title="Graph Test Server",
        description="In-process graph database server for integration tests",
        version=__version__,
    )
    app.state.graph = graph

    @app.exception_handler(GraphServerError)
    async def graph_error_handler(request: Request, exc: GraphServerError) -> JSONResponse:
        """Handle GraphServerError exceptions."""
        logger.info(
            "Graph error",
            extra={
                "event": LogEvent.GRAPH_ERROR,
                "error_code": exc.code.value,
                "error_message": exc.message,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response().model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unhandled exceptions with logging."""
        logger.exception(
            "Unhandled exception",
            extra={
                "event": LogEvent.UNHANDLED_EXCEPTION,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    app.include_router(health_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose Prometheus metrics."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    return app
