"""In-process graph database web server for integration tests.

Usage:
    from graphserver import LocalTestServer

    with LocalTestServer("localhost", 7473) as server:
        graph = server.database_handle().graph
"""

__version__ = "0.1.0"

from graphserver.harness import (  # noqa: E402
    DatabaseHandle,
    LifecycleController,
    LocalTestServer,
    ReadinessPoller,
    ServerConfig,
    ServerState,
)

__all__ = [
    "DatabaseHandle",
    "LifecycleController",
    "LocalTestServer",
    "ReadinessPoller",
    "ServerConfig",
    "ServerState",
    "__version__",
]
