"""Server lifecycle harness."""

from graphserver.harness.controller import (
    LifecycleController,
    LocalTestServer,
    ServerInstance,
    ServerState,
)
from graphserver.harness.handle import DatabaseHandle
from graphserver.harness.polling import ReadinessPoller
from graphserver.harness.server_config import ServerConfig

__all__ = [
    "DatabaseHandle",
    "LifecycleController",
    "LocalTestServer",
    "ReadinessPoller",
    "ServerConfig",
    "ServerInstance",
    "ServerState",
]
