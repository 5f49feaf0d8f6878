"""Run a graph server in the foreground.

    python -m graphserver

Endpoint, configuration resource and logging come from GRAPHSERVER_*
environment variables. Ctrl-C stops the server.
"""

import logging
import threading

from graphserver.config import get_settings
from graphserver.harness.controller import LocalTestServer
from graphserver.logging import setup_logging

logger = logging.getLogger(__name__)


def main(stop_event: threading.Event | None = None) -> None:
    """Start the server and block until interrupted or stop_event is set."""
    settings = get_settings()
    setup_logging(settings.logging)

    server = LocalTestServer(settings.web.host, settings.web.port)
    server.with_configuration_resource(settings.resources.name)
    stop_event = stop_event or threading.Event()
    try:
        server.start()
        logger.info("Graph server ready at %s", server.base_uri())
        stop_event.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        server.stop()


if __name__ == "__main__":
    main()
