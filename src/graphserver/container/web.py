"""Embedded uvicorn web server running on a background thread."""

import logging
import threading

import uvicorn
from fastapi import FastAPI

from graphserver.core.interfaces.container import ContainerStatus
from graphserver.logging_schema import LogEvent

logger = logging.getLogger(__name__)


class UvicornWebServer:
    """uvicorn.Server on a daemon thread.

    start() returns as soon as the thread is launched; readiness is read
    from status(). uvicorn only installs signal handlers on the main
    thread, so the server thread leaves the host's handlers alone.
    """

    def __init__(self, host: str, port: int, log_level: str = "warning") -> None:
        self.host = host
        self.port = port
        self._log_level = log_level
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._error: BaseException | None = None
        self._stopped = False

    def start(self, app: FastAPI) -> None:
        if self._thread is not None:
            raise RuntimeError("Web server already started")
        config = uvicorn.Config(
            app,
            host=self.host,
            port=self.port,
            log_level=self._log_level,
            access_log=False,
            lifespan="on",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._run,
            args=(self._server,),
            name=f"graphserver-web-{self.port}",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Web server thread launched",
            extra={"event": LogEvent.WEB_SERVER_STARTED, "host": self.host, "port": self.port},
        )

    def _run(self, server: uvicorn.Server) -> None:
        try:
            server.run()
        except (Exception, SystemExit) as exc:
            # uvicorn exits with SystemExit(1) when it cannot bind
            self._error = exc
            logger.error(
                "Web server exited with error",
                extra={"event": LogEvent.WEB_SERVER_EXITED, "port": self.port, "error": repr(exc)},
            )

    @property
    def error(self) -> BaseException | None:
        return self._error

    def status(self) -> ContainerStatus:
        if self._thread is None or self._server is None:
            return ContainerStatus.STOPPED
        if self._stopped:
            return ContainerStatus.STOPPED
        if not self._thread.is_alive():
            # Exited without stop(): bind error, lifespan failure or crash
            return ContainerStatus.FAILED
        if self._server.started:
            return ContainerStatus.STARTED
        return ContainerStatus.STARTING

    def stop(self, timeout: float = 5.0) -> None:
        """Ask uvicorn to exit and wait for the thread.

        Raises:
            RuntimeError: If the thread is still alive after the timeout.
        """
        if self._thread is None or self._server is None:
            return
        self._stopped = True
        self._server.should_exit = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            self._server.force_exit = True
            self._thread.join(1.0)
        if self._thread.is_alive():
            raise RuntimeError(
                f"Web server on port {self.port} did not stop within {timeout}s"
            )
        logger.info(
            "Web server stopped",
            extra={"event": LogEvent.WEB_SERVER_STOPPED, "port": self.port},
        )
