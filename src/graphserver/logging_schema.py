"""Log event types for structured logging."""

from enum import StrEnum


class LogEvent(StrEnum):
    """Log event types for the harness.

    Used with logger.info/warning/error extra dict:
        logger.info("message", extra={"event": LogEvent.SERVER_STARTED, ...})
    """

    # Controller lifecycle
    SERVER_STARTING = "server_starting"
    SERVER_STARTED = "server_started"
    SERVER_START_FAILED = "server_start_failed"
    SERVER_STOPPED = "server_stopped"
    STOP_SKIPPED = "stop_skipped"
    TEARDOWN_FAILED = "teardown_failed"

    # Readiness polling
    POLL_STATUS = "poll_status"
    POLL_INTERRUPTED = "poll_interrupted"
    POLL_TIMEOUT = "poll_timeout"

    # Container
    CONFIG_RESOLVED = "config_resolved"
    HEALTH_CHECK_FAILED = "health_check_failed"
    DATABASE_CREATED = "database_created"
    DATABASE_SHUTDOWN = "database_shutdown"
    MODULE_STARTED = "module_started"
    MODULE_STOPPED = "module_stopped"
    WEB_SERVER_STARTED = "web_server_started"
    WEB_SERVER_EXITED = "web_server_exited"
    WEB_SERVER_STOPPED = "web_server_stopped"

    # Graph
    GRAPH_CLEANED = "graph_cleaned"

    # Error events
    UNHANDLED_EXCEPTION = "unhandled_exception"
    GRAPH_ERROR = "graph_error"
