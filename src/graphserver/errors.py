"""Error handling module for graphserver.

This module defines error codes, exception classes, and response models.
Lifecycle errors (configuration, state, startup) surface from the harness;
graph errors are turned into HTTP responses by the REST API.

Error Response Format:
{
    "error": {
        "code": "NODE_NOT_FOUND",
        "message": "Node 42 not found"
    }
}

Usage:
    from graphserver.errors import ConfigurationError, StartupError

    # Raise with default message
    raise StartupError()

    # Raise with custom message
    raise ConfigurationError("Could not resolve configuration resource test-db.properties")
"""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes."""

    # Lifecycle
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    ILLEGAL_STATE = "ILLEGAL_STATE"
    NOT_RUNNING = "NOT_RUNNING"
    STARTUP_FAILED = "STARTUP_FAILED"
    STARTUP_TIMEOUT = "STARTUP_TIMEOUT"

    # Graph
    NODE_NOT_FOUND = "NODE_NOT_FOUND"
    RELATIONSHIP_NOT_FOUND = "RELATIONSHIP_NOT_FOUND"
    NODE_IN_USE = "NODE_IN_USE"
    INVALID_REQUEST = "INVALID_REQUEST"


class ErrorDetail(BaseModel):
    """Error detail containing code and message."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response format."""

    error: ErrorDetail


class GraphServerError(Exception):
    """Base exception for graphserver.

    All graphserver specific exceptions inherit from this class.
    This enables centralized exception handling in FastAPI.

    Attributes:
        code: The error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code to return
    """

    def __init__(self, code: ErrorCode, message: str, status_code: int = 500) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse model."""
        return ErrorResponse(
            error=ErrorDetail(code=self.code.value, message=self.message)
        )


# =============================================================================
# Lifecycle errors
# =============================================================================


class ConfigurationError(GraphServerError):
    """Configuration resource missing or unusable."""

    def __init__(self, message: str = "Configuration resource not found") -> None:
        super().__init__(ErrorCode.CONFIGURATION_ERROR, message)


class IllegalStateError(GraphServerError):
    """Operation not allowed in the current server state."""

    def __init__(
        self,
        message: str = "Server already running",
        code: ErrorCode = ErrorCode.ILLEGAL_STATE,
    ) -> None:
        super().__init__(code, message, 409)


class NotRunningError(IllegalStateError):
    """Accessor used while the server is not running."""

    def __init__(self, message: str = "Server is not running") -> None:
        super().__init__(message, ErrorCode.NOT_RUNNING)


class StartupError(GraphServerError):
    """Server reported a failure while starting."""

    def __init__(self, message: str = "Graph server startup failed") -> None:
        super().__init__(ErrorCode.STARTUP_FAILED, message, 503)


class StartupTimeoutError(GraphServerError, TimeoutError):
    """Server did not become ready within the polling budget."""

    def __init__(self, message: str = "Graph server startup timed out") -> None:
        super().__init__(ErrorCode.STARTUP_TIMEOUT, message, 504)


class TeardownWarning(UserWarning):
    """Error raised by the server while stopping.

    Logged by the lifecycle controller, never raised to the caller.
    """


# =============================================================================
# Graph errors
# =============================================================================


class NodeNotFoundError(GraphServerError):
    """404 Not Found - Node not found."""

    def __init__(self, message: str = "Node not found") -> None:
        super().__init__(ErrorCode.NODE_NOT_FOUND, message, 404)


class RelationshipNotFoundError(GraphServerError):
    """404 Not Found - Relationship not found."""

    def __init__(self, message: str = "Relationship not found") -> None:
        super().__init__(ErrorCode.RELATIONSHIP_NOT_FOUND, message, 404)


class NodeInUseError(GraphServerError):
    """409 Conflict - Node still has relationships."""

    def __init__(self, message: str = "Node still has relationships") -> None:
        super().__init__(ErrorCode.NODE_IN_USE, message, 409)


class InvalidRequestError(GraphServerError):
    """400 Bad Request - Malformed graph request."""

    def __init__(self, message: str = "Invalid request") -> None:
        super().__init__(ErrorCode.INVALID_REQUEST, message, 400)
