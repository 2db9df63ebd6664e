"""
Application errors, layered by where they are raised.

HandlerError: registry loading and the mechanics of the outbound backend call.
ServiceError: raised by the dispatcher to the HTTP and MCP adapters; wraps
HandlerError with the service context.
ExternalCallError: backend health probing, independent of the dispatcher.

Every error carries a free-text message; str(err) is "<prefix>: <message>".
"""


class GatewayError(Exception):
    """Base for all gateway errors."""

    prefix = "Error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"{self.prefix}: {message}")


# --- Handler layer ---

class HandlerError(GatewayError):
    """Raised while loading config or talking to a backend."""


class HandlerValidationError(HandlerError):
    prefix = "Validation failed"


class ReadFileError(HandlerError):
    prefix = "Read file failed"


class FileJsonParseError(HandlerError):
    prefix = "Parse JSON file failed"


class ProcessError(HandlerError):
    prefix = "Process failed"


# --- Service layer ---

class ServiceError(GatewayError):
    """Raised by the dispatcher; adapters turn it into their failure envelope."""


class ServiceValidationError(ServiceError):
    prefix = "Validation failed"


class NotFoundError(ServiceError):
    prefix = "Not found"


class QueryFailedError(ServiceError):
    prefix = "Query failed"


# --- External calls ---

class ExternalCallError(GatewayError):
    """Raised while probing a backend's health endpoint."""


class ExternalValidationError(ExternalCallError):
    prefix = "External call validation failed"


class HealthCheckError(ExternalCallError):
    prefix = "Health check failed"


class ResponseError(ExternalCallError):
    prefix = "Response failed"
