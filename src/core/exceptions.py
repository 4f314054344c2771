"""Custom exception hierarchy for MoltView."""

from typing import Optional


class MoltViewError(Exception):
    """Base exception for all MoltView errors."""

    def __init__(self, message: str = "An error occurred in MoltView"):
        self.message = message
        super().__init__(self.message)


class TransportError(MoltViewError):
    """Base exception for request/response failures."""

    def __init__(self, message: str = "A transport error occurred"):
        super().__init__(message)


class InvalidRequestError(TransportError):
    """Endpoint could not be turned into a request URL."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message)


class NetworkError(TransportError):
    """Connection, DNS or timeout failure below the HTTP layer."""

    def __init__(self, message: str = "A network error occurred", cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class HttpStatusError(TransportError):
    """Non-2xx, non-401 response."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"Server error: {status_code}")


class UnauthorizedError(TransportError):
    """HTTP 401 - credentials missing or rejected."""

    def __init__(self, message: str = "Please log in to continue"):
        super().__init__(message)


class DecodeError(MoltViewError):
    """Payload did not match the expected schema."""

    def __init__(self, message: str = "Failed to parse response", literal: Optional[str] = None):
        self.literal = literal
        super().__init__(message)


class ConfigError(MoltViewError):
    """Configuration is invalid or missing."""

    def __init__(self, message: str = "Configuration error"):
        super().__init__(message)
