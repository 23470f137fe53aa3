"""
Custom exception classes.

Represent the controller's error taxonomy:
- StartupError: the process cannot start (terminates with a nonzero exit code)
- RequestError: a gateway call failed (aborts the cycle or skips one function)
- MetricsQueryError: a metrics query failed (skips one function)
"""

from typing import Optional


class IdlerError(Exception):
    """Base exception class for the controller."""

    pass


class StartupError(IdlerError):
    """Raised when required configuration is missing or the gateway is unreachable at startup."""

    pass


class RequestError(IdlerError):
    """Raised when an HTTP call fails or returns a malformed body."""

    def __init__(self, operation: str, cause: Exception, status_code: Optional[int] = None):
        self.operation = operation
        self.cause = cause
        self.status_code = status_code
        super().__init__(f"{operation} failed: {cause}")


class MetricsQueryError(RequestError):
    """Raised when the metrics backend query fails."""

    def __init__(self, query: str, cause: Exception, status_code: Optional[int] = None):
        self.query = query
        super().__init__("metrics query", cause, status_code)
