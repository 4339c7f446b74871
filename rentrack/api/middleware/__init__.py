"""API middleware."""

from rentrack.api.middleware.error_handler import ErrorHandlerMiddleware
from rentrack.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
