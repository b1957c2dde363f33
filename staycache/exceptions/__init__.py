"""
Custom exceptions for the application.
"""


class AppError(Exception):
    """Base exception for application errors."""

    pass


class MalformedInput(AppError, ValueError):
    """Raised for programmer errors such as an unknown endpoint or bad options."""

    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid."""

    pass


class CacheError(AppError):
    """Raised when cache operations fail."""

    pass


class CacheTierUnavailable(CacheError):
    """Raised when the shared cache tier cannot be reached."""

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Tier-2 {operation} failed{detail}")


class FetchError(AppError):
    """Base class for search provider failure classifications."""

    kind = "upstream_error"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ApiTimeout(FetchError):
    """Raised when the provider does not answer within the timeout."""

    kind = "api_timeout"


class AuthError(FetchError):
    """Raised when the provider rejects our credentials."""

    kind = "auth_error"


class Throttled(FetchError):
    """Raised when the provider signals that we exceeded its rate limit."""

    kind = "throttled"


class UpstreamError(FetchError):
    """Raised for any other provider failure."""

    kind = "upstream_error"
