# Defines the exceptions raised by the routes client.


class RoutesError(Exception):
    """Base class for every error raised by this library."""
    pass


class ConfigurationError(RoutesError, ValueError):
    """Raised when the client is used without an API key."""
    pass


class TransportError(RoutesError):
    """Raised when the HTTP call fails or returns a non-200 status."""

    def __init__(self, message: str, status_code: int | None = None, reason: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class ShapeError(RoutesError, ValueError):
    """Raised when a response document is missing its required structure."""
    pass


class DecodeError(RoutesError, ValueError):
    """Raised when an encoded polyline is truncated or malformed."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index
