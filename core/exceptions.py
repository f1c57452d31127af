"""Custom exception hierarchy for the geoservice proxy."""


class GeoProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(GeoProxyError):
    """Raised when configuration or credentials are missing or invalid."""


class InvalidRequestBody(GeoProxyError):
    """Request body is not valid JSON of the expected shape."""


class GeocoderError(GeoProxyError):
    """Raised when the geocoding provider fails.

    Attributes:
        message: Error message
        status_code: HTTP status code from the provider (optional)
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(GeoProxyError):
    """Raised when forwarding to the backend fails.

    Attributes:
        message: Error message
        status_code: HTTP status code returned to the caller
        target: Backend URL the request was sent to
    """

    status_code = 502

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class UpstreamTimeoutError(UpstreamError):
    """Raised when the backend does not answer within the configured deadline."""

    status_code = 504


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to connect to the backend."""

    status_code = 502


class RequestTooLarge(GeoProxyError):
    """Request body exceeds size limit."""
