"""
Nominatim Client Exceptions

Configuration errors are raised while building identification or client
settings; every failed API call is reported as a NominatimRequestError.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class NominatimError(Exception):
    """Base exception class for all Nominatim client errors, dood!

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NominatimConfigurationError(NominatimError, ValueError):
    """Raised when client configuration is invalid."""


class InvalidHeaderValueError(NominatimConfigurationError):
    """Raised when an identification value can't be sent as an HTTP header value.

    Only visible ASCII characters and horizontal tabs are allowed.
    """

    def __init__(self, headerName: str, value: object) -> None:
        super().__init__(f"Invalid value for {headerName} header: {value!r}")
        self.headerName = headerName
        self.value = value


class UrlParseError(NominatimConfigurationError):
    """Raised when a base URL is not a well-formed absolute http(s) URL."""

    def __init__(self, url: object, reason: str) -> None:
        super().__init__(f"Invalid base URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class NominatimRequestError(NominatimError):
    """Raised when a request to the Nominatim server fails, dood!

    Covers network failures, timeouts, non-2xx responses and response bodies
    which don't match the expected shape. The original exception (if any) is
    available as ``__cause__``.

    Attributes:
        message: Human-readable error message
        url: Requested URL
        statusCode: HTTP status code (if a response was received)
    """

    def __init__(self, message: str, url: str, statusCode: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.statusCode = statusCode
        logger.debug(f"NominatimRequestError: {message} (url: {url}, status: {statusCode})")

    def __str__(self) -> str:
        if self.statusCode is not None:
            return f"{self.message} (status: {self.statusCode})"
        return self.message
