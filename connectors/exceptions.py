"""
Exceptions raised by connectors.

Transport failures are left as ``httpx.HTTPError`` subclasses; these cover
everything the remote API or the caller got wrong at the application level.
"""

from __future__ import annotations

from typing import Optional


class ConnectorError(Exception):
    """Base exception for all connector errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(ConnectorError):
    """
    A problem the workflow author can fix: bad input, an unknown prop, or an
    error reported by the remote API in a successful response.
    """


class PaginationError(ConnectorError):
    """Raised when a paged response does not have the expected shape."""

    def __init__(
        self,
        message: str,
        resource_key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, original_error)
        self.resource_key = resource_key
