"""Adapter-specific exceptions."""

from __future__ import annotations


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConnectionError(AdapterError):
    """Raised when the adapter cannot reach the search backend."""


class AlgoliaApiError(AdapterError):
    """Raised when the Algolia REST API answers with an error status or a body that is not JSON."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class QueryError(AdapterError):
    """Raised when a search query cannot be built."""


class ConfigurationError(AdapterError):
    """Raised when adapter configuration is invalid."""


class UnsupportedFieldError(AdapterError, ValueError):
    """Raised when a document field holds a value the backend cannot store."""


class SearchError(AdapterError):
    """Uniform failure of an index, remove, search or delete operation.

    Carries the backend deployment identity so failures can be attributed
    without digging through the cause chain.
    """

    def __init__(self, message: str, app_id: str | None = None, scope: str | None = None) -> None:
        super().__init__(message)
        self.app_id = app_id
        self.scope = scope
