"""Base provider interface — Abstract classes for search backend connectors."""

from algoliabridge.adapters.base.adapter import SearchProvider

__all__ = ["SearchProvider"]
