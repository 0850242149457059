"""Algolia provider — Index documents into and search them from Algolia."""

from algoliabridge.adapters.algolia.client import AlgoliaClient
from algoliabridge.adapters.algolia.provider import AlgoliaSearchProvider

__all__ = ["AlgoliaClient", "AlgoliaSearchProvider"]
