"""Base search provider — Abstract interface for all search backend connectors.

Every search backend must implement this interface to serve the host
indexing pipeline.  The provider is responsible for:
  1. Converting index documents to the backend's record format
  2. Keeping the backend index schema in sync with incoming documents
  3. Translating search requests and mapping results back
  4. Reporting per-document indexing results
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from algoliabridge.models.document import IndexDocument
from algoliabridge.models.query import SearchRequest
from algoliabridge.models.response import SearchResponse
from algoliabridge.models.result import IndexingResult


class SearchProvider(ABC):
    """Abstract base class for search providers.

    All providers must implement:
      - index_documents(): Create or update documents of a type
      - remove_documents(): Delete documents of a type
      - search(): Run a search request against a document type
      - delete_index(): Drop the index backing a document type

    Providers receive a ready backend client; they do not own global
    connection state.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique provider name (e.g., 'algolia')."""

    @abstractmethod
    async def index_documents(self, document_type: str, documents: list[IndexDocument]) -> IndexingResult:
        """Index documents, updating the index schema when needed.

        Args:
            document_type: Logical document type (e.g. ``"product"``).
            documents: Documents to create or replace.

        Returns:
            One succeeded item per acknowledged document.

        Raises:
            SearchError: If any backend call fails.
        """

    @abstractmethod
    async def remove_documents(self, document_type: str, documents: list[IndexDocument]) -> IndexingResult:
        """Remove documents by id.

        Raises:
            SearchError: If the backend call fails.
        """

    @abstractmethod
    async def search(self, document_type: str, request: SearchRequest) -> SearchResponse:
        """Execute a search request.

        Raises:
            SearchError: If the backend call fails.
        """

    @abstractmethod
    async def delete_index(self, document_type: str) -> None:
        """Delete the index of a document type if it exists.

        Raises:
            SearchError: If the backend call fails.
        """

    @staticmethod
    def _require_document_type(document_type: str) -> None:
        if not document_type:
            raise ValueError("document_type must not be empty")
