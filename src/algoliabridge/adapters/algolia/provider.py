"""Algolia search provider — Serves the indexing pipeline from an Algolia app.

Usage::

    async with AlgoliaClient.from_settings(settings.algolia) as client:
        provider = AlgoliaSearchProvider(client, settings)
        result = await provider.index_documents("product", documents)
        response = await provider.search("product", SearchRequest(search_keywords="shoe"))

Each document type lives in its own index named ``"{scope}-{type}"``.
Sort orders are served by replica indexes declared in
``settings.algolia.replicas``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from algoliabridge.adapters.algolia.client import AlgoliaClient
from algoliabridge.adapters.algolia.converter import convert_document
from algoliabridge.adapters.algolia.naming import get_index_name, resolve_index_name
from algoliabridge.adapters.algolia.query import AlgoliaQueryBuilder
from algoliabridge.adapters.algolia.response import create_indexing_result, map_search_response
from algoliabridge.adapters.algolia.schema import reconcile, replica_ranking_settings
from algoliabridge.adapters.base.adapter import SearchProvider
from algoliabridge.adapters.base.exceptions import AdapterError, ConfigurationError, SearchError
from algoliabridge.config.settings import Settings
from algoliabridge.models.document import IndexDocument
from algoliabridge.models.query import SearchRequest
from algoliabridge.models.response import SearchResponse
from algoliabridge.models.result import IndexingResult
from algoliabridge.models.schema import ReplicaSpec, SchemaSettings

logger = logging.getLogger(__name__)


class AlgoliaSearchProvider(SearchProvider):
    """Search provider backed by Algolia.

    Supports:
      - Indexing with incremental settings updates
      - Sort replicas with custom ranking
      - Filters, facets and paging

    Args:
        client: An Algolia client whose lifecycle the caller manages.
        settings: Application settings (scope, replicas, facet limits).
    """

    def __init__(self, client: AlgoliaClient, settings: Settings) -> None:
        if client is None:
            raise ConfigurationError("An AlgoliaClient is required.")
        if settings is None:
            raise ConfigurationError("Settings are required.")
        if not settings.search.scope:
            raise ConfigurationError("search.scope must not be empty.")

        self._client = client
        self._settings = settings
        self._query_builder = AlgoliaQueryBuilder(max_values_per_facet=settings.algolia.max_values_per_facet)

    @property
    def name(self) -> str:
        return "algolia"

    @property
    def replicas(self) -> list[ReplicaSpec]:
        return self._settings.algolia.replicas

    def get_index_name(self, document_type: str) -> str:
        return get_index_name(self._settings.search.scope, document_type)

    # ── Indexing ─────────────────────────────────────────────────────────

    async def index_documents(self, document_type: str, documents: Sequence[IndexDocument]) -> IndexingResult:
        self._require_document_type(document_type)
        index_name = self.get_index_name(document_type)
        records = [convert_document(document, document_type).to_record() for document in documents]

        try:
            if await self._client.index_exists(index_name):
                current = await self._client.get_settings(index_name)
            else:
                current = SchemaSettings()

            settings, changed = reconcile(current, documents, index_name, self.replicas)
            if changed:
                logger.info("Updating settings of %s", index_name)
                ack = await self._client.set_settings(index_name, settings, forward_to_replicas=True)
                if self._settings.algolia.wait_for_settings and ack.task_id is not None:
                    await self._client.wait_task(index_name, ack.task_id)

            for replica_name, replica_settings in replica_ranking_settings(index_name, self.replicas):
                await self._client.set_settings(replica_name, replica_settings)

            response = await self._client.save_objects(index_name, records)
        except AdapterError as e:
            raise self._search_error("Failed to index documents", e) from e

        result = create_indexing_result(response)
        logger.info("Indexed %d %s documents into %s", len(result.items), document_type, index_name)
        return result

    async def remove_documents(self, document_type: str, documents: Sequence[IndexDocument]) -> IndexingResult:
        self._require_document_type(document_type)
        index_name = self.get_index_name(document_type)

        try:
            response = await self._client.delete_objects(index_name, [document.id for document in documents])
        except AdapterError as e:
            raise self._search_error("Failed to remove documents", e) from e

        return create_indexing_result(response)

    async def delete_index(self, document_type: str) -> None:
        self._require_document_type(document_type)
        index_name = self.get_index_name(document_type)

        try:
            if await self._client.index_exists(index_name):
                await self._client.delete_index(index_name)
                logger.info("Deleted index %s", index_name)
        except AdapterError as e:
            raise self._search_error("Failed to delete index", e) from e

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, document_type: str, request: SearchRequest) -> SearchResponse:
        self._require_document_type(document_type)
        index_name = resolve_index_name(self.get_index_name(document_type), request.sorting, self.replicas)

        try:
            query = self._query_builder.build(request, index_name)
            raw = await self._client.search(index_name, query.to_params())
        except AdapterError as e:
            raise self._search_error("Search failed", e) from e

        return map_search_response(raw, request)

    # ── Helpers ──────────────────────────────────────────────────────────

    def _search_error(self, message: str, cause: Exception) -> SearchError:
        app_id = self._client.app_id
        scope = self._settings.search.scope
        return SearchError(
            f"{message}. Search service name: {app_id}, Scope: {scope}. {cause}",
            app_id=app_id,
            scope=scope,
        )
