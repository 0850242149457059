"""Tests for the Algolia search provider."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, call

import httpx
import pytest

from algoliabridge.adapters.algolia.client import AlgoliaClient
from algoliabridge.adapters.algolia.provider import AlgoliaSearchProvider
from algoliabridge.adapters.base.exceptions import (
    AlgoliaApiError,
    ConfigurationError,
    ConnectionError,
    QueryError,
    SearchError,
    UnsupportedFieldError,
)
from algoliabridge.config.settings import Settings
from algoliabridge.models.document import GeoPoint, IndexDocument, IndexField
from algoliabridge.models.query import (
    RangeFilter,
    RangeFilterValue,
    SearchRequest,
    SortingField,
    TermAggregationRequest,
)
from algoliabridge.models.result import BatchAck, BatchResponse, TaskAck
from algoliabridge.models.schema import SchemaSettings

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def client() -> AsyncMock:
    mock_client = AsyncMock(spec=AlgoliaClient)
    mock_client.app_id = "TESTAPP"
    mock_client.index_exists.return_value = False
    mock_client.set_settings.return_value = TaskAck(task_id=9)
    mock_client.save_objects.return_value = BatchResponse(
        responses=[BatchAck(task_id=10, object_ids=["sku-123"])]
    )
    return mock_client


@pytest.fixture
def provider(client: AsyncMock, settings: Settings) -> AlgoliaSearchProvider:
    return AlgoliaSearchProvider(client, settings)


@pytest.fixture
def sample_search_response() -> dict[str, Any]:
    return {
        "hits": [{"objectID": "sku-123", "__key": "sku-123", "name": "Trail Runner"}],
        "nbHits": 1,
        "facets": {"color": {"red": 1}},
    }


# ── Properties ───────────────────────────────────────────────────────────────


class TestAlgoliaProviderProperties:
    def test_name(self, provider: AlgoliaSearchProvider) -> None:
        assert provider.name == "algolia"

    def test_index_name(self, provider: AlgoliaSearchProvider) -> None:
        assert provider.get_index_name("Product") == "shop-product"

    def test_requires_client(self, settings: Settings) -> None:
        with pytest.raises(ConfigurationError):
            AlgoliaSearchProvider(None, settings)  # type: ignore[arg-type]

    def test_requires_settings(self, client: AsyncMock) -> None:
        with pytest.raises(ConfigurationError):
            AlgoliaSearchProvider(client, None)  # type: ignore[arg-type]


# ── Indexing ─────────────────────────────────────────────────────────────────


class TestAlgoliaProviderIndexing:
    async def test_new_index_gets_settings_then_records(
        self, provider: AlgoliaSearchProvider, client: AsyncMock, product_document: IndexDocument
    ) -> None:
        result = await provider.index_documents("product", [product_document])

        assert [item.id for item in result.items] == ["sku-123"]
        assert result.items[0].succeeded is True
        client.get_settings.assert_not_called()

        primary = client.set_settings.await_args_list[0]
        assert primary.args[0] == "shop-product"
        assert primary.kwargs == {"forward_to_replicas": True}
        pushed: SchemaSettings = primary.args[1]
        assert pushed.searchable_attributes == ["name"]
        assert pushed.attributes_for_faceting == ["categories", "in_stock", "price"]
        assert pushed.replicas == ["shop-product_replica_price_desc"]

        assert client.set_settings.await_args_list[1] == call(
            "shop-product_replica_price_desc", SchemaSettings(custom_ranking=["desc(price)"])
        )

        records = client.save_objects.await_args.args[1]
        assert records[0]["objectID"] == "sku-123"
        assert records[0]["__key"] == "sku-123"

        names = [c[0] for c in client.mock_calls]
        assert names.index("save_objects") > names.index("set_settings")

    async def test_unchanged_settings_not_pushed(
        self, provider: AlgoliaSearchProvider, client: AsyncMock, product_document: IndexDocument
    ) -> None:
        client.index_exists.return_value = True
        client.get_settings.return_value = SchemaSettings(
            searchable_attributes=["name"],
            attributes_for_faceting=["categories", "in_stock", "price"],
            attributes_to_retrieve=["name", "price"],
            replicas=["shop-product_replica_price_desc"],
        )

        await provider.index_documents("product", [product_document])

        # only the replica ranking push remains
        client.set_settings.assert_awaited_once_with(
            "shop-product_replica_price_desc", SchemaSettings(custom_ranking=["desc(price)"])
        )
        client.save_objects.assert_awaited_once()

    async def test_external_replicas_kept(
        self, provider: AlgoliaSearchProvider, client: AsyncMock, product_document: IndexDocument
    ) -> None:
        client.index_exists.return_value = True
        client.get_settings.return_value = SchemaSettings(replicas=["shop-product_by_date"])

        await provider.index_documents("product", [product_document])

        pushed: SchemaSettings = client.set_settings.await_args_list[0].args[1]
        assert pushed.replicas == ["shop-product_by_date", "shop-product_replica_price_desc"]

    async def test_waits_for_settings_when_configured(
        self, client: AsyncMock, settings: Settings, product_document: IndexDocument
    ) -> None:
        settings.algolia.wait_for_settings = True
        provider = AlgoliaSearchProvider(client, settings)

        await provider.index_documents("product", [product_document])

        client.wait_task.assert_awaited_once_with("shop-product", 9)

    async def test_backend_failure_wrapped(
        self, provider: AlgoliaSearchProvider, client: AsyncMock, product_document: IndexDocument
    ) -> None:
        client.save_objects.side_effect = AlgoliaApiError("Record is too big", status_code=400)

        with pytest.raises(SearchError, match="Failed to index documents") as exc_info:
            await provider.index_documents("product", [product_document])

        error = exc_info.value
        assert "Search service name: TESTAPP" in str(error)
        assert "Scope: Shop" in str(error)
        assert "Record is too big" in str(error)
        assert error.app_id == "TESTAPP"
        assert isinstance(error.__cause__, AlgoliaApiError)

    async def test_geo_point_rejected_before_network(
        self, provider: AlgoliaSearchProvider, client: AsyncMock
    ) -> None:
        document = IndexDocument(
            id="store-1",
            fields=[IndexField(name="location", values=[GeoPoint(latitude=1.0, longitude=2.0)])],
        )
        with pytest.raises(UnsupportedFieldError):
            await provider.index_documents("store", [document])
        client.index_exists.assert_not_called()

    async def test_empty_document_type_rejected(self, provider: AlgoliaSearchProvider, client: AsyncMock) -> None:
        with pytest.raises(ValueError, match="document_type"):
            await provider.index_documents("", [])
        client.index_exists.assert_not_called()


# ── Removal and deletion ─────────────────────────────────────────────────────


class TestAlgoliaProviderRemoval:
    async def test_remove_documents(self, provider: AlgoliaSearchProvider, client: AsyncMock) -> None:
        client.delete_objects.return_value = BatchResponse(
            responses=[BatchAck(object_ids=["1", "2"]), BatchAck(object_ids=["3"])]
        )
        documents = [IndexDocument(id=i) for i in ("1", "2", "3")]

        result = await provider.remove_documents("product", documents)

        client.delete_objects.assert_awaited_once_with("shop-product", ["1", "2", "3"])
        assert [item.id for item in result.items] == ["1", "2", "3"]

    async def test_remove_failure_wrapped(self, provider: AlgoliaSearchProvider, client: AsyncMock) -> None:
        client.delete_objects.side_effect = ConnectionError("Failed to reach Algolia")
        with pytest.raises(SearchError, match="Failed to remove documents"):
            await provider.remove_documents("product", [IndexDocument(id="1")])

    async def test_delete_existing_index(self, provider: AlgoliaSearchProvider, client: AsyncMock) -> None:
        client.index_exists.return_value = True
        await provider.delete_index("product")
        client.delete_index.assert_awaited_once_with("shop-product")

    async def test_delete_missing_index_is_noop(self, provider: AlgoliaSearchProvider, client: AsyncMock) -> None:
        await provider.delete_index("product")
        client.delete_index.assert_not_called()

    async def test_delete_failure_wrapped(self, provider: AlgoliaSearchProvider, client: AsyncMock) -> None:
        client.index_exists.side_effect = AlgoliaApiError("Forbidden", status_code=403)
        with pytest.raises(SearchError, match="Failed to delete index"):
            await provider.delete_index("product")


# ── Search ───────────────────────────────────────────────────────────────────


class TestAlgoliaProviderSearch:
    async def test_sorted_search_uses_replica(
        self, provider: AlgoliaSearchProvider, client: AsyncMock, sample_search_response: dict
    ) -> None:
        client.search.return_value = sample_search_response
        request = SearchRequest(sorting=[SortingField(field_name="price", is_descending=True)])

        await provider.search("product", request)

        assert client.search.await_args.args[0] == "shop-product_replica_price_desc"

    async def test_unmatched_sort_uses_primary(
        self, provider: AlgoliaSearchProvider, client: AsyncMock, sample_search_response: dict
    ) -> None:
        client.search.return_value = sample_search_response
        request = SearchRequest(sorting=[SortingField(field_name="price")])

        await provider.search("product", request)

        assert client.search.await_args.args[0] == "shop-product"

    async def test_search_maps_response(
        self, provider: AlgoliaSearchProvider, client: AsyncMock, sample_search_response: dict
    ) -> None:
        client.search.return_value = sample_search_response
        request = SearchRequest(
            search_keywords="trail",
            include_fields=["Name"],
            aggregations=[TermAggregationRequest(field_name="Color")],
        )

        response = await provider.search("product", request)

        params = client.search.await_args.args[1]
        assert params["query"] == "trail"
        assert params["facets"] == ["color"]
        assert response.total_count == 1
        assert response.documents[0].id == "sku-123"
        assert response.documents[0].fields == {"Name": "Trail Runner"}
        assert response.aggregations[0].values[0].id == "red"

    async def test_search_failure_wrapped(self, provider: AlgoliaSearchProvider, client: AsyncMock) -> None:
        client.search.side_effect = AlgoliaApiError("Index does not exist", status_code=404)

        with pytest.raises(SearchError, match="Index does not exist"):
            await provider.search("product", SearchRequest())

    async def test_invalid_range_bound_wrapped(self, provider: AlgoliaSearchProvider, client: AsyncMock) -> None:
        request = SearchRequest(
            filter=RangeFilter(field_name="price", values=[RangeFilterValue(lower='0 OR tenant:"other"')])
        )

        with pytest.raises(SearchError, match="not a number") as exc_info:
            await provider.search("product", request)

        assert isinstance(exc_info.value.__cause__, QueryError)
        client.search.assert_not_called()


# ── Backend failures over HTTP ───────────────────────────────────────────────


class TestAlgoliaProviderHttpFailures:
    async def test_non_json_search_body_wrapped(self, settings: Settings) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>proxy</html>"))

        async with AlgoliaClient(app_id="TESTAPP", api_key="test-key", transport=transport) as client:
            provider = AlgoliaSearchProvider(client, settings)
            with pytest.raises(SearchError, match="Search failed") as exc_info:
                await provider.search("product", SearchRequest())

        assert isinstance(exc_info.value.__cause__, AlgoliaApiError)

    async def test_redirect_loop_wrapped(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

        async with AlgoliaClient(
            app_id="TESTAPP", api_key="test-key", transport=httpx.MockTransport(handler)
        ) as client:
            provider = AlgoliaSearchProvider(client, settings)
            with pytest.raises(SearchError, match="Failed to delete index") as exc_info:
                await provider.delete_index("product")

        assert isinstance(exc_info.value.__cause__, ConnectionError)
