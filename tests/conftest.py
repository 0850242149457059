"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from algoliabridge.config.settings import Settings
from algoliabridge.models.document import IndexDocument, IndexField


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with one descending price replica."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        algolia={
            "app_id": "TESTAPP",
            "api_key": "test-key",
            "replicas": [{"field_name": "price", "is_descending": True}],
        },
        search={"scope": "Shop"},
    )


@pytest.fixture
def product_document() -> IndexDocument:
    """A product with searchable, filterable, retrievable and collection fields."""
    return IndexDocument(
        id="sku-123",
        fields=[
            IndexField(name="name", values=["Trail Runner"], is_searchable=True, is_retrievable=True),
            IndexField(name="price", values=[89.5], is_filterable=True, is_retrievable=True),
            IndexField(name="Categories", values=["shoes"], is_filterable=True, is_collection=True),
            IndexField(name="in_stock", values=[True], is_filterable=True),
        ],
    )


@pytest.fixture
def color_document() -> IndexDocument:
    """A document whose ``color`` and ``Color`` fields share one attribute."""
    return IndexDocument(
        id="doc-1",
        fields=[
            IndexField(name="color", values=["red"], is_filterable=True),
            IndexField(name="Color", values=["blue"], is_filterable=True),
        ],
    )
