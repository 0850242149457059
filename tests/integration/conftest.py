"""Integration test fixtures — A live Algolia application.

Expects credentials of a disposable Algolia application in:
    ALGOLIABRIDGE_TEST_APP_ID
    ALGOLIABRIDGE_TEST_API_KEY

Every test session indexes into its own scope and deletes its indexes
afterwards.
"""

from __future__ import annotations

import os
import uuid

import pytest

from algoliabridge.adapters.algolia import AlgoliaClient, AlgoliaSearchProvider
from algoliabridge.config.settings import Settings
from algoliabridge.models.document import IndexDocument, IndexField


@pytest.fixture
def mock_documents() -> list[IndexDocument]:
    return [
        IndexDocument(
            id="sku-001",
            fields=[
                IndexField(name="Name", values=["Trail Runner"], is_searchable=True, is_retrievable=True),
                IndexField(name="Price", values=[89.5], is_filterable=True, is_retrievable=True),
                IndexField(name="Color", values=["red"], is_filterable=True, is_retrievable=True),
            ],
        ),
        IndexDocument(
            id="sku-002",
            fields=[
                IndexField(name="Name", values=["Road Runner"], is_searchable=True, is_retrievable=True),
                IndexField(name="Price", values=[120], is_filterable=True, is_retrievable=True),
                IndexField(name="Color", values=["blue"], is_filterable=True, is_retrievable=True),
            ],
        ),
    ]


@pytest.fixture(scope="session")
def algolia_settings() -> Settings:
    app_id = os.environ.get("ALGOLIABRIDGE_TEST_APP_ID")
    api_key = os.environ.get("ALGOLIABRIDGE_TEST_API_KEY")
    if not app_id or not api_key:
        pytest.skip("Algolia test credentials not configured")

    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        algolia={
            "app_id": app_id,
            "api_key": api_key,
            "wait_for_settings": True,
            "replicas": ["price:desc"],
        },
        search={"scope": f"it-{uuid.uuid4().hex[:8]}"},
    )


@pytest.fixture
async def provider(algolia_settings: Settings):
    async with AlgoliaClient.from_settings(algolia_settings.algolia) as client:
        p = AlgoliaSearchProvider(client, algolia_settings)
        yield p
        await p.delete_index("product")
