"""Data models shared by providers, the client and callers."""

from algoliabridge.models.document import FieldValue, GeoPoint, IndexDocument, IndexField, ProviderDocument
from algoliabridge.models.query import (
    AndFilter,
    IdsFilter,
    NotFilter,
    OrFilter,
    RangeAggregationRequest,
    RangeAggregationRequestValue,
    RangeFilter,
    RangeFilterValue,
    SearchRequest,
    SortingField,
    TermAggregationRequest,
    TermFilter,
)
from algoliabridge.models.response import (
    AggregationResponse,
    AggregationResponseValue,
    SearchDocument,
    SearchResponse,
)
from algoliabridge.models.result import BatchAck, BatchResponse, IndexingResult, IndexingResultItem
from algoliabridge.models.schema import ReplicaSpec, SchemaSettings

__all__ = [
    "AggregationResponse",
    "AggregationResponseValue",
    "AndFilter",
    "BatchAck",
    "BatchResponse",
    "FieldValue",
    "GeoPoint",
    "IdsFilter",
    "IndexDocument",
    "IndexField",
    "IndexingResult",
    "IndexingResultItem",
    "NotFilter",
    "OrFilter",
    "ProviderDocument",
    "RangeAggregationRequest",
    "RangeAggregationRequestValue",
    "RangeFilter",
    "RangeFilterValue",
    "ReplicaSpec",
    "SchemaSettings",
    "SearchDocument",
    "SearchRequest",
    "SearchResponse",
    "SortingField",
    "TermAggregationRequest",
    "TermFilter",
]
