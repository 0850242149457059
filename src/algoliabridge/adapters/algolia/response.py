"""Response translator — Maps Algolia responses back to canonical results.

Two directions:
  - search hits and facets -> ``SearchResponse``
  - batch acknowledgements  -> ``IndexingResult``
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from typing import Any

from algoliabridge.adapters.algolia.naming import (
    OBJECT_ID_FIELD_NAME,
    RAW_KEY_FIELD_NAME,
    build_field_name_map,
    to_algolia_field_name,
)
from algoliabridge.models.query import (
    AndFilter,
    NotFilter,
    OrFilter,
    RangeAggregationRequest,
    RangeAggregationRequestValue,
    RangeFilter,
    SearchFilter,
    SearchRequest,
    TermAggregationRequest,
    TermFilter,
)
from algoliabridge.models.response import (
    AggregationResponse,
    AggregationResponseValue,
    SearchDocument,
    SearchResponse,
)
from algoliabridge.models.result import BatchResponse, IndexingResult, IndexingResultItem

logger = logging.getLogger(__name__)


# ── Search ───────────────────────────────────────────────────────────────────


def map_search_response(raw: dict[str, Any], request: SearchRequest) -> SearchResponse:
    """Map an Algolia query response to ``SearchResponse``.

    Attribute names are translated back to the logical names the request
    mentions; attributes the request never named keep their Algolia name.
    """
    names = build_field_name_map(_request_field_names(request))
    hits = raw.get("hits", [])
    facets: dict[str, dict[str, int]] = raw.get("facets") or {}

    documents = [_map_hit(hit, names) for hit in hits]

    aggregations: list[AggregationResponse] = []
    for aggregation in request.aggregations:
        counts = facets.get(to_algolia_field_name(aggregation.field_name), {})
        if isinstance(aggregation, TermAggregationRequest):
            aggregations.append(_term_aggregation(aggregation, counts))
        elif isinstance(aggregation, RangeAggregationRequest):
            aggregations.append(_range_aggregation(aggregation, counts))

    return SearchResponse(
        total_count=raw.get("nbHits", len(hits)),
        documents=documents,
        aggregations=aggregations,
    )


def _map_hit(hit: dict[str, Any], names: dict[str, str]) -> SearchDocument:
    doc_id = hit.get(RAW_KEY_FIELD_NAME) or hit.get(OBJECT_ID_FIELD_NAME, "")
    fields = {
        names.get(key, key): value
        for key, value in hit.items()
        if key != OBJECT_ID_FIELD_NAME and not key.startswith("_")
    }
    return SearchDocument(id=str(doc_id), fields=fields)


def _request_field_names(request: SearchRequest) -> Iterator[str]:
    yield from request.include_fields or []
    yield from request.search_fields or []
    for aggregation in request.aggregations:
        yield aggregation.field_name
    for sorting in request.sorting:
        yield sorting.field_name
    if request.filter is not None:
        yield from _filter_field_names(request.filter)


def _filter_field_names(search_filter: SearchFilter) -> Iterator[str]:
    if isinstance(search_filter, (TermFilter, RangeFilter)):
        yield search_filter.field_name
    elif isinstance(search_filter, (AndFilter, OrFilter)):
        for child in search_filter.children:
            yield from _filter_field_names(child)
    elif isinstance(search_filter, NotFilter):
        yield from _filter_field_names(search_filter.child)


def _term_aggregation(aggregation: TermAggregationRequest, counts: dict[str, int]) -> AggregationResponse:
    items = [(value, count) for value, count in counts.items() if count > 0]
    if aggregation.values is not None:
        wanted = set(aggregation.values)
        items = [(value, count) for value, count in items if value in wanted]

    items.sort(key=lambda item: (-item[1], item[0]))
    if aggregation.size:
        items = items[: aggregation.size]

    return AggregationResponse(
        id=aggregation.id or aggregation.field_name,
        values=[AggregationResponseValue(id=value, count=count) for value, count in items],
    )


def _range_aggregation(aggregation: RangeAggregationRequest, counts: dict[str, int]) -> AggregationResponse:
    numeric: list[tuple[float, int]] = []
    for value, count in counts.items():
        number = _to_number(value)
        if number is not None:
            numeric.append((number, count))

    values: list[AggregationResponseValue] = []
    for bucket in aggregation.values:
        total = sum(count for number, count in numeric if _in_range(number, bucket))
        if total > 0:
            values.append(AggregationResponseValue(id=bucket.id, count=total))

    return AggregationResponse(id=aggregation.id or aggregation.field_name, values=values)


def _in_range(number: float, bucket: RangeAggregationRequestValue) -> bool:
    lower = _to_number(bucket.lower)
    upper = _to_number(bucket.upper)
    if lower is not None and (number < lower or (number == lower and not bucket.include_lower)):
        return False
    if upper is not None and (number > upper or (number == upper and not bucket.include_upper)):
        return False
    return True


def _to_number(value: str | None) -> float | None:
    if value is None or value == "":
        return None
    with contextlib.suppress(ValueError, TypeError):
        return float(value)
    logger.debug("Ignoring non-numeric range value %r", value)
    return None


# ── Batch results ────────────────────────────────────────────────────────────


def create_indexing_result(response: BatchResponse) -> IndexingResult:
    """Flatten all sub-batch acknowledgements into one ordered result.

    Algolia acknowledges whole batches, so every listed id succeeded.
    """
    ids = [object_id for ack in response.responses for object_id in ack.object_ids]
    return IndexingResult(items=[IndexingResultItem(id=i, succeeded=True, error_message="") for i in ids])
