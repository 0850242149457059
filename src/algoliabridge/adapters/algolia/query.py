"""Query translator — Maps a ``SearchRequest`` to Algolia search parameters.

Filters become an Algolia filter string::

    AndFilter([TermFilter("Color", ["red", "blue"]), RangeFilter("Price", [10..20))])
    -> (color:"red" OR color:"blue") AND (price >= 10 AND price < 20)

Algolia only accepts filters in conjunctive normal form; requests outside
it are passed through and rejected by the backend.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from algoliabridge.adapters.algolia.naming import OBJECT_ID_FIELD_NAME, RAW_KEY_FIELD_NAME, to_algolia_field_name
from algoliabridge.adapters.base.exceptions import QueryError
from algoliabridge.models.query import (
    AndFilter,
    IdsFilter,
    NotFilter,
    OrFilter,
    RangeFilter,
    RangeFilterValue,
    SearchFilter,
    SearchRequest,
    TermAggregationRequest,
    TermFilter,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_VALUES_PER_FACET = 100


class ProviderQuery(BaseModel):
    """Body of ``POST /1/indexes/{index}/query``."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = ""
    filters: str | None = None
    facets: list[str] | None = None
    max_values_per_facet: int | None = Field(default=None, alias="maxValuesPerFacet")
    offset: int = 0
    length: int = 20
    attributes_to_retrieve: list[str] | None = Field(default=None, alias="attributesToRetrieve")
    restrict_searchable_attributes: list[str] | None = Field(default=None, alias="restrictSearchableAttributes")
    typo_tolerance: bool = Field(default=False, alias="typoTolerance")

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class AlgoliaQueryBuilder:
    """Builds Algolia queries from search requests.

    Args:
        max_values_per_facet: Upper bound on facet values Algolia returns per
            attribute when no term aggregation sets a larger ``size``.
    """

    def __init__(self, max_values_per_facet: int = DEFAULT_MAX_VALUES_PER_FACET) -> None:
        self._max_values_per_facet = max_values_per_facet

    def build(self, request: SearchRequest, index_name: str) -> ProviderQuery:
        """Translate ``request`` for execution against ``index_name``.

        Sorting is not part of the query: it is served by choosing a replica
        index, see :func:`~algoliabridge.adapters.algolia.naming.resolve_index_name`.
        """
        query = ProviderQuery(
            query=request.search_keywords or "",
            offset=request.skip,
            length=request.take,
            typo_tolerance=request.is_fuzzy_search,
        )

        if request.filter is not None:
            query.filters = self.build_filter(request.filter) or None

        if request.search_fields:
            query.restrict_searchable_attributes = _unique(to_algolia_field_name(f) for f in request.search_fields)

        if request.include_fields is not None:
            query.attributes_to_retrieve = _unique(
                [RAW_KEY_FIELD_NAME, *(to_algolia_field_name(f) for f in request.include_fields)]
            )

        if request.aggregations:
            query.facets = _unique(to_algolia_field_name(a.field_name) for a in request.aggregations)
            sizes = [a.size for a in request.aggregations if isinstance(a, TermAggregationRequest) and a.size]
            query.max_values_per_facet = max([self._max_values_per_facet, *sizes])

        logger.debug("Built query for %s: %s", index_name, query.to_params())
        return query

    # ── Filters ──────────────────────────────────────────────────────────

    def build_filter(self, search_filter: SearchFilter) -> str:
        """Render a filter tree as an Algolia filter string."""
        if isinstance(search_filter, TermFilter):
            field = to_algolia_field_name(search_filter.field_name)
            return _join(" OR ", [f"{field}:{_quote(v)}" for v in search_filter.values])

        if isinstance(search_filter, RangeFilter):
            field = to_algolia_field_name(search_filter.field_name)
            conditions = [_range_condition(field, v) for v in search_filter.values]
            if len(conditions) > 1:
                conditions = [_group(c) for c in conditions]
            return _join(" OR ", conditions)

        if isinstance(search_filter, IdsFilter):
            return _join(" OR ", [f"{OBJECT_ID_FIELD_NAME}:{_quote(v)}" for v in search_filter.values])

        if isinstance(search_filter, AndFilter):
            return _join(" AND ", [_group(self.build_filter(c)) for c in search_filter.children])

        if isinstance(search_filter, OrFilter):
            return _join(" OR ", [_group(self.build_filter(c)) for c in search_filter.children])

        if isinstance(search_filter, NotFilter):
            child = search_filter.child
            if isinstance(child, TermFilter):
                field = to_algolia_field_name(child.field_name)
                return _join(" AND ", [f"NOT {field}:{_quote(v)}" for v in child.values])
            inner = self.build_filter(child)
            return f"NOT ({inner})" if inner else ""

        raise QueryError(f"Unsupported filter type: {type(search_filter).__name__}")


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _join(operator: str, parts: list[str]) -> str:
    return operator.join(p for p in parts if p)


def _group(expression: str) -> str:
    if " AND " in expression or " OR " in expression:
        return f"({expression})"
    return expression


def _number(field: str, bound: str) -> str:
    """Return ``bound`` stripped, or raise if it is not a finite number."""
    text = bound.strip()
    try:
        number = float(text)
    except ValueError:
        raise QueryError(f"Range bound for {field} is not a number: {bound!r}") from None
    if not math.isfinite(number):
        raise QueryError(f"Range bound for {field} is not a finite number: {bound!r}")
    return text


def _range_condition(field: str, value: RangeFilterValue) -> str:
    lower = _number(field, value.lower) if value.lower else None
    upper = _number(field, value.upper) if value.upper else None

    if lower is not None and upper is not None and value.include_lower and value.include_upper:
        return f"{field}:{lower} TO {upper}"

    conditions: list[str] = []
    if lower is not None:
        conditions.append(f"{field} {'>=' if value.include_lower else '>'} {lower}")
    if upper is not None:
        conditions.append(f"{field} {'<=' if value.include_upper else '<'} {upper}")
    return _join(" AND ", conditions)


def _unique(names: Any) -> list[str]:
    result: list[str] = []
    for name in names:
        if name not in result:
            result.append(name)
    return result
