"""Search request models — Backend-neutral filters, aggregations, sort and paging.

Filters form a tree discriminated on ``type``::

    AndFilter(children=[
        TermFilter(field_name="Color", values=["red", "blue"]),
        RangeFilter(field_name="Price", values=[RangeFilterValue(lower="10", upper="20")]),
    ])
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class TermFilter(BaseModel):
    """Matches documents whose field equals any of ``values``."""

    type: Literal["term"] = "term"
    field_name: str
    values: list[str] = Field(default_factory=list)


class RangeFilterValue(BaseModel):
    lower: str | None = None
    upper: str | None = None
    include_lower: bool = True
    include_upper: bool = False


class RangeFilter(BaseModel):
    """Matches documents whose numeric field falls into any of the ranges."""

    type: Literal["range"] = "range"
    field_name: str
    values: list[RangeFilterValue] = Field(default_factory=list)


class IdsFilter(BaseModel):
    """Matches documents by identifier."""

    type: Literal["ids"] = "ids"
    values: list[str] = Field(default_factory=list)


class AndFilter(BaseModel):
    type: Literal["and"] = "and"
    children: list[SearchFilter] = Field(default_factory=list)


class OrFilter(BaseModel):
    type: Literal["or"] = "or"
    children: list[SearchFilter] = Field(default_factory=list)


class NotFilter(BaseModel):
    type: Literal["not"] = "not"
    child: SearchFilter


SearchFilter = Annotated[
    Union[TermFilter, RangeFilter, IdsFilter, AndFilter, OrFilter, NotFilter],
    Field(discriminator="type"),
]

AndFilter.model_rebuild()
OrFilter.model_rebuild()
NotFilter.model_rebuild()


class TermAggregationRequest(BaseModel):
    """Counts documents per distinct value of a field."""

    type: Literal["term"] = "term"
    id: str | None = Field(default=None, description="Aggregation id; defaults to the field name")
    field_name: str
    values: list[str] | None = Field(default=None, description="Restrict counts to these values")
    size: int | None = Field(default=None, ge=0, description="Maximum number of buckets")


class RangeAggregationRequestValue(BaseModel):
    id: str
    lower: str | None = None
    upper: str | None = None
    include_lower: bool = True
    include_upper: bool = False


class RangeAggregationRequest(BaseModel):
    """Counts documents per numeric range of a field."""

    type: Literal["range"] = "range"
    id: str | None = Field(default=None, description="Aggregation id; defaults to the field name")
    field_name: str
    values: list[RangeAggregationRequestValue] = Field(default_factory=list)


AggregationRequest = Annotated[
    Union[TermAggregationRequest, RangeAggregationRequest],
    Field(discriminator="type"),
]


class SortingField(BaseModel):
    field_name: str
    is_descending: bool = False


class SearchRequest(BaseModel):
    """Abstract search request handed to a search provider."""

    search_keywords: str | None = Field(default=None, description="Full-text query")
    search_fields: list[str] | None = Field(default=None, description="Restrict full-text search to these fields")
    filter: SearchFilter | None = Field(default=None, description="Filter expression tree")
    aggregations: list[AggregationRequest] = Field(default_factory=list, description="Facet requests")
    sorting: list[SortingField] = Field(default_factory=list, description="Sort directives, first one wins")
    skip: int = Field(default=0, ge=0, description="Number of documents to skip")
    take: int = Field(default=20, ge=0, le=1000, description="Number of documents to return")
    include_fields: list[str] | None = Field(default=None, description="Fields to return (None = backend default)")
    is_fuzzy_search: bool = Field(default=False, description="Enable typo tolerance")
