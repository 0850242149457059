"""Search response models — Canonical result shape returned by providers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SearchDocument(BaseModel):
    """A single matching document with its fields under logical names."""

    id: str = Field(description="Document identifier")
    fields: dict[str, Any] = Field(default_factory=dict, description="Returned document fields")


class AggregationResponseValue(BaseModel):
    id: str = Field(description="Bucket id (facet value or range id)")
    count: int = Field(default=0, description="Number of matching documents")


class AggregationResponse(BaseModel):
    id: str = Field(description="Aggregation id")
    values: list[AggregationResponseValue] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Documents, facet aggregations and total hit count of one search."""

    total_count: int = Field(default=0, description="Total number of matching documents")
    documents: list[SearchDocument] = Field(default_factory=list)
    aggregations: list[AggregationResponse] = Field(default_factory=list)
