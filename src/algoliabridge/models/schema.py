"""Index schema models — Algolia index settings and sort replica declarations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SchemaSettings(BaseModel):
    """The subset of Algolia index settings kept in sync with documents.

    Every list is optional: ``None`` means "not set on the backend", which
    is different from an explicitly empty list.  Other backend settings are
    ignored on read and never written back.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    searchable_attributes: list[str] | None = Field(default=None, alias="searchableAttributes")
    attributes_for_faceting: list[str] | None = Field(default=None, alias="attributesForFaceting")
    attributes_to_retrieve: list[str] | None = Field(default=None, alias="attributesToRetrieve")
    replicas: list[str] | None = Field(default=None, alias="replicas")
    custom_ranking: list[str] | None = Field(default=None, alias="customRanking")

    def to_payload(self) -> dict[str, Any]:
        """Return the settings body for ``PUT /1/indexes/{index}/settings``."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ReplicaSpec(BaseModel):
    """Declares a secondary index sorted by ``field_name``."""

    field_name: str = Field(description="Logical name of the sort field")
    is_descending: bool = Field(default=False, description="Sort direction")
