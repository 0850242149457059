"""Index document models — Schema-agnostic input documents and Algolia records.

Callers describe every document as a list of ``IndexField`` entries, each
carrying its own capability flags.  The converter turns these into
``ProviderDocument`` records, the shape Algolia stores.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

ScalarValue = Union[str, int, float, bool]
"""A single Algolia attribute value."""

FieldValue = Union[ScalarValue, list[ScalarValue]]
"""An Algolia attribute value: a scalar or an array of scalars."""


class GeoPoint(BaseModel):
    """Geographic coordinate.

    Geo values are not encoded for Algolia yet; the converter rejects them.
    """

    latitude: float = Field(description="Latitude in degrees")
    longitude: float = Field(description="Longitude in degrees")


class IndexField(BaseModel):
    """A named field of an index document with its capability flags."""

    name: str = Field(description="Case-sensitive logical field name")
    values: list[Any] = Field(default_factory=list, description="Ordered field values")
    is_searchable: bool = Field(default=False, description="Full-text searchable")
    is_filterable: bool = Field(default=False, description="Usable in filters and facets")
    is_retrievable: bool = Field(default=False, description="Returned in search results")
    is_collection: bool = Field(default=False, description="Always stored as an array")

    @property
    def value(self) -> Any:
        """The first value, or ``None`` when the field is empty."""
        return self.values[0] if self.values else None

    def merge(self, other: IndexField) -> None:
        """Append ``other``'s values and OR its flags into this field."""
        self.values.extend(other.values)
        self.is_searchable = self.is_searchable or other.is_searchable
        self.is_filterable = self.is_filterable or other.is_filterable
        self.is_retrievable = self.is_retrievable or other.is_retrievable
        self.is_collection = self.is_collection or other.is_collection


class IndexDocument(BaseModel):
    """A document to be indexed, keyed by ``id`` within its document type.

    Fields sharing the same name are merged rather than rejected, both on
    construction and through :meth:`add_field`.
    """

    id: str = Field(description="Document identifier, unique within a document type")
    fields: list[IndexField] = Field(default_factory=list, description="Document fields")

    @model_validator(mode="after")
    def _merge_duplicate_fields(self) -> IndexDocument:
        merged: dict[str, IndexField] = {}
        for field in self.fields:
            if field.name in merged:
                merged[field.name].merge(field)
            else:
                merged[field.name] = field.model_copy(deep=True)
        self.fields = list(merged.values())
        return self

    def add_field(self, field: IndexField) -> None:
        for existing in self.fields:
            if existing.name == field.name:
                existing.merge(field)
                return
        self.fields.append(field.model_copy(deep=True))

    def get_field(self, name: str) -> IndexField | None:
        return next((f for f in self.fields if f.name == name), None)


class ProviderDocument(BaseModel):
    """An Algolia record: the object identifier plus a dynamic attribute bag."""

    model_config = ConfigDict(populate_by_name=True)

    object_id: str = Field(alias="objectID", description="Algolia object identifier")
    fields: dict[str, FieldValue] = Field(default_factory=dict, description="Record attributes")

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-ready record, ``objectID`` first."""
        record: dict[str, Any] = {"objectID": self.object_id}
        record.update(self.fields)
        return record
