"""Document converter — Builds one Algolia record per index document.

Fields are visited in :func:`field_sort_key` order so the record is the same
whatever order the caller supplied them in.  When several logical fields
normalize to one attribute, their values are merged into an array; nothing
is dropped.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from algoliabridge.adapters.algolia.naming import RAW_KEY_FIELD_NAME, field_sort_key, to_algolia_field_name
from algoliabridge.adapters.base.exceptions import UnsupportedFieldError
from algoliabridge.models.document import FieldValue, GeoPoint, IndexDocument, IndexField, ProviderDocument, ScalarValue


def convert_document(document: IndexDocument, document_type: str) -> ProviderDocument:
    """Convert ``document`` to an Algolia record.

    Args:
        document: The document to convert. Must have a non-empty id.
        document_type: Logical document type, used in error messages.

    Returns:
        The record, carrying ``document.id`` both as ``objectID`` and
        verbatim under the raw key attribute.

    Raises:
        ValueError: If the document has no id.
        UnsupportedFieldError: If a field holds a geo point or another value
            Algolia cannot store as-is.
    """
    if not document.id:
        raise ValueError(f"Cannot index a {document_type!r} document without an id")

    fields: dict[str, FieldValue] = {RAW_KEY_FIELD_NAME: document.id}

    for field in sorted(document.fields, key=lambda f: field_sort_key(f.name)):
        if not field.values:
            continue

        name = to_algolia_field_name(field.name)
        values = [_coerce_value(document, document_type, field, v) for v in field.values]

        if name in fields:
            current = fields[name]
            merged = list(current) if isinstance(current, list) else [current]
            merged.extend(values)
            fields[name] = merged
        elif field.is_collection or len(values) > 1:
            fields[name] = values
        else:
            fields[name] = values[0]

    return ProviderDocument(object_id=document.id, fields=fields)


def _coerce_value(document: IndexDocument, document_type: str, field: IndexField, value: Any) -> ScalarValue:
    if isinstance(value, GeoPoint):
        raise UnsupportedFieldError(
            f"Field {field.name!r} of {document_type!r} document {document.id!r} holds a geo point; "
            "geo points are not supported by the Algolia provider"
        )
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    raise UnsupportedFieldError(
        f"Field {field.name!r} of {document_type!r} document {document.id!r} holds an unsupported "
        f"value of type {type(value).__name__}"
    )
