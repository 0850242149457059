"""Naming rules for Algolia attributes, indexes and sort replicas.

Every logical field name is normalized before it reaches Algolia::

    "Color"        -> "color"
    "price.amount" -> "price_amount"
    "__key"        -> "key"

Normalized names never start with ``_``, so they cannot collide with the raw
identifier attribute (``__key``) or Algolia's reserved attributes.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from algoliabridge.models.query import SortingField
from algoliabridge.models.schema import ReplicaSpec

logger = logging.getLogger(__name__)

RAW_KEY_FIELD_NAME = "__key"
"""Attribute that keeps ``IndexDocument.id`` verbatim next to ``objectID``."""

OBJECT_ID_FIELD_NAME = "objectID"

INDEX_NAME_SEPARATOR = "-"

_NON_WORD = re.compile(r"\W", re.UNICODE)


def to_algolia_field_name(name: str) -> str:
    """Map a logical field name to its Algolia attribute name."""
    normalized = _NON_WORD.sub("_", name).lower().lstrip("_")
    return normalized or "field"


def field_sort_key(name: str) -> tuple[str, str]:
    """Sort key for field names: case-insensitive, lower-case variant first."""
    return name.casefold(), name.swapcase()


def build_field_name_map(names: Iterable[str]) -> dict[str, str]:
    """Map normalized attribute names back to logical names.

    When two logical names normalize to the same attribute the first one
    wins.
    """
    result: dict[str, str] = {}
    for name in names:
        result.setdefault(to_algolia_field_name(name), name)
    return result


def get_index_name(scope: str, document_type: str) -> str:
    """Physical index name of a document type: ``"{scope}-{type}"`` lower-cased."""
    return INDEX_NAME_SEPARATOR.join((scope, document_type)).lower()


def sort_direction(is_descending: bool) -> str:
    return "desc" if is_descending else "asc"


def to_replica_name(index_name: str, replica: ReplicaSpec) -> str:
    """Name of the replica index sorted by ``replica``'s field and direction."""
    field = to_algolia_field_name(replica.field_name)
    return f"{index_name}_replica_{field}_{sort_direction(replica.is_descending)}"


def to_ranking_expression(replica: ReplicaSpec) -> str:
    """Custom ranking expression of a replica, e.g. ``"desc(price)"``."""
    return f"{sort_direction(replica.is_descending)}({to_algolia_field_name(replica.field_name)})"


def find_replica(sorting: Sequence[SortingField], replicas: Sequence[ReplicaSpec]) -> ReplicaSpec | None:
    """Replica matching the first sort directive, if any is configured."""
    if not sorting:
        return None

    first = sorting[0]
    field = to_algolia_field_name(first.field_name)
    for replica in replicas:
        if to_algolia_field_name(replica.field_name) == field and replica.is_descending == first.is_descending:
            return replica
    return None


def resolve_index_name(
    index_name: str,
    sorting: Sequence[SortingField],
    replicas: Sequence[ReplicaSpec],
) -> str:
    """Pick the index serving a sort order.

    Sorted requests go to the replica matching the first sort field and
    direction; unsorted requests, or sorts without a replica, use the
    primary index.
    """
    replica = find_replica(sorting, replicas)
    if replica is not None:
        return to_replica_name(index_name, replica)

    if sorting:
        logger.debug(
            "No replica for sort %s %s on %s; using primary index",
            sorting[0].field_name,
            sort_direction(sorting[0].is_descending),
            index_name,
        )
    return index_name
