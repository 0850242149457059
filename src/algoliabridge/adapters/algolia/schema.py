"""Schema synchronizer — Keeps Algolia index settings in step with documents.

Attribute lists and the replica list only ever grow here.  Attributes that
stop appearing in documents stay configured until the index is reset.

Settings are read, modified and written without a concurrency token, so two
callers indexing the same type at once can overwrite each other's additions
(last writer wins).  The next indexing call re-adds whatever was lost.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from algoliabridge.adapters.algolia.naming import (
    field_sort_key,
    to_algolia_field_name,
    to_ranking_expression,
    to_replica_name,
)
from algoliabridge.models.document import IndexDocument
from algoliabridge.models.schema import ReplicaSpec, SchemaSettings

logger = logging.getLogger(__name__)

# unordered(x), filterOnly(x), searchable(x), afterDistinct(x), ordered(x)
_MODIFIER = re.compile(r"^\w+\((?P<name>.+)\)$")


def attribute_name(entry: str) -> str:
    """Strip Algolia attribute modifiers, e.g. ``filterOnly(color)`` -> ``color``."""
    match = _MODIFIER.match(entry.strip())
    return match.group("name") if match else entry.strip()


def _add_attribute(attributes: list[str], name: str) -> bool:
    for entry in attributes:
        # a searchable entry may list several attributes of equal priority
        if name in (attribute_name(part) for part in entry.split(",")):
            return False
    attributes.append(name)
    return True


def reconcile_attributes(
    current: SchemaSettings,
    documents: Sequence[IndexDocument],
) -> tuple[SchemaSettings, bool]:
    """Add attributes declared by ``documents`` that the settings lack.

    Returns:
        A new settings object and whether anything was added. ``current`` is
        left untouched.
    """
    settings = current.model_copy(deep=True)
    changed = False

    for document in documents:
        for field in sorted(document.fields, key=lambda f: field_sort_key(f.name)):
            name = to_algolia_field_name(field.name)

            if field.is_searchable:
                if settings.searchable_attributes is None:
                    settings.searchable_attributes = []
                changed |= _add_attribute(settings.searchable_attributes, name)

            if field.is_filterable:
                if settings.attributes_for_faceting is None:
                    settings.attributes_for_faceting = []
                changed |= _add_attribute(settings.attributes_for_faceting, name)

            if field.is_retrievable:
                if settings.attributes_to_retrieve is None:
                    settings.attributes_to_retrieve = []
                changed |= _add_attribute(settings.attributes_to_retrieve, name)

    return settings, changed


def reconcile_replicas(settings: SchemaSettings, index_name: str, replicas: Sequence[ReplicaSpec]) -> bool:
    """Merge the configured replicas into ``settings.replicas`` in place.

    Replicas already on the index are kept even when they are not
    configured here; they may have been created by someone else.

    Returns:
        Whether the replica list differed from the configured one.
    """
    if not replicas:
        return False

    existing = list(settings.replicas or [])
    desired = [to_replica_name(index_name, replica) for replica in replicas]

    if existing == desired:
        return False

    merged = list(existing)
    merged.extend(name for name in desired if name not in merged)
    settings.replicas = merged
    logger.debug("Replicas of %s: %s -> %s", index_name, existing, merged)
    return True


def reconcile(
    current: SchemaSettings,
    documents: Sequence[IndexDocument],
    index_name: str,
    replicas: Sequence[ReplicaSpec] = (),
) -> tuple[SchemaSettings, bool]:
    """Reconcile attributes and replicas in one pass."""
    settings, changed = reconcile_attributes(current, documents)
    replicas_changed = reconcile_replicas(settings, index_name, replicas)
    return settings, changed or replicas_changed


def replica_ranking_settings(
    index_name: str,
    replicas: Sequence[ReplicaSpec],
) -> list[tuple[str, SchemaSettings]]:
    """Custom ranking settings of every configured replica index.

    The provider pushes all of them on each indexing call, whether or not
    the primary index settings changed.
    """
    return [
        (to_replica_name(index_name, replica), SchemaSettings(custom_ranking=[to_ranking_expression(replica)]))
        for replica in replicas
    ]
