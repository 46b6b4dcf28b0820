# Cosmos Collection Admin
# File: indexing.py
# Version: v1

"""Indexing-policy and collection-body construction.

Creation and index updates share one rule: a catch-all ``/*`` range path
followed by one hash path per requested field, in caller order.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from .config import ConnectionContext
from .models import (
    CollectionEntity,
    IncludedPathEntity,
    IndexEntity,
    IndexingPolicyEntity,
    PartitionKeyEntity,
)

CATCH_ALL_PATH = "/*"
RESERVED_ID_FIELD = "id"
MAX_PRECISION = -1


def _pair(kind: str) -> tuple[IndexEntity, IndexEntity]:
    return (
        IndexEntity(kind=kind, data_type="Number", precision=MAX_PRECISION),
        IndexEntity(kind=kind, data_type="String", precision=MAX_PRECISION),
    )


def _is_indexable(name: str | None) -> bool:
    # The system "id" field is always indexed by the service.
    return bool(name and name.strip()) and name.lower() != RESERVED_ID_FIELD


def build_included_paths(index_names: Iterable[str]) -> tuple[IncludedPathEntity, ...]:
    """Return the included paths for the given field names.

    Blank names and ``id`` (any case) are skipped. Duplicates are kept.
    """
    paths: List[IncludedPathEntity] = [
        IncludedPathEntity(path=CATCH_ALL_PATH, indexes=_pair("Range"))
    ]
    for name in index_names or []:
        if not _is_indexable(name):
            continue
        paths.append(IncludedPathEntity(path=f"/{name}/?", indexes=_pair("Hash")))
    return tuple(paths)


def build_indexing_policy(
    index_names: Iterable[str],
    excluded_paths: tuple | None = None,
) -> IndexingPolicyEntity:
    return IndexingPolicyEntity(
        indexing_mode="consistent",
        automatic=True,
        included_paths=build_included_paths(index_names),
        excluded_paths=excluded_paths,
    )


def build_partition_key(partition_key_field: str) -> PartitionKeyEntity:
    """Hash partition key over a field, in the MongoDB API path form."""
    return PartitionKeyEntity(
        paths=(f"/'$v'/{partition_key_field}/'$v'",),
        kind="Hash",
        version=1,
    )


def new_collection(
    context: ConnectionContext,
    index_names: Iterable[str],
) -> CollectionEntity:
    """Body for creating the configured collection."""
    return CollectionEntity(
        id=context.collection,
        indexing_policy=build_indexing_policy(index_names),
        partition_key=build_partition_key(context.partition_key),
    )


def rebuild_collection(
    prior: CollectionEntity,
    index_names: Iterable[str],
) -> CollectionEntity:
    """Body for replacing the indexing policy of an existing collection.

    Keeps the id and partition key of ``prior`` and its excluded paths;
    included paths are rebuilt from ``index_names``.
    """
    excluded = prior.indexing_policy.excluded_paths if prior.indexing_policy else None

    partition_key = prior.partition_key
    if partition_key is not None:
        partition_key = replace(partition_key, version=1)

    return CollectionEntity(
        id=prior.id,
        indexing_policy=build_indexing_policy(index_names, excluded_paths=excluded),
        partition_key=partition_key,
    )
