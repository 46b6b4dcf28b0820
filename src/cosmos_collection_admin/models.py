# Cosmos Collection Admin
# File: models.py
# Version: v2

"""Wire entities exchanged with the Cosmos DB REST interface.

All entities are immutable. ``to_dict`` produces the JSON body the service
expects and ``from_dict`` decodes a response payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class IndexEntity:
    kind: str
    data_type: str
    precision: int = -1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "dataType": self.data_type,
            "precision": self.precision,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexEntity":
        precision = data.get("precision")
        return cls(
            kind=str(data.get("kind", "")),
            data_type=str(data.get("dataType", "")),
            precision=int(precision) if precision is not None else -1,
        )


@dataclass(frozen=True)
class IncludedPathEntity:
    path: str
    indexes: Tuple[IndexEntity, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "indexes": [i.to_dict() for i in self.indexes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IncludedPathEntity":
        raw_indexes = data.get("indexes") or []
        return cls(
            path=str(data.get("path", "")),
            indexes=tuple(
                IndexEntity.from_dict(i) for i in raw_indexes if isinstance(i, dict)
            ),
        )


@dataclass(frozen=True)
class IndexingPolicyEntity:
    """Indexing policy of a collection.

    ``excluded_paths`` is carried as the raw JSON list returned by the
    service. It is never authored locally, only forwarded on updates.
    """

    indexing_mode: str = "consistent"
    automatic: bool = True
    included_paths: Tuple[IncludedPathEntity, ...] = ()
    excluded_paths: Optional[Tuple[Any, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "indexingMode": self.indexing_mode,
            "automatic": self.automatic,
            "includedPaths": [p.to_dict() for p in self.included_paths],
        }
        if self.excluded_paths is not None:
            out["excludedPaths"] = list(self.excluded_paths)
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexingPolicyEntity":
        raw_included = data.get("includedPaths") or []
        raw_excluded = data.get("excludedPaths")
        return cls(
            indexing_mode=str(data.get("indexingMode", "consistent")),
            automatic=bool(data.get("automatic", True)),
            included_paths=tuple(
                IncludedPathEntity.from_dict(p)
                for p in raw_included
                if isinstance(p, dict)
            ),
            excluded_paths=tuple(raw_excluded) if isinstance(raw_excluded, list) else None,
        )


@dataclass(frozen=True)
class PartitionKeyEntity:
    paths: Tuple[str, ...]
    kind: str = "Hash"
    version: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "paths": list(self.paths),
            "kind": self.kind,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PartitionKeyEntity":
        return cls(
            paths=tuple(str(p) for p in data.get("paths") or []),
            kind=str(data.get("kind", "Hash")),
            version=int(data.get("version", 1) or 1),
        )


@dataclass(frozen=True)
class CollectionEntity:
    """Schema-level configuration of a collection.

    ``resource_id`` (``_rid``) is assigned by the service. It is decoded from
    responses but never sent.
    """

    id: str
    indexing_policy: Optional[IndexingPolicyEntity] = None
    partition_key: Optional[PartitionKeyEntity] = None
    resource_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id}
        if self.indexing_policy is not None:
            out["indexingPolicy"] = self.indexing_policy.to_dict()
        if self.partition_key is not None:
            out["partitionKey"] = self.partition_key.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["CollectionEntity"]:
        if not isinstance(data, dict) or not data:
            return None

        policy = data.get("indexingPolicy")
        partition_key = data.get("partitionKey")
        return cls(
            id=str(data.get("id", "")),
            indexing_policy=IndexingPolicyEntity.from_dict(policy)
            if isinstance(policy, dict)
            else None,
            partition_key=PartitionKeyEntity.from_dict(partition_key)
            if isinstance(partition_key, dict)
            else None,
            resource_id=data.get("_rid"),
        )


@dataclass(frozen=True)
class OfferContent:
    offer_throughput: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"offerThroughput": self.offer_throughput}


@dataclass(frozen=True)
class OfferEntity:
    """Provisioned throughput of a collection.

    Fields this client does not model (``_rid``, ``_self``, ``resource``,
    ``offerVersion``, ...) are kept in ``raw`` and written back unchanged.
    """

    id: str
    offer_resource_id: Optional[str] = None
    content: OfferContent = field(default_factory=OfferContent)

    # Raw JSON payload from the API, echoed back on PUT.
    raw: Optional[Dict[str, Any]] = None

    def with_throughput(self, throughput: int) -> "OfferEntity":
        return replace(self, content=replace(self.content, offer_throughput=int(throughput)))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.raw or {})
        content = dict(out.get("content") or {})
        content.update(self.content.to_dict())

        out["id"] = self.id
        if self.offer_resource_id is not None:
            out["offerResourceId"] = self.offer_resource_id
        out["content"] = content
        return out

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["OfferEntity"]:
        if not isinstance(data, dict) or not data:
            return None

        content = data.get("content")
        throughput = content.get("offerThroughput") if isinstance(content, dict) else None
        return cls(
            id=str(data.get("id", "")),
            offer_resource_id=data.get("offerResourceId"),
            content=OfferContent(
                offer_throughput=int(throughput) if throughput is not None else None
            ),
            raw=data,
        )


@dataclass(frozen=True)
class SearchOffersEntity:
    """Result envelope of an offers query (``{"Offers": [...]}``)."""

    offers: Tuple[OfferEntity, ...] = ()

    def first(self) -> Optional[OfferEntity]:
        return self.offers[0] if self.offers else None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["SearchOffersEntity"]:
        if not isinstance(data, dict):
            return None

        raw_offers: List[Any] = data.get("Offers") or []
        offers = []
        for item in raw_offers:
            offer = OfferEntity.from_dict(item)
            if offer is not None:
                offers.append(offer)
        return cls(offers=tuple(offers))
