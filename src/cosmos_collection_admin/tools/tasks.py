# Cosmos Collection Admin
# File: tools/tasks.py
# Version: v2
#
# NOTE: This module is the single place where collection administration is
# exposed as MCP tools. The stdio transport calls `register_tools(server)`
# to wire these up.

from __future__ import annotations

import time
import uuid
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..auth import decode_master_key
from ..config import AdminConfig, ConnectionContext
from ..errors import CosmosConnectionError, NotFoundError
from ..indexing import new_collection, rebuild_collection
from ..manager import CollectionManager, run_operation
from ..models import CollectionEntity, OfferContent, OfferEntity


# ---------------------------------------------------------------------------
# Internal helpers (errors, mock manager)
# ---------------------------------------------------------------------------


def _make_error(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Small, LLM-friendly error shape used by diagnostics."""
    err: Dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return err


def _new_correlation_id() -> str:
    return uuid.uuid4().hex


class MockCollectionManager:
    """Small in-memory stand-in for CollectionManager.

    Activated when COSMOS_MOCK_MODE is truthy. Mirrors the public methods
    used by the tasks below so tools work without a Cosmos DB account.
    """

    def __init__(self, context: Optional[ConnectionContext] = None) -> None:
        self.context = context or ConnectionContext(
            host="mock-account.documents.azure.com",
            database="mock-db",
            collection="mock-collection",
            partition_key="tenantId",
            master_key="",
        )
        self._collection: Optional[CollectionEntity] = None
        self._offer: Optional[OfferEntity] = None

    async def collection_exists(self, correlation_id: str) -> bool:  # noqa: ARG002
        return self._collection is not None

    async def create_collection(
        self,
        correlation_id: str,
        throughput: int,
        index_names: List[str],
    ) -> None:
        if self._collection is not None:
            raise CosmosConnectionError(
                f"Collection '{self.context.collection}' already exists.",
                correlation_id=correlation_id,
                status_code=409,
            )
        self._collection = replace(
            new_collection(self.context, index_names), resource_id="mockRid=="
        )
        self._offer = OfferEntity(
            id="MOCK",
            offer_resource_id="mockRid==",
            content=OfferContent(offer_throughput=int(throughput)),
        )

    async def set_throughput(self, correlation_id: str, throughput: int) -> OfferEntity:
        if self._offer is None:
            raise NotFoundError(
                f"Unable to find offer of collection '{self.context.collection}'.",
                correlation_id=correlation_id,
            )
        self._offer = self._offer.with_throughput(throughput)
        return self._offer

    async def update_indexes(self, correlation_id: str, index_names: List[str]) -> None:
        if self._collection is None:
            raise NotFoundError(
                f"Unable to find collection '{self.context.collection}'.",
                correlation_id=correlation_id,
            )
        self._collection = replace(
            rebuild_collection(self._collection, index_names),
            resource_id=self._collection.resource_id,
        )


_MOCK_MANAGER: MockCollectionManager | None = None


def _get_mock_manager() -> MockCollectionManager:
    """Process-wide mock so state survives between tool calls."""
    global _MOCK_MANAGER
    if _MOCK_MANAGER is None:
        _MOCK_MANAGER = MockCollectionManager()
    return _MOCK_MANAGER


def _make_manager(cfg: Optional[AdminConfig] = None) -> CollectionManager:
    """Create a CollectionManager from environment variables.

    If COSMOS_MOCK_MODE is truthy, the in-process mock manager is returned
    instead of a real HTTP-backed one.

    Note: Callers should prefer invoking this with *no arguments* so tests
    can replace _make_manager with a no-arg lambda.
    """
    cfg = cfg or AdminConfig.from_env()

    if cfg.mock_mode:
        return _get_mock_manager()  # type: ignore[return-value]

    return CollectionManager.from_config(cfg)


async def _run(
    operation: str,
    correlation_id: Optional[str],
    call: Callable[[Any, str], Awaitable[Any]],
) -> Dict[str, Any]:
    """Run one manager call and return the normalized result dict."""
    cid = correlation_id or _new_correlation_id()

    async def _invoke() -> Any:
        manager = _make_manager()
        return await call(manager, cid)

    result = await run_operation(_invoke)
    out = result.to_dict()
    out["operation"] = operation
    out["correlation_id"] = cid
    return out


# ---------------------------------------------------------------------------
# Core async tasks (library-style)
# ---------------------------------------------------------------------------


async def collection_exists(correlation_id: Optional[str] = None) -> Dict[str, Any]:
    return await _run(
        "collection_exists",
        correlation_id,
        lambda m, cid: m.collection_exists(cid),
    )


async def create_collection(
    throughput: int,
    index_names: Optional[List[str]] = None,
    correlation_id: Optional[str] = None,
) -> Dict[str, Any]:
    names = list(index_names or [])
    return await _run(
        "create_collection",
        correlation_id,
        lambda m, cid: m.create_collection(cid, int(throughput), names),
    )


async def update_throughput(
    throughput: int,
    correlation_id: Optional[str] = None,
) -> Dict[str, Any]:
    async def call(manager: Any, cid: str) -> Dict[str, Any]:
        offer = await manager.set_throughput(cid, int(throughput))
        return {"offer_id": offer.id, "offer_throughput": offer.content.offer_throughput}

    return await _run("update_throughput", correlation_id, call)


async def update_indexes(
    index_names: Optional[List[str]] = None,
    correlation_id: Optional[str] = None,
) -> Dict[str, Any]:
    names = list(index_names or [])
    return await _run(
        "update_indexes",
        correlation_id,
        lambda m, cid: m.update_indexes(cid, names),
    )


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def _collect_connection_info() -> Dict[str, Any]:
    """Redacted snapshot of connection configuration from env."""
    cfg = AdminConfig.from_env()

    context_info: Dict[str, Any]
    try:
        context_info = cfg.to_context().redacted()
    except Exception as exc:  # noqa: BLE001
        context_info = {"error": _make_error("CONFIG_ERROR", str(exc))}

    return {
        "connection": context_info,
        "connection_uri_configured": bool(cfg.connection_uri),
        "mock_mode": bool(cfg.mock_mode),
        "verify_tls": bool(cfg.verify_tls),
        "api_version": cfg.api_version,
        "http_timeout_seconds": cfg.http_timeout_seconds,
    }


async def get_connection_info() -> Dict[str, Any]:
    return _collect_connection_info()


async def diagnostics() -> Dict[str, Any]:
    started = time.time()
    cfg = AdminConfig.from_env()
    config_info = _collect_connection_info()
    correlation_id = _new_correlation_id()

    checks: List[Dict[str, Any]] = []
    overall_ok = True

    # Configuration & key
    t0 = time.time()
    try:
        if not cfg.mock_mode:
            context = cfg.to_context()
            context.validate()
            decode_master_key(context.master_key)
        checks.append(
            {"name": "config", "ok": True, "error": None, "elapsed_ms": int((time.time() - t0) * 1000)}
        )
    except Exception as exc:  # noqa: BLE001
        overall_ok = False
        checks.append(
            {
                "name": "config",
                "ok": False,
                "error": _make_error(getattr(exc, "code", "CONFIG_ERROR"), str(exc)),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )

    # Existence probe
    t0 = time.time()
    try:
        manager = _make_manager()
        exists = await manager.collection_exists(correlation_id)
        checks.append(
            {
                "name": "collection_exists",
                "ok": True,
                "exists": bool(exists),
                "error": None,
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
    except Exception as exc:  # noqa: BLE001
        overall_ok = False
        checks.append(
            {
                "name": "collection_exists",
                "ok": False,
                "error": _make_error(getattr(exc, "code", "BACKEND_ERROR"), str(exc)),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )

    return {
        "ok": overall_ok,
        "mock_mode": config_info["mock_mode"],
        "config": config_info,
        "checks": checks,
        "meta": {
            "correlation_id": correlation_id,
            "elapsed_ms": int((time.time() - started) * 1000),
        },
    }


# ---------------------------------------------------------------------------
# MCP tool registration
# ---------------------------------------------------------------------------


def register_tools(server: Any) -> None:
    """Register MCP tools on an MCP Server-like instance."""
    if server is None or not hasattr(server, "tool"):
        raise ValueError(
            "register_tools(server) expects an MCP Server-like object that exposes a .tool() decorator."
        )

    @server.tool(
        name="cosmos_collection_exists",
        description="Check whether the configured Cosmos DB collection exists.",
    )
    async def mcp_collection_exists(correlation_id: Optional[str] = None) -> Dict[str, Any]:
        return await collection_exists(correlation_id=correlation_id)

    @server.tool(
        name="cosmos_create_collection",
        description="Create the configured partitioned collection with a throughput and hash-indexed fields.",
    )
    async def mcp_create_collection(
        throughput: int,
        index_names: Optional[List[str]] = None,
        correlation_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await create_collection(
            throughput=throughput,
            index_names=index_names,
            correlation_id=correlation_id,
        )

    @server.tool(
        name="cosmos_update_throughput",
        description="Change the provisioned throughput (request units) of the configured collection.",
    )
    async def mcp_update_throughput(
        throughput: int,
        correlation_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await update_throughput(throughput=throughput, correlation_id=correlation_id)

    @server.tool(
        name="cosmos_update_indexes",
        description="Replace the hash-indexed fields of the configured collection, keeping excluded paths.",
    )
    async def mcp_update_indexes(
        index_names: Optional[List[str]] = None,
        correlation_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await update_indexes(index_names=index_names, correlation_id=correlation_id)

    @server.tool(
        name="cosmos_get_connection_info",
        description="Return the redacted connection configuration of this server.",
    )
    async def mcp_get_connection_info() -> Dict[str, Any]:
        return await get_connection_info()

    @server.tool(
        name="cosmos_diagnostics",
        description="Check configuration and probe the configured collection.",
    )
    async def mcp_diagnostics() -> Dict[str, Any]:
        return await diagnostics()
