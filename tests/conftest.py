# Cosmos Collection Admin
# File: tests/conftest.py
# Version: v1

"""Shared fixtures: a scripted fake Cosmos DB endpoint built on httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

import httpx
import pytest

from cosmos_collection_admin.config import ConnectionContext
from cosmos_collection_admin.manager import CollectionManager
from cosmos_collection_admin.transport import CosmosHttpTransport

FIXED_DATE = "Sun, 18 Oct 2026 12:00:00 GMT"

# base64("secret-key")
MASTER_KEY = "c2VjcmV0LWtleQ=="


class FakeCosmos:
    """Answers requests from a (method, path) -> response table and records them."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status: int, payload: Any = None) -> None:
        if isinstance(payload, (dict, list)):
            response = httpx.Response(status, json=payload)
        else:
            response = httpx.Response(status, text=payload or "")
        self.routes.setdefault((method, path), []).append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(599, text=f"unexpected {request.method} {request.url.path}")
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def body(self, index: int) -> Any:
        return json.loads(self.requests[index].content.decode("utf-8"))


@pytest.fixture
def context() -> ConnectionContext:
    return ConnectionContext(
        host="shop-account.documents.azure.com",
        database="shop",
        collection="orders",
        partition_key="customerId",
        master_key=MASTER_KEY,
    )


@pytest.fixture
def fake_cosmos() -> FakeCosmos:
    return FakeCosmos()


@pytest.fixture
def manager(context: ConnectionContext, fake_cosmos: FakeCosmos) -> CollectionManager:
    transport = CosmosHttpTransport(
        context=context,
        http_transport=httpx.MockTransport(fake_cosmos.handler),
        clock=lambda: FIXED_DATE,
    )
    return CollectionManager(context=context, transport=transport)
