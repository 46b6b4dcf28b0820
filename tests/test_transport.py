# Cosmos Collection Admin
# File: tests/test_transport.py
# Version: v1

"""Tests for request construction in CosmosHttpTransport."""

from __future__ import annotations

import re

import httpx
import pytest

from cosmos_collection_admin.auth import generate_master_key_signature
from cosmos_collection_admin.transport import (
    QUERY_CONTENT_TYPE,
    CosmosHttpTransport,
    HttpResult,
    utc_http_date,
)

from conftest import FIXED_DATE, MASTER_KEY


def _transport(context, fake_cosmos) -> CosmosHttpTransport:
    return CosmosHttpTransport(
        context=context,
        http_transport=httpx.MockTransport(fake_cosmos.handler),
        clock=lambda: FIXED_DATE,
    )


def test_utc_http_date_is_rfc1123() -> None:
    assert re.fullmatch(
        r"[A-Z][a-z]{2}, \d{2} [A-Z][a-z]{2} \d{4} \d{2}:\d{2}:\d{2} GMT",
        utc_http_date(),
    )


@pytest.mark.asyncio
async def test_mandatory_headers_are_set(context, fake_cosmos) -> None:
    fake_cosmos.add("GET", "/dbs/shop/colls/orders", 200, {"id": "orders"})

    result = await _transport(context, fake_cosmos).execute(
        "GET", "colls", "dbs/shop/colls/orders", "dbs/shop/colls/orders"
    )

    assert result.is_success
    assert result.json() == {"id": "orders"}
    request = fake_cosmos.requests[0]
    assert str(request.url) == "https://shop-account.documents.azure.com/dbs/shop/colls/orders"
    assert request.headers["x-ms-date"] == FIXED_DATE
    assert request.headers["x-ms-version"] == "2015-12-16"
    assert request.headers["authorization"] == generate_master_key_signature(
        "GET", "colls", "dbs/shop/colls/orders", MASTER_KEY, date=FIXED_DATE
    )
    assert request.content == b""


@pytest.mark.asyncio
async def test_query_body_has_content_type_without_charset(context, fake_cosmos) -> None:
    fake_cosmos.add("POST", "/offers", 200, {"Offers": []})

    await _transport(context, fake_cosmos).execute(
        "POST",
        "offers",
        "",
        "offers",
        extra_headers={"x-ms-documentdb-isquery": "True"},
        body={"query": "SELECT * FROM root"},
        content_type=QUERY_CONTENT_TYPE,
    )

    request = fake_cosmos.requests[0]
    assert request.headers["content-type"] == "application/query+json"
    assert "charset" not in request.headers["content-type"]
    assert request.headers["x-ms-documentdb-isquery"] == "True"
    assert fake_cosmos.body(0) == {"query": "SELECT * FROM root"}


@pytest.mark.asyncio
async def test_transport_errors_propagate(context) -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = CosmosHttpTransport(
        context=context,
        http_transport=httpx.MockTransport(boom),
        clock=lambda: FIXED_DATE,
    )

    with pytest.raises(httpx.ConnectError):
        await transport.execute("GET", "colls", "x", "x")


def test_http_result_helpers() -> None:
    assert HttpResult(204, "").is_success
    assert HttpResult(204, "").json() is None
    assert HttpResult(404, "{}").is_not_found
    assert not HttpResult(500, "oops").is_success
