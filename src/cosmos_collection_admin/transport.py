# Cosmos Collection Admin
# File: transport.py
# Version: v1

"""Signed HTTP requests against the Cosmos DB REST interface."""

from __future__ import annotations

import json
from dataclasses import dataclass
from email.utils import formatdate
from typing import Any, Callable, Dict, Optional

import httpx

from .auth import generate_master_key_signature
from .config import DEFAULT_API_VERSION, ConnectionContext

JSON_CONTENT_TYPE = "application/json"

# Offer queries are rejected when the content type carries a charset.
QUERY_CONTENT_TYPE = "application/query+json"


def utc_http_date() -> str:
    """Current time in RFC-1123 form, e.g. ``Sun, 18 Oct 2026 12:00:00 GMT``."""
    return formatdate(usegmt=True)


@dataclass(frozen=True)
class HttpResult:
    status_code: int
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def json(self) -> Any:
        """Decode the body, returning None for an empty one."""
        if not self.text or not self.text.strip():
            return None
        return json.loads(self.text)


@dataclass
class CosmosHttpTransport:
    """Builds and sends one signed request per call.

    Every call opens its own ``httpx.AsyncClient`` and closes it when the
    call returns, whether it succeeded or not.
    """

    context: ConnectionContext
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 30.0
    verify_tls: bool = True

    # Injected in tests (e.g. httpx.MockTransport).
    http_transport: Optional[httpx.AsyncBaseTransport] = None
    clock: Callable[[], str] = utc_http_date

    def build_headers(
        self,
        verb: str,
        resource_type: str,
        resource_id: str,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, str]:
        date = self.clock()
        headers = {
            "x-ms-date": date,
            "x-ms-version": self.api_version,
            "authorization": generate_master_key_signature(
                verb,
                resource_type,
                resource_id,
                self.context.master_key,
                date=date,
            ),
            "Accept": JSON_CONTENT_TYPE,
        }
        if extra_headers:
            headers.update(extra_headers)
        return headers

    async def execute(
        self,
        verb: str,
        resource_type: str,
        resource_id: str,
        path: str,
        extra_headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> HttpResult:
        """Send one request and return its status and raw body.

        ``resource_id`` is what gets signed; ``path`` is where the request
        goes, relative to the account base URI. Transport failures
        (``httpx.RequestError``) propagate unchanged.
        """
        headers = self.build_headers(verb, resource_type, resource_id, extra_headers)

        content: Optional[bytes] = None
        if body is not None:
            content = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = content_type

        url = f"{self.context.base_uri}/{path.lstrip('/')}"

        async with httpx.AsyncClient(
            timeout=self.timeout,
            verify=self.verify_tls,
            transport=self.http_transport,
        ) as http_client:
            response = await http_client.request(
                verb.upper(),
                url,
                headers=headers,
                content=content,
            )

        return HttpResult(status_code=response.status_code, text=response.text)
