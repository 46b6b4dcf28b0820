# Cosmos Collection Admin
# File: auth.py
# Version: v1

"""Master-key request signing for the Cosmos DB REST interface.

The service recomputes the same HMAC on its side, so the canonical text
must match byte for byte:

    verb.lower() \\n resource_type.lower() \\n resource_id \\n date.lower() \\n \\n

``resource_id`` keeps its exact case.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from urllib.parse import quote

from .errors import InvalidKeyFormatError

DEFAULT_KEY_TYPE = "master"
DEFAULT_TOKEN_VERSION = "1.0"


def decode_master_key(master_key: str) -> bytes:
    """Decode a base64 master key, raising InvalidKeyFormatError on bad input."""
    if not master_key or not master_key.strip():
        raise InvalidKeyFormatError("Master key is empty.")

    try:
        return base64.b64decode(master_key, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidKeyFormatError(
            "Master key is not a valid base64 string."
        ) from exc


def build_canonical_payload(
    verb: str,
    resource_type: str,
    resource_id: str,
    date: str,
) -> str:
    return (
        f"{verb.lower()}\n"
        f"{resource_type.lower()}\n"
        f"{resource_id}\n"
        f"{date.lower()}\n"
        "\n"
    )


def generate_master_key_signature(
    verb: str,
    resource_type: str,
    resource_id: str,
    master_key: str,
    date: str,
    key_type: str = DEFAULT_KEY_TYPE,
    token_version: str = DEFAULT_TOKEN_VERSION,
) -> str:
    """Return the value for the ``authorization`` header of one request.

    ``date`` must be the exact string sent as ``x-ms-date``.
    """
    key = decode_master_key(master_key)
    payload = build_canonical_payload(verb, resource_type, resource_id, date)

    digest = hmac.new(key, payload.encode("utf-8"), hashlib.sha256).digest()
    signature = base64.b64encode(digest).decode("ascii")

    return f"type={key_type}&ver={token_version}&sig={quote(signature, safe='')}"
