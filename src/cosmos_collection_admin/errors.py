# Cosmos Collection Admin
# File: errors.py
# Version: v1

"""Error taxonomy for collection administration calls."""

from __future__ import annotations

from typing import Optional


class CosmosAdminError(Exception):
    """Base error for all collection administration failures.

    Attributes:
        message: Human readable message.
        code: Stable error code (``ConnectFailed``, ``NotFound``, ...).
        correlation_id: Caller-supplied id used to trace the failure.
    """

    code = "Unknown"

    def __init__(
        self,
        message: str,
        correlation_id: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id
        if code:
            self.code = code


class CosmosConnectionError(CosmosAdminError, ConnectionError):
    """The service answered with a non-success status."""

    code = "ConnectFailed"

    def __init__(
        self,
        message: str,
        correlation_id: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: str = "",
    ) -> None:
        super().__init__(message, correlation_id=correlation_id)
        self.status_code = status_code
        self.response_body = response_body


class NotFoundError(CosmosAdminError):
    """A lookup succeeded over HTTP but matched no entity."""

    code = "NotFound"


class InvalidKeyFormatError(CosmosAdminError, ValueError):
    """The master key is not valid base64."""

    code = "InvalidKeyFormat"


class ConfigurationError(CosmosAdminError, ValueError):
    """Connection settings are missing or malformed."""

    code = "InvalidConfiguration"
