# Cosmos Collection Admin
# File: __init__.py
# Version: v1

"""Administrative client for Cosmos DB collection lifecycle management."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]


def _resolve_version() -> str:
    """Resolve installed distribution version.

    Falls back to a fixed default when running from a source checkout
    without installed package metadata.
    """
    try:
        return version("cosmos-collection-admin")
    except PackageNotFoundError:
        return "0.1.0"


__version__ = _resolve_version()
