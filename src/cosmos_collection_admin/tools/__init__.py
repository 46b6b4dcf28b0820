# Cosmos Collection Admin
# File: tools/__init__.py
# Version: v1

"""MCP tools exposing collection administration."""

from __future__ import annotations

from .tasks import register_tools

__all__ = ["register_tools"]
