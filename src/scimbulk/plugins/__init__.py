"""Plugin subsystem for scim-bulk.

Implementations register by name in a ``PluginRegistry``; installed
packages contribute them through ``importlib.metadata`` entry-points.
"""
from __future__ import annotations

from scimbulk.plugins.registry import (
    PluginAlreadyRegisteredError,
    PluginNotFoundError,
    PluginRegistry,
)

__all__ = ["PluginRegistry", "PluginNotFoundError", "PluginAlreadyRegisteredError"]
