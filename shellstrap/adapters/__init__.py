"""
Adapters — everything that touches an external tool.

    from shellstrap.adapters import build_registry
"""

from __future__ import annotations

from shellstrap.adapters.base import Adapter, ExecutionContext
from shellstrap.adapters.registry import AdapterRegistry


def build_registry(manager: str = "scoop", mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the command adapter and the configured package manager."""
    from shellstrap.adapters.package_managers import PACKAGE_MANAGERS
    from shellstrap.adapters.shell.command import CommandAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(CommandAdapter())
    registry.register(PACKAGE_MANAGERS[manager]())
    return registry


__all__ = ["Adapter", "AdapterRegistry", "ExecutionContext", "build_registry"]
