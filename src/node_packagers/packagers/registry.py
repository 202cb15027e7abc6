"""Packager registry.

Provides functions to register, retrieve, and list available packagers
at runtime.
"""

from __future__ import annotations

from typing import Any

from node_packagers.errors import PackagerNotFoundError

# Packager registry
_packagers: dict[str, type] = {}


def register_packager(packager_class: type) -> type:
    """Register a packager class under its ``name`` attribute.

    Returns the class so this can be used as a decorator.
    """
    _packagers[packager_class.name] = packager_class
    return packager_class


def get_packager(name: str, **kwargs: Any) -> Any:
    """Instantiate a registered packager by name.

    Args:
        name: Packager name (e.g., "pnpm").
        **kwargs: Passed to the packager constructor.

    Raises:
        PackagerNotFoundError: If no packager is registered under ``name``.
    """
    packager_class = _packagers.get(name)
    if packager_class is None:
        raise PackagerNotFoundError(name, list_packagers())
    return packager_class(**kwargs)


def list_packagers() -> list[str]:
    """List all registered packager names."""
    return list(_packagers.keys())
