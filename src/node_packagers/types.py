"""Core types for dependency listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class DependencyNode:
    """One resolved package and its transitive production dependencies."""

    version: str
    dependencies: dict[str, DependencyNode] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Render as the nested npm-style mapping."""
        return {
            "version": self.version,
            "dependencies": {
                name: node.to_dict() for name, node in self.dependencies.items()
            },
        }


@dataclass
class DependencyQueryResult:
    """Result of listing production dependencies.

    Attributes:
        problems: Non-fatal warnings reported while listing.
        dependencies: Direct dependencies keyed by package name.
    """

    problems: list[str] = field(default_factory=list)
    dependencies: dict[str, DependencyNode] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "problems": list(self.problems),
            "dependencies": {
                name: node.to_dict() for name, node in self.dependencies.items()
            },
        }
