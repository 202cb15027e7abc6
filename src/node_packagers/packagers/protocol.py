"""Packager protocol.

Defines the interface every package-manager adapter implements.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from node_packagers.config import PackagerOptions
    from node_packagers.types import DependencyQueryResult


@runtime_checkable
class Packager(Protocol):
    """Interface that every packager must satisfy."""

    name: str
    lockfile_name: str
    copy_package_section_names: tuple[str, ...]
    must_copy_modules: bool

    async def get_prod_dependencies(
        self, cwd: str, depth: int | None = None
    ) -> DependencyQueryResult: ...

    async def install(
        self, cwd: str, options: PackagerOptions | Mapping[str, Any] | None = None
    ) -> None: ...

    async def prune(
        self, cwd: str, options: PackagerOptions | Mapping[str, Any] | None = None
    ) -> None: ...

    async def run_scripts(self, cwd: str, script_names: Sequence[str]) -> None: ...

    def rebase_lockfile(self, path_to_package_root: str, lockfile: str) -> str: ...
