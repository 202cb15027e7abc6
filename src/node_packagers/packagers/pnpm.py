"""pnpm packager.

Drives the ``pnpm`` command line to list, install and prune production
dependencies, run package scripts, and rebase relative file references in
a relocated lockfile.

Supported packager options (default):
    ignore_scripts (False) - Do not execute scripts during install
    flat_tree (False) - Reserved, not consumed
"""

from __future__ import annotations

__all__ = ["PnpmPackager"]

import json
import logging
import re
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from node_packagers.config import PackagerOptions
from node_packagers.errors import SpawnError
from node_packagers.packagers.registry import register_packager
from node_packagers.process import (
    ProcessOutput,
    resolve_executable_name,
    run_in_series,
    spawn_process,
)
from node_packagers.types import DependencyNode, DependencyQueryResult

logger = logging.getLogger(__name__)

SpawnFn = Callable[..., Awaitable[ProcessOutput]]

# A dependency reference pointing at a relative path, e.g.
# ``otherModule@file:../../otherModule:`` or ``"@scope/pkg@../pkg":``
_FILE_REFERENCE = re.compile(r"[^\"/]@(?:file:)?((?:\./|\.\./).*?)[\":,]", re.MULTILINE)


def _split_name_version(token: str) -> tuple[str, str]:
    """Split ``name@version`` at the last ``@``, keeping scoped names intact."""
    index = token.rfind("@")
    if index <= 0:
        return token, ""
    return token[:index], token[index + 1 :]


def _parse_trees(trees: list[dict[str, Any]]) -> dict[str, DependencyNode]:
    dependencies: dict[str, DependencyNode] = {}
    for tree in trees:
        name, version = _split_name_version(tree["name"])
        if name in dependencies:
            continue
        dependencies[name] = DependencyNode(
            version=version,
            dependencies=_parse_trees(tree.get("children") or []),
        )
    return dependencies


@register_packager
class PnpmPackager:
    """Packager backed by the pnpm command line.

    Usage:
        packager = PnpmPackager()
        result = await packager.get_prod_dependencies("./service")
        await packager.install("./build", {"ignoreScripts": True})
    """

    name = "pnpm"
    command = "pnpm"
    lockfile_name = "shrinkwrap.yaml"
    copy_package_section_names: tuple[str, ...] = ("resolutions",)
    must_copy_modules = False

    # stderr line prefixes that do not make a listing fail
    ignored_list_errors: tuple[str, ...] = ()

    def __init__(self, spawn: SpawnFn | None = None, platform: str | None = None) -> None:
        """Initialize packager.

        Args:
            spawn: Process collaborator, defaults to spawn_process.
            platform: Platform name used to resolve the executable,
                defaults to the running platform.
        """
        self._spawn = spawn or spawn_process
        self.executable = resolve_executable_name(self.command, platform)

    async def get_prod_dependencies(
        self, cwd: str, depth: int | None = None
    ) -> DependencyQueryResult:
        """List installed production dependencies.

        Args:
            cwd: Project directory.
            depth: Tree depth to traverse, defaults to 1.

        Returns:
            DependencyQueryResult with the dependency tree.

        Raises:
            SpawnError: If pnpm fails with errors that are not ignorable.
            json.JSONDecodeError: If pnpm output is not valid JSON.
        """
        args = [
            "list",
            f"--depth={depth or 1}",
            "--parseable",
            "--production",
        ]

        try:
            output = await self._spawn(self.executable, args, cwd=cwd)
            stdout = output.stdout
        except SpawnError as e:
            if self._is_fatal_list_error(e.stderr) or not e.stdout:
                raise
            logger.warning("pnpm list exited with ignorable errors in %s: %s", cwd, e)
            stdout = e.stdout

        return self._parse_list_output(stdout)

    def _is_fatal_list_error(self, stderr: str) -> bool:
        """Return True if any stderr line is not covered by the allow-list."""
        for line in stderr.split("\n"):
            if line and not any(line.startswith(prefix) for prefix in self.ignored_list_errors):
                return True
        return False

    def _parse_list_output(self, stdout: str) -> DependencyQueryResult:
        parsed = json.loads(stdout)
        data = parsed.get("data") or {}
        return DependencyQueryResult(
            problems=[],
            dependencies=_parse_trees(data.get("trees") or []),
        )

    async def install(
        self, cwd: str, options: PackagerOptions | Mapping[str, Any] | None = None
    ) -> None:
        """Install dependencies declared in the manifest.

        Args:
            cwd: Project directory.
            options: Packager options (PackagerOptions or a mapping).
        """
        opts = PackagerOptions.coerce(options)
        args = ["install", "--non-interactive"]

        # Convert supported packager options
        if opts.ignore_scripts:
            args.append("--ignore-scripts")

        await self._spawn(self.executable, args, cwd=cwd)

    async def prune(
        self, cwd: str, options: PackagerOptions | Mapping[str, Any] | None = None
    ) -> None:
        """Remove undeclared packages.

        pnpm install prunes automatically.
        """
        await self.install(cwd, options)

    async def run_scripts(self, cwd: str, script_names: Sequence[str]) -> None:
        """Run package scripts one after another, stopping at the first failure."""

        def run(script_name: str) -> Callable[[], Awaitable[ProcessOutput]]:
            return lambda: self._spawn(self.executable, ["run", script_name], cwd=cwd)

        await run_in_series(run(script_name) for script_name in script_names)

    def rebase_lockfile(self, path_to_package_root: str, lockfile: str) -> str:
        """Rewrite relative file references so they resolve from a new location.

        Every occurrence of each referenced relative path is prefixed with
        ``path_to_package_root``. Everything else is left untouched.
        """
        replacements: dict[str, str] = {}
        for match in _FILE_REFERENCE.finditer(lockfile):
            old_ref = match.group(1)
            if old_ref not in replacements:
                replacements[old_ref] = f"{path_to_package_root}/{old_ref}".replace("\\", "/")

        if not replacements:
            return lockfile

        # Single pass, longest first, so a rewritten path is never rewritten again
        pattern = re.compile(
            "|".join(re.escape(ref) for ref in sorted(replacements, key=len, reverse=True))
        )
        return pattern.sub(lambda m: replacements[m.group(0)], lockfile)
