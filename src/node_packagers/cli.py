"""CLI for running packager operations against a project directory.

Commands:
    deps - List installed production dependencies
    install - Install dependencies
    prune - Remove undeclared dependencies
    run - Run package scripts in order
    rebase-lockfile - Rewrite relative file references in a copied lockfile

Usage:
    node-packagers deps --cwd ./service --depth 2 --json
    node-packagers install --cwd ./build --ignore-scripts
    node-packagers run --cwd ./build build test
    node-packagers rebase-lockfile --root ../../service ./build/shrinkwrap.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path

from node_packagers.config import PackagerOptions, load_packager_options
from node_packagers.errors import PackagerError
from node_packagers.packagers import get_packager, list_packagers
from node_packagers.types import DependencyNode

logger = logging.getLogger(__name__)


def _print_tree(dependencies: dict[str, DependencyNode], indent: int = 0) -> None:
    for name, node in dependencies.items():
        print(f"{'  ' * indent}{name}@{node.version}")
        _print_tree(node.dependencies, indent + 1)


def _load_options(args: argparse.Namespace) -> PackagerOptions:
    """Merge options from --config with command-line flags."""
    options = load_packager_options(args.config) if args.config else PackagerOptions()
    if args.ignore_scripts:
        options = dataclasses.replace(options, ignore_scripts=True)
    return options


async def list_deps(packager_name: str, cwd: str, depth: int | None, as_json: bool) -> int:
    """Print the production dependency tree of a project.

    Returns:
        Number of direct dependencies.
    """
    packager = get_packager(packager_name)
    result = await packager.get_prod_dependencies(cwd, depth)

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    elif not result.dependencies:
        print("No production dependencies found.")
    else:
        _print_tree(result.dependencies)

    return len(result.dependencies)


async def install(packager_name: str, cwd: str, options: PackagerOptions, prune: bool) -> None:
    packager = get_packager(packager_name)
    if prune:
        await packager.prune(cwd, options)
        print(f"Pruned dependencies in {cwd}")
    else:
        await packager.install(cwd, options)
        print(f"Installed dependencies in {cwd}")


async def run_scripts(packager_name: str, cwd: str, scripts: list[str]) -> None:
    packager = get_packager(packager_name)
    await packager.run_scripts(cwd, scripts)
    for script in scripts:
        print(f"  Ran: {script}")


def rebase_lockfile(packager_name: str, root: str, lockfile: Path, output: Path | None) -> None:
    """Rebase a lockfile and write it to ``output`` or stdout."""
    packager = get_packager(packager_name)
    rebased = packager.rebase_lockfile(root, lockfile.read_text())
    if output is None:
        sys.stdout.write(rebased)
    else:
        output.write_text(rebased)
        print(f"Rebased {lockfile} -> {output}")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="node-packagers",
        description="Run Node.js package manager operations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show production dependencies two levels deep
  node-packagers deps --cwd ./service --depth 2

  # Install without lifecycle scripts
  node-packagers install --cwd ./build --ignore-scripts

  # Rebase a copied lockfile onto the original project
  node-packagers rebase-lockfile --root ../../service \\
    ./build/shrinkwrap.yaml --output ./build/shrinkwrap.yaml
""",
    )
    parser.add_argument(
        "--packager",
        choices=list_packagers(),
        default="pnpm",
        help="Package manager to use (default: pnpm)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # deps
    deps = subparsers.add_parser("deps", help="List production dependencies")
    deps.add_argument("--cwd", default=".", help="Project directory (default: .)")
    deps.add_argument("--depth", type=int, help="Tree depth to list (default: 1)")
    deps.add_argument("--json", action="store_true", help="Output as JSON")

    # install / prune
    for name, help_text in (
        ("install", "Install dependencies"),
        ("prune", "Remove undeclared dependencies"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--cwd", default=".", help="Project directory (default: .)")
        sub.add_argument(
            "--ignore-scripts",
            action="store_true",
            help="Do not run lifecycle scripts during install",
        )
        sub.add_argument(
            "--config",
            type=Path,
            help="YAML file with packager options",
        )

    # run
    run = subparsers.add_parser("run", help="Run package scripts in order")
    run.add_argument("--cwd", default=".", help="Project directory (default: .)")
    run.add_argument("scripts", nargs="+", help="Script names")

    # rebase-lockfile
    rebase = subparsers.add_parser(
        "rebase-lockfile",
        help="Rewrite relative file references in a copied lockfile",
    )
    rebase.add_argument(
        "--root",
        required=True,
        help="Path from the lockfile's new location to the original project",
    )
    rebase.add_argument("lockfile", type=Path, help="Lockfile to rebase")
    rebase.add_argument("--output", type=Path, help="Write here instead of stdout")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    level = "DEBUG" if args.verbose else os.environ.get("NODE_PACKAGERS_LOG_LEVEL", "WARNING")
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "deps":
            asyncio.run(list_deps(args.packager, args.cwd, args.depth, args.json))
        elif args.command in ("install", "prune"):
            options = _load_options(args)
            asyncio.run(install(args.packager, args.cwd, options, args.command == "prune"))
        elif args.command == "run":
            asyncio.run(run_scripts(args.packager, args.cwd, args.scripts))
        elif args.command == "rebase-lockfile":
            rebase_lockfile(args.packager, args.root, args.lockfile, args.output)
    except (PackagerError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        stderr = getattr(e, "stderr", "")
        if stderr:
            print(stderr, file=sys.stderr, end="" if stderr.endswith("\n") else "\n")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
