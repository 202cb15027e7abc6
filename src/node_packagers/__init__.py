"""node-packagers: adapters over Node.js package manager command lines."""

from node_packagers.config import PackagerOptions, load_packager_options

# All errors (foundational)
from node_packagers.errors import (
    ConfigurationError,
    PackagerError,
    PackagerNotFoundError,
    SpawnError,
    SpawnTimeoutError,
)

# Packagers
from node_packagers.packagers import (
    Packager,
    PnpmPackager,
    get_packager,
    list_packagers,
    register_packager,
)
from node_packagers.process import (
    ProcessOutput,
    resolve_executable_name,
    run_in_series,
    spawn_process,
)

# Core types
from node_packagers.types import DependencyNode, DependencyQueryResult

__version__ = "0.1.0"

__all__ = [
    # Packagers
    "Packager",
    "PnpmPackager",
    "get_packager",
    "list_packagers",
    "register_packager",
    # Types
    "DependencyNode",
    "DependencyQueryResult",
    "PackagerOptions",
    "ProcessOutput",
    # Config
    "load_packager_options",
    # Process
    "resolve_executable_name",
    "run_in_series",
    "spawn_process",
    # Errors
    "PackagerError",
    "SpawnError",
    "SpawnTimeoutError",
    "PackagerNotFoundError",
    "ConfigurationError",
]
