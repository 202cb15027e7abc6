"""Package-manager adapters.

Importing this package registers the built-in packagers.
"""

from node_packagers.packagers.pnpm import PnpmPackager
from node_packagers.packagers.protocol import Packager
from node_packagers.packagers.registry import get_packager, list_packagers, register_packager

__all__ = [
    "Packager",
    "PnpmPackager",
    "get_packager",
    "list_packagers",
    "register_packager",
]
