"""Configuration for packagers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from node_packagers.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Accepted spellings for each option field
_OPTION_KEYS: dict[str, str] = {
    "ignoreScripts": "ignore_scripts",
    "ignore_scripts": "ignore_scripts",
    "flatTree": "flat_tree",
    "flat_tree": "flat_tree",
}

_SECTION_KEYS = ("packagerOptions", "packager_options")


@dataclass(frozen=True)
class PackagerOptions:
    """Options controlling packager behavior.

    Attributes:
        ignore_scripts: Do not execute lifecycle scripts during install.
        flat_tree: Reserved. Accepted for configuration compatibility but
            not consumed by any packager.
    """

    ignore_scripts: bool = False
    flat_tree: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for name in ("ignore_scripts", "flat_tree"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(f"{name} must be a boolean, got: {value!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PackagerOptions:
        """Build options from a mapping, ignoring unrecognized keys.

        Both camelCase (``ignoreScripts``) and snake_case (``ignore_scripts``)
        keys are recognized.
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            field_name = _OPTION_KEYS.get(key)
            if field_name is None:
                logger.debug("Ignoring unknown packager option: %s", key)
                continue
            kwargs[field_name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: PackagerOptions | Mapping[str, Any] | None) -> PackagerOptions:
        """Normalize None, a mapping, or an options instance to PackagerOptions."""
        if options is None:
            return cls()
        if isinstance(options, PackagerOptions):
            return options
        return cls.from_mapping(options)


def load_packager_options(path: Path | str) -> PackagerOptions:
    """Load packager options from a YAML file.

    Options are read from a top-level ``packagerOptions`` (or
    ``packager_options``) section when present, otherwise from the document
    itself. An empty document yields the defaults.

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return PackagerOptions()
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    for section in _SECTION_KEYS:
        if section in data:
            data = data[section] or {}
            if not isinstance(data, dict):
                raise ConfigurationError(f"'{section}' in {path} must be a mapping")
            break

    return PackagerOptions.from_mapping(data)
