"""
Configuration loader — reads armvm.yml into a ``VMConfig``.

The file is optional: without one, every value falls back to the
stock Ubuntu 22.04 ARM64 defaults. CLI flags override file values.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from armvm.core.models.vm import VMConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "armvm.yml"


class ConfigError(Exception):
    """Raised when the VM configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for armvm.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to armvm.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_config_data(path: Path) -> dict[str, Any]:
    """Read the raw mapping from *path*.

    The values may sit at the top level or under a ``vm:`` key.
    An empty file is an empty mapping.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading VM config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    if "vm" in data:
        vm_data = data["vm"] or {}
        if not isinstance(vm_data, dict):
            raise ConfigError(f"Expected 'vm' to be a mapping in {path}")
        return dict(vm_data)
    return data


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    search: bool = True,
) -> VMConfig:
    """Load and validate the VM configuration.

    Args:
        path: Explicit path to armvm.yml. If None and *search* is set,
            searches upward from the cwd.
        overrides: Values that win over the file (None values ignored).
        search: Whether to look for a config file when *path* is None.

    Returns:
        Validated VMConfig.

    Raises:
        ConfigError: If the file or the merged values are invalid.
    """
    if path is None and search:
        path = find_config_file()

    data: dict[str, Any] = read_config_data(path) if path is not None else {}
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        cfg = VMConfig.model_validate(data)
    except ValidationError as e:
        source = str(path) if path else "command line"
        raise ConfigError(f"Invalid VM configuration ({source}): {e}") from e

    logger.info(
        "Config: %s → %s (box %s@%s)",
        cfg.name, cfg.project_dir, cfg.box, cfg.box_version,
    )
    return cfg


def config_base_dir(config_path: Path | None) -> Path:
    """Directory the project is scaffolded in: the config's dir, or cwd."""
    return config_path.parent.resolve() if config_path else Path.cwd()
