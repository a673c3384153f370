"""
Config check use case — validate armvm.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from armvm.core.config.loader import (
    ConfigError,
    config_base_dir,
    find_config_file,
    load_config,
    read_config_data,
)
from armvm.core.models.vm import VMConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: VMConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "config": self.config.model_dump() if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the VM configuration and report issues.

    A missing armvm.yml is not an error: the defaults apply.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    result.config_path = config_path

    if config_path is None:
        result.warnings.append("No armvm.yml found; using built-in defaults.")

    try:
        cfg = load_config(config_path, search=False)
        result.config = cfg
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if config_path is not None:
        known = set(VMConfig.model_fields)
        unknown = sorted(set(read_config_data(config_path)) - known)
        if unknown:
            result.warnings.append(f"Unknown keys ignored: {', '.join(unknown)}")

    if cfg.memory < 1024:
        result.warnings.append(f"memory={cfg.memory}MB is below 1GB; Ubuntu may not boot.")

    base_dir = config_base_dir(config_path)
    if (base_dir / cfg.vm_dir / "Vagrantfile").is_file():
        result.warnings.append(
            f"{cfg.vm_dir}/Vagrantfile already exists and will be overwritten by a rebuild."
        )

    result.valid = len(result.errors) == 0
    return result
