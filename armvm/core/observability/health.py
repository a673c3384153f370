"""
Health checker — which external tools this machine has.

Scaffolding needs ``packer``; booting the VM needs ``vagrant`` and
Parallels Desktop (``prlctl``). Used by the CLI ``doctor`` command.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """An external tool and how to ask it for its version."""

    name: str
    binary: str
    version_args: tuple[str, ...]
    purpose: str
    required: bool = False      # missing → unhealthy instead of degraded


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec("packer", "packer", ("version",), "renders the VM project", required=True),
    ToolSpec("vagrant", "vagrant", ("--version",), "boots and manages the VM"),
    ToolSpec("parallels", "prlctl", ("--version",), "Parallels Desktop hypervisor"),
)


@dataclass
class ComponentHealth:
    """Health of a single component."""

    name: str
    status: str = "unknown"  # healthy, degraded, unhealthy, unknown
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class SystemHealth:
    """Aggregate health of the toolchain."""

    status: str = "healthy"
    timestamp: str = ""
    components: list[ComponentHealth] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now(UTC).isoformat()

    def add(self, component: ComponentHealth) -> None:
        self.components.append(component)
        self._recalculate()

    def _recalculate(self) -> None:
        statuses = [c.status for c in self.components]
        if any(s == "unhealthy" for s in statuses):
            self.status = "unhealthy"
        elif any(s == "degraded" for s in statuses):
            self.status = "degraded"
        elif all(s == "healthy" for s in statuses):
            self.status = "healthy"
        else:
            self.status = "unknown"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "timestamp": self.timestamp,
            "components": [c.to_dict() for c in self.components],
        }


def _tool_version(path: str, args: tuple[str, ...]) -> str:
    try:
        result = subprocess.run(
            [path, *args],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Version probe %s failed: %s", path, e)
        return ""
    lines = (result.stdout or result.stderr).strip().splitlines()
    return lines[0].strip() if lines else ""


def check_tool(spec: ToolSpec) -> ComponentHealth:
    """Check that *spec*'s binary is on PATH and report its version."""
    path = shutil.which(spec.binary)
    if path is None:
        return ComponentHealth(
            name=spec.name,
            status="unhealthy" if spec.required else "degraded",
            message=f"{spec.binary} not found on PATH ({spec.purpose})",
            details={"binary": spec.binary, "required": spec.required},
        )

    version = _tool_version(path, spec.version_args)
    return ComponentHealth(
        name=spec.name,
        status="healthy",
        message=version or f"{spec.binary} found",
        details={"binary": spec.binary, "path": path, "version": version},
    )


def check_system_health(tools: tuple[ToolSpec, ...] = TOOLS) -> SystemHealth:
    """Check every tool in *tools*."""
    health = SystemHealth()
    for spec in tools:
        health.add(check_tool(spec))
    logger.info("Toolchain health: %s", health.status)
    return health
