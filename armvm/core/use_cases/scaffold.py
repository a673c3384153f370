"""
Scaffold use cases — config in, executed plan out.

Each entry point loads the configuration, plans its steps, runs them
through the adapter registry, and returns a result object the CLI can
print or dump as JSON. Configuration problems come back as
``result.error``; step failures come back in ``result.report``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from armvm.adapters.registry import AdapterRegistry
from armvm.core.config.loader import (
    ConfigError,
    config_base_dir,
    find_config_file,
    load_config,
)
from armvm.core.engine.executor import (
    ExecutionPlan,
    ExecutionReport,
    StepCallback,
    execute_plan,
)
from armvm.core.models.vm import VMConfig
from armvm.core.services.scaffold_ops import plan_generate, plan_scaffold

logger = logging.getLogger(__name__)

VM_OPERATIONS = ("up", "halt", "destroy", "status")


@dataclass
class ScaffoldResult:
    """Result of a scaffold, generate or vm operation."""

    report: ExecutionReport | None = None
    plan: ExecutionPlan | None = None
    config: VMConfig | None = None
    config_path: Path | None = None
    base_dir: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None and self.report.all_ok

    @property
    def exit_code(self) -> int:
        if self.error:
            return 1
        return self.report.exit_code if self.report else 0

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.error:
            result["error"] = self.error
            return result

        result["config_path"] = str(self.config_path) if self.config_path else None
        result["base_dir"] = str(self.base_dir)
        if self.config:
            result["project_dir"] = self.config.project_dir
            result["template"] = self.config.template_file
        if self.plan:
            result["steps"] = [a.name for a in self.plan.actions]
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def build_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry with every real adapter.

    In mock mode packer and vagrant are simulated but filesystem
    writes still happen, so the generated files can be inspected.
    """
    from armvm.adapters.shell.command import ShellCommandAdapter
    from armvm.adapters.shell.filesystem import FilesystemAdapter
    from armvm.adapters.tools.packer import PackerAdapter
    from armvm.adapters.tools.vagrant import VagrantAdapter

    registry = AdapterRegistry(mock_mode=mock_mode, live={"filesystem"})
    registry.register(FilesystemAdapter())
    registry.register(ShellCommandAdapter())
    registry.register(PackerAdapter())
    registry.register(VagrantAdapter())
    return registry


def _load(
    result: ScaffoldResult,
    config_path: Path | None,
    overrides: dict[str, Any] | None,
) -> VMConfig | None:
    try:
        if config_path is None:
            config_path = find_config_file()
        cfg = load_config(config_path, overrides=overrides, search=False)
    except ConfigError as e:
        result.error = str(e)
        return None

    result.config = cfg
    result.config_path = config_path
    result.base_dir = config_base_dir(config_path)
    return cfg


def _execute(
    result: ScaffoldResult,
    plan: ExecutionPlan,
    registry: AdapterRegistry,
    dry_run: bool,
    on_step: StepCallback | None,
) -> ScaffoldResult:
    result.plan = plan
    result.report = execute_plan(
        plan=plan,
        registry=registry,
        base_dir=str(result.base_dir),
        dry_run=dry_run,
        on_step=on_step,
    )
    logger.info(
        "%s finished: %s (%d/%d steps ok)",
        plan.operation, result.report.status, result.report.succeeded, result.report.total,
    )
    return result


def run_scaffold(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    build: bool = True,
    dry_run: bool = False,
    mock_mode: bool = False,
    stream: bool = True,
    registry: AdapterRegistry | None = None,
    on_step: StepCallback | None = None,
) -> ScaffoldResult:
    """Create the project dir, write the Packer template, run packer.

    Args:
        config_path: Optional explicit path to armvm.yml.
        overrides: Config values that win over the file.
        build: Run ``packer init`` and ``packer build`` after writing.
        dry_run: Validate every step but execute none.
        mock_mode: Simulate packer; still write files.
        stream: Pass packer output through to the terminal.
        registry: Optional pre-configured adapter registry.
        on_step: Called before each step runs.
    """
    result = ScaffoldResult()
    cfg = _load(result, config_path, overrides)
    if cfg is None:
        return result

    plan = plan_scaffold(cfg, build=build, stream=stream)
    return _execute(result, plan, registry or build_registry(mock_mode), dry_run, on_step)


def run_generate(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    dry_run: bool = False,
    registry: AdapterRegistry | None = None,
    on_step: StepCallback | None = None,
) -> ScaffoldResult:
    """Write the Vagrantfile, setup.sh and README.md without packer."""
    result = ScaffoldResult()
    cfg = _load(result, config_path, overrides)
    if cfg is None:
        return result

    plan = plan_generate(cfg)
    return _execute(result, plan, registry or build_registry(), dry_run, on_step)


def run_vm(
    operation: str,
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    stream: bool = True,
    registry: AdapterRegistry | None = None,
    on_step: StepCallback | None = None,
) -> ScaffoldResult:
    """Run a Vagrant lifecycle operation against the generated project."""
    from armvm.adapters.tools.vagrant import VagrantAdapter
    from armvm.core.services import vagrant_ops

    result = ScaffoldResult()
    if operation not in VM_OPERATIONS:
        result.error = f"Unknown VM operation '{operation}'. Valid: {', '.join(VM_OPERATIONS)}"
        return result

    cfg = _load(result, config_path, overrides)
    if cfg is None:
        return result
    assert result.base_dir is not None

    vagrantfile = result.base_dir / cfg.vm_dir / "Vagrantfile"
    if not vagrantfile.is_file():
        result.error = (
            f"No Vagrantfile at {vagrantfile}. "
            "Run 'armvm scaffold' or 'armvm generate' first."
        )
        return result

    if operation == "up":
        plan = vagrant_ops.plan_up(
            cfg,
            vagrant=None if mock_mode else VagrantAdapter(),
            stream=stream,
        )
    elif operation == "halt":
        plan = vagrant_ops.plan_halt(cfg, stream=stream)
    elif operation == "destroy":
        plan = vagrant_ops.plan_destroy(cfg, stream=stream)
    else:
        plan = vagrant_ops.plan_status(cfg)

    return _execute(result, plan, registry or build_registry(mock_mode), dry_run, on_step)
