"""
Vagrant planning — native equivalents of the generated setup.sh.

All plans run in ``<project_dir>/<output_dir>``, where the Vagrantfile
lives. ``plan_up`` queries vagrant first so that the plugin and box
steps only appear when they are needed.
"""

from __future__ import annotations

import logging

from armvm.adapters.tools.vagrant import VagrantAdapter
from armvm.core.engine.executor import ExecutionPlan, generate_operation_id
from armvm.core.models.vm import PROVIDER, PROVIDER_PLUGIN, VMConfig

logger = logging.getLogger(__name__)


def _plan(operation: str) -> ExecutionPlan:
    return ExecutionPlan(
        operation_id=generate_operation_id(f"vm-{operation}"),
        operation=f"vm {operation}",
    )


def plan_up(
    cfg: VMConfig,
    vagrant: VagrantAdapter | None = None,
    stream: bool = True,
) -> ExecutionPlan:
    """Plan plugin install (if missing), box add (if missing), then up.

    Without a *vagrant* adapter to query, both the plugin and the box
    are assumed missing.
    """
    plan = _plan("up")

    if vagrant is None or not vagrant.plugin_installed(PROVIDER_PLUGIN):
        plan.add(
            f"Installing {PROVIDER_PLUGIN} plugin",
            "vagrant",
            cwd=cfg.vm_dir,
            operation="plugin-install",
            plugin=PROVIDER_PLUGIN,
            stream=stream,
        )
    else:
        logger.info("Plugin %s already installed", PROVIDER_PLUGIN)

    if vagrant is None or not vagrant.box_added(cfg.box):
        plan.add(
            "Adding Ubuntu ARM64 box",
            "vagrant",
            cwd=cfg.vm_dir,
            operation="box-add",
            box=cfg.box,
            provider=PROVIDER,
            stream=stream,
        )
    else:
        logger.info("Box %s already added", cfg.box)

    plan.add(
        "Starting Ubuntu ARM64 VM",
        "vagrant",
        cwd=cfg.vm_dir,
        operation="up",
        provider=PROVIDER,
        stream=stream,
    )
    return plan


def plan_halt(cfg: VMConfig, stream: bool = True) -> ExecutionPlan:
    plan = _plan("halt")
    plan.add("Stopping VM", "vagrant", cwd=cfg.vm_dir, operation="halt", stream=stream)
    return plan


def plan_destroy(cfg: VMConfig, stream: bool = True) -> ExecutionPlan:
    plan = _plan("destroy")
    plan.add("Destroying VM", "vagrant", cwd=cfg.vm_dir, operation="destroy", stream=stream)
    return plan


def plan_status(cfg: VMConfig) -> ExecutionPlan:
    plan = _plan("status")
    plan.add("Querying VM status", "vagrant", cwd=cfg.vm_dir, operation="status")
    return plan
