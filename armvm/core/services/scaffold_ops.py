"""Scaffold planning — the step lists behind ``armvm scaffold`` and ``generate``."""

from __future__ import annotations

import logging

from armvm.core.engine.executor import ExecutionPlan, generate_operation_id
from armvm.core.models.vm import PROVIDER_PLUGIN, VMConfig
from armvm.core.services.generators import vm_files
from armvm.core.services.generators.packer_template import generate_packer_template

logger = logging.getLogger(__name__)

_RULE = "=" * 66


def plan_scaffold(cfg: VMConfig, build: bool = True, stream: bool = True) -> ExecutionPlan:
    """Plan the full scaffold: project dir, Packer template, init, build.

    Args:
        cfg: VM configuration.
        build: Include ``packer init`` and ``packer build``.
        stream: Let packer output through to the terminal.
    """
    plan = ExecutionPlan(
        operation_id=generate_operation_id("scaffold"),
        operation="scaffold",
    )
    template = generate_packer_template(cfg)

    plan.add(
        f"Creating project directory: {cfg.project_dir}",
        "filesystem",
        operation="mkdir",
        path=cfg.project_dir,
    )
    plan.add(
        "Creating Packer template for Ubuntu ARM64",
        "filesystem",
        operation="write",
        path=f"{cfg.project_dir}/{template.path}",
        content=template.content,
        overwrite=template.overwrite,
    )

    if build:
        plan.add(
            "Initializing Packer",
            "packer",
            cwd=cfg.project_dir,
            operation="init",
            template=template.path,
            stream=stream,
        )
        plan.add(
            "Building with Packer",
            "packer",
            cwd=cfg.project_dir,
            operation="build",
            template=template.path,
            stream=stream,
        )

    logger.debug("Planned %d scaffold steps for %s", plan.total_actions, cfg.project_dir)
    return plan


def plan_generate(cfg: VMConfig) -> ExecutionPlan:
    """Plan writing the VM files directly, the same ones packer would write."""
    plan = ExecutionPlan(
        operation_id=generate_operation_id("generate"),
        operation="generate",
    )
    for generated in vm_files(cfg):
        plan.add(
            f"Creating {generated.path}",
            "filesystem",
            operation="write",
            path=f"{cfg.project_dir}/{generated.path}",
            content=generated.content,
            overwrite=generated.overwrite,
            executable=generated.executable,
        )
    return plan


def completion_message(cfg: VMConfig) -> str:
    """The banner shown after a successful scaffold."""
    return f"""
{_RULE}
Setup complete! Your Ubuntu ARM64 environment is ready.

To start the VM, run:
  cd {cfg.vm_dir}
  ./setup.sh

This will:
  1. Install the {PROVIDER_PLUGIN} plugin if needed
  2. Add the Ubuntu ARM64 box if not already added
  3. Start the VM with Parallels
  4. Display connection information

Once the VM is running, you can connect with:
  vagrant ssh
{_RULE}"""
