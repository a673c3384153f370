"""
Shared CLI output helpers — step banners, failure reports, overrides.
"""

from __future__ import annotations

import functools
import sys
from collections.abc import Callable
from typing import Any

import click

from armvm.core.models.action import Action


def echo_step(action: Action) -> None:
    """Print a ``==> <step>`` banner before a step runs."""
    click.echo(f"==> {action.name}")


def vm_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the config override flags to a command.

    The wrapped command receives them collected as ``overrides``.
    """
    options = [
        click.option("--dir", "project_dir", default=None, help="Project directory to create."),
        click.option("--name", default=None, help="Template/source name (default: ubuntu-arm64)."),
        click.option("--output-dir", default=None, help="Directory packer writes the VM files to."),
        click.option("--box", default=None, help="Vagrant box name."),
        click.option("--box-version", default=None, help="Vagrant box version."),
        click.option("--memory", type=int, default=None, help="VM memory in MB."),
        click.option("--cpus", type=int, default=None, help="Number of virtual CPUs."),
    ]
    keys = ("project_dir", "name", "output_dir", "box", "box_version", "memory", "cpus")

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        kwargs["overrides"] = {key: kwargs.pop(key) for key in keys}
        return func(*args, **kwargs)

    for option in reversed(options):
        wrapper = option(wrapper)
    return wrapper


def report_failure(result: Any) -> None:
    """Print the error or the failing step of *result* and exit with its code."""
    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    report = result.report
    failure = report.first_failure if report else None
    if failure is not None:
        click.secho(f"❌ {failure.error}", fg="red", err=True)
        sys.exit(report.exit_code)
