"""
CLI commands for the generated Vagrant machine.

Thin wrappers over ``armvm.core.use_cases.scaffold.run_vm``.
"""

from __future__ import annotations

import json
import sys

import click

from armvm.ui.cli.output import echo_step, report_failure, vm_options


@click.group()
def vm() -> None:
    """Vagrant VM — up, halt, destroy, status."""


def _run(
    ctx: click.Context,
    operation: str,
    overrides: dict,
    as_json: bool = False,
    dry_run: bool = False,
    mock: bool = False,
) -> None:
    from armvm.core.use_cases.scaffold import run_vm

    result = run_vm(
        operation,
        config_path=ctx.obj.get("config_path"),
        overrides=overrides,
        dry_run=dry_run,
        mock_mode=mock,
        stream=not as_json,
        on_step=None if as_json else echo_step,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    report_failure(result)

    report = result.report
    assert report is not None
    if dry_run:
        click.secho(f"[dry-run] {report.total} step(s) validated", fg="yellow")
    elif operation == "status":
        for receipt in report.receipts:
            if receipt.output:
                click.echo(receipt.output)
    elif operation == "up":
        click.echo("==> VM is ready! You can connect with:")
        click.echo("    vagrant ssh")


def _vm_command_options(func):
    """Options shared by every ``vm`` sub-command."""
    func = click.option("--mock", is_flag=True, help="Simulate vagrant (no real execution).")(func)
    func = click.option("--dry-run", is_flag=True, help="Plan but don't execute.")(func)
    func = click.option(
        "--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."
    )(func)
    return vm_options(func)


@vm.command()
@_vm_command_options
@click.pass_context
def up(ctx: click.Context, overrides: dict, as_json: bool, dry_run: bool, mock: bool) -> None:
    """Install the plugin and box if needed, then boot the VM."""
    _run(ctx, "up", overrides, as_json=as_json, dry_run=dry_run, mock=mock)


@vm.command()
@_vm_command_options
@click.pass_context
def halt(ctx: click.Context, overrides: dict, as_json: bool, dry_run: bool, mock: bool) -> None:
    """Stop the VM."""
    _run(ctx, "halt", overrides, as_json=as_json, dry_run=dry_run, mock=mock)


@vm.command()
@_vm_command_options
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation.")
@click.pass_context
def destroy(
    ctx: click.Context,
    overrides: dict,
    as_json: bool,
    dry_run: bool,
    mock: bool,
    yes: bool,
) -> None:
    """Destroy the VM completely."""
    if not (yes or dry_run):
        click.confirm("Destroy the VM and all its data?", abort=True)
    _run(ctx, "destroy", overrides, as_json=as_json, dry_run=dry_run, mock=mock)


@vm.command()
@_vm_command_options
@click.pass_context
def status(ctx: click.Context, overrides: dict, as_json: bool, dry_run: bool, mock: bool) -> None:
    """Show ``vagrant status`` for the VM."""
    _run(ctx, "status", overrides, as_json=as_json, dry_run=dry_run, mock=mock)
