"""
armvm — CLI entrypoint.

Usage:
    python -m armvm.main --help
    armvm scaffold
    armvm generate --memory 4096 --cpus 4
    armvm template packer
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from armvm import __version__
from armvm.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from armvm.ui.cli.output import echo_step, report_failure, vm_options


@click.group()
@click.version_option(version=__version__, prog_name="armvm")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to armvm.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """armvm — Ubuntu ARM64 Vagrant VMs for Parallels Desktop, built with Packer."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=not debug,
    )


@cli.command()
@vm_options
@click.option("--no-build", is_flag=True, help="Only write the Packer template.")
@click.option("--dry-run", is_flag=True, help="Validate every step but execute none.")
@click.option("--mock", is_flag=True, help="Simulate packer (files are still written).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def scaffold(
    ctx: click.Context,
    overrides: dict,
    no_build: bool,
    dry_run: bool,
    mock: bool,
    as_json: bool,
) -> None:
    """Create the project, write the Packer template, run packer init + build.

    Examples:

        armvm scaffold

        armvm scaffold --dir lab-vm --memory 4096 --cpus 4

        armvm scaffold --no-build
    """
    from armvm.core.services.scaffold_ops import completion_message
    from armvm.core.use_cases.scaffold import run_scaffold

    result = run_scaffold(
        config_path=ctx.obj.get("config_path"),
        overrides=overrides,
        build=not no_build,
        dry_run=dry_run,
        mock_mode=mock,
        stream=not as_json,
        on_step=None if as_json else echo_step,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    report_failure(result)

    cfg = result.config
    assert cfg is not None
    if dry_run:
        click.secho(f"[dry-run] {result.report.total} step(s) validated", fg="yellow")
    elif no_build:
        click.echo()
        click.echo("Template written. Build it with:")
        click.echo(f"  cd {cfg.project_dir}")
        click.echo(f"  packer init {cfg.template_file}")
        click.echo(f"  packer build {cfg.template_file}")
    else:
        click.echo(completion_message(cfg))


@cli.command()
@vm_options
@click.option("--dry-run", is_flag=True, help="Validate every step but execute none.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(ctx: click.Context, overrides: dict, dry_run: bool, as_json: bool) -> None:
    """Write the Vagrantfile, setup.sh and README.md directly (no packer)."""
    from armvm.core.use_cases.scaffold import run_generate

    result = run_generate(
        config_path=ctx.obj.get("config_path"),
        overrides=overrides,
        dry_run=dry_run,
        on_step=None if as_json else echo_step,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    report_failure(result)

    cfg = result.config
    assert cfg is not None
    if not (dry_run or ctx.obj.get("quiet")):
        click.echo()
        click.echo("To start the VM, run:")
        click.echo(f"  cd {cfg.vm_dir}")
        click.echo("  ./setup.sh")


@cli.command()
@click.argument("kind", type=click.Choice(["packer", "vagrantfile", "setup", "readme"]))
@vm_options
@click.pass_context
def template(ctx: click.Context, kind: str, overrides: dict) -> None:
    """Print one rendered template to stdout."""
    from armvm.core.config.loader import ConfigError, load_config
    from armvm.core.services.generators import render

    try:
        cfg = load_config(ctx.obj.get("config_path"), overrides=overrides)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(render(kind, cfg).content, nl=False)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doctor(ctx: click.Context, as_json: bool) -> None:
    """Check that packer, vagrant and Parallels are installed."""
    from armvm.core.observability.health import check_system_health

    system_health = check_system_health()

    if as_json:
        click.echo(json.dumps(system_health.to_dict(), indent=2))
        sys.exit(1 if system_health.status == "unhealthy" else 0)

    status_icons = {
        "healthy": ("💚", "green"),
        "degraded": ("🟡", "yellow"),
        "unhealthy": ("🔴", "red"),
        "unknown": ("❔", "white"),
    }
    icon, color = status_icons.get(system_health.status, ("❔", "white"))

    click.echo()
    click.secho(f"{icon} Toolchain: {system_health.status.upper()}", fg=color, bold=True)
    click.echo()

    for component in system_health.components:
        c_icon, c_color = status_icons.get(component.status, ("❔", "white"))
        click.secho(f"   {c_icon} {component.name}", fg=c_color, bold=True)
        click.echo(f"      {component.message}")
        if ctx.obj.get("verbose") and component.details.get("path"):
            click.echo(f"      path: {component.details['path']}")

    click.echo()
    if system_health.status == "unhealthy":
        sys.exit(1)


@cli.group()
def config() -> None:
    """VM configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate armvm.yml and show the effective settings."""
    from armvm.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        cfg = result.config
        assert cfg is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Source:   {result.config_path or '(defaults)'}")
        click.echo(f"   Project:  {cfg.project_dir}/{cfg.template_file}")
        click.echo(f"   Box:      {cfg.box} @ {cfg.box_version}")
        click.echo(f"   Machine:  {cfg.memory}MB RAM, {cfg.cpus} CPUs")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)


# ── Register sub-command groups from armvm/ui/cli/ ────────────────

from armvm.ui.cli.vm import vm

cli.add_command(vm)


if __name__ == "__main__":
    cli()
