"""
CLI commands for installing and inspecting the toolbox CLIs.

Thin wrappers over ``eks_toolbox.core.services``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

_BANNER = "=" * 42
_RULE = "-" * 42


def _progress(quiet: bool):
    def emit(message: str) -> None:
        if not quiet:
            click.secho(f"▶ {message}", fg="cyan")
    return emit


# ── Install ─────────────────────────────────────────────────────


@click.command("install")
@click.option("--dry-run", is_flag=True, help="Log commands and downloads without running them.")
@click.option("--skip-installed", is_flag=True, help="Leave tools already on PATH untouched.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the run report as JSON.")
@click.pass_context
def install(ctx: click.Context, dry_run: bool, skip_installed: bool, as_json: bool) -> None:
    """Install AWS CLI v2, eksctl and kubectl (the default command)."""
    from eks_toolbox.core.context import build_context
    from eks_toolbox.core.services.orchestrator import run_install
    from eks_toolbox.core.services.summary import CONFIGURE_HINT, render_summary

    quiet = ctx.obj.get("quiet", False) or as_json
    install_ctx = build_context(ctx.obj["config"], dry_run=dry_run, skip_installed=skip_installed)

    if not quiet:
        click.echo(_BANNER)
        click.secho(" Installing AWS CLI v2, eksctl, and kubectl ", bold=True)
        click.echo(_BANNER)

    report = run_install(install_ctx, progress=_progress(quiet))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(report.exit_code)

    fatal = report.fatal
    if fatal is not None:
        click.secho(f"❌ {fatal.message}", fg="red", err=True)
        sys.exit(report.exit_code)

    for step in report.degraded:
        click.secho(f"⚠️  {step.step}: {step.message}", fg="yellow")

    click.echo(_RULE)
    click.echo(f" {CONFIGURE_HINT} ")
    click.echo(_RULE)

    if dry_run:
        click.secho("Dry run completed — nothing was changed.", fg="green")
        sys.exit(report.exit_code)

    click.echo("Installation completed (or attempted). Summary:")
    for presence, line in zip(report.summary, render_summary(report.summary)):
        click.secho(line, fg="green" if presence.installed else "yellow")

    sys.exit(report.exit_code)


# ── Status ──────────────────────────────────────────────────────


@click.command("status")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def status(as_json: bool) -> None:
    """Show which of the three CLIs are on PATH, with their versions."""
    from eks_toolbox.adapters.shell import SubprocessRunner
    from eks_toolbox.core.services.summary import collect_summary, render_summary

    presences = collect_summary(SubprocessRunner(timeout=30))

    if as_json:
        click.echo(json.dumps(
            [{**p.model_dump(mode="json"), "installed": p.installed} for p in presences],
            indent=2,
        ))
    else:
        for presence, line in zip(presences, render_summary(presences)):
            click.secho(line, fg="green" if presence.installed else "yellow")

    sys.exit(0 if all(p.installed for p in presences) else 2)


# ── Detect ──────────────────────────────────────────────────────


@click.command("detect")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the detected distribution and the package manager it selects."""
    from eks_toolbox.core.errors import ToolboxError
    from eks_toolbox.core.services.os_detect import detect_host

    config = ctx.obj["config"]
    try:
        host = detect_host(Path(config.os_release_path))
    except ToolboxError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    data = host.to_dict()
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.secho(f"🐧 {host.pretty_name or host.distro_id}", fg="cyan", bold=True)
    click.echo(f"   ID:              {data['distro_id']}")
    if host.version_id:
        click.echo(f"   Version:         {host.version_id}")
    click.echo(f"   Family:          {data['family']}")
    click.echo(f"   Package manager: {data['package_manager']}")
    click.echo(f"   Architecture:    {host.machine}")
