"""
eks-toolbox — CLI entrypoint.

Usage:
    eks-toolbox                 # same as: eks-toolbox install
    eks-toolbox install --dry-run
    eks-toolbox status
    eks-toolbox detect --json
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from eks_toolbox import __version__
from eks_toolbox.core.observability.logging_config import setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="eks-toolbox")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to eks-toolbox.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """eks-toolbox — install AWS CLI v2, eksctl and kubectl on this host."""
    from eks_toolbox.core.config.loader import load_config
    from eks_toolbox.core.errors import ConfigError

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    ctx.obj["config"] = config

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("EKSTB_LOG_LEVEL", "INFO")

    secret = config.sudo_password.get_secret_value() if config.sudo_password else ""
    setup_logging(
        level=level,
        log_file=os.environ.get("EKSTB_LOG_FILE"),
        log_file_level=os.environ.get("EKSTB_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
        redact=(secret,) if secret else (),
    )

    if ctx.invoked_subcommand is None:
        from eks_toolbox.ui.cli.tools import install

        ctx.invoke(install)


from eks_toolbox.ui.cli.tools import detect, install, status  # noqa: E402

cli.add_command(install)
cli.add_command(status)
cli.add_command(detect)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
