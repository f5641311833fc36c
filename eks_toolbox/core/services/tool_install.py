"""
Tool installer — fetch, unpack, place, and verify one CLI.

Every tool follows the same sequence inside its own scratch
directory (removed afterwards):

    1. resolve the artifact URL (optionally via a "latest stable" file)
    2. download into the scratch dir
    3. unpack and install into bin_dir
    4. run the version query and report

Failure policy is uniform across tools: any failure here produces a
``failed`` ToolInstallResult; it never aborts the run. A failed
binary placement is final. A non-zero exit from the bundled AWS
installer is followed by the presence check anyway, and aws counts
as installed if it then resolves and answers.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from eks_toolbox.adapters.base import CommandResult
from eks_toolbox.core.context import InstallContext
from eks_toolbox.core.data.recipes import TOOL_RECIPES
from eks_toolbox.core.errors import ArtifactError, DownloadError
from eks_toolbox.core.models.outcome import ToolInstallResult, ToolStatus
from eks_toolbox.core.services.artifacts import place_binary, unpack
from eks_toolbox.core.services.tool_version import probe_tool

logger = logging.getLogger(__name__)


def resolve_artifact_url(ctx: InstallContext, tool: str) -> str:
    """Build the download URL, following a version indirection if declared.

    Raises:
        DownloadError: The version file could not be fetched or is empty.
    """
    recipe = TOOL_RECIPES[tool]
    urls = ctx.config.urls
    url: str = getattr(urls, recipe["url"])

    version_key = recipe.get("version_url")
    if version_key:
        version = ctx.fetcher.fetch_text(getattr(urls, version_key)).splitlines()[0].strip()
        if not version:
            raise DownloadError(f"No version found at {getattr(urls, version_key)}")
        logger.info("Latest stable %s: %s", recipe["label"], version)
        url = url.format(version=version)

    return url


def _run_installer(ctx: InstallContext, tool: str, executable: Path, workdir: Path) -> CommandResult:
    recipe = TOOL_RECIPES[tool]
    if recipe["install"] == "aws_installer":
        return ctx.runner.run(
            [
                str(executable),
                "-i", ctx.config.aws_install_dir,
                "-b", str(ctx.bin_dir),
                "--update",
            ],
            privileged=True,
            cwd=workdir,
        )
    return place_binary(ctx.runner, executable, ctx.bin_dir, recipe["cli"])


def _scratch_dir(ctx: InstallContext, tool: str) -> tempfile.TemporaryDirectory:
    """Create this tool's scratch directory under ``scratch_root``.

    Raises:
        OSError: The root is not a directory or is not writable.
    """
    scratch_root = ctx.scratch_root
    if scratch_root is not None:
        scratch_root.mkdir(parents=True, exist_ok=True)
    return tempfile.TemporaryDirectory(
        prefix=f"eks-toolbox-{tool}-", dir=scratch_root, ignore_cleanup_errors=True,
    )


def install_tool(ctx: InstallContext, tool: str) -> ToolInstallResult:
    """Install one tool and report its outcome."""
    recipe = TOOL_RECIPES[tool]
    cli = recipe["cli"]
    hint = recipe["hint"].format(bin_dir=ctx.bin_dir)

    if ctx.skip_installed and shutil.which(cli):
        presence = probe_tool(tool, ctx.runner)
        logger.info("%s already present at %s — skipping", recipe["label"], presence.path)
        return ToolInstallResult(
            tool=tool, cli=cli, status=ToolStatus.ALREADY_PRESENT, version=presence.version,
        )

    if ctx.dry_run:
        logger.info("[dry-run] would download %s from %s", recipe["label"], getattr(ctx.config.urls, recipe["url"]))
        return ToolInstallResult(tool=tool, cli=cli, status=ToolStatus.INSTALLED, hint="dry-run: nothing changed")

    error: str | None = None
    try:
        scratch = _scratch_dir(ctx, tool)
    except OSError as e:
        logger.error("%s: cannot create scratch directory: %s", recipe["label"], e)
        return ToolInstallResult(
            tool=tool, cli=cli, status=ToolStatus.FAILED, hint=hint,
            error=f"Cannot create scratch directory: {e}",
        )

    with scratch as tmp:
        workdir = Path(tmp)
        try:
            url = resolve_artifact_url(ctx, tool)
            archive = ctx.fetcher.download(url, workdir / recipe["filename"])
            executable = unpack(archive, recipe["archive"], recipe["member"], workdir)
        except (DownloadError, ArtifactError) as e:
            logger.error("%s: %s", recipe["label"], e)
            return ToolInstallResult(tool=tool, cli=cli, status=ToolStatus.FAILED, hint=hint, error=str(e))

        result = _run_installer(ctx, tool, executable, workdir)
        if not result.ok:
            error = result.describe_failure()
            # Only the bundled AWS installer gets a second chance: it exits
            # non-zero over an existing install that still works.
            if recipe["install"] != "aws_installer":
                logger.error("%s: %s", recipe["label"], error)
                return ToolInstallResult(
                    tool=tool, cli=cli, status=ToolStatus.FAILED, hint=hint, error=error,
                )
            logger.warning(
                "%s install returned non-zero exit code. Checking %s...",
                cli, " ".join(recipe["verify"]),
            )
            logger.debug("Installer failure: %s", error)

    presence = probe_tool(tool, ctx.runner)
    if presence.installed and presence.version:
        logger.info("%s", presence.version.splitlines()[0])
        return ToolInstallResult(
            tool=tool, cli=cli, status=ToolStatus.INSTALLED,
            version=presence.version, error=error,
        )

    logger.warning(hint)
    return ToolInstallResult(
        tool=tool,
        cli=cli,
        status=ToolStatus.FAILED,
        hint=hint,
        error=error or f"{cli} did not answer its version query",
    )
