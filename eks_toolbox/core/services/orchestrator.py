"""
Orchestrator — the linear install run.

    detect → prerequisites → download tool → aws-cli → eksctl
           → kubectl → summary

Fatal steps (detection, prerequisites) stop the run; every later
step is at worst degraded. The orchestrator returns a RunReport and
never exits the process — the CLI owns the exit code.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from eks_toolbox.core.context import InstallContext
from eks_toolbox.core.data.recipes import TOOL_ORDER, TOOL_RECIPES
from eks_toolbox.core.errors import OSDetectionError, UnsupportedOSError, UnsupportedPlatformError
from eks_toolbox.core.models.outcome import RunReport, StepResult, ToolStatus
from eks_toolbox.core.services.os_detect import detect_host
from eks_toolbox.core.services.package_install import ensure_download_tool, install_prerequisites
from eks_toolbox.core.services.summary import collect_summary
from eks_toolbox.core.services.tool_install import install_tool

logger = logging.getLogger(__name__)

Progress = Callable[[str], None]


def _log_progress(message: str) -> None:
    logger.info(message)


def run_install(
    ctx: InstallContext,
    *,
    progress: Progress = _log_progress,
    machine: str | None = None,
) -> RunReport:
    """Run the full installer.

    Args:
        ctx: Context without a host; detection fills it in.
        progress: Receives human-readable banners as the run advances.
        machine: Architecture override for detection (tests).

    Returns:
        The report; its ``exit_code`` is what the CLI exits with.
    """
    report = RunReport()
    labels = ", ".join(TOOL_RECIPES[t]["label"] for t in TOOL_ORDER)
    progress(f"Installing {labels}")

    # ── Detect ──
    start = time.monotonic()
    try:
        host = detect_host(Path(ctx.config.os_release_path), machine=machine)
    except (OSDetectionError, UnsupportedOSError, UnsupportedPlatformError) as e:
        report.add(StepResult.failure("detect", str(e)))
        return report
    ctx = ctx.with_host(host)
    report.add(StepResult.success(
        "detect",
        f"Detected OS: {host.distro_id}",
        duration_ms=int((time.monotonic() - start) * 1000),
        details=host.to_dict(),
    ))
    progress(f"Detected OS: {host.distro_id}")

    # ── Prerequisites ──
    progress("Installing prerequisite packages...")
    if report.add(install_prerequisites(ctx)).fatal:
        return report
    report.add(ensure_download_tool(ctx))

    # ── Tools ──
    for tool in TOOL_ORDER:
        label = TOOL_RECIPES[tool]["label"]
        progress(f"Installing {label}...")
        start = time.monotonic()
        result = install_tool(ctx, tool)
        report.tools.append(result)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.status is ToolStatus.FAILED:
            report.add(StepResult.degraded(
                tool, result.hint or result.error or f"{label} failed",
                duration_ms=elapsed_ms, details={"error": result.error},
            ))
        else:
            report.add(StepResult.success(
                tool, result.status.value, duration_ms=elapsed_ms,
            ))

    # ── Summary ──
    if ctx.dry_run:
        report.add(StepResult.success("summary", "skipped (dry-run)"))
    else:
        report.summary = collect_summary(ctx.runner)
        missing = [p.cli for p in report.summary if not p.installed]
        if missing:
            report.add(StepResult.degraded("summary", f"Not installed: {', '.join(missing)}"))
        else:
            report.add(StepResult.success("summary", "All tools present"))

    return report
