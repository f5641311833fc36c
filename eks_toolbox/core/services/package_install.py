"""
Package installer — ensure prerequisite OS packages are present.

Two strategies, selected by a total mapping over ``DistroFamily``:

    RHEL    yum: drop packages whose binary is already resolvable,
            one ``yum install -y`` with the rest (or none at all)
    DEBIAN  apt-get: ``update -y`` then one ``install -y`` with
            the full list

A failed prerequisite install is fatal. The follow-up download-tool
check is best-effort: an ordered chain of candidate packages, first
success wins, and exhausting it only logs guidance.
"""

from __future__ import annotations

import logging
import shutil
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from eks_toolbox.adapters.base import CommandResult, Runner
from eks_toolbox.core.context import InstallContext
from eks_toolbox.core.data.packages import (
    DOWNLOAD_TOOL,
    DOWNLOAD_TOOL_CANDIDATES,
    DOWNLOAD_TOOL_GUIDANCE,
    PREREQUISITE_PACKAGES,
)
from eks_toolbox.core.models.host import DistroFamily
from eks_toolbox.core.models.outcome import StepResult

logger = logging.getLogger(__name__)

Which = Callable[[str], str | None]


class PackageStrategy(ABC):
    """How one package-manager family installs a list of packages."""

    family: DistroFamily

    def __init__(self, runner: Runner, *, which: Which | None = None) -> None:
        self._runner = runner
        self._which = which or shutil.which

    def filter_request(self, packages: Sequence[str]) -> list[str]:
        """Return the packages that still need to be requested."""
        return list(packages)

    @abstractmethod
    def install(self, packages: Sequence[str]) -> CommandResult | None:
        """Install ``packages``. Returns None when nothing was invoked."""

    @abstractmethod
    def install_one(self, package: str) -> CommandResult:
        """Install a single package without refreshing indexes."""


class YumStrategy(PackageStrategy):
    family = DistroFamily.RHEL

    def filter_request(self, packages: Sequence[str]) -> list[str]:
        remaining: list[str] = []
        for pkg in packages:
            if pkg == DOWNLOAD_TOOL and self._which(DOWNLOAD_TOOL):
                logger.info("%s already present — skipping package install for %s", pkg, pkg)
                continue
            remaining.append(pkg)
        return remaining

    def install(self, packages: Sequence[str]) -> CommandResult | None:
        to_install = self.filter_request(packages)
        if not to_install:
            logger.info("No packages to install for yum.")
            return None
        return self._runner.run(["yum", "install", "-y", *to_install], privileged=True)

    def install_one(self, package: str) -> CommandResult:
        return self._runner.run(["yum", "install", "-y", package], privileged=True)


class AptStrategy(PackageStrategy):
    family = DistroFamily.DEBIAN

    def install(self, packages: Sequence[str]) -> CommandResult | None:
        refreshed = self._runner.run(["apt-get", "update", "-y"], privileged=True)
        if not refreshed.ok:
            return refreshed
        return self._runner.run(["apt-get", "install", "-y", *packages], privileged=True)

    def install_one(self, package: str) -> CommandResult:
        return self._runner.run(["apt-get", "install", "-y", package], privileged=True)


_STRATEGIES: dict[DistroFamily, type[PackageStrategy]] = {
    DistroFamily.RHEL: YumStrategy,
    DistroFamily.DEBIAN: AptStrategy,
}


def strategy_for(
    family: DistroFamily,
    runner: Runner,
    *,
    which: Which | None = None,
) -> PackageStrategy:
    return _STRATEGIES[family](runner, which=which)


def install_prerequisites(
    ctx: InstallContext,
    packages: Sequence[str] = PREREQUISITE_PACKAGES,
) -> StepResult:
    """Install the prerequisite list. Failure is fatal."""
    family = ctx.require_host().family
    strategy = strategy_for(family, ctx.runner)

    logger.info("Installing %s (%s only if missing)...", ", ".join(packages), DOWNLOAD_TOOL)
    start = time.monotonic()
    result = strategy.install(packages)
    elapsed_ms = int((time.monotonic() - start) * 1000)

    if result is None:
        return StepResult.success(
            "prerequisites", "Nothing to install", duration_ms=elapsed_ms,
            details={"requested": list(packages), "installed": []},
        )
    if not result.ok:
        logger.error("Prerequisite install failed: %s", result.describe_failure())
        return StepResult.failure(
            "prerequisites",
            f"{family.package_manager} failed to install prerequisites: {result.describe_failure()}",
            duration_ms=elapsed_ms,
            details={"argv": result.argv, "returncode": result.returncode},
        )

    return StepResult.success(
        "prerequisites",
        f"Installed via {family.package_manager}",
        duration_ms=elapsed_ms,
        details={"requested": list(packages), "argv": result.argv},
    )


def ensure_download_tool(ctx: InstallContext, *, which: Which | None = None) -> StepResult:
    """Re-check the download tool; try each candidate package until one works.

    Never fatal: exhausting the chain yields a degraded result and the
    run continues.
    """
    which = which or shutil.which
    if which(DOWNLOAD_TOOL):
        return StepResult.success("download-tool", f"{DOWNLOAD_TOOL} present")

    family = ctx.require_host().family
    strategy = strategy_for(family, ctx.runner, which=which)
    logger.warning("%s not found. Attempting to install %s (safe attempt)...", DOWNLOAD_TOOL, DOWNLOAD_TOOL)

    attempts: list[dict] = []
    for package in DOWNLOAD_TOOL_CANDIDATES[family.value]:
        result = strategy.install_one(package)
        attempts.append({"package": package, "ok": result.ok})
        if result.ok:
            logger.info("%s installed successfully.", package)
            return StepResult.success(
                "download-tool", f"Installed {package}", details={"attempts": attempts},
            )
        logger.warning("Failed to install %r via %s.", package, family.package_manager)

    guidance = DOWNLOAD_TOOL_GUIDANCE[family.value]
    logger.warning(guidance)
    return StepResult.degraded("download-tool", guidance, details={"attempts": attempts})
