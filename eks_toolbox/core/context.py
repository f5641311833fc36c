"""
Install context — the explicit value threaded through every step.

Steps receive everything they need from here: configuration, the
detected host, and the adapters used to reach the outside world.
No step changes the process working directory or reads ambient
shell state; the context is frozen and replaced, never mutated.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path

from eks_toolbox.adapters.base import Fetcher, Runner
from eks_toolbox.core.models.config import ToolboxConfig
from eks_toolbox.core.models.host import HostProfile


@dataclass(frozen=True)
class InstallContext:
    config: ToolboxConfig
    runner: Runner
    fetcher: Fetcher
    host: HostProfile | None = None
    dry_run: bool = False
    skip_installed: bool = False

    @property
    def bin_dir(self) -> Path:
        return Path(self.config.bin_dir)

    @property
    def scratch_root(self) -> Path | None:
        return Path(self.config.scratch_root) if self.config.scratch_root else None

    def with_host(self, host: HostProfile) -> InstallContext:
        return dataclasses.replace(self, host=host)

    def require_host(self) -> HostProfile:
        if self.host is None:
            raise RuntimeError("Host has not been detected yet")
        return self.host


def build_context(
    config: ToolboxConfig,
    *,
    dry_run: bool = False,
    skip_installed: bool = False,
) -> InstallContext:
    """Wire the real adapters for a config."""
    from eks_toolbox.adapters.http import UrlFetcher
    from eks_toolbox.adapters.shell import DryRunRunner, SubprocessRunner

    password = config.sudo_password.get_secret_value() if config.sudo_password else ""
    runner: Runner
    if dry_run:
        runner = DryRunRunner()
    else:
        runner = SubprocessRunner(
            timeout=config.command_timeout,
            sudo_password=password,
            sudo_interactive=config.sudo_interactive,
        )
    return InstallContext(
        config=config,
        runner=runner,
        fetcher=UrlFetcher(timeout=config.download_timeout),
        dry_run=dry_run,
        skip_installed=skip_installed,
    )
