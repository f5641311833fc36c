"""
Shell runner — the single place where ``subprocess.run`` is called.

All privilege elevation, logging, and error capture for installer
commands is centralised here.

Privilege invariants:
- Already root → no prefix
- Password configured → ``sudo -S -k`` with the password piped on
  stdin; never in argv, never logged
- Interactive → plain ``sudo`` (it prompts on the terminal)
- Otherwise → ``sudo -n`` (fail fast instead of hanging)
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path

from eks_toolbox.adapters.base import CommandResult, Runner

logger = logging.getLogger(__name__)

# Keep captured streams bounded; package managers are chatty
_MAX_STREAM = 4000


class SubprocessRunner(Runner):
    """Run commands on the host with ``subprocess.run``."""

    def __init__(
        self,
        *,
        timeout: int = 600,
        sudo_password: str = "",
        sudo_interactive: bool = True,
    ) -> None:
        self._timeout = timeout
        self._sudo_password = sudo_password
        self._sudo_interactive = sudo_interactive

    def _elevate(self, argv: list[str]) -> tuple[list[str], str | None]:
        if os.geteuid() == 0:
            return argv, None
        if self._sudo_password:
            return ["sudo", "-S", "-k", *argv], self._sudo_password + "\n"
        if self._sudo_interactive:
            return ["sudo", *argv], None
        return ["sudo", "-n", *argv], None

    def run(
        self,
        argv: list[str],
        *,
        privileged: bool = False,
        cwd: Path | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        timeout = timeout or self._timeout
        cmd, stdin_data = self._elevate(argv) if privileged else (argv, None)

        logger.debug("Executing: %s (cwd=%s)", " ".join(argv), cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                input=stdin_data,
                cwd=str(cwd) if cwd else None,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(argv=argv, returncode=-1, error=f"Command timed out ({timeout}s)")
        except FileNotFoundError:
            return CommandResult(argv=argv, returncode=127, error=f"Command not found: {cmd[0]}")
        except OSError as e:
            logger.exception("Subprocess error: %s", argv)
            return CommandResult(argv=argv, returncode=-1, error=str(e))

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stderr = result.stderr[-_MAX_STREAM:] if result.stderr else ""

        if result.returncode != 0 and privileged and stdin_data is not None:
            lowered = stderr.lower()
            if "incorrect password" in lowered or "sorry" in lowered:
                return CommandResult(
                    argv=argv,
                    returncode=result.returncode,
                    error="sudo rejected the configured password",
                    duration_ms=elapsed_ms,
                )

        return CommandResult(
            argv=argv,
            returncode=result.returncode,
            stdout=result.stdout[-_MAX_STREAM:] if result.stdout else "",
            stderr=stderr,
            duration_ms=elapsed_ms,
            metadata={"privileged": privileged},
        )


class DryRunRunner(Runner):
    """Log what would run; report success without executing anything."""

    def run(
        self,
        argv: list[str],
        *,
        privileged: bool = False,
        cwd: Path | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        prefix = "sudo " if privileged and os.geteuid() != 0 else ""
        logger.info("[dry-run] %s%s", prefix, " ".join(argv))
        return CommandResult(argv=argv, metadata={"dry_run": True, "privileged": privileged})
