"""
Adapter base — the contract between installer steps and the host.

Steps never call ``subprocess`` or ``urllib`` directly. They go
through a ``Runner`` (commands) and a ``Fetcher`` (HTTP), so a test
can swap both for doubles and a dry run can swap both for loggers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Outcome of one command. Runners NEVER raise — failures land here."""

    argv: list[str]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    error: str | None = None     # runner-level failure (timeout, not found)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and self.error is None

    @property
    def output(self) -> str:
        """Combined stdout/stderr — some CLIs print versions on stderr."""
        return "\n".join(p for p in (self.stdout.strip(), self.stderr.strip()) if p)

    def describe_failure(self) -> str:
        if self.error:
            return self.error
        detail = self.stderr.strip() or self.stdout.strip()
        msg = f"{' '.join(self.argv)} exited with code {self.returncode}"
        return f"{msg}: {detail}" if detail else msg

    @classmethod
    def success(cls, argv: list[str], stdout: str = "", **kwargs: Any) -> CommandResult:
        return cls(argv=argv, returncode=0, stdout=stdout, **kwargs)

    @classmethod
    def failure(
        cls,
        argv: list[str],
        returncode: int = 1,
        stderr: str = "",
        **kwargs: Any,
    ) -> CommandResult:
        return cls(argv=argv, returncode=returncode, stderr=stderr, **kwargs)


class Runner(ABC):
    """Runs host commands and reports results."""

    @abstractmethod
    def run(
        self,
        argv: list[str],
        *,
        privileged: bool = False,
        cwd: Path | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """Run ``argv``.

        Args:
            argv: Command and arguments, no shell.
            privileged: The command mutates system state and needs root.
            cwd: Working directory for this command only.
            timeout: Seconds before giving up (runner default if None).

        MUST never raise for a failing command.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class Fetcher(ABC):
    """Retrieves release artifacts over HTTP."""

    @abstractmethod
    def fetch_text(self, url: str) -> str:
        """Return the body of ``url`` as stripped text.

        Raises:
            DownloadError: on any network or HTTP failure.
        """

    @abstractmethod
    def download(self, url: str, dest: Path) -> Path:
        """Stream ``url`` into ``dest`` and return ``dest``.

        Raises:
            DownloadError: on any network or HTTP failure.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
