"""
Outcome models — what each step and each tool ended up as.

Steps report ``StepResult`` values instead of relying on selective
error suppression, so the summary and the exit code read outcomes
rather than re-probing the environment.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Outcome(str, Enum):
    SUCCESS = "success"
    DEGRADED = "degraded"
    FATAL = "fatal"


class ToolStatus(str, Enum):
    INSTALLED = "installed"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


class StepResult(BaseModel):
    """Result of one orchestration step.

    ``fatal`` stops the run. ``degraded`` is recorded and the run
    continues. Mirrors the success/failure/skip constructors of an
    execution receipt.
    """

    step: str
    outcome: Outcome = Outcome.SUCCESS
    message: str = ""
    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def fatal(self) -> bool:
        return self.outcome is Outcome.FATAL

    @classmethod
    def success(cls, step: str, message: str = "", **kwargs: Any) -> StepResult:
        return cls(step=step, outcome=Outcome.SUCCESS, message=message, **kwargs)

    @classmethod
    def degraded(cls, step: str, message: str, **kwargs: Any) -> StepResult:
        return cls(step=step, outcome=Outcome.DEGRADED, message=message, **kwargs)

    @classmethod
    def failure(cls, step: str, message: str, **kwargs: Any) -> StepResult:
        return cls(step=step, outcome=Outcome.FATAL, message=message, **kwargs)


class ToolInstallResult(BaseModel):
    """Per-tool outcome of the fetch/install/verify sequence."""

    tool: str
    cli: str
    status: ToolStatus
    version: str = ""
    hint: str = ""
    error: str | None = None

    @property
    def present(self) -> bool:
        return self.status is not ToolStatus.FAILED


class ToolPresence(BaseModel):
    """One summary line: is the tool resolvable, and what does it report."""

    tool: str
    cli: str
    path: str | None = None
    version: str = ""
    semver: str | None = None

    @property
    def installed(self) -> bool:
        return self.path is not None

    def line(self) -> str:
        if not self.installed:
            return f"{self.cli}: not installed"
        return self.version or f"{self.cli}: installed (no version output)"


class RunReport(BaseModel):
    """Everything one installer run produced."""

    steps: list[StepResult] = Field(default_factory=list)
    tools: list[ToolInstallResult] = Field(default_factory=list)
    summary: list[ToolPresence] = Field(default_factory=list)

    def add(self, result: StepResult) -> StepResult:
        self.steps.append(result)
        return result

    @property
    def fatal(self) -> StepResult | None:
        for step in self.steps:
            if step.fatal:
                return step
        return None

    @property
    def degraded(self) -> list[StepResult]:
        return [s for s in self.steps if s.outcome is Outcome.DEGRADED]

    @property
    def exit_code(self) -> int:
        """0 = all tools present, 1 = fatal step, 2 = completed degraded."""
        if self.fatal is not None:
            return 1
        if self.summary and all(p.installed for p in self.summary):
            return 0
        if not self.summary and not self.degraded:
            return 0
        return 2

    def to_dict(self) -> dict:
        return {
            "exit_code": self.exit_code,
            "steps": [s.model_dump(mode="json") for s in self.steps],
            "tools": [t.model_dump(mode="json") for t in self.tools],
            "summary": [
                {**p.model_dump(mode="json"), "installed": p.installed}
                for p in self.summary
            ],
        }
