"""
Summary reporter — final presence check for every tool.

Purely observational. Re-probes the search path so the summary
reflects the host as it is now, whatever the install steps reported.
"""

from __future__ import annotations

from eks_toolbox.adapters.base import Runner
from eks_toolbox.core.data.recipes import TOOL_ORDER
from eks_toolbox.core.models.outcome import ToolPresence
from eks_toolbox.core.services.tool_version import probe_tool

CONFIGURE_HINT = "To configure AWS CLI, run: aws configure"


def collect_summary(runner: Runner, tools: tuple[str, ...] = TOOL_ORDER) -> list[ToolPresence]:
    return [probe_tool(tool, runner) for tool in tools]


def render_summary(presences: list[ToolPresence]) -> list[str]:
    """One entry per tool: its version output, or ``<cli>: not installed``."""
    return [p.line() for p in presences]
