"""
Tool version probing — is the CLI resolvable, and what does it say.

Read-only: resolves the executable on the search path and runs its
version-query subcommand through the runner (never privileged).
"""

from __future__ import annotations

import re
import shutil

from eks_toolbox.adapters.base import Runner
from eks_toolbox.core.data.recipes import TOOL_RECIPES
from eks_toolbox.core.models.outcome import ToolPresence

VERSION_PATTERNS: dict[str, str] = {
    "aws-cli": r"aws-cli/(\d+\.\d+\.\d+)",
    "eksctl":  r"(\d+\.\d+\.\d+)",
    "kubectl": r"Client Version:\s*v?(\d+\.\d+\.\d+)",
}


def parse_version(tool: str, output: str) -> str | None:
    """Extract a semver string from version output, or None."""
    pattern = VERSION_PATTERNS.get(tool)
    if not pattern or not output:
        return None
    match = re.search(pattern, output)
    return match.group(1) if match else None


def probe_tool(tool: str, runner: Runner) -> ToolPresence:
    """Resolve ``tool`` on the search path and capture its version output.

    A tool is reported present only if its executable resolves at the
    time of the check. A failing version command leaves ``version``
    empty but does not make a resolvable tool absent.
    """
    recipe = TOOL_RECIPES[tool]
    cli = recipe["cli"]
    path = shutil.which(cli)
    if path is None:
        return ToolPresence(tool=tool, cli=cli)

    result = runner.run(list(recipe["verify"]), timeout=30)
    version = result.output if result.ok else ""
    return ToolPresence(
        tool=tool,
        cli=cli,
        path=path,
        version=version,
        semver=parse_version(tool, version),
    )
