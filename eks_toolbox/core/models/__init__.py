"""
Domain models — host profile, configuration, and step outcomes.
"""

from eks_toolbox.core.models.config import ArtifactUrls, ToolboxConfig
from eks_toolbox.core.models.host import (
    SUPPORTED_DISTRO_IDS,
    UNSUPPORTED_OS_MESSAGE,
    DistroFamily,
    HostProfile,
)
from eks_toolbox.core.models.outcome import (
    Outcome,
    RunReport,
    StepResult,
    ToolInstallResult,
    ToolPresence,
    ToolStatus,
)

__all__ = [
    "ArtifactUrls",
    "DistroFamily",
    "HostProfile",
    "Outcome",
    "RunReport",
    "SUPPORTED_DISTRO_IDS",
    "StepResult",
    "ToolInstallResult",
    "ToolPresence",
    "ToolStatus",
    "ToolboxConfig",
    "UNSUPPORTED_OS_MESSAGE",
]
