"""
Error hierarchy — every exception the toolbox raises on purpose.

Adapters never raise for a failed command; they return results.
These exceptions mark conditions a step cannot continue past.
The orchestrator converts them into ``StepResult`` values at the
step boundary, so nothing below the CLI calls ``sys.exit``.
"""

from __future__ import annotations


class ToolboxError(Exception):
    """Base class for all toolbox errors."""


class ConfigError(ToolboxError):
    """Raised when toolbox configuration is invalid or unreadable."""


class OSDetectionError(ToolboxError):
    """Raised when the OS identification source is missing or unreadable."""


class UnsupportedOSError(ToolboxError):
    """Raised when the distribution id maps to no package-manager strategy."""


class UnsupportedPlatformError(ToolboxError):
    """Raised when the host architecture has no published artifacts."""


class DownloadError(ToolboxError):
    """Raised when an HTTP download fails or returns no content."""


class ArtifactError(ToolboxError):
    """Raised when an archive is malformed or lacks the expected executable."""
