"""
Prerequisite packages and the download-tool remediation chain.

Pure data, keyed by ``DistroFamily`` value.
"""

from __future__ import annotations

# Requested in this order on every host
PREREQUISITE_PACKAGES: tuple[str, ...] = ("unzip", "tar", "curl")

# Binary whose presence lets yum skip the package of the same name.
# Amazon Linux 2023 ships curl-minimal, and asking yum for "curl"
# there conflicts with it.
DOWNLOAD_TOOL = "curl"

# Package names tried in order when the download tool is still
# missing after the prerequisite pass. First success wins.
DOWNLOAD_TOOL_CANDIDATES: dict[str, tuple[str, ...]] = {
    "rhel": ("curl", "curl-minimal"),
    "debian": ("curl",),
}

DOWNLOAD_TOOL_GUIDANCE: dict[str, str] = {
    "rhel": (
        "Unable to install curl or curl-minimal automatically. "
        "Run 'sudo yum update -y' and try again, or keep curl-minimal if present."
    ),
    "debian": (
        "Unable to install curl automatically. "
        "Run 'sudo apt-get update' and 'sudo apt-get install -y curl' manually."
    ),
}
