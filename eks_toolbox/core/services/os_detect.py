"""
OS detection — read /etc/os-release into a HostProfile.

Read-only. A missing identification file and an unsupported
distribution are both fatal: no package-manager strategy can be
chosen without them.
"""

from __future__ import annotations

import logging
import platform
import shlex
from pathlib import Path

from eks_toolbox.core.errors import OSDetectionError, UnsupportedPlatformError
from eks_toolbox.core.models.host import DistroFamily, HostProfile

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")

# Release artifacts are only fetched for x86_64
SUPPORTED_MACHINES = frozenset({"x86_64", "amd64"})


def parse_os_release(text: str) -> dict[str, str]:
    """Parse ``KEY=value`` lines, honouring shell quoting.

    Comments, blank lines and malformed lines are skipped.
    """
    fields: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip().strip("\"'")]
        fields[key.strip()] = parts[0] if parts else ""
    return fields


def read_os_release(path: Path = OS_RELEASE_PATH) -> dict[str, str]:
    """Read and parse an os-release file.

    Raises:
        OSDetectionError: The file is missing or unreadable.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise OSDetectionError(f"Cannot detect OS: {path} not found.") from e
    except OSError as e:
        raise OSDetectionError(f"Cannot detect OS: {path} unreadable ({e}).") from e
    return parse_os_release(text)


def detect_host(
    path: Path = OS_RELEASE_PATH,
    *,
    machine: str | None = None,
) -> HostProfile:
    """Build the HostProfile and validate it against the supported set.

    Args:
        path: os-release file to read.
        machine: Override for ``platform.machine()`` (tests).

    Raises:
        OSDetectionError: os-release missing or lacks an ``ID``.
        UnsupportedOSError: ``ID`` is not a supported distribution.
        UnsupportedPlatformError: Architecture is not x86_64.
    """
    fields = read_os_release(path)
    distro_id = fields.get("ID", "").strip().lower()
    if not distro_id:
        raise OSDetectionError(f"Cannot detect OS: no ID field in {path}.")

    machine = machine if machine is not None else platform.machine()

    host = HostProfile(
        distro_id=distro_id,
        id_like=fields.get("ID_LIKE", ""),
        version_id=fields.get("VERSION_ID", ""),
        pretty_name=fields.get("PRETTY_NAME", ""),
        machine=machine,
    )

    # Total mapping; raises for anything outside the supported set
    family = DistroFamily.from_distro_id(host.distro_id)

    if machine.lower() not in SUPPORTED_MACHINES:
        raise UnsupportedPlatformError(
            f"Unsupported architecture {machine!r}: only x86_64/amd64 artifacts are installed."
        )

    logger.info("Detected OS: %s", host.distro_id)
    logger.debug("Host profile: %s (family=%s)", host.pretty_name or host.distro_id, family.value)
    return host
