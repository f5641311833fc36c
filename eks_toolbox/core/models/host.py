"""
Host model — what the OS detector learned about this machine.

``HostProfile`` is built once from ``/etc/os-release`` and never
mutated afterwards. ``DistroFamily`` is the closed set of families
the package installer knows how to drive.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from eks_toolbox.core.errors import UnsupportedOSError

UNSUPPORTED_OS_MESSAGE = (
    "Unsupported OS. Please use Amazon Linux, RHEL, CentOS, Ubuntu or Debian."
)


class DistroFamily(str, Enum):
    """Package-manager family of a supported distribution."""

    RHEL = "rhel"
    DEBIAN = "debian"

    @classmethod
    def from_distro_id(cls, distro_id: str) -> DistroFamily:
        """Map an os-release ``ID`` to its family.

        Raises:
            UnsupportedOSError: ``distro_id`` is not in the supported set.
        """
        family = _DISTRO_FAMILIES.get(distro_id.strip().lower())
        if family is None:
            raise UnsupportedOSError(f"{UNSUPPORTED_OS_MESSAGE} (detected: {distro_id!r})")
        return family

    @property
    def package_manager(self) -> str:
        return "yum" if self is DistroFamily.RHEL else "apt-get"


_DISTRO_FAMILIES: dict[str, DistroFamily] = {
    "amzn": DistroFamily.RHEL,
    "rhel": DistroFamily.RHEL,
    "centos": DistroFamily.RHEL,
    "ubuntu": DistroFamily.DEBIAN,
    "debian": DistroFamily.DEBIAN,
}

SUPPORTED_DISTRO_IDS: tuple[str, ...] = tuple(_DISTRO_FAMILIES)


class HostProfile(BaseModel):
    """Immutable description of the host, derived from os-release."""

    model_config = ConfigDict(frozen=True)

    distro_id: str
    id_like: str = ""
    version_id: str = ""
    pretty_name: str = ""
    machine: str = ""

    @property
    def family(self) -> DistroFamily:
        return DistroFamily.from_distro_id(self.distro_id)

    def to_dict(self) -> dict:
        return {
            "distro_id": self.distro_id,
            "id_like": self.id_like,
            "version_id": self.version_id,
            "pretty_name": self.pretty_name,
            "machine": self.machine,
            "family": self.family.value,
            "package_manager": self.family.package_manager,
        }
