"""
Tests for OS detection — os-release parsing and family mapping.
"""

from pathlib import Path

import pytest

from eks_toolbox.core.errors import OSDetectionError, UnsupportedOSError, UnsupportedPlatformError
from eks_toolbox.core.models.host import (
    SUPPORTED_DISTRO_IDS,
    UNSUPPORTED_OS_MESSAGE,
    DistroFamily,
    HostProfile,
)
from eks_toolbox.core.services.os_detect import detect_host, parse_os_release


class TestParseOsRelease:
    def test_quoted_and_bare_values(self):
        fields = parse_os_release('ID="amzn"\nVERSION_ID=2023\nNAME=\'Amazon Linux\'\n')
        assert fields == {"ID": "amzn", "VERSION_ID": "2023", "NAME": "Amazon Linux"}

    def test_skips_comments_and_garbage(self):
        fields = parse_os_release("# comment\n\nnot a field\nID=debian\n")
        assert fields == {"ID": "debian"}

    def test_unbalanced_quotes_tolerated(self):
        fields = parse_os_release('PRETTY_NAME="Broken\nID=ubuntu\n')
        assert fields["ID"] == "ubuntu"
        assert fields["PRETTY_NAME"] == "Broken"


class TestFamilyMapping:
    @pytest.mark.parametrize("distro_id,family", [
        ("amzn", DistroFamily.RHEL),
        ("rhel", DistroFamily.RHEL),
        ("centos", DistroFamily.RHEL),
        ("ubuntu", DistroFamily.DEBIAN),
        ("debian", DistroFamily.DEBIAN),
    ])
    def test_supported(self, distro_id: str, family: DistroFamily):
        assert DistroFamily.from_distro_id(distro_id) is family

    @pytest.mark.parametrize("distro_id", ["fedora", "alpine", "arch", "opensuse", ""])
    def test_unsupported(self, distro_id: str):
        with pytest.raises(UnsupportedOSError, match="Unsupported OS"):
            DistroFamily.from_distro_id(distro_id)

    def test_supported_set_matches_message(self):
        assert set(SUPPORTED_DISTRO_IDS) == {"amzn", "rhel", "centos", "ubuntu", "debian"}
        for distro_id in SUPPORTED_DISTRO_IDS:
            assert DistroFamily.from_distro_id(distro_id) in DistroFamily
        assert "Amazon Linux, RHEL, CentOS, Ubuntu or Debian" in UNSUPPORTED_OS_MESSAGE

    def test_package_manager_names(self):
        assert DistroFamily.RHEL.package_manager == "yum"
        assert DistroFamily.DEBIAN.package_manager == "apt-get"


class TestDetectHost:
    @pytest.mark.parametrize("distro_id", ["amzn", "rhel", "centos", "ubuntu", "debian"])
    def test_supported_hosts(self, os_release, distro_id: str):
        host = detect_host(os_release(distro_id))
        assert host.distro_id == distro_id
        assert host.machine == "x86_64"

    def test_profile_fields(self, os_release):
        host = detect_host(os_release("amzn"))
        assert host.version_id == "2023"
        assert host.id_like == "fedora"
        assert host.pretty_name.startswith("Amazon Linux")
        assert host.to_dict()["package_manager"] == "yum"

    def test_missing_file_is_fatal(self, tmp_path: Path):
        with pytest.raises(OSDetectionError, match="Cannot detect OS"):
            detect_host(tmp_path / "nope")

    def test_missing_id_is_fatal(self, tmp_path: Path):
        path = tmp_path / "os-release"
        path.write_text('NAME="Mystery"\n')
        with pytest.raises(OSDetectionError, match="no ID"):
            detect_host(path)

    @pytest.mark.parametrize("distro_id", ["fedora", "alpine"])
    def test_unsupported_distro(self, os_release, distro_id: str):
        with pytest.raises(UnsupportedOSError) as exc:
            detect_host(os_release(distro_id))
        assert UNSUPPORTED_OS_MESSAGE in str(exc.value)

    def test_id_like_does_not_rescue_unsupported_id(self, tmp_path: Path):
        path = tmp_path / "os-release"
        path.write_text("ID=linuxmint\nID_LIKE=\"ubuntu debian\"\n")
        with pytest.raises(UnsupportedOSError):
            detect_host(path)

    def test_arm_is_rejected(self, os_release):
        with pytest.raises(UnsupportedPlatformError, match="aarch64"):
            detect_host(os_release("ubuntu"), machine="aarch64")

    def test_profile_is_frozen(self):
        host = HostProfile(distro_id="debian")
        with pytest.raises(Exception):
            host.distro_id = "ubuntu"
