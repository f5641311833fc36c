"""
Shared test fixtures and configuration.

Hosts are simulated: os-release files in tmp_path, a controllable
search path (``shutil.which``), and mock runner/fetcher adapters.
Nothing here touches the real package manager or network.
"""

from __future__ import annotations

import io
import platform
import shutil
import tarfile
import zipfile
from pathlib import Path

import pytest

from eks_toolbox.adapters.base import CommandResult
from eks_toolbox.adapters.mock import MockFetcher, MockRunner
from eks_toolbox.core.context import InstallContext
from eks_toolbox.core.models.config import ArtifactUrls, ToolboxConfig

# ── Simulated os-release files ───────────────────────────────────

OS_RELEASES: dict[str, str] = {
    "amzn": 'NAME="Amazon Linux"\nVERSION="2023"\nID="amzn"\nID_LIKE="fedora"\n'
            'VERSION_ID="2023"\nPRETTY_NAME="Amazon Linux 2023.4.20240611"\n',
    "rhel": 'NAME="Red Hat Enterprise Linux"\nID="rhel"\nID_LIKE="fedora"\n'
            'VERSION_ID="9.4"\nPRETTY_NAME="Red Hat Enterprise Linux 9.4 (Plow)"\n',
    "centos": 'NAME="CentOS Stream"\nID="centos"\nID_LIKE="rhel fedora"\n'
              'VERSION_ID="9"\nPRETTY_NAME="CentOS Stream 9"\n',
    "ubuntu": "NAME=\"Ubuntu\"\nID=ubuntu\nID_LIKE=debian\nVERSION_ID=\"24.04\"\n"
              "PRETTY_NAME=\"Ubuntu 24.04 LTS\"\n",
    "debian": 'PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"\nNAME="Debian GNU/Linux"\n'
              'VERSION_ID="12"\nID=debian\n',
    "fedora": 'NAME="Fedora Linux"\nID=fedora\nVERSION_ID=40\n',
    "alpine": 'NAME="Alpine Linux"\nID=alpine\nVERSION_ID=3.20.0\n',
}

# ── Version outputs the fake CLIs print ──────────────────────────

AWS_VERSION = "aws-cli/2.17.0 Python/3.11.9 Linux/6.1.0 exe/x86_64.amzn.2023"
EKSCTL_VERSION = "0.185.0"
KUBECTL_VERSION = "Client Version: v1.30.2\nKustomize Version: v5.0.4-0.20230601165947-6ce0bf390ce3"
KUBECTL_STABLE = "v1.30.2"

URLS = ArtifactUrls()
KUBECTL_URL = URLS.kubectl_binary.format(version=KUBECTL_STABLE)


@pytest.fixture(autouse=True)
def x86_host(monkeypatch):
    """Pretend every test runs on x86_64."""
    monkeypatch.setattr(platform, "machine", lambda: "x86_64")


@pytest.fixture
def os_release(tmp_path: Path):
    """Factory: write a simulated os-release file and return its path."""

    def write(distro_id: str) -> Path:
        path = tmp_path / f"os-release-{distro_id}"
        path.write_text(OS_RELEASES.get(distro_id, f"ID={distro_id}\n"))
        return path

    return write


@pytest.fixture
def search_path(monkeypatch) -> set[str]:
    """Controllable search path: CLIs in the returned set resolve."""
    present: set[str] = set()

    def fake_which(name, mode=None, path=None):
        return f"/usr/local/bin/{name}" if name in present else None

    monkeypatch.setattr(shutil, "which", fake_which)
    return present


@pytest.fixture
def make_config(tmp_path: Path, os_release):
    """Factory: ToolboxConfig rooted in tmp_path for a given distro."""

    def build(distro_id: str = "ubuntu", **overrides) -> ToolboxConfig:
        fields = {
            "bin_dir": str(tmp_path / "bin"),
            "aws_install_dir": str(tmp_path / "aws-cli"),
            "scratch_root": str(tmp_path / "scratch"),
            "os_release_path": str(os_release(distro_id)),
        }
        fields.update(overrides)
        return ToolboxConfig(**fields)

    return build


# ── Release artifacts ────────────────────────────────────────────


def build_zip(members: dict[str, tuple[bytes, int]]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, (data, mode) in members.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            zf.writestr(info, data)
    return buf.getvalue()


def build_tgz(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def aws_zip() -> bytes:
    return build_zip({
        "aws/install": (b"#!/bin/sh\nexit 0\n", 0o755),
        "aws/dist/aws": (b"\x7fELF", 0o755),
        "aws/README.md": (b"AWS CLI v2\n", 0o644),
    })


@pytest.fixture
def eksctl_tgz() -> bytes:
    return build_tgz({"eksctl": b"\x7fELF eksctl"})


@pytest.fixture
def fetcher(aws_zip: bytes, eksctl_tgz: bytes) -> MockFetcher:
    """Release host serving all three artifacts."""
    return MockFetcher({
        URLS.aws_cli: aws_zip,
        URLS.eksctl: eksctl_tgz,
        URLS.kubectl_stable: KUBECTL_STABLE + "\n",
        KUBECTL_URL: b"\x7fELF kubectl",
    })


@pytest.fixture
def runner(search_path: set[str]) -> MockRunner:
    """Host whose installers work: placing a binary puts it on the search path."""

    def installed(argv: list[str]) -> CommandResult:
        # install -m 0755 SRC TARGET
        if argv[:3] == ["install", "-m", "0755"]:
            search_path.add(Path(argv[4]).name)
        # <scratch>/aws/install -i DIR -b BIN --update
        elif argv[0].endswith("aws/install"):
            search_path.add("aws")
        return CommandResult.success(argv)

    mock = MockRunner(on_unmatched=installed)
    mock.set_output(("aws", "--version"), AWS_VERSION)
    mock.set_output(("eksctl", "version"), EKSCTL_VERSION)
    mock.set_output(("kubectl", "version", "--client"), KUBECTL_VERSION)
    return mock


@pytest.fixture
def install_ctx(make_config, runner: MockRunner, fetcher: MockFetcher):
    """Factory: InstallContext on a simulated host with working adapters."""

    def build(distro_id: str = "ubuntu", **kwargs) -> InstallContext:
        return InstallContext(
            config=make_config(distro_id),
            runner=runner,
            fetcher=fetcher,
            **kwargs,
        )

    return build
