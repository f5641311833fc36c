"""
Toolbox configuration model — loaded from eks-toolbox.yml.

Every field has a default matching a stock install, so an absent
config file is the normal case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class ArtifactUrls(BaseModel):
    """Release endpoints for each tool. ``{version}`` is substituted for kubectl."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    aws_cli: str = "https://awscli.amazonaws.com/awscli-exe-linux-x86_64.zip"
    eksctl: str = (
        "https://github.com/eksctl-io/eksctl/releases/latest/download/"
        "eksctl_Linux_amd64.tar.gz"
    )
    kubectl_stable: str = "https://dl.k8s.io/release/stable.txt"
    kubectl_binary: str = "https://dl.k8s.io/release/{version}/bin/linux/amd64/kubectl"

    @field_validator("*")
    @classmethod
    def _http_only(cls, value: str) -> str:
        if not value.startswith(("https://", "http://")):
            raise ValueError(f"URL must be http(s): {value!r}")
        return value


class ToolboxConfig(BaseModel):
    """Resolved installer configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bin_dir: str = "/usr/local/bin"
    aws_install_dir: str = "/usr/local/aws-cli"
    scratch_root: str | None = None       # None = system temp dir
    os_release_path: str = "/etc/os-release"

    download_timeout: int = Field(default=300, gt=0)
    command_timeout: int = Field(default=600, gt=0)

    sudo_interactive: bool = True
    sudo_password: SecretStr | None = None

    urls: ArtifactUrls = Field(default_factory=ArtifactUrls)
