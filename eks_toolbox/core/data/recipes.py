"""
Tool recipes — how each of the three CLIs is fetched and placed.

Pure data. URLs are not stored here; ``url`` / ``version_url`` name
a field of ``ToolboxConfig.urls`` so every endpoint stays overridable
from eks-toolbox.yml.

Recipe fields:
    label        Human-readable name for banners.
    cli          Executable name resolved on the search path.
    url          ``ArtifactUrls`` field holding the artifact URL.
    version_url  ``ArtifactUrls`` field of a "latest stable" text file
                 whose body is substituted for ``{version}`` in ``url``.
    archive      ``zip`` | ``tar.gz`` | ``binary``.
    filename     Name the artifact is saved under in the scratch dir.
    member       Path of the executable inside the archive (or the
                 saved binary itself).
    install      ``aws_installer`` (run the bundled installer) or
                 ``place_binary`` (copy into bin_dir, mode 0755).
    verify       Version-query argv.
    hint         Shown when the tool is not resolvable after install.
"""

from __future__ import annotations

TOOL_RECIPES: dict[str, dict] = {
    "aws-cli": {
        "label": "AWS CLI v2",
        "cli": "aws",
        "url": "aws_cli",
        "archive": "zip",
        "filename": "awscliv2.zip",
        # Bundled installer with embedded Python; installs into
        # aws_install_dir and links aws/aws_completer into bin_dir.
        "member": "aws/install",
        "install": "aws_installer",
        "verify": ["aws", "--version"],
        "hint": "AWS CLI install failed or aws not in PATH. You may need to add {bin_dir} to PATH.",
    },
    "eksctl": {
        "label": "eksctl",
        "cli": "eksctl",
        "url": "eksctl",
        "archive": "tar.gz",
        "filename": "eksctl_Linux_amd64.tar.gz",
        "member": "eksctl",
        "install": "place_binary",
        "verify": ["eksctl", "version"],
        "hint": "eksctl not found after install. Check {bin_dir} permissions.",
    },
    "kubectl": {
        "label": "kubectl",
        "cli": "kubectl",
        # dl.k8s.io/release/stable.txt → /release/{version}/bin/linux/amd64/kubectl
        "url": "kubectl_binary",
        "version_url": "kubectl_stable",
        "archive": "binary",
        "filename": "kubectl",
        "member": "kubectl",
        "install": "place_binary",
        "verify": ["kubectl", "version", "--client"],
        "hint": "kubectl not found after install. Check {bin_dir} is on PATH.",
    },
}

# Install order is the order of the run
TOOL_ORDER: tuple[str, ...] = ("aws-cli", "eksctl", "kubectl")
