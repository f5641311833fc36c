"""
Tests for the full run — step order, fatality policy, summary and
exit codes, all on simulated hosts.
"""

from pathlib import Path

import pytest

from conftest import URLS
from eks_toolbox.adapters.base import CommandResult
from eks_toolbox.core.context import InstallContext
from eks_toolbox.core.models.outcome import Outcome, ToolStatus
from eks_toolbox.core.services.orchestrator import run_install


def _steps(report) -> list[str]:
    return [s.step for s in report.steps]


class TestHappyPath:
    @pytest.mark.parametrize("distro_id", ["amzn", "rhel", "centos", "ubuntu", "debian"])
    def test_all_tools_present(self, install_ctx, distro_id: str):
        report = run_install(install_ctx(distro_id))
        assert report.exit_code == 0
        assert _steps(report) == [
            "detect", "prerequisites", "download-tool",
            "aws-cli", "eksctl", "kubectl", "summary",
        ]
        assert all(p.installed and p.version for p in report.summary)

    def test_debian_package_commands(self, install_ctx, runner):
        run_install(install_ctx("debian"))
        assert runner.argvs[0] == ["apt-get", "update", "-y"]
        assert runner.argvs[1] == ["apt-get", "install", "-y", "unzip", "tar", "curl"]

    def test_amzn_with_curl_skips_it(self, install_ctx, runner, search_path):
        search_path.add("curl")
        run_install(install_ctx("amzn"))
        assert runner.argvs[0] == ["yum", "install", "-y", "unzip", "tar"]

    def test_progress_banners(self, install_ctx):
        seen: list[str] = []
        run_install(install_ctx(), progress=seen.append)
        assert seen[1] == "Detected OS: ubuntu"
        assert "Installing kubectl..." in seen


class TestFatalSteps:
    def test_missing_os_release(self, make_config, runner, fetcher, tmp_path: Path):
        ctx = InstallContext(
            config=make_config(os_release_path=str(tmp_path / "missing")),
            runner=runner,
            fetcher=fetcher,
        )
        report = run_install(ctx)
        assert report.exit_code == 1
        assert _steps(report) == ["detect"]
        assert runner.call_count == 0

    def test_unsupported_os(self, install_ctx, runner):
        report = run_install(install_ctx("fedora"))
        assert report.exit_code == 1
        assert "Unsupported OS" in report.fatal.message
        assert runner.call_count == 0

    def test_prerequisite_failure_stops_run(self, install_ctx, runner, fetcher):
        runner.set_failure(("apt-get", "install"))
        report = run_install(install_ctx("ubuntu"))
        assert report.exit_code == 1
        assert _steps(report) == ["detect", "prerequisites"]
        assert fetcher.requested == []


class TestDegradedSteps:
    def test_aws_installer_failure_still_reaches_summary(self, install_ctx, runner):
        original = runner.on_unmatched

        def aws_installer_fails(argv):
            if argv[0].endswith("aws/install"):
                return CommandResult.failure(argv, returncode=1, stderr="boom")
            return original(argv)

        runner.on_unmatched = aws_installer_fails
        report = run_install(install_ctx())

        assert _steps(report)[-1] == "summary"
        aws = next(t for t in report.tools if t.tool == "aws-cli")
        assert aws.status is ToolStatus.FAILED
        lines = {p.cli: p.line() for p in report.summary}
        assert lines["aws"] == "aws: not installed"
        assert lines["eksctl"] == "0.185.0"
        assert report.exit_code == 2

    def test_kubectl_download_failure_does_not_abort(self, install_ctx, fetcher):
        fetcher.remove_body(URLS.kubectl_stable)
        report = run_install(install_ctx())
        kubectl = next(s for s in report.steps if s.step == "kubectl")
        assert kubectl.outcome is Outcome.DEGRADED
        assert [p.installed for p in report.summary] == [True, True, False]
        assert report.exit_code == 2

    def test_curl_chain_exhausted_continues(self, install_ctx, runner):
        runner.set_failure(("yum", "install", "-y", "curl"))
        runner.set_failure(("yum", "install", "-y", "curl-minimal"))
        report = run_install(install_ctx("amzn"))
        curl = next(s for s in report.steps if s.step == "download-tool")
        assert curl.outcome is Outcome.DEGRADED
        assert _steps(report)[-1] == "summary"


class TestDryRun:
    def test_dry_run_skips_summary(self, install_ctx, runner, fetcher):
        report = run_install(install_ctx(dry_run=True))
        assert report.exit_code == 0
        assert report.summary == []
        assert fetcher.requested == []

    def test_report_serialises(self, install_ctx):
        data = run_install(install_ctx()).to_dict()
        assert data["exit_code"] == 0
        assert data["summary"][0]["installed"] is True
        assert data["tools"][0]["status"] == "installed"
