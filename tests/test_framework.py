"""
Tests for the oh-my-zsh framework installer.
"""

from shellstrap.core.models.outcome import Outcome
from shellstrap.core.services.framework import FRAMEWORK_STEP, FrameworkInstaller

from tests.conftest import FakeHost


class TestFrameworkInstaller:
    def test_already_installed(self, context):
        context.framework_dir.mkdir()
        (context.framework_dir / "oh-my-zsh.sh").write_text("")
        host = FakeHost("curl")
        result = FrameworkInstaller(context, host.registry, host.prober).ensure()
        assert result.outcome is Outcome.ALREADY_PRESENT
        assert host.shell.call_count == 0

    def test_installs_with_curl(self, context):
        host = FakeHost("curl")
        result = FrameworkInstaller(context, host.registry, host.prober).ensure()
        assert result.outcome is Outcome.INSTALLED
        assert result.step == FRAMEWORK_STEP
        assert host.shell.action_ids == [
            "framework:oh-my-zsh:download",
            "framework:oh-my-zsh:run",
        ]
        download = host.shell.call_log[0].action.params
        assert download["argv"][:2] == ["curl", "-fsSL"]
        assert download["argv"][-1] == context.framework_installer_url

    def test_unattended_environment(self, context):
        host = FakeHost("curl")
        FrameworkInstaller(context, host.registry, host.prober).ensure()
        run = host.shell.call_log[1].action.params
        assert run["argv"] == ["sh", "-s", "--", "--unattended"]
        assert run["env"] == {"ZSH": str(context.framework_dir), "RUNZSH": "no", "CHSH": "no"}
        assert run["input"].startswith("[mock] executed")
        assert (context.framework_dir / "oh-my-zsh.sh").is_file()
        assert context.zshrc.is_file()

    def test_falls_back_to_wget(self, context):
        host = FakeHost("wget")
        installer = FrameworkInstaller(context, host.registry, host.prober)
        assert installer.download_argv()[:2] == ["wget", "-qO-"]

    def test_no_downloader_is_fatal(self, context):
        host = FakeHost()
        result = FrameworkInstaller(context, host.registry, host.prober).ensure()
        assert result.outcome is Outcome.FAILED_FATAL
        assert "--unattended" in result.remediation
        assert host.shell.call_count == 0

    def test_download_failure_is_fatal(self, context):
        host = FakeHost("curl")
        host.shell.set_failure("framework:oh-my-zsh:download", "Could not resolve host")
        result = FrameworkInstaller(context, host.registry, host.prober).ensure()
        assert result.outcome is Outcome.FAILED_FATAL
        assert "Could not resolve host" in result.message
        assert host.shell.call_count == 1

    def test_installer_failure_is_fatal(self, context):
        host = FakeHost("curl")
        host.shell.set_failure("framework:oh-my-zsh:run")
        result = FrameworkInstaller(context, host.registry, host.prober).ensure()
        assert result.outcome is Outcome.FAILED_FATAL

    def test_incomplete_directory_left_alone(self, context):
        context.framework_dir.mkdir()
        (context.framework_dir / "notes.txt").write_text("mine")
        host = FakeHost("curl")
        result = FrameworkInstaller(context, host.registry, host.prober).ensure()
        assert result.outcome is Outcome.FAILED_FATAL
        assert result.remediation.startswith("mv ")
        assert "backup_20260101_000000" in result.remediation
        assert (context.framework_dir / "notes.txt").read_text() == "mine"
        assert host.shell.call_count == 0
