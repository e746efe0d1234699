"""
Tests for the idempotent installer.
"""

import pytest

from shellstrap.core.models.capability import Capability
from shellstrap.core.models.outcome import Outcome
from shellstrap.core.services.installer import Installer
from shellstrap.core.services.package_managers import Apt, Brew, Dnf

from tests.conftest import FakeHost


@pytest.fixture
def make_installer(context):
    def _make(host: FakeHost, manager=Apt()):
        return Installer(context, host.registry, host.prober, manager)
    return _make


class TestEnsure:
    def test_already_present_has_no_side_effects(self, make_installer):
        host = FakeHost("apt", "zsh")
        result = make_installer(host).ensure(Capability(name="zsh", mandatory=True))
        assert result.outcome is Outcome.ALREADY_PRESENT
        assert result.step == "install:zsh"
        assert host.shell.call_count == 0

    def test_installs_missing(self, make_installer):
        host = FakeHost("apt")
        result = make_installer(host).ensure(Capability(name="zsh"))
        assert result.outcome is Outcome.INSTALLED
        assert host.shell.action_ids == ["refresh:apt", "install:zsh"]
        assert host.shell.call_log[1].action.params["argv"] == [
            "sudo", "apt", "install", "-y", "zsh",
        ]
        assert "zsh" in host.executables

    def test_second_ensure_is_noop(self, make_installer):
        host = FakeHost("apt")
        installer = make_installer(host)
        installer.ensure(Capability(name="zsh"))
        calls = host.shell.call_count
        assert installer.ensure(Capability(name="zsh")).outcome is Outcome.ALREADY_PRESENT
        assert host.shell.call_count == calls

    def test_refresh_runs_once_per_run(self, make_installer):
        host = FakeHost("apt")
        installer = make_installer(host)
        installer.ensure(Capability(name="zsh"))
        installer.ensure(Capability(name="git"))
        installer.ensure(Capability(name="fzf"))
        assert host.shell.action_ids.count("refresh:apt") == 1

    def test_no_refresh_when_everything_present(self, make_installer):
        host = FakeHost("apt", "zsh", "git")
        installer = make_installer(host)
        installer.ensure(Capability(name="zsh"))
        installer.ensure(Capability(name="git"))
        assert host.shell.call_count == 0

    def test_refresh_failure_does_not_block_install(self, make_installer):
        host = FakeHost("apt")
        host.shell.set_failure("refresh:apt", "Temporary failure resolving")
        result = make_installer(host).ensure(Capability(name="zsh"))
        assert result.outcome is Outcome.INSTALLED

    def test_manager_without_refresh(self, make_installer):
        host = FakeHost("dnf")
        make_installer(host, Dnf()).ensure(Capability(name="zsh"))
        assert host.shell.action_ids == ["install:zsh"]

    def test_per_manager_package_names(self, make_installer):
        host = FakeHost("brew")
        cap = Capability(name="fd", packages={"apt": ["fd-find"], "*": ["fd"]})
        make_installer(host, Brew()).ensure(cap)
        assert host.shell.call_log[0].action.params["argv"] == ["brew", "install", "fd"]

    def test_manager_is_the_cached_instance(self, make_installer):
        host = FakeHost("apt")
        manager = Apt()
        assert make_installer(host, manager).manager is manager


class TestFailures:
    def test_mandatory_failure_is_fatal(self, make_installer):
        host = FakeHost("apt")
        host.shell.set_failure("install:zsh", "E: Unable to locate package zsh")
        result = make_installer(host).ensure(Capability(name="zsh", mandatory=True))
        assert result.outcome is Outcome.FAILED_FATAL
        assert "Unable to locate" in result.message
        assert result.remediation == "sudo apt install -y zsh"

    def test_optional_failure_is_non_fatal(self, make_installer):
        host = FakeHost("apt")
        host.shell.set_failure("install:fzf")
        result = make_installer(host).ensure(Capability(name="fzf"))
        assert result.outcome is Outcome.FAILED_NON_FATAL
        assert result.remediation == "sudo apt install -y fzf"

    def test_no_package_manager(self, make_installer):
        host = FakeHost()
        result = make_installer(host, None).ensure(Capability(name="zsh", mandatory=True))
        assert result.outcome is Outcome.FAILED_FATAL
        assert result.remediation == "install zsh manually"
        assert host.shell.call_count == 0

    def test_no_package_for_manager(self, make_installer):
        host = FakeHost("brew")
        cap = Capability(name="command-not-found", packages={"apt": ["command-not-found"]})
        result = make_installer(host, Brew()).ensure(cap)
        assert result.outcome is Outcome.FAILED_NON_FATAL
        assert host.shell.call_count == 0
