"""
Tests for the login-shell switcher.
"""

from shellstrap.core.models.outcome import Outcome
from shellstrap.core.services.shell_switch import SHELL_STEP, ShellState, ShellSwitcher

from tests.conftest import FakeHost

ZSH = "/usr/bin/zsh"


class TestShellSwitcher:
    def test_already_current(self, context):
        context = context.model_copy(update={"current_shell": ZSH})
        host = FakeHost()
        switcher = ShellSwitcher(context, host.registry)
        result = switcher.set_default_shell(ZSH)
        assert result.outcome is Outcome.ALREADY_PRESENT
        assert host.shell.call_count == 0

    def test_registers_then_switches(self, context):
        host = FakeHost()
        switcher = ShellSwitcher(context, host.registry)
        result = switcher.set_default_shell(ZSH)
        assert result.outcome is Outcome.SWITCHED
        assert result.step == SHELL_STEP
        assert switcher.state is ShellState.SWITCHED
        assert host.shell.action_ids == ["shell:default:register", "shell:default:chsh"]

        register = host.shell.call_log[0].action.params
        assert register["argv"] == ["sudo", "tee", "-a", str(context.shells_file)]
        assert register["input"] == f"{ZSH}\n"
        assert host.shell.call_log[1].action.params["argv"] == ["chsh", "-s", ZSH]
        assert ZSH in context.shells_file.read_text().splitlines()

    def test_registered_shell_skips_registration(self, context):
        context.shells_file.write_text(f"/bin/bash\n{ZSH}\n")
        host = FakeHost()
        switcher = ShellSwitcher(context, host.registry)
        assert switcher.set_default_shell(ZSH).outcome is Outcome.SWITCHED
        assert host.shell.action_ids == ["shell:default:chsh"]

    def test_commented_entry_is_not_registered(self, context):
        context.shells_file.write_text(f"/bin/bash\n# {ZSH}\n")
        assert not ShellSwitcher(context, FakeHost().registry).is_registered(ZSH)

    def test_unreadable_registry_treated_as_unregistered(self, context, tmp_path):
        context = context.model_copy(update={"shells_file": tmp_path / "missing"})
        assert not ShellSwitcher(context, FakeHost().registry).is_registered(ZSH)

    def test_no_sudo_as_root(self, context):
        context = context.model_copy(update={"use_sudo": False})
        host = FakeHost()
        ShellSwitcher(context, host.registry).set_default_shell(ZSH)
        assert host.shell.call_log[0].action.params["argv"][0] == "tee"

    def test_registration_failure_skips_chsh(self, context):
        host = FakeHost()
        host.shell.set_failure("shell:default:register", "sudo: a password is required")
        switcher = ShellSwitcher(context, host.registry)
        result = switcher.set_default_shell(ZSH)
        assert result.outcome is Outcome.FAILED_NON_FATAL
        assert switcher.state is ShellState.REGISTERING
        assert host.shell.action_ids == ["shell:default:register"]
        assert f"echo {ZSH} | sudo tee -a" in result.remediation
        assert result.remediation.endswith(f"chsh -s {ZSH}")

    def test_chsh_failure_is_non_fatal(self, context):
        context.shells_file.write_text(f"{ZSH}\n")
        host = FakeHost()
        host.shell.set_failure("shell:default:chsh", "chsh: PAM: Authentication failure")
        switcher = ShellSwitcher(context, host.registry)
        result = switcher.set_default_shell(ZSH)
        assert result.outcome is Outcome.FAILED_NON_FATAL
        assert result.remediation == f"chsh -s {ZSH}"
        assert switcher.state is ShellState.REGISTERED
