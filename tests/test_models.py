"""
Tests for core models — Action/Receipt, Capability, edits, RunResult.
"""

from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

from shellstrap.core.models import (
    Action,
    AppendBlockEdit,
    Capability,
    ConfigEdit,
    Outcome,
    PluginSpec,
    Receipt,
    ReplaceLineEdit,
    RunResult,
    StepResult,
)

# ── Action / Receipt ─────────────────────────────────────────────────


class TestReceipt:
    def test_success(self):
        r = Receipt.success(adapter="shell", action_id="a1", output="done")
        assert r.ok
        assert not r.failed
        assert r.output == "done"
        assert r.ended_at is not None

    def test_failure(self):
        r = Receipt.failure(adapter="shell", action_id="a1", error="boom")
        assert r.failed
        assert r.error == "boom"

    def test_action_defaults(self):
        a = Action(id="install:zsh", adapter="shell")
        assert a.params == {}


# ── Capability ───────────────────────────────────────────────────────


class TestCapability:
    def test_probe_names_default_to_name(self):
        assert Capability(name="zsh").probe_names == ["zsh"]

    def test_probe_names_explicit(self):
        cap = Capability(name="curl", executables=["curl", "wget"])
        assert cap.probe_names == ["curl", "wget"]

    def test_path_only_capability_has_no_probe_names(self):
        cap = Capability(name="cnf", paths=["/usr/lib/command-not-found"])
        assert cap.probe_names == []

    def test_packages_default_to_name(self):
        assert Capability(name="fzf").packages_for("dnf") == ["fzf"]

    def test_packages_wildcard(self):
        cap = Capability(name="zsh", packages={"*": ["zsh"], "brew": ["zsh", "zsh-completions"]})
        assert cap.packages_for("apt") == ["zsh"]
        assert cap.packages_for("brew") == ["zsh", "zsh-completions"]

    def test_packages_unsupported_manager(self):
        cap = Capability(name="cnf", packages={"apt": ["command-not-found"]})
        assert cap.packages_for("brew") == []

    def test_string_package_coerced_to_list(self):
        cap = Capability.model_validate({"name": "bat", "packages": {"apt": "bat"}})
        assert cap.packages_for("apt") == ["bat"]

    def test_frozen(self):
        cap = Capability(name="zsh")
        with pytest.raises(ValidationError):
            cap.name = "bash"


class TestPluginSpec:
    def test_default_destination(self):
        spec = PluginSpec(name="zsh-z", source="https://example.com/zsh-z.git")
        assert spec.resolve_destination(Path("/p")) == Path("/p/zsh-z")

    def test_explicit_destination(self):
        spec = PluginSpec(name="x", source="u", destination=Path("/opt/x"))
        assert spec.resolve_destination(Path("/p")) == Path("/opt/x")


# ── Config edits ─────────────────────────────────────────────────────


class TestConfigEdit:
    def test_discriminated_union(self):
        adapter = TypeAdapter(ConfigEdit)
        edit = adapter.validate_python({"kind": "append-block", "name": "n", "block": "x=1"})
        assert isinstance(edit, AppendBlockEdit)
        edit = adapter.validate_python(
            {"kind": "replace-line", "name": "n", "pattern": "^x=", "replacement": "x=2"}
        )
        assert isinstance(edit, ReplaceLineEdit)

    def test_invalid_pattern_rejected(self):
        with pytest.raises(ValidationError, match="invalid regular expression"):
            ReplaceLineEdit(name="n", pattern="(", replacement="x")

    def test_blank_block_rejected(self):
        with pytest.raises(ValidationError):
            AppendBlockEdit(name="n", block="\n  \n")

    def test_block_outer_newlines_stripped(self):
        assert AppendBlockEdit(name="n", block="\nx=1\n\n").block == "x=1"


# ── Outcomes / RunResult ─────────────────────────────────────────────


class TestOutcome:
    def test_failed(self):
        assert Outcome.FAILED_FATAL.failed
        assert Outcome.FAILED_NON_FATAL.failed
        assert not Outcome.ALREADY_PRESENT.failed

    def test_changed(self):
        assert Outcome.INSTALLED.changed
        assert Outcome.APPLIED.changed
        assert not Outcome.ALREADY_PRESENT.changed


class TestRunResult:
    def test_empty_is_ok(self):
        result = RunResult()
        assert result.ok
        assert result.exit_code == 0

    def test_warnings_do_not_fail_run(self):
        result = RunResult()
        result.record(StepResult(step="install:fzf", outcome=Outcome.FAILED_NON_FATAL,
                                 remediation="sudo apt install -y fzf"))
        assert result.ok
        assert [s.step for s in result.warnings] == ["install:fzf"]

    def test_halted(self):
        result = RunResult(halted="install:zsh: boom")
        assert not result.ok
        assert result.exit_code == 1

    def test_record_replaces_same_step(self):
        result = RunResult()
        result.record(StepResult(step="s", outcome=Outcome.INSTALLED))
        result.record(StepResult(step="s", outcome=Outcome.ALREADY_PRESENT))
        assert result.outcome("s") is Outcome.ALREADY_PRESENT
        assert result.outcome("missing") is None

    def test_changed(self):
        result = RunResult()
        result.record(StepResult(step="a", outcome=Outcome.INSTALLED))
        result.record(StepResult(step="b", outcome=Outcome.ALREADY_PRESENT))
        assert result.changed == ["a"]

    def test_to_dict(self):
        result = RunResult(package_manager="apt")
        result.record(StepResult(step="plugin:zsh-z", outcome=Outcome.FAILED_NON_FATAL,
                                 message="clone failed", remediation="git clone u d"))
        d = result.to_dict()
        assert d["ok"] is True
        assert d["package_manager"] == "apt"
        assert d["steps"]["plugin:zsh-z"]["outcome"] == "failed-non-fatal"
        assert d["steps"]["plugin:zsh-z"]["remediation"] == "git clone u d"
        assert d["warnings"] == ["plugin:zsh-z"]
