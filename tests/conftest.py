"""
Shared test fixtures and configuration.

``FakeHost`` stands in for the machine being bootstrapped: executables
and paths it "has", a MockAdapter per adapter name whose success
callbacks simulate the side effects (installed binaries, cloned
directories, the framework installer writing ``.zshrc``), and a prober
wired to all of it.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from shellstrap.adapters.base import ExecutionContext
from shellstrap.adapters.mock import MockAdapter
from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.context import BootstrapContext
from shellstrap.core.services.probe import CapabilityProber

ZSHRC_TEMPLATE = """\
export ZSH="$HOME/.oh-my-zsh"

ZSH_THEME="robbyrussell"

plugins=(git)

source $ZSH/oh-my-zsh.sh
"""

# install:<capability> → what appears on the host afterwards
_INSTALLED_PATHS = {"command-not-found": "/usr/lib/command-not-found"}


class FakeHost:
    def __init__(self, *executables: str, paths: tuple[str, ...] = ()):
        self.executables: set[str] = set(executables)
        self.paths: set[str] = set(paths)
        self.which_calls: list[str] = []

        self.shell = MockAdapter(adapter_name="shell", on_success=self._shell_effect)
        self.git = MockAdapter(adapter_name="git", on_success=self._git_effect)

        self.registry = AdapterRegistry()
        self.registry.register(self.shell)
        self.registry.register(self.git)
        self.prober = CapabilityProber(which=self.which, exists=self.exists,
                                       registry=self.registry)

    def which(self, name: str) -> str | None:
        self.which_calls.append(name)
        return f"/usr/bin/{name}" if name in self.executables else None

    def exists(self, path: str) -> bool:
        return path in self.paths

    # ── Simulated side effects ──────────────────────────────────

    def _shell_effect(self, ctx: ExecutionContext) -> None:
        action_id = ctx.action.id
        params = ctx.action.params

        if action_id.startswith("install:"):
            name = action_id.split(":", 1)[1]
            if name in _INSTALLED_PATHS:
                self.paths.add(_INSTALLED_PATHS[name])
            else:
                self.executables.add(name)

        elif action_id == "framework:oh-my-zsh:run":
            framework_dir = Path(params["env"]["ZSH"])
            framework_dir.mkdir(parents=True, exist_ok=True)
            (framework_dir / "oh-my-zsh.sh").write_text("# oh-my-zsh\n")
            zshrc = Path(params["cwd"]) / ".zshrc"
            if not zshrc.exists():
                zshrc.write_text(ZSHRC_TEMPLATE)

        elif action_id == "shell:default:register":
            with open(params["argv"][-1], "a") as fh:
                fh.write(params["input"])

    def _git_effect(self, ctx: ExecutionContext) -> None:
        Path(ctx.action.params["destination"]).mkdir(parents=True)


@pytest.fixture
def host() -> FakeHost:
    """A host with only apt on PATH."""
    return FakeHost("apt")


@pytest.fixture
def context(tmp_path: Path) -> BootstrapContext:
    """Run context rooted in a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    etc = tmp_path / "etc"
    etc.mkdir()
    shells = etc / "shells"
    shells.write_text("# /etc/shells: valid login shells\n/bin/sh\n/bin/bash\n")

    framework_dir = home / ".oh-my-zsh"
    return BootstrapContext(
        home=home,
        current_shell="/bin/bash",
        framework_dir=framework_dir,
        custom_dir=framework_dir / "custom",
        zshrc=home / ".zshrc",
        shells_file=shells,
        check_network=False,
        timestamp="20260101_000000",
    )
