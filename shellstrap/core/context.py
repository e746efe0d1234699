"""
Bootstrap context — the single source of truth for "what host are we setting up."

Built ONCE at startup by the entry point (CLI or tests) from the process
environment plus the optional YAML profile, then handed to every
component at construction time. Nothing downstream reads ``os.environ``.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from shellstrap.core.models.capability import AppendBlockEdit, Capability, PluginSpec

DEFAULT_FRAMEWORK_INSTALLER_URL = (
    "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
)


def run_timestamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


class BootstrapContext(BaseModel):
    """Immutable per-run configuration."""

    model_config = ConfigDict(frozen=True)

    home: Path
    current_shell: str | None = None          # $SHELL at startup
    shell_name: str = "zsh"

    framework_dir: Path                       # $ZSH or ~/.oh-my-zsh
    custom_dir: Path                          # $ZSH_CUSTOM or <framework>/custom
    zshrc: Path
    shells_file: Path = Path("/etc/shells")

    framework_installer_url: str = DEFAULT_FRAMEWORK_INSTALLER_URL
    network_hosts: list[str] = Field(default_factory=lambda: ["github.com", "google.com"])

    use_sudo: bool = True
    check_network: bool = True
    switch_shell: bool = True

    # Profile additions on top of the built-in catalog
    extra_capabilities: list[Capability] = Field(default_factory=list)
    extra_plugins: list[PluginSpec] = Field(default_factory=list)
    extra_blocks: list[AppendBlockEdit] = Field(default_factory=list)
    enable_plugins: list[str] = Field(default_factory=list)

    timestamp: str = Field(default_factory=run_timestamp)

    @property
    def plugin_root(self) -> Path:
        """Where plugin repositories are cloned."""
        return self.custom_dir / "plugins"

    def sudo(self, argv: list[str]) -> list[str]:
        """Prefix ``argv`` with sudo when the run needs elevation."""
        return ["sudo", *argv] if self.use_sudo else list(argv)
