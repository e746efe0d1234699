"""
Configuration loader — builds the BootstrapContext.

Reads the process environment once and merges the optional YAML
profile (``shellstrap.yml``) validated against a Pydantic schema.
This is the only place that looks at environment variables.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shellstrap.core.context import DEFAULT_FRAMEWORK_INSTALLER_URL, BootstrapContext
from shellstrap.core.models.capability import AppendBlockEdit, Capability, PluginSpec

logger = logging.getLogger(__name__)

# Default profile filename
PROFILE_FILE = "shellstrap.yml"


class ConfigError(Exception):
    """Raised when the bootstrap profile is invalid or unreadable."""


class Profile(BaseModel):
    """User-supplied additions to the built-in catalog."""

    model_config = ConfigDict(extra="forbid")

    zshrc: Path | None = None
    shells_file: Path | None = None
    framework_installer_url: str = DEFAULT_FRAMEWORK_INSTALLER_URL
    network_hosts: list[str] | None = None
    check_network: bool = True
    switch_shell: bool = True
    capabilities: list[Capability] = Field(default_factory=list)
    plugins: list[PluginSpec] = Field(default_factory=list)
    blocks: list[AppendBlockEdit] = Field(default_factory=list)
    enable_plugins: list[str] = Field(default_factory=list)


def find_profile_file(env: Mapping[str, str], home: Path) -> Path | None:
    """Locate the profile: $SHELLSTRAP_CONFIG, then ~/.config/shellstrap/shellstrap.yml."""
    explicit = env.get("SHELLSTRAP_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    xdg = env.get("XDG_CONFIG_HOME")
    config_home = Path(xdg) if xdg else home / ".config"
    candidate = config_home / "shellstrap" / PROFILE_FILE
    if candidate.is_file():
        return candidate
    return None


def load_profile(path: Path) -> Profile:
    """Load and validate a YAML profile.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Profile not found: {path}")

    logger.debug("Loading profile from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Profile()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        profile = Profile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid profile {path}: {e}") from e

    logger.info(
        "Loaded profile %s (%d extra plugins, %d extra blocks)",
        path, len(profile.plugins), len(profile.blocks),
    )
    return profile


def build_context(
    env: Mapping[str, str] | None = None,
    config_path: Path | None = None,
    **overrides: Any,
) -> BootstrapContext:
    """Build the run context from environment variables and the profile.

    Args:
        env: Environment mapping (default: ``os.environ``).
        config_path: Explicit profile path. If None, the default
            locations are searched and a missing profile is fine.
        overrides: Field values that win over everything else
            (used by CLI flags).
    """
    env = os.environ if env is None else env

    home = Path(env.get("HOME") or Path.home()).expanduser()
    if config_path is None:
        config_path = find_profile_file(env, home)
    profile = load_profile(config_path) if config_path else Profile()

    framework_dir = Path(env["ZSH"]).expanduser() if env.get("ZSH") else home / ".oh-my-zsh"
    custom_dir = (
        Path(env["ZSH_CUSTOM"]).expanduser()
        if env.get("ZSH_CUSTOM")
        else framework_dir / "custom"
    )

    values: dict[str, Any] = {
        "home": home,
        "current_shell": _login_shell(env),
        "framework_dir": framework_dir,
        "custom_dir": custom_dir,
        "zshrc": (profile.zshrc.expanduser() if profile.zshrc else home / ".zshrc"),
        "framework_installer_url": profile.framework_installer_url,
        "use_sudo": _needs_sudo(),
        "check_network": profile.check_network,
        "switch_shell": profile.switch_shell,
        "extra_capabilities": profile.capabilities,
        "extra_plugins": profile.plugins,
        "extra_blocks": profile.blocks,
        "enable_plugins": profile.enable_plugins,
    }
    if profile.shells_file:
        values["shells_file"] = profile.shells_file
    if profile.network_hosts is not None:
        values["network_hosts"] = profile.network_hosts
    values.update({k: v for k, v in overrides.items() if v is not None})

    return BootstrapContext(**values)


def _login_shell(env: Mapping[str, str]) -> str | None:
    """The login shell from the passwd database, falling back to $SHELL.

    $SHELL is only refreshed at the next login, so after a ``chsh`` in an
    earlier run the passwd entry is the accurate one.
    """
    try:
        import pwd

        return pwd.getpwuid(os.getuid()).pw_shell or env.get("SHELL")
    except (ImportError, KeyError):
        return env.get("SHELL")


def _needs_sudo() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is None or geteuid() != 0
