"""
Declarative bootstrap inputs — capabilities, plugins and config edits.

These are declared once when the run starts (from the built-in catalog
plus the optional YAML profile) and never mutated afterwards.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Capability(BaseModel):
    """A named external tool or package the shell environment needs.

    Detection: the capability counts as present when any one of
    ``executables`` resolves on PATH or any one of ``paths`` exists (for
    packages that ship no executable). ``packages`` maps a package-manager
    name to the package(s) that provide the capability there; the ``"*"``
    key applies to every manager without its own entry. A manager that
    matches neither cannot install it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    executables: list[str] = Field(default_factory=list)
    paths: list[str] = Field(default_factory=list)
    packages: dict[str, list[str]] = Field(default_factory=dict)
    mandatory: bool = False

    @field_validator("packages", mode="before")
    @classmethod
    def _coerce_packages(cls, value: object) -> object:
        # Profiles may write ``apt: zsh`` instead of ``apt: [zsh]``
        if isinstance(value, dict):
            return {
                pm: [pkgs] if isinstance(pkgs, str) else pkgs
                for pm, pkgs in value.items()
            }
        return value

    @property
    def probe_names(self) -> list[str]:
        """Executables to probe; defaults to the capability name."""
        if self.executables or self.paths:
            return list(self.executables)
        return [self.name]

    def packages_for(self, manager: str) -> list[str]:
        """Package names to install with ``manager`` (empty = unsupported)."""
        if not self.packages:
            return [self.name]
        return list(self.packages.get(manager, self.packages.get("*", [])))


class PluginSpec(BaseModel):
    """A plugin repository to clone into the framework's plugin root."""

    model_config = ConfigDict(frozen=True)

    name: str
    source: str
    destination: Path | None = None   # None = <plugin root>/<name>

    def resolve_destination(self, plugin_root: Path) -> Path:
        return self.destination if self.destination else plugin_root / self.name


class ReplaceLineEdit(BaseModel):
    """Replace the first line matching ``pattern`` with ``replacement``.

    With no match the replacement is inserted before the first line
    matching ``anchor`` (when given and found), else appended.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["replace-line"] = "replace-line"
    name: str
    pattern: str
    replacement: str
    anchor: str | None = None

    @field_validator("pattern", "anchor")
    @classmethod
    def _compiles(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"invalid regular expression {value!r}: {e}") from e
        return value


class AppendBlockEdit(BaseModel):
    """Append ``block`` to the end of the file unless it is already there."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["append-block"] = "append-block"
    name: str
    block: str

    @field_validator("block")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("block must not be empty")
        return value.strip("\n")


ConfigEdit = Annotated[
    Union[ReplaceLineEdit, AppendBlockEdit],
    Field(discriminator="kind"),
]
