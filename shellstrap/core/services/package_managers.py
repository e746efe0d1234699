"""
Package managers — one small variant per supported host tool.

Selection happens once per run: the first manager in ``PRIORITY`` whose
executable resolves wins, and the caller keeps that instance for the
rest of the run.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from shellstrap.core.services.probe import CapabilityProber

logger = logging.getLogger(__name__)


class PackageManager:
    """Install-command builder for one host package manager."""

    name: ClassVar[str]
    install_cmd: ClassVar[list[str]]
    refresh_cmd: ClassVar[list[str] | None] = None   # index refresh before first install
    needs_sudo: ClassVar[bool] = True

    @property
    def executable(self) -> str:
        return self.install_cmd[0]

    def install_argv(self, packages: list[str], use_sudo: bool = True) -> list[str]:
        argv = [*self.install_cmd, *packages]
        return self._elevate(argv, use_sudo)

    def refresh_argv(self, use_sudo: bool = True) -> list[str] | None:
        if self.refresh_cmd is None:
            return None
        return self._elevate(list(self.refresh_cmd), use_sudo)

    def _elevate(self, argv: list[str], use_sudo: bool) -> list[str]:
        if self.needs_sudo and use_sudo:
            return ["sudo", *argv]
        return argv

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class Apt(PackageManager):
    name = "apt"
    install_cmd = ["apt", "install", "-y"]
    refresh_cmd = ["apt", "update"]


class AptGet(PackageManager):
    name = "apt-get"
    install_cmd = ["apt-get", "install", "-y"]
    refresh_cmd = ["apt-get", "update"]


class Dnf(PackageManager):
    name = "dnf"
    install_cmd = ["dnf", "-y", "install"]


class Yum(PackageManager):
    name = "yum"
    install_cmd = ["yum", "-y", "install"]


class Pacman(PackageManager):
    name = "pacman"
    install_cmd = ["pacman", "-Sy", "--noconfirm"]


class Zypper(PackageManager):
    name = "zypper"
    install_cmd = ["zypper", "install", "-y"]


class Brew(PackageManager):
    name = "brew"
    install_cmd = ["brew", "install"]
    needs_sudo = False


PRIORITY: tuple[type[PackageManager], ...] = (Apt, AptGet, Dnf, Yum, Pacman, Zypper, Brew)


def select_package_manager(prober: CapabilityProber) -> PackageManager | None:
    """Return the highest-priority manager present on the host."""
    for cls in PRIORITY:
        manager = cls()
        if prober.has(manager.executable):
            logger.info("Detected package manager: %s", manager.name)
            return manager
    logger.warning("No supported package manager found (tried: %s)",
                   ", ".join(cls.name for cls in PRIORITY))
    return None
