"""
Capability prober — read-only checks of what the host already has.

Nothing here mutates the host. If the probing tooling itself misbehaves
the answer degrades to "absent" rather than failing the run.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path

from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.models.action import Action
from shellstrap.core.models.capability import Capability

logger = logging.getLogger(__name__)

Which = Callable[[str], str | None]
Exists = Callable[[str], bool]


class Presence(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


def _path_exists(path: str) -> bool:
    return Path(path).exists()


class CapabilityProber:
    """Detect executables, capabilities and network reachability.

    Args:
        which: Executable resolver (default: ``shutil.which``).
        exists: Path-existence check used for ``Capability.paths``.
        registry: Adapter registry for the network probe; without one the
            network state is reported as unknown.
    """

    def __init__(
        self,
        which: Which = shutil.which,
        exists: Exists = _path_exists,
        registry: AdapterRegistry | None = None,
    ):
        self._which = which
        self._exists = exists
        self._registry = registry

    def resolve(self, executable: str) -> str | None:
        """Full path of ``executable``, or None when it cannot be resolved."""
        try:
            return self._which(executable)
        except Exception as e:
            logger.debug("Detection ambiguous for %s (%s); assuming absent", executable, e)
            return None

    def has(self, executable: str) -> bool:
        return self.resolve(executable) is not None

    def detect(self, capability: Capability) -> Presence:
        if any(self.has(exe) for exe in capability.probe_names):
            return Presence.PRESENT
        for path in capability.paths:
            try:
                if self._exists(path):
                    return Presence.PRESENT
            except OSError as e:
                logger.debug("Detection ambiguous for %s (%s); assuming absent", path, e)
        return Presence.ABSENT

    def probe_network(self, hosts: Iterable[str]) -> bool | None:
        """Ping each host once until one answers.

        Returns True when a host answers, False when none does, and None
        when reachability cannot be determined (no ping, no registry).
        """
        if self._registry is None or not self.has("ping"):
            logger.debug("No ping available; network state unknown")
            return None

        for host in hosts:
            receipt = self._registry.execute_action(
                Action(
                    id=f"probe:network:{host}",
                    adapter="shell",
                    params={"argv": ["ping", "-c", "1", host], "timeout": 10},
                )
            )
            if receipt.ok:
                logger.debug("Network reachable via %s", host)
                return True
        return False
