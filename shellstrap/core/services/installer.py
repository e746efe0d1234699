"""
Idempotent installer — install a capability only when it is missing.

Never raises. A failed install comes back as a StepResult whose outcome
is ``failed-fatal`` for mandatory capabilities and ``failed-non-fatal``
otherwise; the orchestrator decides whether to halt.
"""

from __future__ import annotations

import logging
import shlex

from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.context import BootstrapContext
from shellstrap.core.models.action import Action
from shellstrap.core.models.capability import Capability
from shellstrap.core.models.outcome import Outcome, StepResult
from shellstrap.core.services.package_managers import PackageManager
from shellstrap.core.services.probe import CapabilityProber, Presence

logger = logging.getLogger(__name__)


class Installer:
    """Ensure capabilities through the run's selected package manager.

    ``manager`` is selected once by the caller and cached here; the
    installer never re-probes for a package manager.
    """

    def __init__(
        self,
        context: BootstrapContext,
        registry: AdapterRegistry,
        prober: CapabilityProber,
        manager: PackageManager | None,
    ):
        self._context = context
        self._registry = registry
        self._prober = prober
        self._manager = manager
        self._refreshed = False

    @property
    def manager(self) -> PackageManager | None:
        return self._manager

    def ensure(self, capability: Capability) -> StepResult:
        step = f"install:{capability.name}"

        if self._prober.detect(capability) is Presence.PRESENT:
            logger.info("%s already installed", capability.name)
            return StepResult(step=step, outcome=Outcome.ALREADY_PRESENT)

        if self._manager is None:
            return self._failed(
                step, capability,
                "no supported package manager on this host",
                remediation=f"install {capability.name} manually",
            )

        packages = capability.packages_for(self._manager.name)
        if not packages:
            return self._failed(
                step, capability,
                f"no package provides {capability.name} on {self._manager.name}",
            )

        self._refresh_once()

        argv = self._manager.install_argv(packages, use_sudo=self._context.use_sudo)
        logger.info("Installing %s...", capability.name)
        receipt = self._registry.execute_action(
            Action(id=step, name=f"Install {capability.name}", adapter="shell",
                   params={"argv": argv})
        )
        if receipt.failed:
            logger.debug("Install command failed: %s", receipt.command or shlex.join(argv))
            return self._failed(
                step, capability,
                receipt.error or "install command failed",
                remediation=shlex.join(argv),
            )

        logger.info("%s installed", capability.name)
        return StepResult(
            step=step,
            outcome=Outcome.INSTALLED,
            message=f"installed {' '.join(packages)} with {self._manager.name}",
        )

    def _refresh_once(self) -> None:
        if self._refreshed or self._manager is None:
            return
        self._refreshed = True
        argv = self._manager.refresh_argv(use_sudo=self._context.use_sudo)
        if argv is None:
            return
        receipt = self._registry.execute_action(
            Action(id=f"refresh:{self._manager.name}", adapter="shell", params={"argv": argv})
        )
        if receipt.failed:
            # Not fatal: a stale index can still install
            logger.warning("Package index refresh failed: %s", receipt.error)

    def _failed(
        self,
        step: str,
        capability: Capability,
        message: str,
        remediation: str | None = None,
    ) -> StepResult:
        if capability.mandatory:
            logger.error("Installing %s failed, and it is required: %s", capability.name, message)
            outcome = Outcome.FAILED_FATAL
        else:
            logger.warning("Installing %s failed; this feature may be unavailable: %s",
                           capability.name, message)
            outcome = Outcome.FAILED_NON_FATAL
        return StepResult(step=step, outcome=outcome, message=message, remediation=remediation)
