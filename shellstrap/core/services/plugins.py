"""
Plugin fetcher — clone plugin repositories, never overwrite them.

An existing destination is left untouched so local modifications
survive re-runs. A failed clone is a warning, never fatal.
"""

from __future__ import annotations

import logging
import shlex

from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.context import BootstrapContext
from shellstrap.core.models.action import Action
from shellstrap.core.models.capability import PluginSpec
from shellstrap.core.models.outcome import Outcome, StepResult

logger = logging.getLogger(__name__)


class PluginFetcher:
    def __init__(self, context: BootstrapContext, registry: AdapterRegistry):
        self._context = context
        self._registry = registry

    def fetch(self, spec: PluginSpec) -> StepResult:
        step = f"plugin:{spec.name}"
        destination = spec.resolve_destination(self._context.plugin_root)

        if destination.exists():
            logger.info("Plugin %s already installed", spec.name)
            return StepResult(step=step, outcome=Outcome.ALREADY_PRESENT,
                              message=str(destination))

        remediation = shlex.join(["git", "clone", spec.source, str(destination)])

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Installing plugin %s failed: %s", spec.name, e)
            return StepResult(step=step, outcome=Outcome.FAILED_NON_FATAL,
                              message=f"cannot create {destination.parent}: {e}",
                              remediation=remediation)

        logger.info("Installing plugin %s...", spec.name)
        receipt = self._registry.execute_action(
            Action(
                id=step,
                name=f"Clone {spec.name}",
                adapter="git",
                params={
                    "operation": "clone",
                    "url": spec.source,
                    "destination": str(destination),
                },
            )
        )
        if receipt.failed:
            logger.warning("Installing plugin %s failed: %s", spec.name, receipt.error)
            return StepResult(step=step, outcome=Outcome.FAILED_NON_FATAL,
                              message=receipt.error or "clone failed",
                              remediation=remediation)

        logger.info("Plugin %s installed", spec.name)
        return StepResult(step=step, outcome=Outcome.INSTALLED, message=str(destination))
