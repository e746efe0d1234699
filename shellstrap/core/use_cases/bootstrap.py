"""
Bootstrap use case — wire the real adapters and run the orchestrator.
"""

from __future__ import annotations

import logging

from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.context import BootstrapContext
from shellstrap.core.engine.orchestrator import Orchestrator
from shellstrap.core.models.outcome import RunResult
from shellstrap.core.services.probe import CapabilityProber

logger = logging.getLogger(__name__)


def default_registry() -> AdapterRegistry:
    """Registry with the adapters that touch the real host."""
    from shellstrap.adapters.shell.command import ShellCommandAdapter
    from shellstrap.adapters.vcs.git import GitAdapter

    registry = AdapterRegistry()
    registry.register(ShellCommandAdapter())
    registry.register(GitAdapter())
    return registry


def run_bootstrap(
    context: BootstrapContext,
    registry: AdapterRegistry | None = None,
    prober: CapabilityProber | None = None,
) -> RunResult:
    """Run the full bootstrap for ``context``.

    Args:
        context: The run context (see ``build_context``).
        registry: Optional pre-configured adapter registry.
        prober: Optional prober; defaults to real PATH lookups.

    Returns:
        RunResult; ``exit_code`` is non-zero only on a fatal failure.
    """
    if registry is None:
        registry = default_registry()
    logger.debug("Adapters: %s", registry.adapter_status())

    result = Orchestrator(context, registry, prober=prober).run()

    if result.ok:
        logger.info("Bootstrap finished with %d warning(s)", len(result.warnings))
    return result
