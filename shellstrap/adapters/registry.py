"""
Adapter registry — central dispatch for all host side effects.

Services never hold adapters; they build an Action naming the adapter
("shell" or "git") and hand it to ``execute_action``. Swapping the
registered adapters for MockAdapters is all a test needs to run the
whole bootstrap without touching the host.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from shellstrap.adapters.base import Adapter, ExecutionContext
from shellstrap.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Name → adapter map plus the one place actions get executed."""

    def __init__(self, adapters: list[Adapter] | None = None) -> None:
        self._adapters: dict[str, Adapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    def register(self, adapter: Adapter) -> None:
        """Register an adapter, replacing any previous one with the same name."""
        if adapter.name in self._adapters:
            logger.debug("Replacing adapter %s with %r", adapter.name, adapter)
        self._adapters[adapter.name] = adapter

    def unregister(self, name: str) -> None:
        self._adapters.pop(name, None)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        return list(self._adapters)

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Availability of every registered adapter, for diagnostics."""
        return {
            name: {
                "name": name,
                "available": _safe_available(adapter),
                "type": type(adapter).__name__,
            }
            for name, adapter in self._adapters.items()
        }

    def execute_action(self, action: Action, working_dir: str | None = None) -> Receipt:
        """Validate and execute ``action``; never raises.

        A missing adapter, a validation failure and an exception escaping
        the adapter all come back as failed receipts.
        """
        started = time.monotonic()
        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return self._fail(action, f"No adapter registered for '{action.adapter}'")

        context = ExecutionContext(action=action, working_dir=working_dir)
        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            return self._fail(action, f"Validation error: {e}")
        if not valid:
            return self._fail(action, f"Validation failed: {reason}")

        logger.debug("Dispatching %s to %s", action.id, action.adapter)
        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised while running %s: %s", action.adapter, action.id, e)
            receipt = self._fail(action, f"Unexpected error: {e}")

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt

    @staticmethod
    def _fail(action: Action, error: str) -> Receipt:
        return Receipt.failure(adapter=action.adapter, action_id=action.id, error=error)


def _safe_available(adapter: Adapter) -> bool:
    try:
        return adapter.is_available()
    except Exception:
        return False
