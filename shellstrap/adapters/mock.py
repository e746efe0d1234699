"""
Mock adapter — scripted test double for host side effects.

Records every context it receives and returns success unless a
failure has been scripted for an action ID (or an action ID prefix,
e.g. ``"install:"`` to fail every install).
"""

from __future__ import annotations

from collections.abc import Callable

from shellstrap.adapters.base import Adapter, ExecutionContext
from shellstrap.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    ``on_success`` is called with the context of every successful
    execution, which lets tests simulate the side effect (e.g. create
    the cloned directory).
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
        on_success: Callable[[ExecutionContext], None] | None = None,
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._on_success = on_success
        self._responses: dict[str, Receipt] = {}
        self._prefix_failures: dict[str, str] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def action_ids(self) -> list[str]:
        return [ctx.action.id for ctx in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Set a custom response for a specific action ID."""
        self._responses[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
        )

    def fail_prefix(self, prefix: str, error: str = "Mock failure") -> None:
        """Fail every action whose ID starts with ``prefix``."""
        self._prefix_failures[prefix] = error

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)
        action_id = context.action.id

        if action_id in self._responses:
            return self._responses[action_id]

        for prefix, error in self._prefix_failures.items():
            if action_id.startswith(prefix):
                return Receipt.failure(adapter=self._name, action_id=action_id, error=error)

        if self._on_success:
            self._on_success(context)
        return Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._responses.clear()
        self._prefix_failures.clear()
