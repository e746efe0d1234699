"""
Action and Receipt models — the collaborator contract.

Actions describe an external side effect the bootstrap wants performed
(run a package-manager command, clone a repository). Receipts describe
what happened. Adapters take Actions and hand back Receipts, never
exceptions, so every step can decide for itself whether a failure is
fatal.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Action(BaseModel):
    """A requested side effect, dispatched through the adapter registry.

    ``id`` doubles as the step name the action belongs to
    (``install:zsh``, ``plugin:zsh-z``, ``shell:default:chsh``), which
    is also what tests script MockAdapter responses against.
    """

    id: str
    name: str = ""
    adapter: str                    # "shell" | "git"
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Result of an adapter execution.

    The adapter NEVER raises; failures land in ``error``. Shell
    receipts put the attempted command line in ``metadata["command"]``.
    """

    adapter: str
    action_id: str
    status: Literal["ok", "failed"] = "ok"

    started_at: datetime = Field(default_factory=_utcnow)
    ended_at: datetime = Field(default_factory=_utcnow)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def command(self) -> str | None:
        """The command line that ran, when the adapter recorded one."""
        return self.metadata.get("command")

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)
