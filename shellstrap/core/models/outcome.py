"""
Step outcomes and the aggregated run result.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Outcome(str, Enum):
    """How a single bootstrap step ended."""

    INSTALLED = "installed"
    ALREADY_PRESENT = "already-present"
    APPLIED = "applied"                 # config edit changed the file
    SWITCHED = "switched"               # login shell changed
    FAILED_NON_FATAL = "failed-non-fatal"
    FAILED_FATAL = "failed-fatal"

    @property
    def failed(self) -> bool:
        return self in (Outcome.FAILED_NON_FATAL, Outcome.FAILED_FATAL)

    @property
    def changed(self) -> bool:
        """Whether the step produced a side effect."""
        return self in (Outcome.INSTALLED, Outcome.APPLIED, Outcome.SWITCHED)


class StepResult(BaseModel):
    """Outcome of one step plus what the user should do about a failure."""

    step: str
    outcome: Outcome
    message: str = ""
    remediation: str | None = None   # exact manual command, when there is one

    @property
    def ok(self) -> bool:
        return not self.outcome.failed


class RunResult(BaseModel):
    """Ordered record of every step the orchestrator ran.

    A fatal failure halts the run; ``halted`` then names the reason and
    ``exit_code`` is non-zero. Non-fatal failures only show up in
    ``warnings``.
    """

    steps: dict[str, StepResult] = Field(default_factory=dict)
    package_manager: str | None = None
    backup_path: str | None = None
    halted: str | None = None

    def record(self, result: StepResult) -> StepResult:
        self.steps[result.step] = result
        return result

    def outcome(self, step: str) -> Outcome | None:
        result = self.steps.get(step)
        return result.outcome if result else None

    @property
    def warnings(self) -> list[StepResult]:
        return [s for s in self.steps.values() if s.outcome == Outcome.FAILED_NON_FATAL]

    @property
    def ok(self) -> bool:
        return self.halted is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    @property
    def changed(self) -> list[str]:
        return [name for name, s in self.steps.items() if s.outcome.changed]

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "halted": self.halted,
            "package_manager": self.package_manager,
            "backup_path": self.backup_path,
            "steps": {
                name: {
                    "outcome": s.outcome.value,
                    "message": s.message,
                    "remediation": s.remediation,
                }
                for name, s in self.steps.items()
            },
            "warnings": [s.step for s in self.warnings],
        }
