"""
Run-halting errors.

Only these propagate out of a step; every other failure is recorded as
a non-fatal StepResult and the run continues.
"""

from __future__ import annotations

from shellstrap.core.models.outcome import StepResult


class BootstrapError(Exception):
    """Base class for failures that halt the bootstrap."""

    remediation: str | None = None


class MandatoryInstallFailed(BootstrapError):
    """A mandatory capability (or the framework) could not be installed."""

    def __init__(self, result: StepResult):
        self.result = result
        self.remediation = result.remediation
        message = f"{result.step}: {result.message}"
        if result.remediation:
            message += f" — run manually: {result.remediation}"
        super().__init__(message)


class ConfigFileMissing(BootstrapError):
    """The shell configuration file does not exist after framework setup."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")
