"""
Domain models — Pydantic types for the bootstrap.

All models are re-exported here for convenient access:

    from shellstrap.core.models import Capability, PluginSpec, RunResult
"""

from shellstrap.core.models.action import Action, Receipt
from shellstrap.core.models.capability import (
    AppendBlockEdit,
    Capability,
    ConfigEdit,
    PluginSpec,
    ReplaceLineEdit,
)
from shellstrap.core.models.outcome import Outcome, RunResult, StepResult

__all__ = [
    # action.py
    "Action",
    # capability.py
    "AppendBlockEdit",
    "Capability",
    "ConfigEdit",
    # outcome.py
    "Outcome",
    "PluginSpec",
    "Receipt",
    "ReplaceLineEdit",
    "RunResult",
    "StepResult",
]
