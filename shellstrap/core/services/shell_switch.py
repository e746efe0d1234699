"""
Shell switcher — make zsh the user's login shell.

States: UNREGISTERED -> REGISTERING -> REGISTERED -> SWITCHED.
A shell missing from the login-shell registry (``/etc/shells``) is
registered first; ``chsh`` only runs once the shell is registered.
Every failure is non-fatal and carries the exact manual command.
"""

from __future__ import annotations

import logging
import os
import shlex
from enum import Enum

from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.context import BootstrapContext
from shellstrap.core.models.action import Action
from shellstrap.core.models.outcome import Outcome, StepResult

logger = logging.getLogger(__name__)

SHELL_STEP = "shell:default"


class ShellState(str, Enum):
    UNREGISTERED = "unregistered"
    REGISTERING = "registering"
    REGISTERED = "registered"
    SWITCHED = "switched"


class ShellSwitcher:
    def __init__(self, context: BootstrapContext, registry: AdapterRegistry):
        self._context = context
        self._registry = registry
        self.state: ShellState | None = None

    def is_current(self, shell_path: str) -> bool:
        current = self._context.current_shell
        if not current:
            return False
        if current == shell_path:
            return True
        return os.path.realpath(current) == os.path.realpath(shell_path)

    def is_registered(self, shell_path: str) -> bool:
        try:
            text = self._context.shells_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.debug("Cannot read %s (%s); treating %s as unregistered",
                         self._context.shells_file, e, shell_path)
            return False
        entries = {
            line.strip() for line in text.splitlines()
            if line.strip() and not line.lstrip().startswith("#")
        }
        return shell_path in entries

    def set_default_shell(self, shell_path: str) -> StepResult:
        if self.is_current(shell_path):
            logger.info("Login shell is already %s", shell_path)
            self.state = ShellState.SWITCHED
            return StepResult(step=SHELL_STEP, outcome=Outcome.ALREADY_PRESENT,
                              message=shell_path)

        chsh = ["chsh", "-s", shell_path]

        if self.is_registered(shell_path):
            self.state = ShellState.REGISTERED
        else:
            self.state = ShellState.UNREGISTERED
            failure = self._register(shell_path, chsh)
            if failure is not None:
                return failure

        logger.info("Changing login shell to %s...", shell_path)
        receipt = self._registry.execute_action(
            Action(id=f"{SHELL_STEP}:chsh", adapter="shell", params={"argv": chsh})
        )
        if receipt.failed:
            logger.warning("Changing the login shell failed. You may need to run: %s",
                           shlex.join(chsh))
            return StepResult(step=SHELL_STEP, outcome=Outcome.FAILED_NON_FATAL,
                              message=receipt.error or "chsh failed",
                              remediation=shlex.join(chsh))

        self.state = ShellState.SWITCHED
        return StepResult(step=SHELL_STEP, outcome=Outcome.SWITCHED, message=shell_path)

    def _register(self, shell_path: str, chsh: list[str]) -> StepResult | None:
        shells_file = str(self._context.shells_file)
        logger.warning("%s is not in %s; adding it...", shell_path, shells_file)
        self.state = ShellState.REGISTERING

        receipt = self._registry.execute_action(
            Action(
                id=f"{SHELL_STEP}:register",
                adapter="shell",
                params={
                    "argv": self._context.sudo(["tee", "-a", shells_file]),
                    "input": f"{shell_path}\n",
                },
            )
        )
        if receipt.ok:
            self.state = ShellState.REGISTERED
            return None

        tee = " ".join(self._context.sudo(["tee", "-a", shlex.quote(shells_file)]))
        remediation = f"echo {shlex.quote(shell_path)} | {tee} && {shlex.join(chsh)}"
        logger.warning("Adding %s to %s failed. You may need to run: %s",
                       shell_path, shells_file, remediation)
        return StepResult(step=SHELL_STEP, outcome=Outcome.FAILED_NON_FATAL,
                          message=receipt.error or f"cannot register {shell_path}",
                          remediation=remediation)
