"""
Framework installer — oh-my-zsh.

Downloads the upstream install script with curl (wget as fallback) and
pipes it to ``sh`` in unattended mode, so the script neither switches
the login shell nor starts zsh. Installing the framework is mandatory.
"""

from __future__ import annotations

import logging
import shlex

from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.context import BootstrapContext
from shellstrap.core.models.action import Action
from shellstrap.core.models.outcome import Outcome, StepResult
from shellstrap.core.services.probe import CapabilityProber

logger = logging.getLogger(__name__)

FRAMEWORK_STEP = "framework:oh-my-zsh"

# Marker file that only a completed install leaves behind
_ENTRYPOINT = "oh-my-zsh.sh"


class FrameworkInstaller:
    def __init__(
        self,
        context: BootstrapContext,
        registry: AdapterRegistry,
        prober: CapabilityProber,
    ):
        self._context = context
        self._registry = registry
        self._prober = prober

    def is_installed(self) -> bool:
        return (self._context.framework_dir / _ENTRYPOINT).is_file()

    def download_argv(self) -> list[str] | None:
        url = self._context.framework_installer_url
        if self._prober.has("curl"):
            return ["curl", "-fsSL", url]
        if self._prober.has("wget"):
            return ["wget", "-qO-", url]
        return None

    def ensure(self) -> StepResult:
        framework_dir = self._context.framework_dir
        if self.is_installed():
            logger.info("oh-my-zsh already installed at %s", framework_dir)
            return StepResult(step=FRAMEWORK_STEP, outcome=Outcome.ALREADY_PRESENT)

        manual = f'sh -c "$(curl -fsSL {self._context.framework_installer_url})" "" --unattended'

        if framework_dir.exists():
            # The upstream installer refuses to overwrite; leave the user's files alone
            return self._fatal(
                f"{framework_dir} exists but is not a complete oh-my-zsh install",
                remediation=f"mv {shlex.quote(str(framework_dir))} "
                            f"{shlex.quote(str(framework_dir))}.backup_{self._context.timestamp}",
            )

        download = self.download_argv()
        if download is None:
            return self._fatal("neither curl nor wget is installed", remediation=manual)

        logger.info("Installing oh-my-zsh...")
        fetched = self._registry.execute_action(
            Action(id=f"{FRAMEWORK_STEP}:download", adapter="shell",
                   params={"argv": download, "timeout": 120})
        )
        if fetched.failed or not fetched.output:
            return self._fatal(
                f"downloading the installer with {download[0]} failed: {fetched.error}",
                remediation=manual,
            )

        installed = self._registry.execute_action(
            Action(
                id=f"{FRAMEWORK_STEP}:run",
                adapter="shell",
                params={
                    "argv": ["sh", "-s", "--", "--unattended"],
                    "input": fetched.output + "\n",
                    "env": {
                        "ZSH": str(framework_dir),
                        "RUNZSH": "no",
                        "CHSH": "no",
                    },
                    "cwd": str(self._context.home),
                },
            )
        )
        if installed.failed:
            return self._fatal(f"installer failed: {installed.error}", remediation=manual)

        logger.info("oh-my-zsh installed at %s", framework_dir)
        return StepResult(step=FRAMEWORK_STEP, outcome=Outcome.INSTALLED,
                          message=f"installed into {framework_dir}")

    def _fatal(self, message: str, remediation: str | None = None) -> StepResult:
        logger.error("oh-my-zsh install failed: %s", message)
        return StepResult(step=FRAMEWORK_STEP, outcome=Outcome.FAILED_FATAL,
                          message=message, remediation=remediation)
