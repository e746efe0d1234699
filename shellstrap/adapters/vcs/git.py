"""
Git adapter — fetch plugin repositories.

Uses the git CLI. The only operation the bootstrap needs is a shallow
clone into a destination directory that does not exist yet.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from shellstrap.adapters.base import Adapter, ExecutionContext
from shellstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git clone operations.

    Action params:
        operation (str): Only 'clone' is supported.
        url (str): Repository to clone.
        destination (str): Target directory; must not exist.
        depth (int): Shallow-clone depth (default: 1, 0 = full history).
        timeout (int): Timeout in seconds (default: 120).
    """

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.action.params.get("operation", "")
        if operation != "clone":
            return False, f"Unknown operation '{operation}'. Valid: clone"

        if not context.action.params.get("url"):
            return False, "Missing required param: 'url'"

        destination = context.action.params.get("destination", "")
        if not destination:
            return False, "Missing required param: 'destination'"
        if Path(destination).exists():
            return False, f"Destination already exists: {destination}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        url = context.action.params["url"]
        destination = context.action.params["destination"]
        depth = context.action.params.get("depth", 1)
        timeout = context.action.params.get("timeout", 120)

        args = ["clone", "--quiet"]
        if depth:
            args += ["--depth", str(depth)]
        args += [url, destination]

        start = time.monotonic()
        try:
            output = self._git(args, timeout=timeout)
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"git clone timed out after {timeout}s",
                metadata={"url": url},
            )
        except (OSError, RuntimeError) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Git error: {e}",
                metadata={"url": url, "destination": destination},
            )

        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=output,
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"url": url, "destination": destination},
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], cwd: str | None = None, timeout: int = 30) -> str:
        """Run a git command and return stdout."""
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        if result.returncode != 0:
            raise RuntimeError(result.stderr.strip() or f"git {args[0]} failed")
        return result.stdout
