"""
Configuration patcher — content-idempotent edits to ``~/.zshrc``.

Every edit is a read-modify-write: the file is read into memory, the
new content computed, and written back in one go through a temporary
file and an atomic rename. The first edit that changes anything in a
run copies the original to ``<file>.backup_<timestamp>``; later edits
in the same run reuse that backup.

The text transforms (``replace_line``, ``append_block``,
``plugins_edit``) are pure functions so they can be tested without a
filesystem.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path

from shellstrap.core.errors import ConfigFileMissing
from shellstrap.core.models.capability import AppendBlockEdit, ConfigEdit, ReplaceLineEdit
from shellstrap.core.models.outcome import Outcome, StepResult

logger = logging.getLogger(__name__)

BLOCK_MARKER = "# Added by shellstrap"

PLUGINS_PATTERN = r"^plugins=\((?P<names>[^)]*)\)\s*(?P<comment>#.*)?$"
FRAMEWORK_SOURCE_PATTERN = r"^\s*source\s+[\"']?\$ZSH/oh-my-zsh\.sh"
LAST_PLUGIN = "zsh-syntax-highlighting"


class ConfigFileUnreadable(ValueError):
    """The configuration file exists but is not valid UTF-8 text.

    Not run-halting: the orchestrator records every config edit as
    failed-non-fatal and leaves the file alone.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path} as UTF-8 ({reason}); left unchanged")


# ── Pure text transforms ────────────────────────────────────────


def replace_line(
    text: str,
    pattern: str,
    replacement: str,
    anchor: str | None = None,
) -> tuple[str, int]:
    """Replace the first line matching ``pattern``.

    Returns ``(new_text, match_count)``. With zero matches the
    replacement is inserted before the first ``anchor`` line, or
    appended when there is no anchor match. Only the first of several
    matches is replaced.
    """
    regex = re.compile(pattern)
    lines = text.splitlines(keepends=True)
    matches = [i for i, line in enumerate(lines) if regex.search(line.rstrip("\r\n"))]

    if matches:
        index = matches[0]
        ending = lines[index][len(lines[index].rstrip("\r\n")):] or "\n"
        lines[index] = replacement + ending
        return "".join(lines), len(matches)

    if anchor is not None:
        anchor_re = re.compile(anchor)
        for i, line in enumerate(lines):
            if anchor_re.search(line.rstrip("\r\n")):
                lines.insert(i, replacement + "\n")
                return "".join(lines), 0

    body = text
    if body and not body.endswith("\n"):
        body += "\n"
    return f"{body}{replacement}\n", 0


def append_block(text: str, block: str, marker: str | None = BLOCK_MARKER) -> str:
    """Append ``block`` after a blank line unless it is already in ``text``."""
    block = block.strip("\n")
    if block in text:
        return text

    body = text
    if body and not body.endswith("\n"):
        body += "\n"
    if body:
        body += "\n"
    header = f"{marker}\n" if marker else ""
    return f"{body}{header}{block}\n"


def _plugins_match(text: str) -> re.Match[str] | None:
    regex = re.compile(PLUGINS_PATTERN)
    for line in text.splitlines():
        match = regex.match(line)
        if match:
            return match
    return None


def parse_plugins(text: str) -> list[str] | None:
    """Plugin names on the first single-line ``plugins=(...)``, or None.

    A trailing ``# comment`` after the closing parenthesis is allowed.
    """
    match = _plugins_match(text)
    return match.group("names").split() if match else None


def plugins_edit(text: str, expected: list[str]) -> ReplaceLineEdit | None:
    """Build the plugins-line edit, or None when nothing is missing.

    Names already on the line keep their position; missing expected
    names are appended in order. ``zsh-syntax-highlighting`` is always
    moved to the end of the merged list, and a trailing comment on the
    user's line is kept.
    """
    match = _plugins_match(text)
    current = match.group("names").split() if match else None
    if current is not None and all(name in current for name in expected):
        return None

    merged = list(current or [])
    for name in expected:
        if name not in merged:
            merged.append(name)
    # zsh-syntax-highlighting wraps widgets, so it loads after everything else
    if LAST_PLUGIN in merged:
        merged.remove(LAST_PLUGIN)
        merged.append(LAST_PLUGIN)

    replacement = f"plugins=({' '.join(merged)})"
    if match and match.group("comment"):
        replacement += f" {match.group('comment')}"

    return ReplaceLineEdit(
        name="plugins",
        pattern=PLUGINS_PATTERN,
        replacement=replacement,
        anchor=FRAMEWORK_SOURCE_PATTERN,
    )


# ── File patcher ────────────────────────────────────────────────


class ConfigPatcher:
    """Apply ConfigEdits to one configuration file.

    Args:
        path: The configuration file (must already exist).
        timestamp: Run timestamp used to name the backup.
    """

    def __init__(self, path: Path, timestamp: str):
        self.path = path
        self.timestamp = timestamp
        self.backup_path: Path | None = None

    @property
    def default_backup_path(self) -> Path:
        return self.path.with_name(f"{self.path.name}.backup_{self.timestamp}")

    def read(self) -> str:
        if not self.path.is_file():
            raise ConfigFileMissing(str(self.path))
        try:
            return self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ConfigFileUnreadable(str(self.path), f"byte {e.start}: {e.reason}") from e

    def apply_edit(self, edit: ConfigEdit) -> StepResult:
        step = f"config:{edit.name}"
        content = self.read()

        if isinstance(edit, ReplaceLineEdit):
            updated, matches = replace_line(content, edit.pattern, edit.replacement, edit.anchor)
            if matches == 0:
                logger.warning("No line in %s matches %r; adding it", self.path.name, edit.pattern)
            elif matches > 1:
                logger.warning("%d lines in %s match %r; replacing the first",
                               matches, self.path.name, edit.pattern)
        elif isinstance(edit, AppendBlockEdit):
            updated = append_block(content, edit.block)
        else:
            raise TypeError(f"Unsupported edit: {edit!r}")

        if updated == content:
            logger.info("%s already configured in %s", edit.name, self.path.name)
            return StepResult(step=step, outcome=Outcome.ALREADY_PRESENT)

        self._backup_once()
        self._write(updated)
        logger.info("%s added to %s", edit.name, self.path.name)
        return StepResult(step=step, outcome=Outcome.APPLIED)

    def _backup_once(self) -> None:
        if self.backup_path is not None:
            return
        target = self.default_backup_path
        # Never overwrite an earlier backup (two runs within one second)
        counter = 0
        while target.exists() or target.is_symlink():
            counter += 1
            target = self.default_backup_path.with_name(
                f"{self.default_backup_path.name}.{counter}"
            )
        shutil.copy2(self.path, target)
        self.backup_path = target
        logger.info("Backed up %s to %s", self.path, target)

    def _write(self, content: str) -> None:
        # Write through symlinks (dotfile managers) instead of replacing them
        target = self.path.resolve()
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp",
        )
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            shutil.copymode(target, tmp)
            os.replace(tmp, target)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
