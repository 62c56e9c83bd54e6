"""Custom exceptions for changelog checks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class ChangelogGateError(RuntimeError):
    """Base exception for changelog gate failures."""


class ParseError(ChangelogGateError):
    """Raised when text cannot be interpreted as a changelog at all."""


class NoReleasesError(ChangelogGateError):
    """Raised when a parsed changelog does not contain any release."""


@dataclass(slots=True)
class GitCommandError(ChangelogGateError):
    """Raised when git exits non-zero while reading the staged changes."""

    command: tuple[str, ...]
    returncode: int
    stderr: str = ""
    cwd: Path | None = None

    def __str__(self) -> str:
        message = f"git {' '.join(self.command)} exited with status {self.returncode}"
        if self.cwd is not None:
            message += f" in {self.cwd}"
        if self.stderr:
            message += f": {self.stderr}"
        return message
