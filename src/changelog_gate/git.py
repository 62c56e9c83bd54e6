"""Low-level Git helpers for reading staged changes."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .exceptions import GitCommandError


@dataclass(frozen=True, slots=True)
class StagedChange:
    """One entry of `git diff --cached --name-status -z` output."""

    status: str
    path: str
    source_path: str | None = None

    @property
    def action(self) -> str:
        """Single-letter action without the similarity score (``R100`` -> ``R``)."""
        return self.status[:1]


def run(args: Sequence[str], *, cwd: Path | None = None) -> subprocess.CompletedProcess[bytes]:
    """
    Run ``git`` with ``args`` and capture its output as bytes.

    Commands run without the pager and without optional index locks.

    Raises:
        GitCommandError: If git exits non-zero.
    """
    env = {**os.environ, "GIT_OPTIONAL_LOCKS": "0"}
    result = subprocess.run(
        ["git", "--no-pager", *args],
        cwd=cwd,
        env=env,
        capture_output=True,
        check=False,
    )
    if result.returncode != 0:
        raise GitCommandError(
            command=tuple(args),
            returncode=result.returncode,
            stderr=result.stderr.decode("utf-8", errors="replace").strip(),
            cwd=cwd,
        )
    return result


def repository_root(cwd: Path | None = None) -> Path:
    """Return the top-level directory of the work tree containing ``cwd``."""
    result = run(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(result.stdout.decode("utf-8").strip())


def parse_name_status_z(payload: bytes) -> list[StagedChange]:
    """
    Parse `git diff --name-status -z` output into structured records.

    Git emits a status field followed by one path, or two paths for
    renames and copies, all NUL-separated.
    """
    if not payload:
        return []

    fields = [raw.decode("utf-8", errors="replace") for raw in payload.split(b"\0")]
    if fields and fields[-1] == "":
        fields.pop()

    changes: list[StagedChange] = []
    index = 0
    while index < len(fields):
        status = fields[index]
        if status[:1] in ("R", "C"):
            if index + 2 >= len(fields):
                raise ValueError(f"Truncated name-status entry for status {status!r}")
            changes.append(
                StagedChange(status=status, path=fields[index + 2], source_path=fields[index + 1])
            )
            index += 3
            continue

        if index + 1 >= len(fields):
            raise ValueError(f"Truncated name-status entry for status {status!r}")
        changes.append(StagedChange(status=status, path=fields[index + 1]))
        index += 2

    return changes


def staged_changes(repo: Path) -> list[StagedChange]:
    """Return the files staged for the next commit."""
    result = run(["diff", "--cached", "--name-status", "-z"], cwd=repo)
    return parse_name_status_z(result.stdout)


class IndexSource:
    """Read file content as staged in the index."""

    def __init__(self, repo: Path) -> None:
        self.repo = repo

    def read(self, path: str) -> str:
        result = run(["show", f":{path}"], cwd=self.repo)
        return result.stdout.decode("utf-8")


class WorkTreeSource:
    """Read file content from the working tree."""

    def __init__(self, repo: Path) -> None:
        self.repo = repo

    def read(self, path: str) -> str:
        return (self.repo / path).read_text(encoding="utf-8")
