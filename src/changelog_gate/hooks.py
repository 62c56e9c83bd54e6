"""
Hook runner for pre-commit integration.

Walks the staged files, hands changelog candidates to the plugin and
reports every outcome to a result sink.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import typer

from .git import StagedChange, staged_changes
from .plugin import CheckResult, CheckStatus, FileContentSource, ValidateChangelogFormat

logger = logging.getLogger(__name__)


class CheckResultSink(Protocol):
    """Receives the outcome of each checked file."""

    def report(self, path: str, result: CheckResult) -> None: ...


class EchoSink:
    """Print results to the terminal."""

    def report(self, path: str, result: CheckResult) -> None:
        typer.echo(f"[{result.status.value}] {path}")
        if result.message:
            for line in result.message.splitlines():
                typer.echo(f"    {line}")


@dataclass
class HookOutcome:
    """Aggregated results of a hook run."""

    results: dict[str, CheckResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results.values())

    @property
    def failed(self) -> list[str]:
        return [path for path, result in self.results.items() if result.status is CheckStatus.FAILED]


def check_changes(
    changes: list[StagedChange],
    *,
    plugin: ValidateChangelogFormat,
    source: FileContentSource,
    sink: CheckResultSink,
) -> HookOutcome:
    outcome = HookOutcome()
    for change in changes:
        if not plugin.matches(change.path):
            continue

        logger.debug("Checking %s (%s)", change.path, change.status)
        try:
            result = plugin.run_pre_commit_file(change.path, change.action, source)
        except FileNotFoundError as exc:
            result = CheckResult(CheckStatus.FAILED, f"Unable to read the file: {exc}")

        outcome.results[change.path] = result
        sink.report(change.path, result)

    if not outcome.results:
        logger.info("No staged changelog files")
    return outcome


def run_pre_commit(
    repo: Path,
    *,
    plugin: ValidateChangelogFormat,
    source: FileContentSource,
    sink: CheckResultSink,
) -> HookOutcome:
    """
    Run the changelog check against the files staged in ``repo``.

    Raises:
        GitCommandError: If the staged file list cannot be read.
    """
    return check_changes(staged_changes(repo), plugin=plugin, source=source, sink=sink)
