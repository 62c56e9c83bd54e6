from __future__ import annotations

import logging
import pathlib
from typing import List, Optional

import typer

from changelog_gate.config import DEFAULT_POLICY_FILE, get_settings, load_policy
from changelog_gate.exceptions import GitCommandError
from changelog_gate.git import IndexSource, WorkTreeSource, repository_root
from changelog_gate.hooks import EchoSink, run_pre_commit
from changelog_gate.plugin import ValidateChangelogFormat

app = typer.Typer(no_args_is_help=True, help="Validate changelog files before committing.")


def _build_plugin(option: Optional[pathlib.Path], root: pathlib.Path) -> ValidateChangelogFormat:
    """Build the plugin from the policy file, exiting with 1 on a bad policy."""
    explicit = True
    if option is not None:
        path = option
    elif get_settings().POLICY_PATH:
        path = pathlib.Path(get_settings().POLICY_PATH)
    else:
        path = root / DEFAULT_POLICY_FILE
        explicit = False

    try:
        policy = load_policy(path, explicit=explicit)
    except (ValueError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    return ValidateChangelogFormat(
        file_pattern=policy.file_pattern,
        unknown_dates=policy.unknown_dates,
    )


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to CHANGELOG_GATE_LOG_LEVEL or WARNING).",
    ),
) -> None:
    """Validate changelog files against CPAN::Changes::Spec."""
    level = (log_level or get_settings().LOG_LEVEL).upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command("check")
def check(
    paths: List[pathlib.Path] = typer.Argument(..., exists=True, dir_okay=False),
    filter_names: bool = typer.Option(
        False,
        "--filter",
        help="Only check files whose name matches the changelog pattern.",
    ),
    policy: Optional[pathlib.Path] = typer.Option(
        None,
        "--policy",
        help=f"Policy file (defaults to {DEFAULT_POLICY_FILE} in the current directory).",
    ),
) -> None:
    """Check changelog files on disk."""
    plugin = _build_plugin(policy, pathlib.Path.cwd())
    source = WorkTreeSource(pathlib.Path.cwd())
    sink = EchoSink()

    failed = False
    for path in paths:
        if filter_names and not plugin.matches(str(path)):
            continue
        result = plugin.run_pre_commit_file(str(path), "M", source)
        sink.report(str(path), result)
        failed = failed or not result.ok

    if failed:
        raise typer.Exit(2)


@app.command("pre-commit")
def pre_commit(
    repo: Optional[pathlib.Path] = typer.Option(
        None,
        "--repo",
        help="Repository to inspect (defaults to the one containing the current directory).",
    ),
    read_from: Optional[str] = typer.Option(
        None,
        "--read-from",
        help="Where to read staged files from: index or worktree.",
    ),
    policy: Optional[pathlib.Path] = typer.Option(None, "--policy", help="Policy file."),
) -> None:
    """Check the changelog files staged for the next commit."""
    try:
        root = repository_root(repo)
    except GitCommandError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    mode = read_from or get_settings().READ_FROM
    if mode not in ("index", "worktree"):
        typer.echo(f"Error: unknown --read-from value '{mode}'", err=True)
        raise typer.Exit(1)
    source = IndexSource(root) if mode == "index" else WorkTreeSource(root)

    plugin = _build_plugin(policy, root)
    try:
        outcome = run_pre_commit(root, plugin=plugin, source=source, sink=EchoSink())
    except GitCommandError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not outcome.ok:
        typer.echo(f"CHANGELOG CHECK FAILED ({len(outcome.failed)} file(s))")
        raise typer.Exit(2)


@app.command("pattern")
def pattern(
    policy: Optional[pathlib.Path] = typer.Option(None, "--policy", help="Policy file."),
) -> None:
    """Show which files are checked and what is verified."""
    plugin = _build_plugin(policy, pathlib.Path.cwd())
    typer.echo(plugin.file_pattern.pattern)
    typer.echo(plugin.description)


if __name__ == "__main__":
    app()
