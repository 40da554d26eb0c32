"""Git pipeline stages for meow.

Each stage builds its git arguments, prints the command, and then either
stops there (dry run) or runs it: success output goes to the output
classifier, failure output to the error translator.

Design follows Function Core / Imperative Shell:
- Pure functions: git_command, build_stage_args, build_commit_args,
  build_push_args, build_remote_add_args, build_remote_remove_args
- Imperative shell: discover_repo_root, stage, commit, push, remote_add,
  remote_remove
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from meow import display
from meow.config import DEFAULT_REMOTE, get_git_executable
from meow.models import ChangeSummary, ErrorCategory, PushSummary
from meow.runner import run_command, stream_command
from meow.subprocess_result import ExecutionResult, Failure, SpawnFailure, Success
from meow.summaries import summarize_commit, summarize_push
from meow.translate import (
    COMMIT_RULES,
    PUSH_RULES,
    STAGE_RULES,
    ErrorRule,
    classify_error,
    error_message,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class MeowGitError(Exception):
    """Base exception for all meow git operations."""


class RepoDiscoveryError(MeowGitError):
    """Failed to discover the git repository root."""


class StageError(MeowGitError):
    """A pipeline stage failed. Recoverable: the orchestrator decides whether to go on."""

    def __init__(
        self,
        stage: str,
        category: ErrorCategory,
        message: str,
        detail: str = "",
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.category = category
        self.message = message
        self.detail = detail


class GitSpawnError(StageError):
    """git could not be started at all (not installed, not executable)."""


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------


def git_command(args: Sequence[str]) -> list[str]:
    """Prefix *args* with the configured git executable."""
    return [get_git_executable(), *args]


def build_stage_args(files: Sequence[str] | None = None) -> list[str]:
    """``add <files...>``, or ``add .`` when no files are given."""
    if files:
        return ["add", *files]
    return ["add", "."]


def build_commit_args(message: str) -> list[str]:
    return ["commit", "-m", message]


def build_push_args(upstream: str | None = None, force: int = 0) -> list[str]:
    """Build ``push`` arguments.

    *force* is a level, not a flag: 1 adds ``--force-with-lease`` and 2 or
    more adds ``--force`` instead. The two are never combined.
    """
    args = ["push"]
    if upstream:
        args.extend(["--set-upstream", DEFAULT_REMOTE, upstream])
    if force >= 2:
        args.append("--force")
    elif force == 1:
        args.append("--force-with-lease")
    return args


def build_remote_add_args(name: str, url: str) -> list[str]:
    return ["remote", "add", name, url]


def build_remote_remove_args(name: str) -> list[str]:
    return ["remote", "remove", name]


# ---------------------------------------------------------------------------
# Imperative shell
# ---------------------------------------------------------------------------


def _raise_for_failure(stage_name: str, result: Failure, rules: tuple[ErrorRule, ...]) -> None:
    if isinstance(result, SpawnFailure):
        display.error(result.exit_info)
        raise GitSpawnError(stage_name, ErrorCategory.GENERIC, result.exit_info, result.exit_info)

    # git commit reports "nothing to commit" on stdout.
    category = classify_error(result.stderr_text + "\n" + result.stdout_text, rules)
    message = error_message(category)
    if category is ErrorCategory.NOTHING_TO_COMMIT:
        display.warning(f"{display.OUTPUT_INDENT}{message}")
    else:
        display.error(f"{display.OUTPUT_INDENT}{message}")
    logger.info("%s failed: category=%s", stage_name, category.value)
    raise StageError(stage_name, category, message, result.exit_info)


def _execute(
    stage_name: str,
    repo_root: Path,
    args: Sequence[str],
    rules: tuple[ErrorRule, ...],
    *,
    dry_run: bool,
) -> Success | None:
    """Print and (unless *dry_run*) run ``git <args>``.

    Returns ``None`` for a dry run, the :class:`Success` otherwise.

    Raises:
        StageError: If git exits non-zero.
        GitSpawnError: If git could not be started.
    """
    command = git_command(args)
    display.command(command)
    if dry_run:
        return None

    result: ExecutionResult = run_command(repo_root, command)
    if isinstance(result, Failure):
        _raise_for_failure(stage_name, result, rules)
    return result


def discover_repo_root(path: Path | None = None) -> Path:
    """Discover the git repository root.

    Args:
        path: Directory to start searching from. Defaults to the current
            working directory.

    Returns:
        Absolute path to the repository root.

    Raises:
        RepoDiscoveryError: If the path is not inside a git repository or git
            cannot be run.
    """
    cwd = path or Path.cwd()
    result = run_command(cwd, git_command(["rev-parse", "--show-toplevel"]))
    if isinstance(result, Failure):
        msg = f"Not a git repository (or any parent up to mount point): {cwd}"
        if isinstance(result, SpawnFailure):
            msg = result.exit_info
        raise RepoDiscoveryError(msg)
    return Path(result.stdout_text.strip())


def stage(repo_root: Path, files: Sequence[str] | None = None, *, dry_run: bool = False) -> None:
    """Stage *files*, or everything under the repository root.

    Raises:
        StageError: ``NO_MATCHING_FILES`` when a pathspec matched nothing.
    """
    result = _execute("stage", repo_root, build_stage_args(files), STAGE_RULES, dry_run=dry_run)
    if result is None:
        return
    display.output(display.format_raw(result.stdout_text))
    display.info("staged files" if files else "staged all files")


def commit(
    repo_root: Path,
    message: str,
    *,
    dry_run: bool = False,
    verbose: bool = False,
) -> ChangeSummary | None:
    """Commit staged changes and print a condensed summary.

    Returns:
        The parsed summary, or ``None`` for a dry run.

    Raises:
        StageError: With the translated category when git refuses.
    """
    result = _execute(
        "commit", repo_root, build_commit_args(message), COMMIT_RULES, dry_run=dry_run
    )
    if result is None:
        return None

    summary = summarize_commit(result.stdout)
    if not summary.parsed:
        logger.info("Commit output not summarized: %s", summary.note)
    display.output(display.format_commit_summary(summary, verbose=verbose))
    display.info("committed all changes")
    return summary


def push(
    repo_root: Path,
    *,
    upstream: str | None = None,
    force: int = 0,
    dry_run: bool = False,
    stream: bool = False,
    verbose: bool = False,
) -> PushSummary | None:
    """Push to the remote and print a condensed summary.

    With *stream*, output is echoed line by line as git produces it and no
    summary is built (``None`` is returned).

    Raises:
        StageError: ``PUSH_REJECTED`` or ``GENERIC`` when git refuses.
    """
    args = build_push_args(upstream, force)
    if not stream or dry_run:
        result = _execute("push", repo_root, args, PUSH_RULES, dry_run=dry_run)
        if result is None:
            return None
        summary = summarize_push(result.stdout, result.stderr)
        if not summary.parsed:
            logger.info("Push output not summarized: %s", summary.note)
        display.output(display.format_push_summary(summary, verbose=verbose))
        _announce_push(upstream)
        return summary

    command = git_command(args)
    display.command(command)
    streamed = stream_command(repo_root, command, display.stream_line)
    if isinstance(streamed, Failure):
        _raise_for_failure("push", streamed, PUSH_RULES)
    _announce_push(upstream)
    return None


def _announce_push(upstream: str | None) -> None:
    if upstream:
        display.info(f"pushed to remote {upstream}")
    else:
        display.info("pushed to remote")


def remote_add(repo_root: Path, name: str, url: str, *, dry_run: bool = False) -> None:
    """Register a new remote."""
    args = build_remote_add_args(name, url)
    result = _execute("remote add", repo_root, args, (), dry_run=dry_run)
    if result is not None:
        display.info(f"added remote {name}")


def remote_remove(repo_root: Path, name: str, *, dry_run: bool = False) -> None:
    """Remove a remote."""
    args = build_remote_remove_args(name)
    result = _execute("remote remove", repo_root, args, (), dry_run=dry_run)
    if result is not None:
        display.info(f"removed remote {name}")
