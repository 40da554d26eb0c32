"""CLI entry point for meow.

``meow "message"`` stages everything, commits, and pushes. Flags narrow the
pipeline (``--commit``, ``--push``), shape the push (``--set-upstream``,
``--force``), or run a one-off remote command (``--remote-add``,
``--remote-remove``).

Follows Function Core / Imperative Shell:
- Pure functions: select_stages, format_failure_report, exit_code_for
- Imperative shell: run_pipeline, run_remote_command
- Click command: main
"""

from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path

import click

from meow import display
from meow.cancellation import CancellationToken, install_interrupt_handler
from meow.config import MEOW_EXIT_ON_ERROR_ENV, MEOW_STREAM_PUSH_ENV
from meow.git import (
    GitSpawnError,
    RepoDiscoveryError,
    StageError,
    commit,
    discover_repo_root,
    push,
    remote_add,
    remote_remove,
    stage,
)
from meow.log import setup_logging
from meow.models import ErrorCategory, PipelineOptions

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

STAGE = "stage"
COMMIT = "commit"
PUSH = "push"

STAGE_HEADERS = {
    STAGE: "staging changes...",
    COMMIT: "committing...",
    PUSH: "pushing...",
}


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------


def select_stages(options: PipelineOptions) -> list[str]:
    """Decide which stages run, in order."""
    if options.push_only and not options.commit_only:
        return [PUSH]
    if options.commit_only and not options.push_only:
        return [STAGE, COMMIT]
    return [STAGE, COMMIT, PUSH]


def format_failure_report(failures: list[StageError], *, verbose: bool = False) -> str:
    """Summarize every failed stage, one line each (plus git's detail when verbose)."""
    lines = [f"{len(failures)} stage(s) failed:"]
    for failure in failures:
        lines.append(f"  [{failure.stage}] {failure.message}")
        if verbose and failure.detail:
            lines.append(f"    {failure.detail}")
    return "\n".join(lines)


def exit_code_for(failures: list[StageError], token: CancellationToken) -> int:
    if token.cancelled:
        return EXIT_INTERRUPTED
    if failures:
        return EXIT_FAILURE
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Imperative shell
# ---------------------------------------------------------------------------


def _run_stage(name: str, repo_root: Path, options: PipelineOptions) -> None:
    verbose = options.verbose > 0
    if name == STAGE:
        stage(repo_root, options.files, dry_run=options.dry_run)
    elif name == COMMIT:
        commit(repo_root, options.message or "", dry_run=options.dry_run, verbose=verbose)
    elif name == PUSH:
        push(
            repo_root,
            upstream=options.upstream,
            force=options.force,
            dry_run=options.dry_run,
            stream=options.stream,
            verbose=verbose,
        )
    else:
        msg = f"Unknown stage: {name!r}"
        raise ValueError(msg)


def run_pipeline(repo_root: Path, options: PipelineOptions) -> list[StageError]:
    """Run the selected stages in order and collect their failures.

    A commit with nothing to commit is not a failure. git spawn failures
    always stop the pipeline; other failures stop it only with
    ``exit_on_error``.
    """
    failures: list[StageError] = []
    for index, name in enumerate(select_stages(options)):
        prefix = "\n" if index else ""
        display.info(f"{prefix}{STAGE_HEADERS[name]}")
        try:
            _run_stage(name, repo_root, options)
        except GitSpawnError as e:
            failures.append(e)
            break
        except StageError as e:
            if name == COMMIT and e.category is ErrorCategory.NOTHING_TO_COMMIT:
                logger.info("Nothing to commit; continuing")
                continue
            failures.append(e)
            if options.exit_on_error:
                break
    return failures


def run_remote_command(
    repo_root: Path,
    add: tuple[str, str] | None,
    remove: str | None,
    *,
    dry_run: bool,
) -> list[StageError]:
    failures: list[StageError] = []
    try:
        if add:
            remote_add(repo_root, add[0], add[1], dry_run=dry_run)
        if remove:
            remote_remove(repo_root, remove, dry_run=dry_run)
    except StageError as e:
        failures.append(e)
    return failures


# ---------------------------------------------------------------------------
# Click command
# ---------------------------------------------------------------------------


@click.command()
@click.version_option(package_name="meow")
@click.argument("message", required=False)
@click.option("-a", "--add", "files", multiple=True, help="File to stage (repeatable).")
@click.option("-d", "--dry-run", is_flag=True, help="Print git commands without running them.")
@click.option("-u", "--set-upstream", "upstream", help="Push with --set-upstream origin BRANCH.")
@click.option(
    "-f",
    "--force",
    count=True,
    help="Once for --force-with-lease, twice for --force.",
)
@click.option("-v", "--verbose", count=True, help="More output; repeat for debug logging.")
@click.option(
    "-E",
    "--exit",
    "exit_on_error",
    is_flag=True,
    envvar=MEOW_EXIT_ON_ERROR_ENV,
    help="Stop at the first failed stage.",
)
@click.option("-p", "--push", "push_only", is_flag=True, help="Only push.")
@click.option("-c", "--commit", "commit_only", is_flag=True, help="Only stage and commit.")
@click.option(
    "-s",
    "--stream",
    is_flag=True,
    envvar=MEOW_STREAM_PUSH_ENV,
    help="Stream push output as it arrives instead of summarizing it.",
)
@click.option(
    "--remote-add",
    "--radd",
    "remote_add_args",
    nargs=2,
    type=str,
    default=None,
    metavar="NAME URL",
    help="Same as git remote add NAME URL.",
)
@click.option(
    "--remote-remove",
    "--rrm",
    "remote_remove_name",
    default=None,
    metavar="NAME",
    help="Same as git remote remove NAME.",
)
def main(
    message: str | None,
    files: tuple[str, ...],
    dry_run: bool,
    upstream: str | None,
    force: int,
    verbose: int,
    exit_on_error: bool,
    push_only: bool,
    commit_only: bool,
    stream: bool,
    remote_add_args: tuple[str, str] | None,
    remote_remove_name: str | None,
) -> None:
    """meow: stage, commit, and push in one go."""
    setup_logging(verbose)
    remote_mode = bool(remote_add_args) or bool(remote_remove_name)
    if message is None and not (push_only and not commit_only) and not remote_mode:
        msg = "Missing argument 'MESSAGE' (required unless --push or a remote command is used)."
        raise click.UsageError(msg)

    try:
        repo_root = discover_repo_root()
    except RepoDiscoveryError as e:
        logger.info("Repository discovery failed: %s", e)
        display.fatal("root directory not detected; please run meow in a git repository")
        sys.exit(EXIT_FAILURE)

    display.info(f"repository root: {repo_root}\n")
    if dry_run:
        display.debug("dry run")

    token = CancellationToken()
    previous_handler = install_interrupt_handler(token)
    try:
        if remote_mode:
            failures = run_remote_command(
                repo_root, remote_add_args or None, remote_remove_name, dry_run=dry_run
            )
        else:
            options = PipelineOptions(
                message=message,
                files=list(files),
                dry_run=dry_run,
                upstream=upstream,
                force=force,
                exit_on_error=exit_on_error,
                push_only=push_only,
                commit_only=commit_only,
                stream=stream,
                verbose=verbose,
            )
            failures = run_pipeline(repo_root, options)
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    code = exit_code_for(failures, token)
    if code == EXIT_INTERRUPTED:
        display.error("\ninterrupted")
    elif failures:
        display.error("\n" + format_failure_report(failures, verbose=verbose > 0))
    else:
        if dry_run:
            display.debug("\ndry run complete")
        display.success("\n😼")
    sys.exit(code)
