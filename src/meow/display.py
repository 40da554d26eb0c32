"""Terminal output for meow.

Follows Function Core / Imperative Shell:
- Pure functions: format_raw, format_commit_summary, format_push_summary
- Imperative shell: command, output, info, success, warning, error, fatal, debug
"""

from __future__ import annotations

import click

from meow.models import ChangeSummary, PushSummary

OUTPUT_INDENT = "    "
COMMAND_INDENT = "  "


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------


def format_raw(text: str) -> list[str]:
    """Verbatim passthrough of the non-empty lines of *text*, indented."""
    return [f"{OUTPUT_INDENT}{line.rstrip()}" for line in text.splitlines() if line.strip()]


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def format_commit_summary(summary: ChangeSummary, *, verbose: bool = False) -> list[str]:
    """Render a ChangeSummary, falling back to raw output when unparsed."""
    if not summary.parsed:
        lines = format_raw(summary.raw)
        if verbose and summary.note:
            lines.append(f"{OUTPUT_INDENT}(summary unavailable: {summary.note})")
        return lines

    lines: list[str] = []
    if summary.branch and summary.revision:
        lines.append(f"{OUTPUT_INDENT}[{summary.branch} {summary.revision}]")

    changed = _plural(summary.files_changed, "file changed", "files changed")
    if summary.mode_line:
        changed += f", {summary.mode_line}"
    lines.append(f"{OUTPUT_INDENT}{changed}")
    lines.append(
        f"{OUTPUT_INDENT}{summary.insertions} insertions (+), {summary.deletions} deletions (-)"
    )

    if summary.mode_parts:
        directive, mode, paths = summary.mode_parts
        lines.append(f"{OUTPUT_INDENT}{directive} {mode}: {paths}")
    return lines


def format_push_summary(summary: PushSummary, *, verbose: bool = False) -> list[str]:
    """Render a PushSummary, falling back to raw output when unparsed."""
    if summary.up_to_date:
        return [f"{OUTPUT_INDENT}Everything up-to-date"]

    if not summary.parsed:
        lines = format_raw(summary.raw)
        if verbose and summary.note:
            lines.append(f"{OUTPUT_INDENT}(summary unavailable: {summary.note})")
        return lines

    return [
        f"{OUTPUT_INDENT}{line}"
        for line in (summary.remote_target, summary.ref_update, summary.upstream)
        if line
    ]


# ---------------------------------------------------------------------------
# Imperative shell
# ---------------------------------------------------------------------------


def command(args: list[str] | tuple[str, ...]) -> None:
    click.echo(COMMAND_INDENT + click.style(" ".join(args), fg="cyan"))


def output(lines: list[str]) -> None:
    for line in lines:
        click.echo(click.style(line, fg="green"))


def stream_line(stream: str, line: str) -> None:
    if stream == "stderr":
        click.echo(OUTPUT_INDENT + click.style(line, fg="yellow"))
    else:
        click.echo(OUTPUT_INDENT + click.style(line, fg="green"))


def info(text: str) -> None:
    click.echo(click.style(text, fg="magenta"))


def debug(text: str) -> None:
    click.echo(click.style(text, fg="blue"))


def success(text: str) -> None:
    click.echo(click.style(text, fg="green"))


def warning(text: str) -> None:
    click.echo(click.style(text, fg="yellow"), err=True)


def error(text: str) -> None:
    click.echo(click.style(text, fg="red"), err=True)


def fatal(text: str) -> None:
    click.echo(click.style("error: ", fg="red"), err=True)
    click.echo(click.style(f"  {text}", fg="red"), err=True)
    click.echo(click.style("run `meow --help` for detailed help", fg="red"), err=True)
