"""Output classification for git commit and push.

Turns git's human-oriented output into ChangeSummary / PushSummary models.
These are line heuristics against git's current phrasing, not a parser of a
stable format. Anything unexpected degrades to an unparsed summary carrying
the raw text; nothing here raises on odd input.

Design follows Function Core / Imperative Shell: every function in this
module is pure.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from meow.models import ChangeSummary, PushSummary
from meow.subprocess_result import decode

T = TypeVar("T")

STATS_MARKERS = ("file changed", "files changed", "insertion", "deletion")
MODE_MARKERS = ("create mode", "delete mode")
UP_TO_DATE = "Everything up-to-date"


class UnparsedOutputError(Exception):
    """Raised by extractors when structured extraction has to give up."""


def _as_text(raw: bytes | str) -> str:
    return decode(raw) if isinstance(raw, bytes) else raw


def parse_with_fallback(
    extract: Callable[[str], T],
    raw: str,
    fallback: Callable[[str, str], T],
) -> T:
    """Run *extract* on *raw*; on :class:`UnparsedOutputError` build the fallback.

    *fallback* receives the raw text and the reason the extractor gave.
    """
    try:
        return extract(raw)
    except UnparsedOutputError as e:
        return fallback(raw, str(e))


# ---------------------------------------------------------------------------
# Commit
# ---------------------------------------------------------------------------


def parse_commit_header(line: str) -> tuple[str | None, str | None]:
    """Extract ``(branch, hash)`` from ``[<branch> <hash>] <subject>``.

    The branch is the first token inside the brackets and the hash the last,
    so ``[main (root-commit) abc1234]`` works too. Returns ``(None, None)``
    when the line does not have that shape.
    """
    stripped = line.strip()
    if not stripped.startswith("[") or "]" not in stripped:
        return None, None
    tokens = stripped[1 : stripped.index("]")].split()
    if len(tokens) < 2:
        return None, None
    return tokens[0], tokens[-1]


def is_stats_line(line: str) -> bool:
    return any(ch.isdigit() for ch in line) and any(m in line for m in STATS_MARKERS)


def is_mode_line(line: str) -> bool:
    return any(m in line for m in MODE_MARKERS)


def _leading_int(segment: str, field: str) -> int:
    tokens = segment.split()
    token = tokens[0] if tokens else ""
    try:
        count = int(token)
    except ValueError:
        count = -1
    if count < 0:
        msg = f"could not parse {field} count from {segment.strip()!r}"
        raise UnparsedOutputError(msg)
    return count


def parse_stats_line(line: str) -> tuple[int, int, int]:
    """Return ``(files_changed, insertions, deletions)`` from a stats line.

    git omits zero-valued clauses, so a missing insertion or deletion
    segment counts as zero, in whatever order the segments appear.
    """
    segments = line.strip().split(", ")
    files_segment = segments[0] if segments[0] else "0"
    insertion_segment = next((s for s in segments if "insertion" in s), "0 insertions(+)")
    deletion_segment = next((s for s in segments if "deletion" in s), "0 deletions(-)")

    return (
        _leading_int(files_segment, "files changed"),
        _leading_int(insertion_segment, "insertions"),
        _leading_int(deletion_segment, "deletions"),
    )


def _extract_commit(text: str) -> ChangeSummary:
    lines = text.splitlines()
    branch, revision = parse_commit_header(lines[0]) if lines else (None, None)

    stats_line: str | None = None
    mode_line: str | None = None
    for line in lines[1:]:
        if is_mode_line(line):
            mode_line = line.strip()
        elif is_stats_line(line):
            stats_line = line

    if stats_line is None:
        msg = "no stats line found"
        raise UnparsedOutputError(msg)

    files_changed, insertions, deletions = parse_stats_line(stats_line)
    return ChangeSummary(
        branch=branch,
        revision=revision,
        files_changed=files_changed,
        insertions=insertions,
        deletions=deletions,
        mode_line=mode_line,
        raw=text,
    )


def summarize_commit(raw_stdout: bytes | str) -> ChangeSummary:
    """Summarize ``git commit`` stdout. Never raises on unexpected text."""
    text = _as_text(raw_stdout)
    return parse_with_fallback(_extract_commit, text, ChangeSummary.unparsed)


# ---------------------------------------------------------------------------
# Push
# ---------------------------------------------------------------------------


def _extract_push(text: str) -> PushSummary:
    remote_target: str | None = None
    ref_update: str | None = None
    upstream: str | None = None

    for line in text.splitlines():
        stripped = line.strip()
        if stripped == UP_TO_DATE:
            return PushSummary(up_to_date=True, raw=text)
        if stripped.startswith("To "):
            remote_target = stripped
        if "->" in line:
            ref_update = stripped
        if stripped.startswith("Branch "):
            upstream = stripped

    if remote_target is None and ref_update is None and upstream is None:
        msg = "no remote, ref update, or upstream line found"
        raise UnparsedOutputError(msg)

    return PushSummary(
        remote_target=remote_target,
        ref_update=ref_update,
        upstream=upstream,
        raw=text,
    )


def summarize_push(raw_stdout: bytes | str, raw_stderr: bytes | str = "") -> PushSummary:
    """Summarize ``git push`` output.

    git reports push results on either stream, so stdout and stderr are
    scanned together, stdout first.
    """
    stdout = _as_text(raw_stdout)
    stderr = _as_text(raw_stderr)
    if stdout and stderr and not stdout.endswith("\n"):
        stdout += "\n"
    return parse_with_fallback(_extract_push, stdout + stderr, PushSummary.unparsed)
