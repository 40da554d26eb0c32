"""Process runner for meow.

Two ways to execute a command:
- run_command: buffered; waits for exit and returns everything at once.
- stream_command: reads stdout and stderr concurrently and hands each line to
  a callback as it arrives. Used for long-running pushes.

Both build their result with the same ``_to_result`` so that a given exit
status and output classify identically on either path. Neither path retries
or times out: a hung subprocess hangs the caller.
"""

from __future__ import annotations

import logging
import queue
import subprocess
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import IO

from meow.subprocess_result import (
    STDERR_PLACEHOLDER,
    CommandSpec,
    ExecutionResult,
    Failure,
    SpawnFailure,
    Success,
    decode,
)

logger = logging.getLogger(__name__)

LineSink = Callable[[str, str], None]

STDOUT = "stdout"
STDERR = "stderr"


# ---------------------------------------------------------------------------
# Result construction
# ---------------------------------------------------------------------------


def _stderr_for_message(stderr: bytes) -> str:
    try:
        return stderr.decode("utf-8").strip()
    except UnicodeDecodeError:
        return STDERR_PLACEHOLDER


def _to_result(spec: CommandSpec, returncode: int, stdout: bytes, stderr: bytes) -> ExecutionResult:
    if returncode == 0:
        logger.debug("Command succeeded: %s", spec.display())
        return Success(stdout=stdout, stderr=stderr)

    exit_info = (
        f"command `{spec.display()}` executed in `{spec.cwd}` failed with: "
        f"{_stderr_for_message(stderr)}"
    )
    logger.info("Command failed (exit %d): %s", returncode, spec.display())
    return Failure(stdout=stdout, stderr=stderr, exit_info=exit_info, returncode=returncode)


def _spawn_failure(spec: CommandSpec, error: OSError) -> SpawnFailure:
    exit_info = f"failed to execute command `{spec.display()}` in directory `{spec.cwd}`: {error}"
    logger.info("Spawn failed: %s", exit_info)
    return SpawnFailure(stdout=b"", stderr=b"", exit_info=exit_info, returncode=None)


# ---------------------------------------------------------------------------
# Buffered runner
# ---------------------------------------------------------------------------


def run_command(cwd: Path, args: Sequence[str]) -> ExecutionResult:
    """Execute *args* in *cwd* and capture both streams.

    Does **not** raise on non-zero exit codes or on spawn errors; both come
    back as a :class:`Failure` (:class:`SpawnFailure` for the latter).

    Raises:
        ValueError: If *args* is empty.
    """
    spec = CommandSpec(args=tuple(args), cwd=Path(cwd))
    logger.debug("Running: %s (cwd=%s)", spec.display(), spec.cwd)
    try:
        completed = subprocess.run(
            list(spec.args),
            cwd=spec.cwd,
            capture_output=True,
        )
    except OSError as e:
        return _spawn_failure(spec, e)
    return _to_result(spec, completed.returncode, completed.stdout, completed.stderr)


# ---------------------------------------------------------------------------
# Streaming runner
# ---------------------------------------------------------------------------


def _read_lines(
    name: str,
    stream: IO[bytes],
    sink: queue.Queue[tuple[str, bytes | None]],
) -> None:
    """Forward raw lines from *stream* into *sink*, then a ``None`` sentinel."""
    try:
        for raw_line in iter(stream.readline, b""):
            sink.put((name, raw_line))
    finally:
        stream.close()
        sink.put((name, None))


def stream_command(
    cwd: Path,
    args: Sequence[str],
    on_line: LineSink,
) -> ExecutionResult:
    """Execute *args*, delivering each output line to *on_line* as it arrives.

    One reader thread per pipe feeds a shared queue; only the calling thread
    invokes *on_line*, so lines from the two streams never interleave
    mid-line. Both readers are joined before the process is waited on.

    ``on_line`` receives ``(stream_name, line)`` where ``stream_name`` is
    ``"stdout"`` or ``"stderr"`` and ``line`` has its newline stripped.
    """
    spec = CommandSpec(args=tuple(args), cwd=Path(cwd))
    logger.debug("Streaming: %s (cwd=%s)", spec.display(), spec.cwd)
    try:
        proc = subprocess.Popen(
            list(spec.args),
            cwd=spec.cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        return _spawn_failure(spec, e)

    if proc.stdout is None or proc.stderr is None:
        logger.warning("Pipe capture unavailable; falling back to buffered output")
        stdout, stderr = proc.communicate()
        return _to_result(spec, proc.returncode, stdout or b"", stderr or b"")

    sink: queue.Queue[tuple[str, bytes | None]] = queue.Queue()
    readers = [
        threading.Thread(target=_read_lines, args=(STDOUT, proc.stdout, sink), daemon=True),
        threading.Thread(target=_read_lines, args=(STDERR, proc.stderr, sink), daemon=True),
    ]
    for reader in readers:
        reader.start()

    captured: dict[str, list[bytes]] = {STDOUT: [], STDERR: []}
    open_streams = len(readers)
    while open_streams:
        name, raw_line = sink.get()
        if raw_line is None:
            open_streams -= 1
            continue
        captured[name].append(raw_line)
        on_line(name, decode(raw_line).rstrip("\r\n"))

    for reader in readers:
        reader.join()
    returncode = proc.wait()

    return _to_result(spec, returncode, b"".join(captured[STDOUT]), b"".join(captured[STDERR]))
