"""Shared subprocess transport types.

Used by the process runner, the streaming push variant, and every pipeline
stage. Results own their captured bytes; nothing here is cached or shared.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

STDERR_PLACEHOLDER = "failed to read stderr (non-utf8)"


def decode(data: bytes) -> str:
    """Decode captured output as UTF-8, replacing invalid sequences."""
    return data.decode("utf-8", errors="replace")


@dataclasses.dataclass(frozen=True)
class CommandSpec:
    """An argument vector plus the directory it runs in."""

    args: tuple[str, ...]
    cwd: Path

    def __post_init__(self) -> None:
        if not self.args:
            msg = "cannot execute an empty command"
            raise ValueError(msg)

    def display(self) -> str:
        return " ".join(self.args)


@dataclasses.dataclass(frozen=True)
class Success:
    """The process exited with status 0."""

    stdout: bytes
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return True

    @property
    def stdout_text(self) -> str:
        return decode(self.stdout)

    @property
    def stderr_text(self) -> str:
        return decode(self.stderr)


@dataclasses.dataclass(frozen=True)
class Failure:
    """The process ran and exited with a non-zero status."""

    stdout: bytes
    stderr: bytes
    exit_info: str
    returncode: int | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def stdout_text(self) -> str:
        return decode(self.stdout)

    @property
    def stderr_text(self) -> str:
        return decode(self.stderr)


@dataclasses.dataclass(frozen=True)
class SpawnFailure(Failure):
    """The process could not be started at all (missing binary, permissions)."""


ExecutionResult = Success | Failure
