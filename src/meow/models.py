"""Core data models for meow."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class ErrorCategory(StrEnum):
    """User-facing classes of git failure."""

    NO_MATCHING_FILES = "no_matching_files"
    EMAIL_NOT_CONFIGURED = "email_not_configured"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    EMPTY_MESSAGE = "empty_message"
    PUSH_REJECTED = "push_rejected"
    GENERIC = "generic"


class ChangeSummary(BaseModel):
    """Condensed view of ``git commit`` output."""

    branch: str | None = None
    revision: str | None = Field(default=None, description="Abbreviated commit hash.")
    files_changed: int = Field(default=0, ge=0)
    insertions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    mode_line: str | None = Field(
        default=None,
        description="Last 'create mode' / 'delete mode' line, stripped.",
    )
    parsed: bool = True
    note: str | None = Field(
        default=None,
        description="Why structured extraction gave up. Shown only in verbose mode.",
    )
    raw: str = ""

    @property
    def mode_parts(self) -> tuple[str, ...]:
        """The mode line as (directive, mode, paths) when it has 3+ tokens."""
        if not self.mode_line:
            return ()
        parts = self.mode_line.split(maxsplit=2)
        if len(parts) < 3:
            return ()
        return tuple(parts)

    @classmethod
    def unparsed(cls, raw: str, note: str | None = None) -> ChangeSummary:
        return cls(parsed=False, note=note, raw=raw)


class PushSummary(BaseModel):
    """Condensed view of ``git push`` output (stdout and stderr combined)."""

    remote_target: str | None = Field(default=None, description="The 'To <url>' line.")
    ref_update: str | None = Field(default=None, description="The 'old..new  a -> b' line.")
    upstream: str | None = Field(default=None, description="The 'Branch ... set up to track' line.")
    up_to_date: bool = False
    parsed: bool = True
    note: str | None = None
    raw: str = ""

    @classmethod
    def unparsed(cls, raw: str, note: str | None = None) -> PushSummary:
        return cls(parsed=False, note=note, raw=raw)


class PipelineOptions(BaseModel):
    """Everything the orchestrator needs to decide which stages run and how."""

    message: str | None = None
    files: list[str] = Field(
        default_factory=list,
        description="Paths to stage. Empty means stage everything.",
    )
    dry_run: bool = False
    upstream: str | None = Field(default=None, description="Branch for --set-upstream origin.")
    force: int = Field(default=0, ge=0, description="1 = --force-with-lease, 2+ = --force.")
    exit_on_error: bool = False
    push_only: bool = False
    commit_only: bool = False
    stream: bool = Field(default=False, description="Stream push output line by line.")
    verbose: int = Field(default=0, ge=0)
