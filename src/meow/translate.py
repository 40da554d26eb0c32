"""Error translation for failed git commands.

Maps captured stderr to an ErrorCategory by checking ordered lists of
(category, phrases) rules; the first rule with any phrase present wins.
Matching is a case-sensitive substring test against the exact wording git
prints, so these rules are tied to git's English messages and may need
updating when git rephrases them.
"""

from __future__ import annotations

import dataclasses

from meow.models import ErrorCategory
from meow.subprocess_result import decode


@dataclasses.dataclass(frozen=True)
class ErrorRule:
    """One translation rule: any of *phrases* in stderr selects *category*."""

    category: ErrorCategory
    phrases: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(phrase in text for phrase in self.phrases)


COMMIT_RULES: tuple[ErrorRule, ...] = (
    ErrorRule(ErrorCategory.EMAIL_NOT_CONFIGURED, ("fatal: unable to auto-detect email address",)),
    ErrorRule(
        ErrorCategory.NOTHING_TO_COMMIT,
        ("No changes to commit", "nothing to commit, working tree clean"),
    ),
    ErrorRule(ErrorCategory.EMPTY_MESSAGE, ("empty commit message",)),
)

STAGE_RULES: tuple[ErrorRule, ...] = (
    ErrorRule(ErrorCategory.NO_MATCHING_FILES, ("did not match any files",)),
)

PUSH_RULES: tuple[ErrorRule, ...] = (
    ErrorRule(ErrorCategory.PUSH_REJECTED, ("[rejected]", "failed to push some refs")),
)

ERROR_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.NO_MATCHING_FILES: "no files matched the given paths",
    ErrorCategory.EMAIL_NOT_CONFIGURED: (
        "git does not know who you are; set it with "
        '`git config --global user.email "you@example.com"`'
    ),
    ErrorCategory.NOTHING_TO_COMMIT: "nothing to commit, working tree clean",
    ErrorCategory.EMPTY_MESSAGE: "aborting commit due to empty commit message",
    ErrorCategory.PUSH_REJECTED: (
        "push rejected by the remote; pull the remote changes first or retry with --force"
    ),
    ErrorCategory.GENERIC: "git command failed",
}


def classify_error(
    stderr: bytes | str,
    rules: tuple[ErrorRule, ...] = COMMIT_RULES,
) -> ErrorCategory:
    """Return the category of the first rule in *rules* matching *stderr*."""
    text = decode(stderr) if isinstance(stderr, bytes) else stderr
    for rule in rules:
        if rule.matches(text):
            return rule.category
    return ErrorCategory.GENERIC


def error_message(category: ErrorCategory) -> str:
    """The fixed user-facing message for *category*."""
    return ERROR_MESSAGES[category]
