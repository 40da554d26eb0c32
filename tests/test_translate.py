"""Tests for meow.translate — stderr to ErrorCategory."""

from __future__ import annotations

import pytest

from meow.models import ErrorCategory
from meow.translate import (
    COMMIT_RULES,
    ERROR_MESSAGES,
    PUSH_RULES,
    STAGE_RULES,
    ErrorRule,
    classify_error,
    error_message,
)


class TestClassifyCommit:
    @pytest.mark.parametrize(
        ("stderr", "expected"),
        [
            (
                "*** Please tell me who you are.\n\nfatal: unable to auto-detect email address "
                "(got 'cat@box.(none)')",
                ErrorCategory.EMAIL_NOT_CONFIGURED,
            ),
            (
                "On branch main\nnothing to commit, working tree clean",
                ErrorCategory.NOTHING_TO_COMMIT,
            ),
            ("No changes to commit", ErrorCategory.NOTHING_TO_COMMIT),
            ("Aborting commit due to empty commit message.", ErrorCategory.EMPTY_MESSAGE),
            ("fatal: something unexpected", ErrorCategory.GENERIC),
            ("", ErrorCategory.GENERIC),
        ],
    )
    def test_categories(self, stderr: str, expected: ErrorCategory) -> None:
        assert classify_error(stderr) is expected

    def test_earlier_rule_wins(self) -> None:
        text = "empty commit message\nnothing to commit, working tree clean"
        assert classify_error(text) is ErrorCategory.NOTHING_TO_COMMIT

    def test_earlier_rule_wins_regardless_of_text_order(self) -> None:
        text = "nothing to commit, working tree clean\nempty commit message"
        assert classify_error(text) is ErrorCategory.NOTHING_TO_COMMIT

    def test_email_beats_everything(self) -> None:
        text = (
            "empty commit message\nNo changes to commit\n"
            "fatal: unable to auto-detect email address"
        )
        assert classify_error(text) is ErrorCategory.EMAIL_NOT_CONFIGURED

    def test_case_sensitive(self) -> None:
        assert classify_error("NOTHING TO COMMIT, WORKING TREE CLEAN") is ErrorCategory.GENERIC

    def test_accepts_bytes(self) -> None:
        assert classify_error(b"empty commit message") is ErrorCategory.EMPTY_MESSAGE

    def test_commit_rules_ignore_staging_phrase(self) -> None:
        text = "fatal: pathspec 'x' did not match any files"
        assert classify_error(text) is ErrorCategory.GENERIC


class TestClassifyOtherStages:
    def test_no_matching_files(self) -> None:
        text = "fatal: pathspec 'ghost.txt' did not match any files"
        assert classify_error(text, STAGE_RULES) is ErrorCategory.NO_MATCHING_FILES

    def test_push_rejected(self) -> None:
        text = (
            "To origin\n ! [rejected]        main -> main (fetch first)\n"
            "error: failed to push some refs to 'origin'"
        )
        assert classify_error(text, PUSH_RULES) is ErrorCategory.PUSH_REJECTED

    def test_custom_rules(self) -> None:
        rules = (ErrorRule(ErrorCategory.PUSH_REJECTED, ("boom",)),)
        assert classify_error("a boom happened", rules) is ErrorCategory.PUSH_REJECTED
        assert classify_error("quiet", rules) is ErrorCategory.GENERIC


class TestErrorMessage:
    def test_every_category_has_a_message(self) -> None:
        assert set(ERROR_MESSAGES) == set(ErrorCategory)

    def test_message_lookup(self) -> None:
        message = error_message(ErrorCategory.NOTHING_TO_COMMIT)
        assert message == "nothing to commit, working tree clean"

    def test_rule_lists_are_ordered_tuples(self) -> None:
        assert [r.category for r in COMMIT_RULES] == [
            ErrorCategory.EMAIL_NOT_CONFIGURED,
            ErrorCategory.NOTHING_TO_COMMIT,
            ErrorCategory.EMPTY_MESSAGE,
        ]
