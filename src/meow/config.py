"""Environment-based configuration for meow."""

from __future__ import annotations

import os

MEOW_GIT_EXECUTABLE_ENV = "MEOW_GIT_EXECUTABLE"
MEOW_EXIT_ON_ERROR_ENV = "MEOW_EXIT_ON_ERROR"
MEOW_STREAM_PUSH_ENV = "MEOW_STREAM_PUSH"

DEFAULT_GIT_EXECUTABLE = "git"
DEFAULT_REMOTE = "origin"


def get_git_executable() -> str:
    """Resolve the git executable to invoke.

    Resolution order:
    1. ``MEOW_GIT_EXECUTABLE`` environment variable (ignored when empty).
    2. ``git``, looked up on ``PATH`` at spawn time.
    """
    env_value = os.environ.get(MEOW_GIT_EXECUTABLE_ENV, "").strip()
    return env_value or DEFAULT_GIT_EXECUTABLE
