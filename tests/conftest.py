"""Shared test fixtures for meow."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest


def _git(*args: str, cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)


@pytest.fixture(autouse=True)
def _isolate_git_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of the developer's meow settings."""
    for name in ("MEOW_GIT_EXECUTABLE", "MEOW_EXIT_ON_ERROR", "MEOW_STREAM_PUSH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one initial commit.

    The repo has a committed ``README.md`` on the ``main`` branch and a local
    identity so commits work without global git config.

    Returns the path to the repository root.
    """
    repo = tmp_path / "repo"
    repo.mkdir()
    _git("init", "-b", "main", cwd=repo)
    _git("config", "user.email", "test@meow.test", cwd=repo)
    _git("config", "user.name", "Meow Test", cwd=repo)
    _git("config", "commit.gpgsign", "false", cwd=repo)

    (repo / "README.md").write_text("# Test repo\n")
    _git("add", "README.md", cwd=repo)
    _git("commit", "-m", "Initial commit", cwd=repo)

    return repo.resolve()


@pytest.fixture
def remote_repo(git_repo: Path, tmp_path: Path) -> Path:
    """A bare repository registered as ``origin`` of :func:`git_repo`.

    ``main`` is already pushed and tracked, so a plain ``git push`` works.
    """
    remote = tmp_path / "remote.git"
    _git("init", "--bare", "-b", "main", str(remote), cwd=tmp_path)
    _git("remote", "add", "origin", str(remote), cwd=git_repo)
    _git("push", "--set-upstream", "origin", "main", cwd=git_repo)
    return remote


@pytest.fixture
def run_git():
    """Run a git command in a directory and return its stripped stdout."""

    def _run(*args: str, cwd: Path) -> str:
        return _git(*args, cwd=cwd).stdout.strip()

    return _run
