"""Tests for meow.runner — buffered and streaming process execution."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest

from meow.runner import _to_result, run_command, stream_command
from meow.subprocess_result import (
    STDERR_PLACEHOLDER,
    CommandSpec,
    Failure,
    SpawnFailure,
    Success,
)

if TYPE_CHECKING:
    from pathlib import Path

PY = sys.executable


def _script(code: str) -> list[str]:
    return [PY, "-c", code]


# ---------------------------------------------------------------------------
# CommandSpec
# ---------------------------------------------------------------------------


class TestCommandSpec:
    def test_display(self, tmp_path: Path) -> None:
        spec = CommandSpec(args=("git", "commit", "-m", "hi"), cwd=tmp_path)
        assert spec.display() == "git commit -m hi"

    def test_rejects_empty(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="empty command"):
            CommandSpec(args=(), cwd=tmp_path)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    def test_success_captures_stdout(self, tmp_path: Path) -> None:
        result = run_command(tmp_path, _script("print('purr')"))
        assert isinstance(result, Success)
        assert result.ok is True
        assert result.stdout == b"purr\n"

    def test_runs_in_working_directory(self, tmp_path: Path) -> None:
        result = run_command(tmp_path, _script("import os; print(os.getcwd())"))
        assert isinstance(result, Success)
        assert result.stdout_text.strip() == str(tmp_path.resolve())

    def test_nonzero_exit_is_failure(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('  hiss  \\n'); sys.exit(3)"
        result = run_command(tmp_path, _script(code))
        assert isinstance(result, Failure)
        assert not isinstance(result, SpawnFailure)
        assert result.ok is False
        assert result.returncode == 3
        assert result.stderr == b"  hiss  \n"
        assert "failed with: hiss" in result.exit_info
        assert str(tmp_path) in result.exit_info
        assert PY in result.exit_info

    def test_non_utf8_stderr_uses_placeholder(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.buffer.write(b'\\xff\\xfe'); sys.exit(1)"
        result = run_command(tmp_path, _script(code))
        assert isinstance(result, Failure)
        assert STDERR_PLACEHOLDER in result.exit_info
        assert result.stderr_text == "\ufffd\ufffd"

    def test_missing_binary_is_spawn_failure(self, tmp_path: Path) -> None:
        result = run_command(tmp_path, ["meow-no-such-binary-xyz", "--help"])
        assert isinstance(result, SpawnFailure)
        assert isinstance(result, Failure)
        assert result.returncode is None
        assert "failed to execute command" in result.exit_info
        assert "meow-no-such-binary-xyz" in result.exit_info

    def test_empty_args_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            run_command(tmp_path, [])


# ---------------------------------------------------------------------------
# stream_command
# ---------------------------------------------------------------------------


class TestStreamCommand:
    def test_delivers_lines_from_both_streams(self, tmp_path: Path) -> None:
        code = (
            "import sys\n"
            "print('one', flush=True)\n"
            "sys.stderr.write('two\\n'); sys.stderr.flush()\n"
            "print('three', flush=True)\n"
        )
        seen: list[tuple[str, str]] = []
        result = stream_command(
            tmp_path, _script(code), lambda name, line: seen.append((name, line))
        )

        assert isinstance(result, Success)
        assert [line for name, line in seen if name == "stdout"] == ["one", "three"]
        assert [line for name, line in seen if name == "stderr"] == ["two"]
        assert result.stdout == b"one\nthree\n"
        assert result.stderr == b"two\n"

    def test_missing_binary_is_spawn_failure(self, tmp_path: Path) -> None:
        result = stream_command(tmp_path, ["meow-no-such-binary-xyz"], lambda n, line: None)
        assert isinstance(result, SpawnFailure)

    @pytest.mark.parametrize(
        "code",
        [
            "print('To origin'); import sys; sys.stderr.write('a..b  main -> main\\n')",
            "import sys; sys.stderr.write('! [rejected] main -> main\\n'); sys.exit(1)",
            "import sys; sys.exit(128)",
        ],
    )
    def test_same_outcome_as_buffered(self, tmp_path: Path, code: str) -> None:
        buffered = run_command(tmp_path, _script(code))
        streamed = stream_command(tmp_path, _script(code), lambda n, line: None)

        assert type(streamed) is type(buffered)
        assert streamed.stdout == buffered.stdout
        assert streamed.stderr == buffered.stderr
        if isinstance(buffered, Failure):
            assert isinstance(streamed, Failure)
            assert streamed.returncode == buffered.returncode
            assert streamed.exit_info == buffered.exit_info

    @pytest.mark.parametrize(
        ("returncode", "stdout", "stderr"),
        [
            (0, b"To origin\n", b"   a..b  main -> main\n"),
            (1, b"", b" ! [rejected]        main -> main (fetch first)\n"),
        ],
    )
    @patch("meow.runner.subprocess.Popen")
    def test_missing_pipes_drain_same_process(
        self,
        mock_popen,
        tmp_path: Path,
        returncode: int,
        stdout: bytes,
        stderr: bytes,
    ) -> None:
        proc = MagicMock()
        proc.stdout = None
        proc.stderr = None
        proc.returncode = returncode
        proc.communicate.return_value = (stdout, stderr)
        mock_popen.return_value = proc
        on_line = MagicMock()
        args = ["git", "push"]

        result = stream_command(tmp_path, args, on_line)

        spec = CommandSpec(args=tuple(args), cwd=tmp_path)
        expected = _to_result(spec, returncode, stdout, stderr)
        assert mock_popen.call_count == 1
        proc.communicate.assert_called_once_with()
        on_line.assert_not_called()
        assert type(result) is type(expected)
        assert result.stdout == stdout
        assert result.stderr == stderr
        if isinstance(expected, Failure):
            assert isinstance(result, Failure)
            assert result.exit_info == expected.exit_info
            assert result.returncode == returncode
