"""Tests for relflow.platform.process module."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from relflow.core.result import Err, Ok
from relflow.platform.process import ProcessError, run, run_live


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(("git", "push", "origin", "--tags"), 1, "", "")
        assert str(error) == "git push origin ... failed (exit 1)"

    def test_detail_prefers_stderr(self) -> None:
        assert ProcessError(("x",), 1, "out", " err \n").detail == "err"
        assert ProcessError(("x",), 1, "out", "").detail == "out"
        assert ProcessError(("x",), 2, "", "").detail == "x failed (exit 2)"


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hi')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert result.value.strip() == "hi"

    def test_failure_carries_output(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('bad'); sys.exit(3)"
        result = run([sys.executable, "-c", code], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == "bad"

    def test_missing_executable(self, tmp_path: Path) -> None:
        result = run(["relflow-no-such-binary"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_run(*args: object, **kwargs: object) -> subprocess.CompletedProcess[str]:
            raise subprocess.TimeoutExpired(cmd="git", timeout=1.0)

        monkeypatch.setattr(subprocess, "run", fake_run)
        result = run(["git", "fetch"], cwd=tmp_path, timeout=1.0)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr


class TestRunLive:
    def test_success(self, tmp_path: Path) -> None:
        assert run_live([sys.executable, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure_exit_code(self, tmp_path: Path) -> None:
        result = run_live([sys.executable, "-c", "raise SystemExit(5)"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 5
