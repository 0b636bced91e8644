from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from relflow.core.result import Err, Ok
from relflow.output.console import MockConsole
from relflow.release.state import StateStore


def _ask(value: str):
    asked: list[str] = []

    def ask() -> str:
        asked.append(value)
        return value

    return ask, asked


def test_read_missing_and_blank(tmp_path: Path) -> None:
    store = StateStore(tmp_path)
    assert store.read("server") is None

    store.root.mkdir()
    store.path("server").write_text("  \n", encoding="utf-8")
    assert store.read("server") is None


def test_layout(tmp_path: Path) -> None:
    store = StateStore(tmp_path)
    assert store.path("server") == tmp_path / ".git" / ".git_server"
    assert store.path("owner") == tmp_path / ".git" / ".git_own"
    assert store.path("publish") == tmp_path / ".git" / ".git_publish"


def test_resolve_asks_once(tmp_path: Path) -> None:
    store = StateStore(tmp_path)
    ask, asked = _ask(" gitee ")

    assert store.resolve("server", ask=ask, console=MockConsole()) == Ok("gitee")
    assert store.resolve("server", ask=ask, console=MockConsole()) == Ok("gitee")
    assert asked == [" gitee "]
    assert store.path("server").read_text(encoding="utf-8") == "gitee"


def test_refresh_asks_again(tmp_path: Path) -> None:
    store = StateStore(tmp_path)
    assert isinstance(store.write("owner", "user"), Ok)
    ask, asked = _ask("org")

    assert store.resolve("owner", ask=ask, console=MockConsole(), refresh=True) == Ok("org")
    assert asked == ["org"]
    assert store.read("owner") == "org"


def test_empty_answer_is_rejected(tmp_path: Path) -> None:
    store = StateStore(tmp_path)
    ask, _ = _ask("   ")

    result = store.resolve("server", ask=ask, console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"
    assert not store.path("server").exists()


def test_token_is_masked(tmp_path: Path) -> None:
    store = StateStore(tmp_path)
    console = MockConsole()
    ask, _ = _ask("ghp_secret")

    assert store.resolve("token", ask=ask, console=console) == Ok("ghp_secret")
    assert "ghp_secret" not in console.text
    assert console.find("***")


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_token_is_private(tmp_path: Path) -> None:
    store = StateStore(tmp_path)
    assert isinstance(store.write("token", "t"), Ok)
    mode = stat.S_IMODE(store.path("token").stat().st_mode)
    assert mode == 0o600
