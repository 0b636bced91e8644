"""Tests for relflow.output.console module."""

from __future__ import annotations

import pytest

from relflow.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("git checkout dev/1.0.0", Style.DIM)
        assert console.outputs[0].message == "git checkout dev/1.0.0"
        assert console.outputs[0].style == Style.DIM

    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("failed")
        console.warning("careful")
        console.info("fyi")
        console.verbose("detail")
        assert console.messages == [
            "OK done",
            "error: failed",
            "warning: careful",
            "info: fyi",
            "verb: detail",
        ]

    def test_helpers(self) -> None:
        console = MockConsole()
        console.warning("cleanup failed")
        console.newline()
        assert console.has_warning()
        assert not console.has_error()
        assert len(console.find("cleanup")) == 1
        assert console.count(Style.WARNING) == 1
        assert console.text == "warning: cleanup failed\n"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.header("Publish")


class TestRichConsole:
    def test_verbose_hidden_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.verbose("hidden detail")
        console.info("shown")
        out = capsys.readouterr().out
        assert "hidden detail" not in out
        assert "shown" in out

    def test_verbose_enabled(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(verbose=True).verbose("detail")
        assert "detail" in capsys.readouterr().out

    def test_markup_in_messages_is_literal(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().error("merge [master] failed")
        assert "[master]" in capsys.readouterr().out
