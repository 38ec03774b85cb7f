"""Tests for relcfg.output.console module."""

from __future__ import annotations

import pytest

from relcfg.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.HEADER) == "header"


class TestMockConsole:
    def test_print_captures_message_and_style(self) -> None:
        console = MockConsole()
        console.print("hello", Style.DIM)
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DIM

    def test_prefixed_helpers(self) -> None:
        console = MockConsole()
        console.success("written")
        console.error("bad rule")
        console.warning("no match")
        console.info("tip")
        assert console.messages == ["OK written", "error: bad rule", "warning: no match", "info: tip"]
        assert console.has_error()
        assert console.has_warning()
        assert console.count(Style.INFO) == 1

    def test_find_and_clear(self) -> None:
        console = MockConsole()
        console.header("SUMMARY")
        console.newline()
        assert len(console.find("SUMMARY")) == 1
        assert console.text == "SUMMARY\n"
        console.clear()
        assert console.outputs == []


def test_consoles_satisfy_protocol() -> None:
    consoles: list[ConsoleProtocol] = [MockConsole(), RichConsole()]
    assert len(consoles) == 2


def test_rich_console_does_not_interpret_brackets(capsys: pytest.CaptureFixture[str]) -> None:
    console = RichConsole()
    console.print("chore(release): [skip ci]")
    console.warning("plugins[2] ([name, options])")
    out = capsys.readouterr().out
    assert "[skip ci]" in out
    assert "plugins[2] ([name, options])" in out
    assert "warning:" in out
