"""Tests for coltable.config -- options and terminal width detection."""

from __future__ import annotations

import os

import pytest

from coltable import config
from coltable.config import DEFAULT_LINE_LENGTH, TableOptions, terminal_width


class _FakeStdout:
    def fileno(self) -> int:
        return 1


class TestTerminalWidth:
    def test_uses_terminal_columns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config.sys, "stdout", _FakeStdout())
        monkeypatch.setattr(config.os, "get_terminal_size", lambda fd: os.terminal_size((120, 40)))
        assert terminal_width() == 120

    def test_falls_back_when_not_a_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def no_terminal(fd: int) -> os.terminal_size:
            raise OSError("not a tty")

        monkeypatch.setattr(config.sys, "stdout", _FakeStdout())
        monkeypatch.setattr(config.os, "get_terminal_size", no_terminal)
        assert terminal_width() == DEFAULT_LINE_LENGTH
        assert terminal_width(fallback=100) == 100

    def test_falls_back_on_zero_columns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config.sys, "stdout", _FakeStdout())
        monkeypatch.setattr(config.os, "get_terminal_size", lambda fd: os.terminal_size((0, 0)))
        assert terminal_width() == DEFAULT_LINE_LENGTH

    def test_falls_back_without_stdout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config.sys, "stdout", None)
        assert terminal_width() == DEFAULT_LINE_LENGTH


class TestTableOptions:
    def test_defaults(self) -> None:
        options = TableOptions()
        assert options.line_length == 0
        assert options.wrap is True
        assert options.separator_spaces == 2

    def test_for_terminal_uses_detected_width(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config, "terminal_width", lambda: 100)
        assert TableOptions.for_terminal().line_length == 100

    def test_for_terminal_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config, "terminal_width", lambda: 100)
        options = TableOptions.for_terminal(line_length=40, wrap=False)
        assert options.line_length == 40
        assert options.wrap is False

    def test_new_table_carries_options(self) -> None:
        options = TableOptions(line_length=5, wrap=False, separator_spaces=3, ellipsis="~")
        tbl = options.new_table()
        assert tbl.line_length == 5
        assert tbl.separator_spaces == 3
        assert tbl.add_row("foo bar").render() == "foo ~"

    def test_new_table_is_empty_each_time(self) -> None:
        options = TableOptions()
        first = options.new_table().add_row("a")
        assert len(first) == 1
        assert len(options.new_table()) == 0
