# tests/ui/test_draw_screen.py
"""Unit and integration tests for the `DrawScreen` UI renderer.
=================================================================

Tests for the `DrawScreen` UI renderer.

This module validates utility helpers and rendering behaviors used by
the editor screen layer, including:

- Width-aware truncation.
- Text rows with the line-number gutter and per-class colours.
- The `~` filler and the welcome banner on an empty buffer.
- Status bar composition and the timed message bar.
- Cursor placement and the too-small-window fallback.

An autouse fixture mocks the `curses` module as imported by
`vine_editor.ui.DrawScreen`, so the tests are hermetic and do not require a
real terminal. The editor is a mock carrying a real `EditorState`.
"""

import time
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

from vine_editor.core.DocumentBuffer import DocumentBuffer
from vine_editor.core.EditorState import EditorState
from vine_editor.core.SyntaxRegistry import Highlight
from vine_editor.ui.DrawScreen import DrawScreen


# --- Global `curses` mock -----------------------------------------------------
@pytest.fixture(autouse=True)
def curses_mock() -> Generator[MagicMock, None, None]:
    """Patch `curses` inside DrawScreen with a concrete error type and attributes."""
    mock = MagicMock()

    class CursesError(Exception):
        """Minimal replacement for `curses.error` used in tests."""

    mock.error = CursesError
    mock.A_NORMAL = 0
    mock.A_REVERSE = 4
    mock.A_DIM = 2

    with patch("vine_editor.ui.DrawScreen.curses", mock):
        yield mock


COLORS = {"line_number": 10, "type": 20, "number": 30, "default": 40, "keyword": 50}


@pytest.fixture
def mock_editor() -> MagicMock:
    """A mock Vine editor with a real buffer and view state on a 24x80 screen."""
    editor = MagicMock()
    buffer = DocumentBuffer(tab_width=4)
    editor.state = EditorState(buffer, screen_rows=22, screen_cols=80)
    editor.colors = dict(COLORS)
    editor.config = {}
    editor.status_message = ""
    editor.status_time = 0.0
    editor.stdscr = MagicMock()
    editor.stdscr.getmaxyx.return_value = (24, 80)
    return editor


def drawn_at(editor: MagicMock, y: int) -> list[tuple]:
    return [c.args for c in editor.stdscr.addstr.call_args_list if c.args[0] == y]


class TestDrawScreenUtils:
    """Unit tests for DrawScreen's small utility helpers."""

    def test_truncate_string(self, mock_editor: MagicMock) -> None:
        ds = DrawScreen(mock_editor, mock_editor.config)
        assert ds.truncate_string("long string", 4) == "long"
        assert ds.truncate_string("short", 10) == "short"
        assert ds.truncate_string("", 3) == ""

    def test_truncate_never_splits_wide_characters(self, mock_editor: MagicMock) -> None:
        ds = DrawScreen(mock_editor, mock_editor.config)
        assert ds.truncate_string("中文字", 3) == "中"
        assert ds.truncate_string("中文字", 4) == "中文"

    def test_nonprint_uses_reverse_video(self, mock_editor: MagicMock) -> None:
        ds = DrawScreen(mock_editor, mock_editor.config)
        assert ds._attr_for(Highlight.NONPRINT) == 4
        assert ds._attr_for(Highlight.KEYWORD2) == 20
        assert ds._attr_for(Highlight.MATCH) == 0


class TestRows:
    def test_gutter_and_highlight_runs(self, mock_editor: MagicMock) -> None:
        buffer = mock_editor.state.buffer
        buffer.load_lines(["int x = 1;"])
        buffer.select_syntax("a.c")
        DrawScreen(mock_editor, mock_editor.config).draw()

        assert drawn_at(mock_editor, 0) == [
            (0, 0, "   1 ", 10),
            (0, 5, "int", 20),
            (0, 8, " x = ", 40),
            (0, 13, "1", 30),
            (0, 14, ";", 40),
        ]

    def test_filler_after_last_row(self, mock_editor: MagicMock) -> None:
        mock_editor.state.buffer.load_lines(["only"])
        DrawScreen(mock_editor, mock_editor.config).draw()
        assert drawn_at(mock_editor, 1) == [(1, 0, "~", 10)]
        assert drawn_at(mock_editor, 21) == [(21, 0, "~", 10)]

    def test_welcome_banner_on_empty_buffer(self, mock_editor: MagicMock) -> None:
        DrawScreen(mock_editor, mock_editor.config).draw()
        welcome = "Vine editor -- version NET/1"
        padding = (80 - len(welcome)) // 2
        banner = "~" + " " * (padding - 1) + welcome
        assert drawn_at(mock_editor, 22 // 3) == [(7, 0, banner, 0)]

    def test_no_banner_once_text_exists(self, mock_editor: MagicMock) -> None:
        mock_editor.state.buffer.load_lines(["x"])
        DrawScreen(mock_editor, mock_editor.config).draw()
        assert drawn_at(mock_editor, 7) == [(7, 0, "~", 10)]

    def test_wide_run_is_clipped_at_right_edge(self, mock_editor: MagicMock) -> None:
        ds = DrawScreen(mock_editor, mock_editor.config)
        ds._draw_single_line(0, [("ab", Highlight.NORMAL), ("中文字", Highlight.NORMAL)], 75)
        assert drawn_at(mock_editor, 0) == [(0, 75, "ab", 40), (0, 77, "中", 40)]


class TestBars:
    def test_status_bar_layout(self, mock_editor: MagicMock) -> None:
        buffer = mock_editor.state.buffer
        buffer.load_lines(["x"])
        buffer.filename = "/tmp/a.c"
        buffer.select_syntax()
        DrawScreen(mock_editor, mock_editor.config)._draw_status_bar()

        (y, x, line, attr), = drawn_at(mock_editor, 22)
        assert (y, x, attr) == (22, 0, 4)
        assert len(line) == 80
        assert line.startswith("/tmp/a.c - 1 lines ")
        assert line.endswith("C/C++ | 1/1")

    def test_status_bar_defaults_and_dirty_mark(self, mock_editor: MagicMock) -> None:
        mock_editor.state.insert_char("z")
        DrawScreen(mock_editor, mock_editor.config)._draw_status_bar()
        line = drawn_at(mock_editor, 22)[0][2]
        assert line.startswith("[No Name] - 1 lines [+]")
        assert line.endswith("[No FT] | 1/1")

    def test_status_bar_drops_right_part_when_narrow(self, mock_editor: MagicMock) -> None:
        mock_editor.stdscr.getmaxyx.return_value = (24, 20)
        mock_editor.state.buffer.filename = "a-rather-long-file-name.txt"
        DrawScreen(mock_editor, mock_editor.config)._draw_status_bar()
        line = drawn_at(mock_editor, 22)[0][2]
        assert line == "a-rather-long-file-n"

    def test_status_attribute_uses_status_color(self, mock_editor: MagicMock) -> None:
        mock_editor.colors["status"] = 256
        DrawScreen(mock_editor, mock_editor.config)._draw_status_bar()
        assert drawn_at(mock_editor, 22)[0][3] == 256 | 4

    def test_fresh_message_is_shown(self, mock_editor: MagicMock) -> None:
        mock_editor.status_message = "HELP: Ctrl-S = Save"
        mock_editor.status_time = time.time()
        DrawScreen(mock_editor, mock_editor.config)._draw_message_bar()
        assert drawn_at(mock_editor, 23) == [(23, 0, "HELP: Ctrl-S = Save", 0)]

    def test_old_message_is_hidden(self, mock_editor: MagicMock) -> None:
        mock_editor.status_message = "stale"
        mock_editor.status_time = time.time() - DrawScreen.MESSAGE_TIMEOUT - 1
        DrawScreen(mock_editor, mock_editor.config)._draw_message_bar()
        assert drawn_at(mock_editor, 23) == []

    def test_message_is_truncated(self, mock_editor: MagicMock) -> None:
        mock_editor.stdscr.getmaxyx.return_value = (24, 20)
        mock_editor.status_message = "x" * 50
        mock_editor.status_time = time.time()
        DrawScreen(mock_editor, mock_editor.config)._draw_message_bar()
        assert drawn_at(mock_editor, 23)[0][2] == "x" * 19


class TestFrame:
    def test_cursor_after_gutter_and_tab(self, mock_editor: MagicMock) -> None:
        mock_editor.state.buffer.load_lines(["a\tb"])
        mock_editor.state.cx = 2
        DrawScreen(mock_editor, mock_editor.config).draw()
        mock_editor.stdscr.move.assert_called_with(0, 9)
        mock_editor.stdscr.noutrefresh.assert_called_once()

    def test_small_window(self, mock_editor: MagicMock) -> None:
        mock_editor.stdscr.getmaxyx.return_value = (3, 10)
        DrawScreen(mock_editor, mock_editor.config).draw()
        mock_editor.stdscr.clear.assert_called_once()
        mock_editor.stdscr.erase.assert_not_called()
        text = mock_editor.stdscr.addstr.call_args.args[2]
        assert text == "Window to"

    def test_curses_error_is_contained(
        self, mock_editor: MagicMock, curses_mock: MagicMock
    ) -> None:
        mock_editor.stdscr.erase.side_effect = curses_mock.error("boom")
        DrawScreen(mock_editor, mock_editor.config).draw()
        mock_editor.stdscr.noutrefresh.assert_not_called()

    def test_addstr_error_does_not_abort_frame(
        self, mock_editor: MagicMock, curses_mock: MagicMock
    ) -> None:
        mock_editor.stdscr.addstr.side_effect = curses_mock.error("corner")
        DrawScreen(mock_editor, mock_editor.config).draw()
        mock_editor.stdscr.noutrefresh.assert_called_once()

    def test_update_display(self, mock_editor: MagicMock, curses_mock: MagicMock) -> None:
        DrawScreen(mock_editor, mock_editor.config).update_display()
        curses_mock.doupdate.assert_called_once()
