# tests/conftest.py
"""Pytest configuration with shared fixtures for the Vine editor tests."""

from __future__ import annotations

import curses
from pathlib import Path
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest

from vine_editor.core.DocumentBuffer import DocumentBuffer
from vine_editor.core.EditorState import EditorState
from vine_editor.core.SyntaxRegistry import SyntaxRegistry
from vine_editor.core.Vine import Vine


# --- Base fixtures for curses and configuration ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr.

    Returns:
        MagicMock: A mocked `stdscr` with terminal size set to (24, 80).
    """
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    stdscr.getch.return_value = curses.ERR
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, dict[str, Any]]:
    """Provide a baseline configuration for Vine tests."""
    return {
        "editor": {
            "tab_size": 4,
            "quit_times": 3,
            "show_line_numbers": True,
        },
        "colors": {},
        "keybindings": {},
        "syntax": [],
    }


@pytest.fixture
def real_editor(
    mock_stdscr: MagicMock, mock_config: dict[str, dict[str, Any]]
) -> Generator[Vine, None, None]:
    """Create a real `Vine` instance with the drawer and curses mocked out.

    The KeyBinder is real, so key codes fed through `mock_stdscr.getch`
    reach the editor's handlers exactly as they would at a terminal.

    Yields:
        Vine: The editor; the patches stay active for the whole test.
    """
    with (
        patch("vine_editor.core.Vine.DrawScreen"),
        patch("vine_editor.core.Vine.curses") as mock_curses,
    ):
        mock_curses.error = curses.error
        mock_curses.ERR = curses.ERR
        mock_curses.KEY_RESIZE = curses.KEY_RESIZE
        mock_curses.has_colors.return_value = True
        mock_curses.COLORS = 256
        mock_curses.COLOR_PAIRS = 256
        mock_curses.color_pair.side_effect = lambda n: n << 8
        mock_curses.A_NORMAL = 0
        mock_curses.A_BOLD = 1
        mock_curses.A_DIM = 2
        mock_curses.A_REVERSE = 4

        editor = Vine(mock_stdscr, mock_config)
        yield editor


def feed_keys(stdscr: MagicMock, keys: list[int]) -> None:
    """Queues `keys` on the mocked window, followed by an endless ERR."""
    queue = list(keys)

    def getch() -> int:
        return queue.pop(0) if queue else curses.ERR

    stdscr.getch.side_effect = getch


@pytest.fixture
def keys(mock_stdscr: MagicMock):
    """Returns a helper that queues key codes on `mock_stdscr`."""
    return lambda codes: feed_keys(mock_stdscr, codes)


# --- Buffer fixtures ---
@pytest.fixture
def registry() -> SyntaxRegistry:
    return SyntaxRegistry()


@pytest.fixture
def c_buffer(registry: SyntaxRegistry) -> DocumentBuffer:
    """An empty buffer with the C syntax active."""
    buffer = DocumentBuffer(tab_width=4, registry=registry)
    buffer.select_syntax("main.c")
    return buffer


@pytest.fixture
def state_with_text() -> EditorState:
    """An EditorState over a small plain-text document."""
    buffer = DocumentBuffer(tab_width=4)
    buffer.load_lines(["hello", "a\tb", "", "last line"])
    return EditorState(buffer, screen_rows=10, screen_cols=40)


@pytest.fixture
def sample_c_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.c"
    path.write_bytes(b"int main(void) {\n    /* start\n       end */\n    return 0;\n}\n")
    return path
