# vine_editor/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders the Vine editor interface with curses.

It is responsible for:
- drawing the visible rows with the line-number gutter and syntax colours,
- the `~` filler and the welcome banner on an empty buffer,
- the inverse-video status bar and the timed message bar,
- placing the physical cursor.

All geometry (scroll offsets, gutter width, visible slices) comes from
`vine_editor.core.Viewport`; this class only maps highlight classes to curses
attributes and clips wide glyphs to the window.
"""

import curses
import logging
import time
from typing import TYPE_CHECKING, Any

from wcwidth import wcwidth

from vine_editor.core import Viewport
from vine_editor.core.SyntaxRegistry import Highlight

if TYPE_CHECKING:
    from vine_editor.core.Vine import Vine


VERSION = "NET/1"
WELCOME_TEMPLATE = "Vine editor -- version {version}"
MESSAGE_TIMEOUT = 5

# Highlight class → key in the editor's colour table
HIGHLIGHT_COLOR_NAMES: dict[Highlight, str] = {
    Highlight.NORMAL: "default",
    Highlight.COMMENT: "comment",
    Highlight.MLCOMMENT: "comment",
    Highlight.KEYWORD1: "keyword",
    Highlight.KEYWORD2: "type",
    Highlight.STRING: "string",
    Highlight.NUMBER: "number",
    Highlight.MATCH: "search_match",
}


def _cell_width(ch: str) -> int:
    w = wcwidth(ch)
    return 1 if w < 0 else w


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Paints one frame of the editor: text rows, status bar, message bar and
    cursor. Every curses error is caught and logged so a bad frame never
    stops the editor.

    Attributes:
        MIN_WINDOW_WIDTH (int): Smallest width the editor will draw in.
        MIN_WINDOW_HEIGHT (int): Smallest height the editor will draw in.
        MESSAGE_TIMEOUT (int): Seconds a status message stays visible.
        editor (Vine): The editor being drawn.
        config (dict): Editor configuration.
        stdscr (curses.window): Target window.
        colors (dict): Colour name → curses attribute, owned by the editor.
    """

    MIN_WINDOW_WIDTH = 20
    MIN_WINDOW_HEIGHT = 5
    MESSAGE_TIMEOUT = MESSAGE_TIMEOUT

    def __init__(self, editor: "Vine", config: dict[str, Any]) -> None:
        self.editor = editor
        self.config = config
        self.stdscr = editor.stdscr
        self.colors = editor.colors

    def _attr_for(self, hl: Highlight) -> int:
        if hl == Highlight.NONPRINT:
            return curses.A_REVERSE
        return self.colors.get(HIGHLIGHT_COLOR_NAMES.get(hl, "default"), curses.A_NORMAL)

    def draw(self) -> None:
        """The main screen drawing method."""
        try:
            height, width = self.stdscr.getmaxyx()

            if height < self.MIN_WINDOW_HEIGHT or width < self.MIN_WINDOW_WIDTH:
                self._show_small_window_error(height, width)
                return

            Viewport.scroll(self.editor.state)

            self.stdscr.erase()
            self._draw_rows()
            self._draw_status_bar()
            self._draw_message_bar()
            self._position_cursor()
            self.stdscr.noutrefresh()

        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)
        except Exception as e:
            logging.exception("Unexpected error in DrawScreen.draw()")
            self.editor._set_status_message(f"Draw error: {str(e)[:80]}...")

    def _draw_rows(self) -> None:
        state = self.editor.state
        lines = Viewport.visible_lines(state)
        gutter_attr = self.colors.get("line_number", curses.A_DIM)

        for screen_row, line in enumerate(lines):
            if line.row_index is None:
                self._draw_filler(screen_row)
                continue
            x = 0
            if line.gutter:
                self._put(screen_row, 0, line.gutter, gutter_attr)
                x = len(line.gutter)
            self._draw_single_line(screen_row, line.runs, x)

    def _draw_filler(self, screen_row: int) -> None:
        """Draws `~`, or the centred welcome banner on an empty buffer."""
        state = self.editor.state
        _h, width = self.stdscr.getmaxyx()
        if state.buffer.numrows == 0 and screen_row == state.screen_rows // 3:
            welcome = self.truncate_string(WELCOME_TEMPLATE.format(version=VERSION), width)
            padding = (width - len(welcome)) // 2
            banner = ("~" + " " * (padding - 1) if padding else "") + welcome
            self._put(screen_row, 0, banner, curses.A_NORMAL)
        else:
            self._put(screen_row, 0, "~", self.colors.get("line_number", curses.A_DIM))

    def _draw_single_line(
        self, screen_row: int, runs: list[tuple[str, Highlight]], start_x: int
    ) -> None:
        """Draws highlight runs from `start_x`, stopping at the right edge.

        Wide Unicode characters (wcwidth == 2) are never split in half.
        """
        _h, window_width = self.stdscr.getmaxyx()
        x = start_x
        for text, hl in runs:
            avail = window_width - x
            if avail <= 0:
                break
            visible = self.truncate_string(text, avail)
            if visible:
                self._put(screen_row, x, visible, self._attr_for(hl))
            x += sum(_cell_width(ch) for ch in visible)
            if len(visible) < len(text):
                break

    def _put(self, y: int, x: int, text: str, attr: int) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error as e:
            # Writing the bottom-right cell raises after a successful write.
            logging.debug(f"addstr at ({y},{x}) raised: {e}")

    def _draw_status_bar(self) -> None:
        """Inverse-video bar: name, line count, dirty mark; filetype and position."""
        height, width = self.stdscr.getmaxyx()
        state = self.editor.state
        buffer = state.buffer
        y = height - 2

        name = (buffer.filename or "[No Name]")[:20]
        left = f"{name} - {buffer.numrows} lines {'[+]' if buffer.is_dirty else ''}"
        filetype = buffer.active_syntax.filetype if buffer.active_syntax else "[No FT]"
        right = f"{filetype} | {state.cy + 1}/{buffer.numrows}"

        left = self.truncate_string(left, width)
        gap = width - len(left)
        line = left + " " * (gap - len(right)) + right if gap >= len(right) else left.ljust(width)

        attr = self.colors.get("status", curses.A_NORMAL) | curses.A_REVERSE
        self._put(y, 0, line, attr)

    def _draw_message_bar(self) -> None:
        height, width = self.stdscr.getmaxyx()
        msg = self.editor.status_message
        if not msg or time.time() - self.editor.status_time >= self.MESSAGE_TIMEOUT:
            return
        self._put(height - 1, 0, self.truncate_string(msg, width - 1), curses.A_NORMAL)

    def _position_cursor(self) -> None:
        """Moves the physical cursor to the editing position."""
        height, width = self.stdscr.getmaxyx()
        y, x = Viewport.cursor_screen_position(self.editor.state)
        y = max(0, min(y, height - 3))
        x = max(0, min(x, width - 1))
        try:
            self.stdscr.move(y, x)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({y}, {x}): {e}")

    def truncate_string(self, s: str, max_width: int) -> str:
        """Return `s` clipped to visual width `max_width`.

        Non-printable characters count as one cell.
        """
        result: list[str] = []
        consumed = 0
        for ch in s:
            w = _cell_width(ch)
            if consumed + w > max_width:
                break
            result.append(ch)
            consumed += w
        return "".join(result)

    def _show_small_window_error(self, height: int, width: int) -> None:
        """Displays a message that the window is too small."""
        msg = (
            f"Window too small ({width}x{height}). "
            f"Minimum is {self.MIN_WINDOW_WIDTH}x{self.MIN_WINDOW_HEIGHT}."
        )
        try:
            self.stdscr.clear()
            start_col = max(0, (width - len(msg)) // 2)
            self.stdscr.addstr(height // 2, start_col, msg[: max(0, width - 1)])
        except curses.error:
            pass

    def update_display(self) -> None:
        """Flushes pending window updates to the terminal in one step."""
        try:
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
