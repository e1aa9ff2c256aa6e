# vine_editor/core/EditorState.py
"""Cursor, scroll and screen geometry for the single open document.

``EditorState`` is owned by the controller and passed explicitly to the
viewport and search helpers; there is no module-level editor singleton.
Editing operations here translate a cursor position into DocumentBuffer
calls and then move the cursor the way the keys are expected to.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

from vine_editor.core.DocumentBuffer import DocumentBuffer
from vine_editor.core.Keys import Key
from vine_editor.core.Row import Row


class CursorSnapshot(NamedTuple):
    cx: int
    cy: int
    rowoff: int
    coloff: int


@dataclass
class EditorState:
    """Mutable view state.

    Attributes:
        buffer: The document being edited.
        screen_rows: Text rows available (terminal height minus the two bars).
        screen_cols: Terminal width in cells.
        show_line_numbers: Whether the gutter is reserved.
        cx: Buffer column of the cursor.
        cy: Row of the cursor; ``cy == numrows`` is the virtual line past the end.
        rx: Render column of the cursor, derived from `cx` by the viewport.
        rowoff: First visible row.
        coloff: First visible render column.
    """

    buffer: DocumentBuffer
    screen_rows: int = 22
    screen_cols: int = 80
    show_line_numbers: bool = True
    cx: int = 0
    cy: int = 0
    rx: int = 0
    rowoff: int = 0
    coloff: int = 0

    def current_row(self) -> Optional[Row]:
        return self.buffer.row_at(self.cy)

    def snapshot(self) -> CursorSnapshot:
        return CursorSnapshot(self.cx, self.cy, self.rowoff, self.coloff)

    def restore(self, snapshot: CursorSnapshot) -> None:
        self.cx, self.cy, self.rowoff, self.coloff = snapshot

    def clamp_cursor(self) -> None:
        """Keeps ``cy`` within ``[0, numrows]`` and ``cx`` within the row."""
        self.cy = max(0, min(self.cy, self.buffer.numrows))
        row = self.current_row()
        self.cx = max(0, min(self.cx, row.size if row else 0))

    # --- movement ---
    def move_cursor(self, key: int) -> None:
        """Moves one step for an arrow key, wrapping at row ends."""
        row = self.current_row()

        if key == Key.ARROW_LEFT:
            if self.cx != 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = self.buffer.rows[self.cy].size
        elif key == Key.ARROW_RIGHT:
            if row is not None and self.cx < row.size:
                self.cx += 1
            elif row is not None and self.cx == row.size:
                self.cy += 1
                self.cx = 0
        elif key == Key.ARROW_UP:
            if self.cy != 0:
                self.cy -= 1
        elif key == Key.ARROW_DOWN:
            if self.cy < self.buffer.numrows:
                self.cy += 1

        row = self.current_row()
        rowlen = row.size if row else 0
        if self.cx > rowlen:
            self.cx = rowlen

    def move_line_start(self) -> None:
        self.cx = 0

    def move_line_end(self) -> None:
        row = self.current_row()
        if row is not None:
            self.cx = row.size

    def page(self, key: int) -> None:
        """Scrolls a full screen for PAGE_UP / PAGE_DOWN."""
        if key == Key.PAGE_UP:
            self.cy = self.rowoff
            step = Key.ARROW_UP
        elif key == Key.PAGE_DOWN:
            self.cy = min(self.rowoff + self.screen_rows - 1, self.buffer.numrows)
            step = Key.ARROW_DOWN
        else:
            return
        for _ in range(self.screen_rows):
            self.move_cursor(step)

    # --- editing ---
    def insert_char(self, ch: str) -> None:
        if self.cy == self.buffer.numrows:
            self.buffer.insert_row(self.buffer.numrows, "")
        self.buffer.insert_char(self.cy, self.cx, ch)
        self.cx += 1

    def insert_newline(self) -> None:
        self.buffer.split_row(self.cy, self.cx)
        self.cy += 1
        self.cx = 0

    def delete_char(self) -> bool:
        """Backspace: deletes before the cursor or joins with the previous row."""
        if self.cy == self.buffer.numrows or (self.cx == 0 and self.cy == 0):
            return False
        if self.cx > 0:
            self.buffer.delete_char(self.cy, self.cx - 1)
            self.cx -= 1
            return True
        join_col = self.buffer.join_row(self.cy)
        if join_col is None:
            return False
        self.cy -= 1
        self.cx = join_col
        return True

    def delete_forward(self) -> bool:
        """Deletes the character under the cursor (move right, then backspace)."""
        before = self.snapshot()
        self.move_cursor(Key.ARROW_RIGHT)
        if self.snapshot() == before:
            return False
        return self.delete_char()

    def delete_current_row(self) -> bool:
        if not self.buffer.delete_row(self.cy):
            return False
        logging.debug(f"Deleted row {self.cy}")
        self.clamp_cursor()
        return True
