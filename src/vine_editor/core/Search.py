# vine_editor/core/Search.py
"""Incremental search session.

A :class:`SearchSession` lives for one search prompt. Each keystroke calls
:meth:`SearchSession.advance` with the current query and the key that was
pressed; arrows step to the next/previous match, any other key restarts the
scan from the top. Only one match is marked at a time, and the row's
original highlight list is saved so it can be put back exactly.
"""

import logging
from typing import Optional

from vine_editor.core.EditorState import EditorState
from vine_editor.core.Keys import Key
from vine_editor.core.SyntaxRegistry import Highlight
from vine_editor.core.Viewport import rx_to_cx

FORWARD_KEYS = (Key.ARROW_RIGHT, Key.ARROW_DOWN)
BACKWARD_KEYS = (Key.ARROW_LEFT, Key.ARROW_UP)
END_KEYS = (Key.ENTER, Key.ESC)


class SearchSession:
    """Stateful forward/backward scan over the buffer's render strings."""

    def __init__(self, state: EditorState) -> None:
        self.state = state
        self.last_match_row = -1
        self.direction = 1
        self.origin = state.snapshot()
        self._saved_highlight: Optional[tuple[int, list[Highlight]]] = None

    @property
    def has_marked_match(self) -> bool:
        return self._saved_highlight is not None

    def _restore_highlight(self) -> None:
        if self._saved_highlight is None:
            return
        row_index, saved = self._saved_highlight
        self._saved_highlight = None
        row = self.state.buffer.row_at(row_index)
        if row is not None:
            row.highlight = list(saved)

    def advance(self, query: str, key: Optional[int] = None) -> Optional[int]:
        """Processes one prompt keystroke.

        Args:
            query: The current search text.
            key: The key that produced this update.

        Returns:
            The matched row index, or None when nothing was (re)matched.
        """
        self._restore_highlight()

        if key in END_KEYS:
            self.last_match_row = -1
            self.direction = 1
            return None
        if key in FORWARD_KEYS:
            self.direction = 1
        elif key in BACKWARD_KEYS:
            self.direction = -1
        else:
            self.last_match_row = -1
            self.direction = 1

        if self.last_match_row == -1:
            self.direction = 1
        if not query:
            return None

        rows = self.state.buffer.rows
        numrows = len(rows)
        current = self.last_match_row
        for _ in range(numrows):
            current += self.direction
            if current == -1:
                current = numrows - 1
            elif current == numrows:
                current = 0

            row = rows[current]
            pos = row.render.find(query)
            if pos == -1:
                continue

            self.last_match_row = current
            self.state.cy = current
            self.state.cx = rx_to_cx(row.raw, pos, self.state.buffer.tab_width)
            # Past-the-end offset makes the next scroll put the match on top.
            self.state.rowoff = numrows

            self._saved_highlight = (current, list(row.highlight))
            end = pos + len(query)
            row.highlight[pos:end] = [Highlight.MATCH] * (end - pos)
            logging.debug(f"Search {query!r}: match at row {current}, render col {pos}")
            return current

        logging.debug(f"Search {query!r}: no match")
        return None

    def finish(self) -> None:
        """Ends the session keeping the cursor on the last match."""
        self._restore_highlight()
        self.last_match_row = -1
        self.direction = 1

    def cancel(self) -> None:
        """Ends the session and returns the cursor to where it started."""
        self.finish()
        self.state.restore(self.origin)
