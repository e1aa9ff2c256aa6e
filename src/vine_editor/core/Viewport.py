# vine_editor/core/Viewport.py
"""vine_editor.core.Viewport
============================

Coordinate transforms and the visible window of the document.

Three column spaces are involved:

- buffer column ``cx``: index into a row's raw characters,
- render column ``rx``: index into the tab-expanded render string,
- screen column: ``rx - coloff`` shifted right by the line-number gutter.

``rx`` is always derived from ``cx``; it is never edited directly.

The renderer does not format terminal escapes. It produces, per visible row,
the gutter text and a list of ``(text, Highlight)`` runs where consecutive
characters of the same class are merged, so the output layer only switches
colour when the class actually changes.
"""

from typing import NamedTuple, Optional

from vine_editor.core.EditorState import EditorState
from vine_editor.core.SyntaxRegistry import Highlight

MIN_GUTTER_DIGITS = 4


class ScreenLine(NamedTuple):
    """One text-area line ready for drawing.

    `row_index` is None for lines past the end of the document.
    """

    row_index: Optional[int]
    gutter: str
    runs: list[tuple[str, Highlight]]


def cx_to_rx(raw: str, cx: int, tab_width: int) -> int:
    """Converts a buffer column to a render column."""
    rx = 0
    for ch in raw[:cx]:
        if ch == "\t":
            rx += (tab_width - 1) - (rx % tab_width)
        rx += 1
    return rx


def rx_to_cx(raw: str, rx: int, tab_width: int) -> int:
    """Converts a render column back to the buffer column that covers it."""
    cur_rx = 0
    for cx, ch in enumerate(raw):
        if ch == "\t":
            cur_rx += (tab_width - 1) - (cur_rx % tab_width)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return len(raw)


def gutter_width(numrows: int, show_line_numbers: bool = True) -> int:
    """Width of the line-number column including its trailing space."""
    if not show_line_numbers:
        return 0
    return max(MIN_GUTTER_DIGITS, len(str(numrows))) + 1


def text_columns(state: EditorState) -> int:
    """Screen columns left for text once the gutter is reserved."""
    gutter = gutter_width(state.buffer.numrows, state.show_line_numbers)
    return max(1, state.screen_cols - gutter)


def scroll(state: EditorState) -> None:
    """Recomputes ``rx`` and clamps the scroll offsets around the cursor."""
    row = state.buffer.row_at(state.cy)
    state.rx = cx_to_rx(row.raw, state.cx, state.buffer.tab_width) if row else 0

    screen_rows = max(1, state.screen_rows)
    if state.cy < state.rowoff:
        state.rowoff = state.cy
    if state.cy >= state.rowoff + screen_rows:
        state.rowoff = state.cy - screen_rows + 1

    cols = text_columns(state)
    if state.rx < state.coloff:
        state.coloff = state.rx
    if state.rx >= state.coloff + cols:
        state.coloff = state.rx - cols + 1


def _control_glyph(ch: str) -> Optional[str]:
    code = ord(ch)
    if code < 32 or code == 127:
        return chr(ord("@") + code) if code <= 26 else "?"
    return None


def render_runs(render: str, highlight: list[Highlight]) -> list[tuple[str, Highlight]]:
    """Groups characters into runs of equal highlight class.

    Control characters become their printable glyph (``^A`` shows as ``A``)
    with the NONPRINT class.
    """
    runs: list[tuple[str, Highlight]] = []
    current: list[str] = []
    current_hl: Optional[Highlight] = None
    for ch, hl in zip(render, highlight):
        glyph = _control_glyph(ch)
        if glyph is not None:
            ch, hl = glyph, Highlight.NONPRINT
        if hl != current_hl and current:
            runs.append(("".join(current), current_hl))
            current = []
        current_hl = hl
        current.append(ch)
    if current:
        runs.append(("".join(current), current_hl))
    return runs


def visible_lines(state: EditorState) -> list[ScreenLine]:
    """Slices every visible row at ``[coloff, coloff + text_columns)``."""
    buffer = state.buffer
    show = state.show_line_numbers
    digits = gutter_width(buffer.numrows, show) - 1
    cols = text_columns(state)

    lines: list[ScreenLine] = []
    for y in range(max(0, state.screen_rows)):
        filerow = y + state.rowoff
        row = buffer.row_at(filerow)
        if row is None:
            lines.append(ScreenLine(None, "", []))
            continue
        gutter = f"{filerow + 1:>{digits}} " if show else ""
        start, end = state.coloff, state.coloff + cols
        runs = render_runs(row.render[start:end], row.highlight[start:end])
        lines.append(ScreenLine(filerow, gutter, runs))
    return lines


def cursor_screen_position(state: EditorState) -> tuple[int, int]:
    """Zero-based (y, x) of the cursor inside the terminal."""
    gutter = gutter_width(state.buffer.numrows, state.show_line_numbers)
    return state.cy - state.rowoff, state.rx - state.coloff + gutter
