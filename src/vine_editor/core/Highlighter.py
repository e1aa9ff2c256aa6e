# vine_editor/core/Highlighter.py
"""vine_editor.core.Highlighter
===============================

Per-row syntax highlighting with multi-line comment propagation.

A row is scanned left to right with three pieces of scan state: the open
quote character (if any), whether a multi-line comment is open (seeded from
the previous row), and whether the previous character was a separator.
Checks run in a fixed priority order per character:

    1. single-line comment marker (outside strings and comments)
    2. multi-line comment end, when inside a comment
    3. multi-line comment start, when outside strings
    4. strings, with backslash escapes
    5. numbers (digits at a boundary, hex/float continuation)
    6. keywords at a boundary, first list entry wins
    7. anything else is NORMAL

When a row's carried-out comment flag changes, the following row is pushed
onto a work list and re-highlighted, which may cascade to the end of the
document. The cascade is iterative so very long files never hit the
recursion limit.
"""

import logging
from typing import Optional, Sequence

from vine_editor.core.Row import Row
from vine_editor.core.SyntaxRegistry import Highlight, SyntaxEntry, is_separator

QUOTE_CHARS = ('"', "'")
NUMBER_CONTINUATION_CHARS = ".xabcdef"


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Highlighter:
    """Rebuilds render strings and highlight arrays for buffer rows.

    Attributes:
        syntax: Active language definition, or None for plain text.
        tab_width: Tab stop used when expanding tabs into the render string.
    """

    def __init__(self, syntax: Optional[SyntaxEntry] = None, tab_width: int = 4) -> None:
        if tab_width < 1:
            raise ValueError(f"tab_width must be positive, got {tab_width}")
        self.syntax = syntax
        self.tab_width = tab_width

    def highlight_line(
        self, render: str, carried_in: bool
    ) -> tuple[list[Highlight], bool]:
        """Classifies every character of `render`.

        Args:
            render: The tab-expanded line.
            carried_in: True if the previous row ended inside a multi-line
                comment.

        Returns:
            The highlight list (same length as `render`) and the carried-out
            comment flag.
        """
        n = len(render)
        hl = [Highlight.NORMAL] * n
        syntax = self.syntax
        if syntax is None:
            return hl, False

        scs = syntax.singleline_comment_start or ""
        mcs = syntax.multiline_comment_start or ""
        mce = syntax.multiline_comment_end or ""
        use_multiline = bool(mcs and mce)
        keywords = syntax.keyword_table

        prev_sep = True
        in_string = ""
        in_comment = carried_in

        i = 0
        while i < n:
            ch = render[i]
            prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

            if scs and not in_string and not in_comment:
                if render.startswith(scs, i):
                    hl[i:] = [Highlight.COMMENT] * (n - i)
                    break

            if use_multiline and not in_string:
                if in_comment:
                    hl[i] = Highlight.MLCOMMENT
                    if render.startswith(mce, i):
                        end = min(i + len(mce), n)
                        hl[i:end] = [Highlight.MLCOMMENT] * (end - i)
                        i = end
                        in_comment = False
                        prev_sep = True
                    else:
                        i += 1
                    continue
                if render.startswith(mcs, i):
                    end = min(i + len(mcs), n)
                    hl[i:end] = [Highlight.MLCOMMENT] * (end - i)
                    i = end
                    in_comment = True
                    continue

            if syntax.highlights_strings:
                if in_string:
                    hl[i] = Highlight.STRING
                    if ch == "\\" and i + 1 < n:
                        hl[i + 1] = Highlight.STRING
                        i += 2
                        continue
                    if ch == in_string:
                        in_string = ""
                    i += 1
                    prev_sep = True
                    continue
                if ch in QUOTE_CHARS:
                    in_string = ch
                    hl[i] = Highlight.STRING
                    i += 1
                    continue

            if syntax.highlights_numbers:
                if (_is_ascii_digit(ch) and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                    ch in NUMBER_CONTINUATION_CHARS and prev_hl == Highlight.NUMBER
                ):
                    hl[i] = Highlight.NUMBER
                    i += 1
                    prev_sep = False
                    continue

            if prev_sep and keywords:
                matched = False
                for word, kind in keywords:
                    klen = len(word)
                    following = render[i + klen] if i + klen < n else ""
                    if render.startswith(word, i) and is_separator(following):
                        hl[i:i + klen] = [kind] * klen
                        i += klen
                        matched = True
                        break
                if matched:
                    prev_sep = False
                    continue

            prev_sep = is_separator(ch)
            i += 1

        return hl, in_comment

    def _rehighlight(self, rows: Sequence[Row], index: int) -> bool:
        """Recomputes one row; returns True if its carried-out flag flipped."""
        row = rows[index]
        row.update_render(self.tab_width)
        carried_in = index > 0 and rows[index - 1].ends_in_open_comment
        row.highlight, open_comment = self.highlight_line(row.render, carried_in)
        changed = open_comment != row.ends_in_open_comment
        row.ends_in_open_comment = open_comment
        return changed

    def update_row(self, rows: Sequence[Row], index: int) -> int:
        """Re-highlights `rows[index]` and cascades while the comment state changes.

        Returns:
            The number of rows that were recomputed.
        """
        if not 0 <= index < len(rows):
            return 0
        work = [index]
        count = 0
        while work:
            current = work.pop()
            count += 1
            if self._rehighlight(rows, current) and current + 1 < len(rows):
                work.append(current + 1)
        if count > 1:
            logging.debug(f"Highlight cascade from row {index} touched {count} rows")
        return count

    def update_all(self, rows: Sequence[Row]) -> None:
        """Re-highlights every row top to bottom."""
        for index in range(len(rows)):
            self._rehighlight(rows, index)
        logging.debug(
            f"Re-highlighted {len(rows)} rows with syntax "
            f"{self.syntax.filetype if self.syntax else None!r}"
        )
