# vine_editor/core/DocumentBuffer.py
"""vine_editor.core.DocumentBuffer
==================================

The ordered list of rows being edited, and every structural edit on it.

Contracts kept by every method:
    - ``rows[i].index == i`` for all rows after any insert or delete.
    - A row's render string and highlight list are rebuilt eagerly whenever
      its raw text changes; comment state cascades to following rows through
      the :class:`Highlighter`.
    - Each mutation increments ``dirty``; ``load_lines``/``load_file`` and a
      successful ``save_file`` reset it to zero.
    - Out-of-range row or column requests are silent no-ops.

File I/O follows the same split as the rest of the editor: this module logs
and re-raises ``OSError``; the controller turns the failure into a status
message.

The buffer is owned by a single control loop and is not thread-safe; guard
it externally if it is shared across threads.
"""

import logging
import os
from typing import Iterable, Optional

import chardet

from vine_editor.core.Highlighter import Highlighter
from vine_editor.core.Row import Row
from vine_editor.core.SyntaxRegistry import SyntaxEntry, SyntaxRegistry

DEFAULT_ENCODING = "utf-8"
ENCODING_SAMPLE_SIZE = 64 * 1024
MIN_DETECTION_CONFIDENCE = 0.7


def detect_encoding(data: bytes) -> str:
    """Guesses the encoding of `data` with chardet.

    Pure ASCII and low-confidence guesses fall back to UTF-8.
    """
    if not data:
        return DEFAULT_ENCODING
    result = chardet.detect(data[:ENCODING_SAMPLE_SIZE])
    encoding = result.get("encoding")
    confidence = result.get("confidence") or 0.0
    logging.debug(f"chardet guess: {encoding!r} (confidence {confidence:.2f})")
    if not encoding or confidence < MIN_DETECTION_CONFIDENCE:
        return DEFAULT_ENCODING
    if encoding.lower() == "ascii":
        return DEFAULT_ENCODING
    return encoding.lower()


def decode_bytes(data: bytes, encoding: str) -> tuple[str, str]:
    """Decodes `data`, trying `encoding`, then UTF-8, then Latin-1.

    Returns:
        The decoded text and the encoding that succeeded.
    """
    for candidate in dict.fromkeys((encoding, DEFAULT_ENCODING, "latin-1")):
        try:
            return data.decode(candidate), candidate
        except (UnicodeDecodeError, LookupError):
            logging.debug(f"Decoding as {candidate!r} failed, trying next candidate")
    # latin-1 maps every byte, so this is unreachable in practice
    return data.decode("latin-1", errors="replace"), "latin-1"


def split_lines(text: str) -> list[str]:
    """Splits file text into rows, dropping each row's trailing newline/CR."""
    if not text:
        return []
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    return [piece.rstrip("\r") for piece in pieces]


class DocumentBuffer:
    """In-memory document: rows, dirty counter and active syntax.

    Args:
        tab_width: Tab stop used to build render strings.
        registry: Syntax table consulted by `select_syntax`; the built-in
            table is used when omitted.
    """

    def __init__(
        self, tab_width: int = 4, registry: Optional[SyntaxRegistry] = None
    ) -> None:
        self.rows: list[Row] = []
        self.dirty: int = 0
        self.filename: Optional[str] = None
        self.encoding: str = DEFAULT_ENCODING
        self.registry = registry if registry is not None else SyntaxRegistry()
        self.highlighter = Highlighter(None, tab_width)

    # --- read-only views ---
    @property
    def numrows(self) -> int:
        return len(self.rows)

    @property
    def tab_width(self) -> int:
        return self.highlighter.tab_width

    @property
    def active_syntax(self) -> Optional[SyntaxEntry]:
        return self.highlighter.syntax

    @property
    def is_dirty(self) -> bool:
        return self.dirty > 0

    def row_at(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    # --- syntax ---
    def set_syntax(self, syntax: Optional[SyntaxEntry]) -> None:
        """Installs `syntax` and re-highlights every row."""
        self.highlighter.syntax = syntax
        self.highlighter.update_all(self.rows)

    def select_syntax(self, filename: Optional[str] = None) -> Optional[SyntaxEntry]:
        """Picks the syntax for `filename` (or the current filename)."""
        name = filename if filename is not None else self.filename
        syntax = self.registry.select_for_filename(name)
        self.set_syntax(syntax)
        return syntax

    # --- structural edits ---
    def _renumber(self, start: int) -> None:
        for i in range(start, len(self.rows)):
            self.rows[i].index = i

    def insert_row(self, at: int, text: str = "") -> bool:
        """Inserts a new row holding `text` before position `at`."""
        if not 0 <= at <= len(self.rows):
            logging.debug(f"insert_row: position {at} out of range, ignored")
            return False
        self.rows.insert(at, Row(index=at, raw=text))
        self._renumber(at + 1)
        self.highlighter.update_row(self.rows, at)
        # The row below now inherits comment state from the new row.
        self.highlighter.update_row(self.rows, at + 1)
        self.dirty += 1
        return True

    def delete_row(self, at: int) -> bool:
        """Removes row `at`; the row moving into its place is re-highlighted."""
        if not 0 <= at < len(self.rows):
            logging.debug(f"delete_row: position {at} out of range, ignored")
            return False
        del self.rows[at]
        self._renumber(at)
        # The successor now inherits comment state from a different row.
        self.highlighter.update_row(self.rows, at)
        self.dirty += 1
        return True

    def _set_row_text(self, index: int, text: str) -> None:
        self.rows[index].raw = text
        self.highlighter.update_row(self.rows, index)

    def insert_char(self, row: int, col: int, ch: str) -> bool:
        """Inserts `ch` at `col`; a column past the end appends."""
        target = self.row_at(row)
        if target is None:
            return False
        if col < 0 or col > target.size:
            col = target.size
        self._set_row_text(row, target.raw[:col] + ch + target.raw[col:])
        self.dirty += 1
        return True

    def delete_char(self, row: int, col: int) -> bool:
        """Deletes the character at `col`."""
        target = self.row_at(row)
        if target is None or not 0 <= col < target.size:
            return False
        self._set_row_text(row, target.raw[:col] + target.raw[col + 1:])
        self.dirty += 1
        return True

    def append_string(self, row: int, text: str) -> bool:
        target = self.row_at(row)
        if target is None:
            return False
        self._set_row_text(row, target.raw + text)
        self.dirty += 1
        return True

    def split_row(self, row: int, col: int) -> bool:
        """Breaks `row` at `col` (Enter key).

        At column 0 an empty row is inserted above; otherwise the suffix moves
        to a new row below and the current row keeps the prefix.
        """
        if row == len(self.rows) and col == 0:
            return self.insert_row(row, "")
        target = self.row_at(row)
        if target is None:
            return False
        if col <= 0:
            return self.insert_row(row, "")
        col = min(col, target.size)
        prefix, suffix = target.raw[:col], target.raw[col:]
        self.insert_row(row + 1, suffix)
        self._set_row_text(row, prefix)
        return True

    def join_row(self, row: int) -> Optional[int]:
        """Appends `row` to the row above and deletes it (Backspace at column 0).

        Returns:
            The join column (the previous row's length before the join), or
            None if `row` has no predecessor.
        """
        if not 0 < row < len(self.rows):
            return None
        join_col = self.rows[row - 1].size
        self.append_string(row - 1, self.rows[row].raw)
        self.delete_row(row)
        return join_col

    # --- serialization and file I/O ---
    def serialize(self) -> bytes:
        """Returns every row followed by ``\\n``, encoded with the buffer encoding."""
        text = "".join(f"{row.raw}\n" for row in self.rows)
        return text.encode(self.encoding, errors="replace")

    def load_lines(self, lines: Iterable[str]) -> None:
        """Replaces the buffer content with `lines` (already newline-free)."""
        self.rows = [Row(index=i, raw=line) for i, line in enumerate(lines)]
        self.highlighter.update_all(self.rows)
        self.dirty = 0

    def load_file(self, path: str) -> int:
        """Reads `path` into the buffer.

        The filename is recorded and the syntax selected before the file is
        opened, so a missing file still yields a named, highlighted buffer.

        Returns:
            The number of rows loaded.

        Raises:
            OSError: If the file cannot be read. The buffer is left empty.
        """
        self.filename = path
        self.rows = []
        self.dirty = 0
        self.select_syntax(path)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            logging.error(f"Failed to read {path!r}: {e}")
            raise

        text, self.encoding = decode_bytes(data, detect_encoding(data))
        self.load_lines(split_lines(text))
        logging.info(
            f"Loaded {path!r}: {len(self.rows)} lines, {len(data)} bytes, "
            f"encoding {self.encoding}"
        )
        return len(self.rows)

    def save_file(self, path: Optional[str] = None) -> int:
        """Truncates and overwrites `path` (default: the current filename).

        Returns:
            The number of bytes written.

        Raises:
            OSError: On any open/truncate/write failure; ``dirty`` is kept.
            ValueError: If no filename is known.
        """
        target = path if path is not None else self.filename
        if not target:
            raise ValueError("save_file requires a filename")
        data = self.serialize()
        try:
            fd = os.open(target, os.O_RDWR | os.O_CREAT, 0o644)
            with os.fdopen(fd, "wb") as f:
                f.truncate(len(data))
                f.write(data)
        except OSError as e:
            logging.error(f"Failed to write {target!r}: {e}", exc_info=True)
            raise

        self.filename = target
        self.dirty = 0
        logging.info(f"Saved {len(data)} bytes to {target!r}")
        return len(data)
