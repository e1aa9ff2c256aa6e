# vine_editor/core/Keys.py
"""Logical key events understood by the editor core.

The input layer (``vine_editor.ui.KeyBinder``) decodes terminal input and
hands the core either one of these codes or a plain character code.
"""

from enum import IntEnum


class Key(IntEnum):
    BACKSPACE = 127
    ENTER = 13
    ESC = 27
    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    DEL = 1004
    HOME = 1005
    END = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008


def ctrl_key(ch: str) -> int:
    """Returns the code a terminal sends for Ctrl+`ch`."""
    return ord(ch) & 0x1F
