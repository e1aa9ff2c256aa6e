# src/vine_editor/core/__init__.py
"""Public facade for vine_editor.core: re-export the model classes from CamelCase modules.

The `Vine` controller is not re-exported here: it imports the UI modules,
which in turn import this package. Use ``from vine_editor.core.Vine import Vine``.
"""

from .DocumentBuffer import DocumentBuffer  # noqa: F401
from .EditorState import CursorSnapshot, EditorState  # noqa: F401
from .Highlighter import Highlighter  # noqa: F401
from .Keys import Key, ctrl_key  # noqa: F401
from .Row import Row  # noqa: F401
from .Search import SearchSession  # noqa: F401
from .SyntaxRegistry import (  # noqa: F401
    BUILTIN_SYNTAXES,
    Highlight,
    SyntaxEntry,
    SyntaxFlags,
    SyntaxRegistry,
    is_separator,
)
from . import Viewport  # noqa: F401


__all__ = [
    "BUILTIN_SYNTAXES",
    "CursorSnapshot",
    "DocumentBuffer",
    "EditorState",
    "Highlight",
    "Highlighter",
    "Key",
    "Row",
    "SearchSession",
    "SyntaxEntry",
    "SyntaxFlags",
    "SyntaxRegistry",
    "Viewport",
    "ctrl_key",
    "is_separator",
]
