# vine_editor/core/SyntaxRegistry.py
"""vine_editor.core.SyntaxRegistry
==================================

Static table of language definitions used by the highlighter.

Each :class:`SyntaxEntry` describes how one language is recognised (file
name patterns) and coloured (keyword classes, comment delimiters and the
number/string feature flags). The table is ordered: the first entry whose
pattern matches a filename wins, so entries loaded from the user's
``[[syntax]]`` config tables are placed ahead of the built-ins.

Pattern rules:
    - A pattern starting with ``.`` must equal the filename's last
      ``.``-suffix exactly (``.c`` matches ``main.c`` but not ``main.cpp``).
    - Any other pattern matches as a plain substring of the basename
      (``Makefile``, ``pyi``); directory names never match.

Keywords ending with ``|`` belong to the secondary class (conventionally type
names); everything else is primary.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Any, Iterable, Optional


class Highlight(IntEnum):
    """Highlight class assigned to every rendered character."""

    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4
    STRING = 5
    NUMBER = 6
    MATCH = 7
    # Draw-time only: control characters shown in reverse video.
    NONPRINT = 8


class SyntaxFlags(IntFlag):
    NONE = 0
    HIGHLIGHT_NUMBERS = 1 << 0
    HIGHLIGHT_STRINGS = 1 << 1


SECONDARY_KEYWORD_MARK = "|"
SEPARATOR_CHARS = ",.()+-/*^=@#~&%$`´<>[]{}!\\:|;?"


def is_separator(ch: str) -> bool:
    """Return True for whitespace, end of line ("" or NUL) and punctuation."""
    if not ch or ch == "\0":
        return True
    return ch.isspace() or ch in SEPARATOR_CHARS


@dataclass(frozen=True)
class SyntaxEntry:
    """One immutable language definition."""

    filetype: str
    filematch: tuple[str, ...]
    keywords: tuple[str, ...] = ()
    singleline_comment_start: Optional[str] = None
    multiline_comment_start: Optional[str] = None
    multiline_comment_end: Optional[str] = None
    flags: SyntaxFlags = SyntaxFlags.NONE
    keyword_table: tuple[tuple[str, Highlight], ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self) -> None:
        table: list[tuple[str, Highlight]] = []
        for word in self.keywords:
            if word.endswith(SECONDARY_KEYWORD_MARK):
                word = word[:-1]
                kind = Highlight.KEYWORD2
            else:
                kind = Highlight.KEYWORD1
            if word:
                table.append((word, kind))
        object.__setattr__(self, "keyword_table", tuple(table))

    @property
    def highlights_numbers(self) -> bool:
        return bool(self.flags & SyntaxFlags.HIGHLIGHT_NUMBERS)

    @property
    def highlights_strings(self) -> bool:
        return bool(self.flags & SyntaxFlags.HIGHLIGHT_STRINGS)

    @property
    def has_multiline_comments(self) -> bool:
        return bool(self.multiline_comment_start and self.multiline_comment_end)

    def matches(self, filename: str) -> bool:
        """Checks whether `filename` is claimed by this entry."""
        base = os.path.basename(filename)
        dot = base.rfind(".")
        extension = base[dot:] if dot != -1 else None
        for pattern in self.filematch:
            if not pattern:
                continue
            if pattern.startswith("."):
                if extension is not None and extension == pattern:
                    return True
            elif pattern in base:
                return True
        return False


_BOTH = SyntaxFlags.HIGHLIGHT_NUMBERS | SyntaxFlags.HIGHLIGHT_STRINGS

C_KEYWORDS = (
    "auto", "break", "case", "const", "continue", "default", "do", "else", "enum", "extern",
    "for", "goto", "if", "register", "return", "sizeof", "static", "struct", "switch",
    "typedef", "union", "volatile", "while", "__asm__", "NULL", "alignas", "alignof",
    "and", "and_eq", "asm", "bitand", "bitor", "class", "compl", "constexpr",
    "const_cast", "deltype", "delete", "dynamic_cast", "explicit", "export", "false",
    "friend", "inline", "mutable", "using", "namespace", "new", "noexcept", "not",
    "not_eq", "nullptr", "operator", "or", "or_eq", "private", "protected", "public",
    "reinterpret_cast", "static_assert", "static_cast", "template", "this",
    "thread_local", "throw", "true", "try", "typeid", "typename", "virtual",
    "xor", "xor_eq", "#define", "#include", "#if", "ifdef", "#ifndef",
    "#endif", "#error", "#warning", "#pragma",
    "int|", "long|", "double|", "float|", "char|", "unsigned|", "signed|",
    "void|", "short|", "auto|", "bool|",
)

GO_KEYWORDS = (
    "if", "else", "switch", "case", "func", "then", "for", "var", "type", "interface", "const", "range",
    "return", "struct", "default", "iota", "nil", "package", "import", "map", "break", "continue",
    "int|", "int8|", "int16|", "int32|", "int64|", "uint|", "uint8|", "uint16|", "uint32|", "uint64|",
    "float32|", "float64|", "byte|", "rune|", "bool|", "string|", "complex64|", "complex128|",
    "any|", "error|", "comparable|",
)

PYTHON_KEYWORDS = (
    "and", "as", "assert", "break", "class", "continue", "def", "del", "elif",
    "else", "except", "exec", "finally", "for", "from", "global", "if", "import",
    "in", "is", "lambda", "not", "or", "pass", "print", "raise", "return", "try",
    "while", "with", "yield", "async", "await", "nonlocal", "range", "xrange",
    "reduce", "map", "filter", "all", "any", "sum", "dir", "abs", "breakpoint",
    "compile", "delattr", "divmod", "format", "eval", "getattr", "hasattr",
    "hash", "help", "id", "input", "isinstance", "issubclass", "len", "locals",
    "max", "min", "next", "open", "pow", "repr", "reversed", "round", "setattr",
    "slice", "sorted", "super", "vars", "zip", "__import__", "reload", "raw_input",
    "execfile", "file", "cmp", "basestring",
    "buffer|", "bytearray|", "bytes|", "complex|", "float|", "frozenset|", "int|",
    "list|", "long|", "None|", "set|", "str|", "chr|", "tuple|", "bool|", "False|",
    "True|", "type|", "unicode|", "dict|", "ascii|", "bin|", "callable|",
    "classmethod|", "enumerate|", "hex|", "oct|", "ord|", "iter|", "memoryview|",
    "object|", "property|", "staticmethod|", "unichr|",
)

RUST_KEYWORDS = (
    "as", "async", "await", "const", "crate", "dyn", "enum", "extern", "fn", "impl", "let",
    "mod", "move", "mut", "pub", "ref", "Self", "static", "struct", "super", "trait", "type",
    "union", "unsafe", "use", "where", "break", "continue", "else", "for", "if", "in", "loop",
    "match", "return", "while",
    "i8|", "i16|", "i32|", "i64|", "i128|", "isize|", "u8|", "u16|", "u32|", "u64|", "u128|", "usize|",
    "f32|", "f64|", "bool|", "char|", "Box|", "Option|", "Some|", "None|", "Result|", "Ok|", "Err|",
    "String|", "Vec|", "let|", "const|", "mod|", "struct|", "enum|", "trait|", "union|", "self|",
    "true|", "false|",
)

BUILTIN_SYNTAXES: tuple[SyntaxEntry, ...] = (
    SyntaxEntry(
        filetype="C/C++",
        filematch=(".c", ".h", ".cpp", ".hpp", ".cc", ".hh", ".cxx", ".hxx"),
        keywords=C_KEYWORDS,
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=_BOTH,
    ),
    SyntaxEntry(
        filetype="Golang",
        filematch=(".go",),
        keywords=GO_KEYWORDS,
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=_BOTH,
    ),
    SyntaxEntry(
        filetype="Python",
        filematch=(".py", "pyi", ".xpy", "pyx", ".pyw", ".ipynb"),
        keywords=PYTHON_KEYWORDS,
        singleline_comment_start="#",
        multiline_comment_start='"""',
        multiline_comment_end='"""',
        flags=_BOTH,
    ),
    SyntaxEntry(
        filetype="Rust",
        filematch=(".rs",),
        keywords=RUST_KEYWORDS,
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=_BOTH,
    ),
)


def syntax_entry_from_dict(spec: dict[str, Any]) -> SyntaxEntry:
    """Builds a SyntaxEntry from one ``[[syntax]]`` config table.

    Recognised keys: ``filetype`` and ``filematch`` (required), ``keywords``,
    ``singleline_comment``, ``multiline_comment`` (a two-item list) and the
    booleans ``highlight_numbers`` / ``highlight_strings`` (default true).

    Raises:
        ValueError: If a required key is missing or has the wrong shape.
    """
    if not isinstance(spec, dict):
        raise ValueError(f"syntax table must be a mapping, got {type(spec).__name__}")

    filetype = spec.get("filetype")
    if not isinstance(filetype, str) or not filetype:
        raise ValueError("syntax table needs a non-empty 'filetype'")

    filematch = spec.get("filematch")
    if isinstance(filematch, str):
        filematch = [filematch]
    if not filematch or not all(isinstance(p, str) for p in filematch):
        raise ValueError(f"syntax '{filetype}' needs a list of 'filematch' patterns")

    keywords = spec.get("keywords", [])
    if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
        raise ValueError(f"syntax '{filetype}': 'keywords' must be a list of strings")

    ml_start = ml_end = None
    multiline = spec.get("multiline_comment")
    if multiline:
        if not isinstance(multiline, list) or len(multiline) != 2:
            raise ValueError(
                f"syntax '{filetype}': 'multiline_comment' must be [start, end]"
            )
        ml_start, ml_end = (str(m) or None for m in multiline)

    flags = SyntaxFlags.NONE
    if spec.get("highlight_numbers", True):
        flags |= SyntaxFlags.HIGHLIGHT_NUMBERS
    if spec.get("highlight_strings", True):
        flags |= SyntaxFlags.HIGHLIGHT_STRINGS

    return SyntaxEntry(
        filetype=filetype,
        filematch=tuple(filematch),
        keywords=tuple(keywords),
        singleline_comment_start=spec.get("singleline_comment") or None,
        multiline_comment_start=ml_start,
        multiline_comment_end=ml_end,
        flags=flags,
    )


class SyntaxRegistry:
    """Ordered, read-only collection of SyntaxEntry objects."""

    def __init__(self, entries: Optional[Iterable[SyntaxEntry]] = None) -> None:
        self.entries: tuple[SyntaxEntry, ...] = (
            tuple(entries) if entries is not None else BUILTIN_SYNTAXES
        )

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "SyntaxRegistry":
        """Creates a registry with user-defined syntaxes ahead of the built-ins.

        Malformed ``[[syntax]]`` tables are logged and skipped.
        """
        user_entries: list[SyntaxEntry] = []
        raw_tables = config.get("syntax", []) if isinstance(config, dict) else []
        if not isinstance(raw_tables, list):
            logging.warning("Config key 'syntax' must be an array of tables; ignored.")
            raw_tables = []

        for raw in raw_tables:
            try:
                entry = syntax_entry_from_dict(raw)
            except ValueError as e:
                logging.warning(f"Skipping invalid syntax definition {raw!r}: {e}")
                continue
            user_entries.append(entry)
            logging.info(f"Loaded custom syntax '{entry.filetype}' from config.")

        return cls([*user_entries, *BUILTIN_SYNTAXES])

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def select_for_filename(self, filename: Optional[str]) -> Optional[SyntaxEntry]:
        """Returns the first entry matching `filename`, or None."""
        if not filename:
            return None
        for entry in self.entries:
            if entry.matches(filename):
                logging.debug(f"Syntax '{entry.filetype}' selected for {filename!r}")
                return entry
        logging.debug(f"No syntax matches {filename!r}")
        return None
