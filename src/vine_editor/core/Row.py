# vine_editor/core/Row.py
"""One logical line of the document plus its derived display data."""

from dataclasses import dataclass, field

from vine_editor.core.SyntaxRegistry import Highlight


def expand_tabs(raw: str, tab_width: int) -> str:
    """Replaces each tab with spaces up to the next multiple of `tab_width`.

    Unlike ``str.expandtabs`` the column is never reset by ``\\r`` or ``\\n``
    embedded in the row.
    """
    if "\t" not in raw:
        return raw
    out: list[str] = []
    col = 0
    for ch in raw:
        if ch == "\t":
            out.append(" ")
            col += 1
            while col % tab_width:
                out.append(" ")
                col += 1
        else:
            out.append(ch)
            col += 1
    return "".join(out)


@dataclass(slots=True)
class Row:
    """A buffer line.

    Attributes:
        index: Position inside the owning DocumentBuffer.
        raw: Authoritative characters of the line.
        render: `raw` with tabs expanded; rebuilt on every change.
        highlight: One Highlight per character of `render`.
        ends_in_open_comment: True when a multi-line comment is still open
            at the end of this line.
    """

    index: int
    raw: str = ""
    render: str = ""
    highlight: list[Highlight] = field(default_factory=list)
    ends_in_open_comment: bool = False

    @property
    def size(self) -> int:
        return len(self.raw)

    @property
    def rsize(self) -> int:
        return len(self.render)

    def update_render(self, tab_width: int) -> None:
        self.render = expand_tabs(self.raw, tab_width)
