# tests/test_core/test_highlighter.py
"""Tests for `vine_editor.core.Highlighter`.
=============================================

Exercises the per-character classification order (comments, strings,
numbers, keywords), keyword and number boundaries, and the cross-row
multi-line comment cascade.
"""

import pytest

from vine_editor.core.Highlighter import Highlighter
from vine_editor.core.Row import Row
from vine_editor.core.SyntaxRegistry import Highlight, SyntaxEntry, SyntaxRegistry

H = Highlight


@pytest.fixture
def c_highlighter() -> Highlighter:
    return Highlighter(SyntaxRegistry().select_for_filename("x.c"), tab_width=4)


def classes(hl: Highlighter, text: str, carried_in: bool = False) -> list[Highlight]:
    return hl.highlight_line(text, carried_in)[0]


def make_rows(lines: list[str]) -> list[Row]:
    return [Row(index=i, raw=line) for i, line in enumerate(lines)]


class TestHighlightLine:
    def test_no_syntax_is_all_normal(self) -> None:
        hl = Highlighter(None)
        result, carried = hl.highlight_line('int x = "s"; /* c', True)
        assert set(result) == {H.NORMAL}
        assert carried is False

    def test_invalid_tab_width(self) -> None:
        with pytest.raises(ValueError):
            Highlighter(None, tab_width=0)

    def test_keyword_boundary(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "forward") == [H.NORMAL] * 7
        assert classes(c_highlighter, "for (x)") == [H.KEYWORD1] * 3 + [H.NORMAL] * 4

    def test_keyword_inside_identifier_is_rejected(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "xfor") == [H.NORMAL] * 4

    def test_keyword_at_end_of_line(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "x=return") == [H.NORMAL, H.NORMAL] + [H.KEYWORD1] * 6

    def test_secondary_keyword(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "int x") == [H.KEYWORD2] * 3 + [H.NORMAL] * 2

    def test_numbers(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "x=42;") == [H.NORMAL, H.NORMAL, H.NUMBER, H.NUMBER, H.NORMAL]
        assert classes(c_highlighter, "3.14") == [H.NUMBER] * 4
        assert classes(c_highlighter, "0x1f") == [H.NUMBER] * 4

    def test_number_does_not_start_mid_identifier(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "a1") == [H.NORMAL, H.NORMAL]

    def test_non_ascii_digits_are_not_numbers(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "٣") == [H.NORMAL]

    def test_strings_with_escapes(self, c_highlighter: Highlighter) -> None:
        text = '"a\\"b" c'
        assert classes(c_highlighter, text) == [H.STRING] * 6 + [H.NORMAL] * 2

    def test_single_quoted_string(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "'x'") == [H.STRING] * 3

    def test_comment_marker_inside_string_is_text(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, '"//"') == [H.STRING] * 4

    def test_single_line_comment(self, c_highlighter: Highlighter) -> None:
        assert classes(c_highlighter, "x; // int") == [H.NORMAL] * 3 + [H.COMMENT] * 6

    def test_multiline_open_and_close_on_one_line(self, c_highlighter: Highlighter) -> None:
        result, carried = c_highlighter.highlight_line("/* a */ for", False)
        assert result == [H.MLCOMMENT] * 7 + [H.NORMAL] + [H.KEYWORD1] * 3
        assert carried is False

    def test_multiline_carries_out(self, c_highlighter: Highlighter) -> None:
        result, carried = c_highlighter.highlight_line("x /* open", False)
        assert result[:2] == [H.NORMAL, H.NORMAL]
        assert result[2:] == [H.MLCOMMENT] * 7
        assert carried is True

    def test_carried_in_comment_closes(self, c_highlighter: Highlighter) -> None:
        result, carried = c_highlighter.highlight_line("a */int x", True)
        assert result[:4] == [H.MLCOMMENT] * 4
        assert result[4:7] == [H.KEYWORD2] * 3
        assert carried is False

    def test_length_always_matches(self, c_highlighter: Highlighter) -> None:
        for text in ["", "/*", "*/", '"unterminated', "0x", "if(", "a\\"]:
            for carried in (False, True):
                result, _ = c_highlighter.highlight_line(text, carried)
                assert len(result) == len(text)

    def test_python_triple_quote_block(self) -> None:
        hl = Highlighter(SyntaxRegistry().select_for_filename("m.py"))
        result, carried = hl.highlight_line('x = """doc', False)
        assert result[4:] == [H.MLCOMMENT] * 6
        assert carried is True
        result, carried = hl.highlight_line('end""" # c', True)
        assert result[:6] == [H.MLCOMMENT] * 6
        assert result[7:] == [H.COMMENT] * 3
        assert carried is False

    def test_empty_keywords_and_no_comments(self) -> None:
        plain = SyntaxEntry("Plain", (".p",))
        result, carried = Highlighter(plain).highlight_line('if "x" 1 // y', False)
        assert set(result) == {H.NORMAL}
        assert carried is False


class TestCascade:
    def test_propagation(self, c_highlighter: Highlighter) -> None:
        rows = make_rows(["/* comment", "still comment */", "code"])
        c_highlighter.update_all(rows)

        assert rows[0].ends_in_open_comment is True
        assert rows[1].highlight == [H.MLCOMMENT] * len("still comment */")
        assert rows[1].ends_in_open_comment is False
        assert rows[2].highlight == [H.NORMAL] * 4

    def test_cascade_on_edit(self, c_highlighter: Highlighter) -> None:
        rows = make_rows(["/* comment", "still comment */", "code"])
        c_highlighter.update_all(rows)

        rows[1].raw = "still comment "
        touched = c_highlighter.update_row(rows, 1)

        assert touched == 2
        assert rows[1].ends_in_open_comment is True
        assert rows[2].highlight == [H.MLCOMMENT] * 4
        assert rows[2].ends_in_open_comment is True

    def test_cascade_stops_when_flag_is_stable(self, c_highlighter: Highlighter) -> None:
        rows = make_rows(["int a;", "int b;", "int c;"])
        c_highlighter.update_all(rows)
        rows[0].raw = "long a;"
        assert c_highlighter.update_row(rows, 0) == 1

    def test_long_cascade_is_iterative(self, c_highlighter: Highlighter) -> None:
        rows = make_rows(["x"] + ["y"] * 5000)
        c_highlighter.update_all(rows)
        rows[0].raw = "/*"
        assert c_highlighter.update_row(rows, 0) == 5001
        assert rows[-1].highlight == [H.MLCOMMENT]

    def test_idempotent(self, c_highlighter: Highlighter) -> None:
        rows = make_rows(["/* a", "b */ int\tx = 1;"])
        c_highlighter.update_all(rows)
        before = [(r.render, list(r.highlight), r.ends_in_open_comment) for r in rows]
        c_highlighter.update_all(rows)
        assert [(r.render, r.highlight, r.ends_in_open_comment) for r in rows] == before

    def test_update_row_out_of_range(self, c_highlighter: Highlighter) -> None:
        assert c_highlighter.update_row(make_rows(["a"]), 5) == 0

    def test_render_uses_tab_width(self) -> None:
        rows = make_rows(["\tx"])
        Highlighter(None, tab_width=8).update_all(rows)
        assert rows[0].render == " " * 8 + "x"
        assert len(rows[0].highlight) == 9
