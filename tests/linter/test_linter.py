"""Example-based tests for the diagnostic linter.

Each test pins the exact ``LINE:COL-LINE:COL SEVERITY: MESSAGE`` lines the
linter prints for a small input.
"""

import io

import pytest

from cni_format import Dialect, Linter, Severity, SourceLocation, lint
from cni_format.linter import Diagnostic


def lint_lines(source: str, dialect: Dialect | None = None) -> list[str]:
    return [str(d) for d in Linter(source, dialect=dialect).diagnostics()]


class TestDiagnostic:
    def test_format(self) -> None:
        diagnostic = Diagnostic(
            SourceLocation.span((1, 2), (3, 4)), Severity.INFO, "something to note"
        )
        assert str(diagnostic) == "1:2-3:4 info: something to note"
        assert diagnostic.start == (1, 2)
        assert diagnostic.end == (3, 4)

    def test_lint_writes_to_stream(self) -> None:
        out = io.StringIO()
        lint("]\n=\n", out=out)
        assert out.getvalue() == (
            "1:1-1:2 syntax error: Unexpected closing square bracket.\n"
            "2:1-2:2 syntax error: Expected key before '='.\n"
        )

    def test_lint_defaults_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        lint("]")
        assert capsys.readouterr().out == (
            "1:1-1:2 syntax error: Unexpected closing square bracket.\n"
        )


class TestCleanInput:
    @pytest.mark.parametrize(
        "source",
        [
            "",
            "a = 1\n",
            "[s]\nkey = value # comment\n",
            "  indented = fine\n",
            "a = 1\n\n\n\nb = 2\n",
            "raw = `multi\nline ``with`` ticks`\n",
            "a = 1\r\n[b]\r\nc = `d`\r\n",
        ],
    )
    def test_no_diagnostics(self, source: str) -> None:
        assert lint_lines(source) == []


class TestStatements:
    def test_lone_closing_bracket(self) -> None:
        assert lint_lines("[a]]\n") == [
            "1:4-1:5 syntax error: Unexpected closing square bracket."
        ]

    def test_equals_without_key(self) -> None:
        assert lint_lines("= value\n") == [
            "1:1-1:2 syntax error: Expected key before '='.",
            "1:8-1:9 syntax error: Expected '=' after key.",
        ]

    def test_unknown_character_skips_line(self) -> None:
        assert lint_lines("!bad line = x\nk = v\n") == [
            "1:1-1:2 syntax error: Expected key and '=' before value."
        ]

    def test_missing_equals_skips_rest_of_line(self) -> None:
        assert lint_lines("key value = x\nnext = 1\n") == [
            "1:4-1:5 syntax error: Expected '=' after key."
        ]

    def test_missing_equals_resumes_on_next_line(self) -> None:
        assert lint_lines("key\nnext = 1\n") == [
            "1:4-1:5 syntax error: Expected '=' after key."
        ]

    def test_raw_key(self) -> None:
        assert lint_lines("`a` = 1\n") == [
            "1:1-1:4 syntax error: A key or section heading can not be a raw value."
        ]


class TestKeyDots:
    def test_leading_dot(self) -> None:
        assert lint_lines(".a = 1") == [
            "1:1-1:2 syntax error: A key or section heading can not start with a dot."
        ]

    def test_trailing_dot(self) -> None:
        assert lint_lines("a. = 1") == [
            "1:2-1:3 syntax error: A key or section heading can not end with a dot."
        ]

    def test_consecutive_dots(self) -> None:
        assert lint_lines("a..b = 1") == [
            "1:3-1:4 syntax error: A key or section heading can not contain two consecutive dots."
        ]

    def test_consecutive_dots_at_end(self) -> None:
        assert lint_lines("a.. = 1") == [
            "1:3-1:4 syntax error: A key or section heading can not contain two consecutive dots.",
            "1:3-1:4 syntax error: A key or section heading can not end with a dot.",
        ]

    def test_every_bad_dot_is_reported(self) -> None:
        lines = lint_lines(".a. = 1\n.b. = 2\n")
        assert len(lines) == 4

    def test_section_heading_trailing_dot(self) -> None:
        assert lint_lines("[a.]\n") == [
            "1:3-1:4 syntax error: A key or section heading can not end with a dot."
        ]


class TestSectionHeadings:
    def test_unterminated(self) -> None:
        assert lint_lines("[section\nkey = `value\n") == [
            "1:9-1:10 syntax error: Expected ']' for end of section heading.",
            "2:7-3:1 syntax error: Expected '`' at end of raw value.",
        ]

    def test_empty(self) -> None:
        assert lint_lines("[]\na = 1") == [
            "1:1-1:3 info: This section heading is empty. You can avoid empty section "
            "headings by putting items in this section at the start of the file."
        ]

    def test_only_comment(self) -> None:
        assert lint_lines("[ # c\n]\n") == [
            "1:1-2:2 info: This section heading only contains a comment, is this intentional?",
            "1:3-1:6 info: This is not a good place to put a comment, "
            "consider putting it before the section heading.",
        ]

    def test_comment_after_name(self) -> None:
        assert lint_lines("[a # c\n]\n") == [
            "1:4-1:7 info: This is not a good place to put a comment, "
            "consider putting it after the section heading."
        ]

    def test_line_break_before_name(self) -> None:
        assert lint_lines("[\na]\n") == ["1:2-2:1 info: A line break here may be confusing."]

    def test_line_break_after_name(self) -> None:
        assert lint_lines("[a\n]\n") == ["1:3-2:1 info: A line break here may be confusing."]


class TestRawValues:
    def test_unterminated_suggests_missing_backtick(self) -> None:
        assert lint_lines("a = `value\nb = 2\n") == [
            "1:5-3:1 syntax error: Expected '`' at end of raw value.",
            "2:1-2:2 info: This looks like a new statement, did you forget to put a backtick here?",
        ]

    def test_unterminated_without_statement(self) -> None:
        assert lint_lines("a = `just text") == [
            "1:5-1:15 syntax error: Expected '`' at end of raw value."
        ]

    def test_closing_backtick_before_section_heading(self) -> None:
        assert lint_lines("a = `x`[s]\nk = v\n") == []

    def test_closing_backtick_before_stray_bracket(self) -> None:
        assert lint_lines("a = `x`]\nb = 1\nc = 2\n") == [
            "1:8-1:9 syntax error: Unexpected closing square bracket."
        ]

    def test_unescaped_backtick(self) -> None:
        assert lint_lines("a = `x`y`\n") == [
            "1:7-1:8 syntax error: Unescaped backtick inside raw value. "
            "Use '``' to represent a backtick in a raw value."
        ]


class TestWhitespace:
    def test_trailing_whitespace_before_line_break(self) -> None:
        assert lint_lines("k = `v`   \nl = w\n") == ["1:8-2:1 info: unnecessary whitespace"]

    def test_trailing_whitespace_at_end_of_input(self) -> None:
        assert lint_lines("k = `v`  ") == ["1:8-1:10 info: unnecessary whitespace"]

    def test_whitespace_only_line(self) -> None:
        assert lint_lines("a = 1\n   \nb = 2") == ["2:1-3:1 info: unnecessary whitespace"]


class TestDialects:
    def test_semicolon_needs_ini(self) -> None:
        assert lint_lines("; c\n") == [
            "1:1-1:2 syntax error: Expected key and '=' before value."
        ]
        assert lint_lines("; c\n", Dialect(ini=True)) == []

    def test_wide_keys_need_more_keys(self) -> None:
        assert lint_lines("ä = 1\n") == [
            "1:1-1:2 syntax error: Expected key and '=' before value."
        ]
        assert lint_lines("ä = 1\n", Dialect(more_keys=True)) == []
