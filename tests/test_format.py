"""Tests for the CNI serializers."""

import pytest

from cni_format import dump, dump_csv, dump_null, format_cni, format_value, parse, to_str


class TestFormatValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("plain", "plain"),
            ("inner space", "inner space"),
            ("", "#empty"),
            ("backtick`d", "`backtick``d`"),
            ("multi\nline", "`multi\nline`"),
            ("multi\r\nline", "`multi\r\nline`"),
            ("multi\x0bline", "`multi\x0bline`"),
            ("sharp#sign", "`sharp#sign`"),
            ("semi;colon", "`semi;colon`"),
            (" padded", "` padded`"),
            ("padded\t", "`padded\t`"),
        ],
    )
    def test_value_forms(self, value: str, expected: str) -> None:
        assert format_value(value) == expected


class TestToStr:
    def test_top_level(self) -> None:
        assert to_str({"a": "b"}) == "a = b\n"

    def test_section(self) -> None:
        assert to_str({"a.b": "c"}) == "[a]\nb = c\n"

    def test_multi_part_key_uses_first_part(self) -> None:
        assert to_str({"a.b.c": "d"}) == "[a]\nb.c = d\n"

    def test_keys_without_section_come_first(self) -> None:
        assert to_str({"a.b": "with section header", "ccc": "without"}) == (
            "ccc = without\n[a]\nb = with section header\n"
        )

    def test_accepts_pairs(self) -> None:
        assert to_str([("a", "b"), ("c", "d")]) == "a = b\nc = d\n"

    def test_groups_sections(self) -> None:
        text = to_str({"x.a": "1", "y.a": "2", "x.b": "3"})
        assert text == "[x]\na = 1\nb = 3\n[y]\na = 2\n"

    def test_round_trip(self) -> None:
        data = {"k": "", "s.t": "`", "s.u": "a\nb", "s.v.w": " x "}
        assert parse(to_str(data)) == data


class TestFormatCni:
    DATA = {
        "top": "1",
        "a.x": "1",
        "a.y": "2",
        "a.b.z": "3",
        "a.b.w": "4",
        "c.q": "5",
    }

    def test_threshold_zero_has_no_headings(self) -> None:
        assert format_cni(self.DATA, section_threshold=0) == (
            "a.b.w = 4\na.b.z = 3\na.x = 1\na.y = 2\nc.q = 5\ntop = 1\n"
        )

    def test_threshold_two(self) -> None:
        assert format_cni(self.DATA, section_threshold=2) == (
            "top = 1\n"
            "c.q = 5\n"
            "[a.b]\n"
            "w = 4\n"
            "z = 3\n"
            "[a]\n"
            "x = 1\n"
            "y = 2\n"
        )

    def test_high_threshold_keeps_keys_qualified(self) -> None:
        assert format_cni(self.DATA) == (
            "top = 1\na.b.w = 4\na.b.z = 3\na.x = 1\na.y = 2\nc.q = 5\n"
        )

    @pytest.mark.parametrize("threshold", [0, 1, 2, 3, 10])
    def test_round_trip(self, threshold: int) -> None:
        assert parse(format_cni(self.DATA, section_threshold=threshold)) == self.DATA


class TestDump:
    def test_custom_layout(self) -> None:
        data = {"a": "1", "b.c": "2"}
        assert dump(data, prefix="> ", infix=": ", postfix=";\n") == "> a: 1;\n> b.c: 2;\n"

    def test_defaults(self) -> None:
        assert dump({"a": "1"}) == "a 1\n"

    def test_csv_doubles_quotes(self) -> None:
        assert dump_csv({"a": 'say "hi"'}) == 'a,"say ""hi"""\n'

    def test_null_terminated(self) -> None:
        assert dump_null({"a": "x\ny", "b": "z"}) == "a=x\ny\0b=z\0"
