"""Error-path tests for the strict parser and the error classes."""

import pytest

from cni_format import parse
from cni_format.errors import (
    CniError,
    DeserializeError,
    DeserializeKind,
    ErrorKind,
    ParseError,
)

# =========================================================================
# ParseError construction and formatting
# =========================================================================


class TestParseErrorFormatting:
    """Verify ParseError produces well-formatted messages."""

    def test_line_and_column(self) -> None:
        err = ParseError(ErrorKind.EXPECTED_KEY, 10, 5)
        assert str(err) == "10:5 expected key"

    def test_with_source_file(self) -> None:
        err = ParseError(ErrorKind.EXPECTED_EQUALS, 1, 3, source_file="app.cni")
        assert str(err) == 'app.cni:1:3 expected "="'

    def test_attributes(self) -> None:
        err = ParseError(ErrorKind.UNTERMINATED_RAW, 2, 7)
        assert err.kind is ErrorKind.UNTERMINATED_RAW
        assert err.message == "unterminated raw value"
        assert err.position == (2, 7)

    def test_is_cni_error(self) -> None:
        assert isinstance(ParseError(ErrorKind.INVALID_KEY, 1, 1), CniError)


class TestDeserializeErrorFormatting:
    def test_detail_is_appended(self) -> None:
        err = DeserializeError(DeserializeKind.INT, 3, 8, detail="12x")
        assert str(err) == "line 3:8: malformed integer: 12x"

    def test_from_parse_error_keeps_kind_and_position(self) -> None:
        err = DeserializeError.from_parse_error(ParseError(ErrorKind.EXPECTED_KEY, 4, 2))
        assert err.kind is DeserializeKind.EXPECTED_KEY
        assert (err.lineno, err.col_offset) == (4, 2)

    def test_is_cni_error(self) -> None:
        assert isinstance(DeserializeError(DeserializeKind.EXPECTED_VALUE), CniError)


# =========================================================================
# Error kinds and positions raised by parse()
# =========================================================================


def _error(source: str) -> ParseError:
    with pytest.raises(ParseError) as info:
        parse(source)
    return info.value


class TestParseErrorPositions:
    """Each error kind points at the documented position."""

    def test_unclosed_section_points_at_bracket(self) -> None:
        err = _error("a = 1\n  [section\nb = 2")
        assert err.kind is ErrorKind.EXPECTED_SECTION_END
        assert err.position == (2, 3)

    def test_section_at_end_of_input(self) -> None:
        err = _error("[")
        assert err.kind is ErrorKind.EXPECTED_SECTION_END
        assert err.position == (1, 1)

    def test_invalid_section_name_points_at_bracket(self) -> None:
        err = _error("[.a]")
        assert err.kind is ErrorKind.INVALID_KEY
        assert err.position == (1, 1)

    @pytest.mark.parametrize("key", [".a", "a.", "a..b"])
    def test_invalid_key_points_at_key(self, key: str) -> None:
        err = _error(f"x = 1\n {key} = 2")
        assert err.kind is ErrorKind.INVALID_KEY
        assert err.position == (2, 2)

    def test_expected_key(self) -> None:
        err = _error("= value")
        assert err.kind is ErrorKind.EXPECTED_KEY
        assert err.position == (1, 1)

    def test_expected_equals_points_after_key(self) -> None:
        err = _error("key value")
        assert err.kind is ErrorKind.EXPECTED_EQUALS
        assert err.position == (1, 4)

    def test_key_at_end_of_input(self) -> None:
        err = _error("key")
        assert err.kind is ErrorKind.EXPECTED_EQUALS

    def test_unterminated_raw_points_at_backtick(self) -> None:
        err = _error("a = `never closed\nb = 2\n")
        assert err.kind is ErrorKind.UNTERMINATED_RAW
        assert err.position == (1, 5)

    def test_source_file_in_message(self) -> None:
        with pytest.raises(ParseError, match=r"^conf\.cni:1:1 expected key$"):
            parse("]", source_file="conf.cni")
