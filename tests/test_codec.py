"""Tests for the token codec and record line format."""

import pytest

from shell_secrets.codec import decode, encode, shell_quote, shell_split
from shell_secrets.errors import DecodeError
from shell_secrets.records import Record, format_line, parse_line


class TestEncode:
    """Percent-encoding of raw bytes."""

    def test_unreserved_untouched(self):
        """Letters, digits and . ~ _ - pass through."""
        assert encode(b"abcXYZ019._~-") == "abcXYZ019._~-"

    def test_space_and_newline(self):
        assert encode(b"a b\n") == "a%20b%0A"

    def test_uppercase_hex(self):
        assert encode(b"\xff\xab") == "%FF%AB"

    def test_shell_specials_escaped(self):
        """Quotes, backslash, slash and plus are all escaped."""
        assert encode(b"+/'\"\\") == "%2B%2F%27%22%5C"

    def test_multibyte_text(self):
        assert encode("é".encode("utf-8")) == "%C3%A9"

    def test_empty(self):
        assert encode(b"") == ""

    def test_never_emits_unsafe_chars(self):
        token = encode(bytes(range(256)))
        for char in " \n\t'\"\\+":
            assert char not in token


class TestDecode:
    """Percent-decoding back to bytes."""

    @pytest.mark.parametrize("data", [
        b"",
        b"plain",
        b"with space",
        b"line1\nline2\r\n",
        b"\x00\x01nul\x00",
        "héllo wörld ✓".encode("utf-8"),
        b"100% +sure",
        bytes(range(256)),
    ])
    def test_round_trip(self, data):
        assert decode(encode(data)) == data

    def test_plus_is_space(self):
        """Form-encoded input: '+' means space."""
        assert decode("a+b") == b"a b"

    def test_escaped_plus(self):
        assert decode("%2B") == b"+"

    def test_lowercase_hex_accepted(self):
        assert decode("%c3%a9") == "é".encode("utf-8")

    @pytest.mark.parametrize("token", ["abc%", "%4", "%zz", "a%2"])
    def test_malformed_escape(self, token):
        """Incomplete or non-hex escapes are errors, not guesses."""
        with pytest.raises(DecodeError):
            decode(token)


class TestShellQuote:
    """Shell quoting layer."""

    def test_safe_token_bare(self):
        assert shell_quote("abc%20def") == "abc%20def"

    def test_empty_is_visible(self):
        assert shell_quote("") == "''"

    def test_tilde_quoted(self):
        """A leading ~ would be expanded by a shell."""
        assert shell_quote("~home") == "'~home'"

    def test_embedded_quote(self):
        assert shell_quote("it's") == "'it'\"'\"'s'"

    def test_split_runs_of_whitespace(self):
        assert shell_split("a  b\tc") == ["a", "b", "c"]

    def test_split_empty_field(self):
        assert shell_split("'' 1 x") == ["", "1", "x"]

    def test_split_backslash_escape(self):
        """Backslash-escaped fields (as written by printf %q) are accepted."""
        assert shell_split(r"\~a 1 b") == ["~a", "1", "b"]

    def test_split_unbalanced(self):
        with pytest.raises(DecodeError):
            shell_split("'abc 1 x")

    def test_quote_then_split(self):
        tokens = ["", "~x", "it's", "a b", "$HOME", "#no-comment", "back\\slash"]
        line = " ".join(shell_quote(t) for t in tokens)
        assert shell_split(line) == tokens


class TestRecordLine:
    """One record per store line."""

    def test_format(self):
        record = Record(key=b"a b", timestamp=1700000000, value=b"x")
        assert format_line(record) == "a%20b 1700000000 x\n"

    def test_format_empty_fields(self):
        assert format_line(Record(key=b"", timestamp=5, value=b"")) == "'' 5 ''\n"

    def test_format_tilde(self):
        record = Record(key=b"~home", timestamp=1, value=b"v")
        assert format_line(record) == "'~home' 1 v\n"

    def test_parse(self):
        record = parse_line("a%20b 1700000000 h%C3%A9llo\n")
        assert record == Record(b"a b", 1700000000, "héllo".encode("utf-8"))

    def test_parse_formatted(self):
        record = Record(key=b"k\ny", timestamp=42, value=b"\x00it's\xff")
        assert parse_line(format_line(record)) == record

    @pytest.mark.parametrize("line", ["", "   \t", "\n"])
    def test_blank_line_is_end_of_stream(self, line):
        assert parse_line(line) is None

    @pytest.mark.parametrize("line", [
        "a 1",
        "a 1 b c",
        "a notanumber b",
        "a 1 %G0",
        "'a 1 b",
    ])
    def test_corrupt_line(self, line):
        with pytest.raises(DecodeError):
            parse_line(line)

    def test_corrupt_line_reports_line_number(self):
        with pytest.raises(DecodeError, match="line 3"):
            parse_line("only two", lineno=3)
