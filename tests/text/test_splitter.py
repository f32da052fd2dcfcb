# topmark:header:start
#
#   project      : DiffSource
#   file         : test_splitter.py
#   file_relpath : tests/text/test_splitter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

r"""Tests for decoding and line splitting.

Covers terminator normalization (``\n``, ``\r\n``, NUL-padded ``\r\n``, lone
``\r``), the text/binary verdict, incomplete conversions, BOM handling and the
comparison-only transformations.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from diffsource.comments.registry import get_classifier
from diffsource.core.errors import ErrorKind, TooLargeToProcessError
from diffsource.encoding.registry import LATIN1, UTF8, UTF16_LE
from diffsource.text.model import DataBuffer, LineEndStyle
from diffsource.text.splitter import LineSplitter, fold_case, split_lines, strip_digits
from tests.conftest import parametrize


def _texts(raw: bytes, encoding: str = UTF8) -> list[str]:
    return [r.text for r in split_lines(raw, encoding).records[:-1]]


def test_unix_lines() -> None:
    """LF-terminated lines; a final terminator adds no empty line."""
    result = split_lines(b"a\nbb\n", UTF8)
    assert result.is_text
    assert result.line_count == 2
    assert result.text == "a\nbb\n"
    assert [r.text for r in result.records[:-1]] == ["a", "bb"]
    assert result.line_end_style is LineEndStyle.UNIX


def test_dos_lines_are_normalized() -> None:
    """CRLF terminators become LF in the normalized text."""
    result = split_lines(b"a\r\nb\r\n", UTF8)
    assert result.text == "a\nb\n"
    assert result.line_count == 2
    assert result.line_end_style is LineEndStyle.DOS


def test_nul_padded_crlf_is_one_terminator() -> None:
    """Up to four NULs between CR and LF are consumed with the terminator."""
    result = split_lines(b"a\r\x00\x00\x00\x00\nb", UTF8)
    assert result.is_text
    assert result.line_count == 2
    assert _texts(b"a\r\x00\x00\x00\x00\nb") == ["a", "b"]
    assert result.line_end_style is LineEndStyle.DOS


def test_utf16_crlf() -> None:
    """CR NUL LF NUL in UTF-16LE decodes to CRLF."""
    raw: bytes = "x\r\ny\r\n".encode("utf-16-le")
    result = split_lines(raw, UTF16_LE)
    assert result.is_text
    assert [r.text for r in result.records[:-1]] == ["x", "y"]
    assert result.line_end_style is LineEndStyle.DOS


def test_lone_cr_is_undefined_style() -> None:
    """Classic Mac line ends split lines but leave the style undefined."""
    result = split_lines(b"a\rb\rc", UTF8)
    assert result.line_count == 3
    assert result.text == "a\nb\nc\n"
    assert result.line_end_style is LineEndStyle.UNDEFINED


def test_only_first_terminator_counts() -> None:
    """The style of the first terminator is recorded for the whole buffer."""
    assert split_lines(b"a\nb\r\n", UTF8).line_end_style is LineEndStyle.UNIX
    assert split_lines(b"a\r\nb\n", UTF8).line_end_style is LineEndStyle.DOS


def test_mixed_terminators_are_normalized() -> None:
    """Every terminator style ends a line; the first one found sets the style."""
    result = split_lines(b"a\nb\r\nc\rd", UTF8)
    assert _texts(b"a\nb\r\nc\rd") == ["a", "b", "c", "d"]
    assert "\r" not in result.text
    assert result.line_end_style is LineEndStyle.UNIX
    assert result.records[-1].offset == len(result.text)


def test_no_terminator_is_undefined() -> None:
    """A single unterminated line has no style."""
    result = split_lines(b"abc", UTF8)
    assert result.line_count == 1
    assert result.line_end_style is LineEndStyle.UNDEFINED


def test_empty_buffer() -> None:
    """Empty input is text with zero lines and one sentinel."""
    result = split_lines(b"", UTF8)
    assert result.is_text
    assert result.line_count == 0
    assert len(result.records) == 1
    assert result.records[0].offset == 0
    assert result.records[0].length == 0


def test_nul_makes_buffer_binary() -> None:
    """A NUL character inside a line stops the split."""
    result = split_lines(b"abc\x00def\nmore\n", UTF8)
    assert not result.is_text
    assert result.line_count == 0
    assert result.records == []


@parametrize("char", ["\ufdd0", "\ufffe", "\U0001ffff"])
def test_non_characters_make_buffer_binary(char: str) -> None:
    """Unicode non-characters are treated like NUL."""
    raw: bytes = f"ok\nbad{char}\n".encode("utf-8")
    assert not split_lines(raw, UTF8).is_text


def test_invalid_bytes_mark_incomplete_conversion() -> None:
    """Undecodable bytes become U+FFFD and are flagged, but splitting continues."""
    result = split_lines(b"caf\xe9\nok\n", UTF8)
    assert result.is_text
    assert result.incomplete_conversion
    assert result.line_count == 2
    assert result.records[0].text == "caf\ufffd"


def test_same_bytes_decode_cleanly_as_latin1() -> None:
    """Latin-1 decodes every byte."""
    result = split_lines(b"caf\xe9\n", LATIN1)
    assert not result.incomplete_conversion
    assert result.records[0].text == "caf\xe9"


def test_bom_overrides_requested_encoding() -> None:
    """A UTF-16LE BOM wins over a requested latin-1 and is not part of the text."""
    raw: bytes = b"\xff\xfe" + "hi\n".encode("utf-16-le")
    result = split_lines(raw, LATIN1)
    assert result.encoding == UTF16_LE
    assert result.skip_bytes == 2
    assert result.text == "hi\n"


def test_utf8_bom_is_skipped() -> None:
    """The UTF-8 BOM is excluded from the decoded text."""
    result = split_lines(b"\xef\xbb\xbfx\n", UTF8)
    assert result.skip_bytes == 3
    assert result.records[0].text == "x"


def test_first_non_white() -> None:
    """Columns of the first non-whitespace character; None for blank lines."""
    records = split_lines(b"  x\n\t\n\ty z\n", UTF8).records
    assert records[0].first_non_white == 2
    assert records[1].first_non_white is None
    assert records[1].is_blank
    assert records[2].first_non_white == 1


def test_line_ceiling_raises() -> None:
    """Exceeding the line ceiling raises TooLargeToProcessError."""
    splitter = LineSplitter(max_lines=2)
    with pytest.raises(TooLargeToProcessError) as excinfo:
        splitter.split(b"1\n2\n3\n", UTF8)
    assert excinfo.value.kind is ErrorKind.TOO_LARGE_TO_PROCESS


def test_byte_ceiling_raises() -> None:
    """Exceeding the byte ceiling raises before decoding."""
    with pytest.raises(TooLargeToProcessError):
        LineSplitter(max_bytes=4).split(b"12345", UTF8)


def test_remove_comments_keeps_pure_comment_lines() -> None:
    """In removal mode trailing comments go; pure comment lines stay and are flagged."""
    splitter = LineSplitter(get_classifier("c"), remove_comments=True)
    result = splitter.split(b"int a; // note\n// only comment\nint b;\n", UTF8)
    texts = [r.text for r in result.records[:-1]]
    assert texts == ["int a; ", "// only comment", "int b;"]
    assert [r.pure_comment for r in result.records[:-1]] == [False, True, False]


def test_block_comment_spans_lines() -> None:
    """Lines inside a block comment are pure comment lines, blank ones included."""
    result = LineSplitter(get_classifier("c")).split(b"/* start\n\n end */\nx;\n", UTF8)
    assert [r.pure_comment for r in result.records[:-1]] == [True, True, True, False]


def test_ignore_case_and_numbers() -> None:
    """Comparison-only transformations fold case and remove digits."""
    splitter = LineSplitter(ignore_case=True, ignore_numbers=True)
    result = splitter.split(b"Line 42 ok\n", UTF8)
    assert result.records[0].text == "LINE  OK"


def test_fold_case_preserves_length() -> None:
    """Characters whose upper case expands keep their original form."""
    assert fold_case("stra\xdfe") == "STRA\xdfE"
    assert len(fold_case("\ufb01x")) == 2


def test_strip_digits() -> None:
    """Only ASCII digits are removed."""
    assert strip_digits("a1b22c") == "abc"


def test_decode_into_fills_buffer() -> None:
    """`decode_into` stores the split result in the buffer."""
    buffer = DataBuffer(raw=b"a\r\nb")
    LineSplitter().decode_into(buffer, UTF8)
    assert buffer.is_text
    assert buffer.line_count == 2
    assert buffer.encoding == UTF8
    assert buffer.line_end_style is LineEndStyle.DOS
    assert buffer.sentinel is not None and buffer.sentinel.offset == len(buffer.text)


def test_decode_into_without_raw_is_noop() -> None:
    """A buffer that was never read stays untouched."""
    buffer = DataBuffer()
    LineSplitter().decode_into(buffer, UTF8)
    assert not buffer.has_data
    assert buffer.records == []


_LINE = st.text(
    alphabet=st.characters(exclude_categories=("Cs",), exclude_characters="\r\n\x00\ufeff"),
    max_size=20,
).filter(lambda s: all(not (0xFDD0 <= ord(c) <= 0xFDEF) and (ord(c) & 0xFFFE) != 0xFFFE for c in s))


@given(
    lines=st.lists(_LINE, max_size=12),
    terminator=st.sampled_from(["\n", "\r\n", "\r"]),
    trailing=st.booleans(),
)
def test_offsets_are_contiguous(lines: list[str], terminator: str, trailing: bool) -> None:
    """Offsets are contiguous, lengths match the lines, and the sentinel ends the text."""
    raw_text: str = terminator.join(lines) + (terminator if trailing and lines else "")
    result = split_lines(raw_text.encode("utf-8"), UTF8)
    assert result.is_text

    expected: list[str] = list(lines)
    if lines and lines[-1] == "" and not trailing:
        expected = expected[:-1]
    assert result.line_count == len(expected)

    offset = 0
    for record, line in zip(result.records[: result.line_count], expected):
        assert record.offset == offset
        assert record.length == len(line)
        assert result.text[record.offset + record.length] == "\n"
        offset += record.length + 1

    sentinel = result.records[-1]
    assert sentinel.offset == len(result.text)
    assert sentinel.length == 0
    assert "\r" not in result.text
