# topmark:header:start
#
#   project      : DiffSource
#   file         : test_detector.py
#   file_relpath : tests/encoding/test_detector.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for BOM and declared-charset detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hypothesis import given
from hypothesis import strategies as st

from diffsource.constants import DETECT_PREFIX_BYTES
from diffsource.encoding.detector import (
    EncodingDetection,
    detect_bom,
    detect_encoding,
    detect_file_encoding,
    encoding_from_tag,
)
from diffsource.encoding.registry import LATIN1, UTF8, UTF8_BOM, UTF16_BE, UTF16_LE
from tests.conftest import parametrize

if TYPE_CHECKING:
    from pathlib import Path


@parametrize(
    "prefix, expected, skip",
    [
        (b"\xff\xfeh\x00", UTF16_LE, 2),
        (b"\xfe\xff\x00h", UTF16_BE, 2),
        (b"\xef\xbb\xbfhello", UTF8_BOM, 3),
    ],
)
def test_bom_is_detected_with_its_length(prefix: bytes, expected: str, skip: int) -> None:
    """A byte-order mark names the encoding and the bytes to skip."""
    assert detect_encoding(prefix) == EncodingDetection(encoding=expected, skip_bytes=skip)


def test_bom_wins_over_declared_charset() -> None:
    """A BOM takes precedence over an XML prolog naming another charset."""
    data: bytes = b"\xef\xbb\xbf<?xml version='1.0' encoding='iso-8859-1'?><a/>"
    detection = detect_encoding(data)
    assert detection is not None
    assert detection.encoding == UTF8_BOM
    assert detection.skip_bytes == 3


def test_xml_prolog_single_quotes() -> None:
    """`<?xml ... encoding='ISO-8859-1'?>` yields latin-1 with nothing to skip."""
    detection = detect_encoding(b"<?xml version='1.0' encoding='ISO-8859-1'?>\n<root/>")
    assert detection == EncodingDetection(encoding=LATIN1, skip_bytes=0)


def test_xml_prolog_double_quotes() -> None:
    """Double-quoted values work as well."""
    detection = detect_encoding(b'<?xml version="1.0" encoding="UTF-8"?>')
    assert detection is not None
    assert detection.encoding == UTF8


def test_html_meta_content_form() -> None:
    """`<meta content="text/html; charset=utf-8">` yields UTF-8."""
    data: bytes = b'<html><head><meta http-equiv="Content-Type" content="text/html; charset=utf-8">'
    detection = detect_encoding(data)
    assert detection is not None
    assert detection.encoding == UTF8


def test_html5_meta_charset() -> None:
    """`<meta charset="iso-8859-1">` yields latin-1."""
    detection = detect_encoding(b'<!doctype html><meta charset="iso-8859-1"><p>x</p>')
    assert detection is not None
    assert detection.encoding == LATIN1


def test_first_resolvable_meta_charset_wins() -> None:
    """Meta tags whose charset is missing or unknown are skipped."""
    data: bytes = (
        b'<html><meta name="x"><meta charset="no-such-codec">'
        b'<meta charset="utf-16le"><meta charset="iso-8859-1">'
    )
    detection = detect_encoding(data)
    assert detection is not None
    assert detection.encoding == UTF16_LE


def test_unknown_declared_charset_is_ignored() -> None:
    """An unknown charset name is not a detection."""
    assert detect_encoding(b'<?xml version="1.0" encoding="no-such-codec"?>') is None


def test_unterminated_prolog_is_ignored() -> None:
    """An XML prolog without ``?>`` is not trusted."""
    assert detect_encoding(b'<?xml version="1.0" encoding="utf-8"') is None


@parametrize("charset", ["hex", "base64", "zlib", "rot13", "uu", "idna"])
def test_non_text_declared_charset_is_ignored(charset: str) -> None:
    """A declared codec that does not decode bytes to text is not a detection."""
    html: bytes = f'<html><meta charset="{charset}"><p>x</p>'.encode()
    xml: bytes = f'<?xml version="1.0" encoding="{charset}"?><a/>'.encode()
    assert detect_encoding(html) is None
    assert detect_encoding(xml) is None


def test_declaration_past_prefix_is_ignored() -> None:
    """Only the first bytes of the buffer are inspected."""
    data: bytes = b" " * DETECT_PREFIX_BYTES + b'<meta charset="iso-8859-1">'
    assert detect_encoding(data) is None


def test_plain_text_detects_nothing() -> None:
    """No BOM and no declaration: the caller's default applies."""
    assert detect_encoding(b"just some text\n") is None
    assert detect_bom(b"") is None


def test_encoding_from_tag_picks_first_quote() -> None:
    """The quote character seen first after the key delimits the value."""
    segment: bytes = b"<?xml encoding='utf-8' standalone=\"yes\""
    assert encoding_from_tag(segment, b"encoding=") == UTF8


def test_detect_file_encoding_uses_fallback(tmp_path: Path) -> None:
    """Files without a BOM or declaration report the fallback."""
    plain: Path = tmp_path / "plain.txt"
    plain.write_bytes(b"abc\n")
    assert detect_file_encoding(plain, LATIN1) == LATIN1

    bom: Path = tmp_path / "bom.txt"
    bom.write_bytes(b"\xff\xfea\x00")
    assert detect_file_encoding(bom, LATIN1) == UTF16_LE


def test_detect_file_encoding_missing_file(tmp_path: Path) -> None:
    """A file that cannot be opened reports the fallback."""
    assert detect_file_encoding(tmp_path / "missing.txt", UTF8) == UTF8


_BOMS: tuple[bytes, ...] = (b"\xff\xfe", b"\xfe\xff", b"\xef\xbb\xbf")


@given(st.binary(max_size=64).filter(lambda b: not b.startswith(_BOMS)))
def test_detection_without_markup_never_reports_a_bom(data: bytes) -> None:
    """Without a BOM, any detection skips zero bytes."""
    detection = detect_encoding(data)
    assert detection is None or detection.skip_bytes == 0
