# topmark:header:start
#
#   project      : DiffSource
#   file         : detector.py
#   file_relpath : src/diffsource/encoding/detector.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Encoding auto-detection from raw bytes.

Detection order (each rule is only tried when the previous one did not match):

1. UTF-16 byte-order marks (``FF FE`` little-endian, ``FE FF`` big-endian).
2. UTF-8 byte-order mark (``EF BB BF``), reported as the BOM-preserving
   ``utf-8-sig`` variant.
3. The ``encoding=`` attribute of an XML declaration (``<?xml ... ?>``).
4. Otherwise, the ``charset=`` attribute of the first ``<meta ...>`` tag that
   names a known encoding.

Only the first `DETECT_PREFIX_BYTES` bytes are inspected. When nothing matches,
`detect_encoding` returns None and callers fall back to their configured
encoding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from diffsource.config.logging import get_logger
from diffsource.constants import DETECT_PREFIX_BYTES
from diffsource.encoding.registry import (
    UTF8_BOM,
    UTF16_BE,
    UTF16_LE,
    lookup_encoding,
)

if TYPE_CHECKING:
    from pathlib import Path

    from diffsource.config.logging import DiffSourceLogger

logger: DiffSourceLogger = get_logger(__name__)

# Ordered: two-byte marks are checked before the three-byte UTF-8 mark.
_BOMS: Final[tuple[tuple[bytes, str], ...]] = (
    (b"\xff\xfe", UTF16_LE),
    (b"\xfe\xff", UTF16_BE),
    (b"\xef\xbb\xbf", UTF8_BOM),
)

_XML_PROLOG_START: Final[bytes] = b"<?xml"
_XML_PROLOG_END: Final[bytes] = b"?>"
_XML_ENCODING_KEY: Final[bytes] = b"encoding="
_META_START: Final[bytes] = b"<meta"
_META_END: Final[bytes] = b">"
_META_CHARSET_KEY: Final[bytes] = b"charset="


@dataclass(frozen=True)
class EncodingDetection:
    """Result of a successful detection.

    Attributes:
        encoding (str): Canonical encoding name.
        skip_bytes (int): Number of leading bytes (the BOM) to skip before decoding.
    """

    encoding: str
    skip_bytes: int = 0


def detect_bom(buf: bytes) -> EncodingDetection | None:
    """Detect a byte-order mark at the start of ``buf``.

    Args:
        buf (bytes): Raw bytes (at least the first three bytes of the payload).

    Returns:
        EncodingDetection | None: The BOM encoding and its length, or None.
    """
    for bom, encoding in _BOMS:
        if buf.startswith(bom):
            return EncodingDetection(encoding=encoding, skip_bytes=len(bom))
    return None


def encoding_from_tag(segment: bytes, key: bytes) -> str | None:
    """Extract the encoding named by ``key`` inside a tag segment.

    The value may be quoted with either quote character; whichever quote
    appears first after the key wins. When no closing quote follows, the value
    runs from the key up to the first quote (the ``content="text/html;
    charset=utf-8"`` form of a ``<meta>`` tag).

    Args:
        segment (bytes): The tag text, e.g. ``<?xml version="1.0" encoding='UTF-8'``.
        key (bytes): The attribute key including ``=``, e.g. ``b"encoding="``.

    Returns:
        str | None: The canonical encoding, or None if absent or unknown.
    """
    key_pos: int = segment.find(key)
    if key_pos < 0:
        return None
    value_start: int = key_pos + len(key)

    quote_pos: int = segment.find(b'"', value_start)
    apos_pos: int = segment.find(b"'", value_start)
    quote: bytes = b'"'
    if apos_pos >= 0 and (quote_pos < 0 or apos_pos < quote_pos):
        quote = b"'"
        quote_pos = apos_pos

    value_end: int = segment.find(quote, quote_pos + 1) if quote_pos >= 0 else -1
    raw: bytes
    if value_end >= 0:
        raw = segment[quote_pos + 1 : value_end]
    else:
        raw = segment[value_start:quote_pos] if quote_pos >= 0 else segment[value_start:]
    name: str = raw.decode("ascii", errors="ignore").strip()
    logger.trace("encoding_from_tag: key=%r value=%r", key, name)
    return lookup_encoding(name)


def _detect_declared(prefix: bytes) -> str | None:
    xml_pos: int = prefix.find(_XML_PROLOG_START)
    if xml_pos >= 0:
        xml_end: int = prefix.find(_XML_PROLOG_END, xml_pos)
        if xml_end >= 0:
            return encoding_from_tag(prefix[xml_pos:xml_end], _XML_ENCODING_KEY)
        return None

    meta_pos: int = prefix.find(_META_START)
    while meta_pos >= 0:
        meta_end: int = prefix.find(_META_END, meta_pos)
        if meta_end < 0:
            break
        encoding: str | None = encoding_from_tag(prefix[meta_pos:meta_end], _META_CHARSET_KEY)
        if encoding is not None:
            return encoding
        meta_pos = prefix.find(_META_START, meta_end)
    return None


def detect_encoding(buf: bytes) -> EncodingDetection | None:
    """Detect the encoding of a raw byte buffer.

    Args:
        buf (bytes): Raw bytes; only the first `DETECT_PREFIX_BYTES` are inspected.

    Returns:
        EncodingDetection | None: The detected encoding and BOM length, or None
            when the caller should use its own default.
    """
    bom: EncodingDetection | None = detect_bom(buf)
    if bom is not None:
        logger.debug("detect_encoding: BOM → %s (skip %d)", bom.encoding, bom.skip_bytes)
        return bom

    declared: str | None = _detect_declared(buf[:DETECT_PREFIX_BYTES])
    if declared is not None:
        logger.debug("detect_encoding: declared charset → %s", declared)
        return EncodingDetection(encoding=declared, skip_bytes=0)
    return None


def detect_file_encoding(path: Path, fallback: str) -> str:
    """Detect the encoding of a file, or return ``fallback``.

    Args:
        path (Path): The file to inspect.
        fallback (str): Encoding to use when nothing is detected or the file
            cannot be opened.

    Returns:
        str: The detected or fallback encoding.
    """
    try:
        with path.open("rb") as fh:
            prefix: bytes = fh.read(DETECT_PREFIX_BYTES)
    except OSError as e:
        logger.debug("detect_file_encoding: cannot open %s: %s", path, e)
        return fallback
    detection: EncodingDetection | None = detect_encoding(prefix)
    return detection.encoding if detection is not None else fallback
