# topmark:header:start
#
#   project      : DiffSource
#   file         : splitter.py
#   file_relpath : src/diffsource/text/splitter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

r"""Decode raw bytes and split them into line records.

The splitter turns a byte buffer into a normalized text buffer in which every
line terminator is rewritten to ``"\n"``, plus one `LineRecord` per physical
line and a trailing zero-length sentinel.

Terminators:
  * ``\n`` ends a line in Unix style.
  * ``\r\n`` ends a line in DOS style. Up to `CRLF_NUL_PADDING` NUL characters
    between the CR and the LF are tolerated and consumed with the terminator.
  * A lone ``\r`` ends a line in classic Mac style, recorded as
    ``LineEndStyle.UNDEFINED``.

Only the style of the **first** terminator is recorded for the whole buffer.

Text vs. binary:
  * A NUL character or a Unicode non-character inside a line stops the split:
    the buffer is reported as not text and no line records are returned.
  * Bytes that do not decode under the chosen encoding become U+FFFD; the
    buffer is flagged as an *incomplete conversion* but splitting continues.

A byte-order mark at the start of the buffer always wins over the requested
encoding, and its bytes are excluded from the decoded text.
"""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from diffsource.comments.base import CommentClassifier
from diffsource.config.logging import get_logger
from diffsource.constants import CRLF_NUL_PADDING, MAX_BYTE_COUNT, MAX_LINE_COUNT
from diffsource.core.errors import TooLargeToProcessError
from diffsource.encoding.detector import detect_bom
from diffsource.encoding.registry import decoding_codec
from diffsource.text.model import LineEndStyle, LineRecord

if TYPE_CHECKING:
    from diffsource.comments.base import CommentState, LineClassification
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.encoding.detector import EncodingDetection
    from diffsource.text.model import DataBuffer

logger: DiffSourceLogger = get_logger(__name__)

_TERMINATOR_RE: Final[re.Pattern[str]] = re.compile(
    "\r\x00{0,%d}\n|\r|\n" % CRLF_NUL_PADDING
)

# NUL plus every Unicode non-character: U+FDD0..U+FDEF and the last two code
# points of each of the 17 planes.
_NON_TEXT_RE: Final[re.Pattern[str]] = re.compile(
    "[\x00\ufdd0-\ufdef"
    + "".join(f"{chr(p << 16 | 0xFFFE)}{chr(p << 16 | 0xFFFF)}" for p in range(17))
    + "]"
)

_NON_WHITE_RE: Final[re.Pattern[str]] = re.compile(r"\S")
_DIGITS_RE: Final[re.Pattern[str]] = re.compile(r"[0-9]")

REPLACEMENT_CHAR: Final[str] = "\ufffd"


@dataclass
class SplitResult:
    """Outcome of splitting one byte buffer.

    Attributes:
        text (str): Normalized text (``"\\n"`` after every line).
        records (list[LineRecord]): Line records followed by the sentinel.
        line_count (int): Number of lines (sentinel excluded).
        line_end_style (LineEndStyle): Style of the first terminator found.
        is_text (bool): False if a NUL or non-character stopped the split.
        incomplete_conversion (bool): True if any U+FFFD was decoded.
        encoding (str): Encoding actually used (a BOM overrides the request).
        skip_bytes (int): Number of BOM bytes skipped before decoding.
    """

    text: str = ""
    records: list[LineRecord] = field(default_factory=list[LineRecord])
    line_count: int = 0
    line_end_style: LineEndStyle = LineEndStyle.UNDEFINED
    is_text: bool = False
    incomplete_conversion: bool = False
    encoding: str = ""
    skip_bytes: int = 0


def fold_case(line: str) -> str:
    """Upper-case ``line`` without changing its length.

    Characters whose upper-case form expands (``"ß"`` → ``"SS"``) are kept as is.
    """
    if line.isascii():
        return line.upper()
    out: list[str] = []
    for ch in line:
        up: str = ch.upper()
        out.append(up if len(up) == 1 else ch)
    return "".join(out)


def strip_digits(line: str) -> str:
    """Remove ASCII digits from ``line``."""
    return _DIGITS_RE.sub("", line)


def _style_of(terminator: str) -> LineEndStyle:
    if terminator == "\n":
        return LineEndStyle.UNIX
    if terminator.endswith("\n"):
        return LineEndStyle.DOS
    return LineEndStyle.UNDEFINED


class LineSplitter:
    """Configurable byte-buffer → line-records splitter.

    Args:
        classifier (CommentClassifier | None): Comment classifier consulted per
            line; the no-comment classifier when None.
        remove_comments (bool): Delete comment text from lines before they are
            committed (comparison view only).
        ignore_case (bool): Fold committed lines to upper case.
        ignore_numbers (bool): Remove digits from committed lines.
        max_lines (int): Line-count ceiling.
        max_bytes (int): Byte-count ceiling.
    """

    def __init__(
        self,
        classifier: CommentClassifier | None = None,
        *,
        remove_comments: bool = False,
        ignore_case: bool = False,
        ignore_numbers: bool = False,
        max_lines: int = MAX_LINE_COUNT,
        max_bytes: int = MAX_BYTE_COUNT,
    ) -> None:
        self.classifier: CommentClassifier = classifier or CommentClassifier()
        self.remove_comments: bool = remove_comments
        self.ignore_case: bool = ignore_case
        self.ignore_numbers: bool = ignore_numbers
        self.max_lines: int = max_lines
        self.max_bytes: int = max_bytes

    def split(self, raw: bytes, encoding: str) -> SplitResult:
        """Decode ``raw`` under ``encoding`` and split it into line records.

        Args:
            raw (bytes): The byte buffer.
            encoding (str): Canonical encoding name.

        Returns:
            SplitResult: The normalized text and its records.

        Raises:
            TooLargeToProcessError: If the byte or line ceiling is exceeded.
        """
        if len(raw) > self.max_bytes:
            raise TooLargeToProcessError(
                f"{len(raw)} bytes exceed the limit of {self.max_bytes} bytes"
            )

        skip: int = 0
        bom: EncodingDetection | None = detect_bom(raw)
        if bom is not None:
            if bom.encoding != encoding:
                logger.debug("split: BOM overrides %s with %s", encoding, bom.encoding)
            encoding = bom.encoding
            skip = bom.skip_bytes

        decoded: str = codecs.decode(raw[skip:], decoding_codec(encoding), errors="replace")
        result = SplitResult(encoding=encoding, skip_bytes=skip)

        state: CommentState = self.classifier.new_state()
        parts: list[str] = []
        pending: list[tuple[int, int, int | None, bool]] = []
        offset: int = 0
        first_style: LineEndStyle | None = None
        incomplete: bool = False

        def commit(line: str) -> bool:
            nonlocal offset, incomplete
            if _NON_TEXT_RE.search(line):
                return False
            if len(pending) >= self.max_lines:
                raise TooLargeToProcessError(
                    f"more than {self.max_lines} lines"
                )
            if REPLACEMENT_CHAR in line:
                incomplete = True
            verdict: LineClassification = self.classifier.classify(
                line, state, remove=self.remove_comments
            )
            if self.remove_comments:
                line = verdict.text
            if self.ignore_case:
                line = fold_case(line)
            if self.ignore_numbers:
                line = strip_digits(line)
            m: re.Match[str] | None = _NON_WHITE_RE.search(line)
            pending.append((offset, len(line), m.start() if m else None, verdict.pure_comment))
            parts.append(line)
            parts.append("\n")
            offset += len(line) + 1
            return True

        pos: int = 0
        for m in _TERMINATOR_RE.finditer(decoded):
            if not commit(decoded[pos : m.start()]):
                logger.debug("split: non-text character before offset %d; not text", m.start())
                return result
            if first_style is None:
                first_style = _style_of(m.group())
            pos = m.end()
        if pos < len(decoded):
            if not commit(decoded[pos:]):
                logger.debug("split: non-text character in last line; not text")
                return result

        text: str = "".join(parts)
        result.records = [
            LineRecord(offset=o, length=n, first_non_white=fnw, pure_comment=pc, source=text)
            for o, n, fnw, pc in pending
        ]
        result.records.append(LineRecord(offset=len(text), source=text))
        result.text = text
        result.line_count = len(pending)
        result.line_end_style = first_style or LineEndStyle.UNDEFINED
        result.is_text = True
        result.incomplete_conversion = incomplete
        logger.trace(
            "split: %d line(s), style=%s, incomplete=%s, encoding=%s",
            result.line_count,
            result.line_end_style.value,
            incomplete,
            encoding,
        )
        return result

    def decode_into(self, buffer: DataBuffer, encoding: str) -> None:
        """Split ``buffer.raw`` and store the result in ``buffer``.

        A buffer without raw bytes is left untouched.

        Raises:
            TooLargeToProcessError: If the byte or line ceiling is exceeded.
        """
        if buffer.raw is None:
            return
        result: SplitResult = self.split(buffer.raw, encoding)
        buffer.encoding = result.encoding
        buffer.text = result.text
        buffer.records = result.records
        buffer.line_count = result.line_count
        buffer.line_end_style = result.line_end_style
        buffer.is_text = result.is_text
        buffer.incomplete_conversion = result.incomplete_conversion


def split_lines(
    raw: bytes,
    encoding: str,
    *,
    classifier: CommentClassifier | None = None,
    remove_comments: bool = False,
) -> SplitResult:
    """Split ``raw`` with a one-off `LineSplitter`."""
    return LineSplitter(classifier, remove_comments=remove_comments).split(raw, encoding)
