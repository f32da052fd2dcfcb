# topmark:header:start
#
#   project      : DiffSource
#   file         : model.py
#   file_relpath : src/diffsource/text/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Line-indexed text model.

Sections:
    LineEndStyle:
        Line terminator style detected on the first line of a buffer.

    LineRecord:
        One physical line, expressed as an offset/length window into a shared
        normalized text buffer (all terminators rewritten to ``"\\n"``).

    DataBuffer:
        One decoded view of a source: the raw bytes it was decoded from, the
        normalized text, and the ordered line records ending in a zero-length
        sentinel.

Invariants of a freshly split buffer:
    * offsets strictly increase across ``records``;
    * the last record is a zero-length sentinel whose offset equals
      ``len(text)``;
    * ``line_count == len(records) - 1``.

`DataBuffer.pad_to` is the one operation allowed to append records that share
an offset: empty padding lines placed before the sentinel, all pointing at the
end of the text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.constants import GUARD_BYTES

if TYPE_CHECKING:
    from collections.abc import Iterator

    from diffsource.config.logging import DiffSourceLogger

logger: DiffSourceLogger = get_logger(__name__)


class LineEndStyle(Enum):
    """Line terminator style.

    A lone carriage return (classic Mac OS) is recorded as ``UNDEFINED``.
    """

    UNIX = "unix"
    DOS = "dos"
    UNDEFINED = "undefined"

    @property
    def terminator(self) -> str | None:
        """Return the terminator sequence, or None when undefined."""
        return {LineEndStyle.UNIX: "\n", LineEndStyle.DOS: "\r\n"}.get(self)


@dataclass(frozen=True, slots=True)
class LineRecord:
    """One physical line within a shared normalized text buffer.

    Attributes:
        offset (int): Start offset of the line in ``source``.
        length (int): Number of characters, excluding the terminator.
        first_non_white (int | None): Column of the first non-whitespace
            character, or None for a blank line.
        pure_comment (bool): True if the comment classifier found nothing but
            comment text on the line.
        source (str): The shared normalized text (a reference, never a copy).
    """

    offset: int
    length: int = 0
    first_non_white: int | None = None
    pure_comment: bool = False
    source: str = field(default="", repr=False, compare=False)

    @property
    def text(self) -> str:
        """Return the line content (without terminator)."""
        return self.source[self.offset : self.offset + self.length]

    @property
    def is_blank(self) -> bool:
        """Return True if the line has no non-whitespace character."""
        return self.first_non_white is None

    def with_pure_comment(self, pure_comment: bool) -> LineRecord:
        """Return a copy with the pure-comment flag replaced."""
        return LineRecord(
            offset=self.offset,
            length=self.length,
            first_non_white=self.first_non_white,
            pure_comment=pure_comment,
            source=self.source,
        )


@dataclass
class DataBuffer:
    """One decoded view of a source.

    Two instances exist per source: the *display* view (original content) and
    the *comparison* view (after line-matching preprocessing and optional
    comment stripping). Both are rebuilt whenever the source options change.

    Attributes:
        raw (bytes | None): Raw bytes read from the input or a preprocessor; None
            when nothing has been read.
        encoding (str | None): Encoding the raw bytes were decoded with.
        text (str): Normalized text buffer shared by all ``records``.
        records (list[LineRecord]): Line records followed by the sentinel.
        line_count (int): Number of lines (sentinel excluded, padding included).
        line_end_style (LineEndStyle): Style of the first terminator found.
        is_text (bool): True once the bytes decoded as text.
        incomplete_conversion (bool): True if decoding produced replacement characters.
    """

    raw: bytes | None = None
    encoding: str | None = None
    text: str = ""
    records: list[LineRecord] = field(default_factory=list[LineRecord])
    line_count: int = 0
    line_end_style: LineEndStyle = LineEndStyle.UNDEFINED
    is_text: bool = False
    incomplete_conversion: bool = False

    def reset(self) -> None:
        """Drop the raw bytes and all decoded state."""
        self.raw = None
        self.encoding = None
        self.text = ""
        self.records = []
        self.line_count = 0
        self.line_end_style = LineEndStyle.UNDEFINED
        self.is_text = False
        self.incomplete_conversion = False

    @property
    def has_data(self) -> bool:
        """Return True when raw bytes have been read."""
        return self.raw is not None

    @property
    def size(self) -> int:
        """Return the number of raw bytes."""
        return 0 if self.raw is None else len(self.raw)

    @property
    def is_empty(self) -> bool:
        """Return True when no bytes were read or the input had zero length."""
        return self.size == 0

    def guarded(self) -> bytearray:
        """Return a copy of the raw bytes followed by `GUARD_BYTES` zero bytes."""
        out = bytearray(self.raw or b"")
        out.extend(bytes(GUARD_BYTES))
        return out

    def lines(self) -> list[LineRecord]:
        """Return the line records without the sentinel."""
        return self.records[: self.line_count]

    def __iter__(self) -> Iterator[LineRecord]:
        return iter(self.lines())

    def __len__(self) -> int:
        return self.line_count

    @property
    def sentinel(self) -> LineRecord | None:
        """Return the trailing zero-length sentinel, if the buffer was split."""
        return self.records[-1] if self.records else None

    def pad_to(self, line_count: int) -> int:
        """Append empty lines pointing at the end of the text until ``line_count`` is reached.

        Padding records are inserted before the sentinel so that
        ``records[:line_count]`` stays aligned line-for-line with a longer
        sibling view.

        Args:
            line_count (int): Target number of lines.

        Returns:
            int: Number of padding records added.
        """
        missing: int = line_count - self.line_count
        if missing <= 0:
            return 0
        end: int = len(self.text)
        padding: list[LineRecord] = [LineRecord(offset=end, source=self.text)] * missing
        if self.records:
            self.records[-1:-1] = padding
        else:
            self.records = padding + [LineRecord(offset=end, source=self.text)]
        self.line_count = line_count
        logger.debug("pad_to: added %d padding line(s), line_count=%d", missing, line_count)
        return missing

    def copy_raw_from(self, other: DataBuffer) -> None:
        """Reset this buffer and take over ``other``'s raw bytes.

        ``bytes`` are immutable, so decoding this buffer with comment removal
        can never alter ``other``.
        """
        self.reset()
        self.raw = other.raw
