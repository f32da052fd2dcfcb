# topmark:header:start
#
#   project      : DiffSource
#   file         : registry.py
#   file_relpath : src/diffsource/encoding/registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Named encodings.

Every encoding name in DiffSource (user configuration, BOM detection, charset
declarations found in XML/HTML payloads) resolves through `lookup_encoding`, so
``"UTF-8-BOM"``, ``"utf8"`` and ``"ISO-8859-1"`` map to one canonical codec
name each.

Canonical names are the ones reported by :func:`codecs.lookup`, e.g.
``"utf-8"``, ``"utf-8-sig"``, ``"utf-16-le"``, ``"iso8859-1"``.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from diffsource.config.logging import get_logger

if TYPE_CHECKING:
    from diffsource.config.logging import DiffSourceLogger

logger: DiffSourceLogger = get_logger(__name__)

UTF8: Final[str] = "utf-8"
UTF8_BOM: Final[str] = "utf-8-sig"
UTF16_LE: Final[str] = "utf-16-le"
UTF16_BE: Final[str] = "utf-16-be"
LATIN1: Final[str] = "iso8859-1"

# Names that Python's codec registry does not know under the spelling users
# (and other tools) commonly write.
_ALIASES: Final[dict[str, str]] = {
    "utf-8-bom": UTF8_BOM,
    "utf8-bom": UTF8_BOM,
    "utf-16le": UTF16_LE,
    "utf-16be": UTF16_BE,
    "ucs-2le": UTF16_LE,
    "ucs-2be": UTF16_BE,
}

# Text codecs whose decoders reject errors="replace" or never decode at all.
_NO_REPLACE_DECODE: Final[frozenset[str]] = frozenset({"idna", "punycode", "undefined"})

# Codecs whose decoder consumes a byte-order mark on its own. The splitter
# strips BOMs explicitly, so decoding goes through the BOM-less sibling.
_BOMLESS: Final[dict[str, str]] = {
    UTF8_BOM: UTF8,
}


def lookup_encoding(name: str | None) -> str | None:
    """Resolve an encoding name to its canonical codec name.

    Args:
        name (str | None): Encoding name as configured or declared.

    Returns:
        str | None: The canonical codec name, or None when the name is empty,
            unknown, or names a codec that does not decode bytes to text.
    """
    if not name:
        return None
    key: str = name.strip().strip("\"'").lower().replace("_", "-")
    if not key:
        return None
    key = _ALIASES.get(key, key)
    try:
        info: codecs.CodecInfo = codecs.lookup(key)
    except LookupError:
        logger.debug("Unknown encoding name: %r", name)
        return None
    canonical: str = info.name
    # bytes-to-bytes and str-to-str codecs (hex, base64, zlib, rot13) are not charsets.
    if not getattr(info, "_is_text_encoding", True) or canonical in _NO_REPLACE_DECODE:
        logger.debug("Not a text encoding: %r", name)
        return None
    # codecs.lookup() does not preserve the BOM variant for some spellings.
    if key == UTF8_BOM:
        return UTF8_BOM
    return canonical


def require_encoding(name: str) -> str:
    """Resolve an encoding name or raise.

    Args:
        name (str): Encoding name as configured.

    Returns:
        str: The canonical codec name.

    Raises:
        LookupError: If the name does not resolve to a known codec.
    """
    canonical: str | None = lookup_encoding(name)
    if canonical is None:
        raise LookupError(f"Unknown encoding: {name!r}")
    return canonical


def decoding_codec(encoding: str) -> str:
    """Return the codec to decode with, bypassing automatic BOM handling."""
    return _BOMLESS.get(encoding, encoding)


def same_encoding(a: str | None, b: str | None) -> bool:
    """Return True when both names resolve to the same canonical codec."""
    return lookup_encoding(a) == lookup_encoding(b)


@dataclass(frozen=True)
class EncodingChoice:
    """An encoding name plus an auto-detect modifier.

    Attributes:
        name (str): Canonical encoding to use when nothing is detected.
        auto_detect (bool): Whether BOMs and declared charsets may override ``name``.
    """

    name: str = UTF8
    auto_detect: bool = True

    @classmethod
    def of(cls, name: str, *, auto_detect: bool = True) -> EncodingChoice:
        """Build a choice from a user-supplied name (resolved through the registry)."""
        return cls(name=require_encoding(name), auto_detect=auto_detect)
