# topmark:header:start
#
#   project      : DiffSource
#   file         : test_registry.py
#   file_relpath : tests/encoding/test_registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for encoding name resolution."""

from __future__ import annotations

import pytest

from diffsource.encoding.registry import (
    LATIN1,
    UTF8,
    UTF8_BOM,
    UTF16_LE,
    EncodingChoice,
    decoding_codec,
    lookup_encoding,
    require_encoding,
    same_encoding,
)
from tests.conftest import parametrize


@parametrize(
    "name, expected",
    [
        ("UTF-8", UTF8),
        ("utf8", UTF8),
        ("utf-8-bom", UTF8_BOM),
        ("UTF-16LE", UTF16_LE),
        ("latin-1", LATIN1),
        ("ISO-8859-1", LATIN1),
        (" 'utf-8' ", UTF8),
    ],
)
def test_lookup_canonicalizes(name: str, expected: str) -> None:
    """Common spellings resolve to one canonical codec name."""
    assert lookup_encoding(name) == expected


@parametrize("name", [None, "", "   ", "definitely-not-a-codec"])
def test_lookup_rejects_unknown(name: str | None) -> None:
    """Empty or unknown names resolve to None."""
    assert lookup_encoding(name) is None


def test_require_encoding_raises() -> None:
    """`require_encoding` raises LookupError for unknown names."""
    with pytest.raises(LookupError):
        require_encoding("klingon")


def test_same_encoding_compares_canonical_names() -> None:
    """Aliases of one codec compare equal."""
    assert same_encoding("utf8", "UTF-8")
    assert not same_encoding("utf-8", "latin-1")


def test_decoding_codec_is_bomless() -> None:
    """UTF-8 with BOM decodes through the plain UTF-8 codec."""
    assert decoding_codec(UTF8_BOM) == UTF8
    assert decoding_codec(LATIN1) == LATIN1


def test_encoding_choice_of() -> None:
    """`EncodingChoice.of` resolves the name through the registry."""
    choice = EncodingChoice.of("Latin-1", auto_detect=False)
    assert choice == EncodingChoice(name=LATIN1, auto_detect=False)


@parametrize("name", ["hex", "base64", "zlib", "rot13", "uu", "idna", "punycode", "undefined"])
def test_lookup_rejects_non_text_codecs(name: str) -> None:
    """Codecs Python knows but that do not decode bytes to text are not encodings."""
    assert lookup_encoding(name) is None
    with pytest.raises(LookupError):
        require_encoding(name)
