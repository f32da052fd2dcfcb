# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/encoding/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Named encodings and encoding auto-detection."""

from __future__ import annotations

from diffsource.encoding.detector import (
    EncodingDetection,
    detect_bom,
    detect_encoding,
    detect_file_encoding,
)
from diffsource.encoding.registry import EncodingChoice, lookup_encoding, require_encoding

__all__: list[str] = [
    "EncodingChoice",
    "EncodingDetection",
    "detect_bom",
    "detect_encoding",
    "detect_file_encoding",
    "lookup_encoding",
    "require_encoding",
]
