# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/text/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Line-indexed text model and the byte-buffer line splitter."""

from __future__ import annotations

from diffsource.text.model import DataBuffer, LineEndStyle, LineRecord
from diffsource.text.splitter import LineSplitter, SplitResult, split_lines

__all__: list[str] = [
    "DataBuffer",
    "LineEndStyle",
    "LineRecord",
    "LineSplitter",
    "SplitResult",
    "split_lines",
]
