# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/preprocess/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""External preprocessor invocation and cross-encoding transcoding."""

from __future__ import annotations

from diffsource.preprocess.runner import PreprocessorRunner, parse_command
from diffsource.preprocess.transcode import transcode_file

__all__: list[str] = [
    "PreprocessorRunner",
    "parse_command",
    "transcode_file",
]
