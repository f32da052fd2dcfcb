# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource package.

DiffSource ingests the inputs of a two- or three-way text comparison. For each
input it detects the encoding, runs optional external preprocessors, splits the
text into normalized line records, and builds a display view and a comparison
view that can be indexed by the same line number. It exposes both a CLI and a
small typed API (`SourceData`, `ComparisonSet`).
"""

from __future__ import annotations

from diffsource.config.model import MutableOptions, Options, SharedOptions
from diffsource.source import ComparisonSet, PipelineResult, SourceData

__all__: list[str] = [
    "ComparisonSet",
    "MutableOptions",
    "Options",
    "PipelineResult",
    "SharedOptions",
    "SourceData",
]
