# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Options model, TOML loading and logging configuration.

The public surface re-exported here is what the pipeline, the `SourceData`
facade and the CLI use: `Options` (immutable snapshot), `MutableOptions`
(merge builder), `OptionsDelta` (feedback from a pipeline run) and
`SharedOptions` (lock-protected snapshot for sibling sources).
"""

from __future__ import annotations

from diffsource.config.io import ConfigLoadError
from diffsource.config.model import (
    SOURCE_SIDES,
    MutableOptions,
    Options,
    OptionsDelta,
    SharedOptions,
    SourceEncoding,
)

__all__: list[str] = [
    "SOURCE_SIDES",
    "ConfigLoadError",
    "MutableOptions",
    "Options",
    "OptionsDelta",
    "SharedOptions",
    "SourceEncoding",
]
