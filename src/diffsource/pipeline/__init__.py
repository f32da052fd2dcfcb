# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/pipeline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Source pipeline: context, status axes, steps and named pipelines."""

from __future__ import annotations

from diffsource.pipeline.context import FlowControl, SourceContext
from diffsource.pipeline.pipelines import Pipeline
from diffsource.pipeline.runner import run

__all__: list[str] = [
    "FlowControl",
    "Pipeline",
    "SourceContext",
    "run",
]
