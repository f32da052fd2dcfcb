# topmark:header:start
#
#   project      : DiffSource
#   file         : runner.py
#   file_relpath : src/diffsource/pipeline/runner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run a source pipeline for a single source."""

from __future__ import annotations

from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.constants import VALUE_NOT_SET

if TYPE_CHECKING:
    from collections.abc import Sequence

    from diffsource.config.logging import DiffSourceLogger
    from diffsource.pipeline.context import SourceContext
    from diffsource.pipeline.contracts import Step

logger: DiffSourceLogger = get_logger(__name__)


def run(ctx: SourceContext, steps: Sequence[Step]) -> SourceContext:
    """Execute the pipeline sequentially.

    Every step is invoked even after a halt so that skipped steps are visible in
    ``ctx.steps``; each step's gate decides whether it does any work.

    Args:
        ctx (SourceContext): Mutable context for the source.
        steps (Sequence[Step]): Ordered pipeline steps.

    Returns:
        SourceContext: The final context after all steps have run.
    """
    logger.info(
        "pipeline: source=%s side=%s preprocessor=%s line_matching=%s",
        ctx.input.location or (ctx.buffer_path and "<buffer>") or VALUE_NOT_SET,
        ctx.side,
        ctx.options.preprocessor_cmd or VALUE_NOT_SET,
        ctx.options.line_matching_cmd or VALUE_NOT_SET,
    )
    for step in steps:
        ctx = step(ctx)
    logger.info(
        "pipeline: done, halted=%s (%s), %d message(s)",
        ctx.flow.halt,
        ctx.flow.reason or "-",
        len(ctx.diagnostics),
    )
    return ctx
