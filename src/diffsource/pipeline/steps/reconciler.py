# topmark:header:start
#
#   project      : DiffSource
#   file         : reconciler.py
#   file_relpath : src/diffsource/pipeline/steps/reconciler.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Reconcile the display and comparison views.

1. When the comparison view has fewer lines than the display view, it is padded
   with empty records pointing at the end of its text, so both views can be
   indexed by the same line number.
2. When comments are ignored, each display line takes the pure-comment flag of
   the comparison line with the same index.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.pipeline.status import Axis, ReconcileStatus
from diffsource.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.pipeline.context import SourceContext
    from diffsource.text.model import DataBuffer, LineRecord

logger: DiffSourceLogger = get_logger(__name__)


def propagate_pure_comments(source: DataBuffer, target: DataBuffer) -> int:
    """Copy pure-comment flags from ``source`` lines onto ``target`` lines.

    Only the overlapping prefix of line indices is touched.

    Returns:
        int: Number of target records whose flag changed.
    """
    changed: int = 0
    for i in range(min(source.line_count, target.line_count)):
        flag: bool = source.records[i].pure_comment
        record: LineRecord = target.records[i]
        if record.pure_comment != flag:
            target.records[i] = record.with_pure_comment(flag)
            changed += 1
    return changed


class ReconcilerStep(BaseStep):
    """Align line counts and propagate comment flags.

    Axes written:
      - reconcile
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.RECONCILE,
            axes_written=(Axis.RECONCILE,),
        )

    def may_proceed(self, ctx: SourceContext) -> bool:
        """Run when a separate comparison view exists."""
        if ctx.is_halted:
            return False
        if not ctx.comparison.has_data:
            ctx.status.reconcile = ReconcileStatus.NOT_NEEDED
            return False
        return True

    def run(self, ctx: SourceContext) -> None:
        """Pad the comparison view and propagate pure-comment flags."""
        added: int = ctx.comparison.pad_to(ctx.display.line_count)
        ctx.status.reconcile = ReconcileStatus.PADDED if added else ReconcileStatus.ALIGNED
        if ctx.options.ignore_comments:
            changed: int = propagate_pure_comments(ctx.comparison, ctx.display)
            logger.debug("pure-comment flags changed on %d display line(s)", changed)
