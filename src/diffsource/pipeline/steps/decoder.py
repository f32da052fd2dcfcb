# topmark:header:start
#
#   project      : DiffSource
#   file         : decoder.py
#   file_relpath : src/diffsource/pipeline/steps/decoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Decode steps: split the display and comparison bytes into line records.

The display view is decoded without comment removal. If a non-empty display
buffer turns out not to be text, the run stops: binary inputs skip every
line-oriented stage.

The comparison view, when it has bytes, is decoded with comment removal when
comments are ignored, and with case folding and digit removal when those are
requested.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.core.errors import TooLargeToProcessError
from diffsource.pipeline.status import Axis, DecodeStatus
from diffsource.pipeline.steps.base import BaseStep
from diffsource.text.splitter import LineSplitter

if TYPE_CHECKING:
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.config.model import Options
    from diffsource.pipeline.context import SourceContext
    from diffsource.text.model import DataBuffer

logger: DiffSourceLogger = get_logger(__name__)


def _decode_status(buffer: DataBuffer) -> DecodeStatus:
    if not buffer.is_text:
        return DecodeStatus.BINARY
    if buffer.is_empty:
        return DecodeStatus.EMPTY
    if buffer.incomplete_conversion:
        return DecodeStatus.INCOMPLETE
    return DecodeStatus.TEXT


class DisplayDecoderStep(BaseStep):
    """Split the display bytes.

    Axes written:
      - display
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.DISPLAY,
            axes_written=(Axis.DISPLAY,),
        )

    def may_proceed(self, ctx: SourceContext) -> bool:
        """Run once stage A produced bytes."""
        return not ctx.is_halted and ctx.display.has_data

    def run(self, ctx: SourceContext) -> None:
        """Decode ``ctx.display`` under the stage A encoding.

        Raises:
            TooLargeToProcessError: If the buffer exceeds the splitter's ceilings.
        """
        assert ctx.stage_a_encoding is not None
        splitter = LineSplitter(ctx.classifier)
        try:
            splitter.decode_into(ctx.display, ctx.stage_a_encoding)
        except TooLargeToProcessError as e:
            ctx.status.display = DecodeStatus.TOO_LARGE
            raise TooLargeToProcessError(
                f"File {ctx.input.pretty_name or ctx.input_path} too large to process. Skipping."
            ) from e
        ctx.status.display = _decode_status(ctx.display)
        if not ctx.display.is_text and not ctx.display.is_empty:
            ctx.request_halt("binary", self.name)
        logger.debug(
            "display: %d line(s), %s, %s",
            ctx.display.line_count,
            ctx.status.display.value,
            ctx.display.line_end_style.value,
        )


class ComparisonDecoderStep(BaseStep):
    """Split the comparison bytes, if any.

    Axes written:
      - comparison
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.COMPARISON,
            axes_written=(Axis.COMPARISON,),
        )

    def may_proceed(self, ctx: SourceContext) -> bool:
        """Run when stage B produced comparison bytes."""
        if ctx.is_halted:
            return False
        if not ctx.comparison.has_data:
            ctx.status.comparison = DecodeStatus.SKIPPED
            return False
        return True

    def run(self, ctx: SourceContext) -> None:
        """Decode ``ctx.comparison`` with the comparison-only transformations.

        Raises:
            TooLargeToProcessError: If the buffer exceeds the splitter's ceilings.
        """
        assert ctx.comparison_encoding is not None
        options: Options = ctx.options
        splitter = LineSplitter(
            ctx.classifier,
            remove_comments=options.ignore_comments,
            ignore_case=options.ignore_case,
            ignore_numbers=options.ignore_numbers,
        )
        try:
            splitter.decode_into(ctx.comparison, ctx.comparison_encoding)
        except TooLargeToProcessError as e:
            ctx.status.comparison = DecodeStatus.TOO_LARGE
            raise TooLargeToProcessError(
                f"File {ctx.input.pretty_name or ctx.input_path} too large to process. Skipping."
            ) from e
        ctx.status.comparison = _decode_status(ctx.comparison)
        if not ctx.comparison.is_text:
            msg: str = "Line-matching output is not text; the display lines are compared instead."
            logger.warning(msg)
            ctx.diagnostics.add_warning(msg)
            ctx.comparison.reset()
