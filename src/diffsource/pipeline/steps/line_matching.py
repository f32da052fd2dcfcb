# topmark:header:start
#
#   project      : DiffSource
#   file         : line_matching.py
#   file_relpath : src/diffsource/pipeline/steps/line_matching.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Line-matching preprocessing step (stage B).

Produces the comparison buffer's raw bytes:

* with a line-matching command: the command's output over stage A's output,
  falling back to stage A's bytes (and disabling the command) on failure;
* without a command but with comments, case or numbers ignored: a copy of the
  display buffer's raw bytes, so stripping never touches the display view;
* otherwise nothing: the comparison view is the display view.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.core.errors import LineMatchingPreprocessorFailedError
from diffsource.fileaccess import read_file_bytes
from diffsource.pipeline.status import Axis, PreprocessStatus
from diffsource.pipeline.steps.base import BaseStep
from diffsource.pipeline.steps.preprocessor import failure_message, invoke_preprocessor

if TYPE_CHECKING:
    from pathlib import Path

    from diffsource.config.logging import DiffSourceLogger
    from diffsource.config.model import Options
    from diffsource.pipeline.context import SourceContext

logger: DiffSourceLogger = get_logger(__name__)


class LineMatchingStep(BaseStep):
    """Fill the comparison buffer's raw bytes.

    Axes written:
      - line_matching

    Sets:
      - PreprocessStatus: {APPLIED, FAILED, COPIED, SHARED}
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.LINE_MATCHING,
            axes_written=(Axis.LINE_MATCHING,),
        )

    def may_proceed(self, ctx: SourceContext) -> bool:
        """Run once the display view decoded as text."""
        return not ctx.is_halted and ctx.display.has_data and ctx.stage_a_path is not None

    def run(self, ctx: SourceContext) -> None:
        """Populate ``ctx.comparison.raw`` and ``ctx.comparison_encoding``.

        Raises:
            ReadFailedError: If stage A's bytes cannot be re-read after a failure.
        """
        assert ctx.stage_a_path is not None and ctx.stage_a_encoding is not None
        options: Options = ctx.options
        command: str = options.line_matching_cmd
        ctx.comparison.reset()

        if command:
            source: Path = ctx.stage_a_path
            try:
                data, _output, encoding = invoke_preprocessor(
                    ctx,
                    command,
                    source,
                    ctx.stage_a_encoding,
                    error_cls=LineMatchingPreprocessorFailedError,
                )
            except LineMatchingPreprocessorFailedError as e:
                if ctx.display.is_empty:
                    logger.debug("line-matching failed on empty input: %s", e.reason)
                    ctx.comparison.copy_raw_from(ctx.display)
                    ctx.comparison_encoding = ctx.stage_a_encoding
                    ctx.status.line_matching = PreprocessStatus.COPIED
                    return
                logger.warning("Line-matching preprocessor failed: %s", e.message)
                ctx.diagnostics.add_warning(failure_message("Line-matching preprocessing", e))
                ctx.disable_line_matching()
                ctx.comparison.raw = read_file_bytes(source)
                ctx.comparison_encoding = ctx.stage_a_encoding
                ctx.status.line_matching = PreprocessStatus.FAILED
                return
            ctx.comparison.raw = data
            ctx.comparison_encoding = encoding
            ctx.status.line_matching = PreprocessStatus.APPLIED
            return

        if options.ignore_comments or options.ignore_case or options.ignore_numbers:
            ctx.comparison.copy_raw_from(ctx.display)
            ctx.comparison_encoding = ctx.stage_a_encoding
            ctx.status.line_matching = PreprocessStatus.COPIED
            return

        ctx.status.line_matching = PreprocessStatus.SHARED
