# topmark:header:start
#
#   project      : DiffSource
#   file         : encoding.py
#   file_relpath : src/diffsource/pipeline/steps/encoding.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Working-encoding step.

In-memory data is always UTF-8. Otherwise the configured encoding is used, and
with auto-detection enabled the encoding detector may override it from a BOM
or a declared charset.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.encoding.detector import detect_file_encoding
from diffsource.encoding.registry import UTF8
from diffsource.pipeline.status import Axis, EncodingStatus
from diffsource.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.encoding.registry import EncodingChoice
    from diffsource.pipeline.context import SourceContext

logger: DiffSourceLogger = get_logger(__name__)


class EncodingStep(BaseStep):
    """Choose the encoding the input is read with.

    Axes written:
      - encoding
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.ENCODING,
            axes_written=(Axis.ENCODING,),
        )

    def run(self, ctx: SourceContext) -> None:
        """Set ``ctx.working_encoding`` and the encoding status."""
        if ctx.from_buffer:
            ctx.working_encoding = UTF8
            ctx.status.encoding = EncodingStatus.FORCED_UTF8
            return

        choice: EncodingChoice = ctx.encoding_choice or ctx.options.encoding_for(ctx.side)
        if not choice.auto_detect or ctx.input_path is None:
            ctx.working_encoding = choice.name
            ctx.status.encoding = EncodingStatus.CONFIGURED
            return

        detected: str = detect_file_encoding(ctx.input_path, choice.name)
        ctx.working_encoding = detected
        ctx.status.encoding = (
            EncodingStatus.FALLBACK if detected == choice.name else EncodingStatus.DETECTED
        )
        logger.debug("working encoding for %s: %s", ctx.input_path, detected)
