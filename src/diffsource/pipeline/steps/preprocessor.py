# topmark:header:start
#
#   project      : DiffSource
#   file         : preprocessor.py
#   file_relpath : src/diffsource/pipeline/steps/preprocessor.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""General preprocessing step (stage A).

Without a configured command the resolved input is read directly into the
display buffer. Otherwise the command runs over the input (transcoded first
when the tool expects another encoding) and its output becomes the display
bytes.

When the command fails on a non-empty input, the untouched input is read
instead, a warning is recorded, and the run's options delta disables the
command so later runs do not retry it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.core.errors import PreprocessorFailedError, ReadFailedError, WriteFailedError
from diffsource.fileaccess import read_file_bytes
from diffsource.pipeline.status import Axis, PreprocessStatus
from diffsource.pipeline.steps.base import BaseStep
from diffsource.preprocess.transcode import transcode_file

if TYPE_CHECKING:
    from pathlib import Path

    from diffsource.config.logging import DiffSourceLogger
    from diffsource.pipeline.context import SourceContext

logger: DiffSourceLogger = get_logger(__name__)


def invoke_preprocessor(
    ctx: SourceContext,
    command: str,
    source: Path,
    source_encoding: str,
    *,
    error_cls: type[PreprocessorFailedError],
) -> tuple[bytes, Path, str]:
    """Run ``command`` over ``source`` and read its output.

    Args:
        ctx (SourceContext): Context providing options, runner and per-run scratch files.
        command (str): The configured command line.
        source (Path): File fed to the command's standard input.
        source_encoding (str): Encoding of ``source``.
        error_cls (type[PreprocessorFailedError]): Error type for this stage.

    Returns:
        tuple[bytes, Path, str]: Output bytes, output file and its encoding.

    Raises:
        PreprocessorFailedError: If the command or its I/O fails (as ``error_cls``).
    """
    tool_encoding: str = ctx.options.preprocessor_encoding
    try:
        tool_input: Path = transcode_file(source, source_encoding, tool_encoding, ctx.run_scratch)
        output: Path = ctx.run_scratch.create(suffix=source.suffix)
        ctx.get_runner().run(command, tool_input, output, error_cls=error_cls)
        data: bytes = read_file_bytes(output)
    except (ReadFailedError, WriteFailedError) as e:
        raise error_cls(command, e.message) from e
    return data, output, tool_encoding


def failure_message(label: str, error: PreprocessorFailedError) -> str:
    """Return the user-facing warning for a failed preprocessor command."""
    return (
        f"{label} possibly failed. Check this command:\n\n  {error.command}\n\n"
        f"The {label.lower()} command will be disabled now.\n({error.reason})"
    )


class PreprocessorStep(BaseStep):
    """Fill the display buffer's raw bytes, running the general preprocessor if set.

    Axes written:
      - preprocess

    Sets:
      - PreprocessStatus: {NOT_CONFIGURED, APPLIED, FAILED}
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.PREPROCESS,
            axes_written=(Axis.PREPROCESS,),
        )

    def may_proceed(self, ctx: SourceContext) -> bool:
        """Run once the input is resolved and an encoding was chosen."""
        return (
            not ctx.is_halted and ctx.input_path is not None and ctx.working_encoding is not None
        )

    def run(self, ctx: SourceContext) -> None:
        """Read the input, or the preprocessor's output, into ``ctx.display``.

        Raises:
            ReadFailedError: If the input itself cannot be read.
        """
        assert ctx.input_path is not None and ctx.working_encoding is not None
        source: Path = ctx.input_path
        command: str = ctx.options.preprocessor_cmd
        ctx.display.reset()
        ctx.stage_a_path = source
        ctx.stage_a_encoding = ctx.working_encoding

        if not command:
            ctx.display.raw = read_file_bytes(source, display=ctx.input.pretty_name)
            ctx.status.preprocess = PreprocessStatus.NOT_CONFIGURED
            return

        try:
            data, output, encoding = invoke_preprocessor(
                ctx, command, source, ctx.working_encoding, error_cls=PreprocessorFailedError
            )
        except PreprocessorFailedError as e:
            ctx.display.raw = read_file_bytes(source, display=ctx.input.pretty_name)
            if not ctx.display.raw:
                logger.debug("preprocessor failed on empty input: %s", e.reason)
                ctx.status.preprocess = PreprocessStatus.NOT_CONFIGURED
                return
            logger.warning("Preprocessor failed: %s", e.message)
            ctx.diagnostics.add_warning(failure_message("Preprocessing", e))
            ctx.disable_preprocessor()
            ctx.status.preprocess = PreprocessStatus.FAILED
            return

        ctx.display.raw = data
        ctx.stage_a_path = output
        ctx.stage_a_encoding = encoding
        ctx.status.preprocess = PreprocessStatus.APPLIED
        logger.debug("stage A output: %s (%d bytes, %s)", output, len(data), encoding)
