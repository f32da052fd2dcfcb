# topmark:header:start
#
#   project      : DiffSource
#   file         : context.py
#   file_relpath : src/diffsource/pipeline/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Processing context for the source pipeline.

Sections:
    SourceContext:
        Mutable state of one source as it flows through the pipeline: the
        options snapshot, the resolved input, both data buffers, per-axis
        status, diagnostics, and the options delta the run hands back to its
        caller.

    FlowControl:
        Lets a step request early, graceful termination of the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.config.model import OptionsDelta
from diffsource.core.diagnostics import DiagnosticLog
from diffsource.fileaccess import InputReference, ScratchFiles
from diffsource.pipeline.status import SourceStatus
from diffsource.preprocess.runner import PreprocessorRunner
from diffsource.text.model import DataBuffer

if TYPE_CHECKING:
    from pathlib import Path

    from diffsource.comments.base import CommentClassifier
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.config.model import Options
    from diffsource.core.errors import SourceDataError
    from diffsource.encoding.registry import EncodingChoice
    from diffsource.pipeline.contracts import Step

logger: DiffSourceLogger = get_logger(__name__)

__all__: list[str] = [
    "FlowControl",
    "SourceContext",
]


@dataclass
class FlowControl:
    """Execution flow control for the current source."""

    halt: bool = False
    reason: str = ""  # short code, e.g. "no-input", "binary", "fatal"
    at_step: str = ""  # step name that requested the halt


@dataclass
class SourceContext:
    """State of one source during a pipeline run.

    Attributes:
        input (InputReference): Where the source comes from.
        options (Options): Options snapshot for this run.
        side (str): Source side (``"a"``, ``"b"`` or ``"c"``); selects the
            per-source encoding override.
        encoding_choice (EncodingChoice | None): Explicit encoding for this run;
            None derives it from ``options``.
        buffer_path (Path | None): Scratch file holding in-memory data, if any.
        display_name (str | None): Name used to select the comment classifier
            (the alias, else the input location).
        scratch (ScratchFiles): Owner of files that outlive the run (remote copies).
        run_scratch (ScratchFiles): Owner of files only this run needs
            (transcoded inputs, preprocessor outputs).
        runner (PreprocessorRunner | None): Preprocessor runner; built from
            ``options.timeout`` when None.
        display (DataBuffer): Display view.
        comparison (DataBuffer): Comparison view.
        classifier (CommentClassifier | None): Comment classifier for this source.
        input_path (Path | None): Resolved local file to read.
        working_encoding (str | None): Encoding of ``input_path``.
        stage_a_path (Path | None): File holding the display bytes (stage A
            output, or ``input_path`` when stage A did not run or failed).
        stage_a_encoding (str | None): Encoding of ``stage_a_path``.
        comparison_encoding (str | None): Encoding of the comparison bytes.
        steps (list[Step]): Steps executed so far.
        status (SourceStatus): Per-axis status.
        flow (FlowControl): Halt request, if any.
        diagnostics (DiagnosticLog): Messages collected during the run.
        delta (OptionsDelta): Commands to disable after this run.
        fatal_error (SourceDataError | None): The error that stopped the run.
    """

    input: InputReference
    options: Options
    side: str = "a"
    encoding_choice: EncodingChoice | None = None
    buffer_path: Path | None = None
    display_name: str | None = None
    scratch: ScratchFiles = field(default_factory=ScratchFiles)
    run_scratch: ScratchFiles = field(default_factory=ScratchFiles)
    runner: PreprocessorRunner | None = None

    display: DataBuffer = field(default_factory=DataBuffer)
    comparison: DataBuffer = field(default_factory=DataBuffer)
    classifier: CommentClassifier | None = None

    input_path: Path | None = None
    working_encoding: str | None = None
    stage_a_path: Path | None = None
    stage_a_encoding: str | None = None
    comparison_encoding: str | None = None

    steps: list[Step] = field(default_factory=lambda: [])
    status: SourceStatus = field(default_factory=SourceStatus)
    flow: FlowControl = field(default_factory=FlowControl)
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)
    delta: OptionsDelta = field(default_factory=OptionsDelta)
    fatal_error: SourceDataError | None = None

    @property
    def from_buffer(self) -> bool:
        """Return True when the source is in-memory data."""
        return self.buffer_path is not None

    @property
    def is_halted(self) -> bool:
        """Return True once a step requested a halt."""
        return self.flow.halt

    def request_halt(self, reason: str, at_step: str) -> None:
        """Stop the run after the current step."""
        self.flow.halt = True
        self.flow.reason = reason
        self.flow.at_step = at_step
        logger.debug("halt requested by %s: %s", at_step, reason)

    def get_runner(self) -> PreprocessorRunner:
        """Return the preprocessor runner, creating it from the options on first use."""
        if self.runner is None:
            self.runner = PreprocessorRunner(self.options.timeout)
        return self.runner

    def fail(self, error: SourceDataError, at_step: str) -> None:
        """Record a fatal error and halt."""
        self.fatal_error = error
        self.diagnostics.add_error(error.message)
        self.request_halt("fatal", at_step)

    def disable_preprocessor(self) -> None:
        """Record that the stage A command must not run again."""
        self.delta = self.delta.merge(OptionsDelta(disable_preprocessor=True))

    def disable_line_matching(self) -> None:
        """Record that the stage B command must not run again."""
        self.delta = self.delta.merge(OptionsDelta(disable_line_matching=True))
