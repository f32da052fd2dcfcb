# topmark:header:start
#
#   project      : DiffSource
#   file         : source.py
#   file_relpath : src/diffsource/source.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-source facade over the source pipeline.

Sections:
    SourceData:
        One compared input (a local file, a remote URL, or in-memory text). It
        owns the display and comparison buffers and the scratch files created
        while reading them. `SourceData.read_and_preprocess` runs the pipeline
        and returns a `PipelineResult`.

    PipelineResult:
        The messages accumulated by one run and the options delta the caller
        should apply (commands disabled after a failure).

    ComparisonSet:
        Two or three sources sharing one `SharedOptions`. Sources can be read
        sequentially or on a thread pool; each run's delta is applied under the
        shared lock so later runs skip disabled commands.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.config.model import SOURCE_SIDES, Options, OptionsDelta, SharedOptions
from diffsource.constants import FROM_CLIPBOARD_ALIAS
from diffsource.core.diagnostics import DiagnosticLevel
from diffsource.core.errors import WriteFailedError
from diffsource.encoding.registry import EncodingChoice, require_encoding
from diffsource.fileaccess import InputReference, ScratchFiles
from diffsource.pipeline import runner
from diffsource.pipeline.context import SourceContext
from diffsource.pipeline.pipelines import Pipeline
from diffsource.text.model import DataBuffer, LineEndStyle

if TYPE_CHECKING:
    import os
    from collections.abc import Iterator, Sequence

    from diffsource.config.logging import DiffSourceLogger
    from diffsource.core.errors import ErrorKind, SourceDataError
    from diffsource.pipeline.status import SourceStatus
    from diffsource.text.model import LineRecord

logger: DiffSourceLogger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Outcome of one pipeline run for one source.

    Attributes:
        messages (list[str]): Warning and error messages, in the order they arose.
        delta (OptionsDelta): Commands to disable for later runs.
        status (SourceStatus | None): Per-axis status of the run.
        error (SourceDataError | None): The fatal error, if the run stopped on one.
    """

    messages: list[str] = field(default_factory=list[str])
    delta: OptionsDelta = field(default_factory=OptionsDelta)
    status: SourceStatus | None = None
    error: SourceDataError | None = None

    @property
    def ok(self) -> bool:
        """Return True when the run did not stop on a fatal error."""
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        """Return the kind of the fatal error, if any."""
        return self.error.kind if self.error is not None else None


class SourceData:
    """One compared input and its two decoded views.

    Args:
        options (Options | SharedOptions | None): Options for this source. A
            `SharedOptions` is shared with sibling sources and receives this
            source's deltas; a plain `Options` is private to this source.
        side (str): Source side (``"a"``, ``"b"`` or ``"c"``).
    """

    def __init__(self, options: Options | SharedOptions | None = None, *, side: str = "a") -> None:
        self._shared: SharedOptions = (
            options if isinstance(options, SharedOptions) else SharedOptions(options)
        )
        self.side: str = side
        self._input: InputReference = InputReference()
        self._alias: str | None = None
        self._buffer_path: Path | None = None
        self._scratch: ScratchFiles = ScratchFiles()
        self._run_scratch: ScratchFiles = ScratchFiles()
        self._display: DataBuffer = DataBuffer()
        self._comparison: DataBuffer = DataBuffer()
        self._encoding: str | None = None
        self.last_result: PipelineResult | None = None

    def __repr__(self) -> str:
        return f"SourceData(side={self.side!r}, input={self.filename!r})"

    # ---------------------------- inputs ----------------------------
    @property
    def options(self) -> Options:
        """Return the current options snapshot."""
        return self._shared.snapshot()

    @property
    def shared_options(self) -> SharedOptions:
        """Return the options holder (shared with sibling sources, if any)."""
        return self._shared

    def set_options(self, options: Options | SharedOptions) -> None:
        """Replace the options for later runs."""
        self._shared = options if isinstance(options, SharedOptions) else SharedOptions(options)

    def reset(self) -> None:
        """Drop both views, the input and every scratch file."""
        self._scratch.cleanup()
        self._run_scratch.cleanup()
        self._display.reset()
        self._comparison.reset()
        self._input = InputReference()
        self._alias = None
        self._buffer_path = None
        self._encoding = None
        self.last_result = None

    def set_filename(self, location: str | os.PathLike[str] | None) -> None:
        """Use a local path or URL as input; an empty value clears the source."""
        self.set_file_access(InputReference(location or None))

    def set_file_access(self, reference: InputReference) -> None:
        """Use ``reference`` as input, replacing any previous input."""
        self.reset()
        self._input = reference

    def set_data(self, text: str) -> None:
        """Use in-memory text as input.

        The text is written to a scratch file as UTF-8 and the source is named
        ``"From Clipboard"``.

        Raises:
            WriteFailedError: If the scratch file cannot be written.
        """
        self.reset()
        self._buffer_path = self._scratch.create(suffix=".txt", data=text.encode("utf-8"))
        self._alias = FROM_CLIPBOARD_ALIAS

    @property
    def alias_name(self) -> str | None:
        """Return the display alias, if any."""
        return self._alias

    def set_alias_name(self, alias: str | None) -> None:
        """Set the name shown instead of the input location."""
        self._alias = alias or None

    @property
    def filename(self) -> str:
        """Return the input location, or the empty string for in-memory data."""
        return self._input.location or ""

    @property
    def file_access(self) -> InputReference:
        """Return the input reference."""
        return self._input

    @property
    def is_empty(self) -> bool:
        """Return True when neither a location nor in-memory data is set."""
        return not self._input.is_valid and self._buffer_path is None

    @property
    def is_valid(self) -> bool:
        """Return True when an input location is set."""
        return self._input.is_valid

    @property
    def is_from_buffer(self) -> bool:
        """Return True for in-memory data."""
        return self._buffer_path is not None

    # ---------------------------- reading ----------------------------
    def read_and_preprocess(
        self,
        encoding: str | None = None,
        auto_detect: bool | None = None,
        *,
        pipeline: Pipeline = Pipeline.READ,
    ) -> PipelineResult:
        """Run the pipeline and rebuild both views.

        Args:
            encoding (str | None): Encoding to use; None uses the options.
            auto_detect (bool | None): Auto-detect flag; None uses the options.
            pipeline (Pipeline): Pipeline variant to run.

        Returns:
            PipelineResult: Messages and the options delta of this run. The
                delta has already been applied to this source's options.

        Raises:
            LookupError: If ``encoding`` does not name a text encoding.
        """
        options: Options = self._shared.snapshot()
        choice: EncodingChoice | None = None
        if encoding is not None or auto_detect is not None:
            base: EncodingChoice = options.encoding_for(self.side)
            choice = EncodingChoice(
                name=require_encoding(encoding) if encoding is not None else base.name,
                auto_detect=base.auto_detect if auto_detect is None else auto_detect,
            )

        self._run_scratch.cleanup()
        self._display.reset()
        self._comparison.reset()
        ctx = SourceContext(
            input=self._input,
            options=options,
            side=self.side,
            encoding_choice=choice,
            buffer_path=self._buffer_path,
            display_name=self._alias if self._alias != FROM_CLIPBOARD_ALIAS else None,
            scratch=self._scratch,
            run_scratch=self._run_scratch,
            display=self._display,
            comparison=self._comparison,
        )
        ctx = runner.run(ctx, pipeline.steps)
        self._encoding = ctx.working_encoding

        result = PipelineResult(
            messages=ctx.diagnostics.messages(min_level=DiagnosticLevel.WARNING),
            delta=ctx.delta,
            status=ctx.status,
            error=ctx.fatal_error,
        )
        self._shared.apply(result.delta)
        self.last_result = result
        return result

    # ---------------------------- views ----------------------------
    @property
    def display_buffer(self) -> DataBuffer:
        """Return the display view."""
        return self._display

    @property
    def comparison_buffer(self) -> DataBuffer:
        """Return the comparison view (may hold no data)."""
        return self._comparison

    def lines_for_display(self) -> list[LineRecord] | None:
        """Return the display lines, or None when there are none."""
        lines: list[LineRecord] = self._display.lines()
        return lines or None

    def lines_for_comparison(self) -> list[LineRecord] | None:
        """Return the comparison lines when that view has data, else the display lines.

        Returns None when the chosen view has no lines.
        """
        buffer: DataBuffer = self._comparison if self._comparison.has_data else self._display
        lines: list[LineRecord] = buffer.lines()
        return lines or None

    @property
    def has_data(self) -> bool:
        """Return True once bytes were read into the display view."""
        return self._display.has_data

    @property
    def is_text(self) -> bool:
        """Return True for text or empty input."""
        return self._display.is_text or self._display.is_empty

    @property
    def is_incomplete_conversion(self) -> bool:
        """Return True when decoding the display view produced replacement characters."""
        return self._display.incomplete_conversion

    @property
    def size_lines(self) -> int:
        """Return the number of display lines."""
        return self._display.line_count

    @property
    def size_bytes(self) -> int:
        """Return the number of raw display bytes."""
        return self._display.size

    @property
    def raw_bytes(self) -> bytes | None:
        """Return the raw display bytes."""
        return self._display.raw

    @property
    def text(self) -> str:
        """Return the normalized display text."""
        return self._display.text

    @property
    def encoding(self) -> str | None:
        """Return the encoding the display view was decoded with."""
        return self._display.encoding or self._encoding

    @property
    def line_end_style(self) -> LineEndStyle:
        """Return the line-ending style of the display view's first line."""
        return self._display.line_end_style

    def is_binary_equal_with(self, other: SourceData) -> bool:
        """Return True when both sources exist and hold identical raw bytes."""
        if not (self.has_data and other.has_data):
            return False
        return self.size_bytes == other.size_bytes and self.raw_bytes == other.raw_bytes

    def save_display_data_as(self, path: str | os.PathLike[str]) -> None:
        """Write the raw display bytes to ``path``.

        Raises:
            WriteFailedError: If the file cannot be written.
        """
        target = Path(path)
        try:
            target.write_bytes(self._display.raw or b"")
        except OSError as e:
            raise WriteFailedError(f"Cannot write {target}: {e}") from e
        logger.info("Saved %d bytes to %s", self._display.size, target)


class ComparisonSet:
    """Two or three sources that share one options holder.

    Args:
        inputs (Sequence[str | os.PathLike[str] | None]): Locations for sides
            A, B and optionally C.
        options (Options | SharedOptions | None): Options shared by all sources.

    Raises:
        ValueError: If fewer than two or more than three inputs are given.
    """

    def __init__(
        self,
        inputs: Sequence[str | os.PathLike[str] | None],
        options: Options | SharedOptions | None = None,
    ) -> None:
        if not 2 <= len(inputs) <= len(SOURCE_SIDES):
            raise ValueError(f"Expected 2 or 3 inputs, got {len(inputs)}")
        self.shared: SharedOptions = (
            options if isinstance(options, SharedOptions) else SharedOptions(options)
        )
        self.sources: list[SourceData] = []
        for side, location in zip(SOURCE_SIDES, inputs):
            source = SourceData(self.shared, side=side)
            source.set_filename(location)
            self.sources.append(source)

    def __iter__(self) -> Iterator[SourceData]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)

    def read_all(self, *, parallel: bool = False) -> list[PipelineResult]:
        """Run every source's pipeline.

        Args:
            parallel (bool): Read the sources on a thread pool.

        Returns:
            list[PipelineResult]: One result per source, in side order.
        """
        if not parallel:
            return [source.read_and_preprocess() for source in self.sources]
        with ThreadPoolExecutor(max_workers=len(self.sources)) as pool:
            return list(pool.map(lambda s: s.read_and_preprocess(), self.sources))

    def binary_equal(self) -> bool:
        """Return True when all sources hold identical raw bytes."""
        first: SourceData = self.sources[0]
        return all(first.is_binary_equal_with(other) for other in self.sources[1:])

    def cleanup(self) -> None:
        """Reset every source, removing their scratch files."""
        for source in self.sources:
            source.reset()
