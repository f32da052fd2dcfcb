# topmark:header:start
#
#   project      : DiffSource
#   file         : status.py
#   file_relpath : src/diffsource/pipeline/status.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Status enums for each axis of the source pipeline.

Each step writes only to the axes listed in its ``axes_written`` contract.
Values are human-readable strings used by the CLI; compare members with ``==``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from yachalk import chalk

from diffsource.core.colored_enum import ColoredStrEnum


class Axis(str, Enum):
    """Pipeline axes, in execution order."""

    INPUT = "input"
    ENCODING = "encoding"
    PREPROCESS = "preprocess"
    DISPLAY = "display"
    LINE_MATCHING = "line_matching"
    COMPARISON = "comparison"
    RECONCILE = "reconcile"


class InputStatus(ColoredStrEnum):
    """Outcome of input resolution."""

    PENDING = ("input pending", chalk.gray)
    LOCAL = ("local file", chalk.green)
    REMOTE_COPY = ("remote file (local copy)", chalk.green)
    FROM_BUFFER = ("in-memory data", chalk.green)
    NOT_SET = ("no input", chalk.yellow)
    NOT_FOUND = ("not found", chalk.red)
    NOT_REGULAR = ("not a regular file", chalk.red)
    UNREADABLE = ("read error", chalk.red_bright)


class EncodingStatus(ColoredStrEnum):
    """How the working encoding was chosen."""

    PENDING = ("encoding pending", chalk.gray)
    CONFIGURED = ("configured", chalk.blue)
    DETECTED = ("auto-detected", chalk.green)
    FALLBACK = ("nothing detected, configured encoding used", chalk.blue)
    FORCED_UTF8 = ("in-memory data is UTF-8", chalk.blue)


class PreprocessStatus(ColoredStrEnum):
    """Outcome of a preprocessing stage."""

    PENDING = ("preprocess pending", chalk.gray)
    NOT_CONFIGURED = ("no command", chalk.gray)
    APPLIED = ("applied", chalk.green)
    FAILED = ("failed, input used unchanged", chalk.yellow)
    COPIED = ("copy of display data", chalk.blue)
    SHARED = ("display data reused", chalk.gray)


class DecodeStatus(ColoredStrEnum):
    """Outcome of decoding a view into line records."""

    PENDING = ("decode pending", chalk.gray)
    TEXT = ("text", chalk.green)
    EMPTY = ("empty", chalk.yellow)
    INCOMPLETE = ("text (incomplete conversion)", chalk.yellow)
    BINARY = ("binary", chalk.red)
    TOO_LARGE = ("too large to process", chalk.red_bright)
    SKIPPED = ("skipped", chalk.gray)


class ReconcileStatus(ColoredStrEnum):
    """Outcome of line-count reconciliation."""

    PENDING = ("reconcile pending", chalk.gray)
    ALIGNED = ("line counts aligned", chalk.green)
    PADDED = ("comparison view padded", chalk.blue)
    NOT_NEEDED = ("single view", chalk.gray)


@dataclass
class SourceStatus:
    """Per-axis status of one pipeline run."""

    input: InputStatus = InputStatus.PENDING
    encoding: EncodingStatus = EncodingStatus.PENDING
    preprocess: PreprocessStatus = PreprocessStatus.PENDING
    display: DecodeStatus = DecodeStatus.PENDING
    line_matching: PreprocessStatus = PreprocessStatus.PENDING
    comparison: DecodeStatus = DecodeStatus.PENDING
    reconcile: ReconcileStatus = ReconcileStatus.PENDING

    def items(self) -> list[tuple[Axis, ColoredStrEnum]]:
        """Return ``(axis, status)`` pairs in execution order."""
        return [
            (Axis.INPUT, self.input),
            (Axis.ENCODING, self.encoding),
            (Axis.PREPROCESS, self.preprocess),
            (Axis.DISPLAY, self.display),
            (Axis.LINE_MATCHING, self.line_matching),
            (Axis.COMPARISON, self.comparison),
            (Axis.RECONCILE, self.reconcile),
        ]
