# topmark:header:start
#
#   project      : DiffSource
#   file         : diagnostics.py
#   file_relpath : src/diffsource/core/diagnostics.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostics support.

Diagnostics are the user-visible messages accumulated while a source is read
and preprocessed. They are collected per pipeline run and surfaced once, never
per line.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import cast

from yachalk import chalk


class DiagnosticLevel(Enum):
    """Severity levels for diagnostics collected during processing.

    Levels map to terminal colors and are ordered by importance: ERROR > WARNING > INFO.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def color(self) -> Callable[[str], str]:
        """Return the `yachalk` color function associated with this severity level.

        Returns:
            Callable[[str], str]: The `yachalk` color function associated with this severity level.
        """
        return cast(
            "Callable[[str], str]",
            {
                DiagnosticLevel.INFO: chalk.blue,
                DiagnosticLevel.WARNING: chalk.yellow,
                DiagnosticLevel.ERROR: chalk.red_bright,
            }[self],
        )


@dataclass(frozen=True)
class Diagnostic:
    """Structured diagnostic with a severity level and message."""

    level: DiagnosticLevel
    message: str


@dataclass(frozen=True)
class DiagnosticStats:
    """Aggregated counts for diagnostics by severity level."""

    n_info: int
    n_warning: int
    n_error: int

    @property
    def total(self) -> int:
        """Return the total count of diagnostics."""
        return self.n_info + self.n_warning + self.n_error


def compute_diagnostic_stats(diags: Sequence[Diagnostic]) -> DiagnosticStats:
    """Return per-level counts for a sequence of diagnostics."""
    n_info: int = sum(1 for d in diags if d.level == DiagnosticLevel.INFO)
    n_warn: int = sum(1 for d in diags if d.level == DiagnosticLevel.WARNING)
    n_err: int = sum(1 for d in diags if d.level == DiagnosticLevel.ERROR)
    return DiagnosticStats(n_info=n_info, n_warning=n_warn, n_error=n_err)


@dataclass
class DiagnosticLog:
    """Append-only collection of diagnostics.

    Used by the config loader (unknown keys, wrong value types) and by the
    pipeline context (per-run warnings and errors).
    """

    items: list[Diagnostic] = field(default_factory=list[Diagnostic])

    def add(self, level: DiagnosticLevel, message: str) -> None:
        """Append a diagnostic with the given level."""
        self.items.append(Diagnostic(level=level, message=message))

    def add_info(self, message: str) -> None:
        """Append an INFO diagnostic."""
        self.add(DiagnosticLevel.INFO, message)

    def add_warning(self, message: str) -> None:
        """Append a WARNING diagnostic."""
        self.add(DiagnosticLevel.WARNING, message)

    def add_error(self, message: str) -> None:
        """Append an ERROR diagnostic."""
        self.add(DiagnosticLevel.ERROR, message)

    def extend(self, other: DiagnosticLog) -> None:
        """Append all diagnostics from ``other``."""
        self.items.extend(other.items)

    def messages(self, *, min_level: DiagnosticLevel = DiagnosticLevel.WARNING) -> list[str]:
        """Return message strings at or above ``min_level``, in insertion order."""
        order: dict[DiagnosticLevel, int] = {
            DiagnosticLevel.INFO: 0,
            DiagnosticLevel.WARNING: 1,
            DiagnosticLevel.ERROR: 2,
        }
        return [d.message for d in self.items if order[d.level] >= order[min_level]]

    def stats(self) -> DiagnosticStats:
        """Return per-level counts."""
        return compute_diagnostic_stats(self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
