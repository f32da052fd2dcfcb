# topmark:header:start
#
#   project      : DiffSource
#   file         : cmd_common.py
#   file_relpath : src/diffsource/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common command utilities for Click-based commands.

This module holds small, focused helpers used by multiple CLI commands:
resolving the effective options, turning a failed pipeline run into a CLI
error, and rendering per-source summaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from diffsource.cli.console import get_console
from diffsource.cli.errors import DiffSourceConfigError, DiffSourceFileNotFoundError, error_for_kind
from diffsource.cli.options import source_option_args
from diffsource.config.io import ConfigLoadError
from diffsource.config.logging import get_logger
from diffsource.config.model import MutableOptions
from diffsource.core.diagnostics import DiagnosticLevel
from diffsource.pipeline.status import InputStatus

if TYPE_CHECKING:
    from diffsource.cli.console import ClickConsole
    from diffsource.cli.errors import DiffSourceError
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.config.model import Options
    from diffsource.source import PipelineResult, SourceData

logger: DiffSourceLogger = get_logger(__name__)


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return the program-output verbosity stored by the group (0 when unset)."""
    if not isinstance(ctx.obj, dict):
        return 0
    return int(ctx.obj.get("verbosity_level", 0))


def resolve_options(
    ctx: click.Context,
    *,
    config_path: str | None,
    params: dict[str, Any],
) -> MutableOptions:
    """Merge defaults, the configuration file and CLI flags.

    Configuration warnings (unknown keys, wrong value types) are printed once
    unless output is quiet.

    Raises:
        DiffSourceConfigError: If the configuration file cannot be read or parsed.
    """
    try:
        merged: MutableOptions = MutableOptions.load_merged(
            config_path=Path(config_path) if config_path else None,
            args=source_option_args(params),
        )
    except ConfigLoadError as e:
        raise DiffSourceConfigError(f"Cannot load configuration {e.path}: {e.reason}") from e

    if get_effective_verbosity(ctx) >= 0:
        console: ClickConsole = get_console(ctx)
        for diag in merged.diagnostics:
            if diag.level is not DiagnosticLevel.INFO:
                console.warn(f"config: {diag.message}")
    logger.debug("effective configuration layers: %s", merged.config_files)
    return merged


def build_options(ctx: click.Context, *, config_path: str | None, params: dict[str, Any]) -> Options:
    """Return the frozen effective options for a command."""
    return resolve_options(ctx, config_path=config_path, params=params).freeze()


def error_for_result(source: SourceData, result: PipelineResult) -> DiffSourceError | None:
    """Return the CLI error for a run that stopped on a fatal error, else None."""
    if result.error is None:
        return None
    if result.status is not None and result.status.input in (
        InputStatus.NOT_FOUND,
        InputStatus.NOT_REGULAR,
    ):
        return DiffSourceFileNotFoundError(result.error.message)
    logger.error("%s: %s", source.filename or source.alias_name, result.error.message)
    return error_for_kind(result.error_kind, result.error.message)


def source_summary(source: SourceData, result: PipelineResult) -> dict[str, Any]:
    """Return a JSON-friendly summary of one source after its pipeline ran."""
    comparison_lines: int | None = (
        source.comparison_buffer.line_count if source.comparison_buffer.has_data else None
    )
    return {
        "name": source.alias_name or source.filename,
        "encoding": source.encoding,
        "line_end_style": source.line_end_style.value,
        "is_text": source.is_text,
        "incomplete_conversion": source.is_incomplete_conversion,
        "size_bytes": source.size_bytes,
        "display_lines": source.size_lines,
        "comparison_lines": comparison_lines,
        "status": (
            {axis.value: status.value for axis, status in result.status.items()}
            if result.status is not None
            else {}
        ),
        "messages": list(result.messages),
    }


def render_summary(
    console: ClickConsole,
    source: SourceData,
    result: PipelineResult,
    *,
    verbosity: int = 0,
) -> None:
    """Print a human-readable summary of one source."""
    summary: dict[str, Any] = source_summary(source, result)
    console.print(console.styled(str(summary["name"]), bold=True))
    rows: list[tuple[str, Any]] = [
        ("encoding", summary["encoding"] or "-"),
        ("line endings", summary["line_end_style"]),
        ("text", "yes" if summary["is_text"] else "no (binary)"),
        ("incomplete conversion", "yes" if summary["incomplete_conversion"] else "no"),
        ("bytes", summary["size_bytes"]),
        ("display lines", summary["display_lines"]),
    ]
    if summary["comparison_lines"] is not None:
        rows.append(("comparison lines", summary["comparison_lines"]))
    for label, value in rows:
        console.print(f"  {label:<22}: {value}")

    if verbosity > 0 and result.status is not None:
        for axis, status in result.status.items():
            console.print(f"  [{axis.value:<13}] {status.render(console.enable_color)}")

    for message in result.messages:
        console.warn(f"  ! {message}")


def render_lines(console: ClickConsole, source: SourceData, *, comparison: bool = False) -> None:
    """Print the line records of the display (or comparison) view."""
    lines = source.lines_for_comparison() if comparison else source.lines_for_display()
    for number, record in enumerate(lines or [], start=1):
        marker: str = "#" if record.pure_comment else " "
        console.print(f"{number:>6} {marker} {record.text}")
