# topmark:header:start
#
#   project      : DiffSource
#   file         : inspect.py
#   file_relpath : src/diffsource/cli/commands/inspect.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource `inspect` command.

Runs the source pipeline for one input (a path, an http(s) URL, or ``-`` for
text read from STDIN) and prints what was detected: encoding, line-ending style,
text or binary, incomplete conversion, line counts and the messages of the run.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from diffsource.cli.cmd_common import (
    build_options,
    error_for_result,
    get_effective_verbosity,
    render_lines,
    render_summary,
    source_summary,
)
from diffsource.cli.console import get_console
from diffsource.cli.options import OutputFormat, common_source_options
from diffsource.source import SourceData

if TYPE_CHECKING:
    from diffsource.cli.console import ClickConsole
    from diffsource.cli.errors import DiffSourceError
    from diffsource.config.model import Options
    from diffsource.source import PipelineResult


@click.command(
    name="inspect",
    help="Read one input and show how it was decoded and preprocessed.",
)
@click.argument("location", metavar="PATH|URL|-")
@click.option(
    "--lines",
    "show_lines",
    is_flag=True,
    default=False,
    help="Print the display line records ('#' marks pure comment lines).",
)
@click.option(
    "--comparison",
    "show_comparison",
    is_flag=True,
    default=False,
    help="With --lines, print the comparison view instead of the display view.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format.",
)
@common_source_options
@click.pass_context
def inspect_command(
    ctx: click.Context,
    location: str,
    show_lines: bool,
    show_comparison: bool,
    output_format: str,
    config_path: str | None,
    **params: Any,
) -> None:
    """Inspect a single input.

    Args:
        ctx (click.Context): Click context holding the console and verbosity.
        location (str): Path, URL, or ``-`` for STDIN.
        show_lines (bool): Print line records after the summary.
        show_comparison (bool): Print the comparison view's records.
        output_format (str): ``text`` or ``json``.
        config_path (str | None): Explicit configuration file.
        **params (Any): Source-processing overrides.
    """
    console: ClickConsole = get_console(ctx)
    options: Options = build_options(ctx, config_path=config_path, params=params)

    source = SourceData(options)
    if location == "-":
        source.set_data(click.get_text_stream("stdin").read())
    else:
        source.set_filename(location)

    try:
        result: PipelineResult = source.read_and_preprocess()
        error: DiffSourceError | None = error_for_result(source, result)
        if error is not None:
            raise error

        if output_format == OutputFormat.JSON.value:
            payload: dict[str, Any] = source_summary(source, result)
            if show_lines:
                lines = (
                    source.lines_for_comparison() if show_comparison else source.lines_for_display()
                )
                payload["lines"] = [
                    {"text": r.text, "pure_comment": r.pure_comment} for r in lines or []
                ]
            console.print(json.dumps(payload, indent=2))
            return

        render_summary(console, source, result, verbosity=get_effective_verbosity(ctx))
        if show_lines:
            console.print()
            render_lines(console, source, comparison=show_comparison)
    finally:
        source.reset()
