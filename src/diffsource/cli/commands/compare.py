# topmark:header:start
#
#   project      : DiffSource
#   file         : compare.py
#   file_relpath : src/diffsource/cli/commands/compare.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource `compare` command.

Reads two or three inputs with one shared set of options, so a preprocessor
disabled while reading one input is not retried for the next. Prints a summary
per input and whether all inputs hold identical bytes.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from diffsource.cli.cmd_common import (
    build_options,
    error_for_result,
    get_effective_verbosity,
    render_summary,
    source_summary,
)
from diffsource.cli.console import get_console
from diffsource.cli.options import OutputFormat, common_source_options
from diffsource.source import ComparisonSet

if TYPE_CHECKING:
    from diffsource.cli.console import ClickConsole
    from diffsource.cli.errors import DiffSourceError
    from diffsource.config.model import Options
    from diffsource.source import PipelineResult


@click.command(
    name="compare",
    help="Read two or three inputs and report how each was decoded.",
)
@click.argument("inputs", nargs=-1, required=True, metavar="A B [C]")
@click.option(
    "--parallel/--sequential",
    "parallel",
    default=False,
    help="Read the inputs concurrently.",
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
def compare_command(
    ctx: click.Context,
    inputs: tuple[str, ...],
    parallel: bool,
    output_format: str,
    config_path: str | None,
    **params: Any,
) -> None:
    """Compare two or three inputs."""
    if not 2 <= len(inputs) <= 3:
        raise click.UsageError(f"Expected 2 or 3 inputs, got {len(inputs)}.")

    console: ClickConsole = get_console(ctx)
    options: Options = build_options(ctx, config_path=config_path, params=params)
    comparison = ComparisonSet(inputs, options)
    try:
        results: list[PipelineResult] = comparison.read_all(parallel=parallel)
        binary_equal: bool = comparison.binary_equal()

        if output_format == OutputFormat.JSON.value:
            payload: dict[str, Any] = {
                "sources": [
                    source_summary(source, result)
                    for source, result in zip(comparison.sources, results)
                ],
                "binary_equal": binary_equal,
            }
            console.print(json.dumps(payload, indent=2))
        else:
            verbosity: int = get_effective_verbosity(ctx)
            for source, result in zip(comparison.sources, results):
                render_summary(console, source, result, verbosity=verbosity)
            console.print()
            console.print(
                console.styled("binary equal", fg="green")
                if binary_equal
                else console.styled("inputs differ", fg="yellow")
            )

        for source, result in zip(comparison.sources, results):
            error: DiffSourceError | None = error_for_result(source, result)
            if error is not None:
                raise error
    finally:
        comparison.cleanup()
