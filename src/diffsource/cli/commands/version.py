# topmark:header:start
#
#   project      : DiffSource
#   file         : version.py
#   file_relpath : src/diffsource/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource `version` command.

Prints the current DiffSource version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from diffsource.cli.cmd_common import get_effective_verbosity
from diffsource.cli.console import get_console
from diffsource.cli.options import OutputFormat
from diffsource.constants import DIFFSOURCE_VERSION

if TYPE_CHECKING:
    from diffsource.cli.console import ClickConsole


@click.command(
    name="version",
    help="Show the current version of DiffSource.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format.",
)
@click.pass_context
def version_command(ctx: click.Context, output_format: str) -> None:
    """Show the current version of DiffSource."""
    console: ClickConsole = get_console(ctx)
    if output_format == OutputFormat.JSON.value:
        console.print(json.dumps({"version": DIFFSOURCE_VERSION}))
        return
    if get_effective_verbosity(ctx) > 0:
        console.print(console.styled("DiffSource version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(DIFFSOURCE_VERSION, bold=True)}")
    else:
        console.print(console.styled(DIFFSOURCE_VERSION, bold=True))
