# topmark:header:start
#
#   project      : DiffSource
#   file         : main.py
#   file_relpath : src/diffsource/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource CLI entry point.

Group-level options (verbosity, color) are initialized once and placed into
``ctx.obj``; subcommands read the console and verbosity from there. Internal
logging is configured from the ``DIFFSOURCE_LOG_LEVEL`` environment variable,
independently of program-output verbosity.
"""

from __future__ import annotations

import click

from diffsource.cli.commands.compare import compare_command
from diffsource.cli.commands.detect_encoding import detect_encoding_command
from diffsource.cli.commands.dump_config import dump_config_command
from diffsource.cli.commands.inspect import inspect_command
from diffsource.cli.commands.version import version_command
from diffsource.cli.console import ClickConsole
from diffsource.cli.options import (
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from diffsource.config.logging import get_logger, resolve_env_log_level, setup_logging

logger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging, color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (str | None): Explicit color mode from ``--color``.
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}
    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    mode: ColorMode = (
        ColorMode.NEVER if no_color else ColorMode(color_mode) if color_mode else ColorMode.AUTO
    )
    enable_color: bool = resolve_color_mode(cli_mode=mode, output_format=None)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="DiffSource: read, decode and normalize the inputs of a text comparison.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Entry point for the DiffSource CLI."""
    init_common_state(ctx, verbose=verbose, quiet=quiet, color_mode=color_mode, no_color=no_color)
    if ctx.invoked_subcommand is None:
        console: ClickConsole = ctx.obj["console"]
        console.print("Hint: use 'diffsource inspect PATH' to see how a file is read.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(inspect_command)

cli.add_command(detect_encoding_command)

cli.add_command(compare_command)

cli.add_command(dump_config_command)

if __name__ == "__main__":
    cli()
