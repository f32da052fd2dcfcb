# topmark:header:start
#
#   project      : DiffSource
#   file         : dump_config.py
#   file_relpath : src/diffsource/cli/commands/dump_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource `dump-config` command.

Prints the effective options (defaults < configuration file < CLI flags) as a
TOML document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from diffsource.cli.cmd_common import build_options, get_effective_verbosity
from diffsource.cli.console import get_console
from diffsource.cli.options import common_source_options

if TYPE_CHECKING:
    from diffsource.cli.console import ClickConsole
    from diffsource.config.model import Options


@click.command(
    name="dump-config",
    help="Print the effective configuration as TOML.",
)
@common_source_options
@click.pass_context
def dump_config_command(ctx: click.Context, config_path: str | None, **params: Any) -> None:
    """Dump the merged configuration."""
    console: ClickConsole = get_console(ctx)
    options: Options = build_options(ctx, config_path=config_path, params=params)
    if get_effective_verbosity(ctx) > 0:
        layers: str = ", ".join(options.config_files) or "<defaults>"
        console.print(console.styled(f"# layers: {layers}", dim=True))
    console.print(options.to_toml(), nl=False)
