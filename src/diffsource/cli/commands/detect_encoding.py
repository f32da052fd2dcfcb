# topmark:header:start
#
#   project      : DiffSource
#   file         : detect_encoding.py
#   file_relpath : src/diffsource/cli/commands/detect_encoding.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource `detect-encoding` command.

Prints, for each file, the encoding announced by its BOM or declared charset,
or the fallback encoding when nothing is found.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from diffsource.cli.cmd_common import build_options
from diffsource.cli.console import get_console
from diffsource.cli.errors import DiffSourceFileNotFoundError
from diffsource.cli.options import common_source_options
from diffsource.encoding.detector import detect_file_encoding
from diffsource.encoding.registry import lookup_encoding

if TYPE_CHECKING:
    from diffsource.cli.console import ClickConsole
    from diffsource.config.model import Options


@click.command(
    name="detect-encoding",
    help="Print the detected encoding of each file.",
)
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--fallback",
    "fallback",
    default=None,
    help="Encoding reported when nothing is detected (default: fallback_encoding).",
)
@common_source_options
@click.pass_context
def detect_encoding_command(
    ctx: click.Context,
    paths: tuple[Path, ...],
    fallback: str | None,
    config_path: str | None,
    **params: Any,
) -> None:
    """Print ``<path>: <encoding>`` for every path."""
    console: ClickConsole = get_console(ctx)
    options: Options = build_options(ctx, config_path=config_path, params=params)
    fallback_encoding: str | None = lookup_encoding(fallback) if fallback else options.fallback_encoding
    if fallback_encoding is None:
        raise click.BadParameter(f"Unknown encoding: {fallback!r}", param_hint="--fallback")

    missing: list[Path] = [p for p in paths if not p.is_file()]
    for path in paths:
        if path in missing:
            console.error(f"{path}: not found or not a regular file")
            continue
        console.print(f"{path}: {detect_file_encoding(path, fallback_encoding)}")
    if missing:
        raise DiffSourceFileNotFoundError(f"{len(missing)} input(s) could not be read")
