# topmark:header:start
#
#   project      : DiffSource
#   file         : options.py
#   file_relpath : src/diffsource/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI option utilities.

This module centralizes reusable options (verbosity, color, source
processing) and their resolution logic, so commands and groups can stay thin.

Source-processing flags default to ``None`` so that an omitted flag never
overrides a value from the configuration file.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, ParamSpec, TypeVar

import click

from diffsource.cli.errors import DiffSourceUsageError
from diffsource.encoding.registry import lookup_encoding

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec("P")
R = TypeVar("R")

# Keys forwarded to `MutableOptions.apply_cli_args`.
SOURCE_OPTION_KEYS: Final[tuple[str, ...]] = (
    "encoding",
    "auto_detect",
    "preprocessor_cmd",
    "line_matching_cmd",
    "preprocessor_encoding",
    "ignore_comments",
    "ignore_case",
    "ignore_numbers",
    "timeout",
)


class OutputFormat(str, Enum):
    """Output formats for reporting commands."""

    TEXT = "text"
    JSON = "json"


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Return the program-output verbosity level.

    Args:
        verbose_count (int): Number of ``-v`` flags.
        quiet_count (int): Number of ``-q`` flags.

    Returns:
        int: ``-1`` when quiet, ``0`` by default, up to ``2`` when verbose.

    Raises:
        DiffSourceUsageError: If both flags are given.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise DiffSourceUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    if quiet_count:
        return -1
    return min(verbose_count, 2)


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    output_format: str | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Machine formats are always colorless. Otherwise the CLI mode decides, then
    the ``FORCE_COLOR`` / ``NO_COLOR`` environment variables, then whether
    stdout is a TTY.
    """
    if output_format and output_format.lower() == OutputFormat.JSON.value:
        return False
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (AttributeError, ValueError):
            stdout_isatty = False
    return stdout_isatty


def _validate_encoding(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return None
    canonical: str | None = lookup_encoding(value)
    if canonical is None:
        raise click.BadParameter(f"Unknown encoding: {value!r}", ctx=ctx, param=param)
    return canonical


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` counting options."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to twice for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Only print errors.",
    )(f)
    return f


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` and ``--no-color`` options."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_source_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the configuration and source-processing options.

    Adds ``--config``, ``--encoding``, ``--no-auto-detect``, ``--preprocessor``,
    ``--line-matching-preprocessor``, ``--pp-encoding``, ``--ignore-comments``,
    ``--ignore-case``, ``--ignore-numbers`` and ``--timeout``.
    """
    f = click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Configuration file (default: diffsource.toml or [tool.diffsource] in pyproject.toml).",
    )(f)
    f = click.option(
        "--encoding",
        "encoding",
        default=None,
        callback=_validate_encoding,
        help="Encoding of the inputs when nothing is detected.",
    )(f)
    f = click.option(
        "--auto-detect/--no-auto-detect",
        "auto_detect",
        default=None,
        help="Let BOMs and declared charsets override --encoding.",
    )(f)
    f = click.option(
        "--preprocessor",
        "preprocessor_cmd",
        default=None,
        help="Command filtering each input before display (stdin to stdout).",
    )(f)
    f = click.option(
        "--line-matching-preprocessor",
        "line_matching_cmd",
        default=None,
        help="Command filtering the comparison view only (stdin to stdout).",
    )(f)
    f = click.option(
        "--pp-encoding",
        "preprocessor_encoding",
        default=None,
        callback=_validate_encoding,
        help="Encoding the preprocessor commands read and write.",
    )(f)
    f = click.option(
        "--ignore-comments",
        "ignore_comments",
        is_flag=True,
        default=None,
        help="Strip comments from the comparison view.",
    )(f)
    f = click.option(
        "--ignore-case",
        "ignore_case",
        is_flag=True,
        default=None,
        help="Fold case in the comparison view.",
    )(f)
    f = click.option(
        "--ignore-numbers",
        "ignore_numbers",
        is_flag=True,
        default=None,
        help="Remove digits from the comparison view.",
    )(f)
    f = click.option(
        "--timeout",
        "timeout",
        type=click.FloatRange(min=0),
        default=None,
        help="Seconds to wait for a preprocessor command (0 waits forever).",
    )(f)
    return f


def source_option_args(params: dict[str, Any]) -> dict[str, Any]:
    """Return the source-processing overrides from Click keyword arguments."""
    return {key: params[key] for key in SOURCE_OPTION_KEYS if params.get(key) is not None}
