# topmark:header:start
#
#   project      : DiffSource
#   file         : errors.py
#   file_relpath : src/diffsource/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the DiffSource CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes. `error_for_kind` maps a fatal pipeline error kind
    to the matching CLI exception.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default
    styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from diffsource.cli.exit_codes import ExitCode
from diffsource.core.errors import ErrorKind


class DiffSourceError(click.ClickException):
    """Base class for all DiffSource CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorized in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(self.format_message(), fg="bright_red"))
                return
        super().show(file)


class DiffSourceUsageError(DiffSourceError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class DiffSourceConfigError(DiffSourceError):
    """Error for configuration files that cannot be read or parsed."""

    exit_code = ExitCode.FAILURE


class DiffSourceFileNotFoundError(DiffSourceError):
    """Error when an input does not exist or is not a regular file."""

    exit_code = ExitCode.FILE_NOT_FOUND


class DiffSourceIOError(DiffSourceError):
    """Error for inputs that cannot be read or are too large to process."""

    exit_code = ExitCode.IO_ERROR


def error_for_kind(kind: ErrorKind | None, message: str) -> DiffSourceError:
    """Return the CLI exception matching a fatal pipeline error kind."""
    if kind is ErrorKind.NOT_REGULAR_FILE:
        return DiffSourceFileNotFoundError(message)
    if kind in (ErrorKind.READ_FAILED, ErrorKind.WRITE_FAILED, ErrorKind.TOO_LARGE_TO_PROCESS):
        return DiffSourceIOError(message)
    return DiffSourceError(message)
