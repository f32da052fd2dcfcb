# topmark:header:start
#
#   project      : DiffSource
#   file         : runner.py
#   file_relpath : src/diffsource/preprocess/runner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run a user-configured preprocessor command over a file.

The command line is split with shell quoting rules (no shell is involved and no
placeholders are substituted). The input file is bound to the command's
standard input and its standard output is written verbatim to the output file.

A run fails when:
  * the command line cannot be parsed (unbalanced quotes) or is empty;
  * the program cannot be started;
  * the process exits with a non-zero status;
  * the process does not finish within the configured timeout;
  * the output is empty although the input was not.

Failures raise `PreprocessorFailedError` (or the subclass passed as
``error_cls``); the pipeline decides how to recover.
"""

from __future__ import annotations

import shlex
import subprocess
from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.core.errors import PreprocessorFailedError

if TYPE_CHECKING:
    from pathlib import Path

    from diffsource.config.logging import DiffSourceLogger

logger: DiffSourceLogger = get_logger(__name__)


def parse_command(command: str) -> list[str]:
    """Split ``command`` into program and arguments.

    Raises:
        ValueError: If the quoting is malformed or the command is empty.
    """
    args: list[str] = shlex.split(command)
    if not args:
        raise ValueError("empty command line")
    return args


class PreprocessorRunner:
    """Synchronous subprocess wrapper with an optional timeout.

    Args:
        timeout (float | None): Seconds to wait for the command; None or 0
            waits forever.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout: float | None = timeout or None

    def run(
        self,
        command: str,
        input_path: Path,
        output_path: Path,
        *,
        error_cls: type[PreprocessorFailedError] = PreprocessorFailedError,
    ) -> None:
        """Run ``command`` with ``input_path`` as stdin and ``output_path`` as stdout.

        Args:
            command (str): Shell-style command line.
            input_path (Path): File bound to standard input.
            output_path (Path): File receiving standard output (truncated first).
            error_cls (type[PreprocessorFailedError]): Exception type raised on failure.

        Raises:
            PreprocessorFailedError: On any failure (see module docstring).
        """
        try:
            args: list[str] = parse_command(command)
        except ValueError as e:
            raise error_cls(command, f"cannot parse command line ({e})") from e

        logger.info("Running preprocessor: %s", args)
        try:
            with input_path.open("rb") as fin, output_path.open("wb") as fout:
                proc: subprocess.CompletedProcess[bytes] = subprocess.run(
                    args,
                    stdin=fin,
                    stdout=fout,
                    stderr=subprocess.PIPE,
                    timeout=self.timeout,
                    check=False,
                )
        except subprocess.TimeoutExpired as e:
            raise error_cls(command, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise error_cls(command, f"cannot run command ({e})") from e

        if proc.returncode != 0:
            stderr: str = proc.stderr.decode("utf-8", errors="replace").strip()
            logger.debug("preprocessor stderr: %s", stderr)
            raise error_cls(command, f"exited with status {proc.returncode}")

        in_size: int = input_path.stat().st_size
        out_size: int = output_path.stat().st_size
        logger.trace("preprocessor: %d bytes in, %d bytes out", in_size, out_size)
        if in_size > 0 and out_size == 0:
            raise error_cls(command, "produced no output")
