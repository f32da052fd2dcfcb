# topmark:header:start
#
#   project      : DiffSource
#   file         : errors.py
#   file_relpath : src/diffsource/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Error kinds raised while reading and preprocessing a source.

Fatal kinds (``NOT_REGULAR_FILE``, ``READ_FAILED`` on the primary input,
``TOO_LARGE_TO_PROCESS``) stop the pipeline for that source. Preprocessor
failures are recovered by the pipeline: the untouched input is used instead and
the offending command is disabled for later runs.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Classification of source pipeline failures."""

    NOT_REGULAR_FILE = "not_regular_file"
    READ_FAILED = "read_failed"
    WRITE_FAILED = "write_failed"
    PREPROCESSOR_FAILED = "preprocessor_failed"
    LINE_MATCHING_PREPROCESSOR_FAILED = "line_matching_preprocessor_failed"
    TOO_LARGE_TO_PROCESS = "too_large_to_process"

    @property
    def is_fatal(self) -> bool:
        """Return True when this kind stops the pipeline for the source."""
        return self in {
            ErrorKind.NOT_REGULAR_FILE,
            ErrorKind.READ_FAILED,
            ErrorKind.TOO_LARGE_TO_PROCESS,
        }


class SourceDataError(Exception):
    """Base class for all source pipeline errors."""

    kind: ErrorKind = ErrorKind.READ_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message


class NotRegularFileError(SourceDataError):
    """The input exists but is not a regular file (device, directory, ...)."""

    kind = ErrorKind.NOT_REGULAR_FILE


class ReadFailedError(SourceDataError):
    """Reading an input or intermediate file failed."""

    kind = ErrorKind.READ_FAILED


class WriteFailedError(SourceDataError):
    """Writing a scratch or output file failed."""

    kind = ErrorKind.WRITE_FAILED


class TooLargeToProcessError(SourceDataError):
    """The line or byte counters would exceed their ceiling."""

    kind = ErrorKind.TOO_LARGE_TO_PROCESS


class PreprocessorFailedError(SourceDataError):
    """An external preprocessor command failed.

    Attributes:
        command (str): The command line as configured.
        reason (str): Short description of the failure (parse error, exit status,
            timeout, empty output).
    """

    kind = ErrorKind.PREPROCESSOR_FAILED

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"{reason}: {command}")
        self.command: str = command
        self.reason: str = reason


class LineMatchingPreprocessorFailedError(PreprocessorFailedError):
    """The line-matching preprocessor command failed."""

    kind = ErrorKind.LINE_MATCHING_PREPROCESSOR_FAILED
