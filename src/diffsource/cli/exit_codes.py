# topmark:header:start
#
#   project      : DiffSource
#   file         : exit_codes.py
#   file_relpath : src/diffsource/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the DiffSource CLI.

Input and I/O failures follow the BSD `sysexits` convention so that other
tooling can interpret them; usage errors keep Click's own code 2.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the DiffSource CLI.

    Attributes:
        SUCCESS: Every requested input was read and processed.
        FAILURE: Generic failure, e.g. a configuration file that cannot be parsed.
        USAGE_ERROR: Invalid flags or arguments (same value Click uses).
        FILE_NOT_FOUND: An input does not exist or is not a regular file.
            Mirrors BSD ``EX_NOINPUT (66)``.
        IO_ERROR: An input could not be read, or was too large to process.
            Mirrors BSD ``EX_IOERR (74)``.
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE_ERROR = 2

    # sysexits-aligned values
    FILE_NOT_FOUND = 66  # EX_NOINPUT
    IO_ERROR = 74  # EX_IOERR
