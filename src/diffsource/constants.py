# topmark:header:start
#
#   project      : DiffSource
#   file         : constants.py
#   file_relpath : src/diffsource/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Final

try:
    DIFFSOURCE_VERSION: str = get_version("diffsource")
except PackageNotFoundError:  # running from a source checkout
    DIFFSOURCE_VERSION = "0.0.0+unknown"

# Extra capacity reserved after the logical end of a raw buffer. Comparison
# algorithms downstream may probe a few bytes past the end.
GUARD_BYTES: Final[int] = 100

# Only the head of a file is inspected for BOMs and declared charsets.
DETECT_PREFIX_BYTES: Final[int] = 5000

# Maximum number of NUL padding characters tolerated between CR and LF.
CRLF_NUL_PADDING: Final[int] = 4

# Ceilings guarding the line and byte counters.
MAX_LINE_COUNT: Final[int] = 2**31 - 6
MAX_BYTE_COUNT: Final[int] = 2**31 - 1

# Alias shown for data supplied as a string rather than a location.
FROM_CLIPBOARD_ALIAS: Final[str] = "From Clipboard"

# Configuration discovery.
CONFIG_FILE_NAME: Final[str] = "diffsource.toml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_TABLE: Final[str] = "diffsource"

LOG_LEVEL_ENV_VAR: Final[str] = "DIFFSOURCE_LOG_LEVEL"

VALUE_NOT_SET: Final[str] = "<not set>"
