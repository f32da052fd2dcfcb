# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-based command-line interface for DiffSource.

The console script ``diffsource`` resolves to :func:`diffsource.cli.main.cli`.
"""

from __future__ import annotations
