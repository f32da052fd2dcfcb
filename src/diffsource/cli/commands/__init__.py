# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiffSource CLI subcommands."""

from __future__ import annotations
