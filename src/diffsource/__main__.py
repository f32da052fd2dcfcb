# topmark:header:start
#
#   project      : DiffSource
#   file         : __main__.py
#   file_relpath : src/diffsource/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running DiffSource via ``python -m diffsource``.

Delegates to :func:`diffsource.cli.main.cli`, the same entry point as the
``diffsource`` console script.

Examples:
    Inspect a file::

        python -m diffsource inspect README.md
"""

from __future__ import annotations

from diffsource.cli.main import cli

if __name__ == "__main__":
    cli()
