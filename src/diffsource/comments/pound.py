# topmark:header:start
#
#   project      : DiffSource
#   file         : pound.py
#   file_relpath : src/diffsource/comments/pound.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Comment classifier for ``#``-prefixed comment formats.

Covers Python, shell scripts, Makefiles and configuration formats. Quoted
strings are skipped so ``"#fff"`` is code. A shebang line is treated as a
comment like any other ``#`` line.
"""

from __future__ import annotations

from diffsource.comments.base import DelimitedCommentClassifier
from diffsource.comments.registry import register_filetype


@register_filetype("dockerfile")
@register_filetype("ini")
@register_filetype("makefile")
@register_filetype("perl")
@register_filetype("python")
@register_filetype("r")
@register_filetype("ruby")
@register_filetype("shell")
@register_filetype("toml")
@register_filetype("yaml")
class PoundCommentClassifier(DelimitedCommentClassifier):
    """Classifier for line-comment ``#`` files."""

    name = "pound"
    line_prefixes = ("#",)
    string_quotes = "\"'"
