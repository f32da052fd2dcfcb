# topmark:header:start
#
#   project      : DiffSource
#   file         : cstyle.py
#   file_relpath : src/diffsource/comments/cstyle.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Comment classifier for C-style syntaxes.

Recognizes ``//`` line comments and ``/* ... */`` block comments spanning any
number of lines. Double- and single-quoted literals (with backslash escapes)
are skipped, so ``"http://example.com"`` is code, not a comment.
"""

from __future__ import annotations

from diffsource.comments.base import DelimitedCommentClassifier
from diffsource.comments.registry import register_filetype


@register_filetype("c")
@register_filetype("cpp")
@register_filetype("cs")
@register_filetype("go")
@register_filetype("java")
@register_filetype("javascript")
@register_filetype("jsonc")
@register_filetype("kotlin")
@register_filetype("rust")
@register_filetype("swift")
@register_filetype("typescript")
class CStyleCommentClassifier(DelimitedCommentClassifier):
    """Classifier for ``//`` and ``/* */`` comments."""

    name = "cstyle"
    line_prefixes = ("//",)
    block_prefix = "/*"
    block_suffix = "*/"
    string_quotes = "\"'"


@register_filetype("css")
class CssCommentClassifier(DelimitedCommentClassifier):
    """Stylesheets only know block comments; ``//`` may appear in URLs."""

    name = "css"
    block_prefix = "/*"
    block_suffix = "*/"
    string_quotes = "\"'"
