# topmark:header:start
#
#   project      : DiffSource
#   file         : xml.py
#   file_relpath : src/diffsource/comments/xml.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Comment classifier for markup: ``<!-- ... -->`` block comments.

Markup has no line comments, and quotes in text content are not string
delimiters, so only the block state is tracked.
"""

from __future__ import annotations

from diffsource.comments.base import DelimitedCommentClassifier
from diffsource.comments.registry import register_filetype


@register_filetype("html")
@register_filetype("markdown")
@register_filetype("svg")
@register_filetype("xml")
class XmlCommentClassifier(DelimitedCommentClassifier):
    """Classifier for XML/HTML comments."""

    name = "xml"
    block_prefix = "<!--"
    block_suffix = "-->"
