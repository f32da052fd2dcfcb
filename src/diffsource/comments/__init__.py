# topmark:header:start
#
#   project      : DiffSource
#   file         : __init__.py
#   file_relpath : src/diffsource/comments/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pluggable comment classifiers, one per language family."""

from __future__ import annotations

from diffsource.comments.base import (
    CommentClassifier,
    CommentState,
    DelimitedCommentClassifier,
    LineClassification,
)
from diffsource.comments.registry import (
    get_classifier,
    get_classifier_for_path,
    register_all_classifiers,
)

__all__: list[str] = [
    "CommentClassifier",
    "CommentState",
    "DelimitedCommentClassifier",
    "LineClassification",
    "get_classifier",
    "get_classifier_for_path",
    "register_all_classifiers",
]
