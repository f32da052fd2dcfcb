# topmark:header:start
#
#   project      : DiffSource
#   file         : base.py
#   file_relpath : src/diffsource/comments/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Comment classifier base module.

A *comment classifier* knows the comment syntax of one family of languages.
The line splitter feeds it every physical line (without its terminator) along
with a mutable `CommentState` that carries context across lines, such as
being inside a block comment.

For each line the classifier reports:

- whether the line is a *pure comment* line: it contains nothing but comment
  text and whitespace (a blank line inside a block comment counts); and
- in removal mode, the line with its comment text deleted. Pure comment lines
  are returned unchanged; the flag alone tells the comparison algorithm how to
  treat them.

`CommentClassifier` itself recognizes no comments at all and is used for file
types without a registered classifier. `DelimitedCommentClassifier` implements a
character scanner driven by class attributes (line prefixes, block delimiters,
string quotes) that the concrete classifiers configure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger

if TYPE_CHECKING:
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.filetypes import FileType

logger: DiffSourceLogger = get_logger(__name__)


@dataclass
class CommentState:
    """Running parser state carried from one physical line to the next.

    Attributes:
        in_block (bool): True while inside an unterminated block comment.
        in_string (str): The open quote character when a string literal spans
            lines, else the empty string.
    """

    in_block: bool = False
    in_string: str = ""


@dataclass(frozen=True)
class LineClassification:
    """Classifier verdict for a single physical line.

    Attributes:
        pure_comment (bool): True if the line holds only comment text and whitespace.
        text (str): The line content; comment text is removed in removal mode.
        comment_spans (tuple[tuple[int, int], ...]): Half-open ``[start, end)``
            column ranges of comment text within the original line.
    """

    pure_comment: bool
    text: str
    comment_spans: tuple[tuple[int, int], ...] = field(default=())


class CommentClassifier:
    """Base classifier: treats no line as a comment.

    Subclasses override `classify`. The registry binds one instance per file
    type at import time (``classifier.file_type = ft``).
    """

    name: str = "none"
    file_type: FileType | None = None

    def __init__(self) -> None:
        self.file_type = None

    def new_state(self) -> CommentState:
        """Return a fresh parser state for the start of a buffer."""
        return CommentState()

    def classify(
        self,
        line: str,
        state: CommentState,
        *,
        remove: bool = False,
    ) -> LineClassification:
        """Classify one physical line.

        Args:
            line (str): The line content without its terminator.
            state (CommentState): Mutable running state; updated in place.
            remove (bool): When True, return the line with comment text deleted.

        Returns:
            LineClassification: The verdict for this line.
        """
        return LineClassification(pure_comment=False, text=line)

    def __repr__(self) -> str:
        ft: str = self.file_type.name if self.file_type else "-"
        return f"{self.__class__.__name__}(file_type={ft})"


class DelimitedCommentClassifier(CommentClassifier):
    """Character scanner for delimiter-based comment syntaxes.

    Concrete classifiers set the class attributes:

    * ``line_prefixes``: introducers of comments that run to end of line
      (``//``, ``#``).
    * ``block_prefix`` / ``block_suffix``: block comment delimiters
      (``/*`` and ``*/``, ``<!--`` and ``-->``).
    * ``string_quotes``: quote characters opening string literals in which
      comment delimiters are not recognized.
    * ``escape_char``: escape character inside string literals.
    * ``multiline_strings``: whether an unterminated string carries over to
      the next line.
    """

    line_prefixes: tuple[str, ...] = ()
    block_prefix: str = ""
    block_suffix: str = ""
    string_quotes: str = ""
    escape_char: str = "\\"
    multiline_strings: bool = False

    def classify(
        self,
        line: str,
        state: CommentState,
        *,
        remove: bool = False,
    ) -> LineClassification:
        """Scan ``line`` for comments, honoring string literals and block state.

        Args:
            line (str): The line content without its terminator.
            state (CommentState): Mutable running state; updated in place.
            remove (bool): When True, return the line with comment text deleted.

        Returns:
            LineClassification: The verdict for this line.
        """
        started_in_block: bool = state.in_block
        spans: list[tuple[int, int]] = []
        has_code: bool = False
        span_start: int = 0 if state.in_block else -1

        i: int = 0
        n: int = len(line)
        while i < n:
            if state.in_block:
                if self.block_suffix and line.startswith(self.block_suffix, i):
                    i += len(self.block_suffix)
                    spans.append((span_start, i))
                    span_start = -1
                    state.in_block = False
                    continue
                i += 1
                continue

            ch: str = line[i]

            if state.in_string:
                has_code = True
                if ch == self.escape_char:
                    i += 2
                    continue
                if ch == state.in_string:
                    state.in_string = ""
                i += 1
                continue

            if ch in self.string_quotes:
                has_code = True
                state.in_string = ch
                i += 1
                continue

            if self.block_prefix and line.startswith(self.block_prefix, i):
                span_start = i
                state.in_block = True
                i += len(self.block_prefix)
                continue

            if any(line.startswith(prefix, i) for prefix in self.line_prefixes):
                spans.append((i, n))
                i = n
                break

            if not ch.isspace():
                has_code = True
            i += 1

        if state.in_block:
            spans.append((span_start, n))
        if state.in_string and not self.multiline_strings:
            state.in_string = ""

        pure: bool = (bool(spans) or started_in_block) and not has_code
        text: str = line
        if remove and spans and not pure:
            text = _delete_spans(line, spans)

        logger.trace("classify: pure=%s spans=%s line=%r", pure, spans, line)
        return LineClassification(pure_comment=pure, text=text, comment_spans=tuple(spans))


def _delete_spans(line: str, spans: list[tuple[int, int]]) -> str:
    """Return ``line`` with the half-open column ranges in ``spans`` removed."""
    parts: list[str] = []
    pos: int = 0
    for start, end in spans:
        parts.append(line[pos:start])
        pos = end
    parts.append(line[pos:])
    return "".join(parts)
