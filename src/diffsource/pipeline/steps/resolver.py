# topmark:header:start
#
#   project      : DiffSource
#   file         : resolver.py
#   file_relpath : src/diffsource/pipeline/steps/resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Input resolver step.

Turns the source's `InputReference` into a local file the later steps can
read:

* in-memory data: the scratch file written by the facade;
* remote URL: a local scratch copy downloaded once per reference;
* local path: used directly.

A source with no input is not an error: the run halts with empty buffers. A
missing input is a fatal read failure; an input that exists but is not a
regular file is fatal too.

The step also selects the comment classifier from the source's display name.
When comments are to be ignored and the file type is unknown, the C-style
classifier is used.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import TYPE_CHECKING

from diffsource.comments.registry import get_classifier, get_classifier_for_path
from diffsource.config.logging import get_logger
from diffsource.core.errors import NotRegularFileError, ReadFailedError
from diffsource.pipeline.status import Axis, InputStatus
from diffsource.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from pathlib import Path

    from diffsource.comments.base import CommentClassifier
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.pipeline.context import SourceContext

logger: DiffSourceLogger = get_logger(__name__)

DEFAULT_COMMENT_STYLE: str = "c"


class ResolverStep(BaseStep):
    """Resolve the input to a local file and choose the comment classifier.

    Axes written:
      - input

    Sets:
      - InputStatus: {LOCAL, REMOTE_COPY, FROM_BUFFER, NOT_SET, NOT_FOUND,
                      NOT_REGULAR, UNREADABLE}
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.INPUT,
            axes_written=(Axis.INPUT,),
        )

    def run(self, ctx: SourceContext) -> None:
        """Resolve ``ctx.input`` into ``ctx.input_path``.

        Raises:
            NotRegularFileError: If the input is not a regular file.
            ReadFailedError: If the input does not exist or cannot be fetched.
        """
        ctx.classifier = self._select_classifier(ctx)

        if ctx.buffer_path is not None:
            ctx.input_path = ctx.buffer_path
            ctx.status.input = InputStatus.FROM_BUFFER
            return

        if not ctx.input.is_valid:
            ctx.status.input = InputStatus.NOT_SET
            ctx.request_halt("no-input", self.name)
            return

        if ctx.input.is_remote:
            try:
                ctx.input_path = ctx.input.create_local_copy(ctx.scratch)
            except ReadFailedError:
                ctx.status.input = InputStatus.UNREADABLE
                raise
            ctx.status.input = InputStatus.REMOTE_COPY
        else:
            ctx.input_path = ctx.input.path
            ctx.status.input = InputStatus.LOCAL

        path: Path | None = ctx.input_path
        if path is None or not path.exists():
            ctx.status.input = InputStatus.NOT_FOUND
            raise ReadFailedError(f"File not found: {ctx.input.pretty_name}")
        if not path.is_file():
            ctx.status.input = InputStatus.NOT_REGULAR
            raise NotRegularFileError(f"{ctx.input.absolute_path} is not a normal file.")
        logger.debug("resolved input: %s", path)

    def _select_classifier(self, ctx: SourceContext) -> CommentClassifier:
        name: str | None = ctx.display_name or ctx.input.location
        default: CommentClassifier | None = (
            get_classifier(DEFAULT_COMMENT_STYLE) if ctx.options.ignore_comments else None
        )
        classifier: CommentClassifier = get_classifier_for_path(
            PurePath(name) if name else None, default=default
        )
        logger.debug("comment classifier for %s: %r", name, classifier)
        return classifier
