# topmark:header:start
#
#   project      : DiffSource
#   file         : base.py
#   file_relpath : src/diffsource/pipeline/steps/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Base class for class-based pipeline steps.

The runner invokes steps as *callables*. `BaseStep` implements the common
lifecycle:

    ctx = step(ctx)  # internally: may_proceed → run? → hint

`SourceDataError` raised inside ``run`` is handled here, at the step boundary:
fatal kinds halt the run with an ERROR diagnostic, other kinds are recorded as
warnings and the run continues.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.core.errors import SourceDataError

if TYPE_CHECKING:
    from diffsource.config.logging import DiffSourceLogger
    from diffsource.pipeline.context import SourceContext
    from diffsource.pipeline.status import Axis

logger: DiffSourceLogger = get_logger(__name__)


@dataclass
class BaseStep:
    """Reusable foundation for pipeline steps.

    Subclasses override ``may_proceed()``, ``run()`` and optionally ``hint()``.

    Attributes:
        name (str): Stable step identifier for logs and halt records.
        primary_axis (Axis | None): The axis this step represents in summaries.
        axes_written (tuple[Axis, ...]): Status axes this step is allowed to write.
    """

    name: str
    primary_axis: Axis | None
    axes_written: tuple[Axis, ...] = ()

    def __call__(self, ctx: SourceContext) -> SourceContext:
        """Invoke the step lifecycle: gate → run (if allowed) → hint.

        Args:
            ctx (SourceContext): The mutable context for the current source.

        Returns:
            SourceContext: The same context instance after mutation.
        """
        ctx.steps.append(self)

        if self.may_proceed(ctx):
            logger.info("BaseStep: Pipeline step %s - running", self.name)
            try:
                self.run(ctx)
            except SourceDataError as e:
                if e.kind.is_fatal:
                    logger.error("%s: %s", self.name, e.message)
                    ctx.fail(e, self.name)
                else:
                    logger.warning("%s: %s", self.name, e.message)
                    ctx.diagnostics.add_warning(e.message)
            if ctx.flow.halt:
                logger.info(
                    "BaseStep: Pipeline halted by %s: %s", ctx.flow.at_step, ctx.flow.reason
                )
        else:
            logger.info("BaseStep: Pipeline step %s may not proceed", self.name)

        self.hint(ctx)
        return ctx

    def may_proceed(self, ctx: SourceContext) -> bool:
        """Return whether the step should run.

        Default: run unless a previous step halted the pipeline.
        """
        return not ctx.is_halted

    def run(self, ctx: SourceContext) -> None:
        """Perform the step's primary work, mutating ``ctx`` in place."""
        pass

    def hint(self, ctx: SourceContext) -> None:
        """Attach informational diagnostics to ``ctx`` (optional)."""
        pass
