# topmark:header:start
#
#   project      : DiffSource
#   file         : contracts.py
#   file_relpath : src/diffsource/pipeline/contracts.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Type contract for pipeline steps.

Steps are instantiated, callable objects; the runner invokes them as
``step(ctx)`` where ``ctx`` is a `SourceContext`.

Lifecycle:
    1. ``step.may_proceed(ctx)`` gates execution.
    2. If allowed, ``step.run(ctx)`` mutates ``ctx`` in place.
    3. Regardless, ``step.hint(ctx)`` may attach informational diagnostics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from diffsource.pipeline.context import SourceContext
    from diffsource.pipeline.status import Axis


class Step(Protocol):
    """Protocol for a single pipeline step."""

    name: str
    axes_written: tuple[Axis, ...]

    def may_proceed(self, ctx: SourceContext) -> bool:
        """Return whether the step should run given the current context."""
        ...

    def run(self, ctx: SourceContext) -> None:
        """Execute the step, mutating the context in place."""
        ...

    def hint(self, ctx: SourceContext) -> None:
        """Attach informational diagnostics to the context."""
        ...

    def __call__(self, ctx: SourceContext) -> SourceContext:
        """Run the step lifecycle: gate → run (optional) → hint."""
        ...
