# topmark:header:start
#
#   project      : DiffSource
#   file         : pipelines.py
#   file_relpath : src/diffsource/pipeline/pipelines.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Named pipeline variants (immutable, typed step sequences).

Overview
--------
- ``DISPLAY``: resolve → encoding → preprocess → decode display
- ``READ``: DISPLAY + line-matching → decode comparison → reconcile

Notes:
* Pipelines are immutable (``Final[tuple[Step, ...]]``) and steps are
  instantiated objects (not functions).
* Steps only write to the status axes they declare.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

from diffsource.pipeline.contracts import Step

from .steps import decoder, encoding, line_matching, preprocessor, reconciler, resolver

# Display view only:
DISPLAY_PIPELINE: Final[tuple[Step, ...]] = (
    resolver.ResolverStep(),  # Resolve the input and the comment classifier
    encoding.EncodingStep(),  # Choose the working encoding
    preprocessor.PreprocessorStep(),  # Stage A: read (or preprocess) into the display buffer
    decoder.DisplayDecoderStep(),  # Split the display bytes into lines
)

# Both views, reconciled:
READ_PIPELINE: Final[tuple[Step, ...]] = DISPLAY_PIPELINE + (
    line_matching.LineMatchingStep(),  # Stage B: bytes for the comparison buffer
    decoder.ComparisonDecoderStep(),  # Split the comparison bytes into lines
    reconciler.ReconcilerStep(),  # Pad and propagate pure-comment flags
)


class Pipeline(tuple[Step, ...], Enum):
    """Available pipelines, mapped to their step sequences."""

    DISPLAY = DISPLAY_PIPELINE
    READ = READ_PIPELINE

    @property
    def steps(self) -> tuple[Step, ...]:
        """Return the ordered step instances of this pipeline."""
        return self.value
