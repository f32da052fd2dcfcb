# topmark:header:start
#
#   project      : DiffSource
#   file         : colored_enum.py
#   file_relpath : src/diffsource/core/colored_enum.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""String enums that carry a yachalk style.

Pipeline statuses are `ColoredStrEnum` members: the member value is the plain
status text shown in JSON output and logs, and ``render()`` applies the
member's style when the console has color enabled.

Example:
    ```python
    from yachalk import chalk

    class DecodeStatus(ColoredStrEnum):
        TEXT = ("text", chalk.green)
        BINARY = ("binary", chalk.yellow)

    DecodeStatus.BINARY.value            # 'binary'
    DecodeStatus.BINARY.render(True)     # yellow 'binary'
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class Style(Protocol):
    """Anything callable like ``yachalk.ChalkBuilder``."""

    def __call__(self, *args: object, sep: str = " ") -> str: ...


class ColoredStrEnum(str, Enum):
    """Enum whose value is the status text and which carries a display style."""

    _value_: str
    _style: Style

    def __new__(cls, text: str, style: Style) -> ColoredStrEnum:
        """Create a member from its text and style."""
        obj: ColoredStrEnum = str.__new__(cls, text)
        obj._value_ = text
        obj._style = style
        return obj

    @property
    def value(self) -> str:
        """The status text."""
        return self._value_

    @property
    def style(self) -> Style:
        """The yachalk style for this member."""
        return self._style

    def render(self, enable_color: bool) -> str:
        """Return the status text, styled when ``enable_color`` is set.

        Args:
            enable_color (bool): Whether ANSI styling may be emitted.

        Returns:
            str: The (possibly styled) status text.
        """
        return self._style(self._value_) if enable_color else self._value_
