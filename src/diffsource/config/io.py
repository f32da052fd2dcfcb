# topmark:header:start
#
#   project      : DiffSource
#   file         : io.py
#   file_relpath : src/diffsource/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Lightweight TOML I/O helpers for DiffSource configuration.

Design goals:
    * Minimal side effects: functions **do not** mutate configuration objects.
    * Value helpers never raise on wrong types; when a `DiagnosticLog` is passed
      they record a warning and return ``None`` so the caller keeps its default.
    * Parsing uses `toml`; rendering uses `tomlkit` so that the dumped document
      keeps a stable, commented layout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeGuard

import toml
import tomlkit

from diffsource.config.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from tomlkit.toml_document import TOMLDocument

    from diffsource.config.logging import DiffSourceLogger
    from diffsource.core.diagnostics import DiagnosticLog

logger: DiffSourceLogger = get_logger(__name__)

TomlTable = dict[str, Any]

__all__: list[str] = [
    "ConfigLoadError",
    "TomlTable",
    "get_bool_value_or_none",
    "get_float_value_or_none",
    "get_string_value_or_none",
    "get_table_value",
    "is_toml_table",
    "load_toml_dict",
    "to_toml",
]


class ConfigLoadError(Exception):
    """A configuration file could not be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path: Path = path
        self.reason: str = reason


def is_toml_table(val: Any) -> TypeGuard[TomlTable]:
    """Type guard for a TOML table-like mapping."""
    return isinstance(val, dict)


def _wrong_type(diagnostics: DiagnosticLog | None, key: str, expected: str, value: Any) -> None:
    msg: str = f"Ignoring '{key}': expected {expected}, got {type(value).__name__}"
    logger.warning(msg)
    if diagnostics is not None:
        diagnostics.add_warning(msg)


def get_table_value(
    table: TomlTable,
    key: str,
    diagnostics: DiagnosticLog | None = None,
) -> TomlTable:
    """Extract a sub-table; an empty dict when missing or not a mapping."""
    value: Any | None = table.get(key)
    if value is None:
        return {}
    if is_toml_table(value):
        return value
    _wrong_type(diagnostics, key, "a table", value)
    return {}


def get_string_value_or_none(
    table: TomlTable,
    key: str,
    diagnostics: DiagnosticLog | None = None,
) -> str | None:
    """Extract an optional string value.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.
        diagnostics (DiagnosticLog | None): Receives a warning on a wrong type.

    Returns:
        str | None: The string, or ``None`` when absent or of the wrong type.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    _wrong_type(diagnostics, key, "a string", value)
    return None


def get_bool_value_or_none(
    table: TomlTable,
    key: str,
    diagnostics: DiagnosticLog | None = None,
) -> bool | None:
    """Extract an optional boolean value (integers are coerced)."""
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    _wrong_type(diagnostics, key, "a boolean", value)
    return None


def get_float_value_or_none(
    table: TomlTable,
    key: str,
    diagnostics: DiagnosticLog | None = None,
) -> float | None:
    """Extract an optional number as ``float``."""
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    _wrong_type(diagnostics, key, "a number", value)
    return None


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file.

    Args:
        path (Path): Path to a TOML document (``diffsource.toml`` or
            ``pyproject.toml``).

    Returns:
        TomlTable: The parsed TOML content.

    Raises:
        ConfigLoadError: If the file cannot be read or is not valid TOML.
    """
    try:
        data: TomlTable = toml.load(path)
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        raise ConfigLoadError(path, f"cannot read file ({e})") from e
    except toml.TomlDecodeError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        raise ConfigLoadError(path, f"invalid TOML ({e})") from e
    logger.trace("Loaded TOML from %s: %s", path, data)
    return data


def to_toml(toml_dict: TomlTable, *, header: str | None = None) -> str:
    """Render a TOML mapping as a document.

    Args:
        toml_dict (TomlTable): TOML mapping to render; ``None`` values are omitted.
        header (str | None): Optional comment placed at the top of the document.

    Returns:
        str: The rendered TOML document.
    """
    doc: TOMLDocument = tomlkit.document()
    if header:
        for line in header.splitlines():
            doc.add(tomlkit.comment(line))
        doc.add(tomlkit.nl())
    # Scalars first: a key added after a table would land inside that table.
    for key, value in toml_dict.items():
        if value is not None and not is_toml_table(value):
            doc.add(key, value)
    for key, value in toml_dict.items():
        if is_toml_table(value):
            tbl = tomlkit.table()
            for sub_key, sub_value in value.items():
                if is_toml_table(sub_value):
                    inner = tomlkit.table()
                    for k, v in sub_value.items():
                        if v is not None:
                            inner.add(k, v)
                    tbl.add(sub_key, inner)
                elif sub_value is not None:
                    tbl.add(sub_key, sub_value)
            doc.add(key, tbl)
    return tomlkit.dumps(doc)
