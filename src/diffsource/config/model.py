# topmark:header:start
#
#   project      : DiffSource
#   file         : model.py
#   file_relpath : src/diffsource/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Options model and merge policy.

This module defines:
    - `Options`: an immutable snapshot read by the source pipeline.
    - `MutableOptions`: a mutable builder used while merging defaults, a
      configuration file and CLI flags; it freezes into `Options` and an
      `Options` thaws back into a builder.
    - `OptionsDelta`: the change a pipeline run asks the caller to apply
      (a failing preprocessor command is disabled).
    - `SharedOptions`: a lock-protected holder so that sibling sources can run
      concurrently and apply their deltas one at a time.

Precedence:
    defaults < configuration file < CLI flags. Builder fields left at ``None``
    inherit from the lower layer.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from diffsource.config.io import (
    get_bool_value_or_none,
    get_float_value_or_none,
    get_string_value_or_none,
    get_table_value,
    is_toml_table,
    load_toml_dict,
    to_toml,
)
from diffsource.config.logging import get_logger
from diffsource.constants import CONFIG_FILE_NAME, PYPROJECT_FILE_NAME, PYPROJECT_TOOL_TABLE
from diffsource.core.diagnostics import Diagnostic, DiagnosticLog
from diffsource.encoding.registry import LATIN1, UTF8, EncodingChoice, lookup_encoding

if TYPE_CHECKING:
    from diffsource.config.io import TomlTable
    from diffsource.config.logging import DiffSourceLogger

logger: DiffSourceLogger = get_logger(__name__)

# ArgsLike: generic mapping accepted by the loaders (CLI keyword args or API dicts).
ArgsLike = Mapping[str, Any]

SOURCE_SIDES: Final[tuple[str, ...]] = ("a", "b", "c")
DEFAULT_TIMEOUT: Final[float] = 60.0

_SCALAR_KEYS: Final[frozenset[str]] = frozenset(
    {
        "encoding",
        "auto_detect",
        "fallback_encoding",
        "preprocessor_encoding",
        "preprocessor_cmd",
        "line_matching_cmd",
        "ignore_comments",
        "ignore_case",
        "ignore_numbers",
        "timeout",
        "same_encoding",
    }
)
_SOURCE_KEYS: Final[frozenset[str]] = frozenset({"encoding", "auto_detect"})


@dataclass(frozen=True, slots=True)
class SourceEncoding:
    """Per-source encoding override (``[sources.a]`` and friends).

    Attributes:
        encoding (str | None): Encoding for this source; None inherits the global one.
        auto_detect (bool | None): Auto-detect flag; None inherits the global one.
    """

    encoding: str | None = None
    auto_detect: bool | None = None


# ------------------ Immutable runtime options ------------------


@dataclass(frozen=True, slots=True)
class Options:
    """Immutable options read by the source pipeline.

    Attributes:
        encoding (str): Encoding used when nothing is detected.
        auto_detect (bool): Let BOMs and declared charsets override ``encoding``.
        fallback_encoding (str): Single-byte encoding reported by
            ``detect-encoding`` when nothing is detected.
        preprocessor_encoding (str): Encoding the external commands expect.
        preprocessor_cmd (str): General (stage A) preprocessor; empty = none.
        line_matching_cmd (str): Line-matching (stage B) preprocessor; empty = none.
        ignore_comments (bool): Strip comments in the comparison view and flag
            pure comment lines.
        ignore_case (bool): Fold case in the comparison view.
        ignore_numbers (bool): Remove digits in the comparison view.
        timeout (float | None): Preprocessor timeout in seconds; None waits forever.
        same_encoding (bool): Sources B and C follow source A's encoding.
        sources (Mapping[str, SourceEncoding]): Per-source encoding overrides.
        config_files (tuple[str, ...]): Configuration sources that were merged.
        diagnostics (tuple[Diagnostic, ...]): Warnings collected while loading.
    """

    encoding: str = UTF8
    auto_detect: bool = True
    fallback_encoding: str = LATIN1
    preprocessor_encoding: str = UTF8
    preprocessor_cmd: str = ""
    line_matching_cmd: str = ""
    ignore_comments: bool = False
    ignore_case: bool = False
    ignore_numbers: bool = False
    timeout: float | None = DEFAULT_TIMEOUT
    same_encoding: bool = True
    sources: Mapping[str, SourceEncoding] = field(default_factory=dict[str, SourceEncoding])
    config_files: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def needs_comparison_view(self) -> bool:
        """Return True when the comparison view differs from the display view."""
        return bool(
            self.line_matching_cmd or self.ignore_comments or self.ignore_case or self.ignore_numbers
        )

    def encoding_for(self, side: str) -> EncodingChoice:
        """Return the encoding choice for source ``side`` (``"a"``, ``"b"`` or ``"c"``).

        With ``same_encoding`` set, every side uses source A's choice.
        """
        if self.same_encoding:
            side = SOURCE_SIDES[0]
        override: SourceEncoding = self.sources.get(side, SourceEncoding())
        return EncodingChoice(
            name=override.encoding or self.encoding,
            auto_detect=self.auto_detect if override.auto_detect is None else override.auto_detect,
        )

    def to_toml_dict(self) -> TomlTable:
        """Return the options as a TOML mapping (without provenance fields)."""
        table: TomlTable = {
            "encoding": self.encoding,
            "auto_detect": self.auto_detect,
            "fallback_encoding": self.fallback_encoding,
            "preprocessor_encoding": self.preprocessor_encoding,
            "preprocessor_cmd": self.preprocessor_cmd,
            "line_matching_cmd": self.line_matching_cmd,
            "ignore_comments": self.ignore_comments,
            "ignore_case": self.ignore_case,
            "ignore_numbers": self.ignore_numbers,
            "timeout": self.timeout if self.timeout is not None else 0,
            "same_encoding": self.same_encoding,
        }
        if self.sources:
            table["sources"] = {
                side: {"encoding": src.encoding, "auto_detect": src.auto_detect}
                for side, src in sorted(self.sources.items())
            }
        return table

    def to_toml(self) -> str:
        """Render the options as a TOML document."""
        header: str = "DiffSource effective options"
        if self.config_files:
            header += "\nMerged from: " + ", ".join(self.config_files)
        return to_toml(self.to_toml_dict(), header=header)

    def thaw(self) -> MutableOptions:
        """Return a mutable builder initialized from this snapshot."""
        return MutableOptions(
            encoding=self.encoding,
            auto_detect=self.auto_detect,
            fallback_encoding=self.fallback_encoding,
            preprocessor_encoding=self.preprocessor_encoding,
            preprocessor_cmd=self.preprocessor_cmd,
            line_matching_cmd=self.line_matching_cmd,
            ignore_comments=self.ignore_comments,
            ignore_case=self.ignore_case,
            ignore_numbers=self.ignore_numbers,
            timeout=self.timeout if self.timeout is not None else 0.0,
            same_encoding=self.same_encoding,
            sources=dict(self.sources),
            config_files=list(self.config_files),
            diagnostics=DiagnosticLog(items=list(self.diagnostics)),
        )


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableOptions:
    """Mutable options used while merging configuration layers.

    Every option defaults to ``None`` ("not set by this layer"). `freeze`
    replaces unset options with their defaults.
    """

    encoding: str | None = None
    auto_detect: bool | None = None
    fallback_encoding: str | None = None
    preprocessor_encoding: str | None = None
    preprocessor_cmd: str | None = None
    line_matching_cmd: str | None = None
    ignore_comments: bool | None = None
    ignore_case: bool | None = None
    ignore_numbers: bool | None = None
    timeout: float | None = None
    same_encoding: bool | None = None
    sources: dict[str, SourceEncoding] = field(default_factory=dict[str, SourceEncoding])
    config_files: list[str] = field(default_factory=list[str])
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)

    # ---------------------------- Build/freeze ----------------------------
    def freeze(self) -> Options:
        """Sanitize and freeze this builder into an immutable `Options`."""
        self.sanitize()
        defaults = Options()
        timeout: float | None
        if self.timeout is None:
            timeout = defaults.timeout
        else:
            timeout = self.timeout or None
        return Options(
            encoding=self.encoding or defaults.encoding,
            auto_detect=defaults.auto_detect if self.auto_detect is None else self.auto_detect,
            fallback_encoding=self.fallback_encoding or defaults.fallback_encoding,
            preprocessor_encoding=self.preprocessor_encoding or defaults.preprocessor_encoding,
            preprocessor_cmd=self.preprocessor_cmd or "",
            line_matching_cmd=self.line_matching_cmd or "",
            ignore_comments=bool(self.ignore_comments),
            ignore_case=bool(self.ignore_case),
            ignore_numbers=bool(self.ignore_numbers),
            timeout=timeout,
            same_encoding=(
                defaults.same_encoding if self.same_encoding is None else self.same_encoding
            ),
            sources=dict(self.sources),
            config_files=tuple(self.config_files),
            diagnostics=tuple(self.diagnostics),
        )

    def sanitize(self) -> None:
        """Drop invalid values, recording a warning for each.

        Encoding names are canonicalized through the encoding registry; unknown
        names are dropped so the default applies.
        """

        def _encoding(key: str, value: str | None) -> str | None:
            if value is None:
                return None
            canonical: str | None = lookup_encoding(value)
            if canonical is None:
                self.diagnostics.add_warning(f"Unknown encoding for '{key}': {value!r}")
            return canonical

        self.encoding = _encoding("encoding", self.encoding)
        self.fallback_encoding = _encoding("fallback_encoding", self.fallback_encoding)
        self.preprocessor_encoding = _encoding("preprocessor_encoding", self.preprocessor_encoding)
        self.sources = {
            side: replace(src, encoding=_encoding(f"sources.{side}.encoding", src.encoding))
            for side, src in self.sources.items()
        }
        if self.timeout is not None and self.timeout < 0:
            self.diagnostics.add_warning(f"Ignoring negative timeout: {self.timeout}")
            self.timeout = None

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableOptions:
        """Return a builder holding the built-in defaults."""
        return Options().thaw()

    @classmethod
    def from_toml_dict(cls, data: TomlTable, config_file: Path | None = None) -> MutableOptions:
        """Create a builder from a parsed ``[diffsource]`` table.

        Unknown keys and values of the wrong type are reported as warnings in
        ``diagnostics`` and otherwise ignored.

        Args:
            data (TomlTable): The parsed options table.
            config_file (Path | None): The file the table came from.

        Returns:
            MutableOptions: The resulting builder.
        """
        draft = cls()
        diags: DiagnosticLog = draft.diagnostics
        where: str = f" in {config_file}" if config_file else ""

        for key in data:
            if key not in _SCALAR_KEYS and key != "sources":
                diags.add_warning(f"Unknown configuration key '{key}'{where}")

        draft.encoding = get_string_value_or_none(data, "encoding", diags)
        draft.auto_detect = get_bool_value_or_none(data, "auto_detect", diags)
        draft.fallback_encoding = get_string_value_or_none(data, "fallback_encoding", diags)
        draft.preprocessor_encoding = get_string_value_or_none(data, "preprocessor_encoding", diags)
        draft.preprocessor_cmd = get_string_value_or_none(data, "preprocessor_cmd", diags)
        draft.line_matching_cmd = get_string_value_or_none(data, "line_matching_cmd", diags)
        draft.ignore_comments = get_bool_value_or_none(data, "ignore_comments", diags)
        draft.ignore_case = get_bool_value_or_none(data, "ignore_case", diags)
        draft.ignore_numbers = get_bool_value_or_none(data, "ignore_numbers", diags)
        draft.timeout = get_float_value_or_none(data, "timeout", diags)
        draft.same_encoding = get_bool_value_or_none(data, "same_encoding", diags)

        sources_tbl: TomlTable = get_table_value(data, "sources", diags)
        for side, tbl in sources_tbl.items():
            if side not in SOURCE_SIDES:
                diags.add_warning(f"Unknown source '{side}' in [sources]{where}")
                continue
            if not is_toml_table(tbl):
                diags.add_warning(f"Ignoring 'sources.{side}': expected a table")
                continue
            for key in tbl:
                if key not in _SOURCE_KEYS:
                    diags.add_warning(f"Unknown configuration key 'sources.{side}.{key}'{where}")
            draft.sources[side] = SourceEncoding(
                encoding=get_string_value_or_none(tbl, "encoding", diags),
                auto_detect=get_bool_value_or_none(tbl, "auto_detect", diags),
            )

        if config_file is not None:
            draft.config_files = [str(config_file)]
        logger.trace("TOML options: %s", draft)
        return draft

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableOptions:
        """Load options from ``diffsource.toml`` or the ``[tool.diffsource]`` table.

        Raises:
            ConfigLoadError: If the file cannot be read or parsed.
        """
        logger.debug("Loading options from %s", path)
        data: TomlTable = load_toml_dict(path)
        if path.name == PYPROJECT_FILE_NAME:
            tool: TomlTable = get_table_value(data, "tool")
            data = get_table_value(tool, PYPROJECT_TOOL_TABLE)
        return cls.from_toml_dict(data, config_file=path)

    @classmethod
    def discover_config_file(cls, start: Path) -> Path | None:
        """Return ``diffsource.toml`` in ``start``, else a ``pyproject.toml`` with a
        ``[tool.diffsource]`` table, else None.
        """
        candidate: Path = start / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        pyproject: Path = start / PYPROJECT_FILE_NAME
        if pyproject.is_file():
            data: TomlTable = load_toml_dict(pyproject)
            if PYPROJECT_TOOL_TABLE in get_table_value(data, "tool"):
                return pyproject
        return None

    @classmethod
    def load_merged(
        cls,
        *,
        config_path: Path | None = None,
        start: Path | None = None,
        args: ArgsLike | None = None,
    ) -> MutableOptions:
        """Merge defaults, a configuration file and CLI arguments.

        Args:
            config_path (Path | None): Explicit configuration file; when None,
                discovery runs in ``start`` (default: the working directory).
            start (Path | None): Directory to discover a configuration file in.
            args (ArgsLike | None): CLI overrides.

        Returns:
            MutableOptions: The merged builder.

        Raises:
            ConfigLoadError: If the configuration file cannot be read or parsed.
        """
        merged: MutableOptions = cls.from_defaults()
        path: Path | None = config_path or cls.discover_config_file(start or Path.cwd())
        if path is not None:
            merged = merged.merge_with(cls.from_toml_file(path))
        if args:
            merged.apply_cli_args(args)
        return merged

    def merge_with(self, other: MutableOptions) -> MutableOptions:
        """Return a new builder where options set in ``other`` override this one."""
        merged = MutableOptions(
            sources={**self.sources},
            config_files=[*self.config_files, *other.config_files],
            diagnostics=DiagnosticLog(items=[*self.diagnostics, *other.diagnostics]),
        )
        for name in _SCALAR_KEYS:
            mine: Any = getattr(self, name)
            theirs: Any = getattr(other, name)
            setattr(merged, name, theirs if theirs is not None else mine)
        for side, src in other.sources.items():
            base: SourceEncoding = merged.sources.get(side, SourceEncoding())
            merged.sources[side] = SourceEncoding(
                encoding=src.encoding if src.encoding is not None else base.encoding,
                auto_detect=src.auto_detect if src.auto_detect is not None else base.auto_detect,
            )
        return merged

    def apply_cli_args(self, args: ArgsLike) -> MutableOptions:
        """Apply CLI (or API) overrides; keys that are absent or None are ignored."""
        logger.debug("Applying CLI arguments to MutableOptions: %s", args)
        applied: bool = False
        for name in _SCALAR_KEYS:
            value: Any = args.get(name)
            if value is not None:
                setattr(self, name, value)
                applied = True
        if applied:
            self.config_files.append("<CLI overrides>")
        return self


# -------------------------- Pipeline feedback --------------------------


@dataclass(frozen=True, slots=True)
class OptionsDelta:
    """Configuration change requested by one pipeline run.

    Attributes:
        disable_preprocessor (bool): The stage A command failed and must not be
            attempted again.
        disable_line_matching (bool): The stage B command failed and must not be
            attempted again.
    """

    disable_preprocessor: bool = False
    disable_line_matching: bool = False

    @property
    def is_empty(self) -> bool:
        """Return True when the delta changes nothing."""
        return not (self.disable_preprocessor or self.disable_line_matching)

    def merge(self, other: OptionsDelta) -> OptionsDelta:
        """Return the union of two deltas."""
        return OptionsDelta(
            disable_preprocessor=self.disable_preprocessor or other.disable_preprocessor,
            disable_line_matching=self.disable_line_matching or other.disable_line_matching,
        )

    def apply(self, options: Options) -> Options:
        """Return ``options`` with the disabled commands cleared."""
        if self.is_empty:
            return options
        return replace(
            options,
            preprocessor_cmd="" if self.disable_preprocessor else options.preprocessor_cmd,
            line_matching_cmd="" if self.disable_line_matching else options.line_matching_cmd,
        )


class SharedOptions:
    """Options snapshot shared by the sources of one comparison.

    Readers take a consistent snapshot; deltas are applied under a lock so
    concurrent runs never interleave their updates.
    """

    def __init__(self, options: Options | None = None) -> None:
        self._options: Options = options or Options()
        self._lock = threading.Lock()

    def snapshot(self) -> Options:
        """Return the current snapshot."""
        with self._lock:
            return self._options

    def apply(self, delta: OptionsDelta) -> Options:
        """Apply ``delta`` and return the updated snapshot."""
        with self._lock:
            if not delta.is_empty:
                self._options = delta.apply(self._options)
                logger.info("Options updated: %s", delta)
            return self._options

    def replace(self, options: Options) -> None:
        """Install a new snapshot."""
        with self._lock:
            self._options = options
