# topmark:header:start
#
#   project      : DiffSource
#   file         : test_options.py
#   file_relpath : tests/config/test_options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for option loading, merging and rendering.

Precedence is defaults < configuration file < CLI flags; unknown keys and
wrongly typed values become warnings rather than errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import toml

from diffsource.config.io import ConfigLoadError, load_toml_dict
from diffsource.config.logging import TRACE_LEVEL, resolve_env_log_level
from diffsource.config.model import (
    DEFAULT_TIMEOUT,
    MutableOptions,
    Options,
    OptionsDelta,
    SourceEncoding,
)
from diffsource.encoding.registry import LATIN1, UTF8, UTF16_LE, EncodingChoice
from tests.conftest import make_options, parametrize

if TYPE_CHECKING:
    from pathlib import Path


def _messages(m: MutableOptions) -> list[str]:
    return [d.message for d in m.diagnostics]


def test_defaults() -> None:
    """Built-in defaults."""
    options: Options = MutableOptions.from_defaults().freeze()
    assert options.encoding == UTF8
    assert options.auto_detect
    assert options.fallback_encoding == LATIN1
    assert options.preprocessor_cmd == ""
    assert options.timeout == DEFAULT_TIMEOUT
    assert not options.needs_comparison_view


def test_from_toml_dict_reads_known_keys() -> None:
    """Known keys are read and encodings canonicalized on freeze."""
    draft = MutableOptions.from_toml_dict(
        {
            "encoding": "Latin-1",
            "auto_detect": False,
            "preprocessor_cmd": "sed -e s/a/b/",
            "ignore_comments": True,
            "timeout": 5,
            "sources": {"b": {"encoding": "UTF-16LE"}},
        }
    )
    assert draft.diagnostics.messages() == []
    options: Options = draft.freeze()
    assert options.encoding == LATIN1
    assert not options.auto_detect
    assert options.preprocessor_cmd == "sed -e s/a/b/"
    assert options.ignore_comments
    assert options.timeout == 5.0
    assert options.sources["b"] == SourceEncoding(encoding=UTF16_LE)
    assert options.needs_comparison_view


def test_unknown_keys_and_wrong_types_warn() -> None:
    """Unknown keys and wrong types are reported and ignored."""
    draft = MutableOptions.from_toml_dict(
        {
            "encodng": "utf-8",
            "ignore_case": "yes",
            "timeout": "soon",
            "sources": {"d": {}, "a": {"color": "red"}},
        }
    )
    messages: list[str] = _messages(draft)
    assert any("Unknown configuration key 'encodng'" in m for m in messages)
    assert any("Ignoring 'ignore_case'" in m for m in messages)
    assert any("Ignoring 'timeout'" in m for m in messages)
    assert any("Unknown source 'd'" in m for m in messages)
    assert any("sources.a.color" in m for m in messages)
    assert draft.ignore_case is None
    assert draft.timeout is None


def test_unknown_encoding_is_dropped_with_warning() -> None:
    """An unknown encoding name falls back to the default."""
    draft = MutableOptions(encoding="klingon-8")
    options: Options = draft.freeze()
    assert options.encoding == UTF8
    assert any("Unknown encoding for 'encoding'" in d.message for d in options.diagnostics)


def test_negative_timeout_is_dropped() -> None:
    """A negative timeout restores the default."""
    options: Options = MutableOptions(timeout=-1).freeze()
    assert options.timeout == DEFAULT_TIMEOUT


def test_zero_timeout_disables_limit() -> None:
    """A zero timeout means no limit."""
    assert MutableOptions(timeout=0).freeze().timeout is None


def test_precedence(tmp_path: Path) -> None:
    """CLI flags win over the configuration file, which wins over defaults."""
    cfg: Path = tmp_path / "diffsource.toml"
    cfg.write_text('encoding = "latin-1"\nignore_case = true\ntimeout = 3\n', encoding="utf-8")
    merged = MutableOptions.load_merged(
        start=tmp_path, args={"encoding": "utf-16le", "ignore_numbers": True, "timeout": None}
    )
    options: Options = merged.freeze()
    assert options.encoding == UTF16_LE
    assert options.ignore_case
    assert options.ignore_numbers
    assert options.timeout == 3.0
    assert options.config_files == (str(cfg), "<CLI overrides>")


def test_pyproject_tool_table_is_discovered(tmp_path: Path) -> None:
    """A ``[tool.diffsource]`` table in pyproject.toml is used when no diffsource.toml exists."""
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "x"\n\n[tool.diffsource]\nignore_comments = true\n', encoding="utf-8"
    )
    found = MutableOptions.discover_config_file(tmp_path)
    assert found == tmp_path / "pyproject.toml"
    assert MutableOptions.load_merged(start=tmp_path).freeze().ignore_comments


def test_pyproject_without_tool_table_is_ignored(tmp_path: Path) -> None:
    """A pyproject.toml without our table is not a configuration file."""
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    assert MutableOptions.discover_config_file(tmp_path) is None


def test_diffsource_toml_wins_over_pyproject(tmp_path: Path) -> None:
    """The dedicated file has priority."""
    (tmp_path / "pyproject.toml").write_text("[tool.diffsource]\n", encoding="utf-8")
    (tmp_path / "diffsource.toml").write_text("", encoding="utf-8")
    assert MutableOptions.discover_config_file(tmp_path) == tmp_path / "diffsource.toml"


def test_invalid_toml_raises(tmp_path: Path) -> None:
    """Malformed configuration raises ConfigLoadError."""
    bad: Path = tmp_path / "diffsource.toml"
    bad.write_text("encoding = \n", encoding="utf-8")
    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_toml_dict(bad)
    with pytest.raises(ConfigLoadError, match="cannot read file"):
        MutableOptions.load_merged(config_path=tmp_path / "missing.toml")


def test_merge_keeps_lower_layer_for_unset_values() -> None:
    """Unset values inherit; per-source overrides merge field by field."""
    base = MutableOptions(encoding="latin-1", sources={"a": SourceEncoding(encoding="latin-1")})
    top = MutableOptions(
        ignore_case=True, sources={"a": SourceEncoding(auto_detect=False), "b": SourceEncoding()}
    )
    merged = base.merge_with(top)
    assert merged.encoding == "latin-1"
    assert merged.ignore_case
    assert merged.sources["a"] == SourceEncoding(encoding="latin-1", auto_detect=False)
    assert "b" in merged.sources


@parametrize(
    "same_encoding, side, expected",
    [
        (True, "b", EncodingChoice(name=UTF8, auto_detect=True)),
        (False, "b", EncodingChoice(name=LATIN1, auto_detect=False)),
        (False, "c", EncodingChoice(name=UTF8, auto_detect=True)),
    ],
)
def test_encoding_for_side(same_encoding: bool, side: str, expected: EncodingChoice) -> None:
    """Per-source overrides apply only when sources do not share side A's encoding."""
    options: Options = make_options(
        same_encoding=same_encoding,
        sources={"b": SourceEncoding(encoding="latin-1", auto_detect=False)},
    )
    assert options.encoding_for(side) == expected


def test_to_toml_round_trips() -> None:
    """The rendered document parses back to the same options."""
    options: Options = make_options(
        encoding=LATIN1,
        line_matching_cmd="tr a-z A-Z",
        timeout=0,
        sources={"c": SourceEncoding(encoding=UTF8)},
    )
    text: str = options.to_toml()
    assert text.startswith("# DiffSource effective options")
    parsed = toml.loads(text)
    assert parsed["encoding"] == LATIN1
    assert parsed["line_matching_cmd"] == "tr a-z A-Z"
    assert parsed["timeout"] == 0
    assert parsed["sources"]["c"] == {"encoding": UTF8}
    assert MutableOptions.from_toml_dict(parsed).freeze().line_matching_cmd == "tr a-z A-Z"


def test_thaw_freeze_is_stable() -> None:
    """Thawing and freezing again yields equal options."""
    options: Options = make_options(ignore_numbers=True, timeout=2.5)
    assert options.thaw().freeze() == options


def test_delta_merge_and_apply() -> None:
    """Deltas combine with OR and clear only the named commands."""
    delta = OptionsDelta(disable_preprocessor=True).merge(OptionsDelta())
    assert delta.disable_preprocessor and not delta.disable_line_matching
    options: Options = make_options(preprocessor_cmd="a", line_matching_cmd="b")
    applied = delta.apply(options)
    assert applied.preprocessor_cmd == ""
    assert applied.line_matching_cmd == "b"
    assert OptionsDelta().apply(options) is options


@parametrize(
    "value, expected",
    [("", None), ("trace", TRACE_LEVEL), ("DEBUG", 10), ("20", 20), ("bogus", None)],
)
def test_env_log_level(monkeypatch: pytest.MonkeyPatch, value: str, expected: int | None) -> None:
    """DIFFSOURCE_LOG_LEVEL accepts names and numbers."""
    monkeypatch.setenv("DIFFSOURCE_LOG_LEVEL", value)
    assert resolve_env_log_level() == expected
