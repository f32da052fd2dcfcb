# topmark:header:start
#
#   project      : DiffSource
#   file         : test_cli_commands.py
#   file_relpath : tests/cli/test_cli_commands.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests using Click's CliRunner.

Every invocation passes ``--no-color`` so assertions do not depend on the
terminal or on ``FORCE_COLOR`` in the environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import toml

from diffsource.cli.exit_codes import ExitCode
from diffsource.constants import DIFFSOURCE_VERSION
from diffsource.encoding.registry import LATIN1, UTF16_LE
from tests.conftest import FAIL_CMD, mark_cli, parametrize, run_cli

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result


def _run(*argv: str, cwd: Path | None = None, input_text: str | None = None) -> Result:
    return run_cli(["--no-color", *argv], cwd=cwd, input_text=input_text)


def _json(result: Result) -> Any:
    return json.loads(result.stdout)


@mark_cli
def test_no_subcommand_prints_help(isolation: Path) -> None:
    """Without a subcommand the group prints a hint and its help."""
    result = _run()
    assert result.exit_code == ExitCode.SUCCESS
    assert "Hint:" in result.output
    assert "inspect" in result.output


@mark_cli
def test_version(isolation: Path) -> None:
    """Plain and JSON version output."""
    result = _run("version")
    assert result.exit_code == ExitCode.SUCCESS
    assert result.output.strip() == DIFFSOURCE_VERSION

    result = _run("version", "--format", "json")
    assert _json(result) == {"version": DIFFSOURCE_VERSION}


@mark_cli
def test_verbose_and_quiet_conflict(isolation: Path) -> None:
    """Combining -v and -q is a usage error."""
    result = _run("-v", "-q", "version")
    assert result.exit_code == ExitCode.USAGE_ERROR


@mark_cli
def test_inspect_text_summary(isolation: Path) -> None:
    """The summary names the encoding, line endings and line count."""
    (isolation / "a.txt").write_bytes(b"one\r\ntwo\r\n")
    result = _run("inspect", "a.txt")
    assert result.exit_code == ExitCode.SUCCESS, result.output
    assert "a.txt" in result.output
    assert "utf-8" in result.output
    assert "dos" in result.output
    assert "display lines" in result.output


@mark_cli
def test_inspect_verbose_shows_axes(isolation: Path) -> None:
    """With -v the per-axis status is listed."""
    (isolation / "a.txt").write_bytes(b"x\n")
    result = _run("-v", "inspect", "a.txt")
    assert result.exit_code == ExitCode.SUCCESS
    assert "[input" in result.output
    assert "local file" in result.output


@mark_cli
def test_inspect_lines_marks_pure_comments(isolation: Path) -> None:
    """--lines prints numbered records with '#' on pure comment lines."""
    (isolation / "a.py").write_bytes(b"# comment\nx = 1  # note\n")
    result = _run("inspect", "a.py", "--lines")
    assert result.exit_code == ExitCode.SUCCESS
    assert "     1 # # comment" in result.output
    assert "     2   x = 1  # note" in result.output


@mark_cli
def test_inspect_comparison_view(isolation: Path) -> None:
    """--comparison shows the comparison lines."""
    (isolation / "a.c").write_bytes(b"Int A1; // c\n")
    result = _run(
        "inspect",
        "a.c",
        "--lines",
        "--comparison",
        "--ignore-comments",
        "--ignore-case",
        "--ignore-numbers",
        "--format",
        "json",
    )
    assert result.exit_code == ExitCode.SUCCESS
    payload = _json(result)
    assert payload["lines"] == [{"text": "INT A; ", "pure_comment": False}]
    assert payload["display_lines"] == 1
    assert payload["comparison_lines"] == 1


@mark_cli
def test_inspect_json(isolation: Path) -> None:
    """JSON output carries the summary fields and the per-axis status."""
    (isolation / "l.txt").write_bytes(b"caf\xe9\n")
    result = _run(
        "inspect", "l.txt", "--encoding", "latin-1", "--no-auto-detect", "--format", "json"
    )
    assert result.exit_code == ExitCode.SUCCESS
    payload = _json(result)
    assert payload["name"] == "l.txt"
    assert payload["encoding"] == LATIN1
    assert payload["is_text"] is True
    assert payload["incomplete_conversion"] is False
    assert payload["size_bytes"] == 5
    assert payload["comparison_lines"] is None
    assert payload["status"]["encoding"] == "configured"
    assert payload["messages"] == []


@mark_cli
def test_inspect_stdin(isolation: Path) -> None:
    """'-' reads in-memory text from STDIN."""
    result = _run("inspect", "-", "--format", "json", input_text="a\nb\n")
    assert result.exit_code == ExitCode.SUCCESS
    payload = _json(result)
    assert payload["name"] == "From Clipboard"
    assert payload["display_lines"] == 2
    assert payload["status"]["encoding"] == "in-memory data is UTF-8"


@mark_cli
def test_inspect_missing_file(isolation: Path) -> None:
    """A missing input exits with the not-found code."""
    result = _run("inspect", "missing.txt")
    assert result.exit_code == ExitCode.FILE_NOT_FOUND
    assert "missing.txt" in result.output


@mark_cli
def test_inspect_directory(isolation: Path) -> None:
    """A directory is not a regular file."""
    (isolation / "sub").mkdir()
    result = _run("inspect", "sub")
    assert result.exit_code == ExitCode.FILE_NOT_FOUND


@mark_cli
def test_inspect_unknown_encoding_is_usage_error(isolation: Path) -> None:
    """--encoding is validated."""
    (isolation / "a.txt").write_bytes(b"x\n")
    result = _run("inspect", "a.txt", "--encoding", "klingon-8")
    assert result.exit_code == ExitCode.USAGE_ERROR


@mark_cli
def test_inspect_preprocessor_failure_warns(isolation: Path) -> None:
    """A failing preprocessor is reported but the command succeeds."""
    (isolation / "a.txt").write_bytes(b"x\n")
    result = _run("inspect", "a.txt", "--preprocessor", FAIL_CMD)
    assert result.exit_code == ExitCode.SUCCESS
    assert "Preprocessing possibly failed." in result.output


@mark_cli
def test_inspect_reads_config_file(isolation: Path) -> None:
    """The configuration file in the working directory applies."""
    (isolation / "diffsource.toml").write_text(
        'encoding = "utf-16le"\nauto_detect = false\n', encoding="utf-8"
    )
    (isolation / "u.txt").write_bytes("hi\n".encode("utf-16-le"))
    result = _run("inspect", "u.txt", "--format", "json")
    assert result.exit_code == ExitCode.SUCCESS
    payload = _json(result)
    assert payload["encoding"] == UTF16_LE
    assert payload["display_lines"] == 1


@mark_cli
def test_broken_config_file_fails(isolation: Path) -> None:
    """An unparsable configuration file is an error."""
    (isolation / "diffsource.toml").write_text("encoding = \n", encoding="utf-8")
    (isolation / "a.txt").write_bytes(b"x\n")
    result = _run("inspect", "a.txt")
    assert result.exit_code == ExitCode.FAILURE
    assert "Cannot load configuration" in result.output


@mark_cli
def test_detect_encoding(isolation: Path) -> None:
    """Each path is printed with its detected encoding; missing paths fail at the end."""
    (isolation / "bom.txt").write_bytes(b"\xff\xfex\x00")
    (isolation / "plain.txt").write_bytes(b"x\n")
    result = _run("detect-encoding", "bom.txt", "plain.txt")
    assert result.exit_code == ExitCode.SUCCESS
    assert f"bom.txt: {UTF16_LE}" in result.output
    assert f"plain.txt: {LATIN1}" in result.output

    result = _run("detect-encoding", "plain.txt", "nope.txt", "--fallback", "utf-8")
    assert result.exit_code == ExitCode.FILE_NOT_FOUND
    assert "plain.txt: utf-8" in result.output
    assert "nope.txt: not found" in result.output


@mark_cli
def test_detect_encoding_bad_fallback(isolation: Path) -> None:
    """An unknown fallback encoding is rejected."""
    (isolation / "plain.txt").write_bytes(b"x\n")
    result = _run("detect-encoding", "plain.txt", "--fallback", "klingon-8")
    assert result.exit_code == ExitCode.USAGE_ERROR


@mark_cli
@parametrize("parallel", ["--parallel", "--sequential"])
def test_compare_two_equal_inputs(isolation: Path, parallel: str) -> None:
    """Identical inputs are reported as binary equal."""
    (isolation / "a.txt").write_bytes(b"same\n")
    (isolation / "b.txt").write_bytes(b"same\n")
    result = _run("compare", "a.txt", "b.txt", parallel)
    assert result.exit_code == ExitCode.SUCCESS
    assert "binary equal" in result.output


@mark_cli
def test_compare_three_inputs_json(isolation: Path) -> None:
    """JSON output lists every source in order."""
    for name, data in (("a.txt", b"1\n"), ("b.txt", b"1\n"), ("c.txt", b"2\n2\n")):
        (isolation / name).write_bytes(data)
    result = _run("compare", "a.txt", "b.txt", "c.txt", "--format", "json")
    assert result.exit_code == ExitCode.SUCCESS
    payload = _json(result)
    assert [s["name"] for s in payload["sources"]] == ["a.txt", "b.txt", "c.txt"]
    assert [s["display_lines"] for s in payload["sources"]] == [1, 1, 2]
    assert payload["binary_equal"] is False


@mark_cli
@parametrize("count", [1, 4])
def test_compare_wrong_input_count(isolation: Path, count: int) -> None:
    """Only two or three inputs are accepted."""
    result = _run("compare", *[f"f{i}.txt" for i in range(count)])
    assert result.exit_code == ExitCode.USAGE_ERROR


@mark_cli
def test_compare_missing_input(isolation: Path) -> None:
    """A missing input is reported after the summaries."""
    (isolation / "a.txt").write_bytes(b"x\n")
    result = _run("compare", "a.txt", "gone.txt")
    assert result.exit_code == ExitCode.FILE_NOT_FOUND
    assert "inputs differ" in result.output


@mark_cli
def test_dump_config(isolation: Path) -> None:
    """The dumped TOML reflects CLI overrides and parses back."""
    result = _run("dump-config", "--ignore-case", "--timeout", "7")
    assert result.exit_code == ExitCode.SUCCESS
    parsed = toml.loads(result.output)
    assert parsed["ignore_case"] is True
    assert parsed["timeout"] == 7.0
    assert parsed["encoding"] == "utf-8"


@mark_cli
def test_dump_config_verbose_lists_layers(isolation: Path) -> None:
    """With -v the merged layers are listed."""
    (isolation / "diffsource.toml").write_text("ignore_numbers = true\n", encoding="utf-8")
    result = _run("-v", "dump-config")
    assert result.exit_code == ExitCode.SUCCESS
    assert "# layers:" in result.output
    assert "diffsource.toml" in result.output


@mark_cli
def test_config_warnings_are_shown(isolation: Path) -> None:
    """Unknown keys produce a warning but do not fail the command."""
    (isolation / "diffsource.toml").write_text("colour = 1\n", encoding="utf-8")
    result = _run("dump-config")
    assert result.exit_code == ExitCode.SUCCESS
    assert "Unknown configuration key 'colour'" in result.output
