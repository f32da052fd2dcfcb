# topmark:header:start
#
#   project      : DiffSource
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the DiffSource test suite.

This file sets up global fixtures, typed wrappers around pytest decorators, and
the logging configuration for test runs.

Notes:
    Tests should respect the immutable/mutable options split: build options
    with `MutableOptions` (or `make_options`), then `freeze()` them into an
    `Options` snapshot before handing them to a source.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import IO, TYPE_CHECKING, Any, TypeVar, cast

import pytest
from click.testing import CliRunner, Result

from diffsource.cli.main import cli
from diffsource.config import logging
from diffsource.config.model import MutableOptions

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from diffsource.config.model import Options

F = TypeVar("F", bound=Callable[..., object])

DecoratorType = Callable[[F], F]

# A preprocessor command that copies stdin to stdout, runnable on every platform.
PY: str = f'"{sys.executable}"'
CAT_CMD: str = f"{PY} -c \"import sys; sys.stdout.buffer.write(sys.stdin.buffer.read())\""
UPPER_CMD: str = (
    f"{PY} -c \"import sys; sys.stdout.buffer.write(sys.stdin.buffer.read().upper())\""
)
FAIL_CMD: str = f'{PY} -c "import sys; sys.exit(3)"'
SILENT_CMD: str = f'{PY} -c "import sys; sys.stdin.read()"'
SLEEP_CMD: str = f'{PY} -c "import time; time.sleep(5)"'


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.integration`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_integration: DecoratorType[Any] = as_typed_mark(pytest.mark.integration)
mark_pipeline: DecoratorType[Any] = as_typed_mark(pytest.mark.pipeline)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


def fixture(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.fixture`."""
    return as_typed_mark(pytest.fixture(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_diffsource_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure the runtime log level is not forced via env during tests.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture.
    """
    monkeypatch.delenv("DIFFSOURCE_LOG_LEVEL", raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the logging level to TRACE for all tests.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


def make_options(**overrides: Any) -> Options:
    """Return a frozen `Options` built from defaults and overrides.

    Args:
        **overrides (Any): Attribute overrides applied to the mutable builder.

    Returns:
        Options: An immutable options snapshot.
    """
    m: MutableOptions = MutableOptions.from_defaults()
    for k, v in overrides.items():
        setattr(m, k, v)
    return m.freeze()


def run_cli(
    argv: Sequence[str],
    *,
    cwd: Path | None = None,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI, optionally from ``cwd``.

    Args:
        argv (Sequence[str]): CLI argument vector.
        cwd (Path | None): Working directory for the invocation (configuration
            discovery happens there).
        input_text (str | bytes | IO[Any] | None): Standard input for the command.

    Returns:
        Result: The `click.testing.Result` of the invocation.
    """
    runner = CliRunner()
    previous: str = os.getcwd()
    try:
        if cwd is not None:
            os.chdir(cwd)
        return runner.invoke(cli, list(argv), input=input_text)
    finally:
        os.chdir(previous)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run a test in an empty working directory (no configuration file to discover).

    Args:
        tmp_path (Path): The pytest-provided temporary directory.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "work"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd
