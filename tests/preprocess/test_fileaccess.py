# topmark:header:start
#
#   project      : DiffSource
#   file         : test_fileaccess.py
#   file_relpath : tests/preprocess/test_fileaccess.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for input references, scratch files and remote copies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import requests

from diffsource.core.errors import NotRegularFileError, ReadFailedError
from diffsource.fileaccess import InputReference, ScratchFiles, read_file_bytes

if TYPE_CHECKING:
    from pathlib import Path


class _FakeResponse:
    def __init__(self, status_code: int, content: bytes) -> None:
        self.status_code = status_code
        self.content = content

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def test_local_reference(tmp_path: Path) -> None:
    """A local path reports its existence, type and size."""
    path: Path = tmp_path / "a.txt"
    path.write_bytes(b"abc")
    ref = InputReference(path)
    assert ref.is_valid and ref.is_local and not ref.is_remote
    assert ref.exists() and ref.is_normal()
    assert ref.size() == 3
    assert ref.pretty_name == "a.txt"
    assert ref.mtime() is not None
    assert ref.read_bytes() == b"abc"


def test_unset_reference() -> None:
    """No location: nothing exists and nothing can be copied."""
    ref = InputReference()
    assert not ref.is_valid
    assert not ref.exists()
    assert ref.size() == 0
    assert ref.absolute_path == ""
    with pytest.raises(ReadFailedError):
        ref.create_local_copy(ScratchFiles())


def test_read_missing_and_directory(tmp_path: Path) -> None:
    """Missing files and directories raise distinct errors."""
    with pytest.raises(ReadFailedError, match="File not found"):
        read_file_bytes(tmp_path / "missing")
    with pytest.raises(NotRegularFileError):
        read_file_bytes(tmp_path)


def test_scratch_files_are_removed(tmp_path: Path) -> None:
    """Cleanup removes every created file."""
    scratch = ScratchFiles(tmp_path)
    first: Path = scratch.create(suffix=".txt", data=b"x")
    second: Path = scratch.create()
    assert first.read_bytes() == b"x"
    assert second.read_bytes() == b""
    assert scratch.paths == (first, second)
    scratch.cleanup()
    assert not first.exists() and not second.exists()
    assert len(scratch) == 0


def test_remote_copy(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Remote inputs are downloaded once into a scratch file."""
    calls: list[str] = []

    def fake_get(url: str, **kwargs: Any) -> _FakeResponse:
        calls.append(url)
        return _FakeResponse(200, b"remote\n")

    monkeypatch.setattr(requests, "get", fake_get)
    ref = InputReference("https://example.com/files/a.py")
    assert ref.is_remote
    assert ref.pretty_name == "https://example.com/files/a.py"
    with ScratchFiles(tmp_path) as scratch:
        local: Path = ref.create_local_copy(scratch)
        assert local.suffix == ".py"
        assert ref.read_bytes() == b"remote\n"
        assert ref.create_local_copy(scratch) == local
    assert calls == ["https://example.com/files/a.py"]


def test_remote_http_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A non-success status is a read failure."""
    monkeypatch.setattr(requests, "get", lambda url, **kwargs: _FakeResponse(404, b""))
    with pytest.raises(ReadFailedError, match="HTTP 404"):
        InputReference("http://example.com/x").create_local_copy(ScratchFiles(tmp_path))


def test_remote_connection_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Transport errors are read failures."""

    def boom(url: str, **kwargs: Any) -> _FakeResponse:
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(requests, "get", boom)
    with pytest.raises(ReadFailedError, match="Failed to fetch"):
        InputReference("http://example.com/x").create_local_copy(ScratchFiles(tmp_path))
