# topmark:header:start
#
#   project      : DiffSource
#   file         : fileaccess.py
#   file_relpath : src/diffsource/fileaccess.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""File and network access for source inputs.

Sections:
    InputReference:
        Identifies where a source comes from: a local path, a remote
        ``http(s)`` URL, or nothing at all (in-memory data). Remote inputs are
        materialized to a local scratch copy with `requests` before any
        byte-level processing.

    ScratchFiles:
        Owner of the temporary files created for one source (in-memory data,
        remote copies, transcoded preprocessor input, preprocessor output).
        Every file it hands out is removed by `ScratchFiles.cleanup`, which the
        source calls whenever it is reset or replaced.
"""

from __future__ import annotations

import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Final
from urllib.parse import urlparse

import requests

from diffsource.config.logging import get_logger
from diffsource.core.errors import NotRegularFileError, ReadFailedError, WriteFailedError

if TYPE_CHECKING:
    from types import TracebackType

    from diffsource.config.logging import DiffSourceLogger

logger: DiffSourceLogger = get_logger(__name__)

REMOTE_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})
DOWNLOAD_TIMEOUT: Final[float] = 30.0
SCRATCH_PREFIX: Final[str] = "diffsource-"


class ScratchFiles:
    """Scoped temporary files for one source.

    Usable as a context manager; files are removed on exit.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self.directory: Path | None = directory
        self._paths: list[Path] = []

    def create(self, suffix: str = "", data: bytes | None = None) -> Path:
        """Create a new scratch file, optionally filled with ``data``.

        Raises:
            WriteFailedError: If the file cannot be created or written.
        """
        try:
            fd, name = tempfile.mkstemp(prefix=SCRATCH_PREFIX, suffix=suffix, dir=self.directory)
            with os.fdopen(fd, "wb") as fh:
                if data is not None:
                    fh.write(data)
        except OSError as e:
            raise WriteFailedError(f"Cannot create scratch file: {e}") from e
        path = Path(name)
        self._paths.append(path)
        logger.trace("scratch: created %s (%d bytes)", path, len(data or b""))
        return path

    @property
    def paths(self) -> tuple[Path, ...]:
        """Return the scratch files still owned."""
        return tuple(self._paths)

    def cleanup(self) -> None:
        """Remove every scratch file created so far."""
        for path in self._paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("scratch: cannot remove %s: %s", path, e)
        if self._paths:
            logger.debug("scratch: removed %d file(s)", len(self._paths))
        self._paths.clear()

    def __enter__(self) -> ScratchFiles:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    def __len__(self) -> int:
        return len(self._paths)


class InputReference:
    """Location of a source input.

    Args:
        location (str | os.PathLike[str] | None): Local path, ``http(s)`` URL, or
            None for in-memory data.
    """

    def __init__(self, location: str | os.PathLike[str] | None = None) -> None:
        self.location: str | None = os.fspath(location) if location is not None else None
        self.local_copy: Path | None = None

    def __repr__(self) -> str:
        return f"InputReference({self.location!r})"

    @property
    def is_valid(self) -> bool:
        """Return True when a location is set."""
        return bool(self.location)

    @property
    def is_remote(self) -> bool:
        """Return True for ``http``/``https`` URLs."""
        if not self.location:
            return False
        return urlparse(self.location).scheme.lower() in REMOTE_SCHEMES

    @property
    def is_local(self) -> bool:
        """Return True for a local path."""
        return self.is_valid and not self.is_remote

    @property
    def path(self) -> Path | None:
        """Return the local path to read from (the scratch copy for remote inputs)."""
        if self.is_remote:
            return self.local_copy
        return Path(self.location) if self.location else None

    @property
    def absolute_path(self) -> str:
        """Return the absolute path or URL, or the empty string."""
        if not self.location:
            return ""
        if self.is_remote:
            return self.location
        return str(Path(self.location).absolute())

    @property
    def pretty_name(self) -> str:
        """Return a short name suitable for messages."""
        if not self.location:
            return ""
        if self.is_remote:
            return self.location
        return Path(self.location).name or self.location

    def exists(self) -> bool:
        """Return True if the input exists (remote inputs: once copied locally)."""
        path: Path | None = self.path
        return path is not None and path.exists()

    def is_normal(self) -> bool:
        """Return True if the input is a regular file."""
        path: Path | None = self.path
        return path is not None and path.is_file()

    def size(self) -> int:
        """Return the size in bytes, or 0 when the input does not exist."""
        path: Path | None = self.path
        try:
            return path.stat().st_size if path is not None else 0
        except OSError:
            return 0

    def mtime(self) -> datetime | None:
        """Return the last-modified time, or None when unknown."""
        path: Path | None = self.path
        try:
            return datetime.fromtimestamp(path.stat().st_mtime) if path is not None else None
        except OSError:
            return None

    def create_local_copy(self, scratch: ScratchFiles, *, timeout: float = DOWNLOAD_TIMEOUT) -> Path:
        """Materialize a remote input into a scratch file.

        Local inputs are returned unchanged.

        Args:
            scratch (ScratchFiles): Owner of the created file.
            timeout (float): Download timeout in seconds.

        Returns:
            Path: The local path to read from.

        Raises:
            ReadFailedError: If the download fails.
        """
        if not self.is_remote:
            path: Path | None = self.path
            if path is None:
                raise ReadFailedError("No input set")
            return path
        if self.local_copy is not None and self.local_copy.exists():
            return self.local_copy

        assert self.location is not None
        logger.info("Downloading %s", self.location)
        try:
            resp: requests.Response = requests.get(self.location, timeout=timeout)
        except requests.RequestException as e:
            raise ReadFailedError(f"Failed to fetch {self.location}: {e}") from e
        if not resp.ok:
            raise ReadFailedError(f"HTTP {resp.status_code}: failed to download {self.location}")
        suffix: str = Path(urlparse(self.location).path).suffix
        self.local_copy = scratch.create(suffix=suffix, data=resp.content)
        logger.debug("Downloaded %d bytes to %s", len(resp.content), self.local_copy)
        return self.local_copy

    def read_bytes(self) -> bytes:
        """Read the whole (local or already copied) input.

        Raises:
            NotRegularFileError: If the input exists but is not a regular file.
            ReadFailedError: If the input is missing or cannot be read.
        """
        return read_file_bytes(self.path, display=self.pretty_name)


def read_file_bytes(path: Path | None, *, display: str = "") -> bytes:
    """Read a regular file.

    Raises:
        NotRegularFileError: If ``path`` exists but is not a regular file.
        ReadFailedError: If ``path`` is missing or cannot be read.
    """
    name: str = display or str(path)
    if path is None or not path.exists():
        raise ReadFailedError(f"File not found: {name}")
    if not path.is_file():
        raise NotRegularFileError(f"Not a regular file: {name}")
    try:
        return path.read_bytes()
    except OSError as e:
        raise ReadFailedError(f"Cannot read {name}: {e}") from e
