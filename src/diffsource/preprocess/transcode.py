# topmark:header:start
#
#   project      : DiffSource
#   file         : transcode.py
#   file_relpath : src/diffsource/preprocess/transcode.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Re-encode a file for an external tool that expects another encoding."""

from __future__ import annotations

import codecs
from typing import TYPE_CHECKING

from diffsource.config.logging import get_logger
from diffsource.encoding.detector import detect_bom
from diffsource.encoding.registry import decoding_codec, same_encoding
from diffsource.fileaccess import read_file_bytes

if TYPE_CHECKING:
    from pathlib import Path

    from diffsource.config.logging import DiffSourceLogger
    from diffsource.encoding.detector import EncodingDetection
    from diffsource.fileaccess import ScratchFiles

logger: DiffSourceLogger = get_logger(__name__)


def transcode_file(
    source: Path,
    source_encoding: str,
    target_encoding: str,
    scratch: ScratchFiles,
) -> Path:
    """Return a copy of ``source`` re-encoded from ``source_encoding`` to ``target_encoding``.

    When both encodings are the same, ``source`` itself is returned and no
    scratch file is created. A leading byte-order mark is honored when reading.
    Characters that cannot be represented are replaced.

    Args:
        source (Path): File to re-encode.
        source_encoding (str): Current encoding of ``source``.
        target_encoding (str): Encoding expected by the consumer.
        scratch (ScratchFiles): Owner of the created file.

    Returns:
        Path: ``source`` or the path of the re-encoded scratch copy.

    Raises:
        ReadFailedError: If ``source`` cannot be read.
        WriteFailedError: If the scratch copy cannot be written.
    """
    if same_encoding(source_encoding, target_encoding):
        return source

    raw: bytes = read_file_bytes(source)
    bom: EncodingDetection | None = detect_bom(raw)
    encoding: str = bom.encoding if bom is not None else source_encoding
    text: str = codecs.decode(
        raw[bom.skip_bytes if bom is not None else 0 :],
        decoding_codec(encoding),
        errors="replace",
    )
    target: Path = scratch.create(
        suffix=source.suffix, data=text.encode(target_encoding, errors="replace")
    )
    logger.debug("transcode: %s (%s) -> %s (%s)", source, encoding, target, target_encoding)
    return target
