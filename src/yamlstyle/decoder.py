"""Character encoding detection for YAML streams.

YAML requires that streams must begin with a BOM or an ASCII character,
so the encoding can be told from the first bytes (chapter 5.2 of YAML 1.2.2,
https://yaml.org/spec/1.2.2/#52-character-encodings). Streams that do not
follow that rule may be decoded with the wrong encoding; ``file_encoding``
in :class:`~yamlstyle.settings.Settings` overrides detection for them.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from yamlstyle.settings import Settings

logger = logging.getLogger("yamlstyle.decoder")


def detect_encoding(stream_data: bytes) -> str:
    """Return the name of the Python codec ``stream_data`` is encoded with."""
    override = Settings().file_encoding
    if override:
        logger.warning(
            "YAMLSTYLE_FILE_ENCODING is meant for temporary workarounds, "
            "forcing encoding %s",
            override,
        )
        return override

    if stream_data.startswith(codecs.BOM_UTF32_BE):
        return "utf_32"
    if stream_data.startswith(b"\x00\x00\x00") and len(stream_data) >= 4:
        return "utf_32_be"
    if stream_data.startswith(codecs.BOM_UTF32_LE):
        return "utf_32"
    if stream_data[1:4] == b"\x00\x00\x00":
        return "utf_32_le"
    if stream_data.startswith(codecs.BOM_UTF16_BE):
        return "utf_16"
    if stream_data.startswith(b"\x00") and len(stream_data) >= 2:
        return "utf_16_be"
    if stream_data.startswith(codecs.BOM_UTF16_LE):
        return "utf_16"
    if stream_data[1:2] == b"\x00":
        return "utf_16_le"
    if stream_data.startswith(codecs.BOM_UTF8):
        return "utf_8_sig"
    return "utf_8"


def auto_decode(stream_data: bytes) -> str:
    return stream_data.decode(encoding=detect_encoding(stream_data))


def lines_in_files(paths: Iterable[str | Path]) -> Iterator[str]:
    """Autodecode files and yield their lines."""
    for path in paths:
        yield from auto_decode(Path(path).read_bytes()).splitlines()
