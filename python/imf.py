"""
Integer Media File (IMF) reading and writing.

`load` inspects raw input and routes it to the matching dialect; `dump`
serializes a Grid to a requested version. Both are pure functions over
in-memory buffers; `read_file` and `write_file` wrap them for callers that
work with paths.

Example:
    grid = load(b"2\\n2\\n1,2,3,4,")
    grid.get(1, 0)            # Scalar(value=2)
    data = dump(grid, 3)      # binary, multi-layer capable
"""

from __future__ import annotations

import logging
from pathlib import Path

from binary_dialect import BINARY_VERSION, decode_v3, encode_v3
from grid_types import Grid
from imf_errors import IOUnavailable, MalformedHeader, UnsupportedVersion
from text_dialects import (
    DEFAULT_OPTIONS,
    DialectOptions,
    detect_text_version,
    parse_v1,
    parse_v2,
    write_v1,
    write_v2,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "detect_version",
    "load",
    "dump",
    "read_file",
    "write_file",
]

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = (1, 2, BINARY_VERSION)

# Text files never start with a byte below TAB; anything lower is a binary tag.
_FIRST_TEXT_BYTE = 0x09


def _is_binary(data: bytes | str) -> bool:
    return isinstance(data, (bytes, bytearray)) and len(data) > 0 and data[0] < _FIRST_TEXT_BYTE


def _as_text(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedHeader(
            "Version", f"Input is neither binary IMF nor UTF-8 text ({exc.reason})", exc.start
        ) from None


def detect_version(data: bytes | str) -> int:
    """
    Determine the dialect version of raw input.

    A leading control byte is the binary version tag. Otherwise the input is
    text and the first `[vN]` marker decides; without one it is version 1.
    """
    if _is_binary(data):
        return data[0]
    version = detect_text_version(_as_text(data))
    return 1 if version is None else version


def load(data: bytes | str, options: DialectOptions = DEFAULT_OPTIONS) -> Grid:
    """
    Parse raw input of any supported version into a Grid.

    Raises:
        MalformedHeader: unknown version, or text marked as a binary version
        IMFError subclasses from the dialect parsers
    """
    version = detect_version(data)
    logger.info("load: detected IMF version %d", version)

    if _is_binary(data):
        if version != BINARY_VERSION:
            raise MalformedHeader("Version", f"Incompatible IMF version {version}", 0)
        return decode_v3(bytes(data))

    text = _as_text(data)
    match version:
        case 1:
            return parse_v1(text)
        case 2:
            return parse_v2(text, options)
        case _:
            raise MalformedHeader("Version", f"Incompatible IMF version {version}")


def dump(grid: Grid, version: int, options: DialectOptions = DEFAULT_OPTIONS) -> bytes:
    """
    Serialize grid to the given version.

    Text versions are returned UTF-8 encoded.

    Raises:
        UnsupportedVersion: no writer exists for version
        IncompatibleGrid: a multi-layer grid was written to a text version
    """
    logger.info(
        "dump: %dx%d grid with %d layer(s) as version %s",
        grid.width,
        grid.height,
        grid.layer_count,
        version,
    )
    match version:
        case 1:
            return write_v1(grid).encode("utf-8")
        case 2:
            return write_v2(grid, options).encode("utf-8")
        case 3:
            return encode_v3(grid)
        case _:
            raise UnsupportedVersion(
                "Version",
                f"Cannot write IMF version {version}; supported: "
                + ", ".join(str(v) for v in SUPPORTED_VERSIONS),
            )


def read_file(path: str | Path, options: DialectOptions = DEFAULT_OPTIONS) -> Grid:
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise IOUnavailable("Read", f"Failed to read file '{path}': {exc}") from exc
    return load(data, options)


def write_file(
    path: str | Path, grid: Grid, version: int, options: DialectOptions = DEFAULT_OPTIONS
) -> None:
    data = dump(grid, version, options)
    try:
        Path(path).write_bytes(data)
    except OSError as exc:
        raise IOUnavailable("Write", f"Failed to write file '{path}': {exc}") from exc
