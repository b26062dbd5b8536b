"""
Tagged cell codec for the binary dialect.

A cell is stored as a one-byte tag followed by its payload:

    tag 0 (scalar):      i16 value
    tag 1 (directional): i16 north, i16 east, i16 south, i16 west

All multi-byte values are little-endian.
"""

from __future__ import annotations

import struct

from grid_types import Cell, Directional, Scalar
from imf_errors import Truncated, UnknownTag

__all__ = [
    "BYTE_ORDER",
    "TAG_SCALAR",
    "TAG_DIRECTIONAL",
    "MIN_CELL_SIZE",
    "ByteReader",
    "encode_cell",
    "decode_cell",
]

BYTE_ORDER = "<"

TAG_SCALAR = 0
TAG_DIRECTIONAL = 1

_TAG = struct.Struct(BYTE_ORDER + "B")
_SCALAR = struct.Struct(BYTE_ORDER + "h")
_DIRECTIONAL = struct.Struct(BYTE_ORDER + "4h")

# Smallest possible encoded cell: tag + one i16.
MIN_CELL_SIZE = _TAG.size + _SCALAR.size


class ByteReader:
    """Read cursor over an immutable byte buffer."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self.data = data
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read(self, fmt: struct.Struct, stage: str) -> tuple[int, ...]:
        """Unpack fmt at the cursor and advance, or raise Truncated."""
        if self.remaining < fmt.size:
            raise Truncated(stage, fmt.size, self.remaining, self.offset)
        values = fmt.unpack_from(self.data, self.offset)
        self.offset += fmt.size
        return values


def encode_cell(cell: Cell) -> bytes:
    match cell:
        case Scalar(value=value):
            return _TAG.pack(TAG_SCALAR) + _SCALAR.pack(value)
        case Directional(north=n, east=e, south=s, west=w):
            return _TAG.pack(TAG_DIRECTIONAL) + _DIRECTIONAL.pack(n, e, s, w)
    raise TypeError(f"Not a cell: {cell!r}")


def decode_cell(reader: ByteReader, stage: str = "Cell") -> Cell:
    """Decode one tagged cell at the reader's cursor."""
    tag_offset = reader.offset
    (tag,) = reader.read(_TAG, stage)
    if tag == TAG_SCALAR:
        (value,) = reader.read(_SCALAR, stage)
        return Scalar(value)
    if tag == TAG_DIRECTIONAL:
        n, e, s, w = reader.read(_DIRECTIONAL, stage)
        return Directional(n, e, s, w)
    raise UnknownTag(tag, tag_offset)
