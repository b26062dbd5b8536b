"""
Binary dialect (version 3) of the IMF format.

Layout, little-endian:

    u8  version = 3
    u32 width
    u32 height
    u32 layer_count
    layer_count x (width * height) tagged cells, row-major

See cell_codec for the cell encoding. Binary documents carry no legend.
"""

from __future__ import annotations

import logging
import struct

from cell_codec import BYTE_ORDER, MIN_CELL_SIZE, ByteReader, decode_cell, encode_cell
from grid_types import Cell, Grid
from imf_errors import CountMismatch, MalformedHeader, Truncated

__all__ = ["BINARY_VERSION", "HEADER_SIZE", "encode_v3", "decode_v3"]

logger = logging.getLogger(__name__)

BINARY_VERSION = 3

_VERSION = struct.Struct(BYTE_ORDER + "B")
_DIMENSIONS = struct.Struct(BYTE_ORDER + "3I")

HEADER_SIZE = _VERSION.size + _DIMENSIONS.size


def encode_v3(grid: Grid) -> bytes:
    parts = [
        _VERSION.pack(BINARY_VERSION),
        _DIMENSIONS.pack(grid.width, grid.height, grid.layer_count),
    ]
    for layer in grid.layers:
        parts.extend(encode_cell(cell) for cell in layer)
    return b"".join(parts)


def decode_v3(data: bytes) -> Grid:
    """
    Decode a version 3 buffer into a Grid.

    Raises:
        Truncated: the buffer ends inside the header, a layer or a cell
        MalformedHeader: wrong version byte, or a zero dimension or layer count
        UnknownTag: a cell tag is neither 0 nor 1
        CountMismatch: bytes remain after the last declared layer
    """
    reader = ByteReader(bytes(data))

    (version,) = reader.read(_VERSION, "Header")
    if version != BINARY_VERSION:
        raise MalformedHeader("Header", f"Expected version byte {BINARY_VERSION}, got {version}", 0)

    width, height, layer_count = reader.read(_DIMENSIONS, "Header")
    if width == 0 or height == 0:
        raise MalformedHeader("Header", f"Dimensions must be positive, got {width}x{height}", 1)
    if layer_count == 0:
        raise MalformedHeader("Header", "Layer count must be at least 1", 9)

    cell_count = width * height
    minimum = cell_count * layer_count * MIN_CELL_SIZE
    if reader.remaining < minimum:
        raise Truncated("Layers", minimum, reader.remaining, reader.offset)

    layers: list[list[Cell]] = []
    for layer_idx in range(layer_count):
        stage = f"Layer {layer_idx}"
        layers.append([decode_cell(reader, stage) for _ in range(cell_count)])

    if reader.remaining:
        raise CountMismatch(
            "Layers",
            reader.offset,
            len(reader.data),
            f"{reader.remaining} trailing bytes after {layer_count} declared layers",
            reader.offset,
        )

    logger.debug("decode_v3: %dx%d grid, %d layers", width, height, layer_count)
    return Grid(width, height, layers)
