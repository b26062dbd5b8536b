"""
Text dialects of the IMF format.

Version 1 (no header):

    <width>
    <height>
    <n0>,<n1>,...,

Version 2:

    [v2]
    <width>,<height>;
    <key0>(<color0>)<key1>(<color1>)...   (optional legend)
    [
    <n0>,<n1>,...,
    ]

Both dialects hold exactly one layer of scalar cells.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from grid_types import INT16_MAX, INT16_MIN, Cell, Color, Grid, Legend
from imf_errors import CountMismatch, GrammarMismatch, IncompatibleGrid, InvalidNumber
from text_grammar import IntToken, LegendEntry, Scanner

__all__ = [
    "LegendEncoding",
    "DialectOptions",
    "DEFAULT_OPTIONS",
    "parse_int_list",
    "detect_text_version",
    "parse_v1",
    "parse_v2",
    "write_v1",
    "write_v2",
]

logger = logging.getLogger(__name__)


class LegendEncoding(Enum):
    """How a v2 legend writes each colour."""

    PACKED = "packed"  # Decimal integer, R in bits 16-23, G in 8-15, B in 0-7
    HEX = "hex"  # RRGGBB


@dataclass(frozen=True)
class DialectOptions:
    """Options governing the text dialects."""

    legend_encoding: LegendEncoding = LegendEncoding.PACKED


DEFAULT_OPTIONS = DialectOptions()


# =============================================================================
# Shared helpers
# =============================================================================


def _is_decimal(text: str, signed: bool = True) -> bool:
    """Optional sign then ASCII digits only; rejects `1_0` and non-ASCII digits."""
    digits = text[1:] if signed and text[:1] in ("+", "-") else text
    return digits.isascii() and digits.isdigit()


def _to_int16(text: str, stage: str, position: int | None = None) -> int:
    if not _is_decimal(text):
        raise InvalidNumber(stage, f"'{text}' is not a number!", position)
    value = int(text)
    if not INT16_MIN <= value <= INT16_MAX:
        raise InvalidNumber(stage, f"{value} does not fit in 16 bits", position)
    return value


def parse_int_list(text: str, stage: str = "Map") -> list[int]:
    """
    Split a comma-separated string into ints.

    Whitespace around each number is ignored and empty tokens are skipped, so
    "0,1, 2, 3 ,4 ,5," gives [0, 1, 2, 3, 4, 5].
    """
    values: list[int] = []
    for item in text.split(","):
        token = item.strip()
        if not token:
            continue
        values.append(_to_int16(token, stage))
    return values


def _check_count(values: list, width: int, height: int, position: int | None = None) -> None:
    expected = width * height
    if len(values) != expected:
        raise CountMismatch("Map", expected, len(values), position=position)


def _single_layer(grid: Grid, version: int) -> list[Cell]:
    if grid.layer_count != 1:
        raise IncompatibleGrid(
            "Layers",
            f"Text dialect v{version} holds one layer, grid has {grid.layer_count}",
        )
    return grid.layers[0]


def _write_rows(grid: Grid, cells: list[Cell]) -> list[str]:
    lines = []
    for start in range(0, len(cells), grid.width):
        row = cells[start : start + grid.width]
        lines.append("".join(f"{cell.to_scalar().value}," for cell in row))
    return lines


def detect_text_version(text: str) -> int | None:
    """Return N from the first `[vN]` marker, or None when there is none."""
    found = Scanner(text.replace("\r", "").replace("\n", "")).search(Scanner.version_tag)
    return found.value if found else None


# =============================================================================
# Version 1
# =============================================================================


def _dimension(line: str | None, name: str) -> int:
    if line is None:
        raise GrammarMismatch("Dimensions", f"{name} line missing")
    text = line.strip()
    if not _is_decimal(text):
        raise InvalidNumber("Dimensions", f"{name} not a number: '{text}'")
    value = int(text)
    if value < 1:
        raise InvalidNumber("Dimensions", f"{name} must be positive, got {value}")
    return value


def parse_v1(text: str) -> Grid:
    """
    Parse a version 1 document.

    The first non-blank line is the width, the second the height; all further
    lines are joined and read as one comma-separated list. A leading `[v1]`
    line is allowed.

    Raises:
        GrammarMismatch: width or height line missing
        InvalidNumber: a dimension or list entry is not a valid number
        CountMismatch: the list does not hold width * height numbers
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if lines and Scanner(lines[0]).version_tag() == 1:
        lines = lines[1:]

    remaining = iter(lines)
    width = _dimension(next(remaining, None), "Width")
    height = _dimension(next(remaining, None), "Height")

    values = parse_int_list("".join(remaining))
    _check_count(values, width, height)

    logger.debug("parse_v1: %dx%d grid", width, height)
    return Grid.from_values(width, height, values)


def write_v1(grid: Grid) -> str:
    cells = _single_layer(grid, 1)
    lines = [str(grid.width), str(grid.height)]
    lines.extend(_write_rows(grid, cells))
    return "\n".join(lines) + "\n"


# =============================================================================
# Version 2
# =============================================================================


def _decode_legend(entries: list[LegendEntry], encoding: LegendEncoding) -> Legend:
    legend: Legend = {}
    for entry in entries:
        key = int(entry.key.text)
        body = entry.body.strip()
        if encoding is LegendEncoding.HEX:
            try:
                color = Color.from_hex(body)
            except InvalidNumber:
                raise InvalidNumber(
                    "Legend", f"'{body}' is not an RRGGBB colour", entry.body_position
                ) from None
        else:
            if not body.isdigit() or not body.isascii():
                raise InvalidNumber(
                    "Legend", f"'{body}' is not a packed colour number", entry.body_position
                )
            color = Color.from_packed(int(body))
        legend[key] = color
    return legend


def _encode_color(color: Color, encoding: LegendEncoding) -> str:
    if encoding is LegendEncoding.HEX:
        return color.hex
    return str(color.packed)


def parse_v2(text: str, options: DialectOptions = DEFAULT_OPTIONS) -> Grid:
    """
    Parse a version 2 document.

    Line breaks are removed first. The dimensions are the first `w,h` pair
    followed by `;`, the legend is the first run of `key(color)` groups, and
    the map is the first bracketed list of integers.

    Raises:
        GrammarMismatch: dimensions or map not found
        InvalidNumber: a number or colour is malformed
        CountMismatch: the map does not hold width * height numbers
    """
    flat = text.replace("\r", "").replace("\n", "")

    dims = Scanner(flat).search(Scanner.dimensions)
    if dims is None:
        raise GrammarMismatch("Dimensions", "Dimensions not found")
    width_token, height_token = dims.value
    width = int(width_token.text)
    height = int(height_token.text)
    if width < 1 or height < 1:
        raise InvalidNumber(
            "Dimensions", f"Dimensions must be positive, got {width}x{height}", dims.start
        )

    found_legend = Scanner(flat).search(Scanner.legend)
    legend = None
    if found_legend is not None:
        legend = _decode_legend(found_legend.value, options.legend_encoding)

    found_map = Scanner(flat).search(Scanner.int_list)
    if found_map is None:
        raise GrammarMismatch("Map", "Integer list not found")
    tokens: list[IntToken] = found_map.value
    values = [_to_int16(token.text, "Map", token.position) for token in tokens]
    _check_count(values, width, height, found_map.start)

    logger.debug(
        "parse_v2: %dx%d grid, %s legend",
        width,
        height,
        "custom" if legend is not None else "default",
    )
    return Grid.from_values(width, height, values, legend)


def write_v2(grid: Grid, options: DialectOptions = DEFAULT_OPTIONS) -> str:
    cells = _single_layer(grid, 2)
    # An absent legend block reads back as the default legend.
    if not grid.legend:
        raise IncompatibleGrid("Legend", "Text dialect v2 needs at least one legend entry")
    negative = [key for key in grid.legend if key < 0]
    if negative:
        raise IncompatibleGrid(
            "Legend", f"Legend keys must be non-negative, got {', '.join(map(str, negative))}"
        )

    lines = ["[v2]", f"{grid.width},{grid.height};"]
    lines.append(
        "".join(
            f"{key}({_encode_color(color, options.legend_encoding)})"
            for key, color in sorted(grid.legend.items())
        )
    )
    lines.append("[")
    lines.extend(_write_rows(grid, cells))
    lines.append("]")
    return "\n".join(lines) + "\n"
