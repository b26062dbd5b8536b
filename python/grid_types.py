"""
Shared type definitions for the IMF format engine.

A Grid holds its dimensions, a colour legend and one or more layers of cells.
Cells are either a plain Scalar or a Directional value with one number per
cardinal direction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from imf_errors import CountMismatch, InvalidNumber, OutOfRange

__all__ = [
    "Direction",
    "Scalar",
    "Directional",
    "Cell",
    "as_cell",
    "Color",
    "Legend",
    "default_legend",
    "Grid",
    "INT16_MIN",
    "INT16_MAX",
]

INT16_MIN = -(1 << 15)
INT16_MAX = (1 << 15) - 1


class Direction(Enum):
    """Cardinal direction of a directional cell value."""

    N = "N"  # Up (decreasing y)
    E = "E"  # Right (increasing x)
    S = "S"  # Down (increasing y)
    W = "W"  # Left (decreasing x)


def _check_int16(value: int, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidNumber("Cell", f"{what} {value!r} is not an integer")
    if not INT16_MIN <= value <= INT16_MAX:
        raise InvalidNumber(
            "Cell", f"{what} {value} does not fit in 16 bits ({INT16_MIN}..{INT16_MAX})"
        )


# =============================================================================
# Cell Types
# =============================================================================


@dataclass(frozen=True)
class Scalar:
    """A cell holding one signed 16-bit value."""

    value: int

    def __post_init__(self) -> None:
        _check_int16(self.value, "Value")

    def to_scalar(self) -> Scalar:
        return self

    def to_directional(self) -> Directional:
        """Broadcast the value to all four directions."""
        v = self.value
        return Directional(v, v, v, v)

    def facing(self, direction: Direction) -> int:
        return self.value


@dataclass(frozen=True)
class Directional:
    """A cell holding one signed 16-bit value per cardinal direction."""

    north: int
    east: int
    south: int
    west: int

    def __post_init__(self) -> None:
        for name in ("north", "east", "south", "west"):
            _check_int16(getattr(self, name), name.capitalize())

    def to_scalar(self) -> Scalar:
        """Collapse to the north value."""
        return Scalar(self.north)

    def to_directional(self) -> Directional:
        return self

    def facing(self, direction: Direction) -> int:
        match direction:
            case Direction.N:
                return self.north
            case Direction.E:
                return self.east
            case Direction.S:
                return self.south
            case Direction.W:
                return self.west
        raise ValueError(f"Unknown direction: {direction!r}")


Cell = Scalar | Directional


def as_cell(value: int | Cell) -> Cell:
    """Wrap a plain int in a Scalar; cells pass through unchanged."""
    if isinstance(value, (Scalar, Directional)):
        return value
    return Scalar(value)


# =============================================================================
# Legend
# =============================================================================


@dataclass(frozen=True)
class Color:
    """An RGB colour with 8-bit components."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            component = getattr(self, name)
            if not 0 <= component <= 255:
                raise InvalidNumber("Legend", f"Colour component {name}={component} not in 0..255")

    @classmethod
    def from_packed(cls, packed: int) -> Color:
        """Unpack the low 24 bits: R in bits 16-23, G in 8-15, B in 0-7."""
        return cls((packed >> 16) & 255, (packed >> 8) & 255, packed & 255)

    @property
    def packed(self) -> int:
        return (self.r << 16) | (self.g << 8) | self.b

    @classmethod
    def from_hex(cls, text: str) -> Color:
        if len(text) != 6 or any(ch not in "0123456789abcdefABCDEF" for ch in text):
            raise InvalidNumber("Legend", f"'{text}' is not an RRGGBB colour")
        return cls(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))

    @property
    def hex(self) -> str:
        return f"{self.r:02X}{self.g:02X}{self.b:02X}"

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


Legend = dict[int, Color]


def default_legend() -> Legend:
    """Return a fresh copy of the ten-entry default legend (keys 0-9)."""
    return {
        0: Color(0, 0, 0),
        1: Color(127, 127, 127),
        2: Color(255, 255, 255),
        3: Color(255, 0, 0),
        4: Color(255, 127, 0),
        5: Color(255, 255, 0),
        6: Color(0, 255, 0),
        7: Color(0, 0, 255),
        8: Color(127, 0, 255),
        9: Color(255, 0, 255),
    }


# =============================================================================
# Grid
# =============================================================================


@dataclass
class Grid:
    """
    A width x height grid with one or more layers of cells.

    Each layer is a flat row-major list: the cell at (x, y) lives at index
    y * width + x. All layers have exactly width * height cells.
    """

    width: int
    height: int
    layers: list[list[Cell]]
    legend: Legend = field(default_factory=default_legend)

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise InvalidNumber(
                "Dimensions", f"Dimensions must be positive, got {self.width}x{self.height}"
            )
        if not self.layers:
            raise CountMismatch("Layers", 1, 0, "Grid needs at least one layer")
        expected = self.width * self.height
        for layer_idx, layer in enumerate(self.layers):
            if len(layer) != expected:
                raise CountMismatch(f"Layer {layer_idx}", expected, len(layer))
            for index, cell in enumerate(layer):
                if not isinstance(cell, (Scalar, Directional)):
                    layer[index] = as_cell(cell)
        self.legend = dict(sorted(self.legend.items()))

    @classmethod
    def default(cls) -> Grid:
        """An 8x8 single-layer grid filled with Scalar(1)."""
        return cls.filled(8, 8, 1)

    @classmethod
    def filled(cls, width: int, height: int, fill: int | Cell = 0, layer_count: int = 1) -> Grid:
        cell = as_cell(fill)
        return cls(width, height, [[cell] * (width * height) for _ in range(layer_count)])

    @classmethod
    def from_values(
        cls, width: int, height: int, values: list[int], legend: Legend | None = None
    ) -> Grid:
        """Build a single-layer grid of scalars from a flat row-major list."""
        layer: list[Cell] = [Scalar(v) for v in values]
        if legend is None:
            return cls(width, height, [layer])
        return cls(width, height, [layer], dict(legend))

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def coordinate_to_index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfRange(
                "Coordinates", f"({x}, {y}) outside {self.width}x{self.height} grid"
            )
        return y * self.width + x

    def index_to_coordinate(self, index: int) -> tuple[int, int]:
        if not 0 <= index < self.cell_count:
            raise OutOfRange("Index", f"{index} outside 0..{self.cell_count - 1}")
        return (index % self.width, index // self.width)

    def _layer(self, layer: int) -> list[Cell]:
        if not 0 <= layer < len(self.layers):
            raise OutOfRange("Layer", f"{layer} outside 0..{len(self.layers) - 1}")
        return self.layers[layer]

    def get(self, x: int, y: int, layer: int = 0) -> Cell:
        cells = self._layer(layer)
        return cells[self.coordinate_to_index(x, y)]

    def set(self, x: int, y: int, cell: int | Cell, layer: int = 0) -> None:
        cells = self._layer(layer)
        cells[self.coordinate_to_index(x, y)] = as_cell(cell)

    def scalars(self, layer: int = 0) -> list[int]:
        """The layer projected to plain ints (directional cells give north)."""
        return [cell.to_scalar().value for cell in self._layer(layer)]

    def rows(self, layer: int = 0) -> Iterator[list[Cell]]:
        cells = self._layer(layer)
        for start in range(0, len(cells), self.width):
            yield cells[start : start + self.width]
