"""Tests for grid_types module."""

import pytest

from grid_types import (
    Color,
    Direction,
    Directional,
    Grid,
    Scalar,
    as_cell,
    default_legend,
)
from imf_errors import CountMismatch, InvalidNumber, OutOfRange


class TestCells:
    """Tests for the scalar and directional cell variants."""

    def test_scalar_to_directional_broadcasts(self) -> None:
        """A scalar seen as directional has its value on every side."""
        assert Scalar(7).to_directional() == Directional(7, 7, 7, 7)

    def test_directional_to_scalar_takes_north(self) -> None:
        """A directional cell collapses to its north value."""
        assert Directional(1, 2, 3, 4).to_scalar() == Scalar(1)

    def test_projections_are_identity_on_own_variant(self) -> None:
        """Projecting to the cell's own variant returns it unchanged."""
        cell = Directional(1, 2, 3, 4)
        assert cell.to_directional() is cell
        scalar = Scalar(5)
        assert scalar.to_scalar() is scalar

    def test_facing(self) -> None:
        """facing() reads the value for each direction."""
        cell = Directional(1, 2, 3, 4)
        assert [cell.facing(d) for d in (Direction.N, Direction.E, Direction.S, Direction.W)] == [
            1,
            2,
            3,
            4,
        ]
        assert Scalar(9).facing(Direction.W) == 9

    def test_int16_bounds(self) -> None:
        """Values must fit in a signed 16-bit integer."""
        assert Scalar(-32768).value == -32768
        assert Scalar(32767).value == 32767
        with pytest.raises(InvalidNumber, match="16 bits"):
            Scalar(32768)
        with pytest.raises(InvalidNumber, match="West"):
            Directional(0, 0, 0, -32769)

    def test_as_cell(self) -> None:
        """Ints are wrapped; cells pass through."""
        assert as_cell(3) == Scalar(3)
        cell = Directional(1, 1, 1, 1)
        assert as_cell(cell) is cell


class TestColorAndLegend:
    """Tests for colours and the default legend."""

    def test_default_legend(self) -> None:
        """Default legend has keys 0-9 with the documented colours."""
        legend = default_legend()
        assert list(legend) == list(range(10))
        assert legend[0] == Color(0, 0, 0)
        assert legend[1] == Color(127, 127, 127)
        assert legend[2] == Color(255, 255, 255)
        assert legend[3] == Color(255, 0, 0)
        assert legend[4] == Color(255, 127, 0)
        assert legend[5] == Color(255, 255, 0)
        assert legend[6] == Color(0, 255, 0)
        assert legend[7] == Color(0, 0, 255)
        assert legend[8] == Color(127, 0, 255)
        assert legend[9] == Color(255, 0, 255)

    def test_default_legend_is_fresh_copy(self) -> None:
        """Mutating one default legend does not affect the next."""
        legend = default_legend()
        legend[0] = Color(1, 2, 3)
        assert default_legend()[0] == Color(0, 0, 0)

    def test_packed(self) -> None:
        """Packed colours keep R in bits 16-23 and ignore higher bits."""
        assert Color.from_packed(0xFF7F00) == Color(255, 127, 0)
        assert Color.from_packed(0x01FF0000) == Color(255, 0, 0)
        assert Color(255, 127, 0).packed == 0xFF7F00

    def test_hex(self) -> None:
        """Hex colours read either case and write upper case."""
        assert Color.from_hex("ff7f00") == Color(255, 127, 0)
        assert Color(255, 127, 0).hex == "FF7F00"

    def test_bad_hex(self) -> None:
        """Hex colours must be exactly six hex digits."""
        with pytest.raises(InvalidNumber, match="RRGGBB"):
            Color.from_hex("FF7F0")
        with pytest.raises(InvalidNumber, match="RRGGBB"):
            Color.from_hex("GG0000")


class TestGrid:
    """Tests for the Grid model."""

    def test_default_grid(self) -> None:
        """Default grid is 8x8, one layer, filled with 1."""
        grid = Grid.default()
        assert (grid.width, grid.height, grid.layer_count) == (8, 8, 1)
        assert all(cell == Scalar(1) for cell in grid.layers[0])
        assert grid.legend == default_legend()

    def test_layer_length_validated(self) -> None:
        """Every layer must hold width * height cells."""
        with pytest.raises(CountMismatch, match="Too few"):
            Grid(2, 2, [[Scalar(0)] * 3])
        with pytest.raises(CountMismatch, match="Too many"):
            Grid(2, 2, [[Scalar(0)] * 4, [Scalar(0)] * 5])

    def test_dimensions_must_be_positive(self) -> None:
        """Zero-sized grids are rejected."""
        with pytest.raises(InvalidNumber, match="positive"):
            Grid(0, 2, [[]])

    def test_plain_ints_wrapped_as_scalars(self) -> None:
        """Layer entries given as ints become Scalar cells at construction."""
        grid = Grid(1, 2, [[5, Directional(1, 2, 3, 4)]])
        assert grid.layers[0] == [Scalar(5), Directional(1, 2, 3, 4)]

    def test_non_cell_entries_rejected(self) -> None:
        """Entries that are neither cells nor ints fail at construction."""
        with pytest.raises(InvalidNumber, match="not an integer"):
            Grid(1, 1, [["x"]])

    def test_needs_a_layer(self) -> None:
        """A grid without layers is rejected."""
        with pytest.raises(CountMismatch):
            Grid(1, 1, [])

    def test_get_and_set(self) -> None:
        """Cells are read and written by (x, y)."""
        grid = Grid.from_values(2, 2, [1, 2, 3, 4])
        assert grid.get(1, 0) == Scalar(2)
        assert grid.get(0, 1) == Scalar(3)

        grid.set(1, 1, 9)
        assert grid.get(1, 1) == Scalar(9)
        grid.set(0, 0, Directional(1, 2, 3, 4))
        assert grid.get(0, 0) == Directional(1, 2, 3, 4)

    def test_get_other_layer(self) -> None:
        """The layer argument selects the layer."""
        grid = Grid(1, 1, [[Scalar(1)], [Scalar(2)]])
        assert grid.get(0, 0, 1) == Scalar(2)
        grid.set(0, 0, 5, layer=1)
        assert grid.layers[1] == [Scalar(5)]
        assert grid.layers[0] == [Scalar(1)]

    def test_out_of_range(self) -> None:
        """Out-of-range coordinates and layers raise OutOfRange."""
        grid = Grid.filled(3, 2)
        for x, y in [(-1, 0), (0, -1), (3, 0), (0, 2)]:
            with pytest.raises(OutOfRange):
                grid.get(x, y)
        with pytest.raises(OutOfRange, match="Layer"):
            grid.get(0, 0, 1)
        with pytest.raises(OutOfRange):
            grid.set(0, 2, 1)

    def test_x_equal_to_width_is_out_of_range(self) -> None:
        """The column one past the edge is not readable."""
        grid = Grid.from_values(2, 2, [1, 2, 3, 4])
        with pytest.raises(OutOfRange):
            grid.coordinate_to_index(2, 0)
        with pytest.raises(OutOfRange):
            grid.get(2, 1)

    def test_out_of_range_is_index_error(self) -> None:
        """Callers can treat accessor misuse as an IndexError."""
        with pytest.raises(IndexError):
            Grid.filled(1, 1).get(1, 0)

    @pytest.mark.parametrize("width,height", [(1, 1), (1, 5), (5, 1), (3, 4), (7, 2)])
    def test_index_coordinate_bijection(self, width: int, height: int) -> None:
        """coordinate_to_index and index_to_coordinate are inverses."""
        grid = Grid.filled(width, height)
        for index in range(width * height):
            x, y = grid.index_to_coordinate(index)
            assert grid.coordinate_to_index(x, y) == index
        for y in range(height):
            for x in range(width):
                assert grid.index_to_coordinate(grid.coordinate_to_index(x, y)) == (x, y)

    def test_index_out_of_range(self) -> None:
        """Indices outside the grid raise OutOfRange."""
        grid = Grid.filled(2, 2)
        with pytest.raises(OutOfRange):
            grid.index_to_coordinate(4)
        with pytest.raises(OutOfRange):
            grid.index_to_coordinate(-1)

    def test_scalars_and_rows(self) -> None:
        """scalars() projects to ints and rows() slices by width."""
        grid = Grid.from_values(3, 2, [1, 2, 3, 4, 5, 6])
        grid.set(0, 0, Directional(8, 0, 0, 0))
        assert grid.scalars() == [8, 2, 3, 4, 5, 6]
        assert [[c.to_scalar().value for c in row] for row in grid.rows()] == [[8, 2, 3], [4, 5, 6]]

    def test_filled_layers_are_independent(self) -> None:
        """Layers built by filled() do not share storage."""
        grid = Grid.filled(2, 2, 0, layer_count=2)
        grid.set(0, 0, 1)
        assert grid.get(0, 0, 1) == Scalar(0)

    def test_equality(self) -> None:
        """Grids compare by structure."""
        assert Grid.from_values(2, 1, [1, 2]) == Grid.from_values(2, 1, [1, 2])
        assert Grid.from_values(2, 1, [1, 2]) != Grid.from_values(1, 2, [1, 2])
