"""
ASCII rendering for IMF grids.

Draws one layer of a grid inside a box border. Each cell shows its scalar
value, coloured with the basic terminal colour closest to the legend entry for
that value.
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from grid_types import Color, Grid, Legend

__all__ = ["nearest_terminal_color", "render_grid"]

logger = logging.getLogger(__name__)

# Approximate RGB of the standard and bright ANSI foreground colours.
_TERMINAL_COLORS: list[tuple[tuple[int, int, int], Callable[[str], str]]] = [
    ((0, 0, 0), chalk.black),
    ((205, 0, 0), chalk.red),
    ((0, 205, 0), chalk.green),
    ((205, 205, 0), chalk.yellow),
    ((0, 0, 238), chalk.blue),
    ((205, 0, 205), chalk.magenta),
    ((0, 205, 205), chalk.cyan),
    ((229, 229, 229), chalk.white),
    ((255, 0, 0), chalk.redBright),
    ((0, 255, 0), chalk.greenBright),
    ((255, 255, 0), chalk.yellowBright),
    ((92, 92, 255), chalk.blueBright),
]


def nearest_terminal_color(color: Color) -> Callable[[str], str]:
    """
    Pick the terminal colour nearest to color (squared RGB distance).
    Ties go to the earlier palette entry.
    """
    best = _TERMINAL_COLORS[0][1]
    best_d = None
    for (pr, pg, pb), style in _TERMINAL_COLORS:
        d = (color.r - pr) ** 2 + (color.g - pg) ** 2 + (color.b - pb) ** 2
        if best_d is None or d < best_d:
            best_d = d
            best = style
    return best


def _color_fn(legend: Legend, enabled: bool) -> Callable[[int], Callable[[str], str]]:
    styles = {key: nearest_terminal_color(color) for key, color in legend.items()}

    def plain(s: str) -> str:
        return s

    def color_for(value: int) -> Callable[[str], str]:
        if not enabled:
            return plain
        return styles.get(value, plain)

    return color_for


def render_grid(grid: Grid, layer: int = 0, cell_width: int = 3, color: bool = True) -> str:
    """
    Render one layer of grid as a bordered block of text.

    Args:
        grid: The grid to render
        layer: Layer index to draw (default 0)
        cell_width: Characters per cell; wider values are truncated (default 3)
        color: Colour cells via the legend (default True)

    Returns:
        Rendered string, with ANSI colour codes when color is set
    """
    color_for = _color_fn(grid.legend, color)
    inner_width = grid.width * cell_width

    title = f" {grid.width}x{grid.height} layer {layer}/{grid.layer_count} "
    if len(title) <= inner_width:
        left = (inner_width - len(title)) // 2
        top = "┌" + "─" * left + title + "─" * (inner_width - left - len(title)) + "┐"
    else:
        top = "┌" + "─" * inner_width + "┐"

    lines = [top]
    for row in grid.rows(layer):
        parts = ["│"]
        for cell in row:
            value = cell.to_scalar().value
            text = str(value)[:cell_width].center(cell_width)
            parts.append(color_for(value)(text))
        parts.append("│")
        lines.append("".join(parts))
    lines.append("└" + "─" * inner_width + "┘")

    logger.debug("render_grid: %d rows, cell_width=%d", grid.height, cell_width)
    return "\n".join(lines)
