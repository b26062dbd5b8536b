#!/usr/bin/env python3
"""
Demo of reading and writing the IMF dialects.
"""

import logging

from ascii_render import render_grid
from grid_types import Directional
from imf import dump, load
from text_dialects import DialectOptions, LegendEncoding


def main() -> None:
    """Load one document per dialect and print each grid."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    # Example 1: Version 1 flat list
    print("Example 1: Version 1")
    print("-" * 40)
    grid1 = load("4\n3\n0,1,2,3,\n4,5,6,7,\n8,9,0,1,\n")
    print(render_grid(grid1))
    print()

    # Example 2: Version 2 with a custom legend
    print("Example 2: Version 2 with legend")
    print("-" * 40)
    grid2 = load("[v2]\n3,2;\n0(0)1(16711680)2(65280)\n[\n0,1,2,\n2,1,0,\n]\n")
    print(render_grid(grid2))
    print(dump(grid2, 2, DialectOptions(LegendEncoding.HEX)).decode("utf-8"))
    print()

    # Example 3: Version 3 binary with two layers
    print("Example 3: Version 3, two layers")
    print("-" * 40)
    grid3 = load(dump(grid1, 3))
    grid3.layers.append([cell.to_directional() for cell in grid3.layers[0]])
    grid3.set(0, 0, Directional(9, 8, 7, 6), layer=1)
    data = dump(grid3, 3)
    print(f"{len(data)} bytes")
    restored = load(data)
    for layer in range(restored.layer_count):
        print(render_grid(restored, layer))


if __name__ == "__main__":
    main()
