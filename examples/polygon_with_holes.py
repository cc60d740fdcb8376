"""Example: Triangulate a polygon with holes.

This example flattens an outer ring and two holes into the flat input format,
triangulates it and checks the result against the polygon area.
"""

import numpy as np

from pyearcut.build import earcut
from pyearcut.debug_utils import plot_triangulation
from pyearcut.flatten import flatten
from pyearcut.query import deviation, find_degenerate_triangles


def main():
    """Example: Square with two square holes."""
    print("\n" + "=" * 70)
    print("POLYGON WITH HOLES EXAMPLE")
    print("=" * 70 + "\n")

    outer = [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0]]
    holes = [
        [[1.0, 1.0], [4.0, 1.0], [4.0, 4.0], [1.0, 4.0]],
        [[6.0, 5.0], [9.0, 6.0], [7.0, 9.0]],
    ]

    flat = flatten([outer, *holes])
    print(f"Number of vertices: {len(flat.vertices) // flat.dimensions}")
    print(f"  Hole indices: {flat.holes.tolist()}")

    triangles = earcut(flat.vertices, flat.holes, flat.dimensions)
    print(f"\nNumber of triangles: {len(triangles) // 3}")

    err = deviation(flat.vertices, flat.holes, flat.dimensions, triangles)
    print(f"  Area deviation: {err:.3e}")

    degenerate = find_degenerate_triangles(flat.vertices, triangles, flat.dimensions)
    print(f"  Degenerate triangles: {degenerate.tolist()}")

    print("\nPlotting triangulation...")
    plot_triangulation(
        flat.vertices,
        triangles,
        dim=flat.dimensions,
        holes=flat.holes,
        title="Square With Two Holes",
        point_labels=True,
        fontsize=8,
        show=True,
    )

    print("\n" + "=" * 70)
    print("EXAMPLE COMPLETED")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    main()
