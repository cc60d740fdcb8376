"""Query functions for triangulation results."""

import math
from collections.abc import Sequence
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyearcut.geometry import is_collinear, signed_area


def _triangle_corners(
    vertices: ArrayLike, triangles: ArrayLike, dim: int
) -> tuple[NDArray[np.floating], NDArray[np.floating], NDArray[np.floating]]:
    coords = np.asarray(vertices, dtype=np.float64).reshape(-1, dim)[:, :2]
    tris = np.asarray(triangles, dtype=np.intp).reshape(-1, 3)
    return coords[tris[:, 0]], coords[tris[:, 1]], coords[tris[:, 2]]


def deviation(
    vertices: ArrayLike,
    hole_indices: Optional[Sequence[int]],
    dim: int,
    triangles: ArrayLike,
) -> float:
    """
    Relative difference between the polygon area and the area of its triangulation.

    Used to verify the correctness of a triangulation: a complete one gives 0
    up to floating point error.

    Parameters
    ----------
    vertices : ArrayLike
        Flat, dim-interleaved coordinate buffer passed to ``earcut``.
    hole_indices : Sequence[int] or None
        Vertex numbers where each hole starts.
    dim : int
        Interleave stride.
    triangles : ArrayLike
        Flat vertex numbers returned by ``earcut``.

    Returns
    -------
    float
        ``|triangles_area - polygon_area| / polygon_area``; 0 if both are zero,
        inf if only the polygon area is.
    """
    data = np.asarray(vertices, dtype=np.float64).ravel()
    holes = list(hole_indices) if hole_indices is not None else []
    n_vertices = len(data) // dim
    outer_len = holes[0] if holes else n_vertices

    polygon_area = abs(signed_area(data, 0, outer_len, dim))
    for k, start in enumerate(holes):
        end = holes[k + 1] if k < len(holes) - 1 else n_vertices
        polygon_area -= abs(signed_area(data, start, end, dim))

    a, b, c = _triangle_corners(data, triangles, dim)
    triangles_area = float(
        np.sum(
            np.abs(
                (a[:, 0] - c[:, 0]) * (b[:, 1] - a[:, 1])
                - (a[:, 0] - b[:, 0]) * (c[:, 1] - a[:, 1])
            )
        )
    )

    if polygon_area == 0:
        return 0.0 if triangles_area == 0 else math.inf
    return abs((triangles_area - polygon_area) / polygon_area)


def find_degenerate_triangles(
    vertices: ArrayLike, triangles: ArrayLike, dim: int = 2
) -> NDArray[np.intp]:
    """
    Find output triangles whose corners are exactly collinear.

    Uses Shewchuk's exact orientation predicate, so rounding cannot hide a
    zero-area sliver or report a spurious one.

    :return: numbers (positions in the triangle list) of the degenerate triangles
    """
    a, b, c = _triangle_corners(vertices, triangles, dim)
    degenerate = [
        k for k in range(len(a)) if is_collinear(a[k], b[k], c[k])
    ]
    return np.array(degenerate, dtype=np.intp)
