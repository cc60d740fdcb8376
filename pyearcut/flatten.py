from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass
class Flattened:
    """Flat vertex buffer plus the vertex numbers where each hole starts."""

    vertices: NDArray[np.float64]
    holes: NDArray[np.intp]
    dimensions: int


def flatten(rings: Sequence[ArrayLike], dim: Optional[int] = None) -> Flattened:
    """
    Flatten a list of rings into the input format of ``earcut``.

    Parameters
    ----------
    rings : Sequence[ArrayLike]
        Rings of points, the outer ring first and the holes after it. Each ring
        is a sequence of points with ``dim`` components.
    dim : int, optional
        Number of components per point. Defaults to the length of the first point.

    Returns
    -------
    Flattened
        The concatenated coordinates and, for every hole, the vertex number
        (not the component offset) at which it begins.
    """
    arrays = [np.asarray(ring, dtype=np.float64) for ring in rings]
    if dim is None:
        dim = next((arr.shape[-1] for arr in arrays if arr.size), 2)

    points = []
    for k, arr in enumerate(arrays):
        if arr.size == 0:
            points.append(np.empty((0, dim), dtype=np.float64))
            continue
        if arr.ndim != 2 or arr.shape[1] != dim:
            raise ValueError(
                f"Ring {k} has points of shape {arr.shape[1:]}, expected ({dim},)"
            )
        points.append(arr)

    lengths = np.array([len(p) for p in points], dtype=np.intp)
    holes = np.cumsum(lengths)[:-1].astype(np.intp)
    vertices = (
        np.concatenate(points).ravel() if points else np.empty(0, dtype=np.float64)
    )
    return Flattened(vertices=vertices, holes=holes, dimensions=dim)
