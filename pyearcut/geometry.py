import numpy as np
from shewchuk import orientation

from pyearcut.utils import FlatBuffer, Vec2d


def signed_area(data: FlatBuffer, start: int, end: int, dim: int) -> float:
    """
    Twice the signed area of the vertex range [start, end) of a flat buffer.

    Parameters
    ----------
    data : NDArray[np.floating]
        Flat, dim-interleaved coordinate buffer.
    start, end : int
        Half-open vertex range (vertex numbers, not component offsets).
    dim : int
        Interleave stride; only the first two components are used.

    Returns
    -------
    float
        Positive if the ring has to be inserted as-is to wind clockwise
        in the engine's convention, negative otherwise, 0 for empty ranges.
    """
    if end <= start:
        return 0.0
    pts = data[start * dim : end * dim].reshape(-1, dim)
    x, y = pts[:, 0], pts[:, 1]
    # j is the vertex preceding i (wrapping around)
    xj, yj = np.roll(x, 1), np.roll(y, 1)
    return float(np.sum((xj - x) * (y + yj)))


def orient(
    px: float, py: float, qx: float, qy: float, rx: float, ry: float
) -> float:
    """Signed area of the triangle (p, q, r); negative for a convex turn."""
    return (qy - py) * (rx - qx) - (qx - px) * (ry - qy)


def point_in_triangle(
    ax: float,
    ay: float,
    bx: float,
    by: float,
    cx: float,
    cy: float,
    px: float,
    py: float,
) -> bool:
    """Check if p lies within the convex triangle (a, b, c), boundary included."""
    return (
        (cx - px) * (ay - py) - (ax - px) * (cy - py) >= 0
        and (ax - px) * (by - py) - (bx - px) * (ay - py) >= 0
        and (bx - px) * (cy - py) - (cx - px) * (by - py) >= 0
    )


def segments_intersect(p1: Vec2d, q1: Vec2d, p2: Vec2d, q2: Vec2d) -> bool:
    """
    Check if segment [p1, q1] crosses segment [p2, q2].

    A segment traversed backwards ([p1, q1] == [q2, p2]) and a pair of
    segments that are each collapsed to a point count as intersecting.
    """
    if (p1[0] == q1[0] and p1[1] == q1[1] and p2[0] == q2[0] and p2[1] == q2[1]) or (
        p1[0] == q2[0] and p1[1] == q2[1] and p2[0] == q1[0] and p2[1] == q1[1]
    ):
        return True

    o1 = orient(*p1, *q1, *p2) > 0
    o2 = orient(*p1, *q1, *q2) > 0
    o3 = orient(*p2, *q2, *p1) > 0
    o4 = orient(*p2, *q2, *q1) > 0
    return o1 != o2 and o3 != o4


def is_collinear(a: Vec2d, b: Vec2d, c: Vec2d) -> bool:
    """Exact collinearity test based on Shewchuk's orientation predicate."""
    return orientation(a[0], a[1], b[0], b[1], c[0], c[1]) == 0
