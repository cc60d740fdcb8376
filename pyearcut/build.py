from collections.abc import Sequence
from enum import Enum, auto
from typing import Optional

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike, NDArray

from pyearcut.holes import eliminate_holes
from pyearcut.polygon import (
    NodePool,
    area,
    equals,
    intersects,
    is_valid_diagonal,
    locally_inside,
    node_in_triangle,
)
from pyearcut.topology import filter_points, linked_list, split_polygon
from pyearcut.utils import HASH_THRESHOLD, NIL
from pyearcut.zorder import ZOrderBounds, index_curve, z_order


class EarcutPass(Enum):
    initial = auto()
    filtered = auto()
    cured = auto()
    split = auto()


def _validate_input(
    data: NDArray[np.floating], hole_indices: list[int], dim: int
) -> None:
    if dim < 2:
        raise ValueError(f"dim must be at least 2, got {dim}")
    if len(data) % dim != 0:
        raise ValueError(
            f"Vertex buffer of length {len(data)} is not a multiple of dim={dim}"
        )
    n_vertices = len(data) // dim
    previous = 0
    for start in hole_indices:
        if start < previous or start > n_vertices:
            raise ValueError(
                f"Hole indices must be ascending and within [0, {n_vertices}], got {hole_indices}"
            )
        previous = start


def earcut(
    vertices: ArrayLike,
    hole_indices: Optional[Sequence[int]] = None,
    dim: int = 2,
    debug: bool = False,
) -> NDArray[np.intp]:
    """
    Triangulate a polygon, possibly with holes, by ear slicing.

    :param vertices: flat, dim-interleaved coordinates; the outer ring first,
        followed by the holes
    :param hole_indices: ascending vertex numbers where each hole starts;
        None or empty means the whole buffer is the outer ring
    :param dim: interleave stride; only the first two components are used
    :param debug: plot the remaining ring every time ear slicing stalls
    :return: flat array of vertex numbers, three per triangle
    """
    data = np.asarray(vertices, dtype=np.float64).ravel()
    holes = [int(h) for h in hole_indices] if hole_indices is not None else []
    _validate_input(data, holes, dim)

    n_vertices = len(data) // dim
    outer_len = holes[0] if holes else n_vertices
    triangles: list[int] = []

    # every bridge or split adds two nodes; the pool grows if that is not enough
    pool = NodePool.with_capacity(2 * n_vertices + 2 * len(holes) + 4)
    outer_node = linked_list(pool, data, 0, outer_len, dim, clockwise=True)
    if outer_node == NIL or pool.next[outer_node] == pool.prev[outer_node]:
        logger.debug("Outer ring has fewer than 3 vertices, nothing to triangulate")
        return np.array(triangles, dtype=np.intp)

    if holes:
        outer_node = eliminate_holes(pool, data, holes, outer_node, dim)

    # if the shape is not too simple, use a z-order curve hash for ear tests
    bounds = None
    if len(data) > HASH_THRESHOLD * dim:
        bounds = ZOrderBounds.from_outer_ring(data, outer_len, dim)

    logger.debug(
        f"Triangulating {n_vertices} vertices with {len(holes)} holes (z-order hashing: {bounds is not None})"
    )
    earcut_linked(pool, outer_node, triangles, bounds, debug=debug)
    logger.debug(f"Produced {len(triangles) // 3} triangles using {len(pool)} nodes")

    return np.array(triangles, dtype=np.intp)


def earcut_linked(
    pool: NodePool,
    ear: int,
    triangles: list[int],
    bounds: Optional[ZOrderBounds] = None,
    debug: bool = False,
) -> None:
    """
    Main ear slicing loop, triangulating a ring and appending to ``triangles``.

    Whenever a full loop around the ring finds no ear, the remainder is queued
    again with the next, more aggressive pass:
    filtered (drop degenerate points), cured (clip local self-intersections),
    split (cut along a valid diagonal and restart on both halves).
    Pending rings are kept on an explicit stack so that the emission order is
    the same as a depth-first recursion.
    """
    stack: list[tuple[int, EarcutPass]] = [(ear, EarcutPass.initial)]

    while stack:
        ear, stage = stack.pop()
        if ear == NIL:
            continue

        if stage is EarcutPass.split:
            halves = split_earcut(pool, ear)
            # the first half is popped first
            stack.extend((half, EarcutPass.initial) for half in reversed(halves))
            continue

        if stage is EarcutPass.initial and bounds is not None:
            index_curve(pool, ear, bounds)

        stop = ear
        while pool.prev[ear] != pool.next[ear]:
            prev = pool.prev[ear]
            nxt = pool.next[ear]

            found = (
                is_ear_hashed(pool, ear, bounds)
                if bounds is not None
                else is_ear(pool, ear)
            )
            if found:
                triangles.extend(
                    (int(pool.index[prev]), int(pool.index[ear]), int(pool.index[nxt]))
                )
                pool.remove_node(ear)

                # skipping the next vertex leads to less sliver triangles
                ear = stop = pool.next[nxt]
                continue

            ear = nxt

            # looped through the whole remaining ring without finding an ear
            if ear == stop:
                if debug:
                    pool.plot(ear, show=True, title=f"No ear found ({stage.name})")

                if stage is EarcutPass.initial:
                    logger.trace("Ear slicing stalled, filtering degenerate points")
                    stack.append((filter_points(pool, ear), EarcutPass.filtered))
                elif stage is EarcutPass.filtered:
                    logger.trace("Ear slicing stalled, curing local self-intersections")
                    ear = cure_local_intersections(pool, ear, triangles)
                    stack.append((ear, EarcutPass.cured))
                elif stage is EarcutPass.cured:
                    logger.trace("Ear slicing stalled, splitting the ring in two")
                    stack.append((ear, EarcutPass.split))
                break


def is_ear(pool: NodePool, ear: int) -> bool:
    """Check whether a node forms a valid ear with its neighbors."""
    a = pool.prev[ear]
    c = pool.next[ear]

    if area(pool, a, ear, c) >= 0:
        return False  # reflex, can't be an ear

    # make sure no other reflex point lies inside the potential ear
    p = pool.next[c]
    while p != a:
        if (
            node_in_triangle(pool, a, ear, c, p)
            and area(pool, pool.prev[p], p, pool.next[p]) >= 0
        ):
            return False
        p = pool.next[p]

    return True


def is_ear_hashed(pool: NodePool, ear: int, bounds: ZOrderBounds) -> bool:
    """Ear test restricted to the nodes within the z-order range of the ear's bbox."""
    a = pool.prev[ear]
    c = pool.next[ear]

    if area(pool, a, ear, c) >= 0:
        return False  # reflex, can't be an ear

    x, y = pool.x, pool.y
    min_tx = min(x[a], x[ear], x[c])
    min_ty = min(y[a], y[ear], y[c])
    max_tx = max(x[a], x[ear], x[c])
    max_ty = max(y[a], y[ear], y[c])

    min_z = z_order(min_tx, min_ty, bounds.min_x, bounds.min_y, bounds.inv_size)
    max_z = z_order(max_tx, max_ty, bounds.min_x, bounds.min_y, bounds.inv_size)

    def blocks(p: int) -> bool:
        return (
            p != a
            and p != c
            and node_in_triangle(pool, a, ear, c, p)
            and area(pool, pool.prev[p], p, pool.next[p]) >= 0
        )

    # first look for points inside the triangle in increasing z-order
    p = pool.next_z[ear]
    while p != NIL and pool.z[p] <= max_z:
        if blocks(p):
            return False
        p = pool.next_z[p]

    # then in decreasing z-order
    p = pool.prev_z[ear]
    while p != NIL and pool.z[p] >= min_z:
        if blocks(p):
            return False
        p = pool.prev_z[p]

    return True


def cure_local_intersections(pool: NodePool, start: int, triangles: list[int]) -> int:
    """
    Go through all nodes and cure small local self-intersections.

    Where the edge before p and the edge after p.next cross (a bowtie), the
    triangle (p.prev, p, p.next.next) is emitted and p and p.next are removed.
    """
    p = start
    while True:
        a = pool.prev[p]
        b = pool.next[pool.next[p]]

        if (
            not equals(pool, a, b)
            and intersects(pool, a, p, pool.next[p], b)
            and locally_inside(pool, a, b)
            and locally_inside(pool, b, a)
        ):
            triangles.extend(
                (int(pool.index[a]), int(pool.index[p]), int(pool.index[b]))
            )

            # remove the two nodes involved
            pool.remove_node(p)
            pool.remove_node(pool.next[p])

            p = start = b

        p = pool.next[p]
        if p == start:
            return int(p)


def split_earcut(pool: NodePool, start: int) -> list[int]:
    """
    Look for a valid diagonal and split the ring in two along it.

    :return: a node of each filtered half, or an empty list if the ring has
        no valid diagonal (the remainder is then left untriangulated)
    """
    a = start
    while True:
        b = pool.next[pool.next[a]]
        while b != pool.prev[a]:
            if pool.index[a] != pool.index[b] and is_valid_diagonal(pool, a, b):
                c = split_polygon(pool, a, b)

                # filter collinear points around the cuts
                a = filter_points(pool, a, pool.next[a])
                c = filter_points(pool, c, pool.next[c])
                return [a, c]
            b = pool.next[b]

        a = pool.next[a]
        if a == start:
            break

    logger.debug(
        f"No valid diagonal found, dropping a ring of {len(list(pool.ring(start)))} nodes"
    )
    return []
