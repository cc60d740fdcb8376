import math
from collections.abc import Sequence

from loguru import logger

from pyearcut.geometry import point_in_triangle
from pyearcut.polygon import NodePool, locally_inside
from pyearcut.topology import filter_points, get_leftmost, linked_list, split_polygon
from pyearcut.utils import NIL, FlatBuffer


def eliminate_holes(
    pool: NodePool,
    data: FlatBuffer,
    hole_indices: Sequence[int],
    outer_node: int,
    dim: int,
) -> int:
    """
    Link every hole into the outer ring, producing a single ring without holes.

    Holes are merged from left to right, ordered by the x coordinate of their
    leftmost vertex.

    :param pool: node arena holding the outer ring
    :param data: flat coordinate buffer
    :param hole_indices: ascending vertex numbers where each hole starts
    :param outer_node: any node of the outer ring
    :param dim: interleave stride of ``data``
    :return: a node of the merged ring, or NIL if it degenerated
    """
    n_vertices = len(data) // dim
    queue = []
    for k, start in enumerate(hole_indices):
        end = hole_indices[k + 1] if k < len(hole_indices) - 1 else n_vertices
        ring = linked_list(pool, data, start, end, dim, clockwise=False)
        if ring == NIL:
            continue
        if ring == pool.next[ring]:
            pool.steiner[ring] = True
        queue.append(get_leftmost(pool, ring))

    # sorted() is stable: holes with the same leftmost x keep their input order
    queue = sorted(queue, key=lambda node: pool.x[node])

    for hole in queue:
        if not eliminate_hole(pool, hole, outer_node):
            logger.debug(
                f"No bridge found for hole anchored at vertex {pool.index[hole]}, skipping it"
            )
        outer_node = filter_points(pool, outer_node, pool.next[outer_node])
        if outer_node == NIL:
            logger.debug("Outer ring degenerated while merging holes")
            return NIL

    return outer_node


def eliminate_hole(pool: NodePool, hole: int, outer_node: int) -> bool:
    """
    Find a bridge between a hole and the outer ring and splice the hole in.

    :return: False if the hole could not be bridged and was left out
    """
    bridge = find_hole_bridge(pool, hole, outer_node)
    if bridge == NIL:
        return False

    b = split_polygon(pool, bridge, hole)
    filter_points(pool, b, pool.next[b])
    return True


def find_hole_bridge(pool: NodePool, hole: int, outer_node: int) -> int:
    """
    David Eberly's algorithm for finding a bridge between a hole and the outer ring.

    A ray is cast from the hole's leftmost point to the left; the nearest
    crossed edge gives a candidate endpoint. Ring vertices inside the triangle
    (hole point, ray intersection, candidate) would block the bridge, in which
    case the one with the smallest angle to the ray is picked instead.

    :param pool: node arena
    :param hole: leftmost node of the hole ring
    :param outer_node: any node of the outer ring
    :return: node of the outer ring to connect to, or NIL if none is visible
    """
    x, y = pool.x, pool.y
    hx, hy = x[hole], y[hole]
    qx = -math.inf
    m = NIL

    # find a segment intersected by the ray; its endpoint with lesser x is
    # the potential connection point
    p = outer_node
    while True:
        n = pool.next[p]
        if hy <= y[p] and hy >= y[n] and y[n] != y[p]:
            ix = x[p] + (hy - y[p]) * (x[n] - x[p]) / (y[n] - y[p])
            if hx >= ix > qx:
                qx = ix
                if ix == hx:
                    if hy == y[p]:
                        return p
                    if hy == y[n]:
                        return n
                m = p if x[p] < x[n] else n
        p = n
        if p == outer_node:
            break

    if m == NIL:
        return NIL

    if hx == qx:
        # hole touches the outer segment; pick its lower endpoint
        return pool.prev[m]

    stop = m
    mx, my = x[m], y[m]
    tan_min = math.inf

    # the triangle is (hole point, intersection, m) with a fixed orientation
    ax, cx = (hx, qx) if hy < my else (qx, hx)

    p = pool.next[m]
    while p != stop:
        if (
            hx >= x[p] >= mx
            and hx != x[p]
            and point_in_triangle(ax, hy, mx, my, cx, hy, x[p], y[p])
        ):
            tan = abs(hy - y[p]) / (hx - x[p])
            if (tan < tan_min or (tan == tan_min and x[p] > x[m])) and locally_inside(
                pool, p, hole
            ):
                m = p
                tan_min = tan
        p = pool.next[p]

    return m
