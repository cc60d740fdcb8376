from pyearcut.geometry import signed_area
from pyearcut.polygon import NodePool, area, equals
from pyearcut.utils import NIL, FlatBuffer


def linked_list(
    pool: NodePool,
    data: FlatBuffer,
    start: int,
    end: int,
    dim: int,
    clockwise: bool,
) -> int:
    """
    Build a circular doubly-linked ring from the vertex range [start, end).

    The vertices are inserted forward or backward so that the ring winds in
    the requested direction. A closing vertex repeating the first one is
    unlinked.

    :param pool: node arena receiving the new nodes
    :param data: flat coordinate buffer
    :param start: first vertex number of the ring
    :param end: vertex number one past the last vertex of the ring
    :param dim: interleave stride of ``data``
    :param clockwise: requested winding
    :return: handle of the last inserted node, or NIL for an empty range
    """
    last = NIL
    if clockwise == (signed_area(data, start, end, dim) > 0):
        order = range(start, end)
    else:
        order = range(end - 1, start - 1, -1)

    for i in order:
        last = pool.insert_node(i, data[i * dim], data[i * dim + 1], last)

    if last != NIL and equals(pool, last, pool.next[last]):
        pool.remove_node(last)
        last = pool.next[last]

    return int(last)


def filter_points(pool: NodePool, start: int, end: int = NIL) -> int:
    """
    Eliminate duplicate and collinear points from a ring.

    Removal restarts from the previous node, so a single call leaves a ring
    in which no non-Steiner vertex repeats its successor or is collinear
    with its neighbors.

    :return: a node of the filtered ring, or NIL if the ring collapsed
    """
    if start == NIL:
        return NIL
    if end == NIL:
        end = start

    p = start
    while True:
        again = False
        if not pool.steiner[p] and (
            equals(pool, p, pool.next[p])
            or area(pool, pool.prev[p], p, pool.next[p]) == 0
        ):
            pool.remove_node(p)
            p = end = pool.prev[p]
            if p == pool.next[p]:
                return NIL
            again = True
        else:
            p = pool.next[p]

        if not again and p == end:
            break

    return int(end)


def split_polygon(pool: NodePool, a: int, b: int) -> int:
    """
    Link two nodes with a bridge.

    If a and b belong to the same ring, the ring is split in two along the
    diagonal a-b: ``a -> b -> ...`` and ``b2 -> a2 -> ...`` where a2 and b2 are
    copies of a and b. If they belong to different rings (outer ring and a
    hole), both are merged into a single ring.

    :return: handle of b2
    """
    a2 = pool.new_node(pool.index[a], pool.x[a], pool.y[a])
    b2 = pool.new_node(pool.index[b], pool.x[b], pool.y[b])
    an = pool.next[a]
    bp = pool.prev[b]

    pool.next[a] = b
    pool.prev[b] = a

    pool.next[a2] = an
    pool.prev[an] = a2

    pool.next[b2] = a2
    pool.prev[a2] = b2

    pool.next[bp] = b2
    pool.prev[b2] = bp

    return b2


def get_leftmost(pool: NodePool, start: int) -> int:
    """Find the leftmost node of a ring; the first one wins on ties."""
    leftmost = start
    for p in pool.ring(start):
        if pool.x[p] < pool.x[leftmost]:
            leftmost = p
    return leftmost
