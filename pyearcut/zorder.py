from dataclasses import dataclass
from typing import Optional, Self

from pyearcut.polygon import NodePool
from pyearcut.utils import NIL, Z_ORDER_RANGE, FlatBuffer


@dataclass(frozen=True)
class ZOrderBounds:
    """Transform from polygon coordinates into the z-order integer grid."""

    min_x: float
    min_y: float
    inv_size: float

    @classmethod
    def from_outer_ring(
        cls, data: FlatBuffer, outer_len: int, dim: int
    ) -> Optional[Self]:
        """
        Compute the bounds from the bbox of the outer ring.

        :param data: flat coordinate buffer
        :param outer_len: number of vertices of the outer ring
        :param dim: interleave stride of ``data``
        :return: the bounds, or None when the bbox has no extent
        """
        pts = data[: outer_len * dim].reshape(-1, dim)
        if len(pts) == 0:
            return None
        min_x, min_y = pts[:, 0].min(), pts[:, 1].min()
        max_x, max_y = pts[:, 0].max(), pts[:, 1].max()
        size = max(max_x - min_x, max_y - min_y)
        if size == 0:
            return None
        return cls(float(min_x), float(min_y), Z_ORDER_RANGE / float(size))

    def code(self, x: float, y: float) -> int:
        return z_order(x, y, self.min_x, self.min_y, self.inv_size)


def z_order(x: float, y: float, min_x: float, min_y: float, inv_size: float) -> int:
    """
    Morton code of a point.

    Coordinates are shifted by (min_x, min_y), scaled by ``inv_size`` into a
    non-negative 15-bit range and their bits interleaved (x on even bits).
    """
    lx = int((x - min_x) * inv_size)
    ly = int((y - min_y) * inv_size)

    lx = (lx | (lx << 8)) & 0x00FF00FF
    lx = (lx | (lx << 4)) & 0x0F0F0F0F
    lx = (lx | (lx << 2)) & 0x33333333
    lx = (lx | (lx << 1)) & 0x55555555

    ly = (ly | (ly << 8)) & 0x00FF00FF
    ly = (ly | (ly << 4)) & 0x0F0F0F0F
    ly = (ly | (ly << 2)) & 0x33333333
    ly = (ly | (ly << 1)) & 0x55555555

    return lx | (ly << 1)


def index_curve(pool: NodePool, start: int, bounds: ZOrderBounds) -> int:
    """
    Interlink the nodes of a ring in z-order.

    :return: head of the sorted z-order list
    """
    p = start
    while True:
        if not pool.has_z[p]:
            pool.z[p] = bounds.code(pool.x[p], pool.y[p])
            pool.has_z[p] = True
        pool.prev_z[p] = pool.prev[p]
        pool.next_z[p] = pool.next[p]
        p = pool.next[p]
        if p == start:
            break

    # cut the circular list open before p
    pool.next_z[pool.prev_z[p]] = NIL
    pool.prev_z[p] = NIL

    return sort_linked(pool, p)


def sort_linked(pool: NodePool, head: int) -> int:
    """
    Stable bottom-up merge sort of a z-order list.

    Simon Tatham's linked list merge sort: runs of ``in_size`` nodes are merged
    pairwise, doubling ``in_size`` until a single merge covers the list.
    """
    z = pool.z
    next_z = pool.next_z
    prev_z = pool.prev_z
    in_size = 1

    while True:
        p = head
        head = NIL
        tail = NIL
        num_merges = 0

        while p != NIL:
            num_merges += 1
            q = p
            p_size = 0
            for _ in range(in_size):
                p_size += 1
                q = next_z[q]
                if q == NIL:
                    break

            q_size = in_size

            while p_size > 0 or (q_size > 0 and q != NIL):
                if p_size != 0 and (q_size == 0 or q == NIL or z[p] <= z[q]):
                    e = p
                    p = next_z[p]
                    p_size -= 1
                else:
                    e = q
                    q = next_z[q]
                    q_size -= 1

                if tail != NIL:
                    next_z[tail] = e
                else:
                    head = e

                prev_z[e] = tail
                tail = e

            p = q

        next_z[tail] = NIL
        in_size *= 2

        if num_merges <= 1:
            return int(head)
