from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Self

import numpy as np
from numpy.typing import NDArray

from pyearcut.geometry import orient, point_in_triangle, segments_intersect
from pyearcut.utils import NIL


@dataclass
class NodePool:
    """
    Arena of polygon vertex nodes addressed by integer handles.

    Every ring is a circular doubly-linked list threaded through ``prev`` and
    ``next``. While a z-order index is active, ``prev_z`` and ``next_z`` thread
    a second, non-circular list through the same nodes. Nodes are only ever
    unlinked, never freed: the whole pool is dropped at the end of a call.
    """

    index: NDArray[np.intp]
    x: NDArray[np.floating]
    y: NDArray[np.floating]
    z: NDArray[np.int64]
    has_z: NDArray[np.bool_]
    steiner: NDArray[np.bool_]
    prev: NDArray[np.intp]
    next: NDArray[np.intp]
    prev_z: NDArray[np.intp]
    next_z: NDArray[np.intp]
    size: int = 0
    debug_plots: list[NDArray[np.uint8]] = field(default_factory=list)

    @classmethod
    def with_capacity(cls, capacity: int) -> Self:
        capacity = max(capacity, 1)
        return cls(
            index=np.zeros(capacity, dtype=np.intp),
            x=np.zeros(capacity, dtype=np.float64),
            y=np.zeros(capacity, dtype=np.float64),
            z=np.zeros(capacity, dtype=np.int64),
            has_z=np.zeros(capacity, dtype=bool),
            steiner=np.zeros(capacity, dtype=bool),
            prev=np.full(capacity, NIL, dtype=np.intp),
            next=np.full(capacity, NIL, dtype=np.intp),
            prev_z=np.full(capacity, NIL, dtype=np.intp),
            next_z=np.full(capacity, NIL, dtype=np.intp),
        )

    def __len__(self) -> int:
        return self.size

    @property
    def capacity(self) -> int:
        return len(self.index)

    def _grow(self) -> None:
        extra = self.capacity
        self.index = np.concatenate((self.index, np.zeros(extra, dtype=np.intp)))
        self.x = np.concatenate((self.x, np.zeros(extra, dtype=np.float64)))
        self.y = np.concatenate((self.y, np.zeros(extra, dtype=np.float64)))
        self.z = np.concatenate((self.z, np.zeros(extra, dtype=np.int64)))
        self.has_z = np.concatenate((self.has_z, np.zeros(extra, dtype=bool)))
        self.steiner = np.concatenate((self.steiner, np.zeros(extra, dtype=bool)))
        self.prev = np.concatenate((self.prev, np.full(extra, NIL, dtype=np.intp)))
        self.next = np.concatenate((self.next, np.full(extra, NIL, dtype=np.intp)))
        self.prev_z = np.concatenate(
            (self.prev_z, np.full(extra, NIL, dtype=np.intp))
        )
        self.next_z = np.concatenate(
            (self.next_z, np.full(extra, NIL, dtype=np.intp))
        )

    def new_node(self, i: int, x: float, y: float) -> int:
        """Allocate a node forming a ring of its own and return its handle."""
        if self.size == self.capacity:
            self._grow()
        p = self.size
        self.size += 1
        self.index[p] = i
        self.x[p] = x
        self.y[p] = y
        self.prev[p] = p
        self.next[p] = p
        return p

    def insert_node(self, i: int, x: float, y: float, last: int = NIL) -> int:
        """Create a node and link it right after ``last`` (if any)."""
        p = self.new_node(i, x, y)
        if last != NIL:
            nxt = self.next[last]
            self.next[p] = nxt
            self.prev[p] = last
            self.prev[nxt] = p
            self.next[last] = p
        return p

    def remove_node(self, p: int) -> None:
        """Unlink p from its ring and from the z-order list; p keeps its own links."""
        self.prev[self.next[p]] = self.prev[p]
        self.next[self.prev[p]] = self.next[p]

        if self.prev_z[p] != NIL:
            self.next_z[self.prev_z[p]] = self.next_z[p]
        if self.next_z[p] != NIL:
            self.prev_z[self.next_z[p]] = self.prev_z[p]

    def ring(self, start: int) -> Iterator[int]:
        """Iterate over the handles of the ring containing ``start``."""
        if start == NIL:
            return
        p = start
        while True:
            yield int(p)
            p = self.next[p]
            if p == start:
                break

    def ring_indices(self, start: int) -> list[int]:
        """Vertex numbers of the ring containing ``start``, in ring order."""
        return [int(self.index[p]) for p in self.ring(start)]

    def plot(
        self,
        start: int,
        show: bool = False,
        title: str = "Polygon ring",
        point_labels: bool = True,
        fontsize: int = 7,
    ) -> None:
        """
        Plot the ring containing ``start`` using matplotlib.

        :param start: any node of the ring to draw
        :param show: Whether to call plt.show() after plotting
        :param title: Title of the plot
        :param point_labels: Whether to label nodes with their vertex numbers
        :param fontsize: Font size for labels
        """
        import matplotlib.pyplot as plt

        nodes = list(self.ring(start))
        fig, ax = plt.subplots()
        if nodes:
            pts = np.column_stack((self.x[nodes], self.y[nodes]))
            closed = np.vstack([pts, pts[0]])
            ax.plot(closed[:, 0], closed[:, 1], "b-", linewidth=1.0, alpha=0.6)
            ax.plot(pts[:, 0], pts[:, 1], "ko", markersize=4, zorder=11)

            steiner = self.steiner[nodes]
            if steiner.any():
                ax.plot(pts[steiner, 0], pts[steiner, 1], "rs", markersize=5, zorder=12)

            if point_labels:
                for p, (x, y) in zip(nodes, pts):
                    ax.text(
                        x,
                        y,
                        str(self.index[p]),
                        fontsize=fontsize,
                        ha="left",
                        va="bottom",
                        color="purple",
                    )

        ax.set_aspect("equal")
        ax.set_title(title)

        if show:
            plt.show()

        # Keep an RGB snapshot so a sequence of stalls can be inspected later
        fig.canvas.draw()
        buf = fig.canvas.buffer_rgba()  # type: ignore[reportAttributeAccessIssue]
        img = np.asarray(buf)[:, :, :3].copy()
        plt.close(fig)
        self.debug_plots.append(img)


def area(pool: NodePool, p: int, q: int, r: int) -> float:
    """Signed area of the triangle spanned by three nodes."""
    x, y = pool.x, pool.y
    return orient(x[p], y[p], x[q], y[q], x[r], y[r])


def equals(pool: NodePool, p1: int, p2: int) -> bool:
    return pool.x[p1] == pool.x[p2] and pool.y[p1] == pool.y[p2]


def intersects(pool: NodePool, p1: int, q1: int, p2: int, q2: int) -> bool:
    """Check if the segment p1-q1 crosses the segment p2-q2."""
    x, y = pool.x, pool.y
    return segments_intersect(
        (x[p1], y[p1]), (x[q1], y[q1]), (x[p2], y[p2]), (x[q2], y[q2])
    )


def node_in_triangle(pool: NodePool, a: int, b: int, c: int, p: int) -> bool:
    x, y = pool.x, pool.y
    return point_in_triangle(x[a], y[a], x[b], y[b], x[c], y[c], x[p], y[p])


def locally_inside(pool: NodePool, a: int, b: int) -> bool:
    """Check if the diagonal a-b starts inside the wedge formed at a by its neighbors."""
    prev, nxt = pool.prev[a], pool.next[a]
    if area(pool, prev, a, nxt) < 0:
        return area(pool, a, b, nxt) >= 0 and area(pool, a, prev, b) >= 0
    return area(pool, a, b, prev) < 0 or area(pool, a, nxt, b) < 0


def middle_inside(pool: NodePool, a: int, b: int) -> bool:
    """Check if the midpoint of the diagonal a-b is inside the ring (even-odd rule)."""
    x, y = pool.x, pool.y
    px = (x[a] + x[b]) / 2
    py = (y[a] + y[b]) / 2
    inside = False
    p = a
    while True:
        n = pool.next[p]
        if (y[p] > py) != (y[n] > py) and px < (x[n] - x[p]) * (py - y[p]) / (
            y[n] - y[p]
        ) + x[p]:
            inside = not inside
        p = n
        if p == a:
            break
    return inside


def intersects_polygon(pool: NodePool, a: int, b: int) -> bool:
    """Check if the diagonal a-b crosses any edge of the ring."""
    idx = pool.index
    ia, ib = idx[a], idx[b]
    p = a
    while True:
        n = pool.next[p]
        if (
            idx[p] != ia
            and idx[n] != ia
            and idx[p] != ib
            and idx[n] != ib
            and intersects(pool, p, n, a, b)
        ):
            return True
        p = n
        if p == a:
            break
    return False


def is_valid_diagonal(pool: NodePool, a: int, b: int) -> bool:
    """Check if a-b is a diagonal lying in the interior of the ring."""
    idx = pool.index
    return (
        idx[pool.next[a]] != idx[b]
        and idx[pool.prev[a]] != idx[b]
        and not intersects_polygon(pool, a, b)
        and locally_inside(pool, a, b)
        and locally_inside(pool, b, a)
        and middle_inside(pool, a, b)
    )
