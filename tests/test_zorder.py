import numpy as np
import pytest

from pyearcut.polygon import NodePool
from pyearcut.topology import linked_list
from pyearcut.utils import NIL, Z_ORDER_RANGE
from pyearcut.zorder import ZOrderBounds, index_curve, sort_linked, z_order


class TestZOrder:
    """Tests for z_order function."""

    @pytest.mark.parametrize(
        "x, y, expected",
        [(0, 0, 0), (1, 0, 1), (0, 1, 2), (1, 1, 3), (2, 0, 4)],
    )
    def test_bit_interleaving(self, x, y, expected):
        assert z_order(x, y, 0.0, 0.0, 1.0) == expected

    def test_range_limits(self):
        assert z_order(Z_ORDER_RANGE, 0, 0.0, 0.0, 1.0) == 0x15555555
        assert z_order(0, Z_ORDER_RANGE, 0.0, 0.0, 1.0) == 0x2AAAAAAA

    def test_offset_and_scale(self):
        # (14, 7) -> (2, 1) after shifting by (10, 5) and halving
        assert z_order(14.0, 7.0, 10.0, 5.0, 0.5) == z_order(2, 1, 0.0, 0.0, 1.0)


class TestZOrderBounds:
    """Tests for the bounds of the z-order grid."""

    def test_from_outer_ring(self):
        data = np.array([1.0, 2.0, 11.0, 2.0, 11.0, 7.0, 1.0, 7.0, 100.0, 100.0])
        bounds = ZOrderBounds.from_outer_ring(data, 4, 2)
        assert bounds.min_x == 1.0
        assert bounds.min_y == 2.0
        assert bounds.inv_size == pytest.approx(Z_ORDER_RANGE / 10.0)

    def test_corners_map_to_range(self):
        data = np.array([0.0, 0.0, 4.0, 0.0, 4.0, 4.0, 0.0, 4.0])
        bounds = ZOrderBounds.from_outer_ring(data, 4, 2)
        assert bounds.code(0.0, 0.0) == 0
        assert bounds.code(4.0, 4.0) == 0x3FFFFFFF

    def test_zero_size_box(self):
        data = np.array([3.0, 3.0, 3.0, 3.0, 3.0, 3.0])
        assert ZOrderBounds.from_outer_ring(data, 3, 2) is None

    def test_empty_ring(self):
        assert ZOrderBounds.from_outer_ring(np.empty(0), 0, 2) is None


class TestSortLinked:
    """Tests for the linked list merge sort."""

    def _chain(self, codes):
        pool = NodePool.with_capacity(len(codes))
        for k, code in enumerate(codes):
            p = pool.new_node(k, 0.0, 0.0)
            pool.z[p] = code
        for p in range(len(codes)):
            pool.prev_z[p] = p - 1 if p > 0 else NIL
            pool.next_z[p] = p + 1 if p < len(codes) - 1 else NIL
        return pool

    def _walk(self, pool, head):
        order = []
        while head != NIL:
            order.append(int(head))
            head = pool.next_z[head]
        return order

    def test_sorted_and_stable(self):
        pool = self._chain([5, 3, 5, 1, 3])
        head = sort_linked(pool, 0)
        assert self._walk(pool, head) == [3, 1, 4, 0, 2]

    def test_back_links_consistent(self):
        pool = self._chain([9, 8, 7, 6, 5, 4, 3])
        head = sort_linked(pool, 0)
        order = self._walk(pool, head)
        assert order == [6, 5, 4, 3, 2, 1, 0]
        assert pool.prev_z[head] == NIL
        for before, after in zip(order, order[1:]):
            assert pool.prev_z[after] == before

    def test_single_node(self):
        pool = self._chain([42])
        assert self._walk(pool, sort_linked(pool, 0)) == [0]


class TestIndexCurve:
    """Tests for index_curve function."""

    def test_index_ring(self):
        data = np.array([0.0, 0.0, 4.0, 0.0, 4.0, 4.0, 0.0, 4.0, 2.0, 2.0])
        pool = NodePool.with_capacity(10)
        last = linked_list(pool, data, 0, 5, 2, clockwise=True)
        bounds = ZOrderBounds.from_outer_ring(data, 5, 2)

        head = index_curve(pool, last, bounds)

        order = []
        p = head
        while p != NIL:
            order.append(int(p))
            p = pool.next_z[p]
        assert sorted(order) == [0, 1, 2, 3, 4]
        assert all(pool.has_z[:5])
        codes = [pool.z[p] for p in order]
        assert codes == sorted(codes)
        assert pool.index[head] == 0
        assert pool.index[order[-1]] == 2
