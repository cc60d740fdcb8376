"""Tests for the matplotlib debug rendering (visual output not verified)."""

import numpy as np
import pytest

matplotlib = pytest.importorskip("matplotlib")
# Use non-interactive backend to avoid showing plots during tests
matplotlib.use("Agg")

from pyearcut.build import earcut  # noqa: E402
from pyearcut.debug_utils import plot_triangulation  # noqa: E402
from pyearcut.polygon import NodePool  # noqa: E402
from pyearcut.topology import linked_list  # noqa: E402

SQUARE = [0.0, 0.0, 10.0, 0.0, 10.0, 10.0, 0.0, 10.0]
INNER_SQUARE = [2.0, 2.0, 8.0, 2.0, 8.0, 8.0, 2.0, 8.0]


def test_plot_triangulation_returns_image():
    data = SQUARE + INNER_SQUARE
    triangles = earcut(data, [4])

    img = plot_triangulation(data, triangles, holes=[4], point_labels=True)

    assert img.ndim == 3
    assert img.shape[2] == 3
    assert img.dtype == np.uint8


def test_plot_empty_triangulation():
    img = plot_triangulation([], [])
    assert img.shape[2] == 3


def test_node_pool_plot_keeps_snapshot():
    pool = NodePool.with_capacity(8)
    start = linked_list(pool, np.array(SQUARE), 0, 4, 2, clockwise=True)
    pool.steiner[start] = True

    pool.plot(start, title="square")
    pool.plot(start, point_labels=False)

    assert len(pool.debug_plots) == 2
    assert pool.debug_plots[0].shape[2] == 3


@pytest.mark.filterwarnings("ignore::UserWarning")
def test_earcut_debug_mode():
    """Test that debug mode doesn't crash when ear slicing stalls."""
    collinear = [0.0, 0.0, 1.0, 1.0, 2.0, 2.0]
    assert earcut(collinear, debug=True).tolist() == []

    data = SQUARE + INNER_SQUARE
    assert earcut(data, [4], debug=True).tolist() == earcut(data, [4]).tolist()
