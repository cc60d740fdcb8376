import numpy as np
import pytest

from pyearcut.flatten import Flattened, flatten


class TestFlatten:
    """Tests for flatten function."""

    def test_outer_ring_and_hole(self):
        rings = [
            [[0, 0], [10, 0], [10, 10], [0, 10]],
            [[2, 2], [8, 2], [8, 8], [2, 8]],
        ]
        flat = flatten(rings)
        assert isinstance(flat, Flattened)
        assert flat.holes.tolist() == [4]
        assert len(flat.vertices) == 16
        assert flat.dimensions == 2
        assert flat.vertices[:4].tolist() == [0.0, 0.0, 10.0, 0.0]
        assert flat.vertices[8:10].tolist() == [2.0, 2.0]

    def test_no_holes(self):
        flat = flatten([[[0, 0], [1, 0], [1, 1]]])
        assert flat.holes.tolist() == []
        assert flat.vertices.tolist() == [0.0, 0.0, 1.0, 0.0, 1.0, 1.0]

    def test_three_dimensions(self):
        rings = [
            [[0, 0, 1], [1, 0, 2], [1, 1, 3]],
            [[0.2, 0.1, 4], [0.8, 0.1, 5], [0.8, 0.6, 6]],
        ]
        flat = flatten(rings)
        assert flat.dimensions == 3
        assert flat.holes.tolist() == [3]
        assert len(flat.vertices) == 18

    def test_holes_are_vertex_numbers(self):
        rings = [
            [[0, 0], [10, 0], [10, 10], [0, 10]],
            [[1, 1], [2, 1], [2, 2]],
            [[5, 5], [6, 5], [6, 6], [5, 6], [5, 5.5]],
        ]
        assert flatten(rings).holes.tolist() == [4, 7]

    def test_explicit_dim(self):
        flat = flatten([np.zeros((4, 3))], dim=3)
        assert flat.dimensions == 3
        assert flat.vertices.shape == (12,)

    def test_dim_inferred_from_first_non_empty_ring(self):
        flat = flatten([[], [[0, 0, 0], [1, 0, 0], [1, 1, 0]]])
        assert flat.dimensions == 3
        assert flat.holes.tolist() == [0]

    def test_empty_hole_ring(self):
        flat = flatten([[[0, 0], [1, 0], [1, 1]], []])
        assert flat.holes.tolist() == [3]
        assert len(flat.vertices) == 6

    def test_no_rings(self):
        flat = flatten([])
        assert flat.vertices.size == 0
        assert flat.holes.size == 0
        assert flat.dimensions == 2

    def test_mismatched_dimension(self):
        with pytest.raises(ValueError, match="Ring 1"):
            flatten([[[0, 0], [1, 0], [1, 1]], [[0, 0, 0], [1, 0, 0]]])

    def test_ragged_points(self):
        with pytest.raises(ValueError):
            flatten([[[0, 0], [1, 0, 5], [1, 1]]])
