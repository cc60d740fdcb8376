import numpy as np

from pyearcut.build import earcut
from pyearcut.debug_utils import plot_triangulation


if __name__ == "__main__":
    points = [
        (0, 0),
        (4, 0),
        (4, 4),
        (3, 4),
        (3, 1),
        (1, 1),
        (1, 4),
        (0, 4),
    ]

    arr = np.array(points, dtype=float)
    triangles = earcut(arr)
    print(triangles.reshape(-1, 3))
    plot_triangulation(arr, triangles, point_labels=True, show=True)
