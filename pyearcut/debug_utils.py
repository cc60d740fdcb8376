from collections.abc import Sequence
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray


def plot_triangulation(
    vertices: ArrayLike,
    triangles: ArrayLike,
    dim: int = 2,
    holes: Optional[Sequence[int]] = None,
    title: str = "Triangulation",
    point_labels: bool = False,
    fontsize: int = 7,
    show: bool = False,
) -> NDArray[np.uint8]:
    """
    Visualize an earcut result together with the input rings.

    Parameters
    ----------
    vertices : ArrayLike
        Flat, dim-interleaved coordinate buffer.
    triangles : ArrayLike
        Flat vertex numbers, three per triangle.
    dim : int
        Interleave stride.
    holes : Sequence[int], optional
        Vertex numbers where each hole starts; rings are drawn in red.
    title : str
        Title of the plot.
    point_labels : bool
        Whether to label vertices with their numbers.
    fontsize : int
        Font size for labels.
    show : bool
        Whether to call plt.show() after plotting.

    Returns
    -------
    NDArray[np.uint8]
        RGB image of the figure.
    """
    import matplotlib.pyplot as plt
    from matplotlib.patches import Polygon

    coords = np.asarray(vertices, dtype=np.float64).reshape(-1, dim)[:, :2]
    tris = np.asarray(triangles, dtype=np.intp).reshape(-1, 3)

    fig, ax = plt.subplots()

    for tri_idx, tri in enumerate(tris):
        pts = coords[tri]
        ax.add_patch(
            Polygon(
                pts,
                alpha=0.3,
                facecolor="lightblue",
                edgecolor="blue",
                linewidth=0.8,
                zorder=1,
            )
        )
        if point_labels:
            centroid = pts.mean(axis=0)
            ax.text(
                centroid[0],
                centroid[1],
                str(tri_idx),
                fontsize=fontsize,
                ha="center",
                va="center",
                color="green",
            )

    # Draw the input rings on top
    hole_starts = [int(h) for h in holes] if holes is not None else []
    starts = [0, *hole_starts]
    ends = [*hole_starts, len(coords)]
    for start, end in zip(starts, ends):
        if end <= start:
            continue
        ring = np.vstack([coords[start:end], coords[start]])
        ax.plot(ring[:, 0], ring[:, 1], "r-", linewidth=1.5, zorder=10)

    if len(coords):
        ax.plot(coords[:, 0], coords[:, 1], "ko", markersize=3, zorder=11)

    if point_labels:
        for idx, (x, y) in enumerate(coords):
            ax.text(
                x, y, str(idx), fontsize=fontsize, ha="left", va="bottom", color="purple"
            )

    ax.set_aspect("equal")
    ax.autoscale_view()
    ax.set_title(title)

    if show:
        plt.show()

    fig.canvas.draw()
    buf = fig.canvas.buffer_rgba()  # type: ignore[reportAttributeAccessIssue]
    img = np.asarray(buf)[:, :, :3].copy()
    plt.close(fig)
    return img
