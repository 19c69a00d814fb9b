"""Delaunay triangulation backed by scipy's Qhull bindings."""

from __future__ import annotations

import numpy as np
from scipy.spatial import Delaunay, QhullError

from .errors import GeometryError


def triangulate(points: np.ndarray) -> np.ndarray:
    """
    Triangulate a 2-D point set.

    Args:
        points: ``(n, 2)`` array of coordinates

    Returns:
        ``(t, 3)`` int array; each row holds the point indices of one triangle

    Raises:
        GeometryError: If there are fewer than 3 points or Qhull rejects the
            input (e.g. all points collinear or coincident)
    """
    X = np.asarray(points, dtype=float)
    if X.ndim != 2 or X.shape[1] != 2:
        raise GeometryError(f"Expected an (n, 2) array, got shape {X.shape}")
    if len(X) < 3:
        raise GeometryError(f"Need at least 3 points to triangulate, got {len(X)}")

    try:
        tri = Delaunay(X)
    except (QhullError, ValueError) as e:
        raise GeometryError(f"Delaunay triangulation failed: {e}") from e

    return orient_counter_clockwise(X, np.asarray(tri.simplices, dtype=int))


def orient_counter_clockwise(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Reorder each triangle's vertices counter-clockwise.

    Qhull does not guarantee a consistent winding. With every triangle wound
    the same way, an edge shared by two neighbours appears once as (i, j)
    and once as (j, i).
    """
    tris = np.array(triangles, dtype=int, copy=True)
    if tris.size == 0:
        return tris.reshape(0, 3)
    a, b, c = points[tris[:, 0]], points[tris[:, 1]], points[tris[:, 2]]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
    clockwise = cross < 0
    tris[clockwise] = tris[clockwise][:, [0, 2, 1]]
    return tris
