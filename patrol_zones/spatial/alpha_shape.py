"""
Alpha shape boundary extraction.

Keeps the Delaunay triangles whose circumradius is below ``alpha`` and
returns the edges that border exactly one kept triangle. The result can be
concave, have holes, or be split into several pieces.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Tuple

import numpy as np

from .delaunay import orient_counter_clockwise, triangulate
from .errors import GeometryError


logger = logging.getLogger(__name__)

MIN_ALPHA_POINTS = 4

Edge = Tuple[int, int]


def canonical_edge(i: int, j: int) -> Edge:
    """Order-independent key for an edge: ``canonical_edge(i, j) == canonical_edge(j, i)``."""
    return (i, j) if i <= j else (j, i)


def circumradius(pa, pb, pc) -> Optional[float]:
    """
    Circumradius of a triangle via Heron's formula.

    Returns None for a degenerate (zero-area) triangle.
    """
    a = math.hypot(pa[0] - pb[0], pa[1] - pb[1])
    b = math.hypot(pb[0] - pc[0], pb[1] - pc[1])
    c = math.hypot(pc[0] - pa[0], pc[1] - pa[1])
    s = (a + b + c) / 2.0
    area_sq = s * (s - a) * (s - b) * (s - c)
    if area_sq <= 0.0:
        return None
    area = math.sqrt(area_sq)
    return (a * b * c) / (4.0 * area)


class _EdgeRegistry:
    """Insertion-ordered directed edge set with interior-edge cancellation."""

    def __init__(self, only_outer: bool):
        self.only_outer = only_outer
        self._edges: Dict[Edge, Edge] = {}

    def add(self, i: int, j: int) -> None:
        forward, reverse = (i, j), (j, i)
        if forward in self._edges or reverse in self._edges:
            if self.only_outer and reverse in self._edges:
                # Shared by two kept triangles: interior, drop it
                del self._edges[reverse]
            return
        self._edges[forward] = forward

    def edges(self) -> List[Edge]:
        return list(self._edges.values())


def alpha_shape_edges(
    points,
    alpha: float,
    only_outer: bool = True,
    triangles: Optional[np.ndarray] = None,
) -> List[Edge]:
    """
    Compute the alpha shape boundary of a point set.

    Args:
        points: ``(n, 2)`` array or sequence of coordinate pairs
        alpha: Circumradius threshold; triangles with ``R < alpha`` are kept
        only_outer: Cancel edges shared by two kept triangles so only the
            boundary remains. When False every kept edge is returned once.
        triangles: Precomputed triangulation. Computed with
            :func:`triangulate` when omitted.

    Returns:
        Boundary edges as ``(i, j)`` index pairs in insertion order. Empty
        when there are fewer than 4 points, nothing passes the radius test,
        or the triangulation fails.
    """
    X = np.asarray(points, dtype=float).reshape(-1, 2)

    if len(X) < MIN_ALPHA_POINTS:
        logger.debug(f"Alpha shape needs at least {MIN_ALPHA_POINTS} points, got {len(X)}")
        return []
    if alpha <= 0:
        return []

    if triangles is None:
        try:
            triangles = triangulate(X)
        except GeometryError as e:
            logger.warning(f"Alpha shape skipped: {e}")
            return []
    else:
        triangles = orient_counter_clockwise(X, triangles)

    registry = _EdgeRegistry(only_outer)
    for ia, ib, ic in triangles:
        ia, ib, ic = int(ia), int(ib), int(ic)
        radius = circumradius(X[ia], X[ib], X[ic])
        if radius is None:
            continue
        if radius < alpha:
            registry.add(ia, ib)
            registry.add(ib, ic)
            registry.add(ic, ia)

    return registry.edges()
