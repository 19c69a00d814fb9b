"""
Lloyd's k-means over 2-D points.

This is the clustering primitive used for both the primary (patrol zone) and
secondary (representative point) passes. It is intentionally small:

1. Point-based initialization with an explicit, seedable strategy
2. Nearest-centroid assignment (Euclidean, ties go to the lowest cluster id)
3. Mean update; an empty cluster keeps its previous centroid
4. Stops when assignments no longer change or ``max_iterations`` is reached

The initialization strategy is part of the configuration rather than ambient
randomness, so identical input and config always give identical output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np

from .errors import EmptyInput, InvalidClusterCount
from .points import CoordinateOrder, Point2D, array_to_points, points_to_array


logger = logging.getLogger(__name__)

INIT_STRATEGIES = ("farthest", "random", "first")


@dataclass
class KMeansConfig:
    """Configuration for a single k-means run."""

    max_iterations: int = 100
    """Hard cap on assignment/update rounds."""

    init: str = "farthest"
    """Initialization strategy: 'farthest', 'random' or 'first'."""

    seed: Optional[int] = 42
    """Seed for the 'random' strategy. None = non-reproducible."""

    n_init: int = 1
    """Number of restarts for the 'random' strategy (lowest inertia wins)."""

    def __post_init__(self):
        if self.init not in INIT_STRATEGIES:
            raise ValueError(
                f"Unknown init strategy '{self.init}'. "
                f"Expected one of: {', '.join(INIT_STRATEGIES)}"
            )
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if self.n_init < 1:
            raise ValueError("n_init must be >= 1")


@dataclass
class KMeansResult:
    """Outcome of one k-means run."""

    labels: np.ndarray
    """Cluster id per input point (dense, starting at 0)."""

    centroids: List[Point2D]
    """Final centroid per cluster id, in the input's coordinate order."""

    converged: bool
    """True if assignments stabilised before the iteration cap."""

    iterations: int
    """Number of assignment rounds performed."""

    inertia: float = 0.0
    """Sum of squared distances from each point to its centroid."""

    @property
    def k(self) -> int:
        return len(self.centroids)

    def centroid_array(self) -> np.ndarray:
        return points_to_array(self.centroids)

    def members(self, cluster_id: int) -> np.ndarray:
        """Indices of the points assigned to ``cluster_id``."""
        return np.flatnonzero(self.labels == cluster_id)


def _farthest_first(X: np.ndarray, k: int) -> np.ndarray:
    """Start at the first point, then repeatedly take the farthest remaining one."""
    chosen = [0]
    dist = ((X - X[0]) ** 2).sum(axis=1)
    dist[0] = -1.0
    while len(chosen) < k:
        idx = int(np.argmax(dist))
        chosen.append(idx)
        dist = np.minimum(dist, ((X - X[idx]) ** 2).sum(axis=1))
        dist[chosen] = -1.0
    return np.array(chosen)


def _first_distinct(X: np.ndarray, k: int) -> np.ndarray:
    chosen: List[int] = []
    seen = set()
    for i, row in enumerate(X):
        key = (float(row[0]), float(row[1]))
        if key in seen:
            continue
        seen.add(key)
        chosen.append(i)
        if len(chosen) == k:
            return np.array(chosen)
    # Fewer distinct points than k: pad with the earliest unused rows
    for i in range(len(X)):
        if len(chosen) == k:
            break
        if i not in chosen:
            chosen.append(i)
    return np.array(chosen)


def _initial_centroids(
    X: np.ndarray,
    k: int,
    config: KMeansConfig,
    rng: Optional[np.random.Generator],
) -> np.ndarray:
    if config.init == "farthest":
        idx = _farthest_first(X, k)
    elif config.init == "first":
        idx = _first_distinct(X, k)
    else:
        idx = rng.choice(len(X), size=k, replace=False)
    return X[idx].astype(float).copy()


def _lloyd(X: np.ndarray, centroids: np.ndarray, max_iterations: int):
    labels: Optional[np.ndarray] = None
    converged = False
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        sq_dist = ((X[:, None, :] - centroids[None, :, :]) ** 2).sum(axis=2)
        # argmin returns the first minimum, i.e. the lowest cluster id on ties
        new_labels = np.argmin(sq_dist, axis=1)

        if labels is not None and np.array_equal(new_labels, labels):
            converged = True
            break
        labels = new_labels

        for cluster_id in range(len(centroids)):
            mask = labels == cluster_id
            if mask.any():
                centroids[cluster_id] = X[mask].mean(axis=0)

    inertia = float(((X - centroids[labels]) ** 2).sum())
    return labels, centroids, converged, iterations, inertia


def run_kmeans(
    points: Union[Sequence[Point2D], np.ndarray],
    k: int,
    config: Optional[KMeansConfig] = None,
    order: Optional[CoordinateOrder] = None,
) -> KMeansResult:
    """
    Cluster ``points`` into ``k`` groups with Lloyd's method.

    Args:
        points: Point2D sequence or an ``(n, 2)`` array
        k: Number of clusters, 1 <= k <= len(points)
        config: Iteration cap and initialization policy (defaults if None)
        order: Coordinate order of the returned centroids. Inferred from the
            points when omitted (LAT_LNG for raw arrays).

    Returns:
        KMeansResult with labels, centroids and convergence info

    Raises:
        EmptyInput: If ``points`` is empty
        InvalidClusterCount: If ``k`` is outside [1, len(points)]
    """
    if config is None:
        config = KMeansConfig()

    if isinstance(points, np.ndarray):
        X = np.asarray(points, dtype=float).reshape(-1, 2)
        order = order or CoordinateOrder.LAT_LNG
    else:
        X = points_to_array(points)
        if order is None:
            order = points[0].order if len(points) else CoordinateOrder.LAT_LNG

    n = len(X)
    if n == 0:
        raise EmptyInput()
    if k < 1 or k > n:
        raise InvalidClusterCount(k, n)

    rng = np.random.default_rng(config.seed) if config.init == "random" else None
    attempts = config.n_init if config.init == "random" else 1

    best = None
    for _ in range(attempts):
        centroids = _initial_centroids(X, k, config, rng)
        outcome = _lloyd(X, centroids, config.max_iterations)
        if best is None or outcome[4] < best[4]:
            best = outcome

    labels, centroids, converged, iterations, inertia = best

    if not converged:
        logger.debug(
            f"k-means hit the iteration cap ({config.max_iterations}) "
            f"without converging (n={n}, k={k})"
        )

    return KMeansResult(
        labels=labels.astype(int),
        centroids=array_to_points(centroids, order),
        converged=converged,
        iterations=iterations,
        inertia=inertia,
    )
