"""
Exception hierarchy for the patrol zone pipeline.

Clustering and geometry errors are local to one zone and are caught by the
orchestrator. Boundary index errors indicate a broken upstream invariant and
always propagate.
"""


class PatrolZoneError(Exception):
    """Base class for all patrol zone errors."""


class ClusteringError(PatrolZoneError):
    """Raised when k-means cannot run on the given input."""


class InvalidClusterCount(ClusteringError):
    """Requested cluster count is < 1 or larger than the number of points."""

    def __init__(self, k: int, num_points: int):
        self.k = k
        self.num_points = num_points
        super().__init__(
            f"Invalid cluster count {k} for {num_points} points "
            f"(expected 1 <= k <= {num_points})"
        )


class EmptyInput(ClusteringError):
    """No points were supplied to the clusterer."""

    def __init__(self, message: str = "Cannot cluster an empty point set"):
        super().__init__(message)


class GeometryError(PatrolZoneError):
    """Triangulation failed (too few, collinear or duplicate points)."""


class BoundaryIndexError(PatrolZoneError, IndexError):
    """An edge references a point outside the centroid set."""

    def __init__(self, edge, size: int):
        self.edge = edge
        self.size = size
        super().__init__(f"Edge {edge} out of range for {size} centroids")
