"""
patrol_zones/spatial: Clustering and boundary geometry.

Two-level k-means with alpha shape boundaries per patrol zone.
"""

from .alpha_shape import alpha_shape_edges, canonical_edge, circumradius
from .boundary import BoundaryLines, BoundarySegment, assemble_boundary
from .delaunay import triangulate
from .errors import (
    BoundaryIndexError,
    ClusteringError,
    EmptyInput,
    GeometryError,
    InvalidClusterCount,
    PatrolZoneError,
)
from .hierarchy import (
    HierarchyResult,
    ZoneConfig,
    ZoneDiagnostics,
    ZoneResult,
    cluster_hierarchy,
    process_zone,
    secondary_cluster_count,
)
from .kmeans import KMeansConfig, KMeansResult, run_kmeans
from .points import CoordinateOrder, LabeledPoint, Point2D, filter_points

__all__ = [
    # Points
    "CoordinateOrder",
    "LabeledPoint",
    "Point2D",
    "filter_points",

    # Clustering
    "KMeansConfig",
    "KMeansResult",
    "run_kmeans",
    "HierarchyResult",
    "ZoneConfig",
    "ZoneDiagnostics",
    "ZoneResult",
    "cluster_hierarchy",
    "process_zone",
    "secondary_cluster_count",

    # Geometry
    "triangulate",
    "alpha_shape_edges",
    "canonical_edge",
    "circumradius",
    "BoundaryLines",
    "BoundarySegment",
    "assemble_boundary",

    # Errors
    "PatrolZoneError",
    "ClusteringError",
    "InvalidClusterCount",
    "EmptyInput",
    "GeometryError",
    "BoundaryIndexError",
]
