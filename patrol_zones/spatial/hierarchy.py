"""
Two-level clustering and per-zone boundary extraction.

Pipeline per invocation:
1. Primary k-means over all valid points (lat/lng order) -> patrol zones
2. Per zone, secondary k-means over its members (lng/lat order) with
   ``k = max(1, floor(m ** 0.25))`` -> representative points
3. Alpha shape over the representative points -> boundary edges
4. Edges resolved to line segments

Zones are independent after step 1, so steps 2-4 may run on a thread pool.
Results are always merged in ascending zone id. Anything that goes wrong
inside a zone (too few points, clustering precondition, degenerate geometry)
only marks that zone as having no boundary.
"""

from __future__ import annotations

import json
import logging
import math
import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from sklearn.metrics import silhouette_score

from .alpha_shape import Edge, alpha_shape_edges
from .boundary import BoundarySegment, assemble_boundary
from .errors import ClusteringError
from .kmeans import KMeansConfig, KMeansResult, run_kmeans
from .points import CoordinateOrder, LabeledPoint, Point2D, points_to_array


logger = logging.getLogger(__name__)

PRIMARY_ORDER = CoordinateOrder.LAT_LNG
SECONDARY_ORDER = CoordinateOrder.LNG_LAT


@dataclass
class ZoneConfig:
    """Configuration for zone clustering and boundary extraction."""

    alpha: float = 1.0
    """Circumradius threshold for the alpha shape (coordinate units)."""

    min_boundary_points: int = 4
    """Minimum representative points needed for an alpha shape."""

    secondary_exponent: float = 0.25
    """Secondary cluster count is floor(zone_size ** secondary_exponent)."""

    only_outer: bool = True
    """Cancel interior edges so only the outer boundary remains."""

    primary_kmeans: KMeansConfig = field(default_factory=KMeansConfig)
    """k-means settings for the zone pass."""

    secondary_kmeans: KMeansConfig = field(default_factory=KMeansConfig)
    """k-means settings for the per-zone representative pass."""

    max_workers: Optional[int] = None
    """Thread pool size for per-zone work. None or 1 = sequential."""

    compute_silhouette: bool = True
    """Whether to score primary cluster separation in diagnostics."""


@dataclass
class ZoneResult:
    """Secondary clustering and boundary for one primary zone."""

    cluster_id: int
    member_indices: List[int]
    """Positions of the zone's members in the valid point list."""

    members: List[Point2D] = field(default_factory=list)
    secondary_centroids: List[Point2D] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    segments: List[BoundarySegment] = field(default_factory=list)
    skip_reason: Optional[str] = None
    """Why the zone has no boundary (None when it has one)."""

    secondary_iterations: int = 0
    secondary_converged: bool = False

    @property
    def size(self) -> int:
        return len(self.member_indices)

    @property
    def has_boundary(self) -> bool:
        return len(self.segments) > 0


@dataclass
class ZoneTelemetry:
    """Per-zone record emitted at DEBUG level."""

    cluster_id: int
    size: int
    secondary_k: int
    num_centroids: int
    num_edges: int
    skip_reason: Optional[str]

    def to_json(self) -> str:
        return json.dumps(asdict(self))


@dataclass
class HierarchyResult:
    """Primary assignment plus the per-zone results in ascending id order."""

    primary: Optional[KMeansResult]
    zones: List[ZoneResult] = field(default_factory=list)
    requested_clusters: int = 0
    effective_clusters: int = 0

    @property
    def labels(self) -> np.ndarray:
        if self.primary is None:
            return np.empty(0, dtype=int)
        return self.primary.labels


@dataclass
class ZoneDiagnostics:
    """Summary of one pipeline run for debugging and user messaging."""

    num_records: int
    num_valid_points: int
    num_dropped_records: int = 0
    requested_clusters: int = 0
    effective_clusters: int = 0
    cluster_sizes: List[int] = field(default_factory=list)
    zones_with_boundary: List[int] = field(default_factory=list)
    zones_without_boundary: Dict[int, str] = field(default_factory=dict)
    primary_converged: Optional[bool] = None
    primary_iterations: int = 0
    silhouette_score: Optional[float] = None
    """Silhouette of the primary assignment (None if < 2 zones)."""

    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def secondary_cluster_count(member_count: int, exponent: float = 0.25) -> int:
    """
    Number of representative points for a zone of ``member_count`` points.

    ``max(1, floor(member_count ** exponent))``. When ``1 / exponent`` is an
    integer the floor is checked with exact integer powers, so perfect powers
    (16, 81, 256, ...) are not lost to float rounding.
    """
    if member_count < 1:
        return 1
    k = int(math.floor(member_count ** exponent))
    root = round(1.0 / exponent)
    if math.isclose(1.0 / exponent, root):
        while (k + 1) ** root <= member_count:
            k += 1
        while k > 0 and k ** root > member_count:
            k -= 1
    return max(1, k)


def _compute_cluster_quality(X: np.ndarray, labels: np.ndarray) -> Optional[float]:
    """Silhouette score of ``labels``; None when it is undefined."""
    num_clusters = len(np.unique(labels))
    if num_clusters < 2 or num_clusters >= len(X):
        return None
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            return float(silhouette_score(X, labels))
    except ValueError:
        return None


def run_primary(
    points: Sequence[LabeledPoint],
    requested_clusters: int,
    config: Optional[ZoneConfig] = None,
) -> Optional[KMeansResult]:
    """
    Primary k-means with the zone count clamped to the number of points.

    Returns None when there is nothing to cluster.
    """
    config = config or ZoneConfig()
    k = min(requested_clusters, len(points))
    if k < 1 or len(points) == 0:
        return None
    coords = [p.point.as_order(PRIMARY_ORDER) for p in points]
    return run_kmeans(coords, k, config.primary_kmeans, order=PRIMARY_ORDER)


def process_zone(
    cluster_id: int,
    member_indices: Sequence[int],
    points: Sequence[LabeledPoint],
    config: Optional[ZoneConfig] = None,
) -> ZoneResult:
    """
    Secondary clustering and boundary extraction for one zone.

    Never raises for data conditions; the outcome is recorded in
    ``skip_reason`` instead.
    """
    config = config or ZoneConfig()
    members = [points[i].point.as_order(SECONDARY_ORDER) for i in member_indices]
    zone = ZoneResult(
        cluster_id=cluster_id,
        member_indices=list(member_indices),
        members=members,
    )
    secondary_k = 0

    if len(members) < config.min_boundary_points:
        zone.skip_reason = (
            f"only {len(members)} points in zone "
            f"(need at least {config.min_boundary_points})"
        )
    else:
        secondary_k = secondary_cluster_count(len(members), config.secondary_exponent)
        try:
            sub = run_kmeans(members, secondary_k, config.secondary_kmeans, order=SECONDARY_ORDER)
        except ClusteringError as e:
            zone.skip_reason = f"secondary clustering failed: {e}"
            logger.warning(f"Zone {cluster_id}: {zone.skip_reason}")
        else:
            zone.secondary_centroids = sub.centroids
            zone.secondary_iterations = sub.iterations
            zone.secondary_converged = sub.converged
            _extract_boundary(zone, config)

    if logger.isEnabledFor(logging.DEBUG):
        telemetry = ZoneTelemetry(
            cluster_id=cluster_id,
            size=zone.size,
            secondary_k=secondary_k,
            num_centroids=len(zone.secondary_centroids),
            num_edges=len(zone.edges),
            skip_reason=zone.skip_reason,
        )
        logger.debug(f"Zone telemetry: {telemetry.to_json()}")

    return zone


def _extract_boundary(zone: ZoneResult, config: ZoneConfig) -> None:
    centroids = zone.secondary_centroids
    if len(centroids) < config.min_boundary_points:
        zone.skip_reason = (
            f"only {len(centroids)} representative points "
            f"(need at least {config.min_boundary_points} for an alpha shape)"
        )
        return

    edges = alpha_shape_edges(points_to_array(centroids), config.alpha, only_outer=config.only_outer)
    if not edges:
        zone.skip_reason = f"no alpha shape edges at alpha={config.alpha}"
        logger.warning(f"Zone {zone.cluster_id}: {zone.skip_reason}")
        return

    zone.edges = edges
    zone.segments = assemble_boundary(centroids, edges)


def cluster_hierarchy(
    points: Sequence[LabeledPoint],
    requested_clusters: int,
    config: Optional[ZoneConfig] = None,
) -> HierarchyResult:
    """
    Run the primary pass, then process every zone.

    Args:
        points: Validated points (any coordinate order)
        requested_clusters: Desired number of patrol zones
        config: Zone configuration (defaults if None)

    Returns:
        HierarchyResult; ``primary`` is None and ``zones`` empty when there
        are no points or the clamped zone count is below 1.
    """
    config = config or ZoneConfig()
    primary = run_primary(points, requested_clusters, config)
    if primary is None:
        return HierarchyResult(primary=None, requested_clusters=requested_clusters)

    cluster_ids = [int(cid) for cid in np.unique(primary.labels)]
    jobs = [(cid, primary.members(cid).tolist()) for cid in cluster_ids]

    if config.max_workers and config.max_workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            # map() yields in submission order, i.e. ascending zone id
            zones = list(pool.map(lambda job: process_zone(job[0], job[1], points, config), jobs))
    else:
        zones = [process_zone(cid, idx, points, config) for cid, idx in jobs]

    return HierarchyResult(
        primary=primary,
        zones=zones,
        requested_clusters=requested_clusters,
        effective_clusters=primary.k,
    )


def build_diagnostics(
    num_records: int,
    points: Sequence[LabeledPoint],
    hierarchy: HierarchyResult,
    config: Optional[ZoneConfig] = None,
) -> ZoneDiagnostics:
    """Summarise a run and attach actionable suggestions."""
    config = config or ZoneConfig()
    diagnostics = ZoneDiagnostics(
        num_records=num_records,
        num_valid_points=len(points),
        num_dropped_records=num_records - len(points),
        requested_clusters=hierarchy.requested_clusters,
        effective_clusters=hierarchy.effective_clusters,
    )
    suggestions = diagnostics.suggestions

    if diagnostics.num_dropped_records > 0:
        suggestions.append(
            f"{diagnostics.num_dropped_records} of {num_records} records were dropped "
            "for missing or non-numeric coordinates."
        )

    if hierarchy.primary is None:
        suggestions.append("No valid points to cluster. Upload data with latitude and longitude.")
        return diagnostics

    diagnostics.primary_converged = hierarchy.primary.converged
    diagnostics.primary_iterations = hierarchy.primary.iterations
    diagnostics.cluster_sizes = [zone.size for zone in hierarchy.zones]

    for zone in hierarchy.zones:
        if zone.has_boundary:
            diagnostics.zones_with_boundary.append(zone.cluster_id)
        else:
            diagnostics.zones_without_boundary[zone.cluster_id] = zone.skip_reason or "no boundary"

    if hierarchy.effective_clusters < hierarchy.requested_clusters:
        suggestions.append(
            f"Requested {hierarchy.requested_clusters} zones but only {len(points)} valid "
            f"points; using {hierarchy.effective_clusters}."
        )

    if not diagnostics.zones_with_boundary:
        needed = int(math.ceil(config.min_boundary_points ** (1.0 / config.secondary_exponent)))
        suggestions.append(
            "Not enough data to draw any zone boundary. A zone needs about "
            f"{needed} incidents to yield {config.min_boundary_points} representative points; "
            "consider fewer zones or a larger dataset."
        )

    if config.compute_silhouette:
        X = points_to_array([p.point.as_order(PRIMARY_ORDER) for p in points])
        diagnostics.silhouette_score = _compute_cluster_quality(X, hierarchy.labels)

    return diagnostics
