"""
Patrol zone generation entry point.

Takes raw incident records and a desired zone count, and returns the primary
zone of every valid record plus the zone boundary segments in longitude-first
order, ready for a map layer.

Usage:
    from patrol_zones import generate_patrol_zones

    result = generate_patrol_zones(records, n_clusters=5)
    longs, lats = result.boundary.as_lon_lat_pairs()
    if result.boundary.is_empty():
        print(result.diagnostics.suggestions)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .spatial.boundary import BoundaryLines
from .spatial.hierarchy import (
    ZoneConfig,
    ZoneDiagnostics,
    ZoneResult,
    build_diagnostics,
    cluster_hierarchy,
)
from .spatial.points import LabeledPoint, Point2D, filter_points


logger = logging.getLogger(__name__)


@dataclass
class PatrolZoneResult:
    """Output of one patrol zone run."""

    primary_assignment: Dict[int, int]
    """Input record index -> primary zone id. Dropped records are absent."""

    boundary: BoundaryLines
    """Boundary segments of all zones, merged in ascending zone id."""

    zones: List[ZoneResult] = field(default_factory=list)
    points: List[LabeledPoint] = field(default_factory=list)
    diagnostics: Optional[ZoneDiagnostics] = None

    @property
    def has_boundary(self) -> bool:
        return not self.boundary.is_empty()

    def primary_groups(self) -> Dict[int, List[Point2D]]:
        """Zone id -> member points (lng/lat), ascending by id, for marker layers."""
        return {zone.cluster_id: list(zone.members) for zone in self.zones}

    def records_for_zone(self, cluster_id: int) -> List[Any]:
        """Source records assigned to ``cluster_id``."""
        return [p.record for p in self.points if self.primary_assignment.get(p.record_index) == cluster_id]


def generate_patrol_zones(
    records: Any,
    n_clusters: int,
    config: Optional[ZoneConfig] = None,
) -> PatrolZoneResult:
    """
    Build patrol zones and their boundaries from incident records.

    Args:
        records: DataFrame or iterable of mappings with latitude/longitude
        n_clusters: Desired number of patrol zones (clamped to the number of
            valid points)
        config: Zone configuration (defaults if None)

    Returns:
        PatrolZoneResult. Empty assignment and boundary when no record has
        valid coordinates; empty boundary when no zone has enough
        representative points. Neither case raises.
    """
    config = config or ZoneConfig()

    if not isinstance(records, list) and not hasattr(records, "columns"):
        records = list(records)
    num_records = len(records)

    points = filter_points(records)
    logger.info(
        f"Generating {n_clusters} patrol zones from {len(points)} valid points "
        f"({num_records - len(points)} records dropped)"
    )

    hierarchy = cluster_hierarchy(points, n_clusters, config)

    primary_assignment: Dict[int, int] = {}
    for point, label in zip(points, hierarchy.labels):
        primary_assignment[point.record_index] = int(label)

    boundary = BoundaryLines()
    for zone in hierarchy.zones:
        if zone.has_boundary:
            boundary.extend(zone.segments)
        else:
            logger.info(f"Zone {zone.cluster_id} has no boundary: {zone.skip_reason}")

    diagnostics = build_diagnostics(num_records, points, hierarchy, config)
    logger.info(
        f"Patrol zones ready: {hierarchy.effective_clusters} zones, "
        f"{len(diagnostics.zones_with_boundary)} with boundaries, "
        f"{len(boundary)} boundary segments"
    )

    return PatrolZoneResult(
        primary_assignment=primary_assignment,
        boundary=boundary,
        zones=hierarchy.zones,
        points=points,
        diagnostics=diagnostics,
    )


