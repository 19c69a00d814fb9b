"""
Patrol zone generation from crime incident points.

Usage:
    from patrol_zones import generate_patrol_zones, ZoneConfig

    result = generate_patrol_zones(records, n_clusters=5, config=ZoneConfig(alpha=0.5))
"""

from .pipeline import PatrolZoneResult, generate_patrol_zones
from .spatial import ZoneConfig, ZoneDiagnostics

__all__ = [
    "PatrolZoneResult",
    "generate_patrol_zones",
    "ZoneConfig",
    "ZoneDiagnostics",
]
