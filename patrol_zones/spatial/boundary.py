"""
Turning alpha shape edges into renderable line segments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .errors import BoundaryIndexError
from .points import Point2D


@dataclass(frozen=True)
class BoundarySegment:
    """One line segment of a zone boundary, in the centroid set's own order."""

    start: Point2D
    end: Point2D


@dataclass
class BoundaryLines:
    """
    Parallel endpoint sequences for map line traces.

    Position ``p`` of ``first_endpoints`` and ``second_endpoints`` together
    form one segment. Both lists always have the same length.
    """

    first_endpoints: List[Tuple[float, float]] = field(default_factory=list)
    second_endpoints: List[Tuple[float, float]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.first_endpoints)

    def append(self, segment: BoundarySegment) -> None:
        self.first_endpoints.append(segment.start.as_tuple())
        self.second_endpoints.append(segment.end.as_tuple())

    def extend(self, segments: Iterable[BoundarySegment]) -> None:
        for segment in segments:
            self.append(segment)

    def is_empty(self) -> bool:
        return len(self.first_endpoints) == 0

    def segments(self) -> List[Tuple[Tuple[float, float], Tuple[float, float]]]:
        return list(zip(self.first_endpoints, self.second_endpoints))

    def as_lon_lat_pairs(self) -> Tuple[List[List[float]], List[List[float]]]:
        """
        Return ``(longs, lats)``: per segment, the two x values and the two y
        values. With longitude-first endpoints this is the shape plotly's
        ``scattermapbox`` line traces take.
        """
        longs = [[a[0], b[0]] for a, b in self.segments()]
        lats = [[a[1], b[1]] for a, b in self.segments()]
        return longs, lats


def assemble_boundary(
    centroids: Sequence[Point2D],
    edges: Iterable[Tuple[int, int]],
) -> List[BoundarySegment]:
    """
    Resolve index edges to coordinate segments.

    Raises:
        BoundaryIndexError: If an edge points outside ``centroids``
    """
    size = len(centroids)
    segments: List[BoundarySegment] = []
    for edge in edges:
        i, j = edge
        if not (0 <= i < size and 0 <= j < size):
            raise BoundaryIndexError(edge, size)
        segments.append(BoundarySegment(centroids[i], centroids[j]))
    return segments
