"""
Point validation and coordinate-order handling.

Every point produced by this module carries its axis order explicitly.
Primary clustering works on ``LAT_LNG`` points while secondary clustering and
boundary output use ``LNG_LAT``; converting between them goes through
:meth:`Point2D.as_order` so the swap is never implicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


LATITUDE_COLUMNS = ("latitude", "lat")
LONGITUDE_COLUMNS = ("longitude", "lng", "lon", "long")


class CoordinateOrder(str, Enum):
    """Axis order of a :class:`Point2D`."""

    LAT_LNG = "lat_lng"
    LNG_LAT = "lng_lat"


@dataclass(frozen=True)
class Point2D:
    """A finite 2-D coordinate with an explicit axis order."""

    x: float
    y: float
    order: CoordinateOrder = CoordinateOrder.LAT_LNG

    @property
    def lat(self) -> float:
        return self.x if self.order is CoordinateOrder.LAT_LNG else self.y

    @property
    def lng(self) -> float:
        return self.y if self.order is CoordinateOrder.LAT_LNG else self.x

    def swapped(self) -> "Point2D":
        other = (
            CoordinateOrder.LNG_LAT
            if self.order is CoordinateOrder.LAT_LNG
            else CoordinateOrder.LAT_LNG
        )
        return Point2D(self.y, self.x, other)

    def as_order(self, order: CoordinateOrder) -> "Point2D":
        """Return this point expressed in ``order``."""
        if order is self.order:
            return self
        return self.swapped()

    def as_tuple(self) -> tuple:
        return (self.x, self.y)


@dataclass(frozen=True)
class LabeledPoint:
    """
    A validated point plus a reference to the record it came from.

    Attributes:
        point: The coordinate
        record_index: Position of the source record in the caller's input
        record: The source record itself (opaque; e.g. for severity lookups)
    """

    point: Point2D
    record_index: int
    record: Any = None


def _find_column(columns: Iterable[str], candidates: Sequence[str]) -> Optional[str]:
    lookup = {str(col).lower(): col for col in columns}
    for name in candidates:
        if name in lookup:
            return lookup[name]
    return None


def _coerce_records_dataframe(records: Any) -> Tuple[pd.DataFrame, Optional[list]]:
    """Return ``records`` as a positionally indexed DataFrame plus the raw rows."""
    if isinstance(records, pd.DataFrame):
        return records.reset_index(drop=True), None
    rows = list(records)
    return pd.DataFrame(rows), rows


def filter_points(
    records: Any,
    order: CoordinateOrder = CoordinateOrder.LAT_LNG,
) -> List[LabeledPoint]:
    """
    Keep only records with two finite coordinates.

    Records missing either coordinate, or holding a value that is not a
    finite number, are dropped. Nothing is raised for malformed rows so a
    partially broken upload still produces zones.

    Args:
        records: DataFrame or iterable of mappings with latitude/longitude
            fields (``Latitude``/``lat``, ``Longitude``/``lng``/``lon``)
        order: Axis order of the returned points

    Returns:
        Labeled points in input order
    """
    df, rows = _coerce_records_dataframe(records)
    if df.empty:
        return []

    lat_col = _find_column(df.columns, LATITUDE_COLUMNS)
    lng_col = _find_column(df.columns, LONGITUDE_COLUMNS)
    if lat_col is None or lng_col is None:
        return []

    lat = pd.to_numeric(df[lat_col], errors="coerce").to_numpy(dtype=float)
    lng = pd.to_numeric(df[lng_col], errors="coerce").to_numpy(dtype=float)
    valid = np.isfinite(lat) & np.isfinite(lng)

    points: List[LabeledPoint] = []
    for idx in np.flatnonzero(valid):
        idx = int(idx)
        if order is CoordinateOrder.LAT_LNG:
            point = Point2D(float(lat[idx]), float(lng[idx]), order)
        else:
            point = Point2D(float(lng[idx]), float(lat[idx]), order)
        record = rows[idx] if rows is not None else df.iloc[idx]
        points.append(LabeledPoint(point=point, record_index=idx, record=record))
    return points


def points_to_array(points: Sequence[Any]) -> np.ndarray:
    """Stack ``Point2D`` or ``LabeledPoint`` values into an ``(n, 2)`` array."""
    if len(points) == 0:
        return np.empty((0, 2), dtype=float)
    return np.array(
        [
            (p.point if isinstance(p, LabeledPoint) else p).as_tuple()
            for p in points
        ],
        dtype=float,
    )


def array_to_points(array: np.ndarray, order: CoordinateOrder) -> List[Point2D]:
    """Inverse of :func:`points_to_array` for plain points."""
    return [Point2D(float(row[0]), float(row[1]), order) for row in np.asarray(array)]
