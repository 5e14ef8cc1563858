"""
Geodesic length and area of WGS84 geometries.
"""

import logging
from typing import Optional

from pyproj import Geod
from shapely.geometry import MultiPolygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient

from infra_stats.config import GEOD_ELLIPSOID

logger = logging.getLogger(__name__)

GEOD = Geod(ellps=GEOD_ELLIPSOID)


class DegenerateGeometryError(ValueError):
    """A polygon that cannot be resolved into a valid, non-empty area."""


def line_length(geom: BaseGeometry) -> float:
    """Geodesic length of a (multi)linestring in meters."""
    if geom.is_empty:
        return 0.0
    return float(GEOD.geometry_length(geom))


def _orient_rings(geom: BaseGeometry) -> BaseGeometry:
    """Wind exteriors counter-clockwise and holes clockwise."""
    if geom.geom_type == "Polygon":
        return orient(geom, 1.0)
    if geom.geom_type == "MultiPolygon":
        return MultiPolygon([orient(part, 1.0) for part in geom.geoms])
    return geom


def polygon_area(geom: BaseGeometry) -> float:
    """
    Geodesic area of a (multi)polygon in square meters.

    Raises:
        DegenerateGeometryError: if the geometry is empty, self-intersecting
            or encloses no area
    """
    if geom.is_empty:
        raise DegenerateGeometryError("empty polygon")
    if not geom.is_valid:
        raise DegenerateGeometryError("invalid polygon")

    # pyproj sums signed ring areas, so holes must wind against their shell
    area, _ = GEOD.geometry_area_perimeter(_orient_rings(geom))
    area = float(area)
    if area <= 0:
        raise DegenerateGeometryError("zero-area polygon")
    return area


def area_or_none(geom: Optional[BaseGeometry]) -> Optional[float]:
    """Geodesic area, or None if the polygon is missing or degenerate."""
    if geom is None:
        return None
    try:
        return polygon_area(geom)
    except DegenerateGeometryError as e:
        logger.debug("Degenerate polygon: %s", e)
        return None
