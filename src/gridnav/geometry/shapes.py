"""
Footprints and visibility buffers (shapely).
"""

from shapely.geometry import LineString, Point, Polygon, box
from shapely.geometry.base import BaseGeometry

from .coordinate import Coordinate

# segments per quarter circle used for round caps
BUFFER_RESOLUTION = 8


def as_point(coord: Coordinate) -> Point:
    return Point(coord.x, coord.y)


def point_footprint(coord: Coordinate) -> Point:
    """Footprint of a free-space node."""
    return Point(coord.x, coord.y)


def cell_polygon(center: Coordinate, size: float) -> Polygon:
    """Axis-aligned square of side size centred on center."""
    half = size / 2.0
    return box(center.x - half, center.y - half, center.x + half, center.y + half)


def path_buffer(a: Coordinate, b: Coordinate, radius: float) -> BaseGeometry:
    """
    Region swept by a disc of the given radius moving from a to b.

    A zero-length segment degenerates to a disc around a; a zero radius
    leaves the bare segment (or point).
    """
    if a == b:
        geom = Point(a.x, a.y)
    else:
        geom = LineString([(a.x, a.y), (b.x, b.y)])
    if radius <= 0:
        return geom
    return geom.buffer(radius, quad_segs=BUFFER_RESOLUTION, cap_style="round")
