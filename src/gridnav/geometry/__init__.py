"""
Geometry module.
- Coordinates, positions and relative readings
- Angle normalization
- Grid quantization
- Footprints and visibility buffers
"""

from .coordinate import (
    Coordinate,
    Position,
    RangeReading,
    normalize_angle,
    angle_difference,
)
from .scale import ScaleInfo
from .shapes import as_point, point_footprint, cell_polygon, path_buffer

__all__ = [
    'Coordinate',
    'Position',
    'RangeReading',
    'normalize_angle',
    'angle_difference',
    'ScaleInfo',
    'as_point',
    'point_footprint',
    'cell_polygon',
    'path_buffer',
]
