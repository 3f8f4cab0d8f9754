"""
Grid quantization.

Every map node and obstacle lives on a square grid of side `resolution`.
Two coordinates are the same node iff they fall in the same cell.
"""

import math
from decimal import Decimal
from typing import Tuple

from .coordinate import Coordinate
from ..core.errors import InvariantViolation


class ScaleInfo:
    """
    Grid resolution and snapping helpers.

    Usage:
        scale = ScaleInfo(0.5)
        scale.adopt(Coordinate(0.7, -0.2))   # Coordinate(0.5, 0)
    """

    def __init__(self, resolution: float = 0.5):
        if not (math.isfinite(resolution) and resolution > 0):
            raise InvariantViolation(f"resolution must be positive, got {resolution}")
        self.resolution = float(resolution)
        # digits kept on snapped values, so 3 * 0.1 reads back as 0.3
        exponent = Decimal(repr(self.resolution)).normalize().as_tuple().exponent
        self.decimal_places = max(0, -exponent) + 1

    @property
    def half_resolution(self) -> float:
        return self.resolution / 2.0

    def quantize(self, coord: Coordinate) -> Tuple[int, int]:
        """Integer cell of coord."""
        return coord.quantize(self.resolution)

    def cell_center(self, cell: Tuple[int, int]) -> Coordinate:
        """Coordinate of the center of an integer cell."""
        return Coordinate(round(cell[0] * self.resolution, self.decimal_places),
                          round(cell[1] * self.resolution, self.decimal_places))

    def adopt(self, coord: Coordinate) -> Coordinate:
        """Snap coord onto the center of its cell."""
        return self.cell_center(self.quantize(coord))

    def same_cell(self, a: Coordinate, b: Coordinate) -> bool:
        return self.quantize(a) == self.quantize(b)

    def __repr__(self) -> str:
        return f"ScaleInfo(resolution={self.resolution})"
