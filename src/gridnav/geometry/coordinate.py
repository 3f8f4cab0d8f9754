"""
Coordinates and Positions

Planar types shared by the whole planner.

Conventions:
- Units are meters and radians
- Angles are counter-clockwise from the X axis, normalized to (-pi, pi]
- Coordinate is immutable and hashable; Position adds a mutable heading
"""

import math
from dataclasses import dataclass
from typing import Tuple, Union

from ..core.errors import InvalidCoordinateError, InvariantViolation

TWO_PI = 2.0 * math.pi


def normalize_angle(angle: float) -> float:
    """Normalize angle to (-pi, pi]. NaN normalizes to 0."""
    if math.isnan(angle):
        return 0.0
    result = math.atan2(math.sin(angle), math.cos(angle))
    if result <= -math.pi:
        return math.pi
    return result


def angle_difference(a: float, b: float) -> float:
    """Signed smallest rotation that turns heading b into heading a."""
    return normalize_angle(a - b)


@dataclass(frozen=True)
class Coordinate:
    """Immutable 2D point."""
    x: float
    y: float

    def __post_init__(self):
        # store plain floats so numpy scalars never leak into hashes
        try:
            x, y = float(self.x), float(self.y)
        except (TypeError, ValueError) as e:
            raise InvalidCoordinateError(
                f"coordinate must be numeric, got ({self.x!r}, {self.y!r})") from e
        if math.isnan(x) or math.isnan(y):
            raise InvalidCoordinateError(f"NaN coordinate ({x}, {y})")
        object.__setattr__(self, 'x', x)
        object.__setattr__(self, 'y', y)

    @staticmethod
    def from_xy(x: float, y: float) -> 'Coordinate':
        return Coordinate(x, y)

    @staticmethod
    def from_angle(theta: float, range_: float) -> 'Coordinate':
        """Coordinate at polar position (theta, range) from the origin."""
        return Coordinate(range_ * math.cos(theta), range_ * math.sin(theta))

    @staticmethod
    def of(value: Union['Coordinate', 'Position', Tuple[float, float]]) -> 'Coordinate':
        """Coerce a Coordinate, Position or (x, y) tuple to a Coordinate."""
        if isinstance(value, Coordinate):
            return value
        if isinstance(value, Position):
            return value.coordinate
        x, y = value
        return Coordinate(x, y)

    @property
    def range(self) -> float:
        """Distance from the origin."""
        return math.hypot(self.x, self.y)

    @property
    def theta(self) -> float:
        """Angle from the origin."""
        if self.x == 0.0 and self.y == 0.0:
            return 0.0
        return normalize_angle(math.atan2(self.y, self.x))

    def __add__(self, other: 'Coordinate') -> 'Coordinate':
        return Coordinate(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Coordinate') -> 'Coordinate':
        return Coordinate(self.x - other.x, self.y - other.y)

    def distance_to(self, other: 'Coordinate') -> float:
        """Euclidean distance to another coordinate."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def angle_to(self, other: 'Coordinate') -> float:
        """Heading that points from this coordinate toward other."""
        return (other - self).theta

    def quantize(self, resolution: float) -> Tuple[int, int]:
        """Integer grid cell of this coordinate (round half up)."""
        return (int(math.floor(self.x / resolution + 0.5)),
                int(math.floor(self.y / resolution + 0.5)))

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"Coordinate({self.x:g}, {self.y:g})"


@dataclass(frozen=True)
class RangeReading:
    """
    One relative sensor reading.

    angle is relative to the robot heading; range is inf when the sensor
    saw nothing within its maximum range.
    """
    angle: float
    range: float

    def __post_init__(self):
        if math.isnan(self.angle) or math.isnan(self.range):
            raise InvariantViolation(f"NaN sensor reading ({self.angle}, {self.range})")
        if self.range < 0:
            raise InvariantViolation(f"negative sensor range {self.range}")

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.range)

    def to_coordinate(self, heading: float = 0.0) -> Coordinate:
        """Offset vector of this reading for a robot facing heading."""
        return Coordinate.from_angle(normalize_angle(heading + self.angle), self.range)


class Position:
    """
    A coordinate plus a heading.

    The coordinate is fixed for the lifetime of the object; only the
    heading may change.

    Usage:
        pos = Position(Coordinate(-1, -3), math.pi / 2)
        nxt = pos.next_position(RangeReading(0.0, 1.0))   # (-1, -2)
    """

    __slots__ = ('_coordinate', '_heading')

    def __init__(self, coordinate: Coordinate, heading: float = 0.0):
        self._coordinate = Coordinate.of(coordinate)
        self._heading = normalize_angle(heading)

    @staticmethod
    def from_xy(x: float, y: float, heading: float = 0.0) -> 'Position':
        return Position(Coordinate(x, y), heading)

    @property
    def coordinate(self) -> Coordinate:
        return self._coordinate

    @property
    def x(self) -> float:
        return self._coordinate.x

    @property
    def y(self) -> float:
        return self._coordinate.y

    @property
    def heading(self) -> float:
        return self._heading

    @heading.setter
    def heading(self, value: float):
        self._heading = normalize_angle(value)

    def distance_to(self, other) -> float:
        return self._coordinate.distance_to(Coordinate.of(other))

    def heading_to(self, other) -> float:
        """Absolute heading from this position toward other."""
        return self._coordinate.angle_to(Coordinate.of(other))

    def next_position(self, move: RangeReading) -> 'Position':
        """
        Position reached by turning by move.angle and travelling move.range.

        Args:
            move: Relative move (angle relative to the current heading)

        Returns:
            New Position facing the direction of travel
        """
        heading = normalize_angle(self._heading + move.angle)
        return Position(self._coordinate + Coordinate.from_angle(heading, move.range), heading)

    def relative_location(self, other) -> RangeReading:
        """The relative move that reaches other from here."""
        other = Coordinate.of(other)
        return RangeReading(angle_difference(self.heading_to(other), self._heading),
                            self.distance_to(other))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._coordinate == other._coordinate and self._heading == other._heading

    def __hash__(self) -> int:
        return hash((self._coordinate, self._heading))

    def __repr__(self) -> str:
        return f"Position({self.x:g}, {self.y:g}, heading={math.degrees(self._heading):.1f} deg)"
