"""
Simulated environment.

Ground-truth obstacles the simulated range sensor casts rays against.
Arenas are usually built from unit cells: cell (x, y) is the square
[x, x + size] x [y, y + size].
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from enum import Enum

from shapely.geometry import LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry


class ObstacleType(Enum):
    """Obstacle shapes."""
    WALL = "wall"           # Segment
    BOX = "box"             # Rectangle
    CYLINDER = "cylinder"   # Post


@dataclass
class Obstacle:
    """
    Ground-truth obstacle.

    WALL: (x, y) -> (x2, y2)
    BOX: center (x, y), width, height, rotation
    CYLINDER: center (x, y), radius
    """
    obstacle_type: ObstacleType
    x: float
    y: float
    # WALL end point
    x2: Optional[float] = None
    y2: Optional[float] = None
    # BOX dimensions
    width: Optional[float] = None
    height: Optional[float] = None
    rotation: float = 0.0
    # CYLINDER radius
    radius: Optional[float] = None

    def intersect_ray(self, origin_x: float, origin_y: float, angle: float) -> Optional[float]:
        """
        Distance along a ray to this obstacle.

        Args:
            origin_x, origin_y: Ray origin
            angle: Ray direction in radians

        Returns:
            Distance to the first hit, or None
        """
        if self.obstacle_type == ObstacleType.WALL:
            return self._intersect_wall(origin_x, origin_y, angle)
        elif self.obstacle_type == ObstacleType.CYLINDER:
            return self._intersect_circle(origin_x, origin_y, angle)
        elif self.obstacle_type == ObstacleType.BOX:
            return self._intersect_box(origin_x, origin_y, angle)
        return None

    def _intersect_wall(self, ox: float, oy: float, angle: float) -> Optional[float]:
        """Ray-segment intersection."""
        dx = math.cos(angle)
        dy = math.sin(angle)

        x1, y1 = self.x, self.y
        sx = self.x2 - x1
        sy = self.y2 - y1

        denom = dx * sy - dy * sx
        if abs(denom) < 1e-10:
            return None  # Parallel

        t = ((x1 - ox) * sy - (y1 - oy) * sx) / denom
        u = ((x1 - ox) * dy - (y1 - oy) * dx) / denom

        if t > 0.001 and 0 <= u <= 1:
            return t
        return None

    def _intersect_circle(self, ox: float, oy: float, angle: float) -> Optional[float]:
        """Ray-circle intersection."""
        dx = math.cos(angle)
        dy = math.sin(angle)

        fx = ox - self.x
        fy = oy - self.y

        b = 2 * (fx * dx + fy * dy)
        c = fx * fx + fy * fy - self.radius * self.radius

        discriminant = b * b - 4 * c
        if discriminant < 0:
            return None

        sqrt_disc = math.sqrt(discriminant)
        t1 = (-b - sqrt_disc) / 2
        t2 = (-b + sqrt_disc) / 2

        if t1 > 0.001:
            return t1
        if t2 > 0.001:
            return t2
        return None

    def corners(self) -> List[Tuple[float, float]]:
        """Corners of a BOX, counter-clockwise."""
        w, h = self.width / 2, self.height / 2
        cos_r = math.cos(self.rotation)
        sin_r = math.sin(self.rotation)
        return [(px * cos_r - py * sin_r + self.x, px * sin_r + py * cos_r + self.y)
                for px, py in ((-w, -h), (w, -h), (w, h), (-w, h))]

    def _intersect_box(self, ox: float, oy: float, angle: float) -> Optional[float]:
        """Ray-box intersection (four walls)."""
        rotated = self.corners()
        min_dist = None
        for i in range(4):
            x1, y1 = rotated[i]
            x2, y2 = rotated[(i + 1) % 4]

            wall = Obstacle(ObstacleType.WALL, x1, y1, x2, y2)
            dist = wall._intersect_wall(ox, oy, angle)

            if dist is not None and (min_dist is None or dist < min_dist):
                min_dist = dist

        return min_dist

    def to_geometry(self) -> BaseGeometry:
        """Shapely shape of the obstacle."""
        if self.obstacle_type == ObstacleType.WALL:
            return LineString([(self.x, self.y), (self.x2, self.y2)])
        if self.obstacle_type == ObstacleType.CYLINDER:
            return Point(self.x, self.y).buffer(self.radius)
        return Polygon(self.corners())


@dataclass
class Environment:
    """
    Simulated world with obstacles.

    Usage:
        env = Environment()
        env.add_border(-5, -5, 9, 9)
        env.add_row(-1, -3, 1)
        dist = env.raycast(-1, -3, math.pi / 2)   # 2.0
    """
    obstacles: List[Obstacle] = field(default_factory=list)
    cell_size: float = 1.0    # Side of a cell added by add_cell()

    def add_obstacle(self, obstacle: Obstacle):
        self.obstacles.append(obstacle)

    def add_wall(self, x1: float, y1: float, x2: float, y2: float):
        self.obstacles.append(Obstacle(ObstacleType.WALL, x1, y1, x2, y2))

    def add_box(self, x: float, y: float, width: float, height: float, rotation: float = 0):
        self.obstacles.append(Obstacle(
            ObstacleType.BOX, x, y,
            width=width, height=height, rotation=rotation
        ))

    def add_cylinder(self, x: float, y: float, radius: float):
        self.obstacles.append(Obstacle(ObstacleType.CYLINDER, x, y, radius=radius))

    def add_cell(self, x: int, y: int):
        """Fill cell (x, y), the square [x, x + size] x [y, y + size]."""
        half = self.cell_size / 2
        self.add_box(x * self.cell_size + half, y * self.cell_size + half,
                     self.cell_size, self.cell_size)

    def add_row(self, y: int, x_start: int, x_end: int):
        """Fill cells x_start..x_end (inclusive) of row y."""
        for x in range(x_start, x_end + 1):
            self.add_cell(x, y)

    def add_column(self, x: int, y_start: int, y_end: int):
        """Fill cells y_start..y_end (inclusive) of column x."""
        for y in range(y_start, y_end + 1):
            self.add_cell(x, y)

    def add_border(self, x: int, y: int, width: int, height: int):
        """Ring of cells whose outer corner cells are (x, y) and (x + width - 1, y + height - 1)."""
        x_end = x + width - 1
        y_end = y + height - 1
        self.add_row(y, x, x_end)
        self.add_row(y_end, x, x_end)
        self.add_column(x, y + 1, y_end - 1)
        self.add_column(x_end, y + 1, y_end - 1)

    def raycast(self, origin_x: float, origin_y: float, angle: float,
                max_range: float = 12.0) -> float:
        """
        Distance to the first obstacle along a ray.

        Args:
            origin_x, origin_y: Ray origin
            angle: Ray direction (radians)
            max_range: Returned when nothing is hit

        Returns:
            Distance to the closest hit, or max_range
        """
        min_dist = max_range
        for obstacle in self.obstacles:
            dist = obstacle.intersect_ray(origin_x, origin_y, angle)
            if dist is not None and dist < min_dist:
                min_dist = dist
        return min_dist

    def is_blocked(self, x: float, y: float, radius: float = 0.0) -> bool:
        """True if a disc of radius at (x, y) touches an obstacle."""
        disc = Point(x, y).buffer(radius) if radius > 0 else Point(x, y)
        return any(o.to_geometry().intersects(disc) for o in self.obstacles)

    def is_path_blocked(self, x1: float, y1: float, x2: float, y2: float,
                        radius: float = 0.0) -> bool:
        """True if a disc of radius moving from (x1, y1) to (x2, y2) touches an obstacle."""
        if (x1, y1) == (x2, y2):
            return self.is_blocked(x1, y1, radius)
        swept = LineString([(x1, y1), (x2, y2)])
        if radius > 0:
            swept = swept.buffer(radius)
        return any(o.to_geometry().intersects(swept) for o in self.obstacles)

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of all obstacles."""
        if not self.obstacles:
            return (0.0, 0.0, 0.0, 0.0)
        boxes = [o.to_geometry().bounds for o in self.obstacles]
        return (min(b[0] for b in boxes), min(b[1] for b in boxes),
                max(b[2] for b in boxes), max(b[3] for b in boxes))


def create_wall_arena() -> Environment:
    """
    9 x 9 bordered arena with one interior wall.

    Border cells run from -5 to 3 on both axes; the wall fills row y = -1
    for x = -3..1, between the start (-1, -3) and the target (-1, 1).
    """
    env = Environment()
    env.add_border(-5, -5, 9, 9)
    env.add_row(-1, -3, 1)
    return env


def create_double_wall_arena() -> Environment:
    """
    Same border with two offset walls, forcing an S-shaped route.
    """
    env = Environment()
    env.add_border(-5, -5, 9, 9)
    env.add_row(-2, -4, 0)
    env.add_row(0, -2, 2)
    return env


def create_empty_arena(size: int = 9) -> Environment:
    """Bordered arena with nothing inside."""
    env = Environment()
    start = -(size // 2) - 1
    env.add_border(start, start, size, size)
    return env
