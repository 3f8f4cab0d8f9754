"""
Navigation Map - Spatial Cost Graph

Stores what the robot has learned about the world:
- free-space nodes, one per grid cell, each with a cost to the target
- obstacle cells sensed by the range sensor
- path edges between nodes the robot has travelled or seen

Replanning is deliberately cheap. On a target change every node gets its
straight-line distance to the new target, and nodes without a clear view
of it get a penalty equal to that distance. No graph search is run; the
best next step is re-ranked on every query instead.

Usage:
    nav_map = NavigationMap(NavigationConfig(resolution=0.5))
    nav_map.add_obstacle(Coordinate(0, 1))
    nav_map.add_coord(Coordinate(2, 0), distance=3.0)
    step = nav_map.get_best_step(Coordinate(0, 0))
"""

import logging
import math
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx
import numpy as np
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.prepared import prep

from ..core.config import NavigationConfig
from ..core.errors import InvariantViolation
from ..geometry.coordinate import Coordinate
from ..geometry.scale import ScaleInfo
from ..geometry.shapes import as_point, cell_polygon, path_buffer, point_footprint
from .snapshot import MapSnapshot, NodeState, ObstacleState

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]

_NEIGHBORHOOD = [(di, dj) for di in (-1, 0, 1) for dj in (-1, 0, 1)]


def _as_float(value, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvariantViolation(f"{name} must be a number, got {value!r}") from e


def _check_distance(value: float) -> float:
    value = _as_float(value, "distance")
    if math.isnan(value) or math.isinf(value):
        raise InvariantViolation(f"distance must be finite, got {value}")
    if value < 0:
        raise InvariantViolation(f"distance must be >= 0, got {value}")
    return value


def _check_adjustment(value: float) -> float:
    value = _as_float(value, "adjustment")
    if math.isnan(value):
        raise InvariantViolation(f"adjustment must be a number, got {value}")
    if value < 0:
        raise InvariantViolation(f"adjustment must be >= 0, got {value}")
    return value


@dataclass
class Step:
    """
    A free-space node of the map.

    cost is distance (straight line to the target) plus adjustment.
    indirect means there is no clear view to the target, so the straight
    line underestimates the real cost.
    """
    coordinate: Coordinate
    distance: float
    adjustment: float = 0.0
    indirect: bool = False
    visited: bool = False
    geometry: BaseGeometry = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        self.distance = _check_distance(self.distance)
        self.adjustment = _check_adjustment(self.adjustment)
        if self.geometry is None:
            self.geometry = point_footprint(self.coordinate)

    @property
    def cost(self) -> float:
        return self.distance + self.adjustment

    @property
    def rank(self) -> float:
        """Cost used when comparing candidate next steps."""
        return self.adjustment if self.indirect else self.distance

    def to_state(self) -> NodeState:
        return NodeState(self.coordinate.x, self.coordinate.y, self.distance,
                         self.adjustment, self.indirect, self.visited)


@dataclass(frozen=True)
class Obstacle:
    """A sensed obstacle cell."""
    id: str
    coordinate: Coordinate
    cell: Cell
    geometry: BaseGeometry = field(repr=False, compare=False)


class NavigationMap:
    """
    Spatial cost graph.

    Nodes and obstacles are both keyed by their grid cell, so the obstacle
    dict doubles as a uniform-grid spatial index for visibility tests.
    Every public method holds one re-entrant lock.
    """

    def __init__(self, config: Optional[NavigationConfig] = None):
        self.config = config or NavigationConfig()
        self.scale = ScaleInfo(self.config.resolution)
        self._lock = threading.RLock()
        self._nodes: Dict[Cell, Step] = {}
        self._obstacles: Dict[Cell, Obstacle] = {}
        self._obstacles_by_id: Dict[str, Obstacle] = {}
        self._paths = nx.Graph()

    # ------------------------------------------------------------------ #
    # Grid helpers
    # ------------------------------------------------------------------ #

    @property
    def resolution(self) -> float:
        return self.scale.resolution

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def obstacle_count(self) -> int:
        return len(self._obstacles)

    def adopt(self, coord) -> Coordinate:
        """Snap coord onto the map grid."""
        return self.scale.adopt(Coordinate.of(coord))

    def are_equivalent(self, a, b) -> bool:
        """True if a and b are the same node (same grid cell)."""
        return self.scale.same_cell(Coordinate.of(a), Coordinate.of(b))

    def is_empty(self) -> bool:
        with self._lock:
            return not self._nodes and not self._obstacles

    def clear(self):
        """Forget every node, obstacle and path."""
        with self._lock:
            self._nodes.clear()
            self._obstacles.clear()
            self._obstacles_by_id.clear()
            self._paths.clear()

    # ------------------------------------------------------------------ #
    # Nodes
    # ------------------------------------------------------------------ #

    def add_coord(self, coord, distance: float, visited: bool = False,
                  indirect: bool = False, adjustment: Optional[float] = None) -> Step:
        """
        Insert or update the node at coord's cell.

        Args:
            coord: Any coordinate inside the cell
            distance: Straight-line distance to the target
            visited: Node was reached by the robot
            indirect: No clear view to the target
            adjustment: Explicit penalty; defaults to distance when indirect

        Returns:
            The stored node
        """
        coord = Coordinate.of(coord)
        distance = _check_distance(distance)
        if adjustment is None:
            adjustment = distance if indirect else 0.0
        adjustment = _check_adjustment(adjustment)

        with self._lock:
            cell = self.scale.quantize(coord)
            node = self._nodes.get(cell)
            if node is None:
                node = Step(self.scale.cell_center(cell), distance, adjustment,
                            bool(indirect), bool(visited))
                self._nodes[cell] = node
                logger.debug("node added %s", node)
            else:
                node.distance = distance
                node.adjustment = adjustment
                node.indirect = bool(indirect)
                node.visited = bool(visited)
            return node

    def get_step(self, coord) -> Optional[Step]:
        """Node at coord's cell, if any."""
        with self._lock:
            return self._nodes.get(self.scale.quantize(Coordinate.of(coord)))

    def has_node(self, coord) -> bool:
        return self.get_step(coord) is not None

    def set_visited(self, coord) -> Optional[Step]:
        """Mark the node at coord visited."""
        with self._lock:
            node = self.get_step(coord)
            if node is not None:
                node.visited = True
            return node

    def set_temporary_cost(self, coord, adjustment: float = math.inf) -> Optional[Step]:
        """
        Force an adjustment onto a node.

        The node is flagged indirect so the adjustment is what ranks it
        as a candidate step.
        """
        adjustment = _check_adjustment(adjustment)
        with self._lock:
            node = self.get_step(coord)
            if node is not None:
                node.adjustment = adjustment
                node.indirect = True
            return node

    def get_targets(self) -> List[Step]:
        """Live nodes ordered by cost, then x, then y."""
        with self._lock:
            return sorted(self._nodes.values(),
                          key=lambda n: (n.cost, n.coordinate.x, n.coordinate.y))

    def get_coords(self) -> List[Coordinate]:
        """Coordinates of the live nodes, in get_targets() order."""
        return [n.coordinate for n in self.get_targets()]

    # ------------------------------------------------------------------ #
    # Obstacles
    # ------------------------------------------------------------------ #

    def add_obstacle(self, coord) -> Obstacle:
        """
        Register an obstacle at coord's cell.

        Nodes whose footprint collides with the new cell are removed,
        along with their path edges. Adding to an occupied cell returns
        the existing obstacle.
        """
        coord = Coordinate.of(coord)
        with self._lock:
            cell = self.scale.quantize(coord)
            existing = self._obstacles.get(cell)
            if existing is not None:
                return existing

            center = self.scale.cell_center(cell)
            obstacle = Obstacle(uuid.uuid4().hex, center, cell,
                                cell_polygon(center, self.resolution))
            self._obstacles[cell] = obstacle
            self._obstacles_by_id[obstacle.id] = obstacle

            for di, dj in _NEIGHBORHOOD:
                near = (cell[0] + di, cell[1] + dj)
                node = self._nodes.get(near)
                if node is not None and obstacle.geometry.intersects(node.geometry):
                    del self._nodes[near]
                    if self._paths.has_node(near):
                        self._paths.remove_node(near)
                    logger.debug("node %s removed by obstacle", node.coordinate)
            return obstacle

    def get_obstacle(self, obstacle_id: str) -> Optional[Obstacle]:
        with self._lock:
            return self._obstacles_by_id.get(obstacle_id)

    def get_obstacles(self) -> List[Obstacle]:
        """Obstacles ordered by cell."""
        with self._lock:
            return [self._obstacles[c] for c in sorted(self._obstacles)]

    def is_obstacle(self, coord) -> bool:
        """True if coord lies inside (or on the edge of) an obstacle."""
        coord = Coordinate.of(coord)
        with self._lock:
            if not self._obstacles:
                return False
            i, j = self.scale.quantize(coord)
            point = as_point(coord)
            for di, dj in _NEIGHBORHOOD:
                obstacle = self._obstacles.get((i + di, j + dj))
                if obstacle is not None and obstacle.geometry.intersects(point):
                    return True
            return False

    def _obstacles_near(self, region: BaseGeometry) -> Iterator[Obstacle]:
        """Obstacles whose cells overlap the bounding box of region."""
        minx, miny, maxx, maxy = region.bounds
        res = self.resolution
        i_min = int(math.ceil(minx / res - 0.5))
        i_max = int(math.floor(maxx / res + 0.5))
        j_min = int(math.ceil(miny / res - 0.5))
        j_max = int(math.floor(maxy / res + 0.5))

        if (i_max - i_min + 1) * (j_max - j_min + 1) <= len(self._obstacles):
            for i in range(i_min, i_max + 1):
                for j in range(j_min, j_max + 1):
                    obstacle = self._obstacles.get((i, j))
                    if obstacle is not None:
                        yield obstacle
        else:
            for (i, j), obstacle in self._obstacles.items():
                if i_min <= i <= i_max and j_min <= j <= j_max:
                    yield obstacle

    def _is_clear(self, a: Coordinate, b: Coordinate) -> bool:
        if not self._obstacles:
            return True
        region = path_buffer(a, b, self.config.chassis_radius)
        prepared = prep(region)
        for obstacle in self._obstacles_near(region):
            if prepared.intersects(obstacle.geometry):
                return False
        return True

    def clear_view(self, a, b) -> bool:
        """
        True if the robot can travel in a straight line from a to b.

        The segment is buffered by the chassis radius (round caps) and
        tested against every obstacle cell it could touch.
        """
        a, b = Coordinate.of(a), Coordinate.of(b)
        with self._lock:
            return self._is_clear(a, b)

    is_clear_path = clear_view

    # ------------------------------------------------------------------ #
    # Planning queries
    # ------------------------------------------------------------------ #

    def get_best_step(self, current) -> Optional[Step]:
        """
        Cheapest reachable next step from current.

        Every unvisited node outside current's cell is ranked by the
        distance to it plus its own rank (adjustment when indirect,
        distance otherwise). The first one in ranking order with a clear
        view from current wins.

        Returns:
            The chosen node, or None if no candidate is visible
        """
        current = Coordinate.of(current)
        with self._lock:
            here = self.scale.quantize(current)
            candidates = [n for cell, n in self._nodes.items()
                          if cell != here and not n.visited]
            if not candidates:
                return None

            xs = np.array([n.coordinate.x for n in candidates])
            ys = np.array([n.coordinate.y for n in candidates])
            ranks = np.array([n.rank for n in candidates])
            combined = np.hypot(xs - current.x, ys - current.y) + ranks

            for idx in np.lexsort((ys, xs, combined)):
                node = candidates[idx]
                if self._is_clear(current, node.coordinate):
                    logger.debug("best step from %s is %s (%.3f)",
                                 current, node.coordinate, combined[idx])
                    return node
            return None

    def recalculate(self, target) -> Coordinate:
        """
        Re-cost every node against a new target.

        Distances become straight-line distances; nodes without a clear
        view of the target get adjustment = distance and the indirect flag.

        Returns:
            The target
        """
        target = Coordinate.of(target)
        with self._lock:
            blocked = 0
            for node in self._nodes.values():
                node.distance = node.coordinate.distance_to(target)
                if self._is_clear(node.coordinate, target):
                    node.adjustment = 0.0
                    node.indirect = False
                else:
                    node.adjustment = node.distance
                    node.indirect = True
                    blocked += 1
            logger.debug("recalculated %d nodes for %s (%d indirect)",
                         len(self._nodes), target, blocked)
            return target

    def update_is_indirect(self, target, obstacles: Iterable[Obstacle]) -> int:
        """
        Flag direct nodes whose view of target is blocked by obstacles.

        Args:
            target: Current target
            obstacles: Newly added obstacles

        Returns:
            Number of nodes that became indirect
        """
        target = Coordinate.of(target)
        geometries = [o.geometry for o in obstacles]
        if not geometries:
            return 0

        with self._lock:
            blockers = prep(unary_union(geometries))
            changed = 0
            for node in self._nodes.values():
                if node.indirect:
                    continue
                region = path_buffer(node.coordinate, target, self.config.chassis_radius)
                if blockers.intersects(region):
                    node.indirect = True
                    node.adjustment = node.distance
                    changed += 1
            return changed

    # ------------------------------------------------------------------ #
    # Paths
    # ------------------------------------------------------------------ #

    def add_path(self, *coords) -> None:
        """Record edges between consecutive coordinates."""
        with self._lock:
            cells = [self.scale.quantize(Coordinate.of(c)) for c in coords]
            for a, b in zip(cells, cells[1:]):
                if a != b:
                    self._paths.add_edge(a, b)

    def cut_path(self, a, b) -> bool:
        """Remove the edge between a and b. Returns True if it existed."""
        with self._lock:
            ca = self.scale.quantize(Coordinate.of(a))
            cb = self.scale.quantize(Coordinate.of(b))
            if self._paths.has_edge(ca, cb):
                self._paths.remove_edge(ca, cb)
                return True
            return False

    def has_path(self, a, b) -> bool:
        """True if recorded edges connect a and b."""
        with self._lock:
            ca = self.scale.quantize(Coordinate.of(a))
            cb = self.scale.quantize(Coordinate.of(b))
            if ca not in self._paths or cb not in self._paths:
                return False
            return nx.has_path(self._paths, ca, cb)

    def get_paths(self) -> List[Tuple[Coordinate, Coordinate]]:
        """Recorded edges as coordinate pairs."""
        with self._lock:
            center = self.scale.cell_center
            return [(center(a), center(b)) for a, b in sorted(
                tuple(sorted(edge)) for edge in self._paths.edges())]

    def record_solution(self, solution):
        """Simplify solution against the map and record its edges."""
        with self._lock:
            solution.simplify(self.clear_view)
            self.add_path(*solution)
            return solution

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def snapshot(self) -> MapSnapshot:
        """Immutable copy of nodes, obstacles and edges."""
        with self._lock:
            nodes = tuple(self._nodes[c].to_state() for c in sorted(self._nodes))
            obstacles = tuple(ObstacleState(o.id, o.coordinate.x, o.coordinate.y, self.resolution)
                              for o in self.get_obstacles())
            edges = tuple((a.as_tuple(), b.as_tuple()) for a, b in self.get_paths())
            return MapSnapshot(self.resolution, self.config.chassis_radius,
                               nodes, obstacles, edges)

    def __repr__(self) -> str:
        return (f"NavigationMap(resolution={self.resolution}, nodes={len(self._nodes)}, "
                f"obstacles={len(self._obstacles)})")
