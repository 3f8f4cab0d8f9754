"""
Mapper - sensor fusion

Turns a batch of relative range readings into map updates:
  1. every finite reading becomes an obstacle cell
  2. readings farther than the approach buffer also yield a frontier
     node, placed `buffer` meters back along the ray
  3. a recorded path from the robot to the target that the new
     obstacles block is cut

Usage:
    mapper = Mapper(nav_map)
    new_nodes = mapper.process_sensor_data(position, target, config.buffer, readings)
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..geometry.coordinate import Coordinate, Position, RangeReading, normalize_angle
from .map import NavigationMap, Obstacle, Step

logger = logging.getLogger(__name__)


class Mapper:
    """Feeds sensor readings into a NavigationMap."""

    def __init__(self, nav_map: NavigationMap):
        self.map = nav_map

    @property
    def resolution(self) -> float:
        return self.map.resolution

    def locate_obstacle(self, position: Position, reading: RangeReading) -> Coordinate:
        """
        Grid coordinate of the obstacle seen by reading.

        The hit point is pushed half a cell further along the ray so it
        lands inside the obstacle cell. The push is retried with a full
        cell only when snapping left the cell short of the hit: its center
        is nearer to the robot than the hit and it does not hold the hit.
        """
        heading = normalize_angle(position.heading + reading.angle)
        origin = position.coordinate
        hit = origin + Coordinate.from_angle(heading, reading.range)

        nudged = origin + Coordinate.from_angle(heading, reading.range + self.resolution / 2)
        adopted = self.map.adopt(nudged)
        if (origin.distance_to(adopted) < reading.range
                and not self.map.are_equivalent(adopted, hit)):
            nudged = origin + Coordinate.from_angle(heading, reading.range + self.resolution)
            adopted = self.map.adopt(nudged)
        return adopted

    def frontier_candidate(self, position: Position, reading: RangeReading,
                           buffer: float) -> Optional[Coordinate]:
        """
        Free-space point `buffer` meters short of the obstacle, or None.

        A point inside an obstacle is retried one cell closer to the robot.
        """
        heading = normalize_angle(position.heading + reading.angle)
        origin = position.coordinate

        for back_off in (buffer, buffer + self.resolution):
            reach = reading.range - back_off
            if reach < self.resolution:
                return None
            candidate = origin + Coordinate.from_angle(heading, reach)
            if not self.map.is_obstacle(candidate):
                return candidate
        return None

    def process_sensor_data(self, position: Position, target: Optional[Coordinate],
                            buffer: float, readings: Sequence[RangeReading]) -> List[Step]:
        """
        Apply one batch of readings to the map.

        Args:
            position: Robot position when the readings were taken
            target: Final target, or None if there is none yet
            buffer: Minimum approach distance (chassis radius + resolution)
            readings: Relative readings, inf range meaning nothing seen

        Returns:
            Frontier nodes created by this batch
        """
        target = Coordinate.of(target) if target is not None else None
        new_obstacles: Dict[str, Obstacle] = {}
        created: List[Step] = []

        for reading in readings:
            if not reading.is_finite or reading.range <= 0:
                continue

            before = self.map.obstacle_count
            obstacle = self.map.add_obstacle(self.locate_obstacle(position, reading))
            if self.map.obstacle_count > before:
                new_obstacles[obstacle.id] = obstacle

            if reading.range <= buffer:
                continue

            candidate = self.frontier_candidate(position, reading, buffer)
            if candidate is None:
                continue
            if self.map.is_obstacle(self.map.adopt(candidate)) or self.map.has_node(candidate):
                continue

            if target is None:
                node = self.map.add_coord(candidate, 0.0)
            else:
                indirect = not self.map.clear_view(candidate, target)
                node = self.map.add_coord(candidate, candidate.distance_to(target),
                                          visited=False, indirect=indirect)
            self.map.add_path(position.coordinate, node.coordinate)
            created.append(node)

        if target is not None and new_obstacles:
            changed = self.map.update_is_indirect(target, new_obstacles.values())
            if changed:
                logger.debug("%d nodes lost their view of %s", changed, target)
            here = position.coordinate
            if not self.map.clear_view(here, target) and self.map.cut_path(here, target):
                logger.info("path %s -> %s cut by new obstacles", here, target)

        logger.debug("processed %d readings at %s: %d new obstacles, %d frontier nodes",
                     len(readings), position, len(new_obstacles), len(created))
        return created
