"""
Processor - the sense / plan / move loop

Wires a sensor and a mover to a map, mapper and planner and drives the
planner until the target is reached or the step budget runs out.

Usage:
    mover = SimulatedMover(Position.from_xy(-1, -3))
    sensor = SimulatedRangeSensor(create_wall_arena(), lambda: mover.position)
    processor = Processor(sensor, mover)
    reached = processor.move_to(Coordinate(-1, 1))
"""

import logging
from typing import List, Optional

from ..core.config import GridNavConfig
from ..geometry.coordinate import Coordinate
from ..interface.sensor_interface import IDistanceSensor, IMover
from ..mapping.map import NavigationMap, Step
from ..mapping.mapper import Mapper
from .planner import Planner
from .snapshot import NavigationSnapshot
from .solution import Solution

logger = logging.getLogger(__name__)


class Processor:
    """Drives a Planner with real or simulated collaborators."""

    def __init__(self, sensor: IDistanceSensor, mover: IMover,
                 config: Optional[GridNavConfig] = None,
                 nav_map: Optional[NavigationMap] = None):
        self.config = config or GridNavConfig()
        self.map = nav_map or NavigationMap(self.config.navigation)
        self.mapper = Mapper(self.map)
        self.sensor = sensor
        self.mover = mover
        self.planner = Planner(self.map, mover.position)
        self.steps_taken = 0
        # waypoints left on the way forward, latest last
        self._trail: List[Coordinate] = []

    def sense(self) -> List[Step]:
        """Scan and feed the readings to the mapper."""
        readings = self.sensor.sense()
        return self.mapper.process_sensor_data(
            self.planner.current_position,
            self.planner.final_target,
            self.map.config.buffer,
            readings,
        )

    def start(self, target) -> None:
        """Set a new final target and take the first scan."""
        self.planner.set_target(Coordinate.of(target))
        self._trail.clear()
        self.sense()

    def step(self) -> bool:
        """
        One planning decision plus the resulting move and scan.

        The robot only heads for a target the map shows in clear view.
        Otherwise it backs up along the waypoints it came through, and
        once none is left it stays put and scans again.

        Returns:
            False when the planner is done
        """
        if not self.planner.step():
            return False

        here = self.planner.current_position.coordinate
        target = self.planner.target
        if self.map.clear_view(here, target):
            if not self._trail or not self.map.are_equivalent(self._trail[-1], here):
                self._trail.append(here)
            destination = target
        else:
            destination = self._retreat_point(here)
            if destination is None:
                logger.debug("no clear move from %s, waiting for more data", here)
            else:
                logger.debug("%s hidden from %s, backing up to %s", target, here, destination)

        if destination is not None:
            position = self.mover.move(destination)
            self.planner.change_current_position(position)
        self.sense()
        self.steps_taken += 1
        return True

    def _retreat_point(self, here: Coordinate) -> Optional[Coordinate]:
        """Latest earlier waypoint in clear view of here, or None."""
        while self._trail:
            waypoint = self._trail[-1]
            if not self.map.are_equivalent(waypoint, here) and self.map.clear_view(here, waypoint):
                return waypoint
            self._trail.pop()
        return None

    def move_to(self, target, max_steps: Optional[int] = None) -> bool:
        """
        Navigate to target.

        Args:
            target: Final target
            max_steps: Step budget, config.processor.max_steps if None

        Returns:
            True if the target was reached within the budget
        """
        target = Coordinate.of(target)
        budget = max_steps or self.config.processor.max_steps

        self.start(target)
        for _ in range(budget):
            if not self.step():
                logger.info("reached %s after %d steps", target, self.steps_taken)
                return True

        logger.warning("gave up on %s after %d steps at %s",
                       target, budget, self.planner.current_position)
        return False

    @property
    def solution(self) -> Solution:
        return self.planner.solution

    def snapshot(self) -> NavigationSnapshot:
        return self.planner.snapshot()
