"""
Simulation adapters.

SimulatedRangeSensor ray-casts a simulated Environment from the mover's
pose; SimulatedMover travels in straight lines, at most `speed` meters
per move. Given an environment, the mover refuses any move that would
run into a ground-truth obstacle and counts it in `blocked_moves`.
"""

import logging
import math
from typing import Callable, List, Optional

import numpy as np

from ..core.config import MoverConfig, SensorConfig
from ..geometry.coordinate import Coordinate, Position, RangeReading, normalize_angle
from .sensor_interface import IDistanceSensor, IMover

logger = logging.getLogger(__name__)


class SimulatedRangeSensor(IDistanceSensor):
    """Ray-casting range sensor."""

    def __init__(self, environment, pose: Callable[[], Position],
                 config: Optional[SensorConfig] = None):
        """
        Args:
            environment: Simulated environment (anything with raycast())
            pose: Returns the robot pose at scan time
            config: Ray count, max range and noise
        """
        self.environment = environment
        self.config = config or SensorConfig()
        self._pose = pose
        self._rng = np.random.default_rng(self.config.seed)
        self._angles = np.linspace(0.0, 2 * math.pi, self.config.num_rays, endpoint=False)

    @property
    def max_range(self) -> float:
        return self.config.max_range

    def sense(self) -> List[RangeReading]:
        pose = self._pose()
        readings = []
        for relative in self._angles:
            absolute = normalize_angle(pose.heading + float(relative))
            distance = self.environment.raycast(pose.x, pose.y, absolute, self.config.max_range)

            if distance >= self.config.max_range:
                distance = math.inf
            elif self.config.noise_std > 0:
                distance = max(0.0, distance + float(self._rng.normal(0.0, self.config.noise_std)))

            readings.append(RangeReading(normalize_angle(float(relative)), distance))
        return readings


class SimulatedMover(IMover):
    """Speed-limited straight-line mover."""

    def __init__(self, start: Position, config: Optional[MoverConfig] = None,
                 environment=None):
        """
        Args:
            start: Initial pose
            config: Speed limit
            environment: Ground truth checked before every move (optional)
        """
        self.config = config or MoverConfig()
        self.environment = environment
        self._position = start if isinstance(start, Position) else Position(Coordinate.of(start))
        self.distance_travelled = 0.0
        self.moves = 0
        self.blocked_moves = 0

    @property
    def position(self) -> Position:
        return self._position

    def move(self, target: Coordinate) -> Position:
        target = Coordinate.of(target)
        distance = self._position.distance_to(target)
        if distance == 0.0:
            return self._position

        if distance <= self.config.speed:
            next_position = Position(target, self._position.heading_to(target))
        else:
            relative = self._position.relative_location(target)
            next_position = self._position.next_position(
                RangeReading(relative.angle, self.config.speed))
            distance = self.config.speed

        if self.environment is not None and self.environment.is_path_blocked(
                self._position.x, self._position.y, next_position.x, next_position.y):
            self.blocked_moves += 1
            logger.warning("move %s -> %s blocked by an obstacle",
                           self._position.coordinate, next_position.coordinate)
            return self._position

        self._position = next_position
        self.distance_travelled += distance
        self.moves += 1
        return self._position
