"""
Abstract interfaces for the planner's collaborators.

The planner only needs two things from the outside world: relative range
readings, and something that moves the robot and reports where it ended
up. Real hardware and the simulator both implement these contracts.
"""

from abc import ABC, abstractmethod
from typing import List

from ..geometry.coordinate import Coordinate, Position, RangeReading


class IDistanceSensor(ABC):
    """Abstract range sensor."""

    @abstractmethod
    def sense(self) -> List[RangeReading]:
        """
        Take one scan.

        Returns:
            Readings with angles relative to the robot heading;
            range is inf when nothing was detected
        """
        pass

    @property
    @abstractmethod
    def max_range(self) -> float:
        """Farthest distance the sensor can report."""
        pass


class IMover(ABC):
    """Abstract mover (motors plus odometry/compass)."""

    @property
    @abstractmethod
    def position(self) -> Position:
        """Current pose."""
        pass

    @abstractmethod
    def move(self, target: Coordinate) -> Position:
        """
        Move toward target.

        Args:
            target: Absolute coordinate to head for

        Returns:
            Pose after the move (may fall short of target)
        """
        pass
