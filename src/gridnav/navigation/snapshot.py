"""
Navigation snapshot - what a visualizer polls after each step.
"""

from typing import NamedTuple, Optional, Tuple

from ..geometry.coordinate import Coordinate
from ..mapping.snapshot import MapSnapshot


class NavigationSnapshot(NamedTuple):
    """Immutable view of the planner and its map."""
    state: str
    position: Coordinate
    heading: float
    target: Optional[Coordinate]
    final_target: Optional[Coordinate]
    targets: Tuple[Coordinate, ...]
    solution: Tuple[Coordinate, ...]
    map: MapSnapshot

    def did_position_change(self, other: Optional['NavigationSnapshot']) -> bool:
        return other is None or self.position != other.position

    def did_heading_change(self, other: Optional['NavigationSnapshot']) -> bool:
        return other is None or self.heading != other.heading

    def did_target_change(self, other: Optional['NavigationSnapshot']) -> bool:
        return other is None or self.targets != other.targets

    def did_change(self, other: Optional['NavigationSnapshot']) -> bool:
        """True if a redraw is needed compared to other."""
        return (self.did_position_change(other) or self.did_heading_change(other)
                or self.did_target_change(other) or self.state != other.state
                or self.solution != other.solution or self.map != other.map)
