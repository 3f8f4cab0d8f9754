"""
Immutable views of the map for visualizers and persistence.
"""

from typing import NamedTuple, Tuple


class NodeState(NamedTuple):
    """Frozen copy of a map node."""
    x: float
    y: float
    distance: float
    adjustment: float
    indirect: bool
    visited: bool

    @property
    def cost(self) -> float:
        return self.distance + self.adjustment


class ObstacleState(NamedTuple):
    """Frozen copy of an obstacle cell."""
    id: str
    x: float
    y: float
    size: float


class MapSnapshot(NamedTuple):
    """Everything a visualizer needs to draw the map."""
    resolution: float
    chassis_radius: float
    nodes: Tuple[NodeState, ...]
    obstacles: Tuple[ObstacleState, ...]
    edges: Tuple[Tuple[Tuple[float, float], Tuple[float, float]], ...]

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.obstacles
