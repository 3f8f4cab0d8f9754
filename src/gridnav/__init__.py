"""
gridnav - incremental path planning on a learned grid map.

Range readings are fused into a map of obstacle cells and free-space
nodes; a greedy planner picks the next visible waypoint toward the target
on every step and records the travelled route.
"""

from .core import NavigationConfig, GridNavConfig, load_config, InvariantViolation
from .geometry import Coordinate, Position, RangeReading, normalize_angle
from .mapping import NavigationMap, Mapper, Step, Obstacle
from .navigation import Planner, Processor, Solution, TargetStack, NavigationSnapshot

__version__ = "0.1.0"

__all__ = [
    'NavigationConfig',
    'GridNavConfig',
    'load_config',
    'InvariantViolation',
    'Coordinate',
    'Position',
    'RangeReading',
    'normalize_angle',
    'NavigationMap',
    'Mapper',
    'Step',
    'Obstacle',
    'Planner',
    'Processor',
    'Solution',
    'TargetStack',
    'NavigationSnapshot',
]
