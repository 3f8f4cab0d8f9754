"""
Simulation module.
- Ground-truth arenas built from unit cells
- Ray casting for the simulated range sensor
"""

from .environment import (
    Environment,
    Obstacle,
    ObstacleType,
    create_wall_arena,
    create_double_wall_arena,
    create_empty_arena,
)

__all__ = [
    'Environment',
    'Obstacle',
    'ObstacleType',
    'create_wall_arena',
    'create_double_wall_arena',
    'create_empty_arena',
]
