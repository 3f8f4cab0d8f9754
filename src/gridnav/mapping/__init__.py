"""
Mapping module.
- NavigationMap: spatial cost graph of nodes, obstacles and paths
- Mapper: sensor readings to map updates
- Snapshots and YAML persistence
"""

from .map import NavigationMap, Step, Obstacle
from .mapper import Mapper
from .snapshot import MapSnapshot, NodeState, ObstacleState
from .map_io import save_map, load_map, map_to_dict, map_from_dict

__all__ = [
    'NavigationMap',
    'Step',
    'Obstacle',
    'Mapper',
    'MapSnapshot',
    'NodeState',
    'ObstacleState',
    'save_map',
    'load_map',
    'map_to_dict',
    'map_from_dict',
]
