"""
Map persistence.

Maps are saved as a single YAML document:

    resolution: 0.5
    chassis_radius: 0.2
    tolerance: 0.5
    nodes:
      - {x: -1.0, y: -1.5, distance: 2.5, adjustment: 2.5, indirect: true, visited: false}
    obstacles:
      - {x: -1.0, y: -0.5}
    paths:
      - [[-1.0, -3.0], [-1.0, -1.5]]

Usage:
    save_map(nav_map, "arena.yaml")
    nav_map = load_map("arena.yaml")
"""

import math

import yaml

from ..core.config import NavigationConfig
from ..core.errors import MapFormatError
from ..geometry.coordinate import Coordinate
from .map import NavigationMap


def _number(value: float):
    # YAML has no portable infinity, store it as a string
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    return float(value)


def map_to_dict(nav_map: NavigationMap) -> dict:
    """Plain-data form of a map."""
    snap = nav_map.snapshot()
    return {
        'resolution': snap.resolution,
        'chassis_radius': snap.chassis_radius,
        'tolerance': nav_map.config.tolerance,
        'nodes': [
            {
                'x': n.x,
                'y': n.y,
                'distance': n.distance,
                'adjustment': _number(n.adjustment),
                'indirect': n.indirect,
                'visited': n.visited,
            }
            for n in snap.nodes
        ],
        'obstacles': [{'x': o.x, 'y': o.y} for o in snap.obstacles],
        'paths': [[list(a), list(b)] for a, b in snap.edges],
    }


def map_from_dict(data: dict) -> NavigationMap:
    """Rebuild a map from map_to_dict() output."""
    if not isinstance(data, dict):
        raise MapFormatError("map document must be a mapping")
    try:
        config = NavigationConfig(
            resolution=float(data['resolution']),
            chassis_radius=float(data.get('chassis_radius', NavigationConfig.chassis_radius)),
            tolerance=data.get('tolerance'),
        )
        nav_map = NavigationMap(config)

        for item in data.get('obstacles') or []:
            nav_map.add_obstacle(Coordinate(float(item['x']), float(item['y'])))

        for item in data.get('nodes') or []:
            nav_map.add_coord(
                Coordinate(float(item['x']), float(item['y'])),
                float(item['distance']),
                visited=bool(item.get('visited', False)),
                indirect=bool(item.get('indirect', False)),
                adjustment=float(item.get('adjustment', 0.0)),
            )

        for a, b in data.get('paths') or []:
            nav_map.add_path(Coordinate(*a), Coordinate(*b))
    except (KeyError, TypeError, ValueError) as e:
        raise MapFormatError(f"invalid map document: {e}") from e
    return nav_map


def save_map(nav_map: NavigationMap, path: str):
    """Write nav_map to a YAML file."""
    with open(path, 'w') as f:
        yaml.safe_dump(map_to_dict(nav_map), f, default_flow_style=None, sort_keys=False)


def load_map(path: str) -> NavigationMap:
    """Read a map written by save_map()."""
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise MapFormatError(f"cannot read map {path}: {e}") from e
    except yaml.YAMLError as e:
        raise MapFormatError(f"invalid YAML in {path}: {e}") from e
    return map_from_dict(data)
