"""
Text view of a navigation snapshot, one character per grid cell.

Legend:
  #  obstacle        .  direct node      ,  indirect node
  +  visited node    *  route waypoint   @  robot
  T  final target    t  detour target
"""

import math
from typing import Dict, Optional, Tuple

from ..navigation.snapshot import NavigationSnapshot


def _cell(x: float, y: float, resolution: float) -> Tuple[int, int]:
    return (int(math.floor(x / resolution + 0.5)), int(math.floor(y / resolution + 0.5)))


def render_text(snapshot: NavigationSnapshot,
                bounds: Optional[Tuple[int, int, int, int]] = None) -> str:
    """
    Render the snapshot as rows of characters, north at the top.

    Args:
        snapshot: Planner snapshot
        bounds: (min_i, min_j, max_i, max_j) cell window, fitted to the
                content if None

    Returns:
        Multi-line string
    """
    res = snapshot.map.resolution
    cells: Dict[Tuple[int, int], str] = {}

    for node in snapshot.map.nodes:
        cells[_cell(node.x, node.y, res)] = '+' if node.visited else (',' if node.indirect else '.')
    for obs in snapshot.map.obstacles:
        cells[_cell(obs.x, obs.y, res)] = '#'
    for coord in snapshot.solution:
        cells[_cell(coord.x, coord.y, res)] = '*'
    if snapshot.target is not None and snapshot.target != snapshot.final_target:
        cells[_cell(snapshot.target.x, snapshot.target.y, res)] = 't'
    if snapshot.final_target is not None:
        cells[_cell(snapshot.final_target.x, snapshot.final_target.y, res)] = 'T'
    cells[_cell(snapshot.position.x, snapshot.position.y, res)] = '@'

    if bounds is None:
        min_i = min(i for i, _ in cells)
        max_i = max(i for i, _ in cells)
        min_j = min(j for _, j in cells)
        max_j = max(j for _, j in cells)
    else:
        min_i, min_j, max_i, max_j = bounds

    rows = []
    for j in range(max_j, min_j - 1, -1):
        rows.append(''.join(cells.get((i, j), ' ') for i in range(min_i, max_i + 1)).rstrip())
    return '\n'.join(rows)
