"""
Solution - recorded route and string-pulling simplification

The route is stored as it was travelled. simplify() then drops every
waypoint the robot could have skipped with a straight, obstacle-free
move, greedily from the start.
"""

import math
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from ..geometry.coordinate import Coordinate


class Solution:
    """
    Ordered route from start to end.

    Usage:
        solution = Solution()
        for coord in travelled:
            solution.add(coord)
        solution.simplify(nav_map.clear_view)
        print(solution.cost())
    """

    def __init__(self, coords=None):
        self._path: List[Coordinate] = []
        for coord in coords or []:
            self.add(coord)

    def add(self, coord) -> bool:
        """Append coord unless it equals the last waypoint."""
        coord = Coordinate.of(coord)
        if self._path and self._path[-1] == coord:
            return False
        self._path.append(coord)
        return True

    def reset(self, start=None):
        """Forget the route, optionally restarting it at start."""
        self._path.clear()
        if start is not None:
            self.add(start)

    @property
    def start(self) -> Optional[Coordinate]:
        return self._path[0] if self._path else None

    @property
    def end(self) -> Optional[Coordinate]:
        return self._path[-1] if self._path else None

    def is_empty(self) -> bool:
        return not self._path

    def step_count(self) -> int:
        """Number of moves in the route, -1 when empty."""
        return len(self._path) - 1

    def __len__(self) -> int:
        return len(self._path)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(list(self._path))

    def coordinates(self) -> List[Coordinate]:
        return list(self._path)

    def cost_from_end(self) -> np.ndarray:
        """cost[i] = route length from waypoint i to the end."""
        if not self._path:
            return np.zeros(0)
        points = np.array([c.as_tuple() for c in self._path], dtype=float)
        segments = np.hypot(*np.diff(points, axis=0).T) if len(points) > 1 else np.zeros(0)
        return np.append(np.cumsum(segments[::-1])[::-1], 0.0)

    def cost(self) -> float:
        """Total route length, inf when empty."""
        if not self._path:
            return math.inf
        return float(self.cost_from_end()[0])

    def records(self) -> List[Tuple[Coordinate, float]]:
        """(waypoint, cost to end) pairs."""
        return list(zip(self._path, (float(c) for c in self.cost_from_end())))

    def simplify(self, clear_view: Callable[[Coordinate, Coordinate], bool]) -> bool:
        """
        Shortcut the route where clear_view allows.

        From each kept waypoint i, jump to the farthest waypoint j with
        clear_view(path[i], path[j]) and a lower cost to the end; fall
        back to i + 1. First and last waypoints never change.

        Returns:
            True if any waypoint was removed
        """
        if len(self._path) < 3:
            return False

        costs = self.cost_from_end()
        last = len(self._path) - 1
        kept = [self._path[0]]
        i = 0
        while i < last:
            nxt = i + 1
            for j in range(last, i + 1, -1):
                if costs[j] < costs[i] and clear_view(self._path[i], self._path[j]):
                    nxt = j
                    break
            kept.append(self._path[nxt])
            i = nxt

        changed = len(kept) != len(self._path)
        self._path = kept
        return changed

    def __repr__(self) -> str:
        return f"Solution({len(self._path)} waypoints, cost={self.cost():.3f})"
