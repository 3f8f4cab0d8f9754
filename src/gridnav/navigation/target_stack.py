"""
Target stack.

At most two targets: the final target at the bottom and, on top, an
optional sub-target the planner detours through.
"""

import operator
from collections import deque
from typing import Callable, Iterator, Optional

from ..geometry.coordinate import Coordinate


class TargetStack:
    """
    Bounded stack of targets with collapse-on-duplicate.

    Pushing a coordinate already in the stack drops everything above it.
    Pushing onto a full stack replaces the sub-target.

    Usage:
        stack = TargetStack()
        stack.push(final)
        stack.push(detour)      # [final, detour]
        stack.push(other)       # [final, other]
        stack.push(final)       # [final]
    """

    CAPACITY = 2

    def __init__(self, equivalent: Optional[Callable[[Coordinate, Coordinate], bool]] = None):
        self._targets = deque(maxlen=self.CAPACITY)
        self._equivalent = equivalent or operator.eq

    def push(self, target: Coordinate) -> bool:
        """
        Push a target.

        Returns:
            True if the target was added, False if the stack collapsed
            onto an existing equivalent entry
        """
        target = Coordinate.of(target)
        for idx, existing in enumerate(self._targets):
            if self._equivalent(existing, target):
                while len(self._targets) > idx + 1:
                    self._targets.pop()
                return False

        if len(self._targets) == self.CAPACITY:
            self._targets.pop()
        self._targets.append(target)
        return True

    def pop(self) -> Optional[Coordinate]:
        return self._targets.pop() if self._targets else None

    def clear(self):
        self._targets.clear()

    @property
    def top(self) -> Optional[Coordinate]:
        """Target currently being pursued."""
        return self._targets[-1] if self._targets else None

    @property
    def root(self) -> Optional[Coordinate]:
        """Final target."""
        return self._targets[0] if self._targets else None

    def __len__(self) -> int:
        return len(self._targets)

    def __bool__(self) -> bool:
        return bool(self._targets)

    def __iter__(self) -> Iterator[Coordinate]:
        """Bottom (final target) first."""
        return iter(list(self._targets))

    def __repr__(self) -> str:
        return f"TargetStack({list(self._targets)})"
