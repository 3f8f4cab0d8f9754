"""
Planner - step-wise navigation

Each call to step() takes one decision:
  1. if the current target is reached, drop it (done when none is left)
  2. ask the map for the best visible next step and detour through it
     when it differs from the current target

The planner never moves the robot. The caller moves toward `target`,
reports the new pose with change_current_position(), feeds fresh sensor
data to the Mapper and calls step() again.

Usage:
    planner = Planner(nav_map, Position.from_xy(-1, -3))
    planner.set_target(Coordinate(-1, 1))
    while planner.step():
        pose = mover.move(planner.target)
        planner.change_current_position(pose)
        mapper.process_sensor_data(pose, planner.final_target, buffer, sensor.sense())
"""

import logging
from typing import Optional, Tuple

from ..core.state_machine import PlannerEvent, PlannerState, StateMachine
from ..geometry.coordinate import Coordinate, Position
from ..mapping.map import NavigationMap
from .snapshot import NavigationSnapshot
from .solution import Solution
from .target_stack import TargetStack

logger = logging.getLogger(__name__)


class Planner:
    """
    Greedy incremental planner over a NavigationMap.

    State lives in three places: the current Position, a two-deep
    TargetStack (final target plus optional detour) and the Solution
    recording where the robot has been since the target was set.
    """

    def __init__(self, nav_map: NavigationMap, start, target: Optional[Coordinate] = None):
        self.map = nav_map
        self.state_machine = StateMachine()
        self.state_machine.on_transition(self._log_transition)
        self._targets = TargetStack(nav_map.are_equivalent)
        self._solution = Solution()
        self._position = self._as_position(start)
        self._record_position(self._position)
        self._solution.add(self._position.coordinate)
        if target is not None:
            self.set_target(target)

    @staticmethod
    def _log_transition(old: PlannerState, event: PlannerEvent, new: PlannerState):
        if old is not new:
            logger.debug("planner %s -> %s on %s", old.name, new.name, event.name)

    @staticmethod
    def _as_position(value) -> Position:
        if isinstance(value, Position):
            return value
        return Position(Coordinate.of(value))

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def current_position(self) -> Position:
        return self._position

    @property
    def target(self) -> Optional[Coordinate]:
        """Target currently being pursued (top of the stack)."""
        return self._targets.top

    @property
    def final_target(self) -> Optional[Coordinate]:
        return self._targets.root

    @property
    def targets(self) -> Tuple[Coordinate, ...]:
        """Target stack, final target first."""
        return tuple(self._targets)

    @property
    def solution(self) -> Solution:
        return self._solution

    @property
    def state(self) -> PlannerState:
        return self.state_machine.state

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def set_target(self, target) -> None:
        """
        Start navigating to a new final target.

        Clears the target stack, re-costs the map against the target and
        restarts the solution at the current position.
        """
        target = Coordinate.of(target)
        self._targets.clear()
        self._targets.push(target)

        if not self.map.is_obstacle(self.map.adopt(target)):
            self.map.add_coord(target, 0.0)
        self.map.recalculate(target)
        self._solution.reset(self._position.coordinate)

        self.state_machine.handle_event(PlannerEvent.TARGET_SET)
        logger.info("new target %s from %s", target, self._position)

    def replace_target(self, target) -> bool:
        """Detour through target before the final target."""
        added = self._targets.push(Coordinate.of(target))
        if added:
            logger.debug("detour via %s", target)
        return added

    def restart(self, start) -> None:
        """Forget the targets and route, and continue from start."""
        self._targets.clear()
        self._position = self._as_position(start)
        self._record_position(self._position)
        self._solution.reset(self._position.coordinate)
        self.state_machine.handle_event(PlannerEvent.RESET)

    def change_current_position(self, position: Position) -> None:
        """Accept the robot pose after a move."""
        previous = self._position
        self._position = self._as_position(position)
        self._record_position(self._position)
        self.map.add_path(previous.coordinate, self._position.coordinate)
        self._solution.add(self._position.coordinate)

    def _record_position(self, position: Position):
        # the robot stands here, so the cell is free ground already visited
        coord = position.coordinate
        if self.map.is_obstacle(self.map.adopt(coord)):
            return
        final = self._targets.root
        if final is None:
            self.map.add_coord(coord, 0.0, visited=True)
        else:
            self.map.add_coord(coord, coord.distance_to(final), visited=True,
                               indirect=not self.map.clear_view(coord, final))

    def recalculate_costs(self) -> None:
        """Re-cost the map for the current target and penalize the route so far."""
        target = self._targets.top
        if target is None:
            return
        self.map.recalculate(target)
        for coord in self._solution:
            self.map.set_temporary_cost(coord)

    def step(self) -> bool:
        """
        Take one planning decision.

        Returns:
            False once the final target is reached (or no target is set),
            True while navigation continues
        """
        top = self._targets.top
        if top is None:
            return False

        if self._position.distance_to(top) <= self.map.config.tolerance:
            self.map.set_visited(top)
            self._targets.pop()
            if not self._targets:
                self._solution.add(self._position.coordinate)
                self._solution.add(top)
                self.state_machine.handle_event(PlannerEvent.FINAL_REACHED)
                logger.info("final target %s reached, %d waypoints",
                            top, len(self._solution))
                return False

            self.state_machine.handle_event(PlannerEvent.INTERMEDIATE_REACHED)
            logger.debug("intermediate target %s reached", top)
            self.recalculate_costs()
            self._solution.add(self._position.coordinate)

        best = self.map.get_best_step(self._position.coordinate)
        if best is not None and not self.map.are_equivalent(best.coordinate, self._targets.top):
            self.replace_target(best.coordinate)

        self.state_machine.handle_event(PlannerEvent.RESUME)
        return True

    def record_solution(self) -> Solution:
        """Simplify the route against the map and record it as map paths."""
        return self.map.record_solution(self._solution)

    def snapshot(self) -> NavigationSnapshot:
        """Immutable view for visualizers."""
        return NavigationSnapshot(
            state=self.state.name,
            position=self._position.coordinate,
            heading=self._position.heading,
            target=self._targets.top,
            final_target=self._targets.root,
            targets=tuple(self._targets),
            solution=tuple(self._solution),
            map=self.map.snapshot(),
        )
