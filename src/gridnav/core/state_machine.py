"""
Planner State Machine

Tracks which phase of a navigation the planner is in.

States:
  DONE           → No target, or the final target was reached
  NAVIGATING     → Moving toward the top of the target stack
  TARGET_REACHED → An intermediate target was just reached, costs are
                   being recalculated for the next one
"""

from enum import Enum, auto
from typing import Optional, Callable, Dict, List
from dataclasses import dataclass


class PlannerState(Enum):
    """Planner phases."""
    NAVIGATING = auto()
    TARGET_REACHED = auto()
    DONE = auto()


class PlannerEvent(Enum):
    """Events that trigger state transitions."""
    TARGET_SET = auto()
    INTERMEDIATE_REACHED = auto()
    RESUME = auto()
    FINAL_REACHED = auto()
    RESET = auto()


@dataclass
class StateTransition:
    """A state transition rule."""
    from_state: PlannerState
    event: PlannerEvent
    to_state: PlannerState


class StateMachine:
    """
    Finite state machine for the planner.

    Valid transitions:
        DONE ──TARGET_SET──► NAVIGATING
        NAVIGATING ──TARGET_SET──► NAVIGATING
        NAVIGATING ──INTERMEDIATE_REACHED──► TARGET_REACHED
        TARGET_REACHED ──RESUME──► NAVIGATING
        TARGET_REACHED ──TARGET_SET──► NAVIGATING
        NAVIGATING ──FINAL_REACHED──► DONE
        ANY ──RESET──► DONE

    Usage:
        sm = StateMachine()
        sm.on_transition(lambda old, event, new: print(old, '->', new))
        sm.handle_event(PlannerEvent.TARGET_SET)
        print(sm.state)  # PlannerState.NAVIGATING
    """

    TRANSITIONS = [
        # From DONE
        StateTransition(PlannerState.DONE, PlannerEvent.TARGET_SET, PlannerState.NAVIGATING),

        # From NAVIGATING
        StateTransition(PlannerState.NAVIGATING, PlannerEvent.TARGET_SET, PlannerState.NAVIGATING),
        StateTransition(PlannerState.NAVIGATING, PlannerEvent.INTERMEDIATE_REACHED,
                        PlannerState.TARGET_REACHED),
        StateTransition(PlannerState.NAVIGATING, PlannerEvent.FINAL_REACHED, PlannerState.DONE),

        # From TARGET_REACHED
        StateTransition(PlannerState.TARGET_REACHED, PlannerEvent.RESUME, PlannerState.NAVIGATING),
        StateTransition(PlannerState.TARGET_REACHED, PlannerEvent.TARGET_SET, PlannerState.NAVIGATING),

        # RESET (from any state)
        StateTransition(PlannerState.NAVIGATING, PlannerEvent.RESET, PlannerState.DONE),
        StateTransition(PlannerState.TARGET_REACHED, PlannerEvent.RESET, PlannerState.DONE),
        StateTransition(PlannerState.DONE, PlannerEvent.RESET, PlannerState.DONE),
    ]

    def __init__(self):
        self._state = PlannerState.DONE
        self._previous_state: Optional[PlannerState] = None
        self._on_transition: List[Callable[[PlannerState, PlannerEvent, PlannerState], None]] = []

        self._transition_map: Dict = {}
        for t in self.TRANSITIONS:
            self._transition_map[(t.from_state, t.event)] = t

    @property
    def state(self) -> PlannerState:
        """Current state."""
        return self._state

    @property
    def previous_state(self) -> Optional[PlannerState]:
        """Previous state."""
        return self._previous_state

    @property
    def is_active(self) -> bool:
        """True while a target is being pursued."""
        return self._state is not PlannerState.DONE

    def handle_event(self, event: PlannerEvent) -> bool:
        """
        Handle a state event.

        Args:
            event: The event to handle

        Returns:
            True if transition occurred, False if event was ignored
        """
        transition = self._transition_map.get((self._state, event))

        if transition is None:
            return False

        old_state = self._state
        new_state = transition.to_state

        self._previous_state = old_state
        self._state = new_state

        for callback in self._on_transition:
            callback(old_state, event, new_state)

        return True

    def on_transition(self, callback: Callable[[PlannerState, PlannerEvent, PlannerState], None]):
        """Register callback for any transition."""
        self._on_transition.append(callback)
