"""
Course Tracker: per-tick gate crossing state machine.

On every tick the tracker resolves the vehicle, then for each gate that is
not yet CROSSED or INVALID it rebuilds the gate frame, classifies the
vehicle and applies the transition table:

    previous         current          new
    VEHICLE_BEFORE   VEHICLE_AFTER    CROSSED   (gate crossed)
    VEHICLE_AFTER    VEHICLE_BEFORE   INVALID   (wrong direction)
    anything else    x                x

Gates are evaluated in course order and independently of each other.
"""

import logging
from typing import Callable, Dict, List, Optional

from course_core.proto import Pose, GateState, GateEvent
from course_core.world import WorldInterface, EntityHandle
from course_core.metrics import get_metrics

from .gate import Gate
from .course_config import CourseConfig, CourseSetupError

logger = logging.getLogger(__name__)

GateEventSink = Callable[[GateEvent], None]

_TRANSITIONS = {
    (GateState.VEHICLE_BEFORE, GateState.VEHICLE_AFTER): GateState.CROSSED,
    (GateState.VEHICLE_AFTER, GateState.VEHICLE_BEFORE): GateState.INVALID,
}


def next_gate_state(previous: Optional[GateState], current: GateState) -> GateState:
    """
    Apply the crossing transition table.

    Args:
        previous: Stored gate state (None before the first evaluation)
        current: Fresh classification of the vehicle

    Returns:
        CROSSED or INVALID for a directional transit, otherwise current
    """
    return _TRANSITIONS.get((previous, current), current)


class CourseTracker:
    """
    Track vehicle crossings through an ordered set of gates.

    Usage:
        config = CourseConfig.from_json_file("course.json")
        tracker = CourseTracker.from_config(config, world, notify=on_event)

        # Once per simulation step
        events = tracker.update()
        for event in events:
            print(event.message)

    The vehicle may appear after setup; until it does, update() is a no-op.
    """

    def __init__(
        self,
        vehicle_id: str,
        gates: List[Gate],
        world: WorldInterface,
        notify: Optional[GateEventSink] = None
    ):
        """
        Initialize course tracker.

        Args:
            vehicle_id: Vehicle entity ID (resolved lazily)
            gates: Gates in course order
            world: Pose provider
            notify: Optional callback invoked for every CROSSED/INVALID event
        """
        self.vehicle_id = vehicle_id
        self.world = world
        self.notify = notify

        self._gates = list(gates)
        self._vehicle: Optional[EntityHandle] = None
        self._tick_count = 0

        self.metrics = get_metrics()

    @classmethod
    def from_config(
        cls,
        config: CourseConfig,
        world: WorldInterface,
        notify: Optional[GateEventSink] = None
    ) -> 'CourseTracker':
        """
        Build a tracker, resolving every marker up front.

        Raises:
            CourseSetupError: If any marker (or a required vehicle) does not
                exist; no partially configured course is returned
        """
        gates = []
        for index, definition in enumerate(config.gates):
            left = cls._resolve_marker(world, definition.left_marker)
            right = cls._resolve_marker(world, definition.right_marker)
            gates.append(Gate(left, right, index=index))

        if config.require_vehicle and not world.has_entity(config.vehicle):
            raise CourseSetupError(f"Unable to find model [{config.vehicle}]")

        tracker = cls(config.vehicle, gates, world, notify=notify)
        logger.info(f"Course loaded: {len(gates)} gate(s), vehicle [{config.vehicle}]")
        return tracker

    @staticmethod
    def _resolve_marker(world: WorldInterface, marker_id: str) -> EntityHandle:
        handle = world.get_entity(marker_id)
        if handle is None:
            raise CourseSetupError(f"Unable to find model [{marker_id}]")
        return handle

    @property
    def gates(self) -> List[Gate]:
        return list(self._gates)

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def vehicle_resolved(self) -> bool:
        return self._vehicle is not None

    @property
    def crossed_gates(self) -> List[Gate]:
        return [g for g in self._gates if g.state == GateState.CROSSED]

    @property
    def invalid_gates(self) -> List[Gate]:
        return [g for g in self._gates if g.state == GateState.INVALID]

    @property
    def is_complete(self) -> bool:
        """True when every gate is CROSSED or INVALID."""
        return all(g.is_resolved for g in self._gates)

    def states(self) -> List[Optional[GateState]]:
        """Current state of each gate in course order."""
        return [g.state for g in self._gates]

    def _vehicle_pose(self) -> Optional[Pose]:
        """
        Resolve the vehicle and read its pose.

        The handle is dropped when its pose stops resolving so the next tick
        looks the vehicle up again.
        """
        if self._vehicle is None:
            self._vehicle = self.world.get_entity(self.vehicle_id)
            if self._vehicle is None:
                return None
            logger.info(f"Vehicle [{self.vehicle_id}] found")

        pose = self._vehicle.pose()
        if pose is None:
            logger.info(f"Vehicle [{self.vehicle_id}] lost, will retry")
            self._vehicle = None
        return pose

    def update(self) -> List[GateEvent]:
        """
        Run one tick of the crossing state machine.

        Returns:
            Events for gates that became CROSSED or INVALID on this tick
        """
        self._tick_count += 1

        vehicle_pose = self._vehicle_pose()
        self.metrics.record_tick(deferred=vehicle_pose is None)
        if vehicle_pose is None:
            self.metrics.increment_skip('vehicle_unresolved')
            logger.debug(f"Tick {self._tick_count}: vehicle [{self.vehicle_id}] not available")
            return []

        events = []
        for gate in self._gates:
            # Crossed and invalid gates are never re-evaluated
            if gate.is_resolved:
                continue

            gate.update()

            current_state = gate.classify(vehicle_pose)
            self.metrics.increment('gate_classifications')

            previous_state = gate.state
            gate.state = next_gate_state(previous_state, current_state)

            if gate.state.is_terminal:
                events.append(self._emit(gate, previous_state, vehicle_pose))

        return events

    def _emit(self, gate: Gate, previous_state: GateState, vehicle_pose: Pose) -> GateEvent:
        event = GateEvent(
            gate_index=gate.index,
            left_marker=gate.left_marker_id,
            right_marker=gate.right_marker_id,
            previous_state=previous_state,
            state=gate.state,
            tick=self._tick_count,
            gate_pose=gate.pose,
            gate_width=gate.width,
            vehicle_pose=vehicle_pose,
        )

        self.metrics.record_gate_outcome(gate.index, gate.state, self._tick_count)
        if event.is_crossing:
            logger.info(f"Gate {gate.index}: {event.message}")
        else:
            logger.warning(f"Gate {gate.index}: {event.message}")

        if self.notify is not None:
            self.notify(event)

        return event

    def reset(self):
        """Clear gate states and the tick counter for a new run."""
        self._tick_count = 0
        self._vehicle = None
        for gate in self._gates:
            gate.state = None
            gate.update()
        logger.info("Course tracker reset")

    def status(self) -> Dict:
        """Snapshot of the course for reporting."""
        return {
            'vehicle': self.vehicle_id,
            'vehicle_resolved': self.vehicle_resolved,
            'tick': self._tick_count,
            'gates': [g.to_dict() for g in self._gates],
            'crossed': len(self.crossed_gates),
            'invalid': len(self.invalid_gates),
            'complete': self.is_complete,
        }


def setup_course(
    config: CourseConfig,
    world: WorldInterface,
    notify: Optional[GateEventSink] = None
) -> Optional[CourseTracker]:
    """
    Build a tracker, reporting setup failure as None.

    Args:
        config: Validated course configuration
        world: Pose provider
        notify: Optional event callback

    Returns:
        CourseTracker, or None if a marker could not be resolved
    """
    try:
        return CourseTracker.from_config(config, world, notify=notify)
    except CourseSetupError as e:
        logger.error(str(e))
        logger.error("Score has been disabled")
        return None
