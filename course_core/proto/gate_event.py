"""
Gate State and Gate Event Schema.

Defines the per-gate crossing state and the notification record emitted
when a gate reaches a terminal state.
"""

from dataclasses import dataclass
from typing import Optional
from enum import IntEnum

from .pose import Pose


class GateState(IntEnum):
    """Vehicle state relative to a gate."""
    VEHICLE_BEFORE = 0   # Within the gate span, behind the gate line
    VEHICLE_AFTER = 1    # Within the gate span, on or past the gate line
    VEHICLE_OUTSIDE = 2  # Laterally outside the gate span
    CROSSED = 3          # Crossed in the forward direction (terminal)
    INVALID = 4          # Crossed in the wrong direction (terminal)

    @property
    def is_terminal(self) -> bool:
        """Terminal states are never re-evaluated."""
        return self in (GateState.CROSSED, GateState.INVALID)


@dataclass
class GateEvent:
    """
    Notification for a gate reaching a terminal state.

    Attributes:
        gate_index: Position of the gate in the course (0-based)
        left_marker: Left marker entity ID
        right_marker: Right marker entity ID
        previous_state: State before the transition
        state: New terminal state (CROSSED or INVALID)
        tick: Tracker tick on which the transition happened
        gate_pose: Gate frame at the time of the transition
        gate_width: Gate width at the time of the transition (m)
        vehicle_pose: Vehicle pose that triggered the transition
    """

    gate_index: int
    left_marker: str
    right_marker: str
    previous_state: GateState
    state: GateState
    tick: int
    gate_pose: Optional[Pose] = None
    gate_width: Optional[float] = None
    vehicle_pose: Optional[Pose] = None

    @property
    def is_crossing(self) -> bool:
        return self.state == GateState.CROSSED

    @property
    def is_wrong_direction(self) -> bool:
        return self.state == GateState.INVALID

    @property
    def message(self) -> str:
        """Human-readable description of the event."""
        if self.is_crossing:
            return "New gate crossed!"
        if self.is_wrong_direction:
            return "Transited the gate in the wrong direction. Gate invalidated!"
        return f"Gate state changed to {self.state.name}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'gate_index': self.gate_index,
            'left_marker': self.left_marker,
            'right_marker': self.right_marker,
            'previous_state': self.previous_state.name,
            'state': self.state.name,
            'tick': self.tick,
            'gate_pose': self.gate_pose.to_dict() if self.gate_pose else None,
            'gate_width': self.gate_width,
            'vehicle_pose': self.vehicle_pose.to_dict() if self.vehicle_pose else None,
        }
