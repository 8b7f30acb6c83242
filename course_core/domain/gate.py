"""
Gate Geometry and Classification.

A gate is delimited by two marker entities. Its frame is rebuilt from the
current marker positions:

    v1     = normalize(left - right)
    v2     = (0, 0, 1) x v1          forward-crossing direction
    middle = (left + right) / 2
    yaw    = atan2(v2.y, v2.x)
    width  = |left - right|

In the gate's local frame x points along the crossing direction and y runs
along the gate's width.
"""

import math
import logging
from typing import Optional
import numpy as np

from course_core.proto import Pose, GateState
from course_core.world import EntityHandle
from course_core.metrics import get_metrics

logger = logging.getLogger(__name__)

UNIT_Z = np.array([0.0, 0.0, 1.0])


class Gate:
    """
    A virtual checkpoint between two marker entities.

    Usage:
        gate = Gate(world.get_entity("red_0"), world.get_entity("green_0"))

        gate.update()                      # Markers may have moved
        state = gate.classify(vehicle_pose)

    Attributes:
        left_marker: Left marker handle (fixes the crossing direction)
        right_marker: Right marker handle
        index: Position of the gate in its course
        pose: Gate center with yaw only
        width: Distance between the markers (m)
        state: Last stored GateState, None before the first evaluation
    """

    def __init__(
        self,
        left_marker: EntityHandle,
        right_marker: EntityHandle,
        index: int = 0
    ):
        """
        Initialize gate and derive its first frame.

        Args:
            left_marker: Handle to the left marker entity
            right_marker: Handle to the right marker entity
            index: Position of the gate in its course
        """
        self.left_marker = left_marker
        self.right_marker = right_marker
        self.index = index

        self.pose = Pose()
        self.width = 0.0
        self.state: Optional[GateState] = None

        self.metrics = get_metrics()

        self.update()

    @property
    def left_marker_id(self) -> str:
        return self.left_marker.entity_id

    @property
    def right_marker_id(self) -> str:
        return self.right_marker.entity_id

    @property
    def is_resolved(self) -> bool:
        """True once the gate is CROSSED or INVALID."""
        return self.state is not None and self.state.is_terminal

    def update(self) -> bool:
        """
        Recompute pose and width from the current marker positions.

        Returns:
            True if the frame was recomputed, False if a marker was not
            resolvable (previous pose and width are kept)
        """
        left_pose = self.left_marker.pose()
        right_pose = self.right_marker.pose()

        if left_pose is None or right_pose is None:
            self.metrics.increment_skip('marker_unresolved')
            logger.debug(
                f"Gate {self.index}: marker not available "
                f"({self.left_marker_id}, {self.right_marker_id}), keeping previous frame"
            )
            return False

        left_pos = left_pose.position_array
        right_pos = right_pose.position_array

        v1 = left_pos - right_pos
        width = float(np.linalg.norm(v1))

        # Coincident markers leave v1 at zero, which gives yaw 0
        if width > 0.0:
            v1 = v1 / width

        v2 = np.cross(UNIT_Z, v1)
        middle = (left_pos + right_pos) / 2.0
        yaw = math.atan2(v2[1], v2[0])

        self.pose = Pose(position=tuple(middle), yaw=yaw)
        self.width = width

        self.metrics.record_gate_update(self.index, width)

        return True

    def classify(self, vehicle_pose: Pose) -> GateState:
        """
        Classify a vehicle pose against the current gate frame.

        Args:
            vehicle_pose: Vehicle pose in world coordinates

        Returns:
            VEHICLE_BEFORE / VEHICLE_AFTER when laterally within the gate
            (|local y| <= width / 2), otherwise VEHICLE_OUTSIDE
        """
        local = self.pose.to_local(vehicle_pose.position)

        if abs(local[1]) <= self.width / 2.0:
            if local[0] >= 0.0:
                return GateState.VEHICLE_AFTER
            return GateState.VEHICLE_BEFORE

        return GateState.VEHICLE_OUTSIDE

    def to_dict(self) -> dict:
        """Convert to dictionary for status reporting."""
        return {
            'index': self.index,
            'left_marker': self.left_marker_id,
            'right_marker': self.right_marker_id,
            'pose': self.pose.to_dict(),
            'width': self.width,
            'state': self.state.name if self.state is not None else None,
        }

    def __repr__(self) -> str:
        state = self.state.name if self.state is not None else None
        return (
            f"Gate(index={self.index}, left={self.left_marker_id!r}, "
            f"right={self.right_marker_id!r}, width={self.width:.3f}, state={state})"
        )
