"""
World Pose Schema.

Position plus roll/pitch/yaw orientation of an entity in world coordinates,
with the transform used to express a world point in an entity's local frame.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np


@dataclass
class Pose:
    """
    Pose of an entity in world coordinates.

    Attributes:
        position: Position (x, y, z) in meters
        roll: Rotation about the x-axis (rad)
        pitch: Rotation about the y-axis (rad)
        yaw: Rotation about the z-axis (rad)

    Notes:
        - Orientation uses Z-Y-X (yaw, pitch, roll) Euler convention
        - Gate poses only ever carry yaw; vehicle poses may carry all three
    """

    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0

    def __post_init__(self):
        """Validate pose."""
        if len(self.position) != 3:
            raise ValueError(f"Position must have 3 components: {self.position}")

        self.position = tuple(float(c) for c in self.position)
        if not all(math.isfinite(c) for c in self.position):
            raise ValueError(f"Position must be finite: {self.position}")

        for name in ('roll', 'pitch', 'yaw'):
            try:
                value = float(getattr(self, name))
            except TypeError as e:
                raise ValueError(f"{name} must be a number: {getattr(self, name)!r}") from e
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite: {value}")
            setattr(self, name, value)

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def z(self) -> float:
        return self.position[2]

    @property
    def position_array(self) -> np.ndarray:
        """Position as a float numpy vector."""
        return np.array(self.position, dtype=float)

    def rotation_matrix(self) -> np.ndarray:
        """
        World-from-body rotation matrix.

        Returns:
            3x3 matrix R = Rz(yaw) @ Ry(pitch) @ Rx(roll)
        """
        cr, sr = math.cos(self.roll), math.sin(self.roll)
        cp, sp = math.cos(self.pitch), math.sin(self.pitch)
        cy, sy = math.cos(self.yaw), math.sin(self.yaw)

        return np.array([
            [cy * cp, cy * sp * sr - sy * cr, cy * sp * cr + sy * sr],
            [sy * cp, sy * sp * sr + cy * cr, sy * sp * cr - cy * sr],
            [-sp, cp * sr, cp * cr],
        ])

    def to_local(self, point: Union[Sequence[float], np.ndarray]) -> np.ndarray:
        """
        Express a world point in this pose's local frame.

        Args:
            point: World position (x, y, z)

        Returns:
            Local position: inverse rotation applied to (point - position)
        """
        offset = np.asarray(point, dtype=float) - self.position_array
        return self.rotation_matrix().T @ offset

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'position': list(self.position),
            'roll': self.roll,
            'pitch': self.pitch,
            'yaw': self.yaw,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Pose':
        """
        Build a pose from a dictionary.

        Accepts either {"position": [x, y, z], "yaw": ...} or flat
        {"x": ..., "y": ..., "z": ..., "yaw": ...}. Missing angles default to 0.

        Raises:
            ValueError: If the position cannot be read
        """
        if 'position' in data:
            position = data['position']
        elif 'x' in data and 'y' in data:
            position = (data['x'], data['y'], data.get('z', 0.0))
        else:
            raise ValueError(f"Pose has no position: {data}")

        try:
            position = tuple(float(c) for c in position)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid pose position {position!r}: {e}") from e

        return cls(
            position=position,
            roll=data.get('roll', 0.0),
            pitch=data.get('pitch', 0.0),
            yaw=data.get('yaw', 0.0),
        )

    @classmethod
    def from_value(cls, value: Union[dict, Sequence[float], 'Pose']) -> 'Pose':
        """Build a pose from a dict, a bare [x, y, z] list or another Pose."""
        if isinstance(value, Pose):
            return value
        if isinstance(value, dict):
            return cls.from_dict(value)
        try:
            return cls(position=tuple(float(c) for c in value))
        except TypeError as e:
            raise ValueError(f"Cannot build pose from {value!r}") from e


def create_pose(x: float, y: float, z: float = 0.0, yaw: float = 0.0) -> Pose:
    """
    Create a planar pose (roll and pitch zero).

    Args:
        x, y, z: Position in meters
        yaw: Heading in radians

    Returns:
        Pose
    """
    return Pose(position=(x, y, z), yaw=yaw)
