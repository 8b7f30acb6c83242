"""
Course configuration and setup validation.

A course is a vehicle name plus an ordered list of gates, each named by its
left and right marker entities:

    {
        "vehicle": "wamv",
        "gates": [
            {"left_marker": "red_0", "right_marker": "green_0"},
            {"left_marker": "red_1", "right_marker": "green_1"}
        ]
    }

Any missing field fails the whole course with CourseSetupError.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union


class CourseSetupError(ValueError):
    """Course configuration cannot be activated."""


@dataclass
class GateDefinition:
    """
    Marker names delimiting one gate.

    Attributes:
        left_marker: Left marker entity ID
        right_marker: Right marker entity ID
    """

    left_marker: str
    right_marker: str

    def to_dict(self) -> dict:
        return {'left_marker': self.left_marker, 'right_marker': self.right_marker}


@dataclass
class CourseConfig:
    """
    Configuration for a navigation course.

    Attributes:
        vehicle: Vehicle entity ID
        gates: Gate definitions in course order
        require_vehicle: If True, the vehicle must exist at setup time;
            otherwise it is resolved lazily on each tick
    """

    vehicle: str
    gates: List[GateDefinition] = field(default_factory=list)
    require_vehicle: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if not self.vehicle:
            raise CourseSetupError("Unable to find <vehicle> element in course config")

        if not self.gates:
            raise CourseSetupError("Unable to find <gate> element in course config")

    @classmethod
    def from_dict(cls, data: dict) -> 'CourseConfig':
        """
        Parse and validate a course configuration dictionary.

        Args:
            data: Dict with 'vehicle', 'gates' and optional 'require_vehicle'

        Returns:
            CourseConfig

        Raises:
            CourseSetupError: If a required field is missing or empty
        """
        if not isinstance(data, dict):
            raise CourseSetupError(f"Course config must be a mapping, got {type(data).__name__}")

        vehicle = data.get('vehicle')
        if not vehicle or not isinstance(vehicle, str):
            raise CourseSetupError("Unable to find <vehicle> element in course config")

        if 'gates' not in data:
            raise CourseSetupError("Unable to find <gates> element in course config")

        gates_data = data['gates']
        if not isinstance(gates_data, list) or not gates_data:
            raise CourseSetupError("Unable to find <gate> element in course config")

        gates = []
        for i, gate_data in enumerate(gates_data):
            if not isinstance(gate_data, dict):
                raise CourseSetupError(f"Gate {i} must be a mapping")

            for key in ('left_marker', 'right_marker'):
                if not gate_data.get(key):
                    raise CourseSetupError(f"Unable to find <{key}> element in gate {i}")

            gates.append(GateDefinition(
                left_marker=str(gate_data['left_marker']),
                right_marker=str(gate_data['right_marker']),
            ))

        return cls(
            vehicle=vehicle,
            gates=gates,
            require_vehicle=bool(data.get('require_vehicle', False)),
        )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> 'CourseConfig':
        """
        Load a course configuration from a JSON file.

        The file may hold the course itself or a scenario with a 'course' key.

        Raises:
            CourseSetupError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            with path.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise CourseSetupError(f"Unable to read course file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise CourseSetupError(f"Malformed course file {path}: {e}") from e

        if isinstance(data, dict) and 'course' in data:
            data = data['course']

        return cls.from_dict(data)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'vehicle': self.vehicle,
            'gates': [g.to_dict() for g in self.gates],
            'require_vehicle': self.require_vehicle,
        }
