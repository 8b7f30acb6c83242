"""
Protocol Module: Value types shared across the course tracker.

- Pose: world pose and local-frame transform
- GateState / GateEvent: crossing state and terminal-transition notifications
"""

from .pose import (
    Pose,
    create_pose,
)
from .gate_event import (
    GateState,
    GateEvent,
)

__all__ = [
    'Pose',
    'create_pose',
    'GateState',
    'GateEvent',
]
