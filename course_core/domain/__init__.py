"""
Domain Module: Course logic.

Implements:
- Gate frame derivation from two markers
- Vehicle classification against a gate
- Per-tick directional crossing state machine
- Course configuration and setup validation
"""

from .gate import Gate
from .course_config import (
    CourseConfig,
    CourseSetupError,
    GateDefinition,
)
from .course_tracker import (
    CourseTracker,
    GateEventSink,
    next_gate_state,
    setup_course,
)

__all__ = [
    'Gate',
    'CourseConfig',
    'CourseSetupError',
    'GateDefinition',
    'CourseTracker',
    'GateEventSink',
    'next_gate_state',
    'setup_course',
]
