"""
Pytest configuration and shared fixtures for course tracker tests.

Provides worlds with markers at known positions, a recording event sink,
and fresh global metrics for every test.
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from course_core.proto import GateEvent
from course_core.world import InMemoryWorld
from course_core.domain import CourseConfig, CourseTracker, Gate
from course_core.metrics import reset_metrics


@pytest.fixture(autouse=True)
def fresh_metrics():
    """Every test starts with an empty global metrics collector."""
    reset_metrics()
    yield
    reset_metrics()


# =============================================================================
# World Fixtures
# =============================================================================


@pytest.fixture
def symmetric_world() -> InMemoryWorld:
    """
    Markers at left=(-1, 0, 0), right=(1, 0, 0).

    Gate center at the origin, width 2, forward direction -y.
    """
    return InMemoryWorld({
        "left": (-1.0, 0.0, 0.0),
        "right": (1.0, 0.0, 0.0),
    })


@pytest.fixture
def origin_gate_world() -> InMemoryWorld:
    """
    Markers at left=(0, -2, 0), right=(0, 2, 0).

    Gate centered at the origin with yaw 0 and width 4, so the gate's local
    frame coincides with the world frame.
    """
    return InMemoryWorld({
        "left": (0.0, -2.0, 0.0),
        "right": (0.0, 2.0, 0.0),
    })


@pytest.fixture
def origin_gate(origin_gate_world: InMemoryWorld) -> Gate:
    """Gate with width 4 centered at the origin, yaw 0."""
    return Gate(
        origin_gate_world.get_entity("left"),
        origin_gate_world.get_entity("right"),
    )


@pytest.fixture
def single_gate_config() -> CourseConfig:
    """Course with one gate between 'left' and 'right' markers."""
    return CourseConfig.from_dict({
        "vehicle": "boat",
        "gates": [{"left_marker": "left", "right_marker": "right"}],
    })


# =============================================================================
# Event Sink Fixtures
# =============================================================================


class RecordingSink:
    """Event sink that keeps every notification."""

    def __init__(self):
        self.events: List[GateEvent] = []

    def __call__(self, event: GateEvent):
        self.events.append(event)

    @property
    def states(self):
        return [e.state for e in self.events]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def origin_tracker(origin_gate_world, single_gate_config, sink) -> CourseTracker:
    """Single-gate tracker over origin_gate_world, vehicle not yet spawned."""
    return CourseTracker.from_config(single_gate_config, origin_gate_world, notify=sink)
