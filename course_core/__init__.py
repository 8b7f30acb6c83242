"""
Course Core Package.

Gate-crossing detection for a vehicle navigating an ordered course of
marker-delimited gates.

Package structure:
- proto: Pose, GateState and GateEvent value types
- world: Entity pose lookup by name
- domain: Gate geometry, course configuration, crossing state machine
- metrics: Tick counters, deferred streaks and per-gate stats
"""

__version__ = "0.1.0"
