"""
World Module: Entity pose lookup by name.

- WorldInterface: pose provider contract (entity ID -> Pose or None)
- EntityHandle: non-owning, re-queried entity reference
- InMemoryWorld: dictionary-backed provider for replay and tests
"""

from .world_interface import (
    WorldInterface,
    EntityHandle,
    InMemoryWorld,
)

__all__ = [
    'WorldInterface',
    'EntityHandle',
    'InMemoryWorld',
]
