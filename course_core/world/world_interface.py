"""
World pose provider interface.

The simulation engine owns every entity; the course tracker only reads
poses by entity ID once per tick. Entities may be absent (not spawned yet,
or removed), in which case the provider answers None instead of raising.

Usage:
    world = InMemoryWorld()
    world.set_entity_pose("buoy_left", Pose(position=(0.0, -2.0, 0.0)))

    handle = world.get_entity("buoy_left")
    if handle is not None:
        pose = handle.pose()   # Re-queried on every call
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union, Sequence

from course_core.proto import Pose

logger = logging.getLogger(__name__)


class WorldInterface(ABC):
    """Read access to live entity poses in world coordinates."""

    @abstractmethod
    def get_entity_pose(self, entity_id: str) -> Optional[Pose]:
        """
        Get the current world pose of an entity.

        Args:
            entity_id: Entity name

        Returns:
            Current Pose, or None if the entity is not present
        """

    def has_entity(self, entity_id: str) -> bool:
        """Check whether an entity is currently present."""
        return self.get_entity_pose(entity_id) is not None

    def get_entity(self, entity_id: str) -> Optional['EntityHandle']:
        """
        Resolve an entity ID to a handle.

        Returns:
            EntityHandle if the entity is present now, otherwise None
        """
        if not self.has_entity(entity_id):
            return None
        return EntityHandle(entity_id, self)


class EntityHandle:
    """
    Non-owning reference to a world entity.

    The handle stores only the entity ID and the world; every pose() call
    asks the world again, so a removed entity reads as None on the next call.
    """

    def __init__(self, entity_id: str, world: WorldInterface):
        self.entity_id = entity_id
        self.world = world

    def pose(self) -> Optional[Pose]:
        """Current world pose, or None if the entity is gone."""
        return self.world.get_entity_pose(self.entity_id)

    def __repr__(self) -> str:
        return f"EntityHandle({self.entity_id!r})"


class InMemoryWorld(WorldInterface):
    """
    Dictionary-backed world for scenario replay and tests.

    Poses are set and removed by the driver between ticks; the tracker
    reads them during a tick.
    """

    def __init__(self, entities: Optional[Dict[str, Union[Pose, dict, Sequence[float]]]] = None):
        """
        Initialize world.

        Args:
            entities: Optional initial entity poses (Pose, dict or [x, y, z])
        """
        self._lock = threading.Lock()
        self._poses: Dict[str, Pose] = {}

        for entity_id, value in (entities or {}).items():
            self.set_entity_pose(entity_id, value)

    def get_entity_pose(self, entity_id: str) -> Optional[Pose]:
        with self._lock:
            return self._poses.get(entity_id)

    def set_entity_pose(self, entity_id: str, pose: Union[Pose, dict, Sequence[float]]):
        """
        Spawn or move an entity.

        Args:
            entity_id: Entity name
            pose: Pose, pose dict, or bare [x, y, z] position
        """
        pose = Pose.from_value(pose)
        with self._lock:
            if entity_id not in self._poses:
                logger.debug(f"Entity spawned: {entity_id} at {pose.position}")
            self._poses[entity_id] = pose

    def remove_entity(self, entity_id: str) -> bool:
        """
        Remove an entity from the world.

        Returns:
            True if the entity existed
        """
        with self._lock:
            removed = self._poses.pop(entity_id, None) is not None
        if removed:
            logger.debug(f"Entity removed: {entity_id}")
        return removed

    def entity_ids(self) -> List[str]:
        """Sorted list of present entity IDs."""
        with self._lock:
            return sorted(self._poses)
