"""Rooms: enclosed faces of the wall network.

A room stores only the ids of its bounding walls. Its polygon is derived
from the walls whenever it is needed, and the whole room list is rebuilt
whenever the wall topology changes (see ``queries.rooms``).
"""

from __future__ import annotations

from pydantic import Field

from floorplan_engine.models.base import DocumentModel
from floorplan_engine.models.ids import generate_id

DEFAULT_CEILING_HEIGHT = 2.8


class Room(DocumentModel):
    """An enclosed area bounded by a closed loop of walls."""

    id: str = Field(default_factory=generate_id)
    name: str = Field(description="User-visible name, unique within a plan")
    wall_ids: list[str] = Field(default_factory=list, description="Boundary walls in loop order")
    ceiling_height: float = Field(default=DEFAULT_CEILING_HEIGHT, gt=0, description="Meters")

    def wall_key(self) -> frozenset[str]:
        """Order-independent identity of the room's wall set."""
        return frozenset(self.wall_ids)
