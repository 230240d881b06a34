"""Floor plan data models."""

from floorplan_engine.models.ids import generate_id
from floorplan_engine.models.geometry import Point2D, Polygon2D
from floorplan_engine.models.constraints import (
    Constraint,
    FixedLengthConstraint,
    HorizontalConstraint,
    ParallelConstraint,
    PerpendicularConstraint,
    VerticalConstraint,
)
from floorplan_engine.models.elements import (
    Opening,
    OpeningType,
    Photo,
    Wall,
    WallType,
)
from floorplan_engine.models.rooms import Room
from floorplan_engine.models.floorplan import Floorplan

__all__ = [
    "generate_id",
    "Point2D",
    "Polygon2D",
    "Constraint",
    "FixedLengthConstraint",
    "HorizontalConstraint",
    "ParallelConstraint",
    "PerpendicularConstraint",
    "VerticalConstraint",
    "Opening",
    "OpeningType",
    "Photo",
    "Wall",
    "WallType",
    "Room",
    "Floorplan",
]
