"""Plan elements: walls and the openings (windows, doors) they host.

Element ids are generated 22-char GUIDs. Openings reference their host
wall by id and store their position as a fraction of the wall's length.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field, model_validator

from floorplan_engine.models.base import DocumentModel
from floorplan_engine.models.constraints import Constraint
from floorplan_engine.models.geometry import Point2D, distance
from floorplan_engine.models.ids import generate_id

DEFAULT_WALL_HEIGHT = 2.8
DEFAULT_WINDOW_SILL = 0.9


class WallType(str, Enum):
    """What lies on the other side of the wall (drives heat-loss grouping)."""

    EXTERNAL = "external"
    INTERNAL = "internal"
    UNHEATED = "unheated"  # towards an unheated space
    VIRTUAL = "virtual"  # room separator without a physical wall


class Photo(DocumentModel):
    """Site photo attached to a wall or opening. Opaque to the geometry code."""

    id: str = Field(default_factory=generate_id)
    data: str = Field(default="", description="Base64 image payload")
    date: str = ""
    label: str = ""


class Wall(DocumentModel):
    """A straight wall between two canvas points.

    The id survives moves and constraint corrections but not a split:
    splitting replaces the wall by two new ones.
    """

    id: str = Field(default_factory=generate_id)
    start: Point2D
    end: Point2D
    height: float = Field(default=DEFAULT_WALL_HEIGHT, gt=0, description="Wall height in meters")
    wall_type: WallType | None = None
    structure_type: str = Field(default="", description="Free-text build-up description")
    u_value: float | None = Field(default=None, ge=0, description="W/m²K")
    photos: list[Photo] = Field(default_factory=list)
    constraints: list[Constraint] = Field(default_factory=list)

    @property
    def length(self) -> float:
        """Length in pixels."""
        return distance(self.start, self.end)

    def length_m(self, grid_size: float) -> float:
        """Length in meters for a given pixels-per-meter scale."""
        return self.length / grid_size

    def point_at(self, position: float) -> Point2D:
        """Canvas point at a fractional position (0 = start, 1 = end)."""
        return Point2D(
            x=self.start.x + (self.end.x - self.start.x) * position,
            y=self.start.y + (self.end.y - self.start.y) * position,
        )

    @model_validator(mode="after")
    def start_and_end_differ(self) -> Wall:
        if self.start == self.end:
            raise ValueError("Wall start and end points must be different")
        return self


class OpeningType(str, Enum):
    WINDOW = "window"
    DOOR = "door"


class Opening(DocumentModel):
    """A window or door hosted in a wall.

    ``position`` is the opening's centre as a fraction of the host wall,
    measured from the wall's start. ``width`` is in meters, so the share
    of the wall it covers depends on the wall length and the plan scale.
    """

    id: str = Field(default_factory=generate_id)
    type: OpeningType
    wall_id: str = Field(description="Id of the host wall")
    width: float = Field(gt=0, description="Opening width in meters")
    height: float = Field(gt=0, description="Opening height in meters")
    sill_height: float = Field(default=0.0, ge=0, description="Floor to opening bottom in meters")
    u_value: float | None = Field(default=None, ge=0, description="W/m²K")
    position: float = Field(default=0.5, ge=0, le=1, description="Centre along the wall, 0-1")
    photos: list[Photo] = Field(default_factory=list)

    @property
    def area(self) -> float:
        """Opening area (m²)."""
        return self.width * self.height

    def half_ratio(self, wall_length_m: float) -> float:
        """Half the footprint as a fraction of a wall of the given length."""
        return (self.width / wall_length_m) / 2

    def footprint(self, wall_length_m: float) -> tuple[float, float]:
        """Covered interval of the host wall in [0, 1] coordinates."""
        half = self.half_ratio(wall_length_m)
        return (self.position - half, self.position + half)
