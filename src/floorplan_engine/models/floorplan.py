"""Top-level plan model and its command layer.

A Floorplan owns walls, openings and rooms, indexed by id and exported
as arrays in insertion order. Commands never edit a collection in place:
each one builds a new dict (and new element copies), so a caller holding
the previous ``walls`` / ``openings`` / ``rooms`` keeps an unchanged
snapshot.

Expected refusals (zero-length wall, opening that does not fit,
duplicate room name) return None / False. Unknown ids passed to update
commands are caller bugs and raise ValueError.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_serializer, field_validator

from floorplan_engine.models.base import DocumentModel
from floorplan_engine.models.constraints import Constraint
from floorplan_engine.models.elements import (
    DEFAULT_WALL_HEIGHT,
    DEFAULT_WINDOW_SILL,
    Opening,
    OpeningType,
    Wall,
    WallType,
)
from floorplan_engine.models.geometry import Point2D, polygon_area, polygon_centroid
from floorplan_engine.models.rooms import Room

logger = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 100.0  # pixels per meter
MAX_OPENING_RATIO = 0.9  # share of the wall an opening may cover
FOOTPRINT_TOLERANCE = 1e-9

WALL_FIELDS = {
    "start", "end", "height", "wall_type", "structure_type", "u_value", "photos", "constraints",
}
OPENING_FIELDS = {
    "type", "wall_id", "width", "height", "sill_height", "u_value", "position", "photos",
}

_ELEMENT_TYPES: dict[str, type[BaseModel]] = {
    "walls": Wall,
    "openings": Opening,
    "rooms": Room,
}


def _as_point(value: Point2D | tuple[float, float] | dict) -> Point2D:
    if isinstance(value, Point2D):
        return value
    if isinstance(value, dict):
        return Point2D.model_validate(value)
    x, y = value
    return Point2D(x=x, y=y)


def _plain(value: Any) -> Any:
    """Model instances to dicts so a merged record can be re-validated."""
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


class Floorplan(DocumentModel):
    """A single-level plan: walls, the openings they host and derived rooms."""

    name: str = Field(default="Untitled Plan")
    grid_size: float = Field(default=DEFAULT_GRID_SIZE, gt=0, description="Pixels per meter")
    north_angle: float = Field(default=0.0, description="Canvas angle of north in degrees")
    default_wall_height: float = Field(default=DEFAULT_WALL_HEIGHT, gt=0)
    walls: dict[str, Wall] = Field(default_factory=dict)
    openings: dict[str, Opening] = Field(default_factory=dict)
    rooms: dict[str, Room] = Field(default_factory=dict)

    @field_validator("walls", "openings", "rooms", mode="before")
    @classmethod
    def index_by_id(cls, v: Any, info: ValidationInfo) -> Any:
        """Accept the exported array form and index it by element id."""
        if not isinstance(v, list):
            return v
        model = _ELEMENT_TYPES[info.field_name]
        indexed: dict[str, BaseModel] = {}
        for item in v:
            element = item if isinstance(item, model) else model.model_validate(item)
            if element.id in indexed:
                raise ValueError(f"Duplicate id {element.id!r} in {info.field_name}")
            indexed[element.id] = element
        return indexed

    @field_serializer("walls", "openings", "rooms")
    def as_array(self, v: dict) -> list:
        return list(v.values())

    # ── File I/O ──────────────────────────────────────────────────────

    @classmethod
    def from_document(cls, data: dict | str) -> Floorplan:
        """Validate an exported document and re-derive its rooms.

        Persisted rooms are not trusted: faces are traced again and a
        stored room survives (id, name, ceiling height) only where its
        wall ids still bound a face.
        """
        if isinstance(data, str):
            plan = cls.model_validate_json(data)
        else:
            plan = cls.model_validate(data)
        plan.recompute_rooms()
        return plan

    @classmethod
    def load(cls, path: str | Path) -> Floorplan:
        """Load a plan from a JSON file (see ``from_document``)."""
        path = Path(path)
        return cls.from_document(path.read_text())

    def save(self, path: str | Path) -> Path:
        """Save the plan as JSON. Creates parent dirs if needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2, by_alias=True))
        return path

    # ── Lookups ───────────────────────────────────────────────────────

    def get_wall(self, wall_id: str) -> Wall | None:
        return self.walls.get(wall_id)

    def get_opening(self, opening_id: str) -> Opening | None:
        return self.openings.get(opening_id)

    def get_room(self, room_id: str) -> Room | None:
        return self.rooms.get(room_id)

    def get_room_by_name(self, name: str) -> Room | None:
        """Find a room by name (case-insensitive)."""
        return next(
            (r for r in self.rooms.values() if r.name.lower() == name.lower()), None
        )

    def _require_wall(self, wall_id: str) -> Wall:
        wall = self.walls.get(wall_id)
        if wall is None:
            raise ValueError(f"Wall '{wall_id}' not found. Available: {list(self.walls)}")
        return wall

    def _require_opening(self, opening_id: str) -> Opening:
        opening = self.openings.get(opening_id)
        if opening is None:
            raise ValueError(
                f"Opening '{opening_id}' not found. Available: {list(self.openings)}"
            )
        return opening

    def _require_room(self, room_id: str) -> Room:
        room = self.rooms.get(room_id)
        if room is None:
            raise ValueError(f"Room '{room_id}' not found. Available: {list(self.rooms)}")
        return room

    def openings_on(self, wall_id: str) -> list[Opening]:
        """Openings hosted by a wall."""
        return [o for o in self.openings.values() if o.wall_id == wall_id]

    def wall_length_m(self, wall_id: str) -> float:
        return self._require_wall(wall_id).length_m(self.grid_size)

    def connected_walls(self, wall_id: str) -> list[Wall]:
        """Other walls sharing an endpoint with the given wall."""
        from floorplan_engine.queries.walls import find_connected_walls

        return find_connected_walls(self._require_wall(wall_id), self.walls.values())

    def room_polygon(self, room_id: str) -> list[Point2D] | None:
        """Room outline rebuilt from its walls, or None if they no longer close."""
        from floorplan_engine.queries.rooms import room_polygon

        return room_polygon(self._require_room(room_id), self.walls)

    def room_area_m2(self, room_id: str) -> float:
        """Floor area of a room; 0 when its walls no longer close."""
        points = self.room_polygon(room_id)
        if points is None:
            return 0.0
        return polygon_area(points) / (self.grid_size * self.grid_size)

    def room_centroid(self, room_id: str) -> Point2D | None:
        """Label anchor for a room (vertex mean of its outline)."""
        points = self.room_polygon(room_id)
        return polygon_centroid(points) if points else None

    # ── Walls ─────────────────────────────────────────────────────────

    def create_wall(
        self,
        start: Point2D | tuple[float, float],
        end: Point2D | tuple[float, float],
        height: float | None = None,
        wall_type: WallType | str | None = None,
        structure_type: str = "",
        u_value: float | None = None,
        constraints: list[Constraint] | None = None,
    ) -> Wall | None:
        """Add a wall, splitting any wall its endpoints land on.

        Returns the created wall (endpoints possibly moved onto a split
        point), or None for a zero-length wall or one whose split would
        cut through an opening.
        """
        from floorplan_engine.editing.splitting import split_walls_for_new_wall

        start, end = _as_point(start), _as_point(end)
        if start == end:
            logger.info("Refused zero-length wall at (%.1f, %.1f)", start.x, start.y)
            return None
        wall = Wall(
            start=start,
            end=end,
            height=height if height is not None else self.default_wall_height,
            wall_type=wall_type,
            structure_type=structure_type,
            u_value=u_value,
            constraints=constraints or [],
        )

        outcome = split_walls_for_new_wall(wall, self.walls, self.openings)
        if outcome.wall.start == outcome.wall.end:
            logger.info("Refused wall collapsing onto a single split point")
            return None
        split_parts = [part.id for s in outcome.splits for part in (s.first, s.second)]
        problem = self._placement_problem(outcome.walls, outcome.openings, split_parts)
        if problem:
            logger.info("Refused wall splitting through an opening: %s", problem)
            return None

        self.walls = {**outcome.walls, outcome.wall.id: outcome.wall}
        self.openings = outcome.openings
        self.recompute_rooms()
        return outcome.wall

    def update_wall(self, wall_id: str, moving: str = "end", **fields: Any) -> Wall | None:
        """Update wall fields, then re-apply the wall's constraints.

        Args:
            wall_id: Wall to update.
            moving: Endpoint the constraint solver may move ("start"/"end").
            **fields: New values for any of start, end, height, wall_type,
                structure_type, u_value, photos, constraints.

        Returns:
            The updated wall, or None if the result would have zero length
            or would leave one of its openings off the wall.
        """
        from floorplan_engine.editing.constraints import solve_constraints

        wall = self._require_wall(wall_id)
        unknown = set(fields) - WALL_FIELDS
        if unknown:
            raise ValueError(f"Unknown wall field(s): {sorted(unknown)}")

        data = wall.model_dump()
        for key, value in fields.items():
            if key in ("start", "end"):
                value = _as_point(value)
            data[key] = _plain(value)
        if _as_point(data["start"]) == _as_point(data["end"]):
            logger.info("Refused update collapsing wall %s to zero length", wall_id)
            return None
        updated = Wall.model_validate(data)

        if updated.constraints:
            corrected = solve_constraints(updated, self.walls, self.grid_size, moving=moving)
            updated = updated.model_copy(update={moving: corrected})
            if updated.start == updated.end:
                logger.info("Refused constraint result of zero length for wall %s", wall_id)
                return None

        walls = {**self.walls, wall_id: updated}
        moved = updated.start != wall.start or updated.end != wall.end
        if moved:
            problem = self._placement_problem(walls, self.openings, [wall_id])
            if problem:
                logger.info("Refused update of wall %s: %s", wall_id, problem)
                return None
        self.walls = walls
        if moved:
            self.recompute_rooms()
        return updated

    def delete_wall(self, wall_id: str) -> bool:
        """Remove a wall and every opening it hosts."""
        if wall_id not in self.walls:
            return False
        self.walls = {k: w for k, w in self.walls.items() if k != wall_id}
        self.openings = {k: o for k, o in self.openings.items() if o.wall_id != wall_id}
        self.recompute_rooms()
        return True

    # ── Openings ──────────────────────────────────────────────────────

    def opening_problem(self, opening: Opening, ignore_id: str | None = None) -> str | None:
        """Why an opening cannot sit where it is, or None if it fits.

        Checks: host wall exists, width at most 90 % of the wall, footprint
        inside the wall, no overlap with another opening on that wall.
        """
        wall = self.walls.get(opening.wall_id)
        if wall is None:
            return f"wall {opening.wall_id} does not exist"
        wall_len_m = wall.length_m(self.grid_size)
        if opening.width / wall_len_m > MAX_OPENING_RATIO:
            return (
                f"width {opening.width}m exceeds {MAX_OPENING_RATIO:.0%} "
                f"of wall length {wall_len_m:.2f}m"
            )
        lo, hi = opening.footprint(wall_len_m)
        if lo < -FOOTPRINT_TOLERANCE or hi > 1 + FOOTPRINT_TOLERANCE:
            return f"footprint {lo:.3f}-{hi:.3f} leaves the wall"
        half = opening.half_ratio(wall_len_m)
        for other in self.openings_on(wall.id):
            if other.id in (opening.id, ignore_id):
                continue
            reach = half + other.half_ratio(wall_len_m)
            if abs(other.position - opening.position) < reach - FOOTPRINT_TOLERANCE:
                return f"overlaps opening {other.id}"
        return None

    def _placement_problem(
        self,
        walls: dict[str, Wall],
        openings: dict[str, Opening],
        wall_ids: list[str],
    ) -> str | None:
        """First opening on ``wall_ids`` that would not fit on the candidate walls."""
        candidate = self.model_copy(update={"walls": walls, "openings": openings})
        for wall_id in wall_ids:
            for opening in candidate.openings_on(wall_id):
                problem = candidate.opening_problem(opening)
                if problem:
                    return f"opening {opening.id} {problem}"
        return None

    def create_opening(
        self,
        wall_id: str,
        opening_type: OpeningType | str,
        width: float,
        height: float,
        sill_height: float | None = None,
        u_value: float | None = None,
        position: float = 0.5,
    ) -> Opening | None:
        """Place a window or door on a wall. Returns None if it does not fit."""
        opening_type = OpeningType(opening_type)
        if sill_height is None:
            sill_height = DEFAULT_WINDOW_SILL if opening_type == OpeningType.WINDOW else 0.0
        opening = Opening(
            type=opening_type,
            wall_id=wall_id,
            width=width,
            height=height,
            sill_height=sill_height,
            u_value=u_value,
            position=position,
        )
        problem = self.opening_problem(opening)
        if problem:
            logger.info("Refused %s on wall %s: %s", opening_type.value, wall_id, problem)
            return None
        self.openings = {**self.openings, opening.id: opening}
        return opening

    def update_opening(self, opening_id: str, **fields: Any) -> Opening | None:
        """Update opening fields. Returns None if the result does not fit."""
        opening = self._require_opening(opening_id)
        unknown = set(fields) - OPENING_FIELDS
        if unknown:
            raise ValueError(f"Unknown opening field(s): {sorted(unknown)}")
        data = opening.model_dump()
        data.update({k: _plain(v) for k, v in fields.items()})
        updated = Opening.model_validate(data)
        problem = self.opening_problem(updated, ignore_id=opening_id)
        if problem:
            logger.info("Refused update of opening %s: %s", opening_id, problem)
            return None
        self.openings = {**self.openings, opening_id: updated}
        return updated

    def delete_opening(self, opening_id: str) -> bool:
        if opening_id not in self.openings:
            return False
        self.openings = {k: o for k, o in self.openings.items() if k != opening_id}
        return True

    # ── Rooms ─────────────────────────────────────────────────────────

    def recompute_rooms(self) -> list[Room]:
        """Re-derive rooms from the walls, keeping identity by wall set."""
        from floorplan_engine.queries.rooms import detect_rooms

        rooms = detect_rooms(self.walls.values(), self.grid_size, list(self.rooms.values()))
        self.rooms = {room.id: room for room in rooms}
        return rooms

    def update_room(
        self,
        room_id: str,
        name: str | None = None,
        ceiling_height: float | None = None,
    ) -> Room | None:
        """Rename a room and/or change its ceiling height.

        Returns None when the name is empty or used by another room.
        """
        room = self._require_room(room_id)
        data = room.model_dump()
        if name is not None:
            name = name.strip()
            taken = any(
                r.name == name for r in self.rooms.values() if r.id != room_id
            )
            if not name or taken:
                logger.info("Refused room name %r for room %s", name, room_id)
                return None
            data["name"] = name
        if ceiling_height is not None:
            data["ceiling_height"] = ceiling_height
        updated = Room.model_validate(data)
        self.rooms = {**self.rooms, room_id: updated}
        return updated

    def delete_room(self, room_id: str) -> bool:
        """Drop a room until the next recomputation brings its face back."""
        if room_id not in self.rooms:
            return False
        self.rooms = {k: r for k, r in self.rooms.items() if k != room_id}
        return True

    # ── Settings ──────────────────────────────────────────────────────

    def set_grid_size(self, grid_size: float) -> None:
        """Change the pixels-per-meter scale (sliver filtering depends on it)."""
        if grid_size <= 0:
            raise ValueError(f"Grid size must be positive, got {grid_size}")
        self.grid_size = grid_size
        self.recompute_rooms()

    def set_north_angle(self, angle: float) -> None:
        self.north_angle = angle % 360

    def set_default_wall_height(self, height: float) -> None:
        if height <= 0:
            raise ValueError(f"Wall height must be positive, got {height}")
        self.default_wall_height = height

    # ── Summary ───────────────────────────────────────────────────────

    def total_floor_area(self) -> float:
        """Sum of room floor areas (m²)."""
        return sum(self.room_area_m2(room_id) for room_id in self.rooms)

    def summary(self) -> str:
        """Human-readable summary of the plan."""
        lines = [f"{self.name}"]
        lines.append(
            f"   Walls: {len(self.walls)}, Openings: {len(self.openings)}, "
            f"Rooms: {len(self.rooms)}"
        )
        lines.append(f"   Total floor area: {self.total_floor_area():.2f} m²")
        for room in self.rooms.values():
            lines.append(
                f"   {room.name}: {self.room_area_m2(room.id):.2f} m², "
                f"h={room.ceiling_height}m, {len(room.wall_ids)} walls"
            )
        return "\n".join(lines)
