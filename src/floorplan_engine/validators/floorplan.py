"""Export-time validation of a floor plan.

Geometry code tolerates inconsistent data (dangling openings, rooms whose
walls changed underneath them); this is where such problems are reported.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from floorplan_engine.models.floorplan import Floorplan
from floorplan_engine.queries.rooms import room_polygon

OVERHANG_TOLERANCE = 0.01  # fraction of the wall


@dataclass
class ValidationError:
    """A single validation issue."""

    severity: str  # "error" | "warning"
    element_type: str
    element_id: str
    message: str


def validate_floorplan(plan: Floorplan) -> list[ValidationError]:
    """Check a plan for problems that would spoil an export."""
    errors: list[ValidationError] = []

    if not plan.walls:
        errors.append(
            ValidationError(
                severity="error",
                element_type="Plan",
                element_id="",
                message="Plan has no walls",
            )
        )

    for wall in plan.walls.values():
        if wall.length_m(plan.grid_size) < 0.01:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Wall",
                    element_id=wall.id,
                    message=f"Wall {wall.id[:5]} has zero length",
                )
            )
        if wall.wall_type is None:
            errors.append(
                ValidationError(
                    severity="warning",
                    element_type="Wall",
                    element_id=wall.id,
                    message=f"Wall {wall.id[:5]} has no wall type",
                )
            )

    errors.extend(_validate_openings(plan))
    errors.extend(_validate_rooms(plan))
    return errors


def _validate_openings(plan: Floorplan) -> list[ValidationError]:
    errors: list[ValidationError] = []
    by_wall = defaultdict(list)

    for opening in plan.openings.values():
        wall = plan.walls.get(opening.wall_id)
        if wall is None:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Opening",
                    element_id=opening.id,
                    message=(
                        f"Opening {opening.id[:5]} references non-existent wall "
                        f"{opening.wall_id}"
                    ),
                )
            )
            continue
        by_wall[wall.id].append(opening)
        lo, hi = opening.footprint(wall.length_m(plan.grid_size))
        if lo < -OVERHANG_TOLERANCE or hi > 1 + OVERHANG_TOLERANCE:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Opening",
                    element_id=opening.id,
                    message=f"Opening {opening.id[:5]} extends past its wall",
                )
            )

    for wall_id, openings in by_wall.items():
        wall_len_m = plan.walls[wall_id].length_m(plan.grid_size)
        for i, o1 in enumerate(openings):
            for o2 in openings[i + 1 :]:
                reach = o1.half_ratio(wall_len_m) + o2.half_ratio(wall_len_m)
                if abs(o1.position - o2.position) < reach - 1e-9:
                    errors.append(
                        ValidationError(
                            severity="error",
                            element_type="Opening",
                            element_id=o2.id,
                            message=(
                                f"Openings {o1.id[:5]} and {o2.id[:5]} overlap "
                                f"on wall {wall_id[:5]}"
                            ),
                        )
                    )
    return errors


def _validate_rooms(plan: Floorplan) -> list[ValidationError]:
    errors: list[ValidationError] = []
    seen_names: dict[str, str] = {}

    for room in plan.rooms.values():
        missing = [wid for wid in room.wall_ids if wid not in plan.walls]
        if missing:
            errors.append(
                ValidationError(
                    severity="warning",
                    element_type="Room",
                    element_id=room.id,
                    message=f"Room '{room.name}' references missing walls {missing}",
                )
            )
        elif room_polygon(room, plan.walls) is None:
            errors.append(
                ValidationError(
                    severity="warning",
                    element_type="Room",
                    element_id=room.id,
                    message=f"Room '{room.name}' is not closed",
                )
            )

        if room.name in seen_names:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Room",
                    element_id=room.id,
                    message=f"Room name '{room.name}' is used more than once",
                )
            )
        else:
            seen_names[room.name] = room.id
    return errors
