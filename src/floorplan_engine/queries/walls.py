"""Wall queries: neighbours and orientation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from floorplan_engine.models.elements import Wall
from floorplan_engine.models.geometry import distance, segment_angle_deg

CONNECTED_THRESHOLD = 1.0  # pixels

COMPASS_POINTS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]


@dataclass
class WallOrientation:
    """Bearing of a wall's outward normal, clockwise from north."""

    degrees: float
    compass: str


def find_connected_walls(
    wall: Wall,
    walls: Iterable[Wall],
    threshold: float = CONNECTED_THRESHOLD,
) -> list[Wall]:
    """Other walls sharing an endpoint with ``wall``.

    These are the candidates offered as reference walls for
    perpendicular / parallel constraints.
    """
    result = []
    for other in walls:
        if other.id == wall.id:
            continue
        if any(
            distance(p, q) < threshold
            for p in (wall.start, wall.end)
            for q in (other.start, other.end)
        ):
            result.append(other)
    return result


def compass_direction(angle_degrees: float) -> str:
    """8-point compass label for a bearing in degrees."""
    a = angle_degrees % 360
    return COMPASS_POINTS[round(a / 45) % 8]


def wall_orientation(wall: Wall, north_angle: float = 0.0) -> WallOrientation:
    """Bearing of the wall's normal (direction + 90°) relative to north.

    ``north_angle`` is the canvas angle of the north arrow in degrees.
    """
    normal = (segment_angle_deg(wall.start, wall.end) + 90 - north_angle) % 360
    return WallOrientation(degrees=round(normal, 2), compass=compass_direction(normal))
