"""Engineering schedule: the tables handed to heat-loss calculations.

One row per wall, opening and room, plus a summary. Values are in
meters / m² / m³ and rounded to two decimals; rows are plain dicts ready
for JSON or a spreadsheet writer.
"""

from __future__ import annotations

from floorplan_engine.models.elements import Opening, OpeningType, Wall
from floorplan_engine.models.floorplan import Floorplan
from floorplan_engine.queries.walls import wall_orientation


def _r2(value: float) -> float:
    return round(value, 2)


def wall_rows(plan: Floorplan) -> list[dict]:
    """Wall table: size, net area after openings, orientation, build-up."""
    rows = []
    for index, wall in enumerate(plan.walls.values(), start=1):
        length_m = wall.length_m(plan.grid_size)
        gross = length_m * wall.height
        openings_area = sum(o.area for o in plan.openings_on(wall.id))
        orientation = wall_orientation(wall, plan.north_angle)
        rows.append({
            "index": index,
            "wall_id": wall.id,
            "wall_type": wall.wall_type.value if wall.wall_type else None,
            "length_m": _r2(length_m),
            "height_m": _r2(wall.height),
            "gross_area_m2": _r2(gross),
            "net_area_m2": _r2(max(gross - openings_area, 0.0)),
            "orientation_deg": orientation.degrees,
            "compass": orientation.compass,
            "structure_type": wall.structure_type,
            "u_value": wall.u_value,
        })
    return rows


def opening_rows(plan: Floorplan) -> list[dict]:
    """Opening table. Sill height is only reported for windows."""
    rows = []
    for index, opening in enumerate(plan.openings.values(), start=1):
        rows.append({
            "index": index,
            "opening_id": opening.id,
            "type": opening.type.value,
            "wall_id": opening.wall_id,
            "width_m": _r2(opening.width),
            "height_m": _r2(opening.height),
            "area_m2": _r2(opening.area),
            "sill_height_m": (
                _r2(opening.sill_height) if opening.type == OpeningType.WINDOW else None
            ),
            "u_value": opening.u_value,
            "position_pct": round(opening.position * 100),
        })
    return rows


def room_rows(plan: Floorplan) -> list[dict]:
    """Room table: floor area, ceiling height and air volume."""
    rows = []
    for index, room in enumerate(plan.rooms.values(), start=1):
        area = plan.room_area_m2(room.id)
        rows.append({
            "index": index,
            "room_id": room.id,
            "name": room.name,
            "area_m2": _r2(area),
            "ceiling_height_m": _r2(room.ceiling_height),
            "volume_m3": _r2(area * room.ceiling_height),
            "wall_count": len(room.wall_ids),
        })
    return rows


def wall_ua(plan: Floorplan, wall: Wall, openings: list[Opening]) -> float:
    """Sum of U·A (W/K) for a wall and its openings; missing U-values count as 0."""
    net = max(wall.length_m(plan.grid_size) * wall.height - sum(o.area for o in openings), 0.0)
    total = net * (wall.u_value or 0.0)
    total += sum(o.area * (o.u_value or 0.0) for o in openings)
    return total


def build_schedule(plan: Floorplan) -> dict:
    """All tables plus a summary block."""
    ua_total = sum(
        wall_ua(plan, wall, plan.openings_on(wall.id))
        for wall in plan.walls.values()
    )
    return {
        "walls": wall_rows(plan),
        "openings": opening_rows(plan),
        "rooms": room_rows(plan),
        "summary": {
            "wall_count": len(plan.walls),
            "opening_count": len(plan.openings),
            "room_count": len(plan.rooms),
            "north_angle_deg": plan.north_angle,
            "total_floor_area_m2": _r2(plan.total_floor_area()),
            "total_ua_w_per_k": _r2(ua_total),
        },
    }
