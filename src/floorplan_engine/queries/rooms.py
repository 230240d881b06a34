"""Room detection and identity reconciliation.

Rooms are recomputed from scratch: build the wall graph, trace its faces,
keep the bounded ones, then match every face against the previous room
list by wall-id set so that ids, names and ceiling heights survive edits
that leave a room's walls unchanged.

A room whose wall set changes (a wall was split, a new wall was drawn
through it) does not match anything and comes back as a new room with a
default name. Matching is by wall ids only, never by geometry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from floorplan_engine.models.elements import Wall
from floorplan_engine.models.geometry import Point2D
from floorplan_engine.models.ids import generate_id
from floorplan_engine.models.rooms import DEFAULT_CEILING_HEIGHT, Room
from floorplan_engine.queries.faces import (
    MIN_ROOM_AREA_M2,
    Face,
    interior_faces,
    trace_faces,
)
from floorplan_engine.queries.planar_graph import NODE_EPSILON, build_planar_graph

logger = logging.getLogger(__name__)

DEFAULT_ROOM_NAME = "Room"


def detect_rooms(
    walls: Iterable[Wall],
    grid_size: float,
    previous_rooms: Sequence[Room] = (),
    epsilon: float = NODE_EPSILON,
    min_area_m2: float = MIN_ROOM_AREA_M2,
) -> list[Room]:
    """Recompute the room list for a wall set.

    Args:
        walls: Current walls, in a stable order.
        grid_size: Pixels per meter.
        previous_rooms: Rooms before the change, used to keep identity.
        epsilon: Endpoint merge distance in pixels.
        min_area_m2: Faces smaller than this are not rooms.

    Returns:
        Rooms in face-tracing order. An open wall network gives [].
    """
    walls = list(walls)
    if len(walls) < 3:
        return []
    graph = build_planar_graph(walls, epsilon=epsilon)
    faces = interior_faces(trace_faces(graph), grid_size, min_area_m2)
    rooms = reconcile_rooms(faces, previous_rooms)
    logger.debug("Detected %d room(s) from %d wall(s)", len(rooms), len(walls))
    return rooms


def reconcile_rooms(
    faces: Sequence[Face],
    previous_rooms: Sequence[Room],
    default_ceiling_height: float = DEFAULT_CEILING_HEIGHT,
) -> list[Room]:
    """Turn faces into rooms, reusing previous rooms with the same wall set.

    A previous room is reused at most once. Names are kept unique: a
    carried-over name that is already taken in this pass and every new
    room get the first free "Room N".
    """
    available: dict[frozenset[str], list[Room]] = {}
    for room in previous_rooms:
        available.setdefault(room.wall_key(), []).append(room)

    matched: list[Room | None] = []
    for face in faces:
        candidates = available.get(frozenset(face.wall_ids))
        matched.append(candidates.pop(0) if candidates else None)

    used_names: set[str] = set()
    carried: list[str | None] = []
    for prev in matched:
        if prev is not None and prev.name and prev.name not in used_names:
            used_names.add(prev.name)
            carried.append(prev.name)
        else:
            carried.append(None)

    rooms: list[Room] = []
    for face, prev, name in zip(faces, matched, carried):
        if name is None:
            name = next_room_name(used_names)
            used_names.add(name)
        if prev is not None:
            rooms.append(prev.model_copy(update={"name": name, "wall_ids": list(face.wall_ids)}))
        else:
            rooms.append(
                Room(
                    id=generate_id(),
                    name=name,
                    wall_ids=list(face.wall_ids),
                    ceiling_height=default_ceiling_height,
                )
            )
    return rooms


def next_room_name(used_names: Iterable[str], prefix: str = DEFAULT_ROOM_NAME) -> str:
    """First "<prefix> N" (N = 1, 2, ...) that is not already taken."""
    used = set(used_names)
    n = 1
    while f"{prefix} {n}" in used:
        n += 1
    return f"{prefix} {n}"


def room_polygon(
    room: Room,
    walls: Mapping[str, Wall],
    epsilon: float = NODE_EPSILON,
) -> list[Point2D] | None:
    """Rebuild a room's outline by chaining its walls end to end.

    Returns None when a wall is missing, when fewer than three walls
    remain, or when the walls do not chain into one closed loop.
    """
    room_walls = [walls[wid] for wid in room.wall_ids if wid in walls]
    if len(room_walls) < 3 or len(room_walls) != len(room.wall_ids):
        return None

    def same(a: Point2D, b: Point2D) -> bool:
        return abs(a.x - b.x) < epsilon and abs(a.y - b.y) < epsilon

    first = room_walls[0]
    points = [first.start]
    last = first.end
    remaining = room_walls[1:]
    while remaining:
        nxt = next(
            (w for w in remaining if same(w.start, last) or same(w.end, last)),
            None,
        )
        if nxt is None:
            return None
        remaining.remove(nxt)
        points.append(last)
        last = nxt.end if same(nxt.start, last) else nxt.start

    if not same(last, points[0]):
        return None
    return points
