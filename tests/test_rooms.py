"""Tests for room identity reconciliation and room outlines."""

import math

from floorplan_engine.models import Point2D, Room, Wall
from floorplan_engine.models.geometry import polygon_area
from floorplan_engine.queries.faces import Face
from floorplan_engine.queries.rooms import (
    detect_rooms,
    next_room_name,
    reconcile_rooms,
    room_polygon,
)

GRID = 100.0


def _wall(x1, y1, x2, y2, wall_id):
    return Wall(id=wall_id, start=Point2D(x=x1, y=y1), end=Point2D(x=x2, y=y2))


def _rectangle():
    return [
        _wall(0, 0, 400, 0, "bottom"),
        _wall(400, 0, 400, 300, "right"),
        _wall(400, 300, 0, 300, "top"),
        _wall(0, 300, 0, 0, "left"),
    ]


def _face(*wall_ids):
    return Face(node_ids=[0, 1, 2], points=[], wall_ids=list(wall_ids), signed_area=1.0)


class TestNextRoomName:
    def test_first_name(self):
        assert next_room_name([]) == "Room 1"

    def test_fills_gaps(self):
        assert next_room_name({"Room 1", "Room 3"}) == "Room 2"

    def test_ignores_custom_names(self):
        assert next_room_name({"Kitchen", "Room 1"}) == "Room 2"


class TestReconcile:
    def test_new_faces_get_default_names(self):
        rooms = reconcile_rooms([_face("a", "b", "c"), _face("c", "d", "e")], [])
        assert [r.name for r in rooms] == ["Room 1", "Room 2"]
        assert all(r.ceiling_height == 2.8 for r in rooms)
        assert rooms[0].id != rooms[1].id

    def test_match_by_wall_set_any_order(self):
        prev = Room(name="Kitchen", wall_ids=["c", "a", "b"], ceiling_height=3.1)
        rooms = reconcile_rooms([_face("a", "b", "c")], [prev])
        assert rooms[0].id == prev.id
        assert rooms[0].name == "Kitchen"
        assert rooms[0].ceiling_height == 3.1
        assert rooms[0].wall_ids == ["a", "b", "c"]

    def test_new_name_avoids_matched_names(self):
        # The matched room comes second but its name is reserved first
        prev = Room(name="Room 1", wall_ids=["x", "y", "z"])
        rooms = reconcile_rooms([_face("a", "b", "c"), _face("x", "y", "z")], [prev])
        assert rooms[1].name == "Room 1"
        assert rooms[0].name == "Room 2"

    def test_previous_room_used_once(self):
        prev = Room(name="Hall", wall_ids=["a", "b", "c"])
        rooms = reconcile_rooms([_face("a", "b", "c"), _face("a", "b", "c")], [prev])
        assert [r.name for r in rooms] == ["Hall", "Room 1"]
        assert rooms[0].id == prev.id
        assert rooms[1].id != prev.id

    def test_duplicate_previous_names_resolved(self):
        p1 = Room(name="Bath", wall_ids=["a", "b", "c"])
        p2 = Room(name="Bath", wall_ids=["d", "e", "f"])
        rooms = reconcile_rooms([_face("a", "b", "c"), _face("d", "e", "f")], [p1, p2])
        assert [r.name for r in rooms] == ["Bath", "Room 1"]
        assert rooms[1].id == p2.id

    def test_changed_wall_set_is_new_room(self):
        prev = Room(name="Office", wall_ids=["a", "b", "c"])
        rooms = reconcile_rooms([_face("a", "b", "d")], [prev])
        assert rooms[0].name == "Room 1"
        assert rooms[0].id != prev.id


class TestDetectIdempotence:
    def test_same_ids_and_names(self):
        walls = _rectangle()
        first = detect_rooms(walls, GRID)
        second = detect_rooms(walls, GRID, first)
        assert [(r.id, r.name) for r in first] == [(r.id, r.name) for r in second]

    def test_custom_name_survives(self):
        walls = _rectangle()
        first = detect_rooms(walls, GRID)
        renamed = [first[0].model_copy(update={"name": "Living"})]
        second = detect_rooms(walls, GRID, renamed)
        assert second[0].name == "Living"
        assert second[0].id == first[0].id


class TestRoomPolygon:
    def test_closed_loop(self):
        walls = {w.id: w for w in _rectangle()}
        room = Room(name="R", wall_ids=["bottom", "right", "top", "left"])
        points = room_polygon(room, walls)
        assert points is not None
        assert len(points) == 4
        assert math.isclose(polygon_area(points), 120000.0)

    def test_walls_in_any_direction(self):
        walls = {w.id: w for w in _rectangle()}
        walls["right"] = _wall(400, 300, 400, 0, "right")  # reversed
        room = Room(name="R", wall_ids=["bottom", "right", "top", "left"])
        assert room_polygon(room, walls) is not None

    def test_missing_wall(self):
        walls = {w.id: w for w in _rectangle() if w.id != "top"}
        room = Room(name="R", wall_ids=["bottom", "right", "top", "left"])
        assert room_polygon(room, walls) is None

    def test_open_loop(self):
        walls = {w.id: w for w in _rectangle()}
        walls["left"] = _wall(0, 300, 0, 100, "left")
        room = Room(name="R", wall_ids=["bottom", "right", "top", "left"])
        assert room_polygon(room, walls) is None
