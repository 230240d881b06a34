"""Tests for geometric primitives."""

import math

import pytest

from floorplan_engine.models.geometry import (
    Point2D,
    Polygon2D,
    closest_point_on_segment,
    distance,
    point_in_polygon,
    point_to_segment_distance,
    polygon_area,
    polygon_centroid,
    project_onto_segment,
    segment_angle,
    signed_polygon_area,
)


def _pts(*coords):
    return [Point2D(x=x, y=y) for x, y in coords]


SQUARE_CCW = _pts((0, 0), (100, 0), (100, 100), (0, 100))


class TestPoint2D:
    def test_create(self):
        p = Point2D(x=1.0, y=2.0)
        assert p.x == 1.0
        assert p.y == 2.0

    def test_distance(self):
        assert math.isclose(Point2D(x=0, y=0).distance_to(Point2D(x=3, y=4)), 5.0)

    def test_equality_tolerance(self):
        assert Point2D(x=1.0, y=2.0) == Point2D(x=1.0000001, y=2.0000001)

    def test_inequality(self):
        assert Point2D(x=1.0, y=2.0) != Point2D(x=1.0, y=3.0)

    def test_not_hashable(self):
        # Tolerant equality has no matching hash
        with pytest.raises(TypeError):
            hash(Point2D(x=1.0, y=2.0))


class TestSegments:
    def test_distance_function(self):
        assert math.isclose(distance(Point2D(x=1, y=1), Point2D(x=4, y=5)), 5.0)

    def test_angle_atan2_convention(self):
        o = Point2D(x=0, y=0)
        assert math.isclose(segment_angle(o, Point2D(x=10, y=0)), 0.0)
        assert math.isclose(segment_angle(o, Point2D(x=0, y=10)), math.pi / 2)
        assert math.isclose(segment_angle(o, Point2D(x=-10, y=0)), math.pi)

    def test_projection_parameter_unclamped(self):
        a, b = Point2D(x=0, y=0), Point2D(x=100, y=0)
        assert math.isclose(project_onto_segment(Point2D(x=25, y=40), a, b), 0.25)
        assert math.isclose(project_onto_segment(Point2D(x=150, y=0), a, b), 1.5)

    def test_closest_point_clamps(self):
        a, b = Point2D(x=0, y=0), Point2D(x=100, y=0)
        nearest, t, d = closest_point_on_segment(Point2D(x=150, y=30), a, b)
        assert nearest == Point2D(x=100, y=0)
        assert t == 1.0
        assert math.isclose(d, math.hypot(50, 30))

    def test_point_to_segment_distance_interior(self):
        a, b = Point2D(x=0, y=0), Point2D(x=100, y=0)
        assert math.isclose(point_to_segment_distance(Point2D(x=40, y=-7), a, b), 7.0)

    def test_degenerate_segment(self):
        a = Point2D(x=5, y=5)
        assert project_onto_segment(Point2D(x=8, y=9), a, a) == 0.0
        assert math.isclose(point_to_segment_distance(Point2D(x=8, y=9), a, a), 5.0)


class TestPolygons:
    def test_signed_area_ccw_positive(self):
        assert math.isclose(signed_polygon_area(SQUARE_CCW), 10000.0)

    def test_signed_area_cw_negative(self):
        assert math.isclose(signed_polygon_area(list(reversed(SQUARE_CCW))), -10000.0)

    def test_absolute_area(self):
        assert math.isclose(polygon_area(list(reversed(SQUARE_CCW))), 10000.0)

    def test_centroid_is_vertex_mean(self):
        # Extra vertex on one edge pulls the vertex mean off the true centroid
        pts = _pts((0, 0), (50, 0), (100, 0), (100, 100), (0, 100))
        c = polygon_centroid(pts)
        assert math.isclose(c.x, 50.0)
        assert math.isclose(c.y, 40.0)

    def test_centroid_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            polygon_centroid([])

    def test_point_in_polygon(self):
        assert point_in_polygon(Point2D(x=50, y=50), SQUARE_CCW)
        assert not point_in_polygon(Point2D(x=150, y=50), SQUARE_CCW)

    def test_point_in_concave_polygon(self):
        l_shape = _pts((0, 0), (200, 0), (200, 100), (100, 100), (100, 200), (0, 200))
        assert point_in_polygon(Point2D(x=50, y=150), l_shape)
        assert not point_in_polygon(Point2D(x=150, y=150), l_shape)


class TestPolygon2D:
    def test_area_and_perimeter(self):
        poly = Polygon2D(vertices=SQUARE_CCW)
        assert math.isclose(poly.area, 10000.0)
        assert math.isclose(poly.perimeter, 400.0)
        assert poly.contains(Point2D(x=10, y=10))

    def test_min_vertices(self):
        with pytest.raises(ValueError, match="at least 3"):
            Polygon2D(vertices=_pts((0, 0), (1, 0)))
