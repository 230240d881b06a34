"""Geometric primitives in canvas space.

Coordinates are pixels; ``Floorplan.grid_size`` pixels make one metre.
Everything here is a pure function of its arguments.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import BaseModel, field_validator


class Point2D(BaseModel):
    """2D point on the canvas (pixels). Copied by value, owned by nobody.

    Equality allows 1e-6 px of float noise, so points are not hashable.
    """

    x: float
    y: float

    def distance_to(self, other: Point2D) -> float:
        """Euclidean distance to another point."""
        return distance(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point2D):
            return NotImplemented
        return math.isclose(self.x, other.x, abs_tol=1e-6) and math.isclose(
            self.y, other.y, abs_tol=1e-6
        )


class Polygon2D(BaseModel):
    """Closed polygon. Minimum 3 vertices, first vertex is not repeated."""

    vertices: list[Point2D]

    @field_validator("vertices")
    @classmethod
    def at_least_3_vertices(cls, v: list[Point2D]) -> list[Point2D]:
        if len(v) < 3:
            raise ValueError("Polygon must have at least 3 vertices")
        return v

    @property
    def signed_area(self) -> float:
        """Shoelace area; positive for counter-clockwise winding."""
        return signed_polygon_area(self.vertices)

    @property
    def area(self) -> float:
        """Absolute area in square pixels."""
        return abs(self.signed_area)

    @property
    def perimeter(self) -> float:
        """Total perimeter length."""
        n = len(self.vertices)
        return sum(
            self.vertices[i].distance_to(self.vertices[(i + 1) % n]) for i in range(n)
        )

    @property
    def centroid(self) -> Point2D:
        return polygon_centroid(self.vertices)

    def contains(self, point: Point2D) -> bool:
        return point_in_polygon(point, self.vertices)


def distance(a: Point2D, b: Point2D) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def segment_angle(a: Point2D, b: Point2D) -> float:
    """Angle of the directed segment a->b in radians (atan2 convention)."""
    return math.atan2(b.y - a.y, b.x - a.x)


def segment_angle_deg(a: Point2D, b: Point2D) -> float:
    return math.degrees(segment_angle(a, b))


def project_onto_segment(point: Point2D, a: Point2D, b: Point2D) -> float:
    """Unclamped projection parameter of ``point`` onto the line through a, b.

    0 maps to ``a``, 1 maps to ``b``. A degenerate segment returns 0.
    """
    dx = b.x - a.x
    dy = b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return 0.0
    return ((point.x - a.x) * dx + (point.y - a.y) * dy) / length_sq


def point_at(a: Point2D, b: Point2D, t: float) -> Point2D:
    """Point at parameter t along a->b."""
    return Point2D(x=a.x + t * (b.x - a.x), y=a.y + t * (b.y - a.y))


def closest_point_on_segment(
    point: Point2D, a: Point2D, b: Point2D
) -> tuple[Point2D, float, float]:
    """Nearest point on segment a-b.

    Returns:
        (nearest point, clamped parameter t in [0, 1], distance to it).
    """
    t = max(0.0, min(1.0, project_onto_segment(point, a, b)))
    nearest = point_at(a, b, t)
    return nearest, t, distance(point, nearest)


def point_to_segment_distance(point: Point2D, a: Point2D, b: Point2D) -> float:
    """Distance from a point to the closest point of segment a-b."""
    return closest_point_on_segment(point, a, b)[2]


def signed_polygon_area(points: Sequence[Point2D]) -> float:
    """Shoelace formula. Positive when the vertices wind counter-clockwise."""
    area = 0.0
    n = len(points)
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y
    return area / 2.0


def polygon_area(points: Sequence[Point2D]) -> float:
    return abs(signed_polygon_area(points))


def polygon_centroid(points: Sequence[Point2D]) -> Point2D:
    """Vertex mean of a polygon.

    Good enough for label placement; not the area-weighted centroid.
    """
    if not points:
        raise ValueError("Cannot compute the centroid of an empty polygon")
    n = len(points)
    return Point2D(
        x=sum(p.x for p in points) / n,
        y=sum(p.y for p in points) / n,
    )


def point_in_polygon(point: Point2D, vertices: Sequence[Point2D]) -> bool:
    """Ray-casting point-in-polygon test (vertices in either winding)."""
    inside = False
    n = len(vertices)
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i].x, vertices[i].y
        xj, yj = vertices[j].x, vertices[j].y
        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside
