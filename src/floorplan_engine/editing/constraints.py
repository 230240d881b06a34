"""Constraint solver for a wall's moving endpoint.

Constraints are applied one after another in priority order
(perpendicular, parallel, horizontal / vertical, fixed length), each one
taking the previous one's output. There is no simultaneous solve, so a
later constraint can partly undo an earlier one.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Literal

from floorplan_engine.models.constraints import (
    CONSTRAINT_PRIORITY,
    Constraint,
    FixedLengthConstraint,
    HorizontalConstraint,
    ParallelConstraint,
    PerpendicularConstraint,
    VerticalConstraint,
)
from floorplan_engine.models.elements import Wall
from floorplan_engine.models.geometry import Point2D, distance, segment_angle

# Projections shorter than this (pixels) fall back to the pre-constraint length
MIN_PROJECTION = 1.0

Endpoint = Literal["start", "end"]


def solve_constraints(
    wall: Wall,
    walls: Mapping[str, Wall],
    grid_size: float,
    moving: Endpoint = "end",
) -> Point2D:
    """Corrected position of the wall's moving endpoint.

    Args:
        wall: Wall as dragged, with its constraint list.
        walls: All walls by id, for reference-wall lookups.
        grid_size: Pixels per meter (for fixed lengths).
        moving: Endpoint being dragged; the other one is the anchor.

    Returns:
        Where the moving endpoint has to go. The caller writes it back.
    """
    if moving not in ("start", "end"):
        raise ValueError(f"Moving endpoint must be 'start' or 'end', got {moving!r}")

    anchor = wall.start if moving == "end" else wall.end
    target = wall.end if moving == "end" else wall.start
    if not wall.constraints:
        return target

    initial_length = distance(anchor, target)
    ordered = sorted(wall.constraints, key=lambda c: CONSTRAINT_PRIORITY[c.type])
    for constraint in ordered:
        target = apply_constraint(constraint, anchor, target, walls, grid_size, initial_length)
    return target


def apply_constraint(
    constraint: Constraint,
    anchor: Point2D,
    target: Point2D,
    walls: Mapping[str, Wall],
    grid_size: float,
    fallback_length: float,
) -> Point2D:
    """Apply a single constraint to the anchor -> target vector."""
    if isinstance(constraint, (PerpendicularConstraint, ParallelConstraint)):
        ref = walls.get(constraint.ref_wall_id)
        if ref is None:
            return target  # reference wall is gone
        angle = segment_angle(ref.start, ref.end)
        if isinstance(constraint, PerpendicularConstraint):
            angle += math.pi / 2
        return project_on_angle(anchor, target, angle, fallback_length)
    if isinstance(constraint, HorizontalConstraint):
        return Point2D(x=target.x, y=anchor.y)
    if isinstance(constraint, VerticalConstraint):
        return Point2D(x=anchor.x, y=target.y)
    if isinstance(constraint, FixedLengthConstraint):
        length = constraint.fixed_length_m * grid_size
        angle = segment_angle(anchor, target)
        return Point2D(
            x=anchor.x + math.cos(angle) * length,
            y=anchor.y + math.sin(angle) * length,
        )
    raise ValueError(f"Unknown constraint type: {constraint!r}")


def project_on_angle(
    anchor: Point2D,
    target: Point2D,
    angle: float,
    fallback_length: float,
) -> Point2D:
    """Turn anchor -> target onto the line at ``angle``, keeping its length.

    The vector keeps the side of the line it projects onto. When the
    projection is too short to tell the side (the drag went square to the
    allowed direction), the wall points along ``angle`` with
    ``fallback_length``.
    """
    dir_x = _clean(math.cos(angle))
    dir_y = _clean(math.sin(angle))
    dx = target.x - anchor.x
    dy = target.y - anchor.y
    proj = dx * dir_x + dy * dir_y
    length = math.hypot(dx, dy)
    if abs(proj) < MIN_PROJECTION:
        signed = fallback_length
    else:
        signed = math.copysign(length, proj)
    return Point2D(x=anchor.x + dir_x * signed, y=anchor.y + dir_y * signed)


def _clean(component: float) -> float:
    # cos(pi / 2) is 6e-17, not 0; keep axis-aligned results exact
    return 0.0 if abs(component) < 1e-12 else component
