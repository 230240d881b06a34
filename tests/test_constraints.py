"""Tests for the constraint solver."""

import math

import pytest

from floorplan_engine.editing.constraints import project_on_angle, solve_constraints
from floorplan_engine.models import Floorplan, Point2D, Wall
from floorplan_engine.models.constraints import (
    FixedLengthConstraint,
    HorizontalConstraint,
    ParallelConstraint,
    PerpendicularConstraint,
    VerticalConstraint,
)

GRID = 100.0


def _wall(x1, y1, x2, y2, wall_id=None, constraints=()):
    kwargs = {"id": wall_id} if wall_id else {}
    return Wall(
        start=Point2D(x=x1, y=y1),
        end=Point2D(x=x2, y=y2),
        constraints=list(constraints),
        **kwargs,
    )


def _refs():
    return {
        "h": _wall(0, 0, 400, 0, "h"),
        "d": _wall(0, 0, 100, 100, "d"),
    }


def _close(point, x, y, tol=1e-6):
    return math.isclose(point.x, x, abs_tol=tol) and math.isclose(point.y, y, abs_tol=tol)


class TestSingleConstraints:
    def test_no_constraints_returns_end(self):
        wall = _wall(0, 0, 120, 160)
        assert solve_constraints(wall, {}, GRID) == wall.end

    def test_perpendicular_to_horizontal(self):
        wall = _wall(0, 0, 120, 160, constraints=[PerpendicularConstraint(ref_wall_id="h")])
        result = solve_constraints(wall, _refs(), GRID)
        assert _close(result, 0, 200)

    def test_perpendicular_keeps_side(self):
        wall = _wall(0, 0, 20, -100, constraints=[PerpendicularConstraint(ref_wall_id="h")])
        result = solve_constraints(wall, _refs(), GRID)
        assert math.isclose(result.x, 0, abs_tol=1e-9)
        assert math.isclose(result.y, -math.hypot(20, 100))

    def test_parallel_to_diagonal(self):
        wall = _wall(0, 0, 200, 0, constraints=[ParallelConstraint(ref_wall_id="d")])
        result = solve_constraints(wall, _refs(), GRID)
        s = 200 / math.sqrt(2)
        assert _close(result, s, s)

    def test_horizontal(self):
        wall = _wall(10, 20, 300, 60, constraints=[HorizontalConstraint()])
        assert _close(solve_constraints(wall, {}, GRID), 300, 20)

    def test_vertical(self):
        wall = _wall(10, 20, 300, 60, constraints=[VerticalConstraint()])
        assert _close(solve_constraints(wall, {}, GRID), 10, 60)

    def test_fixed_length_uses_grid(self):
        wall = _wall(0, 0, 100, 0, constraints=[FixedLengthConstraint(fixed_length_m=3)])
        assert _close(solve_constraints(wall, {}, GRID), 300, 0)
        assert _close(solve_constraints(wall, {}, 50.0), 150, 0)

    def test_missing_reference_is_skipped(self):
        wall = _wall(0, 0, 120, 160, constraints=[PerpendicularConstraint(ref_wall_id="gone")])
        assert solve_constraints(wall, _refs(), GRID) == wall.end


class TestCombinations:
    def test_priority_order(self):
        # Listed fixed length first; perpendicular still runs first
        wall = _wall(
            0, 0, 50, 100,
            constraints=[
                FixedLengthConstraint(fixed_length_m=2),
                PerpendicularConstraint(ref_wall_id="h"),
            ],
        )
        result = solve_constraints(wall, _refs(), GRID)
        assert _close(result, 0, 200)

    def test_horizontal_then_fixed_length(self):
        wall = _wall(
            0, 0, 80, 30,
            constraints=[HorizontalConstraint(), FixedLengthConstraint(fixed_length_m=1.5)],
        )
        assert _close(solve_constraints(wall, {}, GRID), 150, 0)


class TestMovingEndpoint:
    def test_moving_start(self):
        wall = _wall(0, 0, 100, 30, constraints=[HorizontalConstraint()])
        result = solve_constraints(wall, {}, GRID, moving="start")
        assert _close(result, 0, 30)

    def test_bad_endpoint(self):
        wall = _wall(0, 0, 100, 30, constraints=[HorizontalConstraint()])
        with pytest.raises(ValueError, match="Moving endpoint"):
            solve_constraints(wall, {}, GRID, moving="middle")


class TestProjectOnAngle:
    def test_square_drag_falls_back(self):
        anchor = Point2D(x=0, y=0)
        target = Point2D(x=150, y=0.5)
        result = project_on_angle(anchor, target, math.pi / 2, fallback_length=150.0)
        assert result.x == 0.0
        assert math.isclose(result.y, 150.0)

    def test_axis_result_is_exact(self):
        result = project_on_angle(Point2D(x=0, y=0), Point2D(x=3, y=4), math.pi / 2, 5.0)
        assert result.x == 0.0


class TestFloorplanIntegration:
    def test_update_wall_applies_constraints(self):
        plan = Floorplan()
        ref = plan.create_wall((0, 0), (400, 0))
        wall = plan.create_wall((0, 0), (0, 100))
        updated = plan.update_wall(
            wall.id,
            end=(120, 160),
            constraints=[PerpendicularConstraint(ref_wall_id=ref.id)],
        )
        assert _close(updated.end, 0, 200)
        assert plan.walls[wall.id].end == updated.end
        assert plan.walls[wall.id].start == Point2D(x=0, y=0)

    def test_update_wall_accepts_document_constraints(self):
        plan = Floorplan()
        wall = plan.create_wall((0, 0), (100, 0))
        updated = plan.update_wall(
            wall.id, constraints=[{"type": "fixedLength", "fixedLengthM": 2.5}]
        )
        assert _close(updated.end, 250, 0)

    def test_moving_start_in_plan(self):
        plan = Floorplan()
        wall = plan.create_wall((0, 0), (100, 0))
        updated = plan.update_wall(
            wall.id, moving="start", start=(10, 40), constraints=[HorizontalConstraint()]
        )
        assert _close(updated.start, 10, 0)
        assert _close(updated.end, 100, 0)

    def test_unknown_wall_raises(self):
        plan = Floorplan()
        with pytest.raises(ValueError, match="not found"):
            plan.update_wall("missing", end=(1, 1))
