"""Geometry-changing operations: constraint solving and wall splitting."""

from floorplan_engine.editing.constraints import solve_constraints
from floorplan_engine.editing.splitting import (
    SplitOutcome,
    WallSplit,
    split_walls_for_new_wall,
)

__all__ = [
    "solve_constraints",
    "SplitOutcome",
    "WallSplit",
    "split_walls_for_new_wall",
]
