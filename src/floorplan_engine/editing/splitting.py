"""Wall splitting when a new wall lands on an existing wall's body.

A new wall whose endpoint touches the interior of an existing wall
(a T-junction) splits that wall in two at the touching point, so the
junction becomes a real graph node and rooms can close around it.
Openings on the split wall move to whichever part holds their centre.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from floorplan_engine.models.constraints import (
    FixedLengthConstraint,
    ParallelConstraint,
    PerpendicularConstraint,
)
from floorplan_engine.models.elements import Opening, Wall
from floorplan_engine.models.geometry import Point2D, distance, point_at, project_onto_segment
from floorplan_engine.models.ids import generate_id

logger = logging.getLogger(__name__)

SPLIT_THRESHOLD = 5.0  # pixels
# Near-endpoint zones are left to endpoint snapping
SPLIT_T_MIN = 0.02
SPLIT_T_MAX = 0.98


@dataclass
class WallSplit:
    """One existing wall replaced by two."""

    original_id: str
    first: Wall  # original start -> split point
    second: Wall  # split point -> original end
    t: float
    point: Point2D
    endpoint: str  # which end of the new wall caused it


@dataclass
class SplitOutcome:
    """Walls and openings after resolving a new wall's T-junctions."""

    wall: Wall  # the new wall, endpoints moved onto the split points
    walls: dict[str, Wall]
    openings: dict[str, Opening]
    splits: list[WallSplit] = field(default_factory=list)


def find_interior_hit(
    point: Point2D,
    walls: Mapping[str, Wall],
    threshold: float = SPLIT_THRESHOLD,
    t_min: float = SPLIT_T_MIN,
    t_max: float = SPLIT_T_MAX,
) -> tuple[Wall, float, Point2D] | None:
    """First wall whose interior lies within ``threshold`` of ``point``.

    Returns (wall, projection parameter, projected point) or None.
    """
    for wall in walls.values():
        t = project_onto_segment(point, wall.start, wall.end)
        if not t_min < t < t_max:
            continue
        projected = point_at(wall.start, wall.end, t)
        if distance(point, projected) < threshold:
            return wall, t, projected
    return None


def split_wall(wall: Wall, point: Point2D) -> tuple[Wall, Wall]:
    """Two new walls covering ``wall``, meeting at ``point``.

    Both parts keep the wall's properties and direction constraints; a
    fixed length no longer applies to either part. Photos stay with the
    first part.
    """
    constraints = [c for c in wall.constraints if not isinstance(c, FixedLengthConstraint)]
    first = wall.model_copy(
        update={
            "id": generate_id(),
            "end": point,
            "constraints": list(constraints),
        },
        deep=True,
    )
    second = wall.model_copy(
        update={
            "id": generate_id(),
            "start": point,
            "photos": [],
            "constraints": list(constraints),
        },
        deep=True,
    )
    return first, second


def reassign_openings(
    openings: Mapping[str, Opening],
    original_id: str,
    first: Wall,
    second: Wall,
    t: float,
) -> dict[str, Opening]:
    """Move the split wall's openings onto its parts.

    An opening centred before the split point goes to ``first`` at
    ``position / t``, otherwise to ``second`` at
    ``(position - t) / (1 - t)``.
    Whether the moved openings still fit on their part is left to the
    caller.
    """
    result: dict[str, Opening] = {}
    for opening_id, opening in openings.items():
        if opening.wall_id != original_id:
            result[opening_id] = opening
        elif opening.position < t:
            result[opening_id] = opening.model_copy(
                update={"wall_id": first.id, "position": opening.position / t}
            )
        else:
            result[opening_id] = opening.model_copy(
                update={"wall_id": second.id, "position": (opening.position - t) / (1 - t)}
            )
    return result


def retarget_references(walls: Mapping[str, Wall], original_id: str, new_id: str) -> dict[str, Wall]:
    """Point perpendicular / parallel constraints at a replacement wall."""
    result: dict[str, Wall] = {}
    for wall_id, wall in walls.items():
        if not any(
            isinstance(c, (PerpendicularConstraint, ParallelConstraint))
            and c.ref_wall_id == original_id
            for c in wall.constraints
        ):
            result[wall_id] = wall
            continue
        constraints = [
            c.model_copy(update={"ref_wall_id": new_id})
            if isinstance(c, (PerpendicularConstraint, ParallelConstraint))
            and c.ref_wall_id == original_id
            else c
            for c in wall.constraints
        ]
        result[wall_id] = wall.model_copy(update={"constraints": constraints})
    return result


def split_walls_for_new_wall(
    new_wall: Wall,
    walls: Mapping[str, Wall],
    openings: Mapping[str, Opening],
    threshold: float = SPLIT_THRESHOLD,
) -> SplitOutcome:
    """Resolve T-junctions created by inserting ``new_wall``.

    Each endpoint of the new wall splits at most one existing wall: the
    first one (in collection order) whose interior it touches. The end
    point is tested after the start point's split, so it can land on one
    of the freshly created parts. The input mappings are not modified.

    Args:
        new_wall: Wall about to be inserted (not yet in ``walls``).
        walls: Existing walls by id.
        openings: Existing openings by id.
        threshold: Max distance (pixels) from the endpoint to the wall body.

    Returns:
        The new wall (endpoints moved onto split points) and the updated
        wall and opening collections, without the new wall.
    """
    current_walls = dict(walls)
    current_openings = dict(openings)
    splits: list[WallSplit] = []

    for endpoint in ("start", "end"):
        point = getattr(new_wall, endpoint)
        hit = find_interior_hit(point, current_walls, threshold)
        if hit is None:
            continue
        target, t, projected = hit
        first, second = split_wall(target, projected)

        replaced: dict[str, Wall] = {}
        for wall_id, wall in current_walls.items():
            if wall_id == target.id:
                replaced[first.id] = first
                replaced[second.id] = second
            else:
                replaced[wall_id] = wall
        current_walls = retarget_references(replaced, target.id, first.id)
        current_openings = reassign_openings(current_openings, target.id, first, second, t)
        new_wall = new_wall.model_copy(update={endpoint: projected})
        splits.append(
            WallSplit(
                original_id=target.id,
                first=first,
                second=second,
                t=t,
                point=projected,
                endpoint=endpoint,
            )
        )
        logger.info(
            "Split wall %s at t=%.3f into %s and %s", target.id, t, first.id, second.id
        )

    return SplitOutcome(
        wall=new_wall,
        walls=current_walls,
        openings=current_openings,
        splits=splits,
    )
