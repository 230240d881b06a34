"""Geometric constraints attached to a wall.

Each constraint governs the wall's moving endpoint relative to its anchor
(``end`` relative to ``start`` unless the caller says otherwise). The
variants form a union discriminated on ``type``, so a payload that does
not belong to a variant (a ``refWallId`` on ``fixedLength``) is rejected.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import ConfigDict, Field

from floorplan_engine.models.base import DocumentModel


class _Constraint(DocumentModel):
    model_config = ConfigDict(extra="forbid")


class HorizontalConstraint(_Constraint):
    """Moving endpoint keeps the anchor's y coordinate."""

    type: Literal["horizontal"] = "horizontal"


class VerticalConstraint(_Constraint):
    """Moving endpoint keeps the anchor's x coordinate."""

    type: Literal["vertical"] = "vertical"


class FixedLengthConstraint(_Constraint):
    """Wall length locked to a value in metres."""

    type: Literal["fixedLength"] = "fixedLength"
    fixed_length_m: float = Field(gt=0, description="Locked wall length in meters")


class PerpendicularConstraint(_Constraint):
    """Wall direction kept at 90 degrees to a reference wall."""

    type: Literal["perpendicular"] = "perpendicular"
    ref_wall_id: str = Field(description="Id of the reference wall")


class ParallelConstraint(_Constraint):
    """Wall direction kept parallel to a reference wall."""

    type: Literal["parallel"] = "parallel"
    ref_wall_id: str = Field(description="Id of the reference wall")


Constraint = Annotated[
    Union[
        HorizontalConstraint,
        VerticalConstraint,
        FixedLengthConstraint,
        PerpendicularConstraint,
        ParallelConstraint,
    ],
    Field(discriminator="type"),
]

# Lower value is applied first
CONSTRAINT_PRIORITY: dict[str, int] = {
    "perpendicular": 0,
    "parallel": 1,
    "horizontal": 2,
    "vertical": 2,
    "fixedLength": 3,
}

CONSTRAINT_LABELS: dict[str, str] = {
    "perpendicular": "⊥",
    "parallel": "∥",
    "horizontal": "—",
    "vertical": "|",
    "fixedLength": "🔒",
}


def constraint_label(constraint: Constraint) -> str:
    """Short symbol for drawing a constraint next to its wall."""
    return CONSTRAINT_LABELS.get(constraint.type, "?")
