"""Element identifiers.

Ids are 22-character compressed GUIDs (the IFC GlobalId encoding of a
random UUID). They stay unique without any coordination between
documents, which room identity across recomputation relies on.
"""

from __future__ import annotations

import uuid

import ifcopenshell.guid


def generate_id() -> str:
    """Generate a new 22-character element id."""
    return ifcopenshell.guid.compress(uuid.uuid4().hex)

