"""Face extraction from the wall graph.

Every directed half-edge is walked exactly once. Arriving at a node from
``prev``, the walk leaves along the neighbour just before ``prev`` in the
node's angular order, which keeps the face on the left of every step.
Bounded faces therefore come out counter-clockwise (positive shoelace
area) and the outer boundary of each connected piece comes out clockwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from floorplan_engine.models.geometry import Point2D, signed_polygon_area
from floorplan_engine.queries.planar_graph import PlanarGraph

logger = logging.getLogger(__name__)

MIN_ROOM_AREA_M2 = 0.01


@dataclass
class Face:
    """A closed walk of the wall graph."""

    node_ids: list[int]
    points: list[Point2D]
    wall_ids: list[str]  # distinct, in walk order
    signed_area: float  # square pixels

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    @property
    def is_outer(self) -> bool:
        """Clockwise walk: the unbounded side of a connected piece."""
        return self.signed_area <= 0

    def area_m2(self, grid_size: float) -> float:
        return self.area / (grid_size * grid_size)


def trace_face(
    graph: PlanarGraph,
    start: int,
    second: int,
    used: set[tuple[int, int]],
    max_steps: int | None = None,
) -> list[int] | None:
    """Walk one face starting with the half-edge start -> second.

    Every half-edge walked is added to ``used``, also when the walk is
    abandoned. Returns the visited node ids, or None when the walk hits a
    used half-edge, a dead end, revisits a node before closing, or runs
    past ``max_steps``.
    """
    if max_steps is None:
        max_steps = graph.half_edge_count + 1
    path = [start]
    visited = {start}
    prev, current = start, second

    for _ in range(max_steps):
        if (prev, current) in used:
            return None
        used.add((prev, current))

        if current == start:
            return path
        if current in visited:
            logger.debug("Face walk from node %d revisits node %d", start, current)
            return None
        path.append(current)
        visited.add(current)

        node = graph.nodes[current]
        if node.degree < 2:
            return None
        back = node.neighbor_index(prev)
        if back < 0:
            return None
        nxt = node.neighbors[(back - 1) % node.degree]
        prev, current = current, nxt.target

    logger.debug("Face walk from node %d exceeded %d steps", start, max_steps)
    return None


def trace_faces(graph: PlanarGraph, max_steps: int | None = None) -> list[Face]:
    """Enumerate every closed face walk of the graph, outer faces included.

    Nodes and their neighbours are visited in id / rotation order, so the
    same walls always produce the same faces in the same order.
    """
    used: set[tuple[int, int]] = set()
    faces: list[Face] = []

    for node_id in sorted(graph.nodes):
        for edge in graph.nodes[node_id].neighbors:
            if (node_id, edge.target) in used:
                continue
            cycle = trace_face(graph, node_id, edge.target, used, max_steps)
            if cycle is None or len(cycle) < 3:
                continue
            faces.append(_make_face(graph, cycle))

    return faces


def _make_face(graph: PlanarGraph, cycle: list[int]) -> Face:
    points = [graph.nodes[n].point for n in cycle]
    wall_ids: list[str] = []
    for i, a in enumerate(cycle):
        b = cycle[(i + 1) % len(cycle)]
        wall_id = graph.wall_between(a, b)
        if wall_id is not None and wall_id not in wall_ids:
            wall_ids.append(wall_id)
    return Face(
        node_ids=cycle,
        points=points,
        wall_ids=wall_ids,
        signed_area=signed_polygon_area(points),
    )


def interior_faces(
    faces: list[Face],
    grid_size: float,
    min_area_m2: float = MIN_ROOM_AREA_M2,
) -> list[Face]:
    """Drop outer boundaries and degenerate slivers.

    Outer boundaries are the clockwise walks (signed area <= 0): the
    outline of the plan, of every separate wall cluster and of pinched
    outlines. Area alone cannot tell them apart, since a lone rectangle
    has inner and outer walks of equal area. A walk that was abandoned
    (a wall sticking out of the outline makes the outer walk revisit a
    node) leaves no outer face at all, and the bounded faces are kept.
    """
    result = []
    for face in faces:
        if face.is_outer:
            continue
        if face.area_m2(grid_size) < min_area_m2:
            logger.debug("Dropping sliver face %s", face.node_ids)
            continue
        result.append(face)
    return result
