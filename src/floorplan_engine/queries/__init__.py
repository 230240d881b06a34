"""Read-only queries over the wall network.

- planar_graph: endpoint merging and the angularly sorted wall graph
- faces: face tracing and outer-face removal
- rooms: room detection, identity reconciliation, room outlines
- walls: connected walls and wall orientation
"""

from floorplan_engine.queries.planar_graph import (
    GraphNode,
    HalfEdge,
    PlanarGraph,
    build_planar_graph,
)
from floorplan_engine.queries.faces import Face, interior_faces, trace_face, trace_faces
from floorplan_engine.queries.rooms import (
    detect_rooms,
    next_room_name,
    reconcile_rooms,
    room_polygon,
)
from floorplan_engine.queries.walls import (
    WallOrientation,
    compass_direction,
    find_connected_walls,
    wall_orientation,
)

__all__ = [
    "GraphNode",
    "HalfEdge",
    "PlanarGraph",
    "build_planar_graph",
    "Face",
    "interior_faces",
    "trace_face",
    "trace_faces",
    "detect_rooms",
    "next_room_name",
    "reconcile_rooms",
    "room_polygon",
    "WallOrientation",
    "compass_direction",
    "find_connected_walls",
    "wall_orientation",
]
