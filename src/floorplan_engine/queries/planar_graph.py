"""Planar graph of the wall network.

Nodes are distinct canvas locations, edges are walls. Wall endpoints
closer than ``NODE_EPSILON`` pixels collapse into one node, so small
drawing drift does not split a shared corner into several nodes.

Each node's neighbours are kept sorted by the polar angle of the vector
node -> neighbour (ascending, ties by neighbour node id). That fixed
rotational order is what face tracing walks.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from floorplan_engine.models.elements import Wall
from floorplan_engine.models.geometry import Point2D, distance

NODE_EPSILON = 4.0  # pixels


@dataclass
class HalfEdge:
    """Directed use of a wall, seen from the node it leaves."""

    target: int
    wall_id: str


@dataclass
class GraphNode:
    """A distinct location in the wall network."""

    id: int
    point: Point2D
    neighbors: list[HalfEdge] = field(default_factory=list)

    @property
    def degree(self) -> int:
        return len(self.neighbors)

    def neighbor_index(self, node_id: int) -> int:
        """Position of ``node_id`` in the rotation order, or -1."""
        for i, edge in enumerate(self.neighbors):
            if edge.target == node_id:
                return i
        return -1

    def edge_to(self, node_id: int) -> HalfEdge | None:
        idx = self.neighbor_index(node_id)
        return self.neighbors[idx] if idx >= 0 else None


@dataclass
class PlanarGraph:
    """Undirected wall graph with an angular rotation system per node."""

    nodes: dict[int, GraphNode] = field(default_factory=dict)
    epsilon: float = NODE_EPSILON

    @property
    def edge_count(self) -> int:
        """Number of undirected edges (walls that made it into the graph)."""
        return sum(node.degree for node in self.nodes.values()) // 2

    @property
    def half_edge_count(self) -> int:
        return sum(node.degree for node in self.nodes.values())

    def node_at(self, point: Point2D) -> GraphNode | None:
        """Node whose representative point lies within epsilon of ``point``."""
        best: GraphNode | None = None
        best_dist = self.epsilon
        for node in self.nodes.values():
            d = distance(node.point, point)
            if d < best_dist:
                best, best_dist = node, d
        return best

    def wall_between(self, a: int, b: int) -> str | None:
        edge = self.nodes[a].edge_to(b)
        return edge.wall_id if edge else None


def build_planar_graph(
    walls: Iterable[Wall],
    epsilon: float = NODE_EPSILON,
) -> PlanarGraph:
    """Build the wall graph.

    Walls whose two endpoints merge into one node are skipped (they
    cannot bound a room). A second wall between the same two nodes is
    not added again; the first one keeps the edge.

    Args:
        walls: Walls in a stable order (node ids follow first appearance).
        epsilon: Merge distance for endpoints, in pixels.

    Returns:
        The graph with angularly sorted neighbour lists.
    """
    graph = PlanarGraph(epsilon=epsilon)

    def node_for(point: Point2D) -> GraphNode:
        existing = graph.node_at(point)
        if existing is not None:
            return existing
        node = GraphNode(id=len(graph.nodes), point=point)
        graph.nodes[node.id] = node
        return node

    for wall in walls:
        a = node_for(wall.start)
        b = node_for(wall.end)
        if a.id == b.id:
            continue
        if a.edge_to(b.id) is None:
            a.neighbors.append(HalfEdge(target=b.id, wall_id=wall.id))
        if b.edge_to(a.id) is None:
            b.neighbors.append(HalfEdge(target=a.id, wall_id=wall.id))

    for node in graph.nodes.values():
        node.neighbors.sort(key=lambda e, n=node: _rotation_key(graph, n, e))

    return graph


def _rotation_key(graph: PlanarGraph, node: GraphNode, edge: HalfEdge) -> tuple[float, int]:
    target = graph.nodes[edge.target].point
    angle = math.atan2(target.y - node.point.y, target.x - node.point.x)
    return (angle, edge.target)
