"""Tests for endpoint merging and the angular wall graph."""

import math

from floorplan_engine.models import Point2D, Wall
from floorplan_engine.queries.planar_graph import NODE_EPSILON, build_planar_graph


def _wall(x1, y1, x2, y2, wall_id=None):
    kwargs = {"id": wall_id} if wall_id else {}
    return Wall(start=Point2D(x=x1, y=y1), end=Point2D(x=x2, y=y2), **kwargs)


def _rectangle(w=400, h=300):
    return [
        _wall(0, 0, w, 0, "bottom"),
        _wall(w, 0, w, h, "right"),
        _wall(w, h, 0, h, "top"),
        _wall(0, h, 0, 0, "left"),
    ]


class TestEndpointMerging:
    def test_shared_corners_become_one_node(self):
        graph = build_planar_graph(_rectangle())
        assert len(graph.nodes) == 4
        assert graph.edge_count == 4
        assert all(node.degree == 2 for node in graph.nodes.values())

    def test_drift_within_epsilon_merges(self):
        walls = [
            _wall(0, 0, 400, 0),
            _wall(401.5, 1.0, 400, 300),
            _wall(400, 300, 0, 300),
            _wall(0, 300, -1.2, 2.0),
        ]
        graph = build_planar_graph(walls)
        assert len(graph.nodes) == 4

    def test_drift_beyond_epsilon_stays_apart(self):
        walls = [_wall(0, 0, 400, 0), _wall(400 + NODE_EPSILON + 1, 0, 400, 300)]
        graph = build_planar_graph(walls)
        assert len(graph.nodes) == 4

    def test_merge_compares_against_every_node(self):
        # (3, 0) is within epsilon of (0, 0) but not of (6, 0); key rounding
        # would not help here, a distance check does
        walls = [_wall(0, 0, 0, 100), _wall(6, 0, 6, 100), _wall(3, 0.5, 200, 0)]
        graph = build_planar_graph(walls)
        node = graph.node_at(Point2D(x=3, y=0.5))
        assert node is not None
        assert node.point in (Point2D(x=0, y=0), Point2D(x=6, y=0))

    def test_self_loop_excluded(self):
        walls = _rectangle() + [_wall(100, 100, 102, 101, "tiny")]
        graph = build_planar_graph(walls)
        assert graph.edge_count == 4
        assert all(
            e.wall_id != "tiny" for n in graph.nodes.values() for e in n.neighbors
        )

    def test_duplicate_wall_not_double_counted(self):
        walls = _rectangle() + [_wall(400, 0, 0, 0, "bottom-copy")]
        graph = build_planar_graph(walls)
        assert graph.edge_count == 4
        origin = graph.node_at(Point2D(x=0, y=0))
        assert origin.degree == 2
        assert graph.wall_between(origin.id, graph.node_at(Point2D(x=400, y=0)).id) == "bottom"


class TestRotationOrder:
    def test_neighbors_sorted_by_angle(self):
        center = (100, 100)
        walls = [
            _wall(*center, 100, 0),   # -90°
            _wall(*center, 200, 100),  # 0°
            _wall(*center, 0, 100),   # 180°
            _wall(*center, 100, 200),  # 90°
        ]
        graph = build_planar_graph(walls)
        hub = graph.node_at(Point2D(x=100, y=100))
        angles = [
            math.atan2(
                graph.nodes[e.target].point.y - hub.point.y,
                graph.nodes[e.target].point.x - hub.point.x,
            )
            for e in hub.neighbors
        ]
        assert angles == sorted(angles)
        assert len(angles) == 4

    def test_same_result_every_build(self):
        walls = _rectangle()
        g1 = build_planar_graph(walls)
        g2 = build_planar_graph(walls)
        order1 = {k: [e.target for e in n.neighbors] for k, n in g1.nodes.items()}
        order2 = {k: [e.target for e in n.neighbors] for k, n in g2.nodes.items()}
        assert order1 == order2
