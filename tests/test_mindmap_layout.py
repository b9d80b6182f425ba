"""Tests for the radial mind map layout engine."""
import math

import pytest

from notemap.mindmap_layout import (
    DEFAULT_LAYOUT,
    LayoutConfig,
    edge_opacity,
    layout,
    rank_connections,
    ring_radius,
    stroke_width,
    weight_tier,
)
from notemap.models import MindMapGraph, TopicConnection


def make_graph(*weights, center="Algebra"):
    return MindMapGraph(
        center=center,
        connections=tuple(TopicConnection(f"T{i}", w) for i, w in enumerate(weights)),
    )


@pytest.mark.parametrize("n", [0, 1, 2, 5, 12])
def test_primitive_counts(n):
    plan = layout(make_graph(*([1] * n)), 600, 600)
    assert len(plan.nodes) == n + 1
    assert len(plan.edges) == n


def test_empty_graph_is_center_only():
    plan = layout(make_graph(), 800, 600)
    assert plan.edges == ()
    assert len(plan.nodes) == 1
    center = plan.center
    assert (center.x, center.y) == (400, 300)
    assert center.is_center
    assert center.label == "Algebra"


def test_algebra_scenario():
    graph = MindMapGraph(
        center="Algebra",
        connections=(TopicConnection("Calculus", 4), TopicConnection("Geometry", 1)),
    )
    plan = layout(graph, 600, 600)
    r = min(DEFAULT_LAYOUT.max_ring_radius, 2 * DEFAULT_LAYOUT.ring_spacing)

    assert (plan.center.x, plan.center.y) == (300, 300)
    calculus, geometry = plan.neighbors
    assert calculus.angle == pytest.approx(0.0)
    assert geometry.angle == pytest.approx(math.pi)
    assert calculus.x == pytest.approx(300 + r)
    assert calculus.y == pytest.approx(300)
    assert geometry.x == pytest.approx(300 - r)
    assert geometry.y == pytest.approx(300, abs=1e-9)
    assert [e.stroke_width for e in plan.edges] == [4, 1]


def test_angles_follow_input_order():
    graph = make_graph(1, 9, 3, 7)
    plan = layout(graph, 600, 600)
    expected = [i * 2 * math.pi / 4 for i in range(4)]
    assert [n.angle for n in plan.neighbors] == pytest.approx(expected)
    assert [n.label.split("\n")[0] for n in plan.neighbors] == ["T0", "T1", "T2", "T3"]


def test_ranking_does_not_move_nodes():
    graph = make_graph(1, 9, 3, 7)
    before = layout(graph, 600, 600)
    ranked = rank_connections(graph.connections)
    after = layout(graph, 600, 600)
    assert [c.weight for c in ranked] == [9, 7, 3, 1]
    assert before == after
    assert [c.weight for c in graph.connections] == [1, 9, 3, 7]


def test_single_neighbor_at_angle_zero():
    plan = layout(make_graph(3), 600, 600)
    (only,) = plan.neighbors
    assert only.angle == 0.0
    assert only.x == pytest.approx(300 + DEFAULT_LAYOUT.ring_spacing)
    assert only.y == pytest.approx(300)


def test_ring_radius_grows_then_caps():
    assert ring_radius(1) == 30
    assert ring_radius(4) == 120
    assert ring_radius(7) == 200
    assert ring_radius(50) == 200


def test_duplicate_topics_kept_as_separate_nodes():
    graph = MindMapGraph("Sets", (TopicConnection("Logic", 2), TopicConnection("Logic", 2)))
    plan = layout(graph, 600, 600)
    a, b = plan.neighbors
    assert a.label == b.label == "Logic\n(2)"
    assert a.angle != b.angle


def test_node_sizes_and_labels():
    plan = layout(make_graph(5), 600, 600)
    assert plan.center.radius > plan.neighbors[0].radius
    assert plan.neighbors[0].lines == ["T0", "(5)"]


@pytest.mark.parametrize("weight", range(1, 40))
def test_edge_encoding_bounds(weight):
    assert 1 <= stroke_width(weight) <= 5
    assert DEFAULT_LAYOUT.base_opacity < edge_opacity(weight) <= 1.0


def test_edge_encoding_monotonic_and_saturating():
    opacities = [edge_opacity(w) for w in range(1, 30)]
    widths = [stroke_width(w) for w in range(1, 30)]
    assert opacities == sorted(opacities)
    assert widths == sorted(widths)
    assert edge_opacity(10) == edge_opacity(500)
    assert stroke_width(5) == stroke_width(500) == 5


def test_opacity_clamped_to_one():
    config = LayoutConfig(base_opacity=0.9, opacity_step=0.1)
    assert edge_opacity(10, config) == 1.0


def test_edge_color_carries_opacity():
    plan = layout(make_graph(2), 600, 600)
    assert plan.edges[0].color == "rgba(102, 126, 234, 0.40)"


def test_custom_config_is_used():
    config = LayoutConfig(ring_spacing=10, max_ring_radius=25)
    plan = layout(make_graph(1, 1, 1), 100, 100, config)
    assert plan.neighbors[0].x == pytest.approx(50 + 25)


def test_rank_is_stable_for_ties():
    conns = [TopicConnection("a", 2), TopicConnection("b", 5), TopicConnection("c", 2), TopicConnection("d", 5)]
    assert [c.topic for c in rank_connections(conns)] == ["b", "d", "a", "c"]


def test_weight_tiers():
    assert weight_tier(1) == "weak"
    assert weight_tier(2) == "medium"
    assert weight_tier(3) == "strong"
    assert weight_tier(40) == "strong"
