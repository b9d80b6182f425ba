"""
Mind Map Layout Engine — radial placement of one centre topic and its neighbours.

layout() is a pure transform: MindMapGraph + canvas size → DrawPlan of node and
edge primitives. Nothing here knows how the plan is drawn; see render_surface.

Placement
---------
- centre at (w/2, h/2)
- ring radius r = min(R_max, n·K): more neighbours push the ring outward, up to the cap
- neighbour i sits at angle i·2π/n, in the order the backend sent them

Edge encoding (both saturate, so one huge weight never dominates)
--------------
- opacity      = min(1, base + min(weight, 10)·step)
- stroke width = clamp(weight, 1, 5)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from notemap.models import MindMapGraph, TopicConnection


@dataclass(frozen=True)
class LayoutConfig:
    """Presentation tuning. Defaults match the stock canvas look."""
    center_radius: float = 60.0
    neighbor_radius: float = 40.0
    max_ring_radius: float = 200.0     # R_max, fits an 800×600 canvas
    ring_spacing: float = 30.0         # K, ring growth per neighbour
    base_opacity: float = 0.3
    opacity_step: float = 0.05
    opacity_saturation: int = 10       # weights above this add no more opacity
    min_stroke: int = 1
    max_stroke: int = 5
    edge_rgb: Tuple[int, int, int] = (102, 126, 234)
    strong_weight: int = 3             # ranking tiers for the side list
    medium_weight: int = 2


DEFAULT_LAYOUT = LayoutConfig()


@dataclass(frozen=True)
class NodePrimitive:
    x: float
    y: float
    radius: float
    label: str
    is_center: bool = False
    angle: Optional[float] = None      # radians from the centre; None for the centre itself

    @property
    def lines(self) -> List[str]:
        return self.label.split("\n")


@dataclass(frozen=True)
class EdgePrimitive:
    x1: float
    y1: float
    x2: float
    y2: float
    weight: int
    opacity: float
    stroke_width: int
    rgb: Tuple[int, int, int] = DEFAULT_LAYOUT.edge_rgb

    @property
    def color(self) -> str:
        r, g, b = self.rgb
        return f"rgba({r}, {g}, {b}, {self.opacity:.2f})"


@dataclass(frozen=True)
class DrawPlan:
    width: float
    height: float
    nodes: Tuple[NodePrimitive, ...] = field(default_factory=tuple)
    edges: Tuple[EdgePrimitive, ...] = field(default_factory=tuple)

    @property
    def center(self) -> NodePrimitive:
        return self.nodes[0]

    @property
    def neighbors(self) -> Tuple[NodePrimitive, ...]:
        return self.nodes[1:]


# ── Visual encoding ───────────────────────────────────────────────────────────

def edge_opacity(weight: int, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    capped = min(weight, config.opacity_saturation)
    return min(1.0, config.base_opacity + capped * config.opacity_step)


def stroke_width(weight: int, config: LayoutConfig = DEFAULT_LAYOUT) -> int:
    return max(config.min_stroke, min(int(weight), config.max_stroke))


def ring_radius(n: int, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    return min(config.max_ring_radius, n * config.ring_spacing)


def neighbor_label(conn: TopicConnection) -> str:
    return f"{conn.topic}\n({conn.weight})"


# ── Layout ────────────────────────────────────────────────────────────────────

def layout(
    graph: MindMapGraph,
    width: float,
    height: float,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> DrawPlan:
    cx, cy = width / 2, height / 2
    center = NodePrimitive(x=cx, y=cy, radius=config.center_radius, label=graph.center, is_center=True)

    conns = list(graph.connections)
    n = len(conns)
    if n == 0:
        return DrawPlan(width=width, height=height, nodes=(center,))

    r = ring_radius(n, config)
    angles = np.arange(n) * (2 * np.pi / n)
    xs = cx + r * np.cos(angles)
    ys = cy + r * np.sin(angles)

    nodes = [center]
    edges = []
    # duplicates are kept: same topic twice → two nodes at two angles
    for conn, angle, x, y in zip(conns, angles, xs, ys):
        x, y = float(x), float(y)
        edges.append(EdgePrimitive(
            x1=cx, y1=cy, x2=x, y2=y,
            weight=conn.weight,
            opacity=edge_opacity(conn.weight, config),
            stroke_width=stroke_width(conn.weight, config),
            rgb=config.edge_rgb,
        ))
        nodes.append(NodePrimitive(
            x=x, y=y,
            radius=config.neighbor_radius,
            label=neighbor_label(conn),
            angle=float(angle),
        ))

    return DrawPlan(width=width, height=height, nodes=tuple(nodes), edges=tuple(edges))


# ── Connection ranking (side list only) ───────────────────────────────────────

def rank_connections(connections: Sequence[TopicConnection]) -> List[TopicConnection]:
    """Strongest first; ties keep backend order. Returns a new list; layout() never sees it."""
    return sorted(connections, key=lambda c: c.weight, reverse=True)


def weight_tier(weight: int, config: LayoutConfig = DEFAULT_LAYOUT) -> str:
    if weight >= config.strong_weight:
        return "strong"
    if weight >= config.medium_weight:
        return "medium"
    return "weak"
