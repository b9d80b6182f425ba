"""
Rendering Surface Adapter — paints a DrawPlan onto a drawing surface.

The layout engine only produces primitives; a Surface turns them into pixels
(or markup). render() always does a full repaint: clear, all edges, then all
nodes, so node discs sit on top of the edge ends.
"""
from __future__ import annotations

import html
from typing import List

from notemap.mindmap_layout import DrawPlan, EdgePrimitive, NodePrimitive

LINE_HEIGHT = 18

# Fixed visual hierarchy: saturated centre, light neighbours.
CENTER_STYLE = {
    "fill": "rgba(102, 126, 234, 0.9)",
    "stroke": "#fff",
    "text": "#fff",
    "font_size": 16,
    "font_weight": "bold",
}
NEIGHBOR_STYLE = {
    "fill": "rgba(255, 255, 255, 0.9)",
    "stroke": "#667eea",
    "text": "#333",
    "font_size": 14,
    "font_weight": "normal",
}
OUTLINE_WIDTH = 2


def node_style(node: NodePrimitive) -> dict:
    return CENTER_STYLE if node.is_center else NEIGHBOR_STYLE


def line_offsets(n_lines: int) -> List[float]:
    """Vertical offsets that centre ``n_lines`` of text on the node."""
    return [(i - (n_lines - 1) / 2) * LINE_HEIGHT for i in range(n_lines)]


class Surface:
    """Capability interface every drawing backend implements."""

    def clear(self, width: float, height: float) -> None:
        raise NotImplementedError

    def draw_edge(self, edge: EdgePrimitive) -> None:
        raise NotImplementedError

    def draw_node(self, node: NodePrimitive) -> None:
        raise NotImplementedError


class SvgSurface(Surface):
    """Accumulates SVG elements; ``to_svg()`` returns the current picture."""

    def __init__(self):
        self.width = 0.0
        self.height = 0.0
        self._elements: List[str] = []

    def clear(self, width: float, height: float) -> None:
        self.width, self.height = width, height
        self._elements = []

    def draw_edge(self, edge: EdgePrimitive) -> None:
        self._elements.append(
            f'<line x1="{edge.x1:.2f}" y1="{edge.y1:.2f}" x2="{edge.x2:.2f}" y2="{edge.y2:.2f}" '
            f'stroke="{edge.color}" stroke-width="{edge.stroke_width}" />'
        )

    def draw_node(self, node: NodePrimitive) -> None:
        style = node_style(node)
        parts = [
            f'<g class="node {"center" if node.is_center else "neighbor"}">',
            f'<circle cx="{node.x:.2f}" cy="{node.y:.2f}" r="{node.radius:g}" '
            f'fill="{style["fill"]}" stroke="{style["stroke"]}" stroke-width="{OUTLINE_WIDTH}" />',
        ]
        lines = node.lines
        for line, dy in zip(lines, line_offsets(len(lines))):
            parts.append(
                f'<text x="{node.x:.2f}" y="{node.y + dy:.2f}" fill="{style["text"]}" '
                f'font-family="Arial" font-size="{style["font_size"]}" font-weight="{style["font_weight"]}" '
                f'text-anchor="middle" dominant-baseline="middle">{html.escape(line)}</text>'
            )
        parts.append("</g>")
        self._elements.append("".join(parts))

    def to_svg(self) -> str:
        body = "\n  ".join(self._elements)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width:g}" height="{self.height:g}" '
            f'viewBox="0 0 {self.width:g} {self.height:g}">\n  {body}\n</svg>'
        )


def render(plan: DrawPlan, surface: Surface) -> None:
    surface.clear(plan.width, plan.height)
    for edge in plan.edges:
        surface.draw_edge(edge)
    for node in plan.nodes:
        surface.draw_node(node)


def render_mindmap_html(plan: DrawPlan) -> str:
    """Self-contained HTML page for st.components.v1.html."""
    surface = SvgSurface()
    render(plan, surface)
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ background: transparent; display: flex; justify-content: center; }}
  svg {{ background: #fafbff; border-radius: 12px; max-width: 100%; height: auto; }}
</style>
</head>
<body>
{surface.to_svg()}
</body>
</html>"""
