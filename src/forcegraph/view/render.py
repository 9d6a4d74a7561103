"""
Frame Rendering
===============
Projects the current graph state onto a list of drawable primitives.

Why is this file needed?
------------------------
The drawing surface should not know anything about nodes, degrees or drag
state. The Renderer reads the graph (never writes it) and produces a flat
frame: every link segment first, then every node circle, so circles are
drawn on top of the lines.

Classes:
    LinePrimitive, CirclePrimitive: The frame vocabulary.
    Renderer: Builds frames from a Graph.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union, TYPE_CHECKING

from forcegraph.config import DRAGGED_NODE_OPACITY, NODE_BASE_RADIUS, NODE_DEGREE_SCALE

if TYPE_CHECKING:
    from forcegraph.model.graph import Graph


@dataclass(frozen=True)
class LinePrimitive:
    x1: float
    y1: float
    x2: float
    y2: float
    kind: str = field(default="line", init=False)


@dataclass(frozen=True)
class CirclePrimitive:
    x: float
    y: float
    radius: float
    opacity: float = 1.0
    kind: str = field(default="circle", init=False)


Primitive = Union[LinePrimitive, CirclePrimitive]


def node_radius(degree: int, base: float = NODE_BASE_RADIUS, scale: float = NODE_DEGREE_SCALE) -> float:
    """Circle radius of a node. Grows linearly with the number of links."""
    return base + scale * degree


class Renderer:
    """Read-only projection of a Graph into frames."""

    def __init__(
        self,
        graph: Graph,
        base_radius: float = NODE_BASE_RADIUS,
        degree_scale: float = NODE_DEGREE_SCALE,
        dragged_opacity: float = DRAGGED_NODE_OPACITY,
    ) -> None:
        self.graph = graph
        self.base_radius = base_radius
        self.degree_scale = degree_scale
        self.dragged_opacity = dragged_opacity

    def build_frame(self, dragged_index: Optional[int] = None) -> list[Primitive]:
        """
        Build the primitives for the current state.

        Circles are emitted in node index order, so the position of a circle
        in the frame (after the lines) identifies its node.

        Args:
            dragged_index: Node drawn semi-transparent while being dragged.
        """
        positions = self.graph.positions
        frame: list[Primitive] = []

        for link in self.graph.links:
            x1, y1 = positions[link.source]
            x2, y2 = positions[link.target]
            frame.append(LinePrimitive(float(x1), float(y1), float(x2), float(y2)))

        for i, (x, y) in enumerate(positions):
            frame.append(CirclePrimitive(
                x=float(x),
                y=float(y),
                radius=node_radius(int(self.graph.degrees[i]), self.base_radius, self.degree_scale),
                opacity=self.dragged_opacity if i == dragged_index else 1.0,
            ))

        return frame
