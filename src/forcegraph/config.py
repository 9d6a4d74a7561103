"""
Configuration & Style Constants
===============================
This module serves as the central registry for construction-time options and
visual constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (canvas size, force strengths,
   decay rates) from being scattered throughout the engine and the views.
2. Validation: GraphConfig checks its values once, so the engine and the
   session can trust them.

Exports:
    GraphConfig: All tunable options of one graph instance.
    BACKGROUND_COLOR, LINK_COLOR, NODE_COLOR, ...: Rendering style.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from forcegraph.errors import ConstructionError

# Window
VISIBLE_APP_NAME = "Force Graph"

# Style (RGB / RGBA tuples, consumed by pyqtgraph)
BACKGROUND_COLOR: tuple[int, int, int] = (0x28, 0x2C, 0x34)
LINK_COLOR: tuple[int, int, int, int] = (255, 255, 255, 153)  # white, 60 %
LINK_WIDTH: float = 2.0
NODE_COLOR: tuple[int, int, int] = (0x66, 0xCC, 0xFF)

# Node radius = NODE_BASE_RADIUS + NODE_DEGREE_SCALE * degree
NODE_BASE_RADIUS: float = 4.0
NODE_DEGREE_SCALE: float = 2.0
DRAGGED_NODE_OPACITY: float = 0.5


@dataclass
class GraphConfig:
    """
    Construction options for one graph instance.

    Attributes:
        width, height: Canvas size in pixels. Also the area random nodes are
            scattered over.
        node_count: Number of randomly placed nodes.
        link_count: Number of random node pairs drawn. Self-pairs are
            discarded, so the final graph may hold fewer links.
        charge_strength: Many-body strength. Negative values repel.
        link_distance: Rest length of every link spring.
        center_x, center_y: Centering target. None means the canvas center.
        center_strength: Fraction of the centroid offset removed per tick.
        alpha_min: The tick loop stops once alpha falls below this.
        alpha_decay: Per-tick approach rate of alpha toward its target.
            None derives it from alpha_min so the layout cools in ~300 ticks.
        velocity_decay: Friction. Each tick velocity is scaled by (1 - value).
        drag_alpha_target: Alpha target held while a node is dragged.
        tick_interval_ms: Timer interval of the tick loop.
        seed: Seed for node placement, link choice and jitter.
    """
    width: int = 800
    height: int = 600
    node_count: int = 20
    link_count: int = 30

    charge_strength: float = -40.0
    link_distance: float = 100.0
    center_x: Optional[float] = None
    center_y: Optional[float] = None
    center_strength: float = 1.0

    alpha_min: float = 0.001
    alpha_decay: Optional[float] = None
    velocity_decay: float = 0.4
    drag_alpha_target: float = 0.3

    tick_interval_ms: int = 16
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConstructionError(f"Canvas size must be positive, got {self.width}x{self.height}.")
        if self.node_count < 0 or self.link_count < 0:
            raise ConstructionError("Node and link counts must not be negative.")
        if self.link_count > 0 and self.node_count < 2:
            raise ConstructionError("Links require at least two nodes.")
        if self.link_distance < 0:
            raise ConstructionError(f"Link distance must not be negative, got {self.link_distance}.")
        if not 0.0 < self.alpha_min < 1.0:
            raise ConstructionError(f"alpha_min must lie in (0, 1), got {self.alpha_min}.")
        if self.alpha_decay is not None and not 0.0 <= self.alpha_decay <= 1.0:
            raise ConstructionError(f"alpha_decay must lie in [0, 1], got {self.alpha_decay}.")
        if not 0.0 <= self.velocity_decay <= 1.0:
            raise ConstructionError(f"velocity_decay must lie in [0, 1], got {self.velocity_decay}.")
        if not 0.0 <= self.drag_alpha_target <= 1.0:
            raise ConstructionError(f"drag_alpha_target must lie in [0, 1], got {self.drag_alpha_target}.")
        if self.tick_interval_ms < 0:
            raise ConstructionError("tick_interval_ms must not be negative.")

    @property
    def center(self) -> tuple[float, float]:
        """Centering target, defaulting to the middle of the canvas."""
        cx = self.width / 2 if self.center_x is None else self.center_x
        cy = self.height / 2 if self.center_y is None else self.center_y
        return cx, cy

    @property
    def resolved_alpha_decay(self) -> float:
        if self.alpha_decay is not None:
            return self.alpha_decay
        return default_alpha_decay(self.alpha_min)


def default_alpha_decay(alpha_min: float, ticks: int = 300) -> float:
    """Decay rate that takes alpha from 1 to alpha_min in the given number of ticks."""
    return 1.0 - math.pow(alpha_min, 1.0 / ticks)
