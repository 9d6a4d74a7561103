"""
Graph Session (Composition Root)
================================
Wires one graph instance together: data, engine, drag controller, renderer
and the drawing surface.

Why is this file needed?
------------------------
1. Dependency Injection: It is the only place that knows all components, so
   none of them import each other sideways.
2. Channels: The surface's pointer signals and the engine's tick signal are
   the two message channels. Both are delivered by the Qt event loop on the
   GUI thread, one at a time.
3. Teardown: Every connection made here is recorded and removed on close(),
   so re-creating a graph never leaves handlers attached to an old one.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TYPE_CHECKING

import numpy as np

from forcegraph.config import GraphConfig
from forcegraph.controller.interaction import DragController
from forcegraph.controller.simulation import ForceSimulation
from forcegraph.model.graph import Graph, random_graph
from forcegraph.view.canvas import create_surface
from forcegraph.view.render import Renderer

if TYPE_CHECKING:
    from PySide6.QtCore import SignalInstance
    from forcegraph.view.canvas import Surface

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[int, int], "Surface"]


class ForceGraphSession:
    """One live graph on one surface."""

    def __init__(self, surface: Surface, graph: Graph, config: GraphConfig) -> None:
        self.config = config
        self.surface = surface
        self.graph = graph
        self.simulation = ForceSimulation.from_config(graph, config)
        self.controller = DragController(self.simulation, drag_alpha_target=config.drag_alpha_target)
        self.renderer = Renderer(graph)

        self._connections: list[tuple[SignalInstance, Callable]] = []
        self._closed = False

        self.connect(self.simulation.ticked, self.render)
        self.connect(self.simulation.failed, self._on_failed)
        self.connect(self.controller.state_changed, self._on_drag_state_changed)
        self.connect(surface.pointer_pressed, self.controller.on_pointer_down)
        self.connect(surface.pointer_moved, self.controller.on_pointer_move)
        self.connect(surface.pointer_released, self.controller.on_pointer_up)

    @classmethod
    def create(
        cls,
        config: Optional[GraphConfig] = None,
        surface_factory: SurfaceFactory = create_surface,
    ) -> ForceGraphSession:
        """
        Build a random graph and its surface.

        Raises:
            SurfaceInitError: Propagated from the factory. Nothing is started.
        """
        config = config or GraphConfig()
        surface = surface_factory(config.width, config.height)
        try:
            rng = np.random.default_rng(config.seed)
            graph = random_graph(config.node_count, config.link_count, config.width, config.height, rng)
            return cls(surface, graph, config)
        except Exception:
            surface.destroy()
            raise

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Present the initial layout and start the tick loop."""
        self.render()
        self.simulation.start()

    def render(self) -> None:
        if self._closed:
            return
        frame = self.renderer.build_frame(self.controller.dragged_index)
        self.surface.present(frame)

    def close(self) -> None:
        """Stop the engine, detach every handler and destroy the surface. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self.simulation.stop()
        for signal, slot in self._connections:
            signal.disconnect(slot)
        self._connections.clear()
        self.surface.destroy()
        logger.info("Graph session closed.")

    def connect(self, signal: SignalInstance, slot: Callable) -> None:
        """Connect and record, so close() detaches the slot with everything else."""
        signal.connect(slot)
        self._connections.append((signal, slot))

    def _on_drag_state_changed(self, _state) -> None:
        # Opacity of the dragged node changes even if the loop has settled
        self.render()

    def _on_failed(self, message: str) -> None:
        logger.error(f"Graph session stopped after simulation failure: {message}")
