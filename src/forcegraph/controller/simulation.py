"""
Force Simulation Engine
=======================
Advances the node arena one physical step per tick and drives the tick loop.

Why is this file needed?
------------------------
1. Physics: It applies the registered forces, integrates velocities into
   positions and honours pinned nodes.
2. Scheduling: A QTimer on the GUI thread runs the loop, so ticks and pointer
   events are processed one after another and never overlap.
3. Signals: Views subscribe to `ticked` instead of polling the arena.

Classes:
    ForceSimulation: The engine (QObject).

Functions:
    default_forces: The charge/link/center set used by the application.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, QTimer, Signal

from forcegraph.config import GraphConfig, default_alpha_decay
from forcegraph.controller.forces import CenterForce, Force, LinkForce, ManyBodyForce
from forcegraph.errors import SimulationError

if TYPE_CHECKING:
    from forcegraph.model.graph import Graph, Node, NodeId

logger = logging.getLogger(__name__)


def default_forces(config: GraphConfig) -> dict[str, Force]:
    """Repulsion, link springs and centering, in the order they are applied."""
    cx, cy = config.center
    return {
        "charge": ManyBodyForce(strength=config.charge_strength),
        "link": LinkForce(distance=config.link_distance),
        "center": CenterForce(cx, cy, strength=config.center_strength),
    }


class ForceSimulation(QObject):
    """
    Iterative force-directed layout over one Graph.

    Each tick:
      1. alpha moves toward alpha_target by alpha_decay,
      2. every force is applied in registration order,
      3. free nodes integrate (velocity friction, then position += velocity),
         pinned nodes are snapped to their pin.

    The loop started by `start()` emits `ticked` after every step and stops
    by itself once alpha drops below alpha_min, emitting `ended`.
    """
    ticked = Signal()
    ended = Signal()
    failed = Signal(str)

    def __init__(
        self,
        graph: Graph,
        width: float,
        height: float,
        forces: Optional[dict[str, Force]] = None,
        alpha_min: float = 0.001,
        alpha_decay: Optional[float] = None,
        velocity_decay: float = 0.4,
        tick_interval_ms: int = 16,
        seed: Optional[int] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """
        Args:
            graph: Node arena the engine takes ownership of.
            width, height: Canvas size. Used for the default centering target.
            forces: Named forces. None installs charge/link/center defaults.
            alpha_min: Threshold below which the loop stops.
            alpha_decay: Per-tick approach rate toward alpha_target.
            velocity_decay: Friction applied to free nodes each tick.
            tick_interval_ms: QTimer interval of the loop.
            seed: Seed of the jitter generator.
        """
        super().__init__(parent)
        self.graph = graph
        self.width = width
        self.height = height
        self.alpha_min = alpha_min
        self.alpha_decay = default_alpha_decay(alpha_min) if alpha_decay is None else alpha_decay
        self.velocity_decay = velocity_decay

        self._alpha: float = 1.0
        self._alpha_target: float = 0.0
        self._error: Optional[str] = None
        self._rng = np.random.default_rng(seed)

        self._forces: dict[str, Force] = {}
        if forces is None:
            forces = default_forces(GraphConfig(width=int(width), height=int(height)))
        for name, force in forces.items():
            self.add_force(name, force)

        self._timer = QTimer(self)
        self._timer.setInterval(tick_interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    @classmethod
    def from_config(cls, graph: Graph, config: GraphConfig, parent: Optional[QObject] = None) -> ForceSimulation:
        return cls(
            graph,
            width=config.width,
            height=config.height,
            forces=default_forces(config),
            alpha_min=config.alpha_min,
            alpha_decay=config.resolved_alpha_decay,
            velocity_decay=config.velocity_decay,
            tick_interval_ms=config.tick_interval_ms,
            seed=config.seed,
            parent=parent,
        )

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(nodes={len(self.graph)}, alpha={self._alpha:.4f}, "
                f"running={self.is_running})")

    # ------------------------------------------------------------------------------
    # Forces
    # ------------------------------------------------------------------------------

    def add_force(self, name: str, force: Force) -> None:
        """Register (or replace) a named force and bind it to the graph."""
        force.initialize(self.graph, self._rng)
        self._forces[name] = force

    def force(self, name: str) -> Force:
        return self._forces[name]

    # ------------------------------------------------------------------------------
    # Alpha
    # ------------------------------------------------------------------------------

    @property
    def alpha(self) -> float:
        return self._alpha

    def set_alpha(self, value: float) -> None:
        self._alpha = _clamp_unit(value)

    @property
    def alpha_target(self) -> float:
        return self._alpha_target

    def set_alpha_target(self, value: float) -> None:
        """Alpha approaches this value instead of 0. Used to keep a drag animated."""
        self._alpha_target = _clamp_unit(value)

    # ------------------------------------------------------------------------------
    # Loop control
    # ------------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    @property
    def error(self) -> Optional[str]:
        """Message of the failure that halted this instance, if any."""
        return self._error

    def start(self) -> None:
        """Schedule ticks on the event loop. No-op when already running."""
        self._ensure_usable()
        if self._timer.isActive():
            return
        self._timer.start()
        logger.info(f"Simulation started (alpha={self._alpha:.3f}).")

    def stop(self) -> None:
        """Halt future ticks. Safe to call any number of times."""
        if self._timer.isActive():
            self._timer.stop()
            logger.info("Simulation stopped.")

    def reheat(self) -> None:
        """Reset alpha to 1 and resume ticking."""
        self._ensure_usable()
        self._alpha = 1.0
        self.start()

    def step(self) -> None:
        """
        Run one tick, notify subscribers and end the loop if alpha is spent.

        Raises:
            SimulationError: If the tick fails. The instance is halted and
                `failed` is emitted before raising.
        """
        self._ensure_usable()
        try:
            self.tick()
        except SimulationError as e:
            self._halt(str(e))
            raise
        except Exception as e:
            self._halt(f"Tick failed: {e}")
            raise SimulationError(f"Tick failed: {e}") from e

        self.ticked.emit()

        if self._alpha < self.alpha_min:
            if self._timer.isActive():
                self._timer.stop()
                logger.info("Simulation settled.")
            self.ended.emit()

    def tick(self, iterations: int = 1) -> None:
        """
        Advance the layout without emitting any signal.

        Raises:
            SimulationError: If positions or velocities became non-finite.
        """
        graph = self.graph
        for _ in range(iterations):
            self._alpha += (self._alpha_target - self._alpha) * self.alpha_decay
            self._alpha = _clamp_unit(self._alpha)

            for force in self._forces.values():
                force.apply(self._alpha)

            pinned = graph.pinned_mask
            free = ~pinned
            graph.velocities[free] *= 1.0 - self.velocity_decay
            graph.positions[free] += graph.velocities[free]
            graph.positions[pinned] = graph.pins[pinned]
            graph.velocities[pinned] = 0.0

            if not (np.all(np.isfinite(graph.positions)) and np.all(np.isfinite(graph.velocities))):
                raise SimulationError("Node positions became non-finite.")

    def _on_timeout(self) -> None:
        try:
            self.step()
        except SimulationError:
            # Already logged and reported through `failed`
            return

    def _halt(self, message: str) -> None:
        self._timer.stop()
        self._error = message
        logger.error(f"Simulation halted: {message}")
        self.failed.emit(message)

    def _ensure_usable(self) -> None:
        if self._error is not None:
            raise SimulationError(f"Simulation was halted by an earlier failure: {self._error}")

    # ------------------------------------------------------------------------------
    # Pins and lookup
    # ------------------------------------------------------------------------------

    def pin(self, node_id: NodeId, x: float, y: float) -> None:
        """Fix a node at (x, y). Its position snaps there on the next tick."""
        index = self.graph.index_of(node_id)
        self.graph.pins[index] = (x, y)

    def unpin(self, node_id: NodeId) -> None:
        """Release a pinned node. No-op for nodes that are not pinned."""
        index = self.graph.index_of(node_id)
        self.graph.pins[index] = np.nan

    def find(self, x: float, y: float, radius: Optional[float] = None) -> Optional[Node]:
        """Closest node to (x, y), optionally limited to `radius`."""
        positions = self.graph.positions
        if len(positions) == 0:
            return None
        dist2 = np.sum((positions - np.array([x, y])) ** 2, axis=1)
        index = int(np.argmin(dist2))
        if radius is not None and dist2[index] > radius * radius:
            return None
        return self.graph.nodes[index]


def _clamp_unit(value: float) -> float:
    if np.isnan(value):
        raise ValueError("Alpha values must not be NaN.")
    return min(1.0, max(0.0, float(value)))
