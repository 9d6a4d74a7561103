"""
Drag Interaction
================
Turns pointer events reported by the drawing surface into pins and alpha
changes on the simulation.

Why is this file needed?
------------------------
The surface only knows about pixels and hit tests, the simulation only knows
about forces. This state machine sits in between and holds the single piece
of interaction state: which node (if any) is being dragged.

States:
    IDLE --pointer down on node--> DRAGGING  (pin, raise alpha target, reheat)
    DRAGGING --pointer move-->     DRAGGING  (move pin)
    DRAGGING --pointer up-->       IDLE      (unpin, alpha target back to 0)
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

if TYPE_CHECKING:
    from forcegraph.controller.simulation import ForceSimulation

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragController(QObject):
    """Pointer-to-simulation state machine. Only one node is dragged at a time."""
    state_changed = Signal(object)  # DragState

    def __init__(
        self,
        simulation: ForceSimulation,
        drag_alpha_target: float = 0.3,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.simulation = simulation
        self.drag_alpha_target = drag_alpha_target
        self._dragged_index: Optional[int] = None

    @property
    def state(self) -> DragState:
        return DragState.IDLE if self._dragged_index is None else DragState.DRAGGING

    @property
    def dragged_index(self) -> Optional[int]:
        """Arena index of the node under the pointer, None when idle."""
        return self._dragged_index

    def on_pointer_down(self, index: int, x: float, y: float) -> None:
        if self._dragged_index is not None:
            logger.debug(f"Ignoring pointer down on node {index}: node {self._dragged_index} is being dragged.")
            return
        if not 0 <= index < len(self.simulation.graph):
            raise IndexError(f"Pointer reported unknown node index {index}.")
        if self.simulation.error is not None:
            logger.warning(f"Ignoring pointer down on node {index}: simulation halted ({self.simulation.error}).")
            return

        node_id = self.simulation.graph.ids[index]
        self._dragged_index = index
        self.simulation.pin(node_id, x, y)
        self.simulation.set_alpha_target(self.drag_alpha_target)
        self.simulation.reheat()
        logger.debug(f"Drag started on node {node_id!r} at ({x:.1f}, {y:.1f}).")
        self.state_changed.emit(DragState.DRAGGING)

    def on_pointer_move(self, x: float, y: float) -> None:
        if self._dragged_index is None:
            return
        self.simulation.pin(self.simulation.graph.ids[self._dragged_index], x, y)

    def on_pointer_up(self) -> None:
        if self._dragged_index is None:
            return

        node_id = self.simulation.graph.ids[self._dragged_index]
        self.simulation.unpin(node_id)
        self.simulation.set_alpha_target(0.0)
        self._dragged_index = None
        logger.debug(f"Drag ended on node {node_id!r}.")
        self.state_changed.emit(DragState.IDLE)
